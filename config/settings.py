"""
Global Settings for ChainCheck
Process-level paths resolved once at import time; everything tunable lives
in ConfigManager
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from utils.constants import VERSION, PROJECT_NAME

load_dotenv()


class Settings:
    """Global application settings"""

    # Application
    APP_NAME = f"{PROJECT_NAME} API Server"
    APP_VERSION = VERSION

    # Directories
    BASE_DIR = Path(__file__).parent.parent
    CONFIG_DIR = BASE_DIR / "config"
    CONFIG_FILE = os.getenv('CHAINCHECK_CONFIG', str(CONFIG_DIR / "chaincheck.yaml"))

    @classmethod
    def masked(cls, value: str, keep: int = 4) -> str:
        """Mask a secret for log output"""
        if not value:
            return '❌ Missing'
        return f"{value[:keep]}..." if len(value) > keep * 2 else '✅ Set'
