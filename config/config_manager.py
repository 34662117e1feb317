"""
Configuration Manager for ChainCheck
Schema-validated configuration merged from defaults, an optional YAML file
and environment variables
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional

import os
import math
import logging
from pathlib import Path
from enum import Enum

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.types import SecretStr

from config.settings import Settings
from utils.constants import (
    Category, RiskLevel, DEFAULT_CATEGORY_WEIGHTS, DEFAULT_RISK_BANDS,
    DEFAULT_LIQUIDITY_CHAIN, PROVIDER_TIMEOUTS, SUI_MAINNET_RPC_URL,
)
from utils.errors import ConfigurationError

logger = logging.getLogger(__name__)


class ConfigType(Enum):
    """Configuration sections"""
    PROVIDERS = "providers"
    SCORING = "scoring"
    ANALYSIS = "analysis"
    SERVER = "server"
    LOGGING = "logging"


class ProviderConfig(BaseModel):
    """External data provider configuration schema"""
    model_config = ConfigDict(frozen=True)

    chain: str = "sui"
    goplus_api_key: SecretStr = SecretStr("")
    coingecko_api_key: SecretStr = SecretStr("")
    coingecko_pro: bool = False
    coingecko_platform: str = "sui"
    sui_rpc_url: str = SUI_MAINNET_RPC_URL

    goplus_timeout: float = PROVIDER_TIMEOUTS["goplus"]
    coingecko_timeout: float = PROVIDER_TIMEOUTS["coingecko"]
    sui_rpc_timeout: float = PROVIDER_TIMEOUTS["sui_rpc"]
    dex_timeout: float = PROVIDER_TIMEOUTS["dex"]
    coingecko_price_timeout: float = PROVIDER_TIMEOUTS["coingecko_price"]

    liquidity_chain: List[str] = Field(default_factory=lambda: list(DEFAULT_LIQUIDITY_CHAIN))
    activity_max_pages: int = 4

    @field_validator('goplus_timeout', 'coingecko_timeout', 'sui_rpc_timeout',
                     'dex_timeout', 'coingecko_price_timeout')
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError('provider timeouts must be positive')
        return v

    @field_validator('liquidity_chain')
    @classmethod
    def validate_liquidity_chain(cls, v):
        unknown = [name for name in v if name not in DEFAULT_LIQUIDITY_CHAIN]
        if unknown:
            raise ValueError(f'unknown liquidity sources: {unknown}')
        if not v:
            raise ValueError('liquidity_chain must name at least one source')
        return v


class ScoringConfig(BaseModel):
    """Composite weighting and risk tier configuration schema"""
    model_config = ConfigDict(frozen=True)

    weights: Dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_CATEGORY_WEIGHTS))
    risk_bands: Dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_RISK_BANDS))

    @field_validator('weights')
    @classmethod
    def validate_weights(cls, v):
        expected = {category.value for category in Category}
        if set(v) != expected:
            raise ValueError(f'weights must cover exactly {sorted(expected)}')
        if any(weight < 0 for weight in v.values()):
            raise ValueError('weights must be non-negative')
        if not math.isclose(sum(v.values()), 1.0, abs_tol=1e-9):
            raise ValueError(f'weights must sum to 1.0, got {sum(v.values())}')
        return v

    @field_validator('risk_bands')
    @classmethod
    def validate_risk_bands(cls, v):
        tiers = [RiskLevel.LOW.value, RiskLevel.MEDIUM.value, RiskLevel.HIGH.value]
        if set(v) != set(tiers):
            raise ValueError(f'risk_bands must define {tiers}')
        bounds = [v[tier] for tier in tiers]
        if any(not 0.0 < bound <= 1.0 for bound in bounds):
            raise ValueError('risk band bounds must lie in (0, 1]')
        if not all(a > b for a, b in zip(bounds, bounds[1:])):
            raise ValueError('risk band bounds must be strictly descending')
        return v


class AnalysisConfig(BaseModel):
    """Orchestrator configuration schema"""
    model_config = ConfigDict(frozen=True)

    analysis_timeout: float = 30.0

    @field_validator('analysis_timeout')
    @classmethod
    def validate_analysis_timeout(cls, v):
        if v <= 0:
            raise ValueError('analysis_timeout must be positive')
        return v


class ServerConfig(BaseModel):
    """HTTP server configuration schema"""
    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = 5000
    frontend_url: str = "https://suichaincheck.vercel.app"
    environment: str = "development"


class LoggingConfig(BaseModel):
    """Logging configuration schema"""
    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_dir: str = "logs"
    json_format: bool = False
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5


class AppConfig(BaseModel):
    """Complete application configuration"""
    model_config = ConfigDict(frozen=True)

    providers: ProviderConfig = Field(default_factory=ProviderConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# Environment variable -> dotted config path
ENV_OVERRIDES: Dict[str, str] = {
    'CHAIN': 'providers.chain',
    'GOPLUS_API_KEY': 'providers.goplus_api_key',
    'COINGECKO_API_KEY': 'providers.coingecko_api_key',
    'COINGECKO_PRO': 'providers.coingecko_pro',
    'COINGECKO_PLATFORM': 'providers.coingecko_platform',
    'SUI_RPC_URL': 'providers.sui_rpc_url',
    'ANALYSIS_TIMEOUT': 'analysis.analysis_timeout',
    'HOST': 'server.host',
    'PORT': 'server.port',
    'FRONTEND_URL': 'server.frontend_url',
    'ENVIRONMENT': 'server.environment',
    'LOG_LEVEL': 'logging.level',
    'LOG_DIR': 'logging.log_dir',
}


class ConfigManager:
    """
    Loads AppConfig once at startup.

    Precedence, lowest first: schema defaults, YAML file, environment.
    The resulting models are frozen; nothing reloads them at runtime.
    """

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = Path(config_file or Settings.CONFIG_FILE)
        self._config: Optional[AppConfig] = None

    def load(self, overrides: Optional[Dict[str, Any]] = None) -> AppConfig:
        """Build and validate the configuration"""
        raw: Dict[str, Any] = {}
        raw = self._merge(raw, self._load_file_config())
        raw = self._merge(raw, self._load_environment_config())
        if overrides:
            raw = self._merge(raw, overrides)

        try:
            self._config = AppConfig.model_validate(raw)
        except PydanticValidationError as e:
            logger.error(f"❌ Invalid configuration: {e}")
            raise ConfigurationError(str(e)) from e

        logger.info("Configuration loaded successfully")
        return self._config

    @property
    def config(self) -> AppConfig:
        if self._config is None:
            return self.load()
        return self._config

    def _load_file_config(self) -> Dict[str, Any]:
        """Read the optional YAML config file"""
        if not self.config_file.exists():
            logger.debug(f"No config file at {self.config_file}, using defaults")
            return {}

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Cannot parse {self.config_file}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"{self.config_file} must contain a mapping")

        logger.info(f"Loaded config file {self.config_file}")
        return data

    def _load_environment_config(self) -> Dict[str, Any]:
        """Map set environment variables onto their config paths"""
        env_config: Dict[str, Any] = {}
        for var, path in ENV_OVERRIDES.items():
            value = os.getenv(var)
            if value is None or value in ('', 'null', 'None'):
                continue
            section, key = path.split('.', 1)
            env_config.setdefault(section, {})[key] = value

        liquidity_chain = os.getenv('LIQUIDITY_CHAIN')
        if liquidity_chain:
            env_config.setdefault('providers', {})['liquidity_chain'] = [
                name.strip() for name in liquidity_chain.split(',') if name.strip()
            ]
        return env_config

    @classmethod
    def _merge(cls, base: Dict[str, Any], update: Dict[str, Any]) -> Dict[str, Any]:
        merged = dict(base)
        for key, value in update.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = cls._merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def get(self, key: str, default: Any = None) -> Any:
        """
        Dotted-path lookup, e.g. 'scoring.weights' or 'providers.chain'
        """
        value: Any = self.config
        for part in key.split('.'):
            if isinstance(value, BaseModel) and part in type(value).model_fields:
                value = getattr(value, part)
            elif isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default
        return value

    def get_config(self, config_type: ConfigType) -> BaseModel:
        return getattr(self.config, config_type.value)
