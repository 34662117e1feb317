"""
Shared utilities: constants, exception taxonomy and payload helpers
"""

from .errors import (
    ProviderError, ProviderUnavailable, ProviderDataAbsent, MalformedPayload,
    AnalysisError, ConfigurationError, ValidationError,
)
from .helpers import normalize_address, round_score

__all__ = [
    'ProviderError',
    'ProviderUnavailable',
    'ProviderDataAbsent',
    'MalformedPayload',
    'AnalysisError',
    'ConfigurationError',
    'ValidationError',
    'normalize_address',
    'round_score',
]
