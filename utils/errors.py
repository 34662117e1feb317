"""
Typed Exception Classes for ChainCheck

Provider errors are raised inside the provider clients and absorbed at the
client boundary; analysis errors are absorbed by the orchestrator. Only
ValidationError is ever visible to callers of the core.
"""


# ============================================================================
# Provider Exceptions
# ============================================================================

class ProviderError(Exception):
    """Base exception for external data provider failures"""

    def __init__(self, provider: str, message: str = ""):
        self.provider = provider
        super().__init__(f"{provider}: {message}" if message else provider)


class ProviderUnavailable(ProviderError):
    """Timeout, network error or non-2xx response"""
    pass


class ProviderDataAbsent(ProviderError):
    """Provider answered but has no entry for this address"""
    pass


class MalformedPayload(ProviderError):
    """Provider answered with an unexpected shape"""
    pass


# ============================================================================
# Analysis Exceptions
# ============================================================================

class AnalysisError(Exception):
    """Unexpected failure inside a category scorer"""
    pass


# ============================================================================
# Configuration & Validation Exceptions
# ============================================================================

class ConfigurationError(Exception):
    """Configuration validation errors"""
    pass


class ValidationError(Exception):
    """Input validation errors"""
    pass
