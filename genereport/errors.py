"""Exception hierarchy

Only real faults are exceptions. Expected outcomes (no prebuilt match,
an invalid generative payload, an exhausted rate limit) are returned as
values by the services that produce them.
"""


class GeneReportError(Exception):
    """Base class for all genereport errors"""


class TemplateNotFoundError(GeneReportError):
    """A prebuilt match referenced a template the knowledge base does not have"""


class LLMError(GeneReportError):
    """Base class for reasoning-backend failures"""

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(message)
        self.provider = provider


class LLMTimeoutError(LLMError):
    """The backend call exceeded its timeout and was cancelled"""


class LLMTransportError(LLMError):
    """The backend could not be reached or returned an error status"""


class GenerationParseError(LLMError):
    """The backend answered, but not with a decodable JSON record"""


class ProviderConfigurationError(GeneReportError, ValueError):
    """The configured reasoning provider is not supported"""


class ExternalLookupError(GeneReportError):
    """A public-database lookup (PubMed) failed"""
