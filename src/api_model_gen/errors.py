"""Exception types raised by api-model-gen.

Parsing never raises on bad markup; these cover transport, configuration
and other failures that callers may want to tell apart.
"""


class ApiModelGenError(Exception):
    """Base class for all api-model-gen errors."""


class FetchError(ApiModelGenError):
    """A documentation page could not be fetched."""

    def __init__(self, url: str, message: str, status_code: int | None = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class ConfigError(ApiModelGenError):
    """A configuration file could not be read or is invalid."""


class GenerationError(ApiModelGenError):
    """A resource cannot be rendered into a model class."""
