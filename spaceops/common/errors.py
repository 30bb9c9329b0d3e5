"""Domain errors and failure typing."""


class SpaceOpsError(Exception):
    """Base class for ingestion and scoring failures."""

    error_code = "SPACEOPS_ERROR"


class ConfigError(SpaceOpsError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class SourceReadError(SpaceOpsError):
    """Raised when an uploaded source file cannot be read."""

    error_code = "SOURCE_READ_ERROR"


class ReferenceDataError(SpaceOpsError):
    """Raised when the reference station dataset is unreadable or malformed."""

    error_code = "REFERENCE_DATA_ERROR"


class UnknownPlatformError(SpaceOpsError):
    """Raised for a platform code with no registered profile."""

    error_code = "UNKNOWN_PLATFORM"
