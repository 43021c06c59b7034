class BucketFSError(Exception):
    """Base class for every error raised by bucketfs."""

    pass


class BucketNameError(BucketFSError, ValueError):
    """Raised when a bucket name or path segment is malformed."""

    pass


class ConfigurationError(BucketFSError, ValueError):
    """Raised when a configuration is inconsistent or has unknown keys."""

    pass


class ResolutionError(BucketFSError, RuntimeError):
    """Raised when a storage adapter cannot be built or a bucket cannot be probed."""

    pass


class UnsupportedOperationError(BucketFSError, NotImplementedError):
    """Raised for filesystem features that object storage does not offer."""

    def __init__(self, operation: str, message: str | None = None) -> None:
        super().__init__(message or f"'{operation}' is not supported")
        self.operation = operation
