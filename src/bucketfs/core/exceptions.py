"""Exception hierarchy for bucketfs."""


class BucketFSError(Exception):
    """Base exception for all bucketfs errors."""

    pass


class ValidationError(BucketFSError):
    """Raised when a URI or configuration value is invalid."""

    pass


class NotFoundError(BucketFSError):
    """Raised when metadata is requested for a key that does not exist."""

    pass


class AlreadyExistsError(BucketFSError):
    """Raised when the target of a rename or mkdirs is already taken."""

    pass


class InvalidOperationError(BucketFSError):
    """Raised when an operation does not apply to the path's current kind."""

    pass


class DirectoryNotEmptyError(InvalidOperationError):
    """Raised when a non-empty directory is deleted without the recursive flag."""

    pass


class ServiceError(BucketFSError):
    """Raised when the underlying object store fails a request."""

    pass
