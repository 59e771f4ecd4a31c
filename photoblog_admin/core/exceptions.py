"""Custom exceptions for the application."""


class PhotoBlogException(Exception):
    """Base exception for all admin panel errors."""

    category = "server_error"

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundException(PhotoBlogException):
    """Raised when a resource is not found."""

    category = "not_found"

    def __init__(self, resource: str, identifier: str):
        message = f"{resource} '{identifier}' not found"
        super().__init__(message, status_code=404)


class OutOfRangeException(NotFoundException):
    """Raised when an image index is outside an album's image list."""

    def __init__(self, slug: str, index: int, length: int):
        self.index = index
        self.length = length
        PhotoBlogException.__init__(
            self,
            f"Image index {index} is out of range for album '{slug}' ({length} images)",
            status_code=404,
        )


class ConflictException(PhotoBlogException):
    """Raised when attempting to create a resource that already exists."""

    category = "conflict"

    def __init__(self, resource: str, identifier: str):
        message = f"{resource} '{identifier}' already exists"
        super().__init__(message, status_code=409)


class BadRequestException(PhotoBlogException):
    """Raised when caller input is malformed."""

    category = "bad_request"

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class UpstreamException(PhotoBlogException):
    """Raised when an external capability (storage, image codec) fails."""

    category = "upstream_failure"

    def __init__(self, message: str):
        super().__init__(message, status_code=502)


class StorageException(UpstreamException):
    """Raised when remote storage operations fail."""

    def __init__(self, message: str):
        super().__init__(f"Storage error: {message}")


class ImageProcessingException(UpstreamException):
    """Raised when image processing fails."""

    def __init__(self, message: str):
        super().__init__(f"Image processing error: {message}")
