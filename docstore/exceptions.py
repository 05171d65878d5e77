GENERIC_ERROR_MESSAGE = "Internal server error occurred"


class StorageServiceError(Exception):
    status_code = 500
    public_message: str | None = None

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def response_message(self) -> str:
        return self.public_message or self.message


class BadRequestError(StorageServiceError):
    """Caller input is invalid or refers to a missing file."""

    status_code = 400


class FileUploadError(StorageServiceError):
    """Upload failed for any reason, bad input included."""


class FileSearchError(StorageServiceError):
    """Listing or filtering failed for any reason, bad input included."""

    public_message = GENERIC_ERROR_MESSAGE


class InternalError(StorageServiceError):
    """Unexpected backend failure outside upload and search."""

    public_message = GENERIC_ERROR_MESSAGE
