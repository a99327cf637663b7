class TextExtractError(Exception):
    """Base exception for the application."""

    def __init__(self, message: str = "An error occurred", status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ConfigurationError(TextExtractError):
    def __init__(self, message: str = "OpenAI API key is not configured"):
        super().__init__(message, status_code=400)


class ValidationError(TextExtractError):
    def __init__(self, message: str = "Invalid request"):
        super().__init__(message, status_code=400)


class FileTooLargeError(ValidationError):
    def __init__(self, file_names: list[str], max_mb: int):
        self.file_names = file_names
        super().__init__(f"Files too large (max {max_mb}MB): {', '.join(file_names)}")


class UnsupportedTypeError(TextExtractError):
    def __init__(self, mime_type: str):
        super().__init__(f"Unsupported file type: {mime_type}", status_code=400)


class ExternalServiceError(TextExtractError):
    def __init__(self, message: str = "External service call failed", upstream_status: int | None = None):
        self.upstream_status = upstream_status
        super().__init__(message, status_code=500)


class ExtractionError(TextExtractError):
    def __init__(self, message: str = "No text could be extracted from this document"):
        super().__init__(message, status_code=500)


class AuthenticationError(TextExtractError):
    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, status_code=401)


class ExtractionNotFoundError(TextExtractError):
    def __init__(self, extraction_id: str):
        super().__init__(f"Extraction {extraction_id} not found", status_code=404)
