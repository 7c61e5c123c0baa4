"""
Custom exceptions for visionary.

This module defines all custom exceptions used throughout the application.
"""


class VisionaryError(Exception):
    """Base exception for all visionary errors."""

    pass


class ValidationError(VisionaryError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str = "") -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Name of the field that failed validation (optional)
        """
        self.field = field
        super().__init__(message)


class DuplicateCategoryError(ValidationError):
    """Raised when a category name collides (case-insensitively) with an existing one."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__("A category with this name already exists.", field="name")


class APIError(VisionaryError):
    """Raised when an API call fails."""

    def __init__(self, message: str, status_code: int = 0, response: str = "") -> None:
        """
        Initialize API error.

        Args:
            message: Error message
            status_code: HTTP status code (if applicable)
            response: Raw API response (if available)
        """
        self.status_code = status_code
        self.response = response
        super().__init__(message)


class NetworkError(VisionaryError):
    """Raised when a network operation fails."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        """
        Initialize network error.

        Args:
            message: Error message
            original_error: The underlying exception that caused this error
        """
        self.original_error = original_error
        super().__init__(message)


class RequestTimeoutError(VisionaryError):
    """Raised when the generation request times out."""

    pass


class GenerationInProgressError(VisionaryError):
    """Raised when a generation is requested while another one is still outstanding."""

    pass


class ConfigurationError(VisionaryError):
    """Raised when there is a configuration problem."""

    pass


class ImageProcessingError(VisionaryError):
    """Raised when image import or decoding fails."""

    def __init__(self, message: str, image_path: str = "") -> None:
        """
        Initialize image processing error.

        Args:
            message: Error message
            image_path: Path to the image that caused the error
        """
        self.image_path = image_path
        super().__init__(message)
