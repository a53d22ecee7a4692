"""Exceptions raised while handling OCR requests.

Each error carries the HTTP status and the message returned to the caller.
"""


class OcrServiceError(Exception):
    """Base class for errors that map onto an error response."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(OcrServiceError):
    """The request payload is missing or malformed."""

    status_code = 400


class StagingError(OcrServiceError):
    """The input image could not be written to the upload directory."""

    def __init__(self, message: str = "Error saving image."):
        super().__init__(message)


class RecognitionError(OcrServiceError):
    """Tesseract could not be started, failed, or timed out."""

    def __init__(self, detail: str = ""):
        super().__init__(f"Error processing image: {detail}")
        self.detail = detail


class ResultReadError(OcrServiceError):
    """The expected tesseract output file is missing or unreadable."""

    def __init__(self, message: str = "Error reading output file."):
        super().__init__(message)
