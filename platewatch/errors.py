"""
PlateWatch Errors

Every failure the operator can see maps to one of these classes.
Degraded inference results and unreadable stored logs never raise.
"""


class PlateWatchError(Exception):
    """Base error carrying an operator-facing message and HTTP status"""

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NoImageSelectedError(PlateWatchError):
    """Process requested before an image was selected"""

    def __init__(self, message: str = "Please select an image file first."):
        super().__init__(message, 400)


class InvalidImageError(PlateWatchError):
    """Upload is not an image or is too large"""

    def __init__(self, message: str = "Please upload an image file."):
        super().__init__(message, 400)


class ConfigurationError(PlateWatchError):
    """Inference client was never initialized (missing credential)"""

    def __init__(self, message: str = "Inference client not initialized. Check API key."):
        super().__init__(message, 503)


class OperationInProgressError(PlateWatchError):
    """A process request arrived while another one is outstanding"""

    def __init__(self, message: str = "An image is already being processed."):
        super().__init__(message, 409)


class ConfirmationRequiredError(PlateWatchError):
    """Destructive action requested without explicit confirmation"""

    def __init__(self, message: str = "Clearing all data requires confirmation."):
        super().__init__(message, 400)


class StorageError(PlateWatchError):
    """Persisted logs could not be written"""

    def __init__(self, message: str = "Failed to update stored data."):
        super().__init__(message, 500)
