class GallerySearchError(Exception):
    """Base class for gallery search failures."""


class ConfigurationError(GallerySearchError):
    """Raised when a query or setting is invalid. No registry call is made."""


class RegistryError(GallerySearchError):
    """Raised when the registry search command fails.

    Attributes:
        returncode: Exit code of the PowerShell process.
    """

    def __init__(self, message: str, returncode: int = 1):
        super().__init__(message)
        self.returncode = returncode
