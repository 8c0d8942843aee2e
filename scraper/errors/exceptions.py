class ScraperError(Exception):
    """Base class for package page exceptions."""

    def __init__(self, message: str, url: str = None):
        super().__init__(message)
        self.url = url


class ExtractionError(ScraperError):
    """Raised when a page contains no package container at all."""
    pass


class NetworkError(ScraperError):
    """Raised when fetching or loading the page fails."""
    pass
