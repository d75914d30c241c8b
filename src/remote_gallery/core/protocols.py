"""Protocol definitions for dependency injection and testability."""

from typing import Any, Dict, Mapping, Optional, Protocol


class HttpResponseProtocol(Protocol):
    """Subset of ``requests.Response`` used by the fetch client."""

    status_code: int
    content: bytes
    text: str
    headers: Mapping[str, str]


class HttpSessionProtocol(Protocol):
    """Protocol for HTTP session operations."""

    def get(self, url: str, **kwargs: Any) -> HttpResponseProtocol:
        """Issue a GET request."""
        ...

    def delete(self, url: str, **kwargs: Any) -> HttpResponseProtocol:
        """Issue a DELETE request."""
        ...


class MetadataReaderProtocol(Protocol):
    """Protocol for the black-box EXIF reader."""

    def __call__(self, path: str) -> Dict[str, Any]:
        """Read the raw tag record of the image stored at ``path``."""
        ...


class DestinationChooser(Protocol):
    """Picks where an archive should be written."""

    def choose(self, suggested_name: str) -> Optional[str]:
        """Return a destination path or None when the user cancels."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log error message."""
        ...


Headers = Mapping[str, str]
