# src/remote_gallery/core/error_handling.py

import functools
import logging
from dataclasses import dataclass
from typing import List

import requests
from PIL import UnidentifiedImageError

from .exceptions import ExtractionError, GalleryError, TransportError

# Functions whose OSError/SyntaxError/ValueError means "unreadable metadata".
METADATA_READERS = frozenset({"read_exif_record"})


def _translate(func_name: str, error: Exception) -> Exception:
    """Map a third-party failure onto the gallery hierarchy, or return it as is."""
    if isinstance(error, requests.RequestException):
        return TransportError(str(error))
    if isinstance(error, UnidentifiedImageError):
        return ExtractionError(f"Failed to identify image in {func_name}: {error}")
    if func_name in METADATA_READERS and isinstance(error, (OSError, SyntaxError, ValueError)):
        return ExtractionError(f"Metadata read error in {func_name}: {error}")
    return error


def with_error_handling(func):
    """
    A decorator to wrap functions with standardized error handling.

    Gallery errors pass through untouched. Failures of the HTTP stack become
    ``TransportError`` and failures of the image reader become
    ``ExtractionError``; anything else is logged and re-raised as is.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except GalleryError:
            raise
        except Exception as e:
            logger = logging.getLogger(func.__module__ + '.' + func.__name__)
            logger.error(f"Error in '{func.__name__}': {e}", exc_info=True)
            translated = _translate(func.__name__, e)
            if translated is e:
                raise
            raise translated from e
    return wrapper


@dataclass
class BatchItemError:
    """One failed item of a batch."""

    item: str
    error: str


class BatchOperationContextManager:
    """
    Collects per-item failures of a batch and summarizes them on exit.

    Items failing inside the block are reported with ``add_error`` and do not
    stop the batch; an exception escaping the block is logged and propagates.
    """

    def __init__(self, operation_name: str = "Batch Operation"):
        self.operation_name = operation_name
        self.errors: List[BatchItemError] = []
        self.logger = logging.getLogger(self.__class__.__module__ + '.' + self.__class__.__name__)

    def __enter__(self):
        self.logger.info(f"Starting {self.operation_name}.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.logger.error(
                f"{self.operation_name} failed due to an unhandled exception: {exc_val}",
                exc_info=(exc_type, exc_val, exc_tb),
            )
        if self.errors:
            self.logger.warning(self.summary())
            total = len(self.errors)
            for index, failure in enumerate(self.errors, start=1):
                self.logger.error(f"  Error {index}/{total} for item '{failure.item}': {failure.error}")
        elif exc_type is None:
            self.logger.info(f"{self.operation_name} completed successfully.")
        return False

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def failed_items(self) -> List[str]:
        return [failure.item for failure in self.errors]

    def summary(self) -> str:
        return f"{self.operation_name} completed with {len(self.errors)} error(s)."

    def add_error(self, error_message, item_identifier: str = "Unknown item") -> None:
        """
        Record a failure for one item of the batch.

        Args:
            error_message: The error message or exception.
            item_identifier: The item that failed (e.g. a URL).
        """
        self.errors.append(BatchItemError(item=item_identifier, error=str(error_message)))
        self.logger.debug(f"Error added for item '{item_identifier}' in {self.operation_name}")
