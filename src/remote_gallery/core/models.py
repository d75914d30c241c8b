"""Shared data models for the remote gallery."""

import os
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigurationError

DEFAULT_BASE_URL = "http://192.168.4.1:8000"
REQUESTED_BY = "AW-5-UI"


class GalleryConfig(BaseModel):
    """Configuration for talking to the device."""

    base_url: str = DEFAULT_BASE_URL
    request_timeout: Optional[float] = None
    requested_by: str = REQUESTED_BY
    on_image_error: Literal["abort", "skip"] = "abort"
    debug: bool = False

    @classmethod
    def from_env(cls, **overrides) -> "GalleryConfig":
        """Build a config from GALLERY_* environment variables.

        Keyword arguments that are not None win over the environment.
        """
        values = {}
        if os.getenv("GALLERY_BASE_URL"):
            values["base_url"] = os.environ["GALLERY_BASE_URL"]
        if os.getenv("GALLERY_TIMEOUT"):
            try:
                values["request_timeout"] = float(os.environ["GALLERY_TIMEOUT"])
            except ValueError as exc:
                raise ConfigurationError(
                    f"GALLERY_TIMEOUT must be a number, got {os.environ['GALLERY_TIMEOUT']!r}"
                ) from exc
        if os.getenv("GALLERY_ON_IMAGE_ERROR"):
            values["on_image_error"] = os.environ["GALLERY_ON_IMAGE_ERROR"].lower()

        values.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}") from exc


class FolderEntry(BaseModel):
    """A capture session folder on the device."""

    name: str
    url: str


class ImageEntry(BaseModel):
    """A photo inside a folder listing."""

    name: str
    url: str


class FlightMetadata(BaseModel):
    """Orientation, position and time of a capture."""

    date_time: str = "N/A"
    gps_latitude: float = 0
    gps_longitude: float = 0
    gps_altitude: float = 0
    pitch_angle: Optional[float] = None
    roll_angle: Optional[float] = None
    yaw_angle: Optional[float] = None
    user_comment: str = ""


class ArchiveEntry(BaseModel):
    """A single file stored inside a produced archive."""

    path: str
    data: bytes


class SkippedImage(BaseModel):
    """An image left out of an archive and the reason why."""

    url: str
    error: str


class ArchiveResult(BaseModel):
    """Outcome of one archive assembly call."""

    zip_path: str
    count: int = 0
    entries: List[str] = Field(default_factory=list)
    skipped: List[SkippedImage] = Field(default_factory=list)


class TargetResult(BaseModel):
    """Outcome of a remote operation against a single URL."""

    url: str
    ok: bool
    status: Optional[int] = None
    body: Optional[str] = None
    error: Optional[str] = None


class BulkOperationResult(BaseModel):
    """Aggregate outcome of a bulk operation."""

    ok: bool
    results: List[TargetResult] = Field(default_factory=list)

    @classmethod
    def from_results(cls, results: List[TargetResult]) -> "BulkOperationResult":
        return cls(ok=all(r.ok for r in results), results=results)

    @property
    def failed(self) -> List[TargetResult]:
        return [r for r in self.results if not r.ok]


class FolderExportResult(BaseModel):
    """Outcome of exporting one folder into its own archive."""

    url: str
    ok: bool
    zip_path: Optional[str] = None
    count: Optional[int] = None
    note: Optional[str] = None


class FolderExportReport(BaseModel):
    """Aggregate outcome of a multi-folder export."""

    ok: bool
    results: List[FolderExportResult] = Field(default_factory=list)

    @classmethod
    def from_results(cls, results: List[FolderExportResult]) -> "FolderExportReport":
        return cls(ok=all(r.ok for r in results), results=results)
