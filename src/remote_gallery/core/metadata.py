"""Mapping of raw EXIF records to flight metadata and sidecar reports."""

import math
import re
from decimal import Decimal
from typing import Any, Mapping, Optional

from .models import FlightMetadata

NOT_AVAILABLE = "N/A"

_ANGLE_PATTERNS = {
    label: re.compile(rf"{label}\s*=\s*(-?\d+(?:\.\d+)?)", re.IGNORECASE)
    for label in ("Pitch", "Roll", "Yaw")
}


def parse_angle(comment: str, label: str) -> Optional[float]:
    """Value of ``<label> = <number>`` inside a free-text comment, if present."""
    pattern = _ANGLE_PATTERNS.get(label) or re.compile(
        rf"{re.escape(label)}\s*=\s*(-?\d+(?:\.\d+)?)", re.IGNORECASE
    )
    match = pattern.search(comment)
    if not match:
        return None
    return float(match.group(1))


def _number_or_zero(value: Any) -> float:
    if value is None:
        return 0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0


def build_flight_metadata(record: Mapping[str, Any]) -> FlightMetadata:
    """
    Map a raw tag record to ``FlightMetadata``.

    GPS values default to 0, the date falls back from DateTimeOriginal to
    CreateDate and then to "N/A", and angles are read out of UserComment.
    """
    comment = record.get("UserComment") or ""
    if not isinstance(comment, str):
        comment = str(comment)

    date_time = record.get("DateTimeOriginal") or record.get("CreateDate") or NOT_AVAILABLE

    return FlightMetadata(
        date_time=str(date_time),
        gps_latitude=_number_or_zero(record.get("GPSLatitude")),
        gps_longitude=_number_or_zero(record.get("GPSLongitude")),
        gps_altitude=_number_or_zero(record.get("GPSAltitude")),
        pitch_angle=parse_angle(comment, "Pitch"),
        roll_angle=parse_angle(comment, "Roll"),
        yaw_angle=parse_angle(comment, "Yaw"),
        user_comment=comment,
    )


def format_number(value: Optional[float]) -> str:
    """
    Render a number the way the device UI does.

    Whole floats lose their fraction (``180.0`` -> ``180``), magnitudes from
    1e-6 up to 1e21 are written in plain notation (``5e-05`` -> ``0.00005``)
    and anything outside that range uses an unpadded exponent (``1e-7``).
    """
    if value is None:
        return NOT_AVAILABLE
    if not isinstance(value, float):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if 1e-6 <= abs(value) < 1e21:
        return format(Decimal(text), "f")
    mantissa, _, exponent = text.partition("e")
    return f"{mantissa}e{int(exponent):+d}"


def format_sidecar(file_name: str, metadata: FlightMetadata) -> str:
    """Text of the ``_meta.txt`` file stored next to each image."""
    lines = [
        f"File: {file_name}",
        f"DateTimeOriginal: {metadata.date_time}",
        f"Pitch: {format_number(metadata.pitch_angle)}",
        f"Roll: {format_number(metadata.roll_angle)}",
        f"Yaw: {format_number(metadata.yaw_angle)}",
        "",
        "Location:",
        f"Altitude: {format_number(metadata.gps_altitude)} m",
        f"Latitude: {format_number(metadata.gps_latitude)} deg",
        f"Longitude: {format_number(metadata.gps_longitude)} deg",
    ]
    if metadata.user_comment:
        lines.extend(["", "UserComment:", metadata.user_comment])
    return "\n".join(lines)
