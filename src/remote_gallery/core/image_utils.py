"""Image and archive-path utilities for the remote gallery."""

import math
import re
from pathlib import PurePosixPath
from typing import Any, Dict, Optional, Sequence
from urllib.parse import unquote, urlparse

from PIL import ExifTags, Image

from .error_handling import with_error_handling

FORBIDDEN_PATH_CHARS = re.compile(r'[\\/:*?"<>|]')
SIDECAR_SUFFIX = "_meta.txt"


def _to_float(value: Any) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError, ZeroDivisionError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def dms_to_degrees(value: Any, ref: Any = None) -> Optional[float]:
    """
    Convert an EXIF degrees/minutes/seconds triple to signed decimal degrees.

    Args:
        value: A (deg, min, sec) sequence of rationals, or a single number
        ref: Hemisphere reference ("N", "S", "E", "W")

    Returns:
        Decimal degrees, negative for the southern/western hemispheres
    """
    if isinstance(value, (tuple, list)):
        parts = [_to_float(v) for v in value]
        if not parts or any(p is None for p in parts):
            return None
        degrees = 0.0
        for divisor, part in zip((1, 60, 3600), parts):
            degrees += part / divisor
    else:
        degrees = _to_float(value)
        if degrees is None:
            return None

    if isinstance(ref, bytes):
        ref = ref.decode("ascii", errors="ignore")
    if isinstance(ref, str) and ref.strip("\x00 ").upper() in ("S", "W"):
        degrees = -degrees
    return degrees


def decode_user_comment(value: Any, endian: str = "<") -> str:
    """Decode an EXIF UserComment, honouring its 8-byte character code header."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.rstrip("\x00")
    if not isinstance(value, (bytes, bytearray)):
        return str(value)

    raw = bytes(value)
    header, body = raw[:8], raw[8:]
    if header.startswith(b"ASCII"):
        text = body.decode("utf-8", errors="replace")
    elif header.startswith(b"UNICODE"):
        encoding = "utf-16-le" if endian in ("<", "II") else "utf-16-be"
        text = body.decode(encoding, errors="replace")
    elif header.startswith(b"JIS"):
        text = body.decode("shift_jis", errors="replace")
    elif header == b"\x00" * 8:
        text = body.decode("utf-8", errors="replace")
    else:
        text = raw.decode("utf-8", errors="replace")
    return text.rstrip("\x00")


def _clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    text = str(value).strip("\x00 ")
    return text or None


@with_error_handling
def read_exif_record(path: str) -> Dict[str, Any]:
    """
    Read the capture tags of the image stored at ``path``.

    Args:
        path: Local file holding the image bytes

    Returns:
        Flat record keyed by tag name; missing tags are left out
    """
    record: Dict[str, Any] = {}

    with Image.open(path) as img:
        exif = img.getexif()
        exif_ifd = exif.get_ifd(ExifTags.IFD.Exif)
        gps_ifd = exif.get_ifd(ExifTags.IFD.GPSInfo)
        endian = getattr(exif, "endian", None) or "<"

    date_original = _clean_text(exif_ifd.get(ExifTags.Base.DateTimeOriginal))
    if date_original:
        record["DateTimeOriginal"] = date_original
    create_date = _clean_text(exif_ifd.get(ExifTags.Base.DateTimeDigitized))
    if create_date:
        record["CreateDate"] = create_date

    comment = exif_ifd.get(ExifTags.Base.UserComment)
    if comment is not None:
        record["UserComment"] = decode_user_comment(comment, endian)

    latitude = dms_to_degrees(
        gps_ifd.get(ExifTags.GPS.GPSLatitude), gps_ifd.get(ExifTags.GPS.GPSLatitudeRef)
    ) if ExifTags.GPS.GPSLatitude in gps_ifd else None
    if latitude is not None:
        record["GPSLatitude"] = latitude

    longitude = dms_to_degrees(
        gps_ifd.get(ExifTags.GPS.GPSLongitude), gps_ifd.get(ExifTags.GPS.GPSLongitudeRef)
    ) if ExifTags.GPS.GPSLongitude in gps_ifd else None
    if longitude is not None:
        record["GPSLongitude"] = longitude

    altitude = _to_float(gps_ifd.get(ExifTags.GPS.GPSAltitude))
    if altitude is not None:
        altitude_ref = gps_ifd.get(ExifTags.GPS.GPSAltitudeRef)
        if altitude_ref in (1, b"\x01"):
            altitude = -altitude
        record["GPSAltitude"] = altitude

    return record


def file_name_from_url(url: str) -> str:
    """Percent-decoded last path segment of ``url``."""
    path = urlparse(url).path
    return unquote(path.rstrip("/").split("/")[-1])


def sanitize_path_component(name: str) -> str:
    """Replace characters that are not allowed in file names with ``_``."""
    return FORBIDDEN_PATH_CHARS.sub("_", name)


def sidecar_name(file_name: str) -> str:
    """``DSC01.JPG`` -> ``DSC01_meta.txt``."""
    stem = re.sub(r"\.[^.]+$", "", file_name)
    return f"{stem}{SIDECAR_SUFFIX}"


def calculate_archive_path(file_name: str, prefix: str = "") -> str:
    """
    Calculate the path of a file inside the archive.

    Args:
        file_name: Name of the file
        prefix: Optional folder the file is grouped under

    Returns:
        ``prefix/file_name`` or ``file_name`` when there is no prefix
    """
    if prefix:
        return f"{prefix.rstrip('/')}/{file_name}"
    return file_name


def suggest_one_name(image_url: str) -> str:
    """Suggested archive name for a single photo download."""
    stem = re.sub(r"\.[^.]+$", "", file_name_from_url(image_url))
    return f"{sanitize_path_component(stem or 'photo')}_one.zip"


def suggest_folder_name(folder_url: str) -> str:
    """Suggested archive name for a whole folder download."""
    segments: Sequence[str] = [s for s in PurePosixPath(urlparse(folder_url).path).parts if s != "/"]
    last = unquote(segments[-1]) if segments else "photos"
    return f"{sanitize_path_component(last)}_all.zip"
