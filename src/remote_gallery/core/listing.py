"""Parsing of the device's HTML directory listings."""

import re
import unicodedata
from typing import Any, Iterator, List, Tuple
from urllib.parse import unquote, urljoin

from bs4 import BeautifulSoup

from .models import FolderEntry, ImageEntry

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp", ".bmp")
NOISE_FOLDER_NAMES = {"log", "logs"}

_DIGITS = re.compile(r"(\d+)")


def normalize_base_url(url: str) -> str:
    """Return ``url`` with exactly one trailing slash appended when missing."""
    return url if url.endswith("/") else url + "/"


def natural_sort_key(name: str) -> Tuple[Any, ...]:
    """
    Sort key comparing digit runs numerically and text case-insensitively.

    ``"2"`` sorts before ``"10"`` and ``"img2"`` before ``"IMG10"``. Accented
    letters sort next to their base letter (``"e"``, ``"é"``, ``"f"``) and
    names differing only in case put the lowercase one first.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(char for char in decomposed if not unicodedata.combining(char))
    marks: List[str] = []
    for char in decomposed:
        if not unicodedata.combining(char):
            marks.append("")
        elif marks:
            marks[-1] += char
    parts = _DIGITS.split(base)
    key: List[Any] = []
    for index, part in enumerate(parts):
        # re.split with a group alternates text, digits, text, ...
        if index % 2:
            key.append(int(part))
        else:
            key.append(part.casefold())
    return tuple(key), tuple(marks), name.swapcase()


def is_noise_folder(name: str) -> bool:
    """True for hidden, private, log and parent-directory entries."""
    if not name or name in (".", ".."):
        return True
    if name.startswith(".") or name.startswith("_"):
        return True
    return name.lower() in NOISE_FOLDER_NAMES


def _iter_hrefs(html: str) -> Iterator[str]:
    if not html:
        return
    soup = BeautifulSoup(html, "html.parser")
    for anchor in soup.find_all("a", href=True):
        href = anchor.get("href") or ""
        if href:
            yield href


def parse_folders(html: str, base_url: str) -> List[FolderEntry]:
    """
    Extract folder entries from a directory listing.

    Args:
        html: Raw listing markup
        base_url: URL the listing was fetched from

    Returns:
        Folders sorted in natural name order, noise entries removed
    """
    base = normalize_base_url(base_url)
    folders: List[FolderEntry] = []

    for href in _iter_hrefs(html):
        if not href.endswith("/") or href.startswith("../"):
            continue
        name = unquote(href.rstrip("/"))
        if is_noise_folder(name):
            continue
        folders.append(FolderEntry(name=name, url=urljoin(base, href)))

    folders.sort(key=lambda folder: natural_sort_key(folder.name))
    return folders


def parse_images(html: str, base_url: str) -> List[ImageEntry]:
    """
    Extract image entries from a directory listing, in document order.

    Args:
        html: Raw listing markup
        base_url: URL the listing was fetched from

    Returns:
        Images whose link ends with a known image extension
    """
    base = normalize_base_url(base_url)
    images: List[ImageEntry] = []

    for href in _iter_hrefs(html):
        if not href.lower().endswith(IMAGE_EXTENSIONS):
            continue
        images.append(ImageEntry(name=unquote(href), url=urljoin(base, href)))

    return images


def filter_folders(folders: List[FolderEntry], query: str) -> List[FolderEntry]:
    """Keep folders whose name contains ``query``, ignoring case."""
    needle = query.strip().lower()
    if not needle:
        return list(folders)
    return [folder for folder in folders if needle in folder.name.lower()]
