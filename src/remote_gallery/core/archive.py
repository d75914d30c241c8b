"""In-memory ZIP archive assembly."""

import io
import zipfile
from pathlib import Path
from typing import Dict, List, Union

from .image_utils import calculate_archive_path, sidecar_name
from .models import ArchiveEntry


class ArchiveBuilder:
    """
    Accumulates archive entries and serializes them into one ZIP.

    Entries keep their first insertion position; adding a path twice
    replaces the earlier content (last write wins).
    """

    def __init__(self, compression: int = zipfile.ZIP_DEFLATED):
        self._entries: Dict[str, bytes] = {}
        self._compression = compression

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, path: str, data: Union[bytes, str]) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._entries[path] = data

    def add_image(self, file_name: str, image_bytes: bytes, sidecar_text: str, prefix: str = "") -> None:
        """Add an image and its metadata sidecar under ``prefix``."""
        self.add(calculate_archive_path(file_name, prefix), image_bytes)
        self.add(calculate_archive_path(sidecar_name(file_name), prefix), sidecar_text)

    @property
    def entries(self) -> List[ArchiveEntry]:
        return [ArchiveEntry(path=path, data=data) for path, data in self._entries.items()]

    @property
    def names(self) -> List[str]:
        return list(self._entries)

    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=self._compression) as archive:
            for path, data in self._entries.items():
                archive.writestr(path, data)
        return buffer.getvalue()

    def write(self, destination: Union[str, Path]) -> Path:
        """Serialize and write the archive, replacing any existing file."""
        target = Path(destination)
        data = self.to_bytes()
        if target.parent and not target.parent.exists():
            target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        return target
