"""Tests for the in-memory archive builder."""

import io
import zipfile

from remote_gallery.core.archive import ArchiveBuilder


def _read_zip(data: bytes) -> zipfile.ZipFile:
    return zipfile.ZipFile(io.BytesIO(data))


class TestArchiveBuilder:
    """Tests for ArchiveBuilder."""

    def test_add_image_writes_image_and_sidecar(self):
        builder = ArchiveBuilder()

        builder.add_image("DSC01.JPG", b"jpeg", "File: DSC01.JPG")

        assert builder.names == ["DSC01.JPG", "DSC01_meta.txt"]
        with _read_zip(builder.to_bytes()) as archive:
            assert archive.read("DSC01.JPG") == b"jpeg"
            assert archive.read("DSC01_meta.txt") == b"File: DSC01.JPG"

    def test_prefix_groups_entries(self):
        builder = ArchiveBuilder()

        builder.add_image("a.jpg", b"1", "meta", prefix="Flight_1")

        assert builder.names == ["Flight_1/a.jpg", "Flight_1/a_meta.txt"]

    def test_last_write_wins(self):
        builder = ArchiveBuilder()
        builder.add("x/a.jpg", b"first")
        builder.add("x/b.jpg", b"other")

        builder.add("x/a.jpg", b"second")

        assert len(builder) == 2
        assert builder.names == ["x/a.jpg", "x/b.jpg"]
        with _read_zip(builder.to_bytes()) as archive:
            assert archive.namelist() == ["x/a.jpg", "x/b.jpg"]
            assert archive.read("x/a.jpg") == b"second"

    def test_entries_are_deflated(self):
        builder = ArchiveBuilder()
        builder.add("a.txt", "text " * 100)

        with _read_zip(builder.to_bytes()) as archive:
            assert archive.getinfo("a.txt").compress_type == zipfile.ZIP_DEFLATED

    def test_write_overwrites_existing_file(self, tmp_path):
        target = tmp_path / "out" / "package.zip"
        target.parent.mkdir()
        target.write_bytes(b"old content")
        builder = ArchiveBuilder()
        builder.add("a.txt", "new")

        written = builder.write(target)

        assert written == target
        with zipfile.ZipFile(target) as archive:
            assert archive.read("a.txt") == b"new"

    def test_entries_model(self):
        builder = ArchiveBuilder()
        builder.add("a.txt", "hi")

        entries = builder.entries

        assert entries[0].path == "a.txt"
        assert entries[0].data == b"hi"
