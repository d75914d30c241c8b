"""Tests for main.py CLI functionality."""

import json
import zipfile
from unittest.mock import patch

import pytest

from remote_gallery.core.exceptions import GalleryError
from remote_gallery.core.factories import GalleryServiceFactory
from remote_gallery.main import build_parser, main, parse_headers
from remote_gallery.testing.fakes import DEVICE_URL, FakeHttpSession, FakeLogger, setup_test_device


_create_services = GalleryServiceFactory.create_services


def run_cli(argv, session):
    """Run ``main`` against a fake device and return the exit code."""

    def create_services(config=None, **kwargs):
        return _create_services(config, session=session, logger=FakeLogger())

    with patch("remote_gallery.main.GalleryServiceFactory.create_services", side_effect=create_services):
        with pytest.raises(SystemExit) as exc_info:
            main(argv)
    return exc_info.value.code


class TestMainCLI:
    """Tests for the main CLI functionality."""

    def test_main_with_no_args_shows_help(self):
        """Test that running main without arguments shows help."""
        with patch("sys.argv", ["remote-gallery"]):
            with patch("argparse.ArgumentParser.print_help") as mock_help:
                with patch("sys.exit") as mock_exit:
                    main()
                    mock_help.assert_called_once()
                    mock_exit.assert_called_once_with(1)

    def test_main_version_command(self):
        """Test version command output."""
        with patch("sys.argv", ["remote-gallery", "version"]):
            with patch("builtins.print") as mock_print:
                with patch("sys.exit") as mock_exit:
                    main()
                    mock_print.assert_any_call("Remote Gallery CLI")
                    mock_print.assert_any_call("Version 0.1.0")
                    mock_exit.assert_called_once_with(0)

    def test_folders_command(self, capsys):
        """Test folder listing output."""
        code = run_cli(["--base-url", DEVICE_URL, "folders", "--json"], setup_test_device())

        assert code == 0
        folders = json.loads(capsys.readouterr().out)
        assert [f["name"] for f in folders] == ["1", "2", "10"]

    def test_folders_query(self, capsys):
        """Test folder filtering."""
        code = run_cli(["--base-url", DEVICE_URL, "folders", "--query", "1"], setup_test_device())

        assert code == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert [line.split("\t")[0] for line in lines] == ["1", "10"]

    def test_images_command(self, capsys):
        """Test image listing output."""
        code = run_cli(["images", DEVICE_URL + "1/"], setup_test_device())

        assert code == 0
        assert "DSC002.JPG" in capsys.readouterr().out

    def test_zip_folder_with_output(self, tmp_path, capsys):
        """Test archiving a folder to an explicit file."""
        target = tmp_path / "flight.zip"

        code = run_cli(["zip-folder", DEVICE_URL + "2/", "-o", str(target)], setup_test_device())

        assert code == 0
        assert "(1 photos)" in capsys.readouterr().out
        with zipfile.ZipFile(target) as archive:
            assert archive.namelist() == ["flight 01.jpg", "flight 01_meta.txt"]

    def test_zip_one_uses_suggested_name(self, tmp_path):
        """Test --no-prompt saves under the suggested name."""
        code = run_cli(
            ["zip-one", DEVICE_URL + "1/DSC002.JPG", "--dir", str(tmp_path), "--no-prompt"],
            setup_test_device(),
        )

        assert code == 0
        assert (tmp_path / "DSC002_one.zip").exists()

    def test_zip_one_prompt_cancelled(self, tmp_path, capsys):
        """Test answering q at the prompt cancels without a request."""
        session = setup_test_device()
        with patch("builtins.input", return_value="q"):
            code = run_cli(["zip-one", DEVICE_URL + "1/DSC002.JPG", "--dir", str(tmp_path)], session)

        assert code == 0
        assert "Cancelled" in capsys.readouterr().out
        assert session.requests == []

    def test_empty_folder_is_an_error(self, tmp_path, capsys):
        """Test gallery errors exit with status 1."""
        code = run_cli(
            ["zip-folder", DEVICE_URL + "10/", "-o", str(tmp_path / "x.zip")], setup_test_device()
        )

        assert code == 1
        assert "No images found in folder" in capsys.readouterr().err

    def test_delete_folders_partial_failure(self, capsys):
        """Test bulk delete reports failed targets."""
        session = FakeHttpSession()
        session.set_delete_response(DEVICE_URL + "a/", 200)
        session.set_delete_response(DEVICE_URL + "b/", 500, "boom")

        code = run_cli(
            ["delete-folders", DEVICE_URL + "a", DEVICE_URL + "b", "-H", "X-Trace: 7"], session
        )

        assert code == 1
        assert DEVICE_URL + "b/ (500)" in capsys.readouterr().out
        assert session.requests[0][2]["headers"]["X-Trace"] == "7"

    def test_export_folders(self, tmp_path, capsys):
        """Test one archive per folder."""
        code = run_cli(
            ["export-folders", DEVICE_URL + "1/", DEVICE_URL + "2/", "--dir", str(tmp_path), "--no-prompt"],
            setup_test_device(),
        )

        assert code == 0
        assert "Downloaded: 2/2" in capsys.readouterr().out
        assert (tmp_path / "1.zip").exists()
        assert (tmp_path / "2.zip").exists()


class TestHelpers:
    """Tests for CLI helpers."""

    def test_parse_headers(self):
        assert parse_headers(["Authorization: Bearer t", "X-A:1"]) == {
            "Authorization": "Bearer t",
            "X-A": "1",
        }

    def test_parse_headers_invalid(self):
        with pytest.raises(GalleryError):
            parse_headers(["no separator"])

    def test_parser_defaults(self):
        args = build_parser().parse_args(["zip-photos", "http://h/a.jpg"])

        assert args.prefix == ""
        assert args.output is None
        assert args.no_prompt is False
