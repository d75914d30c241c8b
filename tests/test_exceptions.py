import pytest

from remote_gallery.core.exceptions import (
    EmptyFolderError,
    EmptyInputError,
    ExtractionError,
    GalleryError,
    NoTargetsError,
    OperationCancelledError,
    RemoteFetchError,
    TransportError,
)


def test_remote_fetch_error_carries_status() -> None:
    error = RemoteFetchError(404, "http://h/a.jpg", "Not Found")
    assert error.status == 404
    assert error.body == "Not Found"
    assert str(error) == "HTTP 404 for http://h/a.jpg"


def test_remote_fetch_error_without_url() -> None:
    assert str(RemoteFetchError(500)) == "HTTP 500"


def test_empty_folder_error_message() -> None:
    error = EmptyFolderError("http://h/f/")
    assert str(error) == "No images found in folder"
    assert error.folder_url == "http://h/f/"


@pytest.mark.parametrize(
    "exc_type",
    [
        RemoteFetchError,
        TransportError,
        ExtractionError,
        EmptyFolderError,
        EmptyInputError,
        NoTargetsError,
        OperationCancelledError,
    ],
)
def test_all_errors_share_base(exc_type) -> None:
    assert issubclass(exc_type, GalleryError)
