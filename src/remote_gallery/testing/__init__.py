"""Testing utilities and fakes for the remote gallery."""

from .fakes import (
    DEVICE_URL,
    FakeHttpSession,
    FakeLogger,
    FakeResponse,
    create_test_image,
    directory_listing_html,
    setup_test_device,
)

__all__ = [
    "DEVICE_URL",
    "FakeHttpSession",
    "FakeLogger",
    "FakeResponse",
    "create_test_image",
    "directory_listing_html",
    "setup_test_device",
]
