"""Browse, archive and clean up photos on a camera's HTTP file server."""

__version__ = "0.1.0"
