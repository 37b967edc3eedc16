"""extdl — resolve, download and enable extensions from a remote catalog."""

__version__ = "0.1.0"
