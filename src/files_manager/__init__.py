"""files-manager: personal file storage with an asynchronous task pipeline."""

__version__ = "0.1.0"
