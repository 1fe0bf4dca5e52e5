"""Service helpers for the uploader."""

from .temporary_storage import StagedFile, StagedFileWriter, StagingArea, safe_filename

__all__ = ["StagedFile", "StagedFileWriter", "StagingArea", "safe_filename"]
