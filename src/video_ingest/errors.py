"""Exception hierarchy for the ingestion pipeline."""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Backend (blob / record store) errors
# ---------------------------------------------------------------------------


class StoreError(Exception):
    """Raised by a storage backend when a store call fails."""


class BlobNotFoundError(StoreError):
    pass


class BlobConflictError(StoreError):
    pass


class StoreAccessError(StoreError):
    pass


# ---------------------------------------------------------------------------
# Processor errors
# ---------------------------------------------------------------------------


class ProcessingError(Exception):
    """Terminal failure of one processor invocation.

    ``stage`` names the pipeline stage that raised it; ``str(exc)`` is the
    user-facing message returned in the failure response.
    """

    stage: str = "failed"


class InvalidRequestError(ProcessingError):
    stage = "received"


class UpstreamStoreError(ProcessingError):
    pass


class DownloadError(UpstreamStoreError):
    stage = "downloading"


class ThumbnailUploadError(UpstreamStoreError):
    stage = "uploading_thumbnail"


class RecordInsertError(UpstreamStoreError):
    stage = "persisting"


class ExternalToolError(ProcessingError):
    """Frame extractor exited non-zero, timed out, or produced no output."""

    stage = "extracting"

    def __init__(self, message: str, diagnostics: str = "", returncode: int | None = None):
        super().__init__(message)
        self.diagnostics = diagnostics
        self.returncode = returncode


# ---------------------------------------------------------------------------
# Uploader errors
# ---------------------------------------------------------------------------


class UploadError(Exception):
    """Client-side upload failure. ``str(exc)`` is shown to the user."""


class InvalidFileTypeError(UploadError):
    pass


class FileTooLargeError(UploadError):
    pass


class StoreWriteError(UploadError):
    pass


class ProcessingFailedError(UploadError):
    pass
