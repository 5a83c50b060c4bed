"""Error taxonomy for the upload-and-share flow.

Every error is terminal. Internal code raises these and ``cli.main`` is the
only place that logs them and turns them into an exit status.
"""

from typing import Optional


class ShareError(Exception):
    """Base class for all failures of a share run."""

    exit_code: int = 1

    def __init__(self, message: str, stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.stage = stage


class ArgumentError(ShareError):
    """Missing or invalid command-line input."""

    exit_code = 2


class FileAccessError(ShareError):
    """The local file cannot be opened for reading."""

    exit_code = 2


class ConfigError(ShareError):
    """Credentials, profile or region could not be resolved."""


class UploadError(ShareError):
    """The object store rejected or failed the put."""


class SignError(ShareError):
    """The presigned URL could not be computed."""
