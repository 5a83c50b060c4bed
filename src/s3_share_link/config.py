"""
Centralized configuration for the S3 bucket, region and link defaults.

Edit these constants to set project defaults. CLI flags and environment
variables will override these values at runtime, and the resolved values are
frozen into a ``ShareConfig`` that is handed to the driver.
"""

from dataclasses import dataclass
from typing import Optional

# Default S3 bucket name. You can override via CLI `--bucket` or env `S3_BUCKET`.
DEFAULT_BUCKET: str = "fbm-files"

# Default AWS region. Override via CLI `--region` or env `AWS_REGION`.
DEFAULT_REGION: str = "us-east-1"

# Every uploaded object lands under this key prefix.
DEFAULT_KEY_PREFIX: str = "files/"

# Lifetime of the presigned download link, in seconds.
DEFAULT_EXPIRES_IN: int = 60

# SigV4 presigned URLs cannot outlive seven days.
MAX_EXPIRES_IN: int = 7 * 24 * 60 * 60

# Optional S3-compatible endpoint URL (e.g., MinIO, Cloudflare R2, etc.)
# Example: "http://localhost:9000" or "https://accountid.r2.cloudflarestorage.com"
DEFAULT_ENDPOINT_URL: Optional[str] = None

# Whether to use path-style addressing ("https://endpoint/bucket/key")
# Some S3-compatible services require this.
DEFAULT_USE_PATH_STYLE: bool = False


@dataclass(frozen=True)
class ShareConfig:
    bucket: str = DEFAULT_BUCKET
    region: str = DEFAULT_REGION
    key_prefix: str = DEFAULT_KEY_PREFIX
    expires_in: int = DEFAULT_EXPIRES_IN
    endpoint_url: Optional[str] = DEFAULT_ENDPOINT_URL
    use_path_style: bool = DEFAULT_USE_PATH_STYLE
    profile: Optional[str] = None
    # Write tags exactly as the legacy tool did, without percent-encoding.
    raw_tags: bool = False
