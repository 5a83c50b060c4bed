"""Upload a local file under a generated key and mint a presigned GET link."""

import logging
import os
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Dict
from urllib.parse import urlencode

from botocore.exceptions import NoCredentialsError

from . import config as cfg
from .errors import ConfigError, FileAccessError, ShareError, SignError, UploadError
from .store import ObjectStore

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    INIT = "init"
    FILE_OPENED = "file_opened"
    UPLOADED = "uploaded"
    LINK_ISSUED = "link_issued"


@dataclass(frozen=True)
class UploadRequest:
    local_path: str

    @property
    def original_name(self) -> str:
        return Path(self.local_path).name


@dataclass(frozen=True)
class SignedLink:
    url: str
    expires_in: int
    issued_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def expires_at(self) -> datetime:
        return self.issued_at + timedelta(seconds=self.expires_in)


def file_extension(local_path: str) -> str:
    """Return the suffix from the last dot of the final path segment, dot included.

    ``"archive.tar.gz"`` gives ``".gz"``, ``".bashrc"`` gives ``".bashrc"`` and a
    name without a dot gives ``""``. Case is kept as-is.
    """
    name = Path(local_path).name
    dot = name.rfind(".")
    return name[dot:] if dot != -1 else ""


def derive_key(local_path: str, prefix: str = cfg.DEFAULT_KEY_PREFIX) -> str:
    return f"{prefix}{uuid.uuid4()}{file_extension(local_path)}"


def build_tag_set(local_path: str) -> Dict[str, str]:
    return {
        "RealName": Path(local_path).name,
        "OriginalPath": local_path,
    }


def derive_tags(local_path: str, raw: bool = False) -> str:
    """Render the object tags as a query string.

    By default values are percent-encoded (``/`` stays readable) so a path
    containing ``&`` or ``=`` cannot break the tag structure. ``raw=True``
    reproduces the legacy unescaped format byte for byte.

    Values go through ``os.fsencode`` first, so a file name that is not valid
    UTF-8 is escaped from its original bytes.
    """
    tags = build_tag_set(local_path)
    if raw:
        return "&".join(f"{k}={v}" for k, v in tags.items())
    return urlencode({k: os.fsencode(v) for k, v in tags.items()}, safe="/")


def upload(store: ObjectStore, content: BinaryIO, key: str, tags: str) -> str:
    """Put ``content`` under ``key`` with ``tags`` and hand the key back.

    No retry and no cleanup on failure: the store is left as the store leaves it.
    """
    try:
        store.put_object(key, content, tags)
    except NoCredentialsError as e:
        raise ConfigError(f"No AWS credentials available for upload: {e}") from e
    except Exception as e:
        raise UploadError(f"Failed to upload object '{key}': {e}") from e
    return key


def issue_presigned_get(
    store: ObjectStore, key: str, expires_in: int = cfg.DEFAULT_EXPIRES_IN
) -> SignedLink:
    """Sign a GET for ``key`` valid for exactly ``expires_in`` seconds.

    The key is not checked for existence; a missing object only fails when the
    link is fetched.
    """
    if isinstance(expires_in, bool) or not isinstance(expires_in, int):
        raise SignError(f"Link lifetime must be an integer number of seconds, got {expires_in!r}")
    if not 0 < expires_in <= cfg.MAX_EXPIRES_IN:
        raise SignError(
            f"Link lifetime must be between 1 and {cfg.MAX_EXPIRES_IN} seconds, got {expires_in}"
        )

    issued_at = datetime.now(timezone.utc)
    try:
        url = store.presigned_get_url(key, expires_in)
    except Exception as e:
        raise SignError(f"Couldn't get the presigned request for '{key}': {e}") from e
    return SignedLink(url=url, expires_in=expires_in, issued_at=issued_at)


def share_file(local_path: str, store: ObjectStore, config: cfg.ShareConfig) -> SignedLink:
    """Upload ``local_path`` and return a presigned link to it.

    The first failure stops the run and is re-raised with the stage it happened
    in. An object that was uploaded stays in the bucket even if signing fails.
    """
    request = UploadRequest(local_path)
    stage = Stage.INIT
    try:
        try:
            fp = open(request.local_path, "rb")
        except OSError as e:
            raise FileAccessError(f"Cannot open {request.local_path}: {e.strerror or e}") from e

        with fp:
            stage = Stage.FILE_OPENED
            logger.debug(f"Opened {request.local_path}")
            key = derive_key(request.local_path, prefix=config.key_prefix)
            tags = derive_tags(request.local_path, raw=config.raw_tags)
            logger.info(f"Uploading {request.original_name} to s3://{config.bucket}/{key}")
            key = upload(store, fp, key, tags)
            stage = Stage.UPLOADED

        link = issue_presigned_get(store, key, config.expires_in)
        stage = Stage.LINK_ISSUED
    except ShareError as e:
        e.stage = e.stage or stage.value
        raise

    logger.debug(f"Reached stage {stage.value}")
    logger.info(f"Link valid for {link.expires_in}s, until {link.expires_at.isoformat()}")
    return link
