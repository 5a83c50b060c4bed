import argparse
import logging
import os
import sys
from typing import List, Optional

from . import config as cfg
from .errors import ArgumentError, FileAccessError, ShareError
from .share import share_file
from .store import build_store

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="s3-share-link",
        description="Upload a file to S3 under a generated key and print a short-lived download URL.",
    )
    p.add_argument("file", nargs="?", type=str, help="Absolute path of the file to upload")
    p.add_argument(
        "--file-path",
        dest="file_flag",
        default=None,
        help="Path of the file to upload (alternative to positional arg)",
    )
    p.add_argument(
        "--bucket",
        default=None,
        help="Target S3 bucket (defaults to env S3_BUCKET, then config.DEFAULT_BUCKET)",
    )
    p.add_argument(
        "--region",
        default=None,
        help="AWS region for the S3 client (defaults to env AWS_REGION, then config.DEFAULT_REGION)",
    )
    p.add_argument(
        "--profile",
        default=None,
        help="AWS profile name to use for credentials (optional)",
    )
    p.add_argument(
        "--endpoint-url",
        default=None,
        help="Custom S3-compatible endpoint URL (e.g., http://localhost:9000)",
    )
    p.add_argument(
        "--path-style",
        action="store_true",
        help="Use path-style addressing (required by some S3-compatible services)",
    )
    p.add_argument(
        "--prefix",
        default=cfg.DEFAULT_KEY_PREFIX,
        help=f"Key prefix the object is stored under (default: {cfg.DEFAULT_KEY_PREFIX})",
    )
    p.add_argument(
        "--expires-in",
        "-e",
        type=int,
        default=cfg.DEFAULT_EXPIRES_IN,
        help=f"Lifetime of the download URL in seconds (default: {cfg.DEFAULT_EXPIRES_IN})",
    )
    p.add_argument(
        "--raw-tags",
        action="store_true",
        help="Write object tags without percent-encoding, as the legacy uploader did",
    )
    p.add_argument("--verbose", "-v", action="store_true", help="Log progress to stderr")
    return p.parse_args(argv)


def resolve_file_path(args: argparse.Namespace) -> str:
    # Priority: --file-path flag > positional arg
    path = args.file_flag or args.file
    if not path:
        raise ArgumentError("The file path argument is required")
    path = os.path.abspath(path)
    if not os.path.isfile(path):
        raise FileAccessError(f"File not found: {path}")
    if not os.access(path, os.R_OK):
        raise FileAccessError(f"File is not readable: {path}")
    return path


def resolve_bucket(args: argparse.Namespace) -> Optional[str]:
    # Priority: --bucket flag > env S3_BUCKET > config.DEFAULT_BUCKET
    return args.bucket or os.getenv("S3_BUCKET") or (cfg.DEFAULT_BUCKET or None)


def resolve_region(args: argparse.Namespace) -> Optional[str]:
    # Priority: --region > env AWS_REGION > env AWS_DEFAULT_REGION > config.DEFAULT_REGION
    return args.region or os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or cfg.DEFAULT_REGION


def resolve_endpoint(args: argparse.Namespace) -> Optional[str]:
    # Priority: --endpoint-url > env S3_ENDPOINT_URL > config.DEFAULT_ENDPOINT_URL
    return args.endpoint_url or os.getenv("S3_ENDPOINT_URL") or cfg.DEFAULT_ENDPOINT_URL


def resolve_credentials() -> Optional[dict]:
    access = os.getenv("AWS_ACCESS_KEY_ID")
    secret = os.getenv("AWS_SECRET_ACCESS_KEY")
    token = os.getenv("AWS_SESSION_TOKEN")

    if access and secret:
        creds = {"aws_access_key_id": access, "aws_secret_access_key": secret}
        if token:
            creds["aws_session_token"] = token
        return creds
    return None


def resolve_config(args: argparse.Namespace) -> cfg.ShareConfig:
    bucket = resolve_bucket(args)
    if not bucket:
        raise ArgumentError(
            "Bucket name not provided. Use --bucket, set env S3_BUCKET, or edit config.DEFAULT_BUCKET."
        )
    if not 0 < args.expires_in <= cfg.MAX_EXPIRES_IN:
        raise ArgumentError(f"--expires-in must be between 1 and {cfg.MAX_EXPIRES_IN} seconds")

    return cfg.ShareConfig(
        bucket=bucket,
        region=resolve_region(args),
        key_prefix=args.prefix,
        expires_in=args.expires_in,
        endpoint_url=resolve_endpoint(args),
        use_path_style=bool(args.path_style or cfg.DEFAULT_USE_PATH_STYLE),
        profile=args.profile,
        raw_tags=args.raw_tags,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        local_path = resolve_file_path(args)
        share_config = resolve_config(args)
        store = build_store(share_config, credentials=resolve_credentials())
        link = share_file(local_path, store, share_config)
    except ShareError as e:
        where = f" (stage: {e.stage})" if e.stage else ""
        logger.error(f"{type(e).__name__}{where}: {e}")
        return e.exit_code

    logger.info(f"The file was uploaded, you can download it with the following url for {link.expires_in}s")
    print(link.url)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
