from __future__ import annotations

import pytest


class FakeStore:
    """In-memory stand-in for the S3 boundary that records every call."""

    def __init__(self, url: str = "https://fbm-files.example.test/signed?X-Amz-Expires=60",
                 put_error: Exception | None = None, sign_error: Exception | None = None):
        self.url = url
        self.put_error = put_error
        self.sign_error = sign_error
        self.objects: dict[str, dict] = {}
        self.bodies = []
        self.calls = []

    def put_object(self, key, body, tagging):
        self.calls.append(("put_object", key))
        self.bodies.append(body)
        if self.put_error is not None:
            raise self.put_error
        self.objects[key] = {"data": body.read(), "tagging": tagging}

    def presigned_get_url(self, key, expires_in):
        self.calls.append(("presigned_get_url", key, expires_in))
        if self.sign_error is not None:
            raise self.sign_error
        return self.url

    def called(self, name: str) -> bool:
        return any(call[0] == name for call in self.calls)


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def report_file(tmp_path):
    path = tmp_path / "report.pdf"
    path.write_bytes(b"%PDF-1.4 quarterly numbers")
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "S3_BUCKET",
        "S3_ENDPOINT_URL",
        "AWS_REGION",
        "AWS_DEFAULT_REGION",
        "AWS_PROFILE",
        "AWS_ACCESS_KEY_ID",
        "AWS_SECRET_ACCESS_KEY",
        "AWS_SESSION_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)
