import pytest
import requests

from chapterkit import publish as publish_mod
from chapterkit.publish import PublishError, publish


class FakeResponse:
    def __init__(self, status_code=200):
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


@pytest.fixture
def zip_file(tmp_path):
    path = tmp_path / "test_book.zip"
    path.write_bytes(b"PK")
    return str(path)


def test_publish_posts_each_zip(config, zip_file, monkeypatch):
    config.publish["url"] = "https://upload.test/files"
    posted = []

    def post(url, files, headers, timeout):
        posted.append((url, files["file"][0], headers, timeout))
        return FakeResponse()

    monkeypatch.setattr(publish_mod.requests, "post", post)
    publish(config, [zip_file], environ={"CHAPTERKIT_UPLOAD_TOKEN": "s3cret"})

    assert posted == [(
        "https://upload.test/files",
        "test_book.zip",
        {"Authorization": "Bearer s3cret"},
        300,
    )]


def test_publish_without_token(config, zip_file, monkeypatch):
    config.publish["url"] = "https://upload.test/files"
    headers_seen = []

    def post(url, files, headers, timeout):
        headers_seen.append(headers)
        return FakeResponse()

    monkeypatch.setattr(publish_mod.requests, "post", post)
    publish(config, [zip_file], environ={})
    assert headers_seen == [{}]


def test_upload_failure_propagates(config, zip_file, monkeypatch):
    config.publish["url"] = "https://upload.test/files"
    monkeypatch.setattr(publish_mod.requests, "post", lambda *a, **kw: FakeResponse(503))
    with pytest.raises(requests.HTTPError):
        publish(config, [zip_file], environ={})


def test_publish_requires_url(config, zip_file):
    with pytest.raises(PublishError):
        publish(config, [zip_file], environ={})
