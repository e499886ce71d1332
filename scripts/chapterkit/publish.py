"""
Upload packaged zips to the configured endpoint.

Failures are not retried: an HTTP error raises requests.HTTPError and
aborts the publish.
"""

import os

import requests


class PublishError(Exception):
    """Raised when publishing isn't configured."""
    pass


def upload(zip_path, url, token=None, timeout=300):
    """POST one file as multipart form data. Returns the response."""
    headers = {}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    with open(zip_path, "rb") as f:
        response = requests.post(
            url,
            files={"file": (os.path.basename(zip_path), f, "application/zip")},
            headers=headers,
            timeout=timeout,
        )
    response.raise_for_status()
    return response


def publish(config, zip_paths, environ=None):
    publish_cfg = config.publish
    url = publish_cfg.get("url")
    if not url:
        raise PublishError("publish.url not set in book.yaml")

    environ = os.environ if environ is None else environ
    token = environ.get(publish_cfg.get("token_env") or "")

    for zip_path in zip_paths:
        print(f"  Uploading {os.path.basename(zip_path)} → {url}")
        upload(zip_path, url, token=token, timeout=publish_cfg.get("timeout", 300))
        print(f"  ✓ Uploaded {os.path.basename(zip_path)}")
