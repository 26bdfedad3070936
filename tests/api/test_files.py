# tests/api/test_files.py
"""Tests for attachment downloads and the media listing."""

from __future__ import annotations

import pytest
from fastapi import status


def _upload_post(client, headers, name: str, data: bytes, mime: str) -> int:
    response = client.post(
        "/api/post",
        data={"content": "file carrier"},
        files=[("files", (name, data, mime))],
        headers=headers,
    )
    assert response.status_code == status.HTTP_200_OK
    post = client.get("/api/posts").json()["posts"][0]
    return post["files"][0]["id"]


def test_download_uses_original_name(client, auth_headers) -> None:
    payload = b"column_a,column_b\n1,2\n"
    file_id = _upload_post(client, auth_headers, "quarterly_report.csv", payload, "text/csv")

    response = client.get(f"/files/{file_id}")
    assert response.status_code == status.HTTP_200_OK
    assert response.content == payload
    assert response.headers["content-type"].startswith("text/csv")
    disposition = response.headers["content-disposition"]
    assert disposition.startswith("attachment")
    assert "quarterly_report.csv" in disposition


def test_image_is_inline(client, auth_headers) -> None:
    payload = b"GIF89a fake image"
    file_id = _upload_post(client, auth_headers, "wave.gif", payload, "image/gif")

    response = client.get(f"/files/{file_id}")
    assert response.status_code == status.HTTP_200_OK
    assert response.content == payload
    assert response.headers["content-type"] == "image/gif"
    assert response.headers["content-disposition"] == "inline"


def test_unknown_file_is_404(client) -> None:
    response = client.get("/files/424242")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "File not found"}

    assert client.get("/files/not-a-number").status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.parametrize("file_id", ["%C2%B2", "%D9%A3", str(2**63), "9" * 40])
def test_unusual_file_ids_are_404(client, file_id) -> None:
    response = client.get(f"/files/{file_id}")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "File not found"}


def test_media_gifs_listing(client, media_dir) -> None:
    (media_dir / "dance.gif").write_bytes(b"GIF89a")
    (media_dir / "static.jpg").write_bytes(b"jpg")

    response = client.get("/api/media/gifs")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True, "gifs": ["dance.gif"]}
