"""API tests for blob serving."""

import time

PDF = b"%PDF-1.4 origin"
PNG = b"\x89PNG\r\n\x1a\n"


def test_comic_files_need_a_signature(client, blob_store):
    blob = blob_store.store(PDF, "comics", filename="origin.pdf", content_type="application/pdf")

    assert client.get(blob.url).status_code == 403

    resp = client.get(blob_store.presign(blob.key, 60))
    assert resp.status_code == 200
    assert resp.content == PDF
    assert resp.headers["content-type"] == "application/pdf"
    assert 'filename="origin.pdf"' in resp.headers["content-disposition"]


def test_tampered_or_expired_signature(client, blob_store):
    blob = blob_store.store(PDF, "comics", filename="origin.pdf", content_type="application/pdf")
    expires = int(time.time()) + 60

    resp = client.get(blob.url, params={"expires": expires, "signature": "0" * 64})
    assert resp.status_code == 403

    past = int(time.time()) - 10
    resp = client.get(
        blob.url, params={"expires": past, "signature": blob_store._signature(blob.key, past)}
    )
    assert resp.status_code == 403


def test_pages_and_thumbnails_are_public(client, blob_store):
    page = blob_store.store(PNG, "pages", filename="page-1.png", content_type="image/png")
    thumb = blob_store.store(PNG, "thumbnails", filename="cover.png", content_type="image/png")

    for blob in (page, thumb):
        resp = client.get(blob.url)
        assert resp.status_code == 200
        assert resp.content == PNG


def test_missing_file(client):
    assert client.get("/files/pages/missing.png").status_code == 404


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "service": "comicstop"}
