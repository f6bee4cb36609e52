"""
Uploads component unit tests.

Covers upload-reference resolution and raw file/page uploads.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from uuid import uuid4

import pytest

from comicstop.components.uploads import (
    ImageFile,
    ResolveUploadInput,
    UploadComponent,
    UploadFileInput,
    UploadImagesInput,
    natural_sort_key,
    resolve_upload_reference,
)
from comicstop.core.ports.storage import StorageError, StoredBlob
from comicstop.domain.errors import ErrorKind
from comicstop.rules.loader import load_rules

# --- Mock Implementations ---


class MockBlobStore:
    """In-memory blob store."""

    def __init__(self, fail_after: int | None = None) -> None:
        self.objects: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self._counter = 0
        self._fail_after = fail_after

    def store(self, data, namespace, *, filename, content_type) -> StoredBlob:
        if self._fail_after is not None and self._counter >= self._fail_after:
            raise StorageError("disk full")
        self._counter += 1
        key = f"{namespace}/obj-{self._counter}"
        self.objects[key] = data
        return StoredBlob(
            key=key,
            url=f"/files/{key}",
            size_bytes=len(data),
            content_type=content_type,
            original_name=filename,
        )

    def delete(self, key: str) -> bool:
        self.deleted.append(key)
        return self.objects.pop(key, None) is not None

    def public_url(self, key: str) -> str:
        return f"/files/{key}"


class MockTimePort:
    def __init__(self, now: datetime | None = None) -> None:
        self._now = now or datetime(2026, 3, 1, 12, 0, tzinfo=UTC)

    def now_utc(self) -> datetime:
        return self._now


# --- Fixtures ---


@pytest.fixture
def rules():
    return load_rules(Path("rules.yaml").resolve())


@pytest.fixture
def store() -> MockBlobStore:
    return MockBlobStore()


@pytest.fixture
def clock() -> MockTimePort:
    return MockTimePort()


@pytest.fixture
def component(store, clock, rules) -> UploadComponent:
    return UploadComponent(store, clock, rules)


# --- Resolution ---


class TestResolveUploadReference:
    def test_missing_both_fails(self, store, clock) -> None:
        out = resolve_upload_reference(ResolveUploadInput(), store, clock)

        assert out.success is False
        assert out.linkage is None
        assert out.errors[0].kind == ErrorKind.MISSING_UPLOAD_REFERENCE

    def test_blank_file_id_counts_as_missing(self, store, clock) -> None:
        out = resolve_upload_reference(ResolveUploadInput(file_id="   "), store, clock)

        assert out.errors[0].kind == ErrorKind.MISSING_UPLOAD_REFERENCE

    def test_file_id_gives_single_file_with_defaults(self, store, clock) -> None:
        out = resolve_upload_reference(ResolveUploadInput(file_id="comics/k-abc.pdf"), store, clock)

        assert out.success
        linkage = out.linkage
        assert linkage.mode == "single_file"
        assert linkage.page_order == []
        assert linkage.primary.key == "comics/k-abc.pdf"
        assert linkage.primary.name == "k-abc.pdf"
        assert linkage.primary.size == 0
        assert linkage.primary.content_type == "application/octet-stream"
        assert linkage.primary.url == "/files/comics/k-abc.pdf"
        assert linkage.primary.synthetic is False

    def test_declared_metadata_is_trusted(self, store, clock) -> None:
        out = resolve_upload_reference(
            ResolveUploadInput(
                file_id="k-abc",
                file_name="origin.cbz",
                file_size=1234,
                file_type="application/x-cbz",
                file_url="https://cdn.example.com/k-abc",
            ),
            store,
            clock,
        )

        primary = out.linkage.primary
        assert primary.name == "origin.cbz"
        assert primary.size == 1234
        assert primary.content_type == "application/x-cbz"
        assert primary.url == "https://cdn.example.com/k-abc"

    def test_page_order_only_gets_synthetic_primary(self, store, clock) -> None:
        out = resolve_upload_reference(ResolveUploadInput(page_order=["p1", "p2"]), store, clock)

        linkage = out.linkage
        assert linkage.mode == "multi_page"
        assert linkage.page_order == ["p1", "p2"]
        assert linkage.primary.synthetic is True
        assert linkage.primary.key.startswith("imagesets/20260301T120000")
        assert linkage.primary.key not in ("p1", "p2")
        assert linkage.primary.url == ""
        assert linkage.primary.size == 0

    def test_synthetic_keys_are_unique(self, store, clock) -> None:
        keys = {
            resolve_upload_reference(ResolveUploadInput(page_order=["p1"]), store, clock)
            .linkage.primary.key
            for _ in range(20)
        }
        assert len(keys) == 20

    def test_file_id_wins_over_page_order(self, store, clock) -> None:
        out = resolve_upload_reference(
            ResolveUploadInput(file_id="k-abc", page_order=["p1", "p2"]), store, clock
        )

        assert out.linkage.mode == "single_file"
        assert out.linkage.primary.key == "k-abc"
        assert out.linkage.primary.synthetic is False
        assert out.linkage.page_order == []

    def test_component_uses_configured_namespace(self, component) -> None:
        out = component.run(ResolveUploadInput(page_order=["p1"]))
        assert out.linkage.primary.key.startswith("imagesets/")


# --- Natural ordering ---


def test_natural_sort_key_orders_numbers_numerically() -> None:
    names = ["page-10.png", "page-2.png", "Page-1.png", "cover.png"]
    assert sorted(names, key=natural_sort_key) == [
        "cover.png",
        "Page-1.png",
        "page-2.png",
        "page-10.png",
    ]


# --- Single file upload ---


class TestUploadFile:
    def test_stores_under_comics_namespace(self, component, store) -> None:
        out = component.run(
            UploadFileInput(
                owner_id=uuid4(),
                data=b"%PDF-1.7 data",
                filename="origin.pdf",
                content_type="application/pdf",
            )
        )

        assert out.success
        assert out.file.key.startswith("comics/")
        assert out.file.name == "origin.pdf"
        assert out.file.size == len(b"%PDF-1.7 data")
        assert store.objects[out.file.key] == b"%PDF-1.7 data"

    def test_rejects_extension(self, component, store) -> None:
        out = component.run_upload_file(
            UploadFileInput(
                owner_id=uuid4(), data=b"MZ", filename="virus.exe", content_type="application/pdf"
            )
        )

        assert out.success is False
        assert out.errors[0].kind == ErrorKind.UNSUPPORTED_UPLOAD
        assert store.objects == {}

    def test_rejects_mime_type(self, component) -> None:
        out = component.run_upload_file(
            UploadFileInput(
                owner_id=uuid4(), data=b"x", filename="a.pdf", content_type="text/html"
            )
        )
        assert out.errors[0].kind == ErrorKind.UNSUPPORTED_UPLOAD

    def test_rejects_empty(self, component) -> None:
        out = component.run_upload_file(
            UploadFileInput(
                owner_id=uuid4(), data=b"", filename="a.pdf", content_type="application/pdf"
            )
        )
        assert out.errors[0].kind == ErrorKind.UNSUPPORTED_UPLOAD

    def test_rejects_too_large(self, store, clock, rules) -> None:
        small = rules.model_copy(
            update={"uploads": rules.uploads.model_copy(update={"max_upload_bytes": 4})}
        )
        component = UploadComponent(store, clock, small)

        out = component.run_upload_file(
            UploadFileInput(
                owner_id=uuid4(), data=b"12345", filename="a.pdf", content_type="application/pdf"
            )
        )

        assert out.errors[0].kind == ErrorKind.UPLOAD_TOO_LARGE
        assert out.errors[0].status_code == 413


# --- Image batch upload ---


class TestUploadImages:
    def _img(self, name: str) -> ImageFile:
        return ImageFile(data=name.encode(), filename=name, content_type="image/png")

    def test_pages_stored_in_natural_order(self, component, store) -> None:
        files = [self._img("page-10.png"), self._img("page-2.png"), self._img("page-1.png")]

        out = component.run(UploadImagesInput(owner_id=uuid4(), files=files))

        assert out.success
        assert out.upload_id
        assert [img.name for img in out.images] == ["page-1.png", "page-2.png", "page-10.png"]
        assert out.page_order == [img.key for img in out.images]
        assert all(key.startswith("pages/") for key in out.page_order)
        assert [img.position for img in out.images] == [0, 1, 2]

    def test_empty_batch(self, component) -> None:
        out = component.run_upload_images(UploadImagesInput(owner_id=uuid4(), files=[]))
        assert out.errors[0].kind == ErrorKind.MISSING_UPLOAD_REFERENCE

    def test_one_bad_image_rejects_whole_batch(self, component, store) -> None:
        files = [
            self._img("page-1.png"),
            ImageFile(data=b"x", filename="notes.pdf", content_type="application/pdf"),
        ]

        out = component.run_upload_images(UploadImagesInput(owner_id=uuid4(), files=files))

        assert out.success is False
        assert out.errors[0].field == "files[1]"
        assert store.objects == {}

    def test_storage_failure_removes_partial_batch(self, clock, rules) -> None:
        store = MockBlobStore(fail_after=2)
        component = UploadComponent(store, clock, rules)
        files = [self._img(f"page-{i}.png") for i in range(1, 4)]

        with pytest.raises(StorageError):
            component.run_upload_images(UploadImagesInput(owner_id=uuid4(), files=files))

        assert store.objects == {}
        assert len(store.deleted) == 2


def test_unknown_input_type_raises(component) -> None:
    with pytest.raises(TypeError):
        component.run(object())  # type: ignore[arg-type]
