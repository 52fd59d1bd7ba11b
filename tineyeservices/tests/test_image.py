import dataclasses

import pytest

import tineyeservices.core.image as image_module
from tineyeservices.core.image import Image
from tineyeservices.errors import ErrorKind, TinEyeServiceError


def test_local_image_reads_bytes_eagerly(jpg_file):
    img = Image.from_file(jpg_file, "collection/query.jpg")

    assert img.is_local is True
    assert img.data == jpg_file.read_bytes()
    assert img.filepath == str(jpg_file)
    assert img.filename == "query.jpg"
    assert img.collection_filepath == "collection/query.jpg"
    assert img.url is None

    # Later changes on disk do not affect the loaded image.
    jpg_file.write_bytes(b"changed")
    assert img.data != b"changed"


def test_missing_file_fails_at_construction(tmp_path):
    with pytest.raises(TinEyeServiceError) as exc:
        Image.from_file(tmp_path / "nope.jpg")
    assert exc.value.kind is ErrorKind.CONSTRUCTION
    assert isinstance(exc.value.cause, FileNotFoundError)


def test_url_image_never_reads_a_file(monkeypatch):
    def boom(*args, **kwargs):
        raise AssertionError("URL images must not touch the filesystem")

    monkeypatch.setattr(image_module, "_read_file_bounded", boom)

    img = Image.from_url("https://example.com/cat.jpg", "cats/cat.jpg")
    assert img.data is None
    assert img.filepath is None
    assert img.filename is None
    assert img.is_local is False
    assert img.url == "https://example.com/cat.jpg"


def test_exactly_one_source_is_required(jpg_file):
    with pytest.raises(TinEyeServiceError):
        Image()
    with pytest.raises(TinEyeServiceError):
        Image(filepath=str(jpg_file), url="https://example.com/a.jpg")
    with pytest.raises(TinEyeServiceError):
        Image.from_url("   ")


def test_metadata_is_copied(jpg_file):
    meta = {"brand": "acme", "tags": ["red"]}
    img = Image.from_file(jpg_file, metadata=meta)

    meta["brand"] = "other"
    meta["tags"].append("blue")

    assert img.metadata == {"brand": "acme", "tags": ["red"]}


def test_metadata_must_be_a_mapping(jpg_file):
    with pytest.raises(TinEyeServiceError) as exc:
        Image.from_file(jpg_file, metadata=["not", "a", "mapping"])
    assert exc.value.kind is ErrorKind.CONSTRUCTION


def test_image_is_immutable(jpg_file):
    img = Image.from_file(jpg_file)
    with pytest.raises(dataclasses.FrozenInstanceError):
        img.filepath = "/other.jpg"


def test_upload_cap_rejects_large_files(tmp_path):
    p = tmp_path / "big.png"
    p.write_bytes(b"x" * 100)

    with pytest.raises(TinEyeServiceError) as exc:
        Image.from_file(p, max_bytes=10)
    assert exc.value.kind is ErrorKind.CONSTRUCTION
    assert isinstance(exc.value.cause, ValueError)

    assert len(Image.from_file(p, max_bytes=None).data) == 100
