import pytest

from tineyeservices.client.multipart import HttpMessageBuilder, image_subtype
from tineyeservices.core.image import Image
from tineyeservices.errors import ErrorKind, TinEyeServiceError


def _text_part(boundary: str, name: str, value: str) -> bytes:
    return (
        f'--{boundary}\r\nContent-Disposition: form-data; name="{name}";\r\n\r\n{value}\r\n'
    ).encode("utf-8")


def test_text_fields_render_once_and_body_ends_with_closing_boundary():
    b = HttpMessageBuilder()
    b.add("filepath", "collection/cat.jpg")
    b.add("min_score", 10)
    b.add("check_horizontal_flip", True)
    b.add("weight", 0.5)

    body = b.to_bytes()
    boundary = b.boundary

    expected = (
        _text_part(boundary, "filepath", "collection/cat.jpg")
        + _text_part(boundary, "min_score", "10")
        + _text_part(boundary, "check_horizontal_flip", "true")
        + _text_part(boundary, "weight", "0.5")
        + f"--{boundary}--".encode("utf-8")
    )
    assert body == expected
    assert body.count(b'name="min_score"') == 1
    assert body.endswith(f"--{boundary}--".encode("utf-8"))


def test_bool_values_are_lowercase():
    b = HttpMessageBuilder()
    b.add("yes", True)
    b.add("no", False)
    body = b.to_bytes()
    assert _text_part(b.boundary, "yes", "true") in body
    assert _text_part(b.boundary, "no", "false") in body


def test_empty_builder_is_just_the_closing_boundary():
    b = HttpMessageBuilder()
    assert b.to_bytes() == f"--{b.boundary}--".encode("utf-8")


def test_text_is_utf8_encoded():
    b = HttpMessageBuilder()
    b.add("filepath", "photos/café.jpg")
    assert "photos/café.jpg".encode("utf-8") in b.to_bytes()


def test_reusing_a_name_fails_without_mutating_state(jpg_file):
    b = HttpMessageBuilder()
    b.add("limit", 10)
    b.add("image", Image.from_file(jpg_file))
    before = b.to_bytes()

    with pytest.raises(TinEyeServiceError) as exc:
        b.add("limit", 20)
    assert exc.value.kind is ErrorKind.CONSTRUCTION

    with pytest.raises(TinEyeServiceError):
        b.add("limit", Image.from_file(jpg_file))

    with pytest.raises(TinEyeServiceError):
        b.add("image", "not-an-image")

    assert len(b) == 2
    assert b.to_bytes() == before


def test_none_value_is_rejected():
    b = HttpMessageBuilder()
    with pytest.raises(TinEyeServiceError) as exc:
        b.add("url", None)
    assert exc.value.kind is ErrorKind.CONSTRUCTION
    assert "url" not in b


def test_unsupported_value_type_is_rejected():
    b = HttpMessageBuilder()
    with pytest.raises(TinEyeServiceError):
        b.add("colors", [1, 2, 3])
    assert len(b) == 0


def test_image_part_is_byte_exact(jpg_file):
    img = Image.from_file(jpg_file)
    b = HttpMessageBuilder()
    b.add("image", img)

    body = b.to_bytes()
    header = (
        f"--{b.boundary}\r\n"
        'Content-Disposition: form-data; name="image"; filename="query.jpg"\r\n'
        "Content-Type: image/jpeg\r\n\r\n"
    ).encode("utf-8")
    assert body == header + img.data + b"\r\n" + f"--{b.boundary}--".encode("utf-8")


def test_png_content_type(png_file):
    b = HttpMessageBuilder()
    b.add("images[0]", Image.from_file(png_file))
    assert b"Content-Type: image/png\r\n" in b.to_bytes()


def test_image_subtype_normalizes_extension():
    assert image_subtype("/x/a.jpg") == "jpeg"
    assert image_subtype("/x/a.JPG") == "jpeg"
    assert image_subtype("/x/a.Png") == "png"
    assert image_subtype("/x/a.gif") == "gif"


def test_text_fields_come_before_images(jpg_file):
    b = HttpMessageBuilder()
    b.add("image", Image.from_file(jpg_file))
    b.add("limit", 5)

    body = b.to_bytes()
    assert body.index(b'name="limit"') < body.index(b'name="image"')


def test_image_without_extension_is_a_build_error(tmp_path):
    p = tmp_path / "noext"
    p.write_bytes(b"data")
    b = HttpMessageBuilder()
    b.add("image", Image.from_file(p))

    with pytest.raises(TinEyeServiceError) as exc:
        b.to_bytes()
    assert exc.value.kind is ErrorKind.BUILD


def test_url_image_cannot_be_sent_as_a_file_part():
    b = HttpMessageBuilder()
    b.add("image", Image.from_url("https://example.com/cat.jpg"))

    with pytest.raises(TinEyeServiceError) as exc:
        b.to_bytes()
    assert exc.value.kind is ErrorKind.BUILD


def test_value_containing_boundary_is_a_build_error():
    b = HttpMessageBuilder()
    b.add("filepath", f"x{b.boundary}y")
    with pytest.raises(TinEyeServiceError) as exc:
        b.to_bytes()
    assert exc.value.kind is ErrorKind.BUILD


def test_unencodable_text_is_wrapped_as_build_error():
    b = HttpMessageBuilder()
    b.add("filepath", "bad\udcff")
    with pytest.raises(TinEyeServiceError) as exc:
        b.to_bytes()
    assert exc.value.kind is ErrorKind.BUILD
    assert isinstance(exc.value.cause, UnicodeEncodeError)


def test_boundaries_are_unique_per_message():
    boundaries = {HttpMessageBuilder().boundary for _ in range(50)}
    assert len(boundaries) == 50


def test_content_type_carries_boundary():
    b = HttpMessageBuilder()
    assert b.content_type == f"multipart/form-data; boundary={b.boundary}"
