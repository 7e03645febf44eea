import io

import pytest
from PIL import Image

from simgroup.readimage import ImageDecodeError, decode_image, read_image


@pytest.fixture
def sample_jpeg(tmp_path):
    path = tmp_path / "sample.jpg"
    Image.new("RGB", (32, 24), (200, 100, 50)).save(path, "JPEG")
    return path


def test_read_jpeg(sample_jpeg):
    image, image_type = read_image(sample_jpeg)
    assert image_type == "jpeg"
    assert image.size == (32, 24)


def test_read_png(tmp_path):
    path = tmp_path / "sample.png"
    Image.new("RGBA", (5, 7), (1, 2, 3, 4)).save(path, "PNG")
    image, image_type = read_image(path)
    assert image_type == "png"
    assert image.getpixel((0, 0)) == (1, 2, 3, 4)


def test_decode_from_stream():
    buffer = io.BytesIO()
    Image.new("L", (3, 3), 77).save(buffer, "PNG")
    buffer.seek(0)
    image, image_type = decode_image(buffer)
    assert image_type == "png"
    assert image.getpixel((1, 1)) == 77


def test_unsupported_format_rejected(tmp_path):
    path = tmp_path / "sample.gif"
    Image.new("RGB", (4, 4)).save(path, "GIF")
    with pytest.raises(ImageDecodeError):
        read_image(path)


def test_garbage_rejected():
    with pytest.raises(ImageDecodeError):
        decode_image(io.BytesIO(b"this is not an image"))


def test_missing_file(tmp_path):
    with pytest.raises(ImageDecodeError):
        read_image(tmp_path / "missing.jpg")