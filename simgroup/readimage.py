"""Reading JPEG and PNG images."""

from __future__ import annotations

import os
from typing import BinaryIO

from PIL import Image

_FORMATS = ("JPEG", "PNG")


class ImageDecodeError(ValueError):
    """Raised when a file cannot be read or decoded as a supported image."""


def decode_image(stream: BinaryIO) -> tuple[Image.Image, str]:
    """Decode a JPEG or PNG image from a binary stream.

    Returns the fully loaded image and its format name ("jpeg" or "png").
    """
    try:
        image = Image.open(stream, formats=_FORMATS)
        image.load()
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
        raise ImageDecodeError(f"cannot decode image: {exc}") from exc
    return image, image.format.lower()


def read_image(path: str | os.PathLike) -> tuple[Image.Image, str]:
    """Open and decode the image at ``path``.

    Both a file that cannot be opened and one that cannot be decoded raise
    ImageDecodeError.
    """
    try:
        stream = open(path, "rb")
    except OSError as exc:
        raise ImageDecodeError(f"cannot open {os.fspath(path)}: {exc}") from exc
    with stream:
        try:
            return decode_image(stream)
        except ImageDecodeError as exc:
            raise ImageDecodeError(f"{os.fspath(path)}: {exc}") from exc