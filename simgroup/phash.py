"""Extended perceptual image hashes of arbitrary bit length."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass

import numpy as np
import scipy.fft
from PIL import Image

_WORD_BITS = 64
_HEADER = struct.Struct(">BI")
_WORD = struct.Struct(">Q")


class HashError(ValueError):
    """Raised for invalid hash parameters, mismatched hashes or bad dumps."""


class HashKind(enum.IntEnum):
    UNKNOWN = 0
    AHASH = 1
    PHASH = 2
    DHASH = 3
    WHASH = 4

    @property
    def prefix(self) -> str:
        return {
            HashKind.AHASH: "a",
            HashKind.PHASH: "p",
            HashKind.DHASH: "d",
            HashKind.WHASH: "w",
        }.get(self, "")


@dataclass(frozen=True)
class ExtImageHash:
    """A hash made of 64-bit words, most significant bit first."""

    words: tuple[int, ...]
    kind: HashKind
    bits: int

    def __post_init__(self) -> None:
        words = tuple(self.words)
        if any(not 0 <= w < 1 << _WORD_BITS for w in words):
            raise HashError("hash words must be unsigned 64-bit values")
        if self.bits < 0:
            raise HashError("bit count must not be negative")
        object.__setattr__(self, "words", words)
        object.__setattr__(self, "kind", HashKind(self.kind))

    def distance(self, other: ExtImageHash) -> int:
        """Hamming distance between two hashes of the same kind and size."""
        if self.kind != other.kind:
            raise HashError("image hash kinds must be identical")
        if self.bits != other.bits:
            raise HashError("extended image hash sizes must be identical")
        return sum((a ^ b).bit_count() for a, b in zip(self.words, other.words))

    def to_string(self) -> str:
        hex_words = "".join(f"{w:016x}" for w in self.words)
        return f"{self.kind.prefix}:{hex_words}"

    def ones_count(self) -> int:
        return sum(w.bit_count() for w in self.words)

    def to_bytes(self) -> bytes:
        """Serialise to a compact binary dump."""
        body = b"".join(_WORD.pack(w) for w in self.words)
        return _HEADER.pack(int(self.kind), self.bits) + body

    @classmethod
    def from_bytes(cls, data: bytes) -> ExtImageHash:
        """Load a hash from a dump written by to_bytes."""
        data = bytes(data)
        if len(data) < _HEADER.size:
            raise HashError("hash dump is too short")
        kind_value, bits = _HEADER.unpack_from(data)
        body = data[_HEADER.size:]
        if len(body) % _WORD.size:
            raise HashError("hash dump has a truncated word")
        try:
            kind = HashKind(kind_value)
        except ValueError as exc:
            raise HashError(f"unknown hash kind {kind_value}") from exc
        words = tuple(w for (w,) in _WORD.iter_unpack(body))
        return cls(words, kind, bits)


def ext_perception_hash(image: Image.Image, width: int, height: int) -> ExtImageHash:
    """Compute a perceptual hash of ``width * height`` bits.

    The image is scaled to a square of side ``width * height``, turned to
    grey, transformed with a 2-D DCT, and the low-frequency ``height`` rows by
    ``width`` columns are compared with their median.
    """
    if image is None:
        raise HashError("image must not be None")
    if width < 1 or height < 1:
        raise HashError("width and height must be positive")
    size = width * height
    if size & (size - 1):
        raise HashError("width * height should be a power of two")

    resized = image.convert("RGBA").resize((size, size), Image.Resampling.BILINEAR)
    pixels = np.asarray(resized, dtype=np.float64)
    alpha = pixels[..., 3] / 255.0
    gray = (0.299 * pixels[..., 0] + 0.587 * pixels[..., 1] + 0.114 * pixels[..., 2]) * alpha

    coefficients = scipy.fft.dctn(gray, type=2)
    flat = coefficients[:height, :width].ravel()
    middle = flat.size // 2
    median = np.partition(flat, middle)[middle]

    word_count = -(-size // _WORD_BITS)
    packed = np.packbits(flat > median).tobytes().ljust(word_count * 8, b"\0")
    words = tuple(w for (w,) in _WORD.iter_unpack(packed))
    return ExtImageHash(words, HashKind.PHASH, size)