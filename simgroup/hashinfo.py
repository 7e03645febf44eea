"""Image hashes paired with the file they were computed from, and their JSON form."""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from typing import IO, Any, Iterable

from .phash import ExtImageHash, HashError


@dataclass(frozen=True)
class ImageHashInfo:
    filepath: str
    image_hash: ExtImageHash

    def to_json_dict(self) -> dict[str, str]:
        """Return the JSON object form: the path and a base64 hash dump."""
        dump = base64.b64encode(self.image_hash.to_bytes()).decode("ascii")
        return {"Filepath": self.filepath, "ImageHashDump": dump}

    @classmethod
    def from_json_dict(cls, data: Any) -> ImageHashInfo:
        """Build an entry from its JSON object form."""
        if not isinstance(data, dict):
            raise HashError("image hash entry must be a JSON object")
        filepath = data.get("Filepath", "")
        dump_text = data.get("ImageHashDump", "")
        if not isinstance(filepath, str) or not isinstance(dump_text, str):
            raise HashError("image hash entry fields must be strings")
        try:
            dump = base64.b64decode(dump_text, validate=True)
        except binascii.Error as exc:
            raise HashError(f"invalid base64 hash dump: {exc}") from exc
        return cls(filepath, ExtImageHash.from_bytes(dump))


def dump_infos(infos: Iterable[ImageHashInfo], stream: IO[str]) -> None:
    """Write entries to ``stream`` as an indented JSON array."""
    json.dump([info.to_json_dict() for info in infos], stream, indent=2, ensure_ascii=False)
    stream.write("\n")


def load_infos(stream: IO[str]) -> list[ImageHashInfo]:
    """Read entries written by dump_infos."""
    data = json.load(stream)
    if data is None:
        return []
    if not isinstance(data, list):
        raise HashError("image hash list must be a JSON array")
    return [ImageHashInfo.from_json_dict(item) for item in data]