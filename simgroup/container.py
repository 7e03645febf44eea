"""A working list of image hashes that is consumed group by group."""

from __future__ import annotations

import json
import os
from typing import Iterable, Iterator

from .hashinfo import ImageHashInfo, dump_infos, load_infos
from .phash import HashError


class ParallelCompList:
    """Image hash entries still waiting to be grouped.

    Each call to group_similar_images takes the first entry as the reference,
    compares it with every other entry and removes it together with all the
    entries found to be similar.
    """

    def __init__(self, infos: Iterable[ImageHashInfo] = ()) -> None:
        self._items: list[ImageHashInfo] = list(infos)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ImageHashInfo]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"ParallelCompList({self._items!r})"

    def is_empty(self) -> bool:
        return not self._items

    def append(self, info: ImageHashInfo) -> None:
        self._items.append(info)

    def group_similar_images(self, threshold: int) -> list[str]:
        """Remove the first entry and every entry within ``threshold`` of it.

        Returns the paths of the similar entries followed by the path of the
        reference entry, or an empty list when nothing was similar. With one
        entry or none left, the list is emptied and nothing is returned.
        """
        if len(self._items) <= 1:
            self._items = []
            return []

        source, *rest = self._items
        similar: list[str] = []
        remaining: list[ImageHashInfo] = []
        for index, info in enumerate(rest):
            try:
                distance = source.image_hash.distance(info.image_hash)
            except HashError:
                self._items = remaining + rest[index:]
                raise
            if distance <= threshold:
                similar.append(info.filepath)
            else:
                remaining.append(info)

        if similar:
            similar.append(source.filepath)
        self._items = remaining
        return similar

    def serialize(self, path: str | os.PathLike) -> None:
        """Save the entries to ``path`` as indented JSON."""
        with open(path, "w", encoding="utf-8") as stream:
            dump_infos(self._items, stream)

    @classmethod
    def deserialize(cls, path: str | os.PathLike) -> ParallelCompList:
        """Load entries saved by serialize."""
        with open(path, encoding="utf-8") as stream:
            try:
                return cls(load_infos(stream))
            except json.JSONDecodeError as exc:
                raise HashError(f"{os.fspath(path)}: {exc}") from exc