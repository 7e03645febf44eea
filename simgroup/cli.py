"""Command line tool that groups visually similar images by perceptual hash."""

from __future__ import annotations

import argparse
import io
import json
import os
import sys
import time
import zipfile
import zlib
from concurrent.futures import ThreadPoolExecutor
from itertools import chain
from typing import Any, Iterator, Sequence

from PIL import Image

from .charcode import zip_member_name
from .container import ParallelCompList
from .hashinfo import ImageHashInfo
from .phash import HashError, ext_perception_hash
from .readimage import ImageDecodeError, decode_image, read_image

_MEMBER_ERRORS = (ImageDecodeError, zipfile.BadZipFile, OSError, RuntimeError, zlib.error)
_ARCHIVE_ERRORS = (zipfile.BadZipFile, OSError, HashError, RuntimeError, zlib.error)


def write_json(path: str | os.PathLike, data: Any) -> None:
    """Write ``data`` to ``path`` as JSON indented by two spaces."""
    with open(path, "w", encoding="utf-8") as stream:
        json.dump(data, stream, indent=2, ensure_ascii=False)
        stream.write("\n")


def calc_image_hash(
    image: Image.Image, path: str, sample_width: int, sample_height: int
) -> ImageHashInfo:
    """Compute the perceptual hash of ``image`` and pair it with ``path``."""
    return ImageHashInfo(path, ext_perception_hash(image, sample_width, sample_height))


def read_images_from_zip(
    path: str | os.PathLike, sample_width: int, sample_height: int
) -> Iterator[ImageHashInfo]:
    """Yield a hash for every image stored in the zip archive at ``path``.

    Members that cannot be decoded as images are reported on stderr and
    skipped. Each hash is labelled with the archive path joined with the
    member name.
    """
    archive_path = os.fspath(path)
    with zipfile.ZipFile(archive_path) as archive:
        for info in archive.infolist():
            if info.is_dir():
                continue
            full_name = os.path.join(archive_path, zip_member_name(info))
            try:
                with archive.open(info) as member:
                    data = member.read()
                image, _ = decode_image(io.BytesIO(data))
            except _MEMBER_ERRORS as exc:
                print(f"{exc}: {full_name}", file=sys.stderr)
                continue
            yield calc_image_hash(image, full_name, sample_width, sample_height)


def _walk_files(root: str) -> Iterator[str]:
    if not os.path.isdir(root):
        os.stat(root)
        yield root
        return
    with os.scandir(root) as scan:
        entries = sorted(scan, key=lambda entry: entry.name)
    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            yield from _walk_files(entry.path)
        else:
            yield entry.path


def _hash_file(path: str, sample_width: int, sample_height: int) -> list[ImageHashInfo]:
    if os.path.splitext(path)[1].lower() == ".zip":
        results: list[ImageHashInfo] = []
        try:
            results.extend(read_images_from_zip(path, sample_width, sample_height))
        except _ARCHIVE_ERRORS as exc:
            print(f"failed to read zip archive: {path} {exc}", file=sys.stderr)
        return results

    try:
        image, _ = read_image(path)
    except ImageDecodeError as exc:
        print(f"failed to read image: {path} {exc}", file=sys.stderr)
        return []
    return [calc_image_hash(image, path, sample_width, sample_height)]


def collect_image_hashes(
    root: str | os.PathLike, sample_width: int, sample_height: int, parallels: int
) -> ParallelCompList:
    """Hash every image file and every image inside zip archives below ``root``.

    Files are hashed by up to ``parallels`` worker threads. Unreadable files
    are reported on stderr and skipped; a directory that cannot be listed
    raises OSError.
    """
    paths = list(_walk_files(os.fspath(root)))
    with ThreadPoolExecutor(max_workers=max(1, parallels)) as pool:
        batches = pool.map(lambda p: _hash_file(p, sample_width, sample_height), paths)
        return ParallelCompList(chain.from_iterable(batches))


def group_all(container: ParallelCompList, threshold: int) -> list[list[str]]:
    """Consume ``container`` and return every group of similar image paths."""
    groups: list[list[str]] = []
    while not container.is_empty():
        group = container.group_similar_images(threshold)
        if group:
            groups.append(group)
    return groups


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Group similar images by perceptual hash.", allow_abbrev=False
    )
    parser.add_argument("-root", "--root", dest="root", default="", help="search dir")
    parser.add_argument(
        "-write-midfile",
        "--write-midfile",
        dest="write_midfile",
        default="midfile.json",
        help="write intermediate filename(json)",
    )
    parser.add_argument(
        "-read-midfile",
        "--read-midfile",
        dest="read_midfile",
        default="",
        help="read intermediate filename(json)",
    )
    parser.add_argument(
        "-o", dest="output", default="similar_groups.json", help="output filename(json)"
    )
    parser.add_argument(
        "-j", dest="parallels", type=int, default=os.cpu_count() or 1, help="parallel num"
    )
    parser.add_argument(
        "-samplew", "--samplew", dest="sample_width", type=int, default=16, help="pHash width"
    )
    parser.add_argument(
        "-sampleh", "--sampleh", dest="sample_height", type=int, default=16, help="pHash height"
    )
    parser.add_argument(
        "-threshold", "--threshold", dest="threshold", type=int, default=10,
        help="pHash threshold",
    )
    return parser


def _elapsed(start: float) -> str:
    return f"{(time.perf_counter() - start) * 1000:.3f}ms"


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        start = time.perf_counter()
        if args.read_midfile:
            container = ParallelCompList.deserialize(args.read_midfile)
        else:
            root = os.path.normpath(args.root)
            container = collect_image_hashes(
                root, args.sample_width, args.sample_height, max(1, args.parallels)
            )
            if args.write_midfile and not container.is_empty():
                container.serialize(args.write_midfile)
        print(f"ReadFiles: {_elapsed(start)}")

        start = time.perf_counter()
        groups = group_all(container, args.threshold)
        print(f"GroupingFiles: {_elapsed(start)}")

        write_json(args.output, groups)
    except (OSError, ValueError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())