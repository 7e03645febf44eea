"""Character-set helpers for file names found inside zip archives."""

from __future__ import annotations

import zipfile

_UTF8_NAME_FLAG = 0x800


def sjis_to_utf8(data: bytes) -> str:
    """Decode Shift_JIS bytes, replacing undecodable sequences with U+FFFD."""
    return bytes(data).decode("cp932", errors="replace")


def zip_member_name(info: zipfile.ZipInfo) -> str:
    """Return a readable name for a zip member.

    Names flagged as UTF-8 are used as they are. Other names are taken back
    to their raw bytes; valid UTF-8 is kept, anything else is read as
    Shift_JIS, which is what archives made on Japanese systems tend to use.
    """
    if info.flag_bits & _UTF8_NAME_FLAG:
        return info.filename
    try:
        raw = info.orig_filename.encode("cp437")
    except UnicodeEncodeError:
        return info.filename
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return sjis_to_utf8(raw)