"""Reader and writer for uncompressed (stored) zip archives."""

from __future__ import annotations

import struct
import zlib
from dataclasses import dataclass
from typing import BinaryIO

_LOCAL_FILE_SIGNATURE = 0x04034B50
_CENTRAL_DIR_SIGNATURE = 0x02014B50
_END_OF_CENTRAL_DIR_SIGNATURE = 0x06054B50

_SIGNATURE = struct.Struct("<I")
_LOCAL_FILE_HEADER = struct.Struct("<HHHHHIIIHH")
_CENTRAL_DIR_HEADER = struct.Struct("<HHHHHHIIIHHHHHII")
_END_OF_CENTRAL_DIR = struct.Struct("<HHHHIIH")

_DATA_DESCRIPTOR_FLAG = 0x08


class StoreZipError(Exception):
    """Raised when an archive cannot be read or written."""


def crc32(data: bytes) -> int:
    """CRC-32 checksum of ``data`` as used in zip headers."""
    return zlib.crc32(data) & 0xFFFFFFFF


def _read_struct(fp: BinaryIO, layout: struct.Struct) -> tuple:
    raw = fp.read(layout.size)
    if len(raw) != layout.size:
        raise StoreZipError("truncated zip header")
    return layout.unpack(raw)


@dataclass(frozen=True)
class _ReadMeta:
    offset: int
    size: int


@dataclass(frozen=True)
class _WriteMeta:
    name: bytes
    lfh_offset: int
    crc32: int
    size: int


class StoreZipReader:
    """Random access to the members of a stored zip archive."""

    def __init__(self) -> None:
        self._fp: BinaryIO | None = None
        self._metas: dict[str, _ReadMeta] = {}

    def open(self, path) -> None:
        """Open ``path`` and index its members."""
        self.close()
        fp = open(path, "rb")
        try:
            self._metas = self._scan(fp)
        except BaseException:
            fp.close()
            raise
        self._fp = fp

    @staticmethod
    def _scan(fp: BinaryIO) -> dict[str, _ReadMeta]:
        metas: dict[str, _ReadMeta] = {}
        while True:
            raw = fp.read(_SIGNATURE.size)
            if len(raw) != _SIGNATURE.size:
                break
            (signature,) = _SIGNATURE.unpack(raw)
            if signature == _LOCAL_FILE_SIGNATURE:
                (_, flag, compression, _, _, _, compressed_size, uncompressed_size,
                 name_length, extra_length) = _read_struct(fp, _LOCAL_FILE_HEADER)
                if flag & _DATA_DESCRIPTOR_FLAG:
                    raise StoreZipError(
                        "zip file contains data descriptor, this is not supported"
                    )
                if compression != 0 or compressed_size != uncompressed_size:
                    raise StoreZipError(
                        f"not stored zip file {compressed_size} {uncompressed_size}"
                    )
                name = fp.read(name_length).decode("utf-8")
                fp.seek(extra_length, 1)
                metas[name] = _ReadMeta(offset=fp.tell(), size=compressed_size)
                fp.seek(compressed_size, 1)
            elif signature == _CENTRAL_DIR_SIGNATURE:
                header = _read_struct(fp, _CENTRAL_DIR_HEADER)
                name_length, extra_length, comment_length = header[9:12]
                fp.seek(name_length + extra_length + comment_length, 1)
            elif signature == _END_OF_CENTRAL_DIR_SIGNATURE:
                record = _read_struct(fp, _END_OF_CENTRAL_DIR)
                fp.seek(record[-1], 1)
            else:
                raise StoreZipError(f"unsupported signature {signature:x}")
        return metas

    def _meta(self, name: str) -> _ReadMeta:
        try:
            return self._metas[name]
        except KeyError:
            raise KeyError(f"no such file {name}") from None

    def get_file_size(self, name: str) -> int:
        """Size in bytes of member ``name``."""
        return self._meta(name).size

    def read_file(self, name: str) -> bytes:
        """Contents of member ``name``."""
        meta = self._meta(name)
        if self._fp is None:
            raise StoreZipError("archive is not open")
        self._fp.seek(meta.offset)
        data = self._fp.read(meta.size)
        if len(data) != meta.size:
            raise StoreZipError(f"truncated data for {name}")
        return data

    def close(self) -> None:
        """Close the archive; closing twice is harmless."""
        if self._fp is not None:
            self._fp.close()
            self._fp = None

    def __enter__(self) -> StoreZipReader:
        return self

    def __exit__(self, *args) -> None:
        self.close()


class StoreZipWriter:
    """Writes members into a new stored zip archive."""

    def __init__(self) -> None:
        self._fp: BinaryIO | None = None
        self._metas: list[_WriteMeta] = []

    def open(self, path) -> None:
        """Create ``path``, finishing any archive already open."""
        self.close()
        self._fp = open(path, "wb")

    def write_file(self, name: str, data: bytes) -> None:
        """Append a member called ``name`` holding ``data``."""
        if self._fp is None:
            raise StoreZipError("archive is not open")
        payload = bytes(data)
        encoded_name = name.encode("utf-8")
        offset = self._fp.tell()
        checksum = crc32(payload)
        try:
            header = _LOCAL_FILE_HEADER.pack(
                0, 0, 0, 0, 0, checksum, len(payload), len(payload),
                len(encoded_name), 0,
            )
        except struct.error as exc:
            raise StoreZipError(f"member {name} is too large") from exc
        self._fp.write(_SIGNATURE.pack(_LOCAL_FILE_SIGNATURE))
        self._fp.write(header)
        self._fp.write(encoded_name)
        self._fp.write(payload)
        self._metas.append(
            _WriteMeta(
                name=encoded_name, lfh_offset=offset, crc32=checksum,
                size=len(payload),
            )
        )

    def close(self) -> None:
        """Write the central directory and close the file."""
        if self._fp is None:
            return
        fp = self._fp
        cd_offset = fp.tell()
        for meta in self._metas:
            fp.write(_SIGNATURE.pack(_CENTRAL_DIR_SIGNATURE))
            fp.write(
                _CENTRAL_DIR_HEADER.pack(
                    0, 0, 0, 0, 0, 0, meta.crc32, meta.size, meta.size,
                    len(meta.name), 0, 0, 0, 0, 0, meta.lfh_offset,
                )
            )
            fp.write(meta.name)
        cd_end = fp.tell()
        fp.write(_SIGNATURE.pack(_END_OF_CENTRAL_DIR_SIGNATURE))
        fp.write(
            _END_OF_CENTRAL_DIR.pack(
                0, 0, len(self._metas), len(self._metas),
                cd_end - cd_offset, cd_offset, 0,
            )
        )
        fp.close()
        self._fp = None
        self._metas = []

    def __enter__(self) -> StoreZipWriter:
        return self

    def __exit__(self, *args) -> None:
        self.close()