"""Reader for classic libpcap capture files."""

import struct
from dataclasses import dataclass
from os import PathLike
from typing import BinaryIO, Iterator, Union

LINKTYPE_ETHERNET = 1

_MAGIC_MICROSECONDS = 0xA1B2C3D4
_MAGIC_NANOSECONDS = 0xA1B23C4D
_FILE_HEADER_LEN = 24
_RECORD_HEADER_LEN = 16
_LINKTYPE_MASK = 0x03FFFFFF


class PcapError(Exception):
    """A capture file could not be opened or read."""


@dataclass(frozen=True)
class PacketRecord:
    """One captured packet with its timestamp and lengths."""

    ts_sec: int
    ts_usec: int
    caplen: int
    length: int
    data: bytes


class PcapReader:
    """Iterates over the packets of a capture file stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        header = stream.read(_FILE_HEADER_LEN)
        if len(header) < _FILE_HEADER_LEN:
            raise PcapError(
                f"truncated dump file; tried to read {_FILE_HEADER_LEN} file header "
                f"bytes, only got {len(header)}"
            )
        for order in ("<", ">"):
            (magic,) = struct.unpack(order + "I", header[:4])
            if magic in (_MAGIC_MICROSECONDS, _MAGIC_NANOSECONDS):
                break
        else:
            raise PcapError("unknown file format")
        self._order = order
        self._nanoseconds = magic == _MAGIC_NANOSECONDS
        major, minor, _zone, _sigfigs, snaplen, linktype = struct.unpack(
            order + "HHiIII", header[4:]
        )
        self.version = (major, minor)
        self.snaplen = snaplen
        self.linktype = linktype & _LINKTYPE_MASK

    def __iter__(self) -> Iterator[PacketRecord]:
        record_format = self._order + "IIII"
        while True:
            header = self._stream.read(_RECORD_HEADER_LEN)
            if not header:
                return
            if len(header) < _RECORD_HEADER_LEN:
                raise PcapError(
                    f"truncated dump file; tried to read {_RECORD_HEADER_LEN} header "
                    f"bytes, only got {len(header)}"
                )
            ts_sec, fraction, caplen, length = struct.unpack(record_format, header)
            data = self._stream.read(caplen)
            if len(data) < caplen:
                raise PcapError(
                    f"truncated dump file; tried to read {caplen} captured bytes, "
                    f"only got {len(data)}"
                )
            ts_usec = fraction // 1000 if self._nanoseconds else fraction
            yield PacketRecord(ts_sec, ts_usec, caplen, length, data)

    def close(self) -> None:
        self._stream.close()

    def __enter__(self) -> "PcapReader":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def open_pcap(path: Union[str, "PathLike[str]"]) -> PcapReader:
    """Open a capture file, raising PcapError if it cannot be read."""
    try:
        stream = open(path, "rb")
    except OSError as exc:
        raise PcapError(f"{path}: {exc.strerror or exc}") from exc
    try:
        return PcapReader(stream)
    except BaseException:
        stream.close()
        raise