import io
import struct

import pytest

from wirekit.pcapfile import LINKTYPE_ETHERNET, PacketRecord, PcapError, PcapReader, open_pcap


def _pcap_bytes(records, *, order="<", magic=0xA1B2C3D4, linktype=1):
    out = struct.pack(order + "IHHiIII", magic, 2, 4, 0, 0, 65535, linktype)
    for sec, frac, data, length in records:
        out += struct.pack(order + "IIII", sec, frac, len(data), length) + data
    return out


def test_reads_little_endian_records(tmp_path):
    path = tmp_path / "cap.pcap"
    path.write_bytes(_pcap_bytes([(100, 42, b"abcd", 60), (101, 7, b"xy", 2)]))
    with open_pcap(path) as reader:
        assert reader.linktype == LINKTYPE_ETHERNET
        assert reader.version == (2, 4)
        records = list(reader)
    assert records == [
        PacketRecord(100, 42, 4, 60, b"abcd"),
        PacketRecord(101, 7, 2, 2, b"xy"),
    ]


def test_reads_big_endian_records():
    data = _pcap_bytes([(5, 6, b"\x01\x02\x03", 3)], order=">", linktype=105)
    reader = PcapReader(io.BytesIO(data))
    assert reader.linktype == 105
    assert list(reader) == [PacketRecord(5, 6, 3, 3, b"\x01\x02\x03")]


def test_nanosecond_timestamps_become_microseconds():
    data = _pcap_bytes([(1, 123456789, b"z", 1)], magic=0xA1B23C4D)
    (record,) = list(PcapReader(io.BytesIO(data)))
    assert record.ts_usec == 123456


def test_empty_capture_has_no_records():
    assert list(PcapReader(io.BytesIO(_pcap_bytes([])))) == []


def test_unknown_magic_raises():
    with pytest.raises(PcapError):
        PcapReader(io.BytesIO(b"\x00" * 24))


def test_short_file_header_raises():
    with pytest.raises(PcapError):
        PcapReader(io.BytesIO(b"\xd4\xc3\xb2\xa1"))


def test_truncated_record_data_raises():
    data = _pcap_bytes([(9, 8, b"ok", 2), (1, 2, b"abcdef", 6)])[:-3]
    reader = PcapReader(io.BytesIO(data))
    seen = []
    with pytest.raises(PcapError):
        for record in reader:
            seen.append(record)
    assert seen == [PacketRecord(9, 8, 2, 2, b"ok")]


def test_truncated_record_header_raises():
    data = _pcap_bytes([]) + b"\x01\x02"
    with pytest.raises(PcapError):
        list(PcapReader(io.BytesIO(data)))


def test_missing_file_raises(tmp_path):
    with pytest.raises(PcapError):
        open_pcap(tmp_path / "absent.pcap")


def test_garbage_file_raises(tmp_path):
    path = tmp_path / "garbage.pcap"
    path.write_bytes(b"not a capture file at all, honestly")
    with pytest.raises(PcapError):
        open_pcap(path)