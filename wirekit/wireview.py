"""Summarise the hosts, ports and packet sizes in a capture file."""

import struct
import sys
import time
from ipaddress import IPv4Address
from typing import List, Optional, Sequence, Tuple

from .host import Host
from .info import Info
from .pcapfile import LINKTYPE_ETHERNET, PacketRecord, PcapError, open_pcap

ETHER_HEADER_LEN = 14
ETHERTYPE_IP = 0x0800
ETHERTYPE_ARP = 0x0806
_IPV4_MIN_HEADER_LEN = 20


def _format_mac(raw: bytes) -> str:
    return ":".join(f"{octet:x}" for octet in raw)


def format_timing(record: PacketRecord) -> str:
    """Describe a packet's start time and lengths, one item per line."""
    seconds = record.ts_sec + record.ts_usec // 1_000_000
    stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(seconds))
    lines: List[str] = [
        f"Packet Start Time {stamp}.{record.ts_usec:06d}",
        f"Packet Capture Length: {record.caplen}",
        f"Packet Length: {record.length}",
    ]
    return "\n".join(lines)


def _transport_ports(data: bytes) -> Optional[Tuple[int, int]]:
    if len(data) <= ETHER_HEADER_LEN:
        return None
    offset = ETHER_HEADER_LEN + (data[ETHER_HEADER_LEN] & 0x0F) * 4
    if len(data) < offset + 4:
        return None
    return struct.unpack(">HH", data[offset : offset + 4])


def parse_packet(info: Info, data: bytes) -> Optional[Tuple[int, int]]:
    """Record the frame's hosts and ports in ``info``.

    Returns the (source, destination) port pair read after the IP header,
    or None when the frame is too short to hold one. Raises ValueError for
    frames too short to hold their link or IPv4 header.
    """
    if len(data) < ETHER_HEADER_LEN:
        raise ValueError("frame shorter than an Ethernet header")
    mac_dest = _format_mac(data[0:6])
    mac_src = _format_mac(data[6:12])
    ethertype = int.from_bytes(data[12:14], "big")
    is_ip = ethertype == ETHERTYPE_IP
    is_arp = ethertype == ETHERTYPE_ARP

    if is_ip:
        if len(data) < ETHER_HEADER_LEN + _IPV4_MIN_HEADER_LEN:
            raise ValueError("frame too short for an IPv4 header")
        ip_src = str(IPv4Address(data[26:30]))
        ip_dest = str(IPv4Address(data[30:34]))
        src = Host(mac_src, ip=ip_src)
        dest = Host(mac_dest, ip=ip_dest)
    else:
        src = Host(mac_src, is_arp=is_arp)
        dest = Host(mac_dest, is_arp=is_arp)

    info.add_sender(src)
    info.add_receiver(dest)
    if is_arp:
        info.add_arp_machine(src)
        info.add_arp_machine(dest)

    ports = _transport_ports(data)
    if ports is not None:
        info.add_udp_src(ports[0])
        info.add_udp_dest(ports[1])
    return ports


def _process(info: Info, record: PacketRecord) -> None:
    info.increment_packet_qty()
    info.add_packet_size(record.length)
    print(format_timing(record))
    try:
        ports = parse_packet(info, record.data)
    except ValueError as exc:
        print(f"Skipping packet: {exc}", file=sys.stderr)
        return
    if ports is not None:
        print(f"UDP Source Port: {ports[0]}")
        print(f"UDP Destination Port: {ports[1]}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print("Incorrect Usage. Please add a file name like so:\nwireview <filename>")
        return 1

    try:
        reader = open_pcap(args[0])
    except PcapError as exc:
        print(f"Error opening given pcap file: {exc}")
        return 1

    info = Info()
    with reader:
        provided = "" if reader.linktype == LINKTYPE_ETHERNET else "not "
        print(f"Ethernet data was {provided}provided")
        try:
            for record in reader:
                _process(info, record)
        except PcapError as exc:
            print(exc, file=sys.stderr)

    print("Final")
    try:
        report = str(info)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    print(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())