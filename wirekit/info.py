"""Summary statistics gathered over a packet capture."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Set

from .host import Host
from .hostlist import HostList
from .textutil import add_tabs


def udp_ports_text(ports: Iterable[int], label: str) -> str:
    """Render a block listing ``ports`` in ascending order, or '' if none."""
    listed = "".join(f"{port} " for port in sorted(ports))
    if not listed:
        return ""
    return f"UDP {label} Ports:\n\t{listed}\n"


@dataclass
class Info:
    """Counts, hosts, ports and packet sizes seen in a capture."""

    packet_qty: int = 0
    senders: HostList = field(default_factory=HostList)
    receivers: HostList = field(default_factory=HostList)
    arp_machines: HostList = field(default_factory=HostList)
    udp_srcs: Set[int] = field(default_factory=set)
    udp_dests: Set[int] = field(default_factory=set)
    packet_sizes: Counter = field(default_factory=Counter)

    def increment_packet_qty(self) -> None:
        self.packet_qty += 1

    def add_sender(self, sender: Host) -> None:
        self.senders.insert(sender)

    def add_receiver(self, receiver: Host) -> None:
        self.receivers.insert(receiver)

    def add_arp_machine(self, arp: Host) -> None:
        self.arp_machines.insert(arp)

    def add_udp_src(self, port: int) -> None:
        self.udp_srcs.add(port)

    def add_udp_dest(self, port: int) -> None:
        self.udp_dests.add(port)

    def add_packet_size(self, size: int) -> None:
        self.packet_sizes[size] += 1

    def average_packet_size(self) -> int:
        """Mean packet size, truncated to an integer.

        Raises ValueError when no packet sizes were recorded.
        """
        occurrences = sum(self.packet_sizes.values())
        if occurrences == 0:
            raise ValueError("no packet sizes recorded")
        total = sum(size * count for size, count in self.packet_sizes.items())
        return total // occurrences

    def __str__(self) -> str:
        """Full report; raises ValueError when no packet sizes were recorded."""
        average = self.average_packet_size()
        parts = [
            f"Total number of packets: {self.packet_qty}\n",
            "Senders: \n",
            add_tabs(str(self.senders)),
            "\n",
            "Receivers: \n",
            add_tabs(str(self.receivers)),
            "\n",
            "ARP machines: \n",
            add_tabs(str(self.arp_machines)),
            "\n",
            udp_ports_text(self.udp_srcs, "Source"),
            udp_ports_text(self.udp_dests, "Destination"),
            f"Average packet size: {average}\n",
            f"Minimum packet size: {min(self.packet_sizes)}\n",
            f"Maximum packet size: {max(self.packet_sizes)}\n",
        ]
        return "".join(parts)