"""A network host seen in a capture."""

from dataclasses import dataclass


@dataclass
class Host:
    """A host identified by its MAC address and, when known, its IP address."""

    mac: str
    ip: str = ""
    is_arp: bool = False
    packet_count: int = 1

    @property
    def key(self) -> str:
        """The identity used to order and de-duplicate hosts."""
        return self.mac + self.ip

    def increment_packet_count(self) -> None:
        self.packet_count += 1

    def __str__(self) -> str:
        text = f"MAC Address: {self.mac}\n"
        if self.ip:
            text += f"IP Address: {self.ip}\n"
        if self.is_arp:
            text += "Is ARP Machine\n"
        text += f"Number of Packets: {self.packet_count}\n"
        return text

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Host):
            return NotImplemented
        return self.key < other.key