"""An ordered collection of unique hosts with packet counts."""

from dataclasses import replace
from typing import Dict, Iterator

from .host import Host
from .textutil import add_tabs


class HostList:
    """Hosts kept unique by MAC and IP, counting repeat sightings."""

    def __init__(self) -> None:
        self._hosts: Dict[str, Host] = {}

    def insert(self, host: Host) -> None:
        """Add ``host``, or bump the packet count of the one already held."""
        existing = self._hosts.get(host.key)
        if existing is None:
            self._hosts[host.key] = replace(host)
        else:
            existing.increment_packet_count()

    def __iter__(self) -> Iterator[Host]:
        return iter(sorted(self._hosts.values(), key=lambda h: h.key))

    def __len__(self) -> int:
        return len(self._hosts)

    def __str__(self) -> str:
        return "".join(add_tabs(str(host)) + "\n" for host in self)