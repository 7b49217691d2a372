from wirekit.host import Host
from wirekit.hostlist import HostList


def test_empty_list_renders_empty():
    hosts = HostList()
    assert str(hosts) == ""
    assert len(hosts) == 0


def test_duplicate_insert_increments_count():
    hosts = HostList()
    hosts.insert(Host("aa", "10.0.0.1"))
    hosts.insert(Host("aa", "10.0.0.1"))
    hosts.insert(Host("bb", "10.0.0.2"))
    assert len(hosts) == 2
    counts = {h.mac: h.packet_count for h in hosts}
    assert counts == {"aa": 2, "bb": 1}


def test_same_mac_different_ip_are_distinct():
    hosts = HostList()
    hosts.insert(Host("aa", "10.0.0.1"))
    hosts.insert(Host("aa", "10.0.0.2"))
    assert len(hosts) == 2


def test_first_sighting_keeps_its_arp_flag():
    hosts = HostList()
    hosts.insert(Host("aa", is_arp=True))
    hosts.insert(Host("aa", is_arp=False))
    (only,) = list(hosts)
    assert only.is_arp is True
    assert only.packet_count == 2


def test_iteration_is_sorted_by_identity():
    hosts = HostList()
    for mac in ["c", "a", "b"]:
        hosts.insert(Host(mac))
    assert [h.mac for h in hosts] == ["a", "b", "c"]


def test_lists_hold_independent_copies():
    host = Host("aa")
    first, second = HostList(), HostList()
    first.insert(host)
    second.insert(host)
    first.insert(host)
    assert [h.packet_count for h in first] == [2]
    assert [h.packet_count for h in second] == [1]
    assert host.packet_count == 1


def test_str_indents_each_host():
    hosts = HostList()
    hosts.insert(Host("x"))
    assert str(hosts) == "\tMAC Address: x\n\tNumber of Packets: 1\n\n"