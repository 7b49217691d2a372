import pytest

from wirekit.host import Host
from wirekit.info import Info, udp_ports_text


def test_udp_ports_text_sorted():
    assert udp_ports_text({53, 5}, "Source") == "UDP Source Ports:\n\t5 53 \n"


def test_udp_ports_text_empty():
    assert udp_ports_text(set(), "Destination") == ""


def test_average_is_truncated():
    info = Info()
    for size in (60, 60, 100):
        info.add_packet_size(size)
    assert info.average_packet_size() == 73


def test_packet_sizes_counted():
    info = Info()
    info.add_packet_size(60)
    info.add_packet_size(60)
    info.add_packet_size(1500)
    assert info.packet_sizes[60] == 2
    assert info.packet_sizes[1500] == 1


def test_average_without_packets_raises():
    with pytest.raises(ValueError):
        Info().average_packet_size()


def test_str_without_packets_raises():
    with pytest.raises(ValueError):
        str(Info())


def test_udp_ports_deduplicated():
    info = Info()
    info.add_udp_src(53)
    info.add_udp_src(53)
    info.add_udp_dest(80)
    assert info.udp_srcs == {53}
    assert info.udp_dests == {80}


def test_report_contents_and_order():
    info = Info()
    for size in (60, 1500):
        info.increment_packet_qty()
        info.add_packet_size(size)
    info.add_sender(Host("aa", "10.0.0.1"))
    info.add_receiver(Host("bb", "10.0.0.2"))
    info.add_arp_machine(Host("cc", is_arp=True))
    info.add_udp_src(5353)
    info.add_udp_dest(53)
    report = str(info)
    assert report.startswith("Total number of packets: 2\n")
    assert "Minimum packet size: 60\n" in report
    assert "Maximum packet size: 1500\n" in report
    assert "UDP Source Ports:\n\t5353 \n" in report
    assert "UDP Destination Ports:\n\t53 \n" in report
    order = [report.index(label) for label in ("Senders", "Receivers", "ARP machines", "Average")]
    assert order == sorted(order)
    assert "\t\tMAC Address: aa\n" in report


def test_report_omits_udp_sections_without_ports():
    info = Info()
    info.add_packet_size(42)
    assert "UDP" not in str(info)