import socket
import struct

import pytest

from fivegsim.gnb_packets import (
    build_icmp_echo_request,
    describe_ipv4,
    internet_checksum,
)


def test_checksum_of_empty_is_all_ones():
    assert internet_checksum(b"") == 0xFFFF


def test_checksum_odd_length_pads_with_zero():
    assert internet_checksum(b"\x01\x02\x03") == internet_checksum(b"\x01\x02\x03\x00")


def test_ip_header_checksum_verifies():
    pkt = build_icmp_echo_request("10.45.0.2", "8.8.8.8", 1, 42)
    assert internet_checksum(pkt[:20]) == 0


def test_icmp_checksum_verifies():
    pkt = build_icmp_echo_request("10.45.0.2", "8.8.8.8", 1, 42)
    assert internet_checksum(pkt[20:]) == 0


def test_echo_request_layout():
    pkt = build_icmp_echo_request("10.45.0.2", "8.8.8.8", 1, 42)
    assert pkt[0] == 0x45
    assert pkt[8] == 0x40
    assert pkt[9] == 0x01
    assert pkt[12:16] == socket.inet_aton("10.45.0.2")
    assert pkt[16:20] == socket.inet_aton("8.8.8.8")
    assert pkt[20] == 0x08
    assert pkt[21] == 0x00
    assert struct.unpack("!HH", pkt[24:28]) == (1, 42)
    assert pkt[28:] == b"SIMULATE"


def test_total_length_field_matches_packet():
    pkt = build_icmp_echo_request("10.0.0.1", "10.0.0.2", 7, 9)
    assert struct.unpack("!H", pkt[2:4])[0] == len(pkt)


@pytest.mark.parametrize("src,dst", [("bogus", "8.8.8.8"), ("10.0.0.1", "::1")])
def test_invalid_addresses_raise(src, dst):
    with pytest.raises(ValueError):
        build_icmp_echo_request(src, dst, 1, 1)


def test_describe_echo_request():
    pkt = build_icmp_echo_request("10.45.0.2", "8.8.8.8", 1, 42)
    summary = describe_ipv4(pkt)
    assert summary.src == "10.45.0.2"
    assert summary.dst == "8.8.8.8"
    assert summary.protocol_name == "ICMP"
    assert summary.length == len(pkt)
    assert summary.is_echo_reply is False


def test_describe_echo_reply():
    pkt = bytearray(build_icmp_echo_request("8.8.8.8", "10.45.0.2", 1, 42))
    pkt[20] = 0x00
    assert describe_ipv4(bytes(pkt)).is_echo_reply is True


def test_describe_unknown_protocol():
    pkt = bytearray(build_icmp_echo_request("10.0.0.1", "10.0.0.2", 1, 1))
    pkt[9] = 50
    summary = describe_ipv4(bytes(pkt))
    assert summary.protocol == 50
    assert summary.protocol_name == "proto=50"
    assert summary.is_echo_reply is False


def test_describe_short_packet_is_none():
    assert describe_ipv4(b"\x45" * 19) is None