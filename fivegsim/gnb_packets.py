"""IPv4/ICMP helpers used by the gNB user plane."""

from __future__ import annotations

import ipaddress
import struct
from dataclasses import dataclass
from typing import Optional

IPV4_HEADER_LEN = 20
ICMP_HEADER_LEN = 8
ICMP_ECHO_REQUEST = 0x08
ICMP_ECHO_REPLY = 0x00
PROTO_ICMP = 0x01
PROTO_TCP = 0x06
PROTO_UDP = 0x11

_PING_DATA = b"SIMULATE"
_PROTOCOL_NAMES = {PROTO_ICMP: "ICMP", PROTO_TCP: "TCP", PROTO_UDP: "UDP"}

_IPV4_HEADER = struct.Struct("!BBHHHBBH4s4s")
_ICMP_HEADER = struct.Struct("!BBHHH")


def internet_checksum(data: bytes) -> int:
    """Compute the 16-bit one's-complement Internet checksum."""
    data = bytes(data)
    if len(data) % 2:
        data += b"\x00"
    total = sum(struct.unpack(f"!{len(data) // 2}H", data))
    while total >> 16:
        total = (total & 0xFFFF) + (total >> 16)
    return ~total & 0xFFFF


def _ipv4_bytes(address: str) -> bytes:
    try:
        ip = ipaddress.ip_address(address)
    except ValueError as exc:
        raise ValueError(f"not an IP address: {address!r}") from exc
    if isinstance(ip, ipaddress.IPv6Address):
        mapped = ip.ipv4_mapped
        if mapped is None:
            raise ValueError(f"not an IPv4 address: {address!r}")
        ip = mapped
    return ip.packed


def build_icmp_echo_request(src_ip: str, dst_ip: str, ident: int, seq: int) -> bytes:
    """Build an IPv4 packet carrying an ICMP echo request with 8 data bytes.

    Raises ``ValueError`` if either address is not IPv4.
    """
    src = _ipv4_bytes(src_ip)
    dst = _ipv4_bytes(dst_ip)

    icmp = _ICMP_HEADER.pack(ICMP_ECHO_REQUEST, 0, 0, ident & 0xFFFF, seq & 0xFFFF) + _PING_DATA
    icmp = icmp[:2] + internet_checksum(icmp).to_bytes(2, "big") + icmp[4:]

    total_len = IPV4_HEADER_LEN + len(icmp)
    header = _IPV4_HEADER.pack(0x45, 0x00, total_len, 0x0001, 0x0000, 0x40, PROTO_ICMP, 0, src, dst)
    header = header[:10] + internet_checksum(header).to_bytes(2, "big") + header[12:]
    return header + icmp


@dataclass(frozen=True)
class IPv4Summary:
    """The fields of an IPv4 packet that the gNB reports on."""

    src: str
    dst: str
    protocol: int
    protocol_name: str
    length: int
    is_echo_reply: bool


def describe_ipv4(packet: bytes) -> Optional[IPv4Summary]:
    """Summarise an IPv4 packet, or return None if it is shorter than a header."""
    packet = bytes(packet)
    if len(packet) < IPV4_HEADER_LEN:
        return None
    protocol = packet[9]
    return IPv4Summary(
        src=str(ipaddress.IPv4Address(packet[12:16])),
        dst=str(ipaddress.IPv4Address(packet[16:20])),
        protocol=protocol,
        protocol_name=_PROTOCOL_NAMES.get(protocol, f"proto={protocol}"),
        length=len(packet),
        is_echo_reply=(
            protocol == PROTO_ICMP
            and len(packet) >= IPV4_HEADER_LEN + ICMP_HEADER_LEN
            and packet[20] == ICMP_ECHO_REPLY
        ),
    )