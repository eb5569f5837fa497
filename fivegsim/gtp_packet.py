"""GTP-U (GTPv1-U) packet codec.

Header layout:

    octet 1     flags (version=1, PT=1, E, S, PN)
    octet 2     message type
    octets 3-4  length of payload plus optional header fields
    octets 5-8  TEID
    octets 9-12 sequence number, N-PDU number, next extension header type
                (present only when any of E, S or PN is set)
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

GTPU_PORT = 2152
GTP_VERSION1 = 0x20
PROTOCOL_TYPE_BIT = 0x10
MIN_HEADER_LEN = 8
EXT_HEADER_LEN = 12

MSG_TYPE_ECHO_REQUEST = 0x01
MSG_TYPE_ECHO_RESPONSE = 0x02
MSG_TYPE_ERROR_INDICATION = 0x1A
MSG_TYPE_SUPPORTED_EXT_HEADERS = 0x1F
MSG_TYPE_END_MARKER = 0xFE
MSG_TYPE_GPDU = 0xFF

_FLAG_EXT_HEADER = 0x04
_FLAG_SEQ_NUM = 0x02
_FLAG_NPDU = 0x01

_MANDATORY = struct.Struct("!BBHI")
_OPTIONAL = struct.Struct("!HBB")

_MESSAGE_NAMES = {
    MSG_TYPE_ECHO_REQUEST: "EchoRequest",
    MSG_TYPE_ECHO_RESPONSE: "EchoResponse",
    MSG_TYPE_ERROR_INDICATION: "ErrorIndication",
    MSG_TYPE_END_MARKER: "EndMarker",
    MSG_TYPE_GPDU: "G-PDU",
}


class GTPDecodeError(ValueError):
    """Raised when bytes cannot be parsed as a GTP-U packet."""


@dataclass
class Header:
    """A decoded GTP-U header."""

    version: int = 1
    protocol_type: int = 1
    ext_header_flag: bool = False
    seq_num_flag: bool = False
    npdu_flag: bool = False
    message_type: int = 0
    length: int = 0
    teid: int = 0
    sequence_number: int = 0
    npdu_number: int = 0
    next_ext_header: int = 0

    @property
    def has_optional_fields(self) -> bool:
        """True when the 4 optional header octets are present."""
        return self.ext_header_flag or self.seq_num_flag or self.npdu_flag


@dataclass
class Packet:
    """A GTP-U packet: header plus payload (usually an inner IP packet)."""

    header: Header = field(default_factory=Header)
    payload: bytes = b""

    def __str__(self) -> str:
        kind = self.header.message_type
        name = _MESSAGE_NAMES.get(kind, f"Unknown(0x{kind:02X})")
        return (
            f"GTP-U[{name} TEID=0x{self.header.teid:08X} "
            f"payload={len(self.payload)} bytes]"
        )


def encode(packet: Packet) -> bytes:
    """Serialise a packet; the length field is computed from the payload."""
    header = packet.header
    payload = bytes(packet.payload)
    optional = header.has_optional_fields

    flags = GTP_VERSION1 | PROTOCOL_TYPE_BIT
    if header.ext_header_flag:
        flags |= _FLAG_EXT_HEADER
    if header.seq_num_flag:
        flags |= _FLAG_SEQ_NUM
    if header.npdu_flag:
        flags |= _FLAG_NPDU

    length = (len(payload) + (4 if optional else 0)) & 0xFFFF
    out = _MANDATORY.pack(flags, header.message_type, length, header.teid)
    if optional:
        out += _OPTIONAL.pack(
            header.sequence_number, header.npdu_number, header.next_ext_header
        )
    return out + payload


def decode(data: bytes) -> Packet:
    """Parse a GTP-U packet, raising GTPDecodeError on malformed input."""
    data = bytes(data)
    if len(data) < MIN_HEADER_LEN:
        raise GTPDecodeError(
            f"GTP-U packet too short: {len(data)} bytes (min {MIN_HEADER_LEN})"
        )

    flags, message_type, length, teid = _MANDATORY.unpack_from(data)
    header = Header(
        version=(flags >> 5) & 0x07,
        protocol_type=(flags >> 4) & 0x01,
        ext_header_flag=bool(flags & _FLAG_EXT_HEADER),
        seq_num_flag=bool(flags & _FLAG_SEQ_NUM),
        npdu_flag=bool(flags & _FLAG_NPDU),
        message_type=message_type,
        length=length,
        teid=teid,
    )
    if header.version != 1:
        raise GTPDecodeError(f"unsupported GTP version: {header.version} (want 1)")

    offset = MIN_HEADER_LEN
    if header.has_optional_fields:
        if len(data) < EXT_HEADER_LEN:
            raise GTPDecodeError(f"GTP-U extended header too short: {len(data)} bytes")
        (
            header.sequence_number,
            header.npdu_number,
            header.next_ext_header,
        ) = _OPTIONAL.unpack_from(data, MIN_HEADER_LEN)
        offset = EXT_HEADER_LEN

    payload_len = length - (offset - MIN_HEADER_LEN)
    if payload_len < 0 or offset + payload_len > len(data):
        raise GTPDecodeError(
            f"GTP-U payload length mismatch: header says {payload_len} bytes, "
            f"got {len(data) - offset}"
        )
    return Packet(header=header, payload=data[offset : offset + payload_len])


def new_gpdu(teid: int, inner_packet: bytes) -> Packet:
    """Build a G-PDU carrying an inner IP packet."""
    return Packet(
        header=Header(message_type=MSG_TYPE_GPDU, teid=teid),
        payload=bytes(inner_packet),
    )


def new_echo_request(seq_num: int) -> Packet:
    """Build an Echo Request with a sequence number and a Recovery octet."""
    return Packet(
        header=Header(
            message_type=MSG_TYPE_ECHO_REQUEST,
            teid=0,
            seq_num_flag=True,
            sequence_number=seq_num,
        ),
        payload=b"\x00",
    )


def new_echo_response(seq_num: int) -> Packet:
    """Build an Echo Response carrying a Recovery IE."""
    return Packet(
        header=Header(
            message_type=MSG_TYPE_ECHO_RESPONSE,
            teid=0,
            seq_num_flag=True,
            sequence_number=seq_num,
        ),
        payload=b"\x0e\x01\x00",
    )