"""NAS mobility-management transport helpers used by the AMF.

Session-management messages cannot travel on their own: the AMF wraps them
in a DL NAS Transport (MM) message as an N1 SM container, with the PDU
session ID carried in a trailing IE.
"""

from __future__ import annotations

from typing import Iterable

EPD_5GS_MOBILITY_MANAGEMENT = 0x7E
SECURITY_HEADER_TYPE_PLAIN = 0x00
MSG_TYPE_UL_NAS_TRANSPORT = 0x67
MSG_TYPE_DL_NAS_TRANSPORT = 0x68
PAYLOAD_CONTAINER_N1_SM_INFO = 0x01
IEI_PDU_SESSION_ID = 0x12

DEFAULT_DNN = "internet"

_MAX_CONTAINER_LEN = 0xFFFF


def build_dl_nas_transport_mm(pdu_session_id: int, sm_payload: bytes) -> bytes:
    """Wrap an SM message in a DL NAS Transport carrying an N1 SM container.

    Layout: EPD, security header, message type 0x68, container type 0x01,
    two-octet big-endian container length, the container, then the PDU
    Session ID IE (IEI 0x12 followed by the session ID).
    """
    if not 0 <= pdu_session_id <= 0xFF:
        raise ValueError(f"PDU session ID {pdu_session_id} does not fit in one octet")
    payload = bytes(sm_payload)
    if len(payload) > _MAX_CONTAINER_LEN:
        raise ValueError(
            f"SM payload of {len(payload)} bytes exceeds the "
            f"{_MAX_CONTAINER_LEN}-byte container limit"
        )
    header = bytes(
        (
            EPD_5GS_MOBILITY_MANAGEMENT,
            SECURITY_HEADER_TYPE_PLAIN,
            MSG_TYPE_DL_NAS_TRANSPORT,
            PAYLOAD_CONTAINER_N1_SM_INFO,
        )
    )
    return (
        header
        + len(payload).to_bytes(2, "big")
        + payload
        + bytes((IEI_PDU_SESSION_ID, pdu_session_id))
    )


def resolve_dnn(requested_dnn: str) -> str:
    """Return the requested DNN, or the default one when none was requested."""
    return requested_dnn or DEFAULT_DNN


def dnn_allowed(dnn: str, allowed_dnns: Iterable[str]) -> bool:
    """True if ``dnn`` may be used; an empty allow-list permits any DNN."""
    allowed = list(allowed_dnns)
    return not allowed or dnn in allowed