"""Per-UE GTP-U session state for the gNB's UE-facing relay.

Uplink packets from UEs are matched to sessions by the UE's UDP source
address. A session registered at N2 time has no UE address yet; it is
claimed by the first plausible IPv4 uplink from an unseen UDP source.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

Address = Tuple[str, int]


def plausible_ue_ipv4(packet: bytes) -> bool:
    """True if ``packet`` looks like IPv4 sent by a UE.

    Rejects short packets, non-IPv4, and sources in 0.0.0.0/8,
    multicast 224.0.0.0/4 and above (including broadcast).
    """
    if len(packet) < 20:
        return False
    if packet[0] >> 4 != 4:
        return False
    first = packet[12]
    return not (first == 0 or first >= 224)


@dataclass(eq=False)
class UETunnelSession:
    """GTP-U state of one PDU session relayed by the gNB."""

    ran_ue_ngap_id: int
    ul_teid: int = 0
    dl_teid: int = 0
    upf_addr: Optional[Address] = None
    ue_ip: str = ""
    ue_src_addr: Optional[Address] = None
    upf_tunnel: Any = None


class SessionTable:
    """Thread-safe set of relay sessions keyed by RAN UE NGAP ID."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._sessions: Dict[int, UETunnelSession] = {}

    def register(self, session: UETunnelSession) -> None:
        """Add ``session``, replacing any with the same RAN UE NGAP ID."""
        with self._lock:
            self._sessions[session.ran_ue_ngap_id] = session
        logger.info(
            "session registered: RAN-UE-NGAP-ID=%d UL-TEID=0x%08X DL-TEID=0x%08X UPF=%s",
            session.ran_ue_ngap_id,
            session.ul_teid,
            session.dl_teid,
            session.upf_addr,
        )

    def resolve_for_uplink(self, udp_src: Address, inner_src_ip: str) -> Optional[UETunnelSession]:
        """Find the session bound to ``udp_src``, claiming an unbound one if needed.

        Returns None when no session matches and none is free.
        """
        udp_src = tuple(udp_src)
        with self._lock:
            for session in self._sessions.values():
                if session.ue_src_addr is not None and tuple(session.ue_src_addr) == udp_src:
                    if not session.ue_ip:
                        session.ue_ip = inner_src_ip
                    return session
            for session in self._sessions.values():
                if session.ue_src_addr is None:
                    session.ue_src_addr = udp_src
                    session.ue_ip = inner_src_ip
                    logger.info(
                        "bound RAN-UE-NGAP-ID=%d to UDP src %s (UE IP %s)",
                        session.ran_ue_ngap_id,
                        udp_src,
                        inner_src_ip,
                    )
                    return session
        return None

    def lookup_by_dl_teid(self, teid: int) -> Optional[UETunnelSession]:
        """Return the session whose DL TEID is ``teid``, or None."""
        with self._lock:
            for session in self._sessions.values():
                if session.dl_teid == teid:
                    return session
        return None

    def ue_return_address(self, session: UETunnelSession) -> Optional[Address]:
        """Read a session's UE return address under the table lock."""
        with self._lock:
            return session.ue_src_addr

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)