"""GTP-U tunnel endpoint: a UDP socket that routes received G-PDUs by TEID."""

from __future__ import annotations

import logging
import socket
import threading
from typing import Callable, Dict, Optional, Tuple

from .gtp_packet import (
    MSG_TYPE_ECHO_REQUEST,
    MSG_TYPE_ECHO_RESPONSE,
    MSG_TYPE_END_MARKER,
    MSG_TYPE_GPDU,
    GTPDecodeError,
    decode,
    encode,
    new_echo_request,
    new_echo_response,
    new_gpdu,
)

logger = logging.getLogger(__name__)

Address = Tuple[str, int]
CaptureFunc = Callable[[str, bytes], None]
HandlerFunc = Callable[[int, Address, bytes], None]
EchoHandlerFunc = Callable[[Address, int], None]

_POLL_INTERVAL = 0.2


class Tunnel:
    """A GTP-U UDP endpoint multiplexing incoming G-PDUs to TEID handlers.

    ``capture``, when set, is called with ``("tx" | "rx", raw_bytes)``.
    """

    def __init__(self, port: int) -> None:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.bind(("0.0.0.0", port))
        except OSError:
            sock.close()
            raise
        sock.settimeout(_POLL_INTERVAL)
        self._sock = sock
        self._lock = threading.RLock()
        self._handlers: Dict[int, HandlerFunc] = {}
        self._default_handler: Optional[HandlerFunc] = None
        self._echo_handler: Optional[EchoHandlerFunc] = None
        self._next_teid = 1
        self._closed = threading.Event()
        self.capture: Optional[CaptureFunc] = None
        logger.info("GTP-U tunnel listening on %s:%d", *self.local_addr())

    def local_addr(self) -> Address:
        """Return the bound (host, port) of this endpoint."""
        return self._sock.getsockname()

    def allocate_teid(self) -> int:
        """Reserve and return the next TEID (sequential, starting at 1)."""
        with self._lock:
            teid = self._next_teid
            self._next_teid += 1
            return teid

    def register_teid(self, teid: int, handler: HandlerFunc) -> None:
        """Route G-PDUs carrying ``teid`` to ``handler``."""
        with self._lock:
            self._handlers[teid] = handler
        logger.debug("registered TEID 0x%08X", teid)

    def deregister_teid(self, teid: int) -> None:
        """Remove the handler for ``teid``, if any."""
        with self._lock:
            self._handlers.pop(teid, None)

    def register_default_handler(self, handler: HandlerFunc) -> None:
        """Set the fallback handler for G-PDUs with unregistered TEIDs."""
        with self._lock:
            self._default_handler = handler

    def set_echo_handler(self, handler: EchoHandlerFunc) -> None:
        """Handle Echo Requests; without one they are answered automatically."""
        with self._lock:
            self._echo_handler = handler

    def send_gpdu(self, remote: Address, teid: int, inner_packet: bytes) -> None:
        """Encapsulate ``inner_packet`` in a G-PDU and send it to ``remote``."""
        data = encode(new_gpdu(teid, inner_packet))
        self._sock.sendto(data, remote)
        if self.capture is not None:
            self.capture("tx", data)

    def send_echo_request(self, remote: Address, seq_num: int) -> None:
        """Send an Echo Request for path verification."""
        self._sock.sendto(encode(new_echo_request(seq_num)), remote)

    def serve(self) -> None:
        """Receive and dispatch packets until the tunnel is closed."""
        while not self._closed.is_set():
            try:
                data, src = self._sock.recvfrom(65535)
            except socket.timeout:
                continue
            except OSError as exc:
                logger.info("GTP-U receive loop exiting: %s", exc)
                return
            if self.capture is not None:
                self.capture("rx", data)
            threading.Thread(
                target=self._dispatch, args=(src, data), daemon=True
            ).start()

    def _dispatch(self, src: Address, data: bytes) -> None:
        try:
            packet = decode(data)
        except GTPDecodeError as exc:
            logger.warning("GTP-U decode error from %s: %s", src, exc)
            return

        header = packet.header
        if header.message_type == MSG_TYPE_GPDU:
            with self._lock:
                handler = self._handlers.get(header.teid) or self._default_handler
            if handler is None:
                logger.warning(
                    "no handler for TEID 0x%08X (from %s)", header.teid, src
                )
                return
            handler(header.teid, src, packet.payload)
        elif header.message_type == MSG_TYPE_ECHO_REQUEST:
            logger.info("Echo Request from %s seq=%d", src, header.sequence_number)
            with self._lock:
                echo_handler = self._echo_handler
            if echo_handler is not None:
                echo_handler(src, header.sequence_number)
            else:
                self._auto_echo_response(src, header.sequence_number)
        elif header.message_type == MSG_TYPE_ECHO_RESPONSE:
            logger.info("Echo Response from %s seq=%d", src, header.sequence_number)
        elif header.message_type == MSG_TYPE_END_MARKER:
            logger.info("End Marker from %s TEID=0x%08X", src, header.teid)
        else:
            logger.warning(
                "unhandled message type 0x%02X from %s", header.message_type, src
            )

    def _auto_echo_response(self, src: Address, seq_num: int) -> None:
        try:
            self._sock.sendto(encode(new_echo_response(seq_num)), src)
        except OSError as exc:
            logger.warning("echo response to %s failed: %s", src, exc)
            return
        logger.info("Echo Response sent to %s seq=%d", src, seq_num)

    def close(self) -> None:
        """Close the socket; a running ``serve`` loop then returns."""
        self._closed.set()
        self._sock.close()

    def __enter__(self) -> "Tunnel":
        return self

    def __exit__(self, *args) -> None:
        self.close()