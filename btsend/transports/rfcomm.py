"""RFCOMM serial-port transport implementation using Python sockets."""

from __future__ import annotations

import logging
import socket
from contextlib import closing

from btsend.core.errors import (
    TransportConnectError,
    TransportSendError,
    TransportTimeoutError,
)

LINE_END = b"\r"
MAX_REPLY_BYTES = 1024
LOGGER = logging.getLogger(__name__)


def normalize_address(address: str) -> str:
    """BlueZ expects colon-separated upper-case addresses."""
    return address.replace("-", ":").upper()


def _open_socket() -> socket.socket:
    try:
        family = socket.AF_BLUETOOTH
        proto = socket.BTPROTO_RFCOMM
    except AttributeError as exc:
        raise TransportConnectError(
            "This Python build does not expose Bluetooth socket APIs (AF_BLUETOOTH/BTPROTO_RFCOMM)."
        ) from exc
    try:
        return socket.socket(family, socket.SOCK_STREAM, proto)
    except OSError as exc:
        raise TransportConnectError(f"Could not create RFCOMM socket: {exc}") from exc


def _read_reply(port: socket.socket) -> bytes | None:
    """Collect a reply up to the first CR; a silent device yields ``None``."""
    reply = bytearray()
    while LINE_END not in reply and len(reply) < MAX_REPLY_BYTES:
        try:
            chunk = port.recv(MAX_REPLY_BYTES - len(reply))
        except TimeoutError:
            break
        except OSError as exc:
            raise TransportSendError(f"RFCOMM receive failed: {exc}") from exc
        if not chunk:
            break
        reply += chunk
    return bytes(reply) or None


class RFCOMMTransport:
    def send(
        self,
        address: str,
        payload: bytes,
        *,
        channel: int = 1,
        timeout_s: float = 3.0,
    ) -> bytes | None:
        mac = normalize_address(address)
        with closing(_open_socket()) as port:
            port.settimeout(timeout_s)
            try:
                port.connect((mac, channel))
            except TimeoutError as exc:
                raise TransportTimeoutError(f"RFCOMM connect timed out for {mac} on channel {channel}") from exc
            except OSError as exc:
                raise TransportConnectError(f"RFCOMM connect failed for {mac} on channel {channel}: {exc}") from exc

            try:
                port.sendall(payload)
            except OSError as exc:
                raise TransportSendError(f"RFCOMM send failed: {exc}") from exc
            LOGGER.debug("Wrote %d byte(s) to %s", len(payload), mac)
            return _read_reply(port)
