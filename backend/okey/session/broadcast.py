"""Shared send utility for delivering one message to several connections."""

import contextlib
from collections.abc import Iterable
from typing import Any

from okey.messaging.protocol import ConnectionProtocol


async def send_to_connections(
    connections: Iterable[ConnectionProtocol],
    message: dict[str, Any],
) -> None:
    """Send a message to every connection, ignoring ones that already went away.

    The iterable is snapshotted via list() so a concurrent disconnect that
    mutates the source collection does not break the loop.
    """
    for connection in list(connections):
        with contextlib.suppress(RuntimeError, OSError, ConnectionError):
            await connection.send_message(message)
