"""Wire shape of server events.

Every outbound message is a flat map with a `type` field and camelCase
payload fields. None values are kept: they are meaningful on the wire
(separators in a revealed hand, no winner on deck exhaustion).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from okey.logic.events import GameEvent, ServiceEvent


def event_payload(event: GameEvent) -> dict[str, Any]:
    return event.model_dump(by_alias=True, mode="json")


def service_event_payload(event: ServiceEvent) -> dict[str, Any]:
    """Return the wire-format dict for a ServiceEvent payload."""
    return event_payload(event.data)
