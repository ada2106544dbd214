from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import Any

if TYPE_CHECKING:  # import for type checking only
    import socketio


@dataclass(frozen=True)
class Broadcaster:
    """Emits to every connection on ``namespace`` except ``sid``."""

    server: socketio.AsyncServer
    sid: str
    namespace: str

    async def emit(self, event: str, payload: Any) -> None:
        await self.server.emit(
            event,
            payload,
            namespace=self.namespace,
            skip_sid=self.sid,
        )


@dataclass(frozen=True)
class Connection:
    """The capability a handler gets for the peer that sent the event."""

    sid: str
    namespace: str
    broadcast: Broadcaster

    @classmethod
    def for_sid(
        cls,
        server: socketio.AsyncServer,
        sid: str,
        namespace: str,
    ) -> Connection:
        return cls(
            sid=sid,
            namespace=namespace,
            broadcast=Broadcaster(server=server, sid=sid, namespace=namespace),
        )
