"""
Realtime Relay

Socket.IO server carrying the widget's text channel: chat messages and
mood check-ins. Voice does not flow through here; the browser talks to
the OpenAI Realtime API directly with an ephemeral session token.

Lifecycle of a connection:
1. Handshake: the JWT from `auth.token` (or an `Authorization: Bearer`
   header) is verified. Failure refuses the connection with
   "Authentication error" before any handler can run.
2. Accepted: a Connection is registered, joined to the `user_<id>`
   channel and sent a one-time `welcome`.
3. Events: `chat_message` and `mood_update` are answered to the
   originating sid only; nothing is ever broadcast across users.
4. Disconnect: pending scheduled emissions are cancelled and the channel
   membership is released.
"""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Set, Union

import socketio
from durmah.core.errors import AuthenticationError
from durmah.core.logging import get_relay_logger
from durmah.core.security import TokenVerifier, extract_bearer_token
from durmah.schemas.relay import ChatMessageIn, create_message_event
from durmah.services.mood import get_mood_response
from socketio import exceptions as sio_exceptions

relay_log = get_relay_logger(__name__)

WELCOME_MESSAGE = "Welcome to Durmah! 🦅"
CHAT_ACK_MESSAGE = "I received your message!"
CHAT_FAILURE_MESSAGE = "Failed to process message"
AUTH_FAILURE_MESSAGE = "Authentication error"

CHANNEL_PREFIX = "user_"


# ==============================================================================
# Data Classes
# ==============================================================================


class ConnectionState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


@dataclass
class Connection:
    """An authenticated socket, owned by the relay's ConnectionRegistry."""

    sid: str
    user_id: str
    channel: str
    connected_at: float = field(default_factory=time.time)
    state: ConnectionState = ConnectionState.OPEN
    pending_tasks: Set[asyncio.Task] = field(default_factory=set)

    @property
    def is_open(self) -> bool:
        return self.state == ConnectionState.OPEN

    def track(self, task: asyncio.Task) -> asyncio.Task:
        """Tie a scheduled task to this connection's lifetime."""
        self.pending_tasks.add(task)
        task.add_done_callback(self.pending_tasks.discard)
        return task

    def close(self) -> int:
        """Mark closed and cancel pending tasks; returns how many were cancelled."""
        self.state = ConnectionState.CLOSED
        cancelled = 0
        for task in list(self.pending_tasks):
            if not task.done():
                task.cancel()
                cancelled += 1
        return cancelled


class ConnectionRegistry:
    """
    Live connections keyed by sid, plus channel -> member sids.

    All mutations happen on the event loop thread and never span an
    await, so each add/remove is atomic with respect to other handlers.
    """

    def __init__(self):
        self._connections: Dict[str, Connection] = {}
        self._channels: Dict[str, Set[str]] = {}

    def add(self, connection: Connection) -> None:
        self._connections[connection.sid] = connection
        self._channels.setdefault(connection.channel, set()).add(connection.sid)

    def remove(self, sid: str) -> Optional[Connection]:
        connection = self._connections.pop(sid, None)
        if connection is None:
            return None
        members = self._channels.get(connection.channel)
        if members is not None:
            members.discard(sid)
            if not members:
                del self._channels[connection.channel]
        return connection

    def get(self, sid: str) -> Optional[Connection]:
        return self._connections.get(sid)

    def members(self, channel: str) -> FrozenSet[str]:
        return frozenset(self._channels.get(channel, ()))

    def connections(self):
        return list(self._connections.values())

    @property
    def channel_count(self) -> int:
        return len(self._channels)

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, sid: object) -> bool:
        return sid in self._connections


# ==============================================================================
# Relay Server
# ==============================================================================


def channel_for(user_id: str) -> str:
    """Channel shared by every connection of one user (multi-tab, server push)."""
    return f"{CHANNEL_PREFIX}{user_id}"


class RelayServer:
    """
    Authenticated Socket.IO event router.

    Args:
        verifier: Credential verifier (injected so tests can swap the secret)
        chat_ack_delay: Seconds before the canned chat acknowledgment
        cors_allowed_origins: Passed to the Socket.IO server
        sio: Optional pre-built AsyncServer (tests pass a mock)
        registry: Optional ConnectionRegistry
    """

    def __init__(
        self,
        verifier: TokenVerifier,
        *,
        chat_ack_delay: float = 1.0,
        cors_allowed_origins: Union[str, list] = "*",
        sio: Optional[socketio.AsyncServer] = None,
        registry: Optional[ConnectionRegistry] = None,
    ):
        self.verifier = verifier
        self.chat_ack_delay = chat_ack_delay
        self.registry = registry if registry is not None else ConnectionRegistry()
        self.sio = sio or socketio.AsyncServer(
            async_mode="asgi",
            cors_allowed_origins=cors_allowed_origins,
            logger=False,
            engineio_logger=False,
        )
        self._register_handlers()

    def _register_handlers(self) -> None:
        self.sio.on("connect", self.on_connect)
        self.sio.on("chat_message", self.on_chat_message)
        self.sio.on("mood_update", self.on_mood_update)
        self.sio.on("disconnect", self.on_disconnect)

    # -------------------------------------------------------------------------
    # Handshake / lifecycle
    # -------------------------------------------------------------------------

    @staticmethod
    def extract_token(environ: Optional[Dict[str, Any]], auth: Any) -> Optional[str]:
        """Credential from `auth.token`, else from the handshake Authorization header."""
        if isinstance(auth, dict):
            token = auth.get("token")
            if isinstance(token, str) and token:
                return token
        return extract_bearer_token((environ or {}).get("HTTP_AUTHORIZATION"))

    async def on_connect(self, sid: str, environ: Dict[str, Any], auth: Any = None):
        try:
            claims = self.verifier.verify(self.extract_token(environ, auth))
        except AuthenticationError as e:
            relay_log.refused(sid, reason=str(e))
            raise sio_exceptions.ConnectionRefusedError(AUTH_FAILURE_MESSAGE) from e

        connection = Connection(sid=sid, user_id=claims.user_id, channel=channel_for(claims.user_id))
        self.registry.add(connection)
        await self.sio.enter_room(sid, connection.channel)
        relay_log.connected(sid=sid, user_id=connection.user_id, channel=connection.channel)

        # The connect packet goes out once this handler returns; welcome must follow it
        connection.track(asyncio.create_task(self._send_welcome(connection)))

    async def on_disconnect(self, sid: str, reason: Any = None):
        connection = self.registry.remove(sid)
        if connection is None:
            return
        cancelled = connection.close()
        await self.sio.leave_room(sid, connection.channel)
        relay_log.disconnected(
            sid=sid,
            user_id=connection.user_id,
            duration_ms=(time.time() - connection.connected_at) * 1000,
            cancelled_tasks=cancelled,
            reason=str(reason) if reason is not None else None,
        )

    async def shutdown(self) -> None:
        """Cancel every pending emission; called on application shutdown."""
        for connection in self.registry.connections():
            connection.close()

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    async def on_chat_message(self, sid: str, data: Any = None):
        connection = self.registry.get(sid)
        if connection is None:
            relay_log.error("relay_event_unauthenticated", sid=sid, event_name="chat_message")
            return

        try:
            message = ChatMessageIn.model_validate(data).message
            relay_log.event("chat_message", sid=sid, user_id=connection.user_id, message_length=len(message))

            await self._emit("typing", True, sid)
            connection.track(asyncio.create_task(self._acknowledge_chat(connection)))
        except Exception as e:
            relay_log.exception("relay_chat_message_failed", sid=sid, user_id=connection.user_id, error=str(e))
            await self._report_failure(connection)

    async def on_mood_update(self, sid: str, mood: Any = None):
        connection = self.registry.get(sid)
        if connection is None:
            relay_log.error("relay_event_unauthenticated", sid=sid, event_name="mood_update")
            return

        relay_log.event("mood_update", sid=sid, user_id=connection.user_id, mood=mood if isinstance(mood, str) else None)
        await self._emit("mood_response", create_message_event(get_mood_response(mood)), sid)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _emit(self, event: str, data: Any, sid: str) -> None:
        await self.sio.emit(event, data, to=sid)

    async def _report_failure(self, connection: Connection) -> None:
        """Tell the client its event failed; a dead socket only gets logged."""
        if not connection.is_open:
            return
        try:
            await self._emit("error", CHAT_FAILURE_MESSAGE, connection.sid)
        except Exception as e:
            relay_log.error("relay_error_emit_failed", sid=connection.sid, user_id=connection.user_id, error=str(e))

    async def _send_welcome(self, connection: Connection) -> None:
        if not connection.is_open:
            return
        try:
            await self._emit("welcome", create_message_event(WELCOME_MESSAGE), connection.sid)
        except Exception as e:
            relay_log.exception("relay_welcome_failed", sid=connection.sid, user_id=connection.user_id, error=str(e))

    async def _acknowledge_chat(self, connection: Connection) -> None:
        await asyncio.sleep(self.chat_ack_delay)
        if not connection.is_open:
            return
        try:
            await self._emit("typing", False, connection.sid)
            await self._emit("response", create_message_event(CHAT_ACK_MESSAGE), connection.sid)
        except Exception as e:
            relay_log.exception("relay_chat_ack_failed", sid=connection.sid, user_id=connection.user_id, error=str(e))
            await self._report_failure(connection)
