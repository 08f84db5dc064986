"""ConnectionHub — subscriber registry and fan-out for live connections.

Every connection owns a bounded outbound queue drained by its own writer task,
so ``publish`` and ``send_to`` never await a socket. A slow peer fills its own
queue and is dropped; a failing peer is dropped by its writer. Neither case is
visible to the command that triggered the broadcast.

A connection receives broadcasts only once it is bound to a session (register,
login, or any command carrying a valid session token). Direct replies via
``send_to`` go out regardless, in the same queue, so a client always sees its
replies and broadcasts in the order they were produced.
"""

import asyncio
import logging
import uuid
from collections.abc import Awaitable, Callable

from pydantic import BaseModel

logger = logging.getLogger(__name__)

# Typically ``websocket.send_text``.
Sink = Callable[[str], Awaitable[None]]


def _encode(message: BaseModel) -> str:
    return message.model_dump_json(by_alias=True)


class Connection:
    """One live client: identity (once bound) plus its outbound queue and writer."""

    def __init__(
        self,
        connection_id: str,
        sink: Sink,
        queue_size: int,
        on_dead: Callable[[str], None],
    ) -> None:
        self.id = connection_id
        self.session_token: str | None = None
        self.user_id: str | None = None
        self.username: str | None = None
        self.closed = False
        self._sink = sink
        self._on_dead = on_dead
        self._queue: asyncio.Queue[str] = asyncio.Queue(maxsize=queue_size)
        self._writer: asyncio.Task[None] | None = None

    @property
    def is_bound(self) -> bool:
        return self.session_token is not None

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def start(self) -> None:
        self._writer = asyncio.create_task(self._drain(), name=f"ws-writer-{self.id}")

    def offer(self, frame: str) -> bool:
        """Enqueue without blocking. False when closed or the queue is full."""
        if self.closed:
            return False
        try:
            self._queue.put_nowait(frame)
        except asyncio.QueueFull:
            return False
        return True

    async def join(self) -> None:
        """Wait until every queued frame has been handed to the sink."""
        await self._queue.join()

    def abort(self) -> None:
        """Stop the writer and discard anything still queued."""
        self.closed = True
        writer = self._writer
        if writer is not None and not writer.done() and writer is not asyncio.current_task():
            writer.cancel()
        self._discard_pending()

    async def _drain(self) -> None:
        while True:
            frame = await self._queue.get()
            try:
                await self._sink(frame)
            except Exception as e:
                self._queue.task_done()
                logger.warning("Send failed on conn=%s, dropping: %s", self.id, e)
                self._on_dead(self.id)
                return
            self._queue.task_done()

    def _discard_pending(self) -> None:
        while True:
            try:
                self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            self._queue.task_done()


class ConnectionHub:
    def __init__(self, queue_size: int = 256) -> None:
        if queue_size <= 0:
            raise ValueError(f"queue_size must be positive, got {queue_size}")
        self._queue_size = queue_size
        self._connections: dict[str, Connection] = {}
        self.stats = {
            "active_connections": 0,
            "total_connections": 0,
            "frames_enqueued": 0,
            "dropped_connections": 0,
        }

    def __len__(self) -> int:
        return len(self._connections)

    def register(self, sink: Sink) -> Connection:
        """Add a connection and start its writer. Must run inside the event loop."""
        connection = Connection(self._new_connection_id(), sink, self._queue_size, self._drop)
        self._connections[connection.id] = connection
        connection.start()
        self.stats["total_connections"] += 1
        self.stats["active_connections"] = len(self._connections)
        logger.info("Connection %s opened. Active connections: %d", connection.id, len(self))
        return connection

    def get(self, connection_id: str) -> Connection | None:
        return self._connections.get(connection_id)

    def bind(self, connection_id: str, session_token: str, user_id: str, username: str) -> None:
        """Attach a session to a connection; it starts receiving broadcasts."""
        connection = self._connections.get(connection_id)
        if connection is None:
            return
        connection.session_token = session_token
        connection.user_id = user_id
        connection.username = username

    def unregister(self, connection_id: str) -> Connection | None:
        connection = self._connections.pop(connection_id, None)
        if connection is None:
            return None
        connection.abort()
        self.stats["active_connections"] = len(self._connections)
        logger.info("Connection %s closed. Active connections: %d", connection_id, len(self))
        return connection

    def send_to(self, connection_id: str, message: BaseModel) -> bool:
        """Reply to one connection, bound or not."""
        connection = self._connections.get(connection_id)
        if connection is None:
            return False
        return self._offer(connection, _encode(message))

    def publish(self, message: BaseModel, exclude: str | None = None) -> int:
        """Fan out to every bound connection except ``exclude``. Returns how many got it."""
        frame = _encode(message)
        delivered = 0
        for connection in list(self._connections.values()):
            if connection.id == exclude or not connection.is_bound:
                continue
            if self._offer(connection, frame):
                delivered += 1
        return delivered

    async def flush(self) -> None:
        """Wait until all live connections have written their queued frames."""
        await asyncio.gather(*(c.join() for c in list(self._connections.values())))

    def close_all(self) -> None:
        for connection_id in list(self._connections):
            self.unregister(connection_id)

    def _new_connection_id(self) -> str:
        """Short id for logs; regenerated on the rare clash with a live connection."""
        connection_id = uuid.uuid4().hex[:8]
        while connection_id in self._connections:
            connection_id = uuid.uuid4().hex[:8]
        return connection_id

    def _offer(self, connection: Connection, frame: str) -> bool:
        if connection.offer(frame):
            self.stats["frames_enqueued"] += 1
            return True
        if not connection.closed:
            logger.warning(
                "Outbound queue full on conn=%s (%d frames), dropping",
                connection.id,
                connection.pending,
            )
            self._drop(connection.id)
        return False

    def _drop(self, connection_id: str) -> None:
        if self.unregister(connection_id) is not None:
            self.stats["dropped_connections"] += 1
