"""ChatLog — bounded, append-only chat history."""

from collections import deque
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ChatMessage:
    username: str
    message: str
    created_at: datetime


class ChatLog:
    """Keeps the most recent ``capacity`` messages; older ones fall off silently."""

    def __init__(self, capacity: int = 100) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._messages: deque[ChatMessage] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._messages)

    @property
    def capacity(self) -> int:
        return self._messages.maxlen or 0

    def append(self, username: str, message: str, created_at: datetime) -> ChatMessage:
        chat_message = ChatMessage(username=username, message=message, created_at=created_at)
        self._messages.append(chat_message)
        return chat_message

    def recent(self, limit: int) -> list[ChatMessage]:
        """Up to ``limit`` newest messages, oldest first."""
        if limit <= 0:
            return []
        return list(self._messages)[-limit:]
