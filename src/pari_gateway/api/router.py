"""WebSocket endpoint: one persistent duplex connection per client.

Each text frame is one JSON command (see pari_gateway.schemas). The runtime
is read from ``app.state.exchange``, set up by the application lifespan.
"""

import logging

from fastapi import APIRouter, WebSocket, status
from starlette.websockets import WebSocketState

from src.pari_gateway.runtime import ExchangeRuntime

logger = logging.getLogger(__name__)

router = APIRouter(tags=["exchange"])


@router.websocket("/ws")
async def exchange_socket(websocket: WebSocket) -> None:
    runtime: ExchangeRuntime = websocket.app.state.exchange
    await websocket.accept()
    connection = runtime.hub.register(websocket.send_text)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            raw = message.get("text")
            if raw is None:
                raw = (message.get("bytes") or b"").decode("utf-8", errors="replace")
            await runtime.dispatcher.dispatch(connection.id, raw)

            if runtime.hub.get(connection.id) is None:
                # Dropped by the hub (too slow or send failed).
                if websocket.client_state == WebSocketState.CONNECTED:
                    await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
                break
    finally:
        runtime.service.disconnect(connection)
        logger.debug("Socket loop for conn=%s finished", connection.id)
