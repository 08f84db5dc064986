"""CommandDispatcher — one WebSocket frame in, replies and broadcasts out.

Replies (registered, loggedIn, state, error) go to the originating connection
only. Broadcast events are published by the service itself. An error never
closes the connection; the client may retry immediately.
"""

import logging
from collections.abc import Awaitable, Callable

from pydantic import BaseModel

from src.pari_broadcast.hub import ConnectionHub
from src.pari_common.errors import AppError, InternalError
from src.pari_exchange.schemas import ErrorMessage
from src.pari_exchange.service import ExchangeService
from src.pari_gateway.middleware.request_log import CommandTimer
from src.pari_gateway.schemas import (
    CommandModel,
    CreateMarketCommand,
    GetStateCommand,
    LoginCommand,
    PlaceBetCommand,
    RegisterCommand,
    ResolveMarketCommand,
    SendMessageCommand,
    parse_command,
)

logger = logging.getLogger(__name__)

Handler = Callable[[str, CommandModel], Awaitable[BaseModel | None]]


class CommandDispatcher:
    def __init__(self, service: ExchangeService, hub: ConnectionHub) -> None:
        self._service = service
        self._hub = hub
        self._handlers: dict[str, Handler] = {
            "register": self._register,
            "login": self._login,
            "createMarket": self._create_market,
            "placeBet": self._place_bet,
            "resolveMarket": self._resolve_market,
            "sendMessage": self._send_message,
            "getState": self._get_state,
        }

    async def dispatch(self, connection_id: str, raw: str) -> None:
        timer = CommandTimer(connection_id)
        try:
            command = parse_command(raw)
            timer.command_type = command.type  # type: ignore[attr-defined]
            reply = await self._handlers[timer.command_type](connection_id, command)
            if reply is not None:
                self._hub.send_to(connection_id, reply)
        except AppError as exc:
            timer.outcome = exc.error_name
            self._hub.send_to(connection_id, ErrorMessage.from_error(exc))
        except Exception:
            logger.exception("Unhandled error in [%s] conn=%s", timer.command_type, connection_id)
            internal = InternalError()
            timer.outcome = internal.error_name
            self._hub.send_to(connection_id, ErrorMessage.from_error(internal))
        finally:
            timer.done()

    async def _register(self, connection_id: str, command: CommandModel) -> BaseModel:
        assert isinstance(command, RegisterCommand)
        return await self._service.register(
            command.username, command.invite_code, connection_id=connection_id
        )

    async def _login(self, connection_id: str, command: CommandModel) -> BaseModel:
        assert isinstance(command, LoginCommand)
        return await self._service.login(command.username, connection_id=connection_id)

    async def _create_market(self, connection_id: str, command: CommandModel) -> None:
        assert isinstance(command, CreateMarketCommand)
        await self._service.create_market(
            command.session_id,
            command.question,
            close_date=command.close_date,
            connection_id=connection_id,
        )

    async def _place_bet(self, connection_id: str, command: CommandModel) -> None:
        assert isinstance(command, PlaceBetCommand)
        await self._service.place_bet(
            command.session_id,
            command.market_id,
            command.side,
            command.amount,
            connection_id=connection_id,
        )

    async def _resolve_market(self, connection_id: str, command: CommandModel) -> None:
        assert isinstance(command, ResolveMarketCommand)
        await self._service.resolve_market(
            command.session_id,
            command.market_id,
            command.outcome,
            connection_id=connection_id,
        )

    async def _send_message(self, connection_id: str, command: CommandModel) -> None:
        assert isinstance(command, SendMessageCommand)
        await self._service.send_message(
            command.session_id, command.message, connection_id=connection_id
        )

    async def _get_state(self, connection_id: str, command: CommandModel) -> BaseModel:
        assert isinstance(command, GetStateCommand)
        return await self._service.get_state(command.session_id, connection_id=connection_id)
