"""Pydantic client->server command schemas.

Parsing only checks shape: that the frame is a JSON object with a known
``type`` and correctly typed fields. Anything else is a MalformedMessageError.
Missing text fields default to "" and a missing ``sessionId`` to None so the
service reports them with the proper error (InvalidInput, SessionInvalid) in
its documented check order. ``amount`` and ``closeDate`` are passed through
uncoerced for the same reason: lax parsing would turn ``true`` into 1 and
``"10"`` into 10.
"""

import json
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from src.pari_common.enums import ClientMessageType
from src.pari_common.errors import MalformedMessageError


class CommandModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class RegisterCommand(CommandModel):
    type: Literal["register"]
    username: str = ""
    invite_code: str = ""


class LoginCommand(CommandModel):
    type: Literal["login"]
    username: str = ""


class CreateMarketCommand(CommandModel):
    type: Literal["createMarket"]
    session_id: str | None = None
    question: str = ""
    close_date: Any = None  # epoch ms, validated by the service


class PlaceBetCommand(CommandModel):
    type: Literal["placeBet"]
    session_id: str | None = None
    market_id: str = ""
    side: str = ""
    amount: Any = 0  # validated by the service


class ResolveMarketCommand(CommandModel):
    type: Literal["resolveMarket"]
    session_id: str | None = None
    market_id: str = ""
    outcome: str = ""


class SendMessageCommand(CommandModel):
    type: Literal["sendMessage"]
    session_id: str | None = None
    message: str = ""


class GetStateCommand(CommandModel):
    type: Literal["getState"]
    session_id: str | None = None


Command = Annotated[
    RegisterCommand
    | LoginCommand
    | CreateMarketCommand
    | PlaceBetCommand
    | ResolveMarketCommand
    | SendMessageCommand
    | GetStateCommand,
    Field(discriminator="type"),
]

_COMMAND_ADAPTER: TypeAdapter[Command] = TypeAdapter(Command)
_KNOWN_TYPES = frozenset(t.value for t in ClientMessageType)


def parse_command(raw: str) -> CommandModel:
    """Decode one frame into a command model.

    Raises:
        MalformedMessageError: not JSON, not an object, unknown ``type``, or a
            field of the wrong type.
    """
    try:
        payload = json.loads(raw)
    except ValueError:
        raise MalformedMessageError("Invalid message format") from None
    if not isinstance(payload, dict):
        raise MalformedMessageError("Invalid message format")

    message_type = payload.get("type")
    if not isinstance(message_type, str) or message_type not in _KNOWN_TYPES:
        raise MalformedMessageError("Unknown message type")

    try:
        return _COMMAND_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        fields = ", ".join(
            ".".join(str(part) for part in err["loc"][1:]) or "message"
            for err in exc.errors()
        )
        raise MalformedMessageError(f"Invalid {message_type} message: bad field(s) {fields}") from None
