"""Global enums — values are the exact strings used on the wire."""

from enum import Enum


class Side(str, Enum):
    YES = "yes"
    NO = "no"


class MarketStatus(str, Enum):
    OPEN = "OPEN"
    RESOLVED = "RESOLVED"


class LedgerEntryType(str, Enum):
    STARTING_BALANCE = "STARTING_BALANCE"
    BET_DEBIT = "BET_DEBIT"
    SETTLEMENT_PAYOUT = "SETTLEMENT_PAYOUT"


class ClientMessageType(str, Enum):
    REGISTER = "register"
    LOGIN = "login"
    CREATE_MARKET = "createMarket"
    PLACE_BET = "placeBet"
    RESOLVE_MARKET = "resolveMarket"
    SEND_MESSAGE = "sendMessage"
    GET_STATE = "getState"


class ServerMessageType(str, Enum):
    REGISTERED = "registered"
    LOGGED_IN = "loggedIn"
    ERROR = "error"
    STATE = "state"
    MARKET_CREATED = "marketCreated"
    BET_PLACED = "betPlaced"
    MARKET_RESOLVED = "marketResolved"
    CHAT_MESSAGE = "chatMessage"
    USER_JOINED = "userJoined"
    USER_LEFT = "userLeft"
