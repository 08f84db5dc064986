"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Session/Identity
  2xxx: Ledger
  3xxx: Market
  9xxx: Protocol/System

Every error is reported only to the connection that sent the command, as an
``error`` frame carrying ``code``, ``error`` (the stable name below) and
``message``. None of them is fatal for the connection.
"""

from src.pari_common.cents import cents_to_display


class AppError(Exception):
    """Base application error."""

    error_name = "AppError"

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(message)


# --- 1xxx: Session/Identity ---

class SessionInvalidError(AppError):
    error_name = "SessionInvalid"

    def __init__(self) -> None:
        super().__init__(1001, "Invalid session")


class InvalidInviteError(AppError):
    error_name = "InvalidInvite"

    def __init__(self) -> None:
        super().__init__(1002, "Invalid invite code")


class UsernameTakenError(AppError):
    error_name = "UsernameTaken"

    def __init__(self, username: str) -> None:
        super().__init__(1003, f"Username already taken: {username}")


class UserNotFoundError(AppError):
    error_name = "UserNotFound"

    def __init__(self, username: str) -> None:
        super().__init__(1004, f"User not found: {username}. Please register first.")


# --- 2xxx: Ledger ---

class InsufficientBalanceError(AppError):
    error_name = "InsufficientBalance"

    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {cents_to_display(required)} tokens, "
            f"available {cents_to_display(available)} tokens",
        )


class InvalidAmountError(AppError):
    error_name = "InvalidAmount"

    def __init__(self, amount: object) -> None:
        super().__init__(
            2002, f"Invalid amount: {amount!r}. Bets must be a positive whole number of tokens"
        )


class AccountNotFoundError(AppError):
    error_name = "AccountNotFound"

    def __init__(self, user_id: str) -> None:
        super().__init__(2003, f"Account not found: {user_id}")


# --- 3xxx: Market ---

class MarketNotFoundError(AppError):
    error_name = "MarketNotFound"

    def __init__(self, market_id: str) -> None:
        super().__init__(3001, f"Market not found: {market_id}")


class MarketResolvedError(AppError):
    error_name = "MarketResolved"

    def __init__(self, market_id: str) -> None:
        super().__init__(3002, f"Market already resolved: {market_id}")


class NotCreatorError(AppError):
    error_name = "NotCreator"

    def __init__(self) -> None:
        super().__init__(3003, "Only the market creator can resolve")


class InvalidOutcomeError(AppError):
    error_name = "InvalidOutcome"

    def __init__(self, outcome: object) -> None:
        super().__init__(3004, f"Invalid outcome: {outcome!r}. Expected 'yes' or 'no'")


# --- 9xxx: Protocol/System ---

class InvalidInputError(AppError):
    error_name = "InvalidInput"

    def __init__(self, detail: str) -> None:
        super().__init__(9001, detail)


class MalformedMessageError(AppError):
    error_name = "MalformedMessage"

    def __init__(self, detail: str = "Invalid message format") -> None:
        super().__init__(9002, detail)


class InternalError(AppError):
    error_name = "Internal"

    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9099, detail)
