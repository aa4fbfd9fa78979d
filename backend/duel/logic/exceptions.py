"""Typed domain exceptions for rejected room actions.

Every rejection raised by the room state machine or the session layer is a
subclass of DuelError. Each subclass carries a stable ErrorCode and the HTTP
status the server maps it to, so the transport layer converts them in one
place. Failures are raised before any new state is built, so catching one
never leaves a half-applied transition behind.
"""

from http import HTTPStatus

from duel.logic.enums import ErrorCode


class DuelError(Exception):
    """Base exception for rejected actions."""

    code: ErrorCode = ErrorCode.VALIDATION_ERROR
    status: HTTPStatus = HTTPStatus.BAD_REQUEST


class UnauthorizedError(DuelError):
    """Bearer credential is missing or invalid."""

    code = ErrorCode.UNAUTHORIZED
    status = HTTPStatus.UNAUTHORIZED


class NotFoundError(DuelError):
    """Room or profile does not exist."""

    code = ErrorCode.NOT_FOUND
    status = HTTPStatus.NOT_FOUND


class ForbiddenError(DuelError):
    """Actor is not a participant of the room, or the room password is wrong."""

    code = ErrorCode.FORBIDDEN
    status = HTTPStatus.FORBIDDEN


class RoomFullError(DuelError):
    code = ErrorCode.ROOM_FULL
    status = HTTPStatus.CONFLICT


class AlreadyJoinedError(DuelError):
    code = ErrorCode.ALREADY_JOINED
    status = HTTPStatus.CONFLICT


class GameNotInProgressError(DuelError):
    code = ErrorCode.GAME_NOT_IN_PROGRESS
    status = HTTPStatus.CONFLICT


class NotYourTurnError(DuelError):
    code = ErrorCode.NOT_YOUR_TURN
    status = HTTPStatus.CONFLICT


class InvalidGuessLengthError(DuelError):
    """Secret or guess does not have exactly digit_count digits."""

    code = ErrorCode.INVALID_GUESS_LENGTH
    status = HTTPStatus.BAD_REQUEST


class TurnNotExpiredError(DuelError):
    code = ErrorCode.TURN_NOT_EXPIRED
    status = HTTPStatus.CONFLICT


class SecretAlreadySetError(DuelError):
    """A player's secret number is set once and never replaced."""

    code = ErrorCode.SECRET_ALREADY_SET
    status = HTTPStatus.CONFLICT


class InvalidRequestError(DuelError):
    """Request body is not JSON, or does not match the endpoint's schema."""

    code = ErrorCode.VALIDATION_ERROR
    status = HTTPStatus.UNPROCESSABLE_ENTITY
