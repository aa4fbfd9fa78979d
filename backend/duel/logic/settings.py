"""Centralized timing and room rules."""

from pydantic import BaseModel, ConfigDict

MIN_DIGITS = 3
MAX_DIGITS = 8
DEFAULT_DIGITS = 4
MAX_PLAYERS = 2


class TimingSettings(BaseModel):
    """
    Durations that drive turn windows and room cleanup.

    Defaults match production behavior; tests shrink or shift them freely.
    """

    model_config = ConfigDict(frozen=True)

    # --- Turn window ---
    turn_seconds: float = 30

    # --- Inactivity thresholds before the sweeper deletes a room ---
    waiting_ttl_seconds: float = 5 * 60
    playing_ttl_seconds: float = 10 * 60
    finished_ttl_seconds: float = 30

    # --- How long before deletion clients start showing a warning ---
    waiting_warning_seconds: float = 30
    playing_warning_seconds: float = 30
    finished_warning_seconds: float = 15


def clamp_digit_count(digit_count: int | None) -> int:
    """Return digit_count if it lies within [MIN_DIGITS, MAX_DIGITS], else the default."""
    if digit_count is None or not (MIN_DIGITS <= digit_count <= MAX_DIGITS):
        return DEFAULT_DIGITS
    return digit_count
