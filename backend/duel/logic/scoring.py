"""
Guess feedback scoring.

Two passes over the digits: exact matches first, then value matches at other
positions. A secret digit is consumed by at most one guess digit, so
correct_position + correct_digit never exceeds the secret length.
"""

from typing import NamedTuple

from duel.logic.exceptions import InvalidGuessLengthError


class Score(NamedTuple):
    correct_position: int
    correct_digit: int


def score(guess: str, secret: str) -> Score:
    if len(guess) != len(secret):
        raise InvalidGuessLengthError(f"guess must be exactly {len(secret)} digits")

    used_secret = [False] * len(secret)
    used_guess = [False] * len(guess)

    correct_position = 0
    for i, (g, s) in enumerate(zip(guess, secret, strict=True)):
        if g == s:
            correct_position += 1
            used_secret[i] = True
            used_guess[i] = True

    correct_digit = 0
    for i, g in enumerate(guess):
        if used_guess[i]:
            continue
        for j, s in enumerate(secret):
            if not used_secret[j] and g == s:
                correct_digit += 1
                used_secret[j] = True
                break

    return Score(correct_position, correct_digit)


def is_winning(result: Score, digit_count: int) -> bool:
    return result.correct_position == digit_count
