import pytest

from duel.logic.exceptions import InvalidGuessLengthError
from duel.logic.scoring import Score, is_winning, score


class TestScore:
    def test_exact_match_scores_all_positions(self):
        assert score("1234", "1234") == Score(correct_position=4, correct_digit=0)

    def test_swapped_digits_count_as_misplaced(self):
        assert score("1243", "1234") == Score(correct_position=2, correct_digit=2)

    def test_no_common_digits(self):
        assert score("5678", "1234") == Score(correct_position=0, correct_digit=0)

    def test_repeated_guess_digit_consumes_secret_digit_once(self):
        assert score("1111", "1234") == Score(correct_position=1, correct_digit=0)

    def test_exact_matches_take_priority_over_misplaced(self):
        # '1' at index 0 and 1 both match in place; nothing left for the other '1's
        assert score("1111", "1123") == Score(correct_position=2, correct_digit=0)

    def test_all_digits_misplaced(self):
        assert score("1122", "2211") == Score(correct_position=0, correct_digit=4)

    def test_misplaced_scan_skips_consumed_secret_positions(self):
        assert score("1123", "3111") == Score(correct_position=1, correct_digit=2)

    @pytest.mark.parametrize(
        ("guess", "secret"),
        [
            ("000", "000"),
            ("0012", "1200"),
            ("98765432", "23456789"),
            ("55555", "15551"),
            ("121", "212"),
        ],
    )
    def test_feedback_never_exceeds_length(self, guess, secret):
        result = score(guess, secret)
        assert 0 <= result.correct_position + result.correct_digit <= len(secret)

    @pytest.mark.parametrize("secret", ["123", "0000", "98765432"])
    def test_secret_against_itself_is_all_in_place(self, secret):
        assert score(secret, secret) == Score(len(secret), 0)

    def test_length_mismatch_raises(self):
        with pytest.raises(InvalidGuessLengthError, match="exactly 4 digits"):
            score("123", "1234")


class TestIsWinning:
    def test_all_in_place_wins(self):
        assert is_winning(Score(4, 0), 4)

    def test_partial_does_not_win(self):
        assert not is_winning(Score(3, 1), 4)
