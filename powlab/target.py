"""Helper module with difficulty target algorithms"""
import math

import powlab.mining_params as mining_params


def coerce_difficulty(value) -> int:
    """Converts whatever the caller typed into a difficulty within the allowed range

    Non-numeric values fall back to the default difficulty, numbers are floored.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return mining_params.DEFAULT_DIFFICULTY
    if math.isnan(number):
        return mining_params.DEFAULT_DIFFICULTY
    if math.isinf(number):
        return (
            mining_params.MAX_DIFFICULTY if number > 0 else mining_params.MIN_DIFFICULTY
        )
    difficulty = math.floor(number)
    return max(
        mining_params.MIN_DIFFICULTY, min(mining_params.MAX_DIFFICULTY, difficulty)
    )


def meets_target(hash: str, difficulty: int) -> bool:
    """True when the first `difficulty` characters of the hash are all '0'

    No clamping happens here, a non-positive difficulty is an empty requirement and
    a difficulty longer than the hash can never be met.
    """
    if difficulty <= 0:
        return True
    if difficulty > len(hash):
        return False
    return hash[:difficulty] == "0" * difficulty


class Target:
    def __init__(self, difficulty=mining_params.DEFAULT_DIFFICULTY):
        self.difficulty = coerce_difficulty(difficulty)

    def meets(self, hash: str) -> bool:
        return meets_target(hash, self.difficulty)

    def prefix(self):
        return "0" * self.difficulty

    def pattern(self):
        """Regular expression shown to the user, e.g. ^0{3}.*"""
        return "^0{%d}.*" % self.difficulty

    def expected_attempts(self):
        """Attempts needed on average, every hex digit is '0' with probability 1/16"""
        return 16**self.difficulty

    def progress(self, attempt_count: int) -> float:
        """Heuristic coverage of the expected search space, always within [0, 1)"""
        expected = self.expected_attempts()
        return (attempt_count % expected) / expected

    def __str__(self):
        return "{}(diff={}, pattern={})".format(
            type(self).__name__,
            self.difficulty,
            self.pattern(),
        )
