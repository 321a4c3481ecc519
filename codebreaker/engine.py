"""
Pure game logic (no HTTP, no storage).
We compute two feedback numbers for each guess:
- exact: how many positions hold the right symbol in the right place
- color_only: how many more symbols are right but sit in the wrong place,
  counted with multiplicity and never double counting an exact match

Duplicates are allowed in both the secret and the guess.
"""

from collections import Counter
from dataclasses import dataclass

from .config import GameRules
from .types import Code, GameStatus


@dataclass(frozen=True)
class Hint:
    exact: int
    color_only: int


def score_guess(secret: Code, guess: Code) -> Hint:
    """
    Example:
      secret = "1123"
      guess  = "1111"
      exact      = 2  (both 1s in the secret line up)
      color_only = 0  (the spare 1s in the guess have nothing left to match)

    The caller checks the guess shape first; lengths are assumed equal.
    """
    exact = 0
    secret_left: Counter = Counter()
    guess_left: Counter = Counter()

    # 1. Exact matches; everything else goes into the leftover counts
    for secret_symbol, guess_symbol in zip(secret, guess):
        if secret_symbol == guess_symbol:
            exact += 1
        else:
            secret_left[secret_symbol] += 1
            guess_left[guess_symbol] += 1

    # 2. Overlap of the leftovers is the sum of the smaller count per symbol
    color_only = sum((secret_left & guess_left).values())

    return Hint(exact=exact, color_only=color_only)


def is_valid_guess(guess: object, rules: GameRules) -> bool:
    """A guess is exactly code_length symbols, each one from the alphabet."""
    if not isinstance(guess, str) or len(guess) != rules.code_length:
        return False
    return all(symbol in rules.symbols for symbol in guess)


def is_win(hint: Hint, rules: GameRules) -> bool:
    return hint.exact == rules.code_length


def resolve_status(hint: Hint, attempt_number: int, rules: GameRules) -> GameStatus:
    # A winning guess on the last attempt is still a win
    if is_win(hint, rules):
        return "won"
    if attempt_number >= rules.max_attempts:
        return "lost"
    return "active"
