"""
Labels for clarity.
"""

from typing import Literal

Symbol = str  # one character of the alphabet, ex. "3"
Code = str  # a full sequence of symbols, ex. "1234"
GameStatus = Literal["active", "won", "lost"]
ErrorCode = Literal["not_found", "invalid_guess", "game_finished", "unauthorized", "internal_error"]
