"""
Pydantic models for the HTTP layer.
- Field names are snake_case in Python and camelCase on the wire.
- from_attributes lets routes build responses straight from the store's dataclasses.
"""

from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .types import ErrorCode, GameStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# 1. Feedback pair for one guess
class HintOut(CamelModel):
    exact: int = Field(..., description="Right symbol in the right position")
    color_only: int = Field(..., description="Right symbol in the wrong position")


# 2. One entry of the guess history
class GuessEntryOut(CamelModel):
    attempt_number: int = Field(..., description="1-based attempt number")
    guess: str = Field(..., description="The submitted guess")
    hint: HintOut
    created_at: datetime = Field(..., description="When the guess was accepted")


# 3. Public view of a game; the secret only shows up once the game is lost
class GameOut(CamelModel):
    id: int = Field(..., description="Sequential game id")
    status: GameStatus = Field(..., description="Current state of the game")
    code_length: int
    symbols: List[str] = Field(..., description="Allowed symbols, in order")
    max_attempts: int
    attempts_used: int
    guesses: List[GuessEntryOut] = Field(..., description="All guesses so far, oldest first")
    created_at: datetime
    updated_at: datetime
    revealed_code: Optional[str] = Field(None, description="The secret, present only when the game is lost")


# 4. Guess submission. Shape is checked by the store so every message comes from one place.
class GuessRequest(CamelModel):
    guess: Any = Field("", description="Exactly codeLength symbols, ex. '1234'")

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"guess": "1234"},
                {"guess": "6611"},
            ]
        }
    )


# 5. Result of an accepted guess
class GuessResultOut(CamelModel):
    game_id: int
    attempt_number: int
    guess: str
    hint: HintOut
    status_after_guess: GameStatus
    remaining_attempts: int = Field(..., description="Guesses left after this one")


class ErrorOut(BaseModel):
    code: ErrorCode
    message: str


class HealthOut(BaseModel):
    status: Literal["ok"] = "ok"
