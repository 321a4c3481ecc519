"""
In-memory store
Holds every game for the life of the process and enforces the rules:
- sequential ids, never reused
- games are only visible to the owner that created them
- one guess at a time per game; finished games take no more guesses
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional, Tuple

from .config import GAME_RULES, GameRules
from .engine import Hint, is_valid_guess, resolve_status, score_guess
from .random_client import SecretFactory, generate_secret
from .types import Code, ErrorCode, GameStatus, Symbol

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class GameStoreError(Exception):
    """A caller-side problem with a stable code and the HTTP status it maps to."""

    code: ErrorCode = "internal_error"
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class GameNotFoundError(GameStoreError):
    code = "not_found"
    status_code = 404

    def __init__(self) -> None:
        # Same message whether the game is missing or belongs to someone else
        super().__init__("Game not found.")


class InvalidGuessError(GameStoreError):
    code = "invalid_guess"
    status_code = 422


class GameFinishedError(GameStoreError):
    code = "game_finished"
    status_code = 409

    def __init__(self) -> None:
        super().__init__("Game is already finished.")


@dataclass(frozen=True)
class GuessEntry:
    attempt_number: int
    guess: Code
    hint: Hint
    created_at: datetime


@dataclass(frozen=True)
class GameView:
    """What a reader is allowed to see; revealed_code is set only for lost games."""

    id: int
    status: GameStatus
    code_length: int
    symbols: Tuple[Symbol, ...]
    max_attempts: int
    attempts_used: int
    guesses: Tuple[GuessEntry, ...]
    created_at: datetime
    updated_at: datetime
    revealed_code: Optional[Code] = None


@dataclass(frozen=True)
class GuessResult:
    game_id: int
    attempt_number: int
    guess: Code
    hint: Hint
    status_after_guess: GameStatus
    remaining_attempts: int


@dataclass
class GameRecord:
    id: int
    owner_id: str
    secret: Code
    rules: GameRules
    created_at: datetime
    updated_at: datetime
    status: GameStatus = "active"
    guesses: List[GuessEntry] = field(default_factory=list)
    lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    @property
    def attempts_used(self) -> int:
        return len(self.guesses)


def to_public_game(record: GameRecord) -> GameView:
    """Project a record to its public view. Call on every read, never cache."""
    view = GameView(
        id=record.id,
        status=record.status,
        code_length=record.rules.code_length,
        symbols=record.rules.symbols,
        max_attempts=record.rules.max_attempts,
        attempts_used=record.attempts_used,
        guesses=tuple(record.guesses),
        created_at=record.created_at,
        updated_at=record.updated_at,
    )
    if record.status == "lost":
        return replace(view, revealed_code=record.secret)
    return view


class GameStore:
    def __init__(
        self,
        rules: GameRules = GAME_RULES,
        secret_factory: SecretFactory = generate_secret,
    ) -> None:
        self.rules = rules
        self._secret_factory = secret_factory
        self._games: Dict[int, GameRecord] = {}
        self._next_id = 1
        # Guards _games and _next_id; each record has its own lock for guesses
        self._lock = Lock()

    def create(self, owner_id: str) -> GameView:
        # Draw the secret outside the registry lock; it may hit the network
        secret = self._secret_factory(self.rules)
        with self._lock:
            game_id = self._next_id
            self._next_id += 1
            now = _now()
            record = GameRecord(
                id=game_id,
                owner_id=owner_id,
                secret=secret,
                rules=self.rules,
                created_at=now,
                updated_at=now,
            )
            view = to_public_game(record)
            self._games[game_id] = record

        logger.info("created game %d for owner %r", game_id, owner_id)
        return view

    def _find(self, game_id: int, owner_id: str) -> Optional[GameRecord]:
        with self._lock:
            record = self._games.get(game_id)
        if record is None or record.owner_id != owner_id:
            return None
        return record

    def get(self, game_id: int, owner_id: str) -> Optional[GameView]:
        record = self._find(game_id, owner_id)
        if record is None:
            return None
        with record.lock:
            return to_public_game(record)

    def guess(self, game_id: int, owner_id: str, raw_guess: object) -> GuessResult:
        record = self._find(game_id, owner_id)
        if record is None:
            raise GameNotFoundError()

        rules = record.rules
        if not is_valid_guess(raw_guess, rules):
            raise InvalidGuessError(
                f"Guess must be exactly {rules.code_length} symbols from {''.join(rules.symbols)!r}."
            )

        with record.lock:
            if record.status != "active":
                raise GameFinishedError()

            # Every check passed; from here on the record changes
            attempt_number = record.attempts_used + 1
            hint = score_guess(record.secret, raw_guess)
            created_at = _now()
            record.guesses.append(
                GuessEntry(attempt_number=attempt_number, guess=raw_guess, hint=hint, created_at=created_at)
            )
            record.status = resolve_status(hint, attempt_number, rules)
            record.updated_at = created_at
            status = record.status

        logger.debug(
            "game %d attempt %d: exact=%d color_only=%d",
            game_id, attempt_number, hint.exact, hint.color_only,
        )
        if status != "active":
            logger.info("game %d finished: %s after %d attempt(s)", game_id, status, attempt_number)

        return GuessResult(
            game_id=game_id,
            attempt_number=attempt_number,
            guess=raw_guess,
            hint=hint,
            status_after_guess=status,
            remaining_attempts=max(rules.max_attempts - attempt_number, 0),
        )
