"""
Testing in-memory store
- Create games, make guesses, and check status/attempts/history, ownership, etc.
"""

import threading

import pytest

from codebreaker.store import (
    GameFinishedError,
    GameNotFoundError,
    GameStore,
    InvalidGuessError,
    to_public_game,
)


def test_store_create_starts_active(store):
    game = store.create("alice")

    assert game.id == 1
    assert game.status == "active"
    assert game.attempts_used == 0
    assert game.guesses == ()
    assert game.code_length == 4
    assert game.max_attempts == 10
    assert game.symbols == ("1", "2", "3", "4", "5", "6")
    assert game.revealed_code is None
    assert game.created_at == game.updated_at


def test_store_ids_are_sequential(store):
    ids = [store.create("alice").id for _ in range(3)]
    ids.append(store.create("bob").id)
    assert ids == [1, 2, 3, 4]


def test_store_guess_then_win(store):
    game = store.create("alice")

    result = store.guess(game.id, "alice", "1243")
    assert result.attempt_number == 1
    assert (result.hint.exact, result.hint.color_only) == (2, 2)
    assert result.status_after_guess == "active"
    assert result.remaining_attempts == 9

    result = store.guess(game.id, "alice", "1234")
    assert result.attempt_number == 2
    assert result.status_after_guess == "won"

    won = store.get(game.id, "alice")
    assert won.status == "won"
    assert won.attempts_used == len(won.guesses) == 2
    assert [g.attempt_number for g in won.guesses] == [1, 2]
    # winning never reveals the secret through the view
    assert won.revealed_code is None
    assert won.updated_at == won.guesses[-1].created_at


def test_store_loses_after_max_attempts(store):
    game = store.create("alice")

    for attempt in range(1, 11):
        result = store.guess(game.id, "alice", "5555")
        assert result.attempt_number == attempt
        view = store.get(game.id, "alice")
        assert view.attempts_used == len(view.guesses) == attempt

    assert result.status_after_guess == "lost"
    assert result.remaining_attempts == 0

    lost = store.get(game.id, "alice")
    assert lost.status == "lost"
    assert lost.revealed_code == "1234"


def test_store_win_on_last_attempt(store):
    game = store.create("alice")
    for _ in range(9):
        store.guess(game.id, "alice", "5555")

    result = store.guess(game.id, "alice", "1234")
    assert result.status_after_guess == "won"
    assert result.remaining_attempts == 0


@pytest.mark.parametrize("final_guess", ["1234", "5555"])
def test_store_finished_game_rejects_guesses(store, final_guess):
    game = store.create("alice")
    if final_guess == "1234":
        store.guess(game.id, "alice", final_guess)
    else:
        for _ in range(10):
            store.guess(game.id, "alice", final_guess)
    before = store.get(game.id, "alice")

    with pytest.raises(GameFinishedError) as excinfo:
        store.guess(game.id, "alice", "1234")
    assert excinfo.value.code == "game_finished"
    assert excinfo.value.status_code == 409

    after = store.get(game.id, "alice")
    assert after.attempts_used == before.attempts_used
    assert after.status == before.status


@pytest.mark.parametrize("bad_guess", ["99", "12345", "123", "1237", "abcd", "", 1234, None])
def test_store_invalid_guess_changes_nothing(store, bad_guess):
    game = store.create("alice")

    with pytest.raises(InvalidGuessError) as excinfo:
        store.guess(game.id, "alice", bad_guess)
    assert excinfo.value.code == "invalid_guess"
    assert excinfo.value.status_code == 422

    after = store.get(game.id, "alice")
    assert after.attempts_used == 0
    assert after.updated_at == game.updated_at


def test_store_invalid_guess_on_finished_game_is_invalid(store):
    # shape is checked before the terminal state
    game = store.create("alice")
    store.guess(game.id, "alice", "1234")
    with pytest.raises(InvalidGuessError):
        store.guess(game.id, "alice", "99")


def test_store_other_owner_looks_missing(store):
    game = store.create("alice")

    assert store.get(game.id, "bob") is None
    assert store.get(999, "alice") is None

    with pytest.raises(GameNotFoundError) as wrong_owner:
        store.guess(game.id, "bob", "1234")
    with pytest.raises(GameNotFoundError) as missing:
        store.guess(999, "alice", "1234")
    assert str(wrong_owner.value) == str(missing.value)
    assert wrong_owner.value.code == missing.value.code == "not_found"

    # bob's attempt did not touch alice's game
    assert store.get(game.id, "alice").attempts_used == 0


def test_store_not_found_checked_before_guess_shape(store):
    with pytest.raises(GameNotFoundError):
        store.guess(42, "alice", "99")


def test_public_view_is_recomputed_per_read(store):
    game = store.create("alice")
    first = store.get(game.id, "alice")
    for _ in range(10):
        store.guess(game.id, "alice", "6666")
    second = store.get(game.id, "alice")

    assert first.revealed_code is None
    assert first.attempts_used == 0
    assert second.revealed_code == "1234"


def test_to_public_game_hides_secret_unless_lost(store):
    store.create("alice")
    record = store._games[1]

    assert to_public_game(record).revealed_code is None
    record.status = "won"
    assert to_public_game(record).revealed_code is None
    record.status = "lost"
    assert to_public_game(record).revealed_code == record.secret


def test_store_uses_secret_factory(rules):
    calls = []

    def factory(r):
        calls.append(r)
        return "6666"

    store = GameStore(rules=rules, secret_factory=factory)
    game = store.create("alice")
    assert calls == [rules]
    assert store.guess(game.id, "alice", "6666").status_after_guess == "won"


def test_concurrent_guesses_get_unique_attempt_numbers(store):
    game = store.create("alice")
    results = []
    errors = []
    start = threading.Barrier(15)

    def worker():
        start.wait()
        try:
            results.append(store.guess(game.id, "alice", "5555"))
        except GameFinishedError as exc:
            errors.append(exc)

    threads = [threading.Thread(target=worker) for _ in range(15)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    # exactly max_attempts accepted, the rest bounced off the finished game
    assert sorted(r.attempt_number for r in results) == list(range(1, 11))
    assert len(errors) == 5
    final = store.get(game.id, "alice")
    assert final.attempts_used == 10
    assert final.status == "lost"


def test_concurrent_creates_get_unique_ids(store):
    ids = []
    lock = threading.Lock()

    def worker():
        for _ in range(20):
            game_id = store.create("alice").id
            with lock:
                ids.append(game_id)

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(ids) == list(range(1, 101))
