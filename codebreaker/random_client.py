"""
Secret generation.
- generate_secret: local cryptographically secure draws (the default)
- fetch_code: ask random.org for the draws; if anything goes wrong (no internet,
  timeout, bad response) fall back to generate_secret so the game still works.
"""

import logging
import secrets
from typing import Callable, Dict, List

import requests

from .config import GameRules, RANDOM_ORG_TIMEOUT
from .types import Code

logger = logging.getLogger(__name__)

RANDOM_URL = "https://www.random.org/integers/"

SecretFactory = Callable[[GameRules], Code]


def generate_secret(rules: GameRules) -> Code:
    # Independent uniform draws with replacement; duplicates are fine
    return "".join(secrets.choice(rules.symbols) for _ in range(rules.code_length))


def _parse_random_org(body: str, rules: GameRules) -> List[int]:
    # The body looks like:
    #   3\n1\n6\n2\n
    values = [int(line) for line in body.splitlines() if line.strip() != ""]
    if len(values) != rules.code_length:
        raise ValueError(f"random.org returned {len(values)} values, expected {rules.code_length}.")
    for value in values:
        if value < 1 or value > len(rules.symbols):
            raise ValueError(f"random.org number {value} out of range 1..{len(rules.symbols)}.")
    return values


def fetch_code(rules: GameRules) -> Code:
    params = {
        "num": rules.code_length,
        "min": 1,
        "max": len(rules.symbols),
        "col": 1,
        "base": 10,
        "format": "plain",
        "rnd": "new",
    }
    try:
        response = requests.get(RANDOM_URL, params=params, timeout=RANDOM_ORG_TIMEOUT)
        response.raise_for_status()
        values = _parse_random_org(response.text, rules)
    except (requests.RequestException, ValueError) as exc:
        logger.warning("random.org unavailable (%s); using local secure random", exc)
        return generate_secret(rules)

    # random.org numbers are 1-based positions in the alphabet
    return "".join(rules.symbols[value - 1] for value in values)


SECRET_SOURCES: Dict[str, SecretFactory] = {
    "local": generate_secret,
    "random_org": fetch_code,
}


def get_secret_factory(source: str) -> SecretFactory:
    try:
        return SECRET_SOURCES[source]
    except KeyError:
        raise ValueError(
            f"Unknown secret source {source!r}; expected one of {sorted(SECRET_SOURCES)}."
        ) from None
