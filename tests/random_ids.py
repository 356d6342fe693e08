from __future__ import annotations

from random import Random

# Deterministic pseudo-random generator so tests are reproducible while
# avoiding hard-coded customer identifiers.
_rng = Random(0xEA5EE2023)

_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ0123456789"


def _rand_charger_id() -> str:
    """Return a charger id shaped like the ones the API hands out."""
    return "EH" + "".join(_rng.choice(_ALPHABET) for _ in range(6))


def _rand_pin() -> str:
    return str(_rng.randrange(1000, 9999))


# Public constants consumed across tests.
RANDOM_CHARGER_ID: str = _rand_charger_id()
RANDOM_CHARGER_ID_ALT: str = _rand_charger_id()
RANDOM_PIN: str = _rand_pin()


def generate_charger_id() -> str:
    """Return an additional pseudo-random charger id when tests need more."""
    return _rand_charger_id()
