"""
Game codes for the create/join flow.

Codes are generated locally and never registered anywhere: joining with any non-empty code simply starts a local board.
"""

import random
import string

from src.core.exceptions import InvalidRequestError

GAME_CODE_ALPHABET = string.ascii_uppercase + string.digits
GAME_CODE_LENGTH = 6


def generate_game_code(rng: random.Random | None = None) -> str:
    """Random code of 6 characters from A-Z0-9"""
    rng = rng or random.Random()
    return "".join(rng.choice(GAME_CODE_ALPHABET) for _ in range(GAME_CODE_LENGTH))


def normalize_game_code(code: str) -> str:
    """Codes are typed in by hand: ignore surrounding whitespace and case. Only characters a generated code can hold."""
    normalized = code.strip().upper()
    if not normalized:
        raise InvalidRequestError("Game code cannot be empty.")
    if not set(normalized) <= set(GAME_CODE_ALPHABET):
        raise InvalidRequestError(
            f"Game code {code!r} may only contain letters A-Z and digits 0-9."
        )
    return normalized
