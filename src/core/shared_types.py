"""
Type definitions used across layers
"""

from enum import StrEnum


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


# --- Choices offered by the comment form. NOT enforced at storage: any free text is accepted for these columns.
class TacticalIdea(StrEnum):
    ATTACK = "attack"
    DEFENSE = "defense"
    FORK = "fork"
    PIN = "pin"
    SKEWER = "skewer"
    DISCOVERY = "discovery"
    DOUBLE_ATTACK = "doubleAttack"
    SACRIFICE = "sacrifice"
    PROMOTION = "promotion"
    ZUGZWANG = "zugzwang"
    TEMPO = "tempo"
    ENDGAME = "endgame"
    OPENING = "opening"
    MIDDLEGAME = "middlegame"
    OTHER = "other"


# Rating range offered by the form (1-10). Also a hint only.
RATING_RANGE = (1, 10)
