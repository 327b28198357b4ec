"""Closed variant tags for every entity family.

Kept apart from entities.py so that configuration (spawn tables) can name
variants without importing entity classes.
"""

from enum import Enum


class EnemyKind(Enum):
    """Enemy variants. Motion and fallback visuals live in ENEMY_BEHAVIORS."""
    GROUND = "ground"
    FLYING = "flying"
    GROUND_2 = "ground_2"
    STAGE2_GROUND = "stage2_ground"


class BlockKind(Enum):
    SOLID = "solid"
    BREAKABLE = "breakable"


class ItemKind(Enum):
    HEALTH = "health"
    INVINCIBILITY = "invincibility"
    SHOOT_ABILITY = "shoot_ability"
    STAGE_CLEAR = "stage_clear"


class HorizontalIntent:
    """Level-triggered horizontal input values."""
    LEFT = -1
    NONE = 0
    RIGHT = 1

    VALUES = (LEFT, NONE, RIGHT)
