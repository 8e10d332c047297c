"""
Constants for the Dominion game.

This module defines the game constants used throughout the Dominion implementation,
including card types, turn phases, pile sizes, and game end conditions.
"""
from enum import Enum, auto
from typing import Dict, Final, List


class CardType(Enum):
    """Enum representing the type tags a card can carry."""
    ACTION = auto()
    TREASURE = auto()
    VICTORY = auto()
    CURSE = auto()
    ATTACK = auto()
    REACTION = auto()


class Phase(Enum):
    """
    Enum representing the decision point a game is at.

    ACTION, BUY and CLEANUP are turn phases. PENDING_DECISION is reported
    whenever a card effect is waiting on a player's choice.
    """
    ACTION = auto()
    BUY = auto()
    CLEANUP = auto()
    PENDING_DECISION = auto()


class DecisionKind(Enum):
    """Enum representing the shape of a pending decision."""
    DISCARD = auto()
    TRASH = auto()
    GAIN = auto()
    REVEAL_REACTION = auto()


class GainDestination(Enum):
    """Where a gained card goes."""
    DISCARD = auto()
    HAND = auto()


# Player limits
MIN_PLAYERS: Final[int] = 2
MAX_PLAYERS: Final[int] = 4

# Hand and deck setup
PLAYER_HAND_SIZE: Final[int] = 5
STARTING_COPPERS: Final[int] = 7
STARTING_ESTATES: Final[int] = 3

# Supply sizes
KINGDOM_PILE_SIZE: Final[int] = 10
TOTAL_COPPERS: Final[int] = 60
SILVER_PILE_SIZE: Final[int] = 40
GOLD_PILE_SIZE: Final[int] = 30
CURSES_PER_OPPONENT: Final[int] = 10

# Victory pile size based on player count
VICTORY_PILE_SIZE_BY_PLAYERS: Final[Dict[int, int]] = {
    2: 8,
    3: 12,
    4: 12,
}

# Game end conditions
EMPTY_PILES_FOR_GAME_END: Final[int] = 3

# Militia
MILITIA_HAND_SIZE: Final[int] = 3

# Kingdom used by every game (the recommended "First Game" set)
KINGDOM_CARD_NAMES: Final[List[str]] = [
    "Cellar",
    "Market",
    "Merchant",
    "Militia",
    "Mine",
    "Moat",
    "Remodel",
    "Smithy",
    "Village",
    "Workshop",
]

# AI and simulation settings
DEFAULT_MCTS_ITERATIONS: Final[int] = 1000
DEFAULT_MCTS_EXPLORATION: Final[float] = 1.4142135623730951  # sqrt(2)
DEFAULT_MAX_ROLLOUT_TURNS: Final[int] = 200
