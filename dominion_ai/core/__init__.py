"""
Dominion AI Core Package

This package contains the rules engine for Dominion, including:
- Game state representation and the effect queue
- Game rules and mechanics
- Player moves and legal-move generation
- Card catalog and supply setup
- Constants, enums and errors

All core components can be imported directly from this package.
"""

# Game and game state
from dominion_ai.core.game import (
    Game, GameState, GameResult, PendingDecision,
    new_game, legal_moves, apply_move, is_terminal, score
)

# Player
from dominion_ai.core.player import PlayerState

# Cards
from dominion_ai.core.cards import (
    Card, CardEffect, EffectKind,
    ALL_CARDS, BASE_CARDS, KINGDOM_CARDS,
    get_card, standard_supply, starting_deck
)

# Moves
from dominion_ai.core.moves import (
    Move, MoveType,
    PlayAction, PlayTreasure, Buy, EndPhase,
    DiscardChoice, TrashChoice, GainChoice, RevealReaction,
    get_all_legal_moves, move_from_dict
)

# Constants
from dominion_ai.core.constants import (
    CardType, Phase, DecisionKind, GainDestination,
    PLAYER_HAND_SIZE, MIN_PLAYERS, MAX_PLAYERS
)

# Errors
from dominion_ai.core.errors import DominionError, IllegalMoveError, InvariantViolation

__all__ = [
    # Game
    'Game', 'GameState', 'GameResult', 'PendingDecision',
    'new_game', 'legal_moves', 'apply_move', 'is_terminal', 'score',

    # Player
    'PlayerState',

    # Cards
    'Card', 'CardEffect', 'EffectKind',
    'ALL_CARDS', 'BASE_CARDS', 'KINGDOM_CARDS',
    'get_card', 'standard_supply', 'starting_deck',

    # Moves
    'Move', 'MoveType',
    'PlayAction', 'PlayTreasure', 'Buy', 'EndPhase',
    'DiscardChoice', 'TrashChoice', 'GainChoice', 'RevealReaction',
    'get_all_legal_moves', 'move_from_dict',

    # Constants
    'CardType', 'Phase', 'DecisionKind', 'GainDestination',
    'PLAYER_HAND_SIZE', 'MIN_PLAYERS', 'MAX_PLAYERS',

    # Errors
    'DominionError', 'IllegalMoveError', 'InvariantViolation'
]
