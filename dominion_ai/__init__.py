"""
Dominion AI - A rules engine and Monte Carlo Tree Search agent for the card game Dominion.

This package provides a complete implementation of the Dominion base rules for
a fixed ten-card kingdom, along with an MCTS agent and a Big Money baseline.
"""

__version__ = "0.1.0"
__author__ = "Dominion AI Team"

# Make key components available at package level
from dominion_ai.core.game import Game, GameState, new_game
from dominion_ai.core.moves import Move
from dominion_ai.mcts.search import search_move

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))
