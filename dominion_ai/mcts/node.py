"""
Monte Carlo Tree Search Node for Dominion.

This module defines the MCTSNode class which represents a node in the MCTS tree.
Each node caches its own game state, tracks statistics (visits, reward) from the
perspective of the player who made the move leading to it, and owns its children.
"""
from __future__ import annotations
import math
import random
from typing import Dict, List, Optional

from dominion_ai.core.game import GameState
from dominion_ai.core.moves import Move


class MCTSNode:
    """
    A node in the Monte Carlo Tree Search.

    Each node represents a game state and tracks statistics about
    simulations that pass through it, including visit count and rewards.
    Rewards are accumulated for `player_just_moved`, the player who chose
    `move` in the parent state; the root has no such player.
    """

    def __init__(
        self,
        state: GameState,
        parent: Optional[MCTSNode] = None,
        move: Optional[Move] = None,
        player_just_moved: Optional[int] = None,
    ):
        """
        Initialize an MCTS node.

        Args:
            state: The game state this node represents (owned by the node)
            parent: The parent node (None for root)
            move: The move that led to this state (None for root)
            player_just_moved: ID of the player who made `move`
        """
        self.state = state
        self.parent = parent
        self.move = move
        self.player_just_moved = player_just_moved

        # Node statistics
        self.visits = 0
        self.total_reward = 0.0
        self.children: List[MCTSNode] = []

        self._untried_moves: Optional[List[Move]] = None

    @property
    def untried_moves(self) -> List[Move]:
        """
        Get the moves from this node that have no child yet.

        Computed lazily the first time it's accessed.

        Returns:
            List of untried moves, in canonical order
        """
        if self._untried_moves is None:
            self._untried_moves = self.state.get_legal_moves()
        return self._untried_moves

    def has_untried_moves(self) -> bool:
        return bool(self.untried_moves)

    def is_terminal(self) -> bool:
        return self.state.game_over

    def is_fully_expanded(self) -> bool:
        return not self.has_untried_moves()

    @property
    def mean_reward(self) -> float:
        if self.visits == 0:
            return 0.0
        return self.total_reward / self.visits

    def ucb_score(self, child: MCTSNode, exploration_constant: float) -> float:
        """
        Calculate the UCT score for a child node.

        UCT = mean_reward + C * sqrt(ln(parent_visits) / child_visits)

        Args:
            child: Child node to calculate score for
            exploration_constant: The constant C

        Returns:
            UCT score
        """
        if child.visits == 0:
            return float('inf')

        exploration = math.sqrt(math.log(self.visits) / child.visits)
        return child.mean_reward + exploration_constant * exploration

    def select_child(self, exploration_constant: float) -> MCTSNode:
        """
        Select the child with the highest UCT score.

        Ties go to the earliest expanded child.

        Args:
            exploration_constant: The constant C

        Returns:
            Selected child node
        """
        if not self.children:
            raise ValueError("Cannot select child from node with no children")

        return max(self.children, key=lambda child: self.ucb_score(child, exploration_constant))

    def expand(self, rng: random.Random) -> MCTSNode:
        """
        Add a child for one untried move chosen uniformly at random.

        Args:
            rng: Random source for the choice

        Returns:
            The new child node
        """
        moves = self.untried_moves
        if not moves or self.is_terminal():
            raise ValueError("Cannot expand a terminal or fully expanded node")

        move = moves.pop(rng.randrange(len(moves)))
        player = self.state.acting_player

        new_state = self.state.clone()
        new_state.apply_move(move, validate=False)

        child = MCTSNode(
            state=new_state,
            parent=self,
            move=move,
            player_just_moved=player,
        )
        self.children.append(child)
        return child

    def update(self, rewards: Dict[int, float]) -> None:
        """
        Record one simulation result.

        Args:
            rewards: Dictionary mapping player IDs to rewards
        """
        self.visits += 1
        if self.player_just_moved is not None:
            self.total_reward += rewards.get(self.player_just_moved, 0.0)

    def robust_child(self) -> Optional[MCTSNode]:
        """
        Get the most visited child.

        Ties are broken by higher mean reward, then by the move's sort key.

        Returns:
            The chosen child, or None if there are no children
        """
        if not self.children:
            return None
        return min(
            self.children,
            key=lambda child: (-child.visits, -child.mean_reward, child.move.sort_key())
        )

    def best_move(self) -> Optional[Move]:
        """
        Get the recommended move from this node (robust-child policy).

        Returns:
            The best move, or None if no children
        """
        child = self.robust_child()
        return child.move if child is not None else None

    def __str__(self) -> str:
        return (f"MCTSNode(move={self.move}, "
                f"player={self.player_just_moved}, "
                f"visits={self.visits}, "
                f"reward={self.total_reward:.2f}, "
                f"children={len(self.children)}, "
                f"untried={len(self._untried_moves) if self._untried_moves is not None else 'unknown'})")
