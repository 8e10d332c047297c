"""
Monte Carlo Tree Search Agent for Dominion.

MCTSAgent plugs a search configuration into a Game as a player callback.
It answers every decision the engine hands it, including discard and
reaction choices forced on it during an opponent's turn, and keeps the
statistics of each search it ran.
"""
import dataclasses
import json
import logging
import random
from typing import Any, Callable, Dict, List, Optional, Tuple

from dominion_ai.core.constants import DEFAULT_MCTS_EXPLORATION
from dominion_ai.core.game import Game, GameState
from dominion_ai.core.moves import Move
from dominion_ai.mcts.config import MCTSConfig
from dominion_ai.mcts.search import mcts_search

logger = logging.getLogger(__name__)


class MCTSAgent:
    """
    Monte Carlo Tree Search agent for playing Dominion.

    Each search gets its own seed drawn from the agent's random source, so
    a seeded agent plays reproducibly without repeating the same search
    stream at every decision.
    """

    def __init__(
        self,
        config: Optional[MCTSConfig] = None,
        name: str = "MCTS Agent",
        verbose: bool = False
    ):
        """
        Initialize an MCTS agent.

        Args:
            config: MCTS configuration parameters
            name: Name of the agent
            verbose: Whether to log a summary of every search at INFO level
        """
        self.config = config or MCTSConfig()
        self.name = name
        self.verbose = verbose
        self._rng = random.Random(self.config.random_seed)

        # Statistics from the most recent search
        self.last_stats: Dict[str, Any] = {}

        # History of all searched moves and their statistics
        self.move_history: List[Tuple[Move, Dict[str, Any]]] = []

    def select_move(self, state: GameState, player_id: int) -> Move:
        """
        Select a move using Monte Carlo Tree Search.

        Args:
            state: Current game state
            player_id: ID of the player making the decision

        Returns:
            Selected move
        """
        if state.acting_player != player_id:
            raise ValueError(f"Player {player_id} is not the acting player")

        search_config = dataclasses.replace(self.config, random_seed=self._rng.getrandbits(32))
        move, stats = mcts_search(state, search_config)
        self.last_stats = stats

        if stats.get("forced"):
            return move

        self.move_history.append((move, stats))

        if self.verbose:
            self._log_search_info(move, stats)

        return move

    def _log_search_info(self, move: Move, stats: Dict[str, Any]) -> None:
        """
        Log information about the search.

        Args:
            move: Selected move
            stats: Search statistics
        """
        logger.info(
            "%s selected: %s (%d iterations, %.3fs, %.1f it/s, %d nodes)",
            self.name, move, stats["iterations"], stats["time_elapsed"],
            stats["iterations_per_second"], stats["node_count"]
        )

        moves_by_visits = sorted(stats["move_visits"].items(), key=lambda x: x[1], reverse=True)
        for i, (move_str, visits) in enumerate(moves_by_visits[:5]):
            value = stats["move_rewards"].get(move_str, 0.0)
            logger.info("  %d. %s - %d visits, %.3f value", i + 1, move_str, visits, value)

    def get_action_callback(self) -> Callable[[GameState, int], Move]:
        """
        Get a callback function for selecting moves.

        This is useful for registering the agent with a Game object.

        Returns:
            Callback function that takes a game state and player ID and returns a move
        """
        return lambda state, player_id: self.select_move(state, player_id)

    def register_with_game(self, game: Game, player_id: int) -> None:
        """
        Register this agent with a game.

        Args:
            game: Game object
            player_id: ID of the player to register as
        """
        game.register_agent(player_id, self.get_action_callback())

    def get_last_statistics(self) -> Dict[str, Any]:
        return self.last_stats

    def get_principal_variation(self) -> List[str]:
        """
        Get the principal variation (most visited path) from the last search.

        Only single-process searches record it.

        Returns:
            List of move descriptions
        """
        return list(self.last_stats.get("principal_variation", []))

    def reset_statistics(self) -> None:
        """Reset all statistics."""
        self.last_stats = {}
        self.move_history = []

    def save_statistics(self, filename: str) -> None:
        """
        Save statistics to a file.

        Args:
            filename: Name of the file to save to
        """
        history = []
        for move, stats in self.move_history:
            history.append({
                "move": move.to_dict(),
                "stats": {k: v for k, v in stats.items() if not isinstance(v, (dict, list))}
            })

        data = {
            "agent_name": self.name,
            "config": self.config.to_dict(),
            "history": history,
            "total_moves": len(self.move_history)
        }

        with open(filename, 'w') as f:
            json.dump(data, f, indent=2)

    def __str__(self) -> str:
        if self.config.iteration_budget is not None:
            budget = f"{self.config.iteration_budget} iterations"
        else:
            budget = f"{self.config.time_budget}s"
        return f"{self.name} (MCTS, {budget})"


class MCTSAgentFactory:
    """
    Factory for creating MCTS agents with different configurations.
    """

    @staticmethod
    def create_fast() -> MCTSAgent:
        return MCTSAgent(config=MCTSConfig.fast(), name="Fast MCTS")

    @staticmethod
    def create_standard() -> MCTSAgent:
        return MCTSAgent(config=MCTSConfig.default(), name="Standard MCTS")

    @staticmethod
    def create_strong() -> MCTSAgent:
        return MCTSAgent(config=MCTSConfig.deep(), name="Strong MCTS")

    @staticmethod
    def create_custom(
        iteration_budget: Optional[int] = 1000,
        time_budget: Optional[float] = None,
        exploration_constant: float = DEFAULT_MCTS_EXPLORATION,
        random_seed: Optional[int] = None,
        name: str = "Custom MCTS"
    ) -> MCTSAgent:
        """
        Create a custom MCTS agent.

        Args:
            iteration_budget: Number of MCTS iterations
            time_budget: Optional time limit in seconds
            exploration_constant: UCT exploration parameter
            random_seed: Seed for the agent's random source
            name: Name of the agent

        Returns:
            MCTSAgent
        """
        config = MCTSConfig(
            iteration_budget=iteration_budget,
            time_budget=time_budget,
            exploration_constant=exploration_constant,
            random_seed=random_seed,
        )
        return MCTSAgent(config=config, name=name)
