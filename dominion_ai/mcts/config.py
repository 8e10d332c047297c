"""
Configuration for Monte Carlo Tree Search (MCTS).

This module defines the configuration parameters for the MCTS algorithm,
including search budgets, the exploration constant, the rollout policy and
root parallelization.
"""
from dataclasses import dataclass, fields
from typing import Literal, Optional

from dominion_ai.core.constants import (
    DEFAULT_MCTS_ITERATIONS, DEFAULT_MCTS_EXPLORATION, DEFAULT_MAX_ROLLOUT_TURNS
)

ROLLOUT_POLICIES = ("random", "big_money")


@dataclass
class MCTSConfig:
    """
    Configuration parameters for Monte Carlo Tree Search.

    This class defines all tunable parameters for the MCTS algorithm,
    with validation and sensible defaults. At least one of the iteration
    and time budgets must be set; when both are, the search stops at
    whichever runs out first.
    """
    # Search budget
    iteration_budget: Optional[int] = DEFAULT_MCTS_ITERATIONS
    """Number of MCTS iterations to perform per move decision (None = no limit)"""

    time_budget: Optional[float] = None
    """Optional wall-clock budget in seconds (None = no limit)"""

    exploration_constant: float = DEFAULT_MCTS_EXPLORATION
    """UCT exploration parameter (default is sqrt(2))"""

    random_seed: Optional[int] = None
    """Seed for the search's random source (None = nondeterministic)"""

    # Rollouts
    max_rollout_turns: int = DEFAULT_MAX_ROLLOUT_TURNS
    """Turns a rollout may run before it is scored from the current standings"""

    rollout_policy: Literal["random", "big_money"] = "random"
    """Policy for the simulation phase ('random' or 'big_money')"""

    autoplay_treasures: bool = True
    """Whether rollouts play every treasure before buying"""

    determinize: bool = True
    """Whether the search reshuffles every draw pile in its copy of the root state"""

    # Parallelization
    num_workers: int = 1
    """Number of independent search trees built in parallel (1 = single process)"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.iteration_budget is None and self.time_budget is None:
            raise ValueError("either iteration_budget or time_budget must be set")

        if self.iteration_budget is not None and self.iteration_budget <= 0:
            raise ValueError("iteration_budget must be positive or None")

        if self.time_budget is not None and self.time_budget <= 0:
            raise ValueError("time_budget must be positive or None")

        if self.exploration_constant < 0:
            raise ValueError("exploration_constant must be non-negative")

        if self.max_rollout_turns <= 0:
            raise ValueError("max_rollout_turns must be positive")

        if self.rollout_policy not in ROLLOUT_POLICIES:
            raise ValueError(f"rollout_policy must be one of {', '.join(ROLLOUT_POLICIES)}")

        if self.num_workers <= 0:
            raise ValueError("num_workers must be positive")

    @classmethod
    def default(cls) -> 'MCTSConfig':
        """
        Get the default configuration.

        Returns:
            Default MCTSConfig object
        """
        return cls()

    @classmethod
    def fast(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for speed (fewer iterations).

        Returns:
            Fast MCTSConfig object
        """
        return cls(
            iteration_budget=100,
            max_rollout_turns=60,
        )

    @classmethod
    def deep(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for deep search.

        Returns:
            Deep MCTSConfig object
        """
        return cls(
            iteration_budget=5000,
            exploration_constant=1.2,  # Slightly less exploration
            rollout_policy="big_money",
        )

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'MCTSConfig':
        """
        Create a configuration from a dictionary.

        Args:
            config_dict: Dictionary of configuration parameters

        Returns:
            MCTSConfig object
        """
        # Filter out any keys that aren't valid parameters
        valid_names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in config_dict.items() if k in valid_names})

    def to_dict(self) -> dict:
        """
        Convert the configuration to a dictionary.

        Returns:
            Dictionary of configuration parameters
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def __str__(self) -> str:
        params = ", ".join(f"{name}={value}" for name, value in self.to_dict().items())
        return f"MCTSConfig({params})"
