"""
Monte Carlo Tree Search (MCTS) implementation for Dominion.

This package provides a complete MCTS agent that plays Dominion without
any training. The MCTS algorithm works by:

1. Selection: Starting from the root node, select child nodes using UCT until reaching
   a terminal node or a node with untried moves.
2. Expansion: Create a new child node by taking a random untried move.
3. Simulation: From the new node, play the game out with a rollout policy.
4. Backpropagation: Update the statistics of all nodes in the path with the result.

The agent can be configured with different budgets, exploration constant,
rollout policy and number of parallel workers.
"""

from dominion_ai.mcts.node import MCTSNode
from dominion_ai.mcts.agent import MCTSAgent, MCTSAgentFactory
from dominion_ai.mcts.policy import (
    RolloutPolicy,
    RandomRolloutPolicy,
    BigMoneyPolicy,
    create_rollout_policy
)
from dominion_ai.mcts.search import (
    search_move,
    mcts_search,
    select_node,
    expand_node,
    simulate_game,
    backpropagate,
    count_nodes,
    get_principal_variation,
    get_action_statistics
)
from dominion_ai.mcts.config import MCTSConfig

DEFAULT_CONFIG = MCTSConfig.default()

__all__ = [
    'MCTSAgent',
    'MCTSAgentFactory',
    'MCTSNode',
    'MCTSConfig',
    'RolloutPolicy',
    'RandomRolloutPolicy',
    'BigMoneyPolicy',
    'create_rollout_policy',
    'search_move',
    'mcts_search',
    'select_node',
    'expand_node',
    'simulate_game',
    'backpropagate',
    'count_nodes',
    'get_principal_variation',
    'get_action_statistics',
    'DEFAULT_CONFIG'
]
