"""
Monte Carlo Tree Search (MCTS) algorithm for Dominion.

This module implements the core MCTS algorithm with the four standard phases:
1. Selection: Descend the tree by UCT to a node with untried moves
2. Expansion: Create a child node for one untried move
3. Simulation: Play the game out with a rollout policy
4. Backpropagation: Update statistics up the tree

The search works on its own copy of the root state, reseeded from the
search's random source, so it never consumes the real game's shuffles.
Root parallelization builds independent trees in worker processes and sums
their per-move statistics.
"""
from __future__ import annotations
import logging
import random
import time
from collections import defaultdict
from concurrent.futures import ProcessPoolExecutor
from typing import Any, Dict, List, Optional, Tuple

from dominion_ai.core.errors import InvariantViolation
from dominion_ai.core.game import GameState
from dominion_ai.core.moves import Move
from dominion_ai.mcts.config import MCTSConfig
from dominion_ai.mcts.node import MCTSNode
from dominion_ai.mcts.policy import RolloutPolicy, create_rollout_policy

logger = logging.getLogger(__name__)

MoveStats = Dict[Move, Tuple[int, float]]  # move -> (visits, total reward)


def search_move(state: GameState, config: Optional[MCTSConfig] = None) -> Move:
    """
    Choose a move for the acting player by MCTS.

    Args:
        state: Current game state (left untouched)
        config: MCTS configuration parameters

    Returns:
        The recommended move
    """
    move, _ = mcts_search(state, config)
    return move


def mcts_search(
    state: GameState,
    config: Optional[MCTSConfig] = None
) -> Tuple[Move, Dict[str, Any]]:
    """
    Run Monte Carlo Tree Search to find the best move.

    This function runs the full MCTS algorithm:
    1. Copy the root state and, if configured, reshuffle every draw pile
    2. Repeatedly run selection, expansion, simulation, and backpropagation
       until the iteration or time budget runs out
    3. Return the most visited root move (robust child)

    A move that is the only legal one is returned without searching.

    Args:
        state: Current game state
        config: MCTS configuration parameters

    Returns:
        Tuple of (best move, search statistics)

    Raises:
        InvariantViolation: If the root state has no legal moves
    """
    if config is None:
        config = MCTSConfig()

    legal = state.get_legal_moves()
    if not legal:
        raise InvariantViolation(
            f"No legal moves at the search root (phase {state.phase.name}, "
            f"game over: {state.game_over})"
        )

    start_time = time.time()

    if len(legal) == 1:
        return legal[0], {
            "forced": True,
            "iterations": 0,
            "time_elapsed": time.time() - start_time,
        }

    rng = random.Random(config.random_seed)

    if config.num_workers > 1:
        move_stats, stats = _run_parallel(state, config, rng)
    else:
        root, stats = build_tree(state, config, rng)
        move_stats = root_move_statistics(root)
        stats["node_count"] = count_nodes(root)
        stats["principal_variation"] = [str(move) for move, _ in get_principal_variation(root)]

    best_move = select_robust_move(move_stats)

    stats["forced"] = False
    stats["num_workers"] = config.num_workers
    stats["move_visits"] = {str(move): visits for move, (visits, _) in move_stats.items()}
    stats["move_rewards"] = {
        str(move): reward / visits
        for move, (visits, reward) in move_stats.items() if visits > 0
    }
    stats["time_elapsed"] = time.time() - start_time
    stats["iterations_per_second"] = stats["iterations"] / max(0.001, stats["time_elapsed"])
    stats["average_simulation_steps"] = stats["total_simulation_steps"] / max(1, stats["iterations"])

    if logger.isEnabledFor(logging.DEBUG):
        visits, reward = move_stats[best_move]
        logger.debug(
            "Search chose %s (%d visits, mean reward %.3f) after %d iterations in %.2fs",
            best_move, visits, reward / max(1, visits), stats["iterations"], stats["time_elapsed"]
        )

    return best_move, stats


def build_tree(
    state: GameState,
    config: MCTSConfig,
    rng: random.Random
) -> Tuple[MCTSNode, Dict[str, Any]]:
    """
    Build one search tree from a copy of the state.

    The budget is only checked between full iterations, and at least one
    iteration always runs.

    Args:
        state: Root game state (left untouched)
        config: MCTS configuration parameters
        rng: The search's random source

    Returns:
        Tuple of (root node, statistics)
    """
    root_state = state.clone()
    root_state.rng.seed(rng.getrandbits(64))
    if config.determinize:
        determinize(root_state)

    root = MCTSNode(state=root_state)
    policy = create_rollout_policy(config.rollout_policy, config.autoplay_treasures)

    stats: Dict[str, Any] = {
        "iterations": 0,
        "total_simulation_steps": 0,
        "max_simulation_steps": 0,
        "truncated_rollouts": 0,
    }

    start_time = time.time()
    deadline = start_time + config.time_budget if config.time_budget is not None else None

    while True:
        # 1. Selection
        node = select_node(root, config.exploration_constant)

        # 2. Expansion
        node = expand_node(node, rng)

        # 3. Simulation
        rewards, steps, truncated = simulate_game(node, config, policy, rng)

        # 4. Backpropagation
        backpropagate(node, rewards)

        stats["iterations"] += 1
        stats["total_simulation_steps"] += steps
        stats["max_simulation_steps"] = max(stats["max_simulation_steps"], steps)
        if truncated:
            stats["truncated_rollouts"] += 1

        if config.iteration_budget is not None and stats["iterations"] >= config.iteration_budget:
            break
        if deadline is not None and time.time() >= deadline:
            stats["stopped_by_time"] = True
            break

    return root, stats


def determinize(state: GameState) -> None:
    """
    Reshuffle every player's draw pile with the state's random source.

    The search then plans against a random deck order instead of the
    real, hidden one.

    Args:
        state: Search-owned copy of the game state
    """
    for player in state.players:
        state.rng.shuffle(player.deck)


def select_node(root: MCTSNode, exploration_constant: float) -> MCTSNode:
    """
    Descend the tree by UCT.

    Stops at the first node that is terminal or still has untried moves.

    Args:
        root: Root node of the MCTS tree
        exploration_constant: UCT constant C

    Returns:
        Selected node
    """
    current = root
    while not current.is_terminal() and current.is_fully_expanded():
        current = current.select_child(exploration_constant)
    return current


def expand_node(node: MCTSNode, rng: random.Random) -> MCTSNode:
    """
    Expand a node by adding a child for a random untried move.

    Args:
        node: Node to expand
        rng: Random source for the move choice

    Returns:
        New child node, or the node itself if it is terminal
    """
    if node.is_terminal() or not node.has_untried_moves():
        return node
    return node.expand(rng)


def rollout_state(node: MCTSNode, config: MCTSConfig, rng: random.Random) -> GameState:
    """
    Copy a node's state for one rollout.

    The copy's random source is reseeded from the search, and with
    determinization on every draw pile is reshuffled, so each rollout
    samples its own hidden deck order.

    Args:
        node: Node to simulate from
        config: MCTS configuration parameters
        rng: The search's random source

    Returns:
        A search-owned GameState
    """
    state = node.state.clone()
    state.rng.seed(rng.getrandbits(64))
    if config.determinize:
        determinize(state)
    return state


def simulate_game(
    node: MCTSNode,
    config: MCTSConfig,
    policy: RolloutPolicy,
    rng: random.Random
) -> Tuple[Dict[int, float], int, bool]:
    """
    Run a rollout from a node to estimate its value.

    The rollout plays a reseeded copy of the node's state to the end of the
    game. If it runs past max_rollout_turns it is scored from the current
    standings instead.

    Args:
        node: Node to simulate from
        config: MCTS configuration parameters
        policy: Rollout policy
        rng: The search's random source

    Returns:
        Tuple of (rewards per player, number of moves played, whether the
        rollout was cut short)
    """
    if node.is_terminal():
        return node.state.outcome(), 0, False

    state = rollout_state(node, config, rng)
    turn_limit = state.turn_count + config.max_rollout_turns

    steps = 0
    while not state.game_over:
        if state.turn_count >= turn_limit:
            return state.outcome(), steps, True

        move = policy.choose(state, state.get_legal_moves(), rng)
        state.apply_move(move, validate=False)
        steps += 1

    return state.outcome(), steps, False


def backpropagate(node: MCTSNode, rewards: Dict[int, float]) -> None:
    """
    Update statistics up the tree.

    Each node adds the reward of the player who moved into it, so every
    player maximizes their own outcome during selection.

    Args:
        node: Node to start backpropagation from
        rewards: Simulation result per player
    """
    current = node
    while current is not None:
        current.update(rewards)
        current = current.parent


def root_move_statistics(root: MCTSNode) -> MoveStats:
    """Visits and total reward of each expanded root move."""
    return {child.move: (child.visits, child.total_reward) for child in root.children}


def select_robust_move(move_stats: MoveStats) -> Move:
    """
    Pick the most visited move.

    Ties are broken by higher mean reward, then by the move's sort key.

    Args:
        move_stats: Visits and total reward per move

    Returns:
        The chosen move
    """
    if not move_stats:
        raise InvariantViolation("Search finished without expanding any root move")

    def key(item):
        move, (visits, reward) = item
        mean = reward / visits if visits > 0 else 0.0
        return (-visits, -mean, move.sort_key())

    return min(move_stats.items(), key=key)[0]


def _search_worker(
    state: GameState,
    config: MCTSConfig,
    seed: int
) -> Tuple[MoveStats, Dict[str, Any]]:
    """Build one independent tree in a worker process."""
    root, stats = build_tree(state, config, random.Random(seed))
    stats["node_count"] = count_nodes(root)
    return root_move_statistics(root), stats


def _run_parallel(
    state: GameState,
    config: MCTSConfig,
    rng: random.Random
) -> Tuple[MoveStats, Dict[str, Any]]:
    """
    Root parallelization: build num_workers trees and sum their root statistics.

    Args:
        state: Root game state
        config: MCTS configuration parameters (each worker gets the full budget)
        rng: The search's random source, used to seed the workers

    Returns:
        Tuple of (merged move statistics, merged search statistics)
    """
    seeds = [rng.getrandbits(64) for _ in range(config.num_workers)]

    visits: Dict[Move, int] = defaultdict(int)
    rewards: Dict[Move, float] = defaultdict(float)
    stats: Dict[str, Any] = defaultdict(int)

    with ProcessPoolExecutor(max_workers=config.num_workers) as executor:
        futures = [executor.submit(_search_worker, state, config, seed) for seed in seeds]
        # Merge in submission order so results do not depend on scheduling
        for future in futures:
            worker_moves, worker_stats = future.result()
            for move, (move_visits, move_reward) in worker_moves.items():
                visits[move] += move_visits
                rewards[move] += move_reward
            for name in ("iterations", "total_simulation_steps", "truncated_rollouts", "node_count"):
                stats[name] += worker_stats[name]
            stats["max_simulation_steps"] = max(
                stats["max_simulation_steps"], worker_stats["max_simulation_steps"]
            )

    merged = {move: (visits[move], rewards[move]) for move in visits}
    return merged, dict(stats)


def count_nodes(node: MCTSNode) -> int:
    """
    Count the total number of nodes in the tree.

    Args:
        node: Root node of the tree

    Returns:
        Total number of nodes
    """
    count = 0
    stack = [node]
    while stack:
        current = stack.pop()
        count += 1
        stack.extend(current.children)
    return count


def get_principal_variation(root: MCTSNode, max_depth: int = 10) -> List[Tuple[Move, float]]:
    """
    Get the principal variation (most visited path) from the root.

    This is useful for analysis and debugging.

    Args:
        root: Root node of the MCTS tree
        max_depth: Maximum depth to explore

    Returns:
        List of (move, mean reward) pairs representing the principal variation
    """
    result = []
    current = root

    while current.children and len(result) < max_depth:
        current = current.robust_child()
        result.append((current.move, current.mean_reward))

    return result


def get_action_statistics(
    root: MCTSNode,
    exploration_constant: float
) -> Dict[str, Dict[str, float]]:
    """
    Get statistics for all moves from the root.

    This is useful for analysis and debugging.

    Args:
        root: Root node of the MCTS tree
        exploration_constant: UCT constant used for the exploration score

    Returns:
        Dictionary mapping move strings to statistics
    """
    result = {}

    for child in root.children:
        result[str(child.move)] = {
            "visits": child.visits,
            "reward": child.total_reward,
            "value": child.mean_reward,
            "exploration": root.ucb_score(child, exploration_constant),
        }

    return result
