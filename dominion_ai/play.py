"""
Match runner: the MCTS agent against the Big Money baseline.

Plays a number of two-player games, alternating which seat the MCTS agent
takes, and reports wins, win rate and victory-point margin.

Example usage:
    # Ten games at 500 iterations per decision
    dominion-play --games 10 --iterations 500

    # One second per decision on four worker processes
    dominion-play --time-budget 1.0 --workers 4 --seed 7
"""
import argparse
import logging
import random
import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from tqdm import tqdm

from dominion_ai.core.errors import InvariantViolation
from dominion_ai.core.game import Game
from dominion_ai.mcts.agent import MCTSAgent
from dominion_ai.mcts.config import MCTSConfig, ROLLOUT_POLICIES
from dominion_ai.mcts.policy import BigMoneyPolicy

logger = logging.getLogger(__name__)

MCTS_NAME = "MCTS"
BASELINE_NAME = "Big Money"


@dataclass
class MatchResult:
    """Outcome of one game from the MCTS agent's point of view."""
    game_index: int
    mcts_seat: int
    reward: float = 0.0  # 1 win, 0 loss, shared for ties
    margin: int = 0  # MCTS VP minus Big Money VP
    scores: List[int] = field(default_factory=list)
    turns: int = 0
    finished: bool = True
    error: Optional[str] = None


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for the match configuration."""
    parser = argparse.ArgumentParser(description="Play the Dominion MCTS agent against Big Money")

    parser.add_argument("--games", type=int, default=10,
                        help="Number of games to play")
    parser.add_argument("--iterations", type=int, default=1000,
                        help="MCTS iterations per decision (0 = time budget only)")
    parser.add_argument("--time-budget", type=float, default=None,
                        help="Seconds per decision")
    parser.add_argument("--exploration", type=float, default=MCTSConfig.default().exploration_constant,
                        help="UCT exploration constant")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for games and search")
    parser.add_argument("--workers", type=int, default=1,
                        help="Parallel search trees (root parallelization)")
    parser.add_argument("--rollout-policy", type=str, default="random",
                        choices=list(ROLLOUT_POLICIES),
                        help="Policy used to play out simulations")
    parser.add_argument("--max-turns", type=int, default=100,
                        help="Turn limit per game")
    parser.add_argument("--verbose", action="store_true",
                        help="Log a summary of every search and game")

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_config(args: argparse.Namespace) -> MCTSConfig:
    """
    Create the search configuration from command-line arguments.

    Raises:
        ValueError: If the arguments describe an invalid configuration
    """
    return MCTSConfig(
        iteration_budget=args.iterations if args.iterations > 0 else None,
        time_budget=args.time_budget,
        exploration_constant=args.exploration,
        random_seed=args.seed,
        rollout_policy=args.rollout_policy,
        num_workers=args.workers,
    )


def play_match(
    game_index: int,
    mcts_seat: int,
    config: MCTSConfig,
    seed: Optional[int],
    max_turns: int = 100,
    verbose: bool = False
) -> MatchResult:
    """
    Play one game of the MCTS agent against Big Money.

    An InvariantViolation aborts the game; it is logged and recorded in the
    result rather than stopping the whole run.

    Args:
        game_index: Index of the game in the run
        mcts_seat: Seat (0 or 1) the MCTS agent plays
        config: Search configuration
        seed: Seed for the game's shuffles and both players
        max_turns: Turn limit for the game
        verbose: Whether the agent logs every search

    Returns:
        MatchResult
    """
    names = [BASELINE_NAME, BASELINE_NAME]
    names[mcts_seat] = MCTS_NAME
    baseline_seat = 1 - mcts_seat

    game = Game(num_players=2, player_names=names, random_seed=seed)
    agent = MCTSAgent(config=config, name=MCTS_NAME, verbose=verbose)
    agent.register_with_game(game, mcts_seat)
    game.register_agent(baseline_seat, BigMoneyPolicy().get_action_callback(random.Random(seed)))

    result = MatchResult(game_index=game_index, mcts_seat=mcts_seat)
    try:
        state = game.run_game(max_turns=max_turns)
    except InvariantViolation as e:
        logger.error("Game %d aborted: %s", game_index, e)
        result.finished = False
        result.error = str(e)
        state = game.state

    scores = state.scores()
    result.scores = scores
    result.turns = state.turn_count
    result.margin = scores[mcts_seat] - scores[baseline_seat]
    result.finished = result.finished and state.game_over
    if result.error is None:
        result.reward = state.outcome()[mcts_seat]

    logger.info(
        "Game %d: %s in seat %d, scores %s, %d turns",
        game_index, MCTS_NAME, mcts_seat, scores, result.turns
    )
    return result


def run_matches(
    num_games: int,
    config: MCTSConfig,
    seed: Optional[int] = None,
    max_turns: int = 100,
    verbose: bool = False
) -> List[MatchResult]:
    """
    Play a series of games, alternating the MCTS agent's seat.

    Args:
        num_games: Number of games
        config: Search configuration
        seed: Base seed; game i uses seed + i
        max_turns: Turn limit per game
        verbose: Whether the agent logs every search

    Returns:
        List of MatchResult, one per game
    """
    results = []
    for i in tqdm(range(num_games), desc="Games", disable=num_games <= 1):
        game_seed = seed + i if seed is not None else None
        results.append(play_match(i, i % 2, config, game_seed, max_turns, verbose))
    return results


def summarize(results: List[MatchResult]) -> Dict[str, float]:
    """
    Aggregate match results over completed games.

    A game counts as completed only if it reached the end without error.
    Games stopped at the turn limit are counted as unfinished and left out
    of the win, margin and turn statistics.

    Args:
        results: Results of the played games

    Returns:
        Dictionary of summary statistics
    """
    completed = [r for r in results if r.error is None and r.finished]
    unfinished = [r for r in results if r.error is None and not r.finished]
    rewards = np.array([r.reward for r in completed], dtype=float)
    margins = np.array([r.margin for r in completed], dtype=float)

    return {
        "games": len(results),
        "completed": len(completed),
        "unfinished": len(unfinished),
        "aborted": len(results) - len(completed) - len(unfinished),
        "wins": int(np.sum(rewards == 1.0)),
        "losses": int(np.sum(rewards == 0.0)),
        "ties": int(np.sum((rewards > 0.0) & (rewards < 1.0))),
        "win_rate": float(np.mean(rewards)) if completed else 0.0,
        "mean_margin": float(np.mean(margins)) if completed else 0.0,
        "margin_std": float(np.std(margins)) if completed else 0.0,
        "mean_turns": float(np.mean([r.turns for r in completed])) if completed else 0.0,
    }


def print_report(results: List[MatchResult], summary: Dict[str, float], console: Console) -> None:
    """Print per-game results and the summary as rich tables."""
    games = Table(title="Games")
    games.add_column("#", justify="right")
    games.add_column("MCTS seat", justify="right")
    games.add_column("Scores")
    games.add_column("Margin", justify="right")
    games.add_column("Turns", justify="right")
    games.add_column("Result")

    for r in results:
        if r.error is not None:
            outcome = f"[red]aborted: {r.error}[/red]"
        elif not r.finished:
            outcome = "[yellow]unfinished[/yellow]"
        elif r.reward == 1.0:
            outcome = "[green]win[/green]"
        elif r.reward == 0.0:
            outcome = "loss"
        else:
            outcome = "tie"
        games.add_row(
            str(r.game_index), str(r.mcts_seat), " - ".join(map(str, r.scores)),
            f"{r.margin:+d}", str(r.turns), outcome
        )
    console.print(games)

    totals = Table(title=f"{MCTS_NAME} vs {BASELINE_NAME}")
    totals.add_column("Statistic")
    totals.add_column("Value", justify="right")
    totals.add_row("Games", f"{summary['completed']} / {summary['games']}")
    totals.add_row("Unfinished / Aborted", f"{summary['unfinished']} / {summary['aborted']}")
    totals.add_row("Wins / Ties / Losses", f"{summary['wins']} / {summary['ties']} / {summary['losses']}")
    totals.add_row("Win rate", f"{summary['win_rate']:.1%}")
    totals.add_row("Mean VP margin", f"{summary['mean_margin']:+.2f} (std {summary['margin_std']:.2f})")
    totals.add_row("Mean turns", f"{summary['mean_turns']:.1f}")
    console.print(totals)


def main(argv: Optional[List[str]] = None) -> int:
    """Main function."""
    args = parse_args(argv)
    setup_logging(args.verbose)
    console = Console()

    try:
        config = build_config(args)
    except ValueError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        return 2

    console.print(f"Playing {args.games} game(s) with {config}")
    results = run_matches(args.games, config, args.seed, args.max_turns, args.verbose)
    summary = summarize(results)
    print_report(results, summary, console)

    return 1 if summary["aborted"] else 0


if __name__ == "__main__":
    sys.exit(main())
