"""
Rollout policies for the simulation phase of MCTS.

A rollout policy picks one move from the legal moves at a decision point.
Policies never touch global random state: every random choice is drawn from
the random source passed in, so rollouts are reproducible from a seed.
"""
import random
from abc import ABC, abstractmethod
from typing import Callable, List

from dominion_ai.core.cards import GOLD, PROVINCE, SILVER
from dominion_ai.core.constants import Phase
from dominion_ai.core.errors import InvariantViolation
from dominion_ai.core.game import GameState
from dominion_ai.core.moves import (
    Buy, DiscardChoice, EndPhase, GainChoice, Move, PlayTreasure,
    RevealReaction, TrashChoice
)


class RolloutPolicy(ABC):
    """Abstract base class for move-selection strategies used in rollouts."""

    name = "base"

    @abstractmethod
    def choose(self, state: GameState, legal_moves: List[Move], rng: random.Random) -> Move:
        """
        Select a move.

        Args:
            state: Current game state
            legal_moves: Legal moves for the acting player, in canonical order
            rng: Random source for any random choice

        Returns:
            One of legal_moves
        """
        pass

    def get_action_callback(self, rng: random.Random) -> Callable[[GameState, int], Move]:
        """
        Get a callback function that can be registered with a Game.

        Args:
            rng: Random source the policy draws from for the whole game

        Returns:
            Callback function that takes a game state and player ID and returns a move
        """
        def callback(state: GameState, player_id: int) -> Move:
            return self.choose(state, state.get_legal_moves(), rng)
        return callback


def _require_moves(legal_moves: List[Move]) -> None:
    if not legal_moves:
        raise InvariantViolation("Rollout reached a decision point with no legal moves")


class RandomRolloutPolicy(RolloutPolicy):
    """
    Uniform random play with a buy-phase bias.

    In the Buy phase, EndPhase is never chosen while a non-Curse card is
    affordable and a buy remains. With autoplay_treasures set, treasures
    are played before anything else in the Buy phase.
    """

    name = "random"

    def __init__(self, autoplay_treasures: bool = True):
        self.autoplay_treasures = autoplay_treasures

    def choose(self, state: GameState, legal_moves: List[Move], rng: random.Random) -> Move:
        _require_moves(legal_moves)

        if state.phase == Phase.BUY:
            if self.autoplay_treasures:
                for move in legal_moves:
                    if isinstance(move, PlayTreasure):
                        return move

            if any(isinstance(move, Buy) and not move.card.is_curse for move in legal_moves):
                candidates = [move for move in legal_moves if not isinstance(move, EndPhase)]
                return rng.choice(candidates)

        return rng.choice(legal_moves)


class BigMoneyPolicy(RolloutPolicy):
    """
    The Big Money baseline.

    Never plays actions, plays every treasure, then buys Province with $8,
    Gold with $6 and Silver with $3. Answers decisions conservatively:
    discards the lowest-coin cards, declines optional trashing and gains
    the most expensive card offered.
    """

    name = "big_money"

    BUY_PRIORITY = ((8, PROVINCE), (6, GOLD), (3, SILVER))

    def choose(self, state: GameState, legal_moves: List[Move], rng: random.Random) -> Move:
        _require_moves(legal_moves)
        phase = state.phase

        if phase == Phase.BUY:
            for move in legal_moves:
                if isinstance(move, PlayTreasure):
                    return move

            coins = state.active_player.coins
            for threshold, card in self.BUY_PRIORITY:
                if coins >= threshold and Buy(card) in legal_moves:
                    return Buy(card)

        elif phase == Phase.PENDING_DECISION:
            return self._decide(legal_moves)

        if EndPhase() in legal_moves:
            return EndPhase()
        return legal_moves[0]

    def _decide(self, legal_moves: List[Move]) -> Move:
        """Answer a pending decision without randomness."""
        discards = [move for move in legal_moves if isinstance(move, DiscardChoice)]
        if discards:
            return min(
                discards,
                key=lambda move: (sum(card.coins for card in move.cards), move.sort_key())
            )

        if TrashChoice(None) in legal_moves:
            return TrashChoice(None)

        trashes = [move for move in legal_moves if isinstance(move, TrashChoice)]
        if trashes:
            return min(trashes, key=lambda move: (move.card.cost, move.sort_key()))

        gains = [move for move in legal_moves if isinstance(move, GainChoice)]
        if gains:
            return max(gains, key=lambda move: (move.card.cost, -move.card.order))

        reveals = [
            move for move in legal_moves
            if isinstance(move, RevealReaction) and move.card is not None
        ]
        if reveals:
            return reveals[0]

        return legal_moves[0]


def create_rollout_policy(name: str, autoplay_treasures: bool = True) -> RolloutPolicy:
    """
    Create a rollout policy by name.

    Args:
        name: "random" or "big_money"
        autoplay_treasures: Passed to the random policy

    Returns:
        RolloutPolicy object
    """
    if name == RandomRolloutPolicy.name:
        return RandomRolloutPolicy(autoplay_treasures=autoplay_treasures)
    if name == BigMoneyPolicy.name:
        return BigMoneyPolicy()
    raise ValueError(f"Unknown rollout policy: {name}")
