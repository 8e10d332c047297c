"""
Game state and flow management for Dominion.

This module defines the core game mechanics, including:
- GameState: Complete representation of a game's state, including the
  effect queue and pending decisions that multi-step cards create
- Game: Manager for game flow that asks each player's agent for moves
- Module-level helpers for game setup and the rules-engine entry points
  (legal_moves, apply_move, is_terminal, score)

The game follows the official Dominion base rules for the fixed kingdom.
"""
from __future__ import annotations
import logging
import random
import time
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from dominion_ai.core.constants import (
    CardType, DecisionKind, GainDestination, Phase, MIN_PLAYERS, MAX_PLAYERS,
    PLAYER_HAND_SIZE, EMPTY_PILES_FOR_GAME_END
)
from dominion_ai.core.cards import (
    Card, CardEffect, EffectKind, KINGDOM_CARDS, PROVINCE, card_names,
    distinct_cards, filter_by_type, get_card, standard_supply, starting_deck
)
from dominion_ai.core.errors import IllegalMoveError, InvariantViolation
from dominion_ai.core.moves import Move, get_all_legal_moves
from dominion_ai.core.player import PlayerState

logger = logging.getLogger(__name__)


class GameResult(Enum):
    """Enum representing possible game results."""
    IN_PROGRESS = auto()
    WINNER = auto()  # Game has a single winner
    DRAW = auto()  # Winners share the game


@dataclass(frozen=True)
class QueuedEffect:
    """One step of a played card waiting to be resolved for a player."""
    player: int
    play_id: int  # Identifies the card play the step belongs to
    effect: CardEffect


@dataclass(frozen=True)
class ReactionWindow:
    """A chance for an attacked player to reveal a Reaction before the attack resolves."""
    player: int
    play_id: int
    attack: Card


QueueEntry = Union[QueuedEffect, ReactionWindow]


@dataclass(frozen=True)
class PendingDecision:
    """
    A choice a card effect is waiting on.

    While a decision is pending, the only legal moves are the ones answering
    it, and they are made by `player` (who may not be the active player).
    """
    kind: DecisionKind
    player: int
    choices: Tuple[Card, ...] = ()  # Distinct candidate cards, in catalog order
    min_count: int = 1
    max_count: int = 1
    play_id: int = 0
    draws_per_discard: bool = False  # Cellar: draw one card per card discarded
    optional: bool = False  # Trash may be declined
    gain_bonus: int = 0  # Added to the trashed card's cost for the follow-up gain
    card_type: Optional[CardType] = None  # Restricts the follow-up gain
    destination: GainDestination = GainDestination.DISCARD
    source: Optional[Card] = None  # Card whose effect created the decision


@dataclass
class GameState:
    """
    Complete representation of a Dominion game state.

    This class contains all information needed to continue the game from any
    point: players and their zones, the supply, the trash, turn bookkeeping,
    queued card effects, the pending decision and the shuffle random source.
    """
    # Players
    players: List[PlayerState] = field(default_factory=list)
    current_player_idx: int = 0

    # Cards
    supply: Dict[Card, int] = field(default_factory=dict)
    trash: List[Card] = field(default_factory=list)
    kingdom: Tuple[Card, ...] = ()
    total_copies: Dict[Card, int] = field(default_factory=dict)  # Fixed per game

    # Turn state
    turn_phase: Phase = Phase.ACTION
    turn_count: int = 1
    has_bought: bool = False
    merchant_bonus: int = 0
    silver_played: bool = False

    # Card effects
    effect_queue: List[QueueEntry] = field(default_factory=list)
    pending: Optional[PendingDecision] = None
    next_play_id: int = 0

    game_over: bool = False
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    @property
    def phase(self) -> Phase:
        """The decision point the game is at: a turn phase or PENDING_DECISION."""
        if self.pending is not None:
            return Phase.PENDING_DECISION
        return self.turn_phase

    @property
    def current_player(self) -> int:
        """Get the ID of the player whose turn it is."""
        return self.current_player_idx

    @property
    def active_player(self) -> PlayerState:
        return self.players[self.current_player_idx]

    @property
    def acting_player(self) -> int:
        """Get the ID of the player who makes the next move."""
        if self.pending is not None:
            return self.pending.player
        return self.current_player_idx

    @property
    def num_players(self) -> int:
        return len(self.players)

    def opponents_in_turn_order(self, player_id: int) -> List[PlayerState]:
        """
        Get the other players, starting with the one after `player_id`.

        Args:
            player_id: ID of the reference player

        Returns:
            List of opponents in turn order
        """
        n = len(self.players)
        return [self.players[(player_id + offset) % n] for offset in range(1, n)]

    def get_legal_moves(self) -> List[Move]:
        """
        Get all legal moves for the acting player.

        Returns:
            List of legal moves in canonical order
        """
        return get_all_legal_moves(self)

    def apply_move(self, move: Move, validate: bool = True) -> None:
        """
        Apply a move to the game state in place.

        The move's own effect is executed, then queued card effects are
        resolved until a decision is needed or the queue is empty.

        Args:
            move: Move to apply
            validate: Whether to check legality first. Rollouts that only
                apply moves taken from get_legal_moves may skip the check.

        Raises:
            IllegalMoveError: If the move is not legal. The state is unchanged.
        """
        if validate and not move.validate(self):
            if self.game_over:
                raise IllegalMoveError(move, "the game is over")
            raise IllegalMoveError(move, f"not legal during {self.phase.name}")

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Turn %d, %s: %s",
                self.turn_count, self.players[self.acting_player].name, move
            )

        move.execute(self)
        self._process_queue()

    def play_action(self, card: Card) -> None:
        """
        Move an action card to the play area and queue its effects.

        Attacks queue a reaction window for each opponent ahead of the
        card's own effects.

        Args:
            card: Action card in the active player's hand
        """
        player = self.active_player
        player.remove_from_hand(card)
        player.play_area.append(card)
        player.actions -= 1

        play_id = self.next_play_id
        self.next_play_id += 1

        opponents = self.opponents_in_turn_order(player.id)
        if card.is_attack:
            for opponent in opponents:
                self.effect_queue.append(ReactionWindow(opponent.id, play_id, card))

        for effect in card.effects:
            if effect.targets_opponents:
                for opponent in opponents:
                    self.effect_queue.append(QueuedEffect(opponent.id, play_id, effect))
            else:
                self.effect_queue.append(QueuedEffect(player.id, play_id, effect))

    def gain_card(
        self,
        player_id: int,
        card: Card,
        destination: GainDestination = GainDestination.DISCARD
    ) -> None:
        """
        Move a card from the supply to a player.

        Args:
            player_id: ID of the gaining player
            card: Card to gain
            destination: Zone the card goes to
        """
        if self.supply.get(card, 0) <= 0:
            raise InvariantViolation(f"Cannot gain {card}: supply pile is empty")
        self.supply[card] -= 1

        player = self.players[player_id]
        if destination == GainDestination.HAND:
            player.hand.append(card)
        else:
            player.discard.append(card)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s gains %s (%d left)", player.name, card, self.supply[card])

    def end_phase(self) -> None:
        """End the Action phase, or the Buy phase followed by Cleanup."""
        if self.turn_phase == Phase.ACTION:
            self.turn_phase = Phase.BUY
            self.active_player.actions = 0
        else:
            self._cleanup()

    def resolve_discard(self, cards: List[Card]) -> None:
        """
        Answer a pending discard decision.

        Args:
            cards: Cards to discard from the deciding player's hand
        """
        decision = self._take_pending()
        player = self.players[decision.player]
        player.discard_from_hand(cards)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s discards [%s]", player.name, card_names(cards))

        if decision.draws_per_discard and cards:
            self._draw(player, len(cards))

    def resolve_trash(self, card: Optional[Card]) -> None:
        """
        Answer a pending trash decision and queue the replacement gain.

        Args:
            card: Card to trash from hand, or None to decline
        """
        decision = self._take_pending()
        if card is None:
            return

        player = self.players[decision.player]
        player.remove_from_hand(card)
        self.trash.append(card)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s trashes %s", player.name, card)

        gain = CardEffect(
            EffectKind.GAIN_CARD_COSTING_UP_TO,
            card.cost + decision.gain_bonus,
            card_type=decision.card_type,
            destination=decision.destination,
        )
        # The gain resolves before anything else still queued
        self.effect_queue.insert(0, QueuedEffect(decision.player, decision.play_id, gain))

    def resolve_gain(self, card: Card) -> None:
        """
        Answer a pending gain decision.

        Args:
            card: Supply card to gain
        """
        decision = self._take_pending()
        self.gain_card(decision.player, card, decision.destination)

    def resolve_reveal(self, card: Optional[Card]) -> None:
        """
        Answer a reaction window.

        Revealing a Reaction cancels every queued step of that attack which
        targets the revealing player.

        Args:
            card: Reaction card revealed from hand, or None
        """
        decision = self._take_pending()
        if card is None:
            return

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "%s reveals %s against %s",
                self.players[decision.player].name, card, decision.source
            )

        self.effect_queue = [
            entry for entry in self.effect_queue
            if not (entry.player == decision.player and entry.play_id == decision.play_id)
        ]

    def _take_pending(self) -> PendingDecision:
        decision = self.pending
        if decision is None:
            raise InvariantViolation("No decision is pending")
        self.pending = None
        return decision

    def _draw(self, player: PlayerState, count: int) -> None:
        drawn = player.draw(count, self.rng)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s draws %d card(s)", player.name, len(drawn))

    def _process_queue(self) -> None:
        """Resolve queued effects until one needs a decision or the queue is empty."""
        while self.pending is None and self.effect_queue:
            entry = self.effect_queue.pop(0)
            self._resolve_entry(entry)

    def _resolve_entry(self, entry: QueueEntry) -> None:
        """
        Resolve one queued entry, possibly creating a pending decision.

        Decisions with nothing to choose from are skipped.

        Args:
            entry: Queue entry to resolve
        """
        player = self.players[entry.player]

        if isinstance(entry, ReactionWindow):
            reactions = tuple(card for card in distinct_cards(player.hand) if card.is_reaction)
            if reactions:
                self.pending = PendingDecision(
                    kind=DecisionKind.REVEAL_REACTION,
                    player=player.id,
                    choices=reactions,
                    play_id=entry.play_id,
                    source=entry.attack,
                )
            return

        effect = entry.effect
        kind = effect.kind

        if kind == EffectKind.DRAW_CARDS:
            self._draw(player, effect.amount)

        elif kind == EffectKind.PLUS_ACTIONS:
            player.actions += effect.amount

        elif kind == EffectKind.PLUS_BUYS:
            player.buys += effect.amount

        elif kind == EffectKind.PLUS_COINS:
            player.coins += effect.amount

        elif kind == EffectKind.SILVER_BONUS:
            self.merchant_bonus += effect.amount

        elif kind == EffectKind.OPPONENTS_DISCARD_TO:
            excess = len(player.hand) - effect.amount
            if excess > 0:
                self.pending = PendingDecision(
                    kind=DecisionKind.DISCARD,
                    player=player.id,
                    choices=tuple(distinct_cards(player.hand)),
                    min_count=excess,
                    max_count=excess,
                    play_id=entry.play_id,
                )

        elif kind == EffectKind.GAIN_CARD_COSTING_UP_TO:
            choices = self.gainable_cards(effect.amount, effect.card_type)
            if choices:
                self.pending = PendingDecision(
                    kind=DecisionKind.GAIN,
                    player=player.id,
                    choices=tuple(choices),
                    play_id=entry.play_id,
                    destination=effect.destination,
                )

        elif kind == EffectKind.TRASH_AND_REPLACE:
            choices = filter_by_type(distinct_cards(player.hand), effect.card_type)
            if choices:
                self.pending = PendingDecision(
                    kind=DecisionKind.TRASH,
                    player=player.id,
                    choices=tuple(choices),
                    play_id=entry.play_id,
                    optional=effect.optional,
                    gain_bonus=effect.amount,
                    card_type=effect.card_type,
                    destination=effect.destination,
                )

        elif kind == EffectKind.DISCARD_FOR_DRAW:
            if player.hand:
                self.pending = PendingDecision(
                    kind=DecisionKind.DISCARD,
                    player=player.id,
                    choices=tuple(distinct_cards(player.hand)),
                    min_count=0,
                    max_count=len(player.hand),
                    play_id=entry.play_id,
                    draws_per_discard=True,
                )

        else:
            raise InvariantViolation(f"Unhandled effect kind: {kind}")

    def gainable_cards(self, max_cost: int, card_type: Optional[CardType] = None) -> List[Card]:
        """
        Get the supply cards that can be gained.

        Args:
            max_cost: Highest allowed cost
            card_type: Required card type, or None for any

        Returns:
            List of cards with a non-empty pile, in catalog order
        """
        return [
            card for card, count in self.supply.items()
            if count > 0 and card.cost <= max_cost
            and (card_type is None or card_type in card.types)
        ]

    def _cleanup(self) -> None:
        """Run the active player's Cleanup, check for game end and start the next turn."""
        self.turn_phase = Phase.CLEANUP
        player = self.active_player
        player.cleanup(PLAYER_HAND_SIZE, self.rng)
        player.turns_taken += 1

        self.has_bought = False
        self.merchant_bonus = 0
        self.silver_played = False

        if self._check_game_end():
            self.game_over = True
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("Game over after turn %d: %s", self.turn_count, self.scores())
            return

        self.current_player_idx = (self.current_player_idx + 1) % len(self.players)
        self.turn_count += 1
        self._start_turn()

    def _start_turn(self) -> None:
        self.turn_phase = Phase.ACTION
        player = self.active_player
        player.actions = 1
        player.buys = 1

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Turn %d: %s to play", self.turn_count, player.name)

    def _check_game_end(self) -> bool:
        return (
            self.supply.get(PROVINCE, 0) == 0
            or self.empty_pile_count() >= EMPTY_PILES_FOR_GAME_END
        )

    def empty_pile_count(self) -> int:
        return sum(1 for count in self.supply.values() if count == 0)

    def victory_points(self, player_id: int) -> int:
        return self.players[player_id].victory_points

    def scores(self) -> List[int]:
        """Get all players' victory points."""
        return [player.victory_points for player in self.players]

    def winners(self) -> List[int]:
        """
        Determine the players currently in the lead.

        Most victory points wins; ties go to the player who took fewer
        turns; players still tied share the win.

        Returns:
            IDs of the winning players
        """
        scores = self.scores()
        best = max(scores)
        contenders = [pid for pid, vp in enumerate(scores) if vp == best]
        fewest_turns = min(self.players[pid].turns_taken for pid in contenders)
        return [pid for pid in contenders if self.players[pid].turns_taken == fewest_turns]

    def outcome(self) -> Dict[int, float]:
        """
        Get each player's reward: 1/len(winners) for a winner and 0 otherwise.

        Also used to score unfinished games by their current standings.

        Returns:
            Dictionary mapping player ID to reward
        """
        winners = self.winners()
        share = 1.0 / len(winners)
        return {
            player.id: (share if player.id in winners else 0.0)
            for player in self.players
        }

    @property
    def result(self) -> GameResult:
        if not self.game_over:
            return GameResult.IN_PROGRESS
        return GameResult.WINNER if len(self.winners()) == 1 else GameResult.DRAW

    def verify_conservation(self) -> None:
        """
        Check that every card copy is accounted for.

        Raises:
            InvariantViolation: If any card's count across all zones, the
                trash and the supply differs from its total for this game
        """
        counts = Counter(self.trash)
        for player in self.players:
            counts.update(player.all_cards())

        for card in set(counts) | set(self.total_copies):
            found = counts[card] + self.supply.get(card, 0)
            expected = self.total_copies.get(card, 0)
            if found != expected:
                raise InvariantViolation(
                    f"Conservation breached for {card}: expected {expected} copies, found {found}"
                )

    def clone(self) -> GameState:
        """
        Create an independent copy of the game state.

        Every zone list, the supply, the queue and the random source are
        copied; cards and queued entries are immutable and shared.

        Returns:
            A new GameState
        """
        rng = random.Random()
        rng.setstate(self.rng.getstate())
        return GameState(
            players=[player.clone() for player in self.players],
            current_player_idx=self.current_player_idx,
            supply=dict(self.supply),
            trash=list(self.trash),
            kingdom=self.kingdom,
            total_copies=self.total_copies,
            turn_phase=self.turn_phase,
            turn_count=self.turn_count,
            has_bought=self.has_bought,
            merchant_bonus=self.merchant_bonus,
            silver_played=self.silver_played,
            effect_queue=list(self.effect_queue),
            pending=self.pending,
            next_play_id=self.next_play_id,
            game_over=self.game_over,
            rng=rng,
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the game state to a dictionary for logging and reports.

        Returns:
            Dictionary representation of the game state
        """
        return {
            "players": [player.to_dict() for player in self.players],
            "current_player_idx": self.current_player_idx,
            "supply": {card.name: count for card, count in self.supply.items()},
            "trash": [card.name for card in self.trash],
            "phase": self.phase.name,
            "turn_count": self.turn_count,
            "pending": self.pending.kind.name if self.pending is not None else None,
            "game_over": self.game_over,
        }

    def __str__(self) -> str:
        lines = [f"Dominion (Turn {self.turn_count}, {self.phase.name})"]
        lines.append("Supply: " + ", ".join(
            f"{card.name} {count}" for card, count in self.supply.items()
        ))
        for player in self.players:
            marker = " (Current Player)" if player.id == self.current_player_idx else ""
            lines.append(
                f"  {player.name}{marker}: {player.victory_points} VP, "
                f"hand [{card_names(player.hand)}]"
            )
        if self.game_over:
            lines.append("Game Over")
        return "\n".join(lines)


def new_game(
    kingdom_cards: Optional[Sequence[Union[Card, str]]] = None,
    player_count: int = 2,
    random_seed: Optional[int] = None,
    player_names: Optional[List[str]] = None
) -> GameState:
    """
    Set up a new game: seed the supply, shuffle starting decks and draw hands.

    Args:
        kingdom_cards: The fixed ten kingdom cards (cards or names);
            defaults to KINGDOM_CARDS
        player_count: Number of players (2-4)
        random_seed: Seed for the game's shuffle random source
        player_names: List of player names (defaults to "Player 1", "Player 2", etc.)

    Returns:
        Initialized GameState, at the first player's Action phase
    """
    if kingdom_cards is None:
        kingdom = list(KINGDOM_CARDS)
    else:
        kingdom = [get_card(card) if isinstance(card, str) else card for card in kingdom_cards]
        if len(kingdom) != len(KINGDOM_CARDS) or set(kingdom) != set(KINGDOM_CARDS):
            raise ValueError(
                f"Only the fixed kingdom is supported: {card_names(KINGDOM_CARDS)}"
            )

    if player_count < MIN_PLAYERS or player_count > MAX_PLAYERS:
        raise ValueError(f"Number of players must be between {MIN_PLAYERS} and {MAX_PLAYERS}")

    if player_names is None:
        player_names = [f"Player {i + 1}" for i in range(player_count)]
    elif len(player_names) != player_count:
        raise ValueError("Number of player names must match number of players")

    rng = random.Random(random_seed)
    supply = standard_supply(kingdom, player_count)

    players = []
    for i, name in enumerate(player_names):
        deck = starting_deck()
        rng.shuffle(deck)
        player = PlayerState(id=i, name=name, deck=deck)
        player.draw(PLAYER_HAND_SIZE, rng)
        players.append(player)

    total_copies = Counter(supply)
    for player in players:
        total_copies.update(player.all_cards())

    state = GameState(
        players=players,
        supply=supply,
        kingdom=tuple(sorted(kingdom, key=lambda card: card.order)),
        total_copies=dict(total_copies),
        rng=rng,
    )
    state._start_turn()
    return state


def legal_moves(state: GameState) -> List[Move]:
    """Every legal move at the current decision point, in canonical order."""
    return state.get_legal_moves()


def apply_move(state: GameState, move: Move) -> GameState:
    """
    Apply a move to a copy of the state.

    Args:
        state: Current game state (left untouched)
        move: Move to apply

    Returns:
        The successor state

    Raises:
        IllegalMoveError: If the move is not legal in `state`
    """
    if not move.validate(state):
        raise IllegalMoveError(move, "not in the legal moves")
    successor = state.clone()
    successor.apply_move(move, validate=False)
    return successor


def is_terminal(state: GameState) -> bool:
    return state.game_over


def score(state: GameState, player: int) -> int:
    """Victory points of every card the player owns, Curses subtracting."""
    return state.victory_points(player)


class Game:
    """
    Manager for Dominion game flow.

    Holds the real game state and an agent callback per player. Each step asks
    the acting player (who may be the victim of an attack rather than the
    player whose turn it is) for a move and applies it.
    """
    def __init__(
        self,
        num_players: int = 2,
        player_names: Optional[List[str]] = None,
        random_seed: Optional[int] = None,
        kingdom_cards: Optional[Sequence[Union[Card, str]]] = None
    ):
        """
        Initialize a new Dominion game.

        Args:
            num_players: Number of players (2-4)
            player_names: List of player names
            random_seed: Random seed for reproducibility
            kingdom_cards: Kingdom to use (defaults to the fixed kingdom)
        """
        self.num_players = num_players
        self.player_names = player_names
        self.random_seed = random_seed
        self.kingdom_cards = kingdom_cards

        self.state = self._setup_game()
        self.agent_callbacks: Dict[int, Callable[[GameState, int], Move]] = {}
        self.stats: Dict[str, Any] = defaultdict(int)
        self.start_time = time.time()
        self.end_time: Optional[float] = None

    def _setup_game(self) -> GameState:
        return new_game(
            kingdom_cards=self.kingdom_cards,
            player_count=self.num_players,
            random_seed=self.random_seed,
            player_names=self.player_names,
        )

    def reset(self) -> GameState:
        """
        Reset the game to a new initial state.

        Returns:
            New game state
        """
        self.state = self._setup_game()
        self.stats = defaultdict(int)
        self.start_time = time.time()
        self.end_time = None
        return self.state

    def register_agent(self, player_id: int, agent_callback: Callable[[GameState, int], Move]) -> None:
        """
        Register an agent for a player.

        The agent callback takes a game state and player ID and returns a move.

        Args:
            player_id: ID of the player
            agent_callback: Function that selects a move given the game state
        """
        self.agent_callbacks[player_id] = agent_callback

    def step(self, move: Optional[Move] = None) -> Tuple[GameState, bool]:
        """
        Advance the game by one move.

        If a move is provided, it will be applied. Otherwise the acting
        player's agent callback is asked for one.

        Args:
            move: Optional move to apply

        Returns:
            Tuple of (game state, whether the game is over)

        Raises:
            IllegalMoveError: If the move is not legal
        """
        if self.state.game_over:
            return self.state, True

        acting_player = self.state.acting_player

        if move is None and acting_player in self.agent_callbacks:
            move = self.agent_callbacks[acting_player](self.state, acting_player)

        if move is None:
            raise ValueError(f"No move provided and no agent registered for player {acting_player}")

        self.state.apply_move(move)
        self._update_stats(acting_player, move)

        if self.state.game_over:
            self.end_time = time.time()

        return self.state, self.state.game_over

    def _update_stats(self, player_id: int, move: Move) -> None:
        self.stats["moves"] += 1
        self.stats[f"moves_{move.move_type.name.lower()}"] += 1
        self.stats[f"player_{player_id}_moves"] += 1

    def run_game(self, max_turns: int = 200) -> GameState:
        """
        Run the game until completion or max turns.

        All players must have agent callbacks registered.

        Args:
            max_turns: Maximum number of turns to run

        Returns:
            Final game state
        """
        for i in range(self.num_players):
            if i not in self.agent_callbacks:
                raise ValueError(f"No agent callback registered for player {i}")

        while not self.state.game_over and self.state.turn_count <= max_turns:
            self.step()

        return self.state

    def get_winners(self) -> List[int]:
        """
        Get the IDs of the winning players.

        Returns:
            List of winners, empty while the game is in progress
        """
        if not self.state.game_over:
            return []
        return self.state.winners()

    def get_game_statistics(self) -> Dict[str, Any]:
        """
        Get statistics about the game.

        Returns:
            Dictionary of game statistics
        """
        stats = dict(self.stats)
        end_time = self.end_time if self.end_time is not None else time.time()
        stats["duration"] = end_time - self.start_time
        stats["turns"] = self.state.turn_count
        stats["players"] = self.num_players
        stats["result"] = self.state.result.name
        if self.state.game_over:
            stats["winners"] = self.state.winners()

        for i, player in enumerate(self.state.players):
            stats[f"player_{i}_score"] = player.victory_points
            stats[f"player_{i}_cards"] = len(player.all_cards())
            stats[f"player_{i}_turns"] = player.turns_taken

        return stats

    def __str__(self) -> str:
        return str(self.state)
