"""
Moves for the Dominion game.

This module defines every choice a player can make:
- Turn moves: playing an action or treasure, buying a card, ending a phase
- Decision moves: answering a pending decision created by a card effect
  (discarding, trashing, gaining, revealing a reaction)

Moves are immutable value objects. Each includes validation against a game
state, the state mutation it performs, and a deterministic sort key used to
order legal moves canonically.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Sequence, Tuple

from dominion_ai.core.cards import Card, SILVER, distinct_cards, get_card
from dominion_ai.core.constants import DecisionKind, Phase


class MoveType(Enum):
    """Enum representing the different kinds of moves, in canonical order."""
    PLAY_ACTION = 1
    PLAY_TREASURE = 2
    BUY = 3
    END_PHASE = 4
    DISCARD = 5
    TRASH = 6
    GAIN = 7
    REVEAL_REACTION = 8


class Move(ABC):
    """
    Abstract base class for all Dominion moves.

    A move is always made by the game's acting player: the active player
    during the Action and Buy phases, or the owner of the pending decision.
    """
    move_type: ClassVar[MoveType]

    @abstractmethod
    def validate(self, game_state) -> bool:
        """
        Validate if the move is legal in the current game state.

        Args:
            game_state: Current state of the game

        Returns:
            True if the move is valid, False otherwise
        """
        pass

    @abstractmethod
    def execute(self, game_state) -> None:
        """
        Execute the move, modifying the game state.

        Follow-on card effects are resolved by the game state afterwards.

        Args:
            game_state: Current state of the game
        """
        pass

    @abstractmethod
    def sort_key(self) -> Tuple:
        """
        Deterministic ordering key: move kind first, then catalog order.

        Returns:
            Tuple usable for sorting
        """
        pass

    @abstractmethod
    def to_dict(self) -> Dict:
        """
        Convert the move to a dictionary for serialization.

        Returns:
            Dictionary representation of the move
        """
        pass

    @classmethod
    @abstractmethod
    def from_dict(cls, data: Dict) -> Move:
        """
        Create a move from a dictionary representation.

        Args:
            data: Dictionary representation of the move

        Returns:
            Move object
        """
        pass

    @abstractmethod
    def __str__(self) -> str:
        pass


def _turn_move_allowed(game_state, phase: Phase) -> bool:
    return (
        not game_state.game_over
        and game_state.pending is None
        and game_state.turn_phase == phase
    )


def _pending_of_kind(game_state, kind: DecisionKind):
    if game_state.game_over or game_state.pending is None:
        return None
    if game_state.pending.kind != kind:
        return None
    return game_state.pending


def _card_dict(move_type: MoveType, card: Optional[Card]) -> Dict:
    return {
        "move_type": move_type.name,
        "card": card.name if card is not None else None,
    }


def _card_from_dict(data: Dict) -> Optional[Card]:
    name = data.get("card")
    return get_card(name) if name is not None else None


def _card_order(card: Optional[Card]) -> int:
    return card.order if card is not None else -1


@dataclass(frozen=True)
class PlayAction(Move):
    """Play an action card from hand during the Action phase."""
    move_type: ClassVar[MoveType] = MoveType.PLAY_ACTION
    card: Card

    def validate(self, game_state) -> bool:
        if not _turn_move_allowed(game_state, Phase.ACTION):
            return False
        player = game_state.active_player
        return player.actions > 0 and self.card.is_action and self.card in player.hand

    def execute(self, game_state) -> None:
        game_state.play_action(self.card)

    def sort_key(self) -> Tuple:
        return (self.move_type.value, self.card.order)

    def to_dict(self) -> Dict:
        return _card_dict(self.move_type, self.card)

    @classmethod
    def from_dict(cls, data: Dict) -> PlayAction:
        return cls(card=_card_from_dict(data))

    def __str__(self) -> str:
        return f"Play {self.card}"


@dataclass(frozen=True)
class PlayTreasure(Move):
    """
    Play a treasure card from hand during the Buy phase.

    Treasures can only be played before the first card is bought.
    """
    move_type: ClassVar[MoveType] = MoveType.PLAY_TREASURE
    card: Card

    def validate(self, game_state) -> bool:
        if not _turn_move_allowed(game_state, Phase.BUY) or game_state.has_bought:
            return False
        return self.card.is_treasure and self.card in game_state.active_player.hand

    def execute(self, game_state) -> None:
        player = game_state.active_player
        player.remove_from_hand(self.card)
        player.play_area.append(self.card)
        player.coins += self.card.coins

        # Merchant bonus applies to the first Silver only
        if self.card == SILVER and not game_state.silver_played:
            game_state.silver_played = True
            player.coins += game_state.merchant_bonus

    def sort_key(self) -> Tuple:
        return (self.move_type.value, self.card.order)

    def to_dict(self) -> Dict:
        return _card_dict(self.move_type, self.card)

    @classmethod
    def from_dict(cls, data: Dict) -> PlayTreasure:
        return cls(card=_card_from_dict(data))

    def __str__(self) -> str:
        return f"Play {self.card}"


@dataclass(frozen=True)
class Buy(Move):
    """Buy a card from the supply during the Buy phase."""
    move_type: ClassVar[MoveType] = MoveType.BUY
    card: Card

    def validate(self, game_state) -> bool:
        if not _turn_move_allowed(game_state, Phase.BUY):
            return False
        player = game_state.active_player
        return (
            player.buys > 0
            and game_state.supply.get(self.card, 0) > 0
            and self.card.cost <= player.coins
        )

    def execute(self, game_state) -> None:
        player = game_state.active_player
        player.coins -= self.card.cost
        player.buys -= 1
        game_state.has_bought = True
        game_state.gain_card(player.id, self.card)

    def sort_key(self) -> Tuple:
        return (self.move_type.value, self.card.order)

    def to_dict(self) -> Dict:
        return _card_dict(self.move_type, self.card)

    @classmethod
    def from_dict(cls, data: Dict) -> Buy:
        return cls(card=_card_from_dict(data))

    def __str__(self) -> str:
        return f"Buy {self.card}"


@dataclass(frozen=True)
class EndPhase(Move):
    """End the Action phase (moving to Buy) or the Buy phase (moving to Cleanup)."""
    move_type: ClassVar[MoveType] = MoveType.END_PHASE

    def validate(self, game_state) -> bool:
        return (
            not game_state.game_over
            and game_state.pending is None
            and game_state.turn_phase in (Phase.ACTION, Phase.BUY)
        )

    def execute(self, game_state) -> None:
        game_state.end_phase()

    def sort_key(self) -> Tuple:
        return (self.move_type.value,)

    def to_dict(self) -> Dict:
        return {"move_type": self.move_type.name}

    @classmethod
    def from_dict(cls, data: Dict) -> EndPhase:
        return cls()

    def __str__(self) -> str:
        return "End phase"


@dataclass(frozen=True)
class DiscardChoice(Move):
    """
    Discard a multiset of cards from hand to answer a discard decision.

    The cards are normalized to catalog order, so two choices discarding the
    same cards are equal regardless of the order they were listed in.
    """
    move_type: ClassVar[MoveType] = MoveType.DISCARD
    cards: Tuple[Card, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "cards", tuple(sorted(self.cards, key=lambda card: card.order)))

    def validate(self, game_state) -> bool:
        pending = _pending_of_kind(game_state, DecisionKind.DISCARD)
        if pending is None:
            return False
        if not pending.min_count <= len(self.cards) <= pending.max_count:
            return False
        hand = Counter(game_state.players[pending.player].hand)
        return not Counter(self.cards) - hand

    def execute(self, game_state) -> None:
        game_state.resolve_discard(list(self.cards))

    def sort_key(self) -> Tuple:
        return (self.move_type.value, len(self.cards), tuple(card.order for card in self.cards))

    def to_dict(self) -> Dict:
        return {"move_type": self.move_type.name, "cards": [card.name for card in self.cards]}

    @classmethod
    def from_dict(cls, data: Dict) -> DiscardChoice:
        return cls(cards=tuple(get_card(name) for name in data["cards"]))

    def __str__(self) -> str:
        if not self.cards:
            return "Discard nothing"
        return "Discard " + ", ".join(card.name for card in self.cards)


@dataclass(frozen=True)
class TrashChoice(Move):
    """Trash a card from hand, or decline when the trash is optional (card is None)."""
    move_type: ClassVar[MoveType] = MoveType.TRASH
    card: Optional[Card] = None

    def validate(self, game_state) -> bool:
        pending = _pending_of_kind(game_state, DecisionKind.TRASH)
        if pending is None:
            return False
        if self.card is None:
            return pending.optional
        return (
            self.card in pending.choices
            and self.card in game_state.players[pending.player].hand
        )

    def execute(self, game_state) -> None:
        game_state.resolve_trash(self.card)

    def sort_key(self) -> Tuple:
        return (self.move_type.value, _card_order(self.card))

    def to_dict(self) -> Dict:
        return _card_dict(self.move_type, self.card)

    @classmethod
    def from_dict(cls, data: Dict) -> TrashChoice:
        return cls(card=_card_from_dict(data))

    def __str__(self) -> str:
        return f"Trash {self.card}" if self.card is not None else "Trash nothing"


@dataclass(frozen=True)
class GainChoice(Move):
    """Gain a card from the supply to answer a gain decision."""
    move_type: ClassVar[MoveType] = MoveType.GAIN
    card: Card

    def validate(self, game_state) -> bool:
        pending = _pending_of_kind(game_state, DecisionKind.GAIN)
        if pending is None:
            return False
        return self.card in pending.choices and game_state.supply.get(self.card, 0) > 0

    def execute(self, game_state) -> None:
        game_state.resolve_gain(self.card)

    def sort_key(self) -> Tuple:
        return (self.move_type.value, self.card.order)

    def to_dict(self) -> Dict:
        return _card_dict(self.move_type, self.card)

    @classmethod
    def from_dict(cls, data: Dict) -> GainChoice:
        return cls(card=_card_from_dict(data))

    def __str__(self) -> str:
        return f"Gain {self.card}"


@dataclass(frozen=True)
class RevealReaction(Move):
    """Reveal a reaction card against an attack, or decline (card is None)."""
    move_type: ClassVar[MoveType] = MoveType.REVEAL_REACTION
    card: Optional[Card] = None

    def validate(self, game_state) -> bool:
        pending = _pending_of_kind(game_state, DecisionKind.REVEAL_REACTION)
        if pending is None:
            return False
        if self.card is None:
            return True
        return (
            self.card in pending.choices
            and self.card in game_state.players[pending.player].hand
        )

    def execute(self, game_state) -> None:
        game_state.resolve_reveal(self.card)

    def sort_key(self) -> Tuple:
        return (self.move_type.value, _card_order(self.card))

    def to_dict(self) -> Dict:
        return _card_dict(self.move_type, self.card)

    @classmethod
    def from_dict(cls, data: Dict) -> RevealReaction:
        return cls(card=_card_from_dict(data))

    def __str__(self) -> str:
        return f"Reveal {self.card}" if self.card is not None else "Reveal nothing"


MOVE_CLASSES = {
    MoveType.PLAY_ACTION: PlayAction,
    MoveType.PLAY_TREASURE: PlayTreasure,
    MoveType.BUY: Buy,
    MoveType.END_PHASE: EndPhase,
    MoveType.DISCARD: DiscardChoice,
    MoveType.TRASH: TrashChoice,
    MoveType.GAIN: GainChoice,
    MoveType.REVEAL_REACTION: RevealReaction,
}


def get_all_legal_moves(game_state) -> List[Move]:
    """
    Get all legal moves for the acting player, in canonical order.

    Candidates are built for the current decision point and kept only if
    they pass validation, so generation and validation cannot disagree.

    Args:
        game_state: Current state of the game

    Returns:
        List of legal moves sorted by sort_key (empty once the game is over)
    """
    if game_state.game_over:
        return []

    candidates: List[Move] = []
    pending = game_state.pending

    if pending is not None:
        hand = game_state.players[pending.player].hand
        if pending.kind == DecisionKind.DISCARD:
            for cards in _hand_multisets(hand, pending.min_count, pending.max_count):
                candidates.append(DiscardChoice(cards=cards))
        elif pending.kind == DecisionKind.TRASH:
            candidates.extend(TrashChoice(card) for card in pending.choices)
            if pending.optional:
                candidates.append(TrashChoice(None))
        elif pending.kind == DecisionKind.GAIN:
            candidates.extend(GainChoice(card) for card in pending.choices)
        elif pending.kind == DecisionKind.REVEAL_REACTION:
            candidates.extend(RevealReaction(card) for card in pending.choices)
            candidates.append(RevealReaction(None))
    else:
        player = game_state.active_player
        in_hand = distinct_cards(player.hand)
        if game_state.turn_phase == Phase.ACTION:
            candidates.extend(PlayAction(card) for card in in_hand if card.is_action)
        elif game_state.turn_phase == Phase.BUY:
            candidates.extend(PlayTreasure(card) for card in in_hand if card.is_treasure)
            candidates.extend(Buy(card) for card in game_state.supply)
        candidates.append(EndPhase())

    valid_moves = [move for move in candidates if move.validate(game_state)]
    valid_moves.sort(key=lambda move: move.sort_key())
    return valid_moves


def _hand_multisets(hand: Sequence[Card], min_count: int, max_count: int) -> List[Tuple[Card, ...]]:
    """
    Get every distinct multiset of cards from a hand within a size range.

    Args:
        hand: Cards in hand
        min_count: Smallest multiset size
        max_count: Largest multiset size

    Returns:
        List of card tuples in catalog order
    """
    counts = Counter(hand)
    cards = distinct_cards(hand)
    result: List[Tuple[Card, ...]] = []
    _collect_multisets(result, [], [(card, counts[card]) for card in cards], 0, min_count, max_count)
    return result


def _collect_multisets(
    result: List[Tuple[Card, ...]],
    chosen: List[Card],
    counts: List[Tuple[Card, int]],
    index: int,
    min_count: int,
    max_count: int
) -> None:
    """
    Recursively choose how many copies of each distinct card to include.

    Args:
        result: List to append complete multisets to
        chosen: Cards chosen so far
        counts: Distinct cards with their available copies
        index: Current position in counts
        min_count: Smallest multiset size
        max_count: Largest multiset size
    """
    if index == len(counts):
        if len(chosen) >= min_count:
            result.append(tuple(chosen))
        return

    card, available = counts[index]
    for copies in range(available + 1):
        if len(chosen) + copies > max_count:
            break
        chosen.extend([card] * copies)
        _collect_multisets(result, chosen, counts, index + 1, min_count, max_count)
        # Backtrack
        if copies:
            del chosen[-copies:]


def move_from_dict(data: Dict) -> Move:
    """
    Create a move from a dictionary representation.

    Args:
        data: Dictionary representation of a move

    Returns:
        Move object
    """
    move_type = MoveType[data["move_type"]]
    return MOVE_CLASSES[move_type].from_dict(data)
