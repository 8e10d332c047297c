"""
Card catalog for the Dominion game.

This module defines the immutable Card and CardEffect data structures, the
process-wide catalog of every card used by the fixed kingdom, and helpers for
building supplies and starting decks and for scoring collections of cards.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from dominion_ai.core.constants import (
    CardType, GainDestination, MIN_PLAYERS, MAX_PLAYERS,
    KINGDOM_CARD_NAMES, KINGDOM_PILE_SIZE, TOTAL_COPPERS, STARTING_COPPERS,
    STARTING_ESTATES, SILVER_PILE_SIZE, GOLD_PILE_SIZE, CURSES_PER_OPPONENT,
    VICTORY_PILE_SIZE_BY_PLAYERS, MILITIA_HAND_SIZE
)


class EffectKind(Enum):
    """Enum representing the building blocks of an action card's effect."""
    DRAW_CARDS = auto()
    PLUS_ACTIONS = auto()
    PLUS_BUYS = auto()
    PLUS_COINS = auto()
    OPPONENTS_DISCARD_TO = auto()
    GAIN_CARD_COSTING_UP_TO = auto()
    TRASH_AND_REPLACE = auto()  # Trash a card, gain one costing up to `amount` more
    DISCARD_FOR_DRAW = auto()  # Discard any number, draw that many
    SILVER_BONUS = auto()  # +`amount` coins on the first Silver played this turn


@dataclass(frozen=True)
class CardEffect:
    """
    One step of an action card's effect.

    Steps are resolved in order through the game's effect queue. Optional
    fields only matter for the kinds that use them.
    """
    kind: EffectKind
    amount: int = 0
    card_type: Optional[CardType] = None  # Restricts what may be trashed/gained
    destination: GainDestination = GainDestination.DISCARD
    optional: bool = False  # Whether the trash step may be skipped

    @property
    def targets_opponents(self) -> bool:
        """Whether this step is resolved by every opponent instead of the player."""
        return self.kind == EffectKind.OPPONENTS_DISCARD_TO


@dataclass(frozen=True, eq=False)
class Card:
    """
    Represents a card in Dominion.

    Cards are immutable and shared by every game state. Two cards are equal
    when they have the same name, and unpickling a card resolves it back to
    the catalog instance.
    """
    name: str
    cost: int
    types: Tuple[CardType, ...]
    coins: int = 0  # Coins produced when played as a treasure
    victory_points: int = 0
    effects: Tuple[CardEffect, ...] = ()
    order: int = 0  # Position in the catalog, used for deterministic ordering

    def __post_init__(self):
        """Validate the card after initialization."""
        if self.cost < 0:
            raise ValueError(f"Card cost cannot be negative: {self.name}")

        if not self.types:
            raise ValueError(f"Card must have at least one type: {self.name}")

        if CardType.TREASURE in self.types and self.coins <= 0:
            raise ValueError(f"Treasure must produce coins: {self.name}")

        if CardType.ACTION in self.types and not self.effects:
            raise ValueError(f"Action card must have an effect: {self.name}")

    @property
    def is_action(self) -> bool:
        return CardType.ACTION in self.types

    @property
    def is_treasure(self) -> bool:
        return CardType.TREASURE in self.types

    @property
    def is_victory(self) -> bool:
        return CardType.VICTORY in self.types

    @property
    def is_curse(self) -> bool:
        return CardType.CURSE in self.types

    @property
    def is_attack(self) -> bool:
        return CardType.ATTACK in self.types

    @property
    def is_reaction(self) -> bool:
        return CardType.REACTION in self.types

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __reduce__(self):
        return (get_card, (self.name,))

    def __repr__(self) -> str:
        return f"Card({self.name})"

    def __str__(self) -> str:
        return self.name


def _draw(n: int) -> CardEffect:
    return CardEffect(EffectKind.DRAW_CARDS, n)


def _actions(n: int) -> CardEffect:
    return CardEffect(EffectKind.PLUS_ACTIONS, n)


def _buys(n: int) -> CardEffect:
    return CardEffect(EffectKind.PLUS_BUYS, n)


def _coins(n: int) -> CardEffect:
    return CardEffect(EffectKind.PLUS_COINS, n)


# Base cards
COPPER = Card("Copper", 0, (CardType.TREASURE,), coins=1, order=0)
SILVER = Card("Silver", 3, (CardType.TREASURE,), coins=2, order=1)
GOLD = Card("Gold", 6, (CardType.TREASURE,), coins=3, order=2)
ESTATE = Card("Estate", 2, (CardType.VICTORY,), victory_points=1, order=3)
DUCHY = Card("Duchy", 5, (CardType.VICTORY,), victory_points=3, order=4)
PROVINCE = Card("Province", 8, (CardType.VICTORY,), victory_points=6, order=5)
CURSE = Card("Curse", 0, (CardType.CURSE,), victory_points=-1, order=6)

# Kingdom cards
CELLAR = Card(
    "Cellar", 2, (CardType.ACTION,),
    effects=(_actions(1), CardEffect(EffectKind.DISCARD_FOR_DRAW)),
    order=7,
)
MOAT = Card(
    "Moat", 2, (CardType.ACTION, CardType.REACTION),
    effects=(_draw(2),),
    order=8,
)
MERCHANT = Card(
    "Merchant", 3, (CardType.ACTION,),
    effects=(_draw(1), _actions(1), CardEffect(EffectKind.SILVER_BONUS, 1)),
    order=9,
)
VILLAGE = Card(
    "Village", 3, (CardType.ACTION,),
    effects=(_draw(1), _actions(2)),
    order=10,
)
WORKSHOP = Card(
    "Workshop", 3, (CardType.ACTION,),
    effects=(CardEffect(EffectKind.GAIN_CARD_COSTING_UP_TO, 4),),
    order=11,
)
MILITIA = Card(
    "Militia", 4, (CardType.ACTION, CardType.ATTACK),
    effects=(_coins(2), CardEffect(EffectKind.OPPONENTS_DISCARD_TO, MILITIA_HAND_SIZE)),
    order=12,
)
REMODEL = Card(
    "Remodel", 4, (CardType.ACTION,),
    effects=(CardEffect(EffectKind.TRASH_AND_REPLACE, 2),),
    order=13,
)
SMITHY = Card(
    "Smithy", 4, (CardType.ACTION,),
    effects=(_draw(3),),
    order=14,
)
MARKET = Card(
    "Market", 5, (CardType.ACTION,),
    effects=(_draw(1), _actions(1), _buys(1), _coins(1)),
    order=15,
)
MINE = Card(
    "Mine", 5, (CardType.ACTION,),
    effects=(CardEffect(
        EffectKind.TRASH_AND_REPLACE, 3,
        card_type=CardType.TREASURE,
        destination=GainDestination.HAND,
        optional=True,
    ),),
    order=16,
)

BASE_CARDS: List[Card] = [COPPER, SILVER, GOLD, ESTATE, DUCHY, PROVINCE, CURSE]

ALL_CARDS: List[Card] = BASE_CARDS + [
    CELLAR, MOAT, MERCHANT, VILLAGE, WORKSHOP,
    MILITIA, REMODEL, SMITHY, MARKET, MINE,
]

CARDS_BY_NAME: Dict[str, Card] = {card.name: card for card in ALL_CARDS}

# The fixed kingdom, in catalog order
KINGDOM_CARDS: List[Card] = sorted(
    (CARDS_BY_NAME[name] for name in KINGDOM_CARD_NAMES),
    key=lambda card: card.order
)


def get_card(name: str) -> Card:
    """
    Look up a card in the catalog by name.

    Args:
        name: Card name, e.g. "Village"

    Returns:
        The catalog Card
    """
    try:
        return CARDS_BY_NAME[name]
    except KeyError:
        raise ValueError(f"Unknown card: {name}") from None


def standard_supply(kingdom: Sequence[Card], num_players: int) -> Dict[Card, int]:
    """
    Create the supply piles for a game.

    Args:
        kingdom: The ten kingdom cards in play
        num_players: Number of players (2-4)

    Returns:
        Dictionary mapping each card to its starting pile size, in catalog order
    """
    if num_players < MIN_PLAYERS or num_players > MAX_PLAYERS:
        raise ValueError(f"Number of players must be between {MIN_PLAYERS} and {MAX_PLAYERS}")

    victory_count = VICTORY_PILE_SIZE_BY_PLAYERS[num_players]
    piles = {
        COPPER: TOTAL_COPPERS - STARTING_COPPERS * num_players,
        SILVER: SILVER_PILE_SIZE,
        GOLD: GOLD_PILE_SIZE,
        ESTATE: victory_count,
        DUCHY: victory_count,
        PROVINCE: victory_count,
        CURSE: CURSES_PER_OPPONENT * (num_players - 1),
    }

    for card in kingdom:
        piles[card] = victory_count if card.is_victory else KINGDOM_PILE_SIZE

    return dict(sorted(piles.items(), key=lambda item: item[0].order))


def starting_deck() -> List[Card]:
    """Return an unshuffled starting deck of 7 Coppers and 3 Estates."""
    return [COPPER] * STARTING_COPPERS + [ESTATE] * STARTING_ESTATES


def score_cards(cards: Iterable[Card]) -> int:
    """Total victory points of a collection of cards."""
    return sum(card.victory_points for card in cards)


def card_names(cards: Iterable[Card]) -> str:
    """Comma separated card names, for logs."""
    return ", ".join(card.name for card in cards)


def filter_by_type(cards: Iterable[Card], card_type: Optional[CardType]) -> List[Card]:
    """
    Filter cards by type.

    Args:
        cards: Cards to filter
        card_type: Type to keep, or None to keep everything

    Returns:
        List of matching cards
    """
    if card_type is None:
        return list(cards)
    return [card for card in cards if card_type in card.types]


def distinct_cards(cards: Iterable[Card]) -> List[Card]:
    """Unique cards from a collection, in catalog order."""
    return sorted(set(cards), key=lambda card: card.order)
