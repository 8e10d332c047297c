"""
Player representation for the Dominion game.

This module defines the PlayerState class which tracks a player's card zones
(deck, hand, discard pile and play area) and per-turn resources, and provides
the drawing and zone-moving primitives the rules engine is built on.
"""
import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List

from dominion_ai.core.cards import Card, card_names, score_cards

logger = logging.getLogger(__name__)


@dataclass
class PlayerState:
    """
    Represents a player in the Dominion game.

    The deck is a stack: the end of the list is the top card. Every zone is a
    plain list of shared, immutable Card objects, so cloning a player only
    copies the lists.
    """
    id: int  # Player ID (0-indexed)
    name: str  # Player name
    deck: List[Card] = field(default_factory=list)  # Draw pile, top = last
    hand: List[Card] = field(default_factory=list)
    discard: List[Card] = field(default_factory=list)
    play_area: List[Card] = field(default_factory=list)  # Cards played this turn
    actions: int = 0
    buys: int = 0
    coins: int = 0
    turns_taken: int = 0

    def draw(self, count: int, rng: random.Random) -> List[Card]:
        """
        Draw cards from the top of the deck into the hand.

        When the deck runs out the discard pile is shuffled to form a new
        deck. If both are empty the draw is short.

        Args:
            count: Number of cards to draw
            rng: Random source used for shuffling

        Returns:
            The cards drawn, in draw order
        """
        drawn = []
        for _ in range(count):
            if not self.deck:
                if not self.discard:
                    break
                self.shuffle_discard_into_deck(rng)
            drawn.append(self.deck.pop())
        self.hand.extend(drawn)
        return drawn

    def shuffle_discard_into_deck(self, rng: random.Random) -> None:
        """Shuffle the discard pile and place it under the current deck."""
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s shuffles %d cards", self.name, len(self.discard))
        new_deck = self.discard
        rng.shuffle(new_deck)
        self.discard = []
        # The old deck stays on top
        self.deck = new_deck + self.deck

    def remove_from_hand(self, card: Card) -> None:
        """
        Remove one copy of a card from the hand.

        Args:
            card: The card to remove
        """
        try:
            self.hand.remove(card)
        except ValueError:
            raise ValueError(f"{self.name} has no {card} in hand") from None

    def discard_from_hand(self, cards: List[Card]) -> None:
        for card in cards:
            self.remove_from_hand(card)
        self.discard.extend(cards)

    def cleanup(self, hand_size: int, rng: random.Random) -> None:
        """
        Discard the hand and play area, draw a new hand and reset resources.

        Args:
            hand_size: Number of cards in the new hand
            rng: Random source used for shuffling
        """
        self.discard.extend(self.hand)
        self.discard.extend(self.play_area)
        self.hand = []
        self.play_area = []
        self.actions = 0
        self.buys = 0
        self.coins = 0
        self.draw(hand_size, rng)

    def all_cards(self) -> List[Card]:
        """Every card the player owns, across all zones."""
        return self.deck + self.hand + self.discard + self.play_area

    @property
    def victory_points(self) -> int:
        """Victory points over every zone, Curses included."""
        return score_cards(self.all_cards())

    def clone(self) -> 'PlayerState':
        """
        Copy the player without sharing any zone list.

        Returns:
            A new PlayerState
        """
        return PlayerState(
            id=self.id,
            name=self.name,
            deck=list(self.deck),
            hand=list(self.hand),
            discard=list(self.discard),
            play_area=list(self.play_area),
            actions=self.actions,
            buys=self.buys,
            coins=self.coins,
            turns_taken=self.turns_taken,
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the player to a dictionary for logging and reports.

        Returns:
            Dictionary representation of the player
        """
        return {
            "id": self.id,
            "name": self.name,
            "deck": [card.name for card in self.deck],
            "hand": [card.name for card in self.hand],
            "discard": [card.name for card in self.discard],
            "play_area": [card.name for card in self.play_area],
            "actions": self.actions,
            "buys": self.buys,
            "coins": self.coins,
            "turns_taken": self.turns_taken,
            "victory_points": self.victory_points,
        }

    def __str__(self) -> str:
        return (
            f"Player {self.name} (ID: {self.id})\n"
            f"VP: {self.victory_points}\n"
            f"Hand: {card_names(self.hand)}\n"
            f"Deck: {len(self.deck)} cards, Discard: {len(self.discard)} cards\n"
            f"Actions: {self.actions}, Buys: {self.buys}, Coins: {self.coins}"
        )
