"""
Shared fixtures and helpers for the Dominion AI tests.
"""
import pytest

from dominion_ai.core.constants import Phase
from dominion_ai.core.game import GameState, new_game
from dominion_ai.core.moves import EndPhase


def give_hand(state: GameState, player_id: int, cards) -> None:
    """
    Replace a player's hand, swapping cards with the supply so every card
    copy stays accounted for.
    """
    player = state.players[player_id]
    for card in player.hand:
        state.supply[card] += 1
    for card in cards:
        state.supply[card] -= 1
    player.hand = list(cards)


def stack_deck(state: GameState, player_id: int, cards) -> None:
    """Put cards from the supply on top of a deck; the first card is drawn first."""
    player = state.players[player_id]
    for card in cards:
        state.supply[card] -= 1
    player.deck.extend(reversed(list(cards)))


def to_buy_phase(state: GameState) -> None:
    assert state.phase == Phase.ACTION
    state.apply_move(EndPhase())


@pytest.fixture
def state() -> GameState:
    """A fresh, seeded two-player game."""
    return new_game(random_seed=1234)


@pytest.fixture
def three_player_state() -> GameState:
    return new_game(player_count=3, random_seed=99)
