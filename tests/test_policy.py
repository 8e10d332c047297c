import random

import pytest

from conftest import give_hand, to_buy_phase
from dominion_ai.core.cards import COPPER, CURSE, ESTATE, GOLD, MILITIA, MOAT, PROVINCE, SILVER
from dominion_ai.core.errors import InvariantViolation
from dominion_ai.core.moves import (
    Buy, DiscardChoice, EndPhase, PlayAction, PlayTreasure, RevealReaction
)
from dominion_ai.mcts.policy import (
    BigMoneyPolicy, RandomRolloutPolicy, create_rollout_policy
)


def _buy_phase_with_coins(state, coins):
    give_hand(state, 0, [ESTATE] * 5)
    to_buy_phase(state)
    state.active_player.coins = coins


def test_random_policy_plays_treasures_first(state):
    give_hand(state, 0, [COPPER, COPPER, ESTATE])
    to_buy_phase(state)
    policy = RandomRolloutPolicy()
    move = policy.choose(state, state.get_legal_moves(), random.Random(0))
    assert move == PlayTreasure(COPPER)


def test_random_policy_never_ends_buy_phase_when_something_is_affordable(state):
    _buy_phase_with_coins(state, 3)
    policy = RandomRolloutPolicy()
    rng = random.Random(5)
    moves = state.get_legal_moves()
    chosen = {policy.choose(state, moves, rng) for _ in range(200)}
    assert EndPhase() not in chosen
    assert Buy(SILVER) in chosen


def test_random_policy_may_end_when_only_curse_and_copper_are_left(state):
    _buy_phase_with_coins(state, 0)
    state.supply[COPPER] = 0
    policy = RandomRolloutPolicy()
    moves = state.get_legal_moves()
    assert moves == [Buy(CURSE), EndPhase()]
    chosen = {policy.choose(state, moves, random.Random(seed)) for seed in range(50)}
    assert chosen == {Buy(CURSE), EndPhase()}


def test_random_policy_without_autoplay_can_skip_treasures(state):
    give_hand(state, 0, [COPPER] * 5)
    to_buy_phase(state)
    policy = RandomRolloutPolicy(autoplay_treasures=False)
    rng = random.Random(1)
    moves = state.get_legal_moves()
    chosen = {policy.choose(state, moves, rng) for _ in range(100)}
    assert any(isinstance(move, Buy) for move in chosen)


def test_random_policy_is_reproducible(state):
    policy = RandomRolloutPolicy()
    first = state.clone()
    second = state.clone()
    rng_a, rng_b = random.Random(42), random.Random(42)
    for _ in range(60):
        if first.game_over:
            break
        move_a = policy.choose(first, first.get_legal_moves(), rng_a)
        move_b = policy.choose(second, second.get_legal_moves(), rng_b)
        assert move_a == move_b
        first.apply_move(move_a)
        second.apply_move(move_b)
    assert first == second


def test_policies_reject_empty_move_lists(state):
    with pytest.raises(InvariantViolation):
        RandomRolloutPolicy().choose(state, [], random.Random(0))
    with pytest.raises(InvariantViolation):
        BigMoneyPolicy().choose(state, [], random.Random(0))


@pytest.mark.parametrize("coins,expected", [
    (8, Buy(PROVINCE)),
    (7, Buy(GOLD)),
    (6, Buy(GOLD)),
    (4, Buy(SILVER)),
    (2, EndPhase()),
])
def test_big_money_buy_thresholds(state, coins, expected):
    _buy_phase_with_coins(state, coins)
    move = BigMoneyPolicy().choose(state, state.get_legal_moves(), random.Random(0))
    assert move == expected


def test_big_money_skips_actions(state):
    give_hand(state, 0, [MILITIA] + [COPPER] * 4)
    moves = state.get_legal_moves()
    assert PlayAction(MILITIA) in moves
    assert BigMoneyPolicy().choose(state, moves, random.Random(0)) == EndPhase()


def test_big_money_discards_lowest_value_cards(state):
    give_hand(state, 0, [MILITIA] + [COPPER] * 4)
    give_hand(state, 1, [GOLD, SILVER, COPPER, ESTATE, ESTATE])
    state.apply_move(PlayAction(MILITIA))
    move = BigMoneyPolicy().choose(state, state.get_legal_moves(), random.Random(0))
    assert move == DiscardChoice((ESTATE, ESTATE))


def test_big_money_reveals_moat(state):
    give_hand(state, 0, [MILITIA] + [COPPER] * 4)
    give_hand(state, 1, [MOAT] + [COPPER] * 4)
    state.apply_move(PlayAction(MILITIA))
    move = BigMoneyPolicy().choose(state, state.get_legal_moves(), random.Random(0))
    assert move == RevealReaction(MOAT)


def test_create_rollout_policy():
    assert isinstance(create_rollout_policy("random"), RandomRolloutPolicy)
    assert not create_rollout_policy("random", autoplay_treasures=False).autoplay_treasures
    assert isinstance(create_rollout_policy("big_money"), BigMoneyPolicy)
    with pytest.raises(ValueError):
        create_rollout_policy("greedy")
