import random
from collections import Counter

import pytest

from conftest import give_hand, stack_deck, to_buy_phase
from dominion_ai.core.cards import (
    CELLAR, COPPER, CURSE, ESTATE, GOLD, KINGDOM_CARDS, MARKET, MERCHANT, MILITIA, MINE, MOAT,
    PROVINCE, REMODEL, SILVER, SMITHY, VILLAGE, WORKSHOP
)
from dominion_ai.core.constants import KINGDOM_CARD_NAMES, DecisionKind, GainDestination, Phase
from dominion_ai.core.errors import IllegalMoveError
from dominion_ai.core.game import Game, GameResult, apply_move, is_terminal, legal_moves, new_game, score
from dominion_ai.core.moves import (
    Buy, DiscardChoice, EndPhase, GainChoice, PlayAction, PlayTreasure,
    RevealReaction, TrashChoice
)
from dominion_ai.core.player import PlayerState
from dominion_ai.mcts.policy import BigMoneyPolicy


def test_new_game_setup(state):
    assert state.num_players == 2
    assert state.phase == Phase.ACTION
    assert state.current_player == 0
    assert state.turn_count == 1
    for player in state.players:
        assert len(player.hand) == 5
        assert len(player.deck) == 5
        assert Counter(player.all_cards()) == Counter({COPPER: 7, ESTATE: 3})
    assert state.active_player.actions == 1
    assert state.active_player.buys == 1
    assert state.active_player.coins == 0
    state.verify_conservation()


def test_new_game_is_reproducible():
    first = new_game(random_seed=7)
    second = new_game(random_seed=7)
    assert first == second
    assert first.rng.getstate() == second.rng.getstate()


def test_new_game_accepts_card_names():
    state = new_game(kingdom_cards=list(reversed(KINGDOM_CARD_NAMES)), random_seed=1)
    assert state.kingdom == tuple(KINGDOM_CARDS)


@pytest.mark.parametrize("kwargs", [
    {"player_count": 1},
    {"player_count": 5},
    {"kingdom_cards": ["Village"] * 10},
    {"player_names": ["Only one"]},
])
def test_new_game_rejects_bad_setup(kwargs):
    with pytest.raises(ValueError):
        new_game(**kwargs)


def test_draw_reshuffles_discard_when_deck_runs_out():
    player = PlayerState(id=0, name="P", deck=[COPPER], discard=[ESTATE, SILVER])
    drawn = player.draw(3, random.Random(0))
    assert drawn[0] == COPPER
    assert Counter(drawn) == Counter([COPPER, ESTATE, SILVER])
    assert player.deck == [] and player.discard == []


def test_short_draw_when_deck_and_discard_are_empty():
    player = PlayerState(id=0, name="P", deck=[GOLD])
    assert player.draw(3, random.Random(0)) == [GOLD]
    assert player.hand == [GOLD]


def test_playing_seven_coppers_then_buying_silver(state):
    give_hand(state, 0, [COPPER] * 7)
    to_buy_phase(state)
    for _ in range(7):
        state.apply_move(PlayTreasure(COPPER))
    player = state.active_player
    assert player.coins == 7

    silver_left = state.supply[SILVER]
    state.apply_move(Buy(SILVER))
    assert player.coins == 4
    assert player.buys == 0
    assert state.supply[SILVER] == silver_left - 1
    assert SILVER in player.discard
    state.verify_conservation()


def test_zero_coins_only_allows_ending_the_phase(state):
    give_hand(state, 0, [ESTATE] * 5)
    state.supply[COPPER] = 0
    state.supply[CURSE] = 0
    to_buy_phase(state)
    assert legal_moves(state) == [EndPhase()]


def test_zero_cost_cards_are_buyable_with_zero_coins(state):
    give_hand(state, 0, [ESTATE] * 5)
    to_buy_phase(state)
    assert set(legal_moves(state)) == {Buy(COPPER), Buy(CURSE), EndPhase()}


def test_leaving_action_phase_clears_actions(state):
    to_buy_phase(state)
    assert state.phase == Phase.BUY
    assert state.active_player.actions == 0


def test_militia_forces_discard_to_three(state):
    give_hand(state, 0, [MILITIA] + [COPPER] * 4)
    give_hand(state, 1, [COPPER] * 3 + [ESTATE] * 2)

    state.apply_move(PlayAction(MILITIA))
    assert state.active_player.coins == 2
    assert state.phase == Phase.PENDING_DECISION
    assert state.acting_player == 1
    assert state.pending.kind == DecisionKind.DISCARD
    assert state.pending.min_count == state.pending.max_count == 2

    moves = legal_moves(state)
    assert set(moves) == {
        DiscardChoice((COPPER, COPPER)),
        DiscardChoice((COPPER, ESTATE)),
        DiscardChoice((ESTATE, ESTATE)),
    }

    state.apply_move(DiscardChoice((ESTATE, ESTATE)))
    victim = state.players[1]
    assert Counter(victim.hand) == Counter([COPPER] * 3)
    assert victim.discard.count(ESTATE) == 2
    assert state.phase == Phase.ACTION
    assert state.acting_player == 0
    state.verify_conservation()


def test_militia_skips_hands_of_three_or_fewer(state):
    give_hand(state, 0, [MILITIA] + [COPPER] * 4)
    give_hand(state, 1, [COPPER] * 3)
    state.apply_move(PlayAction(MILITIA))
    assert state.pending is None
    assert state.phase == Phase.ACTION


def test_militia_hits_every_opponent_in_turn_order(three_player_state):
    state = three_player_state
    give_hand(state, 0, [MILITIA] + [COPPER] * 4)
    state.apply_move(PlayAction(MILITIA))

    assert state.acting_player == 1
    state.apply_move(legal_moves(state)[0])
    assert state.acting_player == 2
    state.apply_move(legal_moves(state)[0])
    assert state.phase == Phase.ACTION
    assert len(state.players[1].hand) == 3
    assert len(state.players[2].hand) == 3


def test_moat_blocks_militia(state):
    give_hand(state, 0, [MILITIA] + [COPPER] * 4)
    give_hand(state, 1, [MOAT] + [COPPER] * 4)

    state.apply_move(PlayAction(MILITIA))
    assert state.pending.kind == DecisionKind.REVEAL_REACTION
    assert state.acting_player == 1
    assert set(legal_moves(state)) == {RevealReaction(MOAT), RevealReaction(None)}

    state.apply_move(RevealReaction(MOAT))
    assert state.phase == Phase.ACTION
    assert len(state.players[1].hand) == 5
    assert state.active_player.coins == 2


def test_declining_moat_still_discards(state):
    give_hand(state, 0, [MILITIA] + [COPPER] * 4)
    give_hand(state, 1, [MOAT] + [COPPER] * 4)

    state.apply_move(PlayAction(MILITIA))
    state.apply_move(RevealReaction(None))
    assert state.pending.kind == DecisionKind.DISCARD
    assert state.pending.min_count == 2


def test_cellar_discards_then_draws_as_many(state):
    give_hand(state, 0, [CELLAR, ESTATE, ESTATE, COPPER, COPPER])
    stack_deck(state, 0, [SILVER, GOLD])

    state.apply_move(PlayAction(CELLAR))
    assert state.active_player.actions == 1
    assert state.pending.kind == DecisionKind.DISCARD
    assert state.pending.min_count == 0
    assert state.pending.max_count == 4
    assert DiscardChoice(()) in legal_moves(state)

    state.apply_move(DiscardChoice((ESTATE, ESTATE)))
    assert Counter(state.active_player.hand) == Counter([COPPER, COPPER, SILVER, GOLD])
    state.verify_conservation()


def test_remodel_trashes_then_gains_up_to_two_more(state):
    give_hand(state, 0, [REMODEL, ESTATE, COPPER, COPPER, COPPER])

    state.apply_move(PlayAction(REMODEL))
    assert state.pending.kind == DecisionKind.TRASH
    assert set(legal_moves(state)) == {TrashChoice(ESTATE), TrashChoice(COPPER)}

    state.apply_move(TrashChoice(ESTATE))
    assert state.trash == [ESTATE]
    assert state.pending.kind == DecisionKind.GAIN
    choices = set(state.pending.choices)
    assert SMITHY in choices and SILVER in choices
    assert MARKET not in choices and GOLD not in choices

    state.apply_move(GainChoice(SMITHY))
    assert SMITHY in state.active_player.discard
    assert state.phase == Phase.ACTION
    state.verify_conservation()


def test_remodel_with_empty_hand_does_nothing(state):
    give_hand(state, 0, [REMODEL])
    state.apply_move(PlayAction(REMODEL))
    assert state.pending is None
    assert state.phase == Phase.ACTION


def test_mine_upgrades_treasure_into_hand(state):
    give_hand(state, 0, [MINE, COPPER, ESTATE, ESTATE, ESTATE])

    state.apply_move(PlayAction(MINE))
    assert set(legal_moves(state)) == {TrashChoice(COPPER), TrashChoice(None)}

    state.apply_move(TrashChoice(COPPER))
    assert state.pending.kind == DecisionKind.GAIN
    assert state.pending.destination == GainDestination.HAND
    assert set(state.pending.choices) == {COPPER, SILVER}

    state.apply_move(GainChoice(SILVER))
    assert SILVER in state.active_player.hand
    assert COPPER not in state.active_player.hand
    state.verify_conservation()


def test_mine_trash_is_optional(state):
    give_hand(state, 0, [MINE, COPPER, ESTATE, ESTATE, ESTATE])
    state.apply_move(PlayAction(MINE))
    state.apply_move(TrashChoice(None))
    assert state.trash == []
    assert state.phase == Phase.ACTION


def test_mine_without_treasures_is_skipped(state):
    give_hand(state, 0, [MINE, ESTATE, ESTATE])
    state.apply_move(PlayAction(MINE))
    assert state.pending is None


def test_workshop_gains_card_costing_up_to_four(state):
    give_hand(state, 0, [WORKSHOP] + [COPPER] * 4)
    state.apply_move(PlayAction(WORKSHOP))
    choices = state.pending.choices
    assert all(card.cost <= 4 for card in choices)
    assert SMITHY in choices and GOLD not in choices

    state.apply_move(GainChoice(SILVER))
    assert SILVER in state.active_player.discard


def test_merchant_bonus_on_first_silver_only(state):
    give_hand(state, 0, [MERCHANT, SILVER, SILVER, COPPER, ESTATE])
    stack_deck(state, 0, [ESTATE])

    state.apply_move(PlayAction(MERCHANT))
    player = state.active_player
    assert player.actions == 1
    assert len(player.hand) == 5

    state.apply_move(EndPhase())
    state.apply_move(PlayTreasure(SILVER))
    assert player.coins == 3
    state.apply_move(PlayTreasure(SILVER))
    assert player.coins == 5
    state.apply_move(PlayTreasure(COPPER))
    assert player.coins == 6


def test_each_merchant_adds_to_the_bonus(state):
    give_hand(state, 0, [MERCHANT, MERCHANT, SILVER, ESTATE, ESTATE])
    stack_deck(state, 0, [ESTATE, ESTATE])

    state.apply_move(PlayAction(MERCHANT))
    state.apply_move(PlayAction(MERCHANT))
    state.apply_move(EndPhase())
    state.apply_move(PlayTreasure(SILVER))
    assert state.active_player.coins == 4


def test_village_smithy_and_market(state):
    give_hand(state, 0, [VILLAGE, SMITHY, MARKET, ESTATE, ESTATE])
    stack_deck(state, 0, [COPPER, COPPER, COPPER, COPPER, COPPER])
    player = state.active_player

    state.apply_move(PlayAction(VILLAGE))
    assert player.actions == 2
    assert len(player.hand) == 5

    state.apply_move(PlayAction(MARKET))
    assert player.actions == 2
    assert player.buys == 2
    assert player.coins == 1
    assert len(player.hand) == 5

    state.apply_move(PlayAction(SMITHY))
    assert player.actions == 1
    assert len(player.hand) == 7
    assert player.play_area == [VILLAGE, MARKET, SMITHY]


def test_no_actions_left_only_allows_ending_phase(state):
    give_hand(state, 0, [SMITHY, SMITHY, COPPER])
    state.apply_move(PlayAction(SMITHY))
    assert state.active_player.actions == 0
    assert legal_moves(state) == [EndPhase()]


def test_treasures_cannot_be_played_after_buying(state):
    give_hand(state, 0, [COPPER] * 5)
    to_buy_phase(state)
    for _ in range(3):
        state.apply_move(PlayTreasure(COPPER))
    state.apply_move(Buy(SILVER))

    assert PlayTreasure(COPPER) not in legal_moves(state)
    with pytest.raises(IllegalMoveError):
        state.apply_move(PlayTreasure(COPPER))


def test_cleanup_passes_the_turn(state):
    state.apply_move(EndPhase())
    state.apply_move(EndPhase())

    previous = state.players[0]
    assert len(previous.hand) == 5
    assert previous.play_area == []
    assert previous.coins == previous.actions == previous.buys == 0
    assert previous.turns_taken == 1

    assert state.current_player == 1
    assert state.turn_count == 2
    assert state.phase == Phase.ACTION
    assert state.active_player.actions == 1
    assert state.active_player.buys == 1


def test_game_ends_after_the_turn_province_pile_empties(state):
    state.supply[PROVINCE] = 0
    assert not is_terminal(state)

    state.apply_move(EndPhase())
    state.apply_move(EndPhase())
    assert is_terminal(state)
    assert legal_moves(state) == []
    assert state.current_player == 0
    with pytest.raises(IllegalMoveError):
        state.apply_move(EndPhase())


def test_game_ends_on_three_empty_piles(state):
    state.supply[CURSE] = 0
    state.supply[CELLAR] = 0
    state.apply_move(EndPhase())
    state.apply_move(EndPhase())
    assert not is_terminal(state)

    state.supply[MOAT] = 0
    state.apply_move(EndPhase())
    state.apply_move(EndPhase())
    assert is_terminal(state)


def test_ties_go_to_the_player_with_fewer_turns(state):
    state.apply_move(EndPhase())
    state.apply_move(EndPhase())
    assert state.scores() == [3, 3]
    assert state.winners() == [1]
    assert state.outcome() == {0: 0.0, 1: 1.0}

    state.apply_move(EndPhase())
    state.apply_move(EndPhase())
    assert state.winners() == [0, 1]
    assert state.outcome() == {0: 0.5, 1: 0.5}


def test_draw_result_once_game_is_over(state):
    state.supply[PROVINCE] = 0
    state.apply_move(EndPhase())
    state.apply_move(EndPhase())
    assert state.result == GameResult.WINNER

    other = new_game(random_seed=3)
    assert other.result == GameResult.IN_PROGRESS


def test_score_counts_curses(state):
    assert score(state, 0) == 3
    state.players[0].discard.append(CURSE)
    assert score(state, 0) == 2


def test_illegal_move_leaves_state_untouched(state):
    before = state.to_dict()
    with pytest.raises(IllegalMoveError) as excinfo:
        state.apply_move(Buy(COPPER))
    assert isinstance(excinfo.value, ValueError)
    assert excinfo.value.move == Buy(COPPER)
    assert state.to_dict() == before


def test_apply_move_returns_a_new_state(state):
    before = state.clone()
    successor = apply_move(state, EndPhase())
    assert successor.phase == Phase.BUY
    assert state == before
    with pytest.raises(IllegalMoveError):
        apply_move(state, GainChoice(GOLD))


def test_game_asks_the_acting_player():
    game = Game(random_seed=5)
    give_hand(game.state, 0, [MILITIA] + [COPPER] * 4)
    give_hand(game.state, 1, [COPPER] * 5)

    asked = []

    def first_legal(state, player_id):
        asked.append(player_id)
        return state.get_legal_moves()[0]

    game.register_agent(0, first_legal)
    game.register_agent(1, first_legal)
    game.step()
    game.step()
    assert asked == [0, 1]
    assert len(game.state.players[1].hand) == 3


def test_step_without_agent_raises():
    game = Game(random_seed=5)
    with pytest.raises(ValueError):
        game.step()


def test_run_game_with_big_money_players():
    game = Game(random_seed=11)
    policy = BigMoneyPolicy()
    rng = random.Random(0)
    game.register_agent(0, policy.get_action_callback(rng))
    game.register_agent(1, policy.get_action_callback(rng))

    state = game.run_game(max_turns=200)
    assert state.game_over
    assert game.get_winners()
    stats = game.get_game_statistics()
    assert stats["moves"] > 0
    assert stats["result"] in ("WINNER", "DRAW")
    state.verify_conservation()
