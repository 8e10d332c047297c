import pytest

from dominion_ai.core.cards import COPPER, ESTATE, GOLD, MOAT, PROVINCE, SILVER, VILLAGE
from dominion_ai.core.moves import (
    Buy, DiscardChoice, EndPhase, GainChoice, MoveType, PlayAction, PlayTreasure,
    RevealReaction, TrashChoice, _hand_multisets, move_from_dict
)


def test_discard_choice_is_order_insensitive():
    first = DiscardChoice((ESTATE, COPPER, ESTATE))
    second = DiscardChoice((ESTATE, ESTATE, COPPER))
    assert first == second
    assert hash(first) == hash(second)
    assert first.cards == (COPPER, ESTATE, ESTATE)


def test_canonical_sort_order():
    moves = [
        RevealReaction(MOAT),
        GainChoice(SILVER),
        EndPhase(),
        Buy(PROVINCE),
        Buy(COPPER),
        PlayTreasure(GOLD),
        PlayAction(VILLAGE),
        TrashChoice(None),
        DiscardChoice((ESTATE,)),
        DiscardChoice(()),
    ]
    ordered = sorted(moves, key=lambda move: move.sort_key())
    assert ordered == [
        PlayAction(VILLAGE),
        PlayTreasure(GOLD),
        Buy(COPPER),
        Buy(PROVINCE),
        EndPhase(),
        DiscardChoice(()),
        DiscardChoice((ESTATE,)),
        TrashChoice(None),
        GainChoice(SILVER),
        RevealReaction(MOAT),
    ]


@pytest.mark.parametrize("move", [
    PlayAction(VILLAGE),
    Buy(PROVINCE),
    EndPhase(),
    DiscardChoice((COPPER, ESTATE)),
    TrashChoice(None),
    RevealReaction(MOAT),
])
def test_move_dict_round_trip(move):
    assert move_from_dict(move.to_dict()) == move


def test_move_types_are_distinct():
    assert PlayTreasure(COPPER) != Buy(COPPER)
    assert PlayTreasure(COPPER).move_type == MoveType.PLAY_TREASURE


def test_hand_multisets_counts_distinct_choices():
    hand = [COPPER, COPPER, COPPER, ESTATE, ESTATE]
    exactly_two = _hand_multisets(hand, 2, 2)
    assert len(exactly_two) == 3
    assert set(exactly_two) == {(COPPER, COPPER), (COPPER, ESTATE), (ESTATE, ESTATE)}

    # (copies of Copper 0..3) x (copies of Estate 0..2)
    assert len(_hand_multisets(hand, 0, 5)) == 12
    assert _hand_multisets(hand, 0, 0) == [()]
    assert _hand_multisets([], 1, 1) == []


def test_move_strings():
    assert str(Buy(SILVER)) == "Buy Silver"
    assert str(DiscardChoice(())) == "Discard nothing"
    assert str(TrashChoice(None)) == "Trash nothing"
    assert str(RevealReaction(None)) == "Reveal nothing"
