from collections import Counter
import random

from cabo import CANONICAL_VALUES, DECK_SIZE, EXPECTED_UNKNOWN_VALUE, UnknownPool, build_deck, canonical_deck, ability_for


def test_deck_has_52_cards_with_canonical_counts():
    deck = build_deck(random.Random(7))
    assert len(deck) == DECK_SIZE == 52
    counts = Counter(c.value for c in deck)
    assert counts[0] == 2
    assert counts[13] == 2
    for v in range(1, 13):
        assert counts[v] == 4
    assert len({c.ident for c in deck}) == DECK_SIZE


def test_abilities_are_a_function_of_value():
    for card in canonical_deck():
        assert card.ability == ability_for(card.value)
        assert card.points == card.value
    assert ability_for(7) == ability_for(8) == "peek_self"
    assert ability_for(9) == ability_for(10) == "peek_opponent"
    assert ability_for(11) == ability_for(12) == "swap"
    for v in (0, 1, 2, 3, 4, 5, 6, 13):
        assert ability_for(v) == "none"


def test_identity_mapping_is_shared_between_independent_decks():
    a = build_deck(random.Random(1))
    b = build_deck(random.Random(2))
    assert [c.ident for c in a] != [c.ident for c in b]
    by_ident_a = {c.ident: c.value for c in a}
    by_ident_b = {c.ident: c.value for c in b}
    assert by_ident_a == by_ident_b
    assert [by_ident_a[i] for i in range(DECK_SIZE)] == CANONICAL_VALUES


def test_face_up_copy_keeps_identity():
    card = canonical_deck()[5]
    up = card.turned_face_up()
    assert up.face_up and not card.face_up
    assert up.ident == card.ident and up.value == card.value


def test_unknown_pool_summary():
    pool = UnknownPool()
    assert pool.remaining_total() == DECK_SIZE
    assert pool.expected_value_unseen() == sum(CANONICAL_VALUES) / float(DECK_SIZE)
    # Both zeros and one king are accounted for
    pool = UnknownPool(c for c in canonical_deck() if c.ident not in (0, 1, 2))
    dist = pool.remaining_values_distribution()
    assert dist[0] == 0 and dist[13] == 1 and dist[7] == 4
    assert pool.remaining_total() == DECK_SIZE - 3
    assert pool.p_value_le(0) == 0.0
    assert pool.p_value_le(1) == 4 / float(DECK_SIZE - 3)
    assert UnknownPool([]).expected_value_unseen() == EXPECTED_UNKNOWN_VALUE
