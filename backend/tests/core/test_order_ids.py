"""Order id allocation tests — 4-digit public codes with bounded retry."""

import random

from storefront.core.order_ids import MAX_ATTEMPTS, draw_order_id, next_order_id


class _FixedRng:
    """randint always returns the same value."""

    def __init__(self, value):
        self.value = value
        self.calls = 0

    def randint(self, low, high):
        self.calls += 1
        return self.value


def test_ids_are_four_digits():
    rng = random.Random(42)
    for _ in range(500):
        assert 1000 <= next_order_id([], rng) <= 9999


def test_seeded_draws_are_deterministic():
    assert next_order_id([], random.Random(7)) == next_order_id([], random.Random(7))


def test_no_collision_with_retained_orders():
    rng = random.Random(42)
    existing = [{"orderId": n} for n in range(1000, 1099)]
    for _ in range(200):
        draw = draw_order_id(existing, rng)
        assert draw.order_id not in range(1000, 1099)
        assert not draw.exhausted


def test_exhaustion_returns_last_candidate_after_max_attempts():
    rng = _FixedRng(1234)
    draw = draw_order_id([{"orderId": 1234}], rng)
    assert draw.order_id == 1234
    assert draw.exhausted
    assert draw.attempts == MAX_ATTEMPTS
    assert rng.calls == MAX_ATTEMPTS


def test_non_dict_orders_are_ignored():
    draw = draw_order_id(["junk", None], _FixedRng(5555))
    assert draw.order_id == 5555
    assert draw.attempts == 1
