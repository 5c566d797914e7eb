"""Tests for the concurrency model: change points, active sets, shared capacity."""

from __future__ import annotations

import pytest

from conftest import day

from capacity_timeline.concurrency import (
    Placement,
    active_in_window,
    change_points,
    concurrent_with,
    effective_capacity,
    is_active,
    naive_capacity,
    still_active_after,
)
from capacity_timeline.config import DEFAULT_CONFIG
from capacity_timeline.types import Resource

RESOURCES = {
    "R1": Resource("R1", 40),
    "R2": Resource("R2", 20),
    "R0": Resource("R0", 0),
}


def _placement(item_id, start, end, *resource_ids):
    return Placement(item_id, day(start), day(end), 5.0, tuple(resource_ids))


class TestChangePoints:

    def test_sorted_unique_not_before(self):
        placements = [
            _placement("A", "mon", "next_mon", "R1"),
            _placement("B", "wed", "next_mon", "R1"),
            _placement("C", "tue", "fri", "R1"),
        ]
        assert change_points(placements, day("tue")) == [
            day("tue"), day("wed"), day("fri"), day("next_mon"),
        ]

    def test_empty(self):
        assert change_points([], day("mon")) == []


class TestActiveSet:

    def test_strict_overlap(self):
        p = _placement("A", "mon", "wed", "R1")
        assert is_active(p, day("tue"), day("fri"))
        assert not is_active(p, day("wed"), day("fri"))
        assert not is_active(p, day("thu"), day("fri"))
        # Ending exactly at the window start is not active; starting at its end is not either
        assert not is_active(_placement("B", "fri", "next_mon", "R1"), day("wed"), day("fri"))

    def test_active_in_window_keeps_input_order_and_subject(self):
        a = _placement("A", "mon", "next_mon", "R1")
        b = _placement("B", "wed", "fri", "R1")
        c = _placement("C", "next_mon", "next_fri", "R1")
        window = active_in_window(c, [a, b, c], day("mon"), day("tue"))
        assert [p.item_id for p in window] == ["A", "C"]

    def test_still_active_after(self):
        a = _placement("A", "mon", "wed", "R1")
        b = _placement("B", "mon", "fri", "R1")
        assert [p.item_id for p in still_active_after(a, [a, b], day("thu"))] == ["A", "B"]
        assert [p.item_id for p in still_active_after(b, [a, b], day("thu"))] == ["B"]


class TestEffectiveCapacity:

    def test_alone_on_full_time_resource(self):
        a = _placement("A", "mon", "fri", "R1")
        assert effective_capacity(a, [a], RESOURCES, DEFAULT_CONFIG) == pytest.approx(1.0)

    def test_shared_resource_is_split(self):
        a = _placement("A", "mon", "fri", "R1", "R2")
        b = _placement("B", "mon", "fri", "R1")
        # R1: 8h / 2, R2: 4h alone -> 8h -> 1 man-day
        assert effective_capacity(a, [a, b], RESOURCES, DEFAULT_CONFIG) == pytest.approx(1.0)
        assert effective_capacity(b, [a, b], RESOURCES, DEFAULT_CONFIG) == pytest.approx(0.5)

    def test_unrelated_active_placement_does_not_dilute(self):
        a = _placement("A", "mon", "fri", "R1")
        b = _placement("B", "mon", "fri", "R2")
        assert effective_capacity(a, [a, b], RESOURCES, DEFAULT_CONFIG) == pytest.approx(1.0)

    def test_zero_capacity_resource_contributes_nothing(self):
        a = _placement("A", "mon", "fri", "R0")
        assert effective_capacity(a, [a], RESOURCES, DEFAULT_CONFIG) == 0.0
        b = _placement("B", "mon", "fri", "R0", "R2")
        assert effective_capacity(b, [a, b], RESOURCES, DEFAULT_CONFIG) == pytest.approx(0.5)

    def test_naive_capacity(self):
        assert naive_capacity(("R1", "R2"), RESOURCES, DEFAULT_CONFIG) == pytest.approx(1.5)
        assert naive_capacity(("R0",), RESOURCES, DEFAULT_CONFIG) == 0.0


class TestConcurrentWith:

    def test_only_resource_sharing_others(self):
        a = _placement("A", "mon", "fri", "R1", "R2")
        b = _placement("B", "mon", "fri", "R2")
        c = _placement("C", "mon", "fri", "R0")
        assert concurrent_with(a, [a, b, c]) == ("B",)
        assert concurrent_with(c, [a, b, c]) == ()

    def test_uses(self):
        a = _placement("A", "mon", "fri", "R1", "R2")
        assert a.uses("R2")
        assert not a.uses("R0")
