"""Tests for SchedulerConfig: unit conversion, rounding, parameter checks."""

from __future__ import annotations

import dataclasses

import pytest

from capacity_timeline.config import DEFAULT_CONFIG, SchedulerConfig


class TestDefaults:

    def test_values(self):
        assert DEFAULT_CONFIG.hours_per_man_day == 8.0
        assert DEFAULT_CONFIG.business_days_per_week == 5
        assert DEFAULT_CONFIG.max_iterations == 10

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_CONFIG.max_iterations = 3


class TestConversion:

    @pytest.mark.parametrize(
        "weekly, expected",
        [(40, 8.0), (20, 4.0), (32, 6.4), (0, 0.0), (-5, 0.0)],
    )
    def test_daily_hours(self, weekly, expected):
        assert DEFAULT_CONFIG.daily_hours(weekly) == pytest.approx(expected)

    def test_to_man_days(self):
        assert DEFAULT_CONFIG.to_man_days(12.0) == pytest.approx(1.5)

    def test_custom_day_length(self):
        config = SchedulerConfig(hours_per_man_day=7.5)
        assert config.to_man_days(config.daily_hours(37.5)) == pytest.approx(1.0)


class TestDaysNeeded:

    @pytest.mark.parametrize(
        "effort, capacity, expected",
        [
            (10, 1.0, 10),
            (2.5, 1.0, 3),
            (4, 0.8, 5),
            (0.1, 1.0, 1),
            (1, 1 / 3, 3),
        ],
    )
    def test_rounds_up(self, effort, capacity, expected):
        assert DEFAULT_CONFIG.days_needed(effort, capacity) == expected

    def test_float_noise_absorbed(self):
        # 0.1 * 3 == 0.30000000000000004
        assert DEFAULT_CONFIG.days_needed(0.1 * 3, 0.1) == 3

    def test_zero_tolerance_is_exact(self):
        config = SchedulerConfig(tolerance=0.0)
        assert config.days_needed(0.1 * 3, 0.1) == 4


class TestValidation:

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"hours_per_man_day": 0},
            {"business_days_per_week": -1},
            {"max_iterations": 0},
            {"tolerance": -1e-6},
        ],
        ids=["hours", "days", "iterations", "tolerance"],
    )
    def test_rejects(self, kwargs):
        with pytest.raises(ValueError):
            SchedulerConfig(**kwargs)
