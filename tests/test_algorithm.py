"""Tests for the rating composition and the full attribute computation."""
import pytest

from algorithm import (
    DifficultyAttributes,
    approach_rate_of,
    compose_star_rating,
    compute_attributes,
    power_mean,
    skill_rating,
)
from difficulty_hit_object import EventKind, create_events_from_timings
from mods import Mod


def stream(count=200, spacing=150.0, hit_window_great=75.0, hidden=False):
    positions = [((i % 4) * 110.0, (i % 3) * 90.0) for i in range(count)]
    return create_events_from_timings([i * spacing for i in range(count)], hit_window_great=hit_window_great,
                                      positions=positions, hidden=hidden)


class TestComposer:
    def test_skill_rating(self):
        assert skill_rating(100.0) == pytest.approx(1.8)
        assert skill_rating(0.0) == 0.0

    def test_power_mean(self):
        assert power_mean([2.0, 0.0]) == pytest.approx(2.0)
        assert power_mean([1.0, 1.0]) == pytest.approx(2**(1 / 1.1))

    def test_minimum_rating(self):
        # aim and tap curves bottom out at 1e-5 each, which composes to exactly 1 under the cube root
        assert compose_star_rating(0.0, 0.0, 0.0, 0.0, frozenset()) == pytest.approx(0.027 * 5)

    def test_flashlight_only_counts_with_flashlight(self):
        without = compose_star_rating(1.0, 1.0, 2.0, 0.0, frozenset())
        assert compose_star_rating(1.0, 1.0, 0.0, 0.0, frozenset()) == without
        assert compose_star_rating(1.0, 1.0, 2.0, 0.0, frozenset({Mod.FL})) > without

    def test_monotonic_in_aim(self):
        assert compose_star_rating(2.0, 1.0, 0, 0, frozenset()) > compose_star_rating(1.0, 1.0, 0, 0, frozenset())

    def test_approach_rate(self):
        assert approach_rate_of(1800) == 0
        assert approach_rate_of(1200) == 5
        assert approach_rate_of(450) == 10


class TestComputeAttributes:
    def test_empty_chart(self):
        attributes = compute_attributes([], 75.0)
        assert attributes == DifficultyAttributes()
        assert attributes.star_rating == 0
        assert attributes.max_combo == 0
        assert attributes.hit_circle_count == attributes.slider_count == attributes.spinner_count == 0

    def test_idempotent(self):
        events = stream(60)
        assert compute_attributes(events, 75.0) == compute_attributes(events, 75.0)

    def test_speed_up_does_not_lower_tap(self):
        normal = compute_attributes(stream(spacing=150.0), 75.0)
        faster = compute_attributes(stream(spacing=100.0), 75.0)
        assert faster.tap_difficulty >= normal.tap_difficulty
        assert faster.star_rating > normal.star_rating

    def test_single_object(self):
        attributes = compute_attributes(create_events_from_timings([0]), 75.0)
        assert attributes.aim_difficulty == 0
        assert attributes.tap_difficulty == 0
        assert attributes.max_combo == 1
        assert attributes.slider_factor == 1

    def test_counts_and_combo(self):
        kinds = [EventKind.TAP, EventKind.HOLD, EventKind.SPIN, EventKind.TAP]
        attributes = compute_attributes(create_events_from_timings([0, 300, 900, 3000], kinds=kinds), 75.0)
        assert attributes.hit_circle_count == 2
        assert attributes.slider_count == 1
        assert attributes.spinner_count == 1
        assert attributes.max_combo == 4

    def test_window_and_approach(self):
        attributes = compute_attributes(create_events_from_timings([0, 300], preempt=1200), 50.0)
        assert attributes.overall_difficulty == 5
        assert attributes.approach_rate == 5

    def test_slider_factor_without_sliders(self):
        attributes = compute_attributes(stream(60), 75.0)
        assert attributes.aim_difficulty > 0
        assert attributes.slider_factor == 1.0

    def test_relax(self):
        events = stream(60)
        normal = compute_attributes(events, 75.0)
        relax = compute_attributes(events, 75.0, {Mod.RX})
        assert relax.tap_difficulty == 0
        assert relax.rhythm_difficulty == 0
        assert relax.visual_difficulty == 0
        assert relax.aim_difficulty == pytest.approx(normal.aim_difficulty * 0.9)
        assert relax.flashlight_difficulty == pytest.approx(normal.flashlight_difficulty * 0.7)
        assert relax.mods == frozenset({Mod.RX})

    def test_flashlight_raises_rating(self):
        events = stream(60)
        assert (compute_attributes(events, 75.0, {Mod.FL}).star_rating
                >= compute_attributes(events, 75.0).star_rating)

    def test_hidden_raises_reading(self):
        plain = compute_attributes(stream(60), 75.0, {Mod.FL})
        hidden = compute_attributes(stream(60, hidden=True), 75.0, {Mod.FL, Mod.HD})
        assert hidden.visual_difficulty > plain.visual_difficulty
        assert hidden.flashlight_difficulty > plain.flashlight_difficulty
        assert hidden.star_rating >= plain.star_rating
        assert hidden.aim_difficulty == plain.aim_difficulty

    def test_speed_note_count(self):
        events = stream(60)
        attributes = compute_attributes(events, 75.0)
        assert 0 < attributes.speed_note_count <= len(events)
