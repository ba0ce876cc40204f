from enum import Enum

import numpy as np

import osu_file_parser as osu_parser

NORMALISED_RADIUS = 50.0
MIN_DELTA_TIME = 25.0
# how far the cursor can lag behind a slider ball and still count as following it
ASSUMED_SLIDER_RADIUS = NORMALISED_RADIUS * 1.8
CIRCLESIZE_BUFF_THRESHOLD = 30.0
# with hidden, objects fade in over this share of the approach time and then fade out again
HIDDEN_FADE_IN_MULTIPLIER = 0.4
HIDDEN_FADE_OUT_MULTIPLIER = 0.3


class EventKind(Enum):
    TAP = "tap"
    HOLD = "hold"
    SPIN = "spin"


KIND_BY_OBJECT = {
    osu_parser.CIRCLE: EventKind.TAP,
    osu_parser.SLIDER: EventKind.HOLD,
    osu_parser.SPINNER: EventKind.SPIN,
}


class GameplayEvent:
    """
    One hit object as seen by the difficulty skills. Times are clock-rate adjusted and positions are
    normalised so that every circle has a radius of NORMALISED_RADIUS.

    The event shares the full (never mutated) list of events, which backs previous() / next().
    """

    def __init__(self, index, history, start_time, end_time, kind, position, end_position,
                 hit_window_great, preempt, combo=1, travel_distance=0.0, hidden=False):
        self.index = index
        self._history = history
        self.start_time = start_time
        self.end_time = end_time
        self.kind = kind
        self.position = position
        self.end_position = end_position
        self.hit_window_great = hit_window_great
        self.preempt = preempt
        self.combo = combo
        self.travel_distance = travel_distance
        self.hidden = hidden
        self.travel_time = max(end_time - start_time, MIN_DELTA_TIME)

        last = self.previous(0)
        self.delta_time = start_time - last.start_time if last is not None else 0.0
        self.strain_time = max(self.delta_time, MIN_DELTA_TIME)

        self.jump_distance = 0.0
        if last is not None and kind is not EventKind.SPIN and last.kind is not EventKind.SPIN:
            self.jump_distance = distance(last.end_position, position)

        self.is_overlapping = (
            last is not None
            and kind is EventKind.TAP and last.kind is EventKind.TAP
            and self.delta_time < hit_window_great
            and distance(last.position, position) < 2 * NORMALISED_RADIUS
        )

    def previous(self, backwards_index):
        i = self.index - (backwards_index + 1)
        return self._history[i] if i >= 0 else None

    def next(self, forwards_index):
        i = self.index + (forwards_index + 1)
        return self._history[i] if i < len(self._history) else None

    def opacity_at(self, time):
        """
        How visible this object is at the given time. It fades in over the first 400ms of its approach; with
        hidden it fades in faster and is gone again well before it has to be hit.
        """
        fade_in_start = self.start_time - self.preempt
        fade_in_duration = self.preempt * HIDDEN_FADE_IN_MULTIPLIER if self.hidden else min(400.0, self.preempt)
        if fade_in_duration <= 0:
            return 1.0
        fade_in = min(max((time - fade_in_start) / fade_in_duration, 0.0), 1.0)
        if not self.hidden:
            return fade_in

        fade_out_start = fade_in_start + fade_in_duration
        fade_out = min(max((time - fade_out_start) / (self.preempt * HIDDEN_FADE_OUT_MULTIPLIER), 0.0), 1.0)
        return min(fade_in, 1.0 - fade_out)

    def __repr__(self):
        return f"GameplayEvent({self.index}, {self.kind.value}, t={self.start_time:g})"


def distance(a, b):
    return float(np.hypot(a[0] - b[0], a[1] - b[1]))

def circle_radius(cs):
    return 64.0 * (1 - 0.7 * (cs - 5) / 5) / 2

def scaling_factor(cs):
    radius = circle_radius(cs)
    factor = NORMALISED_RADIUS / radius
    # small circle buff
    if radius < CIRCLESIZE_BUFF_THRESHOLD:
        factor *= 1 + min(CIRCLESIZE_BUFF_THRESHOLD - radius, 5.0) / 50
    return factor

def create_difficulty_objects(hit_objects, clock_rate, cs, hit_window_great, preempt, hidden=False):
    """
    Build the ordered event list from parsed hit objects. hit_window_great and preempt are expected to be
    clock-rate adjusted already; object times are adjusted here.
    """
    scale = scaling_factor(cs)
    events = []
    for h in sorted(hit_objects, key=lambda o: o.time):
        kind = KIND_BY_OBJECT[h.kind]
        position = (h.x * scale, h.y * scale)
        end_position = (h.end_x * scale, h.end_y * scale)
        travel_distance = 0.0
        if kind is EventKind.HOLD:
            travel_distance = h.spans * max(h.pixel_length * scale - ASSUMED_SLIDER_RADIUS, 0.0)
        events.append(GameplayEvent(
            len(events), events,
            h.time / clock_rate, h.end_time / clock_rate,
            kind, position, end_position,
            hit_window_great, preempt, h.combo, travel_distance, hidden,
        ))
    return events

def create_events_from_timings(start_times, hit_window_great=75.0, preempt=1200.0, kinds=None, positions=None,
                               hidden=False):
    """
    Convenience builder for charts described only by their timings, e.g. synthetic charts. Positions
    default to a horizontal line of non-overlapping circles.
    """
    events = []
    for i, t in enumerate(start_times):
        kind = kinds[i] if kinds is not None else EventKind.TAP
        position = positions[i] if positions is not None else ((i % 4) * 3 * NORMALISED_RADIUS, 0.0)
        events.append(GameplayEvent(i, events, float(t), float(t), kind, position, position,
                                    hit_window_great, preempt, hidden=hidden))
    return events
