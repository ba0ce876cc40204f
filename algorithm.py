import logging
import math
from collections import namedtuple

import numpy as np

import osu_file_parser as osu_parser
from difficulty_hit_object import EventKind, create_difficulty_objects
from mods import Mod, apply_mods, clock_rate, hit_window_great, parse_mods, preempt
from strain_skill import FlashlightSkill, RhythmSkill, VisualSkill
from touch import TouchAim, TouchSpeed

logger = logging.getLogger(__name__)

DIFFICULTY_MULTIPLIER = 0.18
PERFORMANCE_BASE_MULTIPLIER = 0.027
PERFORMANCE_NORM = 1.1
STAR_RATING_THRESHOLD = 0.00001

DifficultyAttributes = namedtuple(
    "DifficultyAttributes",
    [
        "star_rating",
        "aim_difficulty",
        "aim_difficulty_no_sliders",
        "tap_difficulty",
        "speed_note_count",
        "difficult_slider_count",
        "rhythm_difficulty",
        "flashlight_difficulty",
        "visual_difficulty",
        "slider_factor",
        "approach_rate",
        "overall_difficulty",
        "drain_rate",
        "max_combo",
        "hit_circle_count",
        "slider_count",
        "spinner_count",
        "mods",
    ],
    defaults=(0.0,) * 13 + (0,) * 4 + (frozenset(),),
)

# -----Start of Helper methods--------

def skill_rating(difficulty_value):
    return math.sqrt(difficulty_value) * DIFFICULTY_MULTIPLIER

def aim_performance(aim_rating):
    return (5 * max(1, aim_rating**0.8 / 0.0675) - 4)**3 / 100000

def tap_performance(tap_rating):
    return (5 * max(1, tap_rating / 0.0675) - 4)**3 / 100000

def visual_performance(visual_rating):
    return visual_rating**1.6 * 22.5

def flashlight_performance(flashlight_rating, mods):
    if Mod.FL not in mods:
        return 0.0
    return flashlight_rating**1.6 * 25.0

def power_mean(values, p=PERFORMANCE_NORM):
    return sum(v**p for v in values)**(1.0 / p)

def approach_rate_of(preempt_ms):
    if preempt_ms > 1200:
        return (1800 - preempt_ms) / 120
    return (1200 - preempt_ms) / 150 + 5

# -----End of Helper methods--------

def compose_star_rating(aim_rating, tap_rating, flashlight_rating, visual_rating, mods):
    """
    Fold the skill ratings into one star rating through their performance curves. Ratings are expected
    to be already adjusted for relax.
    """
    base_performance = power_mean([
        aim_performance(aim_rating),
        tap_performance(tap_rating),
        flashlight_performance(flashlight_rating, mods),
        visual_performance(visual_rating),
    ])

    if base_performance <= STAR_RATING_THRESHOLD:
        return 0.0
    return PERFORMANCE_BASE_MULTIPLIER * (float(np.cbrt(100000 / 2**(1 / PERFORMANCE_NORM) * base_performance)) + 4)

def create_skills(hit_window):
    return [
        TouchAim(include_sliders=True),
        TouchAim(include_sliders=False),
        TouchSpeed(hit_window),
        RhythmSkill(hit_window),
        FlashlightSkill(),
        VisualSkill(hit_window),
    ]

def compute_attributes(events, hit_window, mods=frozenset(), drain_rate=0.0):
    """
    Difficulty attributes of an ordered event list. Event times and hit_window are expected to be
    clock-rate adjusted already.
    """
    mods = frozenset(mods)
    if not events:
        return DifficultyAttributes(mods=mods)

    skills = create_skills(hit_window)
    # Every skill depends on the previous object's state, the order is fixed.
    for event in events:
        for skill in skills:
            skill.process(event)

    aim, aim_no_sliders, tap, rhythm, flashlight, visual = skills

    aim_rating = skill_rating(aim.difficulty_value())
    aim_rating_no_sliders = skill_rating(aim_no_sliders.difficulty_value())
    tap_rating = skill_rating(tap.difficulty_value())
    speed_notes = tap.relevant_note_count()
    difficult_sliders = aim.difficult_sliders()
    rhythm_rating = skill_rating(rhythm.difficulty_value())
    flashlight_rating = skill_rating(flashlight.difficulty_value())
    visual_rating = skill_rating(visual.difficulty_value())

    slider_factor = aim_rating_no_sliders / aim_rating if aim_rating > 0 else 1

    if Mod.RX in mods:
        aim_rating *= 0.9
        tap_rating = 0.0
        rhythm_rating = 0.0
        flashlight_rating *= 0.7
        visual_rating = 0.0

    star_rating = compose_star_rating(aim_rating, tap_rating, flashlight_rating, visual_rating, mods)

    logger.debug("aim %.4f (no sliders %.4f), tap %.4f, rhythm %.4f, flashlight %.4f, visual %.4f -> %.4f stars",
                 aim_rating, aim_rating_no_sliders, tap_rating, rhythm_rating, flashlight_rating, visual_rating,
                 star_rating)

    return DifficultyAttributes(
        star_rating=star_rating,
        aim_difficulty=aim_rating,
        aim_difficulty_no_sliders=aim_rating_no_sliders,
        tap_difficulty=tap_rating,
        speed_note_count=speed_notes,
        difficult_slider_count=difficult_sliders,
        rhythm_difficulty=rhythm_rating,
        flashlight_difficulty=flashlight_rating,
        visual_difficulty=visual_rating,
        slider_factor=slider_factor,
        approach_rate=approach_rate_of(events[0].preempt),
        overall_difficulty=(80 - hit_window) / 6,
        drain_rate=drain_rate,
        max_combo=sum(e.combo for e in events),
        hit_circle_count=sum(1 for e in events if e.kind is EventKind.TAP),
        slider_count=sum(1 for e in events if e.kind is EventKind.HOLD),
        spinner_count=sum(1 for e in events if e.kind is EventKind.SPIN),
        mods=mods,
    )

def preprocess_file(file_path, mods):
    p_obj = osu_parser.parser(file_path)
    p_obj.process()
    hp, cs, od, ar, hit_objects = p_obj.get_parsed_data()

    cs, ar, od, hp = apply_mods(cs, ar, od, hp, mods)
    rate = clock_rate(mods)
    hit_window = hit_window_great(od, mods, rate)
    events = create_difficulty_objects(hit_objects, rate, cs, hit_window, preempt(ar, rate), hidden=Mod.HD in mods)
    return events, hit_window, hp

def calculate_attributes(file_path, mods=frozenset()):
    if isinstance(mods, str):
        mods = parse_mods([mods])
    mods = frozenset(mods)

    events, hit_window, hp = preprocess_file(file_path, mods)
    logger.debug("%s: %d objects, great window %.2fms", file_path, len(events), hit_window)
    return compute_attributes(events, hit_window, mods, drain_rate=hp)

def calculate(file_path, mod="NM"):
    return calculate_attributes(file_path, mod).star_rating
