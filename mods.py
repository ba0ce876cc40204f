from enum import Enum


class Mod(Enum):
    NM = "NM"
    EZ = "EZ"
    HR = "HR"
    DT = "DT"
    HT = "HT"
    HD = "HD"
    FL = "FL"
    RX = "RX"
    PR = "PR"


# Great hit window (ms) at OD 0, 5 and 10.
GREAT_WINDOW_RANGE = (100, 75, 50)
PRECISE_GREAT_WINDOW_RANGE = (80, 50, 20)

PREEMPT_RANGE = (1800, 1200, 450)


def parse_mods(values):
    """Turn CLI strings like ["DT", "HR"] or ["DTHR"] into a frozenset of Mod."""
    mods = set()
    for value in values or []:
        value = value.upper()
        if len(value) % 2 != 0:
            raise ValueError(f"Invalid mod string: {value}")
        for i in range(0, len(value), 2):
            mods.add(Mod(value[i:i+2]))
    mods.discard(Mod.NM)
    return frozenset(mods)

def mods_str(mods):
    if not mods:
        return Mod.NM.value
    return "".join(m.value for m in Mod if m in mods)

def clock_rate(mods):
    if Mod.DT in mods:
        return 1.5
    if Mod.HT in mods:
        return 0.75
    return 1.0

def difficulty_range(difficulty, min_value, mid_value, max_value):
    # values are given at difficulty 0, 5 and 10
    if difficulty > 5:
        return mid_value + (max_value - mid_value) * (difficulty - 5) / 5
    if difficulty < 5:
        return mid_value - (mid_value - min_value) * (5 - difficulty) / 5
    return mid_value

def apply_mods(cs, ar, od, hp, mods):
    if Mod.HR in mods:
        cs = min(cs * 1.3, 10.0)
        ar = min(ar * 1.4, 10.0)
        od = min(od * 1.4, 10.0)
        hp = min(hp * 1.4, 10.0)
    if Mod.EZ in mods:
        cs *= 0.5
        ar *= 0.5
        od *= 0.5
        hp *= 0.5
    return cs, ar, od, hp

def hit_window_great(od, mods, rate=1.0):
    ranges = PRECISE_GREAT_WINDOW_RANGE if Mod.PR in mods else GREAT_WINDOW_RANGE
    return difficulty_range(od, *ranges) / rate

def preempt(ar, rate=1.0):
    return difficulty_range(ar, *PREEMPT_RANGE) / rate
