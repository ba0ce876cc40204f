import math

from difficulty_hit_object import MIN_DELTA_TIME, EventKind, distance

# -----Aim / speed (per hand)--------

SINGLE_SPACING_THRESHOLD = 125.0
MIN_SPEED_BONUS = 75.0  # ~200 1/4 bpm streams
SPEED_BALANCING_FACTOR = 40.0

# -----Flashlight--------

FLASHLIGHT_HISTORY_OBJECTS = 10
MAX_OPACITY_BONUS = 0.4

# -----Visual--------

VISUAL_HIGH_PREEMPT = 450.0  # AR10
HIDDEN_READING_BONUS = 0.4


def movement(current, origin):
    """Normalised distance and elapsed time for a hand moving from origin to current."""
    elapsed = max(current.start_time - origin.start_time, MIN_DELTA_TIME)
    return distance(origin.end_position, current.position), elapsed

def evaluate_aim(current, origin, include_sliders):
    """Cursor velocity needed to reach current from the hand's last object."""
    if origin is None or current.kind is EventKind.SPIN or origin.kind is EventKind.SPIN:
        return 0.0

    jump, elapsed = movement(current, origin)
    velocity = jump / elapsed

    if include_sliders and origin.kind is EventKind.HOLD:
        velocity += origin.travel_distance / origin.travel_time

    return velocity

def evaluate_speed(current, origin):
    if origin is None or current.kind is EventKind.SPIN:
        return 0.0

    jump, elapsed = movement(current, origin)
    if origin.kind is EventKind.SPIN:
        jump = 0.0

    speed_bonus = 1.0
    if elapsed < MIN_SPEED_BONUS:
        speed_bonus = 1 + 0.75 * ((MIN_SPEED_BONUS - elapsed) / SPEED_BALANCING_FACTOR)**2

    spacing = min(SINGLE_SPACING_THRESHOLD, jump + origin.travel_distance)
    return (speed_bonus + speed_bonus * (spacing / SINGLE_SPACING_THRESHOLD)**3.5) / elapsed

def evaluate_flashlight(current):
    """
    Memory load of the objects leading up to current: nearby jumps over short cumulative time are hard to
    remember, stacked objects and objects still fading in count less.
    """
    if current.kind is EventKind.SPIN:
        return 0.0

    small_dist_nerf = 1.0
    cumulative_strain_time = 0.0
    result = 0.0
    last_obj = current

    for i in range(min(current.index, FLASHLIGHT_HISTORY_OBJECTS)):
        current_obj = current.previous(i)

        if current_obj.kind is not EventKind.SPIN:
            jump = distance(current.position, current_obj.end_position)
            cumulative_strain_time += last_obj.strain_time

            # no bonus for objects right next to each other
            if i == 0:
                small_dist_nerf = min(1.0, jump / 75)

            stack_nerf = min(1.0, current_obj.jump_distance / 25)
            opacity_bonus = 1 + MAX_OPACITY_BONUS * (1 - current.opacity_at(current_obj.start_time))

            result += stack_nerf * opacity_bonus * jump / cumulative_strain_time

        last_obj = current_obj

    return (small_dist_nerf * result)**2

def evaluate_visual(current, hit_window_great):
    """
    Reading load: how many objects are on screen at the time current has to be hit, weighted by how close
    they are to being hit, combined with how fast the cursor has to move.
    """
    if current.kind is EventKind.SPIN or current.index == 0:
        return 0.0

    visible_density = 0.0
    for i in range(current.index):
        prev = current.previous(i)
        elapsed = current.start_time - prev.start_time
        if elapsed >= current.preempt:
            break
        visible_density += 1 - elapsed / current.preempt

    # approach times shorter than AR10 leave little time to read
    preempt_bonus = 1.0
    if current.preempt < VISUAL_HIGH_PREEMPT:
        preempt_bonus += ((VISUAL_HIGH_PREEMPT - current.preempt) / 150)**2

    velocity = current.jump_distance / current.strain_time
    # a tight hit window leaves no room to misread the order of overlapping objects
    window_factor = 1 + 0.5 * min(1.0, current.strain_time / hit_window_great)**2

    # with hidden, an object gone before the previous one is hit has to be aimed from memory
    hidden_bonus = 1.0
    if current.hidden:
        hidden_bonus += HIDDEN_READING_BONUS * (1 - current.opacity_at(current.previous(0).start_time))

    return math.sqrt(visible_density) * preempt_bonus * velocity * window_factor * hidden_bonus
