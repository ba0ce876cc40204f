import math

from difficulty_hit_object import EventKind

HISTORY_TIME_MAX = 5000  # 5 seconds of rhythm history at most
HISTORY_OBJECTS_MAX = 32
MAX_ISLAND_SIZE = 7


def calculate_rhythm_multiplier(great_window):
    od = (80 - great_window) / 6
    od_scaling = od**2 / 400
    return 0.75 + (od_scaling if od >= 0 else -od_scaling)

def doubletapness(current):
    """
    Nerf for a pair of objects close enough together that both can be tapped at once for a Great.
    1 when there is no following object.
    """
    next_obj = current.next(0)
    if next_obj is None:
        return 1.0
    curr_delta = max(1.0, current.delta_time)
    next_delta = max(1.0, next_obj.delta_time)
    delta_difference = abs(next_delta - curr_delta)
    speed_ratio = curr_delta / max(curr_delta, delta_difference)
    window_ratio = min(1.0, curr_delta / current.hit_window_great)**2
    return speed_ratio**(1 - window_ratio)

def evaluate_difficulty_of(current, great_window):
    """
    Rhythm multiplier for the tap of the current event, from how irregular the timing of the last few
    seconds was. Range is [1, inf), although large values are never reached in practice.
    """
    if current.kind is EventKind.SPIN or current.is_overlapping:
        return 1.0

    previous_island_size = 0
    rhythm_complexity_sum = 0.0
    island_size = 1
    start_ratio = 0.0  # ratio at the start of the current island, buffs tighter rhythms
    first_delta_switch = False

    historical_note_count = min(current.index, HISTORY_OBJECTS_MAX)

    # Objects that can be tapped together with their predecessor carry no rhythm of their own.
    valid_previous = []
    for i in range(historical_note_count):
        obj = current.previous(i)
        if obj is None:
            break
        if not obj.is_overlapping:
            valid_previous.append(obj)

    rhythm_start = 0
    while (rhythm_start < len(valid_previous) - 2
           and current.start_time - valid_previous[rhythm_start].start_time < HISTORY_TIME_MAX):
        rhythm_start += 1

    for i in range(rhythm_start, 0, -1):
        curr_obj = valid_previous[i - 1]
        prev_obj = valid_previous[i]
        last_obj = valid_previous[i + 1]

        # scales note 0 to 1 from history to now, limited by either time or object count
        historical_decay = (HISTORY_TIME_MAX - (current.start_time - curr_obj.start_time)) / HISTORY_TIME_MAX
        historical_decay = min((len(valid_previous) - i) / len(valid_previous), historical_decay)

        curr_delta = curr_obj.strain_time
        prev_delta = prev_obj.strain_time
        last_delta = last_obj.strain_time
        curr_ratio = 1.0 + 6.0 * min(0.5, math.sin(math.pi / (min(prev_delta, curr_delta) / max(prev_delta, curr_delta)))**2)

        window_penalty = min(1.0, max(0.0, abs(prev_delta - curr_delta) - great_window * 0.4) / (great_window * 0.4))

        effective_ratio = window_penalty * curr_ratio

        if first_delta_switch:
            if not (prev_delta > 1.25 * curr_delta or prev_delta * 1.25 < curr_delta):
                # island is still progressing
                if island_size < MAX_ISLAND_SIZE:
                    island_size += 1
            else:
                # bpm change into a hold is an easy acc window
                if current.previous(i - 1).kind is EventKind.HOLD:
                    effective_ratio *= 0.125
                # bpm change out of a hold is easier than tap -> tap
                if current.previous(i).kind is EventKind.HOLD:
                    effective_ratio *= 0.25
                # repeated island size (triplet -> triplet)
                if previous_island_size == island_size:
                    effective_ratio *= 0.25
                # repeated island parity (2 -> 4, 3 -> 5)
                if previous_island_size % 2 == island_size % 2:
                    effective_ratio *= 0.50
                # the speed-up already started a note ago (1/1 -> 1/2 -> 1/4)
                if last_delta > prev_delta + 10 and prev_delta > curr_delta + 10:
                    effective_ratio *= 0.125

                rhythm_complexity_sum += (math.sqrt(effective_ratio * start_ratio) * historical_decay
                                          * math.sqrt(4 + island_size) / 2 * math.sqrt(4 + previous_island_size) / 2)

                start_ratio = effective_ratio
                previous_island_size = island_size

                # slowing down ends the run, speeding up keeps counting islands
                if prev_delta * 1.25 < curr_delta:
                    first_delta_switch = False

                island_size = 1

        elif prev_delta > 1.25 * curr_delta:
            # speeding up, start counting an island until the speed changes again
            first_delta_switch = True
            start_ratio = effective_ratio
            island_size = 1

    return math.sqrt(4 + rhythm_complexity_sum * calculate_rhythm_multiplier(great_window) * doubletapness(current)) / 2
