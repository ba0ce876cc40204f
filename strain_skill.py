import math

import numpy as np

import evaluators
import rhythm_evaluator

# -----Start of Helper methods--------

def lerp(start, end, amount):
    return start + (end - start) * amount

def count_relevant(strains):
    """
    Effective number of hard objects in a strain series: each strain counts through a sigmoid of its
    ratio to the hardest one, so the count saturates smoothly instead of thresholding.
    Returns 0 for an empty series or one that never strains.
    """
    strains = np.asarray(strains, dtype=float)
    if strains.size == 0:
        return 0.0
    max_strain = strains.max()
    if max_strain == 0:
        return 0.0
    return float(np.sum(1.0 / (1.0 + np.exp(-(strains / max_strain * 12.0 - 6.0)))))

# -----End of Helper methods--------


class StrainSkill:
    """
    Turns a per-object strain series into one difficulty value. The chart is cut into sections of
    section_length ms, the peak strain of every section is kept, and the peaks are summed from the hardest
    down with a geometrically decaying weight. The hardest few sections are toned down first so that a
    single spike does not dominate.
    """

    section_length = 400
    decay_weight = 0.9
    reduced_section_count = 10
    reduced_strain_baseline = 0.75
    difficulty_multiplier = 1.06

    def __init__(self):
        self.strain_peaks = []
        self.object_strains = []
        self.current_section_peak = 0.0
        self.current_section_end = 0.0

    def process(self, current):
        # The first object decides where the first section ends.
        if current.index == 0:
            self.current_section_end = math.ceil(current.start_time / self.section_length) * self.section_length

        while current.start_time > self.current_section_end:
            self.save_current_peak()
            self.start_new_section_from(self.current_section_end, current)
            self.current_section_end += self.section_length

        strain = self.strain_value_at(current)
        self.object_strains.append(strain)
        self.current_section_peak = max(strain, self.current_section_peak)

    def save_current_peak(self):
        self.strain_peaks.append(self.current_section_peak)

    def start_new_section_from(self, time, current):
        # The maximum strain of the new section is not zero by default, strain decays as usual regardless
        # of section boundaries.
        self.current_section_peak = self.calculate_initial_strain(time, current)

    def get_current_strain_peaks(self):
        return self.strain_peaks + [self.current_section_peak]

    def strain_value_at(self, current):
        raise NotImplementedError

    def calculate_initial_strain(self, time, current):
        raise NotImplementedError

    def difficulty_value(self):
        peaks = np.array(self.get_current_strain_peaks(), dtype=float)
        strains = np.sort(peaks[peaks > 0])[::-1].copy()

        for i in range(min(strains.size, self.reduced_section_count)):
            scale = math.log10(lerp(1, 10, min(max(i / self.reduced_section_count, 0.0), 1.0)))
            strains[i] *= lerp(self.reduced_strain_baseline, 1.0, scale)

        strains = np.sort(strains)[::-1]
        weights = self.decay_weight ** np.arange(strains.size)
        return float(np.sum(strains * weights)) * self.difficulty_multiplier


class DecayingStrainSkill(StrainSkill):
    """A single strain accumulator decaying exponentially with the time between objects."""

    strain_decay_base = 0.3
    skill_multiplier = 1.0

    def __init__(self):
        super().__init__()
        self.current_strain = 0.0

    def strain_decay(self, ms):
        return self.strain_decay_base ** (ms / 1000)

    def strain_value_of(self, current):
        raise NotImplementedError

    def strain_value_at(self, current):
        self.current_strain *= self.strain_decay(current.delta_time)
        self.current_strain += self.strain_value_of(current) * self.skill_multiplier
        return self.current_strain

    def calculate_initial_strain(self, time, current):
        return self.current_strain * self.strain_decay(time - current.previous(0).start_time)


class RhythmSkill(DecayingStrainSkill):
    strain_decay_base = 0.3
    skill_multiplier = 10.0

    def __init__(self, hit_window_great):
        super().__init__()
        self.hit_window_great = hit_window_great

    def strain_value_of(self, current):
        return rhythm_evaluator.evaluate_difficulty_of(current, self.hit_window_great) - 1


class FlashlightSkill(DecayingStrainSkill):
    strain_decay_base = 0.15
    skill_multiplier = 0.05

    def strain_value_of(self, current):
        return evaluators.evaluate_flashlight(current)


class VisualSkill(DecayingStrainSkill):
    strain_decay_base = 0.3
    skill_multiplier = 12.0

    def __init__(self, hit_window_great):
        super().__init__()
        self.hit_window_great = hit_window_great

    def strain_value_of(self, current):
        return evaluators.evaluate_visual(current, self.hit_window_great)
