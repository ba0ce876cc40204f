"""
Difficulty skills for touch devices, where the player can hit objects with either hand (or keep dragging one
finger along) instead of moving a single cursor.

Which hand hit which object is unknown, so every skill runs a bounded beam search: each hypothesis is one
hand assignment of the objects so far, carrying its own per-hand strains. For every new object each
hypothesis branches into one child per hand, children are weighted by how much easier their assignment is
than the alternatives, and only the most probable hypotheses survive.
"""
import copy
import logging
import math
from enum import Enum

import evaluators
import rhythm_evaluator
from difficulty_hit_object import EventKind
from strain_skill import StrainSkill, count_relevant

logger = logging.getLogger(__name__)


class Actor(Enum):
    LEFT = "left"
    RIGHT = "right"
    DRAG = "drag"


def calculate_total_strain(aim_strain, speed_strain):
    return (aim_strain**1.5 + speed_strain**1.5)**(2.0 / 3)

def assignment_weight(strains, i):
    """
    Weight of assigning the object to actor i: the geometric mean of the strains of all the other
    assignments, so the easiest assignment gets the largest weight.
    """
    others = strains[:i] + strains[i+1:]
    if not others:
        return 1.0
    if len(others) == 2:
        return math.sqrt(others[0] * others[1])
    return math.prod(others) ** (1.0 / len(others))


class ActorStrainTracker:
    """Exponentially decaying strain of a single actor for a single skill category."""

    def __init__(self, strain_decay_base):
        self.strain_decay_base = strain_decay_base
        self.current_strain = 0.0
        self.last_event = None

    def strain_decay(self, ms):
        return self.strain_decay_base ** (ms / 1000)

    def process(self, current, increment):
        if self.last_event is not None:
            self.current_strain *= self.strain_decay(current.start_time - self.last_event.start_time)
        self.current_strain += increment
        self.last_event = current

    def copy(self):
        clone = ActorStrainTracker(self.strain_decay_base)
        clone.current_strain = self.current_strain
        # events are never mutated, sharing them is safe
        clone.last_event = self.last_event
        return clone


class HandSequenceSkill:
    """
    One skill category (aim or speed) inside a hypothesis, with a tracker per actor. current_strain is
    the strain of the actor that handled the latest object.
    """

    strain_decay_base = 0.15
    skill_multiplier = 1.0

    def __init__(self, actors):
        self.trackers = {actor: ActorStrainTracker(self.strain_decay_base) for actor in actors}
        self.current_strain = 0.0

    def origin_of(self, current, actor):
        # Dragging moves on from wherever the previous object was hit, a hand moves on from its own last object.
        if actor is Actor.DRAG:
            return current.previous(0)
        return self.trackers[actor].last_event

    def strain_value_of(self, current, origin):
        raise NotImplementedError

    def process(self, current, actor):
        tracker = self.trackers[actor]
        increment = self.strain_value_of(current, self.origin_of(current, actor)) * self.skill_multiplier
        tracker.process(current, increment)
        self.current_strain = tracker.current_strain

    def copy(self):
        clone = copy.copy(self)
        clone.trackers = {actor: tracker.copy() for actor, tracker in self.trackers.items()}
        return clone


class HandSequenceAim(HandSequenceSkill):
    strain_decay_base = 0.15
    skill_multiplier = 23.55

    def __init__(self, actors, include_sliders):
        super().__init__(actors)
        self.include_sliders = include_sliders

    def strain_value_of(self, current, origin):
        return evaluators.evaluate_aim(current, origin, self.include_sliders)


class HandSequenceSpeed(HandSequenceSkill):
    strain_decay_base = 0.3
    skill_multiplier = 1375

    def strain_value_of(self, current, origin):
        return evaluators.evaluate_speed(current, origin)


class Hypothesis:
    """One hand assignment of every object so far, with its probability and its own skill state."""

    def __init__(self, skills, probability=1.0):
        self.skills = skills
        self.probability = probability

    def process(self, current, actor):
        for skill in self.skills:
            skill.process(current, actor)

    def copy(self):
        return Hypothesis([skill.copy() for skill in self.skills], self.probability)

    def __repr__(self):
        return f"Hypothesis(p={self.probability:.4f}, strains={[s.current_strain for s in self.skills]})"


class TouchSkill(StrainSkill):
    """
    Strain skill whose per-object strain is the probability-weighted strain over the surviving hand
    assignment hypotheses.
    """

    maximum_probabilities = 15
    actors = (Actor.LEFT, Actor.RIGHT, Actor.DRAG)
    initial_actor = Actor.DRAG

    def __init__(self):
        super().__init__()
        self.probabilities = []

    def calculate_current_strain(self, current):
        if current.index == 0:
            hypothesis = Hypothesis(self.get_hand_sequence_skills())
            # The first object only starts the history.
            hypothesis.process(current, self.initial_actor)
            self.probabilities = [hypothesis]
            return 0.0

        new_probabilities = []

        for hypothesis in self.probabilities:
            children = [hypothesis.copy() for _ in self.actors]
            for child, actor in zip(children, self.actors):
                child.process(current, actor)

            strains = [self.get_probability_total_strain(child) for child in children]
            weights = [assignment_weight(strains, i) for i in range(len(children))]
            sum_weight = sum(weights)

            for child, weight in zip(children, weights):
                child.probability *= weight / sum_weight if sum_weight > 0 else 1.0 / len(children)

            new_probabilities.extend(children)

        # Only keep the most probable hypotheses. The sort is stable, ties keep their branching order.
        self.probabilities = sorted(new_probabilities, key=lambda p: p.probability, reverse=True)[:self.maximum_probabilities]
        total_most_probable = sum(p.probability for p in self.probabilities)

        if len(new_probabilities) > len(self.probabilities):
            logger.debug("object %d: pruned %d of %d hypotheses", current.index,
                         len(new_probabilities) - len(self.probabilities), len(new_probabilities))

        strain = 0.0
        for probability in self.probabilities:
            # Make sure total probability sums up to 1.
            probability.probability = (probability.probability / total_most_probable if total_most_probable > 0
                                       else 1.0 / len(self.probabilities))
            strain += self.get_probability_strain(probability) * probability.probability

        return strain

    def get_hand_sequence_skills(self):
        """[aim, speed] hand sequence skills for a fresh hypothesis."""
        raise NotImplementedError

    def get_probability_strain(self, probability):
        raise NotImplementedError

    def get_probability_total_strain(self, probability):
        return calculate_total_strain(probability.skills[0].current_strain, probability.skills[1].current_strain)


class TouchAim(TouchSkill):
    strain_decay_base = 0.15

    def __init__(self, include_sliders):
        super().__init__()
        self.include_sliders = include_sliders
        self.current_strain = 0.0
        self.slider_strains = []

    def strain_decay(self, ms):
        return self.strain_decay_base ** (ms / 1000)

    def calculate_initial_strain(self, time, current):
        return self.current_strain * self.strain_decay(time - current.previous(0).start_time)

    def strain_value_at(self, current):
        self.current_strain = self.calculate_current_strain(current)

        if current.kind is EventKind.HOLD:
            self.slider_strains.append(self.current_strain)

        return self.current_strain

    def get_hand_sequence_skills(self):
        return [HandSequenceAim(self.actors, self.include_sliders), HandSequenceSpeed(self.actors)]

    def get_probability_strain(self, probability):
        return probability.skills[0].current_strain

    def difficult_sliders(self):
        return count_relevant(self.slider_strains)


class TouchSpeed(TouchSkill):
    strain_decay_base = 0.3
    reduced_section_count = 5

    def __init__(self, hit_window_great):
        super().__init__()
        self.hit_window_great = hit_window_great
        self.current_strain = 0.0
        self.current_rhythm = 0.0

    def strain_decay(self, ms):
        return self.strain_decay_base ** (ms / 1000)

    def calculate_initial_strain(self, time, current):
        return (self.current_strain * self.current_rhythm) * self.strain_decay(time - current.previous(0).start_time)

    def strain_value_at(self, current):
        self.current_strain = self.calculate_current_strain(current)
        self.current_rhythm = rhythm_evaluator.evaluate_difficulty_of(current, self.hit_window_great)

        return self.current_strain * self.current_rhythm

    def get_hand_sequence_skills(self):
        return [HandSequenceAim(self.actors, True), HandSequenceSpeed(self.actors)]

    def get_probability_strain(self, probability):
        return probability.skills[1].current_strain

    def relevant_note_count(self):
        return count_relevant(self.object_strains)
