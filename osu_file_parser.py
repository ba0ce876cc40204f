import bisect
import math
from collections import namedtuple

# kind values stored in HitObject.kind
CIRCLE = "circle"
SLIDER = "slider"
SPINNER = "spinner"

# type bits from the .osu hit object line
TYPE_CIRCLE = 1
TYPE_SLIDER = 2
TYPE_SPINNER = 8

PLAYFIELD_CENTRE = (256.0, 192.0)

MIN_BEAT_LENGTH = 6.0
MAX_BEAT_LENGTH = 60000.0

HitObject = namedtuple(
    "HitObject",
    ["x", "y", "time", "kind", "end_time", "end_x", "end_y", "spans", "pixel_length", "combo"],
)


def string_to_int(str):
    return int(float(str))


def collect_data(data, new_datum):
    data.append(new_datum)

# Parser Class that can be used on other class.


class parser:
    def __init__(self, file_path):
        self.file_path = file_path
        self.mode = 0
        self.hp = 5.0
        self.cs = 5.0
        self.od = 5.0
        self.ar = -1.0
        self.slider_multiplier = 1.4
        self.slider_tick_rate = 1.0
        # (offset, beat_length) for uninherited points, (offset, sv) for inherited ones
        self.timing_points = []
        self.velocity_points = []
        self.object_lines = []
        self.hit_objects = []

    def process(self):
        section = ""
        with open(self.file_path, "r", encoding='utf-8') as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("//"):
                    continue
                if line.startswith("[") and line.endswith("]"):
                    section = line[1:-1]
                    continue

                if section == "General":
                    self.read_general(line)
                elif section == "Difficulty":
                    self.read_difficulty(line)
                elif section == "TimingPoints":
                    self.read_timing_point(line)
                elif section == "HitObjects":
                    # Hit objects need every timing point, which may come later in the file.
                    collect_data(self.object_lines, line)

        if self.mode != 0:
            raise ValueError(f"{self.file_path}: only osu!standard beatmaps are supported (mode {self.mode})")

        # Old beatmaps have no ApproachRate; it followed OverallDifficulty.
        if self.ar < 0:
            self.ar = self.od

        self.timing_points.sort()
        self.velocity_points.sort()
        for object_line in self.object_lines:
            self.parse_hit_object(object_line)

    @staticmethod
    def split_property(line):
        key, _, value = line.partition(":")
        return key.strip(), value.strip()

    def read_general(self, line):
        key, value = self.split_property(line)
        if key == "Mode":
            self.mode = string_to_int(value)

    def read_difficulty(self, line):
        key, value = self.split_property(line)
        if key == "HPDrainRate":
            self.hp = float(value)
        elif key == "CircleSize":
            self.cs = float(value)
        elif key == "OverallDifficulty":
            self.od = float(value)
        elif key == "ApproachRate":
            self.ar = float(value)
        elif key == "SliderMultiplier":
            self.slider_multiplier = float(value)
        elif key == "SliderTickRate":
            self.slider_tick_rate = float(value)

    def read_timing_point(self, line):
        params = line.split(",")
        if len(params) < 2:
            return
        offset = float(params[0])
        beat_length = float(params[1])
        # Older formats have no "uninherited" column; the sign of the beat length decides.
        uninherited = params[6] == "1" if len(params) > 6 else beat_length > 0
        if uninherited:
            # clamped to the range osu! accepts, zero would divide by zero below
            beat_length = min(max(beat_length, MIN_BEAT_LENGTH), MAX_BEAT_LENGTH)
            collect_data(self.timing_points, (offset, beat_length))
        else:
            sv = -100.0 / beat_length if beat_length < 0 else 1.0
            collect_data(self.velocity_points, (offset, min(max(sv, 0.1), 10.0)))

    def beat_length_at(self, time):
        if not self.timing_points:
            return 1000.0
        i = bisect.bisect_right(self.timing_points, (time, math.inf)) - 1
        return self.timing_points[max(i, 0)][1]

    def slider_velocity_at(self, time):
        i = bisect.bisect_right(self.velocity_points, (time, math.inf)) - 1
        if i < 0:
            return 1.0
        # An inherited point only applies until the next uninherited point resets it.
        j = bisect.bisect_right(self.timing_points, (time, math.inf)) - 1
        if j >= 0 and self.timing_points[j][0] > self.velocity_points[i][0]:
            return 1.0
        return self.velocity_points[i][1]

    # Main function for parsing note data.
    # https://osu.ppy.sh/wiki/en/Client/File_formats/osu_%28file_format%29#hit-objects
    def parse_hit_object(self, object_line):
        params = object_line.split(",")
        if len(params) < 4:
            raise ValueError(f"{self.file_path}: malformed hit object line: {object_line}")

        x = float(params[0])
        y = float(params[1])
        time = float(params[2])
        object_type = string_to_int(params[3])

        if object_type & TYPE_SLIDER:
            hit_object = self.parse_slider(x, y, time, params)
        elif object_type & TYPE_SPINNER:
            end_time = float(params[5]) if len(params) > 5 else time
            cx, cy = PLAYFIELD_CENTRE
            hit_object = HitObject(cx, cy, time, SPINNER, max(end_time, time), cx, cy, 1, 0.0, 1)
        else:
            hit_object = HitObject(x, y, time, CIRCLE, time, x, y, 1, 0.0, 1)
        collect_data(self.hit_objects, hit_object)

    def parse_slider(self, x, y, time, params):
        if len(params) < 8:
            raise ValueError(f"{self.file_path}: malformed slider line: {','.join(params)}")

        # curve: "B|x:y|x:y", the last control point approximates the tail position
        points = params[5].split("|")[1:]
        last_x, last_y = x, y
        if points:
            last_x, last_y = (float(v) for v in points[-1].split(":")[:2])

        spans = max(string_to_int(params[6]), 1)
        pixel_length = max(float(params[7]), 0.0)

        sv = self.slider_velocity_at(time)
        beat_length = self.beat_length_at(time)
        scoring_distance = 100 * self.slider_multiplier * sv
        velocity = scoring_distance / beat_length
        span_duration = pixel_length / velocity if velocity > 0 else 0.0

        tick_distance = scoring_distance / self.slider_tick_rate if self.slider_tick_rate > 0 else 0.0
        # No tick within 10ms of the slider end.
        usable_length = pixel_length - velocity * 10
        ticks_per_span = 0
        if tick_distance > 0 and usable_length > 0:
            ticks_per_span = max(math.ceil(usable_length / tick_distance) - 1, 0)

        # Even span counts bring the ball back to the head.
        end_x, end_y = (last_x, last_y) if spans % 2 == 1 else (x, y)
        combo = 1 + spans + ticks_per_span * spans
        return HitObject(x, y, time, SLIDER, time + span_duration * spans, end_x, end_y,
                         spans, pixel_length, combo)

    def get_parsed_data(self):
        return [self.hp,
                self.cs,
                self.od,
                self.ar,
                self.hit_objects]
