"""
Ring Track Driving Implementation

A minimal top-down driving simulation: a car drives counter-clockwise around a
ring shaped road and dies as soon as it leaves it. This is the kind of simulation
the population controller was built for, where every genome drives the car once
and the run ends with a death.

    Road: the annulus inner_radius <= |position| <= outer_radius

    Sensors (network inputs, 6 values):
        - 5 distance rays at -90, -45, 0, 45 and 90 degrees from the heading,
          each normalized to [0, 1] by the sensor range
        - the current speed, normalized by the maximum speed

    Controls (network outputs, 3 values):
        - throttle in [-1, 1]   (tanh)
        - steering in [-1, 1]   (tanh)
        - handbrake in [0, 1]   (sigmoid, engaged above 0.5)

    The car dies when it leaves the road, when it stops making progress for
    'stall_steps' steps, or after 'max_steps' steps.

Fitness Function:
    Fitness = distance + speed_weight * average speed + checkpoint_weight * checkpoints

    'distance' is the arc length travelled along the center line in the driving
    direction; a checkpoint is passed every 'checkpoint_angle' degrees.

Usage:
    config = Config("examples/configs/config_track.ini")
    trial = Trial_Track(config)
    trial.run()
"""

import math
from dataclasses import dataclass
from statistics  import mean

import numpy as np

from evodrive.phenotype import Network
from evodrive.run       import Config, Experiment, Trial

RAY_ANGLES = np.radians([-90.0, -45.0, 0.0, 45.0, 90.0])

@dataclass
class Track:
    inner_radius    : float = 40.0
    outer_radius    : float = 60.0
    sensor_range    : float = 25.0
    sensor_step     : float = 0.5
    max_speed       : float = 5.0
    acceleration    : float = 0.5
    turn_rate       : float = 0.15
    handbrake_factor: float = 0.8

    @property
    def center_radius(self) -> float:
        return 0.5 * (self.inner_radius + self.outer_radius)

    def on_road(self, points: np.ndarray) -> np.ndarray:
        radius = np.linalg.norm(points, axis=-1)
        return (radius >= self.inner_radius) & (radius <= self.outer_radius)

    def sense(self, position: np.ndarray, heading: float) -> list[float]:
        """
        Normalized distance to the edge of the road along every sensor ray.
        """
        steps  = np.arange(self.sensor_step, self.sensor_range + self.sensor_step, self.sensor_step)
        angles = heading + RAY_ANGLES
        directions = np.stack([np.cos(angles), np.sin(angles)], axis=1)

        # points[ray, step] = position + step * direction[ray]
        points  = position + steps[None, :, None] * directions[:, None, :]
        off     = ~self.on_road(points)

        readings = []
        for ray in range(len(RAY_ANGLES)):
            hits = np.flatnonzero(off[ray])
            distance = steps[hits[0]] if hits.size else self.sensor_range
            readings.append(min(distance, self.sensor_range) / self.sensor_range)
        return readings

class Trial_Track(Trial):
    """
    Trial evolving a driver for the ring track.
    """

    def __init__(self,
                 config           : Config,
                 track            : Track | None = None,
                 max_steps        : int   = 1000,
                 stall_steps      : int   = 50,
                 checkpoint_angle : float = 30.0,
                 speed_weight     : float = 10.0,
                 checkpoint_weight: float = 5.0,
                 suppress_output  : bool  = False):
        super().__init__(config, suppress_output)

        self.track             = track if track is not None else Track()
        self.max_steps         = max_steps
        self.stall_steps       = stall_steps
        self.checkpoint_angle  = math.radians(checkpoint_angle)
        self.speed_weight      = speed_weight
        self.checkpoint_weight = checkpoint_weight

        self._config.num_inputs  = len(RAY_ANGLES) + 1
        self._config.num_outputs = 3
        self._config.activations = ['tanh', 'tanh', 'sigmoid']

    def _reset(self):
        return super()._reset()

    def _drive(self, network: Network) -> tuple[float, list[float], int]:
        """
        Drive the car with 'network' until it dies.

        Returns:
            the distance travelled along the center line, the speed at every
            step and the number of checkpoints passed
        """
        track    = self.track
        position = np.array([track.center_radius, 0.0])
        heading  = 0.5 * math.pi
        speed    = 0.0

        angle_travelled = 0.0
        best_angle      = 0.0
        last_progress   = 0
        speeds          = []

        for step in range(self.max_steps):
            inputs = track.sense(position, heading) + [speed / track.max_speed]
            throttle, steering, handbrake = network.run(inputs)

            speed += throttle * track.acceleration
            if handbrake > 0.5:
                speed *= track.handbrake_factor
            speed    = float(np.clip(speed, 0.0, track.max_speed))
            heading += steering * track.turn_rate

            previous = math.atan2(position[1], position[0])
            position = position + speed * np.array([math.cos(heading), math.sin(heading)])
            current  = math.atan2(position[1], position[0])

            # Signed angular step around the ring, counter-clockwise is forward
            delta = (current - previous + math.pi) % (2.0 * math.pi) - math.pi
            angle_travelled += delta
            speeds.append(speed)

            if not track.on_road(position):
                break
            if angle_travelled > best_angle:
                best_angle    = angle_travelled
                last_progress = step
            elif step - last_progress >= self.stall_steps:
                break

        distance    = max(0.0, best_angle) * track.center_radius
        checkpoints = int(max(0.0, best_angle) // self.checkpoint_angle)
        return distance, speeds, checkpoints

    def _evaluate_fitness(self, network: Network) -> float:
        distance, speeds, checkpoints = self._drive(network)
        average_speed = mean(speeds) if speeds else 0.0
        return distance + self.speed_weight * average_speed + self.checkpoint_weight * checkpoints

    def _generation_report(self):
        print(self._generation_summary())

    def _final_report(self):
        fittest = self._last_best
        distance, speeds, checkpoints = self._drive(fittest)
        laps = distance / (2.0 * math.pi * self.track.center_radius)

        print("="*18)
        print("FINAL BEST NETWORK")
        print("="*18)
        print(fittest)
        print(f"\nFinal fitness: {fittest.fitness:.2f}")
        print(f"Laps: {laps:.2f}, checkpoints: {checkpoints}, steps: {len(speeds)}")
        print("[SUCCESS]" if not self.failed else "[FAILED]")

class Experiment_Track(Experiment):

    def __init__(self, num_trials: int, config: Config):
        super().__init__(Trial_Track, num_trials, config)

    def _reset(self):
        super()._reset()

    def _prepare_trial(self, trial: Trial_Track, trial_number: int):
        super()._prepare_trial(trial, trial_number)

    def _extract_trial_results(self, trial: Trial_Track, trial_number: int) -> dict:
        return super()._extract_trial_results(trial, trial_number)

    def _analyze_trial_results(self, results: dict):
        super()._analyze_trial_results(results)

    def _final_report(self):
        success_rate = self._success_counter / self._trial_counter

        s  = "\nSUMMARY:\n"
        s += f"Total trials:         = {self._trial_counter}\n"
        s += f"Success rate          = {100*success_rate:.0f}%\n"
        if self._number_generations:
            s += f"Avg # generations     = {mean(self._number_generations):.0f}\n"
            s += f"Avg max fitness       = {mean(self._max_fitness):.1f}\n"
        print(s)
