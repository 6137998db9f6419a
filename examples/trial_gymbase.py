"""
Gymnasium Environment Base Module

This module provides the base class for evolving agents on Gymnasium (formerly
OpenAI Gym) environments. It handles environment interaction and episode
management, allowing derived classes to focus on fitness calculation.

Classes:
    Trial_Gymnasium: Abstract base class for Gymnasium environment trials
"""

import gymnasium as gym       # type: ignore
import numpy as np

from evodrive.phenotype import Network
from evodrive.run       import Config, Trial

class Trial_Gymnasium(Trial):
    """
    Abstract base class for trials on Gymnasium environments.

    Derived classes must implement '_evaluate_fitness()' to compute fitness from
    the observations and rewards collected by '_run_environment()'.

    The network's input and output counts are taken from the environment's
    observation and action spaces.
    """

    def __init__(self,
                 config         : Config,
                 environment    : gym.Env,
                 num_episodes   : int  = 1,
                 suppress_output: bool = False):
        """
        Parameters:
            config:          Configuration parameters
            environment:     An instance of the Gymnasium environment we want to solve
            num_episodes:    Number of episodes each network is evaluated on
            suppress_output: Whether to suppress output during training
        """
        super().__init__(config, suppress_output=suppress_output)

        self.env          = environment
        self.num_episodes = num_episodes

        self._config.num_inputs = self.env.observation_space.shape[0]
        if isinstance(self.env.action_space, gym.spaces.Discrete):
            self._config.num_outputs = int(self.env.action_space.n)
        else:
            self._config.num_outputs = self.env.action_space.shape[0]

        # One activation per output: keep the configured ones only if they still fit
        if self._config.activations is not None and len(self._config.activations) != self._config.num_outputs:
            self._config.activations = None

    def _reset(self):
        return super()._reset()

    def _run_environment(self, network: Network) -> tuple[dict, dict]:
        """
        Runs 'num_episodes' episodes of the gym environment with 'network' choosing the actions.

        Returns:
            a tuple of two dictionaries, episode number => list of observations
            and episode number => list of rewards
        """
        observations = {}
        rewards      = {}

        for n in range(self.num_episodes):
            observation, _ = self.env.reset()
            observations[n+1] = [observation]
            rewards[n+1]      = []

            done = False
            while not done:
                # Choose action: select the output with highest activation
                output = network.run(observation.tolist())
                action = int(np.argmax(output))

                observation, reward, terminated, truncated, _ = self.env.step(action)
                done = terminated or truncated

                observations[n+1].append(observation)
                rewards[n+1].append(reward)

        return observations, rewards

    def _generation_report(self):
        print(self._generation_summary())

    def _final_report(self):
        fittest = self._last_best

        print("="*18)
        print("FINAL BEST NETWORK")
        print("="*18)
        print(fittest)
        print(f"\nFinal fitness: {fittest.fitness:.2f}")
