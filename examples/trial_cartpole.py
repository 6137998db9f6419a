"""
CartPole Problem Implementation

This module implements the CartPole balancing task from Gymnasium as a trial.
The goal is to evolve networks that balance a pole on a moving cart by pushing
the cart left or right.

    State Space (4 continuous values):
        - Cart position: [-2.4, 2.4]
        - Cart velocity: [-∞, ∞]
        - Pole angle: [-0.209, 0.209] radians (~12 degrees)
        - Pole angular velocity: [-∞, ∞]

    Action Space (2 discrete actions):
        0 - Push cart to the left
        1 - Push cart to the right

Fitness Function:
    Fitness = avg(total_reward - position_penalty_coeff * |final_position|)

Usage:
    config = Config("examples/configs/config_cartpole.ini")
    trial = Trial_CartPole(config, num_episodes=3)
    trial.run()
"""

import gymnasium as gym    # type: ignore
from statistics import mean

from evodrive.phenotype     import Network
from evodrive.run           import Config
from examples.trial_gymbase import Trial_Gymnasium

class Trial_CartPole(Trial_Gymnasium):
    """
    Trial for the CartPole-v1 balancing task.

    Fitness combines episode duration (reward) with a penalty
    for ending far from center.
    """

    def __init__(self,
                 config                : Config,
                 num_episodes          : int   = 3,
                 position_penalty_coeff: float = 10.0,
                 suppress_output       : bool  = False):
        environment = gym.make("CartPole-v1")
        super().__init__(config, environment, num_episodes, suppress_output)
        self.position_penalty_coeff = position_penalty_coeff

    def _evaluate_fitness(self, network: Network) -> float:
        """
        The fitness of a network has two components:
        + the total reward returned by the environment: the
          number of time steps the pole stayed vertical
        + a penalty proportional to the absolute distance from
          the center at the end of the episode

        The fitness is the average of this quantity over multiple episodes.
        """
        observations, rewards = self._run_environment(network)

        total_rewards = {n: sum(rs) for n, rs in rewards.items()}

        # NOTE: a CartPole observation is (cart position, cart velocity,
        # pole angle, pole angular velocity)
        final_pos = {n: pos[-1][0] for n, pos in observations.items()}

        rewards_adj = [total_rewards[n] - self.position_penalty_coeff * abs(final_pos[n]) for n in total_rewards]

        # Negative fitness would keep a network out of the gene pool entirely
        return max(0.0, float(mean(rewards_adj)))
