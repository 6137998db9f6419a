"""
XOR Problem Implementation

This module implements the classic XOR (exclusive OR) problem as a benchmark for
fixed-topology neuroevolution. XOR is not linearly separable, so the network
needs its hidden layer; evolution only has to find the right weights.

The XOR Problem:
        Input (0, 0) → Output 0
        Input (0, 1) → Output 1
        Input (1, 0) → Output 1
        Input (1, 1) → Output 0

Fitness Function:
    Fitness = 4.0 - Σ(output - target)²

    Maximum fitness of 4.0 is achieved when all four XOR cases produce exact outputs.
    The output channel uses the 'sigmoid' activation so that targets 0 and 1 are
    both reachable.

Classes:
    Trial_XOR:      Trial for solving XOR
    Experiment_XOR: Multi-trial experiment for XOR with statistical analysis

Usage:
    Single Trial:
        config = Config("examples/configs/config_xor.ini")
        trial = Trial_XOR(config)
        trial.run()

    Experiment (Multiple Trials):
        config = Config("examples/configs/config_xor.ini")
        experiment = Experiment_XOR(num_trials=50, config=config)
        experiment.run(num_jobs=-1)
"""

from statistics import mean

from evodrive.phenotype  import Network
from evodrive.run        import Config, Experiment, Trial

class Trial_XOR(Trial):
    """
    Trial evolving a 2-H-1 network that computes XOR.

    Implemented Methods:
        _evaluate_fitness(network): Test network on all 4 XOR cases
        _generation_report():       Display generation statistics and XOR truth table
        _final_report():            Display the best network found
    """

    def __init__(self, config: Config, suppress_output: bool = False):
        super().__init__(config, suppress_output)

        self.xor_inputs  = [[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]]
        self.xor_outputs = [0.0,        1.0,        1.0,        0.0]

    def _reset(self):
        return super()._reset()

    def _evaluate_fitness(self, network: Network) -> float:
        """
        Returns:
            Fitness score (maximum 4.0 for perfect XOR solution)
        """
        fitness = 4.0  # max possible fitness
        for inputs, expected_output in zip(self.xor_inputs, self.xor_outputs):
            output   = network.run(inputs)
            error    = output[0] - expected_output
            fitness -= error ** 2
        return fitness

    def _truth_table(self, network: Network) -> str:
        s  = "input         output   target  error\n"
        s += "------------------------------------\n"
        for inputs, target in zip(self.xor_inputs, self.xor_outputs):
            output = network.run(inputs)[0]
            s += f"{inputs} -> {output:.4f}    {target}   {abs(output - target):.4f}\n"
        return s

    def _generation_report(self):
        s  = self._generation_summary()
        s += '\n'
        s += self._truth_table(self._last_best)
        print(s)

    def _final_report(self):
        fittest = self._last_best
        print("="*18)
        print("FINAL BEST NETWORK")
        print("="*18)
        print(fittest)
        print(f"\nFinal fitness: {fittest.fitness:.4f}")
        print("[SUCCESS]" if not self.failed else "[FAILED]")

class Experiment_XOR(Experiment):

    def __init__(self, num_trials: int, config: Config):
        super().__init__(Trial_XOR, num_trials, config)

    def _reset(self):
        super()._reset()

    def _prepare_trial(self, trial: Trial_XOR, trial_number: int):
        # the default implementation prints a progress report.
        super()._prepare_trial(trial, trial_number)

    def _extract_trial_results(self, trial: Trial_XOR, trial_number: int) -> dict:
        return super()._extract_trial_results(trial, trial_number)

    def _analyze_trial_results(self, results: dict):
        super()._analyze_trial_results(results)

        s  = f"Trial {results['trial_number']:03d}: "
        s += f"max fitness={results['max_fitness']:.3f}, "
        s += f"generations={results['number_generations']:3} "
        s += "[SUCCESS]" if results['success'] else "[FAILED]"
        print(s)

    def _final_report(self):
        success_rate = self._success_counter / self._trial_counter

        s  = "\nSUMMARY:\n"
        s += f"Total trials:         = {self._trial_counter}\n"
        s += f"Success rate          = {100*success_rate:.0f}%\n"

        # Only compute statistics if there were successful trials
        if self._number_generations:
            s += f"Avg # generations     = {mean(self._number_generations):.0f}\n"
            s += f"Avg max fitness       = {mean(self._max_fitness):.3f}\n"
        else:
            s += "No successful trials - cannot compute statistics\n"
        print(s)
