"""
Experiment Module

This module defines the abstract base class for experiments with built-in
support for CPU-based parallelization using joblib.

An experiment represents a collection of multiple independent trials (runs),
used to gather statistical data about the genetic algorithm's performance.
"""

from abc    import ABC, abstractmethod
from joblib import Parallel, delayed
from sys    import stdout
from typing import Type

from evodrive.run.config import Config
from evodrive.run.trial  import Trial

class Experiment(ABC):
    """
    Abstract base class for implementing an experiment.

    Each trial represents one complete run of the genetic algorithm, and the
    experiment aggregates results across all trials: success rate, convergence
    speed and fitness distributions.

    Subclasses must implement:
    - _reset(): Reset experiment-specific state and call super()._reset()
    - _prepare_trial(trial, trial_number): Configure each trial before execution
    - _extract_trial_results(trial, trial_number): Extract results after trial completes
    - _analyze_trial_results(results): Process and display individual trial results
    - _final_report(): Produce aggregated statistical report for entire experiment

    Public Methods:
        run(num_jobs=1): Execute the complete experiment

    Parallelization (num_jobs):
         1:  Serial trial execution (no parallelization)
        >1:  Use specified number of parallel processes for trials
        -1:  Use all available CPU cores for trials
    """

    def __init__(self, trial_class: Type[Trial], num_trials: int, config: Config,
                 *args, **kwargs):
        """
        Parameters:
            trial_class: the class describing the trials in this experiment
            num_trials:  number of trials in this experiment
            config:      configuration parameters
            *args:       positional arguments to pass to trial class constructor
            **kwargs:    keyword arguments to pass to trial class constructor
        """
        self._num_trials : int         = num_trials
        self._trial_class: Type[Trial] = trial_class
        self._config     : Config      = config
        self._trial_args               = args
        self._trial_kwargs             = kwargs

        # progress counters
        self._trial_counter  : int = 0  # how many trials we've run so far
        self._success_counter: int = 0  # how many trials reached the fitness threshold

        # for each successful trial, some stats
        self._number_generations: list[int]   = []  # length of trial, in generations
        self._max_fitness       : list[float] = []  # max fitness achieved in trial

    @abstractmethod
    def _reset(self):
        """
        Reset experiment state before starting a new run.
        """
        self._trial_counter      = 0
        self._success_counter    = 0
        self._number_generations = []
        self._max_fitness        = []

    def run(self, num_jobs: int = 1):
        """
        Run the experiment.

        Resets the experiment state and runs the necessary number of trials.
        Trials can be run serially or in parallel based on num_jobs parameter.

        Parameters:
            num_jobs: Number of parallel processes for running trials
                       1 = serial trial execution (default)
                      -1 = use all available CPU cores
                      >1 = use specified number of processes
        """
        # Reset the state at the beginning of each new experiment
        self._reset()

        # Run all trials, gather results
        serialize = num_jobs == 1

        if serialize:
            results = []
            while self._trial_counter < self._num_trials:
                self._trial_counter += 1
                r = self._run_trial(self._trial_counter)
                results.append(r)
        else:
            results = Parallel(num_jobs)(
                delayed(self._run_trial)(n)
                for n in range(1, self._num_trials + 1)
            )
            self._trial_counter = self._num_trials

        # Analyze and display data for each trial, then
        # assemble all the data gathered in a final report
        for r in results:
            self._analyze_trial_results(r)
        self._final_report()

    def _run_trial(self, trial_number: int) -> dict:
        """
        Prepare, run, analyze one trial.
        Returns the relevant data generated by the trial.

        Parameters:
            trial_number: The trial number (1-indexed)
        """
        # create new trial instance
        trial = \
            self._trial_class(*self._trial_args, config=self._config, suppress_output=True, **self._trial_kwargs)

        # configure the trial we are about to run; this
        # usually means updating the configuration values
        self._prepare_trial(trial, trial_number)

        trial.run()

        # extract and return the relevant data for
        # the trial that just completed
        return self._extract_trial_results(trial, trial_number)

    @abstractmethod
    def _prepare_trial(self, trial: Trial, trial_number: int):
        """
        Configure the experiment in preparation for the next run.
        For example, this could mean changing configuration parameters.
        The default implementation prints a progress report.
        Derived implementations need not call this method.
        """
        s = f"Starting trial {trial_number:03d} of {self._num_trials}..."
        stdout.write(s + '\r')
        stdout.flush()

    @abstractmethod
    def _extract_trial_results(self, trial: Trial, trial_number: int) -> dict:
        """
        Extract relevant results at the end of a trial.
        This implementation extracts basic information, common to all experiments.
        Derived implementations MUST call this method.
        """
        results = {"trial_number": trial_number}

        # for how many generations did the trial run
        results["number_generations"] = trial._generation_counter

        # the maximum fitness reported during the trial
        results["max_fitness"] = trial.population.best_fitness

        # whether an acceptable solution was found during this trial
        results["success"] = not trial.failed

        return results

    @abstractmethod
    def _analyze_trial_results(self, results: dict):
        """
        Analyze, and display the results of each trial.
        This implementation updates basic statistics, common to all experiments.
        Derived implementations MUST call this method.
        """
        if results["success"]:
            self._success_counter += 1
            self._number_generations.append(results["number_generations"])
            self._max_fitness.append(results["max_fitness"])

    @abstractmethod
    def _final_report(self):
        """
        Produce the final report, aggregating the data obtained from each trial.
        """
        pass
