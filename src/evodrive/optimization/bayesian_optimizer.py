"""
Bayesian optimizer for hyperparameter tuning.

This module provides an abstract base class - BayesianOptimizer - that uses the
"Optuna" library to tune the genetic algorithm's parameters (population size,
selection counts, crossover and mutation chances, ...) for a given Trial.

Subclasses must implement two abstract methods:
 - _extract_trial_results():       Extract experiment-specific results from completed trials
 - _compute_optimization_metric(): Compute the optimization metric from trial results
"""

import warnings
from abc    import ABC, abstractmethod
from typing import Any, Callable, Optional, Type

import optuna                                   # type: ignore
from optuna import Study, Trial as OptunaTrial  # type: ignore
from optuna.visualization import (              # type: ignore
    plot_optimization_history,
    plot_param_importances,
    plot_slice
)

from evodrive.exceptions                import ConfigurationError
from evodrive.optimization.search_space import SearchSpace
from evodrive.run.config                import Config
from evodrive.run.trial                 import Trial

class BayesianOptimizer(ABC):
    """
    Abstract base class for Bayesian hyperparameter optimization.

    Every evaluation loads the base configuration, overrides the attributes
    named in the search space with the values Optuna suggests, validates the
    result and runs 'num_trials_per_eval' trials with it. The optimizer always
    maximizes the computed metric. Suggested configurations that violate the
    Config constraints (e.g. more elites than genomes) are pruned.

    Example:

        >>> search_space = SearchSpace()
        >>> search_space.add_int('initial_population', 10, 60)
        >>> search_space.add_float('mutation_chance', 0.01, 0.5, log=True)
        >>>
        >>> optimizer = MyOptimizer(    # class derived from BayesianOptimizer
        ...     trial_class=Trial_XOR,
        ...     config_path='config_xor.ini',
        ...     search_space=search_space
        ... )
        >>> study = optimizer.optimize(num_configs=50)
        >>> best_config = optimizer.get_best_config()
    """

    def __init__(self,
                 trial_class        : Type[Trial],
                 config_path        : str,
                 search_space       : SearchSpace,
                 num_trials_per_eval: int = 1,
                 study_name         : Optional[str] = None,
                 storage            : Optional[str] = None,
                 sampler_seed       : Optional[int] = None,
                 **trial_kwargs):
        """
        Parameters:
            trial_class:         The Trial subclass whose output we want to optimize
            config_path:         Path to base configuration INI file
            search_space:        SearchSpace object defining parameters to optimize
            num_trials_per_eval: Number of trials to run per hyperparameter set evaluation
            study_name:          Name for the Optuna study (for persistence)
            storage:             Database URL for study persistence (e.g., 'sqlite:///optimization.db')
            sampler_seed:        Seed for the TPE sampler (None for a random seed)
            **trial_kwargs:      Additional keyword arguments for trial constructor
        """
        self.trial_class         = trial_class
        self.base_config_path    = config_path
        self.search_space        = search_space
        self.num_trials_per_eval = num_trials_per_eval
        self.trial_kwargs        = trial_kwargs

        search_space.check_names(Config(config_path))

        self.study = optuna.create_study(study_name     = study_name,
                                         storage        = storage,
                                         direction      = 'maximize',
                                         sampler        = optuna.samplers.TPESampler(seed=sampler_seed),
                                         load_if_exists = True)

    @abstractmethod
    def _extract_trial_results(self, trial: Trial) -> dict:
        """
        Extract relevant results at the end of a trial.

        Parameters:
            trial: The completed Trial object

        Returns:
            Dictionary containing extracted results
        """
        pass

    @abstractmethod
    def _compute_optimization_metric(self, results: list[dict]) -> float:
        """
        Compute the metric we want to optimize from the collected trial results.

        Parameters:
            results: List of trial results as returned by '_extract_trial_results()'

        Returns:
            The metric value to maximize
        """
        pass

    def _make_config(self, params: dict[str, Any]) -> Config:
        config = Config(self.base_config_path)
        for param_name, value in params.items():
            setattr(config, param_name, value)
        return config.validate()

    def _objective(self, trial: OptunaTrial) -> float:
        """
        Objective function for Optuna optimization: build the configuration
        Optuna recommends, run the trials and return the metric to maximize.
        """
        try:
            config = self._make_config(self.search_space.suggest(trial))
        except ConfigurationError as e:
            raise optuna.TrialPruned(str(e)) from e

        results = []
        for _ in range(self.num_trials_per_eval):
            run = self.trial_class(config=config, suppress_output=True, **self.trial_kwargs)
            run.run()
            results.append(self._extract_trial_results(run))

        return self._compute_optimization_metric(results)

    def optimize(self,
                 num_configs         : Optional[int] = None,
                 timeout             : Optional[float] = None,
                 num_parallel_configs: int = 1,
                 callbacks           : Optional[list[Callable]] = None,
                 show_progress_bar   : bool = True) -> Study:
        """
        Run Bayesian optimization.

        Parameters:
            num_configs:          Total number of parameter configurations to evaluate
            timeout:              Time limit in seconds (alternative to 'num_configs')
            num_parallel_configs: Number of hyperparameter configurations to evaluate in parallel
            callbacks:            List of callback functions
            show_progress_bar:    Display Optuna's progress bar

        Returns:
            Optuna Study object with optimization results
        """
        if num_configs is None and timeout is None:
            raise ValueError("Please specify at least one of 'num_configs' or 'timeout' for optimization.")

        self.study.optimize(self._objective,
                            n_trials          = num_configs,
                            timeout           = timeout,
                            n_jobs            = num_parallel_configs,
                            gc_after_trial    = True,
                            show_progress_bar = show_progress_bar,
                            callbacks         = callbacks)
        return self.study

    def get_best_params(self) -> dict[str, Any]:
        return self.study.best_params

    def get_best_config(self) -> Config:
        """
        Get a Config object with the best parameters.
        """
        return self._make_config(self.study.best_params)

    def save_best_config(self, path: str) -> None:
        """
        Save the best configuration to an INI file.
        """
        self.get_best_config().save(path)

    def get_best_value(self) -> float:
        return self.study.best_value

    def get_n_trials(self) -> int:
        """Get the number of completed trials."""
        return len(self.study.trials)

    # Visualization methods

    def plot_optimization_history(self, **kwargs):
        return plot_optimization_history(self.study, **kwargs)

    def plot_param_importances(self, **kwargs):
        """
        Plot hyperparameter importances.
        Returns:
            Plotly figure object, or None if there are too few trials
        """
        if len(self.study.trials) < 10:
            warnings.warn("Need at least 10 trials for parameter importance analysis")
            return None
        return plot_param_importances(self.study, **kwargs)

    def plot_slice(self, **kwargs):
        return plot_slice(self.study, **kwargs)

    def print_summary(self) -> None:
        print("\n" + "="*60)
        print("OPTIMIZATION SUMMARY")
        print("="*60)
        print(f"Number of finished trials: {len(self.study.trials)}")
        print(f"Best metric (maximize): {self.study.best_value:.6f}")
        print("\nBest parameters:")
        for param_name, value in self.study.best_params.items():
            print(f"  {param_name}: {value}")
        print("="*60)
