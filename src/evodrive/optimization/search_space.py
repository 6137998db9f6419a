"""
Search space definitions for Bayesian optimization.

A search space lists the Config attributes to tune (population size, mutation
chance, crossover chance, ...) together with the range or choices each one may
take. Optuna draws a value for every parameter each time a new configuration
is evaluated.
"""

from abc    import ABC, abstractmethod
from typing import Any, Optional

import optuna   # type: ignore

from evodrive.exceptions import ConfigurationError

class Parameter(ABC):
    """A single hyperparameter, named after the Config attribute it sets."""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def suggest(self, trial: optuna.Trial) -> Any:
        pass

    @abstractmethod
    def describe(self) -> str:
        pass

class FloatParameter(Parameter):

    def __init__(self, name: str, low: float, high: float, log: bool = False, step: Optional[float] = None):
        """
        Parameters:
            name: Config attribute name
            low:  Lower bound
            high: Upper bound
            log:  Use logarithmic scale
            step: Step size for discrete values (None for continuous)
        """
        super().__init__(name)
        self.low  = low
        self.high = high
        self.log  = log
        self.step = step

    def suggest(self, trial: optuna.Trial) -> float:
        if self.step is not None:
            return trial.suggest_float(self.name, self.low, self.high, step=self.step)
        return trial.suggest_float(self.name, self.low, self.high, log=self.log)

    def describe(self) -> str:
        return f"FloatParameter('{self.name}', {self.low}, {self.high}, log={self.log}, step={self.step})"

class IntParameter(Parameter):

    def __init__(self, name: str, low: int, high: int, log: bool = False, step: int = 1):
        super().__init__(name)
        self.low  = low
        self.high = high
        self.log  = log
        self.step = step

    def suggest(self, trial: optuna.Trial) -> int:
        return trial.suggest_int(self.name, self.low, self.high, log=self.log, step=self.step)

    def describe(self) -> str:
        return f"IntParameter('{self.name}', {self.low}, {self.high}, log={self.log}, step={self.step})"

class CategoricalParameter(Parameter):

    def __init__(self, name: str, choices: list[Any]):
        super().__init__(name)
        self.choices = list(choices)

    def suggest(self, trial: optuna.Trial) -> Any:
        return trial.suggest_categorical(self.name, self.choices)

    def describe(self) -> str:
        return f"CategoricalParameter('{self.name}', {self.choices})"

class SearchSpace:
    """
    Container for the hyperparameters to optimize.

    Example:
        >>> search_space = SearchSpace()
        >>> search_space.add_int('initial_population', 10, 100)
        >>> search_space.add_float('mutation_chance', 0.01, 0.5, log=True)
        >>> search_space.add_categorical('number_to_crossover', [2, 4, 6])
    """

    def __init__(self):
        self.parameters : list[Parameter]      = []  # in insertion order
        self._param_dict: dict[str, Parameter] = {}

    def _add(self, param: Parameter) -> 'SearchSpace':
        if param.name in self._param_dict:
            raise ConfigurationError(f"Parameter '{param.name}' is already in the search space")
        self.parameters.append(param)
        self._param_dict[param.name] = param
        return self

    def add_float(self, name: str,
                  low: float, high: float, log: bool = False,
                  step: Optional[float] = None) -> 'SearchSpace':
        """
        Add a continuous float parameter to the search space.

        Parameters:
            name: Config attribute name
            low:  Lower bound (inclusive)
            high: Upper bound (inclusive)
            log:  Whether to use log scale sampling
            step: Step size for discrete sampling (None for continuous)

        Returns:
            self for method chaining
        """
        return self._add(FloatParameter(name, low, high, log, step))

    def add_int(self, name: str, low: int, high: int, log: bool = False, step: int = 1) -> 'SearchSpace':
        """
        Add an integer parameter to the search space. Same parameters as add_float().
        """
        return self._add(IntParameter(name, low, high, log, step))

    def add_categorical(self, name: str, choices: list[Any]) -> 'SearchSpace':
        return self._add(CategoricalParameter(name, choices))

    def suggest(self, trial: optuna.Trial) -> dict[str, Any]:
        """
        Draw a value for every parameter from an Optuna trial.

        Returns:
            Dictionary mapping Config attribute names to suggested values
        """
        return {param.name: param.suggest(trial) for param in self.parameters}

    def check_names(self, config) -> None:
        """
        Make sure every parameter names an existing attribute of 'config'.

        Raises:
            ConfigurationError: for the first unknown name
        """
        for param in self.parameters:
            if not hasattr(config, param.name):
                raise ConfigurationError(f"Config has no attribute '{param.name}'")

    def get_param_names(self) -> list[str]:
        return [p.name for p in self.parameters]

    def __contains__(self, name: str) -> bool:
        return name in self._param_dict

    def __len__(self) -> int:
        return len(self.parameters)

    def __repr__(self) -> str:
        params_str = ',\n    '.join(param.describe() for param in self.parameters)
        return f"SearchSpace([\n    {params_str}\n])"
