"""
Trial Module

This module defines the abstract base class for trials: one independent run of the
genetic algorithm against a simulation. A Trial is itself the Environment of its
population: the population hands it genomes through assign_genome(), the trial
evaluates each one with '_evaluate_fitness()' and reports the result through
Population.death(), generation after generation, until it decides to terminate.
"""

from abc        import abstractmethod
from statistics import mean
from typing     import TYPE_CHECKING

from evodrive.genotype.topology import Topology
from evodrive.io                import StatsLog, network_path, save_network
from evodrive.pool              import Population
from evodrive.run.config        import Config
from evodrive.run.environment   import Environment

if TYPE_CHECKING:
    from evodrive.phenotype import Network

class Trial(Environment):
    """
    Abstract base class for implementing a trial.

    Subclasses must implement:
    - _reset(): Reset trial-specific state and call super()._reset()
    - _evaluate_fitness(network): Drive the simulated agent with a network and return its fitness
    - _generation_report(): Display progress after each generation
    - _final_report(): Display final results

    Subclasses can override:
    - _topology(): Network shape (default: the [NETWORK] section of the config)
    - _terminate(): Custom termination logic (default: max generations + fitness threshold)

    Public Attributes:
        failed: True unless the fitness threshold was reached

    Public Methods:
        run(population=None): Execute a complete trial
    """

    def __init__(self, config: Config, suppress_output: bool = False):
        """
        Initialize the trial.

        Parameters:
            config:          Configuration parameters
            suppress_output: If True, suppress progress and final reports
                             (useful when running multiple trials in experiments)
        """
        self._config            : Config             = config
        self._generation_counter: int                = 0
        self._population        : Population | None  = None
        self._network           : 'Network | None'   = None
        self._suppress_output   : bool               = suppress_output
        self.failed             : bool               = True

        # Fitness values of the generation that completed last, in evaluation order,
        # and the network that scored highest in it
        self._last_fitness      : list[float]        = []
        self._last_best         : 'Network | None'   = None

    @property
    def population(self) -> Population | None:
        return self._population

    def assign_genome(self, network: 'Network') -> None:
        """
        Called by the population each time a new genome is to be evaluated.
        """
        self._network = network

    def _topology(self) -> Topology:
        return self._config.topology()

    def run(self, population: Population | None = None):
        """
        Run the trial.

        Resets the trial state and runs the evolutionary
        algorithm until the terminate condition is met.

        Parameters:
            population: An existing population to continue evolving (e.g. one
                        restored from a checkpoint); a new one is created if omitted
        """
        # Reset the trial state before starting a new run
        self._reset()

        # Create the initial population
        if population is None:
            stats_log = None
            if self._config.stats_directory is not None:
                stats_log = StatsLog(self._config.stats_directory)
            population = Population(self._config, self._topology(), stats_log=stats_log)
        self._population = population

        # The population hands us its current genome
        self._population.start(self)

        # Evolution loop
        while not self._terminate():
            self._evaluate_generation()
            self._generation_counter += 1

            if self._config.networks_directory is not None and self._last_best is not None:
                save_network(self._last_best,
                             network_path(self._config.networks_directory, self._last_best.fitness))

            # Display progress after each generation
            if not self._suppress_output:
                self._generation_report()

        # Produce final report
        if not self._suppress_output:
            self._final_report()

    def _evaluate_generation(self):
        """
        Evaluate the remaining genomes of the current generation, one at a time.
        The last death() call makes the population repopulate.
        """
        self._last_fitness = []
        self._last_best    = None

        remaining = self._population.size - self._population.current_genome_index
        for _ in range(remaining):
            network = self._network
            fitness = self._evaluate_fitness(network)
            self._population.death(fitness)

            self._last_fitness.append(fitness)
            if self._last_best is None or fitness > self._last_best.fitness:
                self._last_best = network

    @abstractmethod
    def _reset(self):
        """
        Reset the trial state before starting a new run.

        Subclasses should call super()._reset() and then
        initialize their problem-specific data.
        """
        self._generation_counter = 0
        self._network            = None
        self._last_fitness       = []
        self._last_best          = None
        self.failed              = True

    @abstractmethod
    def _evaluate_fitness(self, network: 'Network') -> float:
        """
        Drive the agent with 'network' until it dies and return its fitness.

        Higher fitness values indicate better performance and a larger share
        of the gene pool. Fitness should be positive (or zero): negative
        values never enter the gene pool.

        Parameters:
            network: The network to evaluate

        Returns:
            float: Fitness score for the network
        """
        pass

    @abstractmethod
    def _generation_report(self):
        """
        Report trial progress after each generation.

        This method is suppressed by setting 'self._suppress_output' to 'True',
        which we might do when running many trials, as part of an experiment.
        """
        pass

    @abstractmethod
    def _final_report(self):
        """
        Produce final report at the end of the trial.

        This method is suppressed by setting 'self._suppress_output' to 'True',
        which we might do when running many trials, as part of an experiment.
        """
        pass

    def _generation_summary(self) -> str:
        """
        A few lines describing the generation that completed last;
        convenient for implementing '_generation_report()'.
        """
        s  = f"===============\n"
        s += f"GENERATION {self._generation_counter:04d}\n"
        s += f"Maximum fitness  = {max(self._last_fitness):.2f}\n"
        s += f"Mean fitness     = {mean(self._last_fitness):.2f}\n"
        s += f"Best fitness     = {self._population.best_fitness:.2f}\n"
        if self._population.scoring.name == "novelty":
            s += f"Best novelty     = {self._population.best_score:.2f}\n"
            s += f"Archive size     = {len(self._population.scoring.archive)}\n"
        return s

    def _terminate(self) -> bool:
        """
        Determine whether the trial should terminate.

        This default implementation stops the trial after a maximum number
        of generations and (optionally) also stops it once the best fitness
        reported so far reaches a given threshold.

        Subclasses can override this method for custom termination logic.

        Returns:
            bool: True if the trial should stop, False otherwise
        """
        # Has this trial run for too long?
        terminate = self._generation_counter >= self._config.max_number_generations

        # Check whether the fitness has reached a target threshold
        if self._config.fitness_termination_check:
            success   = self._population.best_fitness >= self._config.fitness_threshold
            terminate = terminate or success

            if terminate:
                self.failed = not success

        return terminate
