import configparser
import json
import os
from typing import Mapping

from evodrive.exceptions        import ConfigurationError, InvalidTopology
from evodrive.genotype.matrix   import Matrix
from evodrive.genotype.topology import Topology

# Sentinel for missing default values
_NO_DEFAULT = object()

# Flat configuration keys (as used by JSON config files) => Config attribute names
FLAT_KEYS = {
    'initialPopulation'  : ('initial_population'   , int  ),
    'mutationChance'     : ('mutation_chance'      , float),
    'fitnessMultiplier'  : ('fitness_multiplier'   , float),
    'bestAgentSelection' : ('best_agent_selection' , int  ),
    'worstAgentSelection': ('worst_agent_selection', int  ),
    'numberToCrossover'  : ('number_to_crossover'  , int  ),
    'crossoverChance'    : ('crossover_chance'     , float),
}
FLAT_NOVELTY_KEYS = {
    'noveltyThreshold'   : ('novelty_threshold'    , float),
}

class Config:

    @staticmethod
    def _parse_int_list(raw_value):
        """
        Parse hidden_sizes from a comma-separated string (or pass a sequence through).
        """
        if isinstance(raw_value, (list, tuple)):
            return tuple(int(v) for v in raw_value)
        return tuple(int(v.strip()) for v in raw_value.split(',') if v.strip())

    @staticmethod
    def _parse_name_list(raw_value):
        """
        Parse activations from a comma-separated string (or pass a sequence through).
        """
        if isinstance(raw_value, (list, tuple)):
            return tuple(raw_value)
        return tuple(v.strip() for v in raw_value.split(',') if v.strip())

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing an INI file, or create a Config with defaults.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, creates a Config with default values,
                         for testing or manual attribute setting.

        Raises:
            FileNotFoundError:  if 'config_file' does not exist
            ConfigurationError: if a required key is missing or cannot be parsed
        """

        # Default config for testing/manual setup
        if config_file is None:
            self._set_defaults()
            return

        if not os.path.exists(config_file):
            raise FileNotFoundError(f"Configuration file '{config_file}' not found")

        parser = configparser.ConfigParser()
        parser.read(config_file)

        # Helper function to safely parse values
        def get_value(section, key, value_type, default=_NO_DEFAULT):
            try:
                raw_value = parser.get(section, key)
                if raw_value.strip().lower() == 'none':
                    # Only values that are optional and off by default can be switched off
                    if default is None:
                        return None
                    raise ConfigurationError(f"Missing configuration value '{key}' in section [{section}]")
                if value_type == int:
                    return parser.getint(section, key)
                elif value_type == float:
                    return parser.getfloat(section, key)
                elif value_type == bool:
                    return parser.getboolean(section, key)
                elif value_type == str:
                    return raw_value
            except (configparser.NoSectionError, configparser.NoOptionError):
                if default is not _NO_DEFAULT:
                    return default
                raise ConfigurationError(f"Missing configuration value '{key}' in section [{section}]")
            except ValueError as e:
                raise ConfigurationError(f"Cannot parse '{key}' in section [{section}]: {e}") from e

        # [POPULATION]

        # The number of genomes in each generation. Constant across generations.
        self.initial_population = get_value('POPULATION', 'initial_population', int)

        # Each selected genome contributes round(fitness * fitness_multiplier)
        # copies of its index to the gene pool used to pick crossover parents.
        self.fitness_multiplier = get_value('POPULATION', 'fitness_multiplier', float)

        # [SELECTION]

        # The number of best genomes cloned unchanged (apart from mutation)
        # into the next generation. They also feed the gene pool.
        self.best_agent_selection = get_value('SELECTION', 'best_agent_selection', int)

        # The number of worst genomes that feed the gene pool, giving
        # poor performers a small chance of being picked as parents.
        self.worst_agent_selection = get_value('SELECTION', 'worst_agent_selection', int)

        # [CROSSOVER]

        # The number of crossover slots; children are produced in pairs.
        self.number_to_crossover = get_value('CROSSOVER', 'number_to_crossover', int)

        # For every weight matrix (and every bias) the probability that the
        # children inherit it from the first parent rather than the second.
        self.crossover_chance = get_value('CROSSOVER', 'crossover_chance', float)

        # [MUTATION]

        # The probability that a weight matrix of an elite or crossover genome is mutated.
        self.mutation_chance = get_value('MUTATION', 'mutation_chance', float)

        # A mutated matrix has rows*cols/mutation_coefficient cells perturbed.
        self.mutation_coefficient = get_value('MUTATION', 'mutation_coefficient', float,
                                              default=Matrix.MUTATION_COEFFICIENT)

        # [NOVELTY] (optional section)

        # Whether to select genomes by novelty (distance to an archive) instead of fitness.
        self.novelty_search = get_value('NOVELTY', 'novelty_search', bool, default=False)

        # Genomes whose novelty exceeds this threshold are added to the archive.
        self.novelty_threshold = get_value('NOVELTY', 'novelty_threshold', float, default=0.5)

        # [NETWORK]

        # The number of network inputs (sensor readings).
        self.num_inputs = get_value('NETWORK', 'num_inputs', int)

        # The sizes of the hidden layers, comma-separated (at least one layer).
        raw_hidden_sizes = get_value('NETWORK', 'hidden_sizes', str)
        try:
            self.hidden_sizes = self._parse_int_list(raw_hidden_sizes or '')
        except ValueError as e:
            raise ConfigurationError(f"Cannot parse 'hidden_sizes' = {raw_hidden_sizes!r}") from e

        # The number of network outputs (control signals).
        self.num_outputs = get_value('NETWORK', 'num_outputs', int)

        # The activation applied to each output, comma-separated, one per output.
        # Options: see 'evodrive/activations/basic_activations.py'.
        raw_activations = get_value('NETWORK', 'activations', str, default=None)
        self.activations = None if raw_activations is None else self._parse_name_list(raw_activations)

        # [TERMINATION]

        # The number of generations after which to stop the run.
        self.max_number_generations = get_value('TERMINATION', 'max_number_generations', int)

        # Whether to stop as soon as the best fitness reaches 'fitness_threshold'.
        self.fitness_termination_check = get_value('TERMINATION', 'fitness_termination_check', bool,
                                                   default=False)
        self.fitness_threshold = get_value('TERMINATION', 'fitness_threshold', float, default=None)

        # [OUTPUT] (optional section)

        # Directory for the per-generation stats CSV ('None' disables it).
        self.stats_directory = get_value('OUTPUT', 'stats_directory', str, default=None)

        # Directory where the best network of each generation is saved ('None' disables it).
        self.networks_directory = get_value('OUTPUT', 'networks_directory', str, default=None)

        self.validate()

    def _set_defaults(self):
        self.initial_population   = 10
        self.fitness_multiplier   = 10
        self.best_agent_selection = 2
        self.worst_agent_selection = 1
        self.number_to_crossover  = 2
        self.crossover_chance     = 0.5
        self.mutation_chance      = 0.1
        self.mutation_coefficient = Matrix.MUTATION_COEFFICIENT

        self.novelty_search    = False
        self.novelty_threshold = 0.5

        self.num_inputs   = 2
        self.hidden_sizes = (4,)
        self.num_outputs  = 1
        self.activations  = None

        self.max_number_generations    = 100
        self.fitness_termination_check = False
        self.fitness_threshold         = None

        self.stats_directory    = None
        self.networks_directory = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str], novelty_search: bool = False) -> 'Config':
        """
        Create a Config from a flat string-keyed mapping, e.g.
            {"initialPopulation": "50", "mutationChance": "0.2", ...}

        Values may be strings or numbers. Keys that are not population
        controller settings are ignored (the same mapping usually also
        configures the environment). Network shape and termination settings
        keep their defaults.

        Parameters:
            mapping:        The flat configuration
            novelty_search: Also require and read 'noveltyThreshold'

        Raises:
            ConfigurationError: if a required key is missing or cannot be parsed
        """
        config = cls()
        required = dict(FLAT_KEYS)
        if novelty_search:
            required.update(FLAT_NOVELTY_KEYS)
            config.novelty_search = True

        for key, (attribute, value_type) in required.items():
            if key not in mapping:
                raise ConfigurationError(f"Missing configuration key '{key}'")
            raw_value = mapping[key]
            try:
                if value_type == int:
                    value = int(str(raw_value).strip())
                else:
                    value = float(str(raw_value).strip())
            except ValueError as e:
                raise ConfigurationError(f"Cannot parse '{key}' = {raw_value!r} as {value_type.__name__}") from e
            setattr(config, attribute, value)

        config.validate()
        return config

    @classmethod
    def from_json(cls, path: str, novelty_search: bool = False) -> 'Config':
        """
        Read a flat JSON object (string keys and values) and pass it to from_mapping().
        """
        if not os.path.exists(path):
            raise FileNotFoundError(f"Configuration file '{path}' not found")
        with open(path, encoding='utf-8') as file:
            try:
                mapping = json.load(file)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Configuration file '{path}' is not valid JSON: {e}") from e
        if not isinstance(mapping, dict):
            raise ConfigurationError(f"Configuration file '{path}' must contain a JSON object")
        return cls.from_mapping(mapping, novelty_search)

    @property
    def crossover_children(self) -> int:
        """
        The number of children created by crossover (pairs, rounding an odd count up).
        """
        return 2 * ((self.number_to_crossover + 1) // 2)

    def validate(self) -> 'Config':
        """
        Check the values that depend on each other.

        Raises:
            ConfigurationError: on the first inconsistency found
        """
        if self.initial_population is None or self.initial_population < 1:
            raise ConfigurationError(f"initial_population must be >= 1, got {self.initial_population}")
        for name in ('best_agent_selection', 'worst_agent_selection', 'number_to_crossover'):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must be >= 0, got {getattr(self, name)}")
        for name in ('mutation_chance', 'crossover_chance'):
            if not 0.0 <= getattr(self, name) <= 1.0:
                raise ConfigurationError(f"{name} must be in [0, 1], got {getattr(self, name)}")
        if self.fitness_multiplier < 0:
            raise ConfigurationError(f"fitness_multiplier must be >= 0, got {self.fitness_multiplier}")
        if self.mutation_coefficient <= 0:
            raise ConfigurationError(f"mutation_coefficient must be > 0, got {self.mutation_coefficient}")
        if self.best_agent_selection + self.worst_agent_selection > self.initial_population:
            raise ConfigurationError(
                f"best_agent_selection + worst_agent_selection "
                f"({self.best_agent_selection} + {self.worst_agent_selection}) "
                f"exceeds the population size ({self.initial_population})")
        if self.best_agent_selection + self.crossover_children > self.initial_population:
            raise ConfigurationError(
                f"best_agent_selection + crossover children "
                f"({self.best_agent_selection} + {self.crossover_children}) "
                f"exceeds the population size ({self.initial_population})")
        if self.fitness_termination_check and self.fitness_threshold is None:
            raise ConfigurationError("fitness_termination_check requires a fitness_threshold")
        return self

    def topology(self) -> Topology:
        """
        The network shape described by the [NETWORK] section.
        """
        try:
            return Topology.of(self.num_inputs, self.hidden_sizes, self.num_outputs, self.activations)
        except InvalidTopology as e:
            raise ConfigurationError(f"Invalid network configuration: {e}") from e

    def save(self, path: str) -> None:
        """
        Write this configuration to an INI file readable by Config(path).
        """
        def as_str(value):
            if value is None:
                return 'None'
            if isinstance(value, (list, tuple)):
                return ', '.join(str(v) for v in value)
            return str(value)

        parser = configparser.ConfigParser()
        parser['POPULATION'] = {
            'initial_population': as_str(self.initial_population),
            'fitness_multiplier': as_str(self.fitness_multiplier),
        }
        parser['SELECTION'] = {
            'best_agent_selection' : as_str(self.best_agent_selection),
            'worst_agent_selection': as_str(self.worst_agent_selection),
        }
        parser['CROSSOVER'] = {
            'number_to_crossover': as_str(self.number_to_crossover),
            'crossover_chance'   : as_str(self.crossover_chance),
        }
        parser['MUTATION'] = {
            'mutation_chance'     : as_str(self.mutation_chance),
            'mutation_coefficient': as_str(self.mutation_coefficient),
        }
        parser['NOVELTY'] = {
            'novelty_search'   : as_str(self.novelty_search),
            'novelty_threshold': as_str(self.novelty_threshold),
        }
        parser['NETWORK'] = {
            'num_inputs'  : as_str(self.num_inputs),
            'hidden_sizes': as_str(self.hidden_sizes),
            'num_outputs' : as_str(self.num_outputs),
            'activations' : as_str(self.activations),
        }
        parser['TERMINATION'] = {
            'max_number_generations'   : as_str(self.max_number_generations),
            'fitness_termination_check': as_str(self.fitness_termination_check),
            'fitness_threshold'        : as_str(self.fitness_threshold),
        }
        parser['OUTPUT'] = {
            'stats_directory'   : as_str(self.stats_directory),
            'networks_directory': as_str(self.networks_directory),
        }
        with open(path, 'w', encoding='utf-8') as file:
            parser.write(file)
