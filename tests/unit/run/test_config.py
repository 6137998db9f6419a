"""
Unit tests for Config class.
"""

import json
import os

import pytest

from evodrive.exceptions        import ConfigurationError
from evodrive.genotype.topology import Topology
from evodrive.run.config        import Config


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def test_config_dir():
    """Return the directory containing test configuration files."""
    return os.path.join(os.path.dirname(__file__), 'test_configs')


@pytest.fixture
def flat_mapping():
    return {
        "initialPopulation"  : "30",
        "mutationChance"     : "0.25",
        "fitnessMultiplier"  : "4",
        "bestAgentSelection" : "2",
        "worstAgentSelection": "2",
        "numberToCrossover"  : "4",
        "crossoverChance"    : "0.5",
    }


# ============================================================================
# Test Config Initialization
# ============================================================================

class TestConfigInit:

    def test_init_without_file_creates_default_config(self):
        config = Config()

        assert config.initial_population == 10
        assert config.best_agent_selection == 2
        assert config.worst_agent_selection == 1
        assert config.number_to_crossover == 2
        assert config.mutation_coefficient == 7
        assert config.novelty_search is False
        assert config.hidden_sizes == (4,)
        assert config.stats_directory is None

    def test_default_config_is_valid(self):
        assert Config().validate() is not None

    def test_init_with_nonexistent_file_raises_error(self):
        with pytest.raises(FileNotFoundError, match="Configuration file .* not found"):
            Config('nonexistent_file.ini')

    def test_init_with_minimal_config(self, test_config_dir):
        config = Config(os.path.join(test_config_dir, 'minimal.ini'))

        assert config.initial_population == 10
        assert config.fitness_multiplier == 10.0
        assert config.num_inputs == 2
        assert config.hidden_sizes == (4,)
        assert config.max_number_generations == 20

    def test_optional_values_take_defaults(self, test_config_dir):
        config = Config(os.path.join(test_config_dir, 'minimal.ini'))

        assert config.mutation_coefficient == 7
        assert config.novelty_search is False
        assert config.novelty_threshold == 0.5
        assert config.activations is None
        assert config.fitness_termination_check is False
        assert config.fitness_threshold is None
        assert config.stats_directory is None
        assert config.networks_directory is None


# ============================================================================
# Test Config Sections
# ============================================================================

class TestConfigSections:
    """Test parsing of every section of a complete file."""

    @pytest.fixture
    def config(self, test_config_dir):
        return Config(os.path.join(test_config_dir, 'full.ini'))

    def test_population(self, config):
        assert config.initial_population == 50
        assert config.fitness_multiplier == 2.5

    def test_selection(self, config):
        assert config.best_agent_selection == 5
        assert config.worst_agent_selection == 3

    def test_crossover(self, config):
        assert config.number_to_crossover == 10
        assert config.crossover_chance == 0.4

    def test_mutation(self, config):
        assert config.mutation_chance == 0.2
        assert config.mutation_coefficient == 5.0

    def test_novelty(self, config):
        assert config.novelty_search is True
        assert config.novelty_threshold == 1.5

    def test_network(self, config):
        assert config.num_inputs == 8
        assert config.hidden_sizes == (6, 4)
        assert config.num_outputs == 3
        assert config.activations == ('tanh', 'tanh', 'sigmoid')

    def test_termination(self, config):
        assert config.max_number_generations == 200
        assert config.fitness_termination_check is True
        assert config.fitness_threshold == 500.0

    def test_output(self, config):
        assert config.stats_directory == 'logs'
        assert config.networks_directory == 'SavedNetworks'

    def test_topology(self, config):
        assert config.topology() == Topology.of(8, [6, 4], 3, ['tanh', 'tanh', 'sigmoid'])


# ============================================================================
# Test Config Errors
# ============================================================================

class TestConfigErrors:

    def test_missing_key_raises(self, test_config_dir):
        with pytest.raises(ConfigurationError, match="fitness_multiplier"):
            Config(os.path.join(test_config_dir, 'missing_key.ini'))

    def test_unparseable_value_raises(self, test_config_dir):
        with pytest.raises(ConfigurationError, match="initial_population"):
            Config(os.path.join(test_config_dir, 'bad_value.ini'))

    def test_unparseable_hidden_sizes_raise(self, test_config_dir):
        with pytest.raises(ConfigurationError, match="hidden_sizes"):
            Config(os.path.join(test_config_dir, 'bad_hidden_sizes.ini'))

    def test_inconsistent_values_raise(self, test_config_dir):
        with pytest.raises(ConfigurationError, match="exceeds the population size"):
            Config(os.path.join(test_config_dir, 'too_many_elites.ini'))

    def test_required_value_set_to_none_raises(self, test_config_dir):
        with pytest.raises(ConfigurationError, match="Missing configuration value 'best_agent_selection'"):
            Config(os.path.join(test_config_dir, 'none_value.ini'))

    @pytest.mark.parametrize("key", ["fitness_multiplier", "mutation_chance", "num_inputs",
                                     "hidden_sizes", "max_number_generations"])
    def test_any_required_value_set_to_none_raises(self, test_config_dir, tmp_path, key):
        with open(os.path.join(test_config_dir, 'minimal.ini')) as file:
            lines = file.read().splitlines()
        lines = [f"{key} = None" if line.split('=')[0].strip() == key else line for line in lines]
        path = tmp_path / 'config.ini'
        path.write_text('\n'.join(lines) + '\n')

        with pytest.raises(ConfigurationError, match=f"Missing configuration value '{key}'"):
            Config(str(path))

    def test_optional_values_accept_none(self, test_config_dir, tmp_path):
        with open(os.path.join(test_config_dir, 'minimal.ini')) as file:
            text = file.read()
        path = tmp_path / 'config.ini'
        path.write_text(text + "\n[OUTPUT]\nstats_directory    = None\nnetworks_directory = none\n")

        config = Config(str(path))
        assert config.stats_directory is None
        assert config.networks_directory is None

    def test_invalid_topology_raises_configuration_error(self):
        config = Config()
        config.num_outputs = 2
        config.activations = ('tanh',)
        with pytest.raises(ConfigurationError, match="Invalid network configuration"):
            config.topology()


# ============================================================================
# Test Config Validation
# ============================================================================

class TestConfigValidate:

    @pytest.mark.parametrize("attribute, value", [
        ('initial_population', 0),
        ('best_agent_selection', -1),
        ('number_to_crossover', -2),
        ('mutation_chance', 1.5),
        ('crossover_chance', -0.1),
        ('fitness_multiplier', -1.0),
        ('mutation_coefficient', 0),
    ])
    def test_out_of_range_values(self, attribute, value):
        config = Config()
        setattr(config, attribute, value)
        with pytest.raises(ConfigurationError, match=attribute):
            config.validate()

    def test_best_and_worst_must_fit_population(self):
        config = Config()
        config.best_agent_selection  = 6
        config.worst_agent_selection = 5
        with pytest.raises(ConfigurationError):
            config.validate()

    def test_best_and_children_must_fit_population(self):
        config = Config()
        config.best_agent_selection = 2
        config.number_to_crossover  = 9   # 10 children
        with pytest.raises(ConfigurationError, match="crossover children"):
            config.validate()

    def test_termination_check_requires_threshold(self):
        config = Config()
        config.fitness_termination_check = True
        with pytest.raises(ConfigurationError, match="fitness_threshold"):
            config.validate()

    @pytest.mark.parametrize("number_to_crossover, children", [(0, 0), (1, 2), (2, 2), (3, 4), (6, 6)])
    def test_crossover_children_come_in_pairs(self, number_to_crossover, children):
        config = Config()
        config.number_to_crossover = number_to_crossover
        assert config.crossover_children == children


# ============================================================================
# Test Flat Mapping / JSON
# ============================================================================

class TestConfigFromMapping:

    def test_from_mapping_parses_strings(self, flat_mapping):
        config = Config.from_mapping(flat_mapping)

        assert config.initial_population == 30
        assert config.mutation_chance == 0.25
        assert config.fitness_multiplier == 4.0
        assert config.best_agent_selection == 2
        assert config.worst_agent_selection == 2
        assert config.number_to_crossover == 4
        assert config.crossover_chance == 0.5
        assert config.novelty_search is False

    def test_from_mapping_accepts_numbers(self, flat_mapping):
        flat_mapping["initialPopulation"] = 12
        assert Config.from_mapping(flat_mapping).initial_population == 12

    def test_from_mapping_ignores_unknown_keys(self, flat_mapping):
        flat_mapping["raycastLength"] = "15"
        config = Config.from_mapping(flat_mapping)
        assert not hasattr(config, 'raycastLength')

    @pytest.mark.parametrize("key", ["initialPopulation", "mutationChance", "crossoverChance"])
    def test_from_mapping_missing_key_raises(self, flat_mapping, key):
        del flat_mapping[key]
        with pytest.raises(ConfigurationError, match=key):
            Config.from_mapping(flat_mapping)

    def test_from_mapping_unparseable_value_raises(self, flat_mapping):
        flat_mapping["bestAgentSelection"] = "two"
        with pytest.raises(ConfigurationError, match="bestAgentSelection"):
            Config.from_mapping(flat_mapping)

    def test_from_mapping_novelty_requires_threshold(self, flat_mapping):
        with pytest.raises(ConfigurationError, match="noveltyThreshold"):
            Config.from_mapping(flat_mapping, novelty_search=True)

    def test_from_mapping_novelty(self, flat_mapping):
        flat_mapping["noveltyThreshold"] = "0.3"
        config = Config.from_mapping(flat_mapping, novelty_search=True)
        assert config.novelty_search is True
        assert config.novelty_threshold == 0.3

    def test_from_mapping_validates(self, flat_mapping):
        flat_mapping["initialPopulation"] = "3"
        with pytest.raises(ConfigurationError):
            Config.from_mapping(flat_mapping)

    def test_from_json(self, test_config_dir):
        config = Config.from_json(os.path.join(test_config_dir, 'flat.json'), novelty_search=True)
        assert config.initial_population == 20
        assert config.number_to_crossover == 6
        assert config.novelty_threshold == 0.8

    def test_from_json_missing_file(self):
        with pytest.raises(FileNotFoundError):
            Config.from_json('nonexistent.json')

    def test_from_json_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text(json.dumps(["initialPopulation", "10"]))
        with pytest.raises(ConfigurationError, match="JSON object"):
            Config.from_json(str(path))

    def test_from_json_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{initialPopulation: ")
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            Config.from_json(str(path))


# ============================================================================
# Test Config Save
# ============================================================================

class TestConfigSave:

    def test_save_then_load(self, test_config_dir, tmp_path):
        original = Config(os.path.join(test_config_dir, 'full.ini'))
        path = tmp_path / "saved.ini"
        original.save(str(path))

        restored = Config(str(path))
        assert vars(restored) == vars(original)

    def test_save_defaults(self, tmp_path):
        path = tmp_path / "defaults.ini"
        Config().save(str(path))

        restored = Config(str(path))
        assert restored.activations is None
        assert restored.fitness_threshold is None
        assert restored.stats_directory is None
        assert restored.hidden_sizes == (4,)
