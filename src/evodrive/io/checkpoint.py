"""
Population Checkpoint Module

Saves the complete state of a Population (generation counter, evaluation cursor,
best scores, every genome and, for novelty search, the archive) so that a long run
can be stopped and resumed later from the same point.

Functions:
    save_checkpoint(population, path): Write a checkpoint file
    load_checkpoint(path, config):     Rebuild a Population from a checkpoint file
"""

import json
from pathlib import Path
from typing  import TYPE_CHECKING

from evodrive.exceptions        import ConfigurationError, MissingGenomeSource
from evodrive.genotype          import codec
from evodrive.genotype.topology import Topology
from evodrive.pool              import FitnessScoring, NoveltyScoring, Population, ScoringStrategy

if TYPE_CHECKING:
    from evodrive.io.stats   import StatsLog
    from evodrive.phenotype  import Network
    from evodrive.run.config import Config

def _genome_entry(genome: 'Network') -> dict:
    return {"fitness": genome.fitness, "novelty": genome.novelty, **codec.encode(genome)}

def _genome_from_entry(entry: dict, topology: Topology) -> 'Network':
    genome = codec.decode(entry, topology)
    genome.fitness = float(entry.get("fitness", 0.0))
    genome.novelty = float(entry.get("novelty", 0.0))
    return genome

def save_checkpoint(population: Population, path: str | Path) -> Path:
    """
    Write the state of 'population' to 'path' as JSON.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    scoring  = population.scoring
    document = {
        "topology"            : population.topology.to_dict(),
        "generation"          : population.generation,
        "current_genome_index": population.current_genome_index,
        "best_fitness"        : population.best_fitness,
        "scoring"             : {"name": scoring.name, "best": scoring.best},
        "genomes"             : [_genome_entry(g) for g in population.genomes],
    }
    if isinstance(scoring, NoveltyScoring):
        document["scoring"]["threshold"] = scoring.threshold
        document["scoring"]["archive"]   = [_genome_entry(g) for g in scoring.archive]

    with open(path, 'w', encoding='utf-8') as file:
        json.dump(document, file)
    return path

def _stored_scoring(entry: dict, config: 'Config') -> ScoringStrategy:
    """
    The scoring strategy the checkpointed run used. A configuration that turns
    novelty search on must agree with it (same strategy, same threshold); one
    that leaves it off resumes whatever the checkpoint holds.
    """
    if entry["name"] == NoveltyScoring.name:
        threshold = float(entry["threshold"])
        if config.novelty_search and config.novelty_threshold != threshold:
            raise ConfigurationError(f"Checkpoint novelty threshold is {threshold}, "
                                     f"configuration expects {config.novelty_threshold}")
        return NoveltyScoring(threshold)

    if config.novelty_search:
        raise ConfigurationError("Configuration enables novelty search but the checkpoint "
                                 f"was saved with '{entry['name']}' scoring")
    return FitnessScoring()

def load_checkpoint(path      : str | Path,
                    config    : 'Config',
                    topology  : Topology | None = None,
                    scoring   : ScoringStrategy | None = None,
                    stats_log : 'StatsLog | None' = None) -> Population:
    """
    Rebuild a Population from a checkpoint file.

    The population is returned without an environment; call start() on it
    to resume evaluation with the genome that was current when saved.

    Parameters:
        path:      The checkpoint file
        config:    Configuration of the resumed run; its population size must
                   match the checkpoint
        topology:  Overrides the stored topology (e.g. for custom activations)
        scoring:   Overrides the scoring strategy stored in the checkpoint
        stats_log: Stats log for the resumed run

    Raises:
        MissingGenomeSource: if the file does not exist
        ConfigurationError:  if the population size does not match 'config'
                             or its novelty settings contradict the checkpoint
    """
    path = Path(path)
    if not path.exists():
        raise MissingGenomeSource(f"No checkpoint file at '{path}'")

    with open(path, encoding='utf-8') as file:
        document = json.load(file)

    if topology is None:
        topology = Topology.from_dict(document["topology"])

    genomes = [_genome_from_entry(entry, topology) for entry in document["genomes"]]
    if len(genomes) != config.initial_population:
        raise ConfigurationError(f"Checkpoint holds {len(genomes)} genomes, "
                                 f"configuration expects {config.initial_population}")

    if scoring is None:
        scoring = _stored_scoring(document["scoring"], config)
    if scoring.name == document["scoring"]["name"]:
        scoring.best = float(document["scoring"].get("best", 0.0))
    if isinstance(scoring, NoveltyScoring) and "archive" in document["scoring"]:
        scoring.archive = [_genome_from_entry(entry, topology)
                           for entry in document["scoring"].get("archive", [])]

    population = Population(config, topology, scoring, stats_log, genomes)
    population.generation           = int(document["generation"])
    population.current_genome_index = int(document["current_genome_index"])
    population.best_fitness         = float(document["best_fitness"])
    return population
