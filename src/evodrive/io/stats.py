"""
Stats Log Module

Append-only CSV log with one row per genome per generation:

    Generation,Genome,Fitness
    1,0,12.5
    1,1,3.25
    ...

Classes:
    StatsLog: Lazily created per-run CSV file
"""

import csv
from datetime import datetime
from pathlib  import Path
from typing   import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from evodrive.phenotype import Network

STATS_HEADER = ["Generation", "Genome", "Fitness"]

class StatsLog:
    """
    Per-run statistics file.

    The file is created (with its header) on the first append, named
    'Stats_<timestamp>.csv' inside 'directory' unless an explicit 'filename'
    is given. Later appends of the same run go to the same file.
    """

    def __init__(self, directory: str | Path, filename: str | None = None):
        self.directory = Path(directory)
        self._filename = filename
        self.path: Path | None = None

    def _open_path(self) -> Path:
        if self.path is None:
            self.directory.mkdir(parents=True, exist_ok=True)
            filename = self._filename or f"Stats_{datetime.now().strftime('%Y%m%d_%H%M%S_%f')}.csv"
            self.path = self.directory / filename
        if not self.path.exists():
            with open(self.path, 'w', newline='', encoding='utf-8') as file:
                csv.writer(file).writerow(STATS_HEADER)
        return self.path

    def append(self, generation: int, genomes: Iterable['Network']) -> None:
        """
        Write the fitness of every genome of 'generation', in population order.
        """
        path = self._open_path()
        with open(path, 'a', newline='', encoding='utf-8') as file:
            writer = csv.writer(file)
            for index, genome in enumerate(genomes):
                writer.writerow([generation, index, genome.fitness])

    def read(self) -> list[dict]:
        """
        All rows written so far, as dictionaries with typed values.
        """
        if self.path is None or not self.path.exists():
            return []
        with open(self.path, newline='', encoding='utf-8') as file:
            return [{"Generation": int(row["Generation"]),
                     "Genome"    : int(row["Genome"]),
                     "Fitness"   : float(row["Fitness"])}
                    for row in csv.DictReader(file)]
