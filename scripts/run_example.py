#!/usr/bin/env python3
"""
Utility script to run the examples easily.

Usage:
    python scripts/run_example.py xor
    python scripts/run_example.py track --mode experiment --num-trials 20 --num-jobs 4
    python scripts/run_example.py track --flat-config examples/configs/config_track.json
    python scripts/run_example.py track --checkpoint checkpoints/track.json
    python scripts/run_example.py cartpole
"""

import sys
import argparse
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from evodrive    import Config
from evodrive.io import load_checkpoint, save_checkpoint
from examples.trial_xor   import Trial_XOR, Experiment_XOR
from examples.trial_track import Trial_Track, Experiment_Track


def _cartpole_trial(config, suppress_output=False):
    # gymnasium is only needed for this example
    from examples.trial_cartpole import Trial_CartPole
    return Trial_CartPole(config, suppress_output=suppress_output)


EXAMPLES = {
    'xor': {
        'trial': Trial_XOR,
        'experiment': Experiment_XOR,
        'config': 'examples/configs/config_xor.ini',
        'description': 'XOR logic problem'
    },
    'track': {
        'trial': Trial_Track,
        'experiment': Experiment_Track,
        'config': 'examples/configs/config_track.ini',
        'description': 'Ring track driving'
    },
    'cartpole': {
        'trial': _cartpole_trial,
        'experiment': None,
        'config': 'examples/configs/config_cartpole.ini',
        'description': 'CartPole control problem'
    }
}


def main():
    parser = argparse.ArgumentParser(description='Run evodrive examples')
    parser.add_argument('example', choices=EXAMPLES.keys(),
                        help='Example to run')
    parser.add_argument('--mode', choices=['trial', 'experiment'], default='trial',
                        help='Run single trial or full experiment')
    parser.add_argument('--config', default=None,
                        help='INI configuration file (default: the example\'s own)')
    parser.add_argument('--flat-config', default=None,
                        help='Flat JSON configuration file, overrides --config')
    parser.add_argument('--novelty', action='store_true',
                        help='Use novelty search (with --flat-config)')
    parser.add_argument('--num-trials', type=int, default=30,
                        help='Number of trials for experiment mode')
    parser.add_argument('--num-jobs', type=int, default=4,
                        help='Number of parallel jobs')
    parser.add_argument('--checkpoint', default=None,
                        help='Resume from this checkpoint if it exists, and save to it at the end (trial mode)')

    args = parser.parse_args()

    example = EXAMPLES[args.example]
    if args.mode == 'experiment' and example['experiment'] is None:
        parser.error(f"'{args.example}' does not support experiment mode")

    print(f"Running {example['description']}...")
    print(f"Mode: {args.mode}")

    if args.flat_config is not None:
        config = Config.from_json(args.flat_config, novelty_search=args.novelty)
    else:
        config = Config(args.config or example['config'])

    if args.mode == 'trial':
        trial = example['trial'](config)

        population = None
        if args.checkpoint is not None and Path(args.checkpoint).exists():
            population = load_checkpoint(args.checkpoint, config)
            print(f"Resuming from generation {population.generation}")

        trial.run(population)
        print(f"\nBest fitness: {trial.population.best_fitness:.4f}")

        if args.checkpoint is not None:
            path = save_checkpoint(trial.population, args.checkpoint)
            print(f"Checkpoint saved to {path}")
    else:
        experiment = example['experiment'](num_trials=args.num_trials, config=config)
        experiment.run(num_jobs=args.num_jobs)


if __name__ == '__main__':
    main()
