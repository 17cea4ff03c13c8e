"""
Command-line utilities related to prime numbers.

Usage:
    fermats-utensil ptest 561
    fermats-utensil ptest 561 --method miller-rabin
    fermats-utensil classify 1000000007 --policy random --seed 7
    fermats-utensil sieve 100 --csv
    fermats-utensil --config custom.yaml classify 2147483647
"""

import argparse
import sys

import yaml

from .bigint import to_bigint
from .config import DEFAULT_CONFIG_PATH, load_config
from .esieve import SieveError, SieveState
from .primality import (
    BasePolicy,
    Primality,
    PrimalityTestOptions,
    fermats_test,
    miller_rabin_test,
    probabilistic_primality_test,
)

VERDICTS = {
    Primality.COMPOSITE: "Composite",
    Primality.PROBABLY_PRIME: "Probable prime",
    Primality.PRIME: "Prime",
}

TESTS = {
    'fermat': fermats_test,
    'miller-rabin': miller_rabin_test,
}


def positive_bigint(text: str):
    """argparse type: a positive arbitrary-precision integer."""
    try:
        n = to_bigint(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))
    if n <= 0:
        raise argparse.ArgumentTypeError(f"{text} is not a positive integer")
    return n


def nonzero_bigint(text: str):
    """argparse type: a nonzero arbitrary-precision integer."""
    try:
        n = to_bigint(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))
    if n == 0:
        raise argparse.ArgumentTypeError("base must be nonzero")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='fermats-utensil',
        description='Utilities related to prime numbers')
    parser.add_argument('--config', type=str, default=str(DEFAULT_CONFIG_PATH),
                        help='Path to a YAML config file (default: bundled defaults)')

    sub = parser.add_subparsers(dest='command', required=True)

    ptest = sub.add_parser('ptest', help='Run one primality test on a number')
    ptest.add_argument('number', type=positive_bigint, help='the number to test')
    ptest.add_argument('--base', type=nonzero_bigint, default=None,
                       help='Test base (default from config, usually 2)')
    ptest.add_argument('--method', choices=sorted(TESTS), default='fermat',
                       help='Which test to run')

    classify = sub.add_parser(
        'classify', help='Classify a number as composite, probable prime or prime')
    classify.add_argument('number', type=positive_bigint, help='the number to test')
    classify.add_argument('--rounds', type=int, default=None,
                          help='Number of Miller-Rabin bases')
    classify.add_argument('--policy', choices=[p.value for p in BasePolicy], default=None,
                          help='How bases are chosen')
    classify.add_argument('--seed', type=int, default=None,
                          help='Seed for the random policy')

    sieve = sub.add_parser('sieve', help='List all primes up to a bound')
    sieve.add_argument('bound', type=int, help='Upper bound (inclusive)')
    sieve.add_argument('--csv', action='store_true',
                       help='Output in CSV format (comma-separated)')
    sieve.add_argument('--quiet', action='store_true',
                       help='Only output the numbers, no headers')
    sieve.add_argument('--verbose', action='store_true',
                       help='Print sieve progress')

    return parser


def _ptest(args, config, parser) -> int:
    base = args.base
    if base is None:
        try:
            base = nonzero_bigint(str(config['base']))
        except argparse.ArgumentTypeError as e:
            parser.error(f"config base: {e}")

    if TESTS[args.method](args.number, base):
        print("Probable prime")
    else:
        print("Composite")
    return 0


def _classify(args, config, parser) -> int:
    rounds = args.rounds if args.rounds is not None else config['rounds']
    policy = args.policy if args.policy is not None else config['policy']
    seed = args.seed if args.seed is not None else config['seed']
    try:
        options = PrimalityTestOptions(rounds=rounds, policy=policy, seed=seed)
    except ValueError as e:
        parser.error(str(e))

    print(VERDICTS[probabilistic_primality_test(args.number, options)])
    return 0


def _sieve(args) -> int:
    try:
        state = SieveState.with_upper_bound(args.bound)
    except SieveError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    state.run(verbose=args.verbose)
    primes = state.primes_found()

    if not args.quiet:
        print(f"Prime numbers up to {args.bound}:")
        print(f"Found {len(primes)} primes")
        print()

    if args.csv:
        print(','.join(map(str, primes)))
    else:
        for p in primes:
            print(p)
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        parser.error(f"cannot load config: {e}")

    if args.command == 'ptest':
        return _ptest(args, config, parser)
    if args.command == 'classify':
        return _classify(args, config, parser)
    return _sieve(args)


if __name__ == '__main__':
    sys.exit(main())
