#!/usr/bin/env python
from __future__ import annotations
import sys
import os
import argparse
import warnings
from typing import Optional, Dict, List, Tuple, Any, Iterator
from hllsketch.lib.hyperloglog import HyperLogLog, DEFAULT_SEED, MIN_K, MAX_K
from hllsketch.lib.exact import ExactCounter

DEFAULT_PRECISION = 12
STDIN_NAME = '-'


def read_elements(filepath: str) -> Iterator[bytes]:
    """Yield one element per non-empty line of a file.

    Line endings are stripped; everything else on the line is kept as is.
    '-' reads standard input.
    """
    if filepath == STDIN_NAME:
        for line in sys.stdin.buffer:
            line = line.rstrip(b'\r\n')
            if line:
                yield line
        return
    with open(filepath, 'rb') as f:
        for line in f:
            line = line.rstrip(b'\r\n')
            if line:
                yield line


def sketch_file(filepath: str, precision: int = DEFAULT_PRECISION,
                seed: int = DEFAULT_SEED, exact: bool = False,
                debug: bool = False) -> Tuple[HyperLogLog, Optional[ExactCounter]]:
    """Build a HyperLogLog sketch (and optionally an exact count) of a file.

    Args:
        filepath: Text file with one element per line, or '-' for stdin
        precision: Number of index bits k
        seed: Hash seed
        exact: Whether to also count distinct lines exactly
        debug: Whether to print debug information

    Returns:
        Tuple of (sketch, exact counter or None)
    """
    sketch = HyperLogLog(precision, seed=seed, debug=debug)
    counter = ExactCounter() if exact else None
    n_lines = 0
    for element in read_elements(filepath):
        sketch.add(element)
        if counter is not None:
            counter.add(element)
        n_lines += 1

    if n_lines == 0:
        warnings.warn(f"No elements found in {filepath}", RuntimeWarning)
    if debug:
        print(f"DEBUG: {filepath}: {n_lines} lines, {sketch.size()} registers")
    return sketch, counter


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    arg_parser = argparse.ArgumentParser(
        description="""Estimate the number of distinct lines in text files with HyperLogLog.

        Each non-empty line of an input file is one element. Use '-' to read
        standard input.
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    arg_parser.add_argument('filepaths', nargs='+',
                            help='Text files with one element per line')
    arg_parser.add_argument('--precision', '-k', type=int, default=DEFAULT_PRECISION,
                            help=f'Number of index bits, {MIN_K}-{MAX_K} (default: {DEFAULT_PRECISION})')
    arg_parser.add_argument('--seed', type=int, default=DEFAULT_SEED,
                            help=f'Seed for hashing (default: {DEFAULT_SEED})')
    arg_parser.add_argument('--exact', action='store_true',
                            help='Also count distinct lines exactly and report the relative error')
    arg_parser.add_argument('--union', action='store_true',
                            help='Add a row estimating the union of all inputs')
    arg_parser.add_argument('--outprefix', '-o', '--out', type=str, default=None,
                            help='Write results to <outprefix>_hll_k<precision>.tsv instead of stdout')
    arg_parser.add_argument('--save', type=str, default=None, metavar='DIR',
                            help='Directory to save each sketch as <name>.npz')
    arg_parser.add_argument('--verbose', action='store_true', help='Print verbose output')
    arg_parser.add_argument('--debug', action='store_true', help='Enable debug mode')

    args = arg_parser.parse_args(argv)
    if args.precision < MIN_K or args.precision > MAX_K:
        arg_parser.error(f"--precision must be between {MIN_K} and {MAX_K}, got {args.precision}")
    if args.seed < 0 or args.seed > 0xFFFFFFFF:
        arg_parser.error(f"--seed must be an unsigned 32-bit integer, got {args.seed}")
    return args


def get_output_path(outprefix: str, precision: int) -> str:
    """Get the results file name for an output prefix and precision."""
    return f"{outprefix}_hll_k{precision}.tsv"


def make_result(name: str, sketch: HyperLogLog,
                counter: Optional[ExactCounter] = None) -> Dict[str, Any]:
    """Collect the values reported for one sketch."""
    result: Dict[str, Any] = {'file': name, 'estimate': sketch.cardinality()}
    if counter is not None:
        exact = counter.cardinality()
        result['exact'] = exact
        result['relative_error'] = abs(result['estimate'] - exact) / exact if exact > 0 else 0.0
    return result


def format_results(results: List[Dict[str, Any]]) -> List[str]:
    """Format results as tab-separated lines, header first."""
    columns = ['file', 'estimate']
    if any('exact' in result for result in results):
        columns.extend(['exact', 'relative_error'])

    lines = ['\t'.join(columns)]
    for result in results:
        row = [result['file'], f"{result['estimate']:.2f}"]
        if 'exact' in columns:
            row.append(f"{result['exact']:.0f}")
            row.append(f"{result['relative_error']:.4f}")
        lines.append('\t'.join(row))
    return lines


def write_results(results: List[Dict[str, Any]], output: str) -> None:
    """Write results to a tab-separated file.

    Args:
        results: List of dictionaries from make_result
        output: Output file path
    """
    with open(output, 'w') as f:
        for line in format_results(results):
            f.write(line + '\n')


def save_sketch(sketch: HyperLogLog, filepath: str, save_dir: str) -> str:
    """Save a sketch under save_dir, named after its input file."""
    name = 'stdin' if filepath == STDIN_NAME else os.path.basename(filepath)
    os.makedirs(save_dir, exist_ok=True)
    out_path = os.path.join(save_dir, f"{name}.npz")
    sketch.write(out_path)
    return out_path


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for hllsketch."""
    args = parse_args(argv)

    for filepath in args.filepaths:
        if filepath != STDIN_NAME and not os.path.exists(filepath):
            print(f"Error: File {filepath} does not exist", file=sys.stderr)
            sys.exit(2)

    if args.verbose:
        print(f"Sketching {len(args.filepaths)} files with k={args.precision} "
              f"({1 << args.precision} registers), seed={args.seed}")

    results = []
    union_sketch: Optional[HyperLogLog] = None
    union_counter: Optional[ExactCounter] = None
    for filepath in args.filepaths:
        sketch, counter = sketch_file(filepath, precision=args.precision, seed=args.seed,
                                      exact=args.exact, debug=args.debug)
        results.append(make_result(filepath, sketch, counter))

        if args.save:
            out_path = save_sketch(sketch, filepath, args.save)
            if args.verbose:
                print(f"Saved sketch for {filepath} to {out_path}")

        if args.union:
            if union_sketch is None:
                union_sketch = sketch.copy()
                union_counter = ExactCounter() if args.exact else None
            else:
                union_sketch.merge(sketch)
            if union_counter is not None:
                union_counter.merge(counter)

    if args.union and union_sketch is not None:
        results.append(make_result('union', union_sketch, union_counter))

    if args.outprefix:
        output = get_output_path(args.outprefix, args.precision)
        write_results(results, output)
        if args.verbose:
            print(f"Wrote results to {output}")
    else:
        for line in format_results(results):
            print(line)


if __name__ == "__main__":
    main()
