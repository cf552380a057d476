"""Command line interface for molecule separation."""

import argparse
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

from molsep import __version__
from molsep.utils.config import (
    load_configuration, create_default_configuration, save_configuration, merge_configurations
)
from molsep.core.exceptions import ConfigurationError, PipelineError


PROG = 'molsep'


class MolsepArgumentParser(argparse.ArgumentParser):
    """Argument parser reporting usage errors with exit status 1."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        _print_error(message)
        sys.exit(1)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the molsep CLI."""
    parser = MolsepArgumentParser(
        prog=PROG,
        description='Separate the molecules of a linked-read barcode overlap graph',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Separate molecules and write the molecule graph to stdout
  molsep overlap.tsv > molecules.tsv

  # Several input files, 8 worker processes, per-barcode statistics
  molsep part1.tsv part2.tsv -t 8 -o molecules.tsv --stats barcodes.tsv

  # Generate config template
  molsep --init-config config.yaml
        """.strip()
    )

    parser.add_argument('files', nargs='*', metavar='FILE',
                        help='Barcode overlap graph files in TSV format ("-" for stdin)')

    # Special modes
    special_group = parser.add_argument_group('Special modes')
    special_group.add_argument('--init-config', type=Path, metavar='FILE',
                               help='Create default configuration file and exit')

    # Core options
    core_group = parser.add_argument_group('Core options')
    core_group.add_argument('--separation-strategy', '-s', metavar='SEPARATION-STRATEGY',
                            help='Molecule separation strategy [bc]')
    core_group.add_argument('--config', '-c', type=Path,
                            help='Configuration file (YAML or JSON)')
    core_group.add_argument('--verbose', '-v', action='store_true',
                            help='Enable verbose output')
    core_group.add_argument(
        '--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging verbosity level (default: INFO, DEBUG with --verbose)')
    core_group.add_argument('--log-file', type=Path, metavar='FILE',
                            help='Also write log messages to FILE')

    # Resource parameters
    resource_group = parser.add_argument_group('Resource parameters')
    resource_group.add_argument('--threads', '-t', type=int, metavar='INT',
                                help='Number of worker processes (default: 1)')
    resource_group.add_argument('--chunk-size', type=int, metavar='INT',
                                help='Vertices per worker task')

    # Output parameters
    output_group = parser.add_argument_group('Output parameters')
    output_group.add_argument('--output', '-o', type=Path, metavar='FILE',
                              help='Output molecule graph file (default: stdout)')
    output_group.add_argument('--stats', type=Path, metavar='FILE',
                              help='Write per-barcode separation statistics to FILE')

    parser.add_argument('--version', action='version', version=f'{PROG} {__version__}')

    return parser


def cli(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        if args.init_config:
            _handle_init_config(args.init_config)
            return

        if not args.files:
            parser.print_usage(sys.stderr)
            _print_error("missing file operand")
            sys.exit(1)

        if args.config:
            if not args.config.exists():
                _print_error(f"configuration file does not exist: {args.config}")
                sys.exit(1)
            pipeline_config = load_configuration(args.config)
        else:
            pipeline_config = create_default_configuration()

        pipeline_config = _apply_cli_overrides(pipeline_config, {
            'separation_strategy': args.separation_strategy,
            'threads': args.threads,
            'chunk_size': args.chunk_size,
            'output': args.output,
            'stats': args.stats,
            'log_level': args.log_level or ('DEBUG' if args.verbose else None),
            'log_file': args.log_file
        })

        from molsep.pipeline import run_molecule_separation

        output_config = pipeline_config.get("output", {})
        logging_config = pipeline_config.get("logging", {})
        log_file = logging_config.get("file")

        run_molecule_separation(
            input_files=args.files,
            config=pipeline_config,
            output_path=output_config.get("graph_file"),
            stats_file=output_config.get("stats_file"),
            log_level=str(logging_config.get("level", "INFO")).upper(),
            log_file=Path(log_file) if log_file else None
        )

    except (ConfigurationError, PipelineError, OSError) as e:
        _print_error(str(e))
        sys.exit(1)
    except Exception as e:
        _print_error(f"unexpected error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


def _print_error(message: str) -> None:
    print(f"{PROG}: {message}", file=sys.stderr)
    print(f"Try '{PROG} --help' for more information.", file=sys.stderr)


def _handle_init_config(output_path: Path) -> None:
    """Handle --init-config mode."""
    config = create_default_configuration()
    save_configuration(config, output_path)
    print(f"Created default configuration: {output_path}", file=sys.stderr)


def _apply_cli_overrides(config: dict, cli_params: dict) -> dict:
    """Apply CLI parameter overrides to configuration."""
    overrides = {}

    if cli_params['separation_strategy'] is not None:
        overrides.setdefault('separation', {})['strategy'] = cli_params['separation_strategy']

    if cli_params['threads'] is not None:
        overrides.setdefault('resources', {})['threads'] = cli_params['threads']
    if cli_params['chunk_size'] is not None:
        overrides.setdefault('resources', {})['chunk_size'] = cli_params['chunk_size']

    if cli_params['output'] is not None:
        overrides.setdefault('output', {})['graph_file'] = str(cli_params['output'])
    if cli_params['stats'] is not None:
        overrides.setdefault('output', {})['stats_file'] = str(cli_params['stats'])

    if cli_params['log_level'] is not None:
        overrides.setdefault('logging', {})['level'] = cli_params['log_level']
    if cli_params['log_file'] is not None:
        overrides.setdefault('logging', {})['file'] = str(cli_params['log_file'])

    return merge_configurations(config, overrides)


if __name__ == '__main__':
    cli()
