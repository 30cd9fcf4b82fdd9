#!/usr/bin/env python3
"""
MySQL Dump All - CLI Entry Point
================================
Dumps every database on a MySQL server into its own file with support for:
- Exact-name exclusion or ordered regex include/exclude patterns
- Per-file gzip compression
- Plain directory, tar, tar.gz or zip output
- Extra mysqldump options passed through as --long-option[=value]
"""

import argparse
import dataclasses
import logging
import re
import sys
from typing import Optional, Sequence

import yaml

from .config import ConfigLoader
from .filters import validate_patterns
from .models import (
    DEFAULT_NAME_TEMPLATE,
    ConnectionOptions,
    DumpAllError,
    DumpConfig,
    ListerBackend,
    OutputMode,
    ToolPaths,
)
from .server_dumper import ServerDumper
from .utils import setup_logging

USAGE = (
    "%(prog)s [-u user] [-p password] [-h host] [-S socket] [-P port] "
    "[-R] [-z] [-t | -Z | -d] [-f name-template] [-c config] [-v] [-n] "
    "[--mysqldump-option[=value] ...] [pattern ...]"
)

# Short options whose value is always the following token
VALUE_SHORT_OPTIONS = frozenset({'-u', '-p', '-h', '-S', '-P', '-f', '-c'})

# mysqldump options that cannot stand alone without '=value'
VALUE_OPTIONS = frozenset({
    '--character-sets-dir',
    '--compatible',
    '--compression-algorithms',
    '--debug-info',
    '--default-auth',
    '--default-character-set',
    '--defaults-extra-file',
    '--defaults-file',
    '--defaults-group-suffix',
    '--fields-enclosed-by',
    '--fields-escaped-by',
    '--fields-optionally-enclosed-by',
    '--fields-terminated-by',
    '--ignore-error',
    '--ignore-table',
    '--init-command',
    '--lines-terminated-by',
    '--log-error',
    '--login-path',
    '--max-allowed-packet',
    '--net-buffer-length',
    '--plugin-dir',
    '--protocol',
    '--result-file',
    '--server-public-key-path',
    '--set-gtid-purged',
    '--ssl-ca',
    '--ssl-capath',
    '--ssl-cert',
    '--ssl-cipher',
    '--ssl-key',
    '--ssl-mode',
    '--tab',
    '--tls-version',
    '--where',
    '--zstd-compression-level',
})


class DumpArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> DumpArgumentParser:
    # -h is the host option, so there is no help flag
    parser = DumpArgumentParser(
        prog='mysql-dump-all',
        usage=USAGE,
        description='Dump each MySQL database into its own file',
        add_help=False
    )
    parser.add_argument('-u', dest='user', help='MySQL user')
    parser.add_argument('-p', dest='password', help='MySQL password')
    parser.add_argument('-h', dest='host', help='MySQL server host')
    parser.add_argument('-S', dest='socket', help='MySQL server socket path')
    parser.add_argument('-P', dest='port', help='MySQL server port')
    parser.add_argument(
        '-R', dest='regex',
        action='store_true', default=None,
        help='Treat patterns as regular expressions (prefix with ":" to exclude)'
    )
    parser.add_argument(
        '-z', dest='compress',
        action='store_true', default=None,
        help='gzip each dump file'
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        '-t', dest='mode',
        action='store_const', const=OutputMode.TAR.value,
        help='Bundle the dumps into a tar archive (tar.gz unless -z)'
    )
    mode.add_argument(
        '-Z', dest='mode',
        action='store_const', const=OutputMode.ZIP.value,
        help='Bundle the dumps into a zip archive'
    )
    mode.add_argument(
        '-d', dest='mode',
        action='store_const', const=OutputMode.DIRECTORY.value,
        help='Write the dumps into a new directory without archiving'
    )

    parser.add_argument(
        '-f', dest='name_template',
        help=f'Date format for the output name (default: {DEFAULT_NAME_TEMPLATE})'
    )
    parser.add_argument('-c', dest='config', help='Path to a YAML configuration file')
    parser.add_argument('-v', dest='verbose', action='store_true', help='Enable verbose output')
    parser.add_argument(
        '-n', dest='dry_run',
        action='store_true',
        help='Show what would be dumped without actually dumping'
    )
    parser.add_argument('patterns', nargs='*', help='Database names or patterns')
    return parser


def split_arguments(argv: Sequence[str]) -> tuple[list[str], list[str], list[str]]:
    """
    Separate mysqldump pass-through options from the rest.

    Returns:
        (tokens for the short-option parser, pass-through options,
        patterns following a bare '--')

    Raises:
        ValueError: A pass-through option needs a value but has none.
    """
    tokens, passthrough, trailing = [], [], []
    args = iter(argv)
    for token in args:
        if token == '--':
            trailing.extend(args)
            break
        if token in VALUE_SHORT_OPTIONS:
            # The next token is the value even when it starts with '-'
            value = next(args, None)
            if value is None:
                tokens.append(token)
            elif value.startswith('-'):
                tokens.append(token + value)
            else:
                tokens.extend([token, value])
            continue
        if token.startswith('--'):
            if '=' not in token and token in VALUE_OPTIONS:
                raise ValueError(f"option {token} requires a value, use {token}=VALUE")
            passthrough.append(token)
        else:
            tokens.append(token)
    return tokens, passthrough, trailing


def parse_arguments(
    parser: DumpArgumentParser,
    argv: Optional[Sequence[str]] = None
) -> tuple[argparse.Namespace, list[str]]:
    """Parse the command line into options and pass-through options."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        tokens, passthrough, trailing = split_arguments(argv)
    except ValueError as e:
        parser.error(str(e))

    args = parser.parse_intermixed_args(tokens)
    args.patterns = list(args.patterns) + trailing
    return args, passthrough


def _pick(cli_value, file_value):
    """Command-line value if given, else the config file value as a string."""
    if cli_value is not None:
        return cli_value
    if file_value is None:
        return None
    return str(file_value)


def build_config(
    args: argparse.Namespace,
    passthrough: Sequence[str],
    loader: ConfigLoader
) -> DumpConfig:
    """
    Merge command-line options over config file values.

    Raises:
        ValueError: A config value is invalid.
        re.error: A regex pattern does not compile.
    """
    file_connection = loader.get_connection() or {}
    connection = ConnectionOptions(**{
        name: _pick(getattr(args, name), file_connection.get(name))
        for name in ('user', 'password', 'host', 'socket', 'port')
    })

    tool_settings = loader.get_tools() or {}
    known_tools = {f.name for f in dataclasses.fields(ToolPaths)}
    unknown = set(tool_settings) - known_tools
    if unknown:
        raise ValueError(f"Unknown tools in configuration: {', '.join(sorted(unknown))}")
    tools = ToolPaths(**{name: str(path) for name, path in tool_settings.items()})

    output = loader.get_output_settings() or {}
    filter_settings = loader.get_filter_settings() or {}

    regex = args.regex if args.regex is not None else bool(filter_settings.get('regex', False))
    patterns = tuple(args.patterns) if args.patterns else tuple(
        str(p) for p in filter_settings.get('patterns', [])
    )
    if regex:
        validate_patterns(patterns)

    return DumpConfig(
        connection=connection,
        passthrough=tuple(passthrough),
        patterns=patterns,
        regex=regex,
        compress=args.compress if args.compress is not None else bool(output.get('compress', False)),
        mode=OutputMode(args.mode or output.get('mode', OutputMode.CURRENT.value)),
        name_template=args.name_template or output.get('name_template', DEFAULT_NAME_TEMPLATE),
        tools=tools,
        lister=ListerBackend(loader.get_lister()),
        dry_run=args.dry_run,
    )


def main(argv: Optional[Sequence[str]] = None):
    """Main entry point."""
    parser = build_parser()
    args, passthrough = parse_arguments(parser, argv)

    # Load configuration
    try:
        loader = ConfigLoader(args.config)
    except FileNotFoundError:
        print(f"Error: Configuration file '{args.config}' not found", file=sys.stderr)
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        config = build_config(args, passthrough, loader)
    except re.error as e:
        parser.error(f"invalid pattern: {e}")
    except ValueError as e:
        parser.error(str(e))

    # Setup logging
    log_settings = dict(loader.get_logging_settings() or {})
    if args.verbose:
        log_settings['level'] = 'DEBUG'
    try:
        setup_logging(log_settings)
    except ValueError as e:
        print(f"Error: Invalid logging configuration: {e}", file=sys.stderr)
        sys.exit(1)

    # Run dump
    try:
        stats = ServerDumper(config).run()
    except DumpAllError as e:
        logging.error(f"Fatal error: {e}")
        sys.exit(1)

    if config.dry_run:
        return

    # Print summary
    logging.info("=" * 50)
    logging.info("DUMP COMPLETE")
    logging.info(f"Databases listed: {stats.listed}")
    logging.info(f"Dumped: {len(stats.dumped)}")
    logging.info(f"Skipped: {len(stats.skipped)}")

    if stats.errors:
        # Individual dump failures do not change the exit status
        logging.warning(f"Errors: {len(stats.errors)}")
        for err in stats.errors:
            logging.warning(f"  - {err['database']}: {err['error']}")

    if stats.archive_path:
        print(stats.archive_path)
    elif stats.staging_dir:
        print(f"{stats.staging_dir}/")


if __name__ == '__main__':
    main()
