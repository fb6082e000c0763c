#!/usr/bin/env python3
"""
tinysh - A tiny UNIX shell

This is the main entry point for tinysh.

Startup sequence:
1. Parse command-line options
2. Load configuration (JSON file, then path file)
3. Initialize logging
4. Run the shell until exit or end of input

Author: YSNRFD
Version: 1.0.0
"""

import argparse
import sys
from typing import List, Optional

from tinysh.core.config_loader import Config, ConfigLoader
from tinysh.exceptions import ConfigValidationError
from tinysh.logger import LogLevel, Logger, get_logger
from tinysh.process.states import EXIT_FAILURE
from tinysh.shell.shell import Shell


def build_parser() -> argparse.ArgumentParser:
    """Command-line options of the tinysh executable."""
    parser = argparse.ArgumentParser(
        prog='tinysh',
        description='A tiny UNIX shell with pipes and output redirection.',
    )
    parser.add_argument(
        '-p', '--path',
        metavar='FILE',
        help='file listing one executable search directory per line',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='narrate process creation and descriptor handling',
    )
    parser.add_argument(
        '-c', '--config',
        metavar='FILE',
        help='JSON configuration file',
    )
    parser.add_argument(
        '--search-all-paths',
        action='store_true',
        help='look in every directory of the path file, not only the first',
    )
    parser.add_argument(
        '--log-level',
        metavar='LEVEL',
        help='minimum level of log messages (DEBUG, INFO, WARNING, ERROR)',
    )
    parser.add_argument(
        '--log-file',
        metavar='FILE',
        help='also write log messages to FILE',
    )
    return parser


def load_config(args: argparse.Namespace) -> Config:
    """
    Build the session configuration from the options.

    Command-line options override values from the configuration file.

    Raises:
        ConfigValidationError: If the configuration file is invalid
    """
    loader = ConfigLoader()
    config = loader.load(args.config) if args.config else Config()

    if args.path:
        config.search_path.path_file = args.path
    if args.search_all_paths:
        config.search_path.fallback = True
    if args.verbose:
        config.shell.verbose = True
    if args.log_level:
        config.logging.level = args.log_level
    if args.log_file:
        config.logging.log_file = args.log_file

    return config


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for tinysh.

    Returns:
        Exit code for the process
    """
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args)
        level = LogLevel.from_name(config.logging.level)
    except (ConfigValidationError, ValueError) as e:
        print(f"tinysh: {e}", file=sys.stderr)
        return EXIT_FAILURE

    Logger.initialize(
        level=level,
        log_file=config.logging.log_file,
        use_colors=config.logging.use_colors,
    )

    # Read after logging is up so a bad path file is reported.
    ConfigLoader().apply_path_file(config)

    if config.shell.verbose:
        print("Running in verbose mode.")

    get_logger('main').debug(
        "Starting shell",
        context={'paths': len(config.paths), 'fallback': config.search_path.fallback}
    )

    shell = Shell(config)
    try:
        return shell.run()
    finally:
        Logger.shutdown()


if __name__ == '__main__':
    sys.exit(main())
