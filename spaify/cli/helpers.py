import os.path
import sys
from argparse import ArgumentParser, Namespace
from typing import Optional

from spaify.config import Config, get_config, loader
from spaify.config.version import get_version
from spaify.log import setup


def parse_arguments() -> Namespace:
    """
    Parse command-line arguments.

    Available arguments:
        --help: Show the help message
        --config: Path to the configuration file
        --show-config: Output the configuration to stdout
        --level: Log level (debug,info,warning,error,critical)
        --version: Show the version and exit
        --path: Root directory of the Laravel project
        --skip-install: Don't install npm dependencies
        --confirm-overwrite: Ask before overwriting existing files
        --verbose: Show the output of npm and artisan commands

    :return: Parsed arguments object.
    """
    version = get_version()

    parser = ArgumentParser(
        prog="spaify",
        description="Scaffold Laravel project with Vue, Tailwindcss, InertiaJS, Ziggy, and Fontawesome",
    )
    parser.add_argument("--config", help="Path to the configuration file", default="spaify.json")
    parser.add_argument("--show-config", help="Output the configuration to stdout", action="store_true")
    parser.add_argument("--level", help="Log level (debug,info,warning,error,critical)", required=False)
    parser.add_argument("--version", action="version", version=version)
    parser.add_argument("--path", help="Root directory of the Laravel project", required=False)
    parser.add_argument("--skip-install", help="Don't install npm dependencies", action="store_true")
    parser.add_argument("--confirm-overwrite", help="Ask before overwriting existing files", action="store_true")
    parser.add_argument("--verbose", help="Show the output of npm and artisan commands", action="store_true")
    return parser.parse_args()


def load_config(args: Namespace) -> Optional[Config]:
    """
    Load Spaify JSON configuration file and apply command-line arguments.

    :param args: Command-line arguments (at least `config` must be present).
    :return: Configuration object, or None if config couldn't be loaded.
    """
    if os.path.isfile(args.config):
        try:
            config = loader.load(args.config)
        except ValueError as err:
            print(f"Error parsing config file {args.config}: {err}", file=sys.stderr)
            return None
    else:
        config = get_config()

    if args.level:
        config.log.level = args.level.upper()

    if args.path:
        config.scaffold.root = args.path

    if args.skip_install:
        config.scaffold.install = False

    if args.confirm_overwrite:
        config.scaffold.confirm_overwrite = True

    try:
        Config.model_validate(config.model_dump())
    except ValueError as err:
        print(f"Configuration error: {err}", file=sys.stderr)
        return None

    return config


def show_config():
    """
    Print the current configuration to stdout.
    """
    cfg = get_config()
    print(cfg.model_dump_json(indent=2))


def init() -> tuple[Optional[Config], Namespace]:
    """
    Initialize the application.

    Parses the command line, loads configuration and sets up logging.

    :return: Tuple with configuration (None if it couldn't be loaded) and command-line arguments.
    """
    args = parse_arguments()
    config = load_config(args)
    if not config:
        return (None, args)

    setup(config.log, force=True)
    return (config, args)


__all__ = ["parse_arguments", "load_config", "show_config", "init"]
