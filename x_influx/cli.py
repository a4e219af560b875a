"""
Command-line driver for x-influx.

Usage:
    x-influx [options] FILE [FILE ...]     # import delimited files
    x-influx -i [options]                  # interactive entry, exit with C-d
    x-influx --config x-influx.yaml        # everything from a YAML file

Flags override values loaded from ``--config``.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from pydantic import ValidationError

from x_influx import NoopStore, __version__, run_import
from x_influx.config import ImportConfig, load_config
from x_influx.exceptions import ConfigValidationError, StartupError

log = logging.getLogger("x_influx.cli")

VERSION_TEXT = f"""\
Version {__version__} of x-influx.
This is a simple cli tool to import data into influxdb.
"""

# flag dest -> (config section, field)
_OVERRIDES = {
    "user": ("database", "user"),
    "password": ("database", "password"),
    "database": ("database", "database"),
    "server": ("database", "server"),
    "series": ("database", "series"),
    "measure": ("layout", "measure"),
    "tags": ("layout", "tags"),
    "time": ("layout", "time"),
    "format": ("layout", "tformat"),
    "delimiter": ("source", "delimiter"),
    "skip_rows": ("source", "skip_rows"),
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="x-influx",
        description="Import delimited files or hand-typed records into InfluxDB.",
    )
    p.add_argument("files", nargs="*", metavar="FILE", help="Delimited input files.")
    p.add_argument("-i", "--interactive", action="store_true",
                   help="Type records by hand instead of reading files.")
    p.add_argument("-c", "--config", help="YAML config file; flags override it.")
    p.add_argument("-v", "--verbose", action="store_true", default=None,
                   help="Enable verbose logging.")
    p.add_argument("-V", "--version", action="store_true",
                   help="Show version information and exit.")
    p.add_argument("--dry-run", action="store_true",
                   help="Map and log records without writing to the database.")

    db = p.add_argument_group("database")
    db.add_argument("-u", "--user", help="Username for influxdb [test].")
    db.add_argument("-p", "--password", help="Password for influxdb [].")
    db.add_argument("-d", "--database", help="Influx database [test].")
    db.add_argument("-s", "--server", help="The influxdb server [http://localhost:8086].")
    db.add_argument("-S", "--series", help="Name of the measurement series [series].")

    layout = p.add_argument_group("layout")
    layout.add_argument("-m", "--measure", help="Name of the measurement value [data].")
    layout.add_argument("-t", "--tags", help="Comma separated list of tag columns.")
    layout.add_argument("-T", "--time", help="Name of the timestamp column [timestamp].")
    layout.add_argument("-f", "--format", help="The timestamp format [%%F %%H:%%M:%%S].")

    source = p.add_argument_group("source")
    source.add_argument("-D", "--delimiter", help="Use another csv delimiter [,].")
    source.add_argument("--skip-rows", type=int, metavar="NUM",
                        help="Remove first NUM lines from file [0].")
    return p


def config_from_args(args: argparse.Namespace) -> ImportConfig:
    """Merge parsed flags on top of the optional YAML config.

    Raises:
        pydantic.ValidationError: If the merged values are invalid.
    """
    base = load_config(args.config) if args.config else ImportConfig()
    data = base.model_dump()

    for dest, (section, key) in _OVERRIDES.items():
        value = getattr(args, dest)
        if value is not None:
            data[section][key] = value

    if args.interactive:
        data["source"]["mode"] = "interactive"
    elif args.files:
        data["source"]["mode"] = "file"
        data["source"]["files"] = list(args.files)
    if args.verbose is not None:
        data["verbose"] = args.verbose

    return ImportConfig.model_validate(data)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.version:
        print(VERSION_TEXT)
        return 0
    if not (args.files or args.interactive or args.config):
        parser.error("give at least one FILE, -i for interactive mode, or --config")

    try:
        config = config_from_args(args)
    except (OSError, ConfigValidationError, ValidationError) as exc:
        logging.basicConfig(level=logging.INFO)
        log.error("Invalid configuration: %s", exc)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        run_import(config, store_factory=NoopStore if args.dry_run else None)
    except StartupError as exc:
        log.error("Failed to start client. %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
