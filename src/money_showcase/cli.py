"""
Command-line interface for inspecting and filling showcase forms.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Iterable, Sequence, Tuple

import requests

from .api import create_showcase_client
from .core.codec import decode_showcase, encode_showcase
from .core.errors import ConfigError, DecodeError, TransportError
from .core.extraction import assign_values, extract_payment_parameters, find_invalid_components
from .core.showcase import Showcase


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _value_assignment(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Values must look like NAME=VALUE")
    name, val = value.split("=", 1)
    name = name.strip()
    if not name:
        raise argparse.ArgumentTypeError("Parameter name must not be empty")
    return name, val


def _collect_values(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    values: dict[str, str] = {}
    for name, value in pairs:
        values[name] = value
    return values


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="money-showcase",
        description="Fill a showcase form and print the payment parameters it submits",
    )
    parser.add_argument(
        "source",
        nargs="?",
        help="Path to a showcase JSON document, or '-' to read it from stdin",
    )
    parser.add_argument(
        "--scid",
        type=int,
        help="Fetch the showcase with this id instead of reading a document",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing SHOWCASE_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_value_assignment,
        metavar="NAME=VALUE",
        default=None,
        help="Assign a value to every form parameter called NAME",
    )
    parser.add_argument(
        "--output",
        choices=("parameters", "showcase"),
        default="parameters",
        help="Print the payment parameters (default) or the re-encoded showcase",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    return parser


def _load_showcase(args: argparse.Namespace) -> Showcase:
    if args.scid is not None:
        client = create_showcase_client(env_file=args.env_file, session=requests.Session())
        return client.fetch(args.scid)
    if args.source == "-":
        return decode_showcase(sys.stdin.buffer.read())
    return decode_showcase(Path(args.source).read_bytes())


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if (args.source is None) == (args.scid is None):
        parser.error("provide exactly one of SOURCE or --scid")

    _configure_logging(args.log_level)

    try:
        showcase = _load_showcase(args)
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1
    except (DecodeError, TransportError, OSError) as exc:
        logging.error("Could not load showcase: %s", exc)
        return 1

    for error in showcase.errors:
        logging.warning("Server reported %s: %s", error.name or "form", error.alert)

    unmatched = assign_values(showcase.form, _collect_values(args.set or ()))
    for name in sorted(unmatched):
        logging.warning("No parameter named %r in showcase %r", name, showcase.title)

    if args.output == "showcase":
        print(encode_showcase(showcase).decode("utf-8"))
        return 0

    if not showcase.is_valid():
        for component in find_invalid_components(showcase.form):
            logging.error("Invalid field: %s", getattr(component, "name", component.kind))
        return 2

    parameters = extract_payment_parameters(showcase)
    print(json.dumps(parameters, ensure_ascii=False, indent=2, sort_keys=True))
    return 0


def main() -> None:
    sys.exit(run_cli())
