"""
Minimal script that uses the public API to fill one step of a showcase.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Tuple

from money_showcase import (
    ConfigError,
    TransportError,
    assign_values,
    create_showcase_client,
    extract_payment_parameters,
)


def _assignment(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Values must look like NAME=VALUE")
    name, val = value.split("=", 1)
    name = name.strip()
    if not name:
        raise argparse.ArgumentTypeError("Parameter name must not be empty")
    return name, val


def _build_values(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    values: dict[str, str] = {}
    for name, value in pairs:
        values[name] = value
    return values


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch a showcase, fill it and submit the step")
    parser.add_argument("scid", type=int, help="Showcase id")
    parser.add_argument(
        "--submit-url",
        help="Continuation URL; the step is only printed when omitted",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing SHOWCASE_* settings",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_assignment,
        metavar="NAME=VALUE",
        default=None,
        help="Assign a value to a form parameter",
    )
    parser.add_argument(
        "--access-token",
        help="Bearer token for the API without relying on environment data",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        client = create_showcase_client(
            env_file=args.env_file,
            access_token=args.access_token,
        )
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    try:
        showcase = client.fetch(args.scid)
    except TransportError as exc:
        logging.error("Could not fetch showcase %s: %s", args.scid, exc)
        return 1

    logging.info("Fetched showcase %r", showcase.title)
    unmatched = assign_values(showcase.form, _build_values(args.set or ()))
    if unmatched:
        logging.warning("Unknown parameters: %s", ", ".join(sorted(unmatched)))

    if not showcase.is_valid():
        logging.error("Form is not complete yet")
        return 1

    parameters = extract_payment_parameters(showcase)
    for name, value in sorted(parameters.items()):
        logging.info("%s = %s", name, value)

    if args.submit_url is None:
        return 0

    try:
        next_step = client.proceed(showcase, args.submit_url)
    except TransportError as exc:
        logging.error("Submission failed: %s", exc)
        return 1

    for error in next_step.errors:
        logging.error("%s: %s", error.name or "form", error.alert)
    logging.info("Next step: %r", next_step.title)
    return 0 if not next_step.errors else 1


if __name__ == "__main__":
    sys.exit(main())
