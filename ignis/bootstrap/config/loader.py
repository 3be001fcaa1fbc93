import argparse
import os
from functools import lru_cache
from pathlib import Path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ignis",
        description=(
            "Encode HTTP-like responses into the ignis binary format.\n\n"
            "The encoded buffer is what a script hands to its host across the\n"
            "runtime boundary: status code, headers, body and length."
        ),
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        help="Path to an ignis configuration file"
    )

    parser.add_argument(
        "-l", "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=(
            "Logging verbosity.\n"
            "Logs go to stderr so they never mix with the encoded output.\n\n"
            "Example:\n"
            "  --log-level DEBUG"
        ),
    )

    commands = parser.add_subparsers(dest="command", required=True)

    encode = commands.add_parser(
        "encode",
        help="Validate a YAML response document and write its encoded form."
    )
    encode.add_argument(
        "response",
        type=Path,
        help="Path to the YAML response document"
    )

    commands.add_parser(
        "schema",
        help="Print the response schema as a proto3 document."
    )

    return parser


@lru_cache
def get_cli_args() -> argparse.Namespace:
    return build_parser().parse_args()


@lru_cache
def get_configfile() -> Path | None:
    args = get_cli_args()

    # Priority: CLI > ENV > default file in current working directory
    raw = args.config or os.getenv("IGNISCONFIG")

    if raw is None:
        file = Path.cwd() / "ignis.yaml"
        return file if file.is_file() else None

    file = Path(raw)
    if not file.is_file():
        raise SystemExit(
            f"[config] Configuration file not found: '{file}'.\n"
            "  - Use --config <file.yaml>\n"
            "  - Or set the IGNISCONFIG environment variable\n"
            "  - Or place an 'ignis.yaml' file in the current working directory."
        )

    return file
