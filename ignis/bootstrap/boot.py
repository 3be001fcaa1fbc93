import logging
import sys
from pathlib import Path

from ignis.bootstrap.config.loader import get_cli_args
from ignis.bootstrap.config.settings import IgnisConfig
from ignis.bootstrap.deps import build_emitter, get_config, open_output
from ignis.bootstrap.document import DocumentError, load_document
from ignis.core.errors import ValidationError
from ignis.core.helpers.utils import setup_logging
from ignis.core.schema.registry import RESPONSE_SCHEMA
from ignis.core.validation.validator import ResponseValidator


def run_encode(config: IgnisConfig, response: Path) -> int:
    logger = logging.getLogger("bootstrap.boot")

    try:
        candidate = load_document(response)
        message = ResponseValidator().parse(candidate)
    except DocumentError as exc:
        print(exc, file=sys.stderr)
        return 1
    except ValidationError as exc:
        print("Response validation failed:", file=sys.stderr)
        for problem in exc.problems:
            print(f"  {problem}", file=sys.stderr)
        return 1

    try:
        stream = open_output(config)
    except OSError as exc:
        print(f"Cannot open output '{config.transport.output}': {exc}", file=sys.stderr)
        return 1

    try:
        build_emitter(config, stream).emit(message)
    finally:
        if stream is not sys.stdout.buffer:
            stream.close()

    logger.info(f"Encoded '{response}'")
    return 0


def main():
    cli = get_cli_args()
    setup_logging(cli.log_level)

    match cli.command:
        case "schema":
            print(RESPONSE_SCHEMA.render_proto())
            code = 0
        case "encode":
            code = run_encode(get_config(), cli.response)
        case _:
            code = 2

    raise SystemExit(code)


if __name__ == "__main__":
    main()
