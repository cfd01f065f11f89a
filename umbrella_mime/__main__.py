"""Command-line entry point.

Usage::

    python -m umbrella_mime build < message.json   # Message JSON → header block
    python -m umbrella_mime parse < message.eml    # raw EML headers → Message JSON
"""

from __future__ import annotations

import sys

import structlog
from pydantic import ValidationError

from .builder import HeaderBuilder
from .config import HeaderConfig
from .logging import setup_logging
from .models import Message
from .parser import parse_header_bytes

logger = structlog.get_logger()

USAGE = "Usage: python -m umbrella_mime <build|parse>"


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1 or args[0] not in ("build", "parse"):
        print(USAGE, file=sys.stderr)
        return 1

    config = HeaderConfig()
    setup_logging(json=config.log_json, level=config.log_level)

    if args[0] == "build":
        try:
            message = Message.model_validate_json(sys.stdin.buffer.read())
        except ValidationError as exc:
            logger.error("invalid_message_json", errors=exc.error_count())
            print(exc, file=sys.stderr)
            return 2
        sys.stdout.write(HeaderBuilder(config).get_header(message).as_string())
    else:
        message = parse_header_bytes(sys.stdin.buffer.read())
        sys.stdout.write(message.model_dump_json(indent=2) + "\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
