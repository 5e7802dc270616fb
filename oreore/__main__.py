"""Command line entry point: `oreore [--language-server|FILE]`."""

from __future__ import annotations

import logging
import sys
from typing import List, Optional

from oreore.config import configure_logging

logger = logging.getLogger(__name__)

USAGE = "usage: oreore [--language-server|FILE]"


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print(USAGE)
        return 1

    configure_logging()
    if args[0] == "--language-server":
        from oreore_lsp.server import create_server

        create_server().start_io()
        return 0

    # TODO: evaluate FILE once the interpreter exists; only analysis is implemented.
    logger.error("cannot run %s: interpretation is not implemented", args[0])
    print(f"oreore: interpretation is not implemented ({args[0]})", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
