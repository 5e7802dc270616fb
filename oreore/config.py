from __future__ import annotations
import logging
import os
import sys
from pathlib import Path
from typing import Optional


# Defaults
_DEFAULT_LOG_LEVEL = 'WARNING'


def get_log_level() -> int:
    raw = os.environ.get('OREORE_LOG_LEVEL', _DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else logging.WARNING


def get_log_file() -> Optional[Path]:
    raw = os.environ.get('OREORE_LOG_FILE')
    if not raw or not raw.strip():
        return None
    return Path(raw.strip())


def configure_logging() -> None:
    # stdout carries the protocol, so logs never go there
    log_file = get_log_file()
    handler: logging.Handler
    if log_file is not None:
        handler = logging.FileHandler(log_file, encoding='utf-8')
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s: %(message)s'))
    logging.basicConfig(level=get_log_level(), handlers=[handler], force=True)
    # pygls logs every frame at INFO; keep it for DEBUG sessions only
    if get_log_level() > logging.DEBUG:
        logging.getLogger('pygls').setLevel(logging.WARNING)
