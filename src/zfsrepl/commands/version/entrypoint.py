from __future__ import annotations
import importlib.metadata
import logging

from .args import Args


log = logging.getLogger(__name__)


def entrypoint(args: Args) -> None:
  version = importlib.metadata.version('zfsrepl')
  log.info(f"zfsrepl {version}")
