# core/logger.py
"""Package logger shared by the server, the API client and the CLI views.

  LOGGER        — standard Python logger named ``dockhand``
  set_verbosity — switch between INFO and DEBUG output
"""

import logging
import sys

LOGGER = logging.getLogger("dockhand")
LOGGER.setLevel(logging.INFO)

_handler = logging.StreamHandler(sys.stderr)
_handler.setFormatter(logging.Formatter("%(asctime)s %(name)s [%(process)d] %(levelname)-5s %(message)s"))
LOGGER.addHandler(_handler)


def set_verbosity(verbose: bool) -> None:
    """Raise the package logger to DEBUG when verbose, INFO otherwise."""
    LOGGER.setLevel(logging.DEBUG if verbose else logging.INFO)
