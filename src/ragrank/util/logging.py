from __future__ import annotations

import logging
import os


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    # --quiet keeps stderr clean for --json consumers; --verbose wins if both are set.
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def use_color() -> bool:
    if os.environ.get("NO_COLOR") is not None:
        return False
    return os.environ.get("CLICOLOR") != "0"
