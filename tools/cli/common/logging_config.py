import logging
import os

from common.const.common_path import LOCAL_FOLDER, LOCAL_LOG_FILE

LOG_LEVEL_ENV_VAR = "ROSA_HCP_LOG_LEVEL"

logger = logging.getLogger("rosa-hcp")


def configure_logging(level: str | None = None) -> None:
    """
    Attach a file handler to the CLI logger.

    Console output is reserved for status lines, so everything logged goes to
    ~/.rosa-hcp/rosa-hcp.log only.
    """
    if logger.handlers:
        return

    level = (level or os.environ.get(LOG_LEVEL_ENV_VAR, "DEBUG")).upper()
    logger.setLevel(level)
    logger.propagate = False

    try:
        os.makedirs(LOCAL_FOLDER, exist_ok=True)
        handler = logging.FileHandler(LOCAL_LOG_FILE)
    except OSError:
        # read-only home, fall back to stderr at warning level
        handler = logging.StreamHandler()
        handler.setLevel(logging.WARNING)

    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
