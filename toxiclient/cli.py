import logging

from .client import get_toxiproxy
from .config import load_config
from .errors import ToxiproxyError
from .loader import bootstrap

logger = logging.getLogger(__name__)


def main(environ=None):
    """Set Toxiproxy up from the environment; returns the process exit code."""
    try:
        config = load_config(environ)
    except ValueError as e:
        logging.basicConfig()
        logger.error(f"Invalid configuration: {e}")
        return 1
    logging.basicConfig(level=config["log_level"])

    try:
        bootstrap(get_toxiproxy(), config["populate"], reset=config["reset"])
    except (ToxiproxyError, ValueError, OSError) as e:
        logger.error(f"Toxiproxy setup failed: {e}")
        return 1
    return 0
