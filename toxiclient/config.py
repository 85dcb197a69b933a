import logging
import os

DEFAULT_URL = "http://127.0.0.1:8474"


def load_config(environ=None):
    """Read the client settings from the environment; invalid values raise ValueError."""
    env = os.environ if environ is None else environ

    timeout = float(env.get("TOXIPROXY_TIMEOUT", 5))
    lock_timeout = float(env.get("TOXIPROXY_LOCK_TIMEOUT", -1))
    if lock_timeout < 0 and lock_timeout != -1:
        raise ValueError(f"Invalid TOXIPROXY_LOCK_TIMEOUT: {lock_timeout}. Must be -1 (wait forever) or >= 0")

    log_level = env.get("LOG_LEVEL", "INFO").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"Invalid LOG_LEVEL: {log_level}")

    return {
        "url": env.get("TOXIPROXY_URL", DEFAULT_URL).rstrip('/'),
        "timeout": timeout if timeout > 0 else None,
        "lock_timeout": lock_timeout,
        "populate": env.get("TOXIPROXY_POPULATE") or None,
        "reset": env.get("TOXIPROXY_RESET", "false").lower() == "true",
        "log_level": log_level,
    }
