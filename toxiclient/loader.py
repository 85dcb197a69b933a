import json
import logging

from .errors import ToxiproxyError
from .proxy import ProxyConfig

logger = logging.getLogger(__name__)


def load_proxy_configs(path):
    """Read a Toxiproxy config file: a JSON array of {name, listen, upstream, enabled}."""
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array of proxies")

    configs = []
    for i, entry in enumerate(data):
        missing = [k for k in ("name", "listen", "upstream") if not isinstance(entry, dict) or k not in entry]
        if missing:
            raise ValueError(f"Proxy #{i} in {path} is missing {', '.join(missing)}")
        configs.append(ProxyConfig(entry["name"], entry["listen"], entry["upstream"], entry.get("enabled", True)))
    return configs


def bootstrap(toxiproxy, path=None, reset=False):
    """Check the server is up, optionally reset it and create the proxies listed in path."""
    if not toxiproxy.is_running():
        raise ToxiproxyError(f"Toxiproxy is not running at {toxiproxy.base_url}")
    logger.info(f"Connected to Toxiproxy {toxiproxy.version()} at {toxiproxy.base_url}")

    if reset:
        toxiproxy.reset()

    if path is None:
        return []

    configs = load_proxy_configs(path)
    logger.info(f"Loaded {len(configs)} proxies from {path}")
    proxies = toxiproxy.populate(configs)
    for proxy in proxies:
        state = "enabled" if proxy.enabled else "disabled"
        logger.info(f"Proxy {proxy.name}: {proxy.config.listen} -> {proxy.config.upstream} ({state})")
    return proxies
