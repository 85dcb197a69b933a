import logging

from .errors import HttpStatusError, ProxyNotFound, ToxiproxyError
from .http_client import HttpClient
from .proxy import Proxy, ProxyConfig
from .config import DEFAULT_URL, load_config

logger = logging.getLogger(__name__)


class Toxiproxy:
    """Client of a Toxiproxy server; creates and looks up proxy handles."""

    def __init__(self, base_url=DEFAULT_URL, timeout=None, session=None, lock_timeout=-1):
        self.http = HttpClient(base_url, timeout=timeout, session=session, lock_timeout=lock_timeout)

    @classmethod
    def from_config(cls, config, session=None):
        return cls(
            config["url"],
            timeout=config.get("timeout"),
            session=session,
            lock_timeout=config.get("lock_timeout", -1),
        )

    @property
    def base_url(self):
        return self.http.base_url

    def is_running(self):
        """Liveness check: True if the server root answers."""
        try:
            self.http.get("")
            return True
        except ToxiproxyError as e:
            logger.debug(f"Toxiproxy at {self.base_url} is not reachable: {e}")
            return False

    def reset(self):
        """Enable all proxies and remove all of their toxics."""
        self.http.post("reset")
        logger.info("Toxiproxy reset")

    def version(self):
        return self.http.get("version").text.strip()

    def populate(self, proxy_configs):
        """Create the given proxies in one request."""
        response = self.http.post("proxies", [c.to_dict() for c in proxy_configs])
        configs = self.http.parse(response, "proxies", _parse_populated)
        proxies = [self._proxy(c) for c in configs]
        logger.info(f"Populated {len(proxies)} proxies: {', '.join(p.name for p in proxies)}")
        return proxies

    def create(self, name, listen, upstream, enabled=True):
        """Create a single proxy."""
        config = ProxyConfig(name, listen, upstream, enabled)
        response = self.http.post("proxies", config.to_dict())
        proxy = self._proxy(self.http.parse(response, "proxies", ProxyConfig.from_dict))
        logger.info(f"Created proxy {name} {listen} -> {upstream}")
        return proxy

    def all(self):
        """Return every proxy on the server, indexed by name."""
        response = self.http.get("proxies")
        configs = self.http.parse(response, "proxies", lambda data: [ProxyConfig.from_dict(d) for d in data.values()])
        return {c.name: self._proxy(c) for c in configs}

    def find_proxy(self, name):
        path = f"proxies/{name}"
        try:
            response = self.http.get(path)
        except HttpStatusError as e:
            if e.status == 404:
                raise ProxyNotFound(name, e) from e
            raise
        return self._proxy(self.http.parse(response, path, ProxyConfig.from_dict))

    def find_and_reset_proxy(self, name):
        """Look a proxy up and remove all of its toxics."""
        proxy = self.find_proxy(name)
        proxy.delete_all_toxics()
        return proxy

    def _proxy(self, config):
        return Proxy(config, self.http)


_toxiproxy = None


def get_toxiproxy():
    """Return the process-wide client, building it from the environment on first use."""
    global _toxiproxy
    if _toxiproxy is None:
        _toxiproxy = Toxiproxy.from_config(load_config())
        logger.debug(f"Using Toxiproxy at {_toxiproxy.base_url}")
    return _toxiproxy


def set_toxiproxy(toxiproxy):
    """Replace the process-wide client; None drops it."""
    global _toxiproxy
    _toxiproxy = toxiproxy


def _parse_populated(data):
    if isinstance(data, dict):
        data = data["proxies"]
    return [ProxyConfig.from_dict(d) for d in data]
