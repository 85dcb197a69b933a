import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import List

from .errors import ToxiproxyError, ToxicCreationError
from .toxic import ToxicConfig


@dataclass
class ProxyConfig:
    """Raw info about a proxy."""

    name: str
    listen: str
    upstream: str
    enabled: bool = True
    toxics: List[ToxicConfig] = field(default_factory=list)

    def to_dict(self):
        return {
            "name": self.name,
            "listen": self.listen,
            "upstream": self.upstream,
            "enabled": self.enabled,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            name=data["name"],
            listen=data["listen"],
            upstream=data["upstream"],
            enabled=data.get("enabled", True),
            toxics=[ToxicConfig.from_dict(t) for t in data.get("toxics") or []],
        )


class Proxy:
    """
    Client handle of one proxy on the server.

    The local config is what the server returned when the handle was made;
    it is not updated by enable/disable or toxic calls. Use refresh() or
    look the proxy up again to observe the current state.
    """

    def __init__(self, config, http):
        self.config = config
        self.http = http
        self.logger = logging.getLogger(__name__ + ":" + config.name)

    def __repr__(self):
        return f"Proxy({self.config!r})"

    @property
    def name(self):
        return self.config.name

    @property
    def enabled(self):
        return self.config.enabled

    @property
    def path(self):
        return f"proxies/{self.config.name}"

    def enable(self):
        """Enable the proxy."""
        self.http.post(self.path, {"enabled": True})
        self.logger.info("Proxy enabled")

    def disable(self):
        """Disable the proxy, making connections through it fail immediately."""
        self.http.post(self.path, {"enabled": False})
        self.logger.info("Proxy disabled")

    def delete(self):
        """Remove the proxy and all of its toxics."""
        self.http.delete(self.path)
        self.logger.info("Proxy deleted")

    def refresh(self):
        """Re-fetch the proxy and replace the local config."""
        response = self.http.get(self.path)
        self.config = self.http.parse(response, self.path, ProxyConfig.from_dict)
        return self.config

    def toxics(self):
        """Return all toxics registered on the proxy."""
        path = f"{self.path}/toxics"
        response = self.http.get(path)
        return self.http.parse(response, path, lambda data: [ToxicConfig.from_dict(t) for t in data])

    def toxic(self, toxic_name):
        path = f"{self.path}/toxics/{toxic_name}"
        response = self.http.get(path)
        return self.http.parse(response, path, ToxicConfig.from_dict)

    def update_toxic(self, toxic_name, toxicity=None, attributes=None):
        """Change the toxicity and/or attributes of an existing toxic."""
        payload = {}
        if toxicity is not None:
            payload["toxicity"] = toxicity
        if attributes is not None:
            payload["attributes"] = dict(attributes)
        if not payload:
            raise ValueError("update_toxic needs toxicity or attributes")

        path = f"{self.path}/toxics/{toxic_name}"
        response = self.http.post(path, payload)
        return self.http.parse(response, path, ToxicConfig.from_dict)

    def delete_toxic(self, toxic_name):
        self.http.delete(f"{self.path}/toxics/{toxic_name}")

    def delete_all_toxics(self):
        """Delete all toxics on the proxy, stopping at the first failure."""
        toxics = self.toxics()
        for toxic in toxics:
            self.delete_toxic(toxic.name)
        if toxics:
            self.logger.info(f"Deleted {len(toxics)} toxic(s)")

    def with_latency(self, stream, latency, jitter, toxicity):
        return self.with_latency_upon_condition(stream, latency, jitter, toxicity, None)

    def with_latency_upon_condition(self, stream, latency, jitter, toxicity, condition):
        """Register a latency toxic, delaying data by latency +/- jitter ms."""
        return self.create_toxic(
            ToxicConfig.new("latency", stream, toxicity, {"latency": latency, "jitter": jitter}, condition)
        )

    def with_bandwidth(self, stream, rate, toxicity):
        return self.with_bandwidth_upon_condition(stream, rate, toxicity, None)

    def with_bandwidth_upon_condition(self, stream, rate, toxicity, condition):
        """Register a bandwidth toxic, limiting the stream to rate KB/s."""
        return self.create_toxic(ToxicConfig.new("bandwidth", stream, toxicity, {"rate": rate}, condition))

    def with_slow_close(self, stream, delay, toxicity):
        return self.with_slow_close_upon_condition(stream, delay, toxicity, None)

    def with_slow_close_upon_condition(self, stream, delay, toxicity, condition):
        """Register a slow_close toxic, delaying the TCP close by delay ms."""
        return self.create_toxic(ToxicConfig.new("slow_close", stream, toxicity, {"delay": delay}, condition))

    def with_timeout(self, stream, timeout, toxicity):
        return self.with_timeout_upon_condition(stream, timeout, toxicity, None)

    def with_timeout_upon_condition(self, stream, timeout, toxicity, condition):
        """Register a timeout toxic; with timeout 0 data is held until the toxic is removed."""
        return self.create_toxic(ToxicConfig.new("timeout", stream, toxicity, {"timeout": timeout}, condition))

    def with_slicer(self, stream, average_size, size_variation, delay, toxicity):
        return self.with_slicer_upon_condition(stream, average_size, size_variation, delay, toxicity, None)

    def with_slicer_upon_condition(self, stream, average_size, size_variation, delay, toxicity, condition):
        """Register a slicer toxic, splitting data into smaller packets sent delay us apart."""
        attributes = {"average_size": average_size, "size_variation": size_variation, "delay": delay}
        return self.create_toxic(ToxicConfig.new("slicer", stream, toxicity, attributes, condition))

    def with_limit_data(self, stream, bytes, toxicity):
        return self.with_limit_data_upon_condition(stream, bytes, toxicity, None)

    def with_limit_data_upon_condition(self, stream, bytes, toxicity, condition):
        """Register a limit_data toxic, closing the connection after bytes have passed."""
        return self.create_toxic(ToxicConfig.new("limit_data", stream, toxicity, {"bytes": bytes}, condition))

    def create_toxic(self, toxic):
        path = f"{self.path}/toxics"
        try:
            self.http.post(path, toxic.to_dict())
        except ToxiproxyError as e:
            raise ToxicCreationError(self.name, toxic.name, e) from e
        self.logger.info(f"Added {toxic.type} toxic {toxic.name} (toxicity {toxic.toxicity})")
        return self

    @contextmanager
    def down(self):
        """Keep the proxy disabled for the duration of the block."""
        self.disable()
        try:
            yield self
        except BaseException:
            self._cleanup_after_error(self.enable)
            raise
        self.enable()

    @contextmanager
    def applied(self):
        """Delete all toxics of the proxy once the block exits."""
        try:
            yield self
        except BaseException:
            self._cleanup_after_error(self.delete_all_toxics)
            raise
        self.delete_all_toxics()

    def with_down(self, body):
        """Run body while the proxy is disabled, then enable it again."""
        with self.down():
            return body()

    def apply(self, body):
        """Run body with the current toxics, then delete them."""
        with self.applied():
            return body()

    def _cleanup_after_error(self, step):
        try:
            step()
        except ToxiproxyError as e:
            self.logger.warning(f"Cleanup failed after error in block: {e}")
            raise
