class ToxiproxyError(Exception):
    """Base class for every failure talking to the Toxiproxy server."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class TransportError(ToxiproxyError):
    """The request never got an HTTP response (refused, DNS, timeout)."""

    def __init__(self, method, path, cause):
        super().__init__(f"{method} /{path} failed: {cause}")
        self.method = method
        self.path = path
        self.cause = cause


class HttpStatusError(ToxiproxyError):
    """The server answered with a non-2xx status."""

    def __init__(self, method, path, status, reason, body=""):
        message = f"{method} /{path} failed: {status} {reason}"
        if body:
            message += f" ({body})"
        super().__init__(message)
        self.method = method
        self.path = path
        self.status = status
        self.reason = reason
        self.body = body


class ProxyNotFound(HttpStatusError, KeyError):
    def __init__(self, name, error):
        super().__init__(error.method, error.path, error.status, error.reason, error.body)
        self.name = name
        self.message = f"Proxy '{name}' not found"


class SerializationError(ToxiproxyError):
    pass


class LockError(ToxiproxyError):
    pass


class ToxicCreationError(ToxiproxyError):
    """
    Registering a toxic failed.

    Raised by the toxic builders instead of the underlying error so a test
    harness can tell fixture setup failures apart and abort on them.
    """

    def __init__(self, proxy_name, toxic_name, cause):
        super().__init__(f"<proxies>.<toxics> creation has failed for {proxy_name}/{toxic_name}: {cause}")
        self.proxy_name = proxy_name
        self.toxic_name = toxic_name
        self.cause = cause
