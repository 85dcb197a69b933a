import json
import logging
import threading

import requests

from .errors import HttpStatusError, LockError, SerializationError, TransportError


class HttpClient:
    """
    Blocking JSON client for the Toxiproxy REST API.

    One instance is shared by every proxy handle of a client, so requests
    are serialized through a lock: only one request is in flight at a time.
    """

    def __init__(self, base_url, timeout=None, session=None, lock_timeout=-1):
        if lock_timeout < 0 and lock_timeout != -1:
            raise ValueError(f"Invalid lock timeout: {lock_timeout}. Must be -1 (wait forever) or >= 0")
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.lock_timeout = lock_timeout
        self.lock = threading.Lock()
        self.logger = logging.getLogger(__name__ + ":" + self.base_url)

    def get(self, path):
        return self.request("GET", path)

    def post(self, path, payload=None):
        body = None
        if payload is not None:
            try:
                body = json.dumps(payload)
            except (TypeError, ValueError) as e:
                raise SerializationError(f"json serialize failed for POST /{path}: {e}") from e
        return self.request("POST", path, body)

    def delete(self, path):
        return self.request("DELETE", path)

    def request(self, method, path, body=None):
        url = f"{self.base_url}/{path}"
        headers = {"Content-Type": "application/json"} if body is not None else None

        if not self.lock.acquire(timeout=self.lock_timeout):
            raise LockError(f"lock error: could not acquire transport lock for {method} /{path}")
        try:
            self.logger.debug(f"{method} {url}")
            response = self.session.request(method, url, data=body, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise HttpStatusError(
                method, path, e.response.status_code, e.response.reason, e.response.text.strip()
            ) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(method, path, e) from e
        finally:
            self.lock.release()

        self.logger.debug(f"{method} {url} -> {response.status_code}")
        return response

    def json(self, response, path):
        """Decode a response body, mapping parse errors to SerializationError."""
        try:
            return response.json()
        except ValueError as e:
            raise SerializationError(f"json deserialize failed for /{path}: {e}") from e

    def parse(self, response, path, parser):
        """Decode a response body and build a value from it; a body of the wrong shape is a SerializationError."""
        data = self.json(response, path)
        try:
            return parser(data)
        except (KeyError, TypeError, AttributeError) as e:
            raise SerializationError(f"json deserialize failed for /{path}: {type(e).__name__} {e}") from e
