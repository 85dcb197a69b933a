"""
http_client_test.py

http_client.py unit test
"""

from fake_toxiproxy import BASE_URL, FakeToxiproxy
from toxiclient.errors import HttpStatusError, LockError, SerializationError, TransportError
from toxiclient.http_client import HttpClient

import requests
import unittest


class TestHttpClient(unittest.TestCase):
    def setUp(self) -> None:
        self.server = FakeToxiproxy()
        self.http = HttpClient(BASE_URL + "/", session=self.server)

    def test_strips_trailing_slash(self) -> None:
        self.assertEqual(self.http.base_url, BASE_URL)
        self.http.get("version")
        self.assertEqual(self.server.paths(), ["version"])

    def test_root_path(self) -> None:
        self.assertEqual(self.http.get("").status_code, 200)
        self.assertEqual(self.server.paths("GET"), [""])

    def test_post_sends_json(self) -> None:
        self.server.add_proxy("socket")
        self.http.post("proxies/socket", {"enabled": False})
        self.assertEqual(self.server.requests[-1], ("POST", "proxies/socket", {"enabled": False}))
        self.assertFalse(self.server.proxies["socket"]["enabled"])

    def test_post_without_body(self) -> None:
        self.http.post("reset")
        self.assertEqual(self.server.requests[-1], ("POST", "reset", None))

    def test_status_error(self) -> None:
        with self.assertRaises(HttpStatusError) as ctx:
            self.http.get("proxies/missing")
        err = ctx.exception
        self.assertEqual(err.status, 404)
        self.assertEqual(err.path, "proxies/missing")
        self.assertIn("GET /proxies/missing", str(err))
        self.assertIn("404 Not Found", str(err))
        self.assertIn("proxy not found", str(err))

    def test_transport_error(self) -> None:
        self.server.down = True
        with self.assertRaises(TransportError) as ctx:
            self.http.delete("proxies/socket")
        self.assertEqual(ctx.exception.method, "DELETE")
        self.assertIsInstance(ctx.exception.cause, requests.exceptions.ConnectionError)

    def test_timeout_is_transport_error(self) -> None:
        self.server.failures[("GET", "version")] = requests.exceptions.ReadTimeout("timed out")
        with self.assertRaises(TransportError):
            self.http.get("version")

    def test_unserializable_payload(self) -> None:
        with self.assertRaises(SerializationError):
            self.http.post("proxies", {"name": object()})
        self.assertEqual(self.server.requests, [])

    def test_json_parse_failure(self) -> None:
        response = self.http.get("version")
        with self.assertRaises(SerializationError):
            self.http.json(response, "version")

    def test_lock_timeout(self) -> None:
        http = HttpClient(BASE_URL, session=self.server, lock_timeout=0.01)
        http.lock.acquire()
        try:
            with self.assertRaises(LockError):
                http.get("version")
        finally:
            http.lock.release()
        self.assertEqual(self.server.requests, [])

    def test_rejects_invalid_lock_timeout(self) -> None:
        with self.assertRaises(ValueError):
            HttpClient(BASE_URL, session=self.server, lock_timeout=-2)

    def test_parse_wrong_shape(self) -> None:
        self.server.add_proxy("socket")
        response = self.http.get("proxies")
        with self.assertRaises(SerializationError):
            self.http.parse(response, "proxies", lambda data: data["socket"]["missing"])
        with self.assertRaises(SerializationError):
            self.http.parse(response, "proxies", lambda data: data.append(1))

    def test_lock_released_after_error(self) -> None:
        http = HttpClient(BASE_URL, session=self.server, lock_timeout=0.01)
        with self.assertRaises(HttpStatusError):
            http.get("proxies/missing")
        self.assertFalse(http.lock.locked())
        self.assertEqual(http.get("version").text, "2.9.0")


if __name__ == "__main__":
    unittest.main()
