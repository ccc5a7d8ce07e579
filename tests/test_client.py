from __future__ import annotations

import json
import unittest
from typing import Any, Callable

import httpx

from raw_posts import envelope, make_raw_post

from xpost.client import XGuestClient
from xpost.config_schema import ClientConfig
from xpost.errors import AuthenticationError, MalformedPayloadError, PostNotFoundError, UpstreamError
from xpost.retry import RetryConfig, RetryEvent

_NO_WAIT = RetryConfig(max_attempts=3, base_delay_seconds=0.0, max_delay_seconds=0.0, jitter_ratio=0.0)


class _Recorder:
    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self._handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)


def _routes(post_response: Callable[[httpx.Request], httpx.Response]) -> Callable[[httpx.Request], httpx.Response]:
    def _handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/guest/activate.json"):
            return httpx.Response(200, json={"guest_token": "gt-1"})
        return post_response(request)

    return _handler


def _client(handler: Callable[[httpx.Request], httpx.Response], **kwargs: Any) -> XGuestClient:
    http = httpx.Client(transport=httpx.MockTransport(handler))
    return XGuestClient("bearer-x", config=ClientConfig(), http=http, retry=_NO_WAIT, sleep_fn=lambda _: None, **kwargs)


class TestXGuestClient(unittest.TestCase):
    def test_fetch_post_sends_graphql_request(self) -> None:
        rec = _Recorder(_routes(lambda req: httpx.Response(200, json=envelope(make_raw_post("20", text="just setting up")))))

        with _client(rec) as client:
            raw = client.get_post("https://x.com/jack/status/20")
            client.fetch_post("20")

        assert raw is not None
        self.assertEqual(raw.rest_id, "20")
        self.assertEqual(raw.legacy.full_text, "just setting up")

        activations = [r for r in rec.requests if r.url.path.endswith("/guest/activate.json")]
        self.assertEqual(len(activations), 1)
        self.assertEqual(activations[0].method, "POST")
        self.assertEqual(activations[0].headers["authorization"], "Bearer bearer-x")

        lookup = rec.requests[1]
        self.assertEqual(lookup.method, "GET")
        self.assertTrue(lookup.url.path.endswith("/TweetResultByRestId"))
        self.assertEqual(lookup.headers["x-guest-token"], "gt-1")
        variables = json.loads(lookup.url.params["variables"])
        self.assertEqual(variables["tweetId"], "20")
        self.assertTrue(json.loads(lookup.url.params["fieldToggles"])["withArticleRichContentState"])

    def test_empty_result_is_none(self) -> None:
        with _client(_routes(lambda req: httpx.Response(200, json=envelope(None)))) as client:
            self.assertIsNone(client.fetch_post("1"))

        tombstone = {"data": {"tweetResult": {"result": {"__typename": "TweetTombstone"}}}}
        with _client(_routes(lambda req: httpx.Response(200, json=tombstone))) as client:
            self.assertIsNone(client.fetch_post("1"))

    def test_non_success_status_is_not_found(self) -> None:
        with _client(_routes(lambda req: httpx.Response(404, text="nope"))) as client:
            with self.assertRaises(PostNotFoundError) as ctx:
                client.fetch_post("1")
        self.assertEqual(ctx.exception.post_id, "1")
        self.assertIsInstance(ctx.exception, UpstreamError)

    def test_retries_server_errors_then_succeeds(self) -> None:
        responses = [
            httpx.Response(503),
            httpx.Response(429, headers={"Retry-After": "0"}),
            httpx.Response(200, json=envelope(make_raw_post("5"))),
        ]
        events: list[RetryEvent] = []

        with _client(_routes(lambda req: responses.pop(0)), on_retry=events.append) as client:
            raw = client.fetch_post("5")

        assert raw is not None
        self.assertEqual(raw.rest_id, "5")
        self.assertEqual([e.reason for e in events], ["http_503", "rate_limited"])

    def test_exhausted_retries_raise_upstream_error(self) -> None:
        with _client(_routes(lambda req: httpx.Response(500))) as client:
            with self.assertRaises(UpstreamError):
                client.fetch_post("5")

    def test_transport_failure_is_upstream_error(self) -> None:
        def _boom(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with _client(_routes(_boom)) as client:
            with self.assertRaises(UpstreamError):
                client.fetch_post("5")

    def test_failed_activation_is_authentication_error(self) -> None:
        with _client(lambda req: httpx.Response(403, text="forbidden")) as client:
            with self.assertRaises(AuthenticationError):
                client.fetch_post("5")

    def test_malformed_payload(self) -> None:
        bad = {"data": {"tweetResult": {"result": {"rest_id": "5"}}}}
        with _client(_routes(lambda req: httpx.Response(200, json=bad))) as client:
            with self.assertRaises(MalformedPayloadError):
                client.fetch_post("5")

        with _client(_routes(lambda req: httpx.Response(200, text="<html>"))) as client:
            with self.assertRaises(MalformedPayloadError):
                client.fetch_post("5")

    def test_requires_bearer_token(self) -> None:
        with self.assertRaises(AuthenticationError):
            XGuestClient("  ")


if __name__ == "__main__":
    unittest.main()
