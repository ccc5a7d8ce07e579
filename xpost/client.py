from __future__ import annotations

import json
from typing import Any

import httpx

from .config_schema import ClientConfig
from .errors import AuthenticationError, MalformedPayloadError, PostNotFoundError, UpstreamError
from .http_retry import is_retryable_http_exception
from .ids import extract_post_id
from .raw_schema import RawPost, parse_post_result
from .retry import OnRetryFn, RetryConfig, SleepFn, call_with_retries

POST_OPERATION_NAME = "TweetResultByRestId"

_POST_FEATURES: dict[str, bool] = {
    "creator_subscriptions_tweet_preview_api_enabled": True,
    "premium_content_api_read_enabled": False,
    "communities_web_enable_tweet_community_results_fetch": True,
    "c9s_tweet_anatomy_moderator_badge_enabled": True,
    "responsive_web_grok_analyze_button_fetch_trends_enabled": False,
    "articles_preview_enabled": True,
    "responsive_web_edit_tweet_api_enabled": True,
    "graphql_is_translatable_rweb_tweet_is_translatable_enabled": True,
    "view_counts_everywhere_api_enabled": True,
    "longform_notetweets_consumption_enabled": True,
    "responsive_web_twitter_article_tweet_consumption_enabled": True,
    "tweet_awards_web_tipping_enabled": False,
    "freedom_of_speech_not_reach_fetch_enabled": True,
    "standardized_nudges_misinfo": True,
    "tweet_with_visibility_results_prefer_gql_limited_actions_policy_enabled": True,
    "longform_notetweets_rich_text_read_enabled": True,
    "longform_notetweets_inline_media_enabled": True,
    "responsive_web_graphql_exclude_directive_enabled": True,
    "verified_phone_label_enabled": False,
    "responsive_web_graphql_skip_user_profile_image_extensions_enabled": False,
    "responsive_web_graphql_timeline_navigation_enabled": True,
    "responsive_web_enhance_cards_enabled": False,
}

_POST_FIELD_TOGGLES: dict[str, bool] = {
    "withArticleRichContentState": True,
    "withArticlePlainText": False,
    "withGrokAnalyze": False,
    "withDisallowedReplyControls": False,
}


def _compact_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


class XGuestClient:
    """
    Read-only client for the X web GraphQL API using a guest session.

    The guest token is activated lazily and reused for the lifetime of the client.
    """

    def __init__(
        self,
        bearer_token: str,
        *,
        config: ClientConfig | None = None,
        http: httpx.Client | None = None,
        retry: RetryConfig | None = None,
        on_retry: OnRetryFn | None = None,
        sleep_fn: SleepFn | None = None,
    ) -> None:
        token = (bearer_token or "").strip()
        if not token:
            raise AuthenticationError("A bearer token is required")

        self._bearer_token = token
        self._cfg = config or ClientConfig()
        self._retry = retry or RetryConfig()
        self._on_retry = on_retry
        self._sleep_fn = sleep_fn
        self._owns_http = http is None
        self._http = http or httpx.Client(timeout=self._cfg.timeout_seconds)
        self._guest_token: str | None = None

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "XGuestClient":
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()

    def _base_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._bearer_token}",
            "User-Agent": self._cfg.user_agent,
        }

    def _send(self, request: httpx.Request, *, operation: str) -> httpx.Response:
        def _do_send() -> httpx.Response:
            response = self._http.send(request)
            if response.status_code == 429 or response.status_code >= 500:
                response.raise_for_status()
            return response

        return call_with_retries(
            _do_send,
            cfg=self._retry,
            is_retryable=is_retryable_http_exception,
            operation=operation,
            on_retry=self._on_retry,
            sleep_fn=self._sleep_fn,
        )

    def activate_guest(self) -> str:
        """Return the guest token, activating a guest session on first use."""
        if self._guest_token:
            return self._guest_token

        request = self._http.build_request(
            "POST", self._cfg.guest_activate_url, headers=self._base_headers()
        )
        try:
            response = self._send(request, operation="x.guest.activate")
        except httpx.HTTPError as e:
            raise AuthenticationError(f"Failed to authenticate with the X API: {e}") from e

        if response.is_error:
            raise AuthenticationError(
                f"Failed to activate guest: {response.status_code} "
                f"{response.reason_phrase} - {response.text}"
            )

        try:
            token = response.json().get("guest_token")
        except (ValueError, AttributeError) as e:
            raise AuthenticationError("Guest activation returned invalid JSON") from e

        if not isinstance(token, str) or not token.strip():
            raise AuthenticationError("Guest activation response has no guest_token")

        self._guest_token = token.strip()
        return self._guest_token

    def fetch_post(self, post_id: str) -> RawPost | None:
        """
        Fetch one raw post by numeric ID.

        Returns None when the API has no post for the ID.
        """
        guest_token = self.activate_guest()

        variables = {
            "tweetId": post_id,
            "withCommunity": False,
            "includePromotedContent": False,
            "withVoice": False,
        }
        url = f"{self._cfg.graphql_url}/{self._cfg.post_query_id}/{POST_OPERATION_NAME}"
        headers = {
            **self._base_headers(),
            "Content-Type": "application/json",
            "x-twitter-active-user": "yes",
            "x-twitter-client-language": "en",
            "x-guest-token": guest_token,
        }
        request = self._http.build_request(
            "GET",
            url,
            params={
                "variables": _compact_json(variables),
                "features": _compact_json(_POST_FEATURES),
                "fieldToggles": _compact_json(_POST_FIELD_TOGGLES),
            },
            headers=headers,
        )

        try:
            response = self._send(request, operation=f"x.graphql.{POST_OPERATION_NAME}:{post_id}")
        except httpx.HTTPError as e:
            raise UpstreamError(f"Failed to fetch post {post_id}: {e}") from e

        if response.is_error:
            raise PostNotFoundError(
                post_id,
                f"Failed to fetch post: {response.status_code} "
                f"{response.reason_phrase} - {response.text}",
            )

        try:
            envelope = response.json()
        except ValueError as e:
            raise MalformedPayloadError(f"Post {post_id} response is not valid JSON") from e

        return parse_post_result(envelope)

    def get_post(self, id_or_url: str) -> RawPost | None:
        return self.fetch_post(extract_post_id(id_or_url))
