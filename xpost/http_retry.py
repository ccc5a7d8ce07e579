from __future__ import annotations

import httpx


def _parse_retry_after(response: httpx.Response | None) -> float | None:
    if response is None:
        return None

    val = response.headers.get("retry-after")
    if val is None:
        return None

    try:
        return float(val.strip())
    except ValueError:
        return None


def is_retryable_http_exception(exc: BaseException) -> tuple[bool, float | None, str | None]:
    """
    Retry policy for the X web API:
    - connection errors and timeouts
    - HTTP 429 (honouring Retry-After)
    - HTTP 5xx
    """
    if isinstance(exc, httpx.TimeoutException):
        return True, None, "timeout"

    if isinstance(exc, httpx.TransportError):
        return True, None, "network_error"

    if isinstance(exc, httpx.HTTPStatusError):
        code = exc.response.status_code
        if code == 429:
            return True, _parse_retry_after(exc.response), "rate_limited"
        if code >= 500:
            return True, _parse_retry_after(exc.response), f"http_{code}"
        return False, None, f"http_{code}"

    return False, None, None
