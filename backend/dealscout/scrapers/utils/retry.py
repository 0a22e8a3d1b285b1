"""Retry utilities with exponential backoff for HTTP requests."""

import logging

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

# tenacity's before_sleep hook expects a stdlib logger
_retry_logger = logging.getLogger(__name__)


def is_retryable_http_error(exc: BaseException) -> bool:
    """Connection problems, timeouts and 5xx responses are worth retrying.

    4xx responses are the caller's problem and fail immediately.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return isinstance(exc, (httpx.ConnectError, httpx.TimeoutException, httpx.RemoteProtocolError))


# Reusable retry decorator for HTTP requests (httpx)
http_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=30),
    retry=retry_if_exception(is_retryable_http_error),
    before_sleep=before_sleep_log(_retry_logger, logging.WARNING),
    reraise=True,
)
