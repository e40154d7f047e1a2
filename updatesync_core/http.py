"""Outbound HTTP for release queries and package downloads, built on requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping, Protocol

import requests
from requests.exceptions import RequestException, Timeout

from .errors import NetworkError
from .types import FetchResponse

if TYPE_CHECKING:
    from .install import AuthHeaderInjector

logger = logging.getLogger(__name__)

_SENSITIVE_HEADERS = ("authorization", "private-token", "token", "cookie")


def redact_token(value: str) -> str:
    if not value:
        return value
    if len(value) <= 6:
        return "***"
    return f"{value[:3]}***{value[-2:]}"


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    redacted: dict[str, str] = {}
    for key, value in headers.items():
        lower = key.lower()
        if any(marker in lower for marker in _SENSITIVE_HEADERS):
            redacted[key] = redact_token(str(value))
        else:
            redacted[key] = str(value)
    return redacted


def merge_request_options(base: Mapping[str, Any] | None, extra_headers: Mapping[str, str]) -> dict[str, Any]:
    """Merge ``extra_headers`` under ``base['headers']``; caller headers win."""
    options = dict(base or {})
    headers = {str(k): str(v) for k, v in extra_headers.items()}
    headers.update({str(k): str(v) for k, v in (options.get("headers") or {}).items()})
    options["headers"] = headers
    return options


class Fetcher(Protocol):
    def fetch(self, url: str, options: Mapping[str, Any] | None = None) -> FetchResponse: ...


@dataclass(frozen=True)
class HttpFetcher:
    timeout_seconds: float = 15.0
    download_timeout_seconds: float = 300.0
    user_agent: str = "UpdateSync"

    def fetch(self, url: str, options: Mapping[str, Any] | None = None) -> FetchResponse:
        options = merge_request_options(options, {"User-Agent": self.user_agent})
        timeout = float(options.get("timeout_seconds") or self.timeout_seconds)
        headers = options["headers"]
        logger.debug("release query url=%s headers=%s timeout=%s", url, redact_headers(headers), timeout)
        try:
            response = requests.get(url, headers=headers, timeout=timeout)
        except Timeout as exc:
            raise NetworkError(f"request timed out after {timeout:.1f}s", url=url) from exc
        except RequestException as exc:
            raise NetworkError(f"request failed: {exc}", url=url) from exc
        return FetchResponse(status_code=response.status_code, body=response.text or "", url=url)

    def download(
        self,
        url: str,
        destination: Path,
        *,
        options: Mapping[str, Any] | None = None,
        injector: "AuthHeaderInjector | None" = None,
    ) -> Path:
        request_args = merge_request_options(options, {"User-Agent": self.user_agent})
        if injector is not None:
            request_args = injector.inject(request_args, url)
        headers = request_args["headers"]
        timeout = float(request_args.get("timeout_seconds") or self.download_timeout_seconds)
        logger.debug("package download url=%s headers=%s", url, redact_headers(headers))
        destination.parent.mkdir(parents=True, exist_ok=True)
        try:
            with requests.get(url, headers=headers, timeout=timeout, stream=True) as response:
                if response.status_code >= 400:
                    raise NetworkError(
                        f"download failed status={response.status_code}",
                        url=url,
                        status_code=response.status_code,
                    )
                with destination.open("wb") as handle:
                    for chunk in response.iter_content(chunk_size=65536):
                        if chunk:
                            handle.write(chunk)
        except Timeout as exc:
            raise NetworkError(f"download timed out after {timeout:.1f}s", url=url) from exc
        except RequestException as exc:
            raise NetworkError(f"download failed: {exc}", url=url) from exc
        return destination
