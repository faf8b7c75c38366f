from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

import requests
from requests.auth import HTTPBasicAuth

from .config import ClientConfig
from .exceptions import TransportError
from .response import HEADER_SEPARATOR, ResponseEnvelope

logger = logging.getLogger(__name__)

ResponseHook = Callable[[requests.Response], None]

OUTPUT_FORMAT_HEADER = "Output-Format"


def format_request_headers(prepared: requests.PreparedRequest) -> str:
    lines = [f"{prepared.method} {prepared.path_url} HTTP/1.1"]
    lines.extend(f"{name}: {value}" for name, value in prepared.headers.items())
    return "\r\n".join(lines)


def raw_response_text(response: requests.Response) -> str:
    status_line = f"HTTP/1.1 {response.status_code} {response.reason or ''}".rstrip()
    lines = [status_line]
    lines.extend(f"{name}: {value}" for name, value in response.headers.items())
    return "\r\n".join(lines) + HEADER_SEPARATOR + decode_body(response)


def decode_body(response: requests.Response) -> str:
    """Decode with the declared charset, UTF-8 when the server names none."""
    content_type = response.headers.get("Content-Type", "")
    encoding = response.encoding if "charset" in content_type.lower() else None
    return response.content.decode(encoding or "utf-8", errors="replace")


@dataclass
class HttpClient:
    """Blocking transport: one request per call, HTTP Basic auth with the API key."""

    config: ClientConfig
    session: requests.Session | None = None
    after_response: ResponseHook | None = None

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()

    def send(
        self,
        method: str,
        url: str,
        *,
        data: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> ResponseEnvelope:
        if self.session is None:
            raise RuntimeError("HTTP session not initialized")
        normalized_method = method.upper()
        request_headers: dict[str, str] = {}
        if data is not None:
            request_headers["Content-Type"] = "text/xml; charset=utf-8"
        if headers:
            request_headers.update(headers)

        logger.debug("%s %s", normalized_method, url)
        try:
            response = self.session.request(
                method=normalized_method,
                url=url,
                headers=request_headers,
                data=data.encode("utf-8") if data is not None else None,
                auth=HTTPBasicAuth(self.config.api_key, ""),
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
                allow_redirects=False,
            )
        except requests.RequestException as exc:
            raise TransportError(
                code="TRANSPORT_ERROR",
                message=str(exc),
                details={"type": type(exc).__name__},
                status_code=0,
            ) from exc

        if self.after_response:
            self.after_response(response)
        logger.debug("%s %s -> %s", normalized_method, url, response.status_code)
        return ResponseEnvelope.from_raw(
            response.status_code,
            raw_response_text(response),
            normalized_method,
            request_headers=format_request_headers(response.request),
        )
