from __future__ import annotations

from dataclasses import dataclass, field

from .exceptions import MalformedResponseError
from .versioning import VERSION_HEADER

HEADER_SEPARATOR = "\r\n\r\n"


def parse_headers(raw_headers: str) -> dict[str, str]:
    """Parse a raw header block into a name -> value mapping.

    Lines that do not split into exactly two parts on ``:`` are dropped,
    which also drops the status line and values that contain colons.
    """
    headers: dict[str, str] = {}
    for line in raw_headers.split("\n"):
        parts = [part.strip() for part in line.split(":")]
        if len(parts) == 2:
            headers[parts[0]] = parts[1]
    return headers


def split_response(raw: str, method: str) -> tuple[str, str]:
    index = raw.find(HEADER_SEPARATOR)
    if index == -1:
        if method.upper() != "HEAD":
            raise MalformedResponseError(code="BAD_HTTP_RESPONSE", message="Bad HTTP response")
        return raw, ""
    return raw[:index], raw[index + len(HEADER_SEPARATOR):]


@dataclass(frozen=True)
class ResponseEnvelope:
    status_code: int
    body: str
    raw_headers: str
    headers: dict[str, str] = field(default_factory=dict)
    request_headers: str = ""

    @classmethod
    def from_raw(
        cls,
        status_code: int,
        raw: str,
        method: str,
        request_headers: str = "",
    ) -> "ResponseEnvelope":
        raw_headers, body = split_response(raw, method)
        return cls(
            status_code=status_code,
            body=body,
            raw_headers=raw_headers,
            headers=parse_headers(raw_headers),
            request_headers=request_headers,
        )

    @property
    def version(self) -> str | None:
        for name, value in self.headers.items():
            if name.lower() == VERSION_HEADER.lower():
                return value
        return None
