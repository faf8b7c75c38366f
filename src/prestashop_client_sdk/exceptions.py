from __future__ import annotations

from dataclasses import dataclass


@dataclass
class WebserviceError(Exception):
    code: str
    message: str
    status_code: int = 0
    details: object | None = None

    def __str__(self) -> str:
        status = f"[{self.status_code}] " if self.status_code else ""
        return f"{status}{self.code}: {self.message}"


class BadParametersError(WebserviceError):
    """Options do not describe a valid request for the operation."""


class TransportError(WebserviceError):
    """Network/transport failure before an HTTP response was returned."""


class MalformedResponseError(WebserviceError):
    """Response headers could not be separated from the body."""


class IncompatibleVersionError(WebserviceError):
    """Server reported a PSWS-Version outside the supported window."""


@dataclass
class HttpStatusError(WebserviceError):
    reason: str = ""


class UnexpectedHttpStatusError(WebserviceError):
    pass


class UnparsableXmlError(WebserviceError):
    pass


class EmptyResponseError(WebserviceError):
    pass


@dataclass
class AttributeNotFoundError(WebserviceError):
    attribute: str = ""


class UnexpectedPayloadError(WebserviceError):
    """Payload does not hold a single resource object."""
