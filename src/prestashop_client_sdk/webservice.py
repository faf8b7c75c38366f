from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union
from xml.etree import ElementTree

from .config import ClientConfig, load_config
from .diagnostics import DebugDump, DebugSink
from .error_mapper import check_status_code
from .exceptions import BadParametersError, EmptyResponseError
from .http_client import OUTPUT_FORMAT_HEADER, HttpClient
from .options import (
    OPTION_POST_XML,
    OPTION_PUT_XML,
    OUTPUT_FORMAT_JSON,
    RequestOptions,
    ResourceTarget,
    UrlTarget,
    append_query,
    coerce_options,
)
from .response import ResponseEnvelope
from .versioning import UNKNOWN_VERSION, ensure_compatible
from .xml_utils import parse_xml

Options = Union[RequestOptions, Mapping[str, Any]]
ParsedResponse = Union[str, ElementTree.Element]


def _bad_parameters(message: str) -> BadParametersError:
    return BadParametersError(code="BAD_PARAMETERS", message=f"Bad parameters given: {message}")


@dataclass
class Webservice:
    """Client for the PrestaShop Webservice API.

    Every operation takes either a :class:`RequestOptions` or the equivalent
    flat option mapping, performs a single blocking HTTP round trip and
    raises a :class:`WebserviceError` subclass on failure.

    Instances are not thread-safe; the detected server version is updated by
    each response carrying a ``PSWS-Version`` header.
    """

    config: ClientConfig
    http: HttpClient | None = None
    debug_sink: DebugSink | None = None
    _version: str = field(default=UNKNOWN_VERSION, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.http is None:
            self.http = HttpClient(self.config)
        self._debug = DebugDump(self.config.debug, self.debug_sink)

    @classmethod
    def connect(cls, base_url: str, api_key: str, debug: bool = False, **kwargs: Any) -> "Webservice":
        config = ClientConfig(base_url=base_url.rstrip("/"), api_key=api_key, debug=debug, **kwargs)
        return cls(config)

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any) -> "Webservice":
        return cls(config, **kwargs)

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "Webservice":
        return cls(load_config(env_file))

    @property
    def version(self) -> str:
        return self._version

    def get_version(self) -> str:
        return self._version

    # ------------- Operations -------------

    def get(self, options: Options) -> ParsedResponse:
        """Retrieve a resource or a listing.

        ``RequestOptions.for_resource("orders", 1)`` or ``{"resource": "orders", "id": 1}``
        fetch one order; a ``url`` option is requested as given.
        """
        opts = coerce_options(options)
        target = opts.target
        if isinstance(target, UrlTarget):
            url = target.url
        else:
            self._reject_id_list(target)
            params = target.listing_params() + opts.shop_params()
            if opts.output_format is not None:
                params.append(("output_format", opts.output_format))
            url = append_query(target.path(self.config.base_url), params)

        response = self._execute("GET", url, output_format=opts.resolved_format)
        check_status_code(response.status_code)
        return self.parse_response(response.body, opts.resolved_format)

    def head(self, options: Options) -> str:
        """Send a HEAD request and return the raw response header block."""
        opts = coerce_options(options)
        target = opts.target
        if isinstance(target, UrlTarget):
            url = target.url
        else:
            self._reject_id_list(target)
            url = append_query(target.path(self.config.base_url), target.listing_params())

        response = self._execute("HEAD", url, output_format=opts.resolved_format)
        check_status_code(response.status_code)
        return response.raw_headers

    def add(self, options: Options) -> ParsedResponse:
        """Create a resource from the ``postXml`` payload."""
        opts = coerce_options(options, payload_key=OPTION_POST_XML)
        if not opts.xml:
            raise _bad_parameters(f"'{OPTION_POST_XML}' is required")
        target = opts.target
        if isinstance(target, UrlTarget):
            url = target.url
        else:
            url = f"{self.config.base_url.rstrip('/')}/api/{target.resource}"
        url = append_query(url, opts.shop_params())

        response = self._execute("POST", url, data=opts.xml, output_format=opts.resolved_format)
        check_status_code(response.status_code)
        return self.parse_response(response.body, opts.resolved_format)

    def edit(self, options: Options) -> ParsedResponse:
        """Replace a resource with the ``putXml`` payload."""
        opts = coerce_options(options, payload_key=OPTION_PUT_XML)
        if not opts.xml:
            raise _bad_parameters(f"'{OPTION_PUT_XML}' is required")
        url = append_query(self._single_resource_url(opts.target), opts.shop_params())

        response = self._execute("PUT", url, data=opts.xml, output_format=opts.resolved_format)
        check_status_code(response.status_code)
        return self.parse_response(response.body, opts.resolved_format)

    def delete(self, options: Options) -> bool:
        """Delete one resource, or several when ``id`` is a list."""
        opts = coerce_options(options)
        target = opts.target
        if isinstance(target, ResourceTarget) and isinstance(target.id, list):
            ids = ",".join(str(item) for item in target.id)
            url = f"{self.config.base_url.rstrip('/')}/api/{target.resource}/?id=[{ids}]"
        else:
            url = self._single_resource_url(target)
        url = append_query(url, opts.shop_params())

        response = self._execute("DELETE", url)
        check_status_code(response.status_code)
        return True

    # ------------- Helpers -------------

    def parse_response(self, body: str, output_format: str = OUTPUT_FORMAT_JSON) -> ParsedResponse:
        if body == "":
            raise EmptyResponseError(code="EMPTY_RESPONSE", message="HTTP response is empty")
        if output_format == OUTPUT_FORMAT_JSON:
            return body
        return parse_xml(body)

    @staticmethod
    def _reject_id_list(target: ResourceTarget) -> None:
        # A list of ids is only meaningful for delete.
        if isinstance(target.id, list):
            raise _bad_parameters(f"a list of ids is only accepted by delete, got {target.id!r}")

    def _single_resource_url(self, target: UrlTarget | ResourceTarget) -> str:
        if isinstance(target, UrlTarget):
            return target.url
        if not target.has_single_id:
            raise _bad_parameters(f"'resource' and a single 'id' are required for {target.resource}")
        return target.path(self.config.base_url)

    def _execute(
        self,
        method: str,
        url: str,
        *,
        data: str | None = None,
        output_format: str | None = None,
    ) -> ResponseEnvelope:
        if self.http is None:
            raise RuntimeError("HTTP client not initialized")
        headers = {OUTPUT_FORMAT_HEADER: output_format} if output_format else None
        response = self.http.send(method, url, data=data, headers=headers)

        if response.version is not None:
            self._version = response.version
            ensure_compatible(response.version)

        self._debug.emit("HTTP REQUEST HEADER", response.request_headers)
        self._debug.emit("HTTP RESPONSE HEADER", response.raw_headers)
        if method in {"POST", "PUT"} and data is not None:
            self._debug.emit("XML SENT", data)
        if method not in {"DELETE", "HEAD"}:
            self._debug.emit("RETURN HTTP BODY", response.body)
        return response
