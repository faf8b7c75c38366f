from __future__ import annotations

from typing import Any, Mapping, Union
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import BadParametersError

OUTPUT_FORMAT_JSON = "JSON"
OUTPUT_FORMAT_XML = "xml"

OPTION_URL = "url"
OPTION_RESOURCE = "resource"
OPTION_ID = "id"
OPTION_FILTER = "filter"
OPTION_DISPLAY = "display"
OPTION_SORT = "sort"
OPTION_LIMIT = "limit"
OPTION_ID_SHOP = "id_shop"
OPTION_ID_GROUP_SHOP = "id_group_shop"
OPTION_OUTPUT_FORMAT = "output_format"
OPTION_POST_XML = "postXml"
OPTION_PUT_XML = "putXml"

# Characters PrestaShop expects verbatim in filter/display/sort expressions.
QUERY_SAFE_CHARS = "[]|,"

Scalar = Union[int, str]


def _text(value: Scalar | None) -> str | None:
    return None if value is None else str(value)


class UrlTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str

    @field_validator("url")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("url must not be empty")
        return value


class ResourceTarget(BaseModel):
    """A resource path plus the listing parameters PrestaShop understands.

    ``filters`` maps a field name to its filter expression and is sent as
    ``filter[<field>]=<expression>`` in insertion order.
    """

    model_config = ConfigDict(frozen=True)

    resource: str
    id: Scalar | list[Scalar] | None = None
    filters: dict[str, str] = Field(default_factory=dict)
    display: str | None = None
    sort: str | None = None
    limit: Scalar | None = None

    @field_validator("resource")
    @classmethod
    def _clean_resource(cls, value: str) -> str:
        cleaned = value.strip().strip("/")
        if not cleaned:
            raise ValueError("resource must not be empty")
        return cleaned

    @property
    def has_single_id(self) -> bool:
        return self.id is not None and not isinstance(self.id, list)

    def path(self, base_url: str) -> str:
        url = f"{base_url.rstrip('/')}/api/{self.resource}"
        if self.has_single_id:
            url += f"/{self.id}"
        return url

    def listing_params(self) -> list[tuple[str, str]]:
        params = [(f"{OPTION_FILTER}[{field}]", str(value)) for field, value in self.filters.items()]
        for name, value in (
            (OPTION_DISPLAY, self.display),
            (OPTION_SORT, self.sort),
            (OPTION_LIMIT, _text(self.limit)),
        ):
            if value is not None:
                params.append((name, value))
        return params


Target = Union[UrlTarget, ResourceTarget]


class RequestOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    target: Target
    id_shop: Scalar | None = None
    id_group_shop: Scalar | None = None
    output_format: str | None = None
    xml: str | None = None

    @field_validator("output_format")
    @classmethod
    def _known_format(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if value.upper() == OUTPUT_FORMAT_JSON:
            return OUTPUT_FORMAT_JSON
        if value.lower() == OUTPUT_FORMAT_XML:
            return OUTPUT_FORMAT_XML
        raise ValueError(f"output_format must be {OUTPUT_FORMAT_JSON} or {OUTPUT_FORMAT_XML}, got {value!r}")

    @property
    def resolved_format(self) -> str:
        return self.output_format or OUTPUT_FORMAT_JSON

    def shop_params(self) -> list[tuple[str, str]]:
        params = []
        if self.id_shop is not None:
            params.append((OPTION_ID_SHOP, str(self.id_shop)))
        if self.id_group_shop is not None:
            params.append((OPTION_ID_GROUP_SHOP, str(self.id_group_shop)))
        return params

    @classmethod
    def for_url(cls, url: str, **kwargs: Any) -> "RequestOptions":
        return cls(target=UrlTarget(url=url), **kwargs)

    @classmethod
    def for_resource(
        cls,
        resource: str,
        id: Scalar | list[Scalar] | None = None,
        *,
        filters: Mapping[str, str] | None = None,
        display: str | None = None,
        sort: str | None = None,
        limit: Scalar | None = None,
        **kwargs: Any,
    ) -> "RequestOptions":
        target = ResourceTarget(
            resource=resource,
            id=id,
            filters={str(field): str(expr) for field, expr in (filters or {}).items()},
            display=display,
            sort=sort,
            limit=limit,
        )
        return cls(target=target, **kwargs)

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any], payload_key: str | None = None) -> "RequestOptions":
        """Build options from a flat key/value option map.

        Recognized keys: ``url``, ``resource``, ``id``, ``filter[<field>]``,
        ``display``, ``sort``, ``limit``, ``id_shop``, ``id_group_shop``,
        ``output_format`` and the payload under ``payload_key``
        (``postXml`` or ``putXml``). Other keys are ignored.
        """
        filters: dict[str, str] = {}
        for key, value in options.items():
            if key.startswith(f"{OPTION_FILTER}[") and key.endswith("]"):
                filters[key[len(OPTION_FILTER) + 1:-1]] = str(value)
            elif key == OPTION_FILTER and isinstance(value, Mapping):
                filters.update({str(field): str(expr) for field, expr in value.items()})

        try:
            if options.get(OPTION_URL):
                target: Target = UrlTarget(url=options[OPTION_URL])
            elif options.get(OPTION_RESOURCE):
                target = ResourceTarget(
                    resource=options[OPTION_RESOURCE],
                    id=options.get(OPTION_ID),
                    filters=filters,
                    display=_text(options.get(OPTION_DISPLAY)),
                    sort=_text(options.get(OPTION_SORT)),
                    limit=options.get(OPTION_LIMIT),
                )
            else:
                raise BadParametersError(
                    code="BAD_PARAMETERS",
                    message=f"Bad parameters given: either '{OPTION_URL}' or '{OPTION_RESOURCE}' is required",
                )
            return cls(
                target=target,
                id_shop=options.get(OPTION_ID_SHOP),
                id_group_shop=options.get(OPTION_ID_GROUP_SHOP),
                output_format=options.get(OPTION_OUTPUT_FORMAT),
                xml=options.get(payload_key) if payload_key else None,
            )
        except ValidationError as exc:
            raise BadParametersError(
                code="BAD_PARAMETERS",
                message=f"Bad parameters given: {exc.error_count()} invalid option(s)",
                details=exc.errors(include_url=False),
            ) from exc


def coerce_options(options: RequestOptions | Mapping[str, Any], payload_key: str | None = None) -> RequestOptions:
    if isinstance(options, RequestOptions):
        return options
    return RequestOptions.from_mapping(options, payload_key=payload_key)


def encode_query(params: list[tuple[str, str]]) -> str:
    return urlencode(params, safe=QUERY_SAFE_CHARS)


def append_query(url: str, params: list[tuple[str, str]]) -> str:
    if not params:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{encode_query(params)}"
