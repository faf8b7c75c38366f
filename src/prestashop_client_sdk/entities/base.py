from __future__ import annotations

import json
import re
from types import MappingProxyType
from typing import Any, Iterator, Mapping
from xml.etree import ElementTree

from ..exceptions import AttributeNotFoundError, UnexpectedPayloadError
from ..xml_utils import element_to_dict, unwrap_resource

_LEADING_INT = re.compile(r"^\s*[+-]?\d+")


def loose_int(value: Any) -> int:
    """Integer prefix of ``value``; ``"19.99"`` gives 19, anything non-numeric gives 0."""
    if value is None or isinstance(value, bool):
        return int(bool(value))
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    match = _LEADING_INT.match(str(value))
    return int(match.group()) if match else 0


class Entity:
    """Read-only attribute holder built from a parsed resource."""

    resource: str | None = None

    def __init__(self, attributes: Mapping[str, Any]) -> None:
        self._attributes = MappingProxyType(dict(attributes))

    @classmethod
    def from_json(cls, payload: str | Mapping[str, Any], resource: str | None = None):
        data = json.loads(payload) if isinstance(payload, str) else payload
        if not isinstance(data, Mapping):
            raise UnexpectedPayloadError(
                code="UNEXPECTED_PAYLOAD",
                message=f"Expected a JSON object, got {type(data).__name__}",
                details={"payload": data},
            )
        key = resource or cls.resource
        if key and isinstance(data.get(key), Mapping):
            data = data[key]
        return cls(data)

    @classmethod
    def from_xml(cls, element: ElementTree.Element):
        return cls(element_to_dict(unwrap_resource(element)))

    def get_raw(self, name: str) -> Any:
        try:
            return self._attributes[name]
        except KeyError:
            raise AttributeNotFoundError(
                code="ATTRIBUTE_NOT_FOUND",
                message=f"The attribute doesn't exist: {name}",
                attribute=name,
            ) from None

    def get(self, name: str) -> Any:
        return self.get_raw(name)

    def __getitem__(self, name: str) -> Any:
        return self.get_raw(name)

    def __contains__(self, name: object) -> bool:
        return name in self._attributes

    def __iter__(self) -> Iterator[str]:
        return iter(self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def keys(self):
        return self._attributes.keys()

    def to_dict(self) -> dict[str, Any]:
        return dict(self._attributes)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self._attributes)!r})"
