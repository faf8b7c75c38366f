"""XML helpers for webservice payloads.

PrestaShop wraps every resource in a ``<prestashop>`` root element and writes
localized fields as ``<language id="N">`` children. ``element_to_dict``
flattens that into the same shape the JSON output format uses.
"""

from __future__ import annotations

from typing import Any
from xml.etree import ElementTree

from .exceptions import UnparsableXmlError

LANGUAGE_TAG = "language"


def parse_xml(text: str) -> ElementTree.Element:
    try:
        return ElementTree.fromstring(text)
    except ElementTree.ParseError as exc:
        raise UnparsableXmlError(
            code="UNPARSABLE_XML",
            message=f"HTTP XML response is not parsable: {exc}",
            details=str(exc),
        ) from exc


def local_tag(tag: str) -> str:
    return tag.split("}", 1)[1] if tag.startswith("{") else tag


def _text(elem: ElementTree.Element) -> str:
    return (elem.text or "").strip()


def _is_localized(elem: ElementTree.Element) -> bool:
    children = list(elem)
    return bool(children) and all(local_tag(child.tag) == LANGUAGE_TAG for child in children)


def element_to_value(elem: ElementTree.Element) -> Any:
    children = list(elem)
    if not children:
        return _text(elem)
    if _is_localized(elem):
        return [{**child.attrib, "value": _text(child)} for child in children]
    return element_to_dict(elem)


def element_to_dict(elem: ElementTree.Element) -> dict[str, Any]:
    """Convert the children of ``elem`` to a dict; repeated tags become lists."""
    result: dict[str, Any] = {}
    for child in elem:
        tag = local_tag(child.tag)
        value = element_to_value(child)
        if tag in result:
            if not isinstance(result[tag], list):
                result[tag] = [result[tag]]
            result[tag].append(value)
        else:
            result[tag] = value
    return result


def unwrap_resource(root: ElementTree.Element) -> ElementTree.Element:
    """Return the single resource element under a ``<prestashop>`` root."""
    if local_tag(root.tag) == "prestashop":
        children = list(root)
        if len(children) == 1:
            return children[0]
    return root
