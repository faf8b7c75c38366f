from __future__ import annotations

import base64
from urllib.parse import unquote
from xml.etree import ElementTree

import pytest
import requests
import responses

from prestashop_client_sdk import RequestOptions, Webservice
from prestashop_client_sdk.config import ClientConfig
from prestashop_client_sdk.exceptions import (
    BadParametersError,
    EmptyResponseError,
    HttpStatusError,
    IncompatibleVersionError,
    TransportError,
    UnexpectedHttpStatusError,
    UnparsableXmlError,
)

BASE_URL = "https://shop.example.com"
API_KEY = "ZQ88PRJX5VWQHCWE4EE7SQ7HPNX00RAJ"

PRODUCT_XML = """<?xml version="1.0" encoding="UTF-8"?>
<prestashop xmlns:xlink="http://www.w3.org/1999/xlink">
<product>
  <id><![CDATA[7]]></id>
  <price><![CDATA[19.990000]]></price>
</product>
</prestashop>"""


def _client(debug: bool = False, sink=None) -> Webservice:
    return Webservice(ClientConfig(base_url=BASE_URL, api_key=API_KEY, debug=debug), debug_sink=sink)


def _sent_url(index: int = 0) -> str:
    return unquote(responses.calls[index].request.url)


@responses.activate
def test_get_builds_resource_url_with_query() -> None:
    responses.add(responses.GET, f"{BASE_URL}/api/customers/5", body='{"customer": {}}', status=200)

    body = _client().get({"resource": "customers", "id": 5, "filter[name]": "x", "display": "full"})

    assert body == '{"customer": {}}'
    assert _sent_url() == f"{BASE_URL}/api/customers/5?filter[name]=x&display=full"


@responses.activate
def test_get_sends_basic_auth_and_default_output_format() -> None:
    responses.add(responses.GET, f"{BASE_URL}/api/orders/1", body="{}", status=200)

    _client().get(RequestOptions.for_resource("orders", 1))

    request = responses.calls[0].request
    expected = base64.b64encode(f"{API_KEY}:".encode()).decode()
    assert request.headers["Authorization"] == f"Basic {expected}"
    assert request.headers["Output-Format"] == "JSON"


@responses.activate
def test_get_forwards_explicit_output_format_and_shop_scope() -> None:
    responses.add(responses.GET, f"{BASE_URL}/api/products", body=PRODUCT_XML, status=200)

    _client().get(
        {
            "resource": "products",
            "display": "[id,price]",
            "limit": "0,10",
            "id_shop": 2,
            "output_format": "xml",
        }
    )

    assert _sent_url() == f"{BASE_URL}/api/products?display=[id,price]&limit=0,10&id_shop=2&output_format=xml"


@responses.activate
def test_get_with_explicit_url() -> None:
    url = f"{BASE_URL}/api/orders/3?display=full"
    responses.add(responses.GET, f"{BASE_URL}/api/orders/3", body="{}", status=200)

    _client().get({"url": url, "resource": "ignored"})

    assert _sent_url() == url


@responses.activate
def test_get_xml_returns_element() -> None:
    responses.add(responses.GET, f"{BASE_URL}/api/products/7", body=PRODUCT_XML, status=200)

    root = _client().get(RequestOptions.for_resource("products", 7, output_format="xml"))

    assert isinstance(root, ElementTree.Element)
    assert root.find("product/id").text == "7"


@responses.activate
def test_get_unparsable_xml() -> None:
    responses.add(responses.GET, f"{BASE_URL}/api/products/7", body="<prestashop><product>", status=200)

    with pytest.raises(UnparsableXmlError):
        _client().get({"resource": "products", "id": 7, "output_format": "xml"})


@pytest.mark.parametrize(
    "options",
    [
        {},
        {"id": 1},
        {"display": "full", "postXml": "<x/>", "putXml": "<x/>"},
    ],
)
@responses.activate
def test_missing_target_never_hits_network(options: dict) -> None:
    client = _client()
    for operation in (client.get, client.add, client.edit, client.head, client.delete):
        with pytest.raises(BadParametersError):
            operation(options)
    assert len(responses.calls) == 0


@pytest.mark.parametrize("status", [200, 201])
@responses.activate
def test_success_statuses_return_body(status: int) -> None:
    responses.add(responses.GET, f"{BASE_URL}/api/orders/1", body='{"order": {}}', status=status)

    assert _client().get({"resource": "orders", "id": 1}) == '{"order": {}}'


@pytest.mark.parametrize(
    ("status", "reason"),
    [
        (204, "No Content"),
        (400, "Bad Request"),
        (401, "Unauthorized"),
        (404, "Not Found"),
        (405, "Method Not Allowed"),
        (500, "Internal Server Error"),
    ],
)
@responses.activate
def test_failure_statuses_raise_http_status(status: int, reason: str) -> None:
    responses.add(responses.GET, f"{BASE_URL}/api/orders/1", body="{}", status=status)

    with pytest.raises(HttpStatusError) as excinfo:
        _client().get({"resource": "orders", "id": 1})

    assert excinfo.value.status_code == status
    assert excinfo.value.reason == reason


@responses.activate
def test_other_status_raises_unexpected() -> None:
    responses.add(responses.GET, f"{BASE_URL}/api/orders/1", body="{}", status=403)

    with pytest.raises(UnexpectedHttpStatusError) as excinfo:
        _client().get({"resource": "orders", "id": 1})

    assert excinfo.value.status_code == 403


@responses.activate
def test_redirect_is_not_followed() -> None:
    responses.add(
        responses.POST,
        f"{BASE_URL}/api/products",
        status=301,
        headers={"Location": f"{BASE_URL}/shop/api/products"},
    )
    responses.add(responses.GET, f"{BASE_URL}/shop/api/products", body='{"products": []}', status=200)

    with pytest.raises(UnexpectedHttpStatusError) as excinfo:
        _client().add({"resource": "products", "postXml": "<prestashop/>"})

    assert excinfo.value.status_code == 301
    assert [call.request.method for call in responses.calls] == ["POST"]


@responses.activate
def test_found_redirect_on_get_raises() -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/api/orders/1",
        status=302,
        headers={"Location": f"{BASE_URL}/login"},
    )

    with pytest.raises(UnexpectedHttpStatusError) as excinfo:
        _client().get({"resource": "orders", "id": 1})

    assert excinfo.value.status_code == 302
    assert len(responses.calls) == 1


@pytest.mark.parametrize("version", ["1.3.0.0", "1.8.0.0"])
@responses.activate
def test_incompatible_server_version(version: str) -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/api/orders/1",
        body="{}",
        status=200,
        headers={"PSWS-Version": version},
    )
    client = _client()

    with pytest.raises(IncompatibleVersionError):
        client.get({"resource": "orders", "id": 1})
    assert client.version == version


@responses.activate
def test_version_checked_before_status() -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/api/orders/1",
        body="",
        status=500,
        headers={"PSWS-Version": "1.8.0.0"},
    )

    with pytest.raises(IncompatibleVersionError):
        _client().get({"resource": "orders", "id": 1})


@responses.activate
def test_compatible_server_version_is_recorded() -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/api/orders/1",
        body="{}",
        status=200,
        headers={"PSWS-Version": "1.6.1.0"},
    )
    client = _client()
    assert client.get_version() == "unknown"

    assert client.get({"resource": "orders", "id": 1}) == "{}"
    assert client.version == "1.6.1.0"


@responses.activate
def test_transport_failure() -> None:
    responses.add(responses.GET, f"{BASE_URL}/api/orders/1", body=requests.ConnectionError("connection refused"))

    with pytest.raises(TransportError) as excinfo:
        _client().get({"resource": "orders", "id": 1})

    assert excinfo.value.status_code == 0
    assert "connection refused" in excinfo.value.message


@responses.activate
def test_empty_body_on_get_add_edit() -> None:
    responses.add(responses.GET, f"{BASE_URL}/api/orders/1", body="", status=200)
    responses.add(responses.POST, f"{BASE_URL}/api/orders", body="", status=201)
    responses.add(responses.PUT, f"{BASE_URL}/api/orders/1", body="", status=200)
    client = _client()

    with pytest.raises(EmptyResponseError):
        client.get({"resource": "orders", "id": 1})
    with pytest.raises(EmptyResponseError):
        client.add({"resource": "orders", "postXml": "<prestashop/>"})
    with pytest.raises(EmptyResponseError):
        client.edit({"resource": "orders", "id": 1, "putXml": "<prestashop/>"})


@responses.activate
def test_add_posts_xml_with_shop_scope() -> None:
    responses.add(responses.POST, f"{BASE_URL}/api/products", body=PRODUCT_XML, status=201)

    result = _client().add(
        {"resource": "products", "postXml": "<prestashop><product/></prestashop>", "id_shop": 1, "id_group_shop": 2}
    )

    request = responses.calls[0].request
    assert _sent_url() == f"{BASE_URL}/api/products?id_shop=1&id_group_shop=2"
    assert request.body == b"<prestashop><product/></prestashop>"
    assert request.headers["Content-Type"].startswith("text/xml")
    assert result == PRODUCT_XML


@responses.activate
def test_add_to_explicit_url() -> None:
    responses.add(responses.POST, f"{BASE_URL}/api/products", body="{}", status=201)

    _client().add({"url": f"{BASE_URL}/api/products", "postXml": "<prestashop/>"})

    assert _sent_url() == f"{BASE_URL}/api/products"


def test_add_requires_payload() -> None:
    with pytest.raises(BadParametersError):
        _client().add({"resource": "products"})


@responses.activate
def test_edit_puts_xml() -> None:
    responses.add(responses.PUT, f"{BASE_URL}/api/products/7", body=PRODUCT_XML, status=200)

    root = _client().edit(
        RequestOptions.for_resource("products", 7, xml="<prestashop/>", output_format="xml")
    )

    assert responses.calls[0].request.method == "PUT"
    assert root.find("product/price").text == "19.990000"


def test_edit_requires_payload_and_id() -> None:
    client = _client()
    with pytest.raises(BadParametersError):
        client.edit({"resource": "products", "id": 7})
    with pytest.raises(BadParametersError):
        client.edit({"url": f"{BASE_URL}/api/products/7"})
    with pytest.raises(BadParametersError):
        client.edit({"resource": "products", "putXml": "<prestashop/>"})


@responses.activate
def test_delete_single_and_many() -> None:
    responses.add(responses.DELETE, f"{BASE_URL}/api/orders/1", body="", status=200)
    responses.add(responses.DELETE, f"{BASE_URL}/api/orders/", body="", status=200)
    client = _client()

    assert client.delete({"resource": "orders", "id": 1}) is True
    assert client.delete({"resource": "orders", "id": [1, 2, 3], "id_shop": 4}) is True

    assert _sent_url(0) == f"{BASE_URL}/api/orders/1"
    assert _sent_url(1) == f"{BASE_URL}/api/orders/?id=[1,2,3]&id_shop=4"


@responses.activate
def test_delete_failure_status() -> None:
    responses.add(responses.DELETE, f"{BASE_URL}/api/orders/1", body="", status=404)

    with pytest.raises(HttpStatusError):
        _client().delete({"resource": "orders", "id": 1})


def test_delete_requires_id() -> None:
    with pytest.raises(BadParametersError):
        _client().delete({"resource": "orders"})


@responses.activate
def test_id_list_rejected_outside_delete() -> None:
    client = _client()
    with pytest.raises(BadParametersError):
        client.get({"resource": "orders", "id": [1, 2]})
    with pytest.raises(BadParametersError):
        client.head(RequestOptions.for_resource("orders", [1, 2]))
    assert len(responses.calls) == 0


@responses.activate
def test_head_returns_raw_headers() -> None:
    responses.add(
        responses.HEAD,
        f"{BASE_URL}/api/products",
        status=200,
        headers={"PSWS-Version": "1.7.8.0"},
    )

    raw = _client().head({"resource": "products", "filter[id]": "1", "output_format": "xml", "id_shop": 1})

    assert "PSWS-Version: 1.7.8.0" in raw
    assert _sent_url() == f"{BASE_URL}/api/products?filter[id]=1"
    assert responses.calls[0].request.method == "HEAD"


@responses.activate
def test_debug_dump_emits_sections() -> None:
    responses.add(responses.PUT, f"{BASE_URL}/api/products/7", body="{}", status=200)
    responses.add(responses.DELETE, f"{BASE_URL}/api/products/7", body="", status=200)
    dumped: list[tuple[str, str]] = []
    client = _client(debug=True, sink=lambda title, content: dumped.append((title, content)))

    client.edit({"resource": "products", "id": 7, "putXml": "<prestashop/>"})
    titles = [title for title, _ in dumped]
    assert titles == ["HTTP REQUEST HEADER", "HTTP RESPONSE HEADER", "XML SENT", "RETURN HTTP BODY"]
    assert dumped[0][1].startswith("PUT /api/products/7 HTTP/1.1")
    assert dumped[2][1] == "<prestashop/>"

    dumped.clear()
    client.delete({"resource": "products", "id": 7})
    assert [title for title, _ in dumped] == ["HTTP REQUEST HEADER", "HTTP RESPONSE HEADER"]


@responses.activate
def test_debug_disabled_emits_nothing() -> None:
    responses.add(responses.GET, f"{BASE_URL}/api/orders/1", body="{}", status=200)
    dumped: list[tuple[str, str]] = []

    _client(sink=lambda title, content: dumped.append((title, content))).get({"resource": "orders", "id": 1})

    assert dumped == []


def test_constructors(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PRESTASHOP_BASE_URL", f"{BASE_URL}/")
    monkeypatch.setenv("PRESTASHOP_API_KEY", API_KEY)
    monkeypatch.setenv("PRESTASHOP_DEBUG", "1")

    from_env = Webservice.from_env()
    assert from_env.config.base_url == BASE_URL
    assert from_env.config.debug is True

    connected = Webservice.connect(f"{BASE_URL}/", API_KEY, read_timeout_seconds=30.0)
    assert connected.config.base_url == BASE_URL
    assert connected.config.timeout == (5.0, 30.0)
    assert connected.version == "unknown"

    config = ClientConfig(base_url=BASE_URL, api_key=API_KEY)
    assert Webservice.from_config(config).config is config
