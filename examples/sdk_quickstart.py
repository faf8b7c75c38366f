"""Quickstart:
1) configure env (PRESTASHOP_BASE_URL, PRESTASHOP_API_KEY, optional PRESTASHOP_DEBUG)
2) fetch one product as JSON and wrap it
3) list products as XML with a filter
4) structured error handling
"""

from __future__ import annotations

from prestashop_client_sdk import (
    HttpStatusError,
    IncompatibleVersionError,
    Product,
    RequestOptions,
    Webservice,
    WebserviceError,
)


def main() -> None:
    ws = Webservice.from_env()

    try:
        body = ws.get({"resource": "products", "id": 1})
    except IncompatibleVersionError as exc:
        print(f"Unsupported shop version {ws.version}: {exc.message}")
        return
    except HttpStatusError as exc:
        print(f"Request failed [{exc.status_code}] {exc.reason}")
        return

    product = Product.from_json(body)
    print(f"product id={product.get_id()} name={product.get_name()} price={product.get_price()}")

    listing = ws.get(
        RequestOptions.for_resource(
            "products",
            filters={"active": "1"},
            display="[id,name]",
            limit="0,5",
            output_format="xml",
        )
    )
    for node in listing.iter("product"):
        print(f"- {node.findtext('id')}")

    try:
        ws.delete({"resource": "products", "id": 999999})
    except WebserviceError as exc:
        print(f"delete failed: {exc}")


if __name__ == "__main__":
    main()
