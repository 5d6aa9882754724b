# tests/test_api.py
"""
End-to-end tests for the catalog routes: entity graphs loaded from the
seeded database, rendered in the negotiated convention.
"""
from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import build_app
from models.hateoas import LinkTemplates
from services.negotiation import Convention
from services.traversal import HypermediaClient, list_relations

HAL = "application/hal+json"
JSON_GRAPH = "application/vnd.api+json"


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


def test_order_defaults_to_hal(client: TestClient) -> None:
    resp = client.get("/orders/1")

    assert resp.status_code == 200
    assert resp.headers["content-type"] == HAL
    assert resp.headers["etag"]
    body = resp.json()
    assert body["status"] == "placed"
    assert body["total"] == 42
    assert body["_links"] == {
        "self": {"href": "/orders/1"},
        "customer": {"href": "/orders/1/customer"},
        "items": {"href": "/orders/1/items"},
    }
    assert "_embedded" not in body


def test_order_as_json_graph(client: TestClient) -> None:
    resp = client.get("/orders/1", headers={"Accept": JSON_GRAPH})

    assert resp.status_code == 200
    assert resp.headers["content-type"] == JSON_GRAPH
    body = resp.json()
    assert body["data"]["type"] == "order"
    assert body["data"]["id"] == "1"
    assert body["relationships"]["customer"]["data"] == {"type": "customer", "id": "7"}
    assert body["relationships"]["items"] == {
        "links": {"related": "/orders/1/items"},
        "data": [{"type": "item", "id": "3"}, {"type": "item", "id": "5"}],
    }
    assert "included" not in body


def test_include_embeds_related_resources(client: TestClient) -> None:
    resp = client.get("/orders/1", params={"include": "items,customer"}, headers={"Accept": JSON_GRAPH})

    included = resp.json()["included"]
    assert [(r["type"], r["id"]) for r in included] == [("customer", "7"), ("item", "3"), ("item", "5")]
    assert included[2]["attributes"] == {"sku": "MATE-33", "qty": 2, "price": 15}


def test_hal_embedded_items_link_back(client: TestClient) -> None:
    body = client.get("/orders/1", params={"include": "items"}).json()

    items = body["_embedded"]["items"]
    assert [i["sku"] for i in items] == ["MATE-05", "MATE-33"]
    assert items[0]["_links"] == {
        "self": {"href": "/items/3"},
        "order": {"href": "/items/3/order"},
    }
    assert "_embedded" not in items[0]


def test_order_without_customer(client: TestClient) -> None:
    body = client.get("/orders/3", params={"include": "customer"}).json()

    assert body["_links"]["customer"] == {"href": "/orders/3/customer"}
    assert body["_embedded"]["customer"] is None
    assert client.get("/orders/3/customer").status_code == 404


def test_conditional_get(client: TestClient) -> None:
    first = client.get("/orders/1")

    second = client.get("/orders/1", headers={"If-None-Match": first.headers["etag"]})

    assert second.status_code == 304
    assert second.headers["etag"] == first.headers["etag"]


def test_etag_differs_per_convention(client: TestClient) -> None:
    hal = client.get("/orders/1", headers={"Accept": HAL})
    graph = client.get("/orders/1", headers={"Accept": JSON_GRAPH})

    assert hal.headers["etag"] != graph.headers["etag"]
    assert hal.content == client.get("/orders/1", headers={"Accept": HAL}).content


def test_unsupported_media_type(client: TestClient) -> None:
    resp = client.get("/orders/1", headers={"Accept": "text/html"})

    assert resp.status_code == 406
    assert resp.json()["supported"] == [HAL, JSON_GRAPH]


def test_missing_order(client: TestClient) -> None:
    resp = client.get("/orders/999")

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Order not found"


def test_order_collection(client: TestClient) -> None:
    resp = client.get("/orders", follow_redirects=False)
    body = resp.json()

    assert resp.status_code == 200
    assert body["count"] == 3
    assert body["_links"]["self"] == {"href": "/orders"}
    assert [o["_links"]["self"]["href"] for o in body["_embedded"]["orders"]] == [
        "/orders/1",
        "/orders/2",
        "/orders/3",
    ]


def test_order_items_collection(client: TestClient) -> None:
    body = client.get("/orders/1/items", headers={"Accept": JSON_GRAPH}).json()

    assert body["links"] == {"self": "/orders/1/items"}
    assert [(r["type"], r["id"]) for r in body["data"]] == [("item", "3"), ("item", "5")]
    assert body["data"][0]["relationships"]["order"]["data"] == {"type": "order", "id": "1"}


def test_order_items_collection_includes_their_order(client: TestClient) -> None:
    graph = client.get("/orders/1/items?include=order", headers={"Accept": JSON_GRAPH}).json()
    hal = client.get("/orders/1/items", params={"include": "order"}).json()

    assert [(r["type"], r["id"]) for r in graph["included"]] == [("order", "1")]
    assert graph["included"][0]["attributes"]["status"] == "placed"
    assert [i["_embedded"]["order"]["_links"]["self"]["href"] for i in hal["_embedded"]["items"]] == [
        "/orders/1",
        "/orders/1",
    ]


def test_customer_and_orders(client: TestClient) -> None:
    customer = client.get("/customers/7").json()
    orders = client.get("/customers/7/orders", headers={"Accept": JSON_GRAPH}).json()

    assert customer["name"] == "Ada Lovelace"
    assert customer["_links"]["orders"] == {"href": "/customers/7/orders"}
    assert [r["id"] for r in orders["data"]] == ["1", "2"]
    assert client.get("/customers/99").status_code == 404


def test_item_and_its_order(client: TestClient) -> None:
    item = client.get("/items/5", params={"include": "order"}).json()
    order = client.get("/items/5/order").json()

    assert item["qty"] == 2
    assert item["_embedded"]["order"]["_links"]["self"] == {"href": "/orders/1"}
    assert order["_links"]["self"] == {"href": "/orders/1"}


def test_incomplete_routing_table_is_a_server_error(session_factory) -> None:
    templates = LinkTemplates(templates={"order": {"self": "/orders/{id}"}})
    app = build_app(session_factory, link_templates=templates)

    with TestClient(app) as client:
        resp = client.get("/orders/1")

    assert resp.status_code == 500
    assert "customer" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_generic_client_discovers_the_api(app) -> None:
    client = HypermediaClient(
        base_url="http://catalog",
        convention=Convention.JSON_GRAPH,
        transport=httpx.ASGITransport(app=app),
    )

    listing = await client.get("/orders")
    order = await client.get("/orders/1")
    orders = await client.follow("/orders/1", "customer", "orders")

    assert [r["id"] for r in listing["data"]] == ["1", "2", "3"]
    assert list_relations(order) == ["customer", "items"]
    assert [r["id"] for r in orders["data"]] == ["1", "2"]
