from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from config.settings import settings
from models.hateoas import LinkTemplates
from services.links import LinkResolver, load_link_templates
from utils.errors import UnresolvedRelation


def test_resolves_self_and_relation_templates(resolver: LinkResolver) -> None:
    assert resolver.resolve("order", 1, "self") == "/orders/1"
    assert resolver.resolve("order", "1", "items") == "/orders/1/items"
    assert resolver.resolve("item", "abc-9", "order") == "/items/abc-9/order"


def test_resolution_is_deterministic(resolver: LinkResolver) -> None:
    first = resolver.resolve("customer", 7, "orders")
    assert all(resolver.resolve("customer", 7, "orders") == first for _ in range(5))


def test_missing_relation_raises(resolver: LinkResolver) -> None:
    with pytest.raises(UnresolvedRelation) as exc:
        resolver.resolve("order", 1, "invoices")

    assert exc.value.entity_type == "order"
    assert exc.value.rel == "invoices"


def test_missing_entity_type_raises(resolver: LinkResolver) -> None:
    with pytest.raises(UnresolvedRelation):
        resolver.resolve("warehouse", 1, "self")


def test_has_and_relations(resolver: LinkResolver) -> None:
    assert resolver.has("order", "items")
    assert not resolver.has("order", "invoices")
    assert resolver.relations("customer") == ["self", "orders"]
    assert resolver.relations("warehouse") == []


@pytest.mark.parametrize("pattern", ["/orders", "/orders/{id}/{id}", "/orders/{ID}"])
def test_templates_require_single_id_placeholder(pattern: str) -> None:
    with pytest.raises(ValidationError):
        LinkTemplates(templates={"order": {"self": pattern}})


def test_templates_are_immutable(templates: LinkTemplates) -> None:
    with pytest.raises(ValidationError):
        templates.templates = {}


def test_nested_templates_are_read_only(templates: LinkTemplates, resolver: LinkResolver) -> None:
    with pytest.raises(TypeError):
        templates.templates["order"]["self"] = "/hijacked/{id}"
    with pytest.raises(TypeError):
        templates.templates["warehouse"] = {"self": "/warehouses/{id}"}

    assert resolver.resolve("order", 1, "self") == "/orders/1"


def test_templates_copy_their_input() -> None:
    data = {"order": {"self": "/orders/{id}"}}
    resolver = LinkResolver(LinkTemplates(templates=data))

    data["order"]["self"] = "/hijacked/{id}"

    assert resolver.resolve("order", 1, "self") == "/orders/1"


def test_default_templates_are_read_only() -> None:
    with pytest.raises(TypeError):
        LinkTemplates().templates["order"] = {"self": "/orders/{id}"}


def test_load_link_templates_from_file(tmp_path) -> None:
    path = tmp_path / "links.json"
    path.write_text(json.dumps({"book": {"self": "/books/{id}", "author": "/books/{id}/author"}}))

    resolver = LinkResolver(load_link_templates(path))

    assert resolver.resolve("book", 12, "author") == "/books/12/author"


def test_bundled_templates_cover_catalog() -> None:
    resolver = LinkResolver(load_link_templates(settings.LINK_TEMPLATES_FILE))

    assert resolver.resolve("order", 1, "items") == "/orders/1/items"
    assert resolver.resolve("order", 1, "customer") == "/orders/1/customer"
    assert resolver.resolve("customer", 7, "orders") == "/customers/7/orders"
    assert resolver.resolve("item", 5, "order") == "/items/5/order"
