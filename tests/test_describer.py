from typing import Annotated, List, Optional

import pytest
from fastapi import Body, Depends, Header, Path, Query
from pydantic import BaseModel
from starlette.requests import Request

from routedoc.core.describer import HIDDEN, OperationDescriber, is_hidden
from routedoc.domain.errors import MetadataUnresolvable
from routedoc.domain.models import Operation
from routedoc.domain.routes import HandlerIdentity
from routedoc.metadata.annotations import api_operation, api_param


class Payload(BaseModel):
    name: str


class Item:
    pass


def _db() -> dict:
    return {}


@api_operation("Find items", notes="Paged", response_class="ItemPage")
@api_param("status", "Item status", allowable_values="open,closed")
@api_param("limit", "Page size", required=True)
def find_items(
    request: Request,
    shop_id: int,
    status: Optional[str] = None,
    limit: int = Query(20, description="Max rows"),
    db: dict = Depends(_db),
) -> List[Item]:
    return []


def create_item(shop_id: int, payload: Payload) -> Item:
    return Item()


def list_items(shop_id: int) -> List[Item]:
    return []


def no_annotations(shop_id, q=None):
    return None


def unresolvable(shop_id: "NoSuchType") -> None:  # noqa: F821
    return None


class Shop:
    @api_operation("Shop detail")
    def detail(self, shop_id: int) -> dict:
        return {}


def _describe(func, method="GET", pattern="/shops/{shop_id}/items"):
    return OperationDescriber().describe(HandlerIdentity.from_callable(func), method, pattern)


def test_explicit_metadata_is_used():
    op = _describe(find_items)
    assert op.http_method == "GET"
    assert op.summary == "Find items"
    assert op.notes == "Paged"
    assert op.nickname == "find_items"
    assert op.response_class == "ItemPage"


def test_parameters_from_signature_and_declarations():
    op = _describe(find_items)
    params = {p.name: p for p in op.parameters}

    # request / Depends are framework plumbing
    assert list(params) == ["shop_id", "status", "limit"]

    assert params["shop_id"].param_type == "path"
    assert params["shop_id"].required is True
    assert params["shop_id"].data_type == "int"

    assert params["status"].param_type == "query"
    assert params["status"].data_type == "str"
    assert params["status"].required is False
    assert params["status"].allowable_values.values == ["open", "closed"]

    assert params["limit"].description == "Page size"
    assert params["limit"].required is True


def test_body_parameter_and_response_from_annotation():
    op = _describe(create_item, method="post", pattern="/shops/{shop_id}/items")
    params = {p.name: p for p in op.parameters}

    assert op.http_method == "POST"
    assert params["payload"].param_type == "body"
    assert params["payload"].data_type == "payload"
    assert op.response_class == "item"


def test_list_response_keeps_element_name():
    assert _describe(list_items).response_class == "list<Item>"
    assert _describe(Shop().detail).response_class == "dict"


def test_missing_summary_is_none_not_hidden():
    op = _describe(create_item)
    assert op.summary is None
    assert not is_hidden(op)


def test_hidden_sentinel_only_matches_exactly():
    assert is_hidden(Operation(http_method="GET", summary=HIDDEN))
    assert not is_hidden(Operation(http_method="GET", summary=""))
    assert not is_hidden(Operation(http_method="GET", summary="##hidden##"))
    assert not is_hidden(Operation(http_method="GET", summary=None))


def test_unannotated_handler_still_described():
    op = _describe(no_annotations)
    params = {p.name: p for p in op.parameters}
    assert params["shop_id"].data_type == "object"
    assert params["q"].required is False
    assert op.response_class == "object"


def test_unresolvable_annotation_raises():
    with pytest.raises(MetadataUnresolvable):
        _describe(unresolvable)


def test_bound_method_owner_is_class():
    handler = HandlerIdentity.from_callable(Shop().detail)
    assert handler.owner is Shop
    assert handler.owner_name.endswith(".Shop")
    op = OperationDescriber().describe(handler, "GET", "/shops/{shop_id}")
    assert op.summary == "Shop detail"
    assert [p.name for p in op.parameters] == ["shop_id"]


def update_item(
    item_id: Annotated[int, Path(description="Item id")],
    db: Annotated[dict, Depends(_db)],
    note: Annotated[str, Body()],
    token: Annotated[Optional[str], Header()] = None,
    page: Annotated[int, "unrelated metadata"] = 1,
) -> Annotated[Item, "response"]:
    return Item()


def test_annotated_markers_classify_parameters():
    op = _describe(update_item, method="PUT", pattern="/items/{item_id}")
    params = {p.name: p for p in op.parameters}

    assert list(params) == ["item_id", "note", "token", "page"]

    assert params["item_id"].param_type == "path"
    assert params["item_id"].data_type == "int"
    assert params["item_id"].description == "Item id"

    assert params["note"].param_type == "body"
    assert params["note"].data_type == "str"
    assert params["note"].required is True

    assert params["token"].param_type == "header"
    assert params["token"].data_type == "str"
    assert params["token"].required is False

    assert params["page"].param_type == "query"
    assert params["page"].data_type == "int"

    assert op.response_class == "item"
