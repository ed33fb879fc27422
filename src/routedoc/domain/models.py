from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]
ParamType = Literal["path", "query", "body", "header"]


class AllowableValues(BaseModel):
    """Enumerated-values constraint (the only kind the builders emit)."""

    value_type: Literal["LIST"] = "LIST"
    values: list[str] = Field(default_factory=list)


class Parameter(BaseModel):
    name: str
    description: str = ""
    param_type: ParamType = "query"
    data_type: str = "object"
    required: bool = False
    allowable_values: Optional[AllowableValues] = None


class Operation(BaseModel):
    http_method: str
    nickname: str = ""
    summary: Optional[str] = None  # None means "not documented", never "hidden"
    notes: str = ""
    parameters: list[Parameter] = Field(default_factory=list)
    response_class: str = "void"


class ListingEntry(BaseModel):
    path: str
    description: str = ""


class PropertySchema(BaseModel):
    id: str
    name: str
    type: str
    description: str = ""
    required: bool = False
    allowable_values: Optional[AllowableValues] = None


class ModelSchema(BaseModel):
    id: str
    name: str = ""
    description: str = ""
    properties: dict[str, PropertySchema] = Field(default_factory=dict)
