from __future__ import annotations

import inspect
import re
import typing
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from pydantic import BaseModel, ValidationError
from pydantic_core import PydanticUndefined

from routedoc.domain.errors import MetadataUnresolvable
from routedoc.domain.models import AllowableValues, Parameter
from routedoc.domain.routes import HandlerIdentity
from routedoc.metadata.annotations import (
    OPERATION_ATTR,
    PARAMS_ATTR,
    OperationInfo,
    ParamInfo,
    PropertyInfo,
    api_info_of,
    property_info_of,
)
from routedoc.metadata.types import type_name

# {car_id} and Starlette's {car_id:int}
_PATH_PARAM = re.compile(r"{([A-Za-z_][A-Za-z0-9_]*)(?::[^}]*)?}")

_FRAMEWORK_MODULES = ("fastapi", "starlette")
_INJECTED_DEFAULTS = {"Depends", "Security"}
_DEFAULT_KINDS = {
    "Path": "path",
    "Query": "query",
    "Body": "body",
    "Form": "body",
    "File": "body",
    "Header": "header",
    "Cookie": "header",
}


@dataclass(frozen=True)
class OperationMeta:
    summary: Optional[str]
    notes: str
    nickname: str
    parameters: list[Parameter] = field(default_factory=list)
    response_class: str = "void"


@dataclass(frozen=True)
class PropertyMeta:
    attr_name: str
    is_method: bool
    info: PropertyInfo
    return_type: Any


@dataclass(frozen=True)
class ClassMeta:
    value: str
    description: str
    path: Optional[str]
    properties: list[PropertyMeta] = field(default_factory=list)


class MetadataSource(Protocol):
    """Where annotation metadata comes from. Swap it to feed descriptors from config, codegen, etc."""

    def operation_metadata_for(
        self, handler: HandlerIdentity, http_method: str, uri_pattern: str = ""
    ) -> OperationMeta: ...

    def class_metadata_for(self, obj: Any) -> Optional[ClassMeta]: ...


def split_allowable_values(raw: str) -> Optional[AllowableValues]:
    # plain comma split, values are not trimmed
    if not raw:
        return None
    return AllowableValues(values=raw.split(","))


def _resolve_hints(obj: Any, subject: str) -> dict[str, Any]:
    try:
        return typing.get_type_hints(obj, include_extras=True)
    except (NameError, TypeError, AttributeError) as exc:
        raise MetadataUnresolvable(subject, str(exc)) from exc


def _is_framework_type(annotation: Any) -> bool:
    module = getattr(annotation, "__module__", "") or ""
    return inspect.isclass(annotation) and module.startswith(_FRAMEWORK_MODULES)


def _marker_default_kind(default: Any) -> Optional[str]:
    kind = type(default).__name__
    if type(default).__module__.startswith(_FRAMEWORK_MODULES):
        if kind in _INJECTED_DEFAULTS:
            return "injected"
        return _DEFAULT_KINDS.get(kind)
    return None


def _split_annotated(annotation: Any) -> tuple[Any, Any]:
    """Annotated[int, Query()] -> (int, Query()); the marker is None when absent."""
    if typing.get_origin(annotation) is not typing.Annotated:
        return annotation, None
    base, *extras = typing.get_args(annotation)
    for extra in extras:
        if _marker_default_kind(extra) is not None:
            return base, extra
    return base, None


def _default_is_required(default: Any) -> bool:
    if default is inspect.Parameter.empty:
        return True
    # fastapi Query(...) / Path() markers carry their own default
    inner = getattr(default, "default", None)
    if _marker_default_kind(default) is not None:
        return inner is Ellipsis or inner is PydanticUndefined
    return False


def _signature_parameters(
    sig: inspect.Signature, hints: dict[str, Any], uri_pattern: str
) -> list[Parameter]:
    path_names = set(_PATH_PARAM.findall(uri_pattern or ""))
    out: list[Parameter] = []

    for name, param in sig.parameters.items():
        if name in ("self", "cls"):
            continue
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue

        annotation, marker_obj = _split_annotated(hints.get(name, param.annotation))
        if marker_obj is None:
            marker_obj = param.default
        marker = _marker_default_kind(marker_obj)
        if marker == "injected" or _is_framework_type(annotation):
            continue
        if name == "request" and annotation is inspect.Parameter.empty:
            continue

        if name in path_names:
            param_type = "path"
        elif marker is not None:
            param_type = marker
        elif inspect.isclass(annotation) and issubclass(annotation, BaseModel):
            param_type = "body"
        else:
            param_type = "query"

        description = ""
        if marker is not None:
            description = getattr(marker_obj, "description", None) or ""

        out.append(
            Parameter(
                name=name,
                description=description,
                param_type=param_type,
                data_type=type_name(annotation),
                required=param_type == "path" or _default_is_required(param.default),
            )
        )
    return out


def _merge_declared(derived: list[Parameter], declared: tuple[ParamInfo, ...]) -> list[Parameter]:
    by_name = {p.name: p for p in derived}
    order = [p.name for p in derived]

    for d in declared:
        base = by_name.get(d.name)
        updates: dict[str, Any] = {}
        if d.description:
            updates["description"] = d.description
        if d.param_type:
            updates["param_type"] = d.param_type
        if d.data_type:
            updates["data_type"] = d.data_type
        if d.required is not None:
            updates["required"] = d.required
        allowable = split_allowable_values(d.allowable_values)
        if allowable is not None:
            updates["allowable_values"] = allowable

        if base is None:
            by_name[d.name] = Parameter(name=d.name, **updates)
            order.append(d.name)
        else:
            by_name[d.name] = base.model_copy(update=updates)

    return [by_name[n] for n in order]


class ReflectionMetadataSource:
    """Reads the routedoc annotations and Python signatures/type hints."""

    def operation_metadata_for(
        self, handler: HandlerIdentity, http_method: str, uri_pattern: str = ""
    ) -> OperationMeta:
        func = handler.func
        subject = str(handler)
        if inspect.isclass(func):
            # Starlette HTTPEndpoint style: one method per HTTP verb
            func = getattr(func, http_method.lower(), None)
            if func is None:
                raise MetadataUnresolvable(subject, f"no {http_method.lower()}() handler")
        target = inspect.unwrap(func)

        info = getattr(target, OPERATION_ATTR, None) or getattr(func, OPERATION_ATTR, None)
        if not isinstance(info, OperationInfo):
            info = OperationInfo()
        declared = tuple(getattr(target, PARAMS_ATTR, ()) or getattr(func, PARAMS_ATTR, ()))

        try:
            sig = inspect.signature(func)
        except (TypeError, ValueError) as exc:
            raise MetadataUnresolvable(subject, str(exc)) from exc
        hints = _resolve_hints(target, subject)

        try:
            parameters = _merge_declared(_signature_parameters(sig, hints, uri_pattern), declared)
        except ValidationError as exc:
            raise MetadataUnresolvable(subject, str(exc)) from exc

        if info.response_class:
            response_class = info.response_class
        else:
            response_class = type_name(hints.get("return", sig.return_annotation))

        return OperationMeta(
            summary=info.summary,
            notes=info.notes,
            nickname=info.nickname or handler.method_name,
            parameters=parameters,
            response_class=response_class,
        )

    def class_metadata_for(self, obj: Any) -> Optional[ClassMeta]:
        info = api_info_of(obj)
        if info is None:
            return None

        properties: list[PropertyMeta] = []
        if inspect.isclass(obj):
            for name, member in inspect.getmembers(obj):
                if name.startswith("_"):
                    continue
                pinfo = property_info_of(member)
                if pinfo is None:
                    continue
                is_method = not isinstance(member, property)
                getter = member if is_method else member.fget
                hints = _resolve_hints(getter, f"{obj.__qualname__}.{name}")
                properties.append(
                    PropertyMeta(
                        attr_name=name,
                        is_method=is_method,
                        info=pinfo,
                        return_type=hints.get("return", inspect.Signature.empty),
                    )
                )

        return ClassMeta(
            value=info.value,
            description=info.description,
            path=info.path,
            properties=properties,
        )
