from __future__ import annotations

import collections.abc
import inspect
import types
import typing
from typing import Any, ForwardRef, Union

_LIST_ORIGINS = {
    list,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Collection,
    collections.abc.Iterable,
}

NoneType = type(None)


def _strip_annotated(tp: Any) -> Any:
    if typing.get_origin(tp) is typing.Annotated:
        return typing.get_args(tp)[0]
    return tp


def _unwrap_optional(tp: Any) -> Any:
    # Optional[X] / X | None -> X; real unions are left alone. Annotated metadata is dropped.
    tp = _strip_annotated(tp)
    origin = typing.get_origin(tp)
    if origin is Union or (hasattr(types, "UnionType") and origin is types.UnionType):
        args = [a for a in typing.get_args(tp) if a is not NoneType]
        if len(args) == 1:
            return _strip_annotated(args[0])
    return tp


def simple_name(tp: Any) -> str:
    """Unqualified name of a type, forward reference or dotted string; casing preserved."""
    tp = _strip_annotated(tp)
    if isinstance(tp, ForwardRef):
        tp = tp.__forward_arg__
    if isinstance(tp, str):
        return tp.strip().rsplit(".", 1)[-1]
    origin = typing.get_origin(tp)
    if origin is not None:
        return simple_name(origin)
    name = getattr(tp, "__name__", None)
    if name:
        return name
    return str(tp).rsplit(".", 1)[-1]


def is_list_like(tp: Any) -> bool:
    tp = _unwrap_optional(tp)
    if any(tp is origin for origin in _LIST_ORIGINS):
        return True
    return typing.get_origin(tp) in _LIST_ORIGINS


def type_name(tp: Any) -> str:
    """
    Semantic type string for documentation.

      int               -> "int"
      Widget            -> "widget"
      list[Widget]      -> "list<Widget>"   (element casing preserved)
      Optional[Widget]  -> "widget"
      (no annotation)   -> "object"
      None              -> "void"
    """
    if tp is inspect.Parameter.empty or tp is inspect.Signature.empty or tp is Any:
        return "object"
    if tp is None or tp is NoneType:
        return "void"

    tp = _unwrap_optional(tp)

    if is_list_like(tp):
        args = typing.get_args(tp)
        element = simple_name(args[0]) if args else "object"
        return f"list<{element}>"

    return simple_name(tp).lower()
