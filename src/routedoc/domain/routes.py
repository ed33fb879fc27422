from __future__ import annotations

import inspect
import sys
from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class HandlerIdentity:
    """
    The code unit serving a route.

    owner is the class of a (bound) method, or the module that defines a
    plain function. owner_name is its dotted, fully-qualified name.
    """

    owner: Any
    owner_name: str
    method_name: str
    func: Callable[..., Any]

    @classmethod
    def from_callable(cls, func: Callable[..., Any]) -> "HandlerIdentity":
        target = inspect.unwrap(func)
        method_name = getattr(target, "__name__", type(target).__name__)

        # bound method: self.get_car -> CarController
        bound_to = getattr(func, "__self__", None)
        if bound_to is not None and not inspect.ismodule(bound_to):
            owner = bound_to if inspect.isclass(bound_to) else type(bound_to)
            return cls(
                owner=owner,
                owner_name=f"{owner.__module__}.{owner.__qualname__}",
                method_name=method_name,
                func=func,
            )

        module_name = getattr(target, "__module__", None) or "__main__"
        qualname = getattr(target, "__qualname__", method_name)
        owner: Any = sys.modules.get(module_name)
        owner_name = module_name

        # unbound method referenced through its class: CarController.get_car
        if "." in qualname and "<locals>" not in qualname and owner is not None:
            cls_obj: Any = owner
            for part in qualname.split(".")[:-1]:
                cls_obj = getattr(cls_obj, part, None)
                if cls_obj is None:
                    break
            if inspect.isclass(cls_obj):
                owner = cls_obj
                owner_name = f"{module_name}.{cls_obj.__qualname__}"

        return cls(owner=owner, owner_name=owner_name, method_name=method_name, func=func)

    def __str__(self) -> str:
        return f"{self.owner_name}.{self.method_name}"


@dataclass(frozen=True)
class Route:
    """Snapshot of one registered route. An empty methods tuple means "all methods"."""

    uri_patterns: tuple[str, ...]
    methods: tuple[str, ...]
    handler: HandlerIdentity


@dataclass(frozen=True)
class Resource:
    key: str
    owner_name: str
    display_name: str
    description: str = ""
    is_internal: bool = False
