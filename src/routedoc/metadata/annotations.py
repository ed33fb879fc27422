"""
Documentation annotations.

Decorators only attach frozen info objects to the decorated class or
function; nothing is registered globally. Modules declare resource
metadata with a module-level ``__api__ = ApiInfo(path="/cars")``.

    @api("Car", description="A car in the fleet")
    class Car:
        @api_property("Top speed in km/h", notes="required, metric")
        def getTopSpeed(self) -> int: ...

    @router.get("/cars/{car_id}")
    @api_operation("Find a car", notes="Returns 404 when missing")
    @api_param("car_id", "Car identifier")
    def get_car(car_id: int) -> Car: ...
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

API_ATTR = "__api__"
OPERATION_ATTR = "__api_operation__"
PARAMS_ATTR = "__api_params__"
PROPERTY_ATTR = "__api_property__"

T = TypeVar("T")


@dataclass(frozen=True)
class ApiInfo:
    value: str = ""
    description: str = ""
    path: Optional[str] = None  # set on resource owners (controllers / router modules)


@dataclass(frozen=True)
class OperationInfo:
    summary: Optional[str] = None
    notes: str = ""
    response_class: Optional[str] = None
    nickname: Optional[str] = None


@dataclass(frozen=True)
class ParamInfo:
    name: str
    description: str = ""
    param_type: Optional[str] = None
    data_type: Optional[str] = None
    required: Optional[bool] = None
    allowable_values: str = ""


@dataclass(frozen=True)
class PropertyInfo:
    value: str = ""
    allowable_values: str = ""
    notes: str = ""


def _target(obj: Any) -> Any:
    # attributes cannot be set on property objects; annotate the getter
    if isinstance(obj, property):
        return obj.fget
    return obj


def api(value: str = "", description: str = "", path: Optional[str] = None) -> Callable[[T], T]:
    def deco(cls: T) -> T:
        setattr(cls, API_ATTR, ApiInfo(value=value, description=description, path=path))
        return cls

    return deco


def api_operation(
    summary: Optional[str] = None,
    notes: str = "",
    response_class: Optional[str] = None,
    nickname: Optional[str] = None,
) -> Callable[[T], T]:
    def deco(func: T) -> T:
        info = OperationInfo(
            summary=summary, notes=notes, response_class=response_class, nickname=nickname
        )
        setattr(_target(func), OPERATION_ATTR, info)
        return func

    return deco


def api_param(
    name: str,
    description: str = "",
    param_type: Optional[str] = None,
    data_type: Optional[str] = None,
    required: Optional[bool] = None,
    allowable_values: str = "",
) -> Callable[[T], T]:
    def deco(func: T) -> T:
        target = _target(func)
        existing = list(getattr(target, PARAMS_ATTR, ()))
        info = ParamInfo(
            name=name,
            description=description,
            param_type=param_type,
            data_type=data_type,
            required=required,
            allowable_values=allowable_values,
        )
        # decorators apply bottom-up; prepend to keep source order
        setattr(target, PARAMS_ATTR, (info, *existing))
        return func

    return deco


def api_property(value: str = "", allowable_values: str = "", notes: str = "") -> Callable[[T], T]:
    def deco(func: T) -> T:
        setattr(
            _target(func),
            PROPERTY_ATTR,
            PropertyInfo(value=value, allowable_values=allowable_values, notes=notes),
        )
        return func

    return deco


def api_info_of(obj: Any) -> Optional[ApiInfo]:
    """Own ApiInfo of a class or module; inherited declarations do not count."""
    info = vars(obj).get(API_ATTR) if hasattr(obj, "__dict__") else None
    return info if isinstance(info, ApiInfo) else None


def property_info_of(member: Any) -> Optional[PropertyInfo]:
    info = getattr(_target(member), PROPERTY_ATTR, None)
    return info if isinstance(info, PropertyInfo) else None
