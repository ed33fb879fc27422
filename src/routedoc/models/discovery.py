from __future__ import annotations

import importlib
import inspect
import pkgutil
from types import ModuleType
from typing import Iterable, Iterator

from routedoc.lib.logging_utils import get_logger
from routedoc.metadata.annotations import api_info_of

logger = get_logger(__name__)


def _import(name: str) -> ModuleType | None:
    try:
        return importlib.import_module(name)
    except Exception as exc:  # any import-time failure of user code
        logger.warning("Cannot import %s: %s", name, exc)
        return None


def iter_modules(package: str) -> Iterator[ModuleType]:
    """The package itself, then every importable submodule (walk order)."""
    root = _import(package)
    if root is None:
        return
    yield root

    search_path = getattr(root, "__path__", None)
    if search_path is None:
        return

    for info in pkgutil.walk_packages(search_path, prefix=f"{root.__name__}.", onerror=lambda _: None):
        module = _import(info.name)
        if module is not None:
            yield module


def is_model_class(cls: type) -> bool:
    # resource owners carry a path and are documented through their routes
    info = api_info_of(cls)
    return info is not None and not info.path


def discover_model_classes(packages: Iterable[str]) -> list[type]:
    """
    Classes annotated with @api (and no resource path) defined in the given
    packages. Deterministic: module walk order, then class name.
    """
    out: list[type] = []
    seen: set[int] = set()

    for package in packages:
        for module in iter_modules(package):
            for _, cls in inspect.getmembers(module, inspect.isclass):
                if cls.__module__ != module.__name__:
                    continue
                if id(cls) in seen or not is_model_class(cls):
                    continue
                seen.add(id(cls))
                out.append(cls)
    return out
