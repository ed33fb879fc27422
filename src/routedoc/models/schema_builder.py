from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from routedoc.domain.errors import MetadataUnresolvable
from routedoc.domain.models import ModelSchema, PropertySchema
from routedoc.lib.logging_utils import get_logger
from routedoc.metadata.source import (
    MetadataSource,
    PropertyMeta,
    ReflectionMetadataSource,
    split_allowable_values,
)
from routedoc.metadata.types import type_name

logger = get_logger(__name__)

RequiredPolicy = Callable[[str], bool]


def notes_mention_required(notes: str) -> bool:
    # case-sensitive substring, e.g. notes="required, metric"
    return "required" in (notes or "")


def property_name(method_name: str) -> str:
    """
    getTopSpeed -> topSpeed, get_top_speed -> top_speed, get -> "".
    """
    name = method_name[3:] if method_name.startswith("get") else method_name
    if name.startswith("_"):
        name = name[1:]
    if not name:
        return ""
    return name[0].lower() + name[1:]


class ModelSchemaBuilder:
    """Builds ModelSchema objects from classes annotated with @api."""

    def __init__(
        self,
        metadata: Optional[MetadataSource] = None,
        is_required: Optional[RequiredPolicy] = None,
    ) -> None:
        self.metadata = metadata or ReflectionMetadataSource()
        self.is_required = is_required or notes_mention_required
        # (model id, replaced class, replacing class)
        self.conflicts: List[Tuple[str, str, str]] = []

    def scan(self, classes: Iterable[type]) -> Dict[str, ModelSchema]:
        models: Dict[str, ModelSchema] = {}
        origins: Dict[str, str] = {}

        for cls in classes:
            try:
                schema = self.build(cls)
            except MetadataUnresolvable as exc:
                logger.warning("Skipping model %s: %s", _qualified(cls), exc)
                continue
            if schema is None:
                continue

            qualified = _qualified(cls)
            previous = origins.get(schema.id)
            if previous is not None and previous != qualified:
                # simple-name collision: last scanned wins
                logger.warning(
                    "Model id %r from %s replaces the one from %s", schema.id, qualified, previous
                )
                self.conflicts.append((schema.id, previous, qualified))

            models[schema.id] = schema
            origins[schema.id] = qualified

        logger.debug("Built %d model schemas", len(models))
        return models

    def build(self, cls: type) -> Optional[ModelSchema]:
        meta = self.metadata.class_metadata_for(cls)
        if meta is None:
            return None

        properties: Dict[str, PropertySchema] = {}
        for prop in meta.properties:
            schema = self._property_schema(prop)
            properties[schema.id] = schema

        return ModelSchema(
            id=cls.__name__,
            name=meta.value,
            description=meta.description,
            properties=properties,
        )

    def _property_schema(self, prop: PropertyMeta) -> PropertySchema:
        name = property_name(prop.attr_name) if prop.is_method else prop.attr_name
        return PropertySchema(
            id=name,
            name=name,
            type=type_name(prop.return_type),
            description=prop.info.value,
            required=self.is_required(prop.info.notes),
            allowable_values=split_allowable_values(prop.info.allowable_values),
        )


def _qualified(cls: Any) -> str:
    return f"{getattr(cls, '__module__', '?')}.{getattr(cls, '__qualname__', repr(cls))}"
