from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from routedoc.config import Settings, get_settings
from routedoc.core.assembler import BuildStats, DocumentationAssembler
from routedoc.docs.model import ResourceListing
from routedoc.domain.routes import Route
from routedoc.extractors.fastapi.routes import routes_from_app
from routedoc.lib.logging_utils import get_logger
from routedoc.models.discovery import discover_model_classes
from routedoc.models.schema_builder import ModelSchemaBuilder

logger = get_logger(__name__)


@dataclass(frozen=True)
class BuildResult:
    listing: ResourceListing
    assembler: DocumentationAssembler
    routes: list[Route]
    model_classes: list[type]
    model_conflicts: list[tuple[str, str, str]]

    @property
    def stats(self) -> BuildStats:
        return self.assembler.stats


def run_build(
    app: Any,
    settings: Optional[Settings] = None,
    model_packages: Optional[Iterable[str]] = None,
    model_classes: Optional[Iterable[type]] = None,
) -> BuildResult:
    """
    Full documentation build for one application.

    Models are scanned first so the shared mapping is in place before any
    resource documentation is created.
    """
    settings = settings or get_settings()

    classes = list(model_classes or ())
    packages = list(model_packages) if model_packages is not None else list(settings.model_packages)
    if packages:
        known = set(classes)
        classes.extend(c for c in discover_model_classes(packages) if c not in known)

    builder = ModelSchemaBuilder()
    models = builder.scan(classes)

    routes = routes_from_app(app)
    assembler = DocumentationAssembler(settings=settings)
    listing = assembler.build(routes, models=models)

    return BuildResult(
        listing=listing,
        assembler=assembler,
        routes=routes,
        model_classes=classes,
        model_conflicts=list(builder.conflicts),
    )
