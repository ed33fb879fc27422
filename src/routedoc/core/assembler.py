from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Generic, Iterable, Optional, TypeVar

from routedoc.config import Settings, get_settings
from routedoc.core.classifier import ResourceClassifier
from routedoc.core.describer import OperationDescriber, is_hidden
from routedoc.docs.model import ResourceDocumentation, ResourceListing
from routedoc.domain.errors import RouteDocError
from routedoc.domain.models import ModelSchema
from routedoc.domain.routes import Resource, Route
from routedoc.lib.logging_utils import get_logger

logger = get_logger(__name__)

# applied, in this order, when a route declares no methods
DEFAULT_METHODS: tuple[str, ...] = ("GET", "DELETE", "POST", "PUT")

V = TypeVar("V")


class MemoCache(Generic[V]):
    """
    Get-or-create keyed by string, remembering failures.

    A factory that raised RouteDocError is never called again for the same
    key; the key resolves to None for the rest of the build.
    """

    def __init__(self) -> None:
        self._values: Dict[str, Optional[V]] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def get_or_create(self, key: str, factory: Callable[[], V]) -> Optional[V]:
        if key in self._values:
            return self._values[key]
        try:
            value: Optional[V] = factory()
        except RouteDocError as exc:
            logger.warning("Giving up on %r for this build: %s", key, exc)
            value = None
        self._values[key] = value
        return value

    def values(self) -> list[V]:
        return [v for v in self._values.values() if v is not None]


@dataclass
class BuildStats:
    routes_seen: int = 0
    routes_skipped: int = 0
    operations_added: int = 0
    operations_hidden: int = 0
    operations_failed: int = 0


class DocumentationAssembler:
    """
    Turns discovered routes into a ResourceListing.

    All caches belong to the instance: one assembler per build.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        classifier: Optional[ResourceClassifier] = None,
        describer: Optional[OperationDescriber] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.classifier = classifier or ResourceClassifier(self.settings)
        self.describer = describer or OperationDescriber(self.classifier.metadata)

        self.listing = ResourceListing(
            api_version=self.settings.api_version, base_path=self.settings.base_path
        )
        self.stats = BuildStats()
        self._listing_cache: MemoCache = MemoCache()
        self._doc_cache: MemoCache[ResourceDocumentation] = MemoCache()

    def build(
        self, routes: Iterable[Route], models: Optional[Dict[str, ModelSchema]] = None
    ) -> ResourceListing:
        if models is not None:
            self.listing.models = models

        routes = list(routes)
        logger.debug("Discovered %d route candidates for documentation", len(routes))

        for route in routes:
            self.stats.routes_seen += 1
            self._process_route(route)

        logger.info(
            "Documented %d resources, %d operations (%d routes skipped)",
            len(self.listing.apis),
            self.stats.operations_added,
            self.stats.routes_skipped,
        )
        return self.listing

    def _process_route(self, route: Route) -> None:
        try:
            resource = self.classifier.classify(route)
        except RouteDocError as exc:
            logger.warning("Cannot classify %s: %s", route.handler, exc)
            resource = None

        if resource is None:
            self.stats.routes_skipped += 1
            return

        self._add_listing_if_missing(resource)

        documentation = self._documentation_for(resource)
        if documentation is None:
            self.stats.routes_skipped += 1
            return

        methods = route.methods or DEFAULT_METHODS
        for pattern in route.uri_patterns:
            endpoint = documentation.get_endpoint(pattern)
            for method in methods:
                try:
                    operation = self.describer.describe(route.handler, method, pattern)
                except RouteDocError as exc:
                    self.stats.operations_failed += 1
                    logger.warning("Skipping %s %s (%s): %s", method, pattern, route.handler, exc)
                    continue

                if is_hidden(operation):
                    self.stats.operations_hidden += 1
                    continue

                endpoint.add_operation(operation)
                self.stats.operations_added += 1

    def _add_listing_if_missing(self, resource: Resource) -> None:
        if resource.key in self._listing_cache:
            return
        entry = self._listing_cache.get_or_create(
            resource.key, lambda: self.classifier.listing_entry_for(resource)
        )
        if entry is not None:
            self.listing.add_api(resource.key, entry)
            logger.debug("Added resource listing: %s", resource.key)

    def _documentation_for(self, resource: Resource) -> Optional[ResourceDocumentation]:
        return self._doc_cache.get_or_create(
            resource.key,
            lambda: self.classifier.documentation_for(resource, self.listing.models),
        )

    @property
    def documentations(self) -> list[ResourceDocumentation]:
        return self._doc_cache.values()

    def get_documentation(self, name: str) -> Optional[ResourceDocumentation]:
        """Documentation whose display name or resource path matches, else None."""
        for documentation in self._doc_cache.values():
            if documentation.matches_name(name):
                return documentation
        logger.error("Could not find a matching resource for api with name '%s'", name)
        return None
