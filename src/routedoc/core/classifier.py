from __future__ import annotations

from typing import Callable, Optional

from routedoc.config import Settings
from routedoc.docs.model import ResourceDocumentation
from routedoc.domain.errors import MetadataUnresolvable, ResourceCreationFailed
from routedoc.domain.models import ListingEntry, ModelSchema
from routedoc.domain.routes import Resource, Route
from routedoc.lib.logging_utils import get_logger
from routedoc.metadata.source import MetadataSource, ReflectionMetadataSource

logger = get_logger(__name__)

INTERNAL_PACKAGE = "routedoc"

ExclusionPolicy = Callable[[Resource], bool]


def auth_path_exclusion(marker: str = "oauth", trusted_marker: str = "") -> ExclusionPolicy:
    """
    Drop resources whose key contains `marker`, unless the owner's dotted name
    contains `trusted_marker`. An empty trusted marker trusts nobody.
    """

    def is_excluded(resource: Resource) -> bool:
        if not marker or marker not in resource.key:
            return False
        if trusted_marker and trusted_marker in resource.owner_name:
            return False
        return True

    return is_excluded


def never_excluded(resource: Resource) -> bool:
    return False


def normalize_resource_path(path: str) -> str:
    p = "/" + (path or "").strip().strip("/")
    while "//" in p:
        p = p.replace("//", "/")
    return p


def _first_static_segment(pattern: str) -> str:
    for seg in (pattern or "").strip("/").split("/"):
        if not seg:
            continue
        if seg.startswith("{"):
            break
        return "/" + seg
    return "/"


class ResourceClassifier:
    """Maps a route to the resource (documentation group) it belongs to."""

    def __init__(
        self,
        settings: Settings,
        metadata: Optional[MetadataSource] = None,
        is_excluded: Optional[ExclusionPolicy] = None,
    ) -> None:
        self.settings = settings
        self.metadata = metadata or ReflectionMetadataSource()
        if is_excluded is None:
            is_excluded = auth_path_exclusion(
                settings.excluded_path_marker, settings.trusted_namespace_marker
            )
        self.is_excluded = is_excluded
        self._docs_path = normalize_resource_path(settings.docs_path)

    def resource_for(self, route: Route) -> Resource:
        handler = route.handler
        try:
            meta = self.metadata.class_metadata_for(handler.owner)
        except MetadataUnresolvable as exc:
            # owner metadata is optional for grouping; fall back to the route path
            logger.debug("Owner metadata unavailable for %s: %s", handler.owner_name, exc)
            meta = None

        if meta is not None and meta.path:
            key = normalize_resource_path(meta.path)
        else:
            first = route.uri_patterns[0] if route.uri_patterns else "/"
            key = _first_static_segment(first)

        display_name = (meta.value if meta and meta.value else "") or key.strip("/") or key
        owner_module = handler.owner_name.split(".", 1)[0]
        is_internal = owner_module == INTERNAL_PACKAGE or key == self._docs_path

        return Resource(
            key=key,
            owner_name=handler.owner_name,
            display_name=display_name,
            description=meta.description if meta else "",
            is_internal=is_internal,
        )

    def classify(self, route: Route) -> Optional[Resource]:
        """Resource of the route, or None when it is internal or excluded."""
        resource = self.resource_for(route)
        if resource.is_internal:
            logger.debug("Skipping internal resource %s (%s)", resource.key, resource.owner_name)
            return None
        if self.is_excluded(resource):
            logger.debug("Excluding resource %s (%s)", resource.key, resource.owner_name)
            return None
        return resource

    def listing_entry_for(self, resource: Resource) -> ListingEntry:
        if not resource.key:
            raise ResourceCreationFailed(resource.key, "empty resource path")
        return ListingEntry(path=resource.key, description=resource.description)

    def documentation_for(
        self, resource: Resource, models: dict[str, ModelSchema]
    ) -> ResourceDocumentation:
        if not resource.key:
            raise ResourceCreationFailed(resource.key, "empty resource path")
        return ResourceDocumentation(
            resource_path=resource.key,
            display_name=resource.display_name,
            api_version=self.settings.api_version,
            base_path=self.settings.base_path,
            description=resource.description,
            models=models,
        )
