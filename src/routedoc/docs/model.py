from __future__ import annotations

from dataclasses import dataclass, field

from routedoc.domain.models import ListingEntry, ModelSchema, Operation


@dataclass
class Endpoint:
    path: str
    operations: list[Operation] = field(default_factory=list)

    def add_operation(self, operation: Operation) -> None:
        # no de-dupe by method: two routes may both serve GET on one pattern
        self.operations.append(operation)


@dataclass
class ResourceDocumentation:
    resource_path: str
    display_name: str
    api_version: str
    base_path: str
    description: str = ""
    endpoints: dict[str, Endpoint] = field(default_factory=dict)
    # shared with ResourceListing.models, never copied
    models: dict[str, ModelSchema] = field(default_factory=dict)

    def get_endpoint(self, path: str) -> Endpoint:
        endpoint = self.endpoints.get(path)
        if endpoint is None:
            endpoint = Endpoint(path=path)
            self.endpoints[path] = endpoint
        return endpoint

    def matches_name(self, name: str) -> bool:
        if not name:
            return False
        if name == self.display_name or name == self.resource_path:
            return True
        return name.strip("/") == self.resource_path.strip("/")


@dataclass
class ResourceListing:
    api_version: str
    base_path: str
    apis: dict[str, ListingEntry] = field(default_factory=dict)
    models: dict[str, ModelSchema] = field(default_factory=dict)

    def add_api(self, key: str, entry: ListingEntry) -> bool:
        # first writer wins
        if key in self.apis:
            return False
        self.apis[key] = entry
        return True
