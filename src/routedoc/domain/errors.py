from __future__ import annotations


class RouteDocError(Exception):
    """Base class for everything routedoc raises on purpose."""


class MetadataUnresolvable(RouteDocError):
    """Annotation/reflection metadata of a handler or class cannot be read."""

    def __init__(self, subject: str, reason: str = "") -> None:
        self.subject = subject
        self.reason = reason
        msg = f"Cannot resolve metadata for {subject}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class ResourceCreationFailed(RouteDocError):
    """A listing entry or documentation container could not be created for a resource."""

    def __init__(self, resource_key: str, reason: str = "") -> None:
        self.resource_key = resource_key
        self.reason = reason
        msg = f"Cannot create documentation for resource {resource_key!r}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
