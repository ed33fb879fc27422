from __future__ import annotations

from typing import Optional

from routedoc.domain.models import Operation
from routedoc.domain.routes import HandlerIdentity
from routedoc.metadata.source import MetadataSource, ReflectionMetadataSource

# summary value that suppresses an operation
HIDDEN = "##HIDDEN##"


def is_hidden(operation: Operation) -> bool:
    # None (undocumented) is published; only the exact sentinel hides
    return operation.summary is not None and operation.summary == HIDDEN


class OperationDescriber:
    def __init__(self, metadata: Optional[MetadataSource] = None) -> None:
        self.metadata = metadata or ReflectionMetadataSource()

    def describe(self, handler: HandlerIdentity, http_method: str, uri_pattern: str = "") -> Operation:
        """
        Describe one HTTP method of a handler.

        Raises MetadataUnresolvable when the handler's metadata cannot be read.
        """
        meta = self.metadata.operation_metadata_for(handler, http_method, uri_pattern)
        return Operation(
            http_method=http_method.upper(),
            nickname=meta.nickname,
            summary=meta.summary,
            notes=meta.notes,
            parameters=list(meta.parameters),
            response_class=meta.response_class,
        )
