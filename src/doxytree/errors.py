"""Exceptions raised while loading, finalizing and rendering a documentation tree."""


class DoxytreeError(Exception):
    """Base class for all doxytree errors."""


class ManifestNotFound(DoxytreeError):
    """The compound manifest (index.xml) could not be read."""


class ManifestMalformed(DoxytreeError):
    """The manifest lacks its root element or any compound record."""


class EntityResolutionFailed(DoxytreeError):
    """A single compound could not be materialized."""

    def __init__(self, refid: str, cause: BaseException) -> None:
        self.refid = refid
        self.cause = cause
        super().__init__(f"Failed to resolve {refid!r}: {cause}")


class NodeNotFound(DoxytreeError, LookupError):
    """No node is cached under the requested refid."""

    def __init__(self, refid: str) -> None:
        self.refid = refid
        super().__init__(f"Failed to find node from cache by refid {refid!r}")


class FinalizeFailed(DoxytreeError):
    """One or more nodes failed to finalize in strict mode."""

    def __init__(self, failures: list) -> None:
        self.failures = failures
        refids = ", ".join(repr(f.refid) for f in failures[:5])
        more = f" (+{len(failures) - 5} more)" if len(failures) > 5 else ""
        super().__init__(f"Failed to finalize {len(failures)} node(s): {refids}{more}")


class TemplateNotFound(DoxytreeError):
    """A template was requested by a name the renderer does not know."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Template {name!r} not found")


class TemplateLoadFailed(DoxytreeError):
    """A template source could not be parsed."""

    def __init__(self, name: str, cause: BaseException) -> None:
        self.name = name
        self.cause = cause
        super().__init__(f"Failed to parse template {name!r} error {cause}")


class RenderFailed(DoxytreeError):
    """Rendering a known template raised."""

    def __init__(self, name: str, cause: BaseException) -> None:
        self.name = name
        self.cause = cause
        super().__init__(f"Failed to render template {name!r} error {cause}")
