"""Error types raised while building type metadata."""


class MetadataError(Exception):
    """Base error for metadata construction."""

    pass


class LanguageLoadError(MetadataError):
    """The Java grammar for tree-sitter could not be loaded."""

    pass


class UnknownTypeError(MetadataError):
    """A requested type is neither indexed nor referenced by an indexed type."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Type not found in index: {name}")
        self.name = name


class InheritanceCycleError(MetadataError):
    """A type (indirectly) extends itself."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Cyclic inheritance involving {name}")
        self.name = name
