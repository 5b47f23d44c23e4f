# --- Syntactic index of Java declarations ------------------------------------
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class ImportInfo:
    """A non-static import declaration."""
    name: str  # e.g. "org.testng.annotations.Test", or "org.testng.annotations" for a wildcard
    wildcard: bool = False

    @property
    def simple_name(self) -> str:
        return self.name.rpartition(".")[2]


@dataclass
class MethodInfo:
    """A method declaration, as written in the source."""
    name: str  # e.g., "setUp"
    params: list[str]  # parameter type text as written, e.g. ["List<String>", "int..."]
    return_type: Optional[str]  # return type text, e.g. "void"
    line: int
    col: int
    modifiers: list[str] = field(default_factory=list)  # keyword modifiers, e.g. ["public", "static"]
    annotations: list[str] = field(default_factory=list)  # annotation names as written, e.g. ["Test"]
    type_parameters: list[str] = field(default_factory=list)  # e.g. ["T"] for "<T> void f(T t)"
    type_bounds: dict[str, str] = field(default_factory=dict)  # first bound as written, e.g. {"T": "Number"}
    has_body: bool = True


@dataclass
class ClassInfo:
    """A class or interface declaration."""
    simple_name: str  # e.g., "Inner"
    fqcn: str  # binary name, e.g., "com.acme.Outer$Inner"
    line: int
    col: int
    package: Optional[str] = None
    kind: str = "class"  # "class" or "interface"
    modifiers: list[str] = field(default_factory=list)
    superclass: Optional[str] = None  # "extends" type text for classes
    interfaces: list[str] = field(default_factory=list)  # "implements" (or interface "extends") type texts
    type_parameters: list[str] = field(default_factory=list)
    type_bounds: dict[str, str] = field(default_factory=dict)
    enclosing: Optional[str] = None  # binary name of the enclosing type, if nested
    imports: list[ImportInfo] = field(default_factory=list)
    file_path: Optional[str] = None
    methods: dict[str, list[MethodInfo]] = field(default_factory=dict)  # name -> [overloads]

    @property
    def is_interface(self) -> bool:
        return self.kind == "interface"

    @property
    def is_abstract(self) -> bool:
        return "abstract" in self.modifiers

    def declared_methods(self) -> list[MethodInfo]:
        """All methods in source order."""
        return sorted((mi for overloads in self.methods.values() for mi in overloads),
                      key=lambda mi: (mi.line, mi.col))
