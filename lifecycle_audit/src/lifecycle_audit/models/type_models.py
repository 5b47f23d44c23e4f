# --- Type metadata snapshot --------------------------------------------------
from dataclasses import dataclass, field
from typing import Optional

ROOT_TYPE_NAME = "java.lang.Object"

# Order used by java.lang.reflect.Method#toString
_MODIFIER_ORDER = (
    "public", "protected", "private", "abstract", "static", "final",
    "synchronized", "native", "strictfp", "default",
)

Signature = tuple[str, tuple[str, ...]]  # (name, parameter type names)


def namespace_of(type_name: str) -> str:
    """
    Package part of a binary type name.
    "org.testng.annotations.Test" -> "org.testng.annotations",
    "a.b.Outer$Inner" -> "a.b".
    """
    return type_name.split("$", 1)[0].rpartition(".")[0]


@dataclass(frozen=True)
class AnnotationType:
    """An annotation type present on a method."""
    name: str  # fully-qualified, e.g. "org.testng.annotations.Test"
    namespace: str  # containing package, e.g. "org.testng.annotations"

    @classmethod
    def named(cls, name: str) -> "AnnotationType":
        return cls(name=name, namespace=namespace_of(name))


@dataclass(frozen=True, eq=False)
class MethodDescriptor:
    """
    A public method as seen on some type. Identity for override matching is the
    signature (name + parameter type names); return type and modifiers are only
    kept so the method can be printed.
    """
    name: str
    parameter_types: tuple[str, ...]
    declaring_type: "TypeDescriptor" = field(repr=False)
    is_static: bool = False
    is_bridge: bool = False
    annotations: frozenset[AnnotationType] = frozenset()
    modifiers: tuple[str, ...] = ("public",)
    return_type: str = "void"

    @property
    def signature(self) -> Signature:
        return self.name, self.parameter_types

    def same_signature(self, other: "MethodDescriptor") -> bool:
        return self.signature == other.signature

    def __str__(self) -> str:
        mods = sorted(set(self.modifiers), key=lambda m: _MODIFIER_ORDER.index(m)
                      if m in _MODIFIER_ORDER else len(_MODIFIER_ORDER))
        prefix = " ".join(mods + [self.return_type])
        params = ",".join(self.parameter_types)
        return f"{prefix} {self.declaring_type.name}.{self.name}({params})"


@dataclass(frozen=True, eq=False)
class TypeDescriptor:
    """
    Read-only view of a class or interface. `public_methods` is the flattened,
    most-derived set of public methods visible on the type. Methods point back
    at their declaring type, so the set is filled in exactly once by
    `inherit_public_methods` right after construction; any later attempt to
    change the descriptor raises.
    """
    name: str  # binary name, e.g. "com.acme.Outer$Inner"
    superclass: Optional["TypeDescriptor"] = None
    interfaces: tuple["TypeDescriptor", ...] = ()
    is_interface: bool = False
    public_methods: tuple[MethodDescriptor, ...] = ()

    @property
    def namespace(self) -> str:
        return namespace_of(self.name)

    @property
    def simple_name(self) -> str:
        return self.name.rpartition(".")[2].rpartition("$")[2]

    @property
    def is_root(self) -> bool:
        return self.name == ROOT_TYPE_NAME

    def find_method(self, signature: Signature) -> Optional[MethodDescriptor]:
        for method in self.public_methods:
            if method.signature == signature:
                return method
        return None

    def declared_methods(self) -> list[MethodDescriptor]:
        return [m for m in self.public_methods if m.declaring_type is self]

    def inherit_public_methods(self, declared: list[MethodDescriptor]):
        """
        Sets public_methods to `declared` followed by every public method of the
        superclass whose signature none of them overrides. Interfaces are not
        walked; only the superclass chain contributes. Can only be called once.
        """
        if self.__dict__.get("_sealed"):
            raise ValueError(f"public methods of {self} are already set")
        methods = list(declared)
        seen = {m.signature for m in methods}
        if self.superclass is not None:
            for inherited in self.superclass.public_methods:
                if inherited.signature not in seen:
                    seen.add(inherited.signature)
                    methods.append(inherited)
        object.__setattr__(self, "public_methods", tuple(methods))
        object.__setattr__(self, "_sealed", True)

    def __str__(self) -> str:
        kind = "interface" if self.is_interface else "class"
        return f"{kind} {self.name}"


def make_root_type() -> TypeDescriptor:
    """The universal root type with its public instance methods."""
    root = TypeDescriptor(name=ROOT_TYPE_NAME)

    def m(name, return_type, *params, final=False):
        mods = ("public", "final") if final else ("public",)
        return MethodDescriptor(name, tuple(params), root, modifiers=mods, return_type=return_type)

    root.inherit_public_methods([
        m("equals", "boolean", ROOT_TYPE_NAME),
        m("toString", "java.lang.String"),
        m("hashCode", "int"),
        m("getClass", "java.lang.Class", final=True),
        m("notify", "void", final=True),
        m("notifyAll", "void", final=True),
        m("wait", "void", final=True),
        m("wait", "void", "long", final=True),
        m("wait", "void", "long", "int", final=True),
    ])
    return root
