"""
Builds type metadata snapshots from an indexed set of Java sources.

Type names written in the source are resolved roughly the way javac would,
without a classpath:

- primitives stay as they are; type variables erase to their first bound
  (java.lang.Object when unbounded); generic arguments are dropped; varargs
  become arrays
- simple names are looked up in enclosing and member types, single-type
  imports, the current package, java.lang and on-demand imports; when several
  on-demand imports could supply the name, the recognized annotation packages
  win, then the only non-JDK one, and the current package is the last resort
- qualified names that are not indexed follow the naming convention: the first
  capitalised segment starts the class name, later segments are nested types

Types that are referenced but not indexed become opaque stubs with no methods
of their own.
"""

import logging
import threading
from typing import Iterator, Optional

from lifecycle_audit.src.lifecycle_audit.config import DEFAULT_CONFIG, AuditConfig
from lifecycle_audit.src.lifecycle_audit.errors import InheritanceCycleError, UnknownTypeError
from lifecycle_audit.src.lifecycle_audit.indexer import JavaIndexer
from lifecycle_audit.src.lifecycle_audit.models.ast_models import ClassInfo, ImportInfo, MethodInfo
from lifecycle_audit.src.lifecycle_audit.models.type_models import (
    ROOT_TYPE_NAME,
    AnnotationType,
    MethodDescriptor,
    TypeDescriptor,
    make_root_type,
    namespace_of,
)

logger = logging.getLogger(__name__)

PRIMITIVES = frozenset({
    "boolean", "byte", "char", "short", "int", "long", "float", "double", "void",
})
JAVA_LANG = frozenset({
    "AutoCloseable", "Boolean", "Byte", "CharSequence", "Character", "Class", "ClassLoader",
    "Cloneable", "Comparable", "Deprecated", "Double", "Enum", "Error", "Exception",
    "Float", "FunctionalInterface", "Integer", "Iterable", "Long", "Math", "Number",
    "Object", "Override", "Record", "Runnable", "RuntimeException", "SafeVarargs",
    "Short", "String", "StringBuilder", "SuppressWarnings", "System", "Thread",
    "Throwable", "Void",
})


def erase_generics(text: str) -> str:
    """Drops type arguments and whitespace: "Map<K, List<V>> []" -> "Map[]"."""
    depth = 0
    out = []
    for ch in text:
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
        elif depth == 0 and not ch.isspace():
            out.append(ch)
    return "".join(out)


def binary_name_by_convention(qualified: str) -> str:
    """
    "a.b.Outer.Inner" -> "a.b.Outer$Inner". Names without a capitalised
    segment are returned unchanged.
    """
    parts = qualified.split(".")
    for i, part in enumerate(parts):
        if part[:1].isupper():
            return ".".join(parts[:i + 1]) + "".join("$" + p for p in parts[i + 1:])
    return qualified


class MetadataProvider:
    """
    Produces `TypeDescriptor`s for indexed types, resolving supertypes and
    flattening public methods along the superclass chain. Descriptors are built
    on first request and never modified.

    Built descriptors are cached for the lifetime of the provider and shared by
    every type analyzed through it; nothing is evicted. That suits one audit run
    over a fixed set of sources (the CLI creates one provider per run). Create a
    new provider after the sources change instead of reusing an old one.
    """

    def __init__(self, indexer: JavaIndexer, config: AuditConfig = DEFAULT_CONFIG):
        self.classes: dict[str, ClassInfo] = indexer.classes
        # "a.b.Outer.Inner" -> "a.b.Outer$Inner"
        self._canonical = {name.replace("$", "."): name for name in self.classes}
        self._types: dict[str, TypeDescriptor] = {ROOT_TYPE_NAME: make_root_type()}
        self._building: set[str] = set()
        self._lock = threading.RLock()
        # Preferred packages for names that several on-demand imports could supply
        self._recognized_namespaces = tuple(dict.fromkeys((
            config.test_namespace,
            config.companion_namespace,
            namespace_of(config.benchmark_annotation),
        )))

    @property
    def root_type(self) -> TypeDescriptor:
        return self._types[ROOT_TYPE_NAME]

    def analyzable_type_names(self) -> Iterator[str]:
        """Concrete classes, i.e. the ones a test runner would instantiate."""
        for name, info in sorted(self.classes.items()):
            if not info.is_interface and not info.is_abstract:
                yield name

    def get_type(self, name: str) -> TypeDescriptor:
        """Descriptor for an indexed type (or the root type)."""
        if name not in self.classes and name != ROOT_TYPE_NAME:
            raise UnknownTypeError(name)
        return self._get_or_stub(name, is_interface=False)

    # -- Descriptor construction ---------------------------------------------

    def _get_or_stub(self, name: str, is_interface: bool) -> TypeDescriptor:
        with self._lock:
            cached = self._types.get(name)
            if cached is not None:
                return cached
            if name in self._building:
                raise InheritanceCycleError(name)
            info = self.classes.get(name)
            if info is None:
                type_desc = self._stub(name, is_interface)
            else:
                self._building.add(name)
                try:
                    type_desc = self._build(info)
                finally:
                    self._building.discard(name)
            self._types[name] = type_desc
            return type_desc

    def _stub(self, name: str, is_interface: bool) -> TypeDescriptor:
        logger.debug("%s is not indexed; using an opaque stub", name)
        superclass = None if is_interface else self.root_type
        stub = TypeDescriptor(name=name, superclass=superclass, is_interface=is_interface)
        stub.inherit_public_methods([])
        return stub

    def _build(self, info: ClassInfo) -> TypeDescriptor:
        superclass = None
        if not info.is_interface:
            superclass_name = ROOT_TYPE_NAME
            if info.superclass:
                superclass_name = self.resolve_type_name(info.superclass, info)
            superclass = self._get_or_stub(superclass_name, is_interface=False)

        interfaces = tuple(
            self._get_or_stub(self.resolve_type_name(raw, info), is_interface=True)
            for raw in info.interfaces
        )

        type_desc = TypeDescriptor(
            name=info.fqcn,
            superclass=superclass,
            interfaces=interfaces,
            is_interface=info.is_interface,
        )
        declared = [
            self._method(type_desc, info, mi)
            for mi in info.declared_methods()
            if self._is_public(info, mi)
        ]
        type_desc.inherit_public_methods(declared)
        logger.debug("Built %s with %d public methods (%d declared)",
                     type_desc, len(type_desc.public_methods), len(declared))
        return type_desc

    @staticmethod
    def _is_public(info: ClassInfo, mi: MethodInfo) -> bool:
        if info.is_interface:
            # Interface members are implicitly public
            return "private" not in mi.modifiers
        return "public" in mi.modifiers

    def _method(self, type_desc: TypeDescriptor, info: ClassInfo, mi: MethodInfo) -> MethodDescriptor:
        modifiers = list(mi.modifiers)
        if info.is_interface:
            modifiers.append("public")
            if not mi.has_body and "static" not in modifiers:
                modifiers.append("abstract")
        return MethodDescriptor(
            name=mi.name,
            parameter_types=tuple(self.resolve_type_name(p, info, mi) for p in mi.params),
            declaring_type=type_desc,
            is_static="static" in mi.modifiers,
            annotations=frozenset(
                AnnotationType.named(self.resolve_type_name(a, info)) for a in mi.annotations
            ),
            modifiers=tuple(dict.fromkeys(modifiers)),
            return_type=self.resolve_type_name(mi.return_type or "void", info, mi),
        )

    # -- Name resolution ------------------------------------------------------

    def resolve_type_name(self, raw: str, context: ClassInfo, method: Optional[MethodInfo] = None,
                          _erasing: frozenset = frozenset()) -> str:
        """
        Qualified (binary) name for a type as written inside `context`. Pass the
        `method` whose signature the type appears in to bring its type variables
        into scope.
        """
        text = erase_generics(raw)
        dims = 0
        if text.endswith("..."):
            dims += 1
            text = text[:-3]
        while text.endswith("[]"):
            dims += 1
            text = text[:-2]
        return self._resolve_base(text, context, method, _erasing) + "[]" * dims

    def _resolve_base(self, text: str, context: ClassInfo, method: Optional[MethodInfo],
                      erasing: frozenset) -> str:
        if text in PRIMITIVES:
            return text
        head, _, rest = text.partition(".")
        if not rest:
            return self._resolve_simple(text, context, method, erasing)
        if head[:1].islower():
            return self._qualified(text)
        outer = self._resolve_simple(head, context, None, erasing)
        return outer + "".join("$" + part for part in rest.split("."))

    def _resolve_simple(self, name: str, context: ClassInfo, method: Optional[MethodInfo],
                        erasing: frozenset) -> str:
        if method is not None and name in method.type_parameters:
            return self._erasure(name, method.type_bounds.get(name), context, method, erasing)

        # Enclosing types, their members and their type variables
        scope: Optional[ClassInfo] = context
        while scope is not None:
            if name in scope.type_parameters:
                return self._erasure(name, scope.type_bounds.get(name), scope, None, erasing)
            if scope.simple_name == name:
                return scope.fqcn
            member = f"{scope.fqcn}${name}"
            if member in self.classes:
                return member
            scope = self.classes.get(scope.enclosing) if scope.enclosing else None

        for imp in context.imports:
            if not imp.wildcard and imp.simple_name == name:
                return self._qualified(imp.name)

        package_prefix = context.package + "." if context.package else ""
        if package_prefix + name in self.classes:
            return package_prefix + name

        if name in JAVA_LANG:
            return "java.lang." + name

        on_demand = [imp for imp in context.imports if imp.wildcard]
        for imp in on_demand:
            candidate = self._canonical.get(f"{imp.name}.{name}")
            if candidate is not None:
                return candidate
        package = self._on_demand_package(on_demand)
        if package is not None:
            return self._qualified(f"{package}.{name}")

        return package_prefix + name

    def _erasure(self, name: str, bound: Optional[str], context: ClassInfo,
                 method: Optional[MethodInfo], erasing: frozenset) -> str:
        """A type variable erases to its first bound, or to the root type without one."""
        if bound is None or name in erasing:
            return ROOT_TYPE_NAME
        return self.resolve_type_name(bound, context, method, erasing | {name})

    def _on_demand_package(self, on_demand: list[ImportInfo]) -> Optional[str]:
        """
        Package an unindexed simple name is assumed to come from. With several
        wildcard imports the recognized annotation packages win (in config
        order), then the only one outside java.* and javax.*; otherwise None.
        """
        packages = list(dict.fromkeys(imp.name for imp in on_demand))
        if len(packages) == 1:
            return packages[0]
        for namespace in self._recognized_namespaces:
            if namespace in packages:
                return namespace
        outside_jdk = [p for p in packages if not p.startswith(("java.", "javax."))]
        if len(outside_jdk) == 1:
            return outside_jdk[0]
        return None

    def _qualified(self, qualified: str) -> str:
        known = self._canonical.get(qualified)
        if known is not None:
            return known
        return binary_name_by_convention(qualified)
