"""Shared fixtures: hand-built type snapshots and a real Java indexer."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from lifecycle_audit.src.lifecycle_audit.indexer import JavaIndexer
from lifecycle_audit.src.lifecycle_audit.metadata import MetadataProvider
from lifecycle_audit.src.lifecycle_audit.models.type_models import (
    AnnotationType,
    MethodDescriptor,
    TypeDescriptor,
    make_root_type,
)
from lifecycle_audit.src.lifecycle_audit.outputs.output import CollectingReporter


@dataclass
class MethodSpec:
    name: str
    params: tuple[str, ...] = ()
    annotations: tuple[str, ...] = ()
    is_static: bool = False
    is_bridge: bool = False
    return_type: str = "void"
    modifiers: tuple[str, ...] = field(default=("public",))


class TypeFactory:
    """Builds descriptor snapshots the way a metadata provider would."""

    def __init__(self) -> None:
        self.root = make_root_type()

    @staticmethod
    def m(name: str, *params: str, annotations: tuple[str, ...] = (), is_static: bool = False,
          is_bridge: bool = False, return_type: str = "void") -> MethodSpec:
        mods = ("public", "static") if is_static else ("public",)
        return MethodSpec(name, params, annotations, is_static, is_bridge, return_type, mods)

    def cls(self, name: str, *methods: MethodSpec, superclass: TypeDescriptor | None = None,
            interfaces: tuple[TypeDescriptor, ...] = ()) -> TypeDescriptor:
        type_desc = TypeDescriptor(name=name, superclass=superclass or self.root, interfaces=interfaces)
        type_desc.inherit_public_methods([self._method(type_desc, spec) for spec in methods])
        return type_desc

    def interface(self, name: str, *methods: MethodSpec,
                  interfaces: tuple[TypeDescriptor, ...] = ()) -> TypeDescriptor:
        type_desc = TypeDescriptor(name=name, interfaces=interfaces, is_interface=True)
        type_desc.inherit_public_methods([self._method(type_desc, spec) for spec in methods])
        return type_desc

    @staticmethod
    def _method(owner: TypeDescriptor, spec: MethodSpec) -> MethodDescriptor:
        return MethodDescriptor(
            name=spec.name,
            parameter_types=spec.params,
            declaring_type=owner,
            is_static=spec.is_static,
            is_bridge=spec.is_bridge,
            annotations=frozenset(AnnotationType.named(a) for a in spec.annotations),
            modifiers=spec.modifiers,
            return_type=spec.return_type,
        )


@pytest.fixture
def types() -> TypeFactory:
    return TypeFactory()


@pytest.fixture
def reporter() -> CollectingReporter:
    return CollectingReporter()


@pytest.fixture
def indexer() -> JavaIndexer:
    return JavaIndexer()


@pytest.fixture
def index_java(indexer: JavaIndexer):
    """Indexes Java snippets and returns a fresh MetadataProvider over them."""

    def _index(*sources: str) -> MetadataProvider:
        for i, source in enumerate(sources):
            indexer.index_source(source, f"<snippet {i}>")
        return MetadataProvider(indexer)

    return _index


def write_java(root: Path, relative: str, source: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(source, encoding="utf-8")
    return path


@pytest.fixture
def java_tree():
    """Writes Java files under a directory: java_tree(tmp_path, {"a/B.java": src})."""

    def _write(root: Path, files: dict[str, str]) -> Path:
        for relative, source in files.items():
            write_java(root, relative, source)
        return root

    return _write
