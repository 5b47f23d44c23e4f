import logging
from dataclasses import dataclass, field
from typing import Optional

from tree_sitter import Language, Node, Parser, Tree

from lifecycle_audit.src.lifecycle_audit.errors import LanguageLoadError
from lifecycle_audit.src.lifecycle_audit.models.ast_models import ClassInfo, ImportInfo, MethodInfo
from lifecycle_audit.src.lifecycle_audit.tree_sitter_helpers import (
    children_of_type,
    first_child_of_type,
    node_point,
    node_text,
    type_list_nodes,
)

logger = logging.getLogger(__name__)

# Declarations that open a nesting level for binary names
_TYPE_DECLARATIONS = (
    "class_declaration",
    "interface_declaration",
    "enum_declaration",
    "record_declaration",
    "annotation_type_declaration",
)
# Declarations we actually record
_INDEXED_KINDS = {
    "class_declaration": "class",
    "interface_declaration": "interface",
}
_NESTED_CONTAINERS = ("enum_body_declarations",)


# --- Tree-sitter language loading -------------------------------------------

def load_java_language() -> Language:
    """
    Loads the Tree-sitter Java grammar shipped by the `tree-sitter-java` wheel.
    """
    try:
        import tree_sitter_java
    except ImportError as e:
        raise LanguageLoadError(
            "Could not load Java grammar. Install it with: pip install tree-sitter-java"
        ) from e
    return Language(tree_sitter_java.language())


@dataclass
class _FileContext:
    package: Optional[str]
    imports: list[ImportInfo] = field(default_factory=list)
    file_path: Optional[str] = None


# --- The Indexer -------------------------------------------------------------

class JavaIndexer:
    """
    Walks a Tree-sitter Java AST to record every class and interface with the
    parts needed for type metadata: supertypes, type parameters, imports and
    method declarations (modifiers, annotations, parameter types).
    Method bodies are not visited.
    """

    def __init__(self):
        self.language = load_java_language()
        self.parser = Parser(self.language)

        # In-memory index
        self.packages: set[str] = set()
        self.classes: dict[str, ClassInfo] = {}  # binary name -> ClassInfo

    def parse(self, source: str) -> Tree:
        return self.parser.parse(source.encode("utf-8"))

    def index_source(self, source: str, file_path: Optional[str] = None) -> list[str]:
        """
        Parses & indexes one Java compilation unit. Returns the binary names of
        the types it declared.
        """
        source_bytes = source.encode("utf-8")
        tree: Tree = self.parse(source)
        root: Node = tree.root_node
        where = file_path or "<source>"
        if root.has_error:
            logger.warning("Syntax errors in %s; declarations may be incomplete", where)

        package = self._find_package(source_bytes, root)
        if package:
            self.packages.add(package)
        ctx = _FileContext(package, self._find_imports(source_bytes, root), file_path)

        indexed: list[str] = []
        self._walk_and_index(source_bytes, root, ctx, [], indexed, enclosing=None)
        logger.debug("Indexed %d types from %s", len(indexed), where)
        return indexed

    # -- AST helpers ----------------------------------------------------------

    def _find_package(self, source_bytes: bytes, root: Node) -> Optional[str]:
        for child in root.children:
            if child.type == "package_declaration":
                name_node = first_child_of_type(child, "scoped_identifier", "identifier")
                if name_node:
                    return node_text(source_bytes, name_node)
        return None

    def _find_imports(self, source_bytes: bytes, root: Node) -> list[ImportInfo]:
        """Single-type and on-demand imports; static imports carry no types we need."""
        imports = []
        for child in children_of_type(root, "import_declaration"):
            if any(c.type == "static" for c in child.children):
                continue
            name_node = first_child_of_type(child, "scoped_identifier", "identifier")
            if name_node is None:
                continue
            wildcard = first_child_of_type(child, "asterisk") is not None
            imports.append(ImportInfo(node_text(source_bytes, name_node), wildcard))
        return imports

    def _walk_and_index(self, source_bytes: bytes, node: Node, ctx: _FileContext,
                        class_stack: list[str], indexed: list[str], enclosing: Optional[str]):
        """
        Visits the type declarations directly inside `node` (a compilation unit
        or a type body), keeping a stack of enclosing simple names for nested types.
        """
        for child in node.named_children:
            if child.type in _TYPE_DECLARATIONS:
                self._index_type(source_bytes, child, ctx, class_stack, indexed, enclosing)
            elif child.type in _NESTED_CONTAINERS:
                self._walk_and_index(source_bytes, child, ctx, class_stack, indexed, enclosing)

    def _index_type(self, source_bytes: bytes, node: Node, ctx: _FileContext,
                    class_stack: list[str], indexed: list[str], enclosing: Optional[str]):
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return
        simple = node_text(source_bytes, name_node)
        fqcn = self._fqcn(ctx.package, class_stack + [simple])

        kind = _INDEXED_KINDS.get(node.type)
        if kind is not None:
            if fqcn in self.classes:
                logger.warning("Duplicate declaration of %s in %s; keeping the first one",
                               fqcn, ctx.file_path or "<source>")
                return
            info = self._class_info(source_bytes, node, ctx, simple, fqcn, kind, enclosing)
            self.classes[fqcn] = info
            indexed.append(fqcn)

        body = node.child_by_field_name("body")
        if body is None:
            return
        if kind is not None:
            for member in children_of_type(body, "method_declaration"):
                self._index_method(source_bytes, member, self.classes[fqcn])

        class_stack.append(simple)
        self._walk_and_index(source_bytes, body, ctx, class_stack, indexed, enclosing=fqcn)
        class_stack.pop()

    def _class_info(self, source_bytes: bytes, node: Node, ctx: _FileContext, simple: str,
                    fqcn: str, kind: str, enclosing: Optional[str]) -> ClassInfo:
        modifiers, _ = self._modifiers(source_bytes, node)
        line, col = node_point(node)
        type_params = self._type_parameters(source_bytes, node)

        superclass = None
        if kind == "interface":
            interface_nodes = type_list_nodes(first_child_of_type(node, "extends_interfaces"))
        else:
            extends = type_list_nodes(node.child_by_field_name("superclass"))
            if extends:
                superclass = node_text(source_bytes, extends[0])
            interface_nodes = type_list_nodes(node.child_by_field_name("interfaces"))

        return ClassInfo(
            simple_name=simple,
            fqcn=fqcn,
            line=line,
            col=col,
            package=ctx.package,
            kind=kind,
            modifiers=modifiers,
            superclass=superclass,
            interfaces=[node_text(source_bytes, n) for n in interface_nodes],
            type_parameters=list(type_params),
            type_bounds={n: b for n, b in type_params.items() if b},
            enclosing=enclosing,
            imports=ctx.imports,
            file_path=ctx.file_path,
        )

    def _fqcn(self, pkg: Optional[str], class_names: list[str]) -> str:
        """Binary name: package + Outer$Inner."""
        left = pkg + "." if pkg else ""
        return left + "$".join(class_names)

    def _modifiers(self, source_bytes: bytes, node: Node) -> tuple[list[str], list[str]]:
        """(keyword modifiers, annotation names) of a declaration."""
        keywords: list[str] = []
        annotations: list[str] = []
        mods = first_child_of_type(node, "modifiers")
        if mods is None:
            return keywords, annotations
        for child in mods.children:
            if child.type in ("marker_annotation", "annotation"):
                name_node = child.child_by_field_name("name")
                if name_node is not None:
                    annotations.append(node_text(source_bytes, name_node))
            elif not child.is_named:
                keywords.append(child.type)
        return keywords, annotations

    def _type_parameters(self, source_bytes: bytes, node: Node) -> dict[str, Optional[str]]:
        """Type parameter name -> text of its first bound ("T extends A & B" -> "A"), in order."""
        params_node = node.child_by_field_name("type_parameters")
        if params_node is None:
            return {}
        params: dict[str, Optional[str]] = {}
        for param in children_of_type(params_node, "type_parameter"):
            ident = first_child_of_type(param, "type_identifier", "identifier")
            if ident is None:
                continue
            bound = first_child_of_type(param, "type_bound")
            first = bound.named_children[0] if bound is not None and bound.named_children else None
            params[node_text(source_bytes, ident)] = node_text(source_bytes, first) if first else None
        return params

    def _index_method(self, source_bytes: bytes, node: Node, cls: ClassInfo):
        """
        Pulls out a method's name, modifiers, annotations, parameter types and
        return type. Parameter and return types are kept as written; resolving
        them to qualified names is the metadata provider's job.
        """
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return
        method_name = node_text(source_bytes, name_node)
        modifiers, annotations = self._modifiers(source_bytes, node)

        ret_node = node.child_by_field_name("type")
        return_type = node_text(source_bytes, ret_node) if ret_node else None

        params = []
        params_node = node.child_by_field_name("parameters")
        if params_node:
            for p in params_node.named_children:
                if p.type == "formal_parameter":
                    p_type = p.child_by_field_name("type")
                    p_type_s = node_text(source_bytes, p_type) if p_type else "?"
                    dims = p.child_by_field_name("dimensions")
                    if dims is not None:
                        # C-style array declarator: String args[]
                        p_type_s += "[]" * node_text(source_bytes, dims).count("[")
                    params.append(p_type_s)
                elif p.type == "spread_parameter":
                    p_type = next((c for c in p.named_children
                                   if c.type not in ("modifiers", "variable_declarator")), None)
                    p_type_s = node_text(source_bytes, p_type) if p_type else "?"
                    params.append(p_type_s + "...")

        line, col = node_point(node)
        type_params = self._type_parameters(source_bytes, node)
        method_info = MethodInfo(
            name=method_name,
            params=params,
            return_type=return_type,
            line=line,
            col=col,
            modifiers=modifiers,
            annotations=annotations,
            type_parameters=list(type_params),
            type_bounds={n: b for n, b in type_params.items() if b},
            has_body=node.child_by_field_name("body") is not None,
        )

        # Store under class -> method name (supporting overloads)
        cls.methods.setdefault(method_name, []).append(method_info)
