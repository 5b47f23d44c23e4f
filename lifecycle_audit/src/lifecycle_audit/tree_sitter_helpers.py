# --- Tree-sitter plumbing ----------------------------------------------------
from typing import Optional

from tree_sitter import Node


def node_text(source_bytes: bytes, node: Node) -> str:
    """
    Slices a node's [start_byte:end_byte] out of the original source.
    """
    return source_bytes[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def node_point(node: Node) -> tuple[int, int]:
    """0-based (line, column) where the node starts."""
    return node.start_point[0], node.start_point[1]


def first_child_of_type(node: Node, *types: str) -> Optional[Node]:
    for child in node.children:
        if child.type in types:
            return child
    return None


def children_of_type(node: Node, *types: str) -> list[Node]:
    return [child for child in node.children if child.type in types]


def type_list_nodes(node: Optional[Node]) -> list[Node]:
    """
    Type nodes listed in a `superclass`, `super_interfaces` or
    `extends_interfaces` clause.
    """
    if node is None:
        return []
    type_list = first_child_of_type(node, "type_list")
    if type_list is not None:
        return list(type_list.named_children)
    return [child for child in node.named_children if child.type != "type_list"]
