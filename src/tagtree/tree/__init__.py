"""Tree building layer for tagtree.

Key Components:
    TreeBuilder: Turns tag tokens into one rooted tree, rejecting bad nesting
    Element: Tag node with attributes and ordered children
    Text: Character content node
    Node: Union of Element and Text
"""

from .builder import TreeBuilder
from .nodes import Element, Node, Text

__all__ = [
    "Element",
    "Node",
    "Text",
    "TreeBuilder",
]
