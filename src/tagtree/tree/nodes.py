"""Document tree model.

A document is a tree of two node types only: :class:`Element` for tags and
:class:`Text` for the character content between them. ``Node`` is their
union.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from tagtree.tokenization.attributes import Attribute


@dataclass(frozen=True)
class Text:
    """Character content found between tags. Never has children."""

    content: str

    def serialize(self, indent: str = "\t") -> str:
        return self.content

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.content}

    def __str__(self) -> str:
        return self.content


@dataclass(eq=False)
class Element:
    """A tag with its attributes and ordered child nodes.

    Queries only look at direct children. Attribute lookups return the first
    pair with a matching name; names are compared exactly.
    """

    name: str
    attributes: List[Attribute] = field(default_factory=list)
    children: List["Node"] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Element name cannot be empty")
        self.attributes = [tuple(pair) for pair in self.attributes]

    def add_child(self, child: "Node") -> None:
        """Append a child node, keeping document order."""
        if not isinstance(child, (Element, Text)):
            raise TypeError("Child must be an Element or Text instance")
        self.children.append(child)

    def attribute_value(self, name: str) -> Optional[str]:
        """Value of the first attribute called ``name``, or None."""
        for attribute_name, value in self.attributes:
            if attribute_name == name:
                return value
        return None

    def has_attribute(self, name: str) -> bool:
        return any(attribute_name == name for attribute_name, _ in self.attributes)

    def elements(self) -> List["Element"]:
        """Direct children that are elements."""
        return [child for child in self.children if isinstance(child, Element)]

    @property
    def text(self) -> str:
        """Direct text children joined by single spaces."""
        return " ".join(
            child.content for child in self.children if isinstance(child, Text)
        )

    def _matching(
        self, name: str, attribute: Optional[Tuple[str, str]] = None
    ) -> Iterator["Element"]:
        for child in self.children:
            if not isinstance(child, Element) or child.name != name:
                continue
            if attribute is not None and child.attribute_value(attribute[0]) != attribute[1]:
                continue
            yield child

    def nth_tag(self, name: str, n: int) -> Optional["Element"]:
        """The ``n``-th (zero-based) child element called ``name``, or None."""
        if n < 0:
            return None
        for index, child in enumerate(self._matching(name)):
            if index == n:
                return child
        return None

    def first_tag(self, name: str) -> Optional["Element"]:
        return self.nth_tag(name, 0)

    def nth_tag_with_attribute(
        self, name: str, attribute_name: str, attribute_value: str, n: int
    ) -> Optional["Element"]:
        """The ``n``-th child element called ``name`` whose attribute matches.

        Children without the attribute never match.
        """
        if n < 0:
            return None
        matches = self._matching(name, (attribute_name, attribute_value))
        for index, child in enumerate(matches):
            if index == n:
                return child
        return None

    def first_tag_with_attribute(
        self, name: str, attribute_name: str, attribute_value: str
    ) -> Optional["Element"]:
        return self.nth_tag_with_attribute(name, attribute_name, attribute_value, 0)

    def iter(self) -> Iterator["Element"]:
        """This element and all descendant elements in document order."""
        yield self
        for child in self.elements():
            yield from child.iter()

    def serialize(self, indent: str = "\t") -> str:
        """Render the subtree as text, one child per line, indented per level.

        Attribute values are double quoted unless they contain a double quote.
        """
        lines = [f"<{self.name}{self._attribute_string()}>"]
        for child in self.children:
            rendered = child.serialize(indent)
            lines.append(indent + rendered.replace("\n", "\n" + indent))
        lines.append(f"</{self.name}>")
        return "\n".join(lines)

    def _attribute_string(self) -> str:
        parts = []
        for name, value in self.attributes:
            quote = "'" if '"' in value else '"'
            parts.append(f" {name}={quote}{value}{quote}")
        return "".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert element to a JSON-friendly dictionary."""
        return {
            "name": self.name,
            "attributes": [list(pair) for pair in self.attributes],
            "children": [child.to_dict() for child in self.children],
        }

    def __str__(self) -> str:
        return self.serialize()


Node = Union[Element, Text]
