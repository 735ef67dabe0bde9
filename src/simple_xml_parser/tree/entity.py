"""Document tree entities with navigation and mutation.

A tree is made of ``Entity`` nodes of four kinds: one ``DOCUMENT`` root, and
``TAG``, ``ATTRIBUTE`` and ``COMMENT`` nodes below it. Attributes are children
of their tag, in document order alongside child tags and comments.

Each node owns its children. The link back to the parent is a weak reference,
so a subtree never keeps its ancestors alive: hold on to the document root for
as long as any node of the tree is in use.
"""

import weakref
from enum import Enum, auto
from typing import Any, Dict, Iterator, List, Optional, TextIO, Tuple

from simple_xml_parser.character.scanners import is_alpha, is_name_char
from simple_xml_parser.shared.errors import InvalidAppendTargetError


class EntityKind(Enum):
    """Kinds of tree entities."""

    DOCUMENT = auto()
    TAG = auto()
    ATTRIBUTE = auto()
    COMMENT = auto()


_CONTAINER_KINDS = (EntityKind.DOCUMENT, EntityKind.TAG)


def _is_valid_name(name: str) -> bool:
    return bool(name) and is_alpha(name[0]) and all(is_name_char(c) for c in name)


class Entity:
    """A node of the document tree.

    Attributes:
        kind: Entity kind, fixed at creation
        name: Tag name or attribute key; empty for documents and comments
        text: Tag text, attribute value or comment body; empty for documents
        sibling_index: Position within the parent's children, None for a root
    """

    def __init__(self, kind: EntityKind, name: str = "", text: str = "") -> None:
        self._kind = kind
        self._name = name
        self._text = text
        self._children: List["Entity"] = []
        self._parent_ref: Optional["weakref.ReferenceType[Entity]"] = None
        self.sibling_index: Optional[int] = None

    @classmethod
    def new_document(cls) -> "Entity":
        """Create an empty document root."""
        return cls(EntityKind.DOCUMENT)

    @property
    def kind(self) -> EntityKind:
        """Entity kind."""
        return self._kind

    @property
    def name(self) -> str:
        """Tag name or attribute key."""
        return self._name

    @property
    def parent(self) -> Optional["Entity"]:
        """Owning entity, or None for a root (or an orphan whose tree was freed)."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def children(self) -> Tuple["Entity", ...]:
        """Children in insertion order."""
        return tuple(self._children)

    @property
    def num_children(self) -> int:
        """Number of children of any kind."""
        return len(self._children)

    @property
    def is_document(self) -> bool:
        return self._kind is EntityKind.DOCUMENT

    @property
    def is_tag(self) -> bool:
        return self._kind is EntityKind.TAG

    @property
    def is_attribute(self) -> bool:
        return self._kind is EntityKind.ATTRIBUTE

    @property
    def is_comment(self) -> bool:
        return self._kind is EntityKind.COMMENT

    def child(self, index: int) -> "Entity":
        """Return the child at ``index``."""
        return self._children[index]

    def get_name(self) -> str:
        return self._name

    @property
    def text(self) -> str:
        """Tag text, attribute value or comment body; empty for documents."""
        return self._text

    @text.setter
    def text(self, value: str) -> None:
        self.set_value(value)

    def get_value(self) -> str:
        return self._text

    def set_value(self, value: str) -> None:
        """Set tag text, attribute value or comment body.

        Raises:
            InvalidAppendTargetError: If this entity is a document
        """
        if self._kind is EntityKind.DOCUMENT:
            raise InvalidAppendTargetError("A document has no value")
        self._text = value

    def matches(
        self, kind: Optional[EntityKind] = None, name: Optional[str] = None
    ) -> bool:
        """Check whether this entity has the given kind and name."""
        return (kind is None or self._kind is kind) and (
            name is None or self._name == name
        )

    # Mutation

    def _check_container(self, what: str) -> None:
        if self._kind not in _CONTAINER_KINDS:
            raise InvalidAppendTargetError(
                f"Cannot append {what} to {self._kind.name.lower()} entity"
            )

    def _append(self, child: "Entity") -> "Entity":
        child._parent_ref = weakref.ref(self)
        child.sibling_index = len(self._children)
        self._children.append(child)
        return child

    def append_tag(self, name: str) -> "Entity":
        """Append a new tag child and return it.

        Raises:
            InvalidAppendTargetError: If this entity is an attribute or comment
            ValueError: If ``name`` is not a valid name
        """
        self._check_container("a tag")
        if not _is_valid_name(name):
            raise ValueError(f"Invalid tag name: {name!r}")
        return self._append(Entity(EntityKind.TAG, name))

    def append_attribute(self, name: str, value: str) -> "Entity":
        """Append a new attribute child and return it.

        Raises:
            InvalidAppendTargetError: If this entity is an attribute or comment
            ValueError: If ``name`` is not a valid name
        """
        self._check_container("an attribute")
        if not _is_valid_name(name):
            raise ValueError(f"Invalid attribute name: {name!r}")
        return self._append(Entity(EntityKind.ATTRIBUTE, name, value))

    def append_comment(self, text: str) -> "Entity":
        """Append a new comment child and return it.

        Raises:
            InvalidAppendTargetError: If this entity is an attribute or comment
        """
        self._check_container("a comment")
        return self._append(Entity(EntityKind.COMMENT, text=text))

    def release(self) -> None:
        """Free this tree: detach and clear every descendant.

        Only a root may be released; afterwards it is an empty entity of the
        same kind.
        """
        if self.parent is not None:
            raise ValueError("Only the root of a tree can be released")

        pending = [self]
        while pending:
            entity = pending.pop()
            pending.extend(entity._children)
            entity._children = []
            entity._parent_ref = None
            entity.sibling_index = None

    # Navigation among this entity's children

    def iter_children(
        self, kind: Optional[EntityKind] = None, name: Optional[str] = None
    ) -> Iterator["Entity"]:
        """Iterate over children matching ``kind`` and ``name``."""
        for child in list(self._children):
            if child.matches(kind, name):
                yield child

    def first_child(
        self, kind: Optional[EntityKind] = None, name: Optional[str] = None
    ) -> Optional["Entity"]:
        """Return the first child matching ``kind`` and ``name``."""
        return next(self.iter_children(kind, name), None)

    def next_child(
        self,
        child: "Entity",
        kind: Optional[EntityKind] = None,
        name: Optional[str] = None,
    ) -> Optional["Entity"]:
        """Return the first child after ``child`` matching ``kind`` and ``name``."""
        self._check_owns(child)
        for index in range(child.sibling_index + 1, len(self._children)):
            candidate = self._children[index]
            if candidate.matches(kind, name):
                return candidate
        return None

    def previous_child(
        self,
        child: "Entity",
        kind: Optional[EntityKind] = None,
        name: Optional[str] = None,
    ) -> Optional["Entity"]:
        """Return the last child before ``child`` matching ``kind`` and ``name``."""
        self._check_owns(child)
        for index in range(child.sibling_index - 1, -1, -1):
            candidate = self._children[index]
            if candidate.matches(kind, name):
                return candidate
        return None

    def _check_owns(self, child: "Entity") -> None:
        index = child.sibling_index
        if (
            index is None
            or index >= len(self._children)
            or self._children[index] is not child
        ):
            raise ValueError("Entity is not a child of this entity")

    def first_child_tag(self, name: Optional[str] = None) -> Optional["Entity"]:
        return self.first_child(EntityKind.TAG, name)

    def first_child_attribute(self, name: Optional[str] = None) -> Optional["Entity"]:
        return self.first_child(EntityKind.ATTRIBUTE, name)

    def first_child_comment(self) -> Optional["Entity"]:
        return self.first_child(EntityKind.COMMENT)

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get the value of the first attribute called ``name``."""
        attribute = self.first_child_attribute(name)
        return attribute.text if attribute is not None else default

    @property
    def attributes(self) -> Dict[str, str]:
        """Attribute children as a dictionary; later duplicates win."""
        return {
            child.name: child.text for child in self.iter_children(EntityKind.ATTRIBUTE)
        }

    # Navigation among siblings

    def next_sibling(
        self, kind: Optional[EntityKind] = None, name: Optional[str] = None
    ) -> Optional["Entity"]:
        """Return the next sibling matching ``kind`` and ``name``."""
        parent = self.parent
        if parent is None:
            return None
        return parent.next_child(self, kind, name)

    def previous_sibling(
        self, kind: Optional[EntityKind] = None, name: Optional[str] = None
    ) -> Optional["Entity"]:
        """Return the previous sibling matching ``kind`` and ``name``."""
        parent = self.parent
        if parent is None:
            return None
        return parent.previous_child(self, kind, name)

    def next_sibling_tag(self, name: Optional[str] = None) -> Optional["Entity"]:
        return self.next_sibling(EntityKind.TAG, name)

    def next_sibling_attribute(self, name: Optional[str] = None) -> Optional["Entity"]:
        return self.next_sibling(EntityKind.ATTRIBUTE, name)

    def next_sibling_comment(self) -> Optional["Entity"]:
        return self.next_sibling(EntityKind.COMMENT)

    def previous_sibling_tag(self, name: Optional[str] = None) -> Optional["Entity"]:
        return self.previous_sibling(EntityKind.TAG, name)

    def previous_sibling_attribute(
        self, name: Optional[str] = None
    ) -> Optional["Entity"]:
        return self.previous_sibling(EntityKind.ATTRIBUTE, name)

    def previous_sibling_comment(self) -> Optional["Entity"]:
        return self.previous_sibling(EntityKind.COMMENT)

    # Whole-tree helpers

    def iter_descendants(self) -> Iterator["Entity"]:
        """Iterate over all descendants in document order."""
        pending = list(reversed(self._children))
        while pending:
            entity = pending.pop()
            yield entity
            pending.extend(reversed(entity._children))

    def get_depth(self) -> int:
        """Depth of this entity in its tree (root = 0)."""
        depth = 0
        parent = self.parent
        while parent is not None:
            depth += 1
            parent = parent.parent
        return depth

    def to_dict(self) -> Dict[str, Any]:
        """Convert entity and its subtree to dictionary representation."""
        result = self._header_dict()
        pending = [(self, result)]
        while pending:
            entity, node = pending.pop()
            if not entity._children:
                continue
            node["children"] = []
            for child in entity._children:
                child_node = child._header_dict()
                node["children"].append(child_node)
                pending.append((child, child_node))
        return result

    def _header_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"kind": self._kind.name}
        if self._name:
            result["name"] = self._name
        if self._text:
            result["text"] = self._text
        return result

    # Output

    def serialize(self) -> str:
        """Render this entity and its subtree as XML text."""
        from .serializer import serialize
        return serialize(self)

    def write(self, stream: TextIO) -> None:
        """Write the XML rendering of this entity to ``stream``."""
        from .serializer import write
        write(self, stream)

    def dump(self) -> str:
        """Return an indented, one-entity-per-line debug listing."""
        from .serializer import dump
        return dump(self)

    def __str__(self) -> str:
        return self.serialize()

    def __repr__(self) -> str:
        if self._kind is EntityKind.DOCUMENT:
            return f"<Entity DOCUMENT children={len(self._children)}>"
        if self._kind is EntityKind.COMMENT:
            return f"<Entity COMMENT {self.text!r}>"
        if self._kind is EntityKind.ATTRIBUTE:
            return f"<Entity ATTRIBUTE {self._name}={self.text!r}>"
        return f"<Entity TAG {self._name} children={len(self._children)}>"
