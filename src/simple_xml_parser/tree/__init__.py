"""Document tree: entities, tree building and serialization.

Key Components:
    Entity, EntityKind: Navigable, mutable document tree nodes
    TreeBuilder: Event sink that builds an Entity tree
    ParseResult: Document plus diagnostics and metrics of one parse
    serialize, write, dump: Text renderings of a tree
"""

from .builder import ParseResult, TreeBuilder
from .entity import Entity, EntityKind
from .serializer import dump, serialize, write

__all__ = [
    "Entity",
    "EntityKind",
    "ParseResult",
    "TreeBuilder",
    "dump",
    "serialize",
    "write",
]
