"""Text renderings of document trees.

``serialize``/``write`` produce compact XML text: attributes inline, tag text
directly after the start tag, then child tags and comments in order. A tag with
neither text nor non-attribute children is written in the ``<name/>`` form.
Values are written verbatim; no escaping is applied. A document renders only
its children, without an XML prolog.

``dump`` produces the indented debug listing::

    DOCUMENT
      TAG: a
        ATTRIBUTE: id=1
        COMMENT:  note
"""

import io
from typing import List, TextIO, Union

from .entity import Entity, EntityKind

DUMP_INDENT = "  "


def serialize(entity: Entity) -> str:
    """Render ``entity`` and its subtree as XML text."""
    buffer = io.StringIO()
    write(entity, buffer)
    return buffer.getvalue()


def write(entity: Entity, stream: TextIO) -> None:
    """Write the XML rendering of ``entity`` to ``stream``."""
    pending: List[Union[Entity, str]] = [entity]
    while pending:
        item = pending.pop()
        if isinstance(item, str):
            stream.write(item)
            continue

        kind = item.kind
        if kind is EntityKind.ATTRIBUTE:
            stream.write(f'{item.name}="{item.text}"')
        elif kind is EntityKind.COMMENT:
            stream.write(f"<!-- {item.text} -->")
        elif kind is EntityKind.DOCUMENT:
            pending.extend(
                child for child in reversed(item.children)
                if child.kind is not EntityKind.ATTRIBUTE
            )
        else:
            pending.extend(reversed(_open_tag(item, stream)))


def _open_tag(tag: Entity, stream: TextIO) -> List[Union[Entity, str]]:
    """Write the start of ``tag``; return what follows it, in order."""
    stream.write(f"<{tag.name}")
    content: List[Union[Entity, str]] = []
    for child in tag.children:
        if child.kind is EntityKind.ATTRIBUTE:
            stream.write(f' {child.name}="{child.text}"')
        else:
            content.append(child)

    if not content and not tag.text:
        stream.write("/>")
        return []

    stream.write(">")
    stream.write(tag.text)
    content.append(f"</{tag.name}>")
    return content


def dump(entity: Entity, indent: str = DUMP_INDENT) -> str:
    """Return the indented one-entity-per-line listing of a subtree."""
    lines: List[str] = []
    pending = [(entity, 0)]
    while pending:
        current, depth = pending.pop()
        lines.append(f"{indent * depth}{_describe(current)}")
        pending.extend(
            (child, depth + 1) for child in reversed(current.children)
        )
    return "\n".join(lines) + "\n"


def _describe(entity: Entity) -> str:
    kind = entity.kind
    if kind is EntityKind.DOCUMENT:
        return "DOCUMENT"
    if kind is EntityKind.TAG:
        return f"TAG: {entity.name}"
    if kind is EntityKind.ATTRIBUTE:
        return f"ATTRIBUTE: {entity.name}={entity.text}"
    return f"COMMENT: {entity.text}"
