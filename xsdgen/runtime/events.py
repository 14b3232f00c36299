#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""
Document events consumed by generated parsers. The parsers work on the children
of an element through an `ElementStream`, a cursor with a single element of
lookahead that keeps track of the path and the position of each element.
"""
from collections import Counter
from collections.abc import Iterator
from typing import NamedTuple, Optional

from xsdgen.translation import gettext as _
from xsdgen.tree import TreeNode
from xsdgen.utils.qnames import get_prefixed_qname
from .exceptions import ValidationError

START, END, TEXT = 'start', 'end', 'text'


class Event(NamedTuple):
    kind: str
    node: TreeNode
    text: Optional[str] = None


def iter_events(root: TreeNode) -> Iterator[Event]:
    """Iterates the start, text and end events of a tree in document order."""
    yield Event(START, root)
    for child in root.children:
        if isinstance(child, str):
            yield Event(TEXT, root, child)
        else:
            yield from iter_events(child)
    yield Event(END, root)


class ParseContext:
    """
    The state of a parse run: the positions of elements in document order
    and the current depth.
    """
    def __init__(self, root: TreeNode) -> None:
        self.positions = {id(node): k for k, node in enumerate(root.iter(), start=1)}
        self.depth = 0

    def get_position(self, node: TreeNode) -> Optional[int]:
        return self.positions.get(id(node))


class ElementStream:
    """
    A cursor over the element children of a node.

    :param node: the parent node.
    :param path: the path of the parent node.
    :param context: the parse context.
    """
    def __init__(self, node: TreeNode, path: str, context: ParseContext) -> None:
        self.node = node
        self.path = path
        self.context = context
        self.elements = list(node.iter_elements())
        self.index = 0
        self.last_matched: dict[str, str] = {}
        self._counter: Counter[str] = Counter()

    def __repr__(self) -> str:
        return '%s(path=%r, index=%r)' % (self.__class__.__name__, self.path, self.index)

    def peek(self) -> Optional[TreeNode]:
        """Returns the next element without consuming it, or `None` at the end."""
        try:
            return self.elements[self.index]
        except IndexError:
            return None

    @property
    def tag(self) -> Optional[str]:
        node = self.peek()
        return node.tag if node is not None else None

    def next(self, particle: Optional[str] = None) -> tuple[TreeNode, str]:
        """
        Consumes the next element, returning it with its path. The name of the
        matching particle is recorded for reporting excess occurrences.
        """
        node = self.elements[self.index]
        self.index += 1
        name = get_prefixed_qname(node.tag, node.nsmap)
        self._counter[name] += 1
        if particle is not None:
            self.last_matched[node.tag] = particle
        return node, f'{self.path}/{name}[{self._counter[name]}]'

    def at_end(self) -> bool:
        return self.index >= len(self.elements)

    @property
    def position(self) -> Optional[int]:
        node = self.peek()
        if node is None:
            return self.context.get_position(self.node)
        return self.context.get_position(node)

    def error(self, reason: str, particle: Optional[str] = None,
              attribute: Optional[str] = None) -> ValidationError:
        return ValidationError(reason, particle, attribute, self.path, self.position)

    def check_end(self) -> None:
        """Raises a `ValidationError` if there are unmatched elements left."""
        node = self.peek()
        if node is None:
            return
        elif node.tag in self.last_matched:
            raise self.error(_("maxOccurs exceeded: unexpected further occurrence "
                               "of element {!r}").format(node.tag),
                             particle=self.last_matched[node.tag])
        raise self.error(_("unexpected child element {!r}").format(node.tag),
                         particle=node.tag)
