#
# Copyright (c), 2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""
Generic labeled trees of XML documents. A tree is built from ElementTree's
iterparse events, keeping the in-scope namespace map of each element, that
is required for resolving QName values of schema attributes.
"""
import io
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Any, IO, NamedTuple, Optional, Union
from xml.etree import ElementTree

from xsdgen.exceptions import TreeParseError, XsdGenTypeError
from xsdgen.translation import gettext as _

NsmapType = dict[str, str]


class TreeNode:
    """
    A node of a generic labeled tree.

    :param tag: the extended name of the element.
    :param attrib: the ordered mapping of attributes, with extended names as keys.
    :param nsmap: the namespace map in scope for the element.
    :param children: the ordered list of children, elements and text runs.
    """
    __slots__ = ('tag', 'attrib', 'nsmap', 'children')

    def __init__(self, tag: str,
                 attrib: Optional[dict[str, str]] = None,
                 nsmap: Optional[NsmapType] = None,
                 children: Optional[list[Union['TreeNode', str]]] = None) -> None:
        self.tag = tag
        self.attrib = {} if attrib is None else attrib
        self.nsmap = {} if nsmap is None else nsmap
        self.children = [] if children is None else children

    def __repr__(self) -> str:
        return '%s(tag=%r)' % (self.__class__.__name__, self.tag)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TreeNode):
            return NotImplemented
        return self.tag == other.tag and self.attrib == other.attrib \
            and self.children == other.children

    __hash__ = None  # type: ignore[assignment]

    def __len__(self) -> int:
        return len(self.children)

    @property
    def text(self) -> str:
        """The concatenation of the text runs that are direct children of the node."""
        return ''.join(x for x in self.children if isinstance(x, str))

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attrib.get(name, default)

    def iter_elements(self) -> Iterator['TreeNode']:
        """Iterates over the element children."""
        for child in self.children:
            if isinstance(child, TreeNode):
                yield child

    def iter(self) -> Iterator['TreeNode']:
        """Iterates the subtree in document order, including the node itself."""
        yield self
        for child in self.iter_elements():
            yield from child.iter()

    @classmethod
    def from_etree(cls, elem: Any, nsmap: Optional[NsmapType] = None) -> 'TreeNode':
        """
        Builds a tree from an ElementTree's element. The namespace map is
        taken from the element if it's an lxml element, otherwise the
        provided map is used for all the nodes of the tree.
        """
        if nsmap is None:
            nsmap = {k or '': v for k, v in getattr(elem, 'nsmap', {}).items()}

        node = cls(elem.tag, dict(elem.attrib), nsmap)
        if elem.text:
            node.children.append(elem.text)
        for child in elem:
            if not isinstance(child.tag, str):
                continue  # skip comments and processing instructions
            child_nsmap = getattr(child, 'nsmap', None)
            if child_nsmap is not None:
                child_nsmap = {k or '': v for k, v in child_nsmap.items()}
            else:
                child_nsmap = nsmap
            node.children.append(cls.from_etree(child, child_nsmap))
            if child.tail:
                node.children.append(child.tail)
        return node

    def to_etree(self) -> ElementTree.Element:
        """Returns an ElementTree's element equivalent to the tree."""
        elem = ElementTree.Element(self.tag, self.attrib)
        last: Optional[ElementTree.Element] = None
        for child in self.children:
            if isinstance(child, TreeNode):
                last = child.to_etree()
                elem.append(last)
            elif last is None:
                elem.text = (elem.text or '') + child
            else:
                last.tail = (last.tail or '') + child
        return elem


class TreeDocument(NamedTuple):
    """A loaded document: the root node of the tree and the URL of the source, if any."""
    root: TreeNode
    url: Optional[str] = None


SourceType = Union[str, bytes, Path, IO[str], IO[bytes],
                   ElementTree.Element, TreeNode, TreeDocument]


def _iterparse_tree(fp: Union[IO[str], IO[bytes]]) -> TreeNode:
    root: Optional[TreeNode] = None
    stack: list[tuple[TreeNode, ElementTree.Element]] = []
    nsmap_stack: list[NsmapType] = [{}]
    start_ns: list[tuple[str, str]] = []

    for event, item in ElementTree.iterparse(fp, events=('start-ns', 'start', 'end')):
        if event == 'start-ns':
            start_ns.append(item)
        elif event == 'start':
            nsmap = nsmap_stack[-1]
            if start_ns:
                nsmap = nsmap.copy()
                nsmap.update(start_ns)
                start_ns = []
            nsmap_stack.append(nsmap)

            node = TreeNode(item.tag, dict(item.attrib), nsmap)
            if stack:
                stack[-1][0].children.append(node)
            else:
                root = node
            stack.append((node, item))
        else:
            node, elem = stack.pop()
            nsmap_stack.pop()

            # Interleave text runs with element children
            children: list[Union[TreeNode, str]] = []
            if elem.text:
                children.append(elem.text)
            for child_node, child_elem in zip(node.children, elem):
                children.append(child_node)
                if child_elem.tail:
                    children.append(child_elem.tail)
            node.children = children

    if root is None:
        raise TreeParseError(_("the XML source is empty"))
    return root


def load_document(source: SourceType) -> TreeDocument:
    """
    Loads an XML document into a generic labeled tree.

    :param source: a file path, an XML string, bytes, a file-like object, an \
    ElementTree's element, a `TreeNode` or a `TreeDocument` instance.
    """
    if isinstance(source, TreeDocument):
        return source
    elif isinstance(source, TreeNode):
        return TreeDocument(source)
    elif ElementTree.iselement(source):
        return TreeDocument(TreeNode.from_etree(source))

    url: Optional[str] = None
    try:
        if isinstance(source, Path):
            url = str(source)
            with open(source, 'rb') as fp:
                root = _iterparse_tree(fp)
        elif isinstance(source, str):
            if source.lstrip().startswith('<'):
                root = _iterparse_tree(io.StringIO(source))
            else:
                url = source
                with open(source, 'rb') as fp:
                    root = _iterparse_tree(fp)
        elif isinstance(source, bytes):
            root = _iterparse_tree(io.BytesIO(source))
        elif hasattr(source, 'read'):
            url = getattr(source, 'name', None)
            if not isinstance(url, str):
                url = None
            root = _iterparse_tree(source)
        else:
            msg = _("invalid type {!r} for an XML source")
            raise XsdGenTypeError(msg.format(type(source)))
    except SyntaxError as err:
        raise TreeParseError(str(err), url) from err

    if url is not None:
        url = os.path.abspath(url)
    return TreeDocument(root, url)


def load_tree(source: SourceType) -> TreeNode:
    """Loads an XML source and returns the root node of its tree."""
    return load_document(source).root
