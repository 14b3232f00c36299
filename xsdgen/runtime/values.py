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
This module contains the base classes of the values produced by generated
parsers and the element declarations that build them.
"""
import dataclasses as dc
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, ClassVar, NamedTuple, Optional, Union

import xsdgen.names as nm
from xsdgen.exceptions import XsdGenValueError
from xsdgen.translation import gettext as _
from xsdgen.tree import NsmapType, TreeNode
from xsdgen.utils.qnames import get_namespace
from .exceptions import ValidationError, LexicalError
from .simple_types import SimpleType, encode_value
from .events import ElementStream, ParseContext
from .content import Particle, Empty, Wildcard

if TYPE_CHECKING:
    from .registry import Registry

FIELD_KINDS = ('attribute', 'element', 'wildcard', 'text', 'content', 'any_attribute')


class FieldInfo(NamedTuple):
    """
    The mapping of a field of a complex value to the XML data.

    :param kind: the kind of the field, one of 'attribute', 'element', \
    'wildcard', 'text', 'content' and 'any_attribute'.
    :param tag: the attribute or the element name, if any.
    :param multiple: `True` if the field is a list.
    """
    kind: str
    tag: Optional[str] = None
    multiple: bool = False


class AttributeUse(NamedTuple):
    tag: str
    field: str
    simple_type: SimpleType
    required: bool = False
    default: Optional[str] = None
    fixed: Optional[str] = None


class AnyAttribute(Wildcard):
    """An attribute wildcard. Matched attributes are stored as a map into a field."""

    def __init__(self, field: str, mode: str = 'any',
                 namespaces: Union[list[str], tuple[str, ...]] = (),
                 process_contents: str = 'strict') -> None:
        super().__init__(field, mode, namespaces, process_contents, 0, None)


class TaggedValue(NamedTuple):
    """A simple value of an element that substitutes the head of its substitution group."""
    tag: str
    value: Any


class AnyTypeBinding:
    """The binding of elements of type xs:anyType, that are captured as generic trees."""

    def __repr__(self) -> str:
        return 'ANY_TYPE'


ANY_TYPE = AnyTypeBinding()

BindingType = Union[type['ComplexValue'], SimpleType, AnyTypeBinding, 'TypeRef']


def decode_text(simple_type: SimpleType, text: str, nsmap: NsmapType,
                path: Optional[str], position: Optional[int]) -> Any:
    """Decodes a text with a simple type, adding the location to lexical errors."""
    try:
        return simple_type.decode(text, nsmap)
    except LexicalError as err:
        err.path = path
        err.position = position
        raise


def _is_xsi_nil(node: TreeNode) -> bool:
    return node.get(nm.XSI_NIL, '').strip() in ('true', '1')


@dc.dataclass
class ComplexValue:
    """
    Base class of the values of complex types. Generated subclasses are
    dataclasses whose fields are mapped to the XML data by the class
    tables `xsd_fields` and `xsd_attributes`.

    After parsing, an instance also keeps the tag and the namespace map
    of the element and the document order of its fields, so it can be
    converted back into a tree with `xsd_to_tree()`.
    """
    xsd_name: ClassVar[Optional[str]] = None
    xsd_fields: ClassVar[dict[str, FieldInfo]] = {}
    xsd_attributes: ClassVar[dict[str, AttributeUse]] = {}
    xsd_any_attribute: ClassVar[Optional[AnyAttribute]] = None
    xsd_model: ClassVar[Particle] = Empty()
    xsd_simple_type: ClassVar[Optional[SimpleType]] = None
    xsd_mixed: ClassVar[bool] = False

    xsd_tag: Optional[str] = dc.field(default=None, init=False, repr=False, compare=False)
    xsd_nsmap: Optional[NsmapType] = dc.field(
        default=None, init=False, repr=False, compare=False
    )
    xsd_order: Optional[list[tuple[str, Optional[str]]]] = dc.field(
        default=None, init=False, repr=False, compare=False
    )
    xsd_defaulted: set[str] = dc.field(
        default_factory=set, init=False, repr=False, compare=False
    )

    @classmethod
    def get_field(cls, kind: str) -> Optional[str]:
        """Returns the name of the first field of a kind, `None` if there is no such field."""
        for name, info in cls.xsd_fields.items():
            if info.kind == kind:
                return name
        return None

    @classmethod
    def xsd_parse(cls, node: TreeNode, path: str, context: ParseContext) -> 'ComplexValue':
        """Builds an instance from a tree node, validating it against the type."""
        obj = cls()
        obj.xsd_tag = node.tag
        obj.xsd_nsmap = node.nsmap
        obj.xsd_order = []
        obj.parse_attributes(node, path, context)

        stream = ElementStream(node, path, context)
        if cls.xsd_simple_type is not None:
            if not stream.at_end():
                raise stream.error(_("a simple content element can't have child elements"),
                                   particle=stream.tag)
            field = cls.get_field('content')
            if field is not None:
                value = decode_text(cls.xsd_simple_type, node.text, node.nsmap,
                                    path, context.get_position(node))
                setattr(obj, field, value)
            return obj

        if not cls.xsd_mixed and node.text.strip():
            raise stream.error(_("character data not allowed in element-only content"))

        cls.xsd_model.match(stream, obj)
        stream.check_end()

        field = cls.get_field('text')
        if field is not None:
            texts = getattr(obj, field)
            order = iter(obj.xsd_order)
            merged: list[tuple[str, Optional[str]]] = []
            for child in node.children:
                if isinstance(child, str):
                    texts.append(child)
                    merged.append((field, None))
                else:
                    merged.append(next(order))
            obj.xsd_order = merged
        return obj

    def parse_attributes(self, node: TreeNode, path: str, context: ParseContext) -> None:
        position = context.get_position(node)
        any_attribute = self.xsd_any_attribute

        for tag, text in node.attrib.items():
            if get_namespace(tag) == nm.XSI_NAMESPACE:
                continue

            use = self.xsd_attributes.get(tag)
            if use is None:
                if any_attribute is None or not any_attribute.is_matching(tag):
                    raise ValidationError(_("attribute not allowed for this element"),
                                          attribute=tag, path=path, position=position)
                getattr(self, any_attribute.field)[tag] = text
                continue

            value = decode_text(use.simple_type, text, node.nsmap, path, position)
            if use.fixed is not None and \
                    value != use.simple_type.decode(use.fixed, node.nsmap):
                reason = _("attribute value must be equal to the fixed value {!r}")
                raise ValidationError(reason.format(use.fixed), attribute=tag,
                                      path=path, position=position)
            setattr(self, use.field, value)

        for tag, use in self.xsd_attributes.items():
            if tag in node.attrib:
                continue
            elif use.required:
                raise ValidationError(_("missing required attribute"),
                                      attribute=tag, path=path, position=position)

            default = use.fixed if use.fixed is not None else use.default
            if default is not None:
                setattr(self, use.field, use.simple_type.decode(default, node.nsmap))
                self.xsd_defaulted.add(tag)

    def add(self, field: str, value: Any, tag: Optional[str]) -> None:
        """Adds a matched child value. Called by the content model of the type."""
        if self.xsd_fields[field].multiple:
            getattr(self, field).append(value)
        else:
            setattr(self, field, value)
        if self.xsd_order is not None:
            self.xsd_order.append((field, tag))

    def iter_order(self) -> Iterator[tuple[str, Optional[str], Any]]:
        """
        Iterates the (field, tag, value) triples of the content in document
        order. Values built without parsing are iterated in field order.
        """
        if self.xsd_order is not None:
            counters: dict[str, int] = {}
            for field, tag in self.xsd_order:
                info = self.xsd_fields[field]
                if info.multiple or info.kind == 'text':
                    k = counters.get(field, 0)
                    counters[field] = k + 1
                    yield field, tag, getattr(self, field)[k]
                else:
                    yield field, tag, getattr(self, field)
            return

        for field, info in self.xsd_fields.items():
            if info.kind not in ('element', 'wildcard', 'text'):
                continue
            value = getattr(self, field)
            if info.multiple or info.kind == 'text':
                for item in value:
                    yield field, info.tag, item
            elif value is not None:
                yield field, info.tag, value

    def xsd_to_tree(self, tag: Optional[str] = None,
                    nsmap: Optional[NsmapType] = None) -> TreeNode:
        """
        Returns the generic tree of the value. Attributes filled from defaults
        are not included, so a parsed value is converted back to its source tree.

        :param tag: the tag of the element, defaults to the parsed tag.
        :param nsmap: the namespace map to use if the value has none.
        """
        tag = tag or self.xsd_tag
        if tag is None:
            raise XsdGenValueError(_("{!r} has no element tag").format(self))
        if self.xsd_nsmap is not None:
            nsmap = self.xsd_nsmap
        elif nsmap is None:
            nsmap = {}

        attrib = {}
        for attr_tag, use in self.xsd_attributes.items():
            if attr_tag not in self.xsd_defaulted:
                value = getattr(self, use.field)
                if value is not None:
                    attrib[attr_tag] = use.simple_type.encode(value)
        if self.xsd_any_attribute is not None:
            attrib.update(getattr(self, self.xsd_any_attribute.field))

        node = TreeNode(tag, attrib, nsmap)
        if self.xsd_simple_type is not None:
            field = self.get_field('content')
            value = getattr(self, field) if field is not None else None
            if value is not None:
                text = self.xsd_simple_type.encode(value)
                if text:
                    node.children.append(text)
            return node

        for field, child_tag, value in self.iter_order():
            if self.xsd_fields[field].kind == 'text':
                node.children.append(value)
            else:
                node.children.append(value_to_tree(value, child_tag, nsmap))
        return node


def value_to_tree(value: Any, tag: Optional[str], nsmap: NsmapType) -> TreeNode:
    """Returns the tree of an element value."""
    if isinstance(value, ComplexValue):
        return value.xsd_to_tree(tag, nsmap)
    elif isinstance(value, TreeNode):
        return value
    elif isinstance(value, TaggedValue):
        return value_to_tree(value.value, value.tag, nsmap)
    elif tag is None:
        raise XsdGenValueError(_("missing tag for value {!r}").format(value))
    elif value is None:
        return TreeNode(tag, {nm.XSI_NIL: 'true'}, nsmap)

    text = encode_value(value)
    return TreeNode(tag, {}, nsmap, [text] if text else [])


class TypeRef:
    """A lazy reference to a complex type of a registry, used for recursive types."""

    def __init__(self, registry: 'Registry', name: str) -> None:
        self.registry = registry
        self.name = name

    def __repr__(self) -> str:
        return '%s(name=%r)' % (self.__class__.__name__, self.name)

    def resolve(self) -> type[ComplexValue]:
        return self.registry.get_type(self.name)


class ElementDecl:
    """
    An element declaration of a generated parser.

    :param tag: the name of the element.
    :param binding: the type of the element: a `ComplexValue` subclass, \
    a simple type, `ANY_TYPE` or a lazy reference to a complex type.
    :param nillable: the element can be nil.
    :param default: the default value of a simple element.
    :param fixed: the fixed value of a simple element.
    :param abstract: the element can't appear in instances.
    """
    def __init__(self, tag: str, binding: BindingType,
                 nillable: bool = False,
                 default: Optional[str] = None,
                 fixed: Optional[str] = None,
                 abstract: bool = False) -> None:
        self.tag = tag
        self._binding = binding
        self.nillable = nillable
        self.default = default
        self.fixed = fixed
        self.abstract = abstract

    def __repr__(self) -> str:
        return '%s(tag=%r, binding=%r)' % (self.__class__.__name__, self.tag, self._binding)

    @property
    def binding(self) -> Union[type[ComplexValue], SimpleType, AnyTypeBinding]:
        if isinstance(self._binding, TypeRef):
            self._binding = self._binding.resolve()
        return self._binding

    def parse(self, node: TreeNode, path: str, context: ParseContext,
              substitute: bool = False) -> Any:
        """
        Parses an element node. Returns `None` for nil elements.

        :param substitute: if `True` the element replaces the head of its \
        substitution group and a simple value is wrapped with its tag.
        """
        position = context.get_position(node)
        if self.abstract:
            raise ValidationError(_("an abstract element can't appear in an instance"),
                                  particle=self.tag, path=path, position=position)

        if self.nillable and _is_xsi_nil(node):
            if node.text.strip() or any(True for _child in node.iter_elements()):
                raise ValidationError(_("a nil element must be empty"),
                                      particle=self.tag, path=path, position=position)
            return None

        binding = self.binding
        if isinstance(binding, type):
            return binding.xsd_parse(node, path, context)
        elif binding is ANY_TYPE:
            return node

        assert isinstance(binding, SimpleType)
        value = self.parse_simple(binding, node, path, position)
        return TaggedValue(node.tag, value) if substitute else value

    def parse_simple(self, simple_type: SimpleType, node: TreeNode,
                     path: str, position: Optional[int]) -> Any:
        for child in node.iter_elements():
            raise ValidationError(_("a simple type element can't have child elements"),
                                  particle=child.tag, path=path, position=position)
        for tag in node.attrib:
            if get_namespace(tag) != nm.XSI_NAMESPACE:
                raise ValidationError(_("attribute not allowed for this element"),
                                      attribute=tag, path=path, position=position)

        text = node.text
        if not text:
            if self.fixed is not None:
                text = self.fixed
            elif self.default is not None:
                text = self.default

        value = decode_text(simple_type, text, node.nsmap, path, position)
        if self.fixed is not None and value != simple_type.decode(self.fixed, node.nsmap):
            reason = _("the value must be equal to the fixed value {!r}").format(self.fixed)
            raise ValidationError(reason, particle=self.tag, path=path, position=position)
        return value


class ElementDeclRef:
    """A lazy reference to a global element declaration of a registry."""

    def __init__(self, registry: 'Registry', tag: str) -> None:
        self.registry = registry
        self.tag = tag

    def __repr__(self) -> str:
        return '%s(tag=%r)' % (self.__class__.__name__, self.tag)

    def parse(self, node: TreeNode, path: str, context: ParseContext,
              substitute: bool = False) -> Any:
        return self.registry.get_element(self.tag).parse(node, path, context, substitute)
