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
The model builder: walks the tree of a schema document and builds the
declarations of the document, referring to other components by name.
"""
import logging
from collections import Counter
from collections.abc import Iterator
from typing import Any, NoReturn, Optional

import xsdgen.names as nm
from xsdgen.exceptions import XsdGenValueError, XsdGenKeyError
from xsdgen.translation import gettext as _
from xsdgen.tree import TreeNode, TreeDocument
from xsdgen.utils.qnames import get_qname, local_name, resolve_qname
from .exceptions import IngestError, UnsupportedConstructError
from .components import ParticleType, Sequence, Choice, All, ElementRef, \
    GroupRef, Wildcard, ElementDecl, AttributeDecl, AttributeUse, \
    AttributeGroupDef, GroupDef, AtomicType, ListType, UnionType, ComplexType
from .graph import SchemaContribution, SchemaImport

logger = logging.getLogger('xsdgen')

FACET_TAGS = frozenset((
    nm.XSD_ENUMERATION, nm.XSD_PATTERN, nm.XSD_WHITE_SPACE, nm.XSD_LENGTH,
    nm.XSD_MIN_LENGTH, nm.XSD_MAX_LENGTH, nm.XSD_MIN_INCLUSIVE, nm.XSD_MAX_INCLUSIVE,
    nm.XSD_MIN_EXCLUSIVE, nm.XSD_MAX_EXCLUSIVE, nm.XSD_TOTAL_DIGITS,
    nm.XSD_FRACTION_DIGITS,
))

MODEL_GROUP_TAGS = frozenset((nm.XSD_SEQUENCE, nm.XSD_CHOICE, nm.XSD_ALL, nm.XSD_GROUP))

ATTRIBUTE_TAGS = frozenset((nm.XSD_ATTRIBUTE, nm.XSD_ATTRIBUTE_GROUP, nm.XSD_ANY_ATTRIBUTE))

IDENTITY_TAGS = frozenset((nm.XSD_UNIQUE, nm.XSD_KEY, nm.XSD_KEYREF))

# Recognized constructs that are never modeled
UNSUPPORTED_TAGS = frozenset((
    nm.XSD_REDEFINE, nm.XSD_OVERRIDE, nm.XSD_OPEN_CONTENT, nm.XSD_DEFAULT_OPEN_CONTENT,
    nm.XSD_ASSERT, nm.XSD_ASSERTION, nm.XSD_ALTERNATIVE, nm.XSD_EXPLICIT_TIMEZONE,
))

# Recognized constructs that are skipped, or rejected in strict mode
SKIPPED_TAGS = IDENTITY_TAGS | {nm.XSD_NOTATION}

PROCESS_CONTENTS = ('strict', 'lax', 'skip')

USE_VALUES = ('optional', 'required', 'prohibited')

FORM_VALUES = ('qualified', 'unqualified')


def prefixed_name(tag: str) -> str:
    """Returns the name of a schema construct for messages (e.g. 'xs:element')."""
    if tag.startswith('{%s}' % nm.XSD_NAMESPACE):
        return 'xs:%s' % local_name(tag)
    return tag


class ModelBuilder:
    """
    Builds the declarations of a schema document. The document vocabulary is
    dispatched with closed maps of handlers, one for each context.

    :param document: the loaded schema document.
    :param strict: if `True` the skippable constructs (identity constraints \
    and notations) raise an `UnsupportedConstructError`.
    """
    def __init__(self, document: TreeDocument, strict: bool = False) -> None:
        self.document = document
        self.url = document.url
        self.strict = strict
        self.target_namespace = ''
        self.element_form_default = 'unqualified'
        self.attribute_form_default = 'unqualified'
        self.contribution = SchemaContribution(self.url)

        self._scope: list[str] = []
        self._anonymous_names: Counter[str] = Counter()

        self._global_builders = {
            nm.XSD_SIMPLE_TYPE: self._build_global_simple_type,
            nm.XSD_COMPLEX_TYPE: self._build_global_complex_type,
            nm.XSD_ELEMENT: self._build_global_element,
            nm.XSD_ATTRIBUTE: self._build_global_attribute,
            nm.XSD_ATTRIBUTE_GROUP: self._build_global_attribute_group,
            nm.XSD_GROUP: self._build_global_group,
        }
        self._particle_builders = {
            nm.XSD_ELEMENT: self._build_local_element,
            nm.XSD_GROUP: self._build_group_ref,
            nm.XSD_SEQUENCE: self._build_model_group,
            nm.XSD_CHOICE: self._build_model_group,
            nm.XSD_ALL: self._build_model_group,
            nm.XSD_ANY: self._build_any,
        }

    def __repr__(self) -> str:
        return '%s(url=%r)' % (self.__class__.__name__, self.url)

    def build(self) -> SchemaContribution:
        """Builds the declarations of the schema document."""
        root = self.document.root
        path = '/xs:schema'
        if root.tag != nm.XSD_SCHEMA:
            self.parse_error(_("the root element {!r} is not an XSD schema").format(root.tag),
                             '/' + local_name(root.tag))

        self.target_namespace = root.get('targetNamespace', '').strip()
        self.element_form_default = self._get_form(root, 'elementFormDefault', path)
        self.attribute_form_default = self._get_form(root, 'attributeFormDefault', path)
        self.contribution.target_namespace = self.target_namespace
        logger.debug("build declarations of %r (namespace %r)", self.url, self.target_namespace)

        for child, child_path in self._iter_children(root, path):
            if child.tag == nm.XSD_IMPORT:
                self.contribution.imports.append(SchemaImport(
                    namespace=child.get('namespace', '').strip(),
                    location=child.get('schemaLocation'),
                    url=self.url,
                ))
            elif child.tag == nm.XSD_INCLUDE:
                self.contribution.imports.append(SchemaImport(
                    namespace=self.target_namespace,
                    location=child.get('schemaLocation'),
                    url=self.url,
                    kind='include',
                ))
            else:
                try:
                    builder = self._global_builders[child.tag]
                except KeyError:
                    self.unexpected_child(child, child_path)
                else:
                    self._scope.clear()
                    builder(child, child_path)

        return self.contribution

    ###
    # Helpers

    def parse_error(self, message: str, path: Optional[str] = None,
                    name: Optional[str] = None) -> NoReturn:
        raise IngestError(message, name, self.url, path)

    def unexpected_child(self, node: TreeNode, path: str) -> NoReturn:
        if node.tag in UNSUPPORTED_TAGS:
            raise UnsupportedConstructError(prefixed_name(node.tag), url=self.url, path=path)
        msg = _("unexpected child {!r}").format(prefixed_name(node.tag))
        self.parse_error(msg, path)

    def skip_construct(self, node: TreeNode, path: str) -> None:
        construct = prefixed_name(node.tag)
        if self.strict:
            raise UnsupportedConstructError(
                construct, url=self.url, path=path, reason=_("skipping is disabled")
            )
        logger.warning("skip unsupported construct %r at %r of %r", construct, path, self.url)

    def _iter_children(self, node: TreeNode, path: str) -> Iterator[tuple[TreeNode, str]]:
        """
        Iterates the XSD children of a schema construct with their paths, skipping
        annotations and the recognized constructs that are not modeled.
        """
        counter: Counter[str] = Counter()
        for child in node.children:
            if isinstance(child, str):
                if child.strip():
                    msg = _("unexpected character data {!r}").format(child.strip())
                    self.parse_error(msg, path)
                continue

            name = prefixed_name(child.tag)
            counter[name] += 1
            child_path = f'{path}/{name}[{counter[name]}]'

            if child.tag == nm.XSD_ANNOTATION:
                continue
            elif child.tag in SKIPPED_TAGS:
                self.skip_construct(child, child_path)
            elif child.tag in UNSUPPORTED_TAGS:
                raise UnsupportedConstructError(name, url=self.url, path=child_path)
            elif not child.tag.startswith('{%s}' % nm.XSD_NAMESPACE):
                self.parse_error(_("unexpected element {!r}").format(child.tag), child_path)
            else:
                yield child, child_path

    def _get_name(self, node: TreeNode, path: str) -> str:
        try:
            name = node.attrib['name'].strip()
        except KeyError:
            msg = _("missing 'name' attribute for {!r}").format(prefixed_name(node.tag))
            self.parse_error(msg, path)
        else:
            if not name or ':' in name:
                self.parse_error(_("invalid name {!r}").format(name), path)
            return name

    def _resolve_qname(self, node: TreeNode, attr: str, path: str) -> str:
        try:
            return resolve_qname(node.attrib[attr], node.nsmap)
        except (XsdGenValueError, XsdGenKeyError) as err:
            msg = _("invalid QName value for attribute {!r}: {}").format(attr, err)
            raise IngestError(msg, url=self.url, path=path) from err

    def _get_qname_attr(self, node: TreeNode, attr: str, path: str) -> Optional[str]:
        if attr not in node.attrib:
            return None
        return self._resolve_qname(node, attr, path)

    def _get_boolean(self, node: TreeNode, attr: str, path: str, default: bool = False) -> bool:
        value = node.get(attr)
        if value is None:
            return default

        value = value.strip()
        if value in ('true', '1'):
            return True
        elif value in ('false', '0'):
            return False
        msg = _("invalid boolean value {!r} for attribute {!r}").format(value, attr)
        self.parse_error(msg, path)

    def _get_form(self, node: TreeNode, attr: str, path: str,
                  default: str = 'unqualified') -> str:
        value = node.get(attr, default).strip()
        if value not in FORM_VALUES:
            msg = _("attribute {!r} must be one of {!r}").format(attr, FORM_VALUES)
            self.parse_error(msg, path)
        return value

    def _parse_occurs(self, node: TreeNode, path: str) -> tuple[int, Optional[int]]:
        min_occurs = 1
        max_occurs: Optional[int] = 1

        if 'minOccurs' in node.attrib:
            try:
                min_occurs = int(node.attrib['minOccurs'])
            except (TypeError, ValueError):
                self.parse_error(_("minOccurs value is not an integer value"), path)
            else:
                if min_occurs < 0:
                    msg = _("minOccurs value must be a non negative integer")
                    self.parse_error(msg, path)

        value = node.get('maxOccurs')
        if value is None:
            if min_occurs > 1:
                self.parse_error(_("minOccurs must be lesser or equal than maxOccurs"), path)
        elif value.strip() == 'unbounded':
            max_occurs = None
        else:
            try:
                max_occurs = int(value)
            except ValueError:
                msg = _("maxOccurs value must be a non negative integer or 'unbounded'")
                self.parse_error(msg, path)
            else:
                if max_occurs < 0:
                    msg = _("maxOccurs value must be a non negative integer or 'unbounded'")
                    self.parse_error(msg, path)
                elif min_occurs > max_occurs:
                    msg = _("maxOccurs must be 'unbounded' or greater than minOccurs")
                    self.parse_error(msg, path)

        return min_occurs, max_occurs

    def _anonymous_name(self, *tokens: str) -> str:
        """
        Returns a synthesized qualified name for an anonymous type. The name
        is composed of the path of the enclosing named declarations, so it's
        unique in the namespace and doesn't depend on the order of documents.
        """
        base_name = '~' + '.'.join(self._scope + list(tokens))
        self._anonymous_names[base_name] += 1
        count = self._anonymous_names[base_name]
        if count > 1:
            base_name = f'{base_name}.{count}'
        return get_qname(self.target_namespace, base_name)

    def _get_namespace_constraint(self, node: TreeNode) -> tuple[str, tuple[str, ...]]:
        value = node.get('namespace', '##any').strip()
        if value == '##any':
            return 'any', ()
        elif value == '##other':
            if self.target_namespace:
                return 'not', (self.target_namespace, '')
            return 'not', ('',)

        namespaces: dict[str, None] = {}
        for item in value.split():
            if item == '##targetNamespace':
                namespaces[self.target_namespace] = None
            elif item == '##local':
                namespaces[''] = None
            else:
                namespaces[item] = None
        return 'enumeration', tuple(namespaces)

    def _get_process_contents(self, node: TreeNode, path: str) -> str:
        value = node.get('processContents', 'strict').strip()
        if value not in PROCESS_CONTENTS:
            msg = _("attribute 'processContents' must be one of {!r}").format(PROCESS_CONTENTS)
            self.parse_error(msg, path)
        return value

    ###
    # Simple types

    def _build_global_simple_type(self, node: TreeNode, path: str) -> None:
        name = get_qname(self.target_namespace, self._get_name(node, path))
        self._scope.extend(('t', local_name(name)))
        self._build_simple_type(node, path, name)

    def _build_simple_type(self, node: TreeNode, path: str, name: str) -> str:
        children = list(self._iter_children(node, path))
        if len(children) != 1:
            msg = _("a simpleType must have exactly one restriction, list or union child")
            self.parse_error(msg, path, name)

        child, child_path = children[0]
        if child.tag == nm.XSD_RESTRICTION:
            base = self._get_qname_attr(child, 'base', child_path)
            facets = []
            for item, item_path in self._iter_children(child, child_path):
                if item.tag == nm.XSD_SIMPLE_TYPE:
                    if base is not None or facets:
                        msg = _("unexpected inline simpleType in a restriction")
                        self.parse_error(msg, item_path, name)
                    base = self._build_simple_type(
                        item, item_path, self._anonymous_name('base')
                    )
                elif item.tag in FACET_TAGS:
                    facets.append(self._build_facet(item, item_path))
                else:
                    self.unexpected_child(item, item_path)

            if base is None:
                msg = _("a simpleType restriction requires a 'base' attribute "
                        "or an inline simpleType")
                self.parse_error(msg, child_path, name)

            self.contribution.add('type', AtomicType(
                name, base, tuple(facets), url=self.url, path=path
            ))

        elif child.tag == nm.XSD_LIST:
            item_type = self._get_qname_attr(child, 'itemType', child_path)
            for item, item_path in self._iter_children(child, child_path):
                if item.tag == nm.XSD_SIMPLE_TYPE and item_type is None:
                    item_type = self._build_simple_type(
                        item, item_path, self._anonymous_name('item')
                    )
                else:
                    self.unexpected_child(item, item_path)

            if item_type is None:
                msg = _("a list requires an 'itemType' attribute or an inline simpleType")
                self.parse_error(msg, child_path, name)
            self.contribution.add('type', ListType(name, item_type, url=self.url, path=path))

        elif child.tag == nm.XSD_UNION:
            member_types = []
            if 'memberTypes' in child.attrib:
                for value in child.attrib['memberTypes'].split():
                    try:
                        member_types.append(resolve_qname(value, child.nsmap))
                    except (XsdGenValueError, XsdGenKeyError) as err:
                        msg = _("invalid QName value for attribute 'memberTypes': {}")
                        raise IngestError(msg.format(err), name, self.url, child_path) from err

            for item, item_path in self._iter_children(child, child_path):
                if item.tag == nm.XSD_SIMPLE_TYPE:
                    member_types.append(self._build_simple_type(
                        item, item_path, self._anonymous_name('member')
                    ))
                else:
                    self.unexpected_child(item, item_path)

            if not member_types:
                msg = _("a union requires member types")
                self.parse_error(msg, child_path, name)
            self.contribution.add('type', UnionType(
                name, tuple(member_types), url=self.url, path=path
            ))
        else:
            self.unexpected_child(child, child_path)

        return name

    def _build_facet(self, node: TreeNode, path: str) -> tuple[str, str]:
        try:
            value = node.attrib['value']
        except KeyError:
            msg = _("missing 'value' attribute for facet {!r}").format(prefixed_name(node.tag))
            self.parse_error(msg, path)
        else:
            return local_name(node.tag), value

    ###
    # Complex types

    def _build_global_complex_type(self, node: TreeNode, path: str) -> None:
        name = get_qname(self.target_namespace, self._get_name(node, path))
        self._scope.extend(('t', local_name(name)))
        self._build_complex_type(node, path, name)

    def _build_complex_type(self, node: TreeNode, path: str, name: str) -> str:
        mixed = self._get_boolean(node, 'mixed', path)
        abstract = self._get_boolean(node, 'abstract', path)
        children = list(self._iter_children(node, path))

        if children and children[0][0].tag in (nm.XSD_SIMPLE_CONTENT, nm.XSD_COMPLEX_CONTENT):
            if len(children) > 1:
                self.unexpected_child(*children[1])

            child, child_path = children[0]
            derivations = list(self._iter_children(child, child_path))
            if len(derivations) != 1 or \
                    derivations[0][0].tag not in (nm.XSD_EXTENSION, nm.XSD_RESTRICTION):
                msg = _("{!r} must have exactly one extension or restriction child")
                self.parse_error(msg.format(prefixed_name(child.tag)), child_path, name)

            derivation, derivation_path = derivations[0]
            base = self._get_qname_attr(derivation, 'base', derivation_path)
            if base is None:
                msg = _("missing 'base' attribute for {!r}")
                self.parse_error(msg.format(prefixed_name(derivation.tag)), derivation_path, name)

            kwargs: dict[str, Any] = {
                'base': base,
                'derivation': local_name(derivation.tag),
            }
            if child.tag == nm.XSD_COMPLEX_CONTENT:
                mixed = self._get_boolean(child, 'mixed', child_path, mixed)
                kwargs.update(self._build_content(derivation, derivation_path, name))
            else:
                kwargs['simple_content'] = True
                kwargs.update(self._build_simple_content(derivation, derivation_path, name))
        else:
            kwargs = self._build_content(node, path, name)

        self.contribution.add('type', ComplexType(
            name, mixed=mixed, abstract=abstract, url=self.url, path=path, **kwargs
        ))
        return name

    def _build_content(self, node: TreeNode, path: str, name: str) -> dict[str, Any]:
        """Builds the model group and the attributes of a complex content."""
        content: Optional[ParticleType] = None
        kwargs: dict[str, Any] = {}

        children = list(self._iter_children(node, path))
        if children and children[0][0].tag in MODEL_GROUP_TAGS:
            child, child_path = children.pop(0)
            if child.tag == nm.XSD_GROUP:
                content = self._build_group_ref(child, child_path)
            else:
                content = self._build_model_group(child, child_path)

        kwargs['content'] = content
        kwargs.update(self._build_attributes(children, name))
        return kwargs

    def _build_simple_content(self, node: TreeNode, path: str, name: str) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        facets = []
        children = list(self._iter_children(node, path))

        if node.tag == nm.XSD_RESTRICTION:
            while children and children[0][0].tag not in ATTRIBUTE_TAGS:
                child, child_path = children.pop(0)
                if child.tag == nm.XSD_SIMPLE_TYPE and 'simple_type' not in kwargs \
                        and not facets:
                    kwargs['simple_type'] = self._build_simple_type(
                        child, child_path, self._anonymous_name('content')
                    )
                elif child.tag in FACET_TAGS:
                    facets.append(self._build_facet(child, child_path))
                else:
                    self.unexpected_child(child, child_path)

        kwargs['facets'] = tuple(facets)
        kwargs.update(self._build_attributes(children, name))
        return kwargs

    def _build_attributes(self, children: list[tuple[TreeNode, str]],
                          name: Optional[str] = None) -> dict[str, Any]:
        attributes: list[AttributeUse] = []
        attribute_groups: list[str] = []
        any_attribute: Optional[Wildcard] = None

        for child, child_path in children:
            if any_attribute is not None:
                self.unexpected_child(child, child_path)
            elif child.tag == nm.XSD_ATTRIBUTE:
                attributes.append(self._build_local_attribute(child, child_path))
            elif child.tag == nm.XSD_ATTRIBUTE_GROUP:
                ref = self._get_qname_attr(child, 'ref', child_path)
                if ref is None:
                    msg = _("missing 'ref' attribute for a local attributeGroup")
                    self.parse_error(msg, child_path, name)
                attribute_groups.append(ref)
            elif child.tag == nm.XSD_ANY_ATTRIBUTE:
                mode, namespaces = self._get_namespace_constraint(child)
                any_attribute = Wildcard(
                    mode, namespaces, self._get_process_contents(child, child_path)
                )
            else:
                self.unexpected_child(child, child_path)

        return {
            'attributes': tuple(attributes),
            'attribute_groups': tuple(attribute_groups),
            'any_attribute': any_attribute,
        }

    ###
    # Elements

    def _get_element_type(self, node: TreeNode, path: str, name: str) -> Optional[str]:
        type_name = self._get_qname_attr(node, 'type', path)
        for child, child_path in self._iter_children(node, path):
            if child.tag not in (nm.XSD_SIMPLE_TYPE, nm.XSD_COMPLEX_TYPE):
                self.unexpected_child(child, child_path)
            elif type_name is not None:
                msg = _("an element can't have both a 'type' attribute and an inline type")
                self.parse_error(msg, child_path, name)
            else:
                anonymous_name = self._anonymous_name()
                if child.tag == nm.XSD_SIMPLE_TYPE:
                    type_name = self._build_simple_type(child, child_path, anonymous_name)
                else:
                    type_name = self._build_complex_type(child, child_path, anonymous_name)
        return type_name

    def _build_global_element(self, node: TreeNode, path: str) -> None:
        name = get_qname(self.target_namespace, self._get_name(node, path))
        for attr in ('ref', 'minOccurs', 'maxOccurs', 'form'):
            if attr in node.attrib:
                msg = _("attribute {!r} is not allowed for a global element").format(attr)
                self.parse_error(msg, path, name)
        if 'default' in node.attrib and 'fixed' in node.attrib:
            msg = _("'default' and 'fixed' attributes are mutually exclusive")
            self.parse_error(msg, path, name)

        self._scope.extend(('e', local_name(name)))
        substitution_group = self._get_qname_attr(node, 'substitutionGroup', path)
        type_name = self._get_element_type(node, path, name)
        if type_name is None and substitution_group is None:
            type_name = nm.XSD_ANY_TYPE

        self.contribution.add('element', ElementDecl(
            name=name,
            type_name=type_name,
            nillable=self._get_boolean(node, 'nillable', path),
            abstract=self._get_boolean(node, 'abstract', path),
            substitution_group=substitution_group,
            default=node.get('default'),
            fixed=node.get('fixed'),
            url=self.url,
            path=path,
        ))

    def _build_local_element(self, node: TreeNode, path: str) -> ElementRef:
        min_occurs, max_occurs = self._parse_occurs(node, path)

        if 'ref' in node.attrib:
            for attr in ('name', 'type', 'form', 'nillable', 'default', 'fixed'):
                if attr in node.attrib:
                    msg = _("attribute {!r} is not allowed for an element reference")
                    self.parse_error(msg.format(attr), path)
            ref = self._resolve_qname(node, 'ref', path)
            for child, child_path in self._iter_children(node, path):
                self.unexpected_child(child, child_path)
            return ElementRef(ref, min_occurs, max_occurs)

        local = self._get_name(node, path)
        for attr in ('substitutionGroup', 'abstract', 'final'):
            if attr in node.attrib:
                msg = _("attribute {!r} is not allowed for a local element").format(attr)
                self.parse_error(msg, path)
        if 'default' in node.attrib and 'fixed' in node.attrib:
            msg = _("'default' and 'fixed' attributes are mutually exclusive")
            self.parse_error(msg, path)

        if self._get_form(node, 'form', path, self.element_form_default) == 'qualified':
            name = get_qname(self.target_namespace, local)
        else:
            name = local

        self._scope.append(local)
        try:
            type_name = self._get_element_type(node, path, name)
        finally:
            self._scope.pop()

        declaration = ElementDecl(
            name=name,
            type_name=type_name or nm.XSD_ANY_TYPE,
            nillable=self._get_boolean(node, 'nillable', path),
            default=node.get('default'),
            fixed=node.get('fixed'),
            is_global=False,
            url=self.url,
            path=path,
        )
        return ElementRef(name, min_occurs, max_occurs, declaration)

    ###
    # Attributes

    def _get_attribute_type(self, node: TreeNode, path: str, name: str) -> str:
        type_name = self._get_qname_attr(node, 'type', path)
        for child, child_path in self._iter_children(node, path):
            if child.tag != nm.XSD_SIMPLE_TYPE:
                self.unexpected_child(child, child_path)
            elif type_name is not None:
                msg = _("an attribute can't have both a 'type' attribute and an inline type")
                self.parse_error(msg, child_path, name)
            else:
                type_name = self._build_simple_type(
                    child, child_path, self._anonymous_name(local_name(name))
                )
        return type_name or nm.XSD_ANY_SIMPLE_TYPE

    def _build_global_attribute(self, node: TreeNode, path: str) -> None:
        name = get_qname(self.target_namespace, self._get_name(node, path))
        for attr in ('ref', 'use', 'form'):
            if attr in node.attrib:
                msg = _("attribute {!r} is not allowed for a global attribute").format(attr)
                self.parse_error(msg, path, name)
        if 'default' in node.attrib and 'fixed' in node.attrib:
            msg = _("'default' and 'fixed' attributes are mutually exclusive")
            self.parse_error(msg, path, name)

        self._scope.append('a')
        self.contribution.add('attribute', AttributeDecl(
            name=name,
            type_name=self._get_attribute_type(node, path, name),
            default=node.get('default'),
            fixed=node.get('fixed'),
            url=self.url,
            path=path,
        ))

    def _build_local_attribute(self, node: TreeNode, path: str) -> AttributeUse:
        use = node.get('use', 'optional').strip()
        if use not in USE_VALUES:
            msg = _("attribute 'use' must be one of {!r}").format(USE_VALUES)
            self.parse_error(msg, path)
        if 'default' in node.attrib:
            if 'fixed' in node.attrib:
                msg = _("'default' and 'fixed' attributes are mutually exclusive")
                self.parse_error(msg, path)
            elif use != 'optional':
                msg = _("the attribute 'use' must be 'optional' if the attribute "
                        "'default' is present")
                self.parse_error(msg, path)

        if 'ref' in node.attrib:
            for attr in ('name', 'type', 'form'):
                if attr in node.attrib:
                    msg = _("attribute {!r} is not allowed for an attribute reference")
                    self.parse_error(msg.format(attr), path)
            for child, child_path in self._iter_children(node, path):
                self.unexpected_child(child, child_path)

            return AttributeUse(
                name=self._resolve_qname(node, 'ref', path),
                use=use,
                default=node.get('default'),
                fixed=node.get('fixed'),
                ref=True,
            )

        local = self._get_name(node, path)
        if self._get_form(node, 'form', path, self.attribute_form_default) == 'qualified':
            name = get_qname(self.target_namespace, local)
        else:
            name = local

        return AttributeUse(
            name=name,
            type_name=self._get_attribute_type(node, path, name),
            use=use,
            default=node.get('default'),
            fixed=node.get('fixed'),
        )

    def _build_global_attribute_group(self, node: TreeNode, path: str) -> None:
        name = get_qname(self.target_namespace, self._get_name(node, path))
        self._scope.extend(('ag', local_name(name)))
        kwargs = self._build_attributes(list(self._iter_children(node, path)), name)
        self.contribution.add('attribute_group', AttributeGroupDef(
            name, url=self.url, path=path, **kwargs
        ))

    ###
    # Model groups

    def _build_global_group(self, node: TreeNode, path: str) -> None:
        name = get_qname(self.target_namespace, self._get_name(node, path))
        for attr in ('ref', 'minOccurs', 'maxOccurs'):
            if attr in node.attrib:
                msg = _("attribute {!r} is not allowed for a global group").format(attr)
                self.parse_error(msg, path, name)

        self._scope.extend(('g', local_name(name)))
        children = list(self._iter_children(node, path))
        if len(children) != 1 or \
                children[0][0].tag not in (nm.XSD_SEQUENCE, nm.XSD_CHOICE, nm.XSD_ALL):
            msg = _("a group definition must have exactly one sequence, choice or all child")
            self.parse_error(msg, path, name)

        child, child_path = children[0]
        if 'minOccurs' in child.attrib or 'maxOccurs' in child.attrib:
            msg = _("occurrence attributes are not allowed for the model group of a group")
            self.parse_error(msg, child_path, name)

        particle = self._build_model_group(child, child_path)
        self.contribution.add('group', GroupDef(name, particle, url=self.url, path=path))

    def _build_group_ref(self, node: TreeNode, path: str) -> GroupRef:
        ref = self._get_qname_attr(node, 'ref', path)
        if ref is None:
            self.parse_error(_("missing 'ref' attribute for a local group"), path)
        for child, child_path in self._iter_children(node, path):
            self.unexpected_child(child, child_path)

        min_occurs, max_occurs = self._parse_occurs(node, path)
        return GroupRef(ref, min_occurs, max_occurs)

    def _build_model_group(self, node: TreeNode, path: str) -> ParticleType:
        min_occurs, max_occurs = self._parse_occurs(node, path)
        particles = []
        for child, child_path in self._iter_children(node, path):
            try:
                builder = self._particle_builders[child.tag]
            except KeyError:
                self.unexpected_child(child, child_path)
            else:
                if node.tag == nm.XSD_ALL and child.tag in (nm.XSD_SEQUENCE, nm.XSD_CHOICE):
                    self.unexpected_child(child, child_path)
                particles.append(builder(child, child_path))

        if node.tag == nm.XSD_SEQUENCE:
            return Sequence(tuple(particles), min_occurs, max_occurs)
        elif node.tag == nm.XSD_CHOICE:
            return Choice(tuple(particles), min_occurs, max_occurs)
        else:
            return All(tuple(particles), min_occurs, max_occurs)

    def _build_any(self, node: TreeNode, path: str) -> Wildcard:
        for child, child_path in self._iter_children(node, path):
            self.unexpected_child(child, child_path)

        min_occurs, max_occurs = self._parse_occurs(node, path)
        mode, namespaces = self._get_namespace_constraint(node)
        return Wildcard(
            mode, namespaces, self._get_process_contents(node, path), min_occurs, max_occurs
        )


def build_contribution(document: TreeDocument, strict: bool = False) -> SchemaContribution:
    """Builds the declarations of a loaded schema document."""
    return ModelBuilder(document, strict).build()
