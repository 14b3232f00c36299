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
The reference resolver: checks that every qualified name used as a reference
in the merged schema graph refers to a declaration of the expected kind.
"""
import logging
from collections.abc import Mapping
from typing import Any, NamedTuple, Optional

import xsdgen.names as nm
from xsdgen.exceptions import XsdGenRuntimeError
from xsdgen.translation import gettext as _
from xsdgen.utils.qnames import get_namespace
from .exceptions import ResolutionError, UnresolvedReferenceError
from .components import ElementRef, GroupRef, ElementDecl, AttributeDecl, \
    AttributeUse, AttributeGroupDef, GroupDef, AtomicType, ListType, UnionType, \
    ComplexType, ParticleType, iter_particles
from .graph import SchemaGraph

logger = logging.getLogger('xsdgen')


class ResolvedReferences(NamedTuple):
    """
    The indexes computed by the reference resolver.

    :param substitutions: maps each substitution group head to the sorted \
    tuple of its transitive members.
    :param element_types: maps each global element to its effective type, \
    that is taken from the substitution group head when the element has no type.
    """
    substitutions: Mapping[str, tuple[str, ...]]
    element_types: Mapping[str, str]


class ReferenceResolver:
    """Resolves the references of a frozen schema graph."""

    def __init__(self, graph: SchemaGraph) -> None:
        if not graph.frozen:
            raise XsdGenRuntimeError(_("the schema graph must be frozen before resolution"))
        self.graph = graph
        self.missing_namespaces = set(graph.missing_namespaces())
        self._checkers = {
            'type': self._check_type,
            'element': self._check_element,
            'attribute': self._check_attribute,
            'attribute_group': self._check_attribute_group,
            'group': self._check_group,
        }

    def __repr__(self) -> str:
        return '%s(graph=%r)' % (self.__class__.__name__, self.graph)

    def resolve(self) -> ResolvedReferences:
        for kind, component in self.graph.iter_components():
            self._checkers[kind](component)

        heads = self._get_substitution_heads()
        substitutions: dict[str, list[str]] = {}
        for name in sorted(heads):
            for head in heads[name]:
                substitutions.setdefault(head, []).append(name)

        element_types = {}
        for name, elem in self.graph.elements.items():
            if elem.type_name is not None:
                element_types[name] = elem.type_name
                continue
            for head in heads[name]:
                type_name = self.graph.elements[head].type_name
                if type_name is not None:
                    element_types[name] = type_name
                    break
            else:
                element_types[name] = nm.XSD_ANY_TYPE

        logger.debug("resolved references of %r", self.graph)
        return ResolvedReferences(
            substitutions={k: tuple(v) for k, v in sorted(substitutions.items())},
            element_types=dict(sorted(element_types.items())),
        )

    def _get_substitution_heads(self) -> dict[str, list[str]]:
        """Returns the chain of substitution group heads of each global element."""
        heads: dict[str, list[str]] = {}
        for name in sorted(self.graph.elements):
            chain: list[str] = []
            head = self.graph.elements[name].substitution_group
            while head is not None:
                if head == name or head in chain:
                    msg = _("circular substitution group for element {!r}").format(name)
                    elem = self.graph.elements[name]
                    raise ResolutionError(msg, name, elem.url, elem.path)
                chain.append(head)
                head = self.graph.elements[head].substitution_group
            heads[name] = chain
        return heads

    def check_reference(self, component: Any, target: str, kind: str) -> None:
        """
        Checks that a reference resolves to a declaration of the required kind.

        :param component: the referencing declaration.
        :param target: the referenced qualified name.
        :param kind: the required kind, one of 'type', 'simple type', \
        'element', 'attribute', 'attribute group' or 'group'.
        """
        if kind == 'simple type':
            type_def = self.graph.types.get(target)
            if type_def is not None and type_def.is_simple:
                return
        elif target in self.graph.maps.get_map(kind.replace(' ', '_')):
            return

        namespace = get_namespace(target)
        if namespace in self.missing_namespaces:
            logger.debug("reference to %r from %r deferred to namespace %r, "
                         "that was imported but never supplied",
                         target, component.name, namespace)
        raise UnresolvedReferenceError(component.name, target, kind, component.url)

    def _check_particle(self, component: Any, particle: Optional[ParticleType]) -> None:
        for item in iter_particles(particle):
            if isinstance(item, ElementRef):
                if item.declaration is None:
                    self.check_reference(component, item.name, 'element')
                elif item.declaration.type_name is not None:
                    self.check_reference(component, item.declaration.type_name, 'type')
            elif isinstance(item, GroupRef):
                self.check_reference(component, item.name, 'group')

    def _check_attribute_uses(self, component: Any,
                              attributes: tuple[AttributeUse, ...],
                              attribute_groups: tuple[str, ...]) -> None:
        for attr in attributes:
            if attr.ref:
                self.check_reference(component, attr.name, 'attribute')
            elif attr.type_name is not None:
                self.check_reference(component, attr.type_name, 'simple type')
        for name in attribute_groups:
            self.check_reference(component, name, 'attribute group')

    def _check_type(self, type_def: Any) -> None:
        if isinstance(type_def, AtomicType):
            self.check_reference(type_def, type_def.base, 'simple type')
        elif isinstance(type_def, ListType):
            self.check_reference(type_def, type_def.item_type, 'simple type')
        elif isinstance(type_def, UnionType):
            for member_type in type_def.member_types:
                self.check_reference(type_def, member_type, 'simple type')
        elif isinstance(type_def, ComplexType):
            if type_def.base is not None:
                self.check_reference(type_def, type_def.base, 'type')
            if type_def.simple_type is not None:
                self.check_reference(type_def, type_def.simple_type, 'simple type')
            self._check_attribute_uses(
                type_def, type_def.attributes, type_def.attribute_groups
            )
            self._check_particle(type_def, type_def.content)

    def _check_element(self, elem: ElementDecl) -> None:
        if elem.type_name is not None:
            self.check_reference(elem, elem.type_name, 'type')
        if elem.substitution_group is not None:
            self.check_reference(elem, elem.substitution_group, 'element')

    def _check_attribute(self, attr: AttributeDecl) -> None:
        self.check_reference(attr, attr.type_name, 'simple type')

    def _check_attribute_group(self, attribute_group: AttributeGroupDef) -> None:
        self._check_attribute_uses(
            attribute_group, attribute_group.attributes, attribute_group.attribute_groups
        )

    def _check_group(self, group: GroupDef) -> None:
        self._check_particle(group, group.particle)


def resolve_references(graph: SchemaGraph) -> ResolvedReferences:
    """Resolves the references of a frozen schema graph."""
    return ReferenceResolver(graph).resolve()
