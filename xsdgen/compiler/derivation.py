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
The derivation resolver: flattens the attribute sets and the content models of
complex types along their derivation chains.
"""
import dataclasses as dc
import logging
from collections.abc import Mapping
from typing import Any, NamedTuple, Optional

import xsdgen.names as nm
from xsdgen.translation import gettext as _
from .exceptions import InvalidDerivationError
from .components import ParticleType, Sequence, ElementRef, GroupRef, Wildcard, \
    AttributeUse, BuiltinType, AtomicType, ListType, UnionType, ComplexType, \
    SimpleTypeDef, ANY_TYPE, is_builtin, iter_particles
from .graph import SchemaGraph
from .resolver import ResolvedReferences

logger = logging.getLogger('xsdgen')


class ResolvedAttribute(NamedTuple):
    name: str
    type_name: str
    required: bool = False
    default: Optional[str] = None
    fixed: Optional[str] = None


@dc.dataclass
class ResolvedType:
    """
    A complex type after the derivation flattening. The *content* is the full
    content model, with group references and element references still to be
    expanded by the normalizer.
    """
    name: str
    attributes: dict[str, ResolvedAttribute] = dc.field(default_factory=dict)
    any_attribute: Optional[Wildcard] = None
    content: Optional[ParticleType] = None
    simple_type: Optional[str] = None
    mixed: bool = False
    base: Optional[str] = None
    derivation: Optional[str] = None
    abstract: bool = False
    restriction_unverified: bool = False

    @property
    def has_simple_content(self) -> bool:
        return self.simple_type is not None


class Derivations(NamedTuple):
    """
    The result of the derivation resolver.

    :param types: the resolved complex types, sorted by name.
    :param simple_types: the simple types of the graph, sorted by name, \
    including the types derived by simple content restrictions.
    """
    types: Mapping[str, ResolvedType]
    simple_types: Mapping[str, SimpleTypeDef]


def is_empty_content(particle: Optional[ParticleType]) -> bool:
    """Returns `True` if a content model can't match any element."""
    return not any(isinstance(p, (ElementRef, GroupRef, Wildcard)) and not p.is_empty()
                   for p in iter_particles(particle))


class DerivationResolver:
    """Resolves the derivations of the complex types of a schema graph."""

    def __init__(self, graph: SchemaGraph, references: ResolvedReferences) -> None:
        self.graph = graph
        self.references = references
        self.resolved: dict[str, ResolvedType] = {}
        self.simple_types: dict[str, SimpleTypeDef] = {}
        self._any_type = ResolvedType(
            name=nm.XSD_ANY_TYPE,
            any_attribute=ANY_TYPE.any_attribute,
            content=ANY_TYPE.content,
            mixed=True,
        )

    def __repr__(self) -> str:
        return '%s(graph=%r)' % (self.__class__.__name__, self.graph)

    def resolve(self) -> Derivations:
        checked: set[str] = set()
        for name, type_def in sorted(self.graph.types.items()):
            if type_def.is_simple and not is_builtin(name):
                self._check_simple_type(name, checked)
                self.simple_types[name] = type_def

        for name, type_def in sorted(self.graph.types.items()):
            if isinstance(type_def, ComplexType) and name != nm.XSD_ANY_TYPE:
                self.resolve_type(name)

        return Derivations(
            types={k: self.resolved[k] for k in sorted(self.resolved)},
            simple_types={k: self.simple_types[k] for k in sorted(self.simple_types)},
        )

    def derivation_error(self, message: str, type_def: Any) -> InvalidDerivationError:
        return InvalidDerivationError(
            message, type_def.name, getattr(type_def, 'url', None), getattr(type_def, 'path', None)
        )

    ###
    # Simple types

    def _get_dependencies(self, name: str) -> tuple[str, ...]:
        type_def = self.graph.types[name]
        if isinstance(type_def, AtomicType):
            return (type_def.base,)
        elif isinstance(type_def, ListType):
            return (type_def.item_type,)
        elif isinstance(type_def, UnionType):
            return tuple(type_def.member_types)
        return ()

    def _check_simple_type(self, name: str, checked: set[str]) -> None:
        if name in checked:
            return

        # Depth-first visit with a path of (name, remaining dependencies) items
        path: list[tuple[str, list[str]]] = [(name, list(self._get_dependencies(name)))]
        on_path = {name}
        while path:
            current, dependencies = path[-1]
            if not dependencies:
                path.pop()
                on_path.discard(current)
                checked.add(current)
                continue

            dep = dependencies.pop(0)
            if dep in checked:
                continue
            elif dep in on_path:
                msg = _("circular definition of simple type {!r}").format(dep)
                raise self.derivation_error(msg, self.graph.types[current])

            path.append((dep, list(self._get_dependencies(dep))))
            on_path.add(dep)

    def get_simple_type(self, name: str) -> SimpleTypeDef:
        try:
            return self.simple_types[name]
        except KeyError:
            return self.graph.types[name]  # type: ignore[return-value]

    def is_derived(self, name: str, base: str) -> bool:
        """
        Returns `True` if the simple type *name* is equal to *base* or it's
        derived from *base*, following restriction, list and union chains.
        """
        if name == base or base == nm.XSD_ANY_SIMPLE_TYPE:
            return True

        base_def = self.get_simple_type(base)
        if isinstance(base_def, UnionType) and \
                any(self.is_derived(name, x) for x in base_def.member_types):
            return True

        visited = set()
        while name not in visited:
            visited.add(name)
            type_def = self.get_simple_type(name)
            if isinstance(type_def, (BuiltinType, AtomicType)):
                if type_def.base is None:
                    break
                name = type_def.base
            else:
                name = nm.XSD_ANY_SIMPLE_TYPE
            if name == base:
                return True
        return False

    ###
    # Attributes

    def resolve_attribute_uses(self, component: Any,
                               attributes: tuple[AttributeUse, ...],
                               attribute_groups: tuple[str, ...],
                               any_attribute: Optional[Wildcard],
                               stack: Optional[list[str]] = None) \
            -> tuple[dict[str, ResolvedAttribute], Optional[Wildcard]]:
        """Returns the attribute uses and the attribute wildcard, expanding attribute groups."""
        if stack is None:
            stack = []

        resolved: dict[str, ResolvedAttribute] = {}
        for attr in attributes:
            if attr.prohibited:
                continue
            elif attr.ref:
                decl = self.graph.attributes[attr.name]
                resolved[attr.name] = ResolvedAttribute(
                    name=attr.name,
                    type_name=decl.type_name,
                    required=attr.required,
                    default=attr.default if attr.default is not None else decl.default,
                    fixed=attr.fixed if attr.fixed is not None else decl.fixed,
                )
            else:
                resolved[attr.name] = ResolvedAttribute(
                    name=attr.name,
                    type_name=attr.type_name or nm.XSD_ANY_SIMPLE_TYPE,
                    required=attr.required,
                    default=attr.default,
                    fixed=attr.fixed,
                )

        for name in attribute_groups:
            if name in stack:
                msg = _("circular reference to attribute group {!r}").format(name)
                raise self.derivation_error(msg, component)

            group = self.graph.attribute_groups[name]
            stack.append(name)
            group_attributes, group_any_attribute = self.resolve_attribute_uses(
                group, group.attributes, group.attribute_groups, group.any_attribute, stack
            )
            stack.pop()

            for k, v in group_attributes.items():
                if k in resolved:
                    msg = _("duplicate attribute {!r} from attribute group {!r}")
                    raise self.derivation_error(msg.format(k, name), component)
                resolved[k] = v
            if any_attribute is None:
                any_attribute = group_any_attribute

        return resolved, any_attribute

    ###
    # Complex types

    def resolve_type(self, name: str) -> ResolvedType:
        """Resolves a complex type, resolving its base types first."""
        if name == nm.XSD_ANY_TYPE:
            return self._any_type
        elif name in self.resolved:
            return self.resolved[name]

        chain: list[str] = []
        item = name
        while item != nm.XSD_ANY_TYPE and item not in self.resolved:
            type_def = self.graph.types[item]
            if item in chain:
                msg = _("circular derivation chain {!r}").format(' -> '.join(chain + [item]))
                raise self.derivation_error(msg, type_def)

            chain.append(item)
            if type_def.base is None or self.graph.types[type_def.base].is_simple:
                break
            item = type_def.base

        for item in reversed(chain):
            self._resolve_complex_type(item)
        return self.resolved[name]

    def _resolve_complex_type(self, name: str) -> ResolvedType:
        # The base type, if complex, is already resolved
        type_def = self.graph.types[name]
        assert isinstance(type_def, ComplexType)
        attributes, any_attribute = self.resolve_attribute_uses(
            type_def, type_def.attributes, type_def.attribute_groups, type_def.any_attribute
        )

        if type_def.base is None:
            result = ResolvedType(
                name=name,
                attributes=attributes,
                any_attribute=any_attribute,
                content=type_def.content,
                mixed=type_def.mixed,
                abstract=type_def.abstract,
            )
        else:
            base_def = self.graph.types[type_def.base]
            if base_def.is_simple:
                base = None
            else:
                base = self.resolve_type(type_def.base)

            if type_def.simple_content:
                result = self._derive_simple_content(type_def, base, attributes, any_attribute)
            elif base is None:
                msg = _("the base of a complex content derivation must be a complex type")
                raise self.derivation_error(msg, type_def)
            elif type_def.derivation == 'extension':
                result = self._derive_by_extension(type_def, base, attributes, any_attribute)
            else:
                result = self._derive_by_restriction(type_def, base, attributes, any_attribute)

        logger.debug("resolved derivation of complex type %r", name)
        self.resolved[name] = result
        return result

    def _derive_by_extension(self, type_def: ComplexType, base: ResolvedType,
                             attributes: dict[str, ResolvedAttribute],
                             any_attribute: Optional[Wildcard]) -> ResolvedType:
        if base.name == nm.XSD_ANY_TYPE:
            content = type_def.content
            base_attributes: dict[str, ResolvedAttribute] = {}
        else:
            base_attributes = base.attributes
            if is_empty_content(type_def.content):
                content = base.content
            elif is_empty_content(base.content):
                content = type_def.content
            else:
                content = Sequence((base.content, type_def.content))  # type: ignore[arg-type]

            if any_attribute is None:
                any_attribute = base.any_attribute

        simple_type = None
        if base.simple_type is not None:
            if not is_empty_content(type_def.content):
                msg = _("a complex content can't extend a simple content type")
                raise self.derivation_error(msg, type_def)
            simple_type = base.simple_type

        return ResolvedType(
            name=type_def.name,
            attributes={**base_attributes, **attributes},
            any_attribute=any_attribute,
            content=content,
            simple_type=simple_type,
            mixed=type_def.mixed,
            base=base.name,
            derivation='extension',
            abstract=type_def.abstract,
        )

    def _check_attribute_restriction(self, type_def: ComplexType, base: ResolvedType,
                                     attributes: dict[str, ResolvedAttribute]) -> None:
        for name, attr in attributes.items():
            base_attr = base.attributes.get(name)
            if base_attr is None:
                if base.any_attribute is None or not base.any_attribute.is_matching(name):
                    msg = _("attribute {!r} is not declared in the base type {!r}")
                    raise self.derivation_error(msg.format(name, base.name), type_def)
                continue

            if base_attr.required and not attr.required:
                msg = _("attribute {!r} is required in the base type {!r}")
                raise self.derivation_error(msg.format(name, base.name), type_def)
            elif not self.is_derived(attr.type_name, base_attr.type_name):
                msg = _("the type of attribute {!r} is not derived from {!r}")
                raise self.derivation_error(msg.format(name, base_attr.type_name), type_def)
            elif base_attr.fixed is not None and attr.fixed != base_attr.fixed:
                msg = _("attribute {!r} must have the fixed value {!r} of the base type")
                raise self.derivation_error(msg.format(name, base_attr.fixed), type_def)

        for name, base_attr in base.attributes.items():
            if base_attr.required and name not in attributes:
                msg = _("missing required attribute {!r} of the base type {!r}")
                raise self.derivation_error(msg.format(name, base.name), type_def)

    def _derive_by_restriction(self, type_def: ComplexType, base: ResolvedType,
                               attributes: dict[str, ResolvedAttribute],
                               any_attribute: Optional[Wildcard]) -> ResolvedType:
        unverified = False
        if base.name != nm.XSD_ANY_TYPE:
            self._check_attribute_restriction(type_def, base, attributes)
            if base.simple_type is not None:
                msg = _("a complex content can't restrict a simple content type")
                raise self.derivation_error(msg, type_def)

            if not is_empty_content(type_def.content):
                if is_empty_content(base.content):
                    msg = _("the base type {!r} has an empty content").format(base.name)
                    raise self.derivation_error(msg, type_def)

                names, has_wildcard = self._get_element_names(base.content)
                if not has_wildcard:
                    extra = self._get_element_names(type_def.content)[0] - names
                    if extra:
                        msg = _("element {!r} is not declared in the base type {!r}")
                        raise self.derivation_error(msg.format(min(extra), base.name), type_def)

                unverified = True
                logger.info("the content of %r is not verified as a restriction of %r",
                            type_def.name, base.name)

        return ResolvedType(
            name=type_def.name,
            attributes=attributes,
            any_attribute=any_attribute,
            content=type_def.content,
            mixed=type_def.mixed,
            base=base.name,
            derivation='restriction',
            abstract=type_def.abstract,
            restriction_unverified=unverified,
        )

    def _derive_simple_content(self, type_def: ComplexType, base: Optional[ResolvedType],
                               attributes: dict[str, ResolvedAttribute],
                               any_attribute: Optional[Wildcard]) -> ResolvedType:
        assert type_def.base is not None
        if type_def.derivation == 'extension':
            if base is None:
                simple_type = type_def.base
                base_attributes: dict[str, ResolvedAttribute] = {}
            elif base.simple_type is not None:
                simple_type = base.simple_type
                base_attributes = base.attributes
                if any_attribute is None:
                    any_attribute = base.any_attribute
            else:
                msg = _("the base type {!r} of a simple content has no simple content")
                raise self.derivation_error(msg.format(type_def.base), type_def)
            attributes = {**base_attributes, **attributes}

        elif base is None or base.simple_type is None:
            msg = _("the base type {!r} of a simple content restriction must be "
                    "a complex type with simple content")
            raise self.derivation_error(msg.format(type_def.base), type_def)
        else:
            self._check_attribute_restriction(type_def, base, attributes)
            simple_type = type_def.simple_type or base.simple_type
            if type_def.facets:
                derived = AtomicType(
                    name=f'{type_def.name}~content',
                    base=simple_type,
                    facets=type_def.facets,
                    url=type_def.url,
                    path=type_def.path,
                )
                self.simple_types[derived.name] = derived
                simple_type = derived.name

        return ResolvedType(
            name=type_def.name,
            attributes=attributes,
            any_attribute=any_attribute,
            simple_type=simple_type,
            base=type_def.base,
            derivation=type_def.derivation,
            abstract=type_def.abstract,
        )

    def _get_element_names(self, particle: Optional[ParticleType]) -> tuple[set[str], bool]:
        """
        Returns the element names that can be matched by a content model, including
        substitution group members, and a flag that is `True` if the content model
        contains a wildcard.
        """
        names: set[str] = set()
        has_wildcard = False
        groups: list[str] = []
        pending = [particle]

        while pending:
            for item in iter_particles(pending.pop()):
                if isinstance(item, ElementRef):
                    names.add(item.name)
                    names.update(self.references.substitutions.get(item.name, ()))
                elif isinstance(item, Wildcard):
                    has_wildcard = True
                elif isinstance(item, GroupRef) and item.name not in groups:
                    groups.append(item.name)
                    pending.append(self.graph.groups[item.name].particle)

        return names, has_wildcard


def resolve_derivations(graph: SchemaGraph, references: ResolvedReferences) -> Derivations:
    """Resolves the derivations of the complex types of a resolved schema graph."""
    return DerivationResolver(graph, references).resolve()
