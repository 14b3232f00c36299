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
This module contains the declarations and the particles of the schema graph.

Components are immutable records that refer to other components only by
qualified name, so a graph can contain forward and recursive references.
The source location of a component (document URL and path) is excluded
from comparisons, so that graphs built from different sources with the
same content compare equal.
"""
import dataclasses as dc
from collections.abc import Iterator
from typing import Any, Optional, Union

import xsdgen.names as nm
from xsdgen.utils.qnames import get_namespace


def _location() -> Any:
    return dc.field(default=None, compare=False, repr=False)


class ParticleMixin:
    """
    Mixin for particles of content models.

    :ivar min_occurs: the minOccurs property of the particle. Defaults to 1.
    :ivar max_occurs: the maxOccurs property of the particle. Defaults to 1, \
    a `None` value means 'unbounded'.
    """
    min_occurs: int = 1
    max_occurs: Optional[int] = 1

    @property
    def occurs(self) -> tuple[int, Optional[int]]:
        return self.min_occurs, self.max_occurs

    def is_emptiable(self) -> bool:
        """
        Tests if min_occurs == 0. A model group that can have zero-length is
        considered emptiable. For model groups the test outcome depends also
        on nested particles.
        """
        return self.min_occurs == 0

    def is_empty(self) -> bool:
        """Tests if max_occurs == 0. A zero-length particle is considered empty."""
        return self.max_occurs == 0

    def is_single(self) -> bool:
        """Tests if the particle has max_occurs == 1."""
        return self.max_occurs == 1

    def is_multiple(self) -> bool:
        """Tests the particle can have multiple occurrences."""
        return not self.is_empty() and not self.is_single()

    def has_occurs_restriction(self, other: 'ParticleMixin') -> bool:
        if self.min_occurs < other.min_occurs:
            return False
        elif self.max_occurs == 0:
            return True
        elif other.max_occurs is None:
            return True
        elif self.max_occurs is None:
            return False
        else:
            return self.max_occurs <= other.max_occurs


###
# Particles

@dc.dataclass(frozen=True)
class Sequence(ParticleMixin):
    particles: tuple['ParticleType', ...] = ()
    min_occurs: int = 1
    max_occurs: Optional[int] = 1

    def is_emptiable(self) -> bool:
        return self.min_occurs == 0 or all(p.is_emptiable() for p in self.particles)


@dc.dataclass(frozen=True)
class Choice(ParticleMixin):
    particles: tuple['ParticleType', ...] = ()
    min_occurs: int = 1
    max_occurs: Optional[int] = 1

    def is_emptiable(self) -> bool:
        return self.min_occurs == 0 or not self.particles \
            or any(p.is_emptiable() for p in self.particles)


@dc.dataclass(frozen=True)
class All(ParticleMixin):
    particles: tuple['ParticleType', ...] = ()
    min_occurs: int = 1
    max_occurs: Optional[int] = 1

    def is_emptiable(self) -> bool:
        return self.min_occurs == 0 or all(p.is_emptiable() for p in self.particles)


@dc.dataclass(frozen=True)
class ElementRef(ParticleMixin):
    """
    A reference to an element declaration. If *declaration* is provided the
    reference is to a local declaration, otherwise *name* refers to a global
    element declaration.
    """
    name: str
    min_occurs: int = 1
    max_occurs: Optional[int] = 1
    declaration: Optional['ElementDecl'] = None

    @property
    def is_local(self) -> bool:
        return self.declaration is not None


@dc.dataclass(frozen=True)
class GroupRef(ParticleMixin):
    name: str
    min_occurs: int = 1
    max_occurs: Optional[int] = 1


@dc.dataclass(frozen=True)
class Wildcard(ParticleMixin):
    """
    A wildcard for elements or attributes. The namespace constraint is stored
    in a resolved form: *mode* is 'any', 'not' or 'enumeration' and *namespaces*
    are the excluded or the allowed namespace URIs, where the empty string means
    no namespace.
    """
    mode: str = 'any'
    namespaces: tuple[str, ...] = ()
    process_contents: str = 'strict'
    min_occurs: int = 1
    max_occurs: Optional[int] = 1

    def is_matching(self, name: str) -> bool:
        namespace = get_namespace(name)
        if self.mode == 'any':
            return True
        elif self.mode == 'not':
            return namespace not in self.namespaces
        else:
            return namespace in self.namespaces


@dc.dataclass(frozen=True)
class Empty(ParticleMixin):
    min_occurs: int = 1
    max_occurs: Optional[int] = 1

    def is_emptiable(self) -> bool:
        return True


ParticleType = Union[Sequence, Choice, All, ElementRef, GroupRef, Wildcard, Empty]
ModelGroupType = Union[Sequence, Choice, All]

MODEL_GROUP_CLASSES = (Sequence, Choice, All)


###
# Declarations

@dc.dataclass(frozen=True)
class ElementDecl:
    """
    An element declaration. For global declarations without a type, the type is
    derived from the substitution group head or is *xs:anyType*, and is computed
    by the reference resolver.
    """
    name: str
    type_name: Optional[str] = None
    nillable: bool = False
    abstract: bool = False
    substitution_group: Optional[str] = None
    default: Optional[str] = None
    fixed: Optional[str] = None
    is_global: bool = True
    url: Optional[str] = _location()
    path: Optional[str] = _location()


@dc.dataclass(frozen=True)
class AttributeDecl:
    """A global attribute declaration."""
    name: str
    type_name: str = nm.XSD_ANY_SIMPLE_TYPE
    default: Optional[str] = None
    fixed: Optional[str] = None
    url: Optional[str] = _location()
    path: Optional[str] = _location()


@dc.dataclass(frozen=True)
class AttributeUse:
    """
    A use of an attribute in a complex type or in an attribute group. For
    references (*ref* is `True`) the name is the one of a global attribute
    declaration and the type is taken from that declaration.
    """
    name: str
    type_name: Optional[str] = None
    use: str = 'optional'
    default: Optional[str] = None
    fixed: Optional[str] = None
    ref: bool = False

    @property
    def required(self) -> bool:
        return self.use == 'required'

    @property
    def prohibited(self) -> bool:
        return self.use == 'prohibited'


@dc.dataclass(frozen=True)
class AttributeGroupDef:
    name: str
    attributes: tuple[AttributeUse, ...] = ()
    attribute_groups: tuple[str, ...] = ()
    any_attribute: Optional[Wildcard] = None
    url: Optional[str] = _location()
    path: Optional[str] = _location()


@dc.dataclass(frozen=True)
class GroupDef:
    name: str
    particle: ParticleType = Empty()
    url: Optional[str] = _location()
    path: Optional[str] = _location()


###
# Type definitions

@dc.dataclass(frozen=True)
class BuiltinType:
    """An XSD builtin simple type. Builtin list types have an *item_type*."""
    name: str
    base: Optional[str] = None
    item_type: Optional[str] = None

    is_simple = True


@dc.dataclass(frozen=True)
class AtomicType:
    """
    A restriction of another simple type. The facets are the lexical constraint
    set of the type, stored as (facet name, value) couples in document order.
    """
    name: str
    base: str = nm.XSD_ANY_SIMPLE_TYPE
    facets: tuple[tuple[str, str], ...] = ()
    url: Optional[str] = _location()
    path: Optional[str] = _location()

    is_simple = True


@dc.dataclass(frozen=True)
class ListType:
    name: str
    item_type: str = nm.XSD_ANY_SIMPLE_TYPE
    url: Optional[str] = _location()
    path: Optional[str] = _location()

    is_simple = True


@dc.dataclass(frozen=True)
class UnionType:
    name: str
    member_types: tuple[str, ...] = ()
    url: Optional[str] = _location()
    path: Optional[str] = _location()

    is_simple = True


@dc.dataclass(frozen=True)
class ComplexType:
    """
    A complex type definition, as declared. The *content* is the own content
    model of the type. For simple content types *simple_content* is `True` and
    the content is described by the base type, eventually restricted with an
    inline *simple_type* and *facets*.
    """
    name: str
    content: Optional[ParticleType] = None
    attributes: tuple[AttributeUse, ...] = ()
    attribute_groups: tuple[str, ...] = ()
    any_attribute: Optional[Wildcard] = None
    base: Optional[str] = None
    derivation: Optional[str] = None
    simple_content: bool = False
    simple_type: Optional[str] = None
    facets: tuple[tuple[str, str], ...] = ()
    mixed: bool = False
    abstract: bool = False
    url: Optional[str] = _location()
    path: Optional[str] = _location()

    is_simple = False


SimpleTypeDef = Union[BuiltinType, AtomicType, ListType, UnionType]
TypeDef = Union[SimpleTypeDef, ComplexType]

ComponentType = Union[TypeDef, ElementDecl, AttributeDecl, AttributeGroupDef, GroupDef]


###
# Builtins

_ATOMIC_BUILTINS = {
    nm.XSD_ANY_SIMPLE_TYPE: None,
    nm.XSD_ANY_ATOMIC_TYPE: nm.XSD_ANY_SIMPLE_TYPE,
    nm.XSD_STRING: nm.XSD_ANY_SIMPLE_TYPE,
    nm.XSD_NORMALIZED_STRING: nm.XSD_STRING,
    nm.XSD_TOKEN: nm.XSD_NORMALIZED_STRING,
    nm.XSD_LANGUAGE: nm.XSD_TOKEN,
    nm.XSD_NAME: nm.XSD_TOKEN,
    nm.XSD_NMTOKEN: nm.XSD_TOKEN,
    nm.XSD_NCNAME: nm.XSD_NAME,
    nm.XSD_ID: nm.XSD_NCNAME,
    nm.XSD_IDREF: nm.XSD_NCNAME,
    nm.XSD_ENTITY: nm.XSD_NCNAME,
    nm.XSD_BOOLEAN: nm.XSD_ANY_SIMPLE_TYPE,
    nm.XSD_FLOAT: nm.XSD_ANY_SIMPLE_TYPE,
    nm.XSD_DOUBLE: nm.XSD_ANY_SIMPLE_TYPE,
    nm.XSD_DECIMAL: nm.XSD_ANY_SIMPLE_TYPE,
    nm.XSD_DURATION: nm.XSD_ANY_SIMPLE_TYPE,
    nm.XSD_DATETIME: nm.XSD_ANY_SIMPLE_TYPE,
    nm.XSD_TIME: nm.XSD_ANY_SIMPLE_TYPE,
    nm.XSD_DATE: nm.XSD_ANY_SIMPLE_TYPE,
    nm.XSD_GYEAR_MONTH: nm.XSD_ANY_SIMPLE_TYPE,
    nm.XSD_GYEAR: nm.XSD_ANY_SIMPLE_TYPE,
    nm.XSD_GMONTH_DAY: nm.XSD_ANY_SIMPLE_TYPE,
    nm.XSD_GDAY: nm.XSD_ANY_SIMPLE_TYPE,
    nm.XSD_GMONTH: nm.XSD_ANY_SIMPLE_TYPE,
    nm.XSD_HEX_BINARY: nm.XSD_ANY_SIMPLE_TYPE,
    nm.XSD_BASE64_BINARY: nm.XSD_ANY_SIMPLE_TYPE,
    nm.XSD_ANY_URI: nm.XSD_ANY_SIMPLE_TYPE,
    nm.XSD_QNAME: nm.XSD_ANY_SIMPLE_TYPE,
    nm.XSD_NOTATION_TYPE: nm.XSD_ANY_SIMPLE_TYPE,
    nm.XSD_INTEGER: nm.XSD_DECIMAL,
    nm.XSD_NON_POSITIVE_INTEGER: nm.XSD_INTEGER,
    nm.XSD_NEGATIVE_INTEGER: nm.XSD_NON_POSITIVE_INTEGER,
    nm.XSD_LONG: nm.XSD_INTEGER,
    nm.XSD_INT: nm.XSD_LONG,
    nm.XSD_SHORT: nm.XSD_INT,
    nm.XSD_BYTE: nm.XSD_SHORT,
    nm.XSD_NON_NEGATIVE_INTEGER: nm.XSD_INTEGER,
    nm.XSD_UNSIGNED_LONG: nm.XSD_NON_NEGATIVE_INTEGER,
    nm.XSD_UNSIGNED_INT: nm.XSD_UNSIGNED_LONG,
    nm.XSD_UNSIGNED_SHORT: nm.XSD_UNSIGNED_INT,
    nm.XSD_UNSIGNED_BYTE: nm.XSD_UNSIGNED_SHORT,
    nm.XSD_POSITIVE_INTEGER: nm.XSD_NON_NEGATIVE_INTEGER,
}

_LIST_BUILTINS = {
    nm.XSD_NMTOKENS: nm.XSD_NMTOKEN,
    nm.XSD_IDREFS: nm.XSD_IDREF,
    nm.XSD_ENTITIES: nm.XSD_ENTITY,
}

ANY_TYPE = ComplexType(
    name=nm.XSD_ANY_TYPE,
    content=Sequence((Wildcard(process_contents='lax', min_occurs=0, max_occurs=None),)),
    any_attribute=Wildcard(process_contents='lax'),
    mixed=True,
)


def builtin_types() -> dict[str, TypeDef]:
    """Returns a new map with the builtin type definitions."""
    types: dict[str, TypeDef] = {
        k: BuiltinType(k, base) for k, base in _ATOMIC_BUILTINS.items()
    }
    types.update(
        (k, BuiltinType(k, nm.XSD_ANY_SIMPLE_TYPE, item))
        for k, item in _LIST_BUILTINS.items()
    )
    types[nm.XSD_ANY_TYPE] = ANY_TYPE
    return types


def is_builtin(name: str) -> bool:
    return name == nm.XSD_ANY_TYPE or name in _ATOMIC_BUILTINS or name in _LIST_BUILTINS


def iter_particles(particle: Optional[ParticleType]) -> Iterator[ParticleType]:
    """Iterates a particle tree in depth-first order, including the root particle."""
    if particle is None:
        return
    yield particle
    if isinstance(particle, MODEL_GROUP_CLASSES):
        for item in particle.particles:
            yield from iter_particles(item)
