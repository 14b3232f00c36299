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
The registry of a generated module. Types, elements and groups are registered
by qualified name, so recursive components can refer to each other lazily.
"""
from typing import Optional, TypeVar

from xsdgen.exceptions import XsdGenKeyError
from xsdgen.translation import gettext as _
from .simple_types import SimpleType
from .content import Particle, GroupRef
from .values import ComplexValue, ElementDecl, ElementDeclRef, TypeRef

T = TypeVar('T', bound=type[ComplexValue])
S = TypeVar('S', bound=SimpleType)


class Registry:
    """
    A name-based registry of the components of a generated parser.

    :param name: the name of the generated module.
    """
    def __init__(self, name: Optional[str] = None) -> None:
        self.name = name
        self.simple_types: dict[str, SimpleType] = {}
        self.types: dict[str, type[ComplexValue]] = {}
        self.elements: dict[str, ElementDecl] = {}
        self.groups: dict[str, Particle] = {}

    def __repr__(self) -> str:
        return '%s(name=%r)' % (self.__class__.__name__, self.name)

    def add_simple_type(self, simple_type: S) -> S:
        if simple_type.name is not None:
            self.simple_types[simple_type.name] = simple_type
        return simple_type

    def add_type(self, cls: T) -> T:
        """Registers a complex value class. Usable as a class decorator."""
        if cls.xsd_name is None:
            raise XsdGenKeyError(_("{!r} has no type name").format(cls))
        self.types[cls.xsd_name] = cls
        return cls

    def add_element(self, decl: ElementDecl) -> ElementDecl:
        self.elements[decl.tag] = decl
        return decl

    def add_group(self, name: str, model: Particle) -> Particle:
        self.groups[name] = model
        return model

    def get_type(self, name: str) -> type[ComplexValue]:
        try:
            return self.types[name]
        except KeyError:
            raise XsdGenKeyError(_("unknown complex type {!r}").format(name)) from None

    def get_element(self, tag: str) -> ElementDecl:
        try:
            return self.elements[tag]
        except KeyError:
            raise XsdGenKeyError(_("unknown element {!r}").format(tag)) from None

    def type_ref(self, name: str) -> TypeRef:
        return TypeRef(self, name)

    def element_ref(self, tag: str) -> ElementDeclRef:
        return ElementDeclRef(self, tag)

    def group_ref(self, name: str, min_occurs: int = 1,
                  max_occurs: Optional[int] = 1) -> GroupRef:
        return GroupRef(self, name, min_occurs, max_occurs)
