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
The schema graph, the symbol table shared by all the documents of a compilation.
"""
import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any, NamedTuple, Optional

from xsdgen.exceptions import XsdGenRuntimeError
from xsdgen.translation import gettext as _
from .exceptions import IngestError
from .components import ComponentType, TypeDef, ElementDecl, AttributeDecl, \
    AttributeGroupDef, GroupDef, builtin_types, is_builtin

logger = logging.getLogger('xsdgen')

KINDS = ('type', 'element', 'attribute', 'attribute_group', 'group')


class GlobalMaps(NamedTuple):
    types: Mapping[str, TypeDef]
    elements: Mapping[str, ElementDecl]
    attributes: Mapping[str, AttributeDecl]
    attribute_groups: Mapping[str, AttributeGroupDef]
    groups: Mapping[str, GroupDef]

    def get_map(self, kind: str) -> Mapping[str, Any]:
        return self[KINDS.index(kind)]


class SchemaImport(NamedTuple):
    """A record of an import or an include of a schema document."""
    namespace: str
    location: Optional[str]
    url: Optional[str]
    kind: str = 'import'


class SchemaContribution:
    """
    The declarations built from a single schema document, to be merged
    into the shared schema graph. Contributions are built independently,
    so they can be produced in parallel.
    """
    def __init__(self, url: Optional[str] = None, target_namespace: str = '') -> None:
        self.url = url
        self.target_namespace = target_namespace
        self.components: list[tuple[str, ComponentType]] = []
        self.imports: list[SchemaImport] = []

    def __repr__(self) -> str:
        return '%s(url=%r, target_namespace=%r)' % (
            self.__class__.__name__, self.url, self.target_namespace
        )

    def add(self, kind: str, component: ComponentType) -> None:
        self.components.append((kind, component))


class SchemaGraph:
    """
    The symbol table of a compilation. The graph is created with the builtin
    types, populated by merging the contributions of the schema documents and
    then frozen. After freezing the graph is read-only.
    """
    def __init__(self) -> None:
        self._maps = GlobalMaps(builtin_types(), {}, {}, {}, {})
        self.namespaces: dict[str, list[Optional[str]]] = {}
        self.imports: list[SchemaImport] = []
        self.frozen = False

    def __repr__(self) -> str:
        return '%s(namespaces=%r, frozen=%r)' % (
            self.__class__.__name__, list(self.namespaces), self.frozen
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SchemaGraph):
            return NotImplemented
        return all(dict(m1) == dict(m2) for m1, m2 in zip(self._maps, other._maps))

    __hash__ = None  # type: ignore[assignment]

    @property
    def maps(self) -> GlobalMaps:
        return self._maps

    @property
    def types(self) -> Mapping[str, TypeDef]:
        return self._maps.types

    @property
    def elements(self) -> Mapping[str, ElementDecl]:
        return self._maps.elements

    @property
    def attributes(self) -> Mapping[str, AttributeDecl]:
        return self._maps.attributes

    @property
    def attribute_groups(self) -> Mapping[str, AttributeGroupDef]:
        return self._maps.attribute_groups

    @property
    def groups(self) -> Mapping[str, GroupDef]:
        return self._maps.groups

    def add(self, kind: str, component: ComponentType) -> None:
        """Adds a component to the graph, checking duplicates."""
        if self.frozen:
            raise XsdGenRuntimeError(_("cannot add components to a frozen schema graph"))

        global_map: dict[str, Any] = self._maps.get_map(kind)  # type: ignore[assignment]
        name = component.name
        if name in global_map:
            other = global_map[name]
            if kind == 'type' and is_builtin(name):
                msg = _("redefinition of builtin type {!r}").format(name)
            else:
                msg = _("duplicate {} declaration {!r} (first declared in {!r})").format(
                    kind.replace('_', ' '), name, getattr(other, 'url', None)
                )
            raise IngestError(
                msg, name, getattr(component, 'url', None), getattr(component, 'path', None)
            )
        global_map[name] = component

    def merge(self, contribution: SchemaContribution) -> None:
        """Merges the declarations built from a schema document."""
        logger.debug("merge %r into the schema graph", contribution)
        for kind, component in contribution.components:
            self.add(kind, component)
        self.namespaces.setdefault(contribution.target_namespace, []).append(contribution.url)
        self.imports.extend(contribution.imports)

    def freeze(self) -> None:
        """Makes the graph read-only. No more components can be added after."""
        if not self.frozen:
            self._maps = GlobalMaps(*[MappingProxyType(m) for m in self._maps])
            self.frozen = True

    def lookup(self, kind: str, name: str) -> Optional[Any]:
        return self._maps.get_map(kind).get(name)

    def iter_components(self, kind: Optional[str] = None) -> Iterator[tuple[str, Any]]:
        """
        Iterates the components of the graph, sorted by kind and by qualified
        name, excluding builtin types.
        """
        for k in KINDS:
            if kind is not None and k != kind:
                continue
            global_map = self._maps.get_map(k)
            for name in sorted(global_map):
                if k != 'type' or not is_builtin(name):
                    yield k, global_map[name]

    def missing_namespaces(self) -> list[str]:
        """Returns the imported namespaces not supplied by any schema document."""
        return sorted({x.namespace for x in self.imports} - set(self.namespaces))
