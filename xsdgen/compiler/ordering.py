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
The dependency orderer: computes the strongly connected components of the
type reference graph with Tarjan's algorithm.
"""
import dataclasses as dc
import logging
from collections.abc import Iterable
from typing import Optional

from .components import ElementRef, GroupRef, AtomicType, ListType, UnionType, \
    ParticleType, is_builtin, iter_particles
from .resolver import ResolvedReferences
from .derivation import Derivations
from .normalizer import NormalizedModels

logger = logging.getLogger('xsdgen')


@dc.dataclass(frozen=True)
class Ordering:
    """
    The declaration order of types.

    :param order: the type names, dependencies first.
    :param components: the strongly connected components, in the same order.
    :param recursive: the names of the types that belong to a recursive cluster.
    """
    order: tuple[str, ...]
    components: tuple[tuple[str, ...], ...]
    recursive: frozenset[str]

    def is_recursive(self, name: str) -> bool:
        return name in self.recursive


class DependencyOrderer:

    def __init__(self, references: ResolvedReferences,
                 derivations: Derivations,
                 models: NormalizedModels) -> None:
        self.references = references
        self.derivations = derivations
        self.models = models
        self.edges: dict[str, list[str]] = {}

    def __repr__(self) -> str:
        return '%s()' % self.__class__.__name__

    def build_edges(self) -> dict[str, list[str]]:
        """Builds the reference graph, with sorted adjacency lists."""
        edges: dict[str, set[str]] = {}

        for name, type_def in self.derivations.simple_types.items():
            if isinstance(type_def, AtomicType):
                targets: Iterable[str] = (type_def.base,)
            elif isinstance(type_def, ListType):
                targets = (type_def.item_type,)
            elif isinstance(type_def, UnionType):
                targets = type_def.member_types
            else:
                targets = ()
            edges[name] = {x for x in targets if not is_builtin(x)}

        for name, resolved in self.derivations.types.items():
            targets = set(self.iter_content_types(self.models.types[name]))
            if resolved.simple_type is not None:
                targets.add(resolved.simple_type)
            targets.update(attr.type_name for attr in resolved.attributes.values())
            edges[name] = {x for x in targets if not is_builtin(x)}

        self.edges = {k: sorted(edges[k]) for k in sorted(edges)}
        return self.edges

    def iter_content_types(self, particle: ParticleType,
                           groups: Optional[set[str]] = None) -> Iterable[str]:
        """Iterates the types referenced by a content model, including substitutes."""
        if groups is None:
            groups = set()

        for item in iter_particles(particle):
            if isinstance(item, ElementRef):
                if item.declaration is not None:
                    if item.declaration.type_name is not None:
                        yield item.declaration.type_name
                else:
                    yield self.references.element_types[item.name]
                    for member in self.references.substitutions.get(item.name, ()):
                        yield self.references.element_types[member]
            elif isinstance(item, GroupRef) and item.name not in groups:
                groups.add(item.name)
                yield from self.iter_content_types(self.models.groups[item.name], groups)

    def order(self) -> Ordering:
        edges = self.build_edges()
        index: dict[str, int] = {}
        lowlink: dict[str, int] = {}
        stack: list[str] = []
        on_stack: set[str] = set()
        components: list[tuple[str, ...]] = []

        def strong_connect(root: str) -> None:
            # Each work item is a node with the position of its next edge to visit
            work: list[tuple[str, int]] = [(root, 0)]
            while work:
                node, position = work.pop()
                if position == 0:
                    index[node] = lowlink[node] = len(index)
                    stack.append(node)
                    on_stack.add(node)

                targets = edges[node]
                while position < len(targets):
                    target = targets[position]
                    position += 1
                    if target not in index:
                        work.append((node, position))
                        work.append((target, 0))
                        break
                    elif target in on_stack:
                        lowlink[node] = min(lowlink[node], index[target])
                else:
                    if lowlink[node] == index[node]:
                        component = []
                        while True:
                            item = stack.pop()
                            on_stack.remove(item)
                            component.append(item)
                            if item == node:
                                break
                        components.append(tuple(sorted(component)))

                    if work:
                        parent = work[-1][0]
                        lowlink[parent] = min(lowlink[parent], lowlink[node])

        for node in edges:
            if node not in index:
                strong_connect(node)

        recursive: set[str] = set()
        for component in components:
            if len(component) > 1 or component[0] in edges[component[0]]:
                logger.debug("recursive cluster %r", component)
                recursive.update(component)

        return Ordering(
            order=tuple(name for component in components for name in component),
            components=tuple(components),
            recursive=frozenset(recursive),
        )


def order_types(references: ResolvedReferences,
                derivations: Derivations,
                models: NormalizedModels) -> Ordering:
    """Returns the declaration order of the types, dependencies first."""
    return DependencyOrderer(references, derivations, models).order()
