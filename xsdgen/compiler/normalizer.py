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
The content model normalizer: transforms the resolved content models into a
canonical particle grammar, expanding the group references that don't recurse.
"""
import dataclasses as dc
import logging
from collections.abc import Iterator, Mapping
from typing import NamedTuple, Optional

from xsdgen.translation import gettext as _
from .exceptions import UnsupportedConstructError
from .components import ParticleType, Sequence, Choice, All, ElementRef, GroupRef, \
    Wildcard, Empty, MODEL_GROUP_CLASSES
from .graph import SchemaGraph
from .resolver import ResolvedReferences
from .derivation import Derivations

logger = logging.getLogger('xsdgen')

_MAX_MODEL_DEPTH = 15


class NormalizedModels(NamedTuple):
    """
    The canonical content models.

    :param types: maps each complex type to its normalized content model.
    :param groups: maps each recursive group, preserved as a reference, \
    to its normalized content model.
    """
    types: Mapping[str, ParticleType]
    groups: Mapping[str, ParticleType]


def set_occurs(particle: ParticleType, min_occurs: int,
               max_occurs: Optional[int]) -> ParticleType:
    """Applies the occurrence bounds of a container to a normalized particle."""
    if (min_occurs, max_occurs) == (1, 1):
        return particle
    elif particle.occurs == (1, 1):
        return dc.replace(particle, min_occurs=min_occurs, max_occurs=max_occurs)
    return Sequence((particle,), min_occurs, max_occurs)


class ContentModelNormalizer:
    """
    Normalizes the content models of the resolved complex types:

      - expands group references, keeping recursive ones as references
      - drops particles with maxOccurs == 0 and empty model groups
      - flattens nested groups of the same kind and collapses single-child groups
      - merges nested all groups
    """
    def __init__(self, graph: SchemaGraph,
                 references: ResolvedReferences,
                 derivations: Derivations) -> None:
        self.graph = graph
        self.references = references
        self.derivations = derivations
        self.recursive_groups: set[str] = set()
        self._groups: dict[str, ParticleType] = {}
        self._name: Optional[str] = None

    def __repr__(self) -> str:
        return '%s(graph=%r)' % (self.__class__.__name__, self.graph)

    def normalize(self) -> NormalizedModels:
        types = {}
        for name, resolved in self.derivations.types.items():
            self._name = name
            types[name] = self.normalize_particle(resolved.content) or Empty()

        pending = sorted(self.recursive_groups)
        while pending:
            name = pending.pop(0)
            self._name = name
            particle = self.graph.groups[name].particle
            self._groups[name] = self.normalize_particle(particle, (name,)) or Empty()
            pending.extend(sorted(self.recursive_groups.difference(self._groups, pending)))

        for name in types:
            self._name = name
            self.check_choices(types[name])
        for name in sorted(self._groups):
            self._name = name
            self.check_choices(self._groups[name])

        logger.debug("normalized %d content models and %d recursive groups",
                     len(types), len(self._groups))
        return NormalizedModels(types, {k: self._groups[k] for k in sorted(self._groups)})

    def normalize_particle(self, particle: Optional[ParticleType],
                           groups: tuple[str, ...] = (),
                           depth: int = 0) -> Optional[ParticleType]:
        """
        Returns the canonical form of a particle, or `None` if the particle
        can't match anything.
        """
        if particle is None or particle.is_empty() or isinstance(particle, Empty):
            return None
        elif depth > _MAX_MODEL_DEPTH:
            msg = _("the content model exceeds the maximum depth {}").format(_MAX_MODEL_DEPTH)
            raise UnsupportedConstructError('xs:group', self._name, reason=msg)
        elif isinstance(particle, (ElementRef, Wildcard)):
            return particle
        elif isinstance(particle, GroupRef):
            if particle.name in groups:
                if particle.name not in self.recursive_groups:
                    logger.debug("keep recursive reference to group %r", particle.name)
                    self.recursive_groups.add(particle.name)
                return particle

            content = self.normalize_particle(
                self.graph.groups[particle.name].particle, groups + (particle.name,), depth + 1
            )
            if content is None:
                return None
            return set_occurs(content, particle.min_occurs, particle.max_occurs)

        children: list[ParticleType] = []
        min_occurs = particle.min_occurs
        for item in particle.particles:
            child = self.normalize_particle(item, groups, depth + 1)
            if child is None:
                if isinstance(particle, Choice):
                    min_occurs = 0
            elif isinstance(particle, All):
                if isinstance(child, All) and child.occurs == (1, 1):
                    children.extend(child.particles)
                elif isinstance(child, (ElementRef, Wildcard)):
                    children.append(child)
                else:
                    raise UnsupportedConstructError(
                        'xs:all', self._name,
                        reason=_("an all model group can contain only element particles")
                    )
            elif type(child) is type(particle) and child.occurs == (1, 1):
                children.extend(child.particles)  # type: ignore[union-attr]
            else:
                children.append(child)

        if not children:
            return None
        elif len(children) == 1 and not isinstance(particle, All):
            return set_occurs(children[0], min_occurs, particle.max_occurs)
        return type(particle)(tuple(children), min_occurs, particle.max_occurs)

    ###
    # Lookahead analysis

    def is_emptiable(self, particle: ParticleType, groups: tuple[str, ...] = ()) -> bool:
        if particle.min_occurs == 0 or isinstance(particle, Empty):
            return True
        elif isinstance(particle, (ElementRef, Wildcard)):
            return False
        elif isinstance(particle, GroupRef):
            if particle.name in groups:
                return False
            return self.is_emptiable(self._groups[particle.name], groups + (particle.name,))
        elif isinstance(particle, Choice):
            return any(self.is_emptiable(p, groups) for p in particle.particles)
        else:
            return all(self.is_emptiable(p, groups) for p in particle.particles)

    def first_names(self, particle: ParticleType,
                    groups: tuple[str, ...] = ()) -> set[str]:
        """
        Returns the names of the elements that can start a match of the particle,
        including substitution group members. Wildcards are represented by '*'.
        """
        if isinstance(particle, ElementRef):
            names = {particle.name}
            if not particle.is_local:
                names.update(self.references.substitutions.get(particle.name, ()))
            return names
        elif isinstance(particle, Wildcard):
            return {'*'}
        elif isinstance(particle, Empty):
            return set()
        elif isinstance(particle, GroupRef):
            if particle.name in groups:
                return set()
            return self.first_names(self._groups[particle.name], groups + (particle.name,))
        elif isinstance(particle, Sequence):
            names = set()
            for item in particle.particles:
                names.update(self.first_names(item, groups))
                if not self.is_emptiable(item, groups):
                    break
            return names
        else:
            names = set()
            for item in particle.particles:
                names.update(self.first_names(item, groups))
            return names

    def check_choices(self, particle: ParticleType) -> None:
        """Logs a warning for each choice with alternatives that share leading names."""
        for item in self._iter_model_groups(particle):
            if not isinstance(item, Choice):
                continue

            seen: set[str] = set()
            for alternative in item.particles:
                names = self.first_names(alternative)
                shared = seen & names
                if shared:
                    logger.warning("ambiguous choice in %r: alternatives share the leading "
                                   "names %r, the leftmost alternative wins",
                                   self._name, sorted(shared))
                seen.update(names)

    def _iter_model_groups(self, particle: ParticleType) -> Iterator[ParticleType]:
        if isinstance(particle, MODEL_GROUP_CLASSES):
            yield particle
            for item in particle.particles:
                yield from self._iter_model_groups(item)


def normalize_models(graph: SchemaGraph,
                     references: ResolvedReferences,
                     derivations: Derivations) -> NormalizedModels:
    """Normalizes the content models of the resolved complex types."""
    return ContentModelNormalizer(graph, references, derivations).normalize()
