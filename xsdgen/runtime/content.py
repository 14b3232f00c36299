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
The content model matcher of generated parsers. Content models are trees of
particles that match the element children of a node with a greedy strategy:

  - a particle repeats while the next element is in its lookahead set
  - the alternatives of a choice are tried in declaration order and the
    leftmost alternative whose lookahead accepts the next element wins
  - the children of an all group can appear in any order, each one within
    its occurrence bounds, tracked by a counter
"""
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any, Optional, Protocol, Union

from xsdgen.translation import gettext as _
from xsdgen.utils.qnames import get_namespace
from .events import ElementStream

if TYPE_CHECKING:
    from .registry import Registry

_MAX_XML_DEPTH = 100


class ContentBuilder(Protocol):
    """The receiver of the values matched by a content model."""

    def add(self, field: str, value: Any, tag: Optional[str]) -> None: ...


class Lookahead:
    """The set of the element names that can start a match of a particle."""
    __slots__ = ('tags', 'wildcards')

    def __init__(self, tags: Iterable[str] = (),
                 wildcards: Iterable['Wildcard'] = ()) -> None:
        self.tags = frozenset(tags)
        self.wildcards = tuple(dict.fromkeys(wildcards))

    def __repr__(self) -> str:
        return '%s(tags=%r)' % (self.__class__.__name__, sorted(self.tags))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Lookahead):
            return NotImplemented
        return self.tags == other.tags and set(self.wildcards) == set(other.wildcards)

    __hash__ = None  # type: ignore[assignment]

    def __contains__(self, tag: object) -> bool:
        return tag in self.tags or any(w.is_matching(tag) for w in self.wildcards)

    def __or__(self, other: 'Lookahead') -> 'Lookahead':
        return Lookahead(self.tags | other.tags, self.wildcards + other.wildcards)


class Particle(ABC):
    """
    Base class for the particles of content models.

    :param min_occurs: the minimum number of occurrences.
    :param max_occurs: the maximum number of occurrences, `None` for unbounded.
    """
    name: Optional[str] = None

    def __init__(self, min_occurs: int = 1, max_occurs: Optional[int] = 1) -> None:
        self.min_occurs = min_occurs
        self.max_occurs = max_occurs
        self._first: Optional[Lookahead] = None
        self._emptiable: Optional[bool] = None

    def __repr__(self) -> str:
        return '%s(min_occurs=%r, max_occurs=%r)' % (
            self.__class__.__name__, self.min_occurs, self.max_occurs
        )

    @property
    def first(self) -> Lookahead:
        """The lookahead set of a single occurrence of the particle."""
        if self._first is None:
            resolve_lookaheads(self)
        return self._first  # type: ignore[return-value]

    def get_first(self) -> Lookahead:
        return Lookahead()

    def is_emptiable(self) -> bool:
        """Returns `True` if the particle can match an empty sequence of elements."""
        if self.min_occurs == 0:
            return True
        elif self._emptiable is None:
            resolve_lookaheads(self)
        return bool(self._emptiable)

    def is_content_emptiable(self) -> bool:
        return False

    def iter_elements(self) -> Iterator['Particle']:
        yield from ()

    @abstractmethod
    def match_one(self, stream: ElementStream, builder: ContentBuilder) -> None:
        """Matches a single occurrence of the particle."""

    def match(self, stream: ElementStream, builder: ContentBuilder) -> None:
        """Matches the particle within its occurrence bounds."""
        count = 0
        while self.max_occurs is None or count < self.max_occurs:
            if stream.tag is None or stream.tag not in self.first:
                break
            index = stream.index
            self.match_one(stream, builder)
            count += 1
            if stream.index == index:
                break  # an empty match can't progress

        if count < self.min_occurs and not self.is_content_emptiable():
            raise stream.error(self.missing_reason(count), particle=self.missing_particle())

    def missing_particle(self) -> Optional[str]:
        """Returns the name of the first required particle."""
        return self.name

    def missing_reason(self, count: int) -> str:
        if count == 0:
            return _("missing required particle")
        return _("the particle occurs {} times, but minOccurs is {}").format(
            count, self.min_occurs
        )


class Empty(Particle):

    def __init__(self) -> None:
        super().__init__(0, 0)

    def is_content_emptiable(self) -> bool:
        return True

    def match(self, stream: ElementStream, builder: ContentBuilder) -> None:
        return

    def match_one(self, stream: ElementStream, builder: ContentBuilder) -> None:
        return


class Element(Particle):
    """
    An element particle.

    :param field: the name of the field of the matched values.
    :param decls: the accepted element declarations: a declaration and the \
    members of its substitution group, or lazy references to them.
    :param name: the name of the declared element, defaults to the tag of \
    the first declaration.
    """
    def __init__(self, field: str, decls: Iterable[Any],
                 min_occurs: int = 1, max_occurs: Optional[int] = 1,
                 name: Optional[str] = None) -> None:
        super().__init__(min_occurs, max_occurs)
        self.field = field
        self.decls = {decl.tag: decl for decl in decls}
        self.name = name or next(iter(self.decls), field)

    def __repr__(self) -> str:
        return '%s(field=%r, tags=%r, min_occurs=%r, max_occurs=%r)' % (
            self.__class__.__name__, self.field, list(self.decls),
            self.min_occurs, self.max_occurs
        )

    def get_first(self) -> Lookahead:
        return Lookahead(self.decls)

    def iter_elements(self) -> Iterator[Particle]:
        yield self

    def match_one(self, stream: ElementStream, builder: ContentBuilder) -> None:
        context = stream.context
        if context.depth >= _MAX_XML_DEPTH:
            raise stream.error(
                _("maximum depth of {} exceeded").format(_MAX_XML_DEPTH), self.name
            )

        node, path = stream.next(self.name)
        decl = self.decls[node.tag]
        context.depth += 1
        try:
            value = decl.parse(node, path, context, substitute=node.tag != self.name)
        finally:
            context.depth -= 1
        builder.add(self.field, value, node.tag)


class Wildcard(Particle):
    """
    An element wildcard. Matched elements are captured as generic trees.

    :param field: the name of the field of the captured trees.
    :param mode: the namespace constraint mode, 'any', 'not' or 'enumeration'.
    :param namespaces: the namespaces of the constraint, '' for no namespace.
    """
    def __init__(self, field: str, mode: str = 'any',
                 namespaces: Iterable[str] = (),
                 process_contents: str = 'strict',
                 min_occurs: int = 1, max_occurs: Optional[int] = 1) -> None:
        super().__init__(min_occurs, max_occurs)
        self.field = field
        self.mode = mode
        self.namespaces = frozenset(namespaces)
        self.process_contents = process_contents
        self.name = field

    def is_matching(self, tag: object) -> bool:
        if not isinstance(tag, str):
            return False
        elif self.mode == 'any':
            return True
        elif self.mode == 'not':
            return get_namespace(tag) not in self.namespaces
        return get_namespace(tag) in self.namespaces

    def get_first(self) -> Lookahead:
        return Lookahead(wildcards=(self,))

    def iter_elements(self) -> Iterator[Particle]:
        yield self

    def match_one(self, stream: ElementStream, builder: ContentBuilder) -> None:
        node, _path = stream.next(self.name)
        builder.add(self.field, node, node.tag)


class ModelGroup(Particle):

    def __init__(self, *particles: Particle,
                 min_occurs: int = 1, max_occurs: Optional[int] = 1) -> None:
        super().__init__(min_occurs, max_occurs)
        self.particles = particles

    def __repr__(self) -> str:
        return '%s(%s, min_occurs=%r, max_occurs=%r)' % (
            self.__class__.__name__, ', '.join(repr(p) for p in self.particles),
            self.min_occurs, self.max_occurs
        )

    def iter_elements(self) -> Iterator[Particle]:
        for particle in self.particles:
            yield from particle.iter_elements()

    def missing_particle(self) -> Optional[str]:
        for particle in self.particles:
            if not particle.is_emptiable():
                return particle.missing_particle()
        return self.name


class Sequence(ModelGroup):

    def get_first(self) -> Lookahead:
        first = Lookahead()
        for particle in self.particles:
            first |= particle.first
            if not particle.is_emptiable():
                break
        return first

    def is_content_emptiable(self) -> bool:
        return all(p.is_emptiable() for p in self.particles)

    def match_one(self, stream: ElementStream, builder: ContentBuilder) -> None:
        for particle in self.particles:
            particle.match(stream, builder)


class Choice(ModelGroup):

    def get_first(self) -> Lookahead:
        first = Lookahead()
        for particle in self.particles:
            first |= particle.first
        return first

    def is_content_emptiable(self) -> bool:
        return any(p.is_emptiable() for p in self.particles)

    def match_one(self, stream: ElementStream, builder: ContentBuilder) -> None:
        tag = stream.tag
        for particle in self.particles:
            if tag in particle.first:
                particle.match(stream, builder)
                return


class All(ModelGroup):

    def get_first(self) -> Lookahead:
        first = Lookahead()
        for particle in self.particles:
            first |= particle.first
        return first

    def is_content_emptiable(self) -> bool:
        return all(p.is_emptiable() for p in self.particles)

    def match_one(self, stream: ElementStream, builder: ContentBuilder) -> None:
        counters = [0] * len(self.particles)
        while stream.tag is not None:
            tag = stream.tag
            for k, particle in enumerate(self.particles):
                if tag in particle.first and \
                        (particle.max_occurs is None or counters[k] < particle.max_occurs):
                    particle.match_one(stream, builder)
                    counters[k] += 1
                    break
            else:
                break

        for particle, count in zip(self.particles, counters):
            if count < particle.min_occurs:
                raise stream.error(particle.missing_reason(count),
                                   particle=particle.missing_particle())


class GroupRef(Particle):
    """A lazy reference to a named content model of a registry, used for recursive groups."""

    def __init__(self, registry: 'Registry', name: str,
                 min_occurs: int = 1, max_occurs: Optional[int] = 1) -> None:
        super().__init__(min_occurs, max_occurs)
        self.registry = registry
        self.name = name

    def __repr__(self) -> str:
        return '%s(name=%r, min_occurs=%r, max_occurs=%r)' % (
            self.__class__.__name__, self.name, self.min_occurs, self.max_occurs
        )

    @property
    def model(self) -> Particle:
        return self.registry.groups[self.name]

    def get_first(self) -> Lookahead:
        return self.model.first

    def is_content_emptiable(self) -> bool:
        return self.model.is_emptiable()

    def match_one(self, stream: ElementStream, builder: ContentBuilder) -> None:
        self.model.match(stream, builder)


ParticleType = Union[Empty, Element, Wildcard, Sequence, Choice, All, GroupRef]


def resolve_lookaheads(particle: Particle) -> None:
    """
    Computes the lookahead sets and the emptiability of a particle and of the
    particles reachable from it, following the references to groups. Through
    recursive groups these properties depend on each other, so they are computed
    together as a least fixpoint. Particles already resolved are left unchanged.
    """
    particles: list[Particle] = []
    visited: set[int] = set()
    stack = [particle]
    while stack:
        item = stack.pop()
        if id(item) in visited or item._first is not None:
            continue

        visited.add(id(item))
        particles.append(item)
        if isinstance(item, ModelGroup):
            stack.extend(item.particles)
        elif isinstance(item, GroupRef):
            stack.append(item.model)

    for item in particles:
        item._first = Lookahead()
        item._emptiable = False

    changed = True
    while changed:
        changed = False
        for item in reversed(particles):
            first = item.get_first()
            emptiable = item.is_content_emptiable()
            if first != item._first or emptiable != item._emptiable:
                item._first = first
                item._emptiable = emptiable
                changed = True
