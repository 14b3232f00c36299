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
This module contains the code generators, based on Jinja2 templates. A
generator emits a sequence of declaration records from the products of
the compiler stages, that are joined into a module by the writer.
"""
import inspect
import logging
import math
import os
import sys
from abc import ABC, ABCMeta
from collections.abc import Iterator
from fnmatch import fnmatch
from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import Environment, ChoiceLoader, FileSystemLoader, BaseLoader, \
    TemplateNotFound

import xsdgen
import xsdgen.names as nm
from xsdgen.exceptions import XsdGenValueError
from xsdgen.translation import gettext as _
from xsdgen.utils.qnames import local_name
from xsdgen.compiler.components import ParticleType, Sequence, Choice, All, \
    ElementRef, GroupRef, Wildcard, Empty, AtomicType, ListType, UnionType, \
    BuiltinType, is_builtin, iter_particles, MODEL_GROUP_CLASSES
from xsdgen.compiler.graph import SchemaGraph
from xsdgen.compiler.resolver import ResolvedReferences
from xsdgen.compiler.derivation import Derivations, ResolvedType
from xsdgen.compiler.normalizer import NormalizedModels
from xsdgen.compiler.ordering import Ordering
from xsdgen.runtime.values import ComplexValue
from .naming import NameScope, to_identifier, to_class_name
from .writer import Declaration

logger = logging.getLogger('xsdgen-codegen')


def xsd_qname(name: str) -> str:
    return f'{{{nm.XSD_NAMESPACE}}}{name}'


def filter_method(func: Any) -> Any:
    """Marks a method for registration as template filter."""
    func.is_filter = True
    return func


class GeneratorMeta(ABCMeta):
    """
    Metaclass for creating code generators. Resolves the template search
    paths and merges the builtin types maps of base classes.
    """
    def __new__(mcs, name: str, bases: tuple[type, ...], attrs: dict[str, Any]) -> Any:
        module = sys.modules.get(attrs['__module__'])
        module_path = getattr(module, '__file__', os.getcwd())

        formal_language = None
        searchpaths: list[Path] = []
        builtin_types: dict[str, str] = {}

        for base in bases:
            if getattr(base, 'formal_language', None):
                if formal_language is None:
                    formal_language = base.formal_language
                elif formal_language != base.formal_language:
                    raise XsdGenValueError(_("ambiguous formal_language from base classes"))

            if getattr(base, 'searchpaths', None):
                searchpaths.extend(base.searchpaths)
            if getattr(base, 'builtin_types', None):
                builtin_types.update(base.builtin_types)

        if 'formal_language' not in attrs:
            attrs['formal_language'] = formal_language
        elif formal_language and formal_language != attrs['formal_language']:
            raise XsdGenValueError(_("formal_language cannot be changed"))

        for path in attrs.get('searchpaths') or ():
            if Path(path).is_absolute():
                dirpath = Path(path)
            else:
                dirpath = Path(module_path).parent.joinpath(path)

            if not dirpath.is_dir():
                raise XsdGenValueError(_("path {!r} is not a directory!").format(str(path)))
            searchpaths.append(dirpath)
        attrs['searchpaths'] = searchpaths

        for k, v in (attrs.get('builtin_types') or {}).items():
            builtin_types[xsd_qname(k)] = v
        attrs['builtin_types'] = builtin_types

        return type.__new__(mcs, name, bases, attrs)


class AbstractGenerator(ABC, metaclass=GeneratorMeta):
    """
    Abstract base class for code generators based on Jinja2 template engine.

    :param searchpath: additional search path for custom templates. \
    If provided the search path has priority over searchpaths defined \
    in generator class.
    """
    formal_language: Optional[str] = None
    """The formal language associated to the code generator (eg. Python)."""

    searchpaths: Optional[list[str]] = None
    """
    Directory paths for searching templates, specified with a list or a tuple.
    Each path must be provided as relative from the directory of the module
    where the class is defined. Extends the searchpath defined in base classes.
    """

    builtin_types = {
        'anyType': '',
        'anySimpleType': '',
    }
    """
    Translation map for XSD builtin types. Updates the builtin_types
    defined in base classes.
    """

    def __init__(self, searchpath: Optional[Union[str, Path]] = None) -> None:
        file_loaders: list[BaseLoader] = []
        if searchpath:
            file_loaders.append(FileSystemLoader(str(searchpath)))
        if self.searchpaths is not None:
            file_loaders.extend(
                FileSystemLoader(str(path)) for path in reversed(self.searchpaths)
            )
        if not file_loaders:
            raise XsdGenValueError(_("no search paths defined!"))
        loader = ChoiceLoader(file_loaders) if len(file_loaders) > 1 else file_loaders[0]

        self.filters = {}
        for name in filter(lambda x: callable(getattr(self, x)), dir(self)):
            method = getattr(self, name)
            if inspect.isfunction(method):
                # static methods
                if getattr(method, 'is_filter', False):
                    self.filters[name] = method
            elif inspect.isroutine(method) and hasattr(method, '__func__'):
                # class and instance methods
                if getattr(method.__func__, 'is_filter', False):
                    self.filters[name] = method

        self._env = Environment(loader=loader, trim_blocks=True,
                                lstrip_blocks=True, keep_trailing_newline=True)
        self._env.filters.update(self.filters)

    def __repr__(self) -> str:
        return '%s()' % self.__class__.__name__

    def list_templates(self) -> list[str]:
        return self._env.list_templates()

    def matching_templates(self, name: str) -> list[str]:
        return self._env.list_templates(filter_func=lambda x: fnmatch(x, name))

    def render(self, template_name: str, **kwargs: Any) -> str:
        """Renders a template. A missing template is an error."""
        try:
            template = self._env.get_template(template_name)
        except TemplateNotFound as err:
            msg = _("template {!r} not found").format(template_name)
            raise XsdGenValueError(msg) from err
        return template.render(**kwargs)

    @staticmethod
    @filter_method
    def pyrepr(obj: Any) -> str:
        """The Python literal of a value."""
        return repr(obj)


# Names used by the class bodies of generated modules
MODULE_RESERVED = frozenset((
    'dc', 'decimal', 'datatypes', 'rt', 'Any', 'ClassVar', 'Optional',
    'registry', 'parser', 'parse', 'iter_errors', 'is_valid',
))

BUILTIN_NAMES = frozenset(('str', 'int', 'float', 'bool', 'list', 'dict', 'set', 'tuple'))

VALUE_ATTRIBUTES = frozenset(x for x in dir(ComplexValue) if not x.startswith('__'))

WILDCARD_KEY = ('wildcard',)


def max_count(particle: ParticleType, key: tuple[str, ...]) -> float:
    """Returns the maximum number of values for a field key matched by a particle."""
    if isinstance(particle, ElementRef):
        count: float = 1 if key == ('element', particle.name) else 0
    elif isinstance(particle, Wildcard):
        count = 1 if key == WILDCARD_KEY else 0
    elif isinstance(particle, Choice):
        count = max((max_count(p, key) for p in particle.particles), default=0)
    elif isinstance(particle, (Sequence, All)):
        count = sum(max_count(p, key) for p in particle.particles)
    else:
        count = 0

    if not count:
        return 0
    elif particle.max_occurs is None:
        return math.inf
    return count * particle.max_occurs


class FieldSpec:
    """The generation data of a field of a complex value class."""

    def __init__(self, name: str, kind: str, tag: Optional[str] = None,
                 multiple: bool = False) -> None:
        self.name = name
        self.kind = kind
        self.tag = tag
        self.multiple = multiple
        self.annotations: list[str] = []

    def __repr__(self) -> str:
        return '%s(name=%r, kind=%r)' % (self.__class__.__name__, self.name, self.kind)

    @property
    def annotation(self) -> str:
        if self.kind == 'any_attribute':
            return 'dict[str, str]'
        elif self.kind == 'text':
            return 'list[str]'
        elif len(self.annotations) == 1:
            item = self.annotations[0]
        else:
            item = 'Any'

        if self.multiple:
            return f'list[{item}]'
        elif item == 'Any':
            return item
        return f'Optional[{item}]'

    @property
    def default(self) -> str:
        if self.kind == 'any_attribute':
            return 'dc.field(default_factory=dict)'
        elif self.multiple or self.kind == 'text':
            return 'dc.field(default_factory=list)'
        return 'None'

    def add_annotation(self, annotation: str) -> None:
        if annotation not in self.annotations:
            self.annotations.append(annotation)


class PythonGenerator(AbstractGenerator):
    """
    A Python code generator for compiled schemas. Emits a module with the
    simple types, a dataclass for each complex type, the global elements
    and the recursive groups, registered into a runtime registry.
    """
    formal_language = 'Python'

    searchpaths = ['templates/python/']

    builtin_types = {
        'anySimpleType': 'str',
        'anyAtomicType': 'str',
        'string': 'str',
        'decimal': 'decimal.Decimal',
        'float': 'float',
        'double': 'float',

        'date': 'datatypes.Date10',
        'dateTime': 'datatypes.DateTime10',
        'gDay': 'datatypes.GregorianDay',
        'gMonth': 'datatypes.GregorianMonth',
        'gMonthDay': 'datatypes.GregorianMonthDay',
        'gYear': 'datatypes.GregorianYear10',
        'gYearMonth': 'datatypes.GregorianYearMonth10',
        'time': 'datatypes.Time',
        'duration': 'datatypes.Duration',

        'QName': 'datatypes.QName',
        'NOTATION': 'str',
        'anyURI': 'str',
        'boolean': 'bool',
        'base64Binary': 'datatypes.Base64Binary',
        'hexBinary': 'datatypes.HexBinary',
        'normalizedString': 'str',
        'token': 'str',
        'language': 'str',
        'Name': 'str',
        'NCName': 'str',
        'ID': 'str',
        'IDREF': 'str',
        'ENTITY': 'str',
        'NMTOKEN': 'str',

        'integer': 'int',
        'long': 'int',
        'int': 'int',
        'short': 'int',
        'byte': 'int',
        'nonNegativeInteger': 'int',
        'positiveInteger': 'int',
        'unsignedLong': 'int',
        'unsignedInt': 'int',
        'unsignedShort': 'int',
        'unsignedByte': 'int',
        'nonPositiveInteger': 'int',
        'negativeInteger': 'int',
    }

    def __init__(self, graph: SchemaGraph,
                 references: ResolvedReferences,
                 derivations: Derivations,
                 models: NormalizedModels,
                 ordering: Ordering,
                 module_name: str = 'xsdgen_parser',
                 sources: Optional[list[str]] = None,
                 searchpath: Optional[Union[str, Path]] = None) -> None:
        super().__init__(searchpath)
        self.graph = graph
        self.references = references
        self.derivations = derivations
        self.models = models
        self.ordering = ordering
        self.module_name = module_name
        self.sources = sources or []

        self.module_scope = NameScope(MODULE_RESERVED)
        self.emitted_elements: set[str] = set()
        self._name_components()

        self.field_reserved = self.module_scope.reserved | set(self.module_scope.names.values()) \
            | BUILTIN_NAMES | VALUE_ATTRIBUTES
        self.group_fields = NameScope(self.field_reserved)
        self._name_group_fields()

    def __repr__(self) -> str:
        return '%s(module_name=%r)' % (self.__class__.__name__, self.module_name)

    def _name_components(self) -> None:
        for name in sorted(self.derivations.types):
            self.module_scope.bind(('type', name), to_class_name(name))
        for name in sorted(self.derivations.simple_types):
            self.module_scope.bind(('simple', name), 'T_' + to_class_name(name))
        for name in sorted(self.graph.elements):
            self.module_scope.bind(('element', name), 'E_' + to_identifier(local_name(name)))

    def _name_group_fields(self) -> None:
        for model in self.models.groups.values():
            for item, _in_group in self.iter_model(model):
                key = self.get_field_key(item)
                if key is not None:
                    self.group_fields.bind(key, self.field_base_name(item))

    ###
    # Names and references

    @filter_method
    def class_name(self, name: str) -> str:
        return self.module_scope[('type', name)]

    def is_simple_type(self, name: str) -> bool:
        if name in self.derivations.simple_types:
            return True
        type_def = self.graph.types.get(name)
        return type_def is not None and type_def.is_simple

    @filter_method
    def simple_type_ref(self, name: str) -> str:
        if is_builtin(name):
            return f'rt.BUILTINS[{name!r}]'
        return self.module_scope[('simple', name)]

    def binding_expr(self, type_name: Optional[str], lazy: bool = False) -> str:
        if type_name is None or type_name == nm.XSD_ANY_TYPE:
            return 'rt.ANY_TYPE'
        elif self.is_simple_type(type_name):
            return self.simple_type_ref(type_name)
        elif lazy and self.ordering.is_recursive(type_name):
            return f'registry.type_ref({type_name!r})'
        return self.class_name(type_name)

    def simple_annotation(self, name: str) -> str:
        try:
            return self.builtin_types[name]
        except KeyError:
            pass

        type_def = self.derivations.simple_types.get(name) or self.graph.types.get(name)
        if isinstance(type_def, BuiltinType):
            if type_def.item_type is not None:
                return f'list[{self.simple_annotation(type_def.item_type)}]'
            return 'str'
        elif isinstance(type_def, AtomicType):
            return self.simple_annotation(type_def.base)
        elif isinstance(type_def, ListType):
            return f'list[{self.simple_annotation(type_def.item_type)}]'
        return 'Any'

    def binding_annotation(self, type_name: Optional[str]) -> str:
        if type_name is None or type_name == nm.XSD_ANY_TYPE:
            return 'rt.TreeNode'
        elif self.is_simple_type(type_name):
            return self.simple_annotation(type_name)
        elif self.ordering.is_recursive(type_name):
            return repr(self.class_name(type_name))
        return self.class_name(type_name)

    def element_ref_expr(self, name: str) -> str:
        if name in self.emitted_elements:
            return self.module_scope[('element', name)]
        return f'registry.element_ref({name!r})'

    ###
    # Fields

    def iter_model(self, particle: ParticleType) -> Iterator[tuple[ParticleType, bool]]:
        """
        Iterates the particles of a content model, including the particles of
        the recursive groups, with a flag that is `True` for group particles.
        """
        groups: set[str] = set()
        pending: list[tuple[ParticleType, bool]] = [(particle, False)]
        while pending:
            model, in_group = pending.pop(0)
            for item in iter_particles(model):
                if isinstance(item, GroupRef):
                    if item.name not in groups:
                        groups.add(item.name)
                        pending.append((self.models.groups[item.name], True))
                else:
                    yield item, in_group

    @staticmethod
    def get_field_key(particle: ParticleType) -> Optional[tuple[str, ...]]:
        if isinstance(particle, ElementRef):
            return 'element', particle.name
        elif isinstance(particle, Wildcard):
            return WILDCARD_KEY
        return None

    @staticmethod
    def field_base_name(particle: ParticleType) -> str:
        if isinstance(particle, Wildcard):
            return 'any'
        return safe_field_name(local_name(particle.name))  # type: ignore[union-attr]

    def element_decl_tags(self, particle: ElementRef) -> list[str]:
        """Returns the tags of the global elements accepted by a reference."""
        tags = [particle.name] if not self.graph.elements[particle.name].abstract else []
        for member in self.references.substitutions.get(particle.name, ()):
            if not self.graph.elements[member].abstract:
                tags.append(member)
        return tags

    def get_fields(self, resolved: ResolvedType, model: ParticleType) -> dict[Any, FieldSpec]:
        """Returns the field specs of a complex type, keyed by particle or attribute."""
        scope = NameScope(self.field_reserved)
        fields: dict[Any, FieldSpec] = {}

        # Fields shared with recursive groups are bound first, with the group names
        items = list(self.iter_model(model))
        group_keys = [self.get_field_key(item) for item, in_group in items if in_group]
        for key in group_keys:
            if key is not None and key not in fields:
                kind = 'wildcard' if key == WILDCARD_KEY else 'element'
                tag = key[1] if len(key) > 1 else None
                fields[key] = FieldSpec(scope.force(key, self.group_fields[key]), kind, tag, True)

        for item, _in_group in items:
            key = self.get_field_key(item)
            if key is None:
                continue
            elif key not in fields:
                name = scope.bind(key, self.field_base_name(item))
                multiple = max_count(model, key) > 1
                kind = 'wildcard' if key == WILDCARD_KEY else 'element'
                tag = key[1] if len(key) > 1 else None
                fields[key] = FieldSpec(name, kind, tag, multiple)

            spec = fields[key]
            if isinstance(item, Wildcard):
                spec.add_annotation('rt.TreeNode')
            elif isinstance(item, ElementRef):
                if item.declaration is not None:
                    spec.add_annotation(self.binding_annotation(item.declaration.type_name))
                    continue
                for tag in self.element_decl_tags(item):
                    type_name = self.references.element_types[tag]
                    if tag != item.name and self.is_simple_type(type_name):
                        spec.add_annotation('Any')  # a tagged value
                    else:
                        spec.add_annotation(self.binding_annotation(type_name))

        for tag, attr in resolved.attributes.items():
            key = ('attribute', tag)
            name = scope.bind(key, safe_field_name(local_name(tag)))
            fields[key] = FieldSpec(name, 'attribute', tag)
            fields[key].add_annotation(self.simple_annotation(attr.type_name))

        if resolved.any_attribute is not None:
            key = ('any_attribute',)
            fields[key] = FieldSpec(scope.bind(key, 'any_attributes'), 'any_attribute')

        if resolved.simple_type is not None:
            key = ('content',)
            fields[key] = FieldSpec(scope.bind(key, 'content'), 'content')
            fields[key].add_annotation(self.simple_annotation(resolved.simple_type))
        elif resolved.mixed:
            key = ('text',)
            fields[key] = FieldSpec(scope.bind(key, 'text'), 'text')

        return fields

    ###
    # Content models

    def render_particle(self, particle: ParticleType, fields: dict[Any, FieldSpec]) -> str:
        """Renders the runtime expression of a normalized particle."""
        occurs = particle.min_occurs, particle.max_occurs

        if isinstance(particle, Empty):
            return 'rt.Empty()'
        elif isinstance(particle, ElementRef):
            field = fields[('element', particle.name)].name
            if particle.declaration is not None:
                decls = [self.render_local_element(particle)]
                tags = [particle.name]
            else:
                tags = self.element_decl_tags(particle)
                decls = [self.element_ref_expr(x) for x in tags]

            args = [repr(field), '[%s]' % ', '.join(decls)]
            if occurs != (1, 1):
                args.extend((repr(particle.min_occurs), repr(particle.max_occurs)))
            if not tags or tags[0] != particle.name:
                args.append(f'name={particle.name!r}')
            return 'rt.Element(%s)' % ', '.join(args)

        elif isinstance(particle, Wildcard):
            return 'rt.Wildcard(%r, %r, %r, %r, %r, %r)' % (
                fields[WILDCARD_KEY].name, particle.mode, list(particle.namespaces),
                particle.process_contents, particle.min_occurs, particle.max_occurs
            )
        elif isinstance(particle, GroupRef):
            return 'registry.group_ref(%r, %r, %r)' % (particle.name, *occurs)

        assert isinstance(particle, MODEL_GROUP_CLASSES)
        lines = [f'rt.{particle.__class__.__name__}(']
        for item in particle.particles:
            text = self.render_particle(item, fields).replace('\n', '\n    ')
            lines.append(f'    {text},')
        if particle.min_occurs != 1:
            lines.append(f'    min_occurs={particle.min_occurs!r},')
        if particle.max_occurs != 1:
            lines.append(f'    max_occurs={particle.max_occurs!r},')
        lines.append(')')
        return '\n'.join(lines)

    def render_local_element(self, particle: ElementRef) -> str:
        decl = particle.declaration
        assert decl is not None
        return 'rt.ElementDecl(%r, %s%s)' % (
            decl.name, self.binding_expr(decl.type_name, lazy=True), self.decl_options(decl)
        )

    @staticmethod
    def decl_options(decl: Any) -> str:
        options = []
        if decl.nillable:
            options.append(', nillable=True')
        if decl.default is not None:
            options.append(f', default={decl.default!r}')
        if decl.fixed is not None:
            options.append(f', fixed={decl.fixed!r}')
        if decl.is_global and decl.abstract:
            options.append(', abstract=True')
        return ''.join(options)

    ###
    # Declarations

    def generate(self) -> list[Declaration]:
        """Returns the declaration records of the module, in emission order."""
        declarations = [self.generate_header()]

        for name in self.ordering.order:
            if name in self.derivations.simple_types:
                declarations.append(self.generate_simple_type(name))

        elements_by_type: dict[str, list[str]] = {}
        for name in sorted(self.graph.elements):
            type_name = self.references.element_types[name]
            if type_name in self.derivations.types:
                elements_by_type.setdefault(type_name, []).append(name)
            else:
                declarations.append(self.generate_element(name))

        for name in self.ordering.order:
            if name in self.derivations.types:
                declarations.append(self.generate_complex_type(name))
                for elem_name in elements_by_type.get(name, ()):
                    declarations.append(self.generate_element(elem_name))

        for name in self.models.groups:
            declarations.append(self.generate_group(name))

        declarations.append(Declaration(
            self.module_name, 'footer', self.render('footer.py.jinja')
        ))
        logger.info("generated %d declarations for module %r",
                    len(declarations), self.module_name)
        return declarations

    def generate_header(self) -> Declaration:
        body = self.render(
            'header.py.jinja',
            module_name=self.module_name,
            version=xsdgen.__version__,
            sources=[os.path.basename(x) for x in self.sources],
        )
        return Declaration(self.module_name, 'header', body)

    def generate_simple_type(self, name: str) -> Declaration:
        type_def = self.derivations.simple_types[name]
        if isinstance(type_def, AtomicType):
            facets: dict[str, Any] = {}
            for facet, value in type_def.facets:
                if facet in ('pattern', 'enumeration'):
                    facets.setdefault(facet, []).append(value)
                else:
                    facets[facet] = value

            class_name = 'AtomicType'
            args = [self.simple_type_ref(type_def.base)]
            if facets:
                args.append(repr(facets))
        elif isinstance(type_def, ListType):
            class_name = 'ListType'
            args = [self.simple_type_ref(type_def.item_type)]
        elif isinstance(type_def, UnionType):
            class_name = 'UnionType'
            args = ['[%s]' % ', '.join(self.simple_type_ref(x) for x in type_def.member_types)]
        else:
            raise XsdGenValueError(_("unexpected simple type {!r}").format(type_def))

        logger.debug("generate simple type %r", name)
        body = self.render(
            'simple_type.py.jinja',
            var=self.module_scope[('simple', name)],
            class_name=class_name,
            name=name,
            args=args,
        )
        return Declaration(name, 'simple_type', body)

    def generate_complex_type(self, name: str) -> Declaration:
        resolved = self.derivations.types[name]
        model = self.models.types[name]
        fields = self.get_fields(resolved, model)

        attributes = []
        for tag, attr in resolved.attributes.items():
            options = []
            if attr.required:
                options.append('required=True')
            if attr.default is not None:
                options.append(f'default={attr.default!r}')
            if attr.fixed is not None:
                options.append(f'fixed={attr.fixed!r}')
            attributes.append({
                'tag': tag,
                'field': fields[('attribute', tag)].name,
                'simple_type': self.simple_type_ref(attr.type_name),
                'options': options,
            })

        any_attribute = None
        wildcard = resolved.any_attribute
        if wildcard is not None:
            any_attribute = 'rt.AnyAttribute(%r, %r, %r, %r)' % (
                fields[('any_attribute',)].name, wildcard.mode,
                list(wildcard.namespaces), wildcard.process_contents
            )

        if isinstance(model, Empty) or resolved.simple_type is not None:
            model_expr = None
        else:
            model_expr = self.render_particle(model, fields)

        logger.debug("generate complex type %r", name)
        body = self.render(
            'complex_type.py.jinja',
            class_name=self.class_name(name),
            name=name,
            resolved=resolved,
            fields=list(fields.values()),
            attributes=attributes,
            any_attribute=any_attribute,
            simple_type=None if resolved.simple_type is None
            else self.simple_type_ref(resolved.simple_type),
            model=model_expr,
        )
        return Declaration(name, 'complex_type', body)

    def generate_element(self, name: str) -> Declaration:
        decl = self.graph.elements[name]
        self.emitted_elements.add(name)
        body = self.render(
            'element.py.jinja',
            var=self.module_scope[('element', name)],
            name=name,
            binding=self.binding_expr(self.references.element_types[name]),
            options=self.decl_options(decl),
        )
        return Declaration(name, 'element', body)

    def generate_group(self, name: str) -> Declaration:
        model = self.models.groups[name]
        fields = {k: FieldSpec(v, 'element') for k, v in self.group_fields.names.items()}
        body = self.render(
            'group.py.jinja', name=name, model=self.render_particle(model, fields)
        )
        return Declaration(name, 'group', body)


def safe_field_name(name: str) -> str:
    ident = to_identifier(name)
    if ident.startswith('xsd_') or ident.startswith('__'):
        return f'f_{ident}'
    return ident


def generate_declarations(graph: SchemaGraph,
                          references: ResolvedReferences,
                          derivations: Derivations,
                          models: NormalizedModels,
                          ordering: Ordering,
                          module_name: str = 'xsdgen_parser',
                          sources: Optional[list[str]] = None,
                          searchpath: Optional[Union[str, Path]] = None) -> list[Declaration]:
    """Generates the declaration records of a parser module."""
    generator = PythonGenerator(graph, references, derivations, models, ordering,
                                module_name, sources, searchpath)
    return generator.generate()
