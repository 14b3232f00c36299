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
The compilation pipeline. A `SchemaCompiler` drives the stages of a compilation
run, from the ingestion of the schema documents to the emission of the source
of the parser module. Every stage fails fast: the first error stops the run.
"""
import enum
import logging
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from typing import Any, Optional

from xsdgen.exceptions import XsdGenException, XsdGenRuntimeError
from xsdgen.settings import CompilerSettings
from xsdgen.translation import gettext as _
from xsdgen.tree import SourceType, TreeDocument, load_document
from xsdgen.utils.logger import logged
from .exceptions import XsdCompileError, IngestError
from .graph import SchemaGraph, SchemaContribution
from .builder import build_contribution
from .resolver import ResolvedReferences, resolve_references
from .derivation import Derivations, resolve_derivations
from .normalizer import NormalizedModels, normalize_models
from .ordering import Ordering, order_types

logger = logging.getLogger('xsdgen')


class CompilerState(enum.Enum):
    UNBUILT = 'unbuilt'
    INGESTING = 'ingesting'
    BUILDING = 'building'
    RESOLVING = 'resolving'
    NORMALIZING = 'normalizing'
    ORDERING = 'ordering'
    GENERATING = 'generating'
    EMITTED = 'emitted'
    FAILED = 'failed'


def load_schema_document(source: SourceType) -> TreeDocument:
    """Loads a schema document, wrapping loading errors into an `IngestError`."""
    try:
        return load_document(source)
    except (OSError, XsdGenException) as err:
        url = getattr(err, 'url', None) or getattr(err, 'filename', None)
        msg = _("cannot load schema document: {}").format(err)
        raise IngestError(msg, url=url if isinstance(url, str) else None) from err


def build_document(source: SourceType, strict: bool = False) -> SchemaContribution:
    """Loads a schema document and builds its declarations."""
    return build_contribution(load_schema_document(source), strict)


class SchemaCompiler:
    """
    Compiles a set of schema documents into the source of a parser module.

    The stages must be run in order, each stage is allowed only in the state
    left by the previous one:

      UNBUILT/INGESTING -> build() -> resolve() -> normalize() -> order() -> generate()

    :param sources: optional schema sources to add to the compilation.
    :param settings: an optional `CompilerSettings` instance.
    :param kwargs: options for overriding the settings (e.g. strict=True).
    """
    graph: Optional[SchemaGraph] = None
    references: Optional[ResolvedReferences] = None
    derivations: Optional[Derivations] = None
    models: Optional[NormalizedModels] = None
    ordering: Optional[Ordering] = None
    source_code: Optional[str] = None

    def __init__(self, *sources: SourceType, **kwargs: Any) -> None:
        self.settings = CompilerSettings.get_settings(**kwargs)
        self.sources: list[SourceType] = []
        self.urls: list[str] = []
        self.declarations: list[Any] = []
        self.error: Optional[XsdCompileError] = None
        self._state = CompilerState.UNBUILT

        for source in sources:
            self.add_document(source)

    def __repr__(self) -> str:
        return '%s(state=%r)' % (self.__class__.__name__, self._state.value)

    @property
    def state(self) -> CompilerState:
        return self._state

    @contextmanager
    def _run_stage(self, stage: str, state: CompilerState,
                   *allowed: CompilerState) -> Iterator[None]:
        if self._state not in allowed:
            msg = _("cannot run stage {!r} in state {!r}").format(stage, self._state.value)
            raise XsdGenRuntimeError(msg)

        logger.debug("%r: run stage %r", self, stage)
        self._state = state
        try:
            yield
        except XsdCompileError as err:
            self._state = CompilerState.FAILED
            self.error = err
            logger.debug("%r: stage %r failed with %r", self, stage, err)
            raise

    def add_document(self, source: SourceType) -> None:
        """Adds a schema document to the compilation."""
        if self._state not in (CompilerState.UNBUILT, CompilerState.INGESTING):
            msg = _("cannot add documents in state {!r}").format(self._state.value)
            raise XsdGenRuntimeError(msg)
        self.sources.append(source)
        self._state = CompilerState.INGESTING

    def build(self) -> SchemaGraph:
        """
        Loads and builds the schema documents in parallel, then merges their
        contributions, in input order, into a frozen schema graph.
        """
        with self._run_stage('build', CompilerState.BUILDING, CompilerState.INGESTING):
            strict = self.settings.strict
            with ThreadPoolExecutor(max_workers=self.settings.max_workers) as executor:
                futures = [executor.submit(build_document, x, strict) for x in self.sources]

            graph = SchemaGraph()
            for future in futures:
                contribution = future.result()
                graph.merge(contribution)
                if contribution.url is not None:
                    self.urls.append(contribution.url)
            graph.freeze()

            logger.info("built schema graph from %d documents", len(self.sources))
            self.graph = graph
            return graph

    def resolve(self) -> Derivations:
        """Resolves the references of the schema graph and the derivations of types."""
        with self._run_stage('resolve', CompilerState.RESOLVING, CompilerState.BUILDING):
            assert self.graph is not None
            self.references = resolve_references(self.graph)
            self.derivations = resolve_derivations(self.graph, self.references)
            return self.derivations

    def normalize(self) -> NormalizedModels:
        with self._run_stage('normalize', CompilerState.NORMALIZING, CompilerState.RESOLVING):
            assert self.graph is not None and self.references is not None
            assert self.derivations is not None
            self.models = normalize_models(self.graph, self.references, self.derivations)
            return self.models

    def order(self) -> Ordering:
        with self._run_stage('order', CompilerState.ORDERING, CompilerState.NORMALIZING):
            assert self.references is not None and self.derivations is not None
            assert self.models is not None
            self.ordering = order_types(self.references, self.derivations, self.models)
            return self.ordering

    def generate(self) -> str:
        """Generates the declarations and returns the source code of the parser module."""
        from xsdgen.codegen import generate_declarations, write_module

        with self._run_stage('generate', CompilerState.GENERATING, CompilerState.ORDERING):
            assert self.graph is not None and self.references is not None
            assert self.derivations is not None and self.models is not None
            assert self.ordering is not None

            self.declarations = generate_declarations(
                self.graph, self.references, self.derivations, self.models, self.ordering,
                module_name=self.settings.module_name,
                sources=self.urls,
                searchpath=self.settings.searchpath,
            )
            self.source_code = write_module(self.declarations)

        self._state = CompilerState.EMITTED
        return self.source_code

    def compile(self, **kwargs: Any) -> str:
        """
        Runs all the stages not yet run and returns the source code of the parser
        module. Accepts the keyword argument 'loglevel' for the run, that defaults
        to the loglevel of the settings.
        """
        if kwargs.get('loglevel') is None:
            kwargs['loglevel'] = self.settings.loglevel
        return self._compile(**kwargs)

    @logged
    def _compile(self, **kwargs: Any) -> str:
        if self._state == CompilerState.EMITTED:
            assert self.source_code is not None
            return self.source_code
        elif self._state == CompilerState.FAILED:
            raise XsdGenRuntimeError(_("the compilation has failed")) from self.error
        elif self._state == CompilerState.UNBUILT:
            raise XsdGenRuntimeError(_("no schema documents to compile"))

        stages = [
            (CompilerState.INGESTING, self.build),
            (CompilerState.BUILDING, self.resolve),
            (CompilerState.RESOLVING, self.normalize),
            (CompilerState.NORMALIZING, self.order),
            (CompilerState.ORDERING, self.generate),
        ]
        for state, stage in stages:
            if self._state == state:
                stage()

        assert self.source_code is not None
        return self.source_code


@logged
def compile_schemas(*sources: SourceType, **kwargs: Any) -> str:
    """
    Compiles schema documents into the source code of a parser module.

    :param sources: the schema documents, as paths, XML strings, file-like \
    objects or trees.
    :param kwargs: compiler settings (max_workers, strict, module_name, \
    searchpath, loglevel).
    """
    return SchemaCompiler(*sources, **kwargs).compile()
