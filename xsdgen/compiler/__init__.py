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
The schema compiler: model building, reference and derivation resolution,
content model normalization and dependency ordering.
"""
from .exceptions import XsdCompileError, IngestError, ResolutionError, \
    UnresolvedReferenceError, InvalidDerivationError, UnsupportedConstructError
from .graph import SchemaGraph, SchemaContribution
from .builder import build_contribution
from .resolver import ResolvedReferences, resolve_references
from .derivation import Derivations, ResolvedType, resolve_derivations
from .normalizer import NormalizedModels, normalize_models
from .ordering import Ordering, order_types
from .pipeline import CompilerState, SchemaCompiler, compile_schemas

__all__ = ['XsdCompileError', 'IngestError', 'ResolutionError',
           'UnresolvedReferenceError', 'InvalidDerivationError',
           'UnsupportedConstructError', 'SchemaGraph', 'SchemaContribution',
           'build_contribution', 'ResolvedReferences', 'resolve_references',
           'Derivations', 'ResolvedType', 'resolve_derivations',
           'NormalizedModels', 'normalize_models', 'Ordering', 'order_types',
           'CompilerState', 'SchemaCompiler', 'compile_schemas']
