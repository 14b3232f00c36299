#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
from . import limits
from . import translation
from .exceptions import XsdGenException, TreeParseError
from .names import META_SCHEMA, XML_SCHEMA
from .settings import CompilerSettings
from .tree import TreeNode, TreeDocument, load_document, load_tree
from .compiler import XsdCompileError, IngestError, ResolutionError, \
    UnresolvedReferenceError, InvalidDerivationError, UnsupportedConstructError, \
    CompilerState, SchemaCompiler, compile_schemas
from .codegen import load_parser_module, write_module_file
from .runtime import ParseError, ValidationError, LexicalError

__version__ = '0.3.0'
__author__ = "Davide Brunato"
__contact__ = "brunato@sissa.it"
__copyright__ = "Copyright 2016-2024, SISSA"
__license__ = "MIT"
__status__ = "Beta"

__all__ = [
    'limits', 'translation', 'XsdGenException', 'TreeParseError',
    'META_SCHEMA', 'XML_SCHEMA', 'CompilerSettings', 'TreeNode',
    'TreeDocument', 'load_document', 'load_tree', 'XsdCompileError',
    'IngestError', 'ResolutionError', 'UnresolvedReferenceError',
    'InvalidDerivationError', 'UnsupportedConstructError', 'CompilerState',
    'SchemaCompiler', 'compile_schemas', 'load_parser_module',
    'write_module_file', 'ParseError', 'ValidationError', 'LexicalError',
]
