#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""Code generation of parser modules from compiled schemas."""
from .writer import Declaration, write_module, write_module_file, load_parser_module
from .generator import AbstractGenerator, PythonGenerator, generate_declarations

__all__ = ['Declaration', 'write_module', 'write_module_file', 'load_parser_module',
           'AbstractGenerator', 'PythonGenerator', 'generate_declarations']
