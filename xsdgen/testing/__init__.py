#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
# mypy: ignore-errors
"""
Subpackage with unittest extensions for xsdgen.

Includes a base test case class with helpers for compiling schema fragments
and for loading the generated parsers without writing files, plus a helper
for running the test scripts of the package.
"""
from ._helpers import tree_nodes_assert_equal, get_test_program_args_parser, \
    run_xsdgen_tests
from ._case_class import SCHEMA_TEMPLATE, XsdGenTestCase

__all__ = ['SCHEMA_TEMPLATE', 'XsdGenTestCase', 'tree_nodes_assert_equal',
           'get_test_program_args_parser', 'run_xsdgen_tests']
