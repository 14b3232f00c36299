#!/usr/bin/env python
#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
if __name__ == '__main__':
    import unittest
    import os
    import platform

    from xsdgen.testing import get_test_program_args_parser

    def load_tests(loader, tests, pattern):
        tests_dir = os.path.dirname(__file__)
        if pattern is not None:
            tests.addTests(loader.discover(start_dir=tests_dir, pattern=pattern))
            return tests

        tests.addTests(loader.discover(start_dir=tests_dir, pattern="test_qnames.py"))
        tests.addTests(loader.discover(start_dir=tests_dir, pattern="test_tree.py"))
        tests.addTests(loader.discover(start_dir=tests_dir, pattern="test_settings.py"))
        tests.addTests(loader.discover(start_dir=tests_dir, pattern="test_runtime.py"))
        tests.addTests(loader.discover(start_dir=tests_dir, pattern="test_codegen.py"))
        tests.addTests(loader.discover(start_dir=tests_dir, pattern="test_meta_schema.py"))
        tests.addTests(loader.discover(start_dir=tests_dir, pattern="test_cli.py"))
        tests.addTests(loader.discover(start_dir=tests_dir, pattern="test_package.py"))

        compiler_dir = os.path.join(os.path.dirname(__file__), 'compiler')
        tests.addTests(loader.discover(start_dir=compiler_dir, pattern='test_*.py'))
        return tests

    args = get_test_program_args_parser().parse_args()

    argv = [__file__]
    for pattern_ in args.patterns:
        argv.append('-k')
        argv.append(pattern_)

    header_template = "Test xsdgen with Python {} on {}"
    header = header_template.format(platform.python_version(), platform.platform())
    print('{0}\n{1}\n{0}'.format("*" * len(header), header))

    unittest.main(argv=argv, verbosity=args.verbosity, failfast=args.failfast)
