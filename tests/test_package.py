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
"""Tests about the packaging of the code"""

import unittest
import glob
import fileinput
import os
import re
import importlib


class TestPackaging(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.test_dir = os.path.dirname(os.path.abspath(__file__))
        cls.package_dir = os.path.dirname(cls.test_dir)
        cls.source_dir = os.path.join(cls.package_dir, 'xsdgen')
        cls.missing_debug = re.compile(
            r"(\bimport\s+pdb\b|\bpdb\s*\.\s*set_trace\(\s*\)|\bprint\s*\()|\bbreakpoint\s*\("
        )
        cls.get_version = re.compile(r"(?:\bversion|__version__)(?:\s*=\s*)(\'[^\']*\'|\"[^\"]*\")")

    def get_source_files(self):
        return glob.glob(os.path.join(self.source_dir, '**/*.py'), recursive=True)

    def test_missing_debug_statements(self):
        # Exclude explicit debug statements written in the code
        exclude = {
            '_helpers.py': [78],
        }

        message = "\nFound a debug missing statement at line %d or file %r: %r"
        filename = None
        file_excluded = []
        for line in fileinput.input(self.get_source_files()):
            if fileinput.isfirstline():
                filename = fileinput.filename()
                file_excluded = exclude.get(os.path.basename(filename), [])
            lineno = fileinput.filelineno()

            if lineno in file_excluded:
                continue

            match = self.missing_debug.search(line)
            self.assertIsNone(match, message % (lineno, filename, match and match.group(0)))

    def test_version(self):
        message = "\nFound a different version at line %d or file %r: %r (may be %r)."

        files = [
            os.path.join(self.source_dir, '__init__.py'),
            os.path.join(self.package_dir, 'setup.py'),
        ]
        version = filename = None
        for line in fileinput.input(files):
            if fileinput.isfirstline():
                filename = fileinput.filename()
            lineno = fileinput.filelineno()

            match = self.get_version.search(line)
            if match is not None:
                if version is None:
                    version = match.group(1).strip('\'\"')
                else:
                    self.assertTrue(
                        version == match.group(1).strip('\'\"'),
                        message % (lineno, filename, match.group(1).strip('\'\"'), version)
                    )

        xsdgen = importlib.import_module('xsdgen')
        self.assertEqual(xsdgen.__version__, version)

    def test_license_headers(self):
        files = self.get_source_files()
        files.extend(glob.glob(os.path.join(self.test_dir, '**/*.py'), recursive=True))
        files.append(os.path.join(self.package_dir, 'setup.py'))

        for filename in files:
            with open(filename) as fp:
                header = fp.read(1024)
            self.assertIn("This file is distributed under the terms of the MIT License",
                          header, msg="missing license header in %r" % filename)

    def test_base_schema_files(self):
        et = importlib.import_module('xml.etree.ElementTree')
        schemas_dir = os.path.join(self.source_dir, 'schemas')
        for rel_path in ('XMLSchema.xsd', 'xml.xsd'):
            filename = os.path.join(schemas_dir, rel_path)
            self.assertTrue(os.path.isfile(filename), msg="schema file %r is missing!" % filename)
            self.assertIsInstance(et.parse(filename), et.ElementTree)

    def test_names_are_used(self):
        names_file = os.path.join(self.source_dir, 'names.py')
        with open(names_file) as fp:
            names = re.findall(r'^([A-Z][A-Z0-9_]*)\s*=', fp.read(), re.MULTILINE)
        self.assertIn('XSD_NAMESPACE', names)

        sources = []
        files = self.get_source_files()
        files.extend(glob.glob(os.path.join(self.test_dir, '**/*.py'), recursive=True))
        for filename in files:
            with open(filename) as fp:
                sources.append(fp.read())
        code = '\n'.join(sources)

        for name in names:
            # the definition itself is one of the occurrences
            count = len(re.findall(r'\b%s\b' % name, code))
            self.assertGreater(count, 1, msg="name %r of xsdgen.names is unused" % name)

    def test_code_templates(self):
        templates_dir = os.path.join(self.source_dir, 'codegen/templates/python')
        for name in ('header', 'simple_type', 'complex_type', 'element', 'group', 'footer'):
            filename = os.path.join(templates_dir, f'{name}.py.jinja')
            self.assertTrue(os.path.isfile(filename), msg="template %r is missing!" % filename)


if __name__ == '__main__':
    import platform
    header_template = "Packaging tests for xsdgen with Python {} on {}"
    header = header_template.format(platform.python_version(), platform.platform())
    print('{0}\n{1}\n{0}'.format("*" * len(header), header))

    unittest.main()
