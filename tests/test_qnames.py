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
"""Tests concerning the helper functions for QNames and namespaces."""
import unittest

from xsdgen.exceptions import XsdGenValueError, XsdGenTypeError, XsdGenKeyError
from xsdgen.names import XSD_NAMESPACE, XML_NAMESPACE, XSD_STRING, XML_LANG
from xsdgen.utils.qnames import get_namespace, get_qname, local_name, \
    get_prefixed_qname, get_extended_qname, resolve_qname


class TestQNameHelpers(unittest.TestCase):

    def test_get_namespace_function(self):
        self.assertEqual(get_namespace(XSD_STRING), XSD_NAMESPACE)
        self.assertEqual(get_namespace('node'), '')
        self.assertEqual(get_namespace('{}node'), '')
        self.assertEqual(get_namespace(''), '')
        self.assertEqual(get_namespace('{malformed'), '')

        with self.assertRaises(XsdGenTypeError):
            get_namespace(None)

    def test_get_qname_function(self):
        self.assertEqual(get_qname(XSD_NAMESPACE, 'element'), f'{{{XSD_NAMESPACE}}}element')
        self.assertEqual(get_qname(XSD_NAMESPACE, XSD_STRING), XSD_STRING)
        self.assertEqual(get_qname('', 'element'), 'element')
        self.assertEqual(get_qname(None, 'element'), 'element')
        self.assertEqual(get_qname(XSD_NAMESPACE, ''), '')

        with self.assertRaises(XsdGenTypeError):
            get_qname(XSD_NAMESPACE, None)

    def test_local_name_function(self):
        self.assertEqual(local_name(XSD_STRING), 'string')
        self.assertEqual(local_name('xs:string'), 'string')
        self.assertEqual(local_name('string'), 'string')
        self.assertEqual(local_name(''), '')

        with self.assertRaises(XsdGenValueError):
            local_name('xs:a:b')
        with self.assertRaises(XsdGenTypeError):
            local_name(None)

    def test_get_prefixed_qname_function(self):
        namespaces = {'xs': XSD_NAMESPACE, '': 'urn:default'}
        self.assertEqual(get_prefixed_qname(XSD_STRING, namespaces), 'xs:string')
        self.assertEqual(get_prefixed_qname('{urn:default}node', namespaces), 'node')
        self.assertEqual(get_prefixed_qname('{urn:default}node', namespaces, use_empty=False),
                         '{urn:default}node')
        self.assertEqual(get_prefixed_qname('{urn:other}node', namespaces), '{urn:other}node')
        self.assertEqual(get_prefixed_qname('node', namespaces), 'node')
        self.assertEqual(get_prefixed_qname(XSD_STRING, None), XSD_STRING)

    def test_get_extended_qname_function(self):
        namespaces = {'xs': XSD_NAMESPACE, '': 'urn:default'}
        self.assertEqual(get_extended_qname('xs:string', namespaces), XSD_STRING)
        self.assertEqual(get_extended_qname('node', namespaces), '{urn:default}node')
        self.assertEqual(get_extended_qname('tns:node', namespaces), 'tns:node')
        self.assertEqual(get_extended_qname(XSD_STRING, namespaces), XSD_STRING)
        self.assertEqual(get_extended_qname('node', {'xs': XSD_NAMESPACE}), 'node')
        self.assertEqual(get_extended_qname('xs:string', {}), 'xs:string')

    def test_resolve_qname_function(self):
        namespaces = {'xs': XSD_NAMESPACE}
        self.assertEqual(resolve_qname('xs:string', namespaces), XSD_STRING)
        self.assertEqual(resolve_qname(' xs:string ', namespaces), XSD_STRING)
        self.assertEqual(resolve_qname('node', namespaces), 'node')
        self.assertEqual(resolve_qname('node', {'': 'urn:default'}), '{urn:default}node')
        self.assertEqual(resolve_qname(XSD_STRING, {}), XSD_STRING)

    def test_resolve_qname_binds_xml_prefix(self):
        self.assertEqual(resolve_qname('xml:lang', {}), XML_LANG)
        self.assertEqual(resolve_qname('xml:lang', {'xml': 'urn:wrong'}),
                         f'{{{XML_NAMESPACE}}}lang')

    def test_resolve_qname_errors(self):
        with self.assertRaises(XsdGenKeyError) as ctx:
            resolve_qname('tns:node', {'xs': XSD_NAMESPACE})
        self.assertIn("'tns'", str(ctx.exception))

        with self.assertRaises(XsdGenValueError):
            resolve_qname('', {})
        with self.assertRaises(XsdGenValueError):
            resolve_qname('  ', {})
        with self.assertRaises(XsdGenValueError):
            resolve_qname('a:b:c', {'a': 'urn:a'})


if __name__ == '__main__':
    from xsdgen.testing import run_xsdgen_tests
    run_xsdgen_tests()
