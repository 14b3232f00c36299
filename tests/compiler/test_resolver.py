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
"""Tests concerning the resolution of references."""
import os

import xsdgen.names as nm
from xsdgen.exceptions import XsdGenRuntimeError
from xsdgen.compiler import SchemaGraph, resolve_references, ResolutionError, \
    UnresolvedReferenceError
from xsdgen.testing import XsdGenTestCase

SUBSTITUTIONS = """
<xs:complexType name="shapeType">
  <xs:attribute name="id" type="xs:ID"/>
</xs:complexType>
<xs:complexType name="squareType">
  <xs:complexContent>
    <xs:extension base="shapeType">
      <xs:attribute name="side" type="xs:int"/>
    </xs:extension>
  </xs:complexContent>
</xs:complexType>
<xs:element name="shape" type="shapeType" abstract="true"/>
<xs:element name="circle" substitutionGroup="shape"/>
<xs:element name="bigCircle" substitutionGroup="circle"/>
<xs:element name="square" type="squareType" substitutionGroup="shape"/>
<xs:element name="any"/>"""


class TestReferenceResolver(XsdGenTestCase):

    TEST_CASES_DIR = os.path.join(os.path.dirname(__file__), '../test_cases/')

    def resolve(self, *sources):
        compiler = self.get_compiler(*sources)
        compiler.build()
        compiler.resolve()
        return compiler.references

    def test_substitution_groups(self):
        references = self.resolve(SUBSTITUTIONS)

        self.assertEqual(references.substitutions, {
            'circle': ('bigCircle',),
            'shape': ('bigCircle', 'circle', 'square'),
        })
        self.assertListEqual(list(references.substitutions), ['circle', 'shape'])

    def test_element_types(self):
        references = self.resolve(SUBSTITUTIONS)

        self.assertEqual(references.element_types, {
            'any': nm.XSD_ANY_TYPE,
            'bigCircle': 'shapeType',
            'circle': 'shapeType',
            'shape': 'shapeType',
            'square': 'squareType',
        })

    def test_circular_substitution_group(self):
        err = self.check_compile_error("""
            <xs:element name="a" substitutionGroup="b"/>
            <xs:element name="b" substitutionGroup="a"/>""", ResolutionError, 'a')

        self.assertNotIsInstance(err, UnresolvedReferenceError)
        self.assertIn("circular substitution group", str(err))

    def test_unresolved_references(self):
        err = self.check_compile_error('missing_base.xsd', UnresolvedReferenceError,
                                       'derivedType')
        self.assertEqual(err.target, 'missingType')
        self.assertEqual(err.kind, 'type')

        err = self.check_compile_error("""
            <xs:complexType name="t">
              <xs:sequence><xs:element ref="missing"/></xs:sequence>
            </xs:complexType>""", UnresolvedReferenceError, 't')
        self.assertEqual((err.target, err.kind), ('missing', 'element'))

        err = self.check_compile_error("""
            <xs:complexType name="t">
              <xs:sequence><xs:group ref="missing"/></xs:sequence>
            </xs:complexType>""", UnresolvedReferenceError, 't')
        self.assertEqual((err.target, err.kind), ('missing', 'group'))

        err = self.check_compile_error("""
            <xs:attributeGroup name="ag">
              <xs:attributeGroup ref="missing"/>
            </xs:attributeGroup>""", UnresolvedReferenceError, 'ag')
        self.assertEqual((err.target, err.kind), ('missing', 'attribute group'))

        err = self.check_compile_error(
            '<xs:element name="e" substitutionGroup="missing"/>', UnresolvedReferenceError, 'e'
        )
        self.assertEqual((err.target, err.kind), ('missing', 'element'))

    def test_reference_kinds(self):
        err = self.check_compile_error("""
            <xs:complexType name="c"/>
            <xs:attribute name="a" type="c"/>""", UnresolvedReferenceError, 'a')
        self.assertEqual((err.target, err.kind), ('c', 'simple type'))
        self.assertIn("unresolved reference to simple type 'c'", str(err))

        err = self.check_compile_error("""
            <xs:simpleType name="s">
              <xs:list itemType="c"/>
            </xs:simpleType>
            <xs:complexType name="c"/>""", UnresolvedReferenceError, 's')
        self.assertEqual(err.kind, 'simple type')

    def test_error_independent_of_document_order(self):
        first = '<xs:element name="z" type="missing1"/>'
        second = """
            <xs:complexType name="a">
              <xs:complexContent>
                <xs:extension base="missing2"/>
              </xs:complexContent>
            </xs:complexType>"""

        err1 = self.check_compile_error([first, second], UnresolvedReferenceError)
        err2 = self.check_compile_error([second, first], UnresolvedReferenceError)
        self.assertEqual((err1.name, err1.target), ('a', 'missing2'))
        self.assertEqual((err2.name, err2.target), ('a', 'missing2'))

    def test_missing_imported_namespace(self):
        source = """<?xml version="1.0" encoding="UTF-8"?>
            <xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema" xmlns:o="urn:other">
              <xs:import namespace="urn:other" schemaLocation="other.xsd"/>
              <xs:element name="a" type="o:t"/>
            </xs:schema>"""

        compiler = self.get_compiler(source)
        graph = compiler.build()
        self.assertEqual(graph.missing_namespaces(), ['urn:other'])

        with self.assertLogs('xsdgen', level='DEBUG') as ctx:
            with self.assertRaises(UnresolvedReferenceError) as ec:
                compiler.resolve()

        self.assertEqual(ec.exception.target, '{urn:other}t')
        self.assertTrue(any("never supplied" in x for x in ctx.output))

    def test_unfrozen_graph(self):
        with self.assertRaises(XsdGenRuntimeError):
            resolve_references(SchemaGraph())

    def test_multiple_documents(self):
        references = self.resolve('orders.xsd', 'common.xsd')
        self.assertIn('{http://xsdgen.test/orders}order', references.element_types)


if __name__ == '__main__':
    from xsdgen.testing import run_xsdgen_tests
    run_xsdgen_tests()
