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
"""Tests concerning the model builder and the schema graph."""
import os
import unittest

import xsdgen.names as nm
from xsdgen import load_document
from xsdgen.exceptions import XsdGenRuntimeError
from xsdgen.compiler import SchemaGraph, SchemaContribution, build_contribution, \
    IngestError, UnsupportedConstructError
from xsdgen.compiler.components import Choice, All, ElementRef, GroupRef, \
    Wildcard, ElementDecl, AttributeUse, GroupDef, AtomicType, ListType, UnionType, ComplexType
from xsdgen.compiler.graph import SchemaImport
from xsdgen.testing import XsdGenTestCase


class TestModelBuilder(XsdGenTestCase):

    TEST_CASES_DIR = os.path.join(os.path.dirname(__file__), '../test_cases/')

    def build_graph(self, *sources):
        return self.get_compiler(*sources).build()

    def test_global_declarations(self):
        graph = self.build_graph("""
            <xs:simpleType name="sku">
              <xs:restriction base="xs:string">
                <xs:pattern value="[A-Z]{3}-\\d+"/>
                <xs:maxLength value="12"/>
              </xs:restriction>
            </xs:simpleType>
            <xs:simpleType name="skuList">
              <xs:list itemType="sku"/>
            </xs:simpleType>
            <xs:simpleType name="size">
              <xs:union memberTypes="xs:int xs:token"/>
            </xs:simpleType>
            <xs:element name="item" type="sku" default="ABC-1"/>
            <xs:attribute name="lang" type="xs:language"/>""")

        self.assertEqual(graph.types['sku'], AtomicType(
            'sku', nm.XSD_STRING, (('pattern', '[A-Z]{3}-\\d+'), ('maxLength', '12'))
        ))
        self.assertEqual(graph.types['skuList'], ListType('skuList', 'sku'))
        self.assertEqual(graph.types['size'],
                         UnionType('size', (nm.XSD_INT, nm.XSD_TOKEN)))
        self.assertEqual(graph.elements['item'], ElementDecl('item', 'sku', default='ABC-1'))
        self.assertEqual(graph.attributes['lang'].type_name, nm.XSD_LANGUAGE)
        self.assertIn(nm.XSD_ANY_TYPE, graph.types)
        self.assertTrue(graph.frozen)

    def test_anonymous_type_names(self):
        graph = self.build_graph("""
            <xs:element name="person">
              <xs:complexType>
                <xs:sequence>
                  <xs:element name="address">
                    <xs:complexType>
                      <xs:sequence>
                        <xs:element name="city" type="xs:string"/>
                      </xs:sequence>
                    </xs:complexType>
                  </xs:element>
                  <xs:element name="age">
                    <xs:simpleType>
                      <xs:restriction base="xs:int">
                        <xs:minInclusive value="0"/>
                      </xs:restriction>
                    </xs:simpleType>
                  </xs:element>
                </xs:sequence>
              </xs:complexType>
            </xs:element>
            <xs:simpleType name="sizes">
              <xs:list>
                <xs:simpleType><xs:restriction base="xs:string"/></xs:simpleType>
              </xs:list>
            </xs:simpleType>""")

        self.assertEqual(graph.elements['person'].type_name, '~e.person')
        person_type = graph.types['~e.person']
        self.assertIsInstance(person_type, ComplexType)
        self.assertEqual(person_type.content.particles[0], ElementRef(
            'address', declaration=ElementDecl('address', '~e.person.address', is_global=False)
        ))
        self.assertIsInstance(graph.types['~e.person.address'], ComplexType)
        self.assertEqual(graph.types['~e.person.age'],
                         AtomicType('~e.person.age', nm.XSD_INT, (('minInclusive', '0'),)))
        self.assertEqual(graph.types['sizes'], ListType('sizes', '~t.sizes.item'))
        self.assertEqual(graph.types['~t.sizes.item'],
                         AtomicType('~t.sizes.item', nm.XSD_STRING))

    def test_repeated_anonymous_names(self):
        graph = self.build_graph("""
            <xs:complexType name="x">
              <xs:choice>
                <xs:element name="item">
                  <xs:simpleType><xs:restriction base="xs:string"/></xs:simpleType>
                </xs:element>
                <xs:element name="item">
                  <xs:simpleType><xs:restriction base="xs:int"/></xs:simpleType>
                </xs:element>
              </xs:choice>
            </xs:complexType>""")

        self.assertEqual(graph.types['~t.x.item'].base, nm.XSD_STRING)
        self.assertEqual(graph.types['~t.x.item.2'].base, nm.XSD_INT)

    def test_namespaced_anonymous_names(self):
        self.target_namespace = 'http://example.test/ns'
        graph = self.build_graph("""
            <xs:element name="root">
              <xs:complexType>
                <xs:attribute name="code">
                  <xs:simpleType><xs:restriction base="xs:token"/></xs:simpleType>
                </xs:attribute>
              </xs:complexType>
            </xs:element>""")

        self.assertEqual(graph.elements['{http://example.test/ns}root'].type_name,
                         '{http://example.test/ns}~e.root')
        self.assertIn('{http://example.test/ns}~e.root.code', graph.types)
        self.assertEqual(list(graph.namespaces), ['http://example.test/ns'])

    def test_particles(self):
        graph = self.build_graph("""
            <xs:group name="g">
              <xs:choice>
                <xs:element ref="head" minOccurs="0" maxOccurs="unbounded"/>
                <xs:any namespace="##other" processContents="lax"/>
              </xs:choice>
            </xs:group>
            <xs:element name="head" type="xs:string"/>
            <xs:complexType name="t">
              <xs:all minOccurs="0">
                <xs:element name="a" type="xs:int" nillable="true"/>
              </xs:all>
            </xs:complexType>
            <xs:complexType name="u">
              <xs:group ref="g" maxOccurs="3"/>
            </xs:complexType>""")

        self.assertEqual(graph.groups['g'].particle, Choice((
            ElementRef('head', 0, None),
            Wildcard('not', ('',), 'lax'),
        )))
        self.assertEqual(graph.types['t'].content, All(
            (ElementRef('a', declaration=ElementDecl('a', nm.XSD_INT, True, is_global=False)),),
            min_occurs=0
        ))
        self.assertEqual(graph.types['u'].content, GroupRef('g', 1, 3))

    def test_attribute_uses(self):
        graph = self.build_graph("""
            <xs:attributeGroup name="common">
              <xs:attribute ref="xml:lang"/>
              <xs:anyAttribute namespace="##local urn:extra" processContents="skip"/>
            </xs:attributeGroup>
            <xs:complexType name="t">
              <xs:attribute name="id" type="xs:ID" use="required"/>
              <xs:attribute name="version" type="xs:string" fixed="1.0"/>
              <xs:attributeGroup ref="common"/>
            </xs:complexType>""")

        type_def = graph.types['t']
        self.assertEqual(type_def.attributes, (
            AttributeUse('id', nm.XSD_ID, 'required'),
            AttributeUse('version', nm.XSD_STRING, fixed='1.0'),
        ))
        self.assertEqual(type_def.attribute_groups, ('common',))

        group = graph.attribute_groups['common']
        self.assertEqual(group.attributes, (AttributeUse(nm.XML_LANG, ref=True),))
        self.assertEqual(group.any_attribute, Wildcard('enumeration', ('', 'urn:extra'), 'skip'))

    def test_imports(self):
        graph = self.build_graph("""
            <xs:import namespace="urn:other" schemaLocation="other.xsd"/>
            <xs:element name="a"/>""")

        self.assertEqual(graph.imports, [SchemaImport('urn:other', 'other.xsd', None)])
        self.assertEqual(graph.missing_namespaces(), ['urn:other'])
        self.assertEqual(graph.elements['a'].type_name, nm.XSD_ANY_TYPE)

    def test_ingest_errors(self):
        err = self.check_compile_error('<xs:element name="a" minOccurs="0"/>', IngestError, 'a')
        self.assertIn("'minOccurs' is not allowed", str(err))

        self.check_compile_error("""
            <xs:complexType name="t">
              <xs:sequence><xs:element name="a" minOccurs="2"/></xs:sequence>
            </xs:complexType>""", IngestError)
        self.check_compile_error("""
            <xs:complexType name="t">
              <xs:sequence><xs:element name="a" maxOccurs="-1"/></xs:sequence>
            </xs:complexType>""", IngestError)
        self.check_compile_error(
            '<xs:simpleType><xs:restriction base="xs:string"/></xs:simpleType>', IngestError
        )
        self.check_compile_error(
            '<xs:element name="a" type="tns:b"/>', IngestError
        )
        self.check_compile_error(
            '<xs:element name="a" type="xs:string" default="x" fixed="y"/>', IngestError, 'a'
        )
        self.check_compile_error('<xs:foo name="a"/>', IngestError)
        self.check_compile_error('<foo xmlns="urn:foo"/>', IngestError)
        self.check_compile_error("""
            <xs:simpleType name="s">
              <xs:restriction base="xs:string"><xs:enumeration/></xs:restriction>
            </xs:simpleType>""", IngestError)

    def test_document_errors(self):
        err = self.check_compile_error('<?xml version="1.0"?>\n<root/>', IngestError)
        self.assertIn("is not an XSD schema", str(err))
        self.check_compile_error('<?xml version="1.0"?>\n<xs:schema', IngestError)

        err = self.check_compile_error('unknown.xsd', IngestError)
        self.assertEqual(err.url, self.casepath('unknown.xsd'))

    def test_error_location(self):
        err = self.check_compile_error("""
            <xs:element name="a"/>
            <xs:complexType name="t">
              <xs:sequence>
                <xs:element name="b"/>
                <xs:element name="c" form="both"/>
              </xs:sequence>
            </xs:complexType>""", IngestError)

        self.assertIsNone(err.url)
        self.assertEqual(err.path, '/xs:schema/xs:complexType[1]/xs:sequence[1]/xs:element[2]')
        self.assertIn("Path: /xs:schema/", str(err))

    def test_unsupported_constructs(self):
        err = self.check_compile_error(
            '<xs:redefine schemaLocation="persons.xsd"/>', UnsupportedConstructError
        )
        self.assertEqual(err.construct, 'xs:redefine')
        self.assertEqual(err.path, '/xs:schema/xs:redefine[1]')

        err = self.check_compile_error("""
            <xs:complexType name="t">
              <xs:sequence/>
              <xs:openContent/>
            </xs:complexType>""", UnsupportedConstructError)
        self.assertEqual(err.construct, 'xs:openContent')

    def test_skipped_constructs(self):
        source = self.get_schema_source("""
            <xs:notation name="gif" public="image/gif"/>
            <xs:element name="root">
              <xs:complexType>
                <xs:sequence><xs:element name="id" type="xs:ID"/></xs:sequence>
              </xs:complexType>
              <xs:key name="idKey">
                <xs:selector xpath="id"/>
                <xs:field xpath="."/>
              </xs:key>
            </xs:element>""")
        document = load_document(source)

        with self.assertLogs('xsdgen', level='WARNING') as ctx:
            contribution = build_contribution(document)
        self.assertEqual(len(ctx.output), 2)
        self.assertIn("'xs:notation'", ctx.output[0])
        self.assertIn("'xs:key'", ctx.output[1])
        self.assertEqual([x[0] for x in contribution.components],
                         ['type', 'element'])

        with self.assertRaises(UnsupportedConstructError) as ctx:
            build_contribution(document, strict=True)
        self.assertEqual(ctx.exception.construct, 'xs:notation')
        self.assertIn("skipping is disabled", str(ctx.exception))


class TestSchemaGraph(unittest.TestCase):

    def test_duplicate_declarations(self):
        graph = SchemaGraph()
        first = SchemaContribution('first.xsd')
        first.add('element', ElementDecl('a', nm.XSD_STRING, url='first.xsd'))
        graph.merge(first)

        second = SchemaContribution('second.xsd')
        second.add('element', ElementDecl('a', nm.XSD_INT, url='second.xsd'))
        with self.assertRaises(IngestError) as ctx:
            graph.merge(second)

        self.assertEqual(ctx.exception.name, 'a')
        self.assertEqual(ctx.exception.url, 'second.xsd')
        self.assertIn("duplicate element declaration 'a'", str(ctx.exception))
        self.assertIn("'first.xsd'", str(ctx.exception))

        # Same names are allowed for different kinds
        graph.add('type', AtomicType('a'))
        self.assertIn('a', graph.types)

    def test_builtin_redefinition(self):
        graph = SchemaGraph()
        with self.assertRaises(IngestError) as ctx:
            graph.add('type', AtomicType(nm.XSD_STRING))
        self.assertIn("redefinition of builtin type", str(ctx.exception))
        self.assertIn(repr(nm.XSD_STRING), str(ctx.exception))

    def test_frozen_graph(self):
        graph = SchemaGraph()
        graph.add('group', GroupDef('g'))
        graph.freeze()
        graph.freeze()

        with self.assertRaises(XsdGenRuntimeError):
            graph.add('element', ElementDecl('b'))
        with self.assertRaises(TypeError):
            graph.elements['b'] = ElementDecl('b')  # type: ignore[index]

        self.assertIsNotNone(graph.lookup('group', 'g'))
        self.assertIsNone(graph.lookup('element', 'b'))

    def test_graph_equality(self):
        graph1, graph2 = SchemaGraph(), SchemaGraph()
        graph1.add('element', ElementDecl('a', url='a.xsd', path='/xs:schema/xs:element[1]'))
        graph2.add('element', ElementDecl('a', url='b.xsd', path='/xs:schema/xs:element[3]'))
        self.assertEqual(graph1, graph2)

        graph2.add('element', ElementDecl('b'))
        self.assertNotEqual(graph1, graph2)
        self.assertNotEqual(graph1, None)

    def test_iter_components(self):
        graph = SchemaGraph()
        graph.add('element', ElementDecl('b'))
        graph.add('element', ElementDecl('a'))
        graph.add('type', AtomicType('t'))

        self.assertEqual([(k, c.name) for k, c in graph.iter_components()],
                         [('type', 't'), ('element', 'a'), ('element', 'b')])
        self.assertEqual(len(list(graph.iter_components('element'))), 2)


if __name__ == '__main__':
    from xsdgen.testing import run_xsdgen_tests
    run_xsdgen_tests()
