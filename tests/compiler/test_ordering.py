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
"""Tests concerning the dependency ordering of types."""
import os

from xsdgen.testing import XsdGenTestCase


class TestDependencyOrdering(XsdGenTestCase):

    TEST_CASES_DIR = os.path.join(os.path.dirname(__file__), '../test_cases/')

    def get_ordering(self, *sources):
        compiler = self.get_compiler(*sources)
        compiler.build()
        compiler.resolve()
        compiler.normalize()
        return compiler.order()

    def test_dependency_order(self):
        ordering = self.get_ordering("""
            <xs:complexType name="order">
              <xs:sequence>
                <xs:element name="item" type="item" maxOccurs="unbounded"/>
              </xs:sequence>
            </xs:complexType>
            <xs:complexType name="item">
              <xs:sequence>
                <xs:element name="sku" type="sku"/>
              </xs:sequence>
              <xs:attribute name="qty" type="qtyType"/>
            </xs:complexType>
            <xs:simpleType name="sku">
              <xs:restriction base="xs:string"/>
            </xs:simpleType>
            <xs:simpleType name="qtyType">
              <xs:restriction base="xs:int"/>
            </xs:simpleType>""")

        self.assertEqual(ordering.order, ('qtyType', 'sku', 'item', 'order'))
        self.assertEqual(ordering.components,
                         (('qtyType',), ('sku',), ('item',), ('order',)))
        self.assertEqual(ordering.recursive, frozenset())
        self.assertFalse(ordering.is_recursive('item'))

    def test_simple_type_dependencies(self):
        ordering = self.get_ordering("""
            <xs:simpleType name="a">
              <xs:list itemType="c"/>
            </xs:simpleType>
            <xs:simpleType name="b">
              <xs:union memberTypes="a c xs:int"/>
            </xs:simpleType>
            <xs:simpleType name="c">
              <xs:restriction base="xs:token"/>
            </xs:simpleType>""")

        self.assertEqual(ordering.order, ('c', 'a', 'b'))
        self.assertEqual(ordering.recursive, frozenset())

    def test_recursive_types(self):
        ordering = self.get_ordering("""
            <xs:complexType name="node">
              <xs:sequence>
                <xs:element name="child" type="node" minOccurs="0" maxOccurs="unbounded"/>
              </xs:sequence>
            </xs:complexType>
            <xs:complexType name="a">
              <xs:sequence>
                <xs:element name="b" type="b" minOccurs="0"/>
              </xs:sequence>
            </xs:complexType>
            <xs:complexType name="b">
              <xs:sequence>
                <xs:element name="a" type="a" minOccurs="0"/>
                <xs:element name="leaf" type="leaf"/>
              </xs:sequence>
            </xs:complexType>
            <xs:complexType name="leaf"/>""")

        self.assertEqual(ordering.components, (('leaf',), ('a', 'b'), ('node',)))
        self.assertEqual(ordering.order, ('leaf', 'a', 'b', 'node'))
        self.assertEqual(ordering.recursive, frozenset(('a', 'b', 'node')))
        self.assertTrue(ordering.is_recursive('node'))
        self.assertFalse(ordering.is_recursive('leaf'))

    def test_substitution_dependencies(self):
        ordering = self.get_ordering("""
            <xs:element name="shape" type="shapeType"/>
            <xs:element name="circle" type="circleType" substitutionGroup="shape"/>
            <xs:complexType name="shapeType"/>
            <xs:complexType name="circleType">
              <xs:complexContent>
                <xs:extension base="shapeType">
                  <xs:attribute name="radius" type="xs:decimal"/>
                </xs:extension>
              </xs:complexContent>
            </xs:complexType>
            <xs:complexType name="drawing">
              <xs:sequence>
                <xs:element ref="shape" maxOccurs="unbounded"/>
              </xs:sequence>
            </xs:complexType>""")

        order = ordering.order
        self.assertLess(order.index('circleType'), order.index('drawing'))
        self.assertLess(order.index('shapeType'), order.index('drawing'))

    def test_recursive_groups(self):
        ordering = self.get_ordering("""
            <xs:group name="expr">
              <xs:choice>
                <xs:element name="num" type="numType"/>
                <xs:sequence>
                  <xs:element name="open"/>
                  <xs:group ref="expr"/>
                  <xs:element name="close"/>
                </xs:sequence>
              </xs:choice>
            </xs:group>
            <xs:simpleType name="numType">
              <xs:restriction base="xs:int"/>
            </xs:simpleType>
            <xs:complexType name="t">
              <xs:group ref="expr"/>
            </xs:complexType>""")

        self.assertEqual(ordering.order, ('numType', 't'))
        self.assertFalse(ordering.is_recursive('t'))

    def test_long_reference_chains(self):
        template = """
            <xs:complexType name="t{0}">
              <xs:sequence>
                <xs:element name="child" type="t{1}" minOccurs="0"/>
              </xs:sequence>
            </xs:complexType>"""
        size = 1200
        chain = ''.join(template.format(k, k + 1) for k in range(size - 1))

        ordering = self.get_ordering(chain + '<xs:complexType name="t%d"/>' % (size - 1))
        self.assertEqual(ordering.order, tuple('t%d' % k for k in reversed(range(size))))
        self.assertEqual(len(ordering.components), size)
        self.assertEqual(ordering.recursive, frozenset())

        ordering = self.get_ordering(chain + template.format(size - 1, 0))
        self.assertEqual(len(ordering.components), 1)
        self.assertEqual(ordering.components[0], tuple(sorted('t%d' % k for k in range(size))))
        self.assertTrue(ordering.is_recursive('t0'))
        self.assertTrue(ordering.is_recursive('t%d' % (size - 1)))

    def test_schema_documents(self):
        ordering = self.get_ordering('persons.xsd')
        self.assertEqual(ordering.order, ('personType',))
        self.assertTrue(ordering.is_recursive('personType'))

        ordering = self.get_ordering('orders.xsd', 'common.xsd')
        order = ordering.order
        self.assertLess(order.index('{http://xsdgen.test/common}priceType'),
                        order.index('{http://xsdgen.test/orders}itemType'))
        self.assertEqual(ordering.recursive, frozenset())


if __name__ == '__main__':
    from xsdgen.testing import run_xsdgen_tests
    run_xsdgen_tests()
