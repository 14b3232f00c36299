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
"""Tests concerning the normalization of content models."""
import logging
import os

from xsdgen import limits
from xsdgen.compiler import UnsupportedConstructError
from xsdgen.compiler.components import Sequence, Choice, All, ElementRef, \
    GroupRef, Wildcard, Empty
from xsdgen.compiler.normalizer import set_occurs
from xsdgen.testing import XsdGenTestCase

EXPRESSION_GROUP = """
<xs:group name="expr">
  <xs:choice>
    <xs:element name="num" type="xs:int"/>
    <xs:sequence>
      <xs:element name="open"/>
      <xs:group ref="expr"/>
      <xs:element name="close"/>
    </xs:sequence>
  </xs:choice>
</xs:group>"""


def particle_names(particle):
    return [getattr(p, 'name', None) for p in particle.particles]


class TestContentModelNormalizer(XsdGenTestCase):

    TEST_CASES_DIR = os.path.join(os.path.dirname(__file__), '../test_cases/')

    def normalize(self, *sources):
        compiler = self.get_compiler(*sources)
        compiler.build()
        compiler.resolve()
        return compiler.normalize()

    def test_set_occurs(self):
        elem = ElementRef('a')
        self.assertIs(set_occurs(elem, 1, 1), elem)
        self.assertEqual(set_occurs(elem, 0, None), ElementRef('a', 0, None))
        self.assertEqual(set_occurs(ElementRef('a', 2, 3), 0, 1),
                         Sequence((ElementRef('a', 2, 3),), 0, 1))

    def test_flattening(self):
        models = self.normalize("""
            <xs:complexType name="t">
              <xs:sequence>
                <xs:sequence>
                  <xs:element name="a"/>
                  <xs:element name="b"/>
                </xs:sequence>
                <xs:element name="c"/>
                <xs:sequence minOccurs="0">
                  <xs:element name="d"/>
                  <xs:element name="e"/>
                </xs:sequence>
              </xs:sequence>
            </xs:complexType>""")

        model = models.types['t']
        self.assertIsInstance(model, Sequence)
        self.assertListEqual(particle_names(model), ['a', 'b', 'c', None])
        self.assertIsInstance(model.particles[3], Sequence)
        self.assertEqual(model.particles[3].occurs, (0, 1))

    def test_single_child_groups(self):
        models = self.normalize("""
            <xs:complexType name="t1">
              <xs:sequence>
                <xs:element name="a" maxOccurs="unbounded"/>
              </xs:sequence>
            </xs:complexType>
            <xs:complexType name="t2">
              <xs:sequence minOccurs="0">
                <xs:element name="a"/>
              </xs:sequence>
            </xs:complexType>
            <xs:complexType name="t3">
              <xs:choice maxOccurs="2">
                <xs:any minOccurs="0"/>
              </xs:choice>
            </xs:complexType>""")

        self.assertEqual(models.types['t1'].name, 'a')
        self.assertEqual(models.types['t1'].occurs, (1, None))
        self.assertEqual(models.types['t2'].occurs, (0, 1))
        self.assertEqual(models.types['t3'], Sequence((Wildcard(min_occurs=0),), 1, 2))

    def test_empty_particles(self):
        models = self.normalize("""
            <xs:complexType name="empty"/>
            <xs:complexType name="t1">
              <xs:sequence>
                <xs:element name="a" minOccurs="0" maxOccurs="0"/>
                <xs:element name="b"/>
              </xs:sequence>
            </xs:complexType>
            <xs:complexType name="t2">
              <xs:choice>
                <xs:sequence/>
                <xs:element name="a"/>
                <xs:element name="b"/>
              </xs:choice>
            </xs:complexType>
            <xs:complexType name="t3">
              <xs:sequence>
                <xs:choice/>
              </xs:sequence>
            </xs:complexType>""")

        self.assertEqual(models.types['empty'], Empty())
        self.assertEqual(models.types['t1'].name, 'b')
        self.assertIsInstance(models.types['t2'], Choice)
        self.assertEqual(models.types['t2'].occurs, (0, 1))
        self.assertListEqual(particle_names(models.types['t2']), ['a', 'b'])
        self.assertEqual(models.types['t3'], Empty())

    def test_group_expansion(self):
        models = self.normalize("""
            <xs:group name="g">
              <xs:sequence>
                <xs:element name="a"/>
                <xs:element name="b"/>
              </xs:sequence>
            </xs:group>
            <xs:complexType name="t1">
              <xs:sequence>
                <xs:group ref="g"/>
                <xs:element name="c"/>
              </xs:sequence>
            </xs:complexType>
            <xs:complexType name="t2">
              <xs:group ref="g" minOccurs="0" maxOccurs="unbounded"/>
            </xs:complexType>""")

        self.assertListEqual(particle_names(models.types['t1']), ['a', 'b', 'c'])
        self.assertIsInstance(models.types['t2'], Sequence)
        self.assertEqual(models.types['t2'].occurs, (0, None))
        self.assertListEqual(particle_names(models.types['t2']), ['a', 'b'])
        self.assertEqual(models.groups, {})

    def test_recursive_groups(self):
        models = self.normalize(EXPRESSION_GROUP, """
            <xs:complexType name="t">
              <xs:sequence>
                <xs:group ref="expr"/>
              </xs:sequence>
            </xs:complexType>""")

        model = models.types['t']
        self.assertIsInstance(model, Choice)
        self.assertEqual(model.particles[0].name, 'num')
        self.assertEqual(model.particles[1].particles[1], GroupRef('expr'))

        self.assertListEqual(list(models.groups), ['expr'])
        self.assertIsInstance(models.groups['expr'], Choice)
        self.assertEqual(models.groups['expr'].particles[1].particles[1], GroupRef('expr'))

    def test_all_groups(self):
        models = self.normalize("""
            <xs:group name="ga">
              <xs:all>
                <xs:element name="x"/>
              </xs:all>
            </xs:group>
            <xs:complexType name="t">
              <xs:all>
                <xs:element name="y"/>
                <xs:group ref="ga"/>
              </xs:all>
            </xs:complexType>""")

        self.assertIsInstance(models.types['t'], All)
        self.assertListEqual(particle_names(models.types['t']), ['y', 'x'])

        err = self.check_compile_error("""
            <xs:group name="gs">
              <xs:sequence>
                <xs:element name="a"/>
                <xs:element name="b"/>
              </xs:sequence>
            </xs:group>
            <xs:complexType name="t">
              <xs:all>
                <xs:element name="y"/>
                <xs:group ref="gs"/>
              </xs:all>
            </xs:complexType>""", UnsupportedConstructError, 't')
        self.assertEqual(err.construct, 'xs:all')

    def test_max_model_depth(self):
        source = """
            <xs:complexType name="t">
              <xs:sequence>
                <xs:choice>
                  <xs:sequence>
                    <xs:choice>
                      <xs:sequence>
                        <xs:choice>
                          <xs:sequence>
                            <xs:element name="a"/>
                          </xs:sequence>
                        </xs:choice>
                      </xs:sequence>
                    </xs:choice>
                  </xs:sequence>
                </xs:choice>
              </xs:sequence>
            </xs:complexType>"""

        self.assertEqual(self.normalize(source).types['t'].name, 'a')
        try:
            limits.MAX_MODEL_DEPTH = 5
            err = self.check_compile_error(source, UnsupportedConstructError, 't')
            self.assertIn("exceeds the maximum depth 5", str(err))
        finally:
            limits.MAX_MODEL_DEPTH = 15

    def test_ambiguous_choice(self):
        with self.assertLogs('xsdgen', level='WARNING') as ctx:
            models = self.normalize("""
                <xs:element name="head" type="xs:string"/>
                <xs:element name="member" type="xs:string" substitutionGroup="head"/>
                <xs:complexType name="t">
                  <xs:choice>
                    <xs:element ref="head"/>
                    <xs:sequence>
                      <xs:element name="b" minOccurs="0"/>
                      <xs:element ref="member"/>
                    </xs:sequence>
                  </xs:choice>
                </xs:complexType>""")

        self.assertIsInstance(models.types['t'], Choice)
        self.assertEqual(len(ctx.output), 1)
        self.assertIn("ambiguous choice in 't'", ctx.output[0])
        self.assertIn("['member']", ctx.output[0])

    def test_unambiguous_choice(self):
        with self.assertLogs('xsdgen', level='DEBUG') as ctx:
            self.normalize("""
                <xs:complexType name="t">
                  <xs:choice maxOccurs="unbounded">
                    <xs:element name="a"/>
                    <xs:sequence>
                      <xs:element name="b"/>
                      <xs:element name="a"/>
                    </xs:sequence>
                  </xs:choice>
                </xs:complexType>""")

        self.assertListEqual([x for x in ctx.records if x.levelno >= logging.WARNING], [])


if __name__ == '__main__':
    from xsdgen.testing import run_xsdgen_tests
    run_xsdgen_tests()
