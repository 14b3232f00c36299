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
"""Tests concerning compiler settings, protection limits, logging and translation."""
import builtins
import logging
import os
import unittest

from xsdgen import limits, translation, CompilerSettings
from xsdgen.exceptions import XsdGenTypeError, XsdGenValueError, XsdGenAttributeError
from xsdgen.utils.logger import get_logging_level, set_logging_level, logged, LOG_LEVELS

logger = logging.getLogger('xsdgen')


class TestCompilerSettings(unittest.TestCase):

    def tearDown(self):
        CompilerSettings.reset_defaults()

    def test_default_settings(self):
        settings = CompilerSettings()
        self.assertEqual(settings.max_workers, 4)
        self.assertFalse(settings.strict)
        self.assertEqual(settings.module_name, 'xsdgen_parser')
        self.assertIsNone(settings.searchpath)
        self.assertIsNone(settings.loglevel)

    def test_get_settings(self):
        settings = CompilerSettings.get_settings(strict=True, max_workers=1)
        self.assertTrue(settings.strict)
        self.assertEqual(settings.max_workers, 1)
        self.assertEqual(settings.module_name, 'xsdgen_parser')

        other = CompilerSettings.get_settings(settings=settings, module_name='orders')
        self.assertTrue(other.strict)
        self.assertEqual(other.module_name, 'orders')

        with self.assertRaises(XsdGenTypeError):
            CompilerSettings.get_settings(settings={'strict': True})
        with self.assertRaises(TypeError):
            CompilerSettings.get_settings(unknown=True)

    def test_update_defaults(self):
        CompilerSettings.update_defaults(max_workers=2)
        self.assertEqual(CompilerSettings.get_settings().max_workers, 2)
        self.assertEqual(CompilerSettings.get_settings(strict=True).max_workers, 2)

        CompilerSettings.reset_defaults()
        self.assertEqual(CompilerSettings.get_settings().max_workers, 4)

    def test_settings_validation(self):
        with self.assertRaises(XsdGenTypeError):
            CompilerSettings(max_workers='4')
        with self.assertRaises(XsdGenValueError):
            CompilerSettings(max_workers=0)
        with self.assertRaises(XsdGenTypeError):
            CompilerSettings(strict=1)
        with self.assertRaises(XsdGenTypeError):
            CompilerSettings(module_name=None)
        with self.assertRaises(XsdGenTypeError):
            CompilerSettings(searchpath=10)
        with self.assertRaises(XsdGenValueError):
            CompilerSettings(searchpath=__file__)
        with self.assertRaises(XsdGenValueError):
            CompilerSettings(loglevel='VERBOSE')
        with self.assertRaises(XsdGenTypeError):
            CompilerSettings(loglevel=True)

        dirname = os.path.dirname(__file__)
        self.assertEqual(CompilerSettings(searchpath=dirname).searchpath, dirname)
        self.assertEqual(CompilerSettings(loglevel='debug').loglevel, 'debug')
        self.assertEqual(CompilerSettings(loglevel=logging.INFO).loglevel, logging.INFO)

    def test_settings_are_read_only(self):
        settings = CompilerSettings()
        with self.assertRaises(XsdGenAttributeError):
            settings.strict = True
        with self.assertRaises(XsdGenAttributeError):
            del settings.max_workers
        self.assertFalse(settings.strict)


class TestLimits(unittest.TestCase):

    def test_max_model_depth(self):
        from xsdgen.compiler import normalizer

        self.assertEqual(limits.MAX_MODEL_DEPTH, 15)
        try:
            limits.MAX_MODEL_DEPTH = 8
            self.assertEqual(normalizer._MAX_MODEL_DEPTH, 8)
            with self.assertRaises(XsdGenValueError):
                limits.MAX_MODEL_DEPTH = 4
            with self.assertRaises(XsdGenTypeError):
                limits.MAX_MODEL_DEPTH = '20'
            self.assertEqual(limits.MAX_MODEL_DEPTH, 8)
        finally:
            limits.MAX_MODEL_DEPTH = 15
        self.assertEqual(normalizer._MAX_MODEL_DEPTH, 15)

    def test_max_xml_depth(self):
        from xsdgen.runtime import content

        self.assertEqual(limits.MAX_XML_DEPTH, 100)
        try:
            limits.MAX_XML_DEPTH = 1
            self.assertEqual(content._MAX_XML_DEPTH, 1)
            with self.assertRaises(XsdGenValueError):
                limits.MAX_XML_DEPTH = 0
            with self.assertRaises(XsdGenTypeError):
                limits.MAX_XML_DEPTH = 10.0
        finally:
            limits.MAX_XML_DEPTH = 100
        self.assertEqual(content._MAX_XML_DEPTH, 100)


class TestLoggingHelpers(unittest.TestCase):

    def setUp(self):
        self.levels = logger.level, logging.getLogger('xsdgen-codegen').level

    def tearDown(self):
        logger.setLevel(self.levels[0])
        logging.getLogger('xsdgen-codegen').setLevel(self.levels[1])

    def test_set_logging_level(self):
        set_logging_level('debug')
        self.assertEqual(logger.level, logging.DEBUG)
        set_logging_level(' Warning ')
        self.assertEqual(logger.level, logging.WARNING)
        set_logging_level(logging.ERROR)
        self.assertEqual(logger.level, logging.ERROR)

        with self.assertRaises(XsdGenValueError):
            set_logging_level('verbose')
        self.assertIn('CRITICAL', LOG_LEVELS)

    def test_logged_decorator(self):
        @logged
        def get_level(**kwargs):
            return logger.level

        logger.setLevel(logging.WARNING)
        self.assertEqual(get_level(), logging.WARNING)
        self.assertEqual(get_level(loglevel='DEBUG'), logging.DEBUG)
        self.assertEqual(get_level(loglevel=logging.INFO), logging.INFO)
        self.assertEqual(logger.level, logging.WARNING)

        with self.assertRaises(XsdGenValueError):
            get_level(loglevel='unknown')
        self.assertEqual(logger.level, logging.WARNING)

    def test_codegen_logger_level(self):
        codegen_logger = logging.getLogger('xsdgen-codegen')
        level = codegen_logger.level
        try:
            codegen_logger.setLevel(logging.WARNING)

            @logged
            def get_levels(**kwargs):
                return logger.level, codegen_logger.level

            self.assertEqual(get_levels(loglevel='INFO'), (logging.INFO, logging.INFO))
            self.assertEqual(codegen_logger.level, logging.WARNING)

            self.assertEqual(get_logging_level('error'), logging.ERROR)
            self.assertEqual(get_logging_level(logging.DEBUG), logging.DEBUG)
            with self.assertRaises(XsdGenValueError):
                get_logging_level(None)
        finally:
            codegen_logger.setLevel(level)


class TestTranslation(unittest.TestCase):

    def tearDown(self):
        translation.deactivate()

    def test_untranslated_messages(self):
        self.assertEqual(translation.gettext("no schema documents to compile"),
                         "no schema documents to compile")

    def test_activate_with_fallback(self):
        translation.activate(languages=['it'])
        self.assertEqual(translation.gettext("no schema documents to compile"),
                         "no schema documents to compile")

        translation.activate(languages=['it'], install=True)
        self.assertIn('_', builtins.__dict__)
        translation.deactivate()
        self.assertNotIn('_', builtins.__dict__)

    def test_activate_without_fallback(self):
        with self.assertRaises(OSError):
            translation.activate(localedir=os.path.dirname(__file__),
                                 languages=['it'], fallback=False)


if __name__ == '__main__':
    from xsdgen.testing import run_xsdgen_tests
    run_xsdgen_tests()
