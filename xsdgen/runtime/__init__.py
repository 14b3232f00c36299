#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""
Runtime support package of the parsers generated by xsdgen.
"""
from xsdgen.tree import TreeNode
from .exceptions import ParseError, ValidationError, LexicalError
from .simple_types import SimpleType, BuiltinSimpleType, AtomicType, ListType, \
    UnionType, BUILTINS, encode_value
from .events import ParseContext, ElementStream, iter_events
from .content import Particle, Empty, Element, Wildcard, Sequence, Choice, All, GroupRef
from .values import FieldInfo, AttributeUse, AnyAttribute, TaggedValue, ANY_TYPE, \
    ComplexValue, ElementDecl, ElementDeclRef, TypeRef
from .registry import Registry
from .parser import Parser

__all__ = ['TreeNode', 'ParseError', 'ValidationError', 'LexicalError', 'SimpleType',
           'BuiltinSimpleType', 'AtomicType', 'ListType', 'UnionType', 'BUILTINS',
           'encode_value', 'ParseContext', 'ElementStream', 'iter_events',
           'Particle', 'Empty', 'Element', 'Wildcard', 'Sequence', 'Choice',
           'All', 'GroupRef', 'FieldInfo', 'AttributeUse', 'AnyAttribute',
           'TaggedValue', 'ANY_TYPE', 'ComplexValue', 'ElementDecl',
           'ElementDeclRef', 'TypeRef', 'Registry', 'Parser']
