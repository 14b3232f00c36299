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
This module contains the simple types used by generated parsers for decoding
text into Python values. Builtin types are created from a table of definitions,
derived types are restrictions (facets), lists and unions of other simple types.
"""
import base64
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from decimal import Decimal, DecimalException
from math import isinf, isnan
from typing import Any, Optional, Pattern, Union

from elementpath import datatypes
from elementpath.regex import translate_pattern

import xsdgen.names as nm
from xsdgen.exceptions import XsdGenValueError
from xsdgen.translation import gettext as _
from .exceptions import LexicalError

NsmapType = dict[str, str]


def compile_pattern(pattern: str) -> Pattern[str]:
    """Translates an XSD regular expression to a compiled Python regex."""
    return re.compile(translate_pattern(
        pattern, back_references=False, lazy_quantifiers=False, anchors=False
    ))


def count_digits(number: Union[Decimal, int, str]) -> tuple[int, int]:
    """
    Counts the digits of a number, returning a couple with the number of digits
    of the integer part and the number of digits of the decimal part.
    """
    number = str(Decimal(number) if isinstance(number, str) else number).lstrip('-+')
    if 'E' in number or 'e' in number:
        significand, _sep, exponent = number.upper().partition('E')
        significand = significand.strip('0')
        num_digits = len(significand) - 1 if '.' in significand else len(significand)
        if int(exponent) > 0:
            return num_digits + int(exponent), 0
        return 0, num_digits - int(exponent)
    elif '.' not in number:
        return len(number.lstrip('0')), 0
    integer_part, _sep, decimal_part = number.partition('.')
    return len(integer_part.lstrip('0')), len(decimal_part.rstrip('0'))


#
# Decoding and encoding functions

def boolean_to_python(value: str) -> bool:
    if value in ('true', '1'):
        return True
    elif value in ('false', '0'):
        return False
    raise ValueError(_('{!r} is not a boolean value').format(value))


def python_to_float(value: float) -> str:
    if isnan(value):
        return "NaN"
    elif value == float("inf"):
        return "INF"
    elif value == float("-inf"):
        return "-INF"
    return str(value)


def encode_value(value: Any) -> str:
    """Returns the lexical representation of a decoded simple value."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    elif isinstance(value, float):
        return python_to_float(value)
    elif isinstance(value, datatypes.QName):
        return value.qname
    elif isinstance(value, (list, tuple)):
        return ' '.join(encode_value(x) for x in value)
    return str(value)


def get_length(value: Any) -> int:
    if isinstance(value, datatypes.HexBinary):
        return len(value.value) // 2
    elif isinstance(value, datatypes.Base64Binary):
        return len(base64.b64decode(value.value))
    return len(value)


class SimpleType(ABC):
    """
    Base class for the simple types of generated parsers.

    :param name: the qualified name of the type, `None` for anonymous types.
    """
    white_space = 'preserve'
    namespace_aware = False

    def __init__(self, name: Optional[str] = None) -> None:
        self.name = name

    def __repr__(self) -> str:
        return '%s(name=%r)' % (self.__class__.__name__, self.name)

    def normalize(self, text: str) -> str:
        if self.white_space == 'replace':
            return re.sub(r'[\t\n\r]', ' ', text)
        elif self.white_space == 'collapse':
            return ' '.join(text.split())
        return text

    @abstractmethod
    def decode(self, text: str, nsmap: Optional[NsmapType] = None) -> Any:
        """Decodes a text into a Python value, raising a `LexicalError` if it's invalid."""

    def encode(self, value: Any) -> str:
        return encode_value(value)

    def is_valid(self, text: str, nsmap: Optional[NsmapType] = None) -> bool:
        try:
            self.decode(text, nsmap)
        except LexicalError:
            return False
        else:
            return True


class BuiltinSimpleType(SimpleType):
    """
    An XSD builtin atomic type.

    :param name: the qualified name of the builtin.
    :param to_python: the decoding function.
    :param white_space: the whiteSpace normalization of the type.
    :param pattern: an optional XSD pattern for the normalized text.
    :param min_value: an optional inclusive lower bound for the decoded value.
    :param max_value: an optional inclusive upper bound for the decoded value.
    """
    def __init__(self, name: str,
                 to_python: Callable[..., Any] = str,
                 white_space: str = 'collapse',
                 pattern: Optional[str] = None,
                 min_value: Optional[int] = None,
                 max_value: Optional[int] = None,
                 namespace_aware: bool = False) -> None:
        super().__init__(name)
        self.to_python = to_python
        self.white_space = white_space
        self.pattern = compile_pattern(pattern) if pattern is not None else None
        self.min_value = min_value
        self.max_value = max_value
        self.namespace_aware = namespace_aware

    def decode(self, text: str, nsmap: Optional[NsmapType] = None) -> Any:
        text = self.normalize(text)
        if self.pattern is not None and self.pattern.fullmatch(text) is None:
            raise LexicalError(text, self.name, _("value doesn't match the lexical space"))

        try:
            if self.namespace_aware:
                value = self.to_python(text, nsmap or {})
            else:
                value = self.to_python(text)
        except (ValueError, TypeError, ArithmeticError) as err:
            raise LexicalError(text, self.name, str(err)) from None

        if self.min_value is not None and value < self.min_value:
            reason = _("value must be greater or equal than {}").format(self.min_value)
            raise LexicalError(text, self.name, reason)
        elif self.max_value is not None and value > self.max_value:
            reason = _("value must be lesser or equal than {}").format(self.max_value)
            raise LexicalError(text, self.name, reason)
        return value


def qname_to_python(text: str, nsmap: NsmapType) -> datatypes.QName:
    prefix, _sep, local = text.rpartition(':')
    if prefix == 'xml':
        uri = nm.XML_NAMESPACE
    else:
        try:
            uri = nsmap[prefix]
        except KeyError:
            if prefix:
                raise ValueError(_('unmapped prefix {!r}').format(prefix)) from None
            uri = ''
    return datatypes.QName(uri, text)


def decimal_to_python(text: str) -> Decimal:
    try:
        value = Decimal(text)
    except DecimalException:
        raise ValueError(_('{!r} is not a decimal value').format(text)) from None
    if isinf(value) or isnan(value):
        raise ValueError(_('{!r} is not a decimal value').format(text))
    return value


NCNAME_PATTERN = r'[\i-[:]][\c-[:]]*'
INTEGER_PATTERN = r'[+\-]?[0-9]+'
FLOAT_PATTERN = r'(\+|-)?([0-9]+(\.[0-9]*)?|\.[0-9]+)([Ee](\+|-)?[0-9]+)?|INF|-INF|NaN'

XSD_BUILTIN_TYPES: tuple[dict[str, Any], ...] = (
    # --- Primitive types ---
    {'name': nm.XSD_ANY_SIMPLE_TYPE, 'white_space': 'preserve'},
    {'name': nm.XSD_ANY_ATOMIC_TYPE, 'white_space': 'preserve'},
    {'name': nm.XSD_STRING, 'white_space': 'preserve'},
    {
        'name': nm.XSD_DECIMAL,
        'to_python': decimal_to_python,
        'pattern': r'[+\-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)',
    },
    {
        'name': nm.XSD_BOOLEAN,
        'to_python': boolean_to_python,
    },
    {'name': nm.XSD_FLOAT, 'to_python': float, 'pattern': FLOAT_PATTERN},
    {'name': nm.XSD_DOUBLE, 'to_python': float, 'pattern': FLOAT_PATTERN},
    {'name': nm.XSD_DURATION, 'to_python': datatypes.Duration.fromstring},
    {'name': nm.XSD_DATETIME, 'to_python': datatypes.DateTime10.fromstring},
    {'name': nm.XSD_DATE, 'to_python': datatypes.Date10.fromstring},
    {'name': nm.XSD_TIME, 'to_python': datatypes.Time.fromstring},
    {'name': nm.XSD_GYEAR_MONTH, 'to_python': datatypes.GregorianYearMonth10.fromstring},
    {'name': nm.XSD_GYEAR, 'to_python': datatypes.GregorianYear10.fromstring},
    {'name': nm.XSD_GMONTH_DAY, 'to_python': datatypes.GregorianMonthDay.fromstring},
    {'name': nm.XSD_GDAY, 'to_python': datatypes.GregorianDay.fromstring},
    {'name': nm.XSD_GMONTH, 'to_python': datatypes.GregorianMonth.fromstring},
    {'name': nm.XSD_HEX_BINARY, 'to_python': datatypes.HexBinary},
    {'name': nm.XSD_BASE64_BINARY, 'to_python': datatypes.Base64Binary},
    {'name': nm.XSD_ANY_URI},
    {
        'name': nm.XSD_QNAME,
        'to_python': qname_to_python,
        'pattern': rf'({NCNAME_PATTERN}:)?{NCNAME_PATTERN}',
        'namespace_aware': True,
    },
    {
        'name': nm.XSD_NOTATION_TYPE,
        'to_python': qname_to_python,
        'pattern': rf'({NCNAME_PATTERN}:)?{NCNAME_PATTERN}',
        'namespace_aware': True,
    },

    # --- String derived types ---
    {'name': nm.XSD_NORMALIZED_STRING, 'white_space': 'replace'},
    {'name': nm.XSD_TOKEN},
    {'name': nm.XSD_LANGUAGE, 'pattern': r'[a-zA-Z]{1,8}(-[a-zA-Z0-9]{1,8})*'},
    {'name': nm.XSD_NAME, 'pattern': r'\i\c*'},
    {'name': nm.XSD_NCNAME, 'pattern': NCNAME_PATTERN},
    {'name': nm.XSD_ID, 'pattern': NCNAME_PATTERN},
    {'name': nm.XSD_IDREF, 'pattern': NCNAME_PATTERN},
    {'name': nm.XSD_ENTITY, 'pattern': NCNAME_PATTERN},
    {'name': nm.XSD_NMTOKEN, 'pattern': r'\c+'},

    # --- Numerical derived types ---
    {'name': nm.XSD_INTEGER, 'to_python': int, 'pattern': INTEGER_PATTERN},
    {
        'name': nm.XSD_LONG, 'to_python': int, 'pattern': INTEGER_PATTERN,
        'min_value': -2**63, 'max_value': 2**63 - 1,
    },
    {
        'name': nm.XSD_INT, 'to_python': int, 'pattern': INTEGER_PATTERN,
        'min_value': -2**31, 'max_value': 2**31 - 1,
    },
    {
        'name': nm.XSD_SHORT, 'to_python': int, 'pattern': INTEGER_PATTERN,
        'min_value': -2**15, 'max_value': 2**15 - 1,
    },
    {
        'name': nm.XSD_BYTE, 'to_python': int, 'pattern': INTEGER_PATTERN,
        'min_value': -2**7, 'max_value': 2**7 - 1,
    },
    {
        'name': nm.XSD_NON_NEGATIVE_INTEGER, 'to_python': int,
        'pattern': INTEGER_PATTERN, 'min_value': 0,
    },
    {
        'name': nm.XSD_POSITIVE_INTEGER, 'to_python': int,
        'pattern': INTEGER_PATTERN, 'min_value': 1,
    },
    {
        'name': nm.XSD_UNSIGNED_LONG, 'to_python': int, 'pattern': INTEGER_PATTERN,
        'min_value': 0, 'max_value': 2**64 - 1,
    },
    {
        'name': nm.XSD_UNSIGNED_INT, 'to_python': int, 'pattern': INTEGER_PATTERN,
        'min_value': 0, 'max_value': 2**32 - 1,
    },
    {
        'name': nm.XSD_UNSIGNED_SHORT, 'to_python': int, 'pattern': INTEGER_PATTERN,
        'min_value': 0, 'max_value': 2**16 - 1,
    },
    {
        'name': nm.XSD_UNSIGNED_BYTE, 'to_python': int, 'pattern': INTEGER_PATTERN,
        'min_value': 0, 'max_value': 2**8 - 1,
    },
    {
        'name': nm.XSD_NON_POSITIVE_INTEGER, 'to_python': int,
        'pattern': INTEGER_PATTERN, 'max_value': 0,
    },
    {
        'name': nm.XSD_NEGATIVE_INTEGER, 'to_python': int,
        'pattern': INTEGER_PATTERN, 'max_value': -1,
    },
)


class AtomicType(SimpleType):
    """
    A restriction of another simple type.

    :param name: the qualified name of the type, `None` for anonymous types.
    :param base: the base simple type.
    :param facets: a map from facet names to values. The values of \
    'pattern' and 'enumeration' facets are lists.
    """
    def __init__(self, name: Optional[str],
                 base: SimpleType,
                 facets: Optional[dict[str, Any]] = None) -> None:
        super().__init__(name)
        self.base = base
        self.facets = facets or {}
        self.white_space = self.facets.get('whiteSpace', base.white_space)
        self.namespace_aware = base.namespace_aware
        self.patterns = [compile_pattern(x) for x in self.facets.get('pattern', ())]
        self._enumeration: Optional[list[Any]] = None
        self._bounds: dict[str, Any] = {}

    def __repr__(self) -> str:
        return '%s(name=%r, base=%r)' % (self.__class__.__name__, self.name, self.base)

    def _decode_facet_values(self, values: Iterable[str],
                             nsmap: Optional[NsmapType]) -> list[Any]:
        result = []
        for value in values:
            try:
                result.append(self.base.decode(value, nsmap))
            except LexicalError:
                result.append(value)
        return result

    def get_enumeration(self, nsmap: Optional[NsmapType] = None) -> Optional[list[Any]]:
        if 'enumeration' not in self.facets:
            return None
        elif self.namespace_aware:
            return self._decode_facet_values(self.facets['enumeration'], nsmap)
        elif self._enumeration is None:
            self._enumeration = self._decode_facet_values(self.facets['enumeration'], None)
        return self._enumeration

    def get_bound(self, facet: str) -> Any:
        try:
            return self._bounds[facet]
        except KeyError:
            value = self._bounds[facet] = self.base.decode(self.facets[facet])
            return value

    def decode(self, text: str, nsmap: Optional[NsmapType] = None) -> Any:
        text = self.normalize(text)
        if self.patterns and not any(p.fullmatch(text) for p in self.patterns):
            reason = _("value doesn't match any pattern of {!r}").format(
                self.facets['pattern']
            )
            raise LexicalError(text, self.name, reason)

        try:
            value = self.base.decode(text, nsmap)
        except LexicalError as err:
            raise LexicalError(text, self.name, err.reason) from None

        enumeration = self.get_enumeration(nsmap)
        if enumeration is not None and value not in enumeration and text not in enumeration:
            reason = _("value must be one of {!r}").format(self.facets['enumeration'])
            raise LexicalError(text, self.name, reason)

        self.check_facets(text, value)
        return value

    def check_facets(self, text: str, value: Any) -> None:
        facets = self.facets
        try:
            if 'length' in facets and not isinstance(value, datatypes.QName):
                if get_length(value) != int(facets['length']):
                    reason = _("length has to be {!r}").format(int(facets['length']))
                    raise LexicalError(text, self.name, reason)
            if 'minLength' in facets and not isinstance(value, datatypes.QName):
                if get_length(value) < int(facets['minLength']):
                    reason = _("length cannot be lesser than {!r}").format(
                        int(facets['minLength'])
                    )
                    raise LexicalError(text, self.name, reason)
            if 'maxLength' in facets and not isinstance(value, datatypes.QName):
                if get_length(value) > int(facets['maxLength']):
                    reason = _("length cannot be greater than {!r}").format(
                        int(facets['maxLength'])
                    )
                    raise LexicalError(text, self.name, reason)

            if 'minInclusive' in facets and value < self.get_bound('minInclusive'):
                reason = _("value has to be greater or equal than {!r}")
                raise LexicalError(text, self.name, reason.format(facets['minInclusive']))
            if 'minExclusive' in facets and value <= self.get_bound('minExclusive'):
                reason = _("value has to be greater than {!r}")
                raise LexicalError(text, self.name, reason.format(facets['minExclusive']))
            if 'maxInclusive' in facets and value > self.get_bound('maxInclusive'):
                reason = _("value has to be lesser or equal than {!r}")
                raise LexicalError(text, self.name, reason.format(facets['maxInclusive']))
            if 'maxExclusive' in facets and value >= self.get_bound('maxExclusive'):
                reason = _("value has to be lesser than {!r}")
                raise LexicalError(text, self.name, reason.format(facets['maxExclusive']))

            if 'totalDigits' in facets and sum(count_digits(value)) > int(facets['totalDigits']):
                reason = _("the number of digits has to be lesser or equal than {!r}")
                raise LexicalError(text, self.name, reason.format(int(facets['totalDigits'])))
            if 'fractionDigits' in facets and \
                    count_digits(value)[1] > int(facets['fractionDigits']):
                reason = _("the number of fraction digits has to be lesser or equal than {!r}")
                raise LexicalError(text, self.name, reason.format(int(facets['fractionDigits'])))
        except (TypeError, ValueError, ArithmeticError) as err:
            if isinstance(err, LexicalError):
                raise
            raise LexicalError(text, self.name, str(err)) from None

    def encode(self, value: Any) -> str:
        return self.base.encode(value)


class ListType(SimpleType):
    """A whitespace-separated list of items of a simple type."""
    white_space = 'collapse'

    def __init__(self, name: Optional[str], item_type: SimpleType) -> None:
        super().__init__(name)
        self.item_type = item_type
        self.namespace_aware = item_type.namespace_aware

    def __repr__(self) -> str:
        return '%s(name=%r, item_type=%r)' % (
            self.__class__.__name__, self.name, self.item_type
        )

    def decode(self, text: str, nsmap: Optional[NsmapType] = None) -> list[Any]:
        items = []
        for item in text.split():
            try:
                items.append(self.item_type.decode(item, nsmap))
            except LexicalError as err:
                reason = _("invalid list item {!r}: {}").format(item, err.reason)
                raise LexicalError(text, self.name, reason) from None
        return items

    def encode(self, value: Any) -> str:
        return ' '.join(self.item_type.encode(x) for x in value)


class UnionType(SimpleType):
    """A union of simple types. The first member type that decodes the text wins."""

    def __init__(self, name: Optional[str], member_types: Iterable[SimpleType]) -> None:
        super().__init__(name)
        self.member_types = list(member_types)
        if not self.member_types:
            raise XsdGenValueError(_("a union type requires at least a member type"))
        self.namespace_aware = any(x.namespace_aware for x in self.member_types)

    def __repr__(self) -> str:
        return '%s(name=%r)' % (self.__class__.__name__, self.name)

    def decode(self, text: str, nsmap: Optional[NsmapType] = None) -> Any:
        for member_type in self.member_types:
            try:
                return member_type.decode(text, nsmap)
            except LexicalError:
                continue
        raise LexicalError(text, self.name, _("no member type matches the value"))


def create_builtin_types() -> dict[str, SimpleType]:
    builtins: dict[str, SimpleType] = {
        item['name']: BuiltinSimpleType(**item) for item in XSD_BUILTIN_TYPES
    }
    builtins[nm.XSD_NMTOKENS] = ListType(nm.XSD_NMTOKENS, builtins[nm.XSD_NMTOKEN])
    builtins[nm.XSD_IDREFS] = ListType(nm.XSD_IDREFS, builtins[nm.XSD_IDREF])
    builtins[nm.XSD_ENTITIES] = ListType(nm.XSD_ENTITIES, builtins[nm.XSD_ENTITY])
    return builtins


BUILTINS = create_builtin_types()
"""The builtin simple types, by qualified name."""
