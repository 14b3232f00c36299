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
This module contains the exceptions raised by generated parsers.
"""
from typing import Any, Optional

from xsdgen.exceptions import XsdGenValueError
from xsdgen.translation import gettext as _


def obj_repr(obj: Any) -> str:
    if isinstance(obj, str):
        value = repr(obj.encode('ascii', 'xmlcharrefreplace').decode('utf-8'))
    else:
        value = repr(obj)
    return value if len(value) <= 200 else f"{type(obj)} instance"


class ParseError(XsdGenValueError):
    """
    Base class for errors of generated parsers on not conforming instances.

    :param message: the error message.
    :param reason: the detailed reason of the error.
    :param path: the path of the element where the error occurred.
    :param position: the position of the element in the document order, \
    starting from 1 for the root element.
    """
    def __init__(self, message: str,
                 reason: Optional[str] = None,
                 path: Optional[str] = None,
                 position: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.reason = reason
        self.path = path
        self.position = position

    def __repr__(self) -> str:
        return '%s(reason=%r)' % (self.__class__.__name__, self.reason)

    def __str__(self) -> str:
        chunks = ['%s:\n' % self.message.rstrip('.:')]
        if self.reason is not None:
            chunks.append('Reason: %s\n' % self.reason)
        if self.path is not None:
            chunks.append('Path: %s\n' % self.path)
        if self.position is not None:
            chunks.append('Position: %d\n' % self.position)
        return '\n'.join(chunks)


class ValidationError(ParseError):
    """
    Raised when the structure of an instance doesn't match its content
    model or its attribute set.

    :param reason: the detailed reason of the error.
    :param particle: the name of the particle that failed, if any.
    :param attribute: the name of the attribute that failed, if any.
    """
    def __init__(self, reason: str,
                 particle: Optional[str] = None,
                 attribute: Optional[str] = None,
                 path: Optional[str] = None,
                 position: Optional[int] = None) -> None:
        if particle is not None:
            message = _("failed validating particle {!r}").format(particle)
        elif attribute is not None:
            message = _("failed validating attribute {!r}").format(attribute)
        else:
            message = _("failed validating instance")
        super().__init__(message, reason, path, position)
        self.particle = particle
        self.attribute = attribute


class LexicalError(ParseError):
    """
    Raised when a text doesn't belong to the lexical space of a simple type.

    :param text: the offending text.
    :param simple_type: the name of the simple type.
    """
    def __init__(self, text: str,
                 simple_type: Optional[str],
                 reason: Optional[str] = None,
                 path: Optional[str] = None,
                 position: Optional[int] = None) -> None:
        message = _("invalid value {} for simple type {!r}").format(
            obj_repr(text), simple_type
        )
        super().__init__(message, reason, path, position)
        self.text = text
        self.simple_type = simple_type
