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
This module contains the base exception classes of the package.
"""
from typing import Optional


class XsdGenException(Exception):
    """The base exception that let you catch all the errors generated by the library."""

    def __str__(self) -> str:
        return str(getattr(self, 'message', None) or super().__str__())


class XsdGenAttributeError(XsdGenException, AttributeError):
    pass


class XsdGenTypeError(XsdGenException, TypeError):
    pass


class XsdGenValueError(XsdGenException, ValueError):
    pass


class XsdGenKeyError(XsdGenException, KeyError):
    pass


class XsdGenRuntimeError(XsdGenException, RuntimeError):
    pass


class TreeParseError(XsdGenException, ValueError):
    """Raised when an error is found while parsing an XML source into a tree."""

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        self.message = message
        self.url = url
        super().__init__(message)

    def __str__(self) -> str:
        if self.url:
            return f'{self.message} (document {self.url!r})'
        return self.message
