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
This module contains the exception classes raised by the schema compiler.
Every stage fails fast, so each error terminates the compilation.
"""
from typing import Optional

from xsdgen.exceptions import XsdGenException
from xsdgen.translation import gettext as _


class XsdCompileError(XsdGenException):
    """
    Base class for errors raised compiling schemas.

    :param message: the error message.
    :param name: the qualified name of the offending declaration, if any.
    :param url: the URL of the schema document, if any.
    :param path: the path of the offending construct within the schema document.
    """
    def __init__(self, message: str,
                 name: Optional[str] = None,
                 url: Optional[str] = None,
                 path: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.name = name
        self.url = url
        self.path = path

    def __repr__(self) -> str:
        return '%s(message=%r, name=%r)' % (self.__class__.__name__, self.message, self.name)

    def __str__(self) -> str:
        chunks = [self.message]
        if self.name is not None:
            chunks.append(_("Declaration: {!r}").format(self.name))
        if self.url is not None:
            chunks.append(_("Document: {!r}").format(self.url))
        if self.path is not None:
            chunks.append(_("Path: {}").format(self.path))
        return '\n\n'.join(chunks)


class IngestError(XsdCompileError):
    """Raised for malformed schema documents or unrecognized schema constructs."""


class ResolutionError(XsdCompileError):
    """Raised when the references of the merged schema graph cannot be resolved."""


class UnresolvedReferenceError(ResolutionError):
    """
    Raised when a qualified name doesn't refer to a declaration of the required kind.

    :param name: the qualified name of the referencing declaration.
    :param target: the missing qualified name.
    :param kind: the kind of declaration expected for the target.
    """
    def __init__(self, name: Optional[str], target: str, kind: str,
                 url: Optional[str] = None) -> None:
        msg = _("unresolved reference to {} {!r}").format(kind, target)
        super().__init__(msg, name, url)
        self.target = target
        self.kind = kind


class InvalidDerivationError(XsdCompileError):
    """
    Raised for cyclic derivation chains or for restrictions that
    are not a valid narrowing of their base types.
    """


class UnsupportedConstructError(XsdCompileError):
    """
    Raised when a recognized schema construct that is not modeled by the compiler is found.

    :param construct: the name of the unsupported construct (e.g. 'xs:redefine').
    """
    def __init__(self, construct: str,
                 name: Optional[str] = None,
                 url: Optional[str] = None,
                 path: Optional[str] = None,
                 reason: Optional[str] = None) -> None:
        if reason is None:
            msg = _("unsupported schema construct {!r}").format(construct)
        else:
            msg = _("unsupported schema construct {!r}: {}").format(construct, reason)
        super().__init__(msg, name, url, path)
        self.construct = construct
