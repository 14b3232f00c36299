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
The front end of generated parsers.
"""
import logging
from collections.abc import Iterator
from typing import Any

from xsdgen.translation import gettext as _
from xsdgen.tree import SourceType, load_document
from xsdgen.utils.qnames import get_prefixed_qname
from .exceptions import ParseError, ValidationError
from .events import ParseContext
from .registry import Registry

logger = logging.getLogger('xsdgen')


class Parser:
    """
    Parses XML documents with the global elements of a registry.

    :param registry: the registry of a generated module.
    """
    def __init__(self, registry: Registry) -> None:
        self.registry = registry

    def __repr__(self) -> str:
        return '%s(registry=%r)' % (self.__class__.__name__, self.registry)

    def parse(self, source: SourceType) -> Any:
        """
        Parses an XML document, returning the value of the root element.
        Raises a `ParseError` if the document doesn't conform to the schema.

        :param source: a file path, an XML string, a file-like object, an \
        ElementTree's element or a tree.
        """
        document = load_document(source)
        root = document.root
        path = '/' + get_prefixed_qname(root.tag, root.nsmap)

        try:
            decl = self.registry.elements[root.tag]
        except KeyError:
            raise ValidationError(_("not a global element of the schema"),
                                  particle=root.tag, path=path, position=1) from None

        logger.debug("parse %r with %r", document.url or root.tag, self.registry)
        context = ParseContext(root)
        context.depth = 1
        return decl.parse(root, path, context)

    def iter_errors(self, source: SourceType) -> Iterator[ParseError]:
        """
        Parses an XML document, yielding the error that stops the parsing, if any.
        A parse stops at the first error, so at most one error is yielded.
        """
        try:
            self.parse(source)
        except ParseError as err:
            yield err

    def is_valid(self, source: SourceType) -> bool:
        return next(self.iter_errors(source), None) is None
