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
Serialization of declaration records into Python modules.
"""
import logging
import sys
from collections.abc import Iterable
from pathlib import Path
from types import ModuleType
from typing import NamedTuple, Union

from xsdgen.exceptions import XsdGenValueError
from xsdgen.translation import gettext as _

logger = logging.getLogger('xsdgen-codegen')

DECLARATION_KINDS = ('header', 'simple_type', 'complex_type', 'element', 'group', 'footer')

# Declarations of these kinds are one-liners that are kept together
COMPACT_KINDS = frozenset(('simple_type', 'element', 'group'))


class Declaration(NamedTuple):
    """
    A record emitted by the code generator.

    :param name: the qualified name of the declared component, or the \
    module name for the header and the footer.
    :param kind: the kind of the declaration.
    :param body: the Python source of the declaration.
    """
    name: str
    kind: str
    body: str


def write_module(declarations: Iterable[Declaration]) -> str:
    """Joins declaration records, in emission order, into the source of a module."""
    chunks: list[str] = []
    last_kind = None
    for decl in declarations:
        if decl.kind not in DECLARATION_KINDS:
            raise XsdGenValueError(_("unknown declaration kind {!r}").format(decl.kind))

        body = decl.body.strip('\n')
        if last_kind is None:
            pass
        elif decl.kind == last_kind and decl.kind in COMPACT_KINDS and '\n' not in body:
            chunks.append('\n')
        else:
            chunks.append('\n\n\n')
        chunks.append(body)
        last_kind = decl.kind

    chunks.append('\n')
    return ''.join(chunks)


def write_module_file(source_code: str, output: Union[str, Path]) -> None:
    logger.info("write file %r", str(output))
    with open(output, 'w', encoding='utf-8') as fp:
        fp.write(source_code)


def load_parser_module(source_code: str, module_name: str = 'xsdgen_parser') -> ModuleType:
    """
    Imports the source of a generated parser as a module, without writing files.
    The module is registered into `sys.modules`.
    """
    module = ModuleType(module_name)
    module.__file__ = f'<{module_name}>'
    code = compile(source_code, module.__file__, 'exec')

    sys.modules[module_name] = module
    try:
        exec(code, module.__dict__)
    except BaseException:
        del sys.modules[module_name]
        raise

    logger.debug("loaded generated module %r", module_name)
    return module
