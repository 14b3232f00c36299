#
# Copyright (c), 2016-2020, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""Package protection limits. Values can be changed after import to set different limits."""
import sys
from importlib import import_module
from types import ModuleType
from typing import Any

from xsdgen.translation import gettext as _
from xsdgen.exceptions import XsdGenTypeError, XsdGenValueError


class LimitsModule(ModuleType):
    def __setattr__(self, attr: str, value: Any) -> None:
        if attr not in ('MAX_MODEL_DEPTH', 'MAX_XML_DEPTH'):
            pass
        elif not isinstance(value, int):
            raise XsdGenTypeError(_('Value {!r} is not an int').format(value))
        elif attr == 'MAX_MODEL_DEPTH':
            if value < 5:
                raise XsdGenValueError(_('{} limit must be at least 5').format(attr))
            module = import_module('xsdgen.compiler.normalizer')
            setattr(module, f'_{attr}', value)
        elif value < 1:
            raise XsdGenValueError(_('{} limit must be at least 1').format(attr))
        else:
            module = import_module('xsdgen.runtime.content')
            setattr(module, f'_{attr}', value)

        super().__setattr__(attr, value)


sys.modules[__name__].__class__ = LimitsModule


MAX_MODEL_DEPTH = 15
"""
Maximum depth of nested group expansions performed by the content model
normalizer. An `UnsupportedConstructError` is raised if this limit is exceeded.
"""

MAX_XML_DEPTH = 100
"""
Maximum depth of XML data accepted by generated parsers. A `ValidationError`
is raised if this limit is exceeded.
"""
