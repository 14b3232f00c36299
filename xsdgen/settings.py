#
# Copyright (c), 2016-2025, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""Package settings for schema compilation."""
import dataclasses as dc
from typing import Any

from xsdgen.exceptions import XsdGenTypeError
from xsdgen.translation import gettext as _
from xsdgen.arguments import BooleanOption, StringOption, PositiveIntOption, \
    SearchPathOption, LogLevelOption


@dc.dataclass
class CompilerSettings:
    """Settings for a schema compilation run."""

    max_workers: PositiveIntOption = PositiveIntOption(default=4)
    """The maximum number of threads used for loading and building input documents."""

    strict: BooleanOption = BooleanOption(default=False)
    """
    If `True` the constructs that are skipped with a warning for default, e.g. identity
    constraints and notations, raise an `UnsupportedConstructError`.
    """

    module_name: StringOption = StringOption(default='xsdgen_parser')
    """The name of the generated module, reported in its header."""

    searchpath: SearchPathOption = SearchPathOption(default=None)
    """
    An additional directory of templates for the code generator. Templates found
    in this path have priority over the package templates.
    """

    loglevel: LogLevelOption = LogLevelOption(default=None)

    @classmethod
    def get_settings(cls, **kwargs: Any) -> 'CompilerSettings':
        settings = kwargs.pop('settings', _DEFAULT_COMPILER_SETTINGS)
        if not isinstance(settings, CompilerSettings):
            msg = _("expected a CompilerSettings instance for 'settings', got {!r}'")
            raise XsdGenTypeError(msg.format(settings))
        return dc.replace(settings, **kwargs)

    @classmethod
    def update_defaults(cls, **kwargs: Any) -> None:
        global _DEFAULT_COMPILER_SETTINGS
        _DEFAULT_COMPILER_SETTINGS = CompilerSettings.get_settings(**kwargs)

    @classmethod
    def reset_defaults(cls) -> None:
        global _DEFAULT_COMPILER_SETTINGS
        _DEFAULT_COMPILER_SETTINGS = CompilerSettings()


# Default package settings
_DEFAULT_COMPILER_SETTINGS = CompilerSettings()
