#
# Copyright (c), 2016-2022, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""
Translation of the messages of the compiler and of the runtime of generated
parsers. Messages are marked with `gettext`, imported as `_`, and are left
untranslated until a translation is activated.
"""
import builtins
import gettext as _gettext
from pathlib import Path
from typing import cast, Iterable, Optional, Union

__all__ = ['activate', 'deactivate', 'gettext']

DOMAIN = 'xsdgen'
LOCALE_DIR = Path(__file__).parent.joinpath('locale')

_translation: Optional[_gettext.NullTranslations] = None
_installed = False


def activate(localedir: Union[None, str, Path] = None,
             languages: Optional[Iterable[str]] = None,
             fallback: bool = True,
             install: bool = False) -> None:
    """
    Activates the translation of the error messages.

    :param localedir: the directory of the message catalogs, defaults to \
    the 'locale' directory of the package.
    :param languages: an optional list of language codes.
    :param fallback: if `True` a missing catalog leaves the messages untranslated, \
    otherwise an `OSError` is raised.
    :param install: if `True` installs the translation function as `_()` \
    in the builtins namespace.
    """
    global _translation, _installed

    translation = _gettext.translation(
        domain=DOMAIN,
        localedir=LOCALE_DIR if localedir is None else localedir,
        languages=languages,
        fallback=fallback,
    )

    deactivate()
    _translation = translation
    if install:
        translation.install()
        _installed = True


def deactivate() -> None:
    """Deactivates the translation of the error messages."""
    global _translation, _installed

    if _installed and _translation is not None:
        if builtins.__dict__.get('_') == _translation.gettext:
            del builtins.__dict__['_']

    _translation = None
    _installed = False


def gettext(message: str) -> str:
    if _translation is None:
        return message
    return cast(str, _translation.gettext(message))
