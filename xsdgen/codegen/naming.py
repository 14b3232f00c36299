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
Python identifiers for the components of generated modules.
"""
import keyword
import re
from collections.abc import Hashable, Iterable
from typing import Optional

from xsdgen.utils.qnames import local_name

ANONYMOUS_KINDS = frozenset(('t', 'e', 'a', 'g', 'ag'))

NON_IDENTIFIER_PATTERN = re.compile(r'\W')


def to_identifier(name: str) -> str:
    """
    Returns a valid Python identifier for a name. Invalid chars are replaced
    by underscores and keywords are escaped with a trailing underscore.
    """
    ident = NON_IDENTIFIER_PATTERN.sub('_', name)
    if not ident or ident[0].isdigit():
        ident = f'_{ident}'
    if keyword.iskeyword(ident):
        ident = f'{ident}_'
    return ident


def to_class_name(qname: str) -> str:
    """
    Returns a class name for a type. The names of anonymous types are
    built from the path of the enclosing declarations.
    """
    name = local_name(qname)
    if name.startswith('~'):
        tokens = name[1:].split('.')
        if tokens and tokens[0] in ANONYMOUS_KINDS:
            tokens = tokens[1:]
        name = ''.join(x[:1].upper() + x[1:] for x in tokens) + 'Type'

    ident = to_identifier(name)
    if ident[0] == '_':
        return f'T{ident}'
    return ident[0].upper() + ident[1:]


class NameScope:
    """
    A scope of unique identifiers. Each key is bound to an identifier built
    from a base name; clashes are solved with numeric suffixes.

    :param reserved: names that can't be bound in the scope.
    """
    def __init__(self, reserved: Iterable[str] = ()) -> None:
        self.reserved = set(reserved)
        self.names: dict[Hashable, str] = {}
        self._used = set(self.reserved)

    def __repr__(self) -> str:
        return '%s(names=%r)' % (self.__class__.__name__, list(self.names.values()))

    def __contains__(self, key: Hashable) -> bool:
        return key in self.names

    def __getitem__(self, key: Hashable) -> str:
        return self.names[key]

    def get(self, key: Hashable) -> Optional[str]:
        return self.names.get(key)

    def is_available(self, name: str) -> bool:
        return name not in self._used

    def bind(self, key: Hashable, base_name: str) -> str:
        """Binds a key to a unique identifier, returns the identifier."""
        try:
            return self.names[key]
        except KeyError:
            pass

        name = base_name
        count = 1
        while name in self._used:
            count += 1
            name = f'{base_name}_{count}'

        self._used.add(name)
        self.names[key] = name
        return name

    def force(self, key: Hashable, name: str) -> str:
        """Binds a key to an identifier assigned by another scope."""
        self._used.add(name)
        self.names[key] = name
        return name
