#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""Helper functions for QNames and namespaces."""
from collections.abc import Mapping
from typing import Optional

from xsdgen.exceptions import XsdGenValueError, XsdGenTypeError, XsdGenKeyError
from xsdgen.names import XML_NAMESPACE
from xsdgen.translation import gettext as _


def get_namespace(qname: str) -> str:
    """
    Returns the namespace URI associated with a QName in extended form or a local name.
    If the argument is not conformant to QName format returns the empty string, which
    means no namespace.
    """
    try:
        if qname[0] != '{':
            return ''
        namespace, _name = qname[1:].split('}')
    except (IndexError, ValueError):
        return ''
    except TypeError:
        raise XsdGenTypeError("the argument must be a string-like object")
    else:
        return namespace


def get_qname(uri: Optional[str], name: str) -> str:
    """
    Returns an expanded QName from URI and local part. If any argument has boolean value
    `False` or if the name is already an expanded QName, returns the *name* argument.

    :param uri: namespace URI
    :param name: local or qualified name
    :return: string or the name argument
    """
    try:
        if name[0] in '{./[' or not uri:
            return name
    except IndexError:
        return ''
    except TypeError:
        raise XsdGenTypeError("the 2nd argument must be a string-like object")
    else:
        return f'{{{uri}}}{name}'


def local_name(qname: str) -> str:
    """
    Return the local part of an expanded QName or a prefixed name. If the name
    is `None` or empty returns the *name* argument.

    :param qname: an expanded QName or a prefixed name or a local name.
    """
    try:
        if qname[0] == '{':
            _namespace, qname = qname.split('}')
        elif ':' in qname:
            _prefix, qname = qname.split(':')
    except IndexError:
        return ''
    except ValueError:
        raise XsdGenValueError("the argument 'qname' has an invalid value %r" % qname)
    except TypeError:
        raise XsdGenTypeError("the argument 'qname' must be a string-like object")
    else:
        return qname


def get_prefixed_qname(qname: str,
                       namespaces: Optional[Mapping[str, str]],
                       use_empty: bool = True) -> str:
    """
    Get the prefixed form of a QName, using a namespace map.

    :param qname: an extended QName or a local name or a prefixed QName.
    :param namespaces: an optional mapping from prefixes to namespace URIs.
    :param use_empty: if `True` use the empty prefix for mapping.
    """
    if not namespaces or not qname or qname[0] != '{':
        return qname

    namespace = get_namespace(qname)
    prefixes = [x for x in namespaces if namespaces[x] == namespace]

    if not prefixes:
        return qname
    elif prefixes[0]:
        return f"{prefixes[0]}:{qname.split('}', 1)[1]}"
    elif len(prefixes) > 1:
        return f"{prefixes[1]}:{qname.split('}', 1)[1]}"
    elif use_empty:
        return qname.split('}', 1)[1]
    else:
        return qname


def get_extended_qname(qname: str, namespaces: Optional[Mapping[str, str]]) -> str:
    """
    Get the extended form of a QName, using a namespace map.
    Local names are mapped to the default namespace.

    :param qname: a prefixed QName or a local name or an extended QName.
    :param namespaces: an optional mapping from prefixes to namespace URIs.
    """
    if not namespaces:
        return qname

    try:
        if qname[0] == '{':
            return qname
    except IndexError:
        return qname

    try:
        prefix, name = qname.split(':', 1)
    except ValueError:
        if not namespaces.get(''):
            return qname
        else:
            return f"{{{namespaces['']}}}{qname}"
    else:
        try:
            uri = namespaces[prefix]
        except KeyError:
            return qname
        else:
            return f'{{{uri}}}{name}' if uri else name


def resolve_qname(value: str, namespaces: Mapping[str, str]) -> str:
    """
    Resolves a QName value of an attribute to the extended form. Differently
    from `get_extended_qname` an unmapped prefix is an error. The prefix 'xml'
    is always bound to the XML namespace.

    :param value: a prefixed QName or a local name.
    :param namespaces: the in-scope mapping from prefixes to namespace URIs.
    """
    value = value.strip()
    if not value:
        raise XsdGenValueError(_("empty QName value"))
    elif value[0] == '{':
        return value

    try:
        prefix, name = value.split(':')
    except ValueError:
        if ':' in value:
            raise XsdGenValueError(_("invalid QName value {!r}").format(value)) from None
        uri = namespaces.get('')
        return f'{{{uri}}}{value}' if uri else value
    else:
        if prefix == 'xml':
            return f'{{{XML_NAMESPACE}}}{name}'
        try:
            uri = namespaces[prefix]
        except KeyError:
            msg = _("prefix {!r} of QName {!r} is not mapped to a namespace")
            raise XsdGenKeyError(msg.format(prefix, value)) from None
        else:
            return f'{{{uri}}}{name}' if uri else name
