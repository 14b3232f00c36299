#
# Copyright (c), 2016-2025, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
from collections.abc import Callable, Iterable
from functools import partial
from pathlib import Path
from typing import Any, cast, Generic, Optional, TypeVar, Union

from xsdgen.exceptions import XsdGenTypeError, XsdGenValueError, XsdGenAttributeError
from xsdgen.translation import gettext as _
from xsdgen.utils.logger import LOG_LEVELS

T = TypeVar('T')


class Argument(Generic[T]):
    """
    A descriptor for positional and optional arguments. An argument can't be changed nor deleted.
    Arguments are validated with a sequence of validation functions tha are called by the base
    *validated_value* method.
    """
    __slots__ = ('_name', '_default')

    _default: T
    _validators: tuple[Callable[['Argument[T]', T], None], ...] = ()

    def __set_name__(self, owner: type[Any], name: str) -> None:
        self._name = f'_{name}'

    def __str__(self) -> str:
        if hasattr(self, '_default'):
            return _('optional argument {!r}').format(self._name[1:])
        return _('argument {!r}').format(self._name[1:])

    def __get__(self, instance: Optional[Any], owner: type[Any]) -> T:
        try:
            return cast(T, getattr(instance, self._name))
        except AttributeError:
            try:
                return self._default
            except AttributeError:
                if instance is None:
                    msg = _("{} can't be accessed from {!r}").format(self, owner)
                else:
                    msg = _("{} of {!r} object has not been set").format(self, instance)
                raise XsdGenAttributeError(msg) from None

    def __set__(self, instance: Any, value: Any) -> None:
        if hasattr(instance, self._name):
            raise XsdGenAttributeError(_("can't change {}").format(self))
        setattr(instance, self._name, self.validated_value(value))

    def __delete__(self, instance: Any) -> None:
        raise XsdGenAttributeError(_("can't delete {}").format(self))

    def validated_value(self, value: Any) -> T:
        for validator in self._validators:
            validator(self, value)
        return cast(T, value)


class Option(Argument[T]):
    """
    A descriptor for handling optional arguments.

    :param default: The default value for the optional argument.
    """
    def __init__(self, *, default: T) -> None:
        self._default = default


###
# Validation helpers for arguments and options

def validate_type(attr: Argument[T], value: T,
                  types: Union[None, type[T], tuple[type[T]]] = None,
                  none: bool = False) -> None:
    """
    Base function for validating an argument type.

    :param attr: the argument to validate.
    :param value: the argument value to validate.
    :param types: the optional types to validate against.
    :param none: if `True` a None value is accepted.
    """
    if none and value is None or types is not None and isinstance(value, types):
        return None

    if types is None:
        if none:
            raise XsdGenTypeError(
                _("invalid type {!r} for {}, must be None").format(type(value), attr)
            )
        return None
    elif none:
        msg = _("invalid type {!r} for {}, must be None or a {!r}")
    else:
        msg = _("invalid type {!r} for {}, must be a {!r}")

    raise XsdGenTypeError(msg.format(type(value), attr, types))


def validate_choice(attr: Argument[T], value: T, choices: Iterable[T]) -> None:
    if value not in choices:
        msg = _("invalid value {!r} for {}: must be one of {}")
        raise XsdGenValueError(msg.format(value, attr, tuple(choices)))


def validate_minimum(attr: Argument[int], value: int, min_value: int) -> None:
    if value < min_value:
        msg = _("the value of {} must be greater or equal than {}")
        raise XsdGenValueError(msg.format(attr, min_value))


bool_validator = partial(validate_type, types=bool)
int_validator = partial(validate_type, types=int)
str_validator = partial(validate_type, types=str)
pos_int_validator = partial(validate_minimum, min_value=1)


class BooleanOption(Option[bool]):
    _validators = (bool_validator,)


class StringOption(Option[str]):
    _validators = (str_validator,)


class PositiveIntOption(Option[int]):
    _validators = int_validator, pos_int_validator


class SearchPathOption(Option[Optional[str]]):
    def validated_value(self, value: Any) -> Optional[str]:
        if value is None:
            return None
        elif not isinstance(value, (str, Path)):
            msg = _("invalid type {!r} for {}, must be of type {!r}")
            raise XsdGenTypeError(msg.format(type(value), self, (str, Path)))
        elif not Path(value).is_dir():
            msg = _("invalid value {!r} for {}: not a directory")
            raise XsdGenValueError(msg.format(value, self))
        return str(value)


class LogLevelOption(Option[Union[None, str, int]]):
    def validated_value(self, value: Any) -> Union[None, str, int]:
        if value is None:
            return self._default
        elif isinstance(value, str):
            validate_choice(self, value.strip().upper(), LOG_LEVELS)
            return value
        elif isinstance(value, int) and not isinstance(value, bool):
            return value
        else:
            msg = _("invalid type {!r} for {}, must be of type {!r}")
            raise XsdGenTypeError(msg.format(type(value), self, (str, int)))
