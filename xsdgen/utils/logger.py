#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from functools import wraps
from typing import Any, Optional, TypeVar, Union

from xsdgen.exceptions import XsdGenValueError
from xsdgen.translation import gettext as _

logger = logging.getLogger('xsdgen')
codegen_logger = logging.getLogger('xsdgen-codegen')

LOG_LEVELS = {'DEBUG', 'INFO', 'WARN', 'WARNING', 'ERROR', 'CRITICAL'}


def get_logging_level(level: Union[str, int]) -> int:
    """Returns the numeric value of a logging level, also accepting level names."""
    if isinstance(level, int):
        return level
    elif not isinstance(level, str) or level.strip().upper() not in LOG_LEVELS:
        raise XsdGenValueError(_("{!r} is not a valid loglevel").format(level))
    return getattr(logging, level.strip().upper())


def set_logging_level(level: Union[str, int]) -> None:
    """Sets the logging level of the compiler and of the code generator loggers."""
    level = get_logging_level(level)
    logger.setLevel(level)
    codegen_logger.setLevel(level)


@contextmanager
def logging_level(level: Union[str, int]) -> Iterator[None]:
    levels = logger.level, codegen_logger.level
    set_logging_level(level)
    try:
        yield
    finally:
        logger.setLevel(levels[0])
        codegen_logger.setLevel(levels[1])


RT = TypeVar('RT')


def logged(func: Callable[..., RT]) -> Callable[..., RT]:
    """
    A decorator for running a compilation with a different logging level. The
    level is taken from the keyword argument 'loglevel', if provided and not
    `None`, and the previous levels are restored after the call.
    """
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        loglevel: Optional[Union[int, str]] = kwargs.get('loglevel')
        if loglevel is None:
            return func(*args, **kwargs)

        with logging_level(loglevel):
            return func(*args, **kwargs)

    return wrapper
