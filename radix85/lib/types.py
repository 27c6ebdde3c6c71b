"""
This module is used as a unified resource for various types that are primarily used for type hints.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from typing import (
        Annotated,
        BinaryIO,
        Callable,
        Union,
    )

    Param = Annotated
    buf = Union[bytes, bytearray, memoryview]
    Interrupt = Callable[[], bool]

else:
    class __P:
        def __getitem__(self, annotation):
            return annotation[1]

    Param = __P()
    buf = Any
    Interrupt = Any
    BinaryIO = Any


__all__ = [
    'BinaryIO',
    'buf',
    'Interrupt',
    'isbuffer',
    'isstream',
    'Param',
    'typename',
]


def isstream(obj) -> bool:
    """
    Tests whether `obj` is a stream. This is currently done by simply testing whether the object
    has an attribute called `read`.
    """
    return hasattr(obj, 'read')


def isbuffer(obj) -> bool:
    """
    Test whether `obj` is an object that supports the buffer API, like a bytes or bytearray object.
    """
    try:
        with memoryview(obj):
            return True
    except TypeError:
        return False


def typename(thing):
    """
    Determines the name of the type of an object.
    """
    if not isinstance(thing, type):
        thing = type(thing)
    try:
        return thing.__name__
    except AttributeError:
        return repr(thing)
