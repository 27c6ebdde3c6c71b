from __future__ import annotations

import importlib

from .. import radix85, TestBase
from radix85.units import Entry, LogLevel

__all__ = ['radix85', 'TestUnitBase']


class TestUnitBase(TestBase):

    @staticmethod
    def _relative_module_path(path: str, strip_test=True):
        path = path.split('.')
        path = path[1:]
        if strip_test:
            path = [x[4:].lstrip('_-.') if x.startswith('test') else x for x in path]
        return '.'.join(path)

    @classmethod
    def unit(cls) -> type[radix85.Unit]:
        name = cls._relative_module_path(cls.__module__)
        module = importlib.import_module(F'radix85.{name}')
        for object in vars(module).values():
            if isinstance(object, type) and issubclass(object, Entry) and object.__module__ == module.__name__:
                return object
        raise LookupError(F'could not resolve: {name}')

    @classmethod
    def load(cls, *args, **kwargs) -> radix85.Unit:
        unit = cls.unit().assemble(*args, **kwargs)
        unit.log_level = LogLevel.DETACHED
        return unit
