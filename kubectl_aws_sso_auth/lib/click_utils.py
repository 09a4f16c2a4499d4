"""Utility methods to be used in place of some Click operations"""
import enum
import functools
from typing import Any, Callable, Optional, Type, TypeVar, cast

import click


class EnumType(click.Choice):
    """A click.Choice over the values of an Enum which converts to the Enum member"""
    def __init__(self, enum_type: Type[enum.Enum], case_sensitive: bool = False):
        self._enum_type = enum_type
        super().__init__([member.value for member in enum_type], case_sensitive=case_sensitive)

    def convert(self, value: Any, param: Optional[click.Parameter], ctx: Optional[click.Context]) -> enum.Enum:
        if isinstance(value, self._enum_type):
            return value
        choice = super().convert(value, param, ctx)
        for member in self._enum_type:
            if member.value.lower() == str(choice).lower():
                return member
        self.fail(f"{value!r} is not one of {', '.join(self.choices)}", param, ctx)


F = TypeVar("F", bound=Callable[..., Any])
V = TypeVar("V")
def make_pass_decorator_with_constructor(object_type: Type[V], constructor: Callable[[], V]):
    """A modified make_pass_decorator which will return the object via a constructor function if not found"""
    def decorator(f: F) -> F:
        def new_func(*args, **kwargs):  # type: ignore
            ctx = click.get_current_context()

            obj = ctx.find_object(object_type)
            # Not found, then build
            if obj is None:
                obj = constructor()
            return ctx.invoke(f, obj, *args, **kwargs)

        return functools.update_wrapper(cast(F, new_func), f)

    return decorator
