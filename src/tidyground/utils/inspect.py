"""Provide insights about Python objects."""

import inspect
from typing import Any


def get_qualname(obj: Any) -> str:
    """Get the qualified name of the given object.

    Will return the name of the object and the
    name of the module and class it belongs to.

    For functions or methods, this will return
    something like `module.class.method` or
    `module.function`. Used to describe the
    functions applied by expressions and plan steps.

    >>> class TestClass:
    ...   def method(self, arg):
    ...     pass
    >>> get_qualname(TestClass.method)
    'tidyground.utils.inspect.TestClass.method'
    """
    module = getattr(inspect.getmodule(obj), "__name__", None)
    prefix = f"{module}." if module else ""
    if inspect.ismethod(obj) or inspect.isfunction(obj):
        if getattr(obj, "__self__", None) is not None:
            class_name = obj.__self__.__class__.__name__
            return f"{prefix}{class_name}.{obj.__name__}"
        return f"{prefix}{obj.__qualname__}"
    elif inspect.isclass(obj):
        return f"{prefix}{obj.__name__}"
    elif inspect.ismodule(obj):
        return obj.__name__
    elif callable(obj):
        return f"{prefix}{getattr(obj, '__qualname__', obj.__class__.__name__)}"
    return f"{prefix}{obj.__class__.__name__}"
