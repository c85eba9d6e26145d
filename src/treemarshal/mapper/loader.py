"""Type loaders: turning type names back into classes."""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from treemarshal.collections import ConcurrentDict
from treemarshal.exceptions import TypeResolutionError
from treemarshal.io.naming import NESTED_SEPARATOR

if TYPE_CHECKING:
    from pluggy import PluginManager

logger = logging.getLogger(__name__)


def type_name(type_: type) -> str:
    """
    Return the canonical written name of a class.

    Nested classes are joined to their outer class with ``$`` so that the module part of the name
    stays unambiguous.

    Examples:
        >>> from collections import OrderedDict
        >>> type_name(OrderedDict)
        'collections.OrderedDict'
        >>> class Outer:
        ...     class Inner: ...
        >>> type_name(Outer.Inner).endswith("Outer$Inner")
        True
    """
    return f"{type_.__module__}.{type_.__qualname__.replace('.', NESTED_SEPARATOR)}"


@runtime_checkable
class TypeLoader(Protocol):
    """Protocol for anything that can resolve a type name to a class."""

    def load(self, name: str) -> type:
        """
        Resolve ``name`` to a class.

        Raises:
            TypeResolutionError: If the name does not designate a class.
        """
        ...


class ImportTypeLoader:
    """
    Resolves type names by importing their module and walking the class path.

    Successful lookups are cached; failures are not, since the module may become importable
    later.

    Examples:
        >>> loader = ImportTypeLoader()
        >>> loader.load("collections.OrderedDict")
        <class 'collections.OrderedDict'>
    """

    def __init__(self) -> None:
        self._cache: ConcurrentDict[str, type] = ConcurrentDict()

    def load(self, name: str) -> type:
        cached = self._cache.get(name)
        if cached is not None:
            return cached

        head, *nested = name.split(NESTED_SEPARATOR)
        module_name, _, top = head.rpartition(".")
        if not module_name or not top or module_name.startswith("."):
            raise TypeResolutionError(name)

        try:
            module = importlib.import_module(module_name)
        except (ImportError, TypeError, ValueError) as e:
            raise TypeResolutionError(name) from e

        obj: object = module
        for attr in (top, *nested):
            try:
                obj = getattr(obj, attr)
            except AttributeError as e:
                raise TypeResolutionError(name) from e

        if not isinstance(obj, type):
            raise TypeResolutionError(name, f"'{name}' does not name a class")

        return self._cache.setdefault(name, obj)


class ExtensionTypeLoader:
    """
    Type loader that lets installed plugins resolve names before falling back to imports.

    Plugins answer through the ``treemarshal_resolve_type`` hook. The plugin manager is consulted
    on every call, so plugins registered after the loader was created take part immediately.

    Args:
        plugin_manager: Plugin manager whose hooks are asked first.
        fallback: Loader used when no plugin knows the name. Defaults to ``ImportTypeLoader``.
    """

    def __init__(self, plugin_manager: PluginManager, fallback: TypeLoader | None = None) -> None:
        self._plugin_manager = plugin_manager
        self._fallback = fallback or ImportTypeLoader()

    def load(self, name: str) -> type:
        resolved = self._plugin_manager.hook.treemarshal_resolve_type(name=name)
        if resolved is not None:
            logger.debug(f"Type name '{name}' resolved by plugin to {resolved!r}")
            return resolved
        return self._fallback.load(name)
