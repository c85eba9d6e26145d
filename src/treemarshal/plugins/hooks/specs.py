"""Hook specifications for engine configuration and unmarshalling events."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from treemarshal.plugins.hooks.markers import hook_spec

if TYPE_CHECKING:
    from treemarshal.engine.core import Engine
    from treemarshal.exceptions import ConversionError


class EngineSpec:
    """Hook specifications for ``Engine`` instances."""

    @hook_spec(historic=True)
    def treemarshal_configure_engine(self, engine: Engine) -> None:
        """
        Called once when an engine has finished its own initialization.

        Plugins use this to add compatibility aliases, converters and value types. The call is
        historic: plugins registered with the engine later are called too.

        Args:
            engine: The engine being configured.
        """

    @hook_spec(firstresult=True)
    def treemarshal_resolve_type(self, name: str) -> type | None:
        """
        Called before importing the class named by a type name.

        Lets plugins serve names from modules that are not importable under that name, e.g. types
        moved since documents were written.

        Args:
            name: Type name as read from a document, nested classes joined with ``$``.

        Returns:
            The class, or None to let other plugins and the default import resolution decide.
        """

    @hook_spec
    def treemarshal_old_data(self, obj: Any, version: str) -> None:
        """
        Called after an object was read from a document in a legacy format.

        Fired at most once per top-level unmarshal call. Re-saving ``obj`` writes it in the
        current format.

        Args:
            obj: The unmarshalled object.
            version: Last release that wrote the legacy format.
        """

    @hook_spec
    def treemarshal_unreadable_data(self, obj: Any, errors: list[ConversionError]) -> None:
        """
        Called after an object was read with parts of the document skipped.

        Args:
            obj: The unmarshalled object, without the unreadable parts.
            errors: The errors raised while reading the skipped parts, in document order.
        """
