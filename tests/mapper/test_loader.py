"""Tests for type loaders."""

from __future__ import annotations

import pytest

from tests.examples.models import MODULE
from tests.examples.models import Job
from tests.examples.models import Outer
from tests.examples.plugins import RenamedTypesPlugin
from treemarshal.exceptions import TypeResolutionError
from treemarshal.mapper import ExtensionTypeLoader
from treemarshal.mapper import ImportTypeLoader
from treemarshal.mapper import TypeLoader
from treemarshal.mapper import type_name
from treemarshal.plugins.manager import create_hook_manager_with_plugins


class TestImportTypeLoader:
    """Tests for ImportTypeLoader."""

    @pytest.mark.parametrize("type_", [Outer, Outer.Inner, Job.Config])
    def test_loads_written_names(self, type_) -> None:
        """Every written type name loads back to its class."""
        assert ImportTypeLoader().load(type_name(type_)) is type_

    @pytest.mark.parametrize(
        "name",
        [
            "Outer",
            "no_such_module.Type",
            f"{MODULE}.Missing",
            f"{MODULE}.Outer$Missing",
            f"{MODULE}.MODULE",
            f"{MODULE}.Outer-Inner",
            ".Outer",
            ".x.Foo",
            "..x.Foo",
        ],
    )
    def test_unresolvable(self, name) -> None:
        """Anything that is not an importable class fails with TypeResolutionError."""
        with pytest.raises(TypeResolutionError) as exc_info:
            ImportTypeLoader().load(name)
        assert exc_info.value.name == name

    def test_is_a_type_loader(self) -> None:
        """Loaders satisfy the TypeLoader protocol."""
        assert isinstance(ImportTypeLoader(), TypeLoader)


class TestExtensionTypeLoader:
    """Tests for ExtensionTypeLoader."""

    def test_plugin_answer_wins(self) -> None:
        """A plugin resolving the name is used before importing."""
        plugin = RenamedTypesPlugin({f"{MODULE}.Outer": Job})
        loader = ExtensionTypeLoader(create_hook_manager_with_plugins([plugin]))
        assert loader.load(f"{MODULE}.Outer") is Job

    def test_falls_back_to_import(self) -> None:
        """Names no plugin knows are imported."""
        plugin = RenamedTypesPlugin({})
        loader = ExtensionTypeLoader(create_hook_manager_with_plugins([plugin]))
        assert loader.load(f"{MODULE}.Outer") is Outer
        assert plugin.requests == [f"{MODULE}.Outer"]

    def test_late_plugins_take_part(self) -> None:
        """Plugins registered after the loader was created are asked too."""
        manager = create_hook_manager_with_plugins([])
        loader = ExtensionTypeLoader(manager)
        with pytest.raises(TypeResolutionError):
            loader.load("old.Job")
        manager.register(RenamedTypesPlugin({"old.Job": Job}))
        assert loader.load("old.Job") is Job
