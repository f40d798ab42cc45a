import logging
from pathlib import Path

import pytest

from pykook.plugin import BasePlugin, InvalidPluginError, PluginDescription


class SamplePlugin(BasePlugin):
    resources: Path

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.calls = []
        self.fail_on_enable = False

    def resource_root(self):
        return self.resources

    def on_enable(self) -> None:
        self.calls.append("enable")
        if self.fail_on_enable:
            raise RuntimeError("boom")

    def on_disable(self) -> None:
        self.calls.append("disable")


@pytest.fixture()
def description() -> PluginDescription:
    return PluginDescription(name="Sample", version="1.0.0", api_version="0.1", main_class_name="sample.SamplePlugin")


@pytest.fixture()
def resources(tmp_path: Path) -> Path:
    folder = tmp_path / "bundle"
    (folder / "lang").mkdir(parents=True)
    (folder / "config.yml").write_text("# bundled\ngreeting: hello\nlimit: 10\n", encoding="utf-8")
    (folder / "lang" / "en.yml").write_text("hello: Hello\n", encoding="utf-8")
    return folder


@pytest.fixture()
def plugin(tmp_path: Path, description: PluginDescription, resources: Path) -> SamplePlugin:
    data_folder = tmp_path / "data"
    instance = SamplePlugin(
        config_file=data_folder / "config.yml",
        data_folder=data_folder,
        description=description,
        file=tmp_path / "sample.zip",
        logger=logging.getLogger("test_sample_plugin"),
    )
    instance.resources = resources
    return instance


def test_set_enabled_runs_hooks_on_change_only(plugin: SamplePlugin) -> None:
    plugin.set_enabled(True)
    plugin.set_enabled(True)
    plugin.set_enabled(False)
    plugin.set_enabled(False)

    assert plugin.calls == ["enable", "disable"]
    assert plugin.enabled is False


def test_failing_hook_keeps_previous_state(plugin: SamplePlugin) -> None:
    plugin.fail_on_enable = True

    with pytest.raises(RuntimeError):
        plugin.set_enabled(True)

    assert plugin.enabled is False


def test_config_falls_back_to_bundled_defaults(plugin: SamplePlugin) -> None:
    plugin.data_folder.mkdir(parents=True)
    plugin.config_file.write_text("greeting: hi\n", encoding="utf-8")

    plugin.reload_config()

    assert plugin.config.get("greeting") == "hi"
    assert plugin.config.get("limit") == 10


def test_config_without_file_uses_defaults_only(plugin: SamplePlugin) -> None:
    assert plugin.config.keys() == []
    assert plugin.config.get("greeting") == "hello"


def test_save_default_config_copies_resource(plugin: SamplePlugin) -> None:
    plugin.save_default_config()

    assert plugin.config_file.read_text(encoding="utf-8") == "# bundled\ngreeting: hello\nlimit: 10\n"


def test_save_resource_does_not_replace_without_flag(plugin: SamplePlugin, caplog) -> None:
    target = plugin.data_folder / "config.yml"
    target.parent.mkdir(parents=True)
    target.write_text("mine: true\n", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="test_sample_plugin"):
        plugin.save_resource("config.yml")

    assert target.read_text(encoding="utf-8") == "mine: true\n"
    assert any("already exists" in record.getMessage() for record in caplog.records)

    plugin.save_resource("config.yml", replace=True)
    assert target.read_text(encoding="utf-8").startswith("# bundled")


def test_save_resource_path_structure(plugin: SamplePlugin) -> None:
    plugin.save_resource("lang/en.yml")
    plugin.save_resource("lang/en.yml", ignore_path_structure=True)

    assert (plugin.data_folder / "lang" / "en.yml").is_file()
    assert (plugin.data_folder / "en.yml").is_file()


def test_save_missing_resource_raises(plugin: SamplePlugin) -> None:
    with pytest.raises(ValueError):
        plugin.save_resource("missing.yml")


def test_get_resource(plugin: SamplePlugin) -> None:
    with plugin.get_resource("lang/en.yml") as stream:
        assert stream.read() == b"hello: Hello\n"
    assert plugin.get_resource("nope.txt") is None
    with pytest.raises(ValueError):
        plugin.get_resource(None)


def test_constructor_requires_every_argument(tmp_path: Path, description: PluginDescription) -> None:
    with pytest.raises(ValueError):
        SamplePlugin(tmp_path / "c.yml", tmp_path, description, tmp_path / "f", None)


def test_description_validation() -> None:
    with pytest.raises(InvalidPluginError):
        PluginDescription(name="", version="1", api_version="0.1", main_class_name="x.Y")
    with pytest.raises(InvalidPluginError):
        PluginDescription(name="Sample", version="1", api_version="0.1", main_class_name="")

    description = PluginDescription(name="Sample", version="1.0", api_version="0.1", main_class_name="x.Y")
    assert description.full_name == "Sample v1.0"
