"""Plugin contract and the default implementation plugins extend."""

from pykook.plugin.base_plugin import BasePlugin
from pykook.plugin.plugin import InvalidPluginError, Plugin, PluginDescription

__all__ = ["BasePlugin", "InvalidPluginError", "Plugin", "PluginDescription"]
