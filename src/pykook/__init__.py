"""
pykook - Python plugin API for Kook bots

Core Components:

- **Configuration**: Hierarchical key/value configuration with nested sections,
  default-value fallback and custom-type tagging, stored as YAML documents whose
  comments, blank lines, header and footer survive a load/save cycle
- **Plugins**: Plugin contract and a base implementation handling lifecycle
  hooks, the plugin's configuration file and resources bundled in its package
- **Entities**: Interfaces for guilds and users exposed by the platform

Usage:
    from pykook.configuration import YamlConfiguration
    config = YamlConfiguration.load_configuration("config.yml")
    config.set("database.pool.size", 8)
    config.save("config.yml")

Host programs call ``pykook.util.logger.setup_process_logging()`` once at
startup; importing the package changes no process-wide state.
"""
