"""Package version and the config schema version it reads."""

__all__ = ["__version__", "CONFIG_SCHEMA_VERSION"]

__version__ = "0.1.0"

#: Bumped when a CrawlConfig field is renamed or removed; see config.migrate_config.
CONFIG_SCHEMA_VERSION = 1
