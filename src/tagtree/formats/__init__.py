"""Plain text formats read through the same character source as XML.

Key Components:
    CSVReader: Value and row reader for delimiter separated text
    CSVTable: In-memory CSV rows with title based lookups
    ConfigRegistry: Option name to handler mapping
    load_config: Applies a ``name = value`` file to a registry
"""

from .config_file import ConfigLoadResult, ConfigRegistry, load_config
from .csv_reader import CSVReader, CSVTable

__all__ = [
    "CSVReader",
    "CSVTable",
    "ConfigLoadResult",
    "ConfigRegistry",
    "load_config",
]
