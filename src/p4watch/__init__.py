"""p4watch - Perforce change detection and labelling for CI.

High-level public API:

from datetime import datetime
from p4watch import P4Adapter

adapter = P4Adapter.from_config_path('p4watch.config.yaml')
for mod in adapter.get_modifications(datetime(2024, 1, 1), datetime.now()):
    print(mod.change_number, mod.folder_name, mod.file_name, mod.type)

adapter.get_source()                      # p4 sync when auto_get_source is on
adapter.label_source_control('build-42')  # label + labelsync when apply_label is on

Every collaborator (process executor, initializer, process info creator) can
be passed to ``P4Adapter`` explicitly; the CLI (``python -m p4watch``) is a
thin layer on top of the same API.
"""

from __future__ import annotations

from .adapter import P4Adapter
from .config import P4Config, load_config
from .errors import (
    ConfigurationError,
    InvalidInputError,
    P4Error,
    ToolExecutionError,
    ValidationError,
)
from .models import ChangeListEntry, ChangeWindow, Modification

# Version constant (sync manually with pyproject)
__version__ = "0.1.0"

__all__ = [
    "ChangeListEntry",
    "ChangeWindow",
    "ConfigurationError",
    "InvalidInputError",
    "Modification",
    "P4Adapter",
    "P4Config",
    "P4Error",
    "ToolExecutionError",
    "ValidationError",
    "load_config",
    "__version__",
]
