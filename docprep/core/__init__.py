"""Core configuration and factory components."""

from docprep.core.config import Settings, get_settings
from docprep.core.factory import ComponentFactory, get_factory

__all__ = [
    "Settings",
    "get_settings",
    "ComponentFactory",
    "get_factory",
]
