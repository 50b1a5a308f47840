"""Configuration utilities for treeweave."""

from .policies import ForestAssemblyPolicy, Policies, load_policies
from .settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "Policies",
    "ForestAssemblyPolicy",
    "load_policies",
]
