"""
Transforms available to instruction trees.

- IntegerResample / Rescale: builtin transforms
- register_transform: decorator for plugin transforms
- create_transform: instantiate a transform by process id
"""

from nocode_pipeline.transforms.builtin import IntegerResample, Rescale
from nocode_pipeline.transforms.registry import (
    create_transform,
    discover_transforms,
    get_transform,
    list_transforms,
    load_builtin_transforms,
    register_transform,
)

__all__ = [
    "IntegerResample",
    "Rescale",
    "create_transform",
    "discover_transforms",
    "get_transform",
    "list_transforms",
    "load_builtin_transforms",
    "register_transform",
]
