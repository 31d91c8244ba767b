"""
Transform Registry.

Instruction tree files name their transforms by process id. Transform
classes register themselves under that id with a decorator, and the tree
loader instantiates them from the registry.
"""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from typing import Any, Callable

import structlog

from ..errors import InstructionTreeError
from ..instructions.tree import Transform

logger = structlog.get_logger(__name__)

_TRANSFORMS: dict[str, type] = {}


def register_transform(name: str) -> Callable[[type], type]:
    """Decorator to register a transform class.

    Usage:
        @register_transform("Invert")
        class Invert:
            process_id = "Invert"
            ...

    Args:
        name: Process id used in instruction tree files

    Returns:
        Decorator function
    """

    def decorator(cls: type) -> type:
        if name in _TRANSFORMS:
            logger.warning(
                "transform_replaced",
                name=name,
                old_class=_TRANSFORMS[name].__name__,
                new_class=cls.__name__,
            )
        _TRANSFORMS[name] = cls
        logger.debug("transform_registered", name=name, class_name=cls.__name__)
        return cls

    return decorator


def get_transform(name: str) -> type | None:
    """Get a transform class by process id."""
    return _TRANSFORMS.get(name)


def list_transforms() -> dict[str, type]:
    """Get all registered transforms."""
    return dict(_TRANSFORMS)


def clear_registry() -> None:
    """Clear all registered transforms.

    Primarily for testing.
    """
    _TRANSFORMS.clear()


def discover_transforms(directory: Path | str) -> list[str]:
    """Discover and load transform plugins from a directory.

    Imports all Python files in the directory, which triggers
    @register_transform decorators. Files starting with "_" are skipped.

    Args:
        directory: Path to directory containing plugin modules

    Returns:
        List of discovered transform names
    """
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning("discovery_skipped", reason="not a directory", path=str(directory))
        return []

    before = set(_TRANSFORMS)

    for py_file in sorted(directory.glob("*.py")):
        if py_file.name.startswith("_"):
            continue

        try:
            module_name = f"nocode_pipeline.plugins.{py_file.stem}"
            spec = importlib.util.spec_from_file_location(module_name, py_file)
            if spec and spec.loader:
                module = importlib.util.module_from_spec(spec)
                sys.modules[module_name] = module
                spec.loader.exec_module(module)
                logger.debug("plugin_loaded", file=py_file.name)
        except Exception as e:
            logger.error("plugin_load_failed", file=py_file.name, error=str(e))

    discovered = sorted(set(_TRANSFORMS) - before)
    if discovered:
        logger.info("transforms_discovered", count=len(discovered), names=discovered)

    return discovered


def load_builtin_transforms() -> list[str]:
    """Register the builtin transforms.

    Returns:
        Names registered by this call
    """
    from . import builtin

    before = set(_TRANSFORMS)
    for name, cls in builtin.BUILTIN_TRANSFORMS.items():
        if name not in _TRANSFORMS:
            register_transform(name)(cls)
    return sorted(set(_TRANSFORMS) - before)


def create_transform(name: str, params: dict[str, Any] | None = None) -> Transform:
    """Instantiate a registered transform.

    Args:
        name: Process id
        params: Keyword arguments for the transform constructor

    Returns:
        Transform instance

    Raises:
        InstructionTreeError: If the transform is unknown or rejects the params
    """
    cls = get_transform(name)
    if cls is None:
        raise InstructionTreeError(f"Unknown transform: {name}")

    try:
        return cls(**(params or {}))
    except (TypeError, ValueError) as e:
        raise InstructionTreeError(f"Invalid parameters for {name}: {e}") from e


def get_transform_info() -> list[dict[str, str]]:
    """Get name, class and description of every registered transform."""
    info = []
    for name, cls in _TRANSFORMS.items():
        doc = (cls.__doc__ or "").strip().splitlines()
        info.append({
            "name": name,
            "class": cls.__name__,
            "description": doc[0] if doc else "No description",
        })
    return info
