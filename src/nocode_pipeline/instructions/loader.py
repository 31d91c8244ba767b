"""
Instruction tree files.

Instruction trees are stored as TOML. A table with a ``transform`` key is a
leaf; any other table is a container whose ``children`` array holds nested
nodes. Every node may carry an ``annotation``.

Example file:

    annotation = "step=onCalibrationEnd"

    [[children]]
    annotation = "filter=Ha"
    transform = "IntegerResample"
    params = { zoom_factor = 2 }

    [[children]]
    annotation = "filter=OIII"

    [[children.children]]
    transform = "Rescale"
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

import structlog

from ..errors import InstructionTreeError
from ..transforms.registry import create_transform, load_builtin_transforms
from .tree import InstructionContainer, InstructionLeaf, InstructionNode

logger = structlog.get_logger(__name__)


def build_instruction_tree(data: dict[str, Any], *, path: str = "root") -> InstructionNode:
    """Build an instruction tree from parsed TOML.

    Args:
        data: Node table
        path: Location of the node, for error messages

    Returns:
        Root node

    Raises:
        InstructionTreeError: If a node is malformed or names an unknown transform
    """
    if not isinstance(data, dict):
        raise InstructionTreeError(f"{path}: expected a table, got {type(data).__name__}")

    annotation = data.get("annotation", "")
    if not isinstance(annotation, str):
        raise InstructionTreeError(f"{path}: annotation must be a string")

    if "transform" in data:
        if "children" in data:
            raise InstructionTreeError(f"{path}: a node cannot have both transform and children")
        params = data.get("params", {})
        if not isinstance(params, dict):
            raise InstructionTreeError(f"{path}: params must be a table")
        try:
            transform = create_transform(str(data["transform"]), params)
        except InstructionTreeError as e:
            raise InstructionTreeError(f"{path}: {e}") from e
        return InstructionLeaf(transform, annotation)

    children = data.get("children", [])
    if not isinstance(children, list):
        raise InstructionTreeError(f"{path}: children must be an array of tables")

    container = InstructionContainer(annotation)
    for i, child in enumerate(children):
        container.add(build_instruction_tree(child, path=f"{path}.children[{i}]"))
    return container


def load_instruction_tree(path: str | Path) -> InstructionNode:
    """Load an instruction tree from a TOML file.

    Builtin transforms are registered before the tree is built.

    Args:
        path: TOML file path

    Returns:
        Root node

    Raises:
        InstructionTreeError: If the file is missing, unparsable or malformed
    """
    path = Path(path)
    load_builtin_transforms()

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as e:
        raise InstructionTreeError(f"Instruction tree not found: {path}") from e
    except tomllib.TOMLDecodeError as e:
        raise InstructionTreeError(f"Invalid TOML in {path}: {e}") from e

    root = build_instruction_tree(data)
    logger.info("instruction_tree_loaded", path=str(path), leaves=count_leaves(root))
    return root


def count_leaves(node: InstructionNode) -> int:
    """Number of transform leaves under ``node``."""
    if isinstance(node, InstructionLeaf):
        return 1
    return sum(count_leaves(child) for child in node.children)
