"""
Instruction trees and their attribute model.

- AttributeSet / parse_annotation: inherited key=value attributes
- InstructionContainer / InstructionLeaf: tree nodes
- extract_instructions: pick the leaves tagged for a phase
- load_instruction_tree: read a tree from TOML
"""

from nocode_pipeline.instructions.attributes import AttributeSet, parse_annotation
from nocode_pipeline.instructions.extractor import extract_instructions
from nocode_pipeline.instructions.tree import (
    ExtractedInstruction,
    InstructionContainer,
    InstructionLeaf,
    InstructionNode,
    NoOperation,
    SpaceFactorProvider,
    Transform,
)
from nocode_pipeline.instructions.loader import build_instruction_tree, load_instruction_tree

__all__ = [
    "AttributeSet",
    "ExtractedInstruction",
    "InstructionContainer",
    "InstructionLeaf",
    "InstructionNode",
    "NoOperation",
    "SpaceFactorProvider",
    "Transform",
    "build_instruction_tree",
    "extract_instructions",
    "load_instruction_tree",
    "parse_annotation",
]
