"""
Pytest configuration and shared fixtures for the No-Code Pipeline Builder.

This module provides:
- Frame group factories
- In-memory and FITS-backed run contexts
- Transform registry isolation

Example usage in tests:
    def test_something(group_factory, memory_context):
        group = group_factory.create(keywords={"filter": "Ha"})
        ...
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from nocode_pipeline.scheduling.context import RunContext
from nocode_pipeline.transforms import registry
from tests.fixtures.factories import GroupFactory, MemoryFrameIO


# ============================================================================
# FACTORY FIXTURES
# ============================================================================


@pytest.fixture
def group_factory() -> GroupFactory:
    """Provide a fresh GroupFactory with counter reset."""
    GroupFactory.reset()
    return GroupFactory


# ============================================================================
# RUN CONTEXT FIXTURES
# ============================================================================


@pytest.fixture
def memory_io() -> MemoryFrameIO:
    """Provide an in-memory frame I/O."""
    return MemoryFrameIO()


@pytest.fixture
def memory_context(tmp_path: Path, memory_io: MemoryFrameIO) -> RunContext:
    """Provide a run context writing markers under tmp_path."""
    return RunContext(output_dir=tmp_path / "output", frame_io=memory_io)


@pytest.fixture
def fits_context(tmp_path: Path) -> RunContext:
    """Provide a run context using real FITS I/O under tmp_path."""
    return RunContext(output_dir=tmp_path / "output")


# ============================================================================
# REGISTRY FIXTURES
# ============================================================================


@pytest.fixture
def clean_registry() -> Iterator[None]:
    """Run a test against an empty transform registry, then restore it."""
    saved = registry.list_transforms()
    registry.clear_registry()
    yield
    registry.clear_registry()
    for name, cls in saved.items():
        registry.register_transform(name)(cls)


# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "integration: mark as integration test")
