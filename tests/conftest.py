"""Shared pytest fixtures for the yang test suite.

Provides reusable fixtures for:
- Codegen configurations rooted in a temporary directory
- A preloaded in-memory knowledge base
- Planning requests used by the end-to-end scenarios
- Sample YAML and Markdown inputs
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from yang.codegen.planning import (
    IdAllocator,
    InMemoryKnowledgeBase,
    Planner,
    PlanningRequest,
    Scope,
)
from yang.codegen.templates import TemplateRenderer
from yang.config import CodegenConfig


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@pytest.fixture
def codegen_config(tmp_path: Path) -> CodegenConfig:
    """Default options, writing under a temporary crate root."""
    return CodegenConfig(output_root=tmp_path)


@pytest.fixture
def release_config(tmp_path: Path) -> CodegenConfig:
    return CodegenConfig(output_root=tmp_path, release=True)


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------


@pytest.fixture
def knowledge_base() -> InMemoryKnowledgeBase:
    """Knowledge base holding only the base library concepts."""
    return InMemoryKnowledgeBase()


@pytest.fixture
def allocator() -> IdAllocator:
    return IdAllocator()


@pytest.fixture
def planner(knowledge_base: InMemoryKnowledgeBase, allocator: IdAllocator) -> Planner:
    return Planner(CodegenConfig(), knowledge_base, allocator)


@pytest.fixture
def target_request() -> PlanningRequest:
    """The ``Target`` concept as described in the project README scenario."""
    return PlanningRequest(
        name="Target",
        documentation="The target of an implement command.",
        numeric_id=1,
        target_scope=Scope.DERIVED,
    )


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


# ---------------------------------------------------------------------------
# Input documents
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_yaml_text() -> str:
    return textwrap.dedent("""\
        - name: Target
          documentation: The target of an implement command.
          id: 1
        - name: Implement
          parent: Tao
          documentation: Represents a request to implement a concept.
    """)


@pytest.fixture
def sample_markdown_text() -> str:
    return textwrap.dedent("""\
        # Concepts

        Some prose describing the concepts below.

        ```yaml
        - name: Target
          documentation: The target of an implement command.
        ```

        More prose, with a code block that is not YAML:

        ```rust
        fn main() {}
        ```

        ```yml
        concepts:
          - name: Owner
            parent: Attribute
            attribute: true
        ```
    """)
