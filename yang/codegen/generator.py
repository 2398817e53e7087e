"""Main code generation orchestrator.

Takes a list of ``PlanningRequest`` objects and produces one Rust file per
concept, a ``mod.rs`` file for every generated module below the root one,
and the knowledge-base init file:

1. register the requested concepts with the knowledge base,
2. plan every concept,
3. build and render each file's fragment tree,
4. apply the postprocessing passes,
5. write the files and record them in the autogeneration ledger.

Every file is fully rendered before the first one is written, so a planning
or rendering error never leaves half-written output behind.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from yang.codegen.concepts import (
    INIT_FILE_PATH,
    concept_file_fragment,
    init_file_fragment,
    module_file_fragment,
)
from yang.codegen.ledger import AutogenLedger
from yang.codegen.planning.ids import IdAllocator
from yang.codegen.planning.knowledge_base import (
    ATTRIBUTE_LOGIC,
    OWN_MODULE,
    ROOT_NODE_LOGIC,
    InMemoryKnowledgeBase,
)
from yang.codegen.planning.models import ModuleConfig, PlanningConfig, PlanningRequest
from yang.codegen.planning.planner import Planner
from yang.codegen.postprocessing import post_process_generation
from yang.codegen.templates import TemplateRenderer
from yang.config import CodegenConfig
from yang.errors import MalformedInputError
from yang.utils import console, write_file


# ---------------------------------------------------------------------------
# Output model
# ---------------------------------------------------------------------------


class GeneratedFile(BaseModel):
    """A rendered file, ready to be written."""

    path: str = Field(..., description="Output path relative to the output root")
    content: str = Field(..., description="Final file text")
    concept: Optional[str] = Field(default=None, description="Concept the file defines")


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class CodeGenerator:
    """Generates concept files for a batch of requests.

    The generator owns the id allocator and the ledger for its run.  Reuse one
    instance across several :meth:`generate` calls to keep numbering
    continuous; call :meth:`reset` to start over.
    """

    def __init__(
        self,
        config: Optional[CodegenConfig] = None,
        knowledge_base: Optional[InMemoryKnowledgeBase] = None,
        allocator: Optional[IdAllocator] = None,
    ) -> None:
        self.config = config or CodegenConfig()
        self.knowledge_base = knowledge_base or InMemoryKnowledgeBase()
        self.allocator = allocator or IdAllocator()
        self.planner = Planner(self.config, self.knowledge_base, self.allocator)
        self.renderer = TemplateRenderer()
        self.ledger = AutogenLedger(self.config.tracker_path)

    # -- Public API --------------------------------------------------------

    def register(self, requests: list[PlanningRequest]) -> None:
        """Add the requested concepts to the knowledge base, parents first.

        Flags, introduced attributes, attribute types and primitives are
        recorded too, so that later requests inherit them.
        """
        kb = self.knowledge_base
        for request in requests:
            if not request.name.strip():
                raise MalformedInputError("Concept request has no name")
            if not kb.knows(request.parent):
                raise MalformedInputError(
                    f"Concept {request.name!r} has unknown parent {request.parent!r}"
                )
            kb.individuate(request.name, request.parent)
            for enabled, flag in (
                (request.attribute, ATTRIBUTE_LOGIC),
                (request.root_node, ROOT_NODE_LOGIC),
                (request.own_module, OWN_MODULE),
            ):
                if enabled:
                    kb.set_flag(request.name, flag)
            kb.add_attributes(request.name, request.attributes)
            kb.set_attribute_types(
                request.name, owner=request.owner_archetype, value=request.value_archetype
            )
            kb.set_data_type(request.name, request.rust_primitive, request.default_value)

    def plan(self, requests: list[PlanningRequest]) -> list[PlanningConfig]:
        self.register(requests)
        return self.planner.plan_all(requests)

    def render_concept(self, cfg: PlanningConfig) -> GeneratedFile:
        file = concept_file_fragment(cfg, self.renderer, self.config.current_crate)
        code = file.generate_code(self.config.code_width)
        return GeneratedFile(
            path=cfg.file_path,
            content=post_process_generation(code, self.config),
            concept=cfg.this.name,
        )

    def render_module(self, module: ModuleConfig) -> GeneratedFile:
        fragment = module_file_fragment(module, self.config.current_crate)
        code = fragment.body(self.config.code_width)
        return GeneratedFile(
            path=module.file_path,
            content=post_process_generation(code, self.config),
        )

    def render_init(self, configs: list[PlanningConfig]) -> GeneratedFile:
        file = init_file_fragment(
            configs,
            self.renderer,
            code_width=self.config.code_width,
            current_crate=self.config.current_crate,
        )
        code = file.generate_code(self.config.code_width)
        return GeneratedFile(
            path=INIT_FILE_PATH,
            content=post_process_generation(code, self.config),
        )

    def render(
        self,
        requests: list[PlanningRequest],
        *,
        include_init: bool = True,
        include_modules: bool = True,
    ) -> list[GeneratedFile]:
        """Plan and render *requests* without touching the file system."""
        configs = self.plan(requests)
        files = [self.render_concept(cfg) for cfg in configs]
        if include_modules:
            files.extend(self.render_module(m) for m in self.planner.plan_modules(configs))
        if include_init and configs:
            files.append(self.render_init(configs))
        return files

    def generate(
        self,
        requests: list[PlanningRequest],
        *,
        include_init: bool = True,
        include_modules: bool = True,
    ) -> list[Path]:
        """Render every requested concept, then write the results.

        Returns:
            The paths that were written, in generation order.
        """
        files = self.render(
            requests, include_init=include_init, include_modules=include_modules
        )
        written = [self.output(file) for file in files]
        if self.config.track_autogen:
            self.ledger.save()
        return written

    def output(self, file: GeneratedFile) -> Path:
        """Write one file and record it in the ledger."""
        path = write_file(self.config.output_root / file.path, file.content)
        # tracked regardless of release mode, so clean always knows about it
        self.ledger.track(path)
        if self.config.track_autogen:
            # tells cargo to regenerate the file when it is edited or removed
            console.print(f"cargo:rerun-if-changed={file.path}", markup=False, highlight=False)
        else:
            console.print(f"Generated {file.path}", markup=False, highlight=False)
        return path

    def reset(self) -> None:
        self.allocator.reset()
        self.ledger.reset()
