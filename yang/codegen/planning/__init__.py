"""Planning layer: turn concept requests into resolved template configuration.

Usage::

    from yang.codegen.planning import Planner, PlanningRequest, InMemoryKnowledgeBase

    kb = InMemoryKnowledgeBase()
    kb.individuate("Target")
    planner = Planner(CodegenConfig(), kb)
    cfg = planner.plan(PlanningRequest(name="Target"))
    print(cfg.id_expr)
"""

from yang.codegen.planning.ids import IdAllocator
from yang.codegen.planning.knowledge_base import InMemoryKnowledgeBase, KnowledgeBase
from yang.codegen.planning.models import (
    AttributeConfig,
    DataConfig,
    Link,
    ModuleConfig,
    PlanningConfig,
    PlanningRequest,
    Scope,
    StructConfig,
)
from yang.codegen.planning.planner import Planner

__all__ = [
    "AttributeConfig",
    "DataConfig",
    "IdAllocator",
    "InMemoryKnowledgeBase",
    "KnowledgeBase",
    "Link",
    "ModuleConfig",
    "Planner",
    "PlanningConfig",
    "PlanningRequest",
    "Scope",
    "StructConfig",
]
