"""Yang -- code generator for concepts built on the Yin knowledge base.

Turns declarative concept descriptions (name, documentation, id, parent) into
Rust source files: the concept struct, its trait implementations, its tests,
`mod.rs` files for generated modules and a knowledge-base init file.

Usage::

    from yang import CodeGenerator, CodegenConfig
    from yang.parser import load_requests

    generator = CodeGenerator(CodegenConfig(track_autogen=True))
    generator.generate(load_requests("yin.md"))
"""

from yang.codegen.generator import CodeGenerator, GeneratedFile
from yang.config import CodegenConfig
from yang.errors import (
    IdentifierExhaustionError,
    MalformedInputError,
    RenderInconsistencyError,
    UnsupportedExtensionError,
    YangError,
)

__version__ = "0.1.0"

__all__ = [
    "CodeGenerator",
    "CodegenConfig",
    "GeneratedFile",
    "IdentifierExhaustionError",
    "MalformedInputError",
    "RenderInconsistencyError",
    "UnsupportedExtensionError",
    "YangError",
]
