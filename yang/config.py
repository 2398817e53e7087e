"""Yang code generation configuration.

Centralised, typed runtime options for a generation run.  Settings use a
Pydantic v2 model so they are validated at construction time and can be
serialised to/from JSON or read from environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

_TRUE_VALUES = {"1", "true", "yes", "on"}


class CodegenConfig(BaseModel):
    """Runtime options for code generation.

    ``release`` has the following implications:

    * No autogeneration comments, so that documentation reads cleanly.
    * No formatter-skip directives.
    * Generated files are meant to be committed instead of regenerated.
    """

    comment_autogen: bool = Field(
        default=True, description="Mark each generated line with the autogeneration comment"
    )
    add_fmt_skips: bool = Field(
        default=True, description="Prefix generated files with rustfmt skip directives"
    )
    track_autogen: bool = Field(
        default=False, description="Persist the autogeneration ledger at the end of a run"
    )
    yin: bool = Field(
        default=False, description="Whether the code being generated is the base library itself"
    )
    release: bool = Field(default=False, description="Generate code for a release build")
    code_width: int = Field(default=80, ge=20, description="Maximum width of generated lines")
    autogen_tracker: Path = Field(default=Path(".autogen.txt"))
    output_root: Path = Field(default=Path("."))
    current_crate: str = Field(default="crate")

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def tracker_path(self) -> Path:
        """Absolute-or-relative path of the ledger manifest under the output root."""
        if self.autogen_tracker.is_absolute():
            return self.autogen_tracker
        return self.output_root / self.autogen_tracker

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: Path) -> "CodegenConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "CodegenConfig":
        """Build a ``CodegenConfig`` from environment variables.

        Recognised variables (all optional):
            YANG_COMMENT_AUTOGEN, YANG_TRACK_AUTOGEN, YANG_YIN, YANG_RELEASE,
            YANG_CODE_WIDTH, YANG_AUTOGEN_TRACKER.
        """
        kwargs: dict[str, Any] = {}
        for env_name, field_name in (
            ("YANG_COMMENT_AUTOGEN", "comment_autogen"),
            ("YANG_TRACK_AUTOGEN", "track_autogen"),
            ("YANG_YIN", "yin"),
            ("YANG_RELEASE", "release"),
        ):
            if os.environ.get(env_name):
                kwargs[field_name] = os.environ[env_name].strip().lower() in _TRUE_VALUES
        if os.environ.get("YANG_CODE_WIDTH"):
            kwargs["code_width"] = int(os.environ["YANG_CODE_WIDTH"])
        if os.environ.get("YANG_AUTOGEN_TRACKER"):
            kwargs["autogen_tracker"] = Path(os.environ["YANG_AUTOGEN_TRACKER"])
        return cls(**kwargs)
