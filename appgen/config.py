"""appgen configuration.

Typed run configuration for the CLI and the render pipeline.  Settings use
Pydantic v2 models so they are validated at construction time and can be
serialised to/from JSON or read from environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from appgen.scaffolder.models import RenderMode
from appgen.utils import ensure_dir, load_json

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


class DesignSystemConfig(BaseModel):
    """Connection settings for the optional design-system service."""

    url: str = Field(default="", description="Base URL; empty disables enrichment")
    api_key: str = Field(default="")
    timeout: int = Field(default=30, ge=1, description="Per-request timeout in seconds")

    @property
    def enabled(self) -> bool:
        return bool(self.url)


class Config(BaseModel):
    """Settings for one render run.

    Instances are created by the CLI entry point (from arguments layered over
    :meth:`from_env`) and handed to the pipeline.
    """

    spec_path: Optional[Path] = Field(default=None, description="Specification JSON file")
    output_dir: Path = Field(default=Path("./my-app"))
    incremental: bool = Field(default=False, description="Update an existing project in place")
    dry_run: bool = Field(default=False, description="Report outcomes without writing")
    design_system: DesignSystemConfig = Field(default_factory=DesignSystemConfig)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def mode(self) -> RenderMode:
        """Render mode implied by ``incremental``."""
        return RenderMode.INCREMENTAL if self.incremental else RenderMode.NEW

    @property
    def resolved_output_dir(self) -> Path:
        """Absolute destination root."""
        return self.output_dir.expanduser().resolve()

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path where the file was written.
        """
        ensure_dir(path.parent)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        return cls.model_validate(load_json(path))

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            APPGEN_SPEC, APPGEN_OUTPUT_DIR, APPGEN_INCREMENTAL, APPGEN_DRY_RUN,
            APPGEN_DESIGN_SYSTEM_URL, APPGEN_DESIGN_SYSTEM_API_KEY,
            APPGEN_DESIGN_SYSTEM_TIMEOUT.
        """
        design_kwargs: dict[str, Any] = {}
        if os.environ.get("APPGEN_DESIGN_SYSTEM_URL"):
            design_kwargs["url"] = os.environ["APPGEN_DESIGN_SYSTEM_URL"]
        if os.environ.get("APPGEN_DESIGN_SYSTEM_API_KEY"):
            design_kwargs["api_key"] = os.environ["APPGEN_DESIGN_SYSTEM_API_KEY"]
        if os.environ.get("APPGEN_DESIGN_SYSTEM_TIMEOUT"):
            design_kwargs["timeout"] = int(os.environ["APPGEN_DESIGN_SYSTEM_TIMEOUT"])

        spec = os.environ.get("APPGEN_SPEC")
        return cls(
            spec_path=Path(spec) if spec else None,
            output_dir=Path(os.environ.get("APPGEN_OUTPUT_DIR", "./my-app")),
            incremental=_env_flag("APPGEN_INCREMENTAL"),
            dry_run=_env_flag("APPGEN_DRY_RUN"),
            design_system=DesignSystemConfig(**design_kwargs),
        )
