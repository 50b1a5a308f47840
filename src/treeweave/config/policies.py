"""Policy models controlling forest assembly."""

from __future__ import annotations

from typing import Any, Literal, Mapping

from pydantic import BaseModel, Field, model_validator


class ForestAssemblyPolicy(BaseModel):
    """Configuration controlling how :class:`ForestBuilder` treats irregular input."""

    cycle_strategy: Literal["ignore", "raise"] = Field(
        default="ignore",
        description="Whether cyclic islands are reported and left out of the roots, or rejected.",
    )
    track_ambiguity: bool = Field(
        default=False,
        description="Record every candidate parent instead of stopping at the first match.",
    )
    max_nodes: int = Field(default=100_000, ge=1)


class Policies(BaseModel):
    """Root policy container."""

    policy_version: str = Field(default="2026-10-19")
    forest_assembly: ForestAssemblyPolicy = Field(default_factory=ForestAssemblyPolicy)

    @model_validator(mode="after")
    def _validate_policy_version(self) -> "Policies":
        if not self.policy_version:
            raise ValueError("policy_version must be provided")
        return self


def load_policies(source: Mapping[str, Any] | None) -> Policies:
    """Validate a raw mapping into :class:`Policies`."""

    return Policies.model_validate(dict(source or {}))


__all__ = ["ForestAssemblyPolicy", "Policies", "load_policies"]
