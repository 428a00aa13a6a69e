"""Domain models (Pydantic v2).

Note:
- These models describe *what* a result is, not *how* it was obtained.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class PtrRecord(BaseModel):
    """One resolved name for one input line.

    A target with several PTR records yields several `PtrRecord` instances,
    each emitted as soon as the lookup returns.
    """

    model_config = ConfigDict(frozen=True)

    ip: str = Field(
        ...,
        description="Input line exactly as read (first output field).",
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Resolved name in absolute form (usually with a trailing dot).",
    )

    @property
    def domain(self) -> str:
        """Name without the canonical-form trailing dot."""

        return self.name.rstrip(".")

    def render(self, *, domain_only: bool = False) -> str:
        """Output line: `ip<TAB>name`, or just the bare domain."""

        if domain_only:
            return self.domain
        return f"{self.ip}\t{self.name}"
