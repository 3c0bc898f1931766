"""Common stage result container."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(slots=True)
class StageResult:
    """Outcome of one pipeline stage."""

    stage: str
    success: bool
    counts: dict[str, int] = field(default_factory=dict)
    outputs: list[Path] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def failed(cls, stage: str, error: str | BaseException) -> "StageResult":
        return cls(stage=stage, success=False, error=str(error))
