from __future__ import annotations

from typing import Dict, List, Literal, Tuple
from pydantic import BaseModel, ConfigDict, Field, model_validator


class NormalizationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    original: str
    normalized: str
    size: str = ""
    color: str = ""
    warnings: Tuple[str, ...] = ()
    status: Literal["ok", "warn"] = "ok"

    @model_validator(mode="after")
    def _status_matches_warnings(self) -> "NormalizationResult":
        expected = "warn" if self.warnings else "ok"
        if self.status != expected:
            raise ValueError(f"status must be {expected!r} for warnings {list(self.warnings)}")
        return self


class BatchSummary(BaseModel):
    lines: int = 0
    ok: int = 0
    warn: int = 0
    warnings: Dict[str, int] = Field(default_factory=dict)


class NormalizeRequest(BaseModel):
    text: str = Field(default="", examples=["10x20 blk gunm\nGOLD-5X5"])


class NormalizeResponse(BaseModel):
    results: List[NormalizationResult] = Field(default_factory=list)
    summary: BatchSummary
    encoding: str | None = Field(default=None, examples=[None])


class HealthResponse(BaseModel):
    ok: bool = True
