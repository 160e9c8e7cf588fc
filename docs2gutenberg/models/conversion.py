from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class ConversionReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    input_file: Optional[str] = Field(None, alias="inputFile")
    output_file: Optional[str] = Field(None, alias="outputFile")
    timestamp: str = Field(default_factory=utc_timestamp)
    policies_triggered: list[str] = Field(default_factory=list, alias="policiesTriggered")
    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    actions: list[str] = Field(default_factory=list)
    success: bool = True
    execution_time_ms: float = Field(0.0, alias="executionTimeMs", ge=0)

    @field_validator("execution_time_ms", mode="before")
    @classmethod
    def _round_ms(cls, v: Any):  # type: ignore[override]
        if isinstance(v, (int, float)):
            return round(float(v), 3)
        return v

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ConversionResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    html: str = ""
    report: ConversionReport = Field(default_factory=ConversionReport)

    @property
    def success(self) -> bool:
        return self.report.success

    def to_dict(self, include_report: bool = True) -> dict[str, Any]:
        if not include_report:
            return {"html": self.html}
        return {"html": self.html, "report": self.report.to_dict()}
