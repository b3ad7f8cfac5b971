"""
Base model for operation results.

Results carry the produced bytes for byte-buffer callers, and render the
caller-facing output contract (camelCase keys, absent fields omitted, bytes
never included) through ``to_contract()``.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class OperationResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    filename: str = Field(..., description="Output filename")
    size: int = Field(0, ge=0, description="Output size in bytes")
    path: Optional[str] = Field(
        None,
        description="Storage path when the result was written through the gateway",
    )
    data: bytes = Field(b"", exclude=True, repr=False)

    def to_contract(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
