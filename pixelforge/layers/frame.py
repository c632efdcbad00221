"""Frame - One point in time on the asset's animation timeline."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Frame(BaseModel):
    """Frame index plus how long it is displayed."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra='forbid',
    )

    index: int = Field(default=0, ge=0)
    duration_ms: int = Field(default=100, ge=0)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode='json')
