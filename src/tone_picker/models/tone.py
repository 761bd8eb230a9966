"""Pydantic models for editor state snapshots."""

from __future__ import annotations

from typing import Annotated, Union

from pydantic import BaseModel, ConfigDict, Field

# ints stay ints so snapshots serialize as -1/0/1
Level = Union[
    Annotated[int, Field(ge=-1, le=1)],
    Annotated[float, Field(ge=-1, le=1)],
]


class ToneState(BaseModel):
    """Immutable snapshot of the editor: text plus the selected tone."""

    model_config = ConfigDict(frozen=True)

    text: str = ""
    formality_level: Level = 0
    friendliness_level: Level = 0

    @property
    def tone(self) -> tuple[Level, Level]:
        return (self.formality_level, self.friendliness_level)

    def with_text(self, text: str) -> ToneState:
        return self.model_copy(update={"text": text})

    def with_tone(self, formality_level: Level, friendliness_level: Level) -> ToneState:
        return self.model_copy(
            update={
                "formality_level": formality_level,
                "friendliness_level": friendliness_level,
            }
        )
