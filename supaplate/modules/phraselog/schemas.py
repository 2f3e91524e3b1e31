from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from uuid import UUID


class SceneRequest(BaseModel):
    intention: str = Field(min_length=1)
    context: str = Field(min_length=1)
    to_who: str = Field(min_length=1)
    nuances: Optional[List[str]] = None

    @field_validator("intention", "context", "to_who", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("nuances", mode="before")
    @classmethod
    def split_nuances(cls, v):
        """Accept repeated fields and comma separated values; blanks are dropped."""
        if v is None:
            return None
        values = [v] if isinstance(v, str) else list(v)
        nuances = [part.strip() for value in values for part in str(value).split(",")]
        nuances = [n for n in nuances if n]
        return nuances or None


class Coaching(BaseModel):
    explanation: str
    cultural_context: str
    strategic_advice: str


class Example(BaseModel):
    en: str
    ko: str


class Expression(BaseModel):
    expression: str = Field(min_length=1)
    coaching: Coaching
    example: Optional[Example] = None


class SavePhraseRequest(Expression):
    model_config = ConfigDict(populate_by_name=True)

    scene_id: UUID = Field(alias="sceneId")


class BatchSaveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    scene_id: UUID = Field(alias="sceneId")
    expressions: List[Expression] = Field(min_length=1)


class BatchSaveResponse(BaseModel):
    saved: int
    failed: int


class MasteredRequest(BaseModel):
    is_mastered: bool
