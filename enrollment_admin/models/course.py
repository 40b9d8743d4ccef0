"""Pydantic models for the course catalog."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class LearningPoint(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    title: str = ""
    description: str = ""
    subtopic_title: str = ""
    subtopic_points: List[str] = Field(default_factory=lambda: [""])

    @field_validator("subtopic_points")
    @classmethod
    def validate_subtopic_points(cls, v):
        # The editor always keeps at least one (possibly blank) bullet
        if not v:
            raise ValueError("at least one subtopic point is required")
        return v


class CourseIn(BaseModel):
    """Editable course fields, as submitted by the course form."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = ""
    age_range: str = ""
    thumbnail_url: str = ""
    short_description: str = ""
    what_you_will_learn: List[LearningPoint] = Field(default_factory=list)
    learning_outcomes: str = ""
    duration: str = ""
    schedule: str = ""
    session_length: str = ""
    prerequisites: str = ""

    def to_store(self) -> dict:
        """camelCase payload for the store, without server-stamped fields."""
        return self.model_dump(by_alias=True)


class Course(CourseIn):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    created_at: Optional[int] = None
    updated_at: Optional[int] = None

    def learning_outcome_lines(self) -> List[str]:
        return [line.strip() for line in self.learning_outcomes.splitlines() if line.strip()]
