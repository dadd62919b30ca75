from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class Audience(str, Enum):
    CONFERENCE = "conference"
    INTERNAL = "internal"
    CLIENT = "client"
    INTERVIEW = "interview"
    WORKSHOP = "workshop"


class TimeConstraint(str, Enum):
    FIVE_MIN = "5min"
    FIFTEEN_MIN = "15min"
    THIRTY_MIN = "30min"
    ONE_HOUR = "1hour"


class PresentationConfig(BaseModel):
    # Wire names are camelCase; attribute access stays snake_case.
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    audience: Audience
    time_constraint: TimeConstraint = Field(..., alias="timeConstraint")
    include_qa: bool = Field(True, alias="includeQA")
    include_live_demo: bool = Field(True, alias="includeLiveDemo")

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class ShowSection(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(default="Untitled section")
    duration: str = Field(default="")
    content: str = Field(default="")
    presenter_notes: List[str] = Field(default_factory=list, alias="presenterNotes")
    key_points: List[str] = Field(default_factory=list, alias="keyPoints")


class RunOfShow(BaseModel):
    """
    Typed view over the outline returned by the normalizer. Every field has a default:
    the fallback extraction path does not guarantee every field is present.
    """
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(default="")
    overview: str = Field(default="")
    sections: List[ShowSection] = Field(default_factory=list)
    qa_predictions: Optional[List[str]] = Field(None, alias="qaPredictions")
    tech_questions: Optional[List[str]] = Field(None, alias="techQuestions")
    closing_notes: str = Field(default="", alias="closingNotes")
