# 📦 /schemas/schemas.py

from collections import Counter
from pydantic import AliasChoices, BaseModel, Field, model_validator
from typing import List, Optional


class ApplicantProfile(BaseModel):
    id: int
    name: Optional[str] = None
    preferences: List[int] = []


class SlotProfile(BaseModel):
    id: int
    name: Optional[str] = None
    capacity: int = Field(0, ge=0)
    preferences: Optional[List[int]] = None


class MatchRequest(BaseModel):
    applicants: List[ApplicantProfile] = Field(
        default_factory=list, validation_alias=AliasChoices("applicants", "students")
    )
    slots: List[SlotProfile] = Field(
        default_factory=list, validation_alias=AliasChoices("slots", "courses")
    )

    @model_validator(mode="after")
    def check_unique_ids(self):
        for label, items in (("applicant", self.applicants), ("slot", self.slots)):
            ids = [item.id for item in items]
            duplicates = sorted(i for i, n in Counter(ids).items() if n > 1)
            if duplicates:
                raise ValueError(f"Duplicate {label} ids: {duplicates}")
        return self


class MatchPair(BaseModel):
    applicant_id: int
    slot_id: int


class MatchResponse(BaseModel):
    status: str
    algorithm: str
    is_stable: bool
    assignments: List[MatchPair]


class HealthCheckResponse(BaseModel):
    status: str
    message: str
    version: str


class ErrorResponse(BaseModel):
    status: str
    message: str
    info: Optional[str | dict] = None
