"""
Pydantic schemas for AI auto-complete
"""
from pydantic import BaseModel, field_validator
from typing import List


class AutoCompleteRequest(BaseModel):
    jobTitle: str = ""


class AutoCompleteResult(BaseModel):
    """Generated content for a new job description"""
    positionSummary: str
    keyResponsibilities: List[str] = []
    requiredSkills: List[str] = []
    preferredSkills: List[str] = []

    @field_validator("keyResponsibilities", "requiredSkills", "preferredSkills", mode="before")
    @classmethod
    def split_bullets(cls, v):
        """Models sometimes return a bulleted string instead of a list"""
        if isinstance(v, str):
            lines = [line.strip().lstrip("-*• ").strip() for line in v.splitlines()]
            return [line for line in lines if line]
        return v


class AutoCompleteResponse(BaseModel):
    success: bool = True
    data: AutoCompleteResult
