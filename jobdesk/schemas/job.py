"""
Pydantic schemas for Job Description API
Field names follow the camelCase the frontend sends
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional
from datetime import datetime


class JobContent(BaseModel):
    """Editable content shared by create and update payloads"""
    model_config = ConfigDict(extra="ignore")

    # Widths match the job_descriptions columns
    jobTitle: Optional[str] = Field(default=None, max_length=200)
    department: Optional[str] = Field(default=None, max_length=100)
    location: Optional[str] = Field(default=None, max_length=100)
    jobType: Optional[str] = Field(default=None, max_length=50)
    aboutCompany: Optional[str] = None
    positionSummary: Optional[str] = None
    keyResponsibilities: Optional[List[str]] = None
    requiredSkills: Optional[List[str]] = None
    preferredSkills: Optional[List[str]] = None
    compensation: Optional[str] = None
    workEnvironment: Optional[str] = None
    diversityStatement: Optional[str] = None
    applicationInstructions: Optional[str] = None
    contactInformation: Optional[str] = None
    additionalInformation: Optional[str] = None
    additionalFields: Optional[Dict[str, str]] = None


class JobCreate(JobContent):
    """Schema for creating a job; any status sent by the client is dropped"""
    jobTitle: str = Field(..., max_length=200)
    department: str = Field(..., max_length=100)
    location: str = Field(..., max_length=100)
    jobType: str = Field(..., max_length=50)
    aboutCompany: str
    positionSummary: str


class JobUpdate(JobContent):
    """Schema for editing a job; only fields that are sent are applied"""


class JobResponse(BaseModel):
    """Full job description"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    jobTitle: str
    department: str
    location: str
    jobType: str
    status: str
    aboutCompany: str
    positionSummary: str
    keyResponsibilities: List[str] = []
    requiredSkills: List[str] = []
    preferredSkills: List[str] = []
    compensation: Optional[str] = None
    workEnvironment: Optional[str] = None
    diversityStatement: Optional[str] = None
    applicationInstructions: Optional[str] = None
    contactInformation: Optional[str] = None
    additionalInformation: Optional[str] = None
    additionalFields: Dict[str, str] = {}
    approvalComments: Optional[str] = None
    formattedContent: Optional[str] = None
    publishedPlatforms: Dict[str, dict] = {}
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class JobListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[JobResponse]


class JobSummary(BaseModel):
    """Row in search results"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    jobTitle: str
    department: str
    location: str
    jobType: Optional[str] = None
    status: str


class JobSearchFilters(BaseModel):
    """Filters for the search-for-update listing (status is matched exactly)"""
    jobTitle: Optional[str] = None
    department: Optional[str] = None
    location: Optional[str] = None
    jobType: Optional[str] = None
    status: Optional[str] = None


class JobSearchResponse(BaseModel):
    success: bool = True
    data: List[JobSummary]


class InProcessFilters(BaseModel):
    """Filters for the in-process listing (status is matched as a substring)"""
    jobTitle: Optional[str] = None
    department: Optional[str] = None
    location: Optional[str] = None
    status: Optional[str] = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)


class Pagination(BaseModel):
    total: int
    page: int
    totalPages: int
    hasMore: bool


class InProcessResponse(BaseModel):
    success: bool = True
    data: List[JobSummary]
    pagination: Pagination


class StatusChangeRequest(BaseModel):
    """Target status plus whatever the transition into it needs"""
    model_config = ConfigDict(extra="ignore")

    status: Optional[str] = None
    approvalComments: Optional[str] = None
    formattedContent: Optional[str] = None
    platforms: Optional[List[str]] = None


class FormatRequest(BaseModel):
    formattedContent: Optional[str] = None


class PublishRequest(BaseModel):
    platforms: List[str] = []


class PlatformResultResponse(BaseModel):
    platform: str
    success: bool
    message: str
    externalId: Optional[str] = None


class PublishResponse(BaseModel):
    success: bool
    job: JobResponse
    platforms: List[PlatformResultResponse] = []
    note: Optional[str] = None
