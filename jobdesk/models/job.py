"""
Job description database model
"""
from sqlalchemy import Column, String, Text, DateTime, JSON
from datetime import datetime
import enum

from jobdesk.core.database import Base, generate_id


class JobStatus(str, enum.Enum):
    PENDING_FOR_APPROVAL = "Pending for Approval"  # Initial state, editable
    APPROVED = "Approved"
    FORMATTED = "Formatted"
    PUBLISHED = "Published"


IN_PROCESS_STATUSES = (
    JobStatus.PENDING_FOR_APPROVAL.value,
    JobStatus.APPROVED.value,
    JobStatus.FORMATTED.value,
)

REQUIRED_FIELDS = (
    "jobTitle",
    "department",
    "location",
    "jobType",
    "aboutCompany",
    "positionSummary",
)

LIST_FIELDS = ("keyResponsibilities", "requiredSkills", "preferredSkills")

OPTIONAL_TEXT_FIELDS = (
    "compensation",
    "workEnvironment",
    "diversityStatement",
    "applicationInstructions",
    "contactInformation",
    "additionalInformation",
)

# Everything a caller may edit directly
CONTENT_FIELDS = REQUIRED_FIELDS + LIST_FIELDS + OPTIONAL_TEXT_FIELDS + ("additionalFields",)


def _utcnow():
    return datetime.utcnow()


class JobDescription(Base):
    __tablename__ = "job_descriptions"

    id = Column(String(24), primary_key=True, default=generate_id)
    jobTitle = Column(String(200), nullable=False, index=True)
    department = Column(String(100), nullable=False)
    location = Column(String(100), nullable=False)
    jobType = Column(String(50), nullable=False)  # Full-time, Part-time, Contract
    status = Column(String(30), nullable=False, default=JobStatus.PENDING_FOR_APPROVAL.value, index=True)

    aboutCompany = Column(Text, nullable=False)
    positionSummary = Column(Text, nullable=False)
    keyResponsibilities = Column(JSON, nullable=False, default=list)
    requiredSkills = Column(JSON, nullable=False, default=list)
    preferredSkills = Column(JSON, nullable=False, default=list)

    compensation = Column(Text)
    workEnvironment = Column(Text)
    diversityStatement = Column(Text)
    applicationInstructions = Column(Text)
    contactInformation = Column(Text)
    additionalInformation = Column(Text)

    # User-defined custom fields, label -> value
    additionalFields = Column(JSON, nullable=False, default=dict)

    approvalComments = Column(Text)
    formattedContent = Column(Text)
    # platform -> {"status", "externalId", "message", "postedAt"}
    publishedPlatforms = Column(JSON, nullable=False, default=dict)

    createdAt = Column(DateTime, default=_utcnow, nullable=False)
    updatedAt = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    @property
    def job_status(self) -> JobStatus:
        return JobStatus(self.status)

    def __repr__(self):
        return f"<JobDescription {self.jobTitle} ({self.status})>"
