"""
Job Description Workflow

Pending for Approval -> Approved -> Formatted -> Published

Every operation checks the caller's capability first, then the job id,
then whether the job's current status allows the action. Nothing is
written until all of those pass.
"""
import enum
import logging
import math
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from jobdesk.core.database import is_valid_id
from jobdesk.core.errors import (
    EmptiedFieldError, InvalidTransitionError, NotFoundError,
    UpstreamServiceError, ValidationError
)
from jobdesk.core.permissions import Capability
from jobdesk.core.security import TokenClaims
from jobdesk.models.job import (
    CONTENT_FIELDS, IN_PROCESS_STATUSES, LIST_FIELDS, REQUIRED_FIELDS,
    JobDescription, JobStatus
)
from jobdesk.services.formatter import render_job_html
from jobdesk.services.platform_publisher import (
    SUPPORTED_PLATFORMS, PlatformPublisher, PlatformResult
)
from jobdesk.services.users import require_capability

logger = logging.getLogger(__name__)


class Action(str, enum.Enum):
    EDIT = "edit"
    APPROVE = "approve"
    FORMAT = "format"
    PUBLISH = "publish"


# action -> {from status: to status}
TRANSITIONS: Dict[Action, Dict[JobStatus, JobStatus]] = {
    Action.EDIT: {
        JobStatus.PENDING_FOR_APPROVAL: JobStatus.PENDING_FOR_APPROVAL,
        JobStatus.PUBLISHED: JobStatus.PUBLISHED,
    },
    Action.APPROVE: {JobStatus.PENDING_FOR_APPROVAL: JobStatus.APPROVED},
    Action.FORMAT: {JobStatus.APPROVED: JobStatus.FORMATTED},
    Action.PUBLISH: {JobStatus.FORMATTED: JobStatus.PUBLISHED},
}

ACTION_CAPABILITY: Dict[Action, Capability] = {
    Action.EDIT: Capability.CREATE_JOBS,
    Action.APPROVE: Capability.APPROVE_JOBS,
    Action.FORMAT: Capability.FORMAT_JOBS,
    Action.PUBLISH: Capability.PUBLISH_JOBS,
}


def next_status(current: JobStatus, action: Action) -> JobStatus:
    allowed = TRANSITIONS[action]
    if current not in allowed:
        raise InvalidTransitionError(
            f"Cannot {action.value} a job whose status is '{current.value}'",
            extra={"currentStatus": current.value},
        )
    return allowed[current]


def _has_content(value) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple)):
        return any(_has_content(item) for item in value)
    if isinstance(value, dict):
        return any(_has_content(item) for item in value.values())
    return True


def _normalize(data: Dict) -> Dict:
    """Trim text, drop blank list items; custom fields are kept verbatim"""
    cleaned = {}
    for field, value in data.items():
        if field not in CONTENT_FIELDS:
            continue
        if field in LIST_FIELDS:
            cleaned[field] = [item.strip() for item in value or [] if item and item.strip()]
        elif field == "additionalFields":
            cleaned[field] = dict(value) if value is not None else None
        elif isinstance(value, str):
            cleaned[field] = value.strip()
        else:
            cleaned[field] = value
    return cleaned


def find_emptied_fields(job: JobDescription, changes: Dict) -> Dict[str, str]:
    """
    Fields that currently hold content but would be saved empty.
    Each field, and each custom field label, is checked on its own.
    """
    warnings = {}
    for field, new_value in changes.items():
        if field == "additionalFields":
            current_fields = job.additionalFields or {}
            for label, value in (new_value or {}).items():
                if _has_content(current_fields.get(label)) and not _has_content(value):
                    warnings[f"additionalFields.{label}"] = (
                        f"'{label}' already has content and cannot be saved empty"
                    )
            continue
        if _has_content(getattr(job, field)) and not _has_content(new_value):
            warnings[field] = f"{field} already has content and cannot be saved empty"
    return warnings


def get_job(db: Session, job_id: str) -> JobDescription:
    if not is_valid_id(job_id):
        raise ValidationError("Invalid job ID format", field="id")
    job = db.query(JobDescription).filter(JobDescription.id == job_id).first()
    if not job:
        raise NotFoundError("Job not found")
    return job


def list_jobs(db: Session) -> List[JobDescription]:
    return db.query(JobDescription).order_by(JobDescription.createdAt.desc()).all()


def create_job(db: Session, data: Dict, actor: TokenClaims) -> JobDescription:
    """Create a job; it always starts in Pending for Approval"""
    require_capability(actor, Capability.CREATE_JOBS)
    content = _normalize(data)

    for field in REQUIRED_FIELDS:
        if not _has_content(content.get(field)):
            raise ValidationError(f"Missing required field: {field}", field=field)

    for field in LIST_FIELDS:
        content.setdefault(field, [])
    if content.get("additionalFields") is None:
        content["additionalFields"] = {}

    job = JobDescription(**content)
    job.status = JobStatus.PENDING_FOR_APPROVAL.value
    job.publishedPlatforms = {}
    db.add(job)
    db.commit()
    db.refresh(job)

    logger.info("Job description created", extra={"job_id": job.id, "user_id": actor.id})
    return job


def edit_job(db: Session, job_id: str, data: Dict, actor: TokenClaims) -> JobDescription:
    """
    Edit content of a pending or published job. Status is never changed
    here; only fields present in ``data`` are touched.
    """
    require_capability(actor, ACTION_CAPABILITY[Action.EDIT])
    job = get_job(db, job_id)
    next_status(job.job_status, Action.EDIT)

    changes = _normalize(data)
    if "additionalFields" in changes:
        incoming = changes["additionalFields"]
        # An empty map means "unchanged" when the job already has custom fields
        if incoming is None or (not incoming and job.additionalFields):
            del changes["additionalFields"]

    warnings = find_emptied_fields(job, changes)
    if warnings:
        logger.info("Edit rejected, fields would be emptied", extra={"job_id": job.id, "fields": list(warnings)})
        raise EmptiedFieldError(warnings)

    for field, value in changes.items():
        setattr(job, field, value)
    if job.job_status is JobStatus.PUBLISHED:
        # Published postings show the edited content
        job.formattedContent = render_job_html(job)
    db.commit()
    db.refresh(job)

    logger.info("Job description updated", extra={"job_id": job.id, "user_id": actor.id})
    return job


def approve_job(
    db: Session,
    job_id: str,
    actor: TokenClaims,
    approval_comments: Optional[str] = None,
) -> JobDescription:
    require_capability(actor, ACTION_CAPABILITY[Action.APPROVE])
    job = get_job(db, job_id)
    target = next_status(job.job_status, Action.APPROVE)

    empty = [field for field in REQUIRED_FIELDS if not _has_content(getattr(job, field))]
    if empty:
        raise ValidationError(
            f"Cannot approve, required fields are empty: {', '.join(empty)}",
            field=empty[0],
        )

    job.status = target.value
    if approval_comments is not None and approval_comments.strip():
        job.approvalComments = approval_comments.strip()
    db.commit()
    db.refresh(job)

    logger.info("Job description approved", extra={"job_id": job.id, "user_id": actor.id})
    return job


def format_job(
    db: Session,
    job_id: str,
    actor: TokenClaims,
    formatted_content: Optional[str] = None,
) -> JobDescription:
    """Store the formatted posting; generated from the job when none is supplied"""
    require_capability(actor, ACTION_CAPABILITY[Action.FORMAT])
    job = get_job(db, job_id)
    target = next_status(job.job_status, Action.FORMAT)

    if formatted_content and formatted_content.strip():
        job.formattedContent = formatted_content.strip()
    else:
        job.formattedContent = render_job_html(job)
    job.status = target.value
    db.commit()
    db.refresh(job)

    logger.info("Job description formatted", extra={"job_id": job.id, "user_id": actor.id})
    return job


def _normalize_platforms(platforms: Optional[List[str]]) -> List[str]:
    selected = []
    for name in platforms or []:
        key = (name or "").strip().lower()
        if key not in SUPPORTED_PLATFORMS:
            raise ValidationError(f"Unsupported platform: {name}", field="platforms")
        if key not in selected:
            selected.append(key)
    return selected


def publish_job(
    db: Session,
    job_id: str,
    actor: TokenClaims,
    platforms: Optional[List[str]],
    publisher: PlatformPublisher,
) -> Tuple[JobDescription, List[PlatformResult]]:
    """
    Publish a formatted job.

    With platforms selected, the job becomes Published once at least one
    post succeeds; every attempt is recorded in publishedPlatforms. When all
    posts fail nothing is written and UpstreamServiceError carries the
    per-platform results. With no platform the job is published locally.
    """
    require_capability(actor, ACTION_CAPABILITY[Action.PUBLISH])
    selected = _normalize_platforms(platforms)
    job = get_job(db, job_id)
    target = next_status(job.job_status, Action.PUBLISH)

    results = publisher.publish(job, selected) if selected else []
    if selected and not any(result.success for result in results):
        logger.error("Publishing failed on every platform", extra={"job_id": job.id, "platforms": selected})
        raise UpstreamServiceError(
            "Failed to publish to any of the selected platforms",
            extra={"platforms": [result.to_dict() for result in results]},
        )

    posted_at = datetime.utcnow().isoformat()
    records = dict(job.publishedPlatforms or {})
    for result in results:
        records[result.platform] = {
            "status": "published" if result.success else "failed",
            "externalId": result.externalId,
            "message": result.message,
            "postedAt": posted_at,
        }
    job.publishedPlatforms = records
    job.status = target.value
    db.commit()
    db.refresh(job)

    failed = [result.platform for result in results if not result.success]
    logger.info(
        "Job description published",
        extra={"job_id": job.id, "user_id": actor.id, "failed_platforms": failed},
    )
    return job, results


def change_status(
    db: Session,
    job_id: str,
    status: Optional[str],
    actor: TokenClaims,
    publisher: PlatformPublisher,
    approval_comments: Optional[str] = None,
    formatted_content: Optional[str] = None,
    platforms: Optional[List[str]] = None,
) -> Tuple[JobDescription, List[PlatformResult]]:
    """Move a job to ``status`` through the matching transition"""
    try:
        target = JobStatus(status)
    except ValueError:
        raise ValidationError(f"Invalid status: {status}", field="status")

    if target is JobStatus.APPROVED:
        return approve_job(db, job_id, actor, approval_comments), []
    if target is JobStatus.FORMATTED:
        return format_job(db, job_id, actor, formatted_content), []
    if target is JobStatus.PUBLISHED:
        return publish_job(db, job_id, actor, platforms, publisher)

    # Pending for Approval is only reachable as the editing self-loop
    require_capability(actor, ACTION_CAPABILITY[Action.EDIT])
    job = get_job(db, job_id)
    if job.job_status is not JobStatus.PENDING_FOR_APPROVAL:
        raise InvalidTransitionError(
            f"Cannot move a job from '{job.status}' back to '{target.value}'",
            extra={"currentStatus": job.status},
        )
    return job, []


def _contains(column, term: str):
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return column.ilike(f"%{escaped}%", escape="\\")


def search_for_update(db: Session, filters: Dict) -> List[JobDescription]:
    """Partial, case-insensitive text filters; exact status; all statuses included"""
    query = db.query(JobDescription)
    for field in ("jobTitle", "department", "location", "jobType"):
        term = (filters.get(field) or "").strip()
        if term:
            query = query.filter(_contains(getattr(JobDescription, field), term))
    status = (filters.get("status") or "").strip()
    if status:
        query = query.filter(JobDescription.status == status)
    return query.order_by(JobDescription.createdAt.desc()).all()


def search_in_process(db: Session, filters: Dict) -> Tuple[List[JobDescription], Dict]:
    """
    Jobs not yet published. Unlike search_for_update, status is matched
    as a case-insensitive substring.
    """
    page = max(int(filters.get("page") or 1), 1)
    limit = max(int(filters.get("limit") or 10), 1)

    query = db.query(JobDescription).filter(JobDescription.status.in_(IN_PROCESS_STATUSES))
    for field in ("jobTitle", "department", "location", "status"):
        term = (filters.get(field) or "").strip()
        if term:
            query = query.filter(_contains(getattr(JobDescription, field), term))

    total = query.count()
    jobs = (
        query.order_by(JobDescription.createdAt.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    pagination = {
        "total": total,
        "page": page,
        "totalPages": math.ceil(total / limit),
        "hasMore": page * limit < total,
    }
    return jobs, pagination
