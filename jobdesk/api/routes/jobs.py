"""
Job Description API Endpoints
HR Dashboard uses these to draft, approve, format and publish job descriptions
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from jobdesk.api.deps import get_bias_service, get_current_user, get_publisher
from jobdesk.core.database import get_db
from jobdesk.core.permissions import Capability
from jobdesk.core.security import TokenClaims
from jobdesk.models.job import JobStatus
from jobdesk.schemas.bias import BiasAnalysisRequest, BiasAnalysisResponse
from jobdesk.schemas.job import (
    FormatRequest, InProcessFilters, InProcessResponse, JobCreate, JobListResponse,
    JobResponse, JobSearchFilters, JobSearchResponse, JobUpdate, PublishRequest,
    PublishResponse, StatusChangeRequest
)
from jobdesk.services import metrics as metrics_service
from jobdesk.services import workflow
from jobdesk.services.bias_detection_service import BiasDetectionService
from jobdesk.services.platform_publisher import PlatformPublisher
from jobdesk.services.users import require_capability

router = APIRouter(prefix="/job-descriptions", tags=["Job Descriptions"])

LOCAL_PUBLISH_NOTE = "Published to the internal careers listing"


def _transition_response(job, results) -> dict:
    failed = [result.platform for result in results if not result.success]
    note = None
    if failed:
        note = f"Publishing failed on: {', '.join(failed)}"
    elif not results and job.status == JobStatus.PUBLISHED.value:
        note = LOCAL_PUBLISH_NOTE
    return {
        "success": True,
        "job": job,
        "platforms": [result.to_dict() for result in results],
        "note": note,
    }


# ============== DASHBOARD ENDPOINTS ==============

@router.get("", response_model=JobListResponse)
def list_jobs(
    db: Session = Depends(get_db),
    current_user: TokenClaims = Depends(get_current_user),
):
    """List every job description, newest first"""
    jobs = workflow.list_jobs(db)
    return {"success": True, "count": len(jobs), "data": jobs}


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
def create_job(
    job_data: JobCreate,
    db: Session = Depends(get_db),
    current_user: TokenClaims = Depends(get_current_user),
):
    """
    Create a new job description
    Always starts in Pending for Approval
    """
    return workflow.create_job(db, job_data.model_dump(), current_user)


@router.get("/metrics")
def get_metrics(
    db: Session = Depends(get_db),
    current_user: TokenClaims = Depends(get_current_user),
):
    """Status counts plus department and location distribution"""
    require_capability(current_user, Capability.VIEW_METRICS)
    return {"success": True, "data": metrics_service.job_metrics(db)}


@router.get("/trends")
def get_trends(
    timeRange: str = Query(default=metrics_service.DEFAULT_TIME_RANGE),
    db: Session = Depends(get_db),
    current_user: TokenClaims = Depends(get_current_user),
):
    require_capability(current_user, Capability.VIEW_METRICS)
    return {"success": True, "data": metrics_service.job_trends(db, timeRange)}


# ============== SEARCH ENDPOINTS ==============

@router.post("/search", response_model=JobSearchResponse)
def search_for_update(
    filters: JobSearchFilters,
    db: Session = Depends(get_db),
    current_user: TokenClaims = Depends(get_current_user),
):
    """Find jobs to edit, Published ones included"""
    jobs = workflow.search_for_update(db, filters.model_dump())
    return {"success": True, "data": jobs}


@router.post("/in-process", response_model=InProcessResponse)
def search_in_process(
    filters: InProcessFilters,
    db: Session = Depends(get_db),
    current_user: TokenClaims = Depends(get_current_user),
):
    """Paginated list of jobs that are not yet published"""
    jobs, pagination = workflow.search_in_process(db, filters.model_dump())
    return {"success": True, "data": jobs, "pagination": pagination}


@router.post("/analyze-bias", response_model=BiasAnalysisResponse)
def analyze_bias(
    payload: BiasAnalysisRequest,
    current_user: TokenClaims = Depends(get_current_user),
    bias_service: BiasDetectionService = Depends(get_bias_service),
):
    """
    Advisory bias check of draft text
    Falls back to local analysis when the AI service is unavailable
    """
    recommendations, note = bias_service.analyze(payload.contextFields, payload.fieldsToAnalyze)
    return {"success": True, "recommendations": recommendations, "note": note}


# ============== SINGLE JOB ENDPOINTS ==============

@router.get("/{job_id}", response_model=JobResponse)
def get_job(
    job_id: str,
    db: Session = Depends(get_db),
    current_user: TokenClaims = Depends(get_current_user),
):
    return workflow.get_job(db, job_id)


@router.put("/{job_id}", response_model=JobResponse)
def update_job(
    job_id: str,
    job_data: JobUpdate,
    db: Session = Depends(get_db),
    current_user: TokenClaims = Depends(get_current_user),
):
    """
    Edit a pending or published job
    Only the fields sent are changed; status is ignored
    """
    return workflow.edit_job(db, job_id, job_data.model_dump(exclude_unset=True), current_user)


def change_status(
    job_id: str,
    payload: StatusChangeRequest,
    db: Session = Depends(get_db),
    current_user: TokenClaims = Depends(get_current_user),
    publisher: PlatformPublisher = Depends(get_publisher),
):
    """Move a job to the requested status through its transition"""
    job, results = workflow.change_status(
        db,
        job_id,
        payload.status,
        current_user,
        publisher,
        approval_comments=payload.approvalComments,
        formatted_content=payload.formattedContent,
        platforms=payload.platforms,
    )
    return _transition_response(job, results)


router.add_api_route("/{job_id}/approve", change_status, methods=["PUT"], response_model=PublishResponse)
router.add_api_route("/{job_id}/status-approved", change_status, methods=["PATCH"], response_model=PublishResponse)


@router.post("/{job_id}/format", response_model=PublishResponse)
def format_job(
    job_id: str,
    payload: FormatRequest,
    db: Session = Depends(get_db),
    current_user: TokenClaims = Depends(get_current_user),
):
    """Store the formatted posting, generating one when none is sent"""
    job = workflow.format_job(db, job_id, current_user, payload.formattedContent)
    return _transition_response(job, [])


@router.post("/{job_id}/publish", response_model=PublishResponse)
def publish_job(
    job_id: str,
    payload: PublishRequest,
    db: Session = Depends(get_db),
    current_user: TokenClaims = Depends(get_current_user),
    publisher: PlatformPublisher = Depends(get_publisher),
):
    """Publish a formatted job to the selected platforms"""
    job, results = workflow.publish_job(db, job_id, current_user, payload.platforms, publisher)
    return _transition_response(job, results)
