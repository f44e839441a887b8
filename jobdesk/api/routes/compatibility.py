"""
Older frontend paths, served by the same handlers as the current routes
"""
from fastapi import APIRouter

from jobdesk.api.routes import ai, jobs
from jobdesk.schemas.ai import AutoCompleteResponse
from jobdesk.schemas.bias import BiasAnalysisResponse
from jobdesk.schemas.job import InProcessResponse, JobSearchResponse, PublishResponse

router = APIRouter(tags=["Compatibility"])

router.add_api_route(
    "/search-jobs-in-process", jobs.search_in_process,
    methods=["POST"], response_model=InProcessResponse,
)
router.add_api_route(
    "/search-job-update", jobs.search_for_update,
    methods=["POST"], response_model=JobSearchResponse,
)
router.add_api_route(
    "/auto-complete-job", ai.auto_complete,
    methods=["POST"], response_model=AutoCompleteResponse,
)
router.add_api_route(
    "/job-autocomplete", ai.auto_complete,
    methods=["POST"], response_model=AutoCompleteResponse,
)
router.add_api_route(
    "/analyze-bias", jobs.analyze_bias,
    methods=["POST"], response_model=BiasAnalysisResponse,
)
router.add_api_route(
    "/job-approve/{job_id}", jobs.change_status,
    methods=["PUT"], response_model=PublishResponse,
)
