from jobdesk.schemas.job import (
    JobCreate, JobUpdate, JobResponse, JobListResponse, JobSummary,
    JobSearchFilters, JobSearchResponse, InProcessFilters, InProcessResponse,
    StatusChangeRequest, FormatRequest, PublishRequest, PublishResponse
)
from jobdesk.schemas.bias import BiasAnalysisRequest, BiasAnalysisResponse, BiasFinding
from jobdesk.schemas.ai import AutoCompleteRequest, AutoCompleteResponse, AutoCompleteResult
from jobdesk.schemas.user import (
    LoginRequest, LoginResponse, UserCreate, UserResponse, UserListResponse,
    UserCreatedResponse, CurrentUserResponse, UserDeletedResponse
)
