from fastapi import APIRouter
from jobdesk.api.routes import ai, auth, compatibility, jobs, users

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(jobs.router)
api_router.include_router(ai.router)
api_router.include_router(compatibility.router)
