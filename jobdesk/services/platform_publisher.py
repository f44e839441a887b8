"""
External Job Platform Publisher
Posts formatted job descriptions to LinkedIn and Indeed
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import httpx

from jobdesk.core.config import Settings
from jobdesk.models.job import JobDescription
from jobdesk.services.formatter import render_plain_text

logger = logging.getLogger(__name__)

SUPPORTED_PLATFORMS = ("linkedin", "indeed")

# LinkedIn employment status codes
_LINKEDIN_EMPLOYMENT = {
    "full-time": "FULL_TIME",
    "part-time": "PART_TIME",
    "contract": "CONTRACT",
    "temporary": "TEMPORARY",
    "internship": "INTERNSHIP",
    "volunteer": "VOLUNTEER",
}


@dataclass
class PlatformResult:
    platform: str
    success: bool
    message: str
    externalId: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            "platform": self.platform,
            "success": self.success,
            "message": self.message,
            "externalId": self.externalId,
        }


class PlatformPublisher:
    """
    Service that posts a job to each selected platform.
    Failures become failed PlatformResults; nothing here raises for
    network or remote errors.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.BaseTransport] = None):
        self.settings = settings
        self.timeout = settings.PLATFORM_TIMEOUT_SECONDS
        self.transport = transport

    def publish(self, job: JobDescription, platforms: List[str]) -> List[PlatformResult]:
        return [self.post(job, platform) for platform in platforms]

    def post(self, job: JobDescription, platform: str) -> PlatformResult:
        if platform == "linkedin":
            return self._post_linkedin(job)
        if platform == "indeed":
            return self._post_indeed(job)
        return PlatformResult(platform, False, f"Unsupported platform: {platform}")

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self.transport)

    def _send(self, platform: str, url: str, token: str, payload: Dict, headers: Optional[Dict] = None) -> PlatformResult:
        request_headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        request_headers.update(headers or {})
        try:
            with self._client() as client:
                response = client.post(url, json=payload, headers=request_headers)
        except httpx.HTTPError as e:
            logger.error("Platform post failed", extra={"platform": platform, "error": str(e)})
            return PlatformResult(platform, False, f"Could not reach {platform}: {e.__class__.__name__}")

        if response.status_code >= 400:
            logger.error(
                "Platform rejected job post",
                extra={"platform": platform, "status_code": response.status_code},
            )
            return PlatformResult(platform, False, f"{platform} responded with HTTP {response.status_code}")

        external_id = response.headers.get("x-restli-id")
        if not external_id:
            try:
                body = response.json()
            except ValueError:
                body = {}
            if isinstance(body, dict):
                external_id = body.get("id") or body.get("jobId")
        external_id = str(external_id) if external_id is not None else None

        logger.info("Job posted to platform", extra={"platform": platform, "external_id": external_id})
        return PlatformResult(platform, True, f"Posted to {platform}", external_id)

    def build_linkedin_payload(self, job: JobDescription) -> Dict:
        employment = _LINKEDIN_EMPLOYMENT.get((job.jobType or "").strip().lower(), "FULL_TIME")
        return {
            "companyApplyUrl": None,
            "description": render_plain_text(job),
            "employmentStatus": employment,
            "externalJobPostingId": job.id,
            "listedAt": int(job.updatedAt.timestamp() * 1000) if job.updatedAt else None,
            "jobPostingOperationType": "CREATE",
            "title": job.jobTitle,
            "location": job.location,
            "integrationContext": f"urn:li:organization:{self.settings.LINKEDIN_ORGANIZATION_ID}",
        }

    def _post_linkedin(self, job: JobDescription) -> PlatformResult:
        token = self.settings.LINKEDIN_ACCESS_TOKEN
        if not token or not self.settings.LINKEDIN_ORGANIZATION_ID:
            return PlatformResult("linkedin", False, "linkedin is not configured")
        url = f"{self.settings.LINKEDIN_API_URL.rstrip('/')}/jobs"
        return self._send(
            "linkedin",
            url,
            token,
            self.build_linkedin_payload(job),
            headers={"X-Restli-Protocol-Version": "2.0.0"},
        )

    def _post_indeed(self, job: JobDescription) -> PlatformResult:
        token = self.settings.INDEED_API_TOKEN
        if not token or not self.settings.INDEED_API_URL:
            return PlatformResult("indeed", False, "indeed is not configured")
        payload = {
            "jobId": job.id,
            "title": job.jobTitle,
            "department": job.department,
            "location": job.location,
            "jobType": job.jobType,
            "description": job.formattedContent or render_plain_text(job),
        }
        return self._send("indeed", self.settings.INDEED_API_URL, token, payload)
