"""
Tests for posting jobs to external platforms.
"""

import json

import httpx
import pytest

from conftest import make_job_data
from jobdesk.models.job import JobDescription
from jobdesk.services.platform_publisher import PlatformPublisher


@pytest.fixture
def job():
    return JobDescription(
        id="d" * 24,
        keyResponsibilities=["Ship features"],
        requiredSkills=["Python"],
        preferredSkills=[],
        **make_job_data(jobType="Contract"),
    )


@pytest.fixture
def platform_settings(settings):
    return settings.model_copy(update={
        "LINKEDIN_ACCESS_TOKEN": "li-token",
        "LINKEDIN_ORGANIZATION_ID": "1234",
        "INDEED_API_URL": "https://indeed.example.com/jobs",
        "INDEED_API_TOKEN": "in-token",
    })


def publisher_with(settings, handler):
    return PlatformPublisher(settings, transport=httpx.MockTransport(handler))


class TestPlatformPublisher:

    def test_linkedin_success(self, platform_settings, job):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, headers={"x-restli-id": "urn:li:job:1"})

        result = publisher_with(platform_settings, handler).post(job, "linkedin")

        assert result.success is True
        assert result.externalId == "urn:li:job:1"
        assert seen["url"] == "https://api.linkedin.com/v2/jobs"
        assert seen["auth"] == "Bearer li-token"
        assert seen["body"]["employmentStatus"] == "CONTRACT"
        assert seen["body"]["integrationContext"] == "urn:li:organization:1234"

    def test_indeed_id_from_body(self, platform_settings, job):
        def handler(request):
            return httpx.Response(200, json={"jobId": 99})

        result = publisher_with(platform_settings, handler).post(job, "indeed")
        assert result.success is True
        assert result.externalId == "99"

    def test_http_error_is_failed_result(self, platform_settings, job):
        def handler(request):
            return httpx.Response(500, json={"error": "boom"})

        result = publisher_with(platform_settings, handler).post(job, "indeed")
        assert result.success is False
        assert "500" in result.message

    def test_transport_error_is_failed_result(self, platform_settings, job):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        result = publisher_with(platform_settings, handler).post(job, "linkedin")
        assert result.success is False
        assert "ConnectError" in result.message

    def test_unconfigured_platform(self, settings, job):
        def handler(request):
            raise AssertionError("no request expected")

        results = publisher_with(settings, handler).publish(job, ["linkedin", "indeed"])
        assert [r.success for r in results] == [False, False]
        assert results[0].message == "linkedin is not configured"

    def test_result_dict(self, platform_settings, job):
        def handler(request):
            return httpx.Response(201, json={"id": "abc"})

        result = publisher_with(platform_settings, handler).post(job, "linkedin")
        assert result.to_dict() == {
            "platform": "linkedin",
            "success": True,
            "message": "Posted to linkedin",
            "externalId": "abc",
        }
