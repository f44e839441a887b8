"""
Tests for the job description status workflow.
"""

from unittest.mock import Mock

import pytest

from conftest import make_actor, make_job_data
from jobdesk.core.errors import (
    AuthorizationError,
    EmptiedFieldError,
    InvalidTransitionError,
    NotFoundError,
    UpstreamServiceError,
    ValidationError,
)
from jobdesk.models.job import JobDescription, JobStatus
from jobdesk.services import workflow
from jobdesk.services.platform_publisher import PlatformResult


@pytest.fixture
def publisher():
    return Mock()


@pytest.fixture
def pending_job(db_session, assistant_actor):
    return workflow.create_job(db_session, make_job_data(), assistant_actor)


@pytest.fixture
def approved_job(db_session, pending_job, manager_actor):
    return workflow.approve_job(db_session, pending_job.id, manager_actor)


@pytest.fixture
def formatted_job(db_session, approved_job, assistant_actor):
    return workflow.format_job(db_session, approved_job.id, assistant_actor)


class TestTransitionTable:

    def test_forward_path(self):
        assert workflow.next_status(JobStatus.PENDING_FOR_APPROVAL, workflow.Action.APPROVE) is JobStatus.APPROVED
        assert workflow.next_status(JobStatus.APPROVED, workflow.Action.FORMAT) is JobStatus.FORMATTED
        assert workflow.next_status(JobStatus.FORMATTED, workflow.Action.PUBLISH) is JobStatus.PUBLISHED

    def test_edit_is_a_self_loop(self):
        assert workflow.next_status(JobStatus.PENDING_FOR_APPROVAL, workflow.Action.EDIT) is JobStatus.PENDING_FOR_APPROVAL
        assert workflow.next_status(JobStatus.PUBLISHED, workflow.Action.EDIT) is JobStatus.PUBLISHED

    @pytest.mark.parametrize("status,action", [
        (JobStatus.APPROVED, workflow.Action.APPROVE),
        (JobStatus.PENDING_FOR_APPROVAL, workflow.Action.FORMAT),
        (JobStatus.APPROVED, workflow.Action.PUBLISH),
        (JobStatus.PUBLISHED, workflow.Action.APPROVE),
        (JobStatus.APPROVED, workflow.Action.EDIT),
        (JobStatus.FORMATTED, workflow.Action.EDIT),
    ])
    def test_other_pairs_rejected(self, status, action):
        with pytest.raises(InvalidTransitionError) as exc_info:
            workflow.next_status(status, action)
        assert exc_info.value.extra["currentStatus"] == status.value


class TestCreate:

    def test_new_job_is_pending(self, db_session, assistant_actor):
        job = workflow.create_job(db_session, make_job_data(status="Published"), assistant_actor)
        assert job.status == JobStatus.PENDING_FOR_APPROVAL.value
        assert len(job.id) == 24
        assert job.keyResponsibilities == []
        assert job.additionalFields == {}

    def test_blank_required_field_rejected(self, db_session, assistant_actor):
        with pytest.raises(ValidationError) as exc_info:
            workflow.create_job(db_session, make_job_data(aboutCompany="   "), assistant_actor)
        assert exc_info.value.field == "aboutCompany"
        assert db_session.query(JobDescription).count() == 0

    def test_unknown_role_cannot_create(self, db_session):
        with pytest.raises(AuthorizationError):
            workflow.create_job(db_session, make_job_data(), make_actor("Guest"))

    def test_list_items_are_trimmed(self, db_session, assistant_actor):
        job = workflow.create_job(
            db_session,
            make_job_data(requiredSkills=[" Python ", "", "  ", "SQL"]),
            assistant_actor,
        )
        assert job.requiredSkills == ["Python", "SQL"]


class TestEdit:

    def test_only_sent_fields_change(self, db_session, pending_job, assistant_actor):
        job = workflow.edit_job(db_session, pending_job.id, {"location": "Kandy"}, assistant_actor)
        assert job.location == "Kandy"
        assert job.jobTitle == "Backend Engineer"

    def test_status_in_payload_ignored(self, db_session, pending_job, assistant_actor):
        job = workflow.edit_job(db_session, pending_job.id, {"status": "Published"}, assistant_actor)
        assert job.status == JobStatus.PENDING_FOR_APPROVAL.value

    def test_emptying_field_rejected(self, db_session, pending_job, assistant_actor):
        with pytest.raises(EmptiedFieldError) as exc_info:
            workflow.edit_job(
                db_session, pending_job.id,
                {"positionSummary": "", "location": "Kandy"},
                assistant_actor,
            )
        assert "positionSummary" in exc_info.value.field_warnings
        db_session.refresh(pending_job)
        assert pending_job.positionSummary == "Own the services behind our job board."
        assert pending_job.location == "Colombo"

    def test_emptying_custom_field_rejected(self, db_session, assistant_actor):
        job = workflow.create_job(
            db_session, make_job_data(additionalFields={"Custom Note": "abc"}), assistant_actor
        )
        with pytest.raises(EmptiedFieldError) as exc_info:
            workflow.edit_job(db_session, job.id, {"additionalFields": {"Custom Note": " "}}, assistant_actor)
        assert "additionalFields.Custom Note" in exc_info.value.field_warnings

    def test_empty_custom_map_means_unchanged(self, db_session, assistant_actor):
        job = workflow.create_job(
            db_session, make_job_data(additionalFields={"Custom Note": "abc"}), assistant_actor
        )
        job = workflow.edit_job(db_session, job.id, {"additionalFields": {}}, assistant_actor)
        assert job.additionalFields == {"Custom Note": "abc"}

    def test_custom_fields_round_trip(self, db_session, assistant_actor):
        fields = {"Custom Note": "abc", "Shift": "Nights"}
        job = workflow.create_job(db_session, make_job_data(additionalFields=fields), assistant_actor)
        job = workflow.edit_job(db_session, job.id, {"additionalFields": dict(job.additionalFields)}, assistant_actor)
        assert job.additionalFields == fields
        assert list(job.additionalFields) == ["Custom Note", "Shift"]

    def test_approved_job_not_editable(self, db_session, approved_job, assistant_actor):
        with pytest.raises(InvalidTransitionError):
            workflow.edit_job(db_session, approved_job.id, {"location": "Kandy"}, assistant_actor)

    def test_invalid_id(self, db_session, assistant_actor):
        with pytest.raises(ValidationError):
            workflow.edit_job(db_session, "not-an-id", {"location": "Kandy"}, assistant_actor)

    def test_unknown_id(self, db_session, assistant_actor):
        with pytest.raises(NotFoundError):
            workflow.edit_job(db_session, "f" * 24, {"location": "Kandy"}, assistant_actor)


class TestApprove:

    def test_manager_approves(self, db_session, pending_job, manager_actor):
        job = workflow.approve_job(db_session, pending_job.id, manager_actor, "  Looks good ")
        assert job.status == JobStatus.APPROVED.value
        assert job.approvalComments == "Looks good"

    def test_assistant_denied_before_any_write(self, db_session, pending_job, assistant_actor):
        with pytest.raises(AuthorizationError):
            workflow.approve_job(db_session, pending_job.id, assistant_actor)
        db_session.refresh(pending_job)
        assert pending_job.status == JobStatus.PENDING_FOR_APPROVAL.value

    def test_approving_twice_rejected(self, db_session, approved_job, manager_actor):
        with pytest.raises(InvalidTransitionError):
            workflow.approve_job(db_session, approved_job.id, manager_actor)
        db_session.refresh(approved_job)
        assert approved_job.status == JobStatus.APPROVED.value

    def test_empty_required_field_blocks_approval(self, db_session, pending_job, manager_actor):
        pending_job.department = ""
        db_session.commit()
        with pytest.raises(ValidationError):
            workflow.approve_job(db_session, pending_job.id, manager_actor)


class TestFormat:

    def test_generated_snapshot(self, formatted_job):
        assert formatted_job.status == JobStatus.FORMATTED.value
        assert "<h1>Backend Engineer</h1>" in formatted_job.formattedContent

    def test_supplied_content_kept(self, db_session, approved_job, assistant_actor):
        job = workflow.format_job(db_session, approved_job.id, assistant_actor, "<p>Custom</p>")
        assert job.formattedContent == "<p>Custom</p>"

    def test_pending_job_cannot_be_formatted(self, db_session, pending_job, assistant_actor):
        with pytest.raises(InvalidTransitionError):
            workflow.format_job(db_session, pending_job.id, assistant_actor)


class TestPublish:

    def test_local_publish(self, db_session, formatted_job, assistant_actor, publisher):
        job, results = workflow.publish_job(db_session, formatted_job.id, assistant_actor, [], publisher)
        assert job.status == JobStatus.PUBLISHED.value
        assert results == []
        publisher.publish.assert_not_called()

    def test_partial_success_publishes(self, db_session, formatted_job, assistant_actor, publisher):
        publisher.publish.return_value = [
            PlatformResult("linkedin", True, "Posted to linkedin", "urn:1"),
            PlatformResult("indeed", False, "indeed is not configured"),
        ]
        job, results = workflow.publish_job(
            db_session, formatted_job.id, assistant_actor, ["LinkedIn", "indeed"], publisher
        )
        publisher.publish.assert_called_once()
        assert publisher.publish.call_args[0][1] == ["linkedin", "indeed"]
        assert job.status == JobStatus.PUBLISHED.value
        assert job.publishedPlatforms["linkedin"]["status"] == "published"
        assert job.publishedPlatforms["linkedin"]["externalId"] == "urn:1"
        assert job.publishedPlatforms["indeed"]["status"] == "failed"

    def test_all_platforms_failing_keeps_status(self, db_session, formatted_job, assistant_actor, publisher):
        publisher.publish.return_value = [PlatformResult("linkedin", False, "linkedin responded with HTTP 500")]
        with pytest.raises(UpstreamServiceError) as exc_info:
            workflow.publish_job(db_session, formatted_job.id, assistant_actor, ["linkedin"], publisher)
        assert exc_info.value.extra["platforms"][0]["platform"] == "linkedin"
        db_session.refresh(formatted_job)
        assert formatted_job.status == JobStatus.FORMATTED.value
        assert formatted_job.publishedPlatforms == {}

    def test_unknown_platform_rejected(self, db_session, formatted_job, assistant_actor, publisher):
        with pytest.raises(ValidationError):
            workflow.publish_job(db_session, formatted_job.id, assistant_actor, ["myspace"], publisher)

    def test_requires_formatted(self, db_session, approved_job, assistant_actor, publisher):
        with pytest.raises(InvalidTransitionError):
            workflow.publish_job(db_session, approved_job.id, assistant_actor, [], publisher)

    def test_published_job_still_editable(self, db_session, formatted_job, assistant_actor, publisher):
        workflow.publish_job(db_session, formatted_job.id, assistant_actor, [], publisher)
        job = workflow.edit_job(db_session, formatted_job.id, {"compensation": "Competitive"}, assistant_actor)
        assert job.status == JobStatus.PUBLISHED.value
        assert job.compensation == "Competitive"

    def test_published_edit_refreshes_posting(self, db_session, formatted_job, assistant_actor, publisher):
        workflow.publish_job(db_session, formatted_job.id, assistant_actor, [], publisher)
        job = workflow.edit_job(db_session, formatted_job.id, {"jobTitle": "Staff Engineer"}, assistant_actor)
        assert "<h1>Staff Engineer</h1>" in job.formattedContent

    def test_pending_edit_leaves_posting_alone(self, db_session, pending_job, assistant_actor):
        before = pending_job.formattedContent
        job = workflow.edit_job(db_session, pending_job.id, {"jobTitle": "Staff Engineer"}, assistant_actor)
        assert job.formattedContent == before


class TestChangeStatus:

    def test_dispatches_to_approve(self, db_session, pending_job, manager_actor, publisher):
        job, results = workflow.change_status(
            db_session, pending_job.id, "Approved", manager_actor, publisher, approval_comments="ok"
        )
        assert job.status == JobStatus.APPROVED.value
        assert job.approvalComments == "ok"
        assert results == []

    def test_unknown_status_rejected(self, db_session, pending_job, manager_actor, publisher):
        with pytest.raises(ValidationError):
            workflow.change_status(db_session, pending_job.id, "Archived", manager_actor, publisher)

    def test_missing_status_rejected(self, db_session, pending_job, manager_actor, publisher):
        with pytest.raises(ValidationError):
            workflow.change_status(db_session, pending_job.id, None, manager_actor, publisher)

    def test_pending_is_noop_for_pending_job(self, db_session, pending_job, assistant_actor, publisher):
        job, _ = workflow.change_status(
            db_session, pending_job.id, "Pending for Approval", assistant_actor, publisher
        )
        assert job.status == JobStatus.PENDING_FOR_APPROVAL.value

    def test_no_backward_move(self, db_session, approved_job, manager_actor, publisher):
        with pytest.raises(InvalidTransitionError):
            workflow.change_status(db_session, approved_job.id, "Pending for Approval", manager_actor, publisher)


class TestSearch:

    @pytest.fixture
    def jobs(self, db_session, assistant_actor, manager_actor, publisher):
        pending = workflow.create_job(db_session, make_job_data(jobTitle="Data Analyst"), assistant_actor)
        approved = workflow.create_job(db_session, make_job_data(jobTitle="Data Engineer"), assistant_actor)
        workflow.approve_job(db_session, approved.id, manager_actor)
        published = workflow.create_job(db_session, make_job_data(jobTitle="Data Scientist"), assistant_actor)
        workflow.approve_job(db_session, published.id, manager_actor)
        workflow.format_job(db_session, published.id, assistant_actor)
        workflow.publish_job(db_session, published.id, assistant_actor, [], publisher)
        return pending, approved, published

    def test_search_for_update_includes_published(self, db_session, jobs):
        found = workflow.search_for_update(db_session, {"jobTitle": "data"})
        assert {job.jobTitle for job in found} == {"Data Analyst", "Data Engineer", "Data Scientist"}

    def test_search_for_update_status_is_exact(self, db_session, jobs):
        assert workflow.search_for_update(db_session, {"status": "Approv"}) == []
        found = workflow.search_for_update(db_session, {"status": "Approved"})
        assert [job.jobTitle for job in found] == ["Data Engineer"]

    def test_in_process_excludes_published(self, db_session, jobs):
        found, pagination = workflow.search_in_process(db_session, {"jobTitle": "DATA"})
        assert {job.jobTitle for job in found} == {"Data Analyst", "Data Engineer"}
        assert pagination["total"] == 2

    def test_in_process_status_is_substring(self, db_session, jobs):
        found, _ = workflow.search_in_process(db_session, {"status": "approv"})
        assert {job.jobTitle for job in found} == {"Data Analyst", "Data Engineer"}

    def test_in_process_pagination(self, db_session, jobs):
        found, pagination = workflow.search_in_process(db_session, {"page": 2, "limit": 1})
        assert len(found) == 1
        assert pagination == {"total": 2, "page": 2, "totalPages": 2, "hasMore": False}

    def test_wildcards_are_literal(self, db_session, jobs):
        assert workflow.search_for_update(db_session, {"jobTitle": "%"}) == []
