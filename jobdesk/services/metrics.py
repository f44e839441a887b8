"""
Dashboard metrics: status counts, department/location distribution, trends
"""
import logging
from collections import Counter, OrderedDict
from datetime import datetime
from typing import Dict, List, Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy import func
from sqlalchemy.orm import Session

from jobdesk.models.job import JobDescription, JobStatus

logger = logging.getLogger(__name__)

TIME_RANGES = {
    "1month": relativedelta(months=1),
    "3months": relativedelta(months=3),
    "6months": relativedelta(months=6),
    "1year": relativedelta(years=1),
}
DEFAULT_TIME_RANGE = "6months"
TOP_N = 10


def _prefer_capitalized(current: str, candidate: str) -> str:
    """Keep the first spelling unless a later one starts with a capital and it does not"""
    if candidate[:1].isupper() and not current[:1].isupper():
        return candidate
    return current


def distribution(values: List[Optional[str]], limit: int = TOP_N) -> List[Dict]:
    """Group names ignoring case and surrounding whitespace"""
    counts: Counter = Counter()
    names: "OrderedDict[str, str]" = OrderedDict()
    for raw in values:
        if raw is None:
            continue
        name = raw.strip()
        key = name.lower()
        counts[key] += 1
        names[key] = _prefer_capitalized(names[key], name) if key in names else name

    ranked = sorted(counts.items(), key=lambda item: -item[1])[:limit]
    return [{"name": names[key], "value": count} for key, count in ranked]


def job_metrics(db: Session) -> Dict:
    status_counts = dict(
        db.query(JobDescription.status, func.count(JobDescription.id))
        .group_by(JobDescription.status)
        .all()
    )
    departments = [row[0] for row in db.query(JobDescription.department).all()]
    locations = [row[0] for row in db.query(JobDescription.location).all()]

    return {
        "totalJobs": sum(status_counts.values()),
        "pendingApproval": status_counts.get(JobStatus.PENDING_FOR_APPROVAL.value, 0),
        "approved": status_counts.get(JobStatus.APPROVED.value, 0),
        "formatted": status_counts.get(JobStatus.FORMATTED.value, 0),
        "published": status_counts.get(JobStatus.PUBLISHED.value, 0),
        "byDepartment": distribution(departments),
        "byLocation": distribution(locations),
    }


def job_trends(db: Session, time_range: str = DEFAULT_TIME_RANGE, now: Optional[datetime] = None) -> Dict:
    """
    Jobs created per month and status of jobs updated per month.
    A blank or unrecognised range falls back to the default window.
    """
    if time_range not in TIME_RANGES:
        logger.info("Unknown trends range, using default", extra={"time_range": time_range})
        time_range = DEFAULT_TIME_RANGE
    end = now or datetime.utcnow()
    start = end - TIME_RANGES[time_range]

    created = (
        db.query(JobDescription.createdAt)
        .filter(JobDescription.createdAt >= start, JobDescription.createdAt <= end)
        .all()
    )
    creation = Counter((row[0].year, row[0].month) for row in created)

    updated = (
        db.query(JobDescription.updatedAt, JobDescription.status)
        .filter(JobDescription.updatedAt >= start, JobDescription.updatedAt <= end)
        .all()
    )
    status_changes = Counter((row[0].year, row[0].month, row[1]) for row in updated)

    return {
        "jobCreationByMonth": [
            {"month": f"{month}/{year}", "count": count}
            for (year, month), count in sorted(creation.items())
        ],
        "statusChangesByMonth": [
            {"month": f"{month}/{year}", "status": status, "count": count}
            for (year, month, status), count in sorted(status_changes.items())
        ],
    }
