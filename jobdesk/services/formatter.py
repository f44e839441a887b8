"""
Formatted content snapshot for approved job descriptions
"""
from html import escape
from typing import Iterable, Optional

from jobdesk.models.job import JobDescription


def _paragraphs(text: Optional[str]) -> str:
    if not text:
        return ""
    blocks = [block.strip() for block in text.split("\n\n") if block.strip()]
    return "".join(f"<p>{escape(block).replace(chr(10), '<br>')}</p>" for block in blocks)


def _bullets(items: Iterable[str]) -> str:
    cleaned = [item.strip() for item in items or [] if item and item.strip()]
    if not cleaned:
        return ""
    return "<ul>" + "".join(f"<li>{escape(item)}</li>" for item in cleaned) + "</ul>"


def _section(title: str, body: str) -> str:
    if not body:
        return ""
    return f'<section><h2>{escape(title)}</h2>{body}</section>'


def render_job_html(job: JobDescription) -> str:
    """Build the HTML posting that gets stored as formattedContent"""
    header = (
        f"<header><h1>{escape(job.jobTitle)}</h1>"
        f'<p class="meta">{escape(job.department)} | {escape(job.location)} | {escape(job.jobType)}</p>'
        "</header>"
    )

    custom = "".join(
        _section(label, _paragraphs(value))
        for label, value in (job.additionalFields or {}).items()
        if value and value.strip()
    )

    sections = [
        _section("About the Company", _paragraphs(job.aboutCompany)),
        _section("Position Summary", _paragraphs(job.positionSummary)),
        _section("Key Responsibilities", _bullets(job.keyResponsibilities)),
        _section("Required Skills", _bullets(job.requiredSkills)),
        _section("Preferred Skills", _bullets(job.preferredSkills)),
        _section("Compensation", _paragraphs(job.compensation)),
        _section("Work Environment", _paragraphs(job.workEnvironment)),
        _section("Diversity Statement", _paragraphs(job.diversityStatement)),
        _section("Additional Information", _paragraphs(job.additionalInformation)),
        custom,
        _section(
            "How to Apply",
            _paragraphs(job.applicationInstructions) or "<p>Apply through our platform.</p>",
        ),
        _section("Contact", _paragraphs(job.contactInformation)),
    ]
    return '<article class="job-description">' + header + "".join(sections) + "</article>"


def render_plain_text(job: JobDescription) -> str:
    """Plain text body for platforms that do not accept HTML"""
    lines = [job.jobTitle, f"{job.department} | {job.location} | {job.jobType}", ""]
    lines += [job.aboutCompany, "", job.positionSummary, ""]
    for title, items in (
        ("Key Responsibilities", job.keyResponsibilities),
        ("Required Skills", job.requiredSkills),
        ("Preferred Skills", job.preferredSkills),
    ):
        if items:
            lines.append(f"{title}:")
            lines += [f"- {item}" for item in items]
            lines.append("")
    if job.applicationInstructions:
        lines += ["How to Apply:", job.applicationInstructions]
    return "\n".join(lines).strip()
