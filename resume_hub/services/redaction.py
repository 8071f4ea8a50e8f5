from typing import Optional

from resume_hub.helpers.extraction import EMAIL_RE, PHONE_RE
from resume_hub.models.models import Answer, MatchResult, ParsedFields, Viewer
from resume_hub.utils.config import PRIVILEGED_ROLES

REDACTED = "[redacted]"


def redact_pii(fields: ParsedFields) -> ParsedFields:
    """Copy of ``fields`` with email and phone cleared. Idempotent."""
    return fields.model_copy(update={"email": None, "phone": None}, deep=True)


def scrub_contact_details(text: str, fields: Optional[ParsedFields] = None) -> str:
    """Replace email addresses and phone numbers in free text.

    The document's own extracted email and phone are removed verbatim first,
    then anything else the contact patterns recognise.
    """
    if not text:
        return text or ""
    if fields is not None:
        for value in (fields.email, fields.phone):
            if value:
                text = text.replace(value, REDACTED)
    text = EMAIL_RE.sub(REDACTED, text)
    return PHONE_RE.sub(REDACTED, text)


def is_privileged(viewer: Viewer) -> bool:
    return viewer.role in PRIVILEGED_ROLES


def can_view_pii(viewer: Viewer, owner_id: str) -> bool:
    return is_privileged(viewer) or viewer.user_id == owner_id


def fields_for_viewer(fields: ParsedFields, viewer: Viewer, owner_id: str) -> ParsedFields:
    if can_view_pii(viewer, owner_id):
        return fields
    return redact_pii(fields)


def match_for_viewer(
    result: MatchResult, viewer: Viewer, owner_id: str, fields: Optional[ParsedFields] = None
) -> MatchResult:
    """Match result with email and evidence scrubbed unless the viewer may see contact details"""
    if can_view_pii(viewer, owner_id):
        return result
    return result.model_copy(update={
        "email": None,
        "evidence": [scrub_contact_details(s, fields) for s in result.evidence],
    })


def answer_for_viewer(
    answer: Answer, viewer: Viewer, owner_id: str, fields: Optional[ParsedFields] = None
) -> Answer:
    """Answer with its snippet scrubbed unless the viewer may see contact details"""
    if can_view_pii(viewer, owner_id):
        return answer
    return answer.model_copy(update={"snippet": scrub_contact_details(answer.snippet, fields)})
