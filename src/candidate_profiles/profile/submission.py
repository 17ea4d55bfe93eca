"""
Parse and validate profile submissions from the edit form.

A submission arrives as flat fields (multipart form or JSON body) where the
nested structures (address, education, workHistory, skills) are JSON-encoded
strings and job preferences use bracketed keys such as `jobPreferences[type]`.
Uploaded files have already been saved by the file store; only their
references reach this module.

Edits replace the whole profile document, except attachments: a resume or
certificate list that the submission does not mention keeps its stored value.
"""

import json
import logging
import math
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from candidate_profiles.exceptions import ValidationError
from candidate_profiles.profile.schema import (
    GENDERS,
    JOB_TYPES,
    Certificate,
    Profile,
    unique_skills,
)

logger = logging.getLogger(__name__)

MAX_CERTIFICATES = 10

REQUIRED_FIELDS = [
    ("fullName", "Full Name is required"),
    ("email", "Email is required"),
    ("jobTitle", "Job Title is required"),
]

JOB_PREFERENCE_KEYS = ["title", "type", "salary", "currency", "location"]

# Accepted in addition to ISO 8601
DATE_FORMATS = ["%m/%d/%Y", "%d.%m.%Y", "%B %d, %Y", "%b %d, %Y", "%d %B %Y"]


def parse_number(value: Any) -> Optional[float]:
    """
    Coerce a numeric-looking value to a number.

    Returns None for blank, unparsable, non-finite or negative input instead
    of raising. Whole numbers come back as int.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return int(number) if number.is_integer() else number


def parse_date(value: Any) -> Optional[date]:
    """Parse a date of birth. Invalid or blank input yields None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    logger.debug(f"Ignoring unparsable date of birth: {text!r}")
    return None


def _text(form: Mapping[str, Any], key: str) -> str:
    value = form.get(key)
    if value is None:
        return ""
    return str(value).strip()


def _api_name(part: Any) -> str:
    """Error location part as the client sent it (workHistory, not work_history)."""
    if isinstance(part, str) and "_" in part:
        return to_camel(part)
    return str(part)


def _decode_json(form: Mapping[str, Any], key: str, expected: type) -> Optional[Any]:
    """
    Decode a JSON-encoded field.

    Returns None when the field is absent or blank. Already-decoded values
    (JSON request bodies) are accepted as-is.
    """
    raw = form.get(key)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None

    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValidationError(f"{key} must be valid JSON: {e.msg}") from e

    if not isinstance(raw, expected):
        raise ValidationError(f"{key} must be a JSON {expected.__name__}")
    return raw


def _parse_skills(form: Mapping[str, Any]) -> List[str]:
    raw = form.get("skills")
    if isinstance(raw, str) and raw.strip() and not raw.strip().startswith("["):
        return unique_skills(raw.split(","))
    return unique_skills(_decode_json(form, "skills", list))


def _parse_job_preferences(form: Mapping[str, Any]) -> Dict[str, Any]:
    prefs = dict(_decode_json(form, "jobPreferences", dict) or {})
    for name in JOB_PREFERENCE_KEYS:
        key = f"jobPreferences[{name}]"
        if key in form:
            prefs[name] = form.get(key)

    job_type = prefs.get("type")
    job_type = str(job_type).strip() if job_type is not None else ""
    if job_type and job_type not in JOB_TYPES:
        raise ValidationError(
            f"Invalid jobPreferences.type value: {job_type}. Must be one of {', '.join(JOB_TYPES)}"
        )

    return {
        "title": str(prefs.get("title") or "").strip(),
        "type": job_type or None,
        "salary": parse_number(prefs.get("salary")),
        "currency": str(prefs.get("currency") or "").strip() or "USD",
        "location": str(prefs.get("location") or "").strip(),
    }


def _parse_work_history(form: Mapping[str, Any]) -> List[Dict[str, Any]]:
    entries = _decode_json(form, "workHistory", list) or []
    for entry in entries:
        if not isinstance(entry, dict):
            raise ValidationError("workHistory entries must be objects")
    return entries


def _certificates_from_json(items: Any) -> List[Certificate]:
    if not isinstance(items, list):
        raise ValidationError("education.certificates must be a list")
    certificates = []
    for item in items:
        if not isinstance(item, dict):
            raise ValidationError("education.certificates entries must be objects")
        certificates.append(
            Certificate(name=str(item.get("name") or ""), file=str(item.get("file") or ""))
        )
    return certificates


class AttachmentPatch(BaseModel):
    """
    Attachment changes carried by a submission.

    A field that was never set is "omitted" and keeps the stored value; a
    field that was set (even to "" or []) replaces it. Pydantic's
    `model_fields_set` records the difference.
    """

    resume: Optional[str] = None
    certificates: Optional[List[Certificate]] = None

    def apply(
        self, resume: str, certificates: List[Certificate]
    ) -> Tuple[str, List[Certificate]]:
        """Return the attachment values after applying this patch to the given ones."""
        if "resume" in self.model_fields_set:
            resume = self.resume or ""
        if "certificates" in self.model_fields_set:
            certificates = list(self.certificates or [])
        return resume, list(certificates)


class ProfileSubmission(BaseModel):
    """A validated submission: replaceable profile fields plus an attachment patch."""

    profile_fields: Dict[str, Any] = Field(default_factory=dict)
    attachments: AttachmentPatch = Field(default_factory=AttachmentPatch)

    def to_profile(self, owner: str, existing: Optional[Profile] = None) -> Profile:
        """
        Build the full profile document to store for `owner`.

        Args:
            owner: Owner identity
            existing: Currently stored profile, if any. Only its attachments
                (and creation timestamp) survive.

        Returns:
            Profile replacing the stored one.
        """
        if existing is not None:
            resume, certificates = existing.resume, existing.education.certificates
        else:
            resume, certificates = "", []
        resume, certificates = self.attachments.apply(resume, certificates)

        data = dict(self.profile_fields)
        education = dict(data.pop("education", {}))
        education["certificates"] = [c.model_dump() for c in certificates]

        try:
            return Profile(
                owner=owner,
                resume=resume,
                education=education,
                created_at=existing.created_at if existing else None,
                **data,
            )
        except PydanticValidationError as e:
            first = e.errors()[0]
            location = ".".join(_api_name(part) for part in first["loc"])
            raise ValidationError(f"Invalid {location}: {first['msg']}") from e


def parse_submission(
    form: Mapping[str, Any],
    resume_ref: Optional[str] = None,
    certificate_refs: Sequence[str] = (),
) -> ProfileSubmission:
    """
    Validate a profile submission.

    Args:
        form: Submitted fields (request form or JSON body).
        resume_ref: Reference of an uploaded resume file, if one was uploaded.
        certificate_refs: References of uploaded certificate files, in upload order.

    Returns:
        ProfileSubmission

    Raises:
        ValidationError: Required field missing, invalid job type or gender,
            malformed JSON structure, or too many certificates.
    """
    if form is None:
        raise ValidationError("Request body is missing or not properly parsed")

    for key, message in REQUIRED_FIELDS:
        if not _text(form, key):
            raise ValidationError(message)

    gender = _text(form, "gender")
    if gender and gender not in GENDERS:
        raise ValidationError(f"Invalid gender value: {gender}. Must be one of {', '.join(GENDERS)}")

    if len(certificate_refs) > MAX_CERTIFICATES:
        raise ValidationError(f"At most {MAX_CERTIFICATES} certificates can be uploaded")

    education = _decode_json(form, "education", dict) or {}
    address = _decode_json(form, "address", dict) or {}

    fields: Dict[str, Any] = {
        "full_name": _text(form, "fullName"),
        "email": _text(form, "email"),
        "phone_number": _text(form, "phoneNumber"),
        "nationality": _text(form, "nationality"),
        "job_title": _text(form, "jobTitle"),
        "linkedin": _text(form, "linkedin"),
        "gender": gender or None,
        "dob": parse_date(form.get("dob")),
        "experience": parse_number(form.get("experience")),
        "skills": _parse_skills(form),
        "address": {
            "city": str(address.get("city") or ""),
            "country": str(address.get("country") or ""),
        },
        "education": {
            "degree": str(education.get("degree") or ""),
            "institution": str(education.get("institution") or ""),
            "year": parse_number(education.get("year")),
        },
        "work_history": _parse_work_history(form),
        "job_preferences": _parse_job_preferences(form),
    }
    year = fields["education"]["year"]
    if year is not None:
        fields["education"]["year"] = int(year)

    patch: Dict[str, Any] = {}
    if resume_ref:
        patch["resume"] = resume_ref
    elif "resume" in form:
        patch["resume"] = _text(form, "resume")

    if certificate_refs:
        patch["certificates"] = [
            Certificate(
                name=_text(form, f"certificateNames[{index}]") or f"Certificate {index + 1}",
                file=ref,
            )
            for index, ref in enumerate(certificate_refs)
        ]
    elif "certificates" in education:
        patch["certificates"] = _certificates_from_json(education["certificates"])

    return ProfileSubmission(profile_fields=fields, attachments=AttachmentPatch(**patch))
