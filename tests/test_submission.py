"""Tests for profile submission parsing and the attachment patch."""

import json
from datetime import date

import pytest

from candidate_profiles.exceptions import ValidationError
from candidate_profiles.profile.schema import Certificate
from candidate_profiles.profile.submission import (
    AttachmentPatch,
    parse_date,
    parse_number,
    parse_submission,
)


@pytest.fixture
def form():
    """Minimal valid multipart-style submission."""
    return {
        "fullName": "Ada Lovelace",
        "email": "ada@example.com",
        "jobTitle": "Backend Engineer",
    }


class TestRequiredFields:
    """Test required field validation."""

    @pytest.mark.parametrize(
        "missing,message",
        [
            ("fullName", "Full Name is required"),
            ("email", "Email is required"),
            ("jobTitle", "Job Title is required"),
        ],
    )
    def test_missing_required_field(self, form, missing, message):
        """Test each required field is enforced."""
        del form[missing]

        with pytest.raises(ValidationError, match=message):
            parse_submission(form)

    def test_blank_required_field(self, form):
        """Test whitespace-only values count as missing."""
        form["fullName"] = "   "

        with pytest.raises(ValidationError, match="Full Name is required"):
            parse_submission(form)

    def test_minimal_submission(self, form):
        """Test a submission with only required fields builds a profile."""
        profile = parse_submission(form).to_profile("u1")

        assert profile.owner == "u1"
        assert profile.full_name == "Ada Lovelace"
        assert profile.skills == []
        assert profile.experience is None
        assert profile.job_preferences.type is None
        assert profile.job_preferences.currency == "USD"


class TestJobPreferences:
    """Test job preference parsing."""

    def test_bracketed_keys(self, form):
        """Test jobPreferences[...] form keys are collected."""
        form.update(
            {
                "jobPreferences[title]": "Staff Engineer",
                "jobPreferences[type]": "Remote",
                "jobPreferences[salary]": "120000",
                "jobPreferences[currency]": "EUR",
                "jobPreferences[location]": "Berlin",
            }
        )

        prefs = parse_submission(form).to_profile("u1").job_preferences

        assert prefs.title == "Staff Engineer"
        assert prefs.type == "Remote"
        assert prefs.salary == 120000
        assert prefs.currency == "EUR"
        assert prefs.location == "Berlin"

    def test_nested_object(self, form):
        """Test a JSON body may send jobPreferences as an object."""
        form["jobPreferences"] = {"type": "Hybrid", "salary": 90000}

        prefs = parse_submission(form).to_profile("u1").job_preferences

        assert prefs.type == "Hybrid"
        assert prefs.salary == 90000

    def test_invalid_type_rejected(self, form):
        """Test an unknown job type is a validation error."""
        form["jobPreferences[type]"] = "Part-time"

        with pytest.raises(ValidationError, match="Invalid jobPreferences.type value: Part-time"):
            parse_submission(form)

    def test_empty_type_is_unset(self, form):
        """Test an empty job type means no preference."""
        form["jobPreferences[type]"] = ""

        assert parse_submission(form).to_profile("u1").job_preferences.type is None

    def test_unparsable_salary_is_absent(self, form):
        """Test a non-numeric salary is dropped instead of raising."""
        form["jobPreferences[salary]"] = "lots"

        assert parse_submission(form).to_profile("u1").job_preferences.salary is None


class TestCoercion:
    """Test numeric, date and list coercion."""

    @pytest.mark.parametrize(
        "raw,expected",
        [("5", 5), (" 3.5 ", 3.5), (7, 7), ("", None), ("abc", None), ("-2", None), ("nan", None), (None, None)],
    )
    def test_parse_number(self, raw, expected):
        """Test numeric-looking values become numbers and the rest become None."""
        assert parse_number(raw) == expected

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("1990-04-12", date(1990, 4, 12)),
            ("1990-04-12T00:00:00.000Z", date(1990, 4, 12)),
            ("04/12/1990", date(1990, 4, 12)),
            ("not a date", None),
            ("1990-13-45", None),
            ("", None),
        ],
    )
    def test_parse_date(self, raw, expected):
        """Test valid dates parse and invalid ones become unset."""
        assert parse_date(raw) == expected

    def test_experience_and_year_coerced(self, form):
        """Test experience and education year are numbers on the profile."""
        form["experience"] = "6"
        form["education"] = json.dumps({"degree": "BSc", "year": "2015"})

        profile = parse_submission(form).to_profile("u1")

        assert profile.experience == 6
        assert profile.education.year == 2015
        assert profile.education.degree == "BSc"

    def test_unparsable_experience_is_absent(self, form):
        """Test unparsable experience is unknown, not zero."""
        form["experience"] = "a few"

        assert parse_submission(form).to_profile("u1").experience is None

    def test_invalid_dob_is_unset(self, form):
        """Test a bad date of birth does not fail the submission."""
        form["dob"] = "31/31/2000"

        assert parse_submission(form).to_profile("u1").dob is None

    def test_skills_json_deduplicated(self, form):
        """Test JSON skills are stripped and deduplicated in order."""
        form["skills"] = json.dumps(["Go", " SQL ", "Go", ""])

        assert parse_submission(form).to_profile("u1").skills == ["Go", "SQL"]

    def test_skills_comma_separated(self, form):
        """Test a comma-separated skills string is accepted."""
        form["skills"] = "Go, SQL, , Rust"

        assert parse_submission(form).to_profile("u1").skills == ["Go", "SQL", "Rust"]

    def test_address_and_work_history(self, form):
        """Test JSON-encoded address and work history are decoded."""
        form["address"] = json.dumps({"city": "London", "country": "UK"})
        form["workHistory"] = json.dumps(
            [{"company": "Analytical Engines", "jobTitle": "Programmer", "duration": "2y"}]
        )

        profile = parse_submission(form).to_profile("u1")

        assert profile.address.city == "London"
        assert profile.work_history[0].job_title == "Programmer"
        assert profile.work_history[0].achievements == ""

    def test_malformed_json_rejected(self, form):
        """Test invalid JSON in a nested field is a validation error."""
        form["education"] = "{degree: BSc"

        with pytest.raises(ValidationError, match="education must be valid JSON"):
            parse_submission(form)

    def test_wrong_json_shape_rejected(self, form):
        """Test a JSON value of the wrong type is a validation error."""
        form["workHistory"] = json.dumps({"company": "X"})

        with pytest.raises(ValidationError, match="workHistory must be a JSON list"):
            parse_submission(form)

    def test_model_errors_use_request_field_names(self, form):
        """Test nested model errors name the field the way the client sent it."""
        form["workHistory"] = json.dumps([{"company": "X", "achievements": ["led"]}])

        with pytest.raises(ValidationError, match=r"^Invalid workHistory\.0\.achievements: "):
            parse_submission(form).to_profile("u1")

    def test_invalid_gender_rejected(self, form):
        """Test gender outside the allowed values is rejected."""
        form["gender"] = "Robot"

        with pytest.raises(ValidationError, match="Invalid gender"):
            parse_submission(form)


class TestAttachmentPatch:
    """Test replace-vs-merge semantics for attachments."""

    def test_omitted_fields_keep_values(self):
        """Test an empty patch changes nothing."""
        certs = [Certificate(name="AWS", file="/uploads/aws.pdf")]

        assert AttachmentPatch().apply("/uploads/cv.pdf", certs) == ("/uploads/cv.pdf", certs)

    def test_provided_empty_clears(self):
        """Test explicitly empty values replace stored ones."""
        certs = [Certificate(name="AWS", file="/uploads/aws.pdf")]

        assert AttachmentPatch(resume="", certificates=[]).apply("/uploads/cv.pdf", certs) == ("", [])

    def test_resume_upload_sets_resume(self, form):
        """Test an uploaded resume reference is used."""
        patch = parse_submission(form, resume_ref="/uploads/1-cv.pdf").attachments

        assert patch.model_fields_set == {"resume"}
        assert patch.resume == "/uploads/1-cv.pdf"

    def test_resume_field_present_is_provided(self, form):
        """Test a resume form field counts as provided even when empty."""
        form["resume"] = ""

        assert "resume" in parse_submission(form).attachments.model_fields_set

    def test_certificate_uploads_named(self, form):
        """Test uploaded certificates take names from certificateNames[i]."""
        form["certificateNames[0]"] = "AWS Architect"

        patch = parse_submission(
            form, certificate_refs=["/uploads/1-a.pdf", "/uploads/2-b.pdf"]
        ).attachments

        assert [(c.name, c.file) for c in patch.certificates] == [
            ("AWS Architect", "/uploads/1-a.pdf"),
            ("Certificate 2", "/uploads/2-b.pdf"),
        ]

    def test_certificates_from_education_json(self, form):
        """Test education.certificates in the submission is a provided value."""
        form["education"] = json.dumps(
            {"certificates": [{"name": "CKA", "file": "/uploads/cka.pdf"}]}
        )

        patch = parse_submission(form).attachments

        assert "certificates" in patch.model_fields_set
        assert patch.certificates[0].name == "CKA"

    def test_too_many_certificates(self, form):
        """Test more than 10 certificate uploads is rejected."""
        refs = [f"/uploads/{i}.pdf" for i in range(11)]

        with pytest.raises(ValidationError, match="At most 10"):
            parse_submission(form, certificate_refs=refs)


class TestToProfile:
    """Test building the stored profile from a submission and the existing one."""

    def test_create_defaults_attachments_to_empty(self, form):
        """Test a new profile without uploads has no attachments."""
        profile = parse_submission(form).to_profile("u1", existing=None)

        assert profile.resume == ""
        assert profile.education.certificates == []

    def test_update_preserves_omitted_attachments(self, form, make_profile):
        """Test editing without uploads keeps resume and certificates."""
        existing = make_profile(
            "u1",
            skills=["Go"],
            resume="/uploads/cv.pdf",
            education={"degree": "MSc", "certificates": [{"name": "AWS", "file": "/uploads/aws.pdf"}]},
        )
        form["education"] = json.dumps({"degree": "PhD"})

        profile = parse_submission(form).to_profile("u1", existing=existing)

        assert profile.resume == "/uploads/cv.pdf"
        assert [c.name for c in profile.education.certificates] == ["AWS"]
        # Everything else is replaced
        assert profile.education.degree == "PhD"
        assert profile.skills == []

    def test_update_replaces_provided_attachments(self, form, make_profile):
        """Test uploads replace stored attachments."""
        existing = make_profile(
            "u1",
            resume="/uploads/old.pdf",
            education={"certificates": [{"name": "Old", "file": "/uploads/old-cert.pdf"}]},
        )

        profile = parse_submission(
            form, resume_ref="/uploads/new.pdf", certificate_refs=["/uploads/new-cert.pdf"]
        ).to_profile("u1", existing=existing)

        assert profile.resume == "/uploads/new.pdf"
        assert [c.file for c in profile.education.certificates] == ["/uploads/new-cert.pdf"]

    def test_update_clears_when_provided_empty(self, form, make_profile):
        """Test explicitly empty attachments clear stored ones."""
        existing = make_profile(
            "u1",
            resume="/uploads/old.pdf",
            education={"certificates": [{"name": "Old", "file": "/uploads/old-cert.pdf"}]},
        )
        form["resume"] = ""
        form["education"] = json.dumps({"certificates": []})

        profile = parse_submission(form).to_profile("u1", existing=existing)

        assert profile.resume == ""
        assert profile.education.certificates == []
