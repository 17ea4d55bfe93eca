"""HTTP routes for auth, the candidate's own profile, and matches."""

from datetime import datetime, timezone
from functools import wraps

from flask import Flask, current_app, g, jsonify, request, send_from_directory

from candidate_profiles.api.app import EXTENSION_KEY, Services
from candidate_profiles.exceptions import ValidationError
from candidate_profiles.profile.submission import MAX_CERTIFICATES, parse_submission


def services() -> Services:
    return current_app.extensions[EXTENSION_KEY]


def login_required(view):
    """Resolve the bearer token on every request and expose the owner as g.owner."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        g.owner = services().auth.resolve_header(request.headers.get("Authorization"))
        return view(*args, **kwargs)

    return wrapper


def _request_data():
    if request.is_json:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data
    return request.form


def _save_uploads():
    """Save resume/certificate uploads and return (resume_ref, certificate_refs)."""
    files = services().files

    resume_uploads = [f for f in request.files.getlist("resume") if f and f.filename]
    if len(resume_uploads) > 1:
        raise ValidationError("Only one resume can be uploaded")

    certificate_uploads = [f for f in request.files.getlist("certificates") if f and f.filename]
    if len(certificate_uploads) > MAX_CERTIFICATES:
        raise ValidationError(f"At most {MAX_CERTIFICATES} certificates can be uploaded")

    saved = []
    try:
        for upload in resume_uploads + certificate_uploads:
            saved.append(files.save(upload))
    except Exception:
        _discard_uploads(saved)
        raise

    if resume_uploads:
        return saved[0], saved[1:]
    return None, saved


def _discard_uploads(references):
    for reference in references:
        services().files.delete(reference)


def _save_profile():
    form = _request_data()

    # Validate the whole profile before writing any upload to disk
    parse_submission(form).to_profile(g.owner)
    resume_ref, certificate_refs = _save_uploads()
    saved = ([resume_ref] if resume_ref else []) + certificate_refs

    try:
        submission = parse_submission(
            form, resume_ref=resume_ref, certificate_refs=certificate_refs
        )
        return services().profiles.save(g.owner, submission)
    except Exception:
        # The profile was not stored, so nothing references these files
        _discard_uploads(saved)
        raise


def register_routes(app: Flask) -> None:
    @app.route("/health", methods=["GET"])
    def health_check():
        return jsonify({"status": "ok", "time": datetime.now(timezone.utc).isoformat()}), 200

    @app.route("/api/auth/signup", methods=["POST"])
    def signup():
        data = _request_data() or {}
        token = services().auth.signup(
            full_name=data.get("fullName"),
            email=data.get("email"),
            password=data.get("password"),
            phone_number=data.get("phoneNumber"),
        )
        return jsonify({"token": token}), 201

    @app.route("/api/auth/login", methods=["POST"])
    def login():
        data = _request_data() or {}
        token = services().auth.login(data.get("email"), data.get("password"))
        return jsonify({"token": token}), 200

    @app.route("/api/candidate/profile", methods=["GET"])
    @login_required
    def get_profile():
        profile = services().profiles.get(g.owner)
        return jsonify(profile.to_api()), 200

    @app.route("/api/candidate/profile", methods=["POST"])
    @login_required
    def create_profile():
        profile, created = _save_profile()
        return jsonify(profile.to_api()), 201 if created else 200

    @app.route("/api/candidate/profile", methods=["PUT"])
    @login_required
    def update_profile():
        profile, _ = _save_profile()
        return jsonify(profile.to_api()), 200

    @app.route("/api/candidate/matches", methods=["GET"])
    @login_required
    def get_matches():
        matches = services().matches.find_matches(g.owner)
        return jsonify([match.to_api() for match in matches]), 200

    @app.route("/uploads/<path:filename>", methods=["GET"])
    def uploaded_file(filename):
        return send_from_directory(services().files.upload_folder.resolve(), filename)
