#!/usr/bin/env python3
"""Flask web app for the UI audit widget: upload a screenshot, get a Carbon compliance score."""

import os
import uuid

from flask import Flask, render_template, request, jsonify, session as browser_session
from dotenv import load_dotenv

load_dotenv()

from compliance.models import ROLE_TOKENS
from compliance.scoring import evaluate
from ui_audit.audit import audit_log, log_dir, setup_app_logging
from ui_audit.presentation import STEPS, present_result
from ui_audit.session import SessionRegistry, AuditSession, analysis_delay_seconds, idle_snapshot
from ui_audit.upload import UploadedImage

log = setup_app_logging()

app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = 16 * 1024 * 1024  # 16MB
app.secret_key = os.environ.get("UI_AUDIT_SECRET_KEY") or os.urandom(24).hex()

sessions = SessionRegistry()


def _current_session(create: bool = True) -> AuditSession | None:
    """Audit session for this browser. Only uploads create one; other routes just look it up."""
    audit_id = browser_session.get("audit_id")
    if not create:
        return sessions.peek(audit_id) if audit_id else None
    if not audit_id:
        audit_id = uuid.uuid4().hex
        browser_session["audit_id"] = audit_id
    return sessions.get(audit_id)


def _form_role() -> str | None:
    return (request.form.get("role") or "").strip() or None


@app.errorhandler(413)
def too_large(e):
    max_mb = app.config["MAX_CONTENT_LENGTH"] // (1024 * 1024)
    log.warning("Upload rejected: request body over %d MB", max_mb)
    audit_log(action="upload", status="error", error="payload too large")
    return jsonify({
        "error": f"File is too large (limit {max_mb} MB)",
        "code": "PAYLOAD_TOO_LARGE",
    }), 413


@app.route("/")
def index():
    return render_template("index.html", roles=ROLE_TOKENS, steps=STEPS)


@app.route("/api/roles", methods=["GET"])
def api_roles():
    return jsonify({"roles": list(ROLE_TOKENS)})


@app.route("/api/upload", methods=["POST"])
def api_upload():
    """Accept a screenshot and start the simulated analysis. Non-images leave the session as it was."""
    if "file" not in request.files:
        return jsonify({"error": "No file provided", "code": "NO_FILE"}), 400

    file = request.files["file"]
    if file.filename == "":
        return jsonify({"error": "No file selected", "code": "NO_FILE"}), 400

    role = _form_role()
    audit_session = _current_session()
    log.info("Upload started: filename=%s content_type=%s role=%s", file.filename, file.mimetype, role)
    try:
        upload = UploadedImage.from_file_storage(file)
        accepted = audit_session.submit(upload, role)
    except Exception as e:
        audit_log(action="upload", status="error", role=role, filename=file.filename, error=str(e))
        log.exception("Upload failed")
        return jsonify({"error": str(e)}), 500

    if not accepted:
        audit_log(
            action="upload",
            status="ignored",
            role=role,
            filename=upload.filename,
            content_type=upload.content_type,
            byte_count=upload.byte_count,
        )
        return jsonify({
            "error": "Only image files can be audited",
            "code": "UNSUPPORTED_MEDIA_TYPE",
            "session": audit_session.snapshot(),
        }), 415

    audit_log(
        action="upload",
        status="success",
        role=role,
        filename=upload.filename,
        content_type=upload.content_type,
        image_hash=upload.sha256,
        byte_count=upload.byte_count,
    )
    log.info("Upload accepted: filename=%s bytes=%d analysis_delay=%.2fs", upload.filename, upload.byte_count, audit_session.delay)
    return jsonify(audit_session.snapshot()), 202


@app.route("/api/status", methods=["GET"])
def api_status():
    """Poll the current session: state, progress and, once ready, the result."""
    audit_session = _current_session(create=False)
    return jsonify(audit_session.snapshot() if audit_session else idle_snapshot())


@app.route("/api/reset", methods=["POST"])
def api_reset():
    """Discard the current screenshot and result."""
    audit_session = _current_session(create=False)
    if audit_session is None:
        return jsonify(idle_snapshot())
    audit_session.reset()
    audit_log(action="reset", status="success")
    log.info("Session reset")
    return jsonify(audit_session.snapshot())


@app.route("/api/evaluate", methods=["POST"])
def api_evaluate():
    """Evaluate a role immediately, without upload or simulated delay."""
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return jsonify({"error": "Body must be a JSON object", "code": "INVALID_BODY"}), 400
    role = data.get("role")
    try:
        result = evaluate(role)
    except Exception as e:
        audit_log(action="evaluate", status="error", role=role, error=str(e))
        log.exception("Evaluate failed")
        return jsonify({"error": str(e)}), 500
    audit_log(action="evaluate", status="success", role=role, score=result.score)
    log.info("Evaluate complete: role=%s score=%d", role, result.score)
    return jsonify(present_result(result))


if __name__ == "__main__":
    log.info(
        "UI audit starting on http://127.0.0.1:5000 | analysis delay: %.2fs | Logs: %s/app.log | Audit: %s/audit.log",
        analysis_delay_seconds(),
        log_dir(),
        log_dir(),
    )
    app.run(debug=True, port=5000)
