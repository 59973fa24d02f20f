from __future__ import annotations

import io
import logging
import mimetypes

from flask import Flask, flash, jsonify, redirect, render_template, request, send_file, url_for

from ..aggregation.aggregator import SubjectSummary
from ..common.decorators import current_user, login_required
from ..container import Container
from ..core.constants import INLINE_CERTIFICATE_TYPES, MAX_PERIOD, MIN_PERIOD
from ..core.exceptions import AuthorizationError, ValidationError

logger = logging.getLogger(__name__)


def _summary_json(s: SubjectSummary) -> dict:
    return {
        "subject": s.subject,
        "count": s.count,
        "duty_leave_count": s.duty_leave_count,
        "dates": [d.isoformat() for d in s.dates],
    }


def register(app: Flask, container: Container) -> None:
    periods = list(range(MIN_PERIOD, MAX_PERIOD + 1))

    def _leave_form() -> dict:
        return {
            "subject": request.form.get("subject", ""),
            "leave_date": request.form.get("leave_date", ""),
            "period": request.form.get("period", ""),
            "duty_leave": request.form.get("duty_leave", ""),
            "reason": request.form.get("reason", ""),
        }

    @app.route("/dashboard", endpoint="dashboard")
    @login_required
    def dashboard():
        user = current_user()
        data = container.leave_service.dashboard(user_id=user.user_id)
        return render_template("dashboard.html", current_user=user, data=data, active_page="dashboard")

    @app.route("/leaves/new", methods=["GET", "POST"], endpoint="new_leave")
    @login_required
    def new_leave():
        user = current_user()
        form = {}
        if request.method == "POST":
            form = _leave_form()
            try:
                container.leave_service.add_leave(user_id=user.user_id, **form)
                flash("Leave record added successfully", "success")
                return redirect(url_for("dashboard"))
            except ValidationError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Saving leave failed for user %s", user.user_id)
                flash("Failed to save leave record", "danger")

        return render_template(
            "leaves/form.html",
            form=form,
            subjects=container.subject_service.list_subjects(),
            periods=periods,
            editing=None,
            active_page="new_leave",
        )

    @app.route("/leaves/<int:leave_id>/edit", methods=["GET", "POST"], endpoint="edit_leave")
    @login_required
    def edit_leave(leave_id: int):
        user = current_user()
        try:
            record = container.leave_service.get_leave(user_id=user.user_id, leave_id=leave_id)
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
            return redirect(url_for("dashboard"))

        form = {
            "subject": record.subject_id if record.subject_id is not None else record.subject,
            "leave_date": record.leave_date.isoformat(),
            "period": record.period or "",
            "duty_leave": {True: "yes", False: "no"}.get(record.duty_leave, ""),
            "reason": record.reason or "",
        }
        if request.method == "POST":
            form = _leave_form()
            try:
                container.leave_service.update_leave(user_id=user.user_id, leave_id=leave_id, **form)
                flash("Leave record updated successfully", "success")
                return redirect(url_for("dashboard"))
            except (ValidationError, AuthorizationError) as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Updating leave %s failed", leave_id)
                flash("Failed to update leave record", "danger")

        return render_template(
            "leaves/form.html",
            form=form,
            subjects=container.subject_service.list_subjects(),
            periods=periods,
            editing=record,
            active_page="dashboard",
        )

    @app.route("/leaves/<int:leave_id>/delete", methods=["POST"], endpoint="delete_leave")
    @login_required
    def delete_leave(leave_id: int):
        user = current_user()
        try:
            container.leave_service.delete_leave(user_id=user.user_id, leave_id=leave_id)
            flash("Leave record deleted", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Deleting leave %s failed", leave_id)
            flash("Failed to delete leave record", "danger")
        return redirect(request.referrer or url_for("dashboard"))

    @app.route("/leaves/<int:leave_id>/certificate", methods=["POST"], endpoint="upload_certificate")
    @login_required
    def upload_certificate(leave_id: int):
        user = current_user()
        file = request.files.get("certificate")
        if not file or not file.filename:
            flash("Please choose a file", "warning")
            return redirect(url_for("dashboard"))

        try:
            container.leave_service.attach_certificate(
                user_id=user.user_id,
                leave_id=leave_id,
                filename=file.filename,
                content=file.read(),
            )
            flash("Certificate uploaded successfully!", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Certificate upload failed for leave %s", leave_id)
            flash("Failed to upload certificate", "danger")
        return redirect(url_for("dashboard"))

    @app.route("/leaves/<int:leave_id>/certificate", methods=["GET"], endpoint="view_certificate")
    @login_required
    def view_certificate(leave_id: int):
        user = current_user()
        try:
            content, mimetype = container.leave_service.get_certificate(user_id=user.user_id, leave_id=leave_id)
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
            return redirect(url_for("dashboard"))

        ext = mimetypes.guess_extension(mimetype) or ""
        return send_file(
            io.BytesIO(content),
            mimetype=mimetype,
            as_attachment=mimetype not in INLINE_CERTIFICATE_TYPES,
            download_name=f"certificate_{leave_id}{ext}",
        )

    @app.route("/leaves/subject", methods=["GET"], endpoint="subject_details")
    @login_required
    def subject_details():
        user = current_user()
        subject = request.args.get("name", "")
        records = container.leave_service.details_for_subject(user_id=user.user_id, subject=subject)
        return render_template("leaves/details.html", subject=subject, records=records, active_page="dashboard")

    @app.route("/percentage", methods=["GET", "POST"], endpoint="percentage")
    @login_required
    def percentage():
        user = current_user()
        attendance = None
        form = {"subject_id": "", "total_classes": ""}
        if request.method == "POST":
            form = {
                "subject_id": request.form.get("subject_id", ""),
                "total_classes": request.form.get("total_classes", ""),
            }
            try:
                attendance = container.leave_service.attendance_for_subject(user_id=user.user_id, **form)
            except ValidationError as e:
                flash(str(e), "danger")

        return render_template(
            "percentage.html",
            form=form,
            attendance=attendance,
            subjects=container.subject_service.list_subjects(),
            active_page="percentage",
        )

    @app.route("/api/summary", methods=["GET"], endpoint="api_summary")
    @login_required
    def api_summary():
        user = current_user()
        data = container.leave_service.dashboard(user_id=user.user_id)
        return jsonify(
            {
                "success": True,
                "total_leaves": data.total_leaves,
                "total_duty_leaves": data.total_duty_leaves,
                "summary": [_summary_json(s) for s in data.summary],
            }
        )

    @app.route("/api/percentage", methods=["POST"], endpoint="api_percentage")
    @login_required
    def api_percentage():
        user = current_user()
        payload = request.get_json(silent=True) or {}
        try:
            attendance = container.leave_service.attendance_for_subject(
                user_id=user.user_id,
                subject_id=payload.get("subject_id"),
                total_classes=payload.get("total_classes"),
            )
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400

        result = attendance.result
        return jsonify(
            {
                "success": True,
                "subject": attendance.subject.name,
                "outcome": result.outcome.value,
                "leaves_taken": result.leaves_taken,
                "total_classes": result.total_classes,
                "percentage": result.display,
            }
        )
