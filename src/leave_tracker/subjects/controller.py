from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.decorators import admin_required, current_user
from ..container import Container
from ..core.exceptions import AuthorizationError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    require_admin = admin_required(container.user_service.is_admin)

    @app.route("/admin/subjects", methods=["GET", "POST"], endpoint="admin_subjects")
    @require_admin
    def admin_subjects():
        user = current_user()

        if request.method == "POST":
            try:
                container.subject_service.add_subject(current_role=user.role, name=request.form.get("name", ""))
                flash("Subject added successfully", "success")
                return redirect(url_for("admin_subjects"))
            except (ValidationError, AuthorizationError) as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Adding subject failed")
                flash("Failed to add subject", "danger")

        subjects = container.subject_service.list_subjects()
        return render_template("admin/subjects.html", subjects=subjects, active_page="admin_subjects")

    @app.route("/admin/subjects/<int:subject_id>/delete", methods=["POST"], endpoint="delete_subject")
    @require_admin
    def delete_subject(subject_id: int):
        user = current_user()

        try:
            container.subject_service.delete_subject(current_role=user.role, subject_id=subject_id)
            flash("Subject deleted successfully", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Deleting subject %s failed", subject_id)
            flash("Failed to delete subject", "danger")

        return redirect(url_for("admin_subjects"))
