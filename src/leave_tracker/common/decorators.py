"""Login/role guards shared by the controllers."""
from __future__ import annotations

from dataclasses import replace
from functools import wraps
from typing import Callable, Optional

from flask import flash, redirect, render_template, request, session, url_for

from ..core.enums import Role
from ..users.service import SessionUser


def current_user() -> Optional[SessionUser]:
    """Session user for this request, or None when signed out."""
    if "user_id" not in session:
        return None
    try:
        role = Role(session.get("role"))
    except ValueError:
        session.clear()
        return None
    return SessionUser(user_id=int(session["user_id"]), full_name=session.get("name") or "", role=role)


def login_user(user: SessionUser, *, remember: bool = False) -> None:
    session.clear()
    session.permanent = bool(remember)
    session["user_id"] = user.user_id
    session["name"] = user.full_name
    session["role"] = user.role.value


def _wants_json() -> bool:
    return request.path.startswith("/api/")


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            if _wants_json():
                return {"success": False, "message": "Login required"}, 401
            flash("Please sign in to continue.", "warning")
            return redirect(url_for("login"))
        return view(*args, **kwargs)

    return wrapper


def admin_required(is_admin: Callable[[int], bool]):
    """Guard for admin pages.

    The role is re-read through `is_admin` on every request and written back
    to the session, so promotions and demotions apply without a new login.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = current_user()
            if user is None:
                return redirect(url_for("login"))

            role = Role.ADMIN if is_admin(user.user_id) else Role.USER
            if role != user.role:
                session["role"] = role.value
                user = replace(user, role=role)

            if not user.is_admin:
                return render_template("403.html", current_user=user), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator
