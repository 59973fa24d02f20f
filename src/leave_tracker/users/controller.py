from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.decorators import current_user, login_user
from ..container import Container
from ..core.exceptions import AuthenticationError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/", methods=["GET", "POST"], endpoint="login")
    def login():
        if current_user() is not None:
            return redirect(url_for("dashboard"))

        if request.method == "POST":
            username = request.form.get("username", "")
            password = request.form.get("password", "")
            remember = request.form.get("remember_me")

            try:
                s_user = container.auth_service.authenticate(username, password)
                login_user(s_user, remember=bool(remember))
                flash("Signed in successfully!", "success")
                return redirect(url_for("dashboard"))
            except AuthenticationError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Login failed for %r", username)
                flash("System error while signing in", "danger")

        return render_template("login.html")

    @app.route("/register", methods=["GET", "POST"], endpoint="register")
    def register_account():
        if current_user() is not None:
            return redirect(url_for("dashboard"))

        if request.method == "POST":
            try:
                container.user_service.register(
                    full_name=request.form.get("full_name", ""),
                    username=request.form.get("username", ""),
                    password=request.form.get("password", ""),
                )
                flash("Account created. You can sign in now.", "success")
                return redirect(url_for("login"))
            except ValidationError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Registration failed")
                flash("System error while creating the account", "danger")

        return render_template("register.html")

    @app.route("/logout", endpoint="logout")
    def logout():
        session.clear()
        flash("Signed out.", "info")
        return redirect(url_for("login"))
