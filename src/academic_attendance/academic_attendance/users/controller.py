from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.http import error_response, login_required
from ..core.exceptions import DomainError
from ..container import Container
from .model import Faculty


def faculty_json(f: Faculty) -> dict:
    return {
        "email": f.email,
        "name": f.name,
        "role": f.role.value,
        "department": f.department,
        "is_blocked": f.is_blocked,
    }


def current_faculty(container: Container) -> Faculty:
    """Identity of the signed-in user. Raises AuthorizationError if it is gone or blocked."""
    return container.faculty_service.identify(session.get("email", ""))


def register(app: Flask, container: Container) -> None:
    @app.route("/session", methods=["POST"], endpoint="sign_in")
    def sign_in():
        payload = request.get_json(silent=True) or {}
        try:
            faculty = container.faculty_service.identify(payload.get("email", ""))
        except DomainError as e:
            return error_response(e)

        session.clear()
        session["email"] = faculty.email
        return jsonify({"success": True, "user": faculty_json(faculty)})

    @app.route("/session", methods=["DELETE"], endpoint="sign_out")
    def sign_out():
        session.clear()
        return jsonify({"success": True})

    @app.route("/faculty", methods=["GET"], endpoint="faculty_list")
    @login_required
    def faculty_list():
        try:
            current = current_faculty(container)
            members = container.faculty_service.departmental_faculty(current)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "faculty": [faculty_json(f) for f in members]})
