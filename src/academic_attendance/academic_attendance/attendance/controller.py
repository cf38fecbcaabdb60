from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_iso_date, parse_iso_date
from ..common.http import error_response, login_required
from ..common.validators import require_enum
from ..core.enums import SubjectType
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from ..timetable.controller import slot_json
from ..users.controller import current_faculty
from .model import AttendanceSession, SessionSummary


def session_json(s: AttendanceSession) -> dict:
    return {
        "key": s.key,
        "date": format_iso_date(s.on),
        "period": s.period,
        "already_marked": s.already_marked,
        "slot": slot_json(s.slot),
    }


def summary_json(s: SessionSummary) -> dict:
    return {"session_key": s.session_key, "present": s.present, "absent": s.absent, "total": s.total}


def register(app: Flask, container: Container) -> None:
    svc = container.attendance_service

    @app.route("/attendance/sessions", methods=["GET"], endpoint="attendance_sessions")
    @login_required
    def attendance_sessions():
        args = request.args
        try:
            sessions = svc.my_sessions_today(
                current_faculty(container),
                class_id=args.get("class_id", ""),
                division_id=args.get("division_id", ""),
                subject_id=args.get("subject_id", ""),
                subject_type=require_enum(SubjectType, args.get("subject_type", "theory"), "Subject type"),
                on=parse_iso_date(args["date"]) if args.get("date") else None,
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "sessions": [session_json(s) for s in sessions]})

    @app.route("/attendance/sessions/<slot_id>", methods=["POST"], endpoint="attendance_mark")
    @login_required
    def attendance_mark(slot_id: str):
        payload = request.get_json(silent=True) or {}
        try:
            marks = payload.get("marks")
            if not isinstance(marks, dict):
                raise ValidationError("marks must map student ids to a status")
            summary = svc.mark(
                current_faculty(container),
                slot_id=slot_id,
                marks=marks,
                remarks=payload.get("remarks"),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "summary": summary_json(summary)}), 201
