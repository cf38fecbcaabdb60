from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import error_response, login_required
from ..common.validators import require_enum
from ..core.enums import SubjectType, Weekday
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from ..users.controller import current_faculty
from .model import TimeSlot

_PATCHABLE = ("day", "start_time", "end_time", "subject_type", "subject_id", "teacher_email", "division_id")


def slot_json(slot: TimeSlot) -> dict:
    return {
        "id": slot.slot_id,
        "class_id": slot.class_id,
        "division_id": slot.division_id,
        "day": slot.day.value,
        "start_time": slot.start_time,
        "end_time": slot.end_time,
        "subject_id": slot.subject_id,
        "subject_type": slot.subject_type.value,
        "teacher_email": slot.teacher_email,
    }


def register(app: Flask, container: Container) -> None:
    svc = container.timetable_service

    @app.route("/timetable/slots", methods=["GET"], endpoint="timetable_slots")
    @login_required
    def timetable_slots():
        try:
            current = current_faculty(container)
            class_id = request.args.get("class_id")
            if class_id:
                slots = svc.timetable_for_class(class_id, request.args.get("division_id") or None)
            else:
                slots = svc.schedule_for_teacher(current.email)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "slots": [slot_json(s) for s in slots]})

    @app.route("/timetable/slots", methods=["POST"], endpoint="timetable_slot_add")
    @login_required
    def timetable_slot_add():
        payload = request.get_json(silent=True) or {}
        try:
            current = current_faculty(container)
            slot_id = svc.add_slot(
                current,
                class_id=payload.get("class_id", ""),
                division_id=payload.get("division_id", ""),
                day=require_enum(Weekday, payload.get("day"), "Day"),
                start_time=payload.get("start_time", ""),
                end_time=payload.get("end_time", ""),
                subject_type=require_enum(SubjectType, payload.get("subject_type", "theory"), "Subject type"),
                subject_id=payload.get("subject_id"),
                teacher_email=payload.get("teacher_email"),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "slot": slot_json(svc.get(slot_id))}), 201

    @app.route("/timetable/slots/<slot_id>", methods=["PATCH"], endpoint="timetable_slot_update")
    @login_required
    def timetable_slot_update(slot_id: str):
        payload = request.get_json(silent=True) or {}
        patch = {k: payload[k] for k in _PATCHABLE if k in payload}
        try:
            if not patch:
                raise ValidationError("Nothing to update")
            if "day" in patch:
                patch["day"] = require_enum(Weekday, patch["day"], "Day")
            if "subject_type" in patch:
                patch["subject_type"] = require_enum(SubjectType, patch["subject_type"], "Subject type")
            svc.update_slot(current_faculty(container), slot_id, **patch)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "slot": slot_json(svc.get(slot_id))})

    @app.route("/timetable/slots/<slot_id>", methods=["DELETE"], endpoint="timetable_slot_delete")
    @login_required
    def timetable_slot_delete(slot_id: str):
        try:
            svc.delete_slot(current_faculty(container), slot_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True})
