from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_datetime
from ..common.http import json_payload, require_field
from ..common.validators import require_positive_int
from ..core.enums import CheckArea
from ..core.exceptions import ValidationError
from ..container import Container
from .model import AttendanceRecord


def _record_json(record: AttendanceRecord) -> dict:
    return {
        "student_id": record.student_id,
        "event_id": record.event_id,
        "location_id": record.location_id,
        "status": record.status.value,
        "time_in": record.time_in.isoformat() if record.time_in else None,
        "time_out": record.time_out.isoformat() if record.time_out else None,
        "reason": record.reason,
    }


def register(app: Flask, container: Container) -> None:
    @app.post("/api/events/<int:event_id>/check-in")
    def check_in(event_id: int):
        data = json_payload()
        record = container.check_in_service.register(
            require_positive_int(require_field(data, "student_id"), "student_id"),
            event_id,
            require_positive_int(require_field(data, "location_id"), "location_id"),
            require_field(data, "latitude"),
            require_field(data, "longitude"),
            face_image=data.get("face_image"),
        )
        return jsonify(_record_json(record)), 201

    @app.post("/api/events/<int:event_id>/venue-arrival")
    def venue_arrival(event_id: int):
        data = json_payload()
        upgraded = container.check_in_service.arrive_at_venue(
            require_positive_int(require_field(data, "student_id"), "student_id"),
            event_id,
            require_field(data, "latitude"),
            require_field(data, "longitude"),
        )
        return jsonify({"upgraded": upgraded})

    @app.post("/api/events/<int:event_id>/pings")
    def ingest_ping(event_id: int):
        data = json_payload()
        try:
            client_timestamp = parse_iso_datetime(data.get("client_timestamp"))
        except ValueError:
            raise ValidationError("client_timestamp must be an ISO-8601 timestamp")

        inside = container.presence_tracker.ingest_ping(
            require_positive_int(require_field(data, "student_id"), "student_id"),
            event_id,
            require_positive_int(require_field(data, "location_id"), "location_id"),
            require_field(data, "latitude"),
            require_field(data, "longitude"),
            client_timestamp,
        )
        return jsonify({"inside": inside}), 202

    @app.get("/api/events/<int:event_id>/location-check")
    def location_check(event_id: int):
        try:
            area = CheckArea(request.args.get("area", CheckArea.VENUE.value))
        except ValueError:
            raise ValidationError("area must be 'venue' or 'registration'")

        result = container.presence_tracker.check_location(
            event_id,
            require_field(request.args, "latitude"),
            require_field(request.args, "longitude"),
            area=area,
        )
        return jsonify({"inside": result.inside, "location": result.location_name, "message": result.message})
