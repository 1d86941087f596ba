from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify

from ..common.datetime_utils import now_local
from ..core.exceptions import NotFoundError
from ..container import Container
from .lifecycle import resolve_status


def register(app: Flask, container: Container) -> None:
    lifecycle = container.lifecycle_service

    @app.get("/api/events/<int:event_id>/status")
    def event_status(event_id: int):
        event = container.events_repo.get_by_id(event_id)
        if not event:
            raise NotFoundError(f"Event {event_id} not found")
        # `scheduled_status` is what the clock says; `status` lags it by at most one sweep.
        return jsonify(
            {
                "event_id": event.event_id,
                "name": event.name,
                "status": event.status.value,
                "scheduled_status": resolve_status(event, now_local()).value,
                "registration_open_at": event.registration_open_at.isoformat(),
                "start_at": event.start_at.isoformat(),
                "end_at": event.end_at.isoformat(),
            }
        )

    @app.post("/api/events/<int:event_id>/cancel")
    def cancel_event(event_id: int):
        event = lifecycle.cancel_event(event_id)
        return jsonify({"event_id": event.event_id, "status": event.status.value})

    @app.post("/api/events/<int:event_id>/finalize")
    def finalize_event(event_id: int):
        result = lifecycle.finalize_event(event_id)
        return jsonify({**asdict(result), "writes": result.writes})
