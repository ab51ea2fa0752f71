from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import parse_iso_datetime
from ..common.web import current_identity, date_arg, json_body, make_guards, ok, owner_for_request
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = make_guards(container.identity)
    entries = container.entry_service

    @app.route("/api/timer/start", methods=["POST"], endpoint="timer_start")
    @login_required
    def timer_start():
        data = json_body()
        entry = entries.start_timer(
            current_identity().owner_id,
            data.get("project_id", ""),
            data.get("label", ""),
            entry_id=data.get("entry_id"),
        )
        return ok(entry, 201)

    @app.route("/api/timer/stop", methods=["POST"], endpoint="timer_stop")
    @login_required
    def timer_stop():
        return ok(entries.stop_timer(current_identity().owner_id))

    @app.route("/api/timer/active", methods=["GET"], endpoint="timer_active")
    @login_required
    def timer_active():
        identity = current_identity()
        entry = entries.active_entry(identity.owner_id)
        if entry is None:
            return ok(None)
        elapsed = entry.duration_seconds(container.clock.now())
        return ok({"entry": entry, "elapsed_seconds": int(elapsed)})

    @app.route("/api/entries", methods=["GET"], endpoint="entries_list")
    @login_required
    def entries_list():
        owner_id = owner_for_request(current_identity())
        from_week = date_arg("week", default=container.clock.now().date())
        week_start = container.timesheet_service.normalize_week(from_week)
        return ok(entries.entries_for_week(owner_id, week_start))

    @app.route("/api/entries/day", methods=["GET"], endpoint="entries_day")
    @login_required
    def entries_day():
        owner_id = owner_for_request(current_identity())
        day = date_arg("day", default=container.clock.now().date())
        return ok(entries.day_summary(owner_id, day))

    @app.route("/api/admin/entries", methods=["POST"], endpoint="admin_entry_create")
    @admin_required
    def admin_entry_create():
        data = json_body()
        entry = entries.record_manual_entry(
            current_role=current_identity().role,
            owner_id=data.get("owner_id", ""),
            project_id=data.get("project_id", ""),
            label=data.get("label", ""),
            start_time=parse_iso_datetime(data.get("start_time", ""), "start_time"),
            end_time=parse_iso_datetime(data.get("end_time", ""), "end_time"),
            entry_id=data.get("entry_id"),
        )
        return ok(entry, 201)

    @app.route("/api/admin/entries/<entry_id>", methods=["PATCH"], endpoint="admin_entry_amend")
    @admin_required
    def admin_entry_amend(entry_id: str):
        data = json_body()
        entry = entries.amend_entry(
            current_role=current_identity().role,
            entry_id=entry_id,
            start_time=parse_iso_datetime(data["start_time"], "start_time") if data.get("start_time") else None,
            end_time=parse_iso_datetime(data["end_time"], "end_time") if data.get("end_time") else None,
            label=data.get("label"),
            project_id=data.get("project_id"),
        )
        return ok(entry)

    @app.route("/api/admin/entries/<entry_id>", methods=["DELETE"], endpoint="admin_entry_delete")
    @admin_required
    def admin_entry_delete(entry_id: str):
        entries.delete_entry(current_role=current_identity().role, entry_id=entry_id)
        return ok({"entry_id": entry_id})
