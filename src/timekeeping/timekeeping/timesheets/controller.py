from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import parse_iso_date
from ..common.web import current_identity, date_arg, json_body, make_guards, ok, owner_for_request
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = make_guards(container.identity)
    timesheets = container.timesheet_service

    @app.route("/api/timesheets/week", methods=["GET"], endpoint="timesheet_week")
    @login_required
    def timesheet_week():
        owner_id = owner_for_request(current_identity())
        week = date_arg("week", default=container.clock.now().date())
        return ok(timesheets.week_overview(owner_id, week))

    @app.route("/api/timesheets", methods=["GET"], endpoint="timesheet_history")
    @login_required
    def timesheet_history():
        return ok(timesheets.list_for_owner(owner_for_request(current_identity())))

    @app.route("/api/timesheets/submit", methods=["POST"], endpoint="timesheet_submit")
    @login_required
    def timesheet_submit():
        data = json_body()
        week = parse_iso_date(data.get("week_start", ""), "week_start")
        return ok(timesheets.submit(current_identity().owner_id, week))

    @app.route("/api/admin/timesheets/pending", methods=["GET"], endpoint="admin_timesheets_pending")
    @admin_required
    def admin_timesheets_pending():
        return ok(timesheets.list_pending())

    @app.route("/api/admin/timesheets/<timesheet_id>/review", methods=["POST"], endpoint="admin_timesheet_review")
    @admin_required
    def admin_timesheet_review(timesheet_id: str):
        identity = current_identity()
        reviewed = timesheets.review(
            current_role=identity.role,
            reviewer_id=identity.owner_id,
            timesheet_id=timesheet_id,
            decision=json_body().get("decision", ""),
        )
        return ok(reviewed)
