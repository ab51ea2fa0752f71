from __future__ import annotations

from flask import Flask

from ..common.web import current_identity, json_body, make_guards, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = make_guards(container.identity)
    settings = container.calendar_service

    @app.route("/api/settings", methods=["GET"], endpoint="settings_view")
    @login_required
    def settings_view():
        return ok({"calendar": settings.get_config(), "leave_policy": settings.get_leave_policy().allowances})

    @app.route("/api/admin/settings/calendar", methods=["PUT"], endpoint="admin_calendar_update")
    @admin_required
    def admin_calendar_update():
        data = json_body()
        current = settings.get_config()
        config = settings.update_config(
            current_role=current_identity().role,
            start_day=data.get("start_day", int(current.start_day)),
            days_per_week=data.get("days_per_week", current.days_per_week),
            min_weekly_hours=data.get("min_weekly_hours", current.min_weekly_hours),
            min_daily_hours=data.get("min_daily_hours", current.min_daily_hours),
        )
        return ok(config)

    @app.route("/api/admin/settings/leave-policy", methods=["PUT"], endpoint="admin_leave_policy_update")
    @admin_required
    def admin_leave_policy_update():
        policy = settings.update_leave_policy(
            current_role=current_identity().role,
            allowances=json_body().get("allowances", {}),
        )
        return ok(policy.allowances)
