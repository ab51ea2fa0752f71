from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import current_identity, json_body, make_guards, ok, owner_for_request
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = make_guards(container.identity)
    leave = container.leave_service

    def _dates(data: dict):
        start = parse_iso_date(data.get("start_date", ""), "start_date")
        end = parse_iso_date(data["end_date"], "end_date") if data.get("end_date") else None
        return start, end

    @app.route("/api/leave", methods=["GET"], endpoint="leave_mine")
    @login_required
    def leave_mine():
        return ok(leave.list_for_owner(owner_for_request(current_identity())))

    @app.route("/api/leave", methods=["POST"], endpoint="leave_book")
    @login_required
    def leave_book():
        data = json_body()
        start, end = _dates(data)
        req = leave.book(
            owner_id=current_identity().owner_id,
            leave_type=data.get("leave_type", ""),
            start_date=start,
            end_date=end,
            is_half_day=bool(data.get("is_half_day", False)),
            reason=data.get("reason", ""),
            request_id=data.get("request_id"),
        )
        return ok(req, 201)

    @app.route("/api/leave/<request_id>", methods=["PUT"], endpoint="leave_edit")
    @login_required
    def leave_edit(request_id: str):
        data = json_body()
        start, end = _dates(data)
        req = leave.update_pending(
            owner_id=current_identity().owner_id,
            request_id=request_id,
            leave_type=data.get("leave_type", ""),
            start_date=start,
            end_date=end,
            is_half_day=bool(data.get("is_half_day", False)),
            reason=data.get("reason", ""),
        )
        return ok(req)

    @app.route("/api/leave/balances", methods=["GET"], endpoint="leave_balances")
    @login_required
    def leave_balances():
        year = request.args.get("year")
        if year is not None and not year.isdigit():
            raise ValidationError("year must be a number", field="year")
        owner_id = owner_for_request(current_identity())
        return ok(leave.balances(owner_id, year=int(year) if year else None))

    @app.route("/api/admin/leave/pending", methods=["GET"], endpoint="admin_leave_pending")
    @admin_required
    def admin_leave_pending():
        return ok(leave.list_pending())

    @app.route("/api/admin/leave/<request_id>/review", methods=["POST"], endpoint="admin_leave_review")
    @admin_required
    def admin_leave_review(request_id: str):
        data = json_body()
        identity = current_identity()
        req = leave.review(
            current_role=identity.role,
            reviewer_id=identity.owner_id,
            request_id=request_id,
            decision=data.get("decision", ""),
            admin_note=data.get("admin_note", ""),
        )
        return ok(req)
