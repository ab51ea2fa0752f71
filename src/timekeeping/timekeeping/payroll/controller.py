from __future__ import annotations

from datetime import datetime

from flask import Flask, request

from ..common.web import current_identity, date_arg, json_body, make_guards, ok
from ..container import Container
from ..core.exceptions import ValidationError
from .service import month_bounds


def register(app: Flask, container: Container) -> None:
    _, admin_required = make_guards(container.identity)
    payroll = container.payroll_service

    def _period():
        month = request.args.get("month")
        if month:
            try:
                parsed = datetime.strptime(month, "%Y-%m")
            except ValueError:
                raise ValidationError("month must be YYYY-MM", field="month")
            return month_bounds(parsed.year, parsed.month)
        return date_arg("start"), date_arg("end")

    @app.route("/api/admin/payroll", methods=["GET"], endpoint="admin_payroll_report")
    @admin_required
    def admin_payroll_report():
        start, end = _period()
        return ok(payroll.build_payroll_report(start, end))

    @app.route("/api/admin/payroll/<owner_id>", methods=["GET"], endpoint="admin_payroll_owner")
    @admin_required
    def admin_payroll_owner(owner_id: str):
        start, end = _period()
        return ok(payroll.calculate(owner_id, start, end))

    @app.route("/api/admin/salaries/<owner_id>", methods=["PUT"], endpoint="admin_salary_set")
    @admin_required
    def admin_salary_set(owner_id: str):
        data = json_body()
        config = payroll.set_salary_config(
            current_role=current_identity().role,
            owner_id=owner_id,
            base_salary=data.get("base_salary"),
            currency=data.get("currency"),
        )
        return ok(config)
