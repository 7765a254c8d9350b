from __future__ import annotations

import csv
import io
import logging

from flask import Flask, request

from ..common.datetime_utils import parse_iso_datetime
from ..common.http import json_body, ok, required
from ..common.validators import require_int
from ..container import Container
from ..reports.service import REPORT_FIELDS, month_calendar
from .service import SalaryCalculation

log = logging.getLogger(__name__)


def _calculation_payload(calc: SalaryCalculation) -> dict:
    return {
        "salary": calc.record.to_dict(),
        "breakdown": [e.to_dict() for e in calc.breakdown],
        "calendar": month_calendar(calc.record.month, calc.record.year, calc.days),
    }


def _optional_actor(body: dict):
    actor_id = body.get("actor_id")
    return require_int(actor_id, "actor_id") if actor_id is not None else None


def _period(source: dict) -> tuple[int, int]:
    return require_int(required(source, "month"), "month"), require_int(required(source, "year"), "year")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/salaries/generate", methods=["POST"], endpoint="salary_generate")
    def salary_generate():
        body = json_body()
        month, year = _period(body)
        calc = container.salary_service.generate_salary(
            staff_id=require_int(required(body, "staff_id"), "staff_id"),
            month=month,
            year=year,
            actor_id=_optional_actor(body),
        )
        return ok(_calculation_payload(calc), status=201)

    @app.route("/api/salaries/preview", methods=["POST"], endpoint="salary_preview")
    def salary_preview():
        body = json_body()
        month, year = _period(body)
        calc = container.salary_service.preview_salary(
            staff_id=require_int(required(body, "staff_id"), "staff_id"),
            month=month,
            year=year,
        )
        return ok(_calculation_payload(calc))

    @app.route("/api/salaries/batch", methods=["POST"], endpoint="salary_batch")
    def salary_batch():
        """Generate a whole month; ``staff_ids`` defaults to every active staff member."""

        body = json_body()
        month, year = _period(body)
        staff_ids = body.get("staff_ids")
        if staff_ids is None:
            company_id = body.get("company_id")
            staff_ids = container.compensation_repo.list_active_staff_ids(
                company_id=require_int(company_id, "company_id") if company_id is not None else None
            )
        else:
            staff_ids = [require_int(s, "staff_ids") for s in staff_ids]

        result = container.salary_service.generate_for_staff(staff_ids, month=month, year=year)
        return ok({"processed": result.processed, "errors": result.errors, "success": result.success})

    @app.route("/api/salaries/<int:salary_id>", methods=["GET"], endpoint="salary_detail")
    def salary_detail(salary_id: int):
        calc = container.salary_service.get_salary(salary_id)
        payload = _calculation_payload(calc)
        payload["balance"] = container.ledger_service.reconcile(salary_id).to_dict()
        return ok(payload)

    @app.route("/api/salaries/<int:salary_id>/recalculate", methods=["POST"], endpoint="salary_recalculate")
    def salary_recalculate(salary_id: int):
        calc = container.salary_service.recalculate(salary_id, actor_id=_optional_actor(json_body()))
        return ok(_calculation_payload(calc))

    @app.route("/api/salaries/<int:salary_id>/audit", methods=["GET"], endpoint="salary_audit")
    def salary_audit(salary_id: int):
        return ok([e.to_dict() for e in container.salary_service.audit_trail(salary_id)])

    @app.route("/api/salaries/<int:salary_id>/approve", methods=["POST"], endpoint="salary_approve")
    def salary_approve(salary_id: int):
        body = json_body()
        record = container.salary_service.approve(
            salary_id,
            actor_id=require_int(required(body, "actor_id"), "actor_id"),
        )
        return ok(record.to_dict())

    @app.route("/api/salaries/<int:salary_id>/reject", methods=["POST"], endpoint="salary_reject")
    def salary_reject(salary_id: int):
        body = json_body()
        record = container.salary_service.reject(
            salary_id,
            actor_id=require_int(required(body, "actor_id"), "actor_id"),
            reason=str(required(body, "reason")),
        )
        return ok(record.to_dict())

    @app.route("/api/salaries/<int:salary_id>/mark-paid", methods=["POST"], endpoint="salary_mark_paid")
    def salary_mark_paid(salary_id: int):
        body = json_body()
        paid_at = body.get("paid_at")
        record = container.salary_service.mark_paid(
            salary_id,
            actor_id=require_int(required(body, "actor_id"), "actor_id"),
            paid_at=parse_iso_datetime(paid_at) if paid_at else None,
        )
        return ok(record.to_dict())

    @app.route("/api/salaries/<int:salary_id>/slip", methods=["GET"], endpoint="salary_slip")
    def salary_slip(salary_id: int):
        return ok(container.report_service.build_salary_slip(salary_id))

    @app.route("/api/staff/<int:staff_id>/salaries", methods=["GET"], endpoint="staff_salary_overview")
    def staff_salary_overview(staff_id: int):
        overview = container.ledger_service.staff_overview(staff_id)
        return ok(
            {
                "staff_id": overview.staff_id,
                "salaries": [
                    {"salary": row.record.to_dict(), "balance": row.balance.to_dict()} for row in overview.salaries
                ],
                "total_net": str(overview.total_net),
                "total_paid": str(overview.total_paid),
                "total_deducted": str(overview.total_deducted),
                "total_recovered": str(overview.total_recovered),
                "total_owed": str(overview.total_owed),
                "total_owe": str(overview.total_owe),
            }
        )

    @app.route("/api/reports/salaries.csv", methods=["GET"], endpoint="salary_report_csv")
    def salary_report_csv():
        month, year = _period(request.args)
        company_id = request.args.get("company_id")
        data = container.report_service.build_monthly_report(
            month=month,
            year=year,
            company_id=require_int(company_id, "company_id") if company_id else None,
        )

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=REPORT_FIELDS)
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)

        log.info("salary report %04d-%02d exported (%s rows)", year, month, len(data.rows))
        filename = f"salaries_{year:04d}{month:02d}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
