from __future__ import annotations

from flask import Flask

from ..common.http import json_body, ok, required
from ..common.validators import require_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _posting_args() -> dict:
        body = json_body()
        return {
            "amount": required(body, "amount"),
            "reason": str(required(body, "reason")),
            "actor_id": require_int(required(body, "actor_id"), "actor_id"),
        }

    @app.route("/api/salaries/<int:salary_id>/ledger/payments", methods=["POST"], endpoint="ledger_payment")
    def ledger_payment(salary_id: int):
        entry = container.ledger_service.post_payment(salary_id, **_posting_args())
        return ok(entry.to_dict(), status=201)

    @app.route("/api/salaries/<int:salary_id>/ledger/deductions", methods=["POST"], endpoint="ledger_deduction")
    def ledger_deduction(salary_id: int):
        entry = container.ledger_service.post_deduction(salary_id, **_posting_args())
        return ok(entry.to_dict(), status=201)

    @app.route("/api/salaries/<int:salary_id>/ledger/recoveries", methods=["POST"], endpoint="ledger_recovery")
    def ledger_recovery(salary_id: int):
        entry = container.ledger_service.post_recovery(salary_id, **_posting_args())
        return ok(entry.to_dict(), status=201)

    @app.route("/api/ledger/<int:entry_id>/reverse", methods=["POST"], endpoint="ledger_reverse")
    def ledger_reverse(entry_id: int):
        body = json_body()
        entry = container.ledger_service.post_reversal(
            entry_id,
            reason=str(required(body, "reason")),
            actor_id=require_int(required(body, "actor_id"), "actor_id"),
        )
        return ok(entry.to_dict(), status=201)

    @app.route("/api/salaries/<int:salary_id>/ledger", methods=["GET"], endpoint="ledger_entries")
    def ledger_entries(salary_id: int):
        return ok([e.to_dict() for e in container.ledger_service.entries(salary_id)])

    @app.route("/api/salaries/<int:salary_id>/balance", methods=["GET"], endpoint="ledger_balance")
    def ledger_balance(salary_id: int):
        return ok(container.ledger_service.reconcile(salary_id).to_dict())
