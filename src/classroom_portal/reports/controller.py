from __future__ import annotations

from dataclasses import asdict
from datetime import date

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_date
from ..container import Container
from ..core.exceptions import ValidationError
from ..users.guards import teacher_required
from .export import to_csv
from .service import ReportData


def _report_json(report: ReportData) -> dict:
    return {
        "period": report.period,
        "rows": [r.as_row() for r in report.rows],
        "overall": {
            "present": report.overall.present,
            "absent": report.overall.absent,
            "leave": report.overall.leave,
            "total": report.overall.total,
            "percentage": report.overall.percentage,
        },
    }


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    def _write_report_csv(*, report: ReportData, filename: str):
        """Write summary rows to a CSV download."""
        csv_bytes = to_csv([r.as_row() for r in report.rows]).encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    def _parse_month(value: str) -> tuple[int, int]:
        try:
            year, month = value.split("-")
            return int(year), int(month)
        except ValueError:
            raise ValidationError("Month must use the YYYY-MM format") from None

    @app.route("/reports/daily", methods=["GET"], endpoint="daily_report")
    @teacher_required
    def daily_report():
        day = request.args.get("date") or format_date(date.today())
        report = reports.daily_summary(day)
        if request.args.get("format") == "csv":
            return _write_report_csv(report=report, filename=f"attendance-summary-{report.period}.csv")
        return jsonify({"success": True, "report": _report_json(report)})

    @app.route("/reports/monthly", methods=["GET"], endpoint="monthly_report")
    @teacher_required
    def monthly_report():
        year, month = _parse_month(request.args.get("month") or date.today().strftime("%Y-%m"))
        report = reports.monthly_summary(year, month)
        if request.args.get("format") == "csv":
            return _write_report_csv(report=report, filename=f"attendance-summary-{report.period}.csv")
        return jsonify({"success": True, "report": _report_json(report)})

    @app.route("/reports/overview", methods=["GET"], endpoint="overview_report")
    @teacher_required
    def overview_report():
        day = request.args.get("date") or format_date(date.today())
        return jsonify(
            {
                "success": True,
                "date": day,
                "total_attendees": container.roster_service.count_active(),
                "summary": asdict(reports.day_overview(day)),
            }
        )
