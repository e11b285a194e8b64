"""
Unit Tests for ReportService - validation, role scoping and aggregation
"""
import re

import pytest

from app.core.exceptions import AccessDeniedError, ValidationError
from app.models import Role, User
from app.services.report_service import ReportService, generate_report_id, performance_grade


@pytest.fixture
def service() -> ReportService:
    return ReportService()


def _user(role_name: str, range_id: int = 1, battalion_id: int = 10) -> User:
    return User(id=1, role=Role(role_name=role_name), range_id=range_id, battalion_id=battalion_id)


def _row(battalion_id, battalion_name, month, value, status="SUCCESS", module="Training", topic="Drill"):
    return {
        "battalion_id": battalion_id,
        "battalion_name": battalion_name,
        "module_id": 1,
        "module_name": module,
        "topic_id": 1,
        "topic_name": topic,
        "month": month,
        "value": value,
        "status": status,
    }


class TestValidateRequest:

    def test_defaults(self, service):
        req = service.validate_request({"report_type": "summary"})

        assert req["report_type"] == "SUMMARY"
        assert req["size"] == 50
        assert req["sort_direction"] == "DESC"

    def test_collects_every_field_error(self, service):
        with pytest.raises(ValidationError) as exc_info:
            service.validate_request({
                "report_type": "UNKNOWN",
                "battalion_ids": list(range(51)),
                "size": 5000,
                "sort_by": "colour",
                "group_by": "WEEK",
                "month_year": "September",
            })

        errors = exc_info.value.details["errors"]
        assert exc_info.value.status_code == 400
        for field in ("report_type", "battalion_ids", "size", "sort_by", "group_by", "month_year"):
            assert field in errors

    def test_financial_year_format(self, service):
        with pytest.raises(ValidationError) as exc_info:
            service.validate_request({"report_type": "TREND", "financial_year": "2024-26"})

        assert "financial_year" in exc_info.value.details["errors"]

    def test_quarter_requires_financial_year(self, service):
        with pytest.raises(ValidationError) as exc_info:
            service.validate_request({"report_type": "TREND", "quarter": "Q2"})

        assert exc_info.value.details["errors"]["quarter"] == "quarter requires financial_year"

    def test_date_order(self, service):
        with pytest.raises(ValidationError) as exc_info:
            service.validate_request({
                "report_type": "DETAILED", "from_date": "2025-05-01", "to_date": "2025-04-01",
            })

        assert "to_date" in exc_info.value.details["errors"]


class TestMonthLabels:

    def test_quarter_labels(self, service):
        req = service.validate_request({"report_type": "TREND", "financial_year": "2024-25", "quarter": "Q4"})

        assert service.month_labels(req) == ["JAN 2025", "FEB 2025", "MAR 2025"]

    def test_month_year_wins(self, service):
        req = service.validate_request({"report_type": "TREND", "month_year": "sep 2025"})

        assert service.month_labels(req) == ["SEP 2025"]

    def test_no_period(self, service):
        assert service.month_labels(service.validate_request({"report_type": "TREND"})) is None


class TestApplyScope:

    def test_system_admin_unrestricted(self, service):
        req = service.apply_scope(_user("System Admin"), {"battalion_ids": [3, 4], "range_id": 9})

        assert req["battalion_ids"] == [3, 4]
        assert req["range_id"] == 9

    def test_range_admin_forced_to_own_range(self, service):
        req = service.apply_scope(_user("range admin", range_id=2), {"battalion_ids": None, "range_id": None})

        assert req["range_id"] == 2

    def test_range_admin_other_range_denied(self, service):
        with pytest.raises(AccessDeniedError):
            service.apply_scope(_user("Range Admin", range_id=2), {"range_id": 3})

    def test_battalion_user_forced_to_own_battalion(self, service):
        req = service.apply_scope(_user("Battalion User", battalion_id=10), {"battalion_ids": None})

        assert req["battalion_ids"] == [10]

    def test_battalion_user_other_battalion_denied(self, service):
        with pytest.raises(AccessDeniedError) as exc_info:
            service.apply_scope(_user("Battalion User", battalion_id=10), {"battalion_ids": [10, 11]})

        assert exc_info.value.status_code == 403

    def test_unknown_role_treated_as_battalion_user(self, service):
        req = service.apply_scope(_user("Clerk", battalion_id=7), {"battalion_ids": []})

        assert req["battalion_ids"] == [7]


class TestAggregation:

    @pytest.fixture
    def rows(self):
        return [
            _row(1, "BSAP-1", "APR 2025", "10"),
            _row(1, "BSAP-1", "MAY 2025", "20", status="INPROGRESS"),
            _row(2, "BSAP-2", "APR 2025", "5"),
            _row(2, "BSAP-2", "MAY 2025", "Yes"),
        ]

    def test_performance_grade_boundaries(self):
        assert performance_grade(95) == "A+"
        assert performance_grade(90) == "A+"
        assert performance_grade(80) == "A"
        assert performance_grade(70) == "B"
        assert performance_grade(60) == "C"
        assert performance_grade(59.99) == "D"

    def test_report_id_format(self):
        assert re.match(r"^RPT_\d{8}_\d{13}_[A-Z0-9]{6}$", generate_report_id())

    def test_summary(self, service, rows):
        summary = service.summary(rows)

        assert summary["overview"]["total_records"] == 4
        assert summary["overview"]["success_count"] == 3
        assert summary["overview"]["status_distribution"] == {"SUCCESS": 3, "INPROGRESS": 1}
        top = summary["top_performers"][0]
        assert top["battalion_name"] == "BSAP-2"
        assert top["completion_rate"] == 100.0
        assert top["performance_grade"] == "A+"

    def test_compliance(self, service, rows):
        compliance = {entry["battalion_name"]: entry for entry in service.compliance(rows)}

        assert compliance["BSAP-1"]["expected"] == 2
        assert compliance["BSAP-1"]["submitted"] == 1
        assert compliance["BSAP-1"]["pending"] == 1
        assert compliance["BSAP-1"]["compliance_percentage"] == 50.0

    def test_trend_is_chronological(self, service, rows):
        months = service.trend(rows)

        assert [m["month"] for m in months] == ["APR 2025", "MAY 2025"]
        assert months[0]["total_value"] == 15.0

    def test_group_by_battalion_sum_ignores_non_numeric(self, service, rows):
        grouped = service.group(rows, "BATTALION", "SUM")

        assert grouped == [
            {"group": "BSAP-1", "value": 30.0, "record_count": 2},
            {"group": "BSAP-2", "value": 5.0, "record_count": 2},
        ]

    def test_group_by_quarter(self, service, rows):
        grouped = service.group(rows, "QUARTER", "COUNT")

        assert grouped == [{"group": "2025-26 Q1", "value": 4, "record_count": 4}]

    def test_sort_by_value(self, service, rows):
        ordered = service.sort_rows(rows, "value", "ASC")

        assert [row["value"] for row in ordered] == ["5", "10", "20", "Yes"]

    def test_sort_by_completion_rate(self, service, rows):
        ordered = service.sort_rows(rows, "completionRate", "DESC")

        # BSAP-2 has every row submitted, BSAP-1 half
        assert [row["battalion_name"] for row in ordered] == ["BSAP-2", "BSAP-2", "BSAP-1", "BSAP-1"]
        assert service.sort_rows(rows, "completionRate", "ASC")[0]["battalion_name"] == "BSAP-1"

    def test_excel_export_header(self, service):
        from io import BytesIO
        from openpyxl import load_workbook

        content = service.to_excel([{"battalion_name": "BSAP-1", "value": "10", "month": "APR 2025"}], "DETAILED")
        sheet = load_workbook(BytesIO(content)).active

        assert sheet["A1"].value == "Range"
        assert sheet["A1"].font.bold is True
        assert sheet["B2"].value == "BSAP-1"

    def test_csv_export(self, service):
        content = service.to_csv([{"range_name": "Central", "value": "10"}]).decode("utf-8")
        lines = content.strip().splitlines()

        assert lines[0].startswith("Range,Battalion,Module")
        assert lines[1].startswith("Central,")
