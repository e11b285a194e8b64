"""
Report Service - role-scoped performance reports with export

Handles:
- Request validation (every problem reported at once, keyed by field)
- Role scoping (SYSTEM_ADMIN / RANGE_ADMIN / battalion users)
- Report generation by type, optional grouping and aggregation
- Report cache and EXCEL/CSV export
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from datetime import date, datetime
from io import BytesIO, StringIO
from typing import Any, Dict, List, Optional, Tuple
import csv
import json
import random
import re
import string
import time

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from app.core.config import settings
from app.core.exceptions import (
    AccessDeniedError,
    ReportError,
    ReportNotFoundError,
    UnsupportedExportFormatError,
    ValidationError,
)
from app.core.logging_config import get_logger, logger as app_logger
from app.models import (
    Battalion, Module, PerformanceStatistic, Question, Range, ReportCache,
    StatisticStatus, SubTopic, Topic, User,
)
from app.schemas.performance import MONTH_YEAR_RE
from app.services.user_service import RANGE_ADMIN, SYSTEM_ADMIN, role_scope
from app.utils.months import (
    financial_year_range,
    labels_for_dates,
    month_sort_key,
    quarter_range,
    to_number,
)

logger = get_logger("services.reports")

REPORT_TYPES = ("SUMMARY", "DETAILED", "COMPARISON", "TREND", "PERFORMANCE", "COMPLIANCE")
GROUP_BY_OPTIONS = ("BATTALION", "MODULE", "TOPIC", "MONTH", "QUARTER", "YEAR")
AGGREGATION_TYPES = ("SUM", "AVG", "COUNT", "MIN", "MAX")
EXPORT_FORMATS = ("EXCEL", "CSV", "PDF")
QUARTERS = ("Q1", "Q2", "Q3", "Q4")

# request sort_by -> row key
SORT_FIELDS = {
    "battalionName": "battalion_name",
    "moduleName": "module_name",
    "topicName": "topic_name",
    "lastUpdated": "updated_date",
    "createdAt": "created_date",
    "completionRate": "completion_rate",
    "value": "value",
}

FINANCIAL_YEAR_RE = re.compile(r'^(\d{4})-(\d{2})$')

EXPORT_COLUMNS = (
    ("Range", "range_name"),
    ("Battalion", "battalion_name"),
    ("Module", "module_name"),
    ("Topic", "topic_name"),
    ("Sub Topic", "sub_topic_name"),
    ("Question", "question"),
    ("Value", "value"),
    ("Month", "month"),
)

HEADER_FILL = PatternFill(start_color="1F4E78", end_color="1F4E78", fill_type="solid")
HEADER_FONT = Font(bold=True, color="FFFFFF")

NOT_AVAILABLE = "N/A"

# quarter of the financial year for a calendar month
_FIN_QUARTER = {m: f"Q{((m - 4) % 12) // 3 + 1}" for m in range(1, 13)}


def performance_grade(rate: float) -> str:
    if rate >= 90:
        return "A+"
    if rate >= 80:
        return "A"
    if rate >= 70:
        return "B"
    if rate >= 60:
        return "C"
    return "D"


def generate_report_id() -> str:
    """RPT_YYYYMMDD_<epoch ms>_<6 upper alnum>"""
    suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=6))
    return f"RPT_{date.today():%Y%m%d}_{int(time.time() * 1000)}_{suffix}"


def _rate(part: int, whole: int) -> float:
    return round(part / whole * 100, 2) if whole else 0.0


def _parse_date(value: str) -> date:
    return datetime.strptime(value, "%Y-%m-%d").date()


class ReportService:
    """Report generation for the performance statistics"""

    # ==================== VALIDATION ====================

    def validate_request(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """Normalise the request; raises ValidationError with every field problem"""
        errors: Dict[str, str] = {}
        req = dict(request)

        req["report_type"] = (req.get("report_type") or "").upper()
        if req["report_type"] not in REPORT_TYPES:
            errors["report_type"] = f"report_type must be one of: {', '.join(REPORT_TYPES)}"

        if len(req.get("battalion_ids") or []) > settings.REPORT_MAX_BATTALIONS:
            errors["battalion_ids"] = f"At most {settings.REPORT_MAX_BATTALIONS} battalions can be selected"

        if req.get("page", 0) < 0:
            errors["page"] = "page must be 0 or greater"
        size = req.get("size")
        if size is None:
            req["size"] = settings.REPORT_DEFAULT_PAGE_SIZE
        elif not 1 <= size <= settings.REPORT_MAX_PAGE_SIZE:
            errors["size"] = f"size must be between 1 and {settings.REPORT_MAX_PAGE_SIZE}"

        if req.get("sort_by") and req["sort_by"] not in SORT_FIELDS:
            errors["sort_by"] = f"sort_by must be one of: {', '.join(SORT_FIELDS)}"
        req["sort_direction"] = (req.get("sort_direction") or "DESC").upper()
        if req["sort_direction"] not in ("ASC", "DESC"):
            errors["sort_direction"] = "sort_direction must be ASC or DESC"

        for field, allowed in (("group_by", GROUP_BY_OPTIONS), ("aggregation_type", AGGREGATION_TYPES)):
            if req.get(field):
                req[field] = req[field].upper()
                if req[field] not in allowed:
                    errors[field] = f"{field} must be one of: {', '.join(allowed)}"

        if req.get("status"):
            req["status"] = req["status"].upper()
            if req["status"] not in {s.value for s in StatisticStatus}:
                errors["status"] = "status must be INPROGRESS or SUCCESS"

        if req.get("month_year"):
            req["month_year"] = req["month_year"].strip().upper()
            if not MONTH_YEAR_RE.match(req["month_year"]):
                errors["month_year"] = "month_year must look like 'SEP 2025'"

        parsed_dates = {}
        for field in ("from_date", "to_date"):
            if req.get(field):
                try:
                    parsed_dates[field] = _parse_date(req[field])
                except ValueError:
                    errors[field] = f"{field} must be a date (YYYY-MM-DD)"
        if len(parsed_dates) == 2 and parsed_dates["from_date"] > parsed_dates["to_date"]:
            errors["to_date"] = "to_date must not be before from_date"

        financial_year = req.get("financial_year")
        if financial_year:
            match = FINANCIAL_YEAR_RE.match(financial_year)
            if not match or (int(match.group(1)) + 1) % 100 != int(match.group(2)):
                errors["financial_year"] = "financial_year must look like '2024-25'"
        if req.get("quarter"):
            req["quarter"] = req["quarter"].upper()
            if req["quarter"] not in QUARTERS:
                errors["quarter"] = "quarter must be one of: Q1, Q2, Q3, Q4"
            elif not financial_year:
                errors["quarter"] = "quarter requires financial_year"

        if errors:
            logger.warning("Report request rejected", extra={"errors": errors})
            raise ValidationError("Invalid report request", errors=errors)
        return req

    # ==================== SCOPE ====================

    def apply_scope(self, user: User, req: Dict[str, Any]) -> Dict[str, Any]:
        """Force the request into the user's slice of the hierarchy"""
        scope = role_scope(user)
        if scope == SYSTEM_ADMIN:
            return req

        if scope == RANGE_ADMIN:
            if req.get("range_id") is not None and req["range_id"] != user.range_id:
                raise AccessDeniedError("You can only report on your own range", scope=scope)
            req["range_id"] = user.range_id
            return req

        requested = req.get("battalion_ids") or []
        if any(battalion_id != user.battalion_id for battalion_id in requested):
            raise AccessDeniedError("You can only report on your own battalion", scope=scope)
        req["battalion_ids"] = [user.battalion_id]
        return req

    @staticmethod
    def month_labels(req: Dict[str, Any]) -> Optional[List[str]]:
        """Month labels selected by month_year, dates, financial year or quarter"""
        if req.get("month_year"):
            return [req["month_year"]]
        if req.get("quarter"):
            return labels_for_dates(*quarter_range(req["financial_year"], req["quarter"]))
        if req.get("financial_year"):
            return labels_for_dates(*financial_year_range(req["financial_year"]))
        if req.get("from_date") or req.get("to_date"):
            start = _parse_date(req["from_date"]) if req.get("from_date") else date(2000, 1, 1)
            end = _parse_date(req["to_date"]) if req.get("to_date") else date.today()
            return labels_for_dates(start, end)
        return None

    # ==================== DATA ====================

    async def fetch_rows(self, db: AsyncSession, req: Dict[str, Any]) -> List[Dict[str, Any]]:
        stat = PerformanceStatistic
        query = (
            select(
                stat,
                Range.range_name,
                Battalion.battalion_name,
                Module.module_name,
                Topic.topic_name,
                SubTopic.sub_topic_name,
                Question.question,
                User.first_name,
                User.last_name,
            )
            .outerjoin(Range, Range.id == stat.range_id)
            .outerjoin(Battalion, Battalion.id == stat.battalion_id)
            .outerjoin(Module, Module.id == stat.module_id)
            .outerjoin(Topic, Topic.id == stat.topic_id)
            .outerjoin(SubTopic, SubTopic.id == stat.sub_topic_id)
            .outerjoin(Question, Question.id == stat.question_id)
            .outerjoin(User, User.id == stat.user_id)
            .where(stat.active.is_(True))
        )

        if req.get("battalion_ids"):
            query = query.where(stat.battalion_id.in_(req["battalion_ids"]))
        if req.get("range_id") is not None:
            query = query.where(stat.range_id == req["range_id"])
        if req.get("module_id") is not None:
            query = query.where(stat.module_id == req["module_id"])
        for field, column in (
            ("topic_ids", stat.topic_id),
            ("sub_topic_ids", stat.sub_topic_id),
            ("question_ids", stat.question_id),
        ):
            if req.get(field):
                query = query.where(column.in_(req[field]))
        if req.get("status"):
            query = query.where(stat.status == req["status"])

        labels = self.month_labels(req)
        if labels is not None:
            query = query.where(stat.month_year.in_(labels))

        rows = []
        for record, range_name, battalion_name, module_name, topic_name, sub_topic_name, question, first, last in (
            await db.execute(query.order_by(stat.id))
        ).all():
            officer = " ".join(p for p in (first, last) if p)
            rows.append({
                "id": record.id,
                "battalion_id": record.battalion_id,
                "module_id": record.module_id,
                "topic_id": record.topic_id,
                "range_name": range_name or NOT_AVAILABLE,
                "battalion_name": battalion_name or NOT_AVAILABLE,
                "module_name": module_name or NOT_AVAILABLE,
                "topic_name": topic_name or NOT_AVAILABLE,
                "sub_topic_name": sub_topic_name or NOT_AVAILABLE,
                "question": question or NOT_AVAILABLE,
                "month": record.month_year,
                "value": record.value if record.value is not None else NOT_AVAILABLE,
                "officer_name": officer or NOT_AVAILABLE,
                "status": record.status,
                "created_date": record.created_date.isoformat() if record.created_date else None,
                "updated_date": record.updated_date.isoformat() if record.updated_date else None,
            })
        return rows

    @staticmethod
    def sort_rows(rows: List[Dict[str, Any]], sort_by: Optional[str], direction: str) -> List[Dict[str, Any]]:
        key = SORT_FIELDS.get(sort_by or "createdAt", "created_date")
        if key == "value":
            def sort_key(row):
                number = to_number(row["value"])
                return (number is None, number or 0)
        elif key == "completion_rate":
            # rows carry a status, the rate is their battalion's share of SUCCESS rows
            rates = {
                entry["battalion_id"]: entry["completion_rate"]
                for entry in ReportService._battalion_stats(rows)
            }

            def sort_key(row):
                return (rates[row["battalion_id"]], str(row["battalion_name"] or ""))
        else:
            def sort_key(row):
                return (row[key] is None, str(row[key] or ""))
        return sorted(rows, key=sort_key, reverse=direction == "DESC")

    # ==================== AGGREGATION ====================

    @staticmethod
    def _battalion_stats(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        stats: Dict[Any, Dict[str, Any]] = {}
        for row in rows:
            entry = stats.setdefault(row["battalion_id"], {
                "battalion_id": row["battalion_id"],
                "battalion_name": row["battalion_name"],
                "total_responses": 0,
                "success_responses": 0,
                "total_value": 0.0,
            })
            entry["total_responses"] += 1
            if row["status"] == StatisticStatus.SUCCESS.value:
                entry["success_responses"] += 1
            entry["total_value"] += to_number(row["value"]) or 0
        for entry in stats.values():
            entry["completion_rate"] = _rate(entry["success_responses"], entry["total_responses"])
        return sorted(stats.values(), key=lambda e: str(e["battalion_name"]))

    def _overview(self, rows: List[Dict[str, Any]]) -> Dict[str, Any]:
        status_distribution: Dict[str, int] = {}
        for row in rows:
            status_distribution[row["status"]] = status_distribution.get(row["status"], 0) + 1
        success = status_distribution.get(StatisticStatus.SUCCESS.value, 0)
        return {
            "total_records": len(rows),
            "total_battalions": len({row["battalion_id"] for row in rows}),
            "total_modules": len({row["module_id"] for row in rows}),
            "total_topics": len({row["topic_id"] for row in rows}),
            "success_count": success,
            "completion_rate": _rate(success, len(rows)),
            "status_distribution": status_distribution,
        }

    def summary(self, rows: List[Dict[str, Any]]) -> Dict[str, Any]:
        battalions = self._battalion_stats(rows)
        ranked = sorted(battalions, key=lambda e: e["completion_rate"], reverse=True)[:5]
        return {
            "overview": self._overview(rows),
            "battalion_performance": battalions,
            "top_performers": [
                {
                    "rank": index + 1,
                    "battalion_id": entry["battalion_id"],
                    "battalion_name": entry["battalion_name"],
                    "completion_rate": entry["completion_rate"],
                    "total_responses": entry["total_responses"],
                    "performance_grade": performance_grade(entry["completion_rate"]),
                }
                for index, entry in enumerate(ranked)
            ],
        }

    def comparison(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [
            {
                **entry,
                "average_value": round(entry["total_value"] / entry["total_responses"], 2),
            }
            for entry in self._battalion_stats(rows)
        ]

    @staticmethod
    def trend(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        months: Dict[str, Dict[str, Any]] = {}
        for row in rows:
            entry = months.setdefault(row["month"], {
                "month": row["month"], "record_count": 0, "success_count": 0, "total_value": 0.0,
            })
            entry["record_count"] += 1
            if row["status"] == StatisticStatus.SUCCESS.value:
                entry["success_count"] += 1
            entry["total_value"] += to_number(row["value"]) or 0
        for entry in months.values():
            entry["completion_rate"] = _rate(entry["success_count"], entry["record_count"])
        return [months[label] for label in sorted(months, key=month_sort_key)]

    def performance(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [
            {**entry, "performance_grade": performance_grade(entry["completion_rate"])}
            for entry in sorted(self._battalion_stats(rows), key=lambda e: e["completion_rate"], reverse=True)
        ]

    def compliance(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [
            {
                "battalion_id": entry["battalion_id"],
                "battalion_name": entry["battalion_name"],
                "expected": entry["total_responses"],
                "submitted": entry["success_responses"],
                "pending": entry["total_responses"] - entry["success_responses"],
                "compliance_percentage": entry["completion_rate"],
            }
            for entry in self._battalion_stats(rows)
        ]

    @staticmethod
    def _group_key(row: Dict[str, Any], group_by: str) -> str:
        if group_by == "BATTALION":
            return row["battalion_name"]
        if group_by == "MODULE":
            return row["module_name"]
        if group_by == "TOPIC":
            return row["topic_name"]
        year, month = month_sort_key(row["month"])
        if group_by == "MONTH":
            return row["month"]
        if group_by == "QUARTER" and month:
            fin_year = year if month >= 4 else year - 1
            return f"{fin_year}-{str(fin_year + 1)[-2:]} {_FIN_QUARTER[month]}"
        return str(year)

    def group(self, rows: List[Dict[str, Any]], group_by: str, aggregation_type: Optional[str]) -> List[Dict[str, Any]]:
        aggregation_type = aggregation_type or "SUM"
        groups: Dict[str, List[Optional[float]]] = {}
        for row in rows:
            groups.setdefault(self._group_key(row, group_by), []).append(to_number(row["value"]))

        result = []
        for key, values in groups.items():
            numbers = [v for v in values if v is not None]
            if aggregation_type == "COUNT":
                value = len(values)
            elif not numbers:
                value = 0
            elif aggregation_type == "SUM":
                value = sum(numbers)
            elif aggregation_type == "AVG":
                value = round(sum(numbers) / len(numbers), 2)
            elif aggregation_type == "MIN":
                value = min(numbers)
            else:
                value = max(numbers)
            result.append({"group": key, "value": value, "record_count": len(values)})

        if group_by == "MONTH":
            return sorted(result, key=lambda g: month_sort_key(g["group"]))
        return sorted(result, key=lambda g: g["group"])

    # ==================== GENERATE ====================

    async def generate(self, db: AsyncSession, user: User, request: Dict[str, Any]) -> Dict[str, Any]:
        req = self.apply_scope(user, self.validate_request(request))
        report_type = req["report_type"]
        start = time.time()

        rows = self.sort_rows(await self.fetch_rows(db, req), req.get("sort_by"), req["sort_direction"])
        page, size = req.get("page", 0), req["size"]

        if report_type == "DETAILED":
            data: Dict[str, Any] = {
                "rows": rows[page * size:(page + 1) * size],
                "total_records": len(rows),
                "total_pages": (len(rows) + size - 1) // size,
            }
        elif report_type == "SUMMARY":
            data = self.summary(rows)
        elif report_type == "COMPARISON":
            data = {"battalions": self.comparison(rows)}
        elif report_type == "TREND":
            data = {"months": self.trend(rows)}
        elif report_type == "PERFORMANCE":
            data = {"battalions": self.performance(rows)}
        else:
            data = {"battalions": self.compliance(rows)}

        if req.get("group_by"):
            data["grouped"] = self.group(rows, req["group_by"], req.get("aggregation_type"))
        if req.get("include_summary", True) and report_type != "SUMMARY":
            data["summary"] = self._overview(rows)

        report_id = generate_report_id()
        metadata = {
            "report_id": report_id,
            "report_type": report_type,
            "generated_at": datetime.utcnow().isoformat(),
            "generated_by": user.id,
            "record_count": len(rows),
            "page": page,
            "size": size,
        }
        report = {"metadata": metadata, "data": data}

        db.add(ReportCache(
            report_id=report_id,
            report_type=report_type,
            report_data=json.dumps({**report, "rows": rows}, default=str),
            created_by=user.id,
            updated_by=user.id,
        ))
        await db.flush()

        app_logger.log_report_event(
            "generated", report_id, report_type, len(rows),
            user_id=user.id, duration_ms=round((time.time() - start) * 1000, 2),
        )
        return report

    async def _cached(self, db: AsyncSession, report_id: str) -> Dict[str, Any]:
        result = await db.execute(select(ReportCache).where(ReportCache.report_id == report_id))
        cached = result.scalar_one_or_none()
        if cached is None:
            raise ReportNotFoundError(report_id)
        try:
            return json.loads(cached.report_data)
        except ValueError as e:
            raise ReportError(f"Cached report is unreadable: {e}", report_id=report_id)

    async def get_report(self, db: AsyncSession, report_id: str) -> Dict[str, Any]:
        stored = await self._cached(db, report_id)
        return {"metadata": stored["metadata"], "data": stored["data"]}

    # ==================== EXPORT ====================

    @staticmethod
    def to_excel(rows: List[Dict[str, Any]], title: str) -> bytes:
        wb = Workbook()
        ws = wb.active
        ws.title = title[:31]

        ws.append([header for header, _ in EXPORT_COLUMNS])
        for cell in ws[1]:
            cell.fill = HEADER_FILL
            cell.font = HEADER_FONT

        for row in rows:
            ws.append([row.get(key) for _, key in EXPORT_COLUMNS])

        for index, (header, key) in enumerate(EXPORT_COLUMNS):
            width = max([len(header)] + [len(str(row.get(key) or "")) for row in rows])
            ws.column_dimensions[chr(ord("A") + index)].width = min(width + 2, 60)

        buffer = BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    @staticmethod
    def to_csv(rows: List[Dict[str, Any]]) -> bytes:
        buffer = StringIO()
        writer = csv.writer(buffer)
        writer.writerow([header for header, _ in EXPORT_COLUMNS])
        for row in rows:
            writer.writerow([row.get(key) for _, key in EXPORT_COLUMNS])
        return buffer.getvalue().encode("utf-8")

    async def export(self, db: AsyncSession, report_id: str, export_format: str = "EXCEL") -> Tuple[bytes, str, str]:
        """Returns (content, media type, filename)"""
        export_format = (export_format or "EXCEL").upper()
        if export_format not in EXPORT_FORMATS or export_format == "PDF":
            raise UnsupportedExportFormatError(export_format, ["EXCEL", "CSV"])

        stored = await self._cached(db, report_id)
        rows = stored.get("rows", [])

        if export_format == "EXCEL":
            content = self.to_excel(rows, stored["metadata"]["report_type"])
            media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
            filename = f"{report_id}.xlsx"
        else:
            content = self.to_csv(rows)
            media_type = "text/csv"
            filename = f"{report_id}.csv"

        app_logger.log_report_event("exported", report_id, stored["metadata"]["report_type"], len(rows),
                                    format=export_format)
        return content, media_type, filename

    # ==================== OPTIONS ====================

    @staticmethod
    def templates() -> List[Dict[str, Any]]:
        return [
            {
                "id": "battalion_summary",
                "name": "Battalion Summary Report",
                "description": "High-level performance summary by battalion",
                "report_type": "SUMMARY",
                "default_filters": {"view_type": "BOTH"},
            },
            {
                "id": "battalion_comparison",
                "name": "Battalion Comparison Report",
                "description": "Side-by-side comparison of multiple battalions",
                "report_type": "COMPARISON",
                "default_filters": {"view_type": "CHART"},
            },
            {
                "id": "performance_trend",
                "name": "Performance Trend Analysis",
                "description": "Month-by-month performance metrics",
                "report_type": "TREND",
                "default_filters": {"view_type": "CHART"},
            },
            {
                "id": "compliance_report",
                "name": "Compliance Status Report",
                "description": "Submission status tracking per battalion",
                "report_type": "COMPLIANCE",
                "default_filters": {"view_type": "TABLE"},
            },
        ]

    async def metadata(self, db: AsyncSession, user: User) -> Dict[str, Any]:
        scope = role_scope(user)

        battalion_query = (
            select(Battalion.id, Battalion.battalion_name, Battalion.range_id, Range.range_name)
            .outerjoin(Range, Range.id == Battalion.range_id)
            .where(Battalion.active.is_(True))
            .order_by(Battalion.battalion_name)
        )
        range_query = select(Range.id, Range.range_name).where(Range.active.is_(True)).order_by(Range.range_name)
        if scope == RANGE_ADMIN:
            battalion_query = battalion_query.where(Battalion.range_id == user.range_id)
            range_query = range_query.where(Range.id == user.range_id)
        elif scope != SYSTEM_ADMIN:
            battalion_query = battalion_query.where(Battalion.id == user.battalion_id)

        battalions = (await db.execute(battalion_query)).all()
        ranges = (await db.execute(range_query)).all() if scope in (SYSTEM_ADMIN, RANGE_ADMIN) else []
        modules = (await db.execute(
            select(Module.id, Module.module_name)
            .where(Module.active.is_(True))
            .order_by(Module.priority, Module.module_name)
        )).all()

        return {
            "battalions": [
                {"id": bid, "name": name, "range_id": range_id, "range_name": range_name}
                for bid, name, range_id, range_name in battalions
            ],
            "ranges": [{"id": rid, "name": name} for rid, name in ranges],
            "modules": [{"id": mid, "name": name} for mid, name in modules],
            "report_types": [{"value": t, "label": f"{t.title()} Report"} for t in REPORT_TYPES],
            "view_types": [
                {"value": "TABLE", "label": "Table Only"},
                {"value": "CHART", "label": "Chart Only"},
                {"value": "BOTH", "label": "Table and Chart"},
            ],
            "formats": [
                {"value": "JSON", "label": "JSON Response"},
                {"value": "CSV", "label": "CSV File"},
                {"value": "EXCEL", "label": "Excel File"},
            ],
            "status_options": [
                {"value": StatisticStatus.INPROGRESS.value, "label": "In Progress"},
                {"value": StatisticStatus.SUCCESS.value, "label": "Submitted"},
            ],
            "sort_options": [
                {"value": value, "label": " ".join(re.findall(r'[A-Z]?[a-z]+', value)).title()}
                for value in SORT_FIELDS
            ],
        }


report_service = ReportService()
