"""
Dashboard Service - headline counts for the admin dashboard
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import Any, Dict, List

from app.models import (
    Battalion, Communication, District, Module, PerformanceStatistic, Question,
    Range, Role, State, StatisticStatus, Topic, User,
)
from app.utils.months import month_sort_key, to_number


class DashboardService:

    async def _count(self, db: AsyncSession, model, *criteria) -> int:
        return await db.scalar(select(func.count()).select_from(model).where(*criteria)) or 0

    async def overview(self, db: AsyncSession) -> Dict[str, int]:
        return {
            "states": await self._count(db, State),
            "districts": await self._count(db, District),
            "ranges": await self._count(db, Range),
            "battalions": await self._count(db, Battalion),
            "modules": await self._count(db, Module),
            "topics": await self._count(db, Topic),
            "questions": await self._count(db, Question),
            "users": await self._count(db, User),
            "active_users": await self._count(db, User, User.active.is_(True)),
            "communications": await self._count(db, Communication, Communication.active.is_(True)),
        }

    async def users_by_role(self, db: AsyncSession) -> List[Dict[str, Any]]:
        result = await db.execute(
            select(Role.id, Role.role_name, func.count(User.id))
            .outerjoin(User, User.role_id == Role.id)
            .group_by(Role.id, Role.role_name)
            .order_by(Role.role_name)
        )
        return [{"role_id": rid, "role_name": name, "count": count} for rid, name, count in result.all()]

    async def users_by_battalion(self, db: AsyncSession) -> List[Dict[str, Any]]:
        result = await db.execute(
            select(Battalion.id, Battalion.battalion_name, func.count(User.id))
            .outerjoin(User, User.battalion_id == Battalion.id)
            .group_by(Battalion.id, Battalion.battalion_name)
            .order_by(Battalion.battalion_name)
        )
        return [
            {"battalion_id": bid, "battalion_name": name, "count": count}
            for bid, name, count in result.all()
        ]

    async def recent_users(self, db: AsyncSession, limit: int = 10) -> List[User]:
        result = await db.execute(
            select(User).order_by(User.created_date.desc(), User.id.desc()).limit(limit)
        )
        return list(result.scalars().unique().all())

    @staticmethod
    def _accumulate(rows, label_key: str) -> Dict[Any, Dict[str, Any]]:
        buckets: Dict[Any, Dict[str, Any]] = {}
        for key, label, status, value in rows:
            bucket = buckets.setdefault(key, {
                label_key: label, "record_count": 0, "success_count": 0, "total_value": 0.0,
            })
            bucket["record_count"] += 1
            if status == StatisticStatus.SUCCESS.value:
                bucket["success_count"] += 1
            bucket["total_value"] += to_number(value) or 0
        return buckets

    async def performance_by_month(self, db: AsyncSession) -> List[Dict[str, Any]]:
        result = await db.execute(
            select(
                PerformanceStatistic.month_year,
                PerformanceStatistic.month_year,
                PerformanceStatistic.status,
                PerformanceStatistic.value,
            ).where(PerformanceStatistic.active.is_(True))
        )
        buckets = self._accumulate(result.all(), "month_year")
        return [buckets[label] for label in sorted(buckets, key=month_sort_key)]

    async def performance_by_module(self, db: AsyncSession) -> List[Dict[str, Any]]:
        result = await db.execute(
            select(
                PerformanceStatistic.module_id,
                Module.module_name,
                PerformanceStatistic.status,
                PerformanceStatistic.value,
            )
            .join(Module, Module.id == PerformanceStatistic.module_id)
            .where(PerformanceStatistic.active.is_(True))
        )
        buckets = self._accumulate(result.all(), "module_name")
        return [{"module_id": mid, **bucket} for mid, bucket in sorted(buckets.items())]


dashboard_service = DashboardService()
