"""
Geography services - states, districts, ranges, battalions
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import Any, Dict, List

from app.models import State, District, Range, Battalion, User
from app.services.crud_service import CRUDService


class StateService(CRUDService[State]):
    model = State
    label = "State"
    plural = "states"
    name_column = "state_name"
    search_columns = ("state_name", "state_description")
    sort_columns = ("state_name",)
    default_order = ("state_name",)
    children = ((District, "state_id", "districts"),)

    async def stats(self, db: AsyncSession) -> Dict[str, Any]:
        stats = await super().stats(db)
        stats["with_districts"] = await db.scalar(
            select(func.count(func.distinct(District.state_id)))
        ) or 0
        return stats


class DistrictService(CRUDService[District]):
    model = District
    label = "District"
    plural = "districts"
    name_column = "district_name"
    search_columns = ("district_name", "district_description")
    sort_columns = ("district_name", "state_id")
    filter_columns = ("state_id",)
    default_order = ("district_name",)
    parents = {"state_id": (State, "State")}
    children = ((Range, "district_id", "ranges"),)

    async def by_state(self, db: AsyncSession, state_id: int) -> List[District]:
        return await self.list_active(db, state_id=state_id)

    async def stats(self, db: AsyncSession) -> Dict[str, Any]:
        stats = await super().stats(db)
        result = await db.execute(
            select(State.state_name, func.count(District.id))
            .join(District, District.state_id == State.id)
            .group_by(State.state_name)
            .order_by(State.state_name)
        )
        stats["by_state"] = [{"state_name": name, "count": count} for name, count in result.all()]
        return stats


class RangeService(CRUDService[Range]):
    model = Range
    label = "Range"
    plural = "ranges"
    name_column = "range_name"
    search_columns = ("range_name", "range_head", "range_email", "range_description")
    sort_columns = ("range_name", "district_id")
    filter_columns = ("district_id",)
    default_order = ("range_name",)
    parents = {"district_id": (District, "District")}
    children = (
        (Battalion, "range_id", "battalions"),
        (User, "range_id", "users"),
    )

    async def by_district(self, db: AsyncSession, district_id: int) -> List[Range]:
        return await self.list_active(db, district_id=district_id)

    async def users(self, db: AsyncSession, range_id: int) -> List[User]:
        await self.get(db, range_id)
        result = await db.execute(
            select(User).where(User.range_id == range_id).order_by(User.first_name)
        )
        return list(result.scalars().all())

    async def battalions(self, db: AsyncSession, range_id: int) -> List[Battalion]:
        await self.get(db, range_id)
        return await battalion_service.list_active(db, range_id=range_id)

    async def stats(self, db: AsyncSession) -> Dict[str, Any]:
        stats = await super().stats(db)
        stats["total_battalions"] = await db.scalar(select(func.count()).select_from(Battalion)) or 0
        stats["total_users"] = await db.scalar(
            select(func.count()).select_from(User).where(User.range_id.is_not(None))
        ) or 0
        return stats


class BattalionService(CRUDService[Battalion]):
    model = Battalion
    label = "Battalion"
    plural = "battalions"
    name_column = "battalion_name"
    search_columns = ("battalion_name", "battalion_head", "battalion_email", "battalion_area")
    sort_columns = ("battalion_name", "range_id", "district_id")
    filter_columns = ("range_id", "district_id")
    default_order = ("battalion_name",)
    parents = {
        "range_id": (Range, "Range"),
        "district_id": (District, "District"),
    }
    children = ((User, "battalion_id", "users"),)

    async def by_range(self, db: AsyncSession, range_id: int) -> List[Battalion]:
        return await self.list_active(db, range_id=range_id)

    async def by_district(self, db: AsyncSession, district_id: int) -> List[Battalion]:
        return await self.list_active(db, district_id=district_id)

    async def users(self, db: AsyncSession, battalion_id: int) -> List[User]:
        await self.get(db, battalion_id)
        result = await db.execute(
            select(User).where(User.battalion_id == battalion_id).order_by(User.first_name)
        )
        return list(result.scalars().all())


state_service = StateService()
district_service = DistrictService()
range_service = RangeService()
battalion_service = BattalionService()
