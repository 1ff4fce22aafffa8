from datetime import datetime, timedelta
from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.base import CRUDBase
from app.models.base import utcnow
from app.models.user import User
from app.schemas.auth import NormalizedProfile
from app.schemas.user import UserCreate, UserStats, UserUpdate


class CRUDUser(CRUDBase[User, UserCreate, UserUpdate]):
    async def get_by_telegram_id(self, db: AsyncSession, telegram_id: int) -> Optional[User]:
        result = await db.execute(select(User).where(User.telegram_id == telegram_id))
        return result.scalar_one_or_none()

    async def get_multi(
        self, db: AsyncSession, *, skip: int = 0, limit: int = 100
    ) -> Sequence[User]:
        """Newest users first."""
        result = await db.execute(
            select(User)
            .order_by(User.created_at.desc(), User.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return result.scalars().all()

    async def upsert(self, db: AsyncSession, profile: NormalizedProfile) -> User:
        """Create or update the user keyed by telegram_id and stamp last_login."""
        fields = profile.model_dump(exclude={"id"})
        now = utcnow()
        user = await self.get_by_telegram_id(db, profile.id)
        if user is None:
            try:
                async with db.begin_nested():
                    return await self.create(
                        db, obj_in=UserCreate(telegram_id=profile.id, **fields, last_login=now)
                    )
            except IntegrityError:
                # a concurrent login inserted the row first
                user = await self.get_by_telegram_id(db, profile.id)
                if user is None:
                    raise
        return await self.update(db, db_obj=user, obj_in=UserUpdate(**fields, last_login=now))

    async def get_stats(self, db: AsyncSession, now: Optional[datetime] = None) -> UserStats:
        """Totals plus logins and registrations within the current UTC day."""
        day_start = datetime.combine((now or utcnow()).date(), datetime.min.time())
        day_end = day_start + timedelta(days=1)

        total = await db.scalar(select(func.count()).select_from(User))
        today_logins = await db.scalar(
            select(func.count())
            .select_from(User)
            .where(User.last_login >= day_start, User.last_login < day_end)
        )
        new_today = await db.scalar(
            select(func.count())
            .select_from(User)
            .where(User.created_at >= day_start, User.created_at < day_end)
        )
        return UserStats(
            total_users=total or 0,
            today_logins=today_logins or 0,
            new_today=new_today or 0,
        )


crud_user = CRUDUser(User)
