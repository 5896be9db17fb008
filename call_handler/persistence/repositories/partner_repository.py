"""Partner repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from call_handler.persistence.models.partner import Partner
from call_handler.persistence.repositories.base import BaseRepository


class PartnerRepository(BaseRepository[Partner]):
    """Repository for Partner entities."""

    def __init__(self, session: AsyncSession):
        """Initialize partner repository."""
        super().__init__(Partner, session)

    async def get_by_phone(self, phone: str) -> Partner | None:
        """Get partner by normalized JustCall line number.

        Args:
            phone: Normalized phone number

        Returns:
            Partner entity or None if not found
        """
        stmt = select(Partner).where(Partner.phone == phone)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
