import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.setting import CONTACT_NUMBER_KEY, GlobalSetting

logger = structlog.get_logger(__name__)


class GlobalSettingsService:
    """Admin-editable settings stored as key/value rows."""

    @staticmethod
    async def get_contact_number(db: AsyncSession) -> str:
        """Contact channel number, or the configured default when unset."""
        setting = await db.get(GlobalSetting, CONTACT_NUMBER_KEY)
        if setting and setting.value:
            return setting.value
        return settings.DEFAULT_CONTACT_NUMBER

    @staticmethod
    async def set_contact_number(db: AsyncSession, number: str) -> str:
        setting = await db.get(GlobalSetting, CONTACT_NUMBER_KEY)
        if setting:
            setting.value = number
        else:
            db.add(GlobalSetting(key=CONTACT_NUMBER_KEY, value=number))

        await db.commit()
        logger.info("Contact number updated", key=CONTACT_NUMBER_KEY)
        return number
