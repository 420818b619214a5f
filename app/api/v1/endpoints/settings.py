from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.auth import require_admin
from app.api.deps.database import get_db
from app.models.user import User
from app.schemas.admin import ContactSettings
from app.services.settings import GlobalSettingsService

router = APIRouter()


@router.get("/contact", response_model=ContactSettings)
async def get_contact_settings(db: AsyncSession = Depends(get_db)):
    number = await GlobalSettingsService.get_contact_number(db)
    return ContactSettings(whatsapp_number=number)


@router.put("/contact", response_model=ContactSettings)
async def update_contact_settings(
    contact: ContactSettings,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(require_admin),
):
    number = await GlobalSettingsService.set_contact_number(db, contact.whatsapp_number)
    return ContactSettings(whatsapp_number=number)
