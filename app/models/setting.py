from sqlalchemy import Column, DateTime, String

from app.core.database import Base, utcnow

CONTACT_NUMBER_KEY = "whatsapp_number"


class GlobalSetting(Base):
    """Admin-editable key/value configuration."""

    __tablename__ = "global_settings"

    key = Column(String(64), primary_key=True)
    value = Column(String(255), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<GlobalSetting(key='{self.key}', value='{self.value}')>"
