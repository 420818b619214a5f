from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint

from app.core.database import Base

# Owner keys of visitors without an account are "guest:<session id>"
GUEST_OWNER_PREFIX = "guest:"


class Favorite(Base):
    """Membership of a service in an owner's favorite set."""

    __tablename__ = "favorites"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_key = Column(String(80), nullable=False, index=True)
    service_id = Column(
        String(36), ForeignKey("services.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("owner_key", "service_id", name="uq_favorite_owner_service"),
    )

    def __repr__(self):
        return f"<Favorite(owner_key='{self.owner_key}', service_id='{self.service_id}')>"
