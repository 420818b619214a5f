from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from app.core.database import Base, utcnow


class Category(Base):
    """Top-level catalog category with localized labels."""

    __tablename__ = "categories"

    # Core identity (slug, immutable after creation)
    id = Column(String(64), primary_key=True)

    # Localized labels and descriptions
    label = Column(String(255), nullable=False)
    label_fr = Column(String(255), nullable=False, default="")
    label_ar = Column(String(255), nullable=False, default="")
    desc = Column(Text, nullable=False, default="")
    desc_fr = Column(Text, nullable=False, default="")
    desc_ar = Column(Text, nullable=False, default="")

    # Display
    icon = Column(String(50), nullable=False, default="Box")
    color = Column(String(50), nullable=False, default="text-slate-500")
    order = Column(Integer, nullable=False, default=0)

    # Audit timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    # Relationships
    subcategories = relationship(
        "Subcategory",
        back_populates="category",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="Subcategory.order",
    )

    def __repr__(self):
        return f"<Category(id='{self.id}', label='{self.label}', order={self.order})>"


class Subcategory(Base):
    """Second level of the catalog tree; carries an optional processing fee."""

    __tablename__ = "subcategories"

    id = Column(String(64), primary_key=True)
    category_id = Column(
        String(64), ForeignKey("categories.id", ondelete="CASCADE"), nullable=False
    )

    label = Column(String(255), nullable=False)
    label_fr = Column(String(255), nullable=False, default="")
    label_ar = Column(String(255), nullable=False, default="")
    desc = Column(Text, nullable=True)
    desc_fr = Column(Text, nullable=True)
    desc_ar = Column(Text, nullable=True)

    icon = Column(String(50), nullable=True)
    color = Column(String(50), nullable=True)
    fee = Column(Numeric(5, 2), nullable=False, default=0)  # Percentage
    order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    category = relationship("Category", back_populates="subcategories")
    second_subcategories = relationship(
        "SecondSubcategory",
        back_populates="subcategory",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="SecondSubcategory.order",
    )

    def __repr__(self):
        return (
            f"<Subcategory(id='{self.id}', label='{self.label}', "
            f"category_id='{self.category_id}')>"
        )


class SecondSubcategory(Base):
    """Terminal (leaf) level of the catalog tree."""

    __tablename__ = "second_subcategories"

    id = Column(String(64), primary_key=True)
    subcategory_id = Column(
        String(64), ForeignKey("subcategories.id", ondelete="CASCADE"), nullable=False
    )

    label = Column(String(255), nullable=False)
    label_fr = Column(String(255), nullable=False, default="")
    label_ar = Column(String(255), nullable=False, default="")
    desc = Column(Text, nullable=True)
    desc_fr = Column(Text, nullable=True)
    desc_ar = Column(Text, nullable=True)

    icon = Column(String(50), nullable=True)
    color = Column(String(50), nullable=True)
    fee = Column(Numeric(5, 2), nullable=False, default=0)
    order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    subcategory = relationship("Subcategory", back_populates="second_subcategories")

    def __repr__(self):
        return (
            f"<SecondSubcategory(id='{self.id}', label='{self.label}', "
            f"subcategory_id='{self.subcategory_id}')>"
        )
