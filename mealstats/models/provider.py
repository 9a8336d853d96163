"""
models/provider.py
------------------
Provider (meal supplier) ORM model.

A provider is the top-level tenant: it owns the companies it serves and
the lunch options it cooks.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mealstats.db.base import Base, TimestampMixin, generate_uuid


class Provider(Base, TimestampMixin):
    __tablename__ = "providers"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    business_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    # Relationships
    companies: Mapped[list["Company"]] = relationship(  # noqa: F821
        "Company", back_populates="provider"
    )
    lunch_options: Mapped[list["LunchOption"]] = relationship(  # noqa: F821
        "LunchOption", back_populates="provider"
    )

    def __repr__(self) -> str:
        return f"<Provider id={self.id} business_name={self.business_name}>"
