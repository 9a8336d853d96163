"""
models/lunch_option.py
----------------------
A meal offered by a provider.

Orders reference lunch options by id and there is no price snapshot on the
order: revenue for past orders is computed from the price stored here at
query time.
"""

from sqlalchemy import Boolean, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mealstats.db.base import Base, TimestampMixin, generate_uuid


class LunchOption(Base, TimestampMixin):
    __tablename__ = "lunch_options"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    provider_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("providers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Relationships
    provider: Mapped["Provider"] = relationship("Provider", back_populates="lunch_options")  # noqa: F821

    def __repr__(self) -> str:
        return f"<LunchOption id={self.id} name={self.name} price={self.price}>"
