"""
models/company.py
-----------------
Company ORM model.

A company is a tenant under a provider. Its employees order meals and the
company pays part of each meal. The subsidy is configured either as a
percentage or as a fixed amount; when fixed_subsidy_amount > 0 it wins
over the percentage (see services/subsidy.py).
"""

from sqlalchemy import ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mealstats.db.base import Base, TimestampMixin, generate_uuid


class Company(Base, TimestampMixin):
    __tablename__ = "companies"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    provider_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("providers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    subsidy_percentage: Mapped[float] = mapped_column(
        Numeric(5, 2, asdecimal=False), nullable=False, default=0
    )
    fixed_subsidy_amount: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=False, default=0
    )

    # Relationships
    provider: Mapped["Provider"] = relationship("Provider", back_populates="companies")  # noqa: F821

    def __repr__(self) -> str:
        return f"<Company id={self.id} name={self.name} provider_id={self.provider_id}>"
