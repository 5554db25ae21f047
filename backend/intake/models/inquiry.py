"""
Form Intake Service — Inquiry SQLAlchemy Models
================================================

What:  ORM models for the three append-only inquiry tables.
How:   Each model inherits the surrogate `id` and server-assigned
       `created_at` from `InquiryMixin`; the remaining columns are plain
       nullable strings (plus one boolean) because the service accepts
       whatever the form sends without format checks.
Who:   Rows are inserted by InquiryService; tables are created by
       Database.init_schema() at startup.

Table layout:
    study          — study-abroad inquiries
    work_profiles  — work-abroad inquiries
    invest         — investment inquiries

Rows are never updated or deleted by this service.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from intake.database import Base


class InquiryMixin:
    """Columns shared by every inquiry table."""

    # SERIAL on PostgreSQL, INTEGER PRIMARY KEY (rowid) on SQLite
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    )


class StudyInquiry(InquiryMixin, Base):
    """A study-abroad form submission."""

    __tablename__ = "study"

    country: Mapped[Optional[str]] = mapped_column(String(100))
    qualification: Mapped[Optional[str]] = mapped_column(String(50))
    age: Mapped[Optional[str]] = mapped_column(String(20))
    education_topic: Mapped[Optional[str]] = mapped_column(String(100))
    cgpa: Mapped[Optional[str]] = mapped_column(String(20))
    budget: Mapped[Optional[str]] = mapped_column(String(50))
    needs_loan: Mapped[Optional[bool]] = mapped_column(Boolean)
    name: Mapped[Optional[str]] = mapped_column(String(100))
    email: Mapped[Optional[str]] = mapped_column(String(100))
    phone: Mapped[Optional[str]] = mapped_column(String(20))

    def __repr__(self) -> str:
        return f"<StudyInquiry(id={self.id}, country='{self.country}')>"


class WorkInquiry(InquiryMixin, Base):
    """A work-abroad form submission."""

    __tablename__ = "work_profiles"

    occupation: Mapped[Optional[str]] = mapped_column(String(100))
    education: Mapped[Optional[str]] = mapped_column(String(100))
    experience: Mapped[Optional[str]] = mapped_column(String(100))
    name: Mapped[Optional[str]] = mapped_column(String(100))
    email: Mapped[Optional[str]] = mapped_column(String(100))
    phone: Mapped[Optional[str]] = mapped_column(String(20))

    def __repr__(self) -> str:
        return f"<WorkInquiry(id={self.id}, occupation='{self.occupation}')>"


class InvestInquiry(InquiryMixin, Base):
    __tablename__ = "invest"

    name: Mapped[Optional[str]] = mapped_column(String(100))
    email: Mapped[Optional[str]] = mapped_column(String(100))
    country: Mapped[Optional[str]] = mapped_column(String(100))

    def __repr__(self) -> str:
        return f"<InvestInquiry(id={self.id}, country='{self.country}')>"
