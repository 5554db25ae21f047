# Models package init — importing registers every table with Base.metadata
from intake.models.inquiry import InvestInquiry, StudyInquiry, WorkInquiry

__all__ = ["InvestInquiry", "StudyInquiry", "WorkInquiry"]
