"""
Pydantic schemas package
"""

from .common import *
from .club import *
from .event import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "Category",
    "Role",
    "Club",
    "Person",
    "Expense",
    "Resource",
    "Event",
    "Review",
    "LoginRequest",
    "ClubRegister",
    "ProfileUpdate",
    "PersonCreate",
    "ExpenseCreate",
    "BudgetUpdate",
    "BudgetSummary",
    "MonthlyTotal",
    "EventCreate",
    "ReviewCreate",
    "GalleryUpload",
    "GalleryRemove",
]
