"""
Club-related Pydantic schemas
"""

from enum import Enum
from typing import List, Literal, Optional, Union
from pydantic import BaseModel, EmailStr, Field, field_validator

from campus_pulse.schemas.common import CamelModel, Timestamp, URL_PATTERN

class Category(str, Enum):
    """Club and event categories"""
    ACADEMIC = "Academic"
    SPORTS = "Sports"
    SOCIAL = "Social"
    TECH = "Tech"
    MUSIC = "Music"

class Role(str, Enum):
    LEADER = "Leader"
    MEMBER = "Member"

class Person(CamelModel):
    """A leader or member on a club roster"""
    id: str
    name: str
    role: Role
    email: Optional[str] = None
    phone: Optional[str] = None
    branch: Optional[str] = None
    department: Optional[str] = None
    avatar: Optional[str] = None

class Expense(CamelModel):
    """A club expense, optionally attributed to one of the club's events"""
    id: str
    name: str
    amount: float
    date: Timestamp
    event_id: Optional[str] = None

class Resource(CamelModel):
    id: str
    label: str
    url: str

class Club(CamelModel):
    """A student club as stored in the clubs collection"""
    id: str
    slug: str
    name: str
    password: str  # plaintext, compared verbatim on login
    category: Category
    logo: Optional[str] = None
    description: Optional[str] = None
    theme_color: Optional[str] = None
    monthly_budget: float = 0
    leaders: List[Person] = Field(default_factory=list)
    members: List[Person] = Field(default_factory=list)
    expenses: List[Expense] = Field(default_factory=list)
    resources: List[Resource] = Field(default_factory=list)

    @field_validator("leaders", "members", "expenses", "resources", mode="before")
    @classmethod
    def _missing_collection_is_empty(cls, value):
        return [] if value is None else value

    @field_validator("monthly_budget", mode="before")
    @classmethod
    def _missing_budget_is_zero(cls, value):
        return 0 if value is None else value

# -------- Forms --------

class LoginRequest(BaseModel):
    """Club login form"""
    name: str = Field(min_length=1)
    password: str = Field(min_length=1)

class ClubRegister(BaseModel):
    """Club registration form"""
    name: str = Field(min_length=3)
    password: str = Field(min_length=4)
    category: Category = Category.SOCIAL
    logo: Optional[str] = None

class ResourceIn(BaseModel):
    id: Optional[str] = None
    label: str = Field(min_length=1)
    url: str = Field(pattern=URL_PATTERN)

class ProfileUpdate(CamelModel):
    """Public profile and branding form"""
    description: Optional[str] = Field(default=None, min_length=10)
    resources: Optional[List[ResourceIn]] = None
    theme_color: Optional[str] = None
    logo: Optional[str] = None

class PersonCreate(CamelModel):
    """Team member form, used for both add and edit"""
    name: str = Field(min_length=2)
    role: Role = Role.MEMBER
    email: Optional[Union[EmailStr, Literal[""]]] = None
    phone: Optional[str] = None
    branch: Optional[str] = None
    department: Optional[str] = None
    avatar: Optional[str] = None

class ExpenseCreate(CamelModel):
    """Expense form, used for both add and edit"""
    name: str = Field(min_length=2)
    amount: float = Field(ge=0.01)
    date: Timestamp
    event_id: Optional[str] = None

class BudgetUpdate(CamelModel):
    monthly_budget: float = Field(ge=0)

# -------- Derived views --------

class BudgetSummary(CamelModel):
    """Current-month budget position"""
    monthly_budget: float
    spent: float
    remaining: float
    progress: float

class MonthlyTotal(CamelModel):
    month: str  # YYYY-MM
    label: str  # short month name
    total: float
