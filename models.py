from enum import Enum
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# --- ENUMS ---
class Role(str, Enum):
    OWNER = "OWNER"
    MEMBER = "MEMBER"

class OtpPurpose(str, Enum):
    LOGIN = "LOGIN"
    SIGNUP = "SIGNUP"
    RESET = "RESET"

class ErrorKind(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_CODE = "INVALID_CODE"
    NETWORK_ERROR = "NETWORK_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    TIMEOUT = "TIMEOUT"

class ExpenseCategory(str, Enum):
    EQUIPMENT = "EQUIPMENT"
    RENT = "RENT"
    SALARY = "SALARY"
    UTILITY = "UTILITY"
    MAINTENANCE = "MAINTENANCE"
    SUPPLIES = "SUPPLIES"
    MISCELLANEOUS = "MISCELLANEOUS"

class PaymentMethod(str, Enum):
    CASH = "CASH"
    CARD = "CARD"
    UPI = "UPI"
    BANK_TRANSFER = "BANK_TRANSFER"
    WALLET = "WALLET"

class TrainerStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"

# --- RESULTS ---
class ApiOk(BaseModel):
    success: Literal[True] = True
    data: Any = Field(default_factory=dict)
    message: Optional[str] = None

class ApiErr(BaseModel):
    success: Literal[False] = False
    error: ErrorKind
    message: str
    status_code: Optional[int] = None

ApiResult = Union[ApiOk, ApiErr]


def validation_error(exc) -> ApiErr:
    """Collapse a pydantic ValidationError into a single readable ApiErr."""
    parts = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{field}: {err['msg']}" if field else err["msg"])
    return ApiErr(error=ErrorKind.VALIDATION_ERROR, message="; ".join(parts) or "Invalid input")

# --- AUTH ---
class UserProfile(BaseModel):
    id: int
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    role: Role
    is_verified: bool = Field(default=True, alias="isVerified")
    created_at: Optional[str] = Field(default=None, alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)

class Session(BaseModel):
    user_id: int
    display_name: str
    contact: str
    role: Role
    verified: bool = True
    token: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_profile(cls, profile: UserProfile, contact: str, token: str) -> "Session":
        return cls(
            user_id=profile.id,
            display_name=profile.name,
            contact=contact,
            role=profile.role,
            verified=profile.is_verified,
            token=token,
        )

class PendingVerification(BaseModel):
    contact: str
    purpose: OtpPurpose
    requested_at: float
    expires_at: float

class SendCodeRequest(BaseModel):
    contact: str = Field(min_length=10, max_length=120)
    purpose: OtpPurpose = OtpPurpose.LOGIN

    @field_validator("contact", mode="before")
    @classmethod
    def strip_contact(cls, v):
        return v.strip() if isinstance(v, str) else v

class VerifyCodeRequest(BaseModel):
    contact: str = Field(min_length=10, max_length=120)
    code: str = Field(pattern=r"^\d{6}$")
    role: Optional[Role] = None
    purpose: Optional[OtpPurpose] = None

    @field_validator("contact", "code", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

# --- GYMS ---
class GymFees(BaseModel):
    monthlyFee: float = Field(gt=0)
    quarterlyFee: Optional[float] = Field(default=None, gt=0)
    yearlyFee: Optional[float] = Field(default=None, gt=0)

class GymInput(BaseModel):
    name: str = Field(min_length=2, max_length=120)
    address: str = Field(min_length=5)
    phone: str = Field(pattern=r"^\+?\d{10,13}$")
    email: Optional[str] = Field(default=None, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    description: Optional[str] = None
    fees: GymFees

class GymUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=120)
    address: Optional[str] = Field(default=None, min_length=5)
    phone: Optional[str] = Field(default=None, pattern=r"^\+?\d{10,13}$")
    email: Optional[str] = Field(default=None, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    description: Optional[str] = None
    fees: Optional[GymFees] = None

# --- MEMBERSHIPS ---
class MembershipCreate(BaseModel):
    selectedGymIds: List[int] = Field(min_length=1)
    durationMonths: Literal[1, 3, 6, 12]
    startDate: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")

class MembershipRejection(BaseModel):
    reason: str = Field(min_length=1)
    details: str = ""

# --- TRAINERS ---
class TrainerInput(BaseModel):
    firstName: str = Field(min_length=1)
    lastName: str = Field(min_length=1)
    phone: str = Field(pattern=r"^\+?\d{10,13}$")
    email: Optional[str] = Field(default=None, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    role: Literal["trainer", "senior_trainer", "head_trainer"] = "trainer"
    status: TrainerStatus = TrainerStatus.ACTIVE
    specialization: List[Literal["crossfit", "weight_training", "yoga", "pilates", "cardio", "hiit", "other"]] = Field(default_factory=list)
    yearsOfExperience: int = Field(default=0, ge=0, le=60)
    assignedGymId: Optional[str] = None
    notes: Optional[str] = None

class TrainerUpdate(BaseModel):
    firstName: Optional[str] = Field(default=None, min_length=1)
    lastName: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = Field(default=None, pattern=r"^\+?\d{10,13}$")
    email: Optional[str] = Field(default=None, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    role: Optional[Literal["trainer", "senior_trainer", "head_trainer"]] = None
    specialization: Optional[List[str]] = None
    yearsOfExperience: Optional[int] = Field(default=None, ge=0, le=60)
    assignedGymId: Optional[str] = None
    notes: Optional[str] = None

# --- EXPENSES ---
class ExpenseInput(BaseModel):
    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    amount: float = Field(gt=0)
    category: ExpenseCategory
    description: Optional[str] = None
    paymentMethod: PaymentMethod
    paidById: str = Field(min_length=1)

class ExpenseUpdate(BaseModel):
    date: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    amount: Optional[float] = Field(default=None, gt=0)
    category: Optional[ExpenseCategory] = None
    description: Optional[str] = None
    paymentMethod: Optional[PaymentMethod] = None
    paidById: Optional[str] = Field(default=None, min_length=1)

class ExpenseFilters(BaseModel):
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    category: Optional[Union[ExpenseCategory, Literal["all"]]] = None
    search: Optional[str] = None

# --- REVIEWS ---
class ReviewReply(BaseModel):
    response: str = Field(min_length=1, max_length=1000)
