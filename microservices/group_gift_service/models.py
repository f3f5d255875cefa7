"""
Group Gift Service Data Models

Campaigns that pool contributions toward a shared gift for one recipient,
the contributions and pending invitations they own, and the validation
predicates the contribution ledger relies on.
"""

import re
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")

DEFAULT_OCCASION_TYPE = "General"


# ====================
# Enumerations
# ====================

class GroupGiftStatus(str, Enum):
    """Campaign status. COMPLETED is terminal."""
    ACTIVE = "active"
    COMPLETED = "completed"


class InvitationStatus(str, Enum):
    """Invitation status"""
    PENDING = "pending"


class CampaignUrgency(str, Enum):
    """Display urgency derived from status and deadline"""
    COMPLETED = "completed"
    OVERDUE = "overdue"
    URGENT = "urgent"
    ON_TRACK = "on_track"


# ====================
# Core Data Models
# ====================

class Contribution(BaseModel):
    """
    A recorded pledge. Immutable once the ledger has accepted it.
    """
    model_config = ConfigDict(frozen=True)

    contribution_id: int = Field(..., ge=1, description="Unique within the owning campaign")
    name: str = Field(..., min_length=1, description="Contributor name")
    email: str = Field(..., min_length=1, description="Contributor email")
    amount: Decimal = Field(..., gt=0, description="Pledged amount")
    message: str = Field(default="", description="Optional note to the recipient")
    contributed_at: datetime = Field(..., description="Acceptance timestamp")


class Invitation(BaseModel):
    """A pending request for someone to contribute"""
    email: str = Field(..., min_length=1, description="Invitee email")
    name: str = Field(..., min_length=1, description="Invitee name (defaults to email)")
    invited_at: datetime = Field(..., description="Invitation timestamp")
    status: InvitationStatus = Field(default=InvitationStatus.PENDING)


class GroupGift(BaseModel):
    """
    Group gift campaign - pools contributions toward one gift for one recipient.

    current_amount always equals the sum of contributor amounts, and status is
    COMPLETED exactly when current_amount reaches target_amount.
    """
    group_gift_id: int = Field(default=0, ge=0, description="Assigned by the repository on create")

    # Display metadata
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    occasion_type: str = Field(default=DEFAULT_OCCASION_TYPE, max_length=100)

    # External references
    recipient_id: int = Field(..., description="Recipient directory id")
    gift_id: Optional[int] = Field(None, description="Gift catalog id")

    # Funding
    target_amount: Decimal = Field(..., gt=0, decimal_places=2)
    current_amount: Decimal = Field(default=Decimal("0"), ge=0)
    status: GroupGiftStatus = Field(default=GroupGiftStatus.ACTIVE)
    deadline: date = Field(..., description="Informational only, never enforced")

    # Provenance
    created_by: str = Field(..., min_length=1)
    created_at: datetime

    # Owned records
    contributors: List[Contribution] = Field(default_factory=list)
    invited_contributors: List[Invitation] = Field(default_factory=list)

    # Bookkeeping
    next_contribution_id: int = Field(default=1, ge=1)
    version: int = Field(default=0, ge=0)

    @property
    def remaining_amount(self) -> Decimal:
        return max(self.target_amount - self.current_amount, Decimal("0"))

    @property
    def progress_percentage(self) -> Decimal:
        progress = self.current_amount / self.target_amount * 100
        return min(progress, Decimal("100")).quantize(Decimal("0.1"))

    @property
    def contributor_emails(self) -> List[str]:
        return [c.email for c in self.contributors]

    @property
    def invited_emails(self) -> List[str]:
        return [i.email for i in self.invited_contributors]


# ====================
# Validation Predicates
# ====================

def is_valid_email(email: Optional[str]) -> bool:
    """Syntactic email check (something@something.something)"""
    return bool(email) and EMAIL_PATTERN.fullmatch(email.strip()) is not None


def is_valid_amount(target_amount: Decimal, current_amount: Decimal, amount: Decimal) -> bool:
    """True if amount is positive and fits in what is left of the target"""
    return Decimal("0") < amount <= target_amount - current_amount


def is_duplicate_email(campaign: GroupGift, email: str) -> bool:
    """True if email already contributed to campaign (exact, case-sensitive match)"""
    return email in campaign.contributor_emails


def is_campaign_expired(campaign: GroupGift, now: datetime) -> bool:
    """Informational: deadline has passed. Never blocks an operation."""
    return now.date() > campaign.deadline


# ====================
# Request Models
# ====================

class InvitationRequest(BaseModel):
    """
    Invitation entry. Malformed emails are accepted here and filtered by the
    ledger, so invite retries never fail on a bad row. Unusable names fall back
    to the email and long names are cut to 200 characters.
    """
    email: str = Field(default="")
    name: Optional[str] = Field(None, max_length=200)

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v):
        return str(v).strip() if v is not None else ""

    @field_validator("name", mode="before")
    @classmethod
    def clean_name(cls, v):
        if not isinstance(v, str):
            return None
        return v.strip()[:200] or None


class ContributionRequest(BaseModel):
    """Contribution submission"""
    name: str = Field(..., max_length=200)
    email: str = Field(..., max_length=320)
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    message: Optional[str] = Field(None, max_length=1000)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("name is required")
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        if not v or not v.strip():
            raise ValueError("email is required")
        if not is_valid_email(v):
            raise ValueError("Invalid email format")
        return v.strip()


class GroupGiftCreateRequest(BaseModel):
    """Campaign creation request"""
    title: str = Field(..., max_length=200)
    recipient_id: int
    target_amount: Decimal = Field(..., gt=0, decimal_places=2)
    deadline: date
    created_by: str = Field(..., max_length=320)
    occasion_type: Optional[str] = Field(None, max_length=100)
    gift_id: Optional[int] = None
    description: Optional[str] = Field(None, max_length=2000)
    invited_contributors: List[InvitationRequest] = Field(default_factory=list)

    @field_validator("title", "created_by")
    @classmethod
    def validate_required_text(cls, v, info):
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} is required")
        return v.strip()


class GroupGiftUpdateRequest(BaseModel):
    """Display metadata update. Funding, references and provenance are not editable."""
    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    occasion_type: Optional[str] = Field(None, max_length=100)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if v is not None and not v.strip():
            raise ValueError("title cannot be empty")
        return v.strip() if v is not None else v


class InviteContributorsRequest(BaseModel):
    """Batch invitation request"""
    invitations: List[InvitationRequest] = Field(default_factory=list)


# ====================
# Response Models
# ====================

class ContributionStats(BaseModel):
    """Cross-campaign contribution statistics"""
    total_group_gifts: int = 0
    active_group_gifts: int = 0
    completed_group_gifts: int = 0
    total_amount: Decimal = Decimal("0")
    total_contributors: int = 0
    average_contribution: Decimal = Decimal("0")


class GroupGiftSummary(BaseModel):
    """Progress view of a single campaign"""
    group_gift_id: int
    status: GroupGiftStatus
    target_amount: Decimal
    current_amount: Decimal
    remaining_amount: Decimal
    progress_percentage: Decimal
    contributor_count: int
    pending_invitation_count: int
    days_until_deadline: int
    is_expired: bool
    urgency: CampaignUrgency
    suggested_amounts: List[Decimal] = Field(default_factory=list)


class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str
    service: str
    port: int
    version: str
    dependencies: dict = Field(default_factory=dict)
    timestamp: Optional[str] = None
