"""
Group Gift Service - Business Logic Layer

Orchestrates the repository, the contribution ledger and the stats aggregator:
- Input is validated into request models before storage is touched
- Every ledger mutation runs inside repository.apply() for one campaign
- Notification intents are published after the change is stored
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from core.config.service_config import DEFAULT_SUGGESTED_AMOUNTS

from .contribution_ledger import ContributionLedger
from .events.publishers import (
    publish_contribution_added,
    publish_group_gift_completed,
    publish_group_gift_created,
    publish_invitations_sent,
)
from .models import (
    CampaignUrgency,
    Contribution,
    ContributionRequest,
    ContributionStats,
    DEFAULT_OCCASION_TYPE,
    GroupGift,
    GroupGiftCreateRequest,
    GroupGiftStatus,
    GroupGiftSummary,
    GroupGiftUpdateRequest,
    Invitation,
    InvitationRequest,
    is_campaign_expired,
)
from .protocols import (
    DuplicateContributorError,
    EventBusProtocol,
    GroupGiftRepositoryProtocol,
    OverfundingError,
    ValidationError,
)
from .stats_aggregator import StatsAggregator

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)

CENTS = Decimal("0.01")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _validate(model: Type[R], data: Dict[str, Any]) -> R:
    """Build a request model, converting pydantic failures to ValidationError"""
    try:
        return model(**data)
    except PydanticValidationError as e:
        errors = [
            {
                "field": ".".join(str(part) for part in err["loc"]),
                "message": err["msg"],
            }
            for err in e.errors()
        ]
        message = "; ".join(f"{err['field']}: {err['message']}" for err in errors)
        raise ValidationError(f"Invalid input: {message}", errors=errors) from e


class GroupGiftService:
    """
    Group Gift Service - Core business logic

    Campaign lifecycle, contributions, invitations, progress summaries and
    cross-campaign statistics.
    """

    def __init__(
        self,
        repository: GroupGiftRepositoryProtocol,
        event_bus: Optional[EventBusProtocol] = None,
        ledger: Optional[ContributionLedger] = None,
        stats_aggregator: Optional[StatsAggregator] = None,
        suggested_amounts: Optional[Iterable[Decimal]] = None,
        urgent_days: int = 7,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize group gift service with dependencies.

        Args:
            repository: Campaign repository
            event_bus: Event bus for notification intents (optional)
            ledger: Contribution ledger (default instance if not provided)
            stats_aggregator: Stats aggregator (built over repository if not provided)
            suggested_amounts: Contribution tiers offered in campaign summaries
            urgent_days: Days before the deadline at which a campaign becomes urgent
            clock: Source of "now" (UTC)
        """
        self.repository = repository
        self.event_bus = event_bus
        self.ledger = ledger or ContributionLedger()
        self.stats_aggregator = stats_aggregator or StatsAggregator(repository)
        self.suggested_amounts = list(suggested_amounts or DEFAULT_SUGGESTED_AMOUNTS)
        self.urgent_days = urgent_days
        self.clock = clock or _utcnow

    # ====================
    # Campaign Lifecycle
    # ====================

    async def create_group_gift(
        self,
        title: str,
        recipient_id: int,
        target_amount: Union[Decimal, str, int, float],
        deadline: Any,
        created_by: str,
        occasion_type: Optional[str] = None,
        gift_id: Optional[int] = None,
        description: Optional[str] = None,
        invited_contributors: Optional[List[Any]] = None,
    ) -> GroupGift:
        """
        Start a campaign.

        Args:
            title: Campaign title
            recipient_id: Recipient directory id
            target_amount: Amount to raise (positive, cents precision)
            deadline: Informational deadline (date or ISO date string)
            created_by: Creator identity
            occasion_type: Occasion label (defaults to "General")
            gift_id: Gift catalog id
            description: Free text
            invited_contributors: Initial invitations, filtered like invite_contributors

        Returns:
            Stored campaign, including any initial invitations

        Raises:
            ValidationError: Malformed input
        """
        request = _validate(GroupGiftCreateRequest, {
            "title": title,
            "recipient_id": recipient_id,
            "target_amount": target_amount,
            "deadline": deadline,
            "created_by": created_by,
            "occasion_type": occasion_type,
            "gift_id": gift_id,
            "description": description,
            "invited_contributors": [
                self._invitation_data(entry) for entry in (invited_contributors or [])
            ],
        })

        now = self.clock()
        draft = GroupGift(
            title=request.title,
            description=request.description or "",
            occasion_type=request.occasion_type or DEFAULT_OCCASION_TYPE,
            recipient_id=request.recipient_id,
            gift_id=request.gift_id,
            target_amount=request.target_amount,
            current_amount=Decimal("0"),
            status=GroupGiftStatus.ACTIVE,
            deadline=request.deadline,
            created_by=request.created_by,
            created_at=now,
        )
        # Initial invitations are part of the single create write
        invited = self.ledger.invite_contributors(draft, request.invited_contributors, now)

        campaign = await self.repository.create(draft)
        logger.info(
            f"Created group gift {campaign.group_gift_id} '{campaign.title}' "
            f"for recipient {campaign.recipient_id}, target {campaign.target_amount}"
        )
        await publish_group_gift_created(self.event_bus, campaign)

        if invited:
            logger.info(f"Invited {len(invited)} contributor(s) to group gift {campaign.group_gift_id}")
            await publish_invitations_sent(self.event_bus, campaign, campaign.invited_contributors)

        return campaign

    async def get_group_gift(self, group_gift_id: int) -> GroupGift:
        """Get campaign by id. Raises CampaignNotFoundError."""
        return await self.repository.get_by_id(group_gift_id)

    async def list_group_gifts(
        self,
        status: Optional[Union[GroupGiftStatus, str]] = None,
        search: Optional[str] = None,
    ) -> List[GroupGift]:
        """
        List campaigns, newest first.

        Args:
            status: Only campaigns in this status
            search: Case-insensitive substring of title or description
        """
        if status is not None:
            try:
                status = GroupGiftStatus(status)
            except ValueError:
                raise ValidationError(
                    f"Invalid status: {status}",
                    errors=[{"field": "status", "message": f"must be one of {[s.value for s in GroupGiftStatus]}"}],
                )

        campaigns = await self.repository.get_all()
        if status is not None:
            campaigns = [c for c in campaigns if c.status == status]
        if search and search.strip():
            needle = search.strip().lower()
            campaigns = [
                c for c in campaigns
                if needle in c.title.lower() or needle in c.description.lower()
            ]
        return campaigns

    async def list_by_recipient(self, recipient_id: int) -> List[GroupGift]:
        return await self.repository.get_by_recipient(recipient_id)

    async def list_by_creator(self, created_by: str) -> List[GroupGift]:
        return await self.repository.get_by_creator(created_by)

    async def update_group_gift(
        self,
        group_gift_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
        occasion_type: Optional[str] = None,
    ) -> GroupGift:
        """
        Edit display metadata. Funding state, references and provenance never change here.

        Raises:
            ValidationError: Empty title or oversized fields
            CampaignNotFoundError: Unknown id
        """
        request = _validate(GroupGiftUpdateRequest, {
            "title": title,
            "description": description,
            "occasion_type": occasion_type,
        })

        def mutation(campaign: GroupGift) -> None:
            if request.title is not None:
                campaign.title = request.title
            if request.description is not None:
                campaign.description = request.description
            if request.occasion_type is not None:
                campaign.occasion_type = request.occasion_type or DEFAULT_OCCASION_TYPE

        campaign, _ = await self.repository.apply(group_gift_id, mutation)
        logger.info(f"Updated group gift {group_gift_id}")
        return campaign

    async def delete_group_gift(self, group_gift_id: int) -> bool:
        """Delete a campaign. Raises CampaignNotFoundError."""
        await self.repository.delete(group_gift_id)
        logger.info(f"Deleted group gift {group_gift_id}")
        return True

    # ====================
    # Contributions
    # ====================

    async def add_contribution(
        self,
        group_gift_id: int,
        name: str,
        email: str,
        amount: Union[Decimal, str, int, float],
        message: Optional[str] = None,
    ) -> Contribution:
        """
        Record a contribution.

        Returns:
            The accepted contribution

        Raises:
            ValidationError: Missing name/email, malformed email, non-positive amount
            CampaignNotFoundError: Unknown id
            DuplicateContributorError: Email already contributed
            OverfundingError: Amount exceeds the remaining amount
        """
        request = _validate(ContributionRequest, {
            "name": name,
            "email": email,
            "amount": amount,
            "message": message,
        })
        now = self.clock()

        try:
            campaign, contribution = await self.repository.apply(
                group_gift_id,
                lambda c: self.ledger.add_contribution(c, request, now),
            )
        except DuplicateContributorError:
            logger.warning(f"Rejected duplicate contribution from {request.email} to group gift {group_gift_id}")
            raise
        except OverfundingError as e:
            logger.warning(
                f"Rejected contribution of {request.amount} to group gift {group_gift_id}: "
                f"remaining {e.remaining_amount}"
            )
            raise

        logger.info(
            f"Contribution {contribution.contribution_id} of {contribution.amount} added to "
            f"group gift {group_gift_id} ({campaign.current_amount}/{campaign.target_amount})"
        )
        await publish_contribution_added(self.event_bus, campaign, contribution)

        # Completed campaigns reject every further amount, so this is the transition
        if campaign.status == GroupGiftStatus.COMPLETED:
            logger.info(f"Group gift {group_gift_id} reached its target")
            await publish_group_gift_completed(self.event_bus, campaign)

        return contribution

    # ====================
    # Invitations
    # ====================

    async def invite_contributors(
        self, group_gift_id: int, invitations: Iterable[Any]
    ) -> List[Invitation]:
        """
        Invite people to contribute.

        Args:
            group_gift_id: Campaign id
            invitations: Entries of {email, name?} (dicts, InvitationRequest or bare email strings)

        Returns:
            Only the invitations newly added by this call

        Raises:
            CampaignNotFoundError: Unknown id
        """
        requests = [
            _validate(InvitationRequest, self._invitation_data(entry))
            for entry in invitations
        ]
        _, added = await self._invite(group_gift_id, requests)
        return added

    async def remove_invitation(self, group_gift_id: int, email: str) -> bool:
        """Remove a pending invitation. Absent emails are a no-op. Raises CampaignNotFoundError."""
        email = (email or "").strip()
        await self.repository.apply(
            group_gift_id, lambda c: self.ledger.remove_invitation(c, email)
        )
        logger.info(f"Removed invitation {email} from group gift {group_gift_id}")
        return True

    async def _invite(self, group_gift_id: int, requests: List[InvitationRequest]):
        now = self.clock()
        campaign, added = await self.repository.apply(
            group_gift_id,
            lambda c: self.ledger.invite_contributors(c, requests, now),
        )
        if added:
            logger.info(f"Invited {len(added)} contributor(s) to group gift {group_gift_id}")
            await publish_invitations_sent(self.event_bus, campaign, added)
        return campaign, added

    @staticmethod
    def _invitation_data(entry: Any) -> Dict[str, Any]:
        if isinstance(entry, InvitationRequest):
            return entry.model_dump()
        if isinstance(entry, dict):
            return dict(entry)
        return {"email": entry}

    # ====================
    # Summaries & Stats
    # ====================

    async def get_group_gift_summary(
        self, group_gift_id: int, now: Optional[datetime] = None
    ) -> GroupGiftSummary:
        """Progress view of one campaign. Raises CampaignNotFoundError."""
        campaign = await self.repository.get_by_id(group_gift_id)
        now = now or self.clock()

        days_left = (campaign.deadline - now.date()).days
        expired = is_campaign_expired(campaign, now)

        if campaign.status == GroupGiftStatus.COMPLETED:
            urgency = CampaignUrgency.COMPLETED
        elif expired:
            urgency = CampaignUrgency.OVERDUE
        elif days_left <= self.urgent_days:
            urgency = CampaignUrgency.URGENT
        else:
            urgency = CampaignUrgency.ON_TRACK

        return GroupGiftSummary(
            group_gift_id=campaign.group_gift_id,
            status=campaign.status,
            target_amount=campaign.target_amount,
            current_amount=campaign.current_amount,
            remaining_amount=campaign.remaining_amount,
            progress_percentage=campaign.progress_percentage,
            contributor_count=len(campaign.contributors),
            pending_invitation_count=len(campaign.invited_contributors),
            days_until_deadline=days_left,
            is_expired=expired,
            urgency=urgency,
            suggested_amounts=self._suggest_amounts(campaign.remaining_amount),
        )

    def _suggest_amounts(self, remaining: Decimal) -> List[Decimal]:
        suggestions: List[Decimal] = []
        for amount in [*self.suggested_amounts, remaining]:
            amount = min(amount, remaining).quantize(CENTS)
            if amount > 0 and amount not in suggestions:
                suggestions.append(amount)
        return suggestions

    async def get_contribution_stats(self) -> ContributionStats:
        """Totals across all campaigns"""
        return await self.stats_aggregator.get_stats()


__all__ = ["GroupGiftService"]
