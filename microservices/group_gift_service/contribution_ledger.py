"""
Contribution Ledger

The only component that changes a campaign's funding state:
- accepts contributions (duplicate and overfunding checks, completion)
- records pending invitations
- removes invitations

Every operation is a synchronous mutation of the campaign object it is given.
The repository runs it inside an atomic apply() on a private copy, so an
exception raised here leaves the stored campaign untouched.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Set

from .models import (
    Contribution,
    ContributionRequest,
    GroupGift,
    GroupGiftStatus,
    Invitation,
    InvitationRequest,
    InvitationStatus,
    is_duplicate_email,
    is_valid_amount,
    is_valid_email,
)
from .protocols import DuplicateContributorError, OverfundingError

logger = logging.getLogger(__name__)


class ContributionLedger:
    """Contribution and invitation rules for a single campaign"""

    def add_contribution(
        self,
        campaign: GroupGift,
        request: ContributionRequest,
        now: datetime,
    ) -> Contribution:
        """
        Accept a contribution.

        Args:
            campaign: Campaign to mutate
            request: Validated contribution request
            now: Acceptance timestamp

        Returns:
            The recorded contribution

        Raises:
            DuplicateContributorError: Email already contributed
            OverfundingError: Amount exceeds what is left of the target
        """
        if is_duplicate_email(campaign, request.email):
            raise DuplicateContributorError(
                "This email has already contributed",
                group_gift_id=campaign.group_gift_id,
                email=request.email,
            )

        if not is_valid_amount(campaign.target_amount, campaign.current_amount, request.amount):
            remaining = campaign.remaining_amount
            raise OverfundingError(
                f"Amount cannot exceed remaining {remaining}",
                group_gift_id=campaign.group_gift_id,
                amount=request.amount,
                remaining_amount=remaining,
            )

        contribution = Contribution(
            contribution_id=campaign.next_contribution_id,
            name=request.name,
            email=request.email,
            amount=request.amount,
            message=request.message or "",
            contributed_at=now,
        )

        campaign.next_contribution_id += 1
        campaign.contributors.append(contribution)
        campaign.current_amount += contribution.amount

        # An invited email that contributes is no longer pending
        campaign.invited_contributors = [
            i for i in campaign.invited_contributors if i.email != contribution.email
        ]

        if campaign.current_amount >= campaign.target_amount:
            campaign.status = GroupGiftStatus.COMPLETED

        logger.debug(
            f"Ledger: contribution {contribution.contribution_id} of {contribution.amount} "
            f"on group gift {campaign.group_gift_id}, total {campaign.current_amount}"
        )
        return contribution

    def invite_contributors(
        self,
        campaign: GroupGift,
        invitations: Iterable[InvitationRequest],
        now: datetime,
    ) -> List[Invitation]:
        """
        Record pending invitations.

        Malformed emails are dropped. Emails that already contributed, are already
        invited, or repeat within the batch are skipped.

        Returns:
            Only the invitations added by this call
        """
        seen: Set[str] = set(campaign.contributor_emails) | set(campaign.invited_emails)
        added: List[Invitation] = []

        for request in invitations:
            email = request.email
            if not is_valid_email(email):
                continue
            if email in seen:
                continue
            seen.add(email)

            invitation = Invitation(
                email=email,
                name=request.name or email,
                invited_at=now,
                status=InvitationStatus.PENDING,
            )
            campaign.invited_contributors.append(invitation)
            added.append(invitation)

        return added

    def remove_invitation(self, campaign: GroupGift, email: str) -> bool:
        """Drop a pending invitation by email. Absent emails are a no-op."""
        campaign.invited_contributors = [
            i for i in campaign.invited_contributors if i.email != email
        ]
        return True


__all__ = ["ContributionLedger"]
