"""
Recipient strategies for email workflows and their resolution to addresses.

A workflow row carries three nullable recipient columns; ``strategy_for``
turns the row into exactly one strategy keyed by ``recipient_type`` so the
columns of the other strategies never leak into resolution.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from .exceptions import UnresolvedRecipient, WorkflowValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Recipient:
    email: str
    name: Optional[str] = None

    def formatted(self) -> str:
        return f"{self.name} <{self.email}>" if self.name else self.email


@dataclass(frozen=True)
class EmailRecipientStrategy:
    email: str
    name: Optional[str] = None
    recipient_type = 'email'

    def apply_to(self, workflow):
        workflow.recipient_email = self.email
        workflow.recipient_name = self.name or None


@dataclass(frozen=True)
class PositionRecipientStrategy:
    position_id: Optional[int]
    recipient_type = 'position'

    def apply_to(self, workflow):
        workflow.recipient_position_id = self.position_id


@dataclass(frozen=True)
class AllMembersRecipientStrategy:
    recipient_type = 'all_members'

    def apply_to(self, workflow):
        pass


def strategy_for(workflow):
    if workflow.recipient_type == EmailRecipientStrategy.recipient_type:
        return EmailRecipientStrategy(email=workflow.recipient_email or '', name=workflow.recipient_name or None)
    if workflow.recipient_type == PositionRecipientStrategy.recipient_type:
        return PositionRecipientStrategy(position_id=workflow.recipient_position_id)
    if workflow.recipient_type == AllMembersRecipientStrategy.recipient_type:
        return AllMembersRecipientStrategy()
    raise WorkflowValidationError({'recipient_type': [f"Unknown recipient type {workflow.recipient_type!r}."]})


class RecipientResolver:
    """Turns a workflow's recipient strategy into concrete destination addresses"""

    def resolve(self, workflow) -> List[Recipient]:
        strategy = workflow.recipient

        if isinstance(strategy, EmailRecipientStrategy):
            recipients = self._resolve_email(workflow, strategy)
        elif isinstance(strategy, PositionRecipientStrategy):
            recipients = self._resolve_position(workflow, strategy)
        else:
            recipients = self._resolve_all_members(workflow)

        recipients = self._dedupe(recipients)
        logger.debug(f"Workflow {workflow.pk} resolved to {len(recipients)} recipient(s)")
        return recipients

    def _resolve_email(self, workflow, strategy: EmailRecipientStrategy) -> List[Recipient]:
        email = (strategy.email or '').strip()
        if not email:
            raise UnresolvedRecipient(workflow, 'no recipient email configured')
        return [Recipient(email=email, name=strategy.name)]

    def _resolve_position(self, workflow, strategy: PositionRecipientStrategy) -> List[Recipient]:
        from members.models import CommitteePosition

        if not strategy.position_id:
            raise UnresolvedRecipient(workflow, 'no committee position configured')

        position = CommitteePosition.objects.filter(
            pk=strategy.position_id,
            organization_id=workflow.organization_id,
        ).first()
        if position is None:
            raise UnresolvedRecipient(workflow, f'committee position {strategy.position_id} no longer exists')

        holders = position.current_holders().exclude(email='').order_by('last_name', 'first_name', 'pk')
        recipients = [Recipient(email=m.email, name=m.full_name or None) for m in holders]
        if not recipients:
            raise UnresolvedRecipient(workflow, f'nobody currently holds the position "{position.name}"')
        return recipients

    def _resolve_all_members(self, workflow) -> List[Recipient]:
        from members.models import Member

        members = Member.objects.filter(
            organization_id=workflow.organization_id,
            status=Member.STATUS_ACTIVE,
        ).exclude(email='').order_by('last_name', 'first_name', 'pk')
        recipients = [Recipient(email=m.email, name=m.full_name or None) for m in members]
        if not recipients:
            raise UnresolvedRecipient(workflow, 'the organization has no active members')
        return recipients

    def _dedupe(self, recipients: List[Recipient]) -> List[Recipient]:
        seen = set()
        unique = []
        for recipient in recipients:
            key = recipient.email.lower()
            if key not in seen:
                seen.add(key)
                unique.append(recipient)
        return unique
