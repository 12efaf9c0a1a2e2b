"""
Email Workflow Engine

Fires the email workflows of an organization for a member lifecycle event:
matching workflows are resolved to recipients, rendered with the event's
variables and handed to the delivery gateway. A failing workflow is reported
and skipped; it never stops its siblings or the signup/renewal that caused it.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from django.conf import settings
from django.core.mail import mail_admins

from comms.delivery import EmailDeliveryGateway
from .exceptions import DeliveryFailure, UnresolvedRecipient
from .models import EmailWorkflow
from .recipients import RecipientResolver
from .rendering import render_email

logger = logging.getLogger(__name__)


@dataclass
class WorkflowResult:
    workflow_id: int
    workflow_name: str
    delivered: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None and not self.failed

    def to_dict(self) -> Dict[str, Any]:
        return {
            'workflow_id': self.workflow_id,
            'workflow_name': self.workflow_name,
            'success': self.success,
            'delivered': self.delivered,
            'failed': self.failed,
            'error': self.error,
        }


@dataclass
class TriggerReport:
    organization_id: int
    event: str
    results: List[WorkflowResult] = field(default_factory=list)

    @property
    def matched(self) -> int:
        return len(self.results)

    @property
    def emails_sent(self) -> int:
        return sum(len(result.delivered) for result in self.results)

    @property
    def failures(self) -> List[WorkflowResult]:
        return [result for result in self.results if not result.success]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'organization_id': self.organization_id,
            'event': self.event,
            'workflows_matched': self.matched,
            'emails_sent': self.emails_sent,
            'workflows_failed': len(self.failures),
            'results': [result.to_dict() for result in self.results],
        }


class WorkflowEngine:
    """Evaluates email workflows synchronously against one trigger event"""

    def __init__(self, resolver: Optional[RecipientResolver] = None,
                 gateway: Optional[EmailDeliveryGateway] = None):
        self.resolver = resolver or RecipientResolver()
        self.gateway = gateway or EmailDeliveryGateway()

    def load_workflows(self, organization_id: int, event: str) -> List[EmailWorkflow]:
        """Matched workflows, read up front so nothing is sent before the read succeeds"""
        return list(EmailWorkflow.objects.for_trigger(organization_id, event))

    def fire(self, organization_id: int, event: str, variables: Mapping[str, Any],
             workflows: Optional[List[EmailWorkflow]] = None) -> TriggerReport:
        """
        Run every active workflow of ``organization_id`` listening to ``event``.

        Args:
            organization_id: Owning organization
            event: 'signup' or 'renewal'
            variables: Template variables of the member that caused the event
            workflows: Already loaded matches; loaded here when omitted

        Returns:
            TriggerReport with one entry per matched workflow
        """
        if workflows is None:
            workflows = self.load_workflows(organization_id, event)
        report = TriggerReport(organization_id=organization_id, event=event)

        if not workflows:
            logger.info(f"ℹ️ No active '{event}' workflows for organization {organization_id}")
            return report

        logger.info(f"🚀 Firing {len(workflows)} '{event}' workflow(s) for organization {organization_id}")

        for workflow in workflows:
            report.results.append(self.run_workflow(workflow, event, variables))

        logger.info(f"📊 '{event}' trigger finished: {report.emails_sent} email(s) sent, "
                    f"{len(report.failures)} workflow(s) with failures")
        if report.failures:
            self._notify_admins(report)
        return report

    def run_workflow(self, workflow: EmailWorkflow, event: str, variables: Mapping[str, Any]) -> WorkflowResult:
        result = WorkflowResult(workflow_id=workflow.pk, workflow_name=workflow.name)

        try:
            recipients = self.resolver.resolve(workflow)
            subject, body = render_email(workflow.email_subject, workflow.email_template, variables)

            for recipient in recipients:
                try:
                    self.gateway.send(recipient, subject, body, workflow=workflow, trigger_event=event)
                    result.delivered.append(recipient.email)
                except DeliveryFailure as e:
                    logger.error(f"❌ Workflow {workflow.pk} ({workflow.name}): {e}")
                    result.failed[recipient.email] = e.reason

        except UnresolvedRecipient as e:
            logger.warning(f"⚠️ {e}")
            result.error = str(e)

        # Siblings still run when one workflow breaks, database errors included
        except Exception as e:
            logger.exception(f"❌ Workflow {workflow.pk} ({workflow.name}) stopped: {str(e)}")
            result.error = str(e)

        return result

    def _notify_admins(self, report: TriggerReport):
        if not settings.WORKFLOW_NOTIFY_ADMINS or not settings.ADMINS:
            return

        lines = [f"Some '{report.event}' email workflows for organization {report.organization_id} did not deliver:", ""]
        for result in report.failures:
            lines.append(f"- {result.workflow_name} (#{result.workflow_id})")
            if result.error:
                lines.append(f"    {result.error}")
            for address, reason in result.failed.items():
                lines.append(f"    {address}: {reason}")

        mail_admins(
            subject=f"Email workflow failures ({report.event})",
            message="\n".join(lines),
            fail_silently=True,
        )
