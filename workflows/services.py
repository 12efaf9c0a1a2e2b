"""
Operator-facing workflow operations: create, update, toggle, delete and test send.

Every operation takes the acting user explicitly; nothing here reads a
request or session from ambient state.
"""

import logging
from typing import Any, Dict, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import DatabaseError, transaction

from comms.delivery import EmailDeliveryGateway
from comms.models import OutgoingEmail
from .exceptions import StoreError, Unauthenticated, WorkflowValidationError
from .models import EmailWorkflow
from .recipients import Recipient
from .rendering import SAMPLE_VARIABLES, render_email

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    'name', 'description', 'trigger_event', 'conditions',
    'recipient_type', 'recipient_email', 'recipient_name', 'recipient_position',
    'email_subject', 'email_template', 'is_active',
)


class WorkflowService:
    """Lifecycle of email workflows: created -> active <-> disabled -> deleted"""

    def __init__(self, gateway: Optional[EmailDeliveryGateway] = None):
        self.gateway = gateway or EmailDeliveryGateway()

    def get_workflow(self, workflow_id, user) -> EmailWorkflow:
        """Fetch a workflow the user may manage; anything else looks like a missing workflow"""
        self._require_user(user)
        workflow = EmailWorkflow.objects.select_related('recipient_position').filter(pk=workflow_id).first()
        if workflow is None or not user.can_manage(workflow.organization_id):
            raise EmailWorkflow.DoesNotExist(f"Email workflow {workflow_id} not found")
        return workflow

    def create_workflow(self, organization_id: int, data: Dict[str, Any], user=None) -> EmailWorkflow:
        if user is not None:
            self._require_user(user)
            if not user.can_manage(organization_id):
                raise WorkflowValidationError({'organization': ['You cannot manage this organization.']})

        workflow = EmailWorkflow(organization_id=organization_id, conditions={})
        self._assign(workflow, data)
        self._store(workflow, 'create')
        logger.info(f"✅ Email workflow created: {workflow.name} (ID: {workflow.pk})")
        return workflow

    def update_workflow(self, workflow: EmailWorkflow, data: Dict[str, Any]) -> EmailWorkflow:
        self._assign(workflow, data)
        self._store(workflow, 'update')
        logger.info(f"✅ Email workflow updated: {workflow.name} (ID: {workflow.pk})")
        return workflow

    def toggle_workflow(self, workflow: EmailWorkflow) -> EmailWorkflow:
        try:
            with transaction.atomic():
                is_active = workflow.toggle()
        except DatabaseError as e:
            logger.error(f"❌ Error toggling workflow {workflow.pk}: {str(e)}")
            raise StoreError('Failed to toggle workflow') from e

        logger.info(f"🔁 Workflow {workflow.pk} {'enabled' if is_active else 'disabled'}")
        return workflow

    def delete_workflow(self, workflow: EmailWorkflow, confirmed: bool = False):
        """Hard delete. There is no undo, so the caller must pass ``confirmed=True``."""
        if not confirmed:
            raise WorkflowValidationError(
                'Deleting a workflow cannot be undone; confirm the deletion to continue.'
            )

        workflow_id = workflow.pk
        try:
            with transaction.atomic():
                deleted, _ = EmailWorkflow.objects.filter(pk=workflow_id).delete()
        except DatabaseError as e:
            logger.error(f"❌ Error deleting workflow {workflow_id}: {str(e)}")
            raise StoreError('Failed to delete workflow') from e

        if not deleted:
            raise EmailWorkflow.DoesNotExist(f"Email workflow {workflow_id} not found")
        logger.info(f"🗑️ Workflow {workflow_id} deleted")

    def send_test_email(self, workflow_id, test_email: str, test_data: Optional[Dict[str, Any]], user) -> OutgoingEmail:
        """
        Render a workflow with sample data and send it to ``test_email``.

        Args:
            workflow_id: Workflow to test
            test_email: Destination address for the test
            test_data: Template variables; missing keys fall back to sample values
            user: The authenticated operator requesting the test

        Raises:
            Unauthenticated: no authenticated user was supplied
            WorkflowValidationError: missing or malformed test address
            EmailWorkflow.DoesNotExist: unknown workflow or another organization's
            DeliveryFailure: the transport rejected the message
        """
        self._require_user(user)

        test_email = (test_email or '').strip()
        if not test_email:
            raise WorkflowValidationError({'testEmail': ['Please enter a test email address']})
        try:
            validate_email(test_email)
        except DjangoValidationError:
            raise WorkflowValidationError({'testEmail': ['Enter a valid email address.']})

        workflow = self.get_workflow(workflow_id, user)

        variables = dict(SAMPLE_VARIABLES)
        variables.update({key: str(value) for key, value in (test_data or {}).items() if value is not None})
        subject, body = render_email(workflow.email_subject, workflow.email_template, variables)

        logger.info(f"🧪 Sending test of workflow {workflow.pk} to {test_email} for {user}")
        return self.gateway.send(Recipient(email=test_email), subject, body, workflow=workflow, is_test=True)

    def _require_user(self, user):
        if user is None or not getattr(user, 'is_authenticated', False):
            raise Unauthenticated()

    def _assign(self, workflow: EmailWorkflow, data: Dict[str, Any]):
        for field_name in EDITABLE_FIELDS:
            if field_name in data:
                setattr(workflow, field_name, data[field_name])
        workflow.validate()
        workflow.apply_recipient(workflow.recipient)

    def _store(self, workflow: EmailWorkflow, action: str):
        try:
            with transaction.atomic():
                workflow.save()
        except DatabaseError as e:
            logger.error(f"❌ Error saving workflow: {str(e)}")
            raise StoreError(f'Failed to {action} workflow') from e
