import logging
from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from workflows.models import EmailWorkflow
from workflows.tasks import dispatch_trigger
from .models import Member, MembershipRenewal

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Member)
def fire_signup_workflows(sender, instance, created, **kwargs):
    """Queue signup workflows once the new member is committed"""
    if not created or kwargs.get('raw'):
        return

    organization_id = instance.organization_id
    variables = instance.template_variables()
    logger.info(f"🆕 Member signup: {instance.email} (organization {organization_id})")
    transaction.on_commit(
        lambda: dispatch_trigger(organization_id, EmailWorkflow.TRIGGER_SIGNUP, variables)
    )


@receiver(post_save, sender=MembershipRenewal)
def fire_renewal_workflows(sender, instance, created, **kwargs):
    """Queue renewal workflows once the renewal is committed"""
    if not created or kwargs.get('raw'):
        return

    member = instance.member
    organization_id = member.organization_id
    variables = member.template_variables()
    if instance.membership_type:
        variables['membership_type'] = instance.membership_type
    logger.info(f"🔄 Membership renewal: {member.email} (organization {organization_id})")
    transaction.on_commit(
        lambda: dispatch_trigger(organization_id, EmailWorkflow.TRIGGER_RENEWAL, variables)
    )
