"""
Celery tasks for email workflows
"""

import logging
from celery import shared_task
from django.db import DatabaseError

from .engine import WorkflowEngine

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3, name="workflows.tasks.trigger_workflows_task")
def trigger_workflows_task(self, organization_id, event, variables):
    """
    Fire the email workflows of an organization for a signup or renewal.

    Only reading the matching workflows is retried. Once emails start going
    out, every problem is isolated per workflow inside the engine and ends up
    in the returned report, so a retry never sends the same message twice.
    """
    logger.info(f"📧 Trigger '{event}' received for organization {organization_id}")
    engine = WorkflowEngine()

    try:
        workflows = engine.load_workflows(organization_id, event)

    except DatabaseError as exc:
        logger.error(f"❌ Could not load workflows for organization {organization_id}: {str(exc)}")
        raise self.retry(exc=exc, countdown=60 * (2 ** self.request.retries))

    except ValueError as e:
        logger.error(f"❌ Ignoring trigger: {str(e)}")
        return {'success': False, 'error': str(e)}

    report = engine.fire(organization_id, event, variables or {}, workflows=workflows)
    return report.to_dict()


def dispatch_trigger(organization_id, event, variables):
    """Queue a trigger without letting broker problems escape into the caller"""
    try:
        trigger_workflows_task.delay(organization_id, event, dict(variables))
    except Exception:
        logger.exception(f"Could not queue '{event}' workflows for organization {organization_id}")
