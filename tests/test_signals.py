"""
Tests for the signup/renewal event sources and the Celery trigger task.
"""

from unittest.mock import patch

import pytest
from django.core import mail
from django.db import DatabaseError

from comms.models import OutgoingEmail
from members.models import Member
from workflows.tasks import dispatch_trigger, trigger_workflows_task


class TestSignupEvent:
    def test_queued_after_commit(self, organization, django_capture_on_commit_callbacks):
        with patch('workflows.tasks.trigger_workflows_task.delay') as delay:
            with django_capture_on_commit_callbacks(execute=False) as callbacks:
                Member.objects.create(
                    organization=organization, first_name='Ana', last_name='Lee',
                    email='ana@example.com', membership_type='Adult',
                )
            # Nothing is queued until the member is committed
            delay.assert_not_called()

            for callback in callbacks:
                callback()

        delay.assert_called_once_with(organization.pk, 'signup', {
            'first_name': 'Ana',
            'last_name': 'Lee',
            'email': 'ana@example.com',
            'membership_type': 'Adult',
        })

    def test_update_does_not_fire(self, make_member, django_capture_on_commit_callbacks):
        member = make_member()

        with patch('workflows.tasks.trigger_workflows_task.delay') as delay:
            with django_capture_on_commit_callbacks(execute=True):
                member.membership_type = 'Family'
                member.save()

        delay.assert_not_called()

    def test_broker_outage_does_not_block_signup(self, organization, django_capture_on_commit_callbacks):
        with patch('workflows.tasks.trigger_workflows_task.delay', side_effect=OSError('connection refused')):
            with django_capture_on_commit_callbacks(execute=True):
                Member.objects.create(organization=organization, first_name='Ana', email='ana@example.com')

        assert Member.objects.filter(email='ana@example.com').exists()


class TestRenewalEvent:
    def test_renewal_carries_new_membership_type(self, make_member, django_capture_on_commit_callbacks):
        member = make_member(first_name='Ana', last_name='Lee', email='ana@example.com', membership_type='Junior')

        with patch('workflows.tasks.trigger_workflows_task.delay') as delay:
            with django_capture_on_commit_callbacks(execute=True) as callbacks:
                member.renew('Adult')

        assert len(callbacks) == 1
        delay.assert_called_once_with(member.organization_id, 'renewal', {
            'first_name': 'Ana',
            'last_name': 'Lee',
            'email': 'ana@example.com',
            'membership_type': 'Adult',
        })


class TestTriggerTask:
    def test_fires_workflows(self, organization, make_workflow, ana):
        make_workflow()

        result = trigger_workflows_task(organization.pk, 'signup', ana)

        assert result['emails_sent'] == 1
        assert mail.outbox[0].subject == 'New signup: Ana Lee'

    def test_unknown_event(self, organization, ana):
        result = trigger_workflows_task(organization.pk, 'deleted', ana)
        assert result['success'] is False

    def test_load_failure_retried(self, organization, ana):
        with patch('workflows.tasks.WorkflowEngine.load_workflows', side_effect=DatabaseError('gone')):
            with patch.object(trigger_workflows_task, 'retry', side_effect=RuntimeError('retry')) as retry:
                with pytest.raises(RuntimeError):
                    trigger_workflows_task(organization.pk, 'signup', ana)

        assert isinstance(retry.call_args.kwargs['exc'], DatabaseError)

    def test_error_after_sending_not_retried(self, organization, make_workflow, ana):
        make_workflow()

        with patch.object(OutgoingEmail.objects, 'create', side_effect=DatabaseError('log table locked')):
            with patch.object(trigger_workflows_task, 'retry') as retry:
                result = trigger_workflows_task(organization.pk, 'signup', ana)

        retry.assert_not_called()
        assert result['emails_sent'] == 1
        assert len(mail.outbox) == 1

    def test_database_error_while_firing_not_retried(self, organization, ana):
        with patch('workflows.tasks.WorkflowEngine.fire', side_effect=DatabaseError('gone')):
            with patch.object(trigger_workflows_task, 'retry') as retry:
                with pytest.raises(DatabaseError):
                    trigger_workflows_task(organization.pk, 'signup', ana)

        retry.assert_not_called()


def test_dispatch_copies_variables():
    variables = {'first_name': 'Ana'}
    with patch('workflows.tasks.trigger_workflows_task.delay') as delay:
        dispatch_trigger(1, 'signup', variables)

    args = delay.call_args.args
    assert args == (1, 'signup', {'first_name': 'Ana'})
    assert args[2] is not variables
