"""
Tests for the REST API: workflow CRUD, toggling, deletion and test send.
"""

from smtplib import SMTPException
from unittest.mock import patch

import pytest
from django.core import mail
from django.core.mail import EmailMultiAlternatives

from members.models import CommitteePosition, Member, MembershipRenewal
from workflows.models import EmailWorkflow

WORKFLOWS_URL = '/api/workflows/'
TEST_SEND_URL = '/api/workflows/test/'


def detail_url(workflow_id, suffix=''):
    return f'{WORKFLOWS_URL}{workflow_id}/{suffix}'


class TestAuthentication:
    def test_list_requires_token(self, api_client, organization):
        response = api_client.get(WORKFLOWS_URL)
        assert response.status_code == 401
        assert 'error' in response.data

    def test_token_endpoint(self, api_client, operator):
        response = api_client.post('/api/token/', {'username': 'operator', 'password': 's3cret-pass'}, format='json')
        assert response.status_code == 200
        assert 'access' in response.data


class TestListWorkflows:
    def test_newest_first_with_recipient_details(self, auth_client, make_workflow, treasurer_position):
        older = make_workflow(name='Office')
        newer = make_workflow(
            name='Treasurer',
            recipient_type=EmailWorkflow.RECIPIENT_POSITION,
            recipient_position=treasurer_position,
        )

        response = auth_client.get(WORKFLOWS_URL)

        assert response.status_code == 200
        assert [w['id'] for w in response.data] == [newer.pk, older.pk]
        assert response.data[0]['recipient_position_name'] == 'Treasurer'
        assert response.data[0]['recipient_display'] == 'Position: Treasurer'
        assert response.data[1]['recipient_position_name'] is None
        assert response.data[1]['recipient_display'] == 'office@org.test'
        assert response.data[1]['template_variables'] == ['first_name', 'last_name', 'membership_type']

    def test_only_own_organization(self, auth_client, make_workflow, other_organization):
        make_workflow()
        EmailWorkflow.objects.create(
            organization=other_organization, name='Theirs', recipient_email='x@org.test',
            email_subject='S', email_template='B',
        )

        response = auth_client.get(WORKFLOWS_URL)

        assert [w['name'] for w in response.data] == ['Notify office']


class TestCreateWorkflow:
    def test_create(self, auth_client, organization, treasurer_position):
        response = auth_client.post(WORKFLOWS_URL, {
            'name': 'Tell the treasurer',
            'trigger_event': 'signup',
            'recipient_type': 'position',
            'recipient_position': treasurer_position.pk,
            'recipient_email': 'ignored@org.test',
            'email_subject': 'New signup: {{first_name}}',
            'email_template': '{{first_name}} joined.',
        }, format='json')

        assert response.status_code == 201
        assert response.data['organization'] == organization.pk
        assert response.data['is_active'] is True
        assert response.data['conditions'] == {}
        assert response.data['recipient_email'] is None

    def test_missing_subject(self, auth_client):
        response = auth_client.post(WORKFLOWS_URL, {
            'name': 'No subject',
            'recipient_email': 'office@org.test',
            'email_template': 'Body',
        }, format='json')

        assert response.status_code == 400
        assert response.data['error']
        assert 'email_subject' in response.data['errors']
        assert not EmailWorkflow.objects.exists()

    def test_email_type_without_address(self, auth_client):
        response = auth_client.post(WORKFLOWS_URL, {
            'name': 'Nobody',
            'recipient_type': 'email',
            'email_subject': 'S',
            'email_template': 'B',
        }, format='json')

        assert response.status_code == 400
        assert response.data['error'] == 'A recipient email is required for this recipient type.'
        assert not EmailWorkflow.objects.exists()

    def test_unknown_condition_type(self, auth_client):
        response = auth_client.post(WORKFLOWS_URL, {
            'name': 'Conditional',
            'recipient_email': 'office@org.test',
            'email_subject': 'S',
            'email_template': 'B',
            'conditions': {'all': [{'type': 'regex', 'field': 'email', 'value': '.*'}]},
        }, format='json')

        assert response.status_code == 400
        assert 'conditions' in response.data['errors']

    def test_update(self, auth_client, make_workflow):
        workflow = make_workflow()

        response = auth_client.patch(detail_url(workflow.pk), {'email_subject': 'Hello {{first_name}}'}, format='json')

        assert response.status_code == 200
        workflow.refresh_from_db()
        assert workflow.email_subject == 'Hello {{first_name}}'


class TestToggleWorkflow:
    def test_toggle_twice(self, auth_client, make_workflow):
        workflow = make_workflow()

        first = auth_client.post(detail_url(workflow.pk, 'toggle/'))
        second = auth_client.post(detail_url(workflow.pk, 'toggle/'))

        assert first.status_code == 200
        assert first.data['is_active'] is False
        assert first.data['message'] == 'Workflow disabled'
        assert second.data['is_active'] is True
        assert second.data['message'] == 'Workflow enabled'


class TestDeleteWorkflow:
    def test_requires_confirmation(self, auth_client, make_workflow):
        workflow = make_workflow()

        response = auth_client.delete(detail_url(workflow.pk))

        assert response.status_code == 400
        assert 'confirm' in response.data['error']
        assert EmailWorkflow.objects.filter(pk=workflow.pk).exists()

    def test_second_delete_is_not_found(self, auth_client, make_workflow):
        workflow = make_workflow()

        first = auth_client.delete(detail_url(workflow.pk, '?confirm=true'))
        second = auth_client.delete(detail_url(workflow.pk, '?confirm=true'))

        assert first.status_code == 204
        assert second.status_code == 404
        assert not EmailWorkflow.objects.filter(pk=workflow.pk).exists()


class TestSendTest:
    def payload(self, workflow_id, **overrides):
        data = {
            'workflowId': workflow_id,
            'testEmail': 'me@org.test',
            'testData': {'first_name': 'Ana', 'last_name': 'Lee', 'email': 'ana@example.com', 'membership_type': 'Adult'},
        }
        data.update(overrides)
        return data

    def test_without_token(self, api_client, make_workflow):
        workflow = make_workflow()

        response = api_client.post(TEST_SEND_URL, self.payload(workflow.pk), format='json')

        assert response.status_code == 401
        assert response.data['error']
        assert mail.outbox == []

    def test_sends_rendered_email(self, auth_client, make_workflow):
        workflow = make_workflow()

        response = auth_client.post(TEST_SEND_URL, self.payload(workflow.pk), format='json')

        assert response.status_code == 200
        assert response.data['success'] is True
        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == ['me@org.test']
        assert mail.outbox[0].subject == 'New signup: Ana Lee'

    def test_missing_test_email(self, auth_client, make_workflow):
        workflow = make_workflow()

        response = auth_client.post(TEST_SEND_URL, self.payload(workflow.pk, testEmail=''), format='json')

        assert response.status_code == 400
        assert response.data['error'] == 'Please enter a test email address'

    def test_unknown_workflow(self, auth_client, organization):
        response = auth_client.post(TEST_SEND_URL, self.payload(99999), format='json')

        assert response.status_code == 404
        assert response.data['error'] == 'Workflow not found'

    def test_other_organization_workflow(self, auth_client, other_organization):
        foreign = EmailWorkflow.objects.create(
            organization=other_organization, name='Theirs', recipient_email='x@org.test',
            email_subject='S', email_template='B',
        )

        response = auth_client.post(TEST_SEND_URL, self.payload(foreign.pk), format='json')

        assert response.status_code == 404
        assert mail.outbox == []

    def test_delivery_failure(self, auth_client, make_workflow):
        workflow = make_workflow()

        with patch.object(EmailMultiAlternatives, 'send', side_effect=SMTPException('relay denied')):
            response = auth_client.post(TEST_SEND_URL, self.payload(workflow.pk), format='json')

        assert response.status_code == 502
        assert response.data['error'] == 'Failed to send test email: relay denied'


class TestCommitteePositions:
    def test_active_positions_in_display_order(self, auth_client, organization, treasurer_position, secretary_position):
        CommitteePosition.objects.create(organization=organization, name='Retired', is_active=False)

        response = auth_client.get('/api/committee-positions/')

        assert response.status_code == 200
        assert [p['name'] for p in response.data] == ['Secretary', 'Treasurer']


class TestMembers:
    def test_create_member(self, auth_client, organization):
        response = auth_client.post('/api/members/', {
            'first_name': 'Ana', 'last_name': 'Lee', 'email': 'ana@example.com', 'membership_type': 'Adult',
        }, format='json')

        assert response.status_code == 201
        assert Member.objects.get().organization == organization

    def test_duplicate_email(self, auth_client, make_member):
        make_member(email='ana@example.com')

        response = auth_client.post('/api/members/', {'first_name': 'Ana', 'email': 'ANA@example.com'}, format='json')

        assert response.status_code == 400
        assert 'email' in response.data['errors']

    def test_renew(self, auth_client, make_member):
        member = make_member(membership_type='Junior', status=Member.STATUS_INACTIVE)

        response = auth_client.post(f'/api/members/{member.pk}/renew/', {'membership_type': 'Adult'}, format='json')

        assert response.status_code == 201
        member.refresh_from_db()
        assert member.membership_type == 'Adult'
        assert member.status == Member.STATUS_ACTIVE
        assert MembershipRenewal.objects.filter(member=member).count() == 1


def test_dashboard_counts(auth_client, make_member, make_workflow):
    make_member(email='a@org.test')
    make_member(email='b@org.test', status=Member.STATUS_INACTIVE)
    make_workflow()
    make_workflow(is_active=False)

    response = auth_client.get('/api/dashboard/')

    assert response.data == {
        'total_members': 2,
        'active_members': 1,
        'total_workflows': 2,
        'active_workflows': 1,
    }
