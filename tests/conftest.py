"""
Shared fixtures: one organization with an operator, a board committee and a
treasurer, plus a factory for email workflows.
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from core.models import Organization, User
from members.models import Committee, CommitteeAssignment, CommitteePosition, Member
from workflows.models import EmailWorkflow


@pytest.fixture
def organization(db):
    return Organization.objects.create(slug='riverside', name='Riverside Rowing Club', contact_email='office@org.test')


@pytest.fixture
def other_organization(db):
    return Organization.objects.create(slug='hillside', name='Hillside Chess Club')


@pytest.fixture
def operator(organization):
    return User.objects.create_user(
        username='operator',
        password='s3cret-pass',
        email='operator@org.test',
        organization=organization,
    )


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def auth_client(operator):
    client = APIClient()
    token = RefreshToken.for_user(operator).access_token
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    return client


@pytest.fixture
def committee(organization):
    return Committee.objects.create(organization=organization, name='Board')


@pytest.fixture
def treasurer_position(organization):
    return CommitteePosition.objects.create(organization=organization, name='Treasurer', display_order=2)


@pytest.fixture
def secretary_position(organization):
    return CommitteePosition.objects.create(organization=organization, name='Secretary', display_order=1)


@pytest.fixture
def make_member(organization):
    def _make(**overrides):
        data = {
            'organization': organization,
            'first_name': 'Sam',
            'last_name': 'Reed',
            'email': 'sam@org.test',
            'membership_type': 'Adult',
        }
        data.update(overrides)
        return Member.objects.create(**data)
    return _make


@pytest.fixture
def treasurer(make_member, committee, treasurer_position):
    member = make_member(first_name='Tess', last_name='Banks', email='treasurer@org.test')
    CommitteeAssignment.objects.create(committee=committee, position=treasurer_position, member=member)
    return member


@pytest.fixture
def make_workflow(organization):
    def _make(**overrides):
        data = {
            'organization': organization,
            'name': 'Notify office',
            'trigger_event': EmailWorkflow.TRIGGER_SIGNUP,
            'recipient_type': EmailWorkflow.RECIPIENT_EMAIL,
            'recipient_email': 'office@org.test',
            'email_subject': 'New signup: {{first_name}} {{last_name}}',
            'email_template': '{{first_name}} joined as {{membership_type}}.',
        }
        data.update(overrides)
        return EmailWorkflow.objects.create(**data)
    return _make


@pytest.fixture
def ana():
    """Template variables of a member signing up"""
    return {
        'first_name': 'Ana',
        'last_name': 'Lee',
        'email': 'ana@example.com',
        'membership_type': 'Adult',
    }
