"""
HTTP client for the workflow test-send endpoint
"""

import logging
from typing import Any, Dict, Optional

import requests
from django.conf import settings

from .exceptions import DeliveryFailure, Unauthenticated
from .rendering import SAMPLE_VARIABLES

logger = logging.getLogger(__name__)


class WorkflowTestSendClient:
    """Posts test-send requests on behalf of an operator holding an access token"""

    def __init__(self, access_token: Optional[str], endpoint: Optional[str] = None, timeout: int = 15):
        self.access_token = access_token
        self.endpoint = endpoint or settings.WORKFLOW_TEST_ENDPOINT
        self.timeout = timeout

    def build_payload(self, workflow_id: int, test_email: str, test_data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        data = dict(SAMPLE_VARIABLES)
        data.update(test_data or {})
        return {
            'workflowId': workflow_id,
            'testEmail': test_email,
            'testData': data,
        }

    def send(self, workflow_id: int, test_email: str, test_data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if not self.access_token:
            raise Unauthenticated()

        try:
            response = requests.post(
                self.endpoint,
                json=self.build_payload(workflow_id, test_email, test_data),
                headers={'Authorization': f'Bearer {self.access_token}'},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"❌ Test-send endpoint unreachable: {str(e)}")
            raise DeliveryFailure(test_email, str(e)) from e

        try:
            result = response.json()
        except ValueError:
            result = {}

        if response.status_code == 401:
            raise Unauthenticated(result.get('error') or 'Not authenticated')
        if not response.ok:
            error = result.get('error') or 'Failed to send test email'
            logger.error(f"❌ Test send of workflow {workflow_id} failed ({response.status_code}): {error}")
            raise DeliveryFailure(test_email, error)
        return result
