import logging

from django.db import DatabaseError
from rest_framework import exceptions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from members.models import CommitteePosition
from .exceptions import DeliveryFailure, StoreError, Unauthenticated, WorkflowValidationError
from .models import EmailWorkflow
from .serializers import CommitteePositionSerializer, EmailWorkflowSerializer, SendTestSerializer
from .services import WorkflowService

logger = logging.getLogger(__name__)

CONFIRM_VALUES = ('1', 'true', 'yes')


def _first_message(errors):
    """First human readable message out of a DRF error structure"""
    if isinstance(errors, dict):
        for value in errors.values():
            return _first_message(value)
    if isinstance(errors, (list, tuple)) and errors:
        return _first_message(errors[0])
    return str(errors)


class OrganizationScopedMixin:
    """Scopes API access to the organization of the requesting operator"""

    def get_organization_id(self):
        user = self.request.user
        requested = self.request.query_params.get('organization')
        if user.is_superuser and requested:
            try:
                return int(requested)
            except ValueError:
                raise exceptions.ValidationError({'organization': ['Must be an integer.']})
        return user.organization_id


class ErrorPayloadMixin:
    """Error responses carry an ``error`` message next to DRF's own payload"""

    store_error_message = 'Something went wrong, please try again'

    def handle_exception(self, exc):
        if isinstance(exc, WorkflowValidationError):
            return Response({'error': _first_message(exc.errors), 'errors': exc.errors}, status=status.HTTP_400_BAD_REQUEST)
        if isinstance(exc, Unauthenticated):
            return Response({'error': str(exc)}, status=status.HTTP_401_UNAUTHORIZED)
        if isinstance(exc, EmailWorkflow.DoesNotExist):
            return Response({'error': 'Workflow not found'}, status=status.HTTP_404_NOT_FOUND)
        if isinstance(exc, DeliveryFailure):
            return Response({'error': f'Failed to send test email: {exc.reason}'}, status=status.HTTP_502_BAD_GATEWAY)
        if isinstance(exc, StoreError):
            return Response({'error': str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        if isinstance(exc, DatabaseError):
            logger.error(f"❌ Database error in {self.__class__.__name__}: {str(exc)}")
            return Response({'error': self.store_error_message}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        response = super().handle_exception(exc)
        if isinstance(exc, exceptions.ValidationError):
            response.data = {'error': _first_message(response.data), 'errors': response.data}
        elif isinstance(response.data, dict) and 'detail' in response.data:
            response.data['error'] = str(response.data['detail'])
        return response


class EmailWorkflowViewSet(ErrorPayloadMixin, OrganizationScopedMixin, viewsets.ModelViewSet):
    serializer_class = EmailWorkflowSerializer
    store_error_message = 'Failed to load email workflows'

    def get_queryset(self):
        return EmailWorkflow.objects.for_organization(self.get_organization_id()).order_by('-created_at', '-id')

    def get_service(self):
        return WorkflowService()

    def perform_create(self, serializer):
        organization_id = self.get_organization_id()
        if organization_id is None:
            raise WorkflowValidationError({'organization': ['Your account is not linked to an organization.']})
        serializer.instance = self.get_service().create_workflow(
            organization_id, serializer.validated_data, user=self.request.user,
        )

    def perform_update(self, serializer):
        self.get_service().update_workflow(serializer.instance, serializer.validated_data)

    def destroy(self, request, *args, **kwargs):
        workflow = self.get_object()
        confirmed = request.query_params.get('confirm', '').lower() in CONFIRM_VALUES
        self.get_service().delete_workflow(workflow, confirmed=confirmed)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'])
    def toggle(self, request, pk=None):
        workflow = self.get_service().toggle_workflow(self.get_object())
        data = self.get_serializer(workflow).data
        data['message'] = f"Workflow {'enabled' if workflow.is_active else 'disabled'}"
        return Response(data)

    @action(detail=False, methods=['post'], url_path='test')
    def send_test(self, request):
        payload = SendTestSerializer(data=request.data)
        payload.is_valid(raise_exception=True)

        self.get_service().send_test_email(
            workflow_id=payload.validated_data['workflowId'],
            test_email=payload.validated_data['testEmail'],
            test_data=payload.validated_data['testData'],
            user=request.user,
        )
        return Response({'success': True, 'message': 'Test email sent successfully!'})


class CommitteePositionViewSet(ErrorPayloadMixin, OrganizationScopedMixin, viewsets.ReadOnlyModelViewSet):
    """Active positions of the operator's organization, in display order, for the workflow editor"""
    serializer_class = CommitteePositionSerializer

    def get_queryset(self):
        return CommitteePosition.objects.filter(
            organization_id=self.get_organization_id(),
            is_active=True,
        ).order_by('display_order', 'name')
