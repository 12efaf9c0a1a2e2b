from django.db import transaction
from rest_framework import exceptions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from workflows.views import ErrorPayloadMixin, OrganizationScopedMixin
from .models import Member
from .serializers import MemberSerializer, MembershipRenewalSerializer


class MemberViewSet(ErrorPayloadMixin, OrganizationScopedMixin, viewsets.ModelViewSet):
    serializer_class = MemberSerializer
    store_error_message = 'Failed to load members'

    def get_queryset(self):
        queryset = Member.objects.filter(organization_id=self.get_organization_id())
        member_status = self.request.query_params.get('status')
        if member_status:
            queryset = queryset.filter(status=member_status)
        return queryset

    def perform_create(self, serializer):
        organization_id = self.get_organization_id()
        email = serializer.validated_data['email']
        if Member.objects.filter(organization_id=organization_id, email__iexact=email).exists():
            raise exceptions.ValidationError({'email': ['A member with this email already exists.']})
        # post_save on Member queues the signup workflows
        serializer.save(organization_id=organization_id)

    @action(detail=True, methods=['post'])
    def renew(self, request, pk=None):
        member = self.get_object()
        payload = MembershipRenewalSerializer(data=request.data)
        payload.is_valid(raise_exception=True)

        with transaction.atomic():
            renewal = member.renew(payload.validated_data.get('membership_type', ''))

        return Response(MembershipRenewalSerializer(renewal).data, status=status.HTTP_201_CREATED)
