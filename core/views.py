from rest_framework import viewsets
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, IsAdminUser

from .models import User
from .serializers import UserSerializer
from members.models import Member
from workflows.models import EmailWorkflow


class UserViewSet(viewsets.ModelViewSet):
    queryset = User.objects.all()
    serializer_class = UserSerializer
    permission_classes = [IsAdminUser]


class DashboardView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        organization_id = request.user.organization_id
        members = Member.objects.filter(organization_id=organization_id)
        workflows = EmailWorkflow.objects.filter(organization_id=organization_id)

        return Response({
            "total_members": members.count(),
            "active_members": members.filter(status=Member.STATUS_ACTIVE).count(),
            "total_workflows": workflows.count(),
            "active_workflows": workflows.filter(is_active=True).count(),
        })
