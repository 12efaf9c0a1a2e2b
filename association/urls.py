"""
URL configuration for association project.
"""
from django.contrib import admin
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import (
    TokenObtainPairView,
    TokenRefreshView,
)

from core.views import UserViewSet, DashboardView
from members.views import MemberViewSet
from workflows.views import EmailWorkflowViewSet, CommitteePositionViewSet

router = DefaultRouter()
router.register(r'users', UserViewSet)
router.register(r'members', MemberViewSet, basename='member')
router.register(r'workflows', EmailWorkflowViewSet, basename='workflow')
router.register(r'committee-positions', CommitteePositionViewSet, basename='committee-position')

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include(router.urls)),
    path('api/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('api/dashboard/', DashboardView.as_view(), name='dashboard'),
]
