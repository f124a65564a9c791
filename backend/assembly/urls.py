from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import AuditLogView, JourneyViewSet, MemberViewSet, PublicStatisticsView, SettingViewSet

router = DefaultRouter()
router.register(r"members", MemberViewSet, basename="members")
router.register(r"journeys", JourneyViewSet, basename="journeys")
router.register(r"settings", SettingViewSet, basename="settings")

urlpatterns = [
    *router.urls,
    path("public/statistics/", PublicStatisticsView.as_view(), name="public-statistics"),
    path("audit-logs/", AuditLogView.as_view(), name="audit-logs"),
]
