from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from django.utils.dateparse import parse_date

from . import audit, flags, registry
from .exceptions import (
    AssemblyError,
    CheckoutDisabled,
    Conflict,
    NotFound,
)
from .models import Journey, Member, Setting
from .serializers import (
    AuditLogSerializer,
    CheckInSerializer,
    CheckOutSerializer,
    JourneySerializer,
    MemberSerializer,
    ResetJourneySerializer,
    SettingSerializer,
)
from .services import get_engine
from .statistics import compute_statistics
from .throttles import CheckInRateThrottle, CheckOutRateThrottle, StatsRateThrottle
from users.permissions import IsAdminUserRole, IsStaffOrAdminRole


def _parse_day(request):
    day_param = request.query_params.get("date")
    if not day_param:
        return None, None
    try:
        day = parse_date(day_param)
    except ValueError:
        day = None
    if day is None:
        return None, Response({"detail": "Invalid date"}, status=status.HTTP_400_BAD_REQUEST)
    return day, None


def _parse_int(request, name, default):
    try:
        return max(int(request.query_params.get(name, default)), 0)
    except (TypeError, ValueError):
        return default


def _staff_context(request):
    user = request.user
    staff_id = str(user.pk) if user and user.is_authenticated else None
    terminal_id = getattr(user, "terminal_id", "") or "UNKNOWN"
    return staff_id, terminal_id


def _error_response(exc: AssemblyError):
    if isinstance(exc, NotFound):
        http_status = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, CheckoutDisabled):
        http_status = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, Conflict):
        http_status = status.HTTP_409_CONFLICT
    else:
        # NotEligible, InvalidRequest
        http_status = status.HTTP_400_BAD_REQUEST

    body = {"detail": exc.message, "code": exc.code}
    for key, value in exc.context.items():
        if isinstance(value, Journey):
            body[key] = JourneySerializer(value).data
        elif isinstance(value, Member):
            body[key] = MemberSerializer(value).data
        else:
            body[key] = value
    return Response(body, status=http_status)


class MemberViewSet(viewsets.ModelViewSet):
    serializer_class = MemberSerializer

    def get_permissions(self):
        if self.action == "destroy":
            permission_classes = [IsAdminUserRole]
        else:
            permission_classes = [IsStaffOrAdminRole]
        return [perm() for perm in permission_classes]

    def get_queryset(self):
        params = self.request.query_params
        return registry.search_members(
            query=params.get("search"),
            member_type=params.get("member_type"),
            status=params.get("status"),
            eligibility=params.get("eligibility"),
        )

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        staff_id, terminal_id = _staff_context(request)
        try:
            member = registry.create_member(serializer.validated_data, staff_id=staff_id, terminal_id=terminal_id)
        except AssemblyError as exc:
            return _error_response(exc)
        return Response(MemberSerializer(member).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        staff_id, terminal_id = _staff_context(request)
        try:
            member = registry.get_member(kwargs["pk"])
            serializer = self.get_serializer(member, data=request.data, partial=partial)
            serializer.is_valid(raise_exception=True)
            member = registry.update_member(
                member.pk,
                serializer.validated_data,
                staff_id=staff_id,
                terminal_id=terminal_id,
            )
        except AssemblyError as exc:
            return _error_response(exc)
        return Response(MemberSerializer(member).data)

    def destroy(self, request, *args, **kwargs):
        staff_id, terminal_id = _staff_context(request)
        try:
            registry.delete_member(kwargs["pk"], staff_id=staff_id, terminal_id=terminal_id)
        except AssemblyError as exc:
            return _error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


class JourneyViewSet(viewsets.ViewSet):
    def get_permissions(self):
        admin_only_actions = {"reset", "reset_all"}
        if self.action in admin_only_actions:
            permission_classes = [IsAdminUserRole]
        else:
            permission_classes = [IsStaffOrAdminRole]
        return [perm() for perm in permission_classes]

    def list(self, request):
        day, error_response = _parse_day(request)
        if error_response:
            return error_response
        try:
            journeys = get_engine().list_journeys(
                status=request.query_params.get("status"),
                day=day,
                limit=_parse_int(request, "limit", 50),
                offset=_parse_int(request, "offset", 0),
            )
        except AssemblyError as exc:
            return _error_response(exc)
        return Response(JourneySerializer(journeys, many=True).data)

    @action(detail=False, methods=["post"], url_path="checkin", throttle_classes=[CheckInRateThrottle])
    def checkin(self, request):
        serializer = CheckInSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        staff_id, terminal_id = _staff_context(request)
        try:
            journey = get_engine().check_in(
                data["member_id"],
                data["control_number"],
                terminal_id,
                meal_stub=data["meal_stub"],
                transportation_stub=data["transportation_stub"],
                staff_id=staff_id,
            )
        except AssemblyError as exc:
            return _error_response(exc)
        body = JourneySerializer(journey).data
        body["member"] = MemberSerializer(journey.member).data
        return Response(body, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"], url_path="checkout", throttle_classes=[CheckOutRateThrottle])
    def checkout(self, request):
        engine = get_engine()
        if not engine.settings.checkout_enabled():
            return _error_response(CheckoutDisabled())
        serializer = CheckOutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        staff_id, terminal_id = _staff_context(request)
        try:
            journey = engine.check_out(
                serializer.validated_data["control_number"],
                terminal_id,
                staff_id,
                serializer.get_outcome(),
            )
        except AssemblyError as exc:
            return _error_response(exc)
        return Response(JourneySerializer(journey).data)

    @action(detail=False, methods=["get"], url_path=r"member/(?P<member_id>\d+)")
    def by_member(self, request, member_id=None):
        day, error_response = _parse_day(request)
        if error_response:
            return error_response
        try:
            journey = get_engine().get_journey_by_member(int(member_id), day=day)
        except AssemblyError as exc:
            return _error_response(exc)
        return Response(JourneySerializer(journey).data)

    @action(detail=False, methods=["get"], url_path=r"control/(?P<control_number>[^/]+)")
    def by_control_number(self, request, control_number=None):
        try:
            journey = get_engine().get_journey_by_control_number(control_number)
        except AssemblyError as exc:
            return _error_response(exc)
        return Response(JourneySerializer(journey).data)

    @action(detail=False, methods=["get"], url_path="stats", throttle_classes=[StatsRateThrottle])
    def stats(self, request):
        day, error_response = _parse_day(request)
        if error_response:
            return error_response
        return Response(get_engine().get_stats(day))

    @action(detail=False, methods=["post"], url_path="reset")
    def reset(self, request):
        serializer = ResetJourneySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        staff_id, terminal_id = _staff_context(request)
        try:
            removed = get_engine().reset_journey(
                control_number=serializer.validated_data.get("control_number"),
                member_id=serializer.validated_data.get("member_id"),
                staff_id=staff_id,
                terminal_id=terminal_id,
            )
        except AssemblyError as exc:
            return _error_response(exc)
        return Response({"detail": "Journey reset", "reset": len(removed)})

    @action(detail=False, methods=["post"], url_path="reset-all")
    def reset_all(self, request):
        staff_id, terminal_id = _staff_context(request)
        try:
            deleted = get_engine().reset_all_journeys(
                staff_id=staff_id,
                terminal_id=terminal_id,
                confirm=flags.parse_bool(request.data.get("confirmReset", False)),
            )
        except AssemblyError as exc:
            return _error_response(exc)
        return Response({"detail": "Member journey data has been reset", "deleted": deleted})


class SettingViewSet(viewsets.ViewSet):
    lookup_field = "key"

    def get_permissions(self):
        if self.action == "checkout_enabled":
            permission_classes = [AllowAny]
        elif self.action == "retrieve":
            permission_classes = [IsStaffOrAdminRole]
        else:
            permission_classes = [IsAdminUserRole]
        return [perm() for perm in permission_classes]

    def list(self, request):
        return Response(SettingSerializer(Setting.objects.all(), many=True).data)

    def retrieve(self, request, key=None):
        setting = Setting.objects.filter(key=key).first()
        if setting is None:
            return Response({"detail": "Setting not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(SettingSerializer(setting).data)

    def update(self, request, key=None):
        if "value" not in request.data:
            return Response({"detail": "Setting value is required"}, status=status.HTTP_400_BAD_REQUEST)
        staff_id, terminal_id = _staff_context(request)
        setting = flags.set_setting(
            key,
            request.data["value"],
            description=request.data.get("description"),
            staff_id=staff_id,
            terminal_id=terminal_id,
        )
        return Response(SettingSerializer(setting).data)

    @action(detail=False, methods=["get"], url_path="public/checkout-enabled")
    def checkout_enabled(self, request):
        return Response({"checkout_enabled": flags.is_checkout_enabled()})


class PublicStatisticsView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [StatsRateThrottle]

    def get(self, request):
        day, error_response = _parse_day(request)
        if error_response:
            return error_response
        return Response(compute_statistics(day))


class AuditLogView(APIView):
    permission_classes = [IsAdminUserRole]

    def get(self, request):
        day, error_response = _parse_day(request)
        if error_response:
            return error_response
        entries = audit.list_audit_logs(
            day=day,
            action=request.query_params.get("action"),
            staff_id=request.query_params.get("staff_id"),
            limit=_parse_int(request, "limit", 100),
        )
        return Response(AuditLogSerializer(entries, many=True).data)
