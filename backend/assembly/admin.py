from django.contrib import admin

from .models import AuditLog, Journey, Member, Setting


@admin.register(Member)
class MemberAdmin(admin.ModelAdmin):
    list_display = ("cooperative_id", "last_name", "first_name", "member_type", "status", "eligibility")
    search_fields = ("cooperative_id", "first_name", "last_name")
    list_filter = ("member_type", "status", "eligibility")


@admin.register(Journey)
class JourneyAdmin(admin.ModelAdmin):
    list_display = ("control_number", "member", "status", "check_in_time", "check_out_time", "claimed")
    search_fields = ("control_number", "member__cooperative_id", "member__last_name")
    list_filter = ("status", "check_in_date", "lost_stub", "incorrect_stub", "different_stub_number")
    readonly_fields = ("journey_id", "check_in_date", "created_at", "updated_at")

    # journeys change only through check-in, check-out and the audited resets
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Setting)
class SettingAdmin(admin.ModelAdmin):
    list_display = ("key", "value", "description", "updated_at")


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("action", "table_name", "record_id", "staff_id", "terminal_id", "created_at")
    list_filter = ("action", "created_at")
    search_fields = ("record_id", "staff_id", "terminal_id")

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
