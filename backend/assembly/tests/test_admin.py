from django.contrib import admin
from django.contrib.auth import get_user_model
from django.test import RequestFactory, TestCase

from assembly.models import AuditLog, Journey


class ReadOnlyAdminTests(TestCase):
    def setUp(self):
        self.request = RequestFactory().get("/admin/")
        self.request.user = get_user_model().objects.create_superuser(
            username="root",
            email="root@example.com",
            password="pass1234",
        )

    def test_journey_admin_is_read_only(self):
        model_admin = admin.site._registry[Journey]

        self.assertFalse(model_admin.has_add_permission(self.request))
        self.assertFalse(model_admin.has_change_permission(self.request))
        self.assertFalse(model_admin.has_delete_permission(self.request))
        self.assertTrue(model_admin.has_view_permission(self.request))

    def test_audit_log_admin_is_read_only(self):
        model_admin = admin.site._registry[AuditLog]

        self.assertFalse(model_admin.has_change_permission(self.request))
        self.assertFalse(model_admin.has_delete_permission(self.request))
