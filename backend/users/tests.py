from types import SimpleNamespace

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import TestCase

from .models import UserRole
from .permissions import IsAdminUserRole, IsStaffOrAdminRole


def _request(user):
    return SimpleNamespace(user=user)


class RolePermissionTests(TestCase):
    def setUp(self):
        user_model = get_user_model()
        self.staff = user_model.objects.create_user(username="staff", password="pass1234", terminal_id="T1")
        self.admin = user_model.objects.create_user(username="admin", password="pass1234", role=UserRole.ADMIN)
        self.superuser = user_model.objects.create_superuser(username="root", password="pass1234")

    def test_default_role_is_staff(self):
        self.assertEqual(self.staff.role, UserRole.STAFF)
        self.assertEqual(self.staff.staff_id, str(self.staff.pk))
        self.assertFalse(self.staff.is_admin_role)

    def test_staff_permission(self):
        permission = IsStaffOrAdminRole()
        self.assertTrue(permission.has_permission(_request(self.staff), None))
        self.assertTrue(permission.has_permission(_request(self.admin), None))
        self.assertFalse(permission.has_permission(_request(AnonymousUser()), None))

    def test_admin_permission(self):
        permission = IsAdminUserRole()
        self.assertFalse(permission.has_permission(_request(self.staff), None))
        self.assertTrue(permission.has_permission(_request(self.admin), None))
        self.assertTrue(permission.has_permission(_request(self.superuser), None))
