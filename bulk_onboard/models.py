"""
Tenant-scoped records store for onboarded members.
"""

from typing import Any

from django.contrib.auth.hashers import check_password, make_password
from django.db import models
from django.db.models import Q


class School(models.Model):
    """Tenant: every lookup and uniqueness rule is scoped to one school."""

    name = models.CharField(max_length=200)
    code = models.SlugField(max_length=64, unique=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        app_label = "bulk_onboard"

    def __str__(self) -> str:
        return self.name


class TenantQuerySet(models.QuerySet):
    def for_tenant(self, tenant_id: Any):
        if tenant_id in (None, ""):
            return self.none()
        return self.filter(tenant=tenant_id)


class TenantManager(models.Manager):
    def get_queryset(self):
        return TenantQuerySet(self.model, using=self._db)

    def for_tenant(self, tenant_id: Any):
        return self.get_queryset().for_tenant(tenant_id)


class TenantMixin(models.Model):
    """
    Abstract mixin that adds a tenant foreign key and manager.
    """

    tenant = models.ForeignKey(
        School,
        on_delete=models.CASCADE,
        related_name="%(app_label)s_%(class)s_set",
    )

    objects = TenantManager()

    class Meta:
        abstract = True


class SchoolClass(TenantMixin):
    name = models.CharField(max_length=50)
    section = models.CharField(max_length=10)
    is_active = models.BooleanField(default=True)

    class Meta:
        app_label = "bulk_onboard"
        verbose_name_plural = "school classes"
        constraints = [
            models.UniqueConstraint(
                fields=["tenant", "name", "section"],
                name="uniq_school_class_section_per_tenant",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name}-{self.section}"


class MemberRole(models.TextChoices):
    STUDENT = "student", "Student"
    TEACHER = "teacher", "Teacher"
    ADMIN = "admin", "Admin"
    ACCOUNTANT = "accountant", "Accountant"
    LIBRARIAN = "librarian", "Librarian"
    STAFF = "staff", "Staff"


EMPLOYEE_ROLES = (
    MemberRole.TEACHER,
    MemberRole.ADMIN,
    MemberRole.ACCOUNTANT,
    MemberRole.LIBRARIAN,
    MemberRole.STAFF,
)


class MemberAccount(TenantMixin):
    """A student or employee account, keyed by its tenant-scoped business key."""

    role = models.CharField(max_length=20, choices=MemberRole.choices)
    admission_number = models.CharField(max_length=20, null=True, blank=True)
    employee_id = models.CharField(max_length=20, null=True, blank=True)
    name = models.CharField(max_length=120)
    first_name = models.CharField(max_length=50)
    last_name = models.CharField(max_length=50)
    email = models.EmailField(null=True, blank=True)
    phone = models.CharField(max_length=10, blank=True, default="")
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=10, blank=True, default="")
    school_class = models.ForeignKey(
        SchoolClass,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="students",
    )
    section = models.CharField(max_length=10, blank=True, default="")
    roll_number = models.PositiveIntegerField(null=True, blank=True)
    blood_group = models.CharField(max_length=3, blank=True, default="")
    address = models.CharField(max_length=200, blank=True, default="")
    city = models.CharField(max_length=50, blank=True, default="")
    state = models.CharField(max_length=50, blank=True, default="")
    pincode = models.CharField(max_length=6, blank=True, default="")
    guardian_name = models.CharField(max_length=100, blank=True, default="")
    guardian_phone = models.CharField(max_length=10, blank=True, default="")
    guardian_email = models.EmailField(blank=True, default="")
    department = models.CharField(max_length=50, blank=True, default="")
    qualification = models.CharField(max_length=100, blank=True, default="")
    date_of_joining = models.DateField(null=True, blank=True)
    emergency_contact = models.CharField(max_length=100, blank=True, default="")
    emergency_phone = models.CharField(max_length=10, blank=True, default="")
    password = models.CharField(max_length=128)
    must_change_password = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        app_label = "bulk_onboard"
        constraints = [
            models.UniqueConstraint(
                fields=["tenant", "admission_number"],
                condition=Q(admission_number__isnull=False),
                name="uniq_member_admission_number_per_tenant",
            ),
            models.UniqueConstraint(
                fields=["tenant", "employee_id"],
                condition=Q(employee_id__isnull=False),
                name="uniq_member_employee_id_per_tenant",
            ),
            models.UniqueConstraint(
                fields=["tenant", "email"],
                condition=Q(email__isnull=False),
                name="uniq_member_email_per_tenant",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.business_key})"

    @property
    def business_key(self) -> str | None:
        return self.admission_number or self.employee_id

    def set_password(self, raw_password: str) -> None:
        self.password = make_password(raw_password)

    def check_password(self, raw_password: str) -> bool:
        return check_password(raw_password, self.password)
