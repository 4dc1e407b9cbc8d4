import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="School",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("code", models.SlugField(max_length=64, unique=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
        ),
        migrations.CreateModel(
            name="SchoolClass",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=50)),
                ("section", models.CharField(max_length=10)),
                ("is_active", models.BooleanField(default=True)),
                (
                    "tenant",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bulk_onboard_schoolclass_set",
                        to="bulk_onboard.school",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "school classes",
            },
        ),
        migrations.CreateModel(
            name="MemberAccount",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "role",
                    models.CharField(
                        choices=[
                            ("student", "Student"),
                            ("teacher", "Teacher"),
                            ("admin", "Admin"),
                            ("accountant", "Accountant"),
                            ("librarian", "Librarian"),
                            ("staff", "Staff"),
                        ],
                        max_length=20,
                    ),
                ),
                ("admission_number", models.CharField(blank=True, max_length=20, null=True)),
                ("employee_id", models.CharField(blank=True, max_length=20, null=True)),
                ("name", models.CharField(max_length=120)),
                ("first_name", models.CharField(max_length=50)),
                ("last_name", models.CharField(max_length=50)),
                ("email", models.EmailField(blank=True, max_length=254, null=True)),
                ("phone", models.CharField(blank=True, default="", max_length=10)),
                ("date_of_birth", models.DateField(blank=True, null=True)),
                ("gender", models.CharField(blank=True, default="", max_length=10)),
                ("section", models.CharField(blank=True, default="", max_length=10)),
                ("roll_number", models.PositiveIntegerField(blank=True, null=True)),
                ("blood_group", models.CharField(blank=True, default="", max_length=3)),
                ("address", models.CharField(blank=True, default="", max_length=200)),
                ("city", models.CharField(blank=True, default="", max_length=50)),
                ("state", models.CharField(blank=True, default="", max_length=50)),
                ("pincode", models.CharField(blank=True, default="", max_length=6)),
                ("guardian_name", models.CharField(blank=True, default="", max_length=100)),
                ("guardian_phone", models.CharField(blank=True, default="", max_length=10)),
                ("guardian_email", models.EmailField(blank=True, default="", max_length=254)),
                ("department", models.CharField(blank=True, default="", max_length=50)),
                ("qualification", models.CharField(blank=True, default="", max_length=100)),
                ("date_of_joining", models.DateField(blank=True, null=True)),
                ("emergency_contact", models.CharField(blank=True, default="", max_length=100)),
                ("emergency_phone", models.CharField(blank=True, default="", max_length=10)),
                ("password", models.CharField(max_length=128)),
                ("must_change_password", models.BooleanField(default=False)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "school_class",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="students",
                        to="bulk_onboard.schoolclass",
                    ),
                ),
                (
                    "tenant",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bulk_onboard_memberaccount_set",
                        to="bulk_onboard.school",
                    ),
                ),
            ],
        ),
        migrations.AddConstraint(
            model_name="schoolclass",
            constraint=models.UniqueConstraint(
                fields=("tenant", "name", "section"),
                name="uniq_school_class_section_per_tenant",
            ),
        ),
        migrations.AddConstraint(
            model_name="memberaccount",
            constraint=models.UniqueConstraint(
                condition=models.Q(("admission_number__isnull", False)),
                fields=("tenant", "admission_number"),
                name="uniq_member_admission_number_per_tenant",
            ),
        ),
        migrations.AddConstraint(
            model_name="memberaccount",
            constraint=models.UniqueConstraint(
                condition=models.Q(("employee_id__isnull", False)),
                fields=("tenant", "employee_id"),
                name="uniq_member_employee_id_per_tenant",
            ),
        ),
        migrations.AddConstraint(
            model_name="memberaccount",
            constraint=models.UniqueConstraint(
                condition=models.Q(("email__isnull", False)),
                fields=("tenant", "email"),
                name="uniq_member_email_per_tenant",
            ),
        ),
    ]
