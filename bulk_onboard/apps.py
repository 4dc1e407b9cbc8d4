"""
Django app configuration for bulk-onboard.
"""

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class BulkOnboardConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "bulk_onboard"
    verbose_name = "Bulk Onboarding"
    label = "bulk_onboard"

    def ready(self):
        from .importing.profiles import registered_kinds

        logger.info("Bulk onboarding ready (import kinds: %s)", ", ".join(registered_kinds()))
