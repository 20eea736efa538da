# permissions/management/commands/seed_roles.py

from __future__ import annotations

from django.contrib.auth.models import Group
from django.core.management.base import BaseCommand
from django.db import transaction

from permissions.roles import STAFF_ROLES


class Command(BaseCommand):
    help = "Create the auth groups that back staff roles (idempotent)."

    @transaction.atomic
    def handle(self, *args, **options):
        created_count = 0
        for role in sorted(STAFF_ROLES):
            _, created = Group.objects.get_or_create(name=role)
            if created:
                created_count += 1
                self.stdout.write(f"Created role group: {role}")

        self.stdout.write(
            self.style.SUCCESS(
                f"Roles ready ({created_count} created, {len(STAFF_ROLES)} total)."
            )
        )
