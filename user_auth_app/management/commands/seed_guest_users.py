from decimal import Decimal

from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
from rest_framework.authtoken.models import Token

from profiles.models import Profile

GUESTS = {
    "client": {
        "username": "guest_client",
        "password": "guestpass1",
        "email": "client@example.com",
        "profile": {},
    },
    "provider": {
        "username": "guest_actor",
        "password": "guestpass2",
        "email": "actor@example.com",
        "profile": {
            "base_rate_per_word": Decimal("1.50"),
            "web_multiplier": Decimal("1.00"),
            "broadcast_multiplier": Decimal("2.00"),
            "offers_scriptwriting": True,
            "revisions_allowed": 2,
        },
    },
}


class Command(BaseCommand):
    help = "Create or update a demo client and a demo provider (voice actor)."

    def handle(self, *args, **options):
        User = get_user_model()

        for role, cfg in GUESTS.items():
            u, created = User.objects.get_or_create(
                username=cfg["username"],
                defaults={"email": cfg["email"]},
            )
            if created:
                self.stdout.write(self.style.SUCCESS(f"Created user '{u.username}'"))
            else:
                self.stdout.write(f"User '{u.username}' already exists")

            u.set_password(cfg["password"])
            u.save(update_fields=["password"])

            prof, _ = Profile.objects.get_or_create(user=u, defaults={"type": role})
            prof.type = role
            for field, value in cfg["profile"].items():
                setattr(prof, field, value)
            prof.save()

            token, _ = Token.objects.get_or_create(user=u)
            self.stdout.write(f"  → type={role}, token={token.key}")

        self.stdout.write(self.style.SUCCESS("Guest users ready."))
