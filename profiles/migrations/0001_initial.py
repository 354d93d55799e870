from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Profile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("file", models.CharField(blank=True, default="", max_length=255)),
                ("location", models.CharField(blank=True, default="", max_length=255)),
                ("tel", models.CharField(blank=True, default="", max_length=50)),
                ("description", models.TextField(blank=True, default="")),
                (
                    "type",
                    models.CharField(
                        blank=True,
                        choices=[("client", "client"), ("provider", "provider")],
                        default="",
                        max_length=20,
                    ),
                ),
                ("offers_voice_over", models.BooleanField(default=True)),
                ("offers_scriptwriting", models.BooleanField(default=False)),
                ("offers_video_editing", models.BooleanField(default=False)),
                (
                    "base_rate_per_word",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=8,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "web_multiplier",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("1.00"),
                        max_digits=5,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "broadcast_multiplier",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("1.00"),
                        max_digits=5,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("revisions_allowed", models.PositiveIntegerField(default=2)),
                ("bank_name", models.CharField(blank=True, default="", max_length=255)),
                ("bank_holder_name", models.CharField(blank=True, default="", max_length=255)),
                ("bank_iban", models.CharField(blank=True, default="", max_length=64)),
                ("bank_account_number", models.CharField(blank=True, default="", max_length=64)),
                ("direct_payment_enabled", models.BooleanField(default=False)),
                ("direct_payment_requested", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="profile",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
        ),
    ]
