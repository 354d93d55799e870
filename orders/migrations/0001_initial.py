import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

STATUS_CHOICES = [
    ("awaiting_offer", "Awaiting Offer"),
    ("offer_made", "Offer Made"),
    ("Awaiting Payment", "Awaiting Payment"),
    ("Awaiting Actor Confirmation", "Awaiting Actor Confirmation"),
    ("Awaiting Admin Confirmation", "Awaiting Admin Confirmation"),
    ("In Progress", "In Progress"),
    ("Pending Approval", "Pending Approval"),
    ("Completed", "Completed"),
    ("Cancelled", "Cancelled"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("order_code", models.CharField(editable=False, max_length=40, unique=True)),
                (
                    "service_type",
                    models.CharField(
                        choices=[
                            ("voice_over", "Voice Over"),
                            ("scriptwriting", "Script Writing"),
                            ("video_editing", "Video Editing"),
                        ],
                        max_length=20,
                    ),
                ),
                ("client_name", models.CharField(max_length=200)),
                ("client_email", models.EmailField(max_length=254)),
                ("client_phone", models.CharField(blank=True, default="", max_length=50)),
                ("client_company", models.CharField(blank=True, default="", max_length=200)),
                (
                    "total_price",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=10,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(
                        blank=True,
                        choices=[("stripe", "stripe"), ("bank", "bank")],
                        max_length=10,
                        null=True,
                    ),
                ),
                ("payment_intent_id", models.CharField(blank=True, max_length=255, null=True)),
                ("script", models.TextField(blank=True, default="")),
                ("word_count", models.PositiveIntegerField(default=0)),
                (
                    "usage",
                    models.CharField(
                        blank=True,
                        choices=[("web", "web"), ("broadcast", "broadcast")],
                        max_length=20,
                        null=True,
                    ),
                ),
                ("video_sync", models.BooleanField(default=False)),
                ("quote_est_duration", models.CharField(blank=True, max_length=100, null=True)),
                ("quote_video_type", models.CharField(blank=True, max_length=100, null=True)),
                ("quote_footage_choice", models.CharField(blank=True, max_length=100, null=True)),
                ("status", models.CharField(choices=STATUS_CHOICES, default="awaiting_offer", max_length=32)),
                ("revisions_used", models.PositiveIntegerField(default=0)),
                ("revisions_allowed", models.PositiveIntegerField(default=0)),
                (
                    "last_message_sender_role",
                    models.CharField(
                        blank=True,
                        choices=[("client", "client"), ("provider", "provider")],
                        max_length=10,
                        null=True,
                    ),
                ),
                ("client_has_unread", models.BooleanField(default=False)),
                ("provider_has_unread", models.BooleanField(default=False)),
                ("notification_due_at", models.DateTimeField(blank=True, null=True)),
                ("offer_sequence", models.PositiveIntegerField(default=0, editable=False)),
                ("delivery_sequence", models.PositiveIntegerField(default=0, editable=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "client_user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders_placed",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "provider",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders_received",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ("-created_at", "-id"),
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(status__in=[value for value, _ in STATUS_CHOICES]),
                        name="order_status_valid",
                    )
                ],
            },
        ),
    ]
