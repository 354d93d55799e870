from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="order",
            name="paid_directly",
            field=models.BooleanField(default=False),
        ),
        migrations.AddField(
            model_name="order",
            name="payout_status",
            field=models.CharField(
                blank=True,
                choices=[("unpaid", "unpaid"), ("paid", "paid"), ("direct", "paid directly")],
                max_length=10,
                null=True,
            ),
        ),
        migrations.AddField(
            model_name="order",
            name="provider_payout_amount",
            field=models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True),
        ),
        migrations.AddField(
            model_name="order",
            name="paid_out_at",
            field=models.DateTimeField(blank=True, null=True),
        ),
        migrations.AddConstraint(
            model_name="order",
            constraint=models.UniqueConstraint(
                condition=models.Q(payment_intent_id__isnull=False),
                fields=("payment_intent_id",),
                name="unique_payment_intent_per_order",
            ),
        ),
    ]
