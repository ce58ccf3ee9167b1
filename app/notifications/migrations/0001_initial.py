# Generated manually - initial notification table

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
            name="Notification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("title", models.CharField(help_text="Notification title", max_length=255)),
                ("message", models.TextField(help_text="Notification body")),
                (
                    "category",
                    models.CharField(
                        choices=[("task", "Task"), ("system", "System"), ("reminder", "Reminder")],
                        db_index=True,
                        default="system",
                        help_text="Notification category",
                        max_length=20,
                    ),
                ),
                ("is_read", models.BooleanField(db_index=True, default=False, help_text="Whether recipient has read this notification")),
                (
                    "related_entity_id",
                    models.CharField(
                        blank=True,
                        help_text="ID of the related record (supports UUID and integer PKs)",
                        max_length=64,
                        null=True,
                    ),
                ),
                (
                    "related_entity_type",
                    models.CharField(
                        blank=True,
                        help_text="Type of the related record (e.g. 'conversation')",
                        max_length=50,
                        null=True,
                    ),
                ),
                (
                    "recipient",
                    models.ForeignKey(
                        help_text="User receiving this notification",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notifications",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "notifications_notification",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(
                        fields=["recipient", "is_read", "-created_at"],
                        name="notif_recipient_unread_idx",
                    )
                ],
            },
        ),
    ]
