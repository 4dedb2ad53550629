from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("email", models.CharField(max_length=254, unique=True)),
                ("password_hash", models.CharField(max_length=256)),
                (
                    "role",
                    models.CharField(
                        choices=[("driver", "Driver"), ("admin", "Admin")],
                        default="driver",
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="Submission",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("race_date", models.CharField(max_length=64)),
                ("race_time", models.CharField(max_length=64)),
                ("series", models.CharField(max_length=200)),
                ("is_protest", models.BooleanField(default=False)),
                ("protest_text", models.TextField(blank=True, null=True)),
                ("replay_file", models.CharField(blank=True, max_length=255, null=True)),
                ("telemetry_files", models.TextField(default="[]")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="submissions",
                        to="paddock.user",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["user", "created_at"], name="paddock_sub_user_created_idx"),
                    models.Index(fields=["created_at"], name="paddock_sub_created_idx"),
                ],
            },
        ),
    ]
