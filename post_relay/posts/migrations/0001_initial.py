from django.db import migrations
from django.db import models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Post",
            fields=[
                (
                    "message_id",
                    models.IntegerField(primary_key=True, serialize=False),
                ),
                ("date", models.IntegerField()),
                ("chat", models.JSONField()),
                ("text", models.TextField(blank=True, null=True)),
                ("caption", models.TextField(blank=True, null=True)),
                ("entities", models.JSONField(blank=True, null=True)),
                ("caption_entities", models.JSONField(blank=True, null=True)),
                ("media_group_id", models.TextField(blank=True, null=True)),
                ("photo", models.JSONField(blank=True, null=True)),
                ("video", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "posts",
                "ordering": ["-message_id"],
            },
        ),
    ]
