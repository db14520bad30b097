# Generated manually for in-app notifications
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ('notification_type', models.CharField(max_length=20, choices=[('vaccination', 'Vaccination'), ('mortality', 'Mortality'), ('general', 'General')], default='general')),
                ('title', models.CharField(max_length=200)),
                ('message', models.TextField()),
                ('related_kind', models.CharField(max_length=20, blank=True, choices=[('vaccination', 'Vaccination'), ('batch', 'Batch'), ('mortality', 'Mortality')])),
                ('related_id', models.UUIDField(blank=True, null=True, db_index=True)),
                ('is_read', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'notifications',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['owner', 'is_read'], name='notifications_owner_read_idx'),
                    models.Index(fields=['related_id', 'created_at'], name='notifications_related_idx'),
                ],
            },
        ),
    ]
