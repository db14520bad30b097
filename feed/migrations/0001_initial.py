# Generated manually for the feed purchase log
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('batches', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='FeedRecord',
            fields=[
                ('id', models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ('feed_type', models.CharField(max_length=100, help_text='Feed type (e.g., Starter Mash, Grower, Layer Mash)')),
                ('price', models.DecimalField(max_digits=12, decimal_places=2, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], help_text='Total price paid')),
                ('bags', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)], help_text='Number of bags purchased')),
                ('kg_per_bag', models.DecimalField(max_digits=6, decimal_places=2, validators=[django.core.validators.MinValueValidator(Decimal('0.1'))], help_text='Weight per bag in kilograms')),
                ('total_kg', models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'), help_text='Total quantity in kilograms (auto-calculated from bags × weight)')),
                ('date', models.DateField(default=django.utils.timezone.localdate, db_index=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('batch', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='feed_records', to='batches.batch', help_text='Batch the feed was bought for, if any')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='feed_records', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'feed_records',
                'ordering': ['-date', '-created_at'],
                'indexes': [
                    models.Index(fields=['owner', 'date'], name='feed_records_owner_date_idx'),
                ],
            },
        ),
    ]
