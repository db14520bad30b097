# Generated manually for the batch lifecycle models
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
    ]

    operations = [
        migrations.CreateModel(
            name='Batch',
            fields=[
                ('id', models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ('batch_code', models.CharField(max_length=20, unique=True, help_text='Upper-case batch identifier, generated when not supplied')),
                ('name', models.CharField(max_length=200)),
                ('breed', models.CharField(max_length=100, help_text='Bird breed (e.g., Isa Brown, Kuroiler, Sasso)')),
                ('category', models.CharField(max_length=10, choices=[('chick', 'Chick'), ('adult', 'Adult')], default='chick', help_text='Manually maintained category; copied onto mortality records')),
                ('initial_size', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)], help_text='Number of birds at registration')),
                ('current_size', models.PositiveIntegerField(default=0, help_text='Current number of live birds')),
                ('male_count', models.PositiveIntegerField(blank=True, null=True)),
                ('female_count', models.PositiveIntegerField(blank=True, null=True)),
                ('start_date', models.DateField(help_text='Date the batch started on the farm')),
                ('archived', models.BooleanField(default=False, db_index=True)),
                ('total_cost', models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0'))], help_text='Total acquisition cost of the batch')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='batches', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'batches',
                'ordering': ['-start_date', '-created_at'],
                'verbose_name_plural': 'Batches',
                'indexes': [
                    models.Index(fields=['owner', 'archived'], name='batches_owner_archived_idx'),
                    models.Index(fields=['owner', 'start_date'], name='batches_owner_start_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='MortalityRecord',
            fields=[
                ('id', models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ('count', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)], help_text='Number of birds that died')),
                ('age_group', models.CharField(max_length=10, choices=[('chick', 'Chick'), ('adult', 'Adult')])),
                ('date', models.DateTimeField(default=django.utils.timezone.now, db_index=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='mortality_records', to='batches.batch')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='mortality_records', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'mortality_records',
                'ordering': ['-date'],
                'indexes': [
                    models.Index(fields=['owner', 'date'], name='mortality_owner_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='IncubatorRecord',
            fields=[
                ('id', models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ('inserted', models.PositiveIntegerField(default=0)),
                ('spoiled', models.PositiveIntegerField(default=0)),
                ('hatched', models.PositiveIntegerField(default=0)),
                ('not_hatched', models.PositiveIntegerField(default=0)),
                ('date', models.DateField(default=django.utils.timezone.localdate, db_index=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='incubator_records', to='batches.batch')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='incubator_records', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'incubator_records',
                'ordering': ['-date', '-created_at'],
            },
        ),
        migrations.CreateModel(
            name='EggRecord',
            fields=[
                ('id', models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ('date', models.DateField(default=django.utils.timezone.localdate, db_index=True)),
                ('collected', models.PositiveIntegerField(default=0)),
                ('sold', models.PositiveIntegerField(default=0)),
                ('spoiled', models.PositiveIntegerField(default=0)),
                ('price_per_egg', models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='egg_records', to='batches.batch')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='egg_records', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'egg_records',
                'ordering': ['-date', '-created_at'],
                'indexes': [
                    models.Index(fields=['owner', 'date'], name='egg_records_owner_date_idx'),
                    models.Index(fields=['batch', 'date'], name='egg_records_batch_date_idx'),
                ],
            },
        ),
    ]
