# Generated manually for vaccine templates and scheduled vaccinations
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models
import django.core.validators
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('batches', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='VaccineTemplate',
            fields=[
                ('id', models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ('name', models.CharField(max_length=200, help_text='Vaccine name (e.g., Newcastle, Gumboro)')),
                ('default_cost', models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'), validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], help_text='Typical cost of one administration')),
                ('age_in_days', models.PositiveIntegerField(help_text='Batch age in days when this vaccine is due')),
                ('description', models.TextField(blank=True)),
                ('is_active', models.BooleanField(default=True, help_text='Inactive templates are not offered for scheduling')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='vaccine_templates', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'vaccine_templates',
                'ordering': ['age_in_days', 'name'],
                'indexes': [
                    models.Index(fields=['owner', 'is_active'], name='vaccine_tpl_owner_active_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Vaccination',
            fields=[
                ('id', models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ('vaccine_name', models.CharField(max_length=200, help_text='Copied from the template at schedule time')),
                ('age_in_days', models.PositiveIntegerField()),
                ('scheduled_date', models.DateField(db_index=True)),
                ('completed_date', models.DateField(blank=True, null=True)),
                ('actual_cost', models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='vaccinations', to='batches.batch')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='vaccinations', to=settings.AUTH_USER_MODEL)),
                ('template', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='vaccinations', to='vaccinations.vaccinetemplate', help_text='Template this dose was generated from')),
            ],
            options={
                'db_table': 'vaccinations',
                'ordering': ['-scheduled_date'],
                'indexes': [
                    models.Index(fields=['owner', 'scheduled_date'], name='vaccinations_owner_sched_idx'),
                    models.Index(fields=['batch', 'scheduled_date'], name='vaccinations_batch_sched_idx'),
                ],
            },
        ),
    ]
