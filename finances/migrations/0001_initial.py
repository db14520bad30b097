# Generated manually for the transaction ledger
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
        ('feed', '0001_initial'),
        ('vaccinations', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Transaction',
            fields=[
                ('id', models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ('transaction_type', models.CharField(max_length=10, choices=[('income', 'Income'), ('expense', 'Expense')], db_index=True)),
                ('category', models.CharField(max_length=100, db_index=True, help_text='Free text; see ExpenseCategory / IncomeCategory for suggested values')),
                ('amount', models.DecimalField(max_digits=12, decimal_places=2, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('description', models.CharField(max_length=255)),
                ('transaction_date', models.DateField(default=django.utils.timezone.localdate, db_index=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('batch', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='transactions', to='batches.batch')),
                ('egg_record', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='transactions', to='batches.eggrecord')),
                ('feed_record', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='transactions', to='feed.feedrecord')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='transactions', to=settings.AUTH_USER_MODEL)),
                ('vaccination', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='transactions', to='vaccinations.vaccination')),
            ],
            options={
                'db_table': 'transactions',
                'ordering': ['-transaction_date', '-created_at'],
                'indexes': [
                    models.Index(fields=['owner', 'transaction_date'], name='transactions_owner_date_idx'),
                    models.Index(fields=['owner', 'transaction_type'], name='transactions_owner_type_idx'),
                    models.Index(fields=['batch', 'transaction_date'], name='transactions_batch_date_idx'),
                ],
            },
        ),
    ]
