# Generated manually to allow sub-cent egg prices
from decimal import Decimal
from django.db import migrations, models
import django.core.validators


class Migration(migrations.Migration):

    dependencies = [
        ('batches', '0001_initial'),
    ]

    operations = [
        migrations.AlterField(
            model_name='eggrecord',
            name='price_per_egg',
            field=models.DecimalField(max_digits=12, decimal_places=4, blank=True, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0'))]),
        ),
    ]
