# Generated manually to flag ledger entries derived from farm events
from django.db import migrations, models


def flag_derived_entries(apps, schema_editor):
    Transaction = apps.get_model('finances', 'Transaction')
    Transaction.objects.filter(
        models.Q(vaccination__isnull=False)
        | models.Q(egg_record__isnull=False)
        | models.Q(feed_record__isnull=False)
        | models.Q(category='Stock Purchase', transaction_type='expense', batch__isnull=False)
    ).update(auto_generated=True)


class Migration(migrations.Migration):

    dependencies = [
        ('finances', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='transaction',
            name='auto_generated',
            field=models.BooleanField(default=False, editable=False, help_text='Created from a batch, egg, feed or vaccination event'),
        ),
        migrations.RunPython(flag_derived_entries, migrations.RunPython.noop),
    ]
