from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    dependencies = [
        ('bank_accounts', '0002_transaction_document_links'),
        ('businesses', '0001_initial'),
    ]

    operations = [
        migrations.AlterField(
            model_name='banktransaction',
            name='destination_account',
            field=models.ForeignKey(blank=True, help_text='Receiving account (transfers only)', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='incoming_transfers', to='bank_accounts.bankaccount'),
        ),
        migrations.AddConstraint(
            model_name='banktransaction',
            constraint=models.UniqueConstraint(fields=('business', 'transaction_number'), name='unique_transaction_number_per_business'),
        ),
    ]
