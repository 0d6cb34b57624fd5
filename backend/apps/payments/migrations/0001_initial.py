from decimal import Decimal

import django.core.validators
from django.db import migrations, models
import django.db.models.deletion

PAYMENT_METHOD_CHOICES = [
    ('Bank Transfer', 'Bank Transfer'),
    ('Cash', 'Cash'),
    ('Cheque', 'Cheque'),
    ('Card', 'Card'),
    ('Other', 'Other'),
]


def settlement_fields():
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('amount', models.DecimalField(decimal_places=2, max_digits=15, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
        ('payment_date', models.DateField()),
        ('payment_method', models.CharField(choices=PAYMENT_METHOD_CHOICES, default='Other', max_length=30)),
        ('reference', models.CharField(blank=True, default='', max_length=100)),
        ('notes', models.TextField(blank=True, default='')),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('bank_accounts', '0001_initial'),
        ('businesses', '0001_initial'),
        ('contacts', '0001_initial'),
        ('invoices', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Payment',
            fields=settlement_fields() + [
                ('payment_number', models.CharField(blank=True, max_length=50)),
                ('bank_account', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='payments', to='bank_accounts.bankaccount')),
                ('bill', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='payments', to='invoices.bill')),
                ('business', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='businesses.business')),
                ('creditor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.RESTRICT, related_name='payments', to='contacts.creditor')),
            ],
            options={
                'db_table': 'payments',
                'ordering': ['-payment_date', '-created_at'],
                'abstract': False,
            },
        ),
        migrations.AddConstraint(
            model_name='payment',
            constraint=models.UniqueConstraint(fields=('business', 'payment_number'), name='unique_payment_number_per_business'),
        ),
        migrations.CreateModel(
            name='Receipt',
            fields=settlement_fields() + [
                ('receipt_number', models.CharField(blank=True, max_length=50)),
                ('bank_account', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='receipts', to='bank_accounts.bankaccount')),
                ('business', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='receipts', to='businesses.business')),
                ('debtor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.RESTRICT, related_name='receipts', to='contacts.debtor')),
                ('invoice', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='receipts', to='invoices.invoice')),
            ],
            options={
                'db_table': 'payment_receipts',
                'ordering': ['-payment_date', '-created_at'],
                'abstract': False,
            },
        ),
        migrations.AddConstraint(
            model_name='receipt',
            constraint=models.UniqueConstraint(fields=('business', 'receipt_number'), name='unique_receipt_number_per_business'),
        ),
    ]
