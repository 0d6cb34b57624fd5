from decimal import Decimal

import django.core.validators
from django.db import migrations, models
import django.db.models.deletion

STATUS_CHOICES = [('PENDING', 'Pending'), ('PAID', 'Paid'), ('OVERDUE', 'Overdue'), ('CANCELLED', 'Cancelled')]


def document_fields():
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('issue_date', models.DateField()),
        ('due_date', models.DateField()),
        ('status', models.CharField(choices=STATUS_CHOICES, default='PENDING', max_length=20)),
        ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=15)),
        ('notes', models.TextField(blank=True, default='')),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
    ]


def item_fields():
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('description', models.CharField(max_length=500)),
        ('quantity', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
        ('unit_price', models.DecimalField(decimal_places=2, max_digits=15, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
        ('total_price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=15)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('businesses', '0001_initial'),
        ('contacts', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Invoice',
            fields=document_fields() + [
                ('invoice_number', models.CharField(blank=True, max_length=50)),
                ('business', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='invoices', to='businesses.business')),
                ('debtor', models.ForeignKey(on_delete=django.db.models.deletion.RESTRICT, related_name='invoices', to='contacts.debtor')),
            ],
            options={
                'db_table': 'invoices',
                'ordering': ['-issue_date', '-created_at'],
                'abstract': False,
            },
        ),
        migrations.AddConstraint(
            model_name='invoice',
            constraint=models.UniqueConstraint(fields=('business', 'invoice_number'), name='unique_invoice_number_per_business'),
        ),
        migrations.CreateModel(
            name='InvoiceItem',
            fields=item_fields() + [
                ('invoice', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='invoices.invoice')),
            ],
            options={
                'db_table': 'invoice_items',
                'ordering': ['id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Bill',
            fields=document_fields() + [
                ('bill_number', models.CharField(blank=True, max_length=50)),
                ('business', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='bills', to='businesses.business')),
                ('creditor', models.ForeignKey(on_delete=django.db.models.deletion.RESTRICT, related_name='bills', to='contacts.creditor')),
            ],
            options={
                'db_table': 'bills',
                'ordering': ['-issue_date', '-created_at'],
                'abstract': False,
            },
        ),
        migrations.AddConstraint(
            model_name='bill',
            constraint=models.UniqueConstraint(fields=('business', 'bill_number'), name='unique_bill_number_per_business'),
        ),
        migrations.CreateModel(
            name='BillItem',
            fields=item_fields() + [
                ('bill', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='invoices.bill')),
            ],
            options={
                'db_table': 'bill_items',
                'ordering': ['id'],
                'abstract': False,
            },
        ),
    ]
