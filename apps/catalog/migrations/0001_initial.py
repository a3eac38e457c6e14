# Generated manually

from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import simple_history.models
from django.conf import settings
from django.db import migrations, models


def price_field(verbose_name, validators=True):
    return models.DecimalField(
        blank=True,
        decimal_places=2,
        max_digits=10,
        null=True,
        validators=[django.core.validators.MinValueValidator(Decimal('0.00'))] if validators else [],
        verbose_name=verbose_name,
    )


def history_fields():
    return [
        ('history_id', models.AutoField(primary_key=True, serialize=False)),
        ('history_date', models.DateTimeField(db_index=True)),
        ('history_change_reason', models.CharField(max_length=100, null=True)),
        ('history_type', models.CharField(choices=[('+', 'Created'), ('~', 'Changed'), ('-', 'Deleted')], max_length=1)),
    ]


def history_user_field():
    return (
        'history_user',
        models.ForeignKey(
            null=True,
            on_delete=django.db.models.deletion.SET_NULL,
            related_name='+',
            to=settings.AUTH_USER_MODEL,
        ),
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, unique=True, verbose_name='Name')),
                ('description', models.TextField(blank=True, default='', verbose_name='Description')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('parent', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='children', to='catalog.category', verbose_name='Parent category')),
            ],
            options={
                'verbose_name': 'Category',
                'verbose_name_plural': 'Categories',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('sku', models.CharField(max_length=100, unique=True, verbose_name='SKU')),
                ('description', models.TextField(blank=True, verbose_name='Description')),
                ('price', price_field('Price')),
                ('sale_price', price_field('Sale price')),
                ('sale_start', models.DateTimeField(blank=True, null=True, verbose_name='Sale start')),
                ('sale_end', models.DateTimeField(blank=True, null=True, verbose_name='Sale end')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('categories', models.ManyToManyField(blank=True, related_name='products', to='catalog.category', verbose_name='Categories')),
            ],
            options={
                'verbose_name': 'Product',
                'verbose_name_plural': 'Products',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='ProductOption',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('option_name', models.CharField(max_length=255, verbose_name='Option name')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='options', to='catalog.product', verbose_name='Product')),
            ],
            options={
                'verbose_name': 'Product option',
                'verbose_name_plural': 'Product options',
                'ordering': ['product', 'id'],
            },
        ),
        migrations.CreateModel(
            name='OptionVariant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('variant_name', models.CharField(max_length=255, verbose_name='Variant name')),
                ('sku', models.CharField(max_length=100, verbose_name='SKU')),
                ('price', price_field('Price')),
                ('sale_price', price_field('Sale price')),
                ('sale_start', models.DateTimeField(blank=True, null=True, verbose_name='Sale start')),
                ('sale_end', models.DateTimeField(blank=True, null=True, verbose_name='Sale end')),
                ('media', models.CharField(blank=True, default='', max_length=2048, verbose_name='Media')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('option', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='variants', to='catalog.productoption', verbose_name='Option')),
            ],
            options={
                'verbose_name': 'Variant',
                'verbose_name_plural': 'Variants',
                'ordering': ['option', 'id'],
            },
        ),
        migrations.CreateModel(
            name='ProductMedia',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('media_id', models.CharField(max_length=64, verbose_name='Media token')),
                ('url', models.CharField(max_length=2048, verbose_name='URL')),
                ('title', models.CharField(blank=True, default='', max_length=255, verbose_name='Title')),
                ('is_default', models.BooleanField(default=False, verbose_name='Default media')),
                ('order', models.PositiveIntegerField(db_index=True, default=0, verbose_name='Display order')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='media', to='catalog.product', verbose_name='Product')),
            ],
            options={
                'verbose_name': 'Product media',
                'verbose_name_plural': 'Product media',
                'ordering': ['order', 'id'],
            },
        ),
        migrations.AddConstraint(
            model_name='productmedia',
            constraint=models.UniqueConstraint(fields=('product', 'media_id'), name='unique_media_token_per_product'),
        ),
        migrations.AddConstraint(
            model_name='productmedia',
            constraint=models.UniqueConstraint(condition=models.Q(('is_default', True)), fields=('product',), name='single_default_media_per_product'),
        ),
        migrations.CreateModel(
            name='PriceHistory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('change_type', models.CharField(choices=[('price', 'Price'), ('sale', 'Sale price')], max_length=10, verbose_name='Change type')),
                ('old_price', price_field('Old price', validators=False)),
                ('new_price', price_field('New price', validators=False)),
                ('changed_by', models.CharField(blank=True, default='', max_length=64, verbose_name='Changed by')),
                ('changed_at', models.DateTimeField(auto_now_add=True, verbose_name='Changed at')),
                ('notes', models.TextField(blank=True, verbose_name='Notes')),
                ('variant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='price_history', to='catalog.optionvariant', verbose_name='Variant')),
            ],
            options={
                'verbose_name': 'Price history',
                'verbose_name_plural': 'Price history',
                'ordering': ['-changed_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='HistoricalProduct',
            fields=[
                ('id', models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name='ID')),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('sku', models.CharField(db_index=True, max_length=100, verbose_name='SKU')),
                ('description', models.TextField(blank=True, verbose_name='Description')),
                ('price', price_field('Price')),
                ('sale_price', price_field('Sale price')),
                ('sale_start', models.DateTimeField(blank=True, null=True, verbose_name='Sale start')),
                ('sale_end', models.DateTimeField(blank=True, null=True, verbose_name='Sale end')),
                ('created_at', models.DateTimeField(blank=True, editable=False, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(blank=True, editable=False, verbose_name='Updated at')),
                *history_fields(),
                history_user_field(),
            ],
            options={
                'verbose_name': 'historical Product',
                'verbose_name_plural': 'historical Products',
                'ordering': ('-history_date', '-history_id'),
                'get_latest_by': ('history_date', 'history_id'),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name='HistoricalOptionVariant',
            fields=[
                ('id', models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name='ID')),
                ('variant_name', models.CharField(max_length=255, verbose_name='Variant name')),
                ('sku', models.CharField(max_length=100, verbose_name='SKU')),
                ('price', price_field('Price')),
                ('sale_price', price_field('Sale price')),
                ('sale_start', models.DateTimeField(blank=True, null=True, verbose_name='Sale start')),
                ('sale_end', models.DateTimeField(blank=True, null=True, verbose_name='Sale end')),
                ('media', models.CharField(blank=True, default='', max_length=2048, verbose_name='Media')),
                ('created_at', models.DateTimeField(blank=True, editable=False, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(blank=True, editable=False, verbose_name='Updated at')),
                *history_fields(),
                history_user_field(),
                ('option', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='catalog.productoption', verbose_name='Option')),
            ],
            options={
                'verbose_name': 'historical Variant',
                'verbose_name_plural': 'historical Variants',
                'ordering': ('-history_date', '-history_id'),
                'get_latest_by': ('history_date', 'history_id'),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
