"""
Create sample categories and products for local development.
Run with: python manage.py seed_catalog
"""

from decimal import Decimal

from django.core.management.base import BaseCommand

from apps.catalog.models import Category, Product, ProductOption, OptionVariant
from apps.catalog.services import CatalogSyncService

CATEGORY_TREE = {
    'Apparel': ['T-Shirts', 'Trousers'],
    'Accessories': ['Bags', 'Hats'],
}

SAMPLE_PRODUCTS = [
    {
        'name': 'Basic T-Shirt',
        'sku': 'TSH-BASIC',
        'description': 'Comfortable cotton t-shirt',
        'price': Decimal('79.90'),
        'category': 'T-Shirts',
        'options': [
            {
                'option_name': 'Color',
                'variants': [
                    {'variant_name': 'Black', 'sku': 'TSH-BLK', 'price': Decimal('79.90')},
                    {'variant_name': 'White', 'sku': 'TSH-WHT', 'price': Decimal('79.90')},
                    {'variant_name': 'Blue', 'sku': 'TSH-BLU', 'price': Decimal('84.90')},
                ],
            },
            {
                'option_name': 'Size',
                'variants': [
                    {'variant_name': size, 'sku': f'TSH-{size}', 'price': Decimal('79.90')}
                    for size in ('S', 'M', 'L', 'XL')
                ],
            },
        ],
        'product_media': [
            {'url': 'https://cdn.example.com/tshirt-front.jpg', 'title': 'Front', 'default': True},
            {'url': 'https://cdn.example.com/tshirt-back.jpg', 'title': 'Back'},
        ],
    },
    {
        'name': 'Classic Jeans',
        'sku': 'JNS-CLASSIC',
        'description': 'Classic straight jeans',
        'price': Decimal('189.90'),
        'category': 'Trousers',
        'options': [
            {
                'option_name': 'Waist',
                'variants': [
                    {'variant_name': str(waist), 'sku': f'JNS-{waist}', 'price': Decimal('189.90')}
                    for waist in (38, 40, 42, 44)
                ],
            },
        ],
        'product_media': [
            {'url': 'https://cdn.example.com/jeans.jpg', 'title': 'Jeans', 'default': True},
        ],
    },
    {
        'name': 'Canvas Tote Bag',
        'sku': 'BAG-TOTE',
        'description': 'Reusable canvas bag',
        'price': Decimal('49.90'),
        'category': 'Bags',
        'options': [],
        'product_media': [],
    },
]


class Command(BaseCommand):
    help = 'Create sample categories, products, options and media.'

    def handle(self, *args, **options):
        self.stdout.write('Creating categories...')
        categories = {}
        for root_name, children in CATEGORY_TREE.items():
            root, _ = Category.objects.get_or_create(name=root_name)
            categories[root_name] = root
            for child_name in children:
                child, _ = Category.objects.get_or_create(
                    name=child_name, defaults={'parent': root}
                )
                categories[child_name] = child

        self.stdout.write('Creating products...')
        created = 0
        for sample in SAMPLE_PRODUCTS:
            if Product.objects.filter(sku=sample['sku']).exists():
                continue
            data = {key: value for key, value in sample.items() if key != 'category'}
            data['category_ids'] = [categories[sample['category']]]
            CatalogSyncService.create_product(data, actor_id='seed')
            created += 1

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write(f'   - {created} new products ({Product.objects.count()} total)')
        self.stdout.write(f'   - {ProductOption.objects.count()} options')
        self.stdout.write(f'   - {OptionVariant.objects.count()} variants')
        self.stdout.write(f'   - {Category.objects.count()} categories')
