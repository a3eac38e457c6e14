from django.contrib import admin
from django.utils.html import format_html
from import_export import resources, fields
from import_export.admin import ImportExportModelAdmin
from import_export.widgets import ForeignKeyWidget
from adminsortable2.admin import SortableAdminBase, SortableInlineAdminMixin
from simple_history.admin import SimpleHistoryAdmin

from .models import (
    Product,
    ProductOption,
    OptionVariant,
    ProductMedia,
    Category,
    PriceHistory,
)


# =============================================================================
# Import/Export Resources
# =============================================================================

class OptionVariantResource(resources.ModelResource):
    """Resource for importing/exporting variants."""

    option = fields.Field(
        column_name='option_id',
        attribute='option',
        widget=ForeignKeyWidget(ProductOption, 'pk')
    )
    option_name = fields.Field(
        column_name='option_name',
        attribute='option__option_name',
        readonly=True
    )
    product_sku = fields.Field(
        column_name='product_sku',
        attribute='option__product__sku',
        readonly=True
    )

    class Meta:
        model = OptionVariant
        fields = (
            'id', 'option', 'option_name', 'product_sku', 'variant_name', 'sku',
            'price', 'sale_price', 'sale_start', 'sale_end', 'media'
        )
        export_order = fields


# =============================================================================
# Inlines
# =============================================================================

class ProductMediaInline(SortableInlineAdminMixin, admin.TabularInline):
    model = ProductMedia
    extra = 1
    fields = ['media_id', 'url', 'title', 'is_default', 'order', 'media_preview']
    readonly_fields = ['media_preview']

    def media_preview(self, obj):
        if obj.url:
            return format_html(
                '<img src="{}" style="max-height: 50px; max-width: 100px;" />',
                obj.url
            )
        return '-'
    media_preview.short_description = 'Preview'


class ProductOptionInline(admin.TabularInline):
    model = ProductOption
    extra = 0
    fields = ['option_name', 'variant_count']
    readonly_fields = ['variant_count']
    show_change_link = True


class OptionVariantInline(admin.TabularInline):
    model = OptionVariant
    extra = 1
    fields = ['variant_name', 'sku', 'price', 'sale_price', 'sale_start', 'sale_end', 'media']


# =============================================================================
# Model Admins
# =============================================================================

@admin.register(Product)
class ProductAdmin(SortableAdminBase, SimpleHistoryAdmin):
    list_display = ['name', 'sku', 'price', 'sale_price', 'option_count', 'media_count', 'created_at']
    list_filter = ['categories', 'created_at']
    search_fields = ['name', 'sku', 'description']
    filter_horizontal = ['categories']
    readonly_fields = ['option_count', 'media_count', 'created_at', 'updated_at']
    inlines = [ProductOptionInline, ProductMediaInline]

    fieldsets = (
        (None, {
            'fields': ('name', 'sku', 'description', 'categories')
        }),
        ('Pricing', {
            'fields': ('price', 'sale_price', 'sale_start', 'sale_end')
        }),
        ('Info', {
            'fields': ('option_count', 'media_count', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(ProductOption)
class ProductOptionAdmin(admin.ModelAdmin):
    list_display = ['option_name', 'product', 'variant_count', 'updated_at']
    search_fields = ['option_name', 'product__name', 'product__sku']
    autocomplete_fields = ['product']
    inlines = [OptionVariantInline]


@admin.register(OptionVariant)
class OptionVariantAdmin(ImportExportModelAdmin, SimpleHistoryAdmin):
    resource_class = OptionVariantResource
    list_display = [
        'sku', 'variant_name', 'option', 'price', 'sale_price', 'sale_status'
    ]
    list_filter = ['option__product']
    list_editable = ['price', 'sale_price']
    search_fields = ['sku', 'variant_name', 'option__option_name', 'option__product__name']
    autocomplete_fields = ['option']
    readonly_fields = ['created_at', 'updated_at', 'is_on_sale', 'discount_percentage']
    list_per_page = 50

    fieldsets = (
        (None, {
            'fields': ('option', 'variant_name', 'sku', 'media')
        }),
        ('Pricing', {
            'fields': ('price', 'sale_price', 'sale_start', 'sale_end')
        }),
        ('Info', {
            'fields': ('is_on_sale', 'discount_percentage', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    actions = ['end_sale']

    def sale_status(self, obj):
        if obj.is_on_sale:
            return format_html('<span style="color: green;">On sale (-{}%)</span>', obj.discount_percentage)
        return '-'
    sale_status.short_description = 'Sale'

    def save_model(self, request, obj, form, change):
        obj._changed_by = f'staff:{request.user.pk}'
        super().save_model(request, obj, form, change)

    @admin.action(description='End sale on selected variants')
    def end_sale(self, request, queryset):
        count = 0
        for variant in queryset:
            variant.sale_price = None
            variant.sale_start = None
            variant.sale_end = None
            variant._changed_by = f'staff:{request.user.pk}'
            variant.save()
            count += 1
        self.message_user(request, f'Sale ended on {count} variants.')


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'full_path', 'parent', 'product_count']
    list_filter = ['parent']
    search_fields = ['name', 'description']
    autocomplete_fields = ['parent']

    def product_count(self, obj):
        return obj.products.count()
    product_count.short_description = 'Products'


@admin.register(PriceHistory)
class PriceHistoryAdmin(admin.ModelAdmin):
    list_display = [
        'variant', 'change_type', 'old_price', 'new_price',
        'price_diff_display', 'changed_by', 'changed_at'
    ]
    list_filter = ['change_type', 'changed_at', 'variant__option__product']
    search_fields = ['variant__sku', 'variant__variant_name', 'changed_by']
    readonly_fields = [
        'variant', 'change_type', 'old_price', 'new_price',
        'changed_by', 'changed_at', 'price_difference', 'percentage_change'
    ]
    date_hierarchy = 'changed_at'

    def price_diff_display(self, obj):
        diff = obj.price_difference
        if diff is None:
            return '-'
        if diff > 0:
            return format_html('<span style="color: green;">+{}</span>', f'{diff:.2f}')
        elif diff < 0:
            return format_html('<span style="color: red;">{}</span>', f'{diff:.2f}')
        return '0.00'
    price_diff_display.short_description = 'Difference'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =============================================================================
# Admin Site Configuration
# =============================================================================

admin.site.site_header = 'Catalog Back-office'
admin.site.site_title = 'Catalog'
admin.site.index_title = 'Catalog administration'
