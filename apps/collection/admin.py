from django.contrib import admin
from apps.collection.models import CollectionItem
from apps.collection.services.item_management import apply_save_rules, new_item_id


@admin.register(CollectionItem)
class CollectionItemAdmin(admin.ModelAdmin):
    """Admin interface for collection items."""

    list_display = [
        'name',
        'user',
        'ip',
        'character',
        'category',
        'status',
        'price',
        'quantity',
        'is_pinned',
        'purchase_date',
    ]
    list_filter = [
        'status',
        'category',
        'source_type',
        'payment_status',
        'is_pinned',
        'purchase_date',
    ]
    search_fields = [
        'id',
        'name',
        'ip',
        'character',
        'user__email',
        'notes',
    ]
    readonly_fields = [
        'id',
        'created_at',
        'updated_at',
    ]
    raw_id_fields = ['user']
    date_hierarchy = 'purchase_date'
    ordering = ['-is_pinned', '-purchase_date']

    fieldsets = (
        ('Basic Information', {
            'fields': (
                'id',
                'user',
                'name',
                'ip',
                'character',
                'category',
                'source_type',
            )
        }),
        ('Purchase', {
            'fields': (
                'price',
                'quantity',
                'payment_status',
                'deposit_amount',
                'final_payment_amount',
                'purchase_date',
            )
        }),
        ('Status', {
            'fields': (
                'status',
                'sold_price',
                'sold_quantity',
                'is_pinned',
                'is_reminder_enabled',
            )
        }),
        ('Details', {
            'fields': ('notes', 'image_url'),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def save_model(self, request, obj, form, change):
        """Admin saves follow the same rules as API saves."""
        if not obj.id:
            obj.id = new_item_id()
        apply_save_rules(obj)
        super().save_model(request, obj, form, change)
