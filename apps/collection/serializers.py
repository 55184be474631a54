from rest_framework import serializers
from .models import CollectionItem, ItemStatus, SourceType, ItemCategory


# =============================================================================
# ITEM SERIALIZERS
# =============================================================================

class CollectionItemSerializer(serializers.ModelSerializer):
    """Full item representation, also used for create/update input."""

    # Declared explicitly: an existing id means update, not a uniqueness error
    id = serializers.CharField(max_length=64, required=False)

    category_display = serializers.CharField(source='get_category_display', read_only=True)
    source_type_display = serializers.CharField(source='get_source_type_display', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    payment_status_display = serializers.CharField(source='get_payment_status_display', read_only=True)

    class Meta:
        model = CollectionItem
        fields = [
            'id',
            'name',
            'ip',
            'character',
            'category',
            'category_display',
            'source_type',
            'source_type_display',
            'price',
            'quantity',
            'payment_status',
            'payment_status_display',
            'deposit_amount',
            'final_payment_amount',
            'status',
            'status_display',
            'sold_price',
            'sold_quantity',
            'purchase_date',
            'notes',
            'image_url',
            'is_pinned',
            'is_reminder_enabled',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {
            'deposit_amount': {'min_value': 0},
            'final_payment_amount': {'min_value': 0},
            'sold_price': {'min_value': 0},
        }

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name cannot be blank.")
        return value


class ItemSummarySerializer(serializers.Serializer):
    """Cached summary projection of an item."""

    id = serializers.CharField()
    name = serializers.CharField()
    ip = serializers.CharField()
    character = serializers.CharField()
    category = serializers.CharField()
    status = serializers.CharField()
    purchase_date = serializers.CharField(allow_null=True)


class ImageUploadSerializer(serializers.Serializer):
    image = serializers.FileField()


# =============================================================================
# QUERY SERIALIZERS
# =============================================================================

STATUS_FILTER_CHOICES = ['all'] + list(ItemStatus.values)


class ItemFilterSerializer(serializers.Serializer):
    """List filters taken from the query string."""

    status = serializers.ChoiceField(choices=STATUS_FILTER_CHOICES, required=False, default='all')
    q = serializers.CharField(required=False, allow_blank=True, default='')
    source_type = serializers.ListField(
        child=serializers.ChoiceField(choices=SourceType.values),
        required=False,
        default=list
    )
    ip = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    character = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    category = serializers.ListField(
        child=serializers.ChoiceField(choices=ItemCategory.values),
        required=False,
        default=list
    )


class IpListQuerySerializer(serializers.Serializer):
    ip = serializers.CharField(required=False, default='all')
    status = serializers.ChoiceField(choices=STATUS_FILTER_CHOICES, required=False, default='all')


# =============================================================================
# CSV / TAXONOMY SERIALIZERS
# =============================================================================

class ItemImportSerializer(serializers.Serializer):
    """CSV import: either an uploaded file or the raw text."""

    file = serializers.FileField(required=False)
    text = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)

    def validate(self, attrs):
        if not attrs.get('file') and not attrs.get('text'):
            raise serializers.ValidationError("Provide a CSV file or its text.")
        return attrs


class TaxonomyEditSerializer(serializers.Serializer):
    labels = serializers.ListField(child=serializers.CharField(allow_blank=True), allow_empty=True)
    operation = serializers.ChoiceField(choices=['add', 'remove', 'move_up', 'move_down'])
    label = serializers.CharField(allow_blank=True, trim_whitespace=False)


class TaxonomySerializer(serializers.Serializer):
    category = serializers.ListField(child=serializers.CharField())
    source_type = serializers.ListField(child=serializers.CharField())
    status = serializers.ListField(child=serializers.CharField())
    payment_status = serializers.ListField(child=serializers.CharField())
