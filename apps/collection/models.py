from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from decimal import Decimal


class ItemStatus(models.TextChoices):
    OWNED = 'owned', '已入手'
    TRANSIT = 'transit', '在途'
    RESERVED = 'reserved', '预定中'
    WISHLIST = 'wishlist', '愿望单'
    SOLD = 'sold', '卖出'


class PaymentStatus(models.TextChoices):
    FULL = 'full', '全款'
    DEPOSIT = 'deposit', '定金'


class SourceType(models.TextChoices):
    WESTERN = 'western', '欧美'
    KPOP = 'kpop', 'KPOP'
    ANIME = 'anime', '动漫'
    JPOP = 'jpop', 'JPOP'
    GAME = 'game', '游戏'
    OTHER = 'other', '其他'


class ItemCategory(models.TextChoices):
    CD = 'cd', 'CD'
    BADGE = 'badge', '吧唧'
    PLUSH = 'plush', '毛绒'
    FIGURE = 'figure', '立牌'
    CARD = 'card', '纸片'
    ARTBOOK = 'artbook', '画集'
    OTHER = 'other', '其他'


# Statuses that show up in the arrival reminders
REMINDER_STATUSES = (ItemStatus.TRANSIT, ItemStatus.RESERVED)


class CollectionItem(models.Model):
    """One owned, wished-for or sold collectible."""

    # Opaque, client- or server-generated
    id = models.CharField(primary_key=True, max_length=64)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='collection_items'
    )

    # Descriptive
    name = models.CharField(max_length=200)
    ip = models.CharField(max_length=100, blank=True)
    character = models.CharField(max_length=100, blank=True)
    category = models.CharField(
        max_length=20,
        choices=ItemCategory.choices,
        default=ItemCategory.BADGE
    )
    source_type = models.CharField(
        max_length=20,
        choices=SourceType.choices,
        default=SourceType.ANIME
    )

    # Commercial
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    quantity = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)]
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.FULL
    )
    deposit_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    final_payment_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    # Lifecycle
    status = models.CharField(
        max_length=20,
        choices=ItemStatus.choices,
        default=ItemStatus.OWNED,
        db_index=True
    )
    sold_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    sold_quantity = models.PositiveIntegerField(null=True, blank=True)

    # Auxiliary
    purchase_date = models.DateField(null=True, blank=True, default=timezone.localdate)
    notes = models.TextField(blank=True)
    image_url = models.TextField(blank=True)
    is_pinned = models.BooleanField(default=False)
    is_reminder_enabled = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'collection_items'
        ordering = ['-is_pinned', '-purchase_date', '-created_at']
        indexes = [
            models.Index(fields=['user', '-is_pinned', '-purchase_date'], name='collection_user_pin_date_idx'),
        ]

    def __str__(self):
        return self.name

    @property
    def total_cost(self):
        """Purchase amount of the whole lot."""
        return (self.price or Decimal('0')) * self.quantity

    @property
    def sold_amount(self):
        """Sale proceeds; zero unless sold."""
        if self.status != ItemStatus.SOLD:
            return Decimal('0')
        return (self.sold_price or Decimal('0')) * (self.sold_quantity or self.quantity)
