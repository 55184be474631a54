# Generated manually for the collection app

import decimal
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='CollectionItem',
            fields=[
                ('id', models.CharField(max_length=64, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('ip', models.CharField(blank=True, max_length=100)),
                ('character', models.CharField(blank=True, max_length=100)),
                ('category', models.CharField(choices=[('cd', 'CD'), ('badge', '吧唧'), ('plush', '毛绒'), ('figure', '立牌'), ('card', '纸片'), ('artbook', '画集'), ('other', '其他')], default='badge', max_length=20)),
                ('source_type', models.CharField(choices=[('western', '欧美'), ('kpop', 'KPOP'), ('anime', '动漫'), ('jpop', 'JPOP'), ('game', '游戏'), ('other', '其他')], default='anime', max_length=20)),
                ('price', models.DecimalField(decimal_places=2, default=decimal.Decimal('0.00'), max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0.00'))])),
                ('quantity', models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)])),
                ('payment_status', models.CharField(choices=[('full', '全款'), ('deposit', '定金')], default='full', max_length=20)),
                ('deposit_amount', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('final_payment_amount', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('status', models.CharField(choices=[('owned', '已入手'), ('transit', '在途'), ('reserved', '预定中'), ('wishlist', '愿望单'), ('sold', '卖出')], db_index=True, default='owned', max_length=20)),
                ('sold_price', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('sold_quantity', models.PositiveIntegerField(blank=True, null=True)),
                ('purchase_date', models.DateField(blank=True, default=django.utils.timezone.localdate, null=True)),
                ('notes', models.TextField(blank=True)),
                ('image_url', models.TextField(blank=True)),
                ('is_pinned', models.BooleanField(default=False)),
                ('is_reminder_enabled', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='collection_items', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'collection_items',
                'ordering': ['-is_pinned', '-purchase_date', '-created_at'],
                'indexes': [models.Index(fields=['user', '-is_pinned', '-purchase_date'], name='collection_user_pin_date_idx')],
            },
        ),
    ]
