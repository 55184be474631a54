import pytest
from datetime import date
from decimal import Decimal
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from rest_framework import status
from apps.collection.models import CollectionItem
from apps.collection.services import get_summary, refresh_summary
from apps.collection.services.csv_codec import BOM, CSV_HEADERS


HEADER_LINE = ','.join(CSV_HEADERS)


# =============================================================================
# List
# =============================================================================

@pytest.mark.django_db
class TestItemList:
    """Tests for GET /api/collection/items/"""

    def test_requires_authentication(self, api_client):
        url = reverse('collection:item-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_only_own_items(self, authenticated_client, badge, other_item):
        url = reverse('collection:item-list')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert [item['id'] for item in response.data['results']] == [badge.id]

    def test_plain_http_is_not_redirected(self, authenticated_client, settings, badge):
        url = reverse('collection:item-list')
        response = authenticated_client.get(url, secure=False)

        assert settings.SECURE_SSL_REDIRECT is False
        assert response.status_code == status.HTTP_200_OK

    def test_pinned_first_then_newest(self, authenticated_client, make_item):
        old = make_item(name='old', purchase_date=date(2022, 1, 1))
        new = make_item(name='new', purchase_date=date(2024, 1, 1))
        pinned = make_item(name='pinned', purchase_date=date(2020, 1, 1), is_pinned=True)

        url = reverse('collection:item-list')
        response = authenticated_client.get(url)

        assert [item['id'] for item in response.data['results']] == [pinned.id, new.id, old.id]

    def test_default_page_size_and_has_more(self, authenticated_client, make_item):
        for i in range(25):
            make_item(purchase_date=date(2024, 1, 1 + i))

        url = reverse('collection:item-list')
        response = authenticated_client.get(url)

        assert len(response.data['results']) == 21
        assert response.data['count'] == 25
        assert response.data['has_more'] is True

        response = authenticated_client.get(url, {'offset': 21})

        assert len(response.data['results']) == 4
        assert response.data['has_more'] is False

    def test_filters(self, authenticated_client, badge, plush):
        url = reverse('collection:item-list')

        response = authenticated_client.get(url, {'status': 'transit'})
        assert [item['id'] for item in response.data['results']] == [plush.id]

        response = authenticated_client.get(url, {'q': 'klee'})
        assert [item['id'] for item in response.data['results']] == [badge.id]

        response = authenticated_client.get(url, {'category': ['plush', 'figure']})
        assert [item['id'] for item in response.data['results']] == [plush.id]

        response = authenticated_client.get(url, {'ip': 'Genshin', 'source_type': 'kpop'})
        assert response.data['results'] == []

    def test_invalid_status_filter(self, authenticated_client):
        url = reverse('collection:item-list')
        response = authenticated_client.get(url, {'status': 'lost'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_first_page_refreshes_summary(self, authenticated_client, user, badge, plush):
        url = reverse('collection:item-list')
        authenticated_client.get(url, {'limit': 1})

        assert [entry['id'] for entry in get_summary(user)] == [badge.id]

        authenticated_client.get(url, {'limit': 1, 'offset': 1})

        assert [entry['id'] for entry in get_summary(user)] == [badge.id, plush.id]

    def test_filtered_fetch_leaves_summary_alone(self, authenticated_client, user, badge, plush):
        refresh_summary(user, [badge, plush])

        url = reverse('collection:item-list')
        authenticated_client.get(url, {'status': 'sold'})

        assert len(get_summary(user)) == 2

    def test_empty_first_page_clears_summary(self, authenticated_client, user, badge):
        refresh_summary(user, [badge])
        CollectionItem.objects.all().delete()

        url = reverse('collection:item-list')
        authenticated_client.get(url)

        assert get_summary(user) == []


# =============================================================================
# Create / Update
# =============================================================================

@pytest.mark.django_db
class TestItemSave:
    """Tests for POST/PUT/PATCH /api/collection/items/"""

    def test_create(self, authenticated_client, user):
        url = reverse('collection:item-list')
        data = {
            'name': 'Klee acrylic stand',
            'ip': 'Genshin',
            'character': 'Klee',
            'category': 'figure',
            'source_type': 'game',
            'price': '45.00',
            'quantity': 2,
        }
        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['category_display'] == '立牌'
        item = CollectionItem.objects.get(id=response.data['id'])
        assert item.user == user
        assert item.price == Decimal('45.00')

    def test_post_existing_id_updates(self, authenticated_client, badge):
        url = reverse('collection:item-list')
        data = {'id': badge.id, 'name': 'Renamed badge', 'status': 'wishlist'}
        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        badge.refresh_from_db()
        assert badge.name == 'Renamed badge'
        assert badge.status == 'wishlist'

    def test_post_foreign_id_rejected(self, authenticated_client, other_item):
        url = reverse('collection:item-list')
        data = {'id': other_item.id, 'name': 'Mine now'}
        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_create_requires_name(self, authenticated_client):
        url = reverse('collection:item-list')
        response = authenticated_client.post(url, {'name': '  '}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_deposit_pricing_on_save(self, authenticated_client):
        url = reverse('collection:item-list')
        data = {
            'name': 'Preorder figure',
            'payment_status': 'deposit',
            'deposit_amount': '100.00',
            'final_payment_amount': '299.00',
            'price': '1.00',
            'status': 'reserved',
        }
        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['price'] == '399.00'

    def test_patch_marks_sold_and_clamps_quantity(self, authenticated_client, badge):
        url = reverse('collection:item-detail', kwargs={'pk': badge.id})
        data = {'status': 'sold', 'sold_price': '30.00', 'sold_quantity': 4}
        response = authenticated_client.patch(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['sold_quantity'] == 1
        assert response.data['status_display'] == '卖出'

    def test_patch_unsold_clears_sale_fields(self, authenticated_client, make_item):
        item = make_item(status='sold', sold_price=Decimal('8'), sold_quantity=1)

        url = reverse('collection:item-detail', kwargs={'pk': item.id})
        response = authenticated_client.patch(url, {'status': 'owned'}, format='json')

        assert response.data['sold_price'] is None
        assert response.data['sold_quantity'] is None

    def test_update_other_users_item(self, authenticated_client, other_item):
        url = reverse('collection:item-detail', kwargs={'pk': other_item.id})
        response = authenticated_client.patch(url, {'name': 'x'}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_retrieve_other_users_item(self, authenticated_client, other_item):
        url = reverse('collection:item-detail', kwargs={'pk': other_item.id})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_single_delete_not_allowed(self, authenticated_client, badge):
        url = reverse('collection:item-detail', kwargs={'pk': badge.id})
        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert CollectionItem.objects.filter(id=badge.id).exists()


# =============================================================================
# Actions
# =============================================================================

@pytest.mark.django_db
class TestItemActions:

    def test_toggle_pin(self, authenticated_client, badge):
        url = reverse('collection:item-toggle-pin', kwargs={'pk': badge.id})
        response = authenticated_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['is_pinned'] is True

    def test_toggle_reminder(self, authenticated_client, plush):
        url = reverse('collection:item-toggle-reminder', kwargs={'pk': plush.id})
        response = authenticated_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['is_reminder_enabled'] is True

    def test_toggle_missing_item(self, authenticated_client):
        url = reverse('collection:item-toggle-pin', kwargs={'pk': 'missing'})
        response = authenticated_client.post(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_upload_image(self, authenticated_client, badge):
        url = reverse('collection:item-image', kwargs={'pk': badge.id})
        upload = SimpleUploadedFile('pic.jpg', b'\xff\xd8\xff fake', content_type='image/jpeg')
        response = authenticated_client.post(url, {'image': upload}, format='multipart')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['image_url'].startswith('data:image/jpeg;base64,')

    def test_reminders(self, authenticated_client, make_item):
        late = make_item(status='reserved', purchase_date=date(2024, 9, 1))
        early = make_item(status='transit', purchase_date=date(2024, 2, 1))
        make_item(status='owned')

        url = reverse('collection:item-reminders')
        response = authenticated_client.get(url)

        assert [item['id'] for item in response.data] == [early.id, late.id]

    def test_ip_list(self, authenticated_client, make_item):
        first = make_item(ip='Genshin', purchase_date=date(2024, 6, 1))
        pinned = make_item(ip='Genshin', purchase_date=date(2023, 6, 1), is_pinned=True)
        make_item(ip='Blue Archive')

        url = reverse('collection:item-ip-list')
        response = authenticated_client.get(url, {'ip': 'Genshin'})

        assert [item['id'] for item in response.data] == [pinned.id, first.id]

    def test_summary(self, authenticated_client, user, badge):
        refresh_summary(user, [badge])

        url = reverse('collection:item-summary')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]['id'] == badge.id
        assert 'price' not in response.data[0]

    def test_clear(self, authenticated_client, user, badge, plush, other_item):
        url = reverse('collection:item-clear')
        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['deleted'] == 2
        assert CollectionItem.objects.count() == 1


# =============================================================================
# CSV
# =============================================================================

@pytest.mark.django_db
class TestCsvEndpoints:

    def test_export(self, authenticated_client, badge):
        url = reverse('collection:item-export')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'].startswith('text/csv')
        assert 'gumi_collection_' in response['Content-Disposition']
        text = response.content.decode('utf-8')
        assert text.startswith(BOM)
        assert '"Klee badge"' in text

    def test_export_empty(self, authenticated_client):
        url = reverse('collection:item-export')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == '当前没有可导出的数据'

    def test_template(self, authenticated_client):
        url = reverse('collection:item-template')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        text = response.content.decode('utf-8')
        assert text.startswith(BOM)
        assert len(text.split('\n')) == 1

    def test_import_text(self, authenticated_client, user):
        url = reverse('collection:item-import')
        text = HEADER_LINE + '\n"Badge A","动漫","Genshin","Klee","吧唧","12","1"\n"Badge B"'
        response = authenticated_client.post(url, {'text': text}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['imported'] == 2
        assert CollectionItem.objects.filter(user=user).count() == 2

    def test_import_file(self, authenticated_client, user):
        url = reverse('collection:item-import')
        content = (BOM + HEADER_LINE + '\n"Badge A","KPOP"').encode('utf-8')
        upload = SimpleUploadedFile('items.csv', content, content_type='text/csv')
        response = authenticated_client.post(url, {'file': upload}, format='multipart')

        assert response.status_code == status.HTTP_201_CREATED
        assert CollectionItem.objects.get(user=user).source_type == 'kpop'

    def test_import_oversized_quantity(self, authenticated_client, user):
        url = reverse('collection:item-import')
        text = HEADER_LINE + '\n"Big","","","","","1","99999999999999999999"'
        response = authenticated_client.post(url, {'text': text}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert CollectionItem.objects.get(user=user).quantity == 1

    def test_import_empty_file(self, authenticated_client):
        url = reverse('collection:item-import')
        response = authenticated_client.post(url, {'text': HEADER_LINE}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert '未能识别有效的数据内容' in response.data['error']

    def test_import_requires_input(self, authenticated_client):
        url = reverse('collection:item-import')
        response = authenticated_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Taxonomy
# =============================================================================

@pytest.mark.django_db
class TestTaxonomy:

    def test_defaults(self, authenticated_client):
        url = reverse('collection:taxonomy')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert '吧唧' in response.data['category']
        assert response.data['payment_status'] == ['全款', '定金']

    def test_edit(self, authenticated_client):
        url = reverse('collection:taxonomy-edit')
        data = {'labels': ['CD', '吧唧'], 'operation': 'add', 'label': ' 色纸 '}
        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['labels'] == ['CD', '吧唧', '色纸']

    def test_edit_unknown_operation(self, authenticated_client):
        url = reverse('collection:taxonomy-edit')
        data = {'labels': [], 'operation': 'rename', 'label': 'x'}
        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
