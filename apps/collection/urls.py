from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'collection'

router = DefaultRouter()
router.register(r'items', views.CollectionItemViewSet, basename='item')

urlpatterns = [
    # Item ViewSet routes
    # GET    /api/collection/items/                      - List items (filters, limit/offset)
    # POST   /api/collection/items/                      - Create or update by id
    # GET    /api/collection/items/{id}/                 - Get item
    # PUT    /api/collection/items/{id}/                 - Update item
    # PATCH  /api/collection/items/{id}/                 - Partial update

    # Custom actions
    # POST   /api/collection/items/{id}/toggle_pin/      - Flip pinned flag
    # POST   /api/collection/items/{id}/toggle_reminder/ - Flip reminder flag
    # POST   /api/collection/items/{id}/image/           - Upload item image
    # GET    /api/collection/items/reminders/            - Items in transit / reserved
    # GET    /api/collection/items/ip_list/              - Items of one IP, pinned first
    # GET    /api/collection/items/summary/              - Cached summary projection
    # DELETE /api/collection/items/clear/                - Delete whole collection
    # GET    /api/collection/items/export/               - CSV download
    # GET    /api/collection/items/template/             - CSV import template
    # POST   /api/collection/items/import/               - CSV import

    # Option lists
    path('taxonomy/', views.taxonomy, name='taxonomy'),
    path('taxonomy/edit/', views.taxonomy_edit, name='taxonomy-edit'),

    path('', include(router.urls)),
]
