from django.conf import settings
from django.http import HttpResponse
from django.utils.http import content_disposition_header
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.pagination import LimitOffsetPagination
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, OpenApiParameter
from .models import CollectionItem
from .permissions import IsItemOwner
from .serializers import (
    CollectionItemSerializer,
    ItemSummarySerializer,
    ImageUploadSerializer,
    ItemFilterSerializer,
    IpListQuerySerializer,
    ItemImportSerializer,
    TaxonomyEditSerializer,
    TaxonomySerializer,
)
from .services import (
    get_item,
    list_items,
    save_item,
    toggle_pin,
    toggle_reminder,
    update_item_image,
    clear_collection,
    import_items,
    export_items,
    template_csv,
    export_filename,
    TEMPLATE_FILENAME,
    filter_items,
    ip_list_view,
    reminder_items,
    get_summary,
    sync_summary,
    default_taxonomies,
    edit_taxonomy,
    ItemNotFoundError,
    ItemOwnershipError,
    InvalidItemError,
    EmptyImportError,
    EmptyExportError,
    InvalidImageError,
)


class CollectionPagination(LimitOffsetPagination):
    """Offset/limit pages; ``has_more`` is true while pages come back full."""
    default_limit = settings.COLLECTION_PAGE_SIZE
    max_limit = 100

    def get_paginated_response(self, data):
        response = super().get_paginated_response(data)
        response.data['has_more'] = len(data) == self.limit
        return response

    def get_paginated_response_schema(self, schema):
        paginated = super().get_paginated_response_schema(schema)
        paginated['properties']['has_more'] = {'type': 'boolean'}
        return paginated


def csv_response(text, filename):
    response = HttpResponse(text, content_type='text/csv; charset=utf-8')
    response['Content-Disposition'] = content_disposition_header(True, filename)
    return response


class CollectionItemViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet
):
    """
    ViewSet for the current user's collection.

    list: Filtered, paginated items (pinned first, newest purchase first)
    create: Create or update an item by id
    retrieve: Get one item
    update: Update an item
    partial_update: Partially update an item

    Items are never deleted one by one; see the ``clear`` action.
    """

    serializer_class = CollectionItemSerializer
    permission_classes = [IsAuthenticated, IsItemOwner]
    pagination_class = CollectionPagination

    def get_queryset(self):
        return CollectionItem.objects.filter(user=self.request.user)

    @extend_schema(
        parameters=[
            OpenApiParameter('status', str, description="'all' or one status"),
            OpenApiParameter('q', str, description="Text matched against name, IP and character"),
            OpenApiParameter('source_type', str, many=True),
            OpenApiParameter('ip', str, many=True),
            OpenApiParameter('character', str, many=True),
            OpenApiParameter('category', str, many=True),
        ],
    )
    def list(self, request, *args, **kwargs):
        """
        List items matching the filters.

        Unfiltered fetches also maintain the cached summary projection:
        the first page replaces it, later pages extend it.
        """
        filters = ItemFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        params = filters.validated_data

        facets = {
            field: params[field]
            for field in ('source_type', 'ip', 'character', 'category')
        }
        is_filtered = params['status'] != 'all' or params['q'].strip() or any(facets.values())

        items = filter_items(
            list_items(user=request.user),
            status=params['status'],
            query=params['q'],
            facets=facets,
        )

        page = self.paginate_queryset(items)

        if not is_filtered:
            sync_summary(request.user, page, offset=self.paginator.offset)

        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def create(self, request, *args, **kwargs):
        """Create an item, or update it when the id already exists."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            item, created = save_item(user=request.user, **serializer.validated_data)
        except (ItemOwnershipError, InvalidItemError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            CollectionItemSerializer(item).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )

    def update(self, request, *args, **kwargs):
        """Update an item in place."""
        partial = kwargs.pop('partial', False)

        try:
            instance = get_item(user=request.user, item_id=kwargs.get('pk'))
        except ItemNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        data.pop('id', None)

        try:
            item, _ = save_item(user=request.user, id=instance.id, **data)
        except InvalidItemError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(CollectionItemSerializer(item).data)

    @extend_schema(request=None, responses={200: CollectionItemSerializer})
    @action(detail=True, methods=['post'])
    def toggle_pin(self, request, pk=None):
        """Flip the pinned flag."""
        try:
            item = toggle_pin(user=request.user, item_id=pk)
        except ItemNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(CollectionItemSerializer(item).data)

    @extend_schema(request=None, responses={200: CollectionItemSerializer})
    @action(detail=True, methods=['post'])
    def toggle_reminder(self, request, pk=None):
        """Flip the arrival reminder flag."""
        try:
            item = toggle_reminder(user=request.user, item_id=pk)
        except ItemNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(CollectionItemSerializer(item).data)

    @extend_schema(
        request={'multipart/form-data': ImageUploadSerializer},
        responses={200: CollectionItemSerializer},
    )
    @action(detail=True, methods=['post'], parser_classes=[MultiPartParser, FormParser])
    def image(self, request, pk=None):
        """Replace the item image with an uploaded file."""
        serializer = ImageUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            item = update_item_image(
                user=request.user,
                item_id=pk,
                uploaded_file=serializer.validated_data['image']
            )
        except ItemNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidImageError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(CollectionItemSerializer(item).data)

    @extend_schema(responses={200: CollectionItemSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def reminders(self, request):
        """Items in transit or reserved, oldest purchase first."""
        items = reminder_items(list_items(user=request.user))
        return Response(CollectionItemSerializer(items, many=True).data)

    @extend_schema(
        parameters=[IpListQuerySerializer],
        responses={200: CollectionItemSerializer(many=True)},
    )
    @action(detail=False, methods=['get'])
    def ip_list(self, request):
        """Items of one IP, pinned first."""
        query = IpListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        items = ip_list_view(list_items(user=request.user), **query.validated_data)
        return Response(CollectionItemSerializer(items, many=True).data)

    @extend_schema(responses={200: ItemSummarySerializer(many=True)})
    @action(detail=False, methods=['get'])
    def summary(self, request):
        """Cached summary projection of the fetched items."""
        return Response(get_summary(request.user))

    @extend_schema(request=None, responses={200: None})
    @action(detail=False, methods=['delete'])
    def clear(self, request):
        """Delete the whole collection."""
        deleted = clear_collection(user=request.user)
        return Response({'deleted': deleted})

    @extend_schema(responses={(200, 'text/csv'): OpenApiTypes.STR})
    @action(detail=False, methods=['get'])
    def export(self, request):
        """Download the collection as CSV."""
        try:
            text = export_items(user=request.user)
        except EmptyExportError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return csv_response(text, export_filename())

    @extend_schema(responses={(200, 'text/csv'): OpenApiTypes.STR})
    @action(detail=False, methods=['get'])
    def template(self, request):
        """Download an empty import template."""
        return csv_response(template_csv(), TEMPLATE_FILENAME)

    @extend_schema(
        request={
            'multipart/form-data': ItemImportSerializer,
            'application/json': ItemImportSerializer,
        },
        responses={201: None},
    )
    @action(
        detail=False,
        methods=['post'],
        url_path='import',
        url_name='import',
        parser_classes=[MultiPartParser, FormParser, JSONParser]
    )
    def import_csv(self, request):
        """Import items from a CSV file or its text."""
        serializer = ItemImportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        upload = serializer.validated_data.get('file')
        if upload is not None:
            try:
                text = upload.read().decode('utf-8')
            except UnicodeDecodeError:
                return Response(
                    {'error': "File must be UTF-8 encoded"},
                    status=status.HTTP_400_BAD_REQUEST
                )
        else:
            text = serializer.validated_data['text']

        try:
            items = import_items(user=request.user, text=text)
        except EmptyImportError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'imported': len(items),
            'ids': [item.id for item in items],
        }, status=status.HTTP_201_CREATED)


# =============================================================================
# TAXONOMY
# =============================================================================

@extend_schema(
    responses={200: TaxonomySerializer},
    description="Default option lists for item forms and filters.",
    tags=['collection'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def taxonomy(request):
    """Default option lists."""
    return Response(default_taxonomies())


@extend_schema(
    request=TaxonomyEditSerializer,
    responses={200: None},
    description="Apply one edit (add, remove, move up/down) to a client-held option list.",
    tags=['collection'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def taxonomy_edit(request):
    """Edit an option list and return the result."""
    serializer = TaxonomyEditSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    labels = edit_taxonomy(
        serializer.validated_data['labels'],
        operation=serializer.validated_data['operation'],
        label=serializer.validated_data['label'],
    )

    return Response({'labels': labels})
