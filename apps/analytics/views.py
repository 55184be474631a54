from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from .statistics import StatisticsQueries
from .serializers import (
    # Input serializers
    DistributionQuerySerializer,
    # Response serializers
    FilterFacetsSerializer,
    StatsBundleSerializer,
    DistributionResponseSerializer,
    CollectionSummarySerializer,
    ErrorSerializer,
)
from .exceptions import AnalyticsServiceError


@extend_schema(
    responses={200: FilterFacetsSerializer},
    description="Get the distinct IPs and characters of the current user's collection.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def filters(request):
    """Distinct facet values for the filter menus - thin HTTP handler."""
    return Response(StatisticsQueries.filter_facets(request.user.id))


@extend_schema(
    responses={200: StatsBundleSerializer},
    description="Get spending overviews, category/IP distributions and chart records.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stats(request):
    """Statistics bundle for the current user - thin HTTP handler."""
    return Response(StatisticsQueries.stats_bundle(request.user.id))


@extend_schema(
    parameters=[
        OpenApiParameter('granularity', OpenApiTypes.STR, description="Time granularity: 'week', 'month', 'year'", default='month'),
        OpenApiParameter('period', OpenApiTypes.STR, description="Period label, e.g. '2025-07周', '2025-03月', '2025年'"),
        OpenApiParameter('rank_by', OpenApiTypes.STR, description="Ranking key: 'category', 'ip'", default='category'),
    ],
    responses={
        200: DistributionResponseSerializer,
        400: ErrorSerializer,
    },
    description="Get spending of one period split into buckets, with its summary and ranking.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def distribution(request):
    """Time-bucketed spending chart - thin HTTP handler."""
    query_serializer = DistributionQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        data = StatisticsQueries.distribution(
            request.user.id,
            granularity=params['granularity'],
            period=params.get('period') or None,
            rank_by=params['rank_by'],
        )
    except AnalyticsServiceError as e:
        return Response(
            {'error': str(e)},
            status=status.HTTP_400_BAD_REQUEST
        )

    return Response(data)


@extend_schema(
    responses={200: CollectionSummarySerializer},
    description="Get the profile counters: items, IPs, money spent and earned.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def summary(request):
    """Profile counters for the current user - thin HTTP handler."""
    return Response(StatisticsQueries.collection_summary(request.user.id))
