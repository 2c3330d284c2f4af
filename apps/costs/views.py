from dataclasses import asdict

from django.db.models import Q
from django.utils import timezone
from rest_framework import viewsets, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from .exceptions import (
    CostNotFound,
    InvalidCost,
    InvalidPeriod,
    InvalidSchedule,
    InvalidStrategy,
)
from .models import CostDefinition, PricingProfile
from .permissions import IsCostOwner
from .serializers import (
    CostAnalysisQuerySerializer,
    CostAnalysisSerializer,
    CostDefinitionFilterSerializer,
    CostDefinitionInputSerializer,
    CostDefinitionSerializer,
    CostDeleteQuerySerializer,
    HourlyCostQuerySerializer,
    HourlyCostResponseSerializer,
    OperatingHoursInputSerializer,
    OperatingHoursSerializer,
    PricingProfileSerializer,
)
from .services import (
    create_cost,
    update_cost,
    delete_cost,
    get_cost_analysis,
    get_hourly_cost_for_owner,
    calculate_pricing_addons,
    get_operating_hours,
    save_operating_hours,
    # Exceptions
    CostNotFoundError,
    InvalidCostError,
    InvalidPeriodError,
    InvalidScheduleError,
    InvalidStrategyError,
)
from .services.operating_hours import SCHEDULE_FIELDS
from .services.periods import month_bounds


class CostPagination(PageNumberPagination):
    """Pagination for cost listings."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 500


class CostDefinitionViewSet(viewsets.ModelViewSet):
    """
    ViewSet for operational costs.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: The requesting owner's costs (filters: date_from, date_to, type, search)
    create: Create a cost, or a recurring series (returns every created row)
    retrieve: Get one cost
    update / partial_update: Edit one cost
    destroy: Delete one cost, or its whole series with ?delete_series=true
    """

    serializer_class = CostDefinitionSerializer
    permission_classes = [IsAuthenticated, IsCostOwner]
    pagination_class = CostPagination
    lookup_value_regex = '[0-9a-f-]{36}'

    def get_queryset(self):
        """Return only the requesting owner's costs, filtered by query params."""
        queryset = CostDefinition.objects.filter(owner=self.request.user)

        if self.action != 'list':
            return queryset

        filter_serializer = CostDefinitionFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if params.get('date_from'):
            queryset = queryset.filter(expense_date__gte=params['date_from'])
        if params.get('date_to'):
            queryset = queryset.filter(expense_date__lte=params['date_to'])
        if params.get('type'):
            queryset = queryset.filter(type=params['type'])
        if params.get('search'):
            queryset = queryset.filter(
                Q(description__icontains=params['search']) |
                Q(category__icontains=params['search'])
            )

        return queryset

    def get_serializer_class(self):
        if self.action in ['create', 'update', 'partial_update']:
            return CostDefinitionInputSerializer
        return CostDefinitionSerializer

    @extend_schema(
        request=CostDefinitionInputSerializer,
        responses={201: CostDefinitionSerializer(many=True)},
    )
    def create(self, request, *args, **kwargs):
        """Create a cost; recurring input materializes the whole series."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            costs = create_cost(owner=request.user, **serializer.validated_data)
        except InvalidCostError as e:
            raise InvalidCost(str(e))

        output_serializer = CostDefinitionSerializer(costs, many=True)
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(
        request=CostDefinitionInputSerializer,
        responses={200: CostDefinitionSerializer},
    )
    def update(self, request, *args, **kwargs):
        """Edit one cost. Registered payments keep their original values."""
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            cost = update_cost(
                cost_id=self.kwargs['pk'],
                owner=request.user,
                **serializer.validated_data
            )
        except CostNotFoundError as e:
            raise CostNotFound(str(e))
        except InvalidCostError as e:
            raise InvalidCost(str(e))

        return Response(CostDefinitionSerializer(cost).data)

    @extend_schema(
        parameters=[
            OpenApiParameter('delete_series', OpenApiTypes.BOOL, description='Delete every cost of the recurring series'),
        ],
        responses={204: None},
    )
    def destroy(self, request, *args, **kwargs):
        """Delete a cost or its series."""
        query_serializer = CostDeleteQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)

        try:
            delete_cost(
                cost_id=self.kwargs['pk'],
                owner=request.user,
                delete_series=query_serializer.validated_data['delete_series']
            )
        except CostNotFoundError as e:
            raise CostNotFound(str(e))

        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(
    methods=['GET'],
    responses={200: OperatingHoursSerializer},
    description="Get the weekly operating hours (empty schedule when none is saved).",
    tags=['costs'],
)
@extend_schema(
    methods=['PUT'],
    request=OperatingHoursInputSerializer,
    responses={200: OperatingHoursSerializer},
    description="Save the weekly operating hours.",
    tags=['costs'],
)
@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def operating_hours(request):
    """Read or save the owner's schedule - thin HTTP handler."""
    if request.method == 'GET':
        schedule = get_operating_hours(owner=request.user)
        if schedule is None:
            empty = {name: '' for name in SCHEDULE_FIELDS}
            return Response({'id': None, **empty, 'allows_overnight': False, 'updated_at': None})
        return Response(OperatingHoursSerializer(schedule).data)

    serializer = OperatingHoursInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = dict(serializer.validated_data)
    allows_overnight = data.pop('allows_overnight', None)

    try:
        schedule = save_operating_hours(
            owner=request.user,
            hours=data,
            allows_overnight=allows_overnight
        )
    except InvalidScheduleError as e:
        raise InvalidSchedule(str(e))

    return Response(OperatingHoursSerializer(schedule).data)


@extend_schema(
    methods=['GET'],
    responses={200: PricingProfileSerializer},
    tags=['costs'],
)
@extend_schema(
    methods=['PUT'],
    request=PricingProfileSerializer,
    responses={200: PricingProfileSerializer},
    tags=['costs'],
)
@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def pricing_profile(request):
    """Read or update the investment and working-capital goals."""
    profile, _created = PricingProfile.objects.get_or_create(owner=request.user)

    if request.method == 'GET':
        return Response(PricingProfileSerializer(profile).data)

    serializer = PricingProfileSerializer(profile, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    serializer.save()

    return Response(serializer.data)


@extend_schema(
    parameters=[
        OpenApiParameter('month', OpenApiTypes.INT, description='Month (1-12), default current'),
        OpenApiParameter('year', OpenApiTypes.INT, description='Year, default current'),
        OpenApiParameter('strategy', OpenApiTypes.STR, description="'weekly_average' or 'daily_average'"),
    ],
    responses={200: HourlyCostResponseSerializer},
    description="Minimum cost per productive hour for the month's costs and the weekly schedule.",
    tags=['costs'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def hourly_cost(request):
    """Get the hourly cost breakdown - thin HTTP handler."""
    query_serializer = HourlyCostQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    today = timezone.localdate()
    month = params.get('month', today.month)
    year = params.get('year', today.year)

    try:
        result = get_hourly_cost_for_owner(
            owner=request.user,
            month=month,
            year=year,
            strategy=params.get('strategy'),
            today=today
        )
    except InvalidStrategyError as e:
        raise InvalidStrategy(str(e))
    except InvalidPeriodError as e:
        raise InvalidPeriod(str(e))

    addons = calculate_pricing_addons(
        monthly_hours=result.monthly_hours,
        profile=PricingProfile.objects.filter(owner=request.user).first(),
        hourly_rate=result.hourly_rate
    )

    data = asdict(result)
    data.update({'month': month, 'year': year, 'addons': asdict(addons)})

    return Response(HourlyCostResponseSerializer(data).data)


@extend_schema(
    parameters=[
        OpenApiParameter('start_date', OpenApiTypes.DATE, description='Start date (YYYY-MM-DD), default first day of current month'),
        OpenApiParameter('end_date', OpenApiTypes.DATE, description='End date (YYYY-MM-DD), default last day of current month'),
        OpenApiParameter('search', OpenApiTypes.STR, description='Filter by description or category'),
    ],
    responses={200: CostAnalysisSerializer},
    description="Cost totals, category breakdown and six-month evolution.",
    tags=['costs'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def cost_analysis(request):
    """Get the cost analysis report - thin HTTP handler."""
    query_serializer = CostAnalysisQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    start_date = params.get('start_date')
    end_date = params.get('end_date')
    if start_date is None:
        today = timezone.localdate()
        start_date, end_date = month_bounds(today.month, today.year)

    try:
        data = get_cost_analysis(
            owner=request.user,
            start_date=start_date,
            end_date=end_date,
            search=params.get('search', '')
        )
    except InvalidPeriodError as e:
        raise InvalidPeriod(str(e))

    return Response(CostAnalysisSerializer(data).data)
