from django.utils import timezone
from rest_framework import viewsets, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from .exceptions import (
    CostDefinitionNotFound,
    InvalidPaymentAmount,
    InvalidPaymentTarget,
    PaymentNotFound,
)
from .models import PaymentRecord
from .permissions import IsPaymentOwner
from .serializers import (
    DueAlertSerializer,
    PayablesQuerySerializer,
    PayablesResponseSerializer,
    PaymentFilterSerializer,
    PaymentRecordSerializer,
    RegisterPaymentSerializer,
)
from .services import (
    get_due_alerts,
    get_payables_for_month,
    register_payment,
    summarize_payable_items,
    # Exceptions
    CostDefinitionNotFoundError,
    InvalidPaymentAmountError,
    InvalidPaymentTargetError,
    PaymentNotFoundError,
)


class PaymentPagination(PageNumberPagination):
    """Pagination for payment history."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 500


@extend_schema(
    parameters=[
        OpenApiParameter('month', OpenApiTypes.INT, description='Month (1-12), default current'),
        OpenApiParameter('year', OpenApiTypes.INT, description='Year, default current'),
        OpenApiParameter('search', OpenApiTypes.STR, description='Filter by description'),
        OpenApiParameter('status', OpenApiTypes.STR, description="'all', 'paid', 'partially_paid', 'pending', 'overdue' or 'cancelled'"),
    ],
    responses={200: PayablesResponseSerializer},
    description="Costs and payments of a month merged into one list of obligations.",
    tags=['payables'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def payables_list(request):
    """Get the reconciled payables of a month - thin HTTP handler."""
    query_serializer = PayablesQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    today = timezone.localdate()
    month = params.get('month', today.month)
    year = params.get('year', today.year)

    items = get_payables_for_month(
        owner=request.user,
        month=month,
        year=year,
        today=today,
        search=params.get('search', ''),
        status=params['status']
    )

    data = {
        'month': month,
        'year': year,
        'items': items,
        'summary': summarize_payable_items(items),
    }
    return Response(PayablesResponseSerializer(data).data)


@extend_schema(
    request=RegisterPaymentSerializer,
    responses={200: PaymentRecordSerializer, 201: PaymentRecordSerializer},
    description="Register a full or partial payment for an obligation.",
    tags=['payables'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def register_payment_view(request):
    """Register a payment - thin HTTP handler."""
    serializer = RegisterPaymentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        payment = register_payment(
            owner=request.user,
            amount_paid=data['amount_paid'],
            payment_id=data.get('payment_id'),
            cost_definition_id=data.get('cost_definition_id'),
            due_date=data.get('due_date')
        )
    except InvalidPaymentAmountError as e:
        raise InvalidPaymentAmount(str(e))
    except InvalidPaymentTargetError as e:
        raise InvalidPaymentTarget(str(e))
    except PaymentNotFoundError as e:
        raise PaymentNotFound(str(e))
    except CostDefinitionNotFoundError as e:
        raise CostDefinitionNotFound(str(e))

    response_status = status.HTTP_200_OK if data.get('payment_id') else status.HTTP_201_CREATED
    return Response(PaymentRecordSerializer(payment).data, status=response_status)


@extend_schema(
    responses={200: DueAlertSerializer(many=True)},
    description="Obligations of the current month due today or already overdue.",
    tags=['payables'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def due_alerts(request):
    """Get due-today and overdue alerts - thin HTTP handler."""
    alerts = get_due_alerts(owner=request.user, today=timezone.localdate())
    return Response(DueAlertSerializer(alerts, many=True).data)


class PaymentRecordViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Stored payment history.

    list: The requesting owner's payments (filters: date_from, date_to, status)
    retrieve: Get one payment
    """

    serializer_class = PaymentRecordSerializer
    permission_classes = [IsAuthenticated, IsPaymentOwner]
    pagination_class = PaymentPagination
    lookup_value_regex = '[0-9a-f-]{36}'

    def get_queryset(self):
        """Return only the requesting owner's payments, filtered by query params."""
        queryset = PaymentRecord.objects.filter(owner=self.request.user)

        if self.action != 'list':
            return queryset

        filter_serializer = PaymentFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if params.get('date_from'):
            queryset = queryset.filter(due_date__gte=params['date_from'])
        if params.get('date_to'):
            queryset = queryset.filter(due_date__lte=params['date_to'])
        if params.get('status'):
            queryset = queryset.filter(status=params['status'])

        return queryset
