"""
Storeroom API views.

Every view delegates to the storeroom services with request.user as the
actor. Storeroom errors become JSON bodies ({"code", "kind", "message",
"data"}) with an HTTP status derived from the error:

    validation          400
    UNAUTHORIZED        403
    REQUISITION_NOT_FOUND 404
    other business      409 (INSUFFICIENT_STOCK, INVALID_STATE, ...)
    contention          503 (retry)

Request bodies and query parameters that fail type checks (a quantity of
"lots", a missing item_id) are rejected by the serializers first. Those
400 responses use DRF's field error format instead, e.g.
{"quantity": ["A valid integer is required."]}. A client can tell the two
shapes apart by the presence of "code".
"""

import functools

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import BasePermission, IsAuthenticated
from rest_framework.response import Response

from storeroom.exceptions import CONTENTION, VALIDATION, BaseError, RequisitionError
from storeroom.service import Requisitions, Stock

from storeroom.api.serializers import (
    AdjustSerializer,
    ApproveSerializer,
    LocationValueSerializer,
    LowStockSerializer,
    RejectSerializer,
    RequisitionCreateSerializer,
    RequisitionEventSerializer,
    RequisitionSerializer,
    RequisitionUpdateSerializer,
    StockMovementSerializer,
    StockRecordSerializer,
    TransferSerializer,
)


def http_status_for(exc: BaseError) -> int:
    if exc.code == 'UNAUTHORIZED':
        return status.HTTP_403_FORBIDDEN
    if exc.code == 'REQUISITION_NOT_FOUND':
        return status.HTTP_404_NOT_FOUND
    if exc.kind == VALIDATION:
        return status.HTTP_400_BAD_REQUEST
    if exc.kind == CONTENTION:
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_409_CONFLICT


def storeroom_errors(view):
    """Turn storeroom errors raised by the view into error responses."""

    @functools.wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except BaseError as exc:
            return Response(exc.as_dict(), status=http_status_for(exc))

    return wrapper


class CanAdjustStock(BasePermission):
    def has_permission(self, request, view):
        return request.user.has_perm('storeroom.adjust_stock')


class CanTransferStock(BasePermission):
    def has_permission(self, request, view):
        return request.user.has_perm('storeroom.transfer_stock')


def _int_param(request, name):
    value = request.query_params.get(name)
    if value in (None, ''):
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError({name: 'A valid integer is required.'}) from None


def _flag_param(request, name) -> bool:
    return request.query_params.get(name, '').lower() in ('1', 'true', 'yes')


def _validated(serializer_class, data) -> dict:
    serializer = serializer_class(data=data)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


def _lines(validated) -> list[dict] | None:
    if 'items' not in validated:
        return None
    return [dict(line) for line in validated['items']]


# =========================================================================
# STOCK
# =========================================================================

@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stock_list(request):
    """Stock records, filtered by ?item_id=&location_id=&include_empty=1"""
    records = Stock.list_records(
        item_id=_int_param(request, 'item_id'),
        location=_int_param(request, 'location_id'),
        include_empty=_flag_param(request, 'include_empty'),
    )
    return Response(StockRecordSerializer(records, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stock_item_total(request, item_id):
    return Response({'item_id': item_id, 'quantity': Stock.quantity(item_id)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stock_low(request):
    return Response(LowStockSerializer(Stock.low_stock(), many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stock_movements(request):
    """Movement history, filtered by ?item_id=&location_id=&reference="""
    movements = Stock.movements(
        item_id=_int_param(request, 'item_id'),
        location=_int_param(request, 'location_id'),
        reference=request.query_params.get('reference', ''),
    )
    return Response(StockMovementSerializer(movements, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def location_list(request):
    """Active locations with their stock value."""
    return Response(LocationValueSerializer(Stock.value_by_location(), many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, CanAdjustStock])
@storeroom_errors
def stock_adjust(request):
    data = _validated(AdjustSerializer, request.data)
    record = Stock.adjust(
        data['item_id'],
        data['location_id'],
        data['quantity'],
        data['adjustment_type'],
        unit_cost=data.get('unit_cost'),
        reason=data['reason'],
        user=request.user,
    )
    return Response(StockRecordSerializer(record).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, CanTransferStock])
@storeroom_errors
def stock_transfer(request):
    data = _validated(TransferSerializer, request.data)
    source, destination = Stock.transfer(
        data['item_id'],
        data['from_location_id'],
        data['to_location_id'],
        data['quantity'],
        reason=data['reason'],
        user=request.user,
    )
    return Response({
        'source': StockRecordSerializer(source).data,
        'destination': StockRecordSerializer(destination).data,
    })


# =========================================================================
# REQUISITIONS
# =========================================================================

def _create_requisition(request):
    data = _validated(RequisitionCreateSerializer, request.data)

    requested_for = None
    requested_for_id = data.get('requested_for_id')
    if requested_for_id is not None:
        requested_for = get_user_model().objects.filter(pk=requested_for_id).first()
        if requested_for is None:
            raise RequisitionError('INVALID_REQUISITION', field='requested_for', value=requested_for_id)

    requisition = Requisitions.create(
        request.user,
        data['department_id'],
        data['purpose'],
        _lines(data) or [],
        requested_for_type=data['requested_for_type'],
        requested_for=requested_for,
        urgency=data['urgency'],
        comments=data['comments'],
    )
    return Response(RequisitionSerializer(requisition).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@storeroom_errors
def requisition_list(request):
    """
    GET: ?status=&department_id=&mine=1&awaiting=1
    POST: create a draft
    """
    if request.method == 'POST':
        return _create_requisition(request)

    if _flag_param(request, 'awaiting'):
        requisitions = Requisitions.awaiting_approval(request.user)
    else:
        requisitions = Requisitions.list_requisitions(
            status=request.query_params.get('status') or None,
            department_id=_int_param(request, 'department_id'),
            requested_by=request.user if _flag_param(request, 'mine') else None,
        ).prefetch_related('items')
    return Response(RequisitionSerializer(requisitions, many=True).data)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
@storeroom_errors
def requisition_detail(request, requisition_no):
    if request.method == 'PATCH':
        data = _validated(RequisitionUpdateSerializer, request.data)
        Requisitions.update_draft(
            requisition_no,
            request.user,
            purpose=data.get('purpose'),
            urgency=data.get('urgency'),
            comments=data.get('comments'),
            items=_lines(data),
        )
    return Response(RequisitionSerializer(Requisitions.get(requisition_no)).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@storeroom_errors
def requisition_history(request, requisition_no):
    Requisitions.get(requisition_no)
    events = Requisitions.history(requisition_no)
    return Response(RequisitionEventSerializer(events, many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@storeroom_errors
def requisition_submit(request, requisition_no):
    Requisitions.submit(requisition_no, request.user)
    return Response(RequisitionSerializer(Requisitions.get(requisition_no)).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@storeroom_errors
def requisition_approve(request, requisition_no):
    data = _validated(ApproveSerializer, request.data)
    Requisitions.approve(requisition_no, request.user, comment=data['comment'])
    return Response(RequisitionSerializer(Requisitions.get(requisition_no)).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@storeroom_errors
def requisition_reject(request, requisition_no):
    data = _validated(RejectSerializer, request.data)
    Requisitions.reject(requisition_no, request.user, reason=data['reason'])
    return Response(RequisitionSerializer(Requisitions.get(requisition_no)).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@storeroom_errors
def requisition_cancel(request, requisition_no):
    Requisitions.cancel(requisition_no, request.user)
    return Response(RequisitionSerializer(Requisitions.get(requisition_no)).data)
