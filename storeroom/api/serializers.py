from rest_framework import serializers

from storeroom.models import (
    Location,
    Requisition,
    RequisitionEvent,
    RequisitionItem,
    StockMovement,
    StockRecord,
)


class LocationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Location
        fields = ['id', 'code', 'name', 'kind', 'department_id', 'is_default', 'is_active']


class LocationValueSerializer(LocationSerializer):
    record_count = serializers.IntegerField(read_only=True)
    stock_value = serializers.DecimalField(max_digits=16, decimal_places=2, read_only=True)

    class Meta(LocationSerializer.Meta):
        fields = LocationSerializer.Meta.fields + ['record_count', 'stock_value']


class StockRecordSerializer(serializers.ModelSerializer):
    location_code = serializers.CharField(source='location.code', read_only=True)

    class Meta:
        model = StockRecord
        fields = ['id', 'item_id', 'location', 'location_code', 'quantity',
                  'unit_cost', 'total_value', 'updated_at']


class StockMovementSerializer(serializers.ModelSerializer):
    location_code = serializers.CharField(source='location.code', read_only=True)

    class Meta:
        model = StockMovement
        fields = ['id', 'item_id', 'location', 'location_code', 'kind', 'delta',
                  'resulting_quantity', 'unit_cost', 'reason', 'reference', 'timestamp', 'user']


class LowStockSerializer(serializers.Serializer):
    item_id = serializers.IntegerField(source='item.item_id')
    code = serializers.CharField(source='item.code')
    name = serializers.CharField(source='item.name')
    uom = serializers.CharField(source='item.uom')
    reorder_level = serializers.IntegerField(source='item.reorder_level')
    total_quantity = serializers.IntegerField()
    shortfall = serializers.IntegerField()


# Input serializers only check types; business rules (signs, allowed
# values) are enforced by the services so the error codes stay the same
# for every caller.

class AdjustSerializer(serializers.Serializer):
    item_id = serializers.IntegerField()
    location_id = serializers.IntegerField()
    quantity = serializers.IntegerField()
    adjustment_type = serializers.CharField()
    unit_cost = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255, default='')


class TransferSerializer(serializers.Serializer):
    item_id = serializers.IntegerField()
    from_location_id = serializers.IntegerField()
    to_location_id = serializers.IntegerField()
    quantity = serializers.IntegerField()
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255, default='')


class RequisitionLineInputSerializer(serializers.Serializer):
    item_id = serializers.IntegerField()
    quantity = serializers.IntegerField()
    estimated_unit_cost = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    source_location_id = serializers.IntegerField(required=False, allow_null=True)


class RequisitionCreateSerializer(serializers.Serializer):
    department_id = serializers.IntegerField()
    requested_for_type = serializers.CharField(required=False, default='department')
    requested_for_id = serializers.IntegerField(required=False, allow_null=True)
    purpose = serializers.CharField(allow_blank=True)
    urgency = serializers.CharField(required=False, default='normal')
    comments = serializers.CharField(required=False, allow_blank=True, default='')
    items = RequisitionLineInputSerializer(many=True, required=False)


class RequisitionUpdateSerializer(serializers.Serializer):
    purpose = serializers.CharField(required=False, allow_blank=True)
    urgency = serializers.CharField(required=False)
    comments = serializers.CharField(required=False, allow_blank=True)
    items = RequisitionLineInputSerializer(many=True, required=False)


class ApproveSerializer(serializers.Serializer):
    comment = serializers.CharField(required=False, allow_blank=True, default='')


class RejectSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class RequisitionItemSerializer(serializers.ModelSerializer):
    estimated_total = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = RequisitionItem
        fields = ['line_no', 'item_id', 'quantity', 'estimated_unit_cost',
                  'estimated_total', 'source_location']


class RequisitionSerializer(serializers.ModelSerializer):
    requested_by_username = serializers.CharField(source='requested_by.get_username', read_only=True)
    items = RequisitionItemSerializer(many=True, read_only=True)
    total_estimated_cost = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Requisition
        fields = [
            'requisition_no', 'department_id', 'requested_by', 'requested_by_username',
            'requested_for_type', 'requested_for', 'purpose', 'urgency', 'comments',
            'status', 'approved_by_l1', 'approved_by_l1_at', 'approved_by_l2',
            'approved_by_l2_at', 'rejected_by', 'rejected_at', 'rejection_reason',
            'submitted_at', 'fulfilled_at', 'cancelled_at', 'created_at', 'updated_at',
            'items', 'total_estimated_cost',
        ]


class RequisitionEventSerializer(serializers.ModelSerializer):
    class Meta:
        model = RequisitionEvent
        fields = ['action', 'from_status', 'to_status', 'level', 'actor', 'comment', 'timestamp']
