# inventory/api/views.py

from django.utils.dateparse import parse_datetime
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api.errors import error_response
from inventory.api.filters import StockMovementFilter
from inventory.api.serializers import (
    FinishedGoodsLotSerializer,
    RawMaterialLotSerializer,
    StockAdjustmentSerializer,
    StockMovementSerializer,
    StockTransferSerializer,
    StorageBinSerializer,
)
from inventory.models import FinishedGoodsLot, RawMaterialLot, StockMovement, StorageBin
from inventory.services.exceptions import InventoryError, LotNotFoundError
from inventory.services.ledger import balance_as_of, history_for, movements_by_reference
from inventory.services.lots import find_lot
from inventory.services.stock_adjustments import adjust_stock, transfer_stock


class StorageBinListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = StorageBinSerializer

    @extend_schema(tags=["inventory"], responses=StorageBinSerializer(many=True))
    def get(self, request):
        qs = StorageBin.objects.filter(is_active=True)
        return Response(StorageBinSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["inventory"], request=StorageBinSerializer, responses={201: StorageBinSerializer})
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        return Response(StorageBinSerializer(s.save()).data, status=status.HTTP_201_CREATED)


class RawMaterialLotListView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = RawMaterialLotSerializer

    @extend_schema(tags=["inventory"], responses=RawMaterialLotSerializer(many=True))
    def get(self, request):
        qs = RawMaterialLot.objects.select_related("supplier", "purchase")
        status_filter = (request.query_params.get("status") or "").strip()
        if status_filter:
            qs = qs.filter(status=status_filter)
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(qs, many=True).data, status=status.HTTP_200_OK)


class FinishedGoodsLotListView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = FinishedGoodsLotSerializer

    @extend_schema(tags=["inventory"], responses=FinishedGoodsLotSerializer(many=True))
    def get(self, request):
        qs = FinishedGoodsLot.objects.select_related("batch")
        status_filter = (request.query_params.get("status") or "").strip()
        if status_filter:
            qs = qs.filter(status=status_filter)
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(qs, many=True).data, status=status.HTTP_200_OK)


class StockBalanceView(GenericAPIView):
    """
    Ledger balance for a SKU at a point in time, next to the lot's
    current quantity.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["inventory"],
        parameters=[OpenApiParameter("as_of", str, description="ISO datetime, defaults to now")],
    )
    def get(self, request, sku):
        as_of = None
        raw = (request.query_params.get("as_of") or "").strip()
        if raw:
            as_of = parse_datetime(raw)
            if as_of is None:
                return Response(
                    {"detail": "as_of must be an ISO datetime"},
                    status=status.HTTP_400_BAD_REQUEST,
                )

        try:
            lot = find_lot(sku)
        except LotNotFoundError:
            lot = None

        current = None
        if lot is not None:
            current = getattr(lot, "quantity_kg", None)
            if current is None:
                current = lot.weight_kg

        return Response(
            {
                "sku": sku,
                "as_of": as_of.isoformat() if as_of else None,
                "balance_kg": str(balance_as_of(sku, as_of)),
                "lot_quantity_kg": str(current) if current is not None else None,
            },
            status=status.HTTP_200_OK,
        )


class StockHistoryView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = StockMovementSerializer
    queryset = StockMovement.objects.all()
    filterset_class = StockMovementFilter

    @extend_schema(tags=["inventory"], responses=StockMovementSerializer(many=True))
    def get(self, request, sku):
        qs = self.filter_queryset(history_for(sku))
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(qs, many=True).data, status=status.HTTP_200_OK)


class MovementsByReferenceView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = StockMovementSerializer

    @extend_schema(tags=["inventory"], responses=StockMovementSerializer(many=True))
    def get(self, request, reference_kind, reference_id):
        if reference_kind not in StockMovement.ReferenceKind.values:
            return Response(
                {"detail": f"Unknown reference kind: {reference_kind}"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        qs = movements_by_reference(reference_kind, reference_id)
        return Response(self.get_serializer(qs, many=True).data, status=status.HTTP_200_OK)


class StockAdjustmentView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = StockAdjustmentSerializer

    @extend_schema(tags=["inventory"], request=StockAdjustmentSerializer)
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            result = adjust_stock(
                sku=data["sku"],
                delta_kg=data["delta_kg"],
                reason=data["reason"],
                user=request.user,
            )
        except LotNotFoundError as exc:
            return error_response(exc, http_status=status.HTTP_404_NOT_FOUND)
        except InventoryError as exc:
            return error_response(exc)

        quantity = getattr(result.lot, "quantity_kg", None)
        if quantity is None:
            quantity = result.lot.weight_kg

        return Response(
            {
                "sku": result.lot.sku,
                "requested_delta_kg": str(result.requested_delta_kg),
                "applied_delta_kg": str(result.applied_delta_kg),
                "quantity_kg": str(quantity),
                "status": result.lot.status,
                "movement": (
                    StockMovementSerializer(result.movement).data if result.movement else None
                ),
            },
            status=status.HTTP_200_OK,
        )


class StockTransferView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = StockTransferSerializer

    @extend_schema(tags=["inventory"], request=StockTransferSerializer)
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        destination = StorageBin.objects.filter(
            pk=data["destination_bin_id"], is_active=True
        ).first()
        if destination is None:
            return Response(
                {"detail": "Storage bin not found"}, status=status.HTTP_404_NOT_FOUND
            )

        try:
            movements = transfer_stock(
                sku=data["sku"],
                destination_bin=destination,
                user=request.user,
                reason=data.get("reason", ""),
            )
        except LotNotFoundError as exc:
            return error_response(exc, http_status=status.HTTP_404_NOT_FOUND)
        except InventoryError as exc:
            return error_response(exc)

        return Response(
            StockMovementSerializer(movements, many=True).data,
            status=status.HTTP_201_CREATED,
        )
