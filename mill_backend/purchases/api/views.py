# purchases/api/views.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api.errors import error_response
from core.services.mill_config import load_mill_config
from inventory.models import StorageBin
from purchases.api.serializers import (
    PurchaseCreateSerializer,
    PurchaseSerializer,
    RawMaterialSummarySerializer,
    SupplierSerializer,
)
from purchases.models import Purchase, Supplier
from purchases.services.receiving_service import (
    PurchaseReceivingError,
    SupplierNotFoundError,
    receive_purchase,
)


class SupplierListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SupplierSerializer

    @extend_schema(tags=["purchases"], responses=SupplierSerializer(many=True))
    def get(self, request):
        qs = Supplier.objects.filter(is_active=True).order_by("name")
        return Response(
            SupplierSerializer(qs, many=True).data, status=status.HTTP_200_OK
        )

    @extend_schema(
        tags=["purchases"],
        request=SupplierSerializer,
        responses={201: SupplierSerializer},
    )
    def post(self, request):
        s = SupplierSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        supplier = s.save()
        return Response(
            SupplierSerializer(supplier).data, status=status.HTTP_201_CREATED
        )


class PurchaseListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PurchaseCreateSerializer

    @extend_schema(tags=["purchases"], responses=PurchaseSerializer(many=True))
    def get(self, request):
        qs = Purchase.objects.select_related("supplier").order_by("-created_at")
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(PurchaseSerializer(page, many=True).data)
        return Response(
            PurchaseSerializer(qs, many=True).data, status=status.HTTP_200_OK
        )

    @extend_schema(tags=["purchases"], request=PurchaseCreateSerializer)
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        storage_bin = None
        if data.get("storage_bin_id"):
            storage_bin = StorageBin.objects.filter(
                pk=data["storage_bin_id"], is_active=True
            ).first()

        try:
            result = receive_purchase(
                supplier_id=data["supplier_id"],
                paddy_type=data["paddy_type"],
                quality_grade=data["quality_grade"],
                gross_weight_kg=data["gross_weight_kg"],
                tare_kg=data.get("tare_kg"),
                moisture_percent=data.get("moisture_percent"),
                price_per_kg=data["price_per_kg"],
                transport_cost=data.get("transport_cost"),
                unloading_cost=data.get("unloading_cost"),
                storage_bin=storage_bin,
                received_at=data.get("received_at"),
                notes=data.get("notes", ""),
                user=request.user,
                config=load_mill_config(),
            )
        except SupplierNotFoundError as exc:
            return error_response(exc, http_status=status.HTTP_404_NOT_FOUND)
        except PurchaseReceivingError as exc:
            return error_response(exc)

        raw_material = None
        if result.raw_material is not None:
            raw_material = RawMaterialSummarySerializer(result.raw_material).data

        return Response(
            {
                "purchase": PurchaseSerializer(result.purchase).data,
                "raw_material": raw_material,
            },
            status=status.HTTP_201_CREATED,
        )
