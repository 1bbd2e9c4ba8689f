# production/api/views.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api.errors import error_response
from core.services.mill_config import load_mill_config
from inventory.models import StorageBin
from production.api.serializers import (
    BatchCancelSerializer,
    BatchCompleteSerializer,
    BatchStartSerializer,
    ByProductSaleSerializer,
    ByProductSerializer,
    FinishedGoodsSerializer,
    MachineSerializer,
    ProductionBatchSerializer,
)
from production.models import ByProduct, Machine, ProductionBatch
from production.services.batch_service import (
    BatchOutput,
    cancel_batch,
    complete_batch,
    start_batch,
)
from production.services.by_products import record_by_product_sale
from production.services.exceptions import (
    BatchNotFoundError,
    ProductionError,
    RawMaterialNotFoundError,
)

NOT_FOUND = (RawMaterialNotFoundError, BatchNotFoundError)


def _storage_bin(bin_id):
    if not bin_id:
        return None
    return StorageBin.objects.filter(pk=bin_id, is_active=True).first()


class ProductionBatchListView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ProductionBatchSerializer

    @extend_schema(tags=["production"], responses=ProductionBatchSerializer(many=True))
    def get(self, request):
        qs = ProductionBatch.objects.select_related("raw_material").prefetch_related(
            "operators", "machines"
        )
        status_filter = (request.query_params.get("status") or "").strip()
        if status_filter:
            qs = qs.filter(status=status_filter)

        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(qs, many=True).data, status=status.HTTP_200_OK)


class BatchStartView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = BatchStartSerializer

    @extend_schema(
        tags=["production"],
        request=BatchStartSerializer,
        responses={201: ProductionBatchSerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            batch = start_batch(
                raw_material_id=data["raw_material_id"],
                input_quantity_kg=data["input_quantity_kg"],
                paddy_type=data.get("paddy_type") or None,
                paddy_nadu_kg=data.get("paddy_nadu_kg"),
                paddy_samba_kg=data.get("paddy_samba_kg"),
                operators=data.get("operator_ids") or (),
                machines=data.get("machine_ids") or (),
                storage_bin=_storage_bin(data.get("storage_bin_id")),
                notes=data.get("notes", ""),
                user=request.user,
                config=load_mill_config(),
            )
        except NOT_FOUND as exc:
            return error_response(exc, http_status=status.HTTP_404_NOT_FOUND)
        except ProductionError as exc:
            return error_response(exc)

        return Response(
            ProductionBatchSerializer(batch).data, status=status.HTTP_201_CREATED
        )


class BatchCompleteView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = BatchCompleteSerializer

    @extend_schema(tags=["production"], request=BatchCompleteSerializer)
    def post(self, request, batch_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        output = BatchOutput.of(
            rice_kg=data["rice_kg"],
            broken_kg=data.get("broken_kg"),
            bran_kg=data.get("bran_kg"),
            husk_kg=data.get("husk_kg"),
            impurity_kg=data.get("impurity_kg"),
        )

        try:
            result = complete_batch(
                batch_id=batch_id,
                output=output,
                rice_grade=data.get("rice_grade"),
                bag_weight_kg=data.get("bag_weight_kg"),
                bag_count=data.get("bag_count"),
                expiry_date=data.get("expiry_date"),
                price_per_kg=data.get("price_per_kg"),
                storage_bin=_storage_bin(data.get("storage_bin_id")),
                notes=data.get("notes", ""),
                user=request.user,
                config=load_mill_config(),
            )
        except NOT_FOUND as exc:
            return error_response(exc, http_status=status.HTTP_404_NOT_FOUND)
        except ProductionError as exc:
            return error_response(exc)

        return Response(
            {
                "batch": ProductionBatchSerializer(result.batch).data,
                "finished_goods": FinishedGoodsSerializer(result.finished_goods).data,
            },
            status=status.HTTP_200_OK,
        )


class BatchCancelView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = BatchCancelSerializer

    @extend_schema(
        tags=["production"],
        request=BatchCancelSerializer,
        responses={200: ProductionBatchSerializer},
    )
    def post(self, request, batch_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            batch = cancel_batch(
                batch_id=batch_id,
                reason=s.validated_data.get("reason", ""),
                user=request.user,
            )
        except BatchNotFoundError as exc:
            return error_response(exc, http_status=status.HTTP_404_NOT_FOUND)
        except ProductionError as exc:
            return error_response(exc)

        return Response(ProductionBatchSerializer(batch).data, status=status.HTTP_200_OK)


class MachineListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = MachineSerializer

    @extend_schema(tags=["production"], responses=MachineSerializer(many=True))
    def get(self, request):
        return Response(
            MachineSerializer(Machine.objects.all(), many=True).data,
            status=status.HTTP_200_OK,
        )

    @extend_schema(tags=["production"], request=MachineSerializer, responses={201: MachineSerializer})
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        return Response(MachineSerializer(s.save()).data, status=status.HTTP_201_CREATED)


class ByProductListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ByProductSerializer

    @extend_schema(tags=["production"], responses=ByProductSerializer(many=True))
    def get(self, request):
        return Response(
            ByProductSerializer(ByProduct.objects.all(), many=True).data,
            status=status.HTTP_200_OK,
        )

    @extend_schema(tags=["production"], request=ByProductSerializer, responses={201: ByProductSerializer})
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        return Response(ByProductSerializer(s.save()).data, status=status.HTTP_201_CREATED)


class ByProductSaleView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ByProductSaleSerializer

    @extend_schema(tags=["production"], request=ByProductSaleSerializer, responses={200: ByProductSerializer})
    def post(self, request, by_product_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            item = record_by_product_sale(
                by_product_id=by_product_id,
                quantity_kg=s.validated_data["quantity_kg"],
                price_per_kg=s.validated_data.get("price_per_kg"),
            )
        except ProductionError as exc:
            return error_response(exc)

        return Response(ByProductSerializer(item).data, status=status.HTTP_200_OK)
