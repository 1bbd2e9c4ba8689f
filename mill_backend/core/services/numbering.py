# core/services/numbering.py

"""
======================================================
PATH: core/services/numbering.py
======================================================
DOCUMENT NUMBERING

Format: <PREFIX>-<YEAR>-<zero padded sequence>, e.g. PO-2025-0001.
The sequence restarts every calendar year and is drawn from a locked
DocumentSequence row, never from "max existing number + 1".
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from core.models import DocumentSequence
from core.services.mill_config import MillConfig, load_mill_config

logger = logging.getLogger(__name__)


def format_document_number(*, prefix: str, year: int, sequence: int, width: int = 4) -> str:
    return f"{prefix}-{year}-{str(sequence).zfill(width)}"


@transaction.atomic
def next_document_number(
    *,
    document_type: str,
    config: MillConfig | None = None,
    year: int | None = None,
) -> str:
    config = config or load_mill_config()
    year = int(year or timezone.localdate().year)
    prefix = config.prefix_for(document_type)

    seq, _ = DocumentSequence.objects.select_for_update().get_or_create(
        document_type=document_type,
        year=year,
    )
    DocumentSequence.objects.filter(pk=seq.pk).update(
        last_value=F("last_value") + 1,
        updated_at=timezone.now(),
    )
    seq.refresh_from_db(fields=["last_value"])

    number = format_document_number(
        prefix=prefix,
        year=year,
        sequence=seq.last_value,
        width=config.number_width,
    )
    logger.debug(
        "Issued document number",
        extra={"document_type": document_type, "number": number},
    )
    return number
