from __future__ import annotations

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("inventory", "0001_initial"),
        ("production", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="finishedgoodslot",
            name="batch",
            field=models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.PROTECT,
                related_name="finished_goods",
                to="production.productionbatch",
            ),
        ),
        migrations.AddIndex(
            model_name="finishedgoodslot",
            index=models.Index(fields=["status", "paddy_type"], name="fg_lot_status_paddy_idx"),
        ),
        migrations.AddIndex(
            model_name="finishedgoodslot",
            index=models.Index(fields=["batch"], name="fg_lot_batch_idx"),
        ),
        migrations.AddIndex(
            model_name="finishedgoodslot",
            index=models.Index(fields=["expiry_date"], name="fg_lot_expiry_idx"),
        ),
    ]
