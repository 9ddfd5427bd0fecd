"""
======================================================
PATH: accounting/migrations/0002_posting_supplier.py
======================================================
MIGRATION: Posting.supplier

Split from 0001 to break the accounting <-> purchases FK cycle.
"""

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    dependencies = [
        ("accounting", "0001_initial"),
        ("purchases", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="posting",
            name="supplier",
            field=models.ForeignKey(
                to="purchases.supplier",
                null=True,
                blank=True,
                on_delete=django.db.models.deletion.PROTECT,
                related_name="postings",
            ),
        ),
    ]
