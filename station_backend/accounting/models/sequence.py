# accounting/models/sequence.py

"""
ACCOUNT CODE SEQUENCE

One row per category account type. The row is locked with
select_for_update() while the next category code is issued, so two
concurrent requests can never compute the same code.
"""

from __future__ import annotations

from django.db import models


class AccountCodeSequence(models.Model):
    account_type = models.CharField(max_length=20, unique=True)
    last_code = models.PositiveIntegerField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Account code sequence"

    def __str__(self):
        return f"{self.account_type} → {self.last_code}"
