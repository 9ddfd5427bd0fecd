# purchases/models.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from accounting.models.payment_account import PaymentAccount
from accounting.models.posting import Posting

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES)


User = settings.AUTH_USER_MODEL


class Supplier(models.Model):
    """
    Supplier master.

    balance is the aggregate amount owed. It is moved ONLY by the purchase
    and settlement services (F() updates inside their atomic units); save()
    never writes it on existing rows.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=200)
    contact = models.CharField(max_length=100, blank=True, default="")
    address = models.TextField(blank=True, default="")

    balance = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["name"], name="supplier_name_idx"),
            models.Index(fields=["is_active"], name="supplier_active_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(balance__gte=Decimal("0.00")),
                name="supplier_balance_nonnegative",
            ),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "name is required"})

    def save(self, *args, **kwargs):
        if not self._state.adding and kwargs.get("update_fields") is None:
            kwargs["update_fields"] = [
                f.name
                for f in self._meta.concrete_fields
                if not f.primary_key and f.name != "balance"
            ]
        self.full_clean()
        return super().save(*args, **kwargs)


class Purchase(models.Model):
    """
    Fuel delivery bought from a supplier.

    status is derived from paid_amount / total_cost on every save:
    UNPAID (nothing paid), PARTIAL, PAID (fully settled).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    STATUS_UNPAID = "UNPAID"
    STATUS_PARTIAL = "PARTIAL"
    STATUS_PAID = "PAID"

    STATUSES = [
        (STATUS_UNPAID, "Unpaid"),
        (STATUS_PARTIAL, "Partially paid"),
        (STATUS_PAID, "Paid"),
    ]

    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.PROTECT,
        related_name="purchases",
    )

    description = models.CharField(max_length=255, blank=True, default="")
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Litres delivered",
    )

    total_cost = models.DecimalField(max_digits=14, decimal_places=2)
    paid_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    status = models.CharField(max_length=10, choices=STATUSES, default=STATUS_UNPAID)

    date = models.DateField(default=timezone.localdate)

    # Ledger links (set by purchase_service)
    paid_posting = models.OneToOneField(
        Posting,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="purchase_paid_part",
    )
    credit_posting = models.OneToOneField(
        Posting,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="purchase_credit_part",
    )

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="fuel_purchases_created",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["date", "created_at", "id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(total_cost__gt=Decimal("0.00")),
                name="purchase_total_cost_positive",
            ),
            models.CheckConstraint(
                condition=Q(paid_amount__gte=Decimal("0.00"))
                & Q(paid_amount__lte=F("total_cost")),
                name="purchase_paid_within_total",
            ),
        ]
        indexes = [
            models.Index(fields=["supplier", "status", "date"], name="purchase_open_fifo_idx"),
        ]

    @property
    def outstanding(self) -> Decimal:
        return _money(self.total_cost) - _money(self.paid_amount)

    @classmethod
    def status_for(cls, *, total_cost, paid_amount) -> str:
        paid = _money(paid_amount)
        if paid >= _money(total_cost):
            return cls.STATUS_PAID
        if paid > Decimal("0.00"):
            return cls.STATUS_PARTIAL
        return cls.STATUS_UNPAID

    def clean(self):
        if self.total_cost is None or self.total_cost <= Decimal("0.00"):
            raise ValidationError({"total_cost": "total_cost must be > 0"})

        if self.paid_amount is None or self.paid_amount < Decimal("0.00"):
            raise ValidationError({"paid_amount": "paid_amount cannot be negative"})

        if self.paid_amount > self.total_cost:
            raise ValidationError({"paid_amount": "paid_amount cannot exceed total_cost"})

    def save(self, *args, **kwargs):
        self.status = self.status_for(total_cost=self.total_cost, paid_amount=self.paid_amount)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "status" not in update_fields:
            kwargs["update_fields"] = [*update_fields, "status"]

        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.supplier.name} {self.date} {self.total_cost} ({self.status})"


class SupplierPayment(models.Model):
    """
    One settlement against a supplier's aggregate balance.

    allocated_amount + unallocated_amount == amount. A non-zero
    unallocated_amount is an unapplied credit (more was paid than the
    open purchases could absorb).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.PROTECT,
        related_name="payments",
    )
    posting = models.OneToOneField(
        Posting,
        on_delete=models.PROTECT,
        related_name="supplier_payment",
    )
    payment_account = models.ForeignKey(
        PaymentAccount,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="supplier_payments",
    )

    amount = models.DecimalField(max_digits=14, decimal_places=2)
    method = models.CharField(max_length=10, default="CASH")
    allocated_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    unallocated_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="supplier_payments_created",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=Decimal("0.00")),
                name="supplier_payment_amount_positive",
            ),
            models.CheckConstraint(
                condition=Q(amount=F("allocated_amount") + F("unallocated_amount")),
                name="supplier_payment_allocation_conserved",
            ),
        ]

    def __str__(self):
        return f"Payment {self.amount} to {self.supplier.name}"


class PaymentAllocation(models.Model):
    """How much of one SupplierPayment settled one Purchase (FIFO audit trail)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    payment = models.ForeignKey(
        SupplierPayment,
        on_delete=models.CASCADE,
        related_name="allocations",
    )
    purchase = models.ForeignKey(
        Purchase,
        on_delete=models.PROTECT,
        related_name="allocations",
    )
    amount = models.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        ordering = ["purchase__date", "purchase__created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=Decimal("0.00")),
                name="payment_allocation_amount_positive",
            ),
        ]

    def __str__(self):
        return f"{self.amount} → {self.purchase_id}"
