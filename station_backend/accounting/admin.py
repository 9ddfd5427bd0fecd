# accounting/admin.py

from django.contrib import admin

from accounting.models.account import Account
from accounting.models.expense import ExpenseRecord, IncomeRecord
from accounting.models.payment_account import PaymentAccount
from accounting.models.posting import Posting

# ============================================================
# ACCOUNT
# ============================================================


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = (
        "code",
        "name",
        "account_type",
        "balance",
        "is_system",
        "is_active",
    )
    list_filter = ("account_type", "is_system", "is_active")
    search_fields = ("code", "name")
    ordering = ("code",)
    # balance is maintained by the posting engine
    readonly_fields = ("balance", "is_system", "created_at", "updated_at")

    fieldsets = (
        (
            "Account Identity",
            {
                "fields": ("code", "name", "account_type"),
            },
        ),
        (
            "Status",
            {
                "fields": ("balance", "is_system", "is_active"),
            },
        ),
        (
            "System Fields",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(PaymentAccount)
class PaymentAccountAdmin(admin.ModelAdmin):
    list_display = ("name", "kind", "ledger_account", "is_active")
    list_filter = ("kind", "is_active")
    search_fields = ("name", "account_number")


# ============================================================
# POSTING (STRICTLY IMMUTABLE)
# ============================================================


@admin.register(Posting)
class PostingAdmin(admin.ModelAdmin):
    list_display = (
        "posted_at",
        "debit_account",
        "credit_account",
        "amount",
        "description",
        "shift_id",
        "reference",
    )
    list_filter = ("posted_at",)
    search_fields = ("description", "reference", "shift_id", "debit_account__code", "credit_account__code")
    ordering = ("-posted_at",)

    readonly_fields = (
        "debit_account",
        "credit_account",
        "amount",
        "description",
        "shift_id",
        "supplier",
        "payment_account",
        "reference",
        "created_by",
        "posted_at",
        "created_at",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ============================================================
# EXPENSE / INCOME (READ-ONLY)
# ============================================================


class _CashRecordAdmin(admin.ModelAdmin):
    list_display = ("date", "title", "category", "amount", "payment_method")
    list_filter = ("payment_method", "category")
    search_fields = ("title", "category")
    ordering = ("-date",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


admin.site.register(ExpenseRecord, _CashRecordAdmin)
admin.site.register(IncomeRecord, _CashRecordAdmin)
