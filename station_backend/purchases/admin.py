# purchases/admin.py

from django.contrib import admin

from purchases.models import PaymentAllocation, Purchase, Supplier, SupplierPayment


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ("name", "contact", "balance", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name", "contact")
    readonly_fields = ("balance", "created_at")


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    list_display = ("date", "supplier", "total_cost", "paid_amount", "status")
    list_filter = ("status", "date")
    search_fields = ("supplier__name", "description")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class PaymentAllocationInline(admin.TabularInline):
    model = PaymentAllocation
    extra = 0
    readonly_fields = ("purchase", "amount")
    can_delete = False


@admin.register(SupplierPayment)
class SupplierPaymentAdmin(admin.ModelAdmin):
    list_display = ("created_at", "supplier", "amount", "allocated_amount", "unallocated_amount", "method")
    list_filter = ("method",)
    search_fields = ("supplier__name",)
    inlines = [PaymentAllocationInline]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
