from django.contrib import admin

from .models import StoredDocument


@admin.register(StoredDocument)
class StoredDocumentAdmin(admin.ModelAdmin):
    list_display = ("id", "collection", "order_id", "created_at", "updated_at")
    list_filter = ("collection", "created_at")
    search_fields = ("id", "data__order_id")
    readonly_fields = ("id", "created_at", "updated_at")
    date_hierarchy = "created_at"

    def order_id(self, obj):
        return obj.data.get("order_id", "-")

    order_id.short_description = "Order"
