from django.contrib import admin

from .models import DrawRecord, Prize


@admin.register(Prize)
class PrizeAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "stock", "probability")
    list_editable = ("stock", "probability")
    search_fields = ("name",)
    ordering = ("-probability", "id")


@admin.register(DrawRecord)
class DrawRecordAdmin(admin.ModelAdmin):
    list_display = ("id", "prize_name", "prize_id", "created_at")
    search_fields = ("prize_name",)
    ordering = ("-created_at",)
    readonly_fields = ("prize_id", "prize_name", "created_at")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
