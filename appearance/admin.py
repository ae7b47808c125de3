from django.contrib import admin

from .models import SiteSetting, SoundEffect
from .services import activate_sound


@admin.register(SiteSetting)
class SiteSettingAdmin(admin.ModelAdmin):
    list_display = ("key", "value")
    search_fields = ("key",)
    ordering = ("key",)


@admin.register(SoundEffect)
class SoundEffectAdmin(admin.ModelAdmin):
    list_display = ("id", "type", "name", "url", "is_active")
    list_filter = ("type", "is_active")
    search_fields = ("name", "url")
    ordering = ("type", "-created_at")
    readonly_fields = ("is_active",)
    actions = ["make_active"]

    @admin.action(description="Activate selected sound (one per type)")
    def make_active(self, request, queryset):
        # Later selections of the same type win.
        for sound in queryset.order_by("id"):
            activate_sound(sound.id)
        self.message_user(request, f"Activated {queryset.count()} sound(s).")
