from django.contrib import admin
from .models import OutgoingEmail


@admin.register(OutgoingEmail)
class OutgoingEmailAdmin(admin.ModelAdmin):
    list_display = ("id", "to_address", "subject", "workflow", "trigger_event", "is_test", "status", "sent_at")
    list_filter = ("status", "is_test", "trigger_event")
    search_fields = ("to_address", "subject", "workflow__name")
    readonly_fields = ("created_at",)
