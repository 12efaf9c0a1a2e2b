from django.contrib import admin
from .models import Committee, CommitteeAssignment, CommitteePosition, Member, MembershipRenewal


class CommitteeAssignmentInline(admin.TabularInline):
    model = CommitteeAssignment
    extra = 0
    autocomplete_fields = ("member",)


@admin.register(Member)
class MemberAdmin(admin.ModelAdmin):
    list_display = ("id", "first_name", "last_name", "email", "organization", "membership_type", "status", "joined_at")
    list_filter = ("status", "membership_type", "organization")
    search_fields = ("first_name", "last_name", "email")


@admin.register(MembershipRenewal)
class MembershipRenewalAdmin(admin.ModelAdmin):
    list_display = ("id", "member", "membership_type", "renewed_at")
    search_fields = ("member__first_name", "member__last_name", "member__email")


@admin.register(Committee)
class CommitteeAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "organization", "is_active")
    list_filter = ("is_active", "organization")
    search_fields = ("name",)
    inlines = [CommitteeAssignmentInline]


@admin.register(CommitteePosition)
class CommitteePositionAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "organization", "display_order", "is_active", "holder_count")
    list_filter = ("is_active", "organization")
    search_fields = ("name", "description")
    ordering = ("organization", "display_order")

    def holder_count(self, obj):
        return obj.current_holders().count()
    holder_count.short_description = 'Current Holders'
