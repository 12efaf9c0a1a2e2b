from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from .models import Organization, User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    fieldsets = DjangoUserAdmin.fieldsets + (
        ('Profile', {'fields': ('display_name', 'organization')}),
    )
    list_display = ('username', 'email', 'first_name', 'last_name', 'organization', 'is_staff')
    list_filter = DjangoUserAdmin.list_filter + ('organization',)
    search_fields = ('username', 'email', 'first_name', 'last_name', 'display_name')


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "slug", "contact_email", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name", "slug", "contact_email")
    prepopulated_fields = {"slug": ("name",)}
