"""
Django Admin configuration for email workflows
"""

from django.contrib import admin, messages
from django.utils.html import format_html

from .exceptions import StoreError
from .models import EmailWorkflow
from .services import WorkflowService


@admin.register(EmailWorkflow)
class EmailWorkflowAdmin(admin.ModelAdmin):
    """Admin interface for email workflows"""

    list_display = [
        'name', 'organization', 'trigger_event', 'recipient_summary',
        'email_subject', 'status_badge', 'created_at',
    ]
    list_filter = ['is_active', 'trigger_event', 'recipient_type', 'organization']
    search_fields = ['name', 'description', 'email_subject', 'recipient_email', 'recipient_name']
    readonly_fields = ['created_at', 'updated_at']
    autocomplete_fields = ['recipient_position']
    actions = ['toggle_selected']

    fieldsets = (
        ('Workflow', {
            'fields': ('organization', 'name', 'description', 'trigger_event', 'is_active')
        }),
        ('Recipient', {
            'fields': ('recipient_type', 'recipient_email', 'recipient_name', 'recipient_position'),
            'description': 'Only the fields of the selected recipient type are kept. '
                           '"All Active Members" emails every active member of the organization, use it carefully.',
        }),
        ('Email', {
            'fields': ('email_subject', 'email_template'),
            'description': 'Available variables: {{first_name}}, {{last_name}}, {{email}}, {{membership_type}}',
        }),
        ('Advanced', {
            'fields': ('conditions',),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )

    def recipient_summary(self, obj):
        return obj.recipient_display()
    recipient_summary.short_description = 'Recipient'

    def status_badge(self, obj):
        if obj.is_active:
            return format_html('<span style="color: green;">{}</span>', 'Active')
        return format_html('<span style="color: #888;">{}</span>', 'Disabled')
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'is_active'

    def toggle_selected(self, request, queryset):
        service = WorkflowService()
        toggled = 0
        for workflow in queryset:
            try:
                service.toggle_workflow(workflow)
            except StoreError as e:
                self.message_user(request, f"{workflow.name}: {str(e)}", messages.ERROR)
                continue
            toggled += 1
        self.message_user(request, f"{toggled} workflow(s) toggled", messages.SUCCESS)
    toggle_selected.short_description = 'Enable/disable selected workflows'
