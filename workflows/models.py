# workflows/models.py
from django.core.exceptions import NON_FIELD_ERRORS, ValidationError
from django.db import models

from core.models import Organization
from members.models import CommitteePosition
from .conditions import parse_conditions
from .exceptions import WorkflowValidationError
from .recipients import strategy_for


class EmailWorkflowQuerySet(models.QuerySet):
    def for_organization(self, organization_id):
        return self.filter(organization_id=organization_id).select_related('recipient_position')

    def for_trigger(self, organization_id, event):
        """Active workflows of an organization that fire on ``event`` ('signup' or 'renewal')"""
        if event not in EmailWorkflow.EVENTS:
            raise ValueError(f"Unknown trigger event {event!r}, expected one of {EmailWorkflow.EVENTS}")
        return self.for_organization(organization_id).filter(
            is_active=True,
            trigger_event__in=[event, EmailWorkflow.TRIGGER_BOTH],
        ).order_by('-created_at', '-id')


class EmailWorkflow(models.Model):
    TRIGGER_SIGNUP = 'signup'
    TRIGGER_RENEWAL = 'renewal'
    TRIGGER_BOTH = 'both'
    TRIGGER_EVENTS = (
        (TRIGGER_SIGNUP, 'New Signup'),
        (TRIGGER_RENEWAL, 'Membership Renewal'),
        (TRIGGER_BOTH, 'Both Signup and Renewal'),
    )
    # Lifecycle events that can fire workflows
    EVENTS = (TRIGGER_SIGNUP, TRIGGER_RENEWAL)

    RECIPIENT_EMAIL = 'email'
    RECIPIENT_POSITION = 'position'
    RECIPIENT_ALL_MEMBERS = 'all_members'
    RECIPIENT_TYPES = (
        (RECIPIENT_EMAIL, 'Specific Email Address'),
        (RECIPIENT_POSITION, 'Committee Position Holder'),
        (RECIPIENT_ALL_MEMBERS, 'All Active Members'),
    )

    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name='email_workflows')
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, null=True)
    trigger_event = models.CharField(max_length=20, choices=TRIGGER_EVENTS, default=TRIGGER_SIGNUP)
    conditions = models.JSONField(default=dict, blank=True, help_text='Reserved for rule predicates, see workflows.conditions')

    recipient_type = models.CharField(max_length=20, choices=RECIPIENT_TYPES, default=RECIPIENT_EMAIL)
    recipient_email = models.EmailField(blank=True, null=True)
    recipient_name = models.CharField(max_length=200, blank=True, null=True)
    recipient_position = models.ForeignKey(
        CommitteePosition,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='email_workflows',
    )

    email_subject = models.CharField(max_length=255, help_text='Supports {{first_name}}, {{last_name}}, {{email}}, {{membership_type}}')
    email_template = models.TextField(help_text='Supports the same variables as the subject. HTML is allowed.')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = EmailWorkflowQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['organization', 'is_active', 'trigger_event'], name='workflow_trigger_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.trigger_event})"

    @property
    def recipient(self):
        """The recipient strategy selected by ``recipient_type``; fields of other strategies are ignored."""
        return strategy_for(self)

    @property
    def state(self):
        return 'active' if self.is_active else 'disabled'

    def recipient_display(self):
        if self.recipient_type == self.RECIPIENT_POSITION and self.recipient_position:
            return f"Position: {self.recipient_position.name}"
        if self.recipient_type == self.RECIPIENT_ALL_MEMBERS:
            return 'All Active Members'
        return self.recipient_name or self.recipient_email or ''

    def apply_recipient(self, strategy):
        """Store ``strategy`` and clear the fields that belong to the other recipient types"""
        self.recipient_type = strategy.recipient_type
        self.recipient_email = None
        self.recipient_name = None
        self.recipient_position_id = None
        strategy.apply_to(self)

    def validate(self):
        """Raise WorkflowValidationError when a required field is missing"""
        errors = {}
        for field_name in ('name', 'email_subject', 'email_template'):
            if not (getattr(self, field_name) or '').strip():
                errors[field_name] = ['This field is required.']
        if self.trigger_event not in dict(self.TRIGGER_EVENTS):
            errors['trigger_event'] = [f"Unknown trigger event {self.trigger_event!r}."]
        if self.recipient_type not in dict(self.RECIPIENT_TYPES):
            errors['recipient_type'] = [f"Unknown recipient type {self.recipient_type!r}."]
        elif self.recipient_type == self.RECIPIENT_EMAIL and not (self.recipient_email or '').strip():
            errors['recipient_email'] = ['A recipient email is required for this recipient type.']
        elif self.recipient_type == self.RECIPIENT_POSITION and not self.recipient_position_id:
            errors['recipient_position'] = ['A committee position is required for this recipient type.']
        elif self.recipient_type == self.RECIPIENT_POSITION and self.organization_id and not \
                CommitteePosition.objects.filter(
                    pk=self.recipient_position_id, organization_id=self.organization_id).exists():
            errors['recipient_position'] = ['The committee position belongs to another organization.']
        if errors:
            raise WorkflowValidationError(errors)

        parse_conditions(self.conditions)

    def clean(self):
        try:
            self.validate()
        except WorkflowValidationError as e:
            raise ValidationError({
                NON_FIELD_ERRORS if field == 'non_field_errors' else field: messages
                for field, messages in e.errors.items()
            })

    def save(self, *args, **kwargs):
        if self.recipient_type in dict(self.RECIPIENT_TYPES):
            self.apply_recipient(self.recipient)
        if self.description == '':
            self.description = None
        if self.conditions is None:
            self.conditions = {}
        super().save(*args, **kwargs)

    def toggle(self):
        """Flip ``is_active`` from whatever the stored value currently is"""
        self.refresh_from_db(fields=['is_active'])
        self.is_active = not self.is_active
        self.save(update_fields=['is_active', 'updated_at'])
        return self.is_active
