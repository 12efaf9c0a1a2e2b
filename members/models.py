# members/models.py
from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.models import Organization


class Member(models.Model):
    STATUS_PENDING = 'pending'
    STATUS_ACTIVE = 'active'
    STATUS_INACTIVE = 'inactive'
    STATUS = (
        (STATUS_PENDING, 'Pending Approval'),
        (STATUS_ACTIVE, 'Active'),
        (STATUS_INACTIVE, 'Inactive'),
    )

    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name='members')
    first_name = models.CharField(max_length=120)
    last_name = models.CharField(max_length=120, blank=True)
    email = models.EmailField()
    membership_type = models.CharField(max_length=80, blank=True, help_text='e.g. Adult, Junior, Family')
    status = models.CharField(max_length=20, choices=STATUS, default=STATUS_ACTIVE)
    joined_at = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('organization', 'email')
        ordering = ['last_name', 'first_name']

    def __str__(self):
        return f"{self.full_name} <{self.email}>"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def template_variables(self):
        """Values exposed to email workflow templates"""
        return {
            'first_name': self.first_name,
            'last_name': self.last_name,
            'email': self.email,
            'membership_type': self.membership_type,
        }

    def renew(self, membership_type=''):
        """Record a renewal, reactivating the member and switching type when one is given"""
        if membership_type:
            self.membership_type = membership_type
        self.status = self.STATUS_ACTIVE
        self.save(update_fields=['membership_type', 'status', 'updated_at'])
        return MembershipRenewal.objects.create(member=self, membership_type=self.membership_type)


class MembershipRenewal(models.Model):
    member = models.ForeignKey(Member, on_delete=models.CASCADE, related_name='renewals')
    membership_type = models.CharField(max_length=80, blank=True)
    renewed_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-renewed_at']

    def __str__(self):
        return f"{self.member.full_name} renewed {self.renewed_at:%Y-%m-%d}"


class Committee(models.Model):
    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name='committees')
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class CommitteePosition(models.Model):
    """Named role (Treasurer, Secretary...) that members hold within committees"""
    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name='committee_positions')
    name = models.CharField(max_length=120)
    description = models.TextField(blank=True, null=True)
    is_active = models.BooleanField(default=True)
    display_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['display_order', 'name']

    def __str__(self):
        return self.name

    def current_holders(self):
        """Members currently holding this position in any committee of the organization"""
        return Member.objects.filter(
            pk__in=CommitteeAssignment.objects.current().filter(
                position=self,
                committee__organization_id=self.organization_id,
            ).values('member_id')
        )


class CommitteeAssignmentQuerySet(models.QuerySet):
    def current(self, on=None):
        on = on or timezone.localdate()
        return self.filter(start_date__lte=on).filter(Q(end_date__isnull=True) | Q(end_date__gte=on))


class CommitteeAssignment(models.Model):
    committee = models.ForeignKey(Committee, on_delete=models.CASCADE, related_name='assignments')
    position = models.ForeignKey(CommitteePosition, on_delete=models.CASCADE, related_name='assignments')
    member = models.ForeignKey(Member, on_delete=models.CASCADE, related_name='committee_assignments')
    start_date = models.DateField(default=timezone.localdate)
    end_date = models.DateField(null=True, blank=True, help_text='Leave empty while the member still holds the position')

    objects = CommitteeAssignmentQuerySet.as_manager()

    class Meta:
        ordering = ['committee', 'position__display_order']

    def __str__(self):
        return f"{self.member.full_name} - {self.position.name} ({self.committee.name})"
