# core/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models


class Organization(models.Model):
    """Tenant that owns members, committees and email workflows"""
    slug = models.SlugField(max_length=80, unique=True)
    name = models.CharField(max_length=200)
    contact_email = models.EmailField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class User(AbstractUser):
    display_name = models.CharField(max_length=120, blank=True)
    organization = models.ForeignKey(
        Organization,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='operators',
        help_text='Organization this operator administers',
    )

    def __str__(self):
        return self.get_full_name() or self.username

    def can_manage(self, organization_id) -> bool:
        """Superusers manage every organization, operators only their own."""
        if not self.is_authenticated or not self.is_active:
            return False
        return self.is_superuser or (
            self.organization_id is not None and self.organization_id == organization_id
        )
