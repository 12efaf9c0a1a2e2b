from rest_framework import serializers
from .models import Member, MembershipRenewal


class MemberSerializer(serializers.ModelSerializer):
    class Meta:
        model = Member
        fields = (
            "id", "organization", "first_name", "last_name", "email",
            "membership_type", "status", "joined_at", "created_at", "updated_at",
        )
        read_only_fields = ("organization", "joined_at", "created_at", "updated_at")


class MembershipRenewalSerializer(serializers.ModelSerializer):
    class Meta:
        model = MembershipRenewal
        fields = ("id", "member", "membership_type", "renewed_at")
        read_only_fields = ("member", "renewed_at")

