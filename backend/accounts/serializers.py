from django.contrib.auth import get_user_model
from rest_framework import serializers

User = get_user_model()


class UserSummarySerializer(serializers.ModelSerializer):
    """Public-facing author/submitter information."""
    name = serializers.CharField(source='display_name', read_only=True)
    avatarUrl = serializers.CharField(source='avatar_url', read_only=True)

    class Meta:
        model = User
        fields = ('id', 'name', 'email', 'avatarUrl')
        read_only_fields = fields


class MeSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source='display_name', read_only=True)
    githubId = serializers.CharField(source='github_id', read_only=True)
    avatarUrl = serializers.CharField(source='avatar_url', read_only=True)

    class Meta:
        model = User
        fields = ('id', 'username', 'name', 'email', 'githubId', 'avatarUrl')
        read_only_fields = fields
