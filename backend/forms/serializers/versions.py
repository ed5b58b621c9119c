from rest_framework import serializers

from accounts.serializers import UserSummarySerializer
from forms import models as form_models


class FormVersionListSerializer(serializers.ModelSerializer):
    formId = serializers.IntegerField(source='form_id', read_only=True)
    parentSha = serializers.CharField(source='parent_sha', read_only=True)
    isPublished = serializers.BooleanField(source='is_published', read_only=True)
    isLive = serializers.SerializerMethodField()
    publishedAt = serializers.DateTimeField(source='published_at', read_only=True)
    author = UserSummarySerializer(source='created_by', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = form_models.FormVersion
        fields = ('sha', 'formId', 'parentSha', 'description', 'isPublished', 'isLive', 'publishedAt', 'author', 'createdAt', 'updatedAt')
        read_only_fields = fields

    def get_isLive(self, obj):
        if 'live_version_id' in self.context:
            return obj.id == self.context['live_version_id']
        return obj.is_live


class FormVersionSerializer(FormVersionListSerializer):
    schema = serializers.JSONField(read_only=True)

    class Meta(FormVersionListSerializer.Meta):
        fields = FormVersionListSerializer.Meta.fields + ('schema',)
        read_only_fields = fields


class VersionCreateSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=2000, required=False, allow_blank=True)
    schema = serializers.JSONField(required=False)
    baseVersionSha = serializers.CharField(max_length=64, required=False, allow_blank=False)
    publish = serializers.BooleanField(required=False, default=False)


class VersionUpdateSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=2000, allow_blank=True)


class PublishVersionSerializer(serializers.Serializer):
    expectedLiveSha = serializers.CharField(max_length=64, required=False, allow_null=True)
