from rest_framework import serializers

from accounts.serializers import UserSummarySerializer
from submissions import models as sub_models


class SubmissionCreateSerializer(serializers.Serializer):
    versionSha = serializers.CharField(max_length=64)
    data = serializers.JSONField()


class SubmissionListSerializer(serializers.ModelSerializer):
    versionSha = serializers.CharField(source='version.sha', read_only=True)
    isAnonymous = serializers.BooleanField(source='is_anonymous', read_only=True)
    submitterInformation = UserSummarySerializer(source='created_by', read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = sub_models.Submission
        fields = ('id', 'versionSha', 'data', 'isAnonymous', 'submitterInformation', 'createdAt')
        read_only_fields = fields


class SubmissionDetailSerializer(SubmissionListSerializer):
    formId = serializers.IntegerField(source='form_id', read_only=True)
    formName = serializers.CharField(source='form.name', read_only=True)
    # schema of the bound version, never the form's current live schema
    schema = serializers.JSONField(source='version.schema', read_only=True)
    isFormOwner = serializers.SerializerMethodField()

    class Meta(SubmissionListSerializer.Meta):
        fields = ('id', 'formId', 'formName', 'versionSha', 'schema', 'data', 'isAnonymous', 'isFormOwner', 'submitterInformation', 'createdAt')
        read_only_fields = fields

    def get_isFormOwner(self, obj):
        return bool(self.context.get('is_form_owner', False))


class MySubmissionSerializer(serializers.ModelSerializer):
    """Caller's own submission, with enough form context to list it."""
    formId = serializers.IntegerField(source='form_id', read_only=True)
    formName = serializers.CharField(source='form.name', read_only=True)
    formDescription = serializers.CharField(source='form.description', read_only=True)
    formOwner = UserSummarySerializer(source='form.created_by', read_only=True)
    versionSha = serializers.CharField(source='version.sha', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = sub_models.Submission
        fields = ('id', 'formId', 'formName', 'formDescription', 'formOwner', 'versionSha', 'data', 'createdAt')
        read_only_fields = fields
