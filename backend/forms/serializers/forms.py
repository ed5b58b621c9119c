from rest_framework import serializers

from accounts.serializers import UserSummarySerializer
from forms import models as form_models


class FormSerializer(serializers.ModelSerializer):
    isPublic = serializers.BooleanField(source='is_public', read_only=True)
    liveVersionSha = serializers.SerializerMethodField()
    creator = UserSummarySerializer(source='created_by', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = form_models.Form
        fields = ('id', 'name', 'description', 'visibility', 'isPublic', 'liveVersionSha', 'creator', 'createdAt', 'updatedAt')
        read_only_fields = fields

    def get_liveVersionSha(self, obj):
        return obj.live_version_sha


class FormWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(max_length=2000, required=False, allow_blank=True)
    visibility = serializers.ChoiceField(choices=form_models.Form.Visibility.choices, required=False)
    # accepted for clients that still send the boolean flag
    isPublic = serializers.BooleanField(required=False, write_only=True)
    schema = serializers.JSONField(required=False)

    def validate(self, attrs):
        is_public = attrs.pop('isPublic', None)
        if 'visibility' not in attrs and is_public is not None:
            attrs['visibility'] = (
                form_models.Form.Visibility.PUBLIC if is_public else form_models.Form.Visibility.PRIVATE
            )
        return attrs


class FormSubmitSchemaSerializer(serializers.Serializer):
    """What a submitter needs to render the live form."""
    id = serializers.IntegerField()
    name = serializers.CharField()
    versionSha = serializers.CharField(source='live_version.sha')
    schema = serializers.JSONField(source='live_version.schema')
