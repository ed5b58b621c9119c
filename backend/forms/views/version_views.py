from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from forms import models as form_models
from forms.serializers import (
    FormSerializer,
    FormVersionListSerializer,
    FormVersionSerializer,
    PublishVersionSerializer,
    VersionCreateSerializer,
    VersionUpdateSerializer,
)
from forms.services import access_control, live_pointer, version_resolver, version_store


class OwnedFormMixin:
    """Resolve the form from the URL and require the caller to own it."""

    def get_owned_form(self, request, form_id: int) -> form_models.Form:
        form = get_object_or_404(form_models.Form, pk=form_id)
        access_control.require_form_owner(form, request.user)
        return form


class FormVersionListCreateView(OwnedFormMixin, APIView):
    # ownership is enforced per request so anonymous callers get 401, others 403
    permission_classes = (AllowAny,)

    def get(self, request, form_id: int, *args, **kwargs):
        form = self.get_owned_form(request, form_id)
        versions = version_store.list_versions(form)
        serializer = FormVersionListSerializer(versions, many=True, context={'live_version_id': form.live_version_id})
        return Response({
            'versions': serializer.data,
            'liveVersion': form.live_version_sha,
        })

    def post(self, request, form_id: int, *args, **kwargs):
        form = self.get_owned_form(request, form_id)
        serializer = VersionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payload = serializer.validated_data

        version = version_resolver.create_draft(
            form,
            request.user,
            description=payload.get('description'),
            schema=payload.get('schema'),
            base_version_sha=payload.get('baseVersionSha'),
            publish=payload.get('publish', False),
        )
        return Response(FormVersionSerializer(version).data, status=status.HTTP_201_CREATED)


class FormVersionDetailView(OwnedFormMixin, APIView):
    permission_classes = (AllowAny,)

    def get(self, request, form_id: int, sha: str, *args, **kwargs):
        form = self.get_owned_form(request, form_id)
        version = version_store.get_version(form, sha)
        return Response(FormVersionSerializer(version).data)

    def patch(self, request, form_id: int, sha: str, *args, **kwargs):
        form = self.get_owned_form(request, form_id)
        serializer = VersionUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        version = version_store.update_description(form, sha, serializer.validated_data['description'])
        return Response(FormVersionSerializer(version).data)

    def delete(self, request, form_id: int, sha: str, *args, **kwargs):
        form = self.get_owned_form(request, form_id)
        version_store.delete_draft(form, sha)
        return Response(status=status.HTTP_204_NO_CONTENT)


class FormVersionLiveView(APIView):
    # publish_version checks ownership itself
    permission_classes = (AllowAny,)

    def put(self, request, form_id: int, sha: str, *args, **kwargs):
        serializer = PublishVersionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        form = live_pointer.publish_version(
            form_id,
            sha,
            request.user,
            expected_live_sha=serializer.validated_data.get('expectedLiveSha'),
        )
        return Response(FormSerializer(form).data)
