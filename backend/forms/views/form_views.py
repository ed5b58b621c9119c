from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from formhub.exceptions import AuthRequired, NotFound
from forms import models as form_models
from forms.serializers import FormSerializer, FormSubmitSchemaSerializer, FormWriteSerializer
from forms.services import access_control, form_service, live_pointer


class FormListCreateView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, *args, **kwargs):
        qs = form_models.Form.objects.filter(created_by=request.user).select_related('live_version', 'created_by').order_by('-created_at')
        serializer = FormSerializer(qs, many=True)
        return Response(serializer.data)

    def post(self, request, *args, **kwargs):
        serializer = FormWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        form = form_service.create_form(request.user, **serializer.validated_data)
        return Response(FormSerializer(form).data, status=status.HTTP_201_CREATED)


class FormDetailView(APIView):
    permission_classes = (AllowAny,)

    def get(self, request, id: int, *args, **kwargs):
        form = get_object_or_404(form_models.Form.objects.select_related('live_version', 'created_by'), pk=id)
        access_control.require_form_view(form, request.user)
        return Response(FormSerializer(form).data)

    def patch(self, request, id: int, *args, **kwargs):
        form = get_object_or_404(form_models.Form, pk=id)
        access_control.require_form_owner(form, request.user)

        serializer = FormWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        changes = dict(serializer.validated_data)
        # schema edits go through versions, never through the form row
        changes.pop('schema', None)
        form = form_service.update_form(form, request.user, **changes)
        return Response(FormSerializer(form).data)

    def delete(self, request, id: int, *args, **kwargs):
        form = get_object_or_404(form_models.Form, pk=id)
        access_control.require_form_owner(form, request.user)
        form_service.delete_form(form)
        return Response(status=status.HTTP_204_NO_CONTENT)


class FormSubmitSchemaView(APIView):
    """Live schema and its sha, captured by the client when the submit page loads."""
    permission_classes = (AllowAny,)

    def get(self, request, id: int, *args, **kwargs):
        form = get_object_or_404(form_models.Form.objects.select_related('live_version'), pk=id)
        if not access_control.can_submit(form, request.user):
            raise AuthRequired('You must be logged in to submit this form.')
        if live_pointer.get_live_version(form) is None:
            raise NotFound('This form has no published version.')
        return Response(FormSubmitSchemaSerializer(form).data)
