from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from forms import models as form_models
from forms.services import access_control as form_access
from submissions import models as sub_models
from submissions.serializers import (
    MySubmissionSerializer,
    SubmissionCreateSerializer,
    SubmissionDetailSerializer,
    SubmissionListSerializer,
)
from submissions.services import access_control, submission_binder


class FormSubmissionListCreateView(APIView):
    permission_classes = (AllowAny,)

    def get(self, request, form_id: int, *args, **kwargs):
        form = get_object_or_404(form_models.Form, pk=form_id)
        form_access.require_form_owner(form, request.user)

        qs = sub_models.Submission.objects.filter(form=form).select_related('version', 'created_by')
        version_sha = request.query_params.get('version')
        if version_sha:
            qs = qs.filter(version__sha=version_sha)
        serializer = SubmissionListSerializer(qs.order_by('-created_at', '-id'), many=True)
        return Response(serializer.data)

    def post(self, request, form_id: int, *args, **kwargs):
        serializer = SubmissionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        submission, token = submission_binder.create_submission(
            form_id,
            serializer.validated_data['versionSha'],
            serializer.validated_data['data'],
            user=request.user,
        )
        payload = {
            'id': submission.id,
            'formId': submission.form_id,
            'versionSha': submission.version.sha,
            'submittedAt': submission.created_at,
        }
        if token is not None:
            payload['token'] = token
        return Response(payload, status=status.HTTP_201_CREATED)


class SubmissionDetailView(APIView):
    permission_classes = (AllowAny,)

    def get(self, request, id: int, *args, **kwargs):
        submission = get_object_or_404(
            sub_models.Submission.objects.select_related('form', 'version', 'created_by'),
            pk=id,
        )
        token = request.query_params.get('token')
        access_control.require_submission_access(submission, request.user, token)

        context = {'is_form_owner': form_access.can_manage_form(submission.form, request.user)}
        serializer = SubmissionDetailSerializer(submission, context=context)
        return Response(serializer.data)


class MySubmissionListView(APIView):
    """Submissions made by the authenticated caller, newest first."""
    permission_classes = (IsAuthenticated,)

    def get(self, request, *args, **kwargs):
        qs = (
            sub_models.Submission.objects
            .filter(created_by=request.user)
            .select_related('form', 'form__created_by', 'version')
            .order_by('-created_at', '-id')
        )
        return Response(MySubmissionSerializer(qs, many=True).data)
