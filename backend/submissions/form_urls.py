from django.urls import path

from submissions.views import FormSubmissionListCreateView

# mounted under /api/forms/<form_id>/submissions/
urlpatterns = [
    path('', FormSubmissionListCreateView.as_view(), name='form-submissions-list-create'),
]
