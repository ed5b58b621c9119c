from django.urls import path

from submissions.views import MySubmissionListView, SubmissionDetailView

urlpatterns = [
    path('', MySubmissionListView.as_view(), name='submissions-mine'),
    path('<int:id>/', SubmissionDetailView.as_view(), name='submissions-detail'),
]
