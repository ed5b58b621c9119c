from django.urls import include, path

from forms.views import (
    FormDetailView,
    FormListCreateView,
    FormSubmitSchemaView,
    FormVersionDetailView,
    FormVersionListCreateView,
    FormVersionLiveView,
)

urlpatterns = [
    path('', FormListCreateView.as_view(), name='forms-list-create'),
    path('<int:id>/', FormDetailView.as_view(), name='forms-detail'),
    path('<int:id>/submit/', FormSubmitSchemaView.as_view(), name='forms-submit-schema'),
    path('<int:form_id>/versions/', FormVersionListCreateView.as_view(), name='form-versions-list-create'),
    path('<int:form_id>/versions/<str:sha>/', FormVersionDetailView.as_view(), name='form-versions-detail'),
    path('<int:form_id>/versions/<str:sha>/live/', FormVersionLiveView.as_view(), name='form-versions-live'),
    path('<int:form_id>/submissions/', include('submissions.form_urls')),
]
