# views package for forms
from .form_views import (
    FormListCreateView,
    FormDetailView,
    FormSubmitSchemaView,
)
from .version_views import (
    FormVersionListCreateView,
    FormVersionDetailView,
    FormVersionLiveView,
)

__all__ = [
    'FormListCreateView',
    'FormDetailView',
    'FormSubmitSchemaView',
    'FormVersionListCreateView',
    'FormVersionDetailView',
    'FormVersionLiveView',
]
