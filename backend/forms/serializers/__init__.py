from .forms import (
    FormSerializer,
    FormWriteSerializer,
    FormSubmitSchemaSerializer,
)
from .versions import (
    FormVersionListSerializer,
    FormVersionSerializer,
    VersionCreateSerializer,
    VersionUpdateSerializer,
    PublishVersionSerializer,
)

__all__ = [
    'FormSerializer',
    'FormWriteSerializer',
    'FormSubmitSchemaSerializer',
    'FormVersionListSerializer',
    'FormVersionSerializer',
    'VersionCreateSerializer',
    'VersionUpdateSerializer',
    'PublishVersionSerializer',
]
