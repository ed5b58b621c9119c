from django.contrib import admin
from django.http import HttpResponse
from django.urls import include, path

urlpatterns = [
    path('favicon.ico', lambda request: HttpResponse(status=204), name='favicon'),
    path('admin/', admin.site.urls),
    path('api/accounts/', include('accounts.urls')),
    path('api/forms/', include('forms.urls')),
    path('api/submissions/', include('submissions.urls')),
]
