from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('v1/', include('apps.catalog.api.urls')),
    path('', include('apps.catalog.urls')),
]
