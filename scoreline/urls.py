from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('django-admin/', admin.site.urls),
    path('', include('main.urls')),
    path('', include('teams.urls')),
    path('', include('matches.urls')),
    path('', include('predictions.urls')),
    path('', include('credits.urls')),
]
