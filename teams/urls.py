from django.urls import path
from . import views

app_name = 'teams'

urlpatterns = [
    path('api/teams/', views.list_teams, name='list_teams'),
    path('api/admin/teams/', views.admin_teams, name='admin_teams'),
    path('api/admin/teams/<int:team_id>/', views.edit_team, name='edit_team'),
    path('api/admin/teams/<int:team_id>/delete/', views.delete_team, name='delete_team'),
]
