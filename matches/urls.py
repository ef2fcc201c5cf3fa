from django.urls import path
from . import views

app_name = 'matches'

urlpatterns = [
    path('matches/', views.matches_page, name='matches_page'),
    path('api/matches/', views.get_matches_json, name='get_matches_json'),
    path('api/matches/<int:match_id>/', views.get_match_detail_json, name='get_match_detail_json'),
    path('api/cron/manage-matches/', views.manage_matches_view, name='manage_matches'),
    path('api/seed-matches/', views.seed_matches_view, name='seed_matches'),
    path('api/admin/matches/', views.admin_matches, name='admin_matches'),
    path('api/admin/matches/<int:match_id>/', views.edit_match, name='edit_match'),
    path('api/admin/matches/<int:match_id>/delete/', views.delete_match, name='delete_match'),
]
