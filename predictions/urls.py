from django.urls import path
from . import views

app_name = 'predictions'

urlpatterns = [
    path('predictions/mine/', views.my_predictions_view, name='my_predictions'),
    path('leaderboard/', views.leaderboard_view, name='leaderboard'),
    path('api/predictions/', views.predictions_api, name='predictions_api'),
    path('api/leaderboard/', views.get_leaderboard_json, name='get_leaderboard_json'),
]
