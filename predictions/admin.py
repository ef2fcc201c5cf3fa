from django.contrib import admin
from predictions.models import Prediction

@admin.register(Prediction)
class PredictionAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'match', 'predicted_home_score', 'predicted_away_score', 'points', 'created_at']
    list_filter = ['match__status', 'match__league', 'points']
    search_fields = ['user__username', 'match__home_team__name', 'match__away_team__name']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']
