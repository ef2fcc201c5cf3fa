from django.contrib import admin
from .models import Match

@admin.register(Match)
class MatchAdmin(admin.ModelAdmin):
    list_display = ('__str__', 'league', 'kickoff_time', 'status', 'home_score', 'away_score')
    list_filter = ('status', 'league', 'kickoff_time')
    search_fields = ('league', 'home_team__name', 'away_team__name')
    date_hierarchy = 'kickoff_time'
    readonly_fields = ('started_at', 'finished_at', 'created_at', 'updated_at')
