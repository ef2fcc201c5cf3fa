from django.contrib import admin
from django.db.models import Count
from .models import Team

@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ('name', 'logo', 'get_matches_count', 'created_at')
    search_fields = ('name',)
    ordering = ('name',)

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(
            matches_count=Count('home_matches', distinct=True) + Count('away_matches', distinct=True)
        )

    def get_matches_count(self, obj):
        return obj.matches_count
    get_matches_count.short_description = 'Matches'
