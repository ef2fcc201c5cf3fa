from django import forms
from .models import Match


class MatchForm(forms.ModelForm):
    class Meta:
        model = Match
        fields = ['home_team', 'away_team', 'kickoff_time', 'league', 'status', 'home_score', 'away_score']
        widgets = {
            'kickoff_time': forms.DateTimeInput(attrs={'type': 'datetime-local'}),
            'league': forms.TextInput(attrs={'placeholder': 'Premier League'}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['status'].required = False
        self.fields['league'].required = False

    def clean_status(self):
        return self.cleaned_data.get('status') or Match.SCHEDULED
