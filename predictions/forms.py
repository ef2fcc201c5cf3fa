from django import forms
from django.db import models

MAX_PREDICTED_GOALS = 99


class PredictionForm(forms.Form):
    match_id = forms.IntegerField(min_value=1, max_value=models.BigIntegerField.MAX_BIGINT)
    predicted_home_score = forms.IntegerField(min_value=0, max_value=MAX_PREDICTED_GOALS)
    predicted_away_score = forms.IntegerField(min_value=0, max_value=MAX_PREDICTED_GOALS)
