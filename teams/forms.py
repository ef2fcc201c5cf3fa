from django import forms
from teams.models import Team


class TeamEntryForm(forms.ModelForm):
    class Meta:
        model = Team
        fields = ['name', 'logo']
        widgets = {
            'logo': forms.TextInput(attrs={'placeholder': '/teams/arsenal.png'}),
        }

    def clean_name(self):
        name = self.cleaned_data['name'].strip()
        clash = Team.objects.filter(name__iexact=name).exclude(pk=self.instance.pk)
        if clash.exists():
            raise forms.ValidationError(f'A team named "{clash.first().name}" already exists.')
        return name

    def clean_logo(self):
        # Stored as given: a path under the static site or an absolute URL.
        logo = (self.cleaned_data.get('logo') or '').strip()
        if logo and not logo.startswith(('/', 'http://', 'https://')):
            raise forms.ValidationError('Logo must be an absolute path or an http(s) URL.')
        return logo or None
