from django import forms
from django.db import models
from django.contrib.auth.models import User
from django.contrib.auth.forms import UserCreationForm
from django.contrib.auth.forms import AuthenticationForm as LoginForm


class UserRegisterForm(UserCreationForm):
    email = forms.EmailField(required=True, help_text="Email is required.")

    class Meta:
        model = User
        fields = ['username', 'email']

    def __init__(self, *args, **kwargs):
        super(UserRegisterForm, self).__init__(*args, **kwargs)
        for field_name in ['password1', 'password2']:
            if field_name in self.fields:
                self.fields[field_name].help_text = None
        self.fields['password1'].label = "Password"
        self.fields['password2'].label = "Confirm password"

    def clean_email(self):
        email = self.cleaned_data['email']
        if User.objects.filter(email__iexact=email).exists():
            raise forms.ValidationError("This email is already registered.")
        return email


class CustomLoginForm(LoginForm):
    def __init__(self, *args, **kwargs):
        super(CustomLoginForm, self).__init__(*args, **kwargs)
        self.fields['username'].label = "Username"
        self.fields['password'].label = "Password"


class AdminFlagForm(forms.Form):
    user_id = forms.IntegerField(min_value=1, max_value=models.BigIntegerField.MAX_BIGINT)
    is_admin = forms.NullBooleanField()

    def clean_is_admin(self):
        # NullBooleanField maps anything unrecognised to None.
        is_admin = self.cleaned_data.get('is_admin')
        if is_admin is None:
            raise forms.ValidationError('is_admin must be true or false.')
        return is_admin
