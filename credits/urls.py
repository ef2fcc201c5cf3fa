from django.urls import path
from . import views

app_name = 'credits'

urlpatterns = [
    path('api/credits/', views.get_user_credits, name='get_user_credits'),
    path('api/credits/math-challenge/', views.math_challenge, name='math_challenge'),
]
