from django.urls import path
from . import views

app_name = 'main'

urlpatterns = [
    path('', views.home_view, name='home'),
    path('register/', views.register_view, name='register'),
    path('login/', views.login_view, name='login'),
    path('logout/', views.logout_view, name='logout'),
    path('auth/login/', views.login_api, name='login_api'),
    path('auth/register/', views.register_api, name='register_api'),
    path('auth/logout/', views.logout_api, name='logout_api'),
    path('api/home/', views.show_home_json, name='show_home_json'),
    path('preferences/language/', views.set_language, name='set_language'),
    path('preferences/theme/', views.set_theme, name='set_theme'),
    path('api/admin/check-admin/', views.check_admin, name='check_admin'),
    path('api/admin/users/', views.admin_users, name='admin_users'),
    path('admin-panel/', views.admin_dashboard, name='admin_dashboard'),
]
