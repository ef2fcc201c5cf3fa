from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.models import User
from .models import Profile


class ProfileInline(admin.StackedInline):
    model = Profile
    can_delete = False
    verbose_name_plural = 'profile'
    fk_name = 'user'


class CustomUserAdmin(BaseUserAdmin):
    inlines = (ProfileInline, )

    def get_credits(self, instance):
        return instance.profile.credits
    get_credits.short_description = 'Credits'

    def get_is_admin(self, instance):
        return instance.profile.is_admin
    get_is_admin.short_description = 'Admin'
    get_is_admin.boolean = True

    list_display = ('username', 'email', 'is_staff',
                    'get_credits', 'get_is_admin')
    list_select_related = ('profile',)


admin.site.unregister(User)
admin.site.register(User, CustomUserAdmin)
