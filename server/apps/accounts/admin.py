"""Django admin configuration for accounts app."""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from server.apps.accounts.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin interface for the email-based User model."""

    list_display = [
        'email',
        'name',
        'is_active',
        'is_staff',
        'date_joined',
    ]

    list_filter = [
        'is_active',
        'is_staff',
    ]

    search_fields = [
        'email',
        'name',
    ]

    ordering = ['email']

    readonly_fields = ['date_joined', 'last_login', 'updated_at']

    fieldsets = (
        ('Account', {
            'fields': ('email', 'password'),
        }),
        ('Profile', {
            'fields': ('name', 'image'),
        }),
        ('Permissions', {
            'fields': (
                'is_active',
                'is_staff',
                'is_superuser',
                'groups',
                'user_permissions',
            ),
        }),
        ('Timestamps', {
            'fields': ('date_joined', 'last_login', 'updated_at'),
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'password1', 'password2'),
        }),
    )
