from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    list_display = ('username', 'email', 'github_id', 'is_staff', 'date_joined')
    search_fields = ('username', 'email', 'github_id')
    fieldsets = DjangoUserAdmin.fieldsets + (
        ('GitHub', {'fields': ('github_id', 'avatar_url')}),
    )
