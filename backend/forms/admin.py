from django.contrib import admin

from . import models


class FormVersionInline(admin.TabularInline):
    model = models.FormVersion
    extra = 0
    fields = ('sha', 'description', 'is_published', 'published_at', 'created_by', 'created_at')
    readonly_fields = ('sha', 'is_published', 'published_at', 'created_by', 'created_at')
    can_delete = False
    show_change_link = True


class FormAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'visibility', 'created_by', 'live_version', 'created_at')
    list_filter = ('visibility',)
    search_fields = ('name', 'created_by__username')
    # the live pointer only moves through the publish service
    readonly_fields = ('live_version', 'created_at', 'updated_at')
    inlines = (FormVersionInline,)


class FormVersionAdmin(admin.ModelAdmin):
    list_display = ('sha', 'form', 'is_published', 'created_by', 'created_at')
    list_filter = ('is_published',)
    search_fields = ('sha', 'form__name')
    readonly_fields = ('form', 'sha', 'parent_sha', 'salt', 'schema', 'is_published', 'published_at', 'created_by', 'created_at', 'updated_at')

    def has_add_permission(self, request):
        return False


admin.site.register(models.Form, FormAdmin)
admin.site.register(models.FormVersion, FormVersionAdmin)
