from django.contrib import admin

from . import models


class SubmissionTokenInline(admin.StackedInline):
    model = models.SubmissionToken
    extra = 0
    can_delete = False
    readonly_fields = ('token_hash', 'created_at')


class SubmissionAdmin(admin.ModelAdmin):
    list_display = ('id', 'form', 'version', 'created_by', 'created_at')
    list_filter = ('form',)
    search_fields = ('created_by__username', 'version__sha')
    readonly_fields = ('form', 'version', 'data', 'created_by', 'updated_by', 'created_at', 'updated_at')
    inlines = (SubmissionTokenInline,)
    date_hierarchy = 'created_at'


admin.site.register(models.Submission, SubmissionAdmin)
