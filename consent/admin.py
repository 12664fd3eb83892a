# consent/admin.py
from django.contrib import admin
from .models import ConsentForm

@admin.register(ConsentForm)
class ConsentFormAdmin(admin.ModelAdmin):
    list_display = ('file_name', 'type', 'file_size', 'created_at')
    list_filter = ('type',)
    search_fields = ('file_name',)
    readonly_fields = ('file_size', 'created_at')
