# communication/admin.py
from django.contrib import admin
from .models import ScheduledNotification

@admin.register(ScheduledNotification)
class ScheduledNotificationAdmin(admin.ModelAdmin):
    list_display = ('title', 'patient', 'fires_at', 'status', 'sent_at')
    list_filter = ('status', 'related_object_type', 'fires_at')
    search_fields = ('title', 'body', 'patient__first_name', 'patient__last_name', 'patient__email')
    readonly_fields = ('created_at', 'sent_at')
    date_hierarchy = 'fires_at'
