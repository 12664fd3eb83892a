# users/admin.py
from django.contrib import admin
from .models import HealthProvider, Surgeon, Anesthesiologist, Administrator, AccessToken


class CredentialAdmin(admin.ModelAdmin):
    """Accounts are created through the API or seed_demo_data; the hash is never editable here"""
    readonly_fields = ('password', 'created_at')


class ProfessionalAdmin(CredentialAdmin):
    list_display = ('professional_license_number', 'first_name', 'last_name', 'created_at')
    search_fields = ('professional_license_number', 'first_name', 'last_name')
    list_filter = ('providers',)
    filter_horizontal = ('providers',)


@admin.register(HealthProvider)
class HealthProviderAdmin(admin.ModelAdmin):
    list_display = ('name', 'phone', 'contact_email', 'created_at')
    search_fields = ('name', 'contact_email')


@admin.register(Surgeon)
class SurgeonAdmin(ProfessionalAdmin):
    list_display = ProfessionalAdmin.list_display + ('specialty',)


@admin.register(Anesthesiologist)
class AnesthesiologistAdmin(ProfessionalAdmin):
    pass


@admin.register(Administrator)
class AdministratorAdmin(CredentialAdmin):
    list_display = ('email', 'first_name', 'last_name', 'created_at')
    search_fields = ('email', 'first_name', 'last_name')


@admin.register(AccessToken)
class AccessTokenAdmin(admin.ModelAdmin):
    list_display = ('role', 'account_id', 'created')
    list_filter = ('role',)
    fields = ('role', 'account_id')
