# healthcare/admin.py
from django.contrib import admin
from .models import Patient, FastingPlan, Suspension


class FastingPlanInline(admin.StackedInline):
    model = FastingPlan
    extra = 0
    fields = ('solids', 'clear_liquids', 'cow_milk', 'breast_milk', 'start_at')


class SuspensionInline(admin.TabularInline):
    model = Suspension
    extra = 0
    fields = ('medication_name', 'suspend_at', 'resume_at')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('last_name', 'first_name', 'cedula', 'email', 'surgery_date_time', 'surgeon', 'anesthesiologist')
    list_filter = ('sex', 'surgery_date_time', 'provider')
    search_fields = ('first_name', 'last_name', 'cedula', 'email')
    raw_id_fields = ('surgeon', 'anesthesiologist', 'provider', 'surgical_consent', 'anesthesia_consent')
    readonly_fields = (
        'surgical_signature_image', 'surgical_signed_date',
        'anesthesia_signature_image', 'anesthesia_signed_date',
        'created_at', 'updated_at'
    )
    inlines = [FastingPlanInline, SuspensionInline]
    date_hierarchy = 'surgery_date_time'

    fieldsets = (
        ('Patient', {'fields': ('first_name', 'last_name', 'email', 'cedula', 'date_of_birth', 'sex', 'provider')}),
        ('Surgery', {'fields': ('surgical_procedure', 'surgery_date_time', 'surgeon', 'surgical_consent')}),
        ('Anesthesia', {'fields': ('anesthesiologist', 'anesthesia_consent', 'anesthesia_instructions', 'medication_to_suspend')}),
        ('Signatures', {'fields': (
            'surgical_signature_image', 'surgical_signed_date',
            'anesthesia_signature_image', 'anesthesia_signed_date'
        )}),
        ('Record', {'fields': ('created_at', 'updated_at')}),
    )


@admin.register(Suspension)
class SuspensionAdmin(admin.ModelAdmin):
    list_display = ('medication_name', 'patient', 'suspend_at', 'resume_at')
    search_fields = ('medication_name', 'patient__last_name', 'patient__cedula')
    list_filter = ('suspend_at',)
