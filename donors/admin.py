from django.contrib import admin
from .models import BloodDonor


@admin.register(BloodDonor)
class BloodDonorAdmin(admin.ModelAdmin):
    list_display = ("id", "first_name", "last_name", "gender", "phone_number", "blood_group", "last_donation_date", "created_at")
    search_fields = ("first_name", "last_name", "phone_number")
    list_filter = ("gender", "blood_group", "last_donation_date")
    readonly_fields = ("created_at",)
