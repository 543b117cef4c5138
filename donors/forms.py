from django import forms
from django.conf import settings
from django.core.validators import MaxLengthValidator

from .models import BloodDonor
from .services import DUPLICATE_PHONE_MESSAGE, is_duplicate_phone
from .validators import (
    clean_phone_number,
    validate_not_future,
    validate_phone_number,
)

REQUIRED_MESSAGE = "Please fill in all required fields"


def _eligibility_days() -> int:
    return getattr(settings, "DONOR_ELIGIBILITY_DAYS", 90)


class DonorRegistrationForm(forms.ModelForm):
    """Blood donor registration: every field is mandatory."""

    class Meta:
        model = BloodDonor
        fields = (
            "first_name",
            "last_name",
            "gender",
            "phone_number",
            "blood_group",
            "last_donation_date",
        )
        labels = {
            "phone_number": "Phone Number",
            "blood_group": "Blood Group",
            "last_donation_date": "Last Donation Date",
        }
        widgets = {
            "first_name": forms.TextInput(attrs={"class": "form-control"}),
            "last_name": forms.TextInput(attrs={"class": "form-control"}),
            "gender": forms.Select(attrs={"class": "form-control"}),
            "phone_number": forms.TextInput(attrs={"class": "form-control", "type": "tel"}),
            "blood_group": forms.Select(attrs={"class": "form-control"}),
            "last_donation_date": forms.DateInput(attrs={"class": "form-control", "type": "date"}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Free-form input such as "(987) 654-3210" is longer than the stored value
        phone_field = self.fields["phone_number"]
        phone_field.max_length = 32
        phone_field.widget.attrs["maxlength"] = 32
        phone_field.validators = [v for v in phone_field.validators if not isinstance(v, MaxLengthValidator)]

    def clean_phone_number(self):
        phone = self.cleaned_data["phone_number"]
        validate_phone_number(phone)
        phone = clean_phone_number(phone)
        if is_duplicate_phone(phone):
            raise forms.ValidationError(DUPLICATE_PHONE_MESSAGE, code="duplicate_phone")
        return phone

    def clean_last_donation_date(self):
        value = self.cleaned_data["last_donation_date"]
        validate_not_future(value)
        return value

    def validate_unique(self):
        # Duplicate phones are reported by clean_phone_number
        exclude = set(self._get_validation_exclusions())
        exclude.add("phone_number")
        try:
            self.instance.validate_unique(exclude=exclude)
        except forms.ValidationError as e:
            self._update_errors(e)


class DonorSearchForm(forms.Form):
    blood_group = forms.ChoiceField(
        label="Blood Group",
        choices=[("", "---------")] + BloodDonor.BLOOD_GROUP_CHOICES,
        error_messages={"required": REQUIRED_MESSAGE},
        widget=forms.Select(attrs={"class": "form-control"}),
    )
    last_donation_date = forms.DateField(
        label="Last Donation Date (Before)",
        help_text="Enter a date that is at least 3 months (90 days) ago from today",
        error_messages={"required": REQUIRED_MESSAGE},
        widget=forms.DateInput(attrs={"class": "form-control", "type": "date"}),
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        days = _eligibility_days()
        if not days:
            self.fields["last_donation_date"].help_text = ""
        elif days != 90:
            self.fields["last_donation_date"].help_text = f"Enter a date that is at least {days} days ago from today"
