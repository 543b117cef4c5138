import datetime
from io import StringIO
from unittest.mock import patch

from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase, override_settings
from django.utils import timezone

from .forms import DonorRegistrationForm, DonorSearchForm
from .models import BloodDonor
from .services import (
    DuplicatePhoneError,
    is_duplicate_phone,
    register_donor,
    search_donors,
)
from .validators import (
    clean_phone_number,
    is_valid_phone_number,
    validate_phone_number,
    validate_not_future,
)


def days_ago(n):
    return timezone.localdate() - datetime.timedelta(days=n)


def make_donor(**kwargs):
    data = {
        "first_name": "Asha",
        "last_name": "Nair",
        "gender": "female",
        "phone_number": "9876543210",
        "blood_group": "O+",
        "last_donation_date": days_ago(200),
    }
    data.update(kwargs)
    return BloodDonor.objects.create(**data)


class PhoneValidationTests(SimpleTestCase):
    def test_accepts_plain_and_country_code_numbers(self):
        for phone in ("9876543210", "+919876543210", "919876543210", "(987) 654-3210", "+1 987-654-3210"):
            self.assertTrue(is_valid_phone_number(phone), phone)

    def test_rejects_malformed_numbers(self):
        for phone in ("", "12345", "abc1234567", "98765432101234", "+12345678901234", "98765-4321x"):
            self.assertFalse(is_valid_phone_number(phone), phone)

    def test_accepts_thirteen_digit_upper_bound(self):
        self.assertTrue(is_valid_phone_number("+1234567890123"))
        self.assertFalse(is_valid_phone_number("+12345678901234"))

    def test_rejects_non_ascii_digits(self):
        for phone in ("٩٨٧٦٥٤٣٢١٠", "९८७६५४३२१०"):
            self.assertFalse(is_valid_phone_number(phone), phone)

    def test_validate_phone_number_message(self):
        with self.assertRaisesMessage(ValidationError, "Invalid phone number"):
            validate_phone_number("98765")

    def test_clean_strips_separators(self):
        self.assertEqual(clean_phone_number(" (987) 654-3210 "), "9876543210")
        self.assertEqual(clean_phone_number(None), "")


class DateValidationTests(SimpleTestCase):
    def test_today_is_not_future(self):
        validate_not_future(timezone.localdate())

    def test_tomorrow_is_rejected(self):
        with self.assertRaisesMessage(ValidationError, "cannot be a future date"):
            validate_not_future(timezone.localdate() + datetime.timedelta(days=1))


class DuplicatePhoneTests(TestCase):
    def test_existing_phone_is_duplicate(self):
        make_donor(phone_number="9876543210")
        self.assertTrue(is_duplicate_phone("987-654-3210"))
        self.assertFalse(is_duplicate_phone("9123456789"))

    def test_database_error_is_not_duplicate(self):
        with patch.object(BloodDonor.objects, "filter", side_effect=DatabaseError("down")):
            with self.assertLogs("donors.services", level="ERROR"):
                self.assertFalse(is_duplicate_phone("9876543210"))


class RegisterDonorTests(TestCase):
    def test_creates_record_with_clean_phone(self):
        donor = register_donor({
            "first_name": " Ravi ",
            "last_name": "Kumar",
            "gender": "male",
            "phone_number": "+91 98765-43210",
            "blood_group": "B-",
            "last_donation_date": days_ago(10),
        })
        donor.refresh_from_db()
        self.assertEqual(donor.first_name, "Ravi")
        self.assertEqual(donor.phone_number, "+919876543210")
        self.assertEqual(BloodDonor.objects.count(), 1)

    def test_unique_constraint_raises_duplicate_error(self):
        make_donor(phone_number="9876543210")
        with self.assertRaises(DuplicatePhoneError):
            register_donor({
                "first_name": "Ravi",
                "last_name": "Kumar",
                "gender": "male",
                "phone_number": "9876543210",
                "blood_group": "B-",
                "last_donation_date": days_ago(10),
            })
        self.assertEqual(BloodDonor.objects.count(), 1)


class RegistrationFormTests(TestCase):
    def form_data(self, **kwargs):
        data = {
            "first_name": "Ravi",
            "last_name": "Kumar",
            "gender": "male",
            "phone_number": "9876543210",
            "blood_group": "A+",
            "last_donation_date": days_ago(30).isoformat(),
        }
        data.update(kwargs)
        return data

    def test_valid_form_normalizes_phone(self):
        form = DonorRegistrationForm(data=self.form_data(phone_number="(987) 654-3210"))
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data["phone_number"], "9876543210")

    def test_all_fields_required(self):
        form = DonorRegistrationForm(data={})
        self.assertFalse(form.is_valid())
        self.assertEqual(
            set(form.errors),
            {"first_name", "last_name", "gender", "phone_number", "blood_group", "last_donation_date"},
        )

    def test_invalid_phone(self):
        form = DonorRegistrationForm(data=self.form_data(phone_number="12345"))
        self.assertFalse(form.is_valid())
        self.assertIn("Invalid phone number", form.errors["phone_number"][0])

    def test_duplicate_phone(self):
        make_donor(phone_number="9876543210")
        form = DonorRegistrationForm(data=self.form_data(phone_number="98765 43210"))
        self.assertFalse(form.is_valid())
        self.assertEqual(
            form.errors["phone_number"],
            ["A donor with this phone number already exists. Phone numbers must be unique."],
        )

    def test_non_ascii_digits_rejected_when_ascii_number_exists(self):
        make_donor(phone_number="9876543210")
        form = DonorRegistrationForm(data=self.form_data(phone_number="٩٨٧٦٥٤٣٢١٠"))
        self.assertFalse(form.is_valid())
        self.assertIn("Invalid phone number", form.errors["phone_number"][0])
        self.assertEqual(BloodDonor.objects.count(), 1)

    def test_unique_check_skips_phone_only(self):
        make_donor(phone_number="9876543210")
        form = DonorRegistrationForm(data=self.form_data(phone_number="9876543210"))
        self.assertFalse(form.is_valid())
        self.assertEqual(
            form.errors["phone_number"],
            ["A donor with this phone number already exists. Phone numbers must be unique."],
        )
        with patch.object(BloodDonor, "validate_unique") as validate_unique:
            DonorRegistrationForm(data=self.form_data(phone_number="9123456789")).is_valid()
        self.assertIn("phone_number", validate_unique.call_args.kwargs["exclude"])

    def test_future_date(self):
        tomorrow = timezone.localdate() + datetime.timedelta(days=1)
        form = DonorRegistrationForm(data=self.form_data(last_donation_date=tomorrow.isoformat()))
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors["last_donation_date"], ["Last Donation Date cannot be a future date."])

    def test_unknown_blood_group(self):
        form = DonorRegistrationForm(data=self.form_data(blood_group="C+"))
        self.assertFalse(form.is_valid())
        self.assertIn("blood_group", form.errors)


class SearchFormTests(SimpleTestCase):
    def test_missing_fields(self):
        form = DonorSearchForm(data={})
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors["blood_group"], ["Please fill in all required fields"])
        self.assertEqual(form.errors["last_donation_date"], ["Please fill in all required fields"])

    def test_recent_date_is_searchable(self):
        form = DonorSearchForm(data={"blood_group": "O+", "last_donation_date": timezone.localdate().isoformat()})
        self.assertTrue(form.is_valid(), form.errors)

    def test_help_text_mentions_interval(self):
        form = DonorSearchForm()
        self.assertEqual(
            form.fields["last_donation_date"].help_text,
            "Enter a date that is at least 3 months (90 days) ago from today",
        )

    @override_settings(DONOR_ELIGIBILITY_DAYS=30)
    def test_help_text_follows_settings(self):
        form = DonorSearchForm()
        self.assertEqual(form.fields["last_donation_date"].help_text, "Enter a date that is at least 30 days ago from today")


class SearchDonorsTests(TestCase):
    def test_filters_on_group_and_date(self):
        cutoff = days_ago(90)
        make_donor(first_name="Old", phone_number="9000000001", last_donation_date=days_ago(120))
        make_donor(first_name="Edge", phone_number="9000000002", last_donation_date=cutoff)
        make_donor(first_name="Recent", phone_number="9000000003", last_donation_date=days_ago(30))
        make_donor(first_name="Other", phone_number="9000000004", blood_group="A-", last_donation_date=days_ago(300))

        with self.assertLogs("donors.services", level="INFO") as cm:
            donors = search_donors("O+", cutoff)

        self.assertEqual([d["name"] for d in donors], ["Old Nair", "Edge Nair"])
        self.assertEqual(donors[0]["phone"], "9000000001")
        self.assertEqual(donors[0]["blood_group"], "O+")
        self.assertEqual(donors[1]["last_donation"], cutoff)
        self.assertIn("found 2 donors", cm.output[0])

    def test_no_matches(self):
        self.assertEqual(search_donors("AB-", timezone.localdate()), [])


class FindDonorsCommandTests(TestCase):
    def test_lists_eligible_donors(self):
        make_donor(first_name="Old", phone_number="9000000001", last_donation_date=days_ago(120))
        make_donor(first_name="Recent", phone_number="9000000002", last_donation_date=days_ago(30))
        out = StringIO()
        call_command("find_donors", "--blood-group", "o+", stdout=out)
        output = out.getvalue()
        self.assertIn("Old Nair\t9000000001", output)
        self.assertNotIn("Recent", output)
        self.assertIn("Found 1 eligible donor(s)", output)

    def test_explicit_date(self):
        make_donor(phone_number="9000000002", last_donation_date=days_ago(30))
        out = StringIO()
        call_command("find_donors", "--blood-group", "O+", "--before", timezone.localdate().isoformat(), stdout=out)
        self.assertIn("Found 1 eligible donor(s)", out.getvalue())

    def test_rejects_unknown_group(self):
        with self.assertRaises(CommandError):
            call_command("find_donors", "--blood-group", "X")

    def test_rejects_bad_date(self):
        with self.assertRaises(CommandError):
            call_command("find_donors", "--blood-group", "O+", "--before", "17/10/2026")
