import datetime
from unittest.mock import patch

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from .models import BloodDonor
from .services import DonorRegistrationError


def days_ago(n):
    return timezone.localdate() - datetime.timedelta(days=n)


class RegisterViewTests(TestCase):
    def setUp(self):
        self.url = reverse("donors:register")
        self.data = {
            "first_name": "Meera",
            "last_name": "Iyer",
            "gender": "female",
            "phone_number": "+919876543210",
            "blood_group": "AB+",
            "last_donation_date": days_ago(100).isoformat(),
        }

    def test_get_renders_form(self):
        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, 200)
        self.assertTemplateUsed(resp, "donors/register.html")
        self.assertContains(resp, "Blood Donor Registration Form")
        self.assertContains(resp, 'name="phone_number"')

    def test_post_creates_donor(self):
        resp = self.client.post(self.url, self.data)
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, "Donor Registered Successfully")
        donor = BloodDonor.objects.get()
        self.assertEqual(donor.phone_number, "+919876543210")
        self.assertEqual(donor.blood_group, "AB+")

    def test_invalid_post_rerenders_with_errors(self):
        self.data["phone_number"] = "123"
        resp = self.client.post(self.url, self.data)
        self.assertEqual(resp.status_code, 200)
        self.assertTemplateUsed(resp, "donors/register.html")
        self.assertContains(resp, "Invalid phone number")
        self.assertFalse(BloodDonor.objects.exists())

    def test_duplicate_phone_is_reported(self):
        self.client.post(self.url, self.data)
        self.data["first_name"] = "Someone"
        resp = self.client.post(self.url, self.data)
        self.assertContains(resp, "A donor with this phone number already exists.")
        self.assertEqual(BloodDonor.objects.count(), 1)

    def test_save_failure_shows_error_page(self):
        with patch("donors.views.register_donor", side_effect=DonorRegistrationError("disk full")):
            with self.assertLogs("donors.views", level="ERROR"):
                resp = self.client.post(self.url, self.data)
        self.assertEqual(resp.status_code, 400)
        self.assertTemplateUsed(resp, "donors/error.html")
        self.assertContains(resp, "Save Failed: disk full", status_code=400)

    def test_other_methods_not_allowed(self):
        resp = self.client.put(self.url)
        self.assertEqual(resp.status_code, 405)

    def test_root_redirects_to_registration(self):
        resp = self.client.get("/")
        self.assertRedirects(resp, self.url)


class SearchViewTests(TestCase):
    def setUp(self):
        self.url = reverse("donors:search")
        BloodDonor.objects.create(
            first_name="Kiran", last_name="Rao", gender="male",
            phone_number="9000000001", blood_group="B+", last_donation_date=days_ago(150),
        )
        BloodDonor.objects.create(
            first_name="Lata", last_name="Sen", gender="female",
            phone_number="9000000002", blood_group="B+", last_donation_date=days_ago(20),
        )

    def test_get_renders_form(self):
        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, "Blood Donor Search")
        self.assertContains(resp, "at least 3 months (90 days) ago")

    def test_post_lists_eligible_donors(self):
        before = days_ago(90)
        resp = self.client.post(self.url, {"blood_group": "B+", "last_donation_date": before.isoformat()})
        self.assertEqual(resp.status_code, 200)
        self.assertTemplateUsed(resp, "donors/search_results.html")
        self.assertContains(resp, "Found 1 eligible donor(s)")
        self.assertContains(resp, "Blood Group: B+")
        self.assertContains(resp, f"Last Donation Before: {before:%Y-%m-%d}")
        self.assertContains(resp, "Kiran Rao")
        self.assertNotContains(resp, "Lata Sen")
        self.assertContains(resp, "New Search")

    def test_no_results_hides_table(self):
        resp = self.client.post(self.url, {"blood_group": "O-", "last_donation_date": days_ago(90).isoformat()})
        self.assertContains(resp, "Found 0 eligible donor(s)")
        self.assertNotContains(resp, "<table>")

    def test_missing_fields(self):
        resp = self.client.post(self.url, {})
        self.assertEqual(resp.status_code, 200)
        self.assertTemplateUsed(resp, "donors/search.html")
        self.assertContains(resp, "Please fill in all required fields")
