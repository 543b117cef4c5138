import datetime

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from donors.models import BloodDonor
from donors.services import search_donors
from donors.validators import eligibility_cutoff


class Command(BaseCommand):
    help = "List donors of a blood group whose last donation was on or before a date"

    def add_arguments(self, parser):
        parser.add_argument("--blood-group", required=True, help="One of A+, A-, B+, B-, AB+, AB-, O+, O-")
        parser.add_argument("--before", default="", help="YYYY-MM-DD (default: today minus the eligibility interval)")

    def handle(self, *args, **opts):
        blood_group = opts["blood_group"].strip().upper()
        if blood_group not in dict(BloodDonor.BLOOD_GROUP_CHOICES):
            raise CommandError(f"Unknown blood group: {opts['blood_group']}")

        if opts["before"]:
            try:
                before = datetime.date.fromisoformat(opts["before"])
            except ValueError:
                raise CommandError(f"Invalid date: {opts['before']}")
        else:
            before = eligibility_cutoff(getattr(settings, "DONOR_ELIGIBILITY_DAYS", 90))

        donors = search_donors(blood_group, before)
        for d in donors:
            self.stdout.write(f"{d['name']}\t{d['phone']}\t{d['blood_group']}\t{d['last_donation']:%Y-%m-%d}")
        self.stdout.write(self.style.SUCCESS(f"Found {len(donors)} eligible donor(s) for {blood_group} before {before:%Y-%m-%d}."))
