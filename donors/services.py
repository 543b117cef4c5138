import logging

from django.db import DatabaseError, IntegrityError, transaction

from .models import BloodDonor
from .validators import clean_phone_number

logger = logging.getLogger(__name__)

DUPLICATE_PHONE_MESSAGE = "A donor with this phone number already exists. Phone numbers must be unique."


class DonorRegistrationError(Exception):
    pass


class DuplicatePhoneError(DonorRegistrationError):
    def __init__(self, message=DUPLICATE_PHONE_MESSAGE):
        super().__init__(message)


def is_duplicate_phone(phone: str | None) -> bool:
    phone = clean_phone_number(phone)
    if not phone:
        return False
    try:
        return BloodDonor.objects.filter(phone_number=phone).exists()
    except DatabaseError:
        # The unique constraint still guards the insert
        logger.exception("Error checking duplicate phone %s", phone)
        return False


def register_donor(data: dict) -> BloodDonor:
    """Create one donor record from already validated form data."""
    phone = clean_phone_number(data.get("phone_number"))
    try:
        with transaction.atomic():
            donor = BloodDonor.objects.create(
                first_name=(data.get("first_name") or "").strip(),
                last_name=(data.get("last_name") or "").strip(),
                gender=data.get("gender") or "",
                phone_number=phone,
                blood_group=data.get("blood_group") or "",
                last_donation_date=data["last_donation_date"],
            )
    except IntegrityError as e:
        if is_duplicate_phone(phone):
            raise DuplicatePhoneError() from e
        raise DonorRegistrationError(str(e)) from e

    logger.info("Registered donor id=%s blood_group=%s", donor.pk, donor.blood_group)
    return donor


def search_donors(blood_group: str, last_donation_before) -> list[dict]:
    qs = BloodDonor.objects.filter(
        blood_group=blood_group,
        last_donation_date__lte=last_donation_before,
    )
    donors = [
        {
            "name": donor.full_name,
            "phone": donor.phone_number,
            "blood_group": donor.get_blood_group_display(),
            "last_donation": donor.last_donation_date,
        }
        for donor in qs
    ]
    logger.info("Search results: found %s donors for blood_group=%s before=%s", len(donors), blood_group, last_donation_before)
    return donors
