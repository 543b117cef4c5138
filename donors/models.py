from django.db import models


class BloodDonor(models.Model):
    GENDER_CHOICES = [
        ("male", "Male"),
        ("female", "Female"),
        ("other", "Other"),
    ]
    BLOOD_GROUP_CHOICES = [
        ("A+", "A+"),
        ("A-", "A-"),
        ("B+", "B+"),
        ("B-", "B-"),
        ("AB+", "AB+"),
        ("AB-", "AB-"),
        ("O+", "O+"),
        ("O-", "O-"),
    ]

    first_name = models.CharField(max_length=150)
    last_name = models.CharField(max_length=150)
    gender = models.CharField(max_length=8, choices=GENDER_CHOICES)
    # stored without spaces, hyphens or parentheses
    phone_number = models.CharField(max_length=16, unique=True)
    blood_group = models.CharField(max_length=3, choices=BLOOD_GROUP_CHOICES, db_index=True)
    last_donation_date = models.DateField(db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("last_donation_date", "last_name", "first_name")

    def __str__(self) -> str:
        return f"{self.full_name} ({self.blood_group})"

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}"
