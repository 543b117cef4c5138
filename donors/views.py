import logging

from django.shortcuts import render
from django.views.decorators.csrf import csrf_protect
from django.views.decorators.http import require_http_methods

from .forms import DonorRegistrationForm, DonorSearchForm
from .services import DonorRegistrationError, register_donor, search_donors

logger = logging.getLogger(__name__)


@csrf_protect
@require_http_methods(["GET", "POST"])
def register(request):
    if request.method == "POST":
        form = DonorRegistrationForm(request.POST)
        if form.is_valid():
            try:
                donor = register_donor(form.cleaned_data)
            except DonorRegistrationError as e:
                logger.exception("Error saving donor record")
                return render(
                    request,
                    "donors/error.html",
                    {"title": "Error", "message": f"Save Failed: {e}"},
                    status=400,
                )
            return render(request, "donors/register_success.html", {"donor": donor})
        logger.info("Donor registration rejected: %s", form.errors.as_json())
    else:
        form = DonorRegistrationForm()
    return render(request, "donors/register.html", {"form": form})


@csrf_protect
@require_http_methods(["GET", "POST"])
def search(request):
    if request.method == "POST":
        form = DonorSearchForm(request.POST)
        if form.is_valid():
            blood_group = form.cleaned_data["blood_group"]
            before = form.cleaned_data["last_donation_date"]
            donors = search_donors(blood_group, before)
            context = {
                "donors": donors,
                "blood_group": blood_group,
                "last_donation_before": before,
            }
            return render(request, "donors/search_results.html", context)
    else:
        form = DonorSearchForm()
    return render(request, "donors/search.html", {"form": form})
