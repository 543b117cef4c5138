from django.shortcuts import render


def error_404_view(request, exception):
    return render(request, "404.html", {"path": request.path}, status=404)


def csrf_failure(request, reason="", template_name="csrf_failure.html"):
    """Render a 403 page when a donor form is posted without a valid token.

    Usually the page was left open too long or cookies are blocked; ``reason`` is
    Django's diagnostic and is only shown in the page's small print.
    """
    return render(request, template_name, {"reason": reason}, status=403)
