from django.test import Client, SimpleTestCase, override_settings


@override_settings(DEBUG=False)
class NotFoundPageTests(SimpleTestCase):
    def test_unknown_url_renders_404_page(self):
        response = self.client.get("/donors/unknown/")
        self.assertEqual(response.status_code, 404)
        self.assertTemplateUsed(response, "404.html")
        self.assertContains(response, "/donors/unknown/", status_code=404)


class CsrfFailureTests(SimpleTestCase):
    def test_missing_token_renders_csrf_page(self):
        client = Client(enforce_csrf_checks=True)
        response = client.post("/donors/search/", {"blood_group": "O+"})
        self.assertEqual(response.status_code, 403)
        self.assertTemplateUsed(response, "csrf_failure.html")
        self.assertContains(response, "Form expired", status_code=403)
