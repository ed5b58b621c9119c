from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient


class MeViewTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.user = User.objects.create_user(username='octocat', email='octo@example.com', github_id='583231')
        self.client = APIClient()

    def test_me_requires_authentication(self):
        resp = self.client.get('/api/accounts/me/')
        self.assertEqual(resp.status_code, 401)

    def test_me_returns_github_identity(self):
        self.client.force_authenticate(self.user)
        resp = self.client.get('/api/accounts/me/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['username'], 'octocat')
        self.assertEqual(resp.data['githubId'], '583231')
        self.assertEqual(resp.data['name'], 'octocat')
