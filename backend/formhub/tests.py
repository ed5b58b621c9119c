from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from rest_framework.test import APIClient


class SlowRequestLoggingTests(TestCase):
    @override_settings(SLOW_REQUEST_LOG_MS=0)
    def test_slow_request_logged_with_route(self):
        user = get_user_model().objects.create_user(username='owner')
        client = APIClient()
        client.force_authenticate(user)
        with self.assertLogs('django.request', level='WARNING') as logs:
            client.get('/api/forms/')
        line = next(msg for msg in logs.output if 'SLOW_REQUEST' in msg)
        self.assertIn('route=forms-list-create', line)
        self.assertIn('user=owner', line)


class ApiErrorFormatTests(TestCase):
    def test_error_body_shape(self):
        resp = APIClient().get('/api/forms/')
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.data['status_code'], 401)
        self.assertIn('detail', resp.data)
        self.assertIn('code', resp.data)

    def test_validation_errors_listed(self):
        user = get_user_model().objects.create_user(username='owner')
        client = APIClient()
        client.force_authenticate(user)
        resp = client.post('/api/forms/', {}, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['detail'], 'Validation failed.')
        self.assertIn('name', resp.data['errors'])
