from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from forms.services import form_service

SCHEMA_ABC = {'display': 'form', 'components': [{'type': 'textfield', 'key': 'name', 'label': 'Name'}]}
SCHEMA_DEF = {'display': 'form', 'components': [
    {'type': 'textfield', 'key': 'name', 'label': 'Full name'},
    {'type': 'checkbox', 'key': 'subscribe'},
]}


class SubmissionApiTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.owner = User.objects.create_user(username='owner')
        self.stranger = User.objects.create_user(username='stranger')
        self.form = form_service.create_form(self.owner, 'Newsletter', schema=SCHEMA_ABC)
        self.url = f'/api/forms/{self.form.id}/submissions/'
        self.client = APIClient()

    def _owner_client(self):
        client = APIClient()
        client.force_authenticate(self.owner)
        return client

    def test_anonymous_submit_and_read_back(self):
        sha = self.client.get(f'/api/forms/{self.form.id}/submit/').data['versionSha']
        resp = self.client.post(self.url, {'versionSha': sha, 'data': {'name': 'Ada'}}, format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['versionSha'], sha)
        self.assertEqual(resp.data['formId'], self.form.id)
        token = resp.data['token']
        detail_url = f'/api/submissions/{resp.data["id"]}/'

        self.assertEqual(self.client.get(detail_url).status_code, 401)
        self.assertEqual(self.client.get(detail_url, {'token': 'nope'}).status_code, 403)
        resp = self.client.get(detail_url, {'token': token})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['data'], {'name': 'Ada'})
        self.assertTrue(resp.data['isAnonymous'])
        self.assertFalse(resp.data['isFormOwner'])

        stranger = APIClient()
        stranger.force_authenticate(self.stranger)
        self.assertEqual(stranger.get(detail_url).status_code, 403)
        self.assertTrue(self._owner_client().get(detail_url).data['isFormOwner'])

    def test_authenticated_submit_has_no_token(self):
        self.client.force_authenticate(self.stranger)
        resp = self.client.post(self.url, {'versionSha': self.form.live_version.sha, 'data': {'name': 'Bo'}}, format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertNotIn('token', resp.data)
        detail = self.client.get(f'/api/submissions/{resp.data["id"]}/')
        self.assertEqual(detail.status_code, 200)
        self.assertEqual(detail.data['submitterInformation']['id'], self.stranger.id)

    def test_submit_errors(self):
        resp = self.client.post(self.url, {'versionSha': 'a' * 64, 'data': {}}, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['code'], 'invalid_version')

        resp = self.client.post(self.url, {'data': {}}, format='json')
        self.assertEqual(resp.status_code, 400)

        resp = self.client.post('/api/forms/9999/submissions/', {'versionSha': 'a' * 64, 'data': {}}, format='json')
        self.assertEqual(resp.status_code, 404)

    def test_submission_stays_bound_after_publish(self):
        abc = self.form.live_version.sha
        loaded = self.client.get(f'/api/forms/{self.form.id}/submit/').data
        self.assertEqual(loaded['versionSha'], abc)

        owner = self._owner_client()
        def_sha = owner.post(f'/api/forms/{self.form.id}/versions/', {'schema': SCHEMA_DEF}, format='json').data['sha']
        self.assertEqual(owner.put(f'/api/forms/{self.form.id}/versions/{def_sha}/live/', {}, format='json').status_code, 200)

        # submitted with the sha captured before the publish
        resp = self.client.post(self.url, {'versionSha': loaded['versionSha'], 'data': {'name': 'Ada'}}, format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['versionSha'], abc)

        detail = owner.get(f'/api/submissions/{resp.data["id"]}/').data
        self.assertEqual(detail['versionSha'], abc)
        self.assertEqual(detail['schema'], SCHEMA_ABC)

        fresh = self.client.post(self.url, {'versionSha': def_sha, 'data': {'name': 'Bo', 'subscribe': True}}, format='json')
        self.assertEqual(fresh.status_code, 201)

        listing = owner.get(self.url)
        self.assertEqual(listing.status_code, 200)
        self.assertEqual(len(listing.data), 2)
        only_abc = owner.get(self.url, {'version': abc}).data
        self.assertEqual([s['versionSha'] for s in only_abc], [abc])

    def test_listing_is_owner_only(self):
        self.assertEqual(self.client.get(self.url).status_code, 401)
        self.client.force_authenticate(self.stranger)
        self.assertEqual(self.client.get(self.url).status_code, 403)

    def test_builder_default_limits_accepted(self):
        form = form_service.create_form(self.owner, 'Contact', schema={'display': 'form', 'components': [
            {'type': 'textfield', 'key': 'name', 'validate': {'required': False, 'minLength': '', 'maxLength': ''}},
        ]})
        resp = self.client.post(
            f'/api/forms/{form.id}/submissions/',
            {'versionSha': form.live_version.sha, 'data': {'name': 'Alice'}},
            format='json',
        )
        self.assertEqual(resp.status_code, 201)


class MySubmissionsApiTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.owner = User.objects.create_user(username='owner')
        self.alice = User.objects.create_user(username='alice')
        self.bob = User.objects.create_user(username='bob')
        self.first = form_service.create_form(self.owner, 'First', description='one', schema=SCHEMA_ABC)
        self.second = form_service.create_form(self.owner, 'Second', schema=SCHEMA_ABC)

    def _submit(self, form, user=None):
        client = APIClient()
        if user is not None:
            client.force_authenticate(user)
        resp = client.post(
            f'/api/forms/{form.id}/submissions/',
            {'versionSha': form.live_version.sha, 'data': {'name': 'x'}},
            format='json',
        )
        self.assertEqual(resp.status_code, 201)
        return resp.data['id']

    def test_requires_login(self):
        self.assertEqual(APIClient().get('/api/submissions/').status_code, 401)

    def test_lists_only_callers_submissions_newest_first(self):
        older = self._submit(self.first, self.alice)
        newer = self._submit(self.second, self.alice)
        self._submit(self.first, self.bob)
        self._submit(self.first)

        client = APIClient()
        client.force_authenticate(self.alice)
        resp = client.get('/api/submissions/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([row['id'] for row in resp.data], [newer, older])

        row = resp.data[1]
        self.assertEqual(row['formId'], self.first.id)
        self.assertEqual(row['formName'], 'First')
        self.assertEqual(row['formDescription'], 'one')
        self.assertEqual(row['versionSha'], self.first.live_version.sha)
        self.assertEqual(row['formOwner']['id'], self.owner.id)

    def test_form_owner_sees_only_own_rows_here(self):
        self._submit(self.first, self.alice)
        client = APIClient()
        client.force_authenticate(self.owner)
        self.assertEqual(client.get('/api/submissions/').data, [])
