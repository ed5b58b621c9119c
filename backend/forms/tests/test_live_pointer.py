from unittest import mock

from django.contrib.auth import get_user_model
from django.db import OperationalError
from django.test import TestCase

from formhub.exceptions import AccessDenied, AuthRequired, Conflict, Internal, NotFound
from forms import models as form_models
from forms.services import live_pointer, version_store

SCHEMA_A = {'display': 'form', 'components': [{'type': 'textfield', 'key': 'a'}]}
SCHEMA_B = {'display': 'form', 'components': [{'type': 'textfield', 'key': 'b'}]}


class PublishVersionTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.owner = User.objects.create_user(username='owner')
        self.form = form_models.Form.objects.create(name='Survey', created_by=self.owner)
        self.v_a = version_store.create_version(self.form, SCHEMA_A, self.owner)
        self.v_b = version_store.create_version(self.form, SCHEMA_B, self.owner)

    def test_no_live_version_initially(self):
        self.assertIsNone(live_pointer.get_live_version(self.form))
        self.assertIsNone(self.form.live_version_sha)

    def test_publish_then_republish(self):
        live_pointer.publish_version(self.form.id, self.v_a.sha, self.owner)
        self.form.refresh_from_db()
        self.assertEqual(self.form.live_version_sha, self.v_a.sha)

        form = live_pointer.publish_version(self.form.id, self.v_b.sha, self.owner)
        self.assertEqual(form.live_version_sha, self.v_b.sha)
        self.form.refresh_from_db()
        self.assertEqual(self.form.live_version_id, self.v_b.id)

        # previously live stays published as history
        self.v_a.refresh_from_db()
        self.v_b.refresh_from_db()
        self.assertTrue(self.v_a.is_published)
        self.assertTrue(self.v_b.is_published)
        self.assertFalse(self.v_a.is_live)
        self.assertTrue(self.v_b.is_live)

    def test_republishing_keeps_original_timestamp(self):
        live_pointer.publish_version(self.form.id, self.v_a.sha, self.owner)
        self.v_a.refresh_from_db()
        first = self.v_a.published_at
        live_pointer.publish_version(self.form.id, self.v_b.sha, self.owner)
        live_pointer.publish_version(self.form.id, self.v_a.sha, self.owner)
        self.v_a.refresh_from_db()
        self.assertEqual(self.v_a.published_at, first)

    def test_live_pointer_always_belongs_to_form(self):
        live_pointer.publish_version(self.form.id, self.v_a.sha, self.owner)
        self.form.refresh_from_db()
        live = self.form.live_version
        self.assertEqual(live.form_id, self.form.id)
        self.assertTrue(live.is_published)

    def test_unknown_sha(self):
        with self.assertRaises(NotFound):
            live_pointer.publish_version(self.form.id, 'f' * 64, self.owner)

    def test_sha_of_another_form(self):
        other = form_models.Form.objects.create(name='Other', created_by=self.owner)
        foreign = version_store.create_version(other, SCHEMA_A, self.owner)
        with self.assertRaises(NotFound):
            live_pointer.publish_version(self.form.id, foreign.sha, self.owner)

    def test_target_vanishing_mid_publish_leaves_pointer(self):
        live_pointer.publish_version(self.form.id, self.v_a.sha, self.owner)
        with mock.patch('forms.services.live_pointer._lock_target', return_value=None):
            with self.assertRaises(Conflict):
                live_pointer.publish_version(self.form.id, self.v_b.sha, self.owner)

        self.form.refresh_from_db()
        self.assertEqual(self.form.live_version_id, self.v_a.id)
        self.v_b.refresh_from_db()
        self.assertFalse(self.v_b.is_published)

    def test_expected_live_sha(self):
        live_pointer.publish_version(self.form.id, self.v_a.sha, self.owner)
        with self.assertRaises(Conflict):
            live_pointer.publish_version(self.form.id, self.v_b.sha, self.owner, expected_live_sha=self.v_b.sha)
        self.form.refresh_from_db()
        self.assertEqual(self.form.live_version_id, self.v_a.id)

        live_pointer.publish_version(self.form.id, self.v_b.sha, self.owner, expected_live_sha=self.v_a.sha)
        self.form.refresh_from_db()
        self.assertEqual(self.form.live_version_id, self.v_b.id)

    def test_only_owner_may_publish(self):
        stranger = get_user_model().objects.create_user(username='stranger')
        with self.assertRaises(AuthRequired):
            live_pointer.publish_version(self.form.id, self.v_a.sha, None)
        with self.assertRaises(AccessDenied):
            live_pointer.publish_version(self.form.id, self.v_a.sha, stranger)
        self.form.refresh_from_db()
        self.assertIsNone(self.form.live_version_id)

    def test_unknown_form(self):
        with self.assertRaises(NotFound):
            live_pointer.publish_version(9999, self.v_a.sha, self.owner)

    def test_storage_failure_maps_to_internal(self):
        live_pointer.publish_version(self.form.id, self.v_a.sha, self.owner)
        with mock.patch.object(form_models.Form, 'save', side_effect=OperationalError('disk I/O error')):
            with self.assertRaises(Internal):
                live_pointer.publish_version(self.form.id, self.v_b.sha, self.owner)

        self.form.refresh_from_db()
        self.assertEqual(self.form.live_version_id, self.v_a.id)
        # the target's publish flag is rolled back with the pointer write
        self.v_b.refresh_from_db()
        self.assertFalse(self.v_b.is_published)
        self.assertIsNone(self.v_b.published_at)
