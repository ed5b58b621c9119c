from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings

from formhub.exceptions import AuthRequired, InvalidVersion, NotFound, ValidationError
from forms import models as form_models
from forms.services import form_service, version_resolver
from submissions import models as sub_models
from submissions.services import submission_binder

SCHEMA = {'display': 'form', 'components': [
    {'type': 'textfield', 'key': 'name', 'validate': {'required': True}},
    {'type': 'number', 'key': 'age'},
]}


class SubmissionBinderTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.owner = User.objects.create_user(username='owner')
        self.user = User.objects.create_user(username='submitter')
        self.form = form_service.create_form(self.owner, 'Survey', schema=SCHEMA)
        self.live_sha = self.form.live_version.sha

    def test_anonymous_submission_gets_token(self):
        submission, token = submission_binder.create_submission(self.form.id, self.live_sha, {'name': 'Ada', 'age': 36})
        self.assertEqual(len(token), 64)
        int(token, 16)
        self.assertTrue(submission.is_anonymous)
        self.assertEqual(submission.version_sha, self.live_sha)

        stored = sub_models.SubmissionToken.objects.get(submission=submission)
        self.assertNotEqual(stored.token_hash, token)
        self.assertEqual(stored.token_hash, submission_binder.hash_token(token))

    def test_tokens_are_unique(self):
        _, first = submission_binder.create_submission(self.form.id, self.live_sha, {'name': 'a'})
        _, second = submission_binder.create_submission(self.form.id, self.live_sha, {'name': 'b'})
        self.assertNotEqual(first, second)

    @override_settings(FORMS_SUBMISSION_TOKEN_BYTES=8)
    def test_token_entropy_has_floor(self):
        self.assertEqual(len(submission_binder.generate_token()), 64)

    def test_authenticated_submission_has_no_token(self):
        submission, token = submission_binder.create_submission(self.form.id, self.live_sha, {'name': 'Ada'}, user=self.user)
        self.assertIsNone(token)
        self.assertEqual(submission.created_by, self.user)
        self.assertFalse(sub_models.SubmissionToken.objects.exists())

    def test_unknown_form(self):
        with self.assertRaises(NotFound):
            submission_binder.create_submission(9999, self.live_sha, {'name': 'Ada'})

    def test_version_must_belong_to_form(self):
        other = form_service.create_form(self.owner, 'Other', schema=SCHEMA)
        for sha in (None, '', 'a' * 64, other.live_version.sha):
            with self.subTest(sha=sha):
                with self.assertRaises(InvalidVersion):
                    submission_binder.create_submission(self.form.id, sha, {'name': 'Ada'})
        self.assertFalse(sub_models.Submission.objects.exists())

    def test_private_form_requires_login(self):
        self.form.visibility = form_models.Form.Visibility.PRIVATE
        self.form.save()
        with self.assertRaises(AuthRequired):
            submission_binder.create_submission(self.form.id, self.live_sha, {'name': 'Ada'})
        submission, _ = submission_binder.create_submission(self.form.id, self.live_sha, {'name': 'Ada'}, user=self.user)
        self.assertEqual(submission.form_id, self.form.id)

    def test_drafts_only_submittable_by_owner(self):
        draft = version_resolver.create_draft(self.form, self.owner)
        with self.assertRaises(InvalidVersion):
            submission_binder.create_submission(self.form.id, draft.sha, {'name': 'Ada'})
        with self.assertRaises(InvalidVersion):
            submission_binder.create_submission(self.form.id, draft.sha, {'name': 'Ada'}, user=self.user)
        submission, _ = submission_binder.create_submission(self.form.id, draft.sha, {'name': 'Ada'}, user=self.owner)
        self.assertEqual(submission.version_id, draft.id)

    def test_data_validated_against_bound_version(self):
        with self.assertRaises(ValidationError):
            submission_binder.create_submission(self.form.id, self.live_sha, {'age': 'old'})
        self.assertFalse(sub_models.Submission.objects.exists())

    def test_previously_live_version_still_accepted(self):
        new = version_resolver.create_draft(
            self.form, self.owner,
            schema={'display': 'form', 'components': [{'type': 'email', 'key': 'email', 'validate': {'required': True}}]},
            publish=True,
        )
        # a client that loaded the old schema before the publish
        submission, _ = submission_binder.create_submission(self.form.id, self.live_sha, {'name': 'Ada'})
        self.assertEqual(submission.version_sha, self.live_sha)
        self.assertNotEqual(submission.version_sha, new.sha)
