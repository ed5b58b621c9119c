"""
Management command to audit stored form versions.
Recomputes every version sha and checks that each live pointer references a
published version of the same form.
Usage: python manage.py verify_versions [--form ID]
"""
from django.core.management.base import BaseCommand, CommandError

from forms import models as form_models
from forms.services import version_store


class Command(BaseCommand):
    help = 'Verify version content hashes and live version pointers'

    def add_arguments(self, parser):
        parser.add_argument('--form', type=int, default=None, help='Only check this form id')

    def handle(self, *args, **options):
        forms_qs = form_models.Form.objects.select_related('live_version').order_by('id')
        versions_qs = form_models.FormVersion.objects.order_by('form_id', 'id')
        if options['form'] is not None:
            forms_qs = forms_qs.filter(pk=options['form'])
            versions_qs = versions_qs.filter(form_id=options['form'])

        problems = []
        checked = 0
        for version in versions_qs.iterator():
            checked += 1
            if not version_store.verify_sha(version):
                problems.append(f'form={version.form_id} sha={version.sha}: content hash mismatch')

        for form in forms_qs:
            live = form.live_version
            if live is None:
                continue
            if live.form_id != form.id:
                problems.append(f'form={form.id}: live version {live.sha} belongs to form {live.form_id}')
            elif not live.is_published:
                problems.append(f'form={form.id}: live version {live.sha} is not marked published')

        if problems:
            for line in problems:
                self.stderr.write(self.style.ERROR(line))
            raise CommandError(f'{len(problems)} problem(s) found in {checked} version(s)')

        self.stdout.write(self.style.SUCCESS(f'Checked {checked} version(s), no problems found'))
