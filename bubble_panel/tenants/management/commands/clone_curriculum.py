from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.management.base import BaseCommand, CommandError

from core.exceptions import CurriculumCloneError
from tenants.models import School
from tenants.services import clone_master_curriculum


class Command(BaseCommand):
    help = 'Повторно скопировать мастер-программу в школу (идемпотентно)'

    def add_arguments(self, parser):
        parser.add_argument('school_id', help='UUID школы')

    def handle(self, *args, **options):
        school_id = options['school_id']
        try:
            school = School.objects.get(pk=school_id)
        except (School.DoesNotExist, DjangoValidationError):
            raise CommandError(f'School {school_id} not found')

        try:
            copied = clone_master_curriculum(school)
        except CurriculumCloneError as exc:
            raise CommandError(f'Clone failed, retry later: {exc}')

        self.stdout.write(self.style.SUCCESS(f'{school.name}: {copied} weeks deployed'))
