from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.management.base import BaseCommand, CommandError

from tenants.models import School
from tenants.services import recalculate_student_count


class Command(BaseCommand):
    help = 'Пересчитать подсказку student_count по реальным ученикам школ'

    def add_arguments(self, parser):
        parser.add_argument('--school', help='UUID школы (по умолчанию все)')

    def handle(self, *args, **options):
        schools = School.objects.order_by('name')
        if options.get('school'):
            try:
                schools = [School.objects.get(pk=options['school'])]
            except (School.DoesNotExist, DjangoValidationError):
                raise CommandError(f"School {options['school']} not found")

        changed = 0
        for school in schools:
            before = school.student_count
            after = recalculate_student_count(school)
            if before != after:
                changed += 1
                self.stdout.write(f'  {school.name}: {before} -> {after}')

        self.stdout.write(self.style.SUCCESS(f'Recalculated, {changed} counters changed'))
