from django.core.management.base import BaseCommand, CommandError

from classrooms.enrollment import find_enrollment_drift, repair_enrollment
from classrooms.models import Classroom
from core.exceptions import DataIntegrityError


class Command(BaseCommand):
    help = 'Найти учеников, которые есть в ростере, но не в профиле, и доделать запись'

    def add_arguments(self, parser):
        parser.add_argument('--classroom', type=int, help='ID класса (по умолчанию все)')
        parser.add_argument('--dry-run', action='store_true', help='Только показать расхождения')

    def handle(self, *args, **options):
        classroom = None
        if options.get('classroom'):
            classroom = Classroom.objects.filter(pk=options['classroom']).first()
            if classroom is None:
                raise CommandError(f"Classroom {options['classroom']} not found")

        drift = find_enrollment_drift(classroom)
        if not drift:
            self.stdout.write(self.style.SUCCESS('No enrollment drift found'))
            return

        repaired = failed = 0
        for room, student in drift:
            label = f'{student.pk} -> {room.class_key}'
            if options['dry_run']:
                self.stdout.write(f'  drift: {label}')
                continue
            try:
                repair_enrollment(room, student)
            except DataIntegrityError as exc:
                failed += 1
                self.stderr.write(self.style.ERROR(f'  failed: {label}: {exc.detail}'))
                continue
            repaired += 1
            self.stdout.write(f'  repaired: {label}')

        if options['dry_run']:
            self.stdout.write(self.style.WARNING(f'{len(drift)} drifted enrollments'))
        else:
            self.stdout.write(self.style.SUCCESS(f'Repaired {repaired}, failed {failed}'))
