import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('accounts', '0001_initial'),
        ('tenants', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Classroom',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='название')),
                ('grade', models.PositiveSmallIntegerField(verbose_name='параллель')),
                ('class_key', models.CharField(help_text='Глобально уникальный код для вступления, формат XXX-XXX', max_length=7, unique=True, verbose_name='код класса')),
                ('is_locked', models.BooleanField(default=False, verbose_name='закрыт для вступления')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='дата создания')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='дата обновления')),
                ('school', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='classrooms', to='tenants.school', verbose_name='школа')),
                ('teacher', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='teaching_classrooms', to=settings.AUTH_USER_MODEL, verbose_name='учитель')),
                ('students', models.ManyToManyField(blank=True, related_name='roster_classrooms', to=settings.AUTH_USER_MODEL, verbose_name='ученики')),
            ],
            options={
                'verbose_name': 'класс',
                'verbose_name_plural': 'классы',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['teacher'], name='classroom_teacher_idx'),
                    models.Index(fields=['school', 'grade'], name='classroom_school_grade_idx'),
                ],
            },
        ),
    ]
