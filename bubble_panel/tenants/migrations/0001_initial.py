import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='School',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(help_text='Название школы', max_length=200)),
                ('admin_email', models.EmailField(help_text='Email администратора школы', max_length=254)),
                ('max_students', models.PositiveIntegerField(default=200, help_text='Лицензионный лимит учеников')),
                ('student_count', models.PositiveIntegerField(default=0, help_text='Денормализованный счётчик, только для отображения')),
                ('status', models.CharField(choices=[('active', 'Активна'), ('inactive', 'Неактивна'), ('suspended', 'Приостановлена')], default='active', max_length=20)),
                ('plan', models.CharField(default='enterprise_yearly', max_length=50)),
                ('region', models.CharField(default='IN', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Школа',
                'verbose_name_plural': 'Школы',
                'ordering': ['-created_at'],
            },
        ),
    ]
