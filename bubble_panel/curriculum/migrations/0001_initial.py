import curriculum.models
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('tenants', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='CurriculumWeek',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('grade', models.PositiveSmallIntegerField(help_text='Класс (параллель), например 6')),
                ('week_id', models.CharField(db_index=True, default=curriculum.models.new_week_id, max_length=64)),
                ('order', models.PositiveIntegerField(default=1, help_text='Номер недели, с 1')),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True, default='')),
                ('content', models.TextField(blank=True, default='')),
                ('video_url', models.URLField(blank=True, default='', max_length=500)),
                ('is_published', models.BooleanField(default=False)),
                ('quiz', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('school', models.ForeignKey(blank=True, help_text='Пусто - мастер-программа', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='curriculum_weeks', to='tenants.school')),
            ],
            options={
                'verbose_name': 'неделя программы',
                'verbose_name_plural': 'недели программы',
                'ordering': ['grade', 'order', 'created_at'],
                'indexes': [models.Index(fields=['school', 'grade', 'order'], name='week_namespace_order_idx')],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('school__isnull', False)), fields=('school', 'grade', 'week_id'), name='week_unique_in_school'),
                    models.UniqueConstraint(condition=models.Q(('school__isnull', True)), fields=('grade', 'week_id'), name='week_unique_in_master'),
                ],
            },
        ),
    ]
