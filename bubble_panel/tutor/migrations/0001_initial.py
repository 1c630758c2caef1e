import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('tenants', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='TutorExchange',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('mode', models.CharField(choices=[('explain', 'Объяснение'), ('lab', 'Лаборатория')], default='explain', max_length=20)),
                ('prompt', models.TextField()),
                ('response', models.TextField(blank=True, null=True)),
                ('error', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('school', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='tutor_exchanges', to='tenants.school')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tutor_exchanges', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'вопрос репетитору',
                'verbose_name_plural': 'вопросы репетитору',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['school', '-created_at'], name='tutor_school_recent_idx')],
            },
        ),
    ]
