import accounts.models
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
        ('tenants', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('id', models.CharField(editable=False, max_length=128, primary_key=True, serialize=False)),
                ('display_name', models.CharField(blank=True, default='', max_length=200, verbose_name='имя')),
                ('email', models.EmailField(blank=True, default='', max_length=254, verbose_name='email')),
                ('photo_url', models.URLField(blank=True, default='', max_length=500, verbose_name='аватар')),
                ('role', models.CharField(choices=[('unset', 'Не выбрана'), ('student', 'Ученик'), ('teacher', 'Учитель'), ('school_admin', 'Администратор школы')], db_index=True, default='unset', max_length=20, verbose_name='роль')),
                ('is_active', models.BooleanField(default=True)),
                ('is_staff', models.BooleanField(default=False, help_text='Доступ в админку платформы')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='дата регистрации')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='дата обновления')),
                ('school', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='members', to='tenants.school', verbose_name='школа')),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'пользователь',
                'verbose_name_plural': 'пользователи',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['school', 'role'], name='user_school_role_idx')],
            },
            managers=[
                ('objects', accounts.models.UserManager()),
            ],
        ),
    ]
