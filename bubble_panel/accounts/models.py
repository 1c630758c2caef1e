from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils.translation import gettext_lazy as _


class UserManager(BaseUserManager):
    """Менеджер пользователей, где id - это principal id от identity provider."""

    def create_user(self, id, password=None, **extra_fields):
        if not id:
            raise ValueError(_('id обязателен'))
        email = extra_fields.pop('email', '')
        user = self.model(id=id, email=self.normalize_email(email) if email else '', **extra_fields)
        if password:
            user.set_password(password)
        else:
            # Пароли живут у identity provider, локально вход по паролю не нужен
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, id, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError(_('Superuser должен иметь is_staff=True'))
        if extra_fields.get('is_superuser') is not True:
            raise ValueError(_('Superuser должен иметь is_superuser=True'))

        return self.create_user(id, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Профиль пользователя платформы.

    Первичный ключ - стабильный id, выданный identity provider. Поэтому
    повторное "первое появление" того же principal не создаёт дубликат.
    Роль выбирается один раз; школа и список классов меняются только
    сервисами tenants и classrooms.enrollment.
    """

    class Role(models.TextChoices):
        UNSET = 'unset', 'Не выбрана'
        STUDENT = 'student', 'Ученик'
        TEACHER = 'teacher', 'Учитель'
        SCHOOL_ADMIN = 'school_admin', 'Администратор школы'

    id = models.CharField(primary_key=True, max_length=128, editable=False)
    display_name = models.CharField(_('имя'), max_length=200, blank=True, default='')
    email = models.EmailField(_('email'), blank=True, default='')
    photo_url = models.URLField(_('аватар'), max_length=500, blank=True, default='')

    role = models.CharField(
        _('роль'),
        max_length=20,
        choices=Role.choices,
        default=Role.UNSET,
        db_index=True,
    )
    school = models.ForeignKey(
        'tenants.School',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='members',
        verbose_name=_('школа'),
    )
    # classIds профиля. Хранится отдельно от Classroom.students:
    # вступление в класс - это две записи (сначала класс, затем профиль).
    classrooms = models.ManyToManyField(
        'classrooms.Classroom',
        related_name='profile_members',
        blank=True,
        verbose_name=_('классы'),
    )

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False, help_text=_('Доступ в админку платформы'))
    created_at = models.DateTimeField(_('дата регистрации'), auto_now_add=True)
    updated_at = models.DateTimeField(_('дата обновления'), auto_now=True)

    USERNAME_FIELD = 'id'
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = _('пользователь')
        verbose_name_plural = _('пользователи')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['school', 'role'], name='user_school_role_idx'),
        ]

    def __str__(self):
        return f"{self.get_full_name()} ({self.get_role_display()})"

    def is_teacher(self):
        return self.role == self.Role.TEACHER

    def is_student(self):
        return self.role == self.Role.STUDENT

    def is_school_staff(self):
        return self.role in (self.Role.TEACHER, self.Role.SCHOOL_ADMIN)

    def get_full_name(self):
        return self.display_name or self.email or self.id

    def get_short_name(self):
        return self.get_full_name()
