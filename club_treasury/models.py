"""
Gestión de club de fútbol amateur: tesorería y ranking
Amateur Football Club Management
models.py - tables of the hosted data store (profiles, fees, payments,
club closings, attendance). Business rules live in services/.
"""

import uuid
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


month_validators = [MinValueValidator(1), MaxValueValidator(12)]
amount_validators = [MinValueValidator(0)]


# ─────────────────────────────────────────────
#  Choices
# ─────────────────────────────────────────────
class Role(models.TextChoices):
    PLAYER = 'player', _('Jugador')
    DT     = 'dt',     _('Director técnico')
    ADMIN  = 'admin',  _('Administrador')


class PlayerCategory(models.TextChoices):
    ACTIVO     = 'activo',     _('Activo')
    SEMIACTIVO = 'semiactivo', _('Semiactivo')
    PASIVO     = 'pasivo',     _('Pasivo')


class FeeCategory(models.TextChoices):
    ACTIVO     = 'activo',     _('Activo')
    SEMIACTIVO = 'semiactivo', _('Semiactivo')
    PASIVO     = 'pasivo',     _('Pasivo')
    DT         = 'dt',         _('Recargo DT')


# ─────────────────────────────────────────────
#  Profile (plantel)
# ─────────────────────────────────────────────
class Profile(models.Model):
    """
    Perfil de un integrante del plantel.
    `status` es la categoría de cuota por defecto; se puede cambiar por mes
    con PlayerMonthlyStatus.
    """
    id            = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user          = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='profile', verbose_name=_('Cuenta de usuario')
    )
    full_name     = models.CharField(_('Nombre completo'), max_length=150)
    nickname      = models.CharField(_('Apodo'), max_length=60, blank=True)
    jersey_number = models.PositiveSmallIntegerField(_('Número de camiseta'), null=True, blank=True)
    role          = models.CharField(_('Rol'), max_length=10, choices=Role.choices, default=Role.PLAYER)
    status        = models.CharField(
        _('Categoría'), max_length=12,
        choices=PlayerCategory.choices, default=PlayerCategory.ACTIVO
    )
    avatar_url    = models.URLField(_('Avatar'), blank=True)
    created_at    = models.DateTimeField(_('Creado'), auto_now_add=True)
    updated_at    = models.DateTimeField(_('Actualizado'), auto_now=True)

    class Meta:
        verbose_name        = _('Perfil')
        verbose_name_plural = _('Perfiles')
        ordering            = ['full_name']

    def __str__(self):
        if self.nickname:
            return f'{self.full_name} "{self.nickname}"'
        return self.full_name


# ─────────────────────────────────────────────
#  Cuotas
# ─────────────────────────────────────────────
class FeeSchedule(models.Model):
    """Cuota mensual de una categoría (tabla fees_config)."""
    category   = models.CharField(_('Categoría'), max_length=12, choices=FeeCategory.choices)
    month      = models.PositiveSmallIntegerField(_('Mes'), validators=month_validators)
    year       = models.PositiveSmallIntegerField(_('Año'))
    amount     = models.DecimalField(_('Monto'), max_digits=12, decimal_places=2, default=0,
                                     validators=amount_validators)
    updated_at = models.DateTimeField(_('Actualizado'), auto_now=True)

    class Meta:
        verbose_name        = _('Cuota')
        verbose_name_plural = _('Cuotas')
        unique_together     = ('category', 'month', 'year')
        ordering            = ['-year', '-month', 'category']

    def __str__(self):
        return f'{self.get_category_display()} {self.month:02d}/{self.year} — ${self.amount}'


class PlayerMonthlyStatus(models.Model):
    """Categoría de un jugador para un mes puntual (p. ej. lesionado → pasivo)."""
    player     = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name='monthly_statuses',
                                   verbose_name=_('Jugador'))
    month      = models.PositiveSmallIntegerField(_('Mes'), validators=month_validators)
    year       = models.PositiveSmallIntegerField(_('Año'))
    status     = models.CharField(_('Categoría'), max_length=12, choices=PlayerCategory.choices)
    updated_at = models.DateTimeField(_('Actualizado'), auto_now=True)

    class Meta:
        verbose_name        = _('Categoría mensual')
        verbose_name_plural = _('Categorías mensuales')
        unique_together     = ('player', 'month', 'year')

    def __str__(self):
        return f'{self.player} — {self.month:02d}/{self.year}: {self.get_status_display()}'


class MonthlySetting(models.Model):
    """Configuración del mes: si el club cobró como pago grupal."""
    month            = models.PositiveSmallIntegerField(_('Mes'), validators=month_validators)
    year             = models.PositiveSmallIntegerField(_('Año'))
    is_group_payment = models.BooleanField(_('Pago grupal'), default=False)

    class Meta:
        verbose_name        = _('Configuración mensual')
        verbose_name_plural = _('Configuraciones mensuales')
        unique_together     = ('month', 'year')

    def __str__(self):
        return f'{self.month:02d}/{self.year}'


# ─────────────────────────────────────────────
#  Pagos y cierres
# ─────────────────────────────────────────────
class Payment(models.Model):
    """
    Pago imputado a un mes (no necesariamente el mes en que se cobró).
    Si lo adelantó el equipo queda como deuda interna hasta que se devuelva.
    """
    id                  = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    player              = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name='payments',
                                            verbose_name=_('Jugador'))
    month               = models.PositiveSmallIntegerField(_('Mes imputado'), validators=month_validators)
    year                = models.PositiveSmallIntegerField(_('Año imputado'))
    amount_total        = models.DecimalField(_('Monto'), max_digits=12, decimal_places=2,
                                              validators=amount_validators)
    payment_date        = models.DateField(_('Fecha de cobro'), null=True, blank=True)
    is_financed_by_team = models.BooleanField(_('Financiado por el equipo'), default=False)
    reimbursed_to_team  = models.BooleanField(_('Devuelto al equipo'), default=False)
    created_at          = models.DateTimeField(_('Registrado'), auto_now_add=True)

    class Meta:
        verbose_name        = _('Pago')
        verbose_name_plural = _('Pagos')
        ordering            = ['-payment_date', '-created_at']
        indexes             = [models.Index(fields=['year', 'month'])]

    def __str__(self):
        return f'{self.player} — {self.month:02d}/{self.year}: ${self.amount_total}'


class ClubClosing(models.Model):
    """Cierre mensual con el club/liga (tabla club_payments). Foto histórica."""
    month           = models.PositiveSmallIntegerField(_('Mes'), validators=month_validators)
    year            = models.PositiveSmallIntegerField(_('Año'))
    amount_paid     = models.DecimalField(_('Pagado al club'), max_digits=12, decimal_places=2,
                                          validators=amount_validators)
    collected_total = models.DecimalField(_('Recaudado al cierre'), max_digits=12, decimal_places=2)
    savings         = models.DecimalField(_('Ahorro'), max_digits=12, decimal_places=2)
    notes           = models.TextField(_('Notas'), blank=True)
    created_at      = models.DateTimeField(_('Creado'), auto_now_add=True)

    class Meta:
        verbose_name        = _('Cierre mensual')
        verbose_name_plural = _('Cierres mensuales')
        unique_together     = ('month', 'year')
        ordering            = ['-year', '-month']

    def __str__(self):
        return f'Cierre {self.month:02d}/{self.year} — pagado ${self.amount_paid}'


# ─────────────────────────────────────────────
#  Partidos y asistencia
# ─────────────────────────────────────────────
class Match(models.Model):
    id                = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    opponent          = models.CharField(_('Rival'), max_length=150)
    match_date        = models.DateTimeField(_('Fecha'))
    location          = models.CharField(_('Cancha'), max_length=200, blank=True)
    status            = models.CharField(_('Estado'), max_length=20, default='scheduled')
    result_our_score      = models.PositiveSmallIntegerField(_('Goles propios'), null=True, blank=True)
    result_opponent_score = models.PositiveSmallIntegerField(_('Goles rival'), null=True, blank=True)
    jerseys_washed_by = models.ForeignKey(
        Profile, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='washed_matches', verbose_name=_('Lavó las camisetas')
    )

    class Meta:
        verbose_name        = _('Partido')
        verbose_name_plural = _('Partidos')
        ordering            = ['-match_date']

    def __str__(self):
        return f'vs {self.opponent} ({self.match_date:%d/%m/%Y})'


class Attendance(models.Model):
    """Confirmación y asistencia real de un jugador a un partido."""

    class Confirmation(models.TextChoices):
        PENDING   = 'pending',   _('Pendiente')
        CONFIRMED = 'confirmed', _('Confirmado')
        DECLINED  = 'declined',  _('No va')

    class AttendanceType(models.TextChoices):
        PRESENT       = 'present',       _('Presente')
        LATE_1ST_HALF = 'late_1st_half', _('Tarde (1er T)')
        LATE_2ND_HALF = 'late_2nd_half', _('Tarde (2do T)')
        ABSENT        = 'absent',        _('Faltazo')

    id                  = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    match               = models.ForeignKey(Match, on_delete=models.CASCADE, related_name='attendance',
                                            verbose_name=_('Partido'))
    player              = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name='attendance',
                                            verbose_name=_('Jugador'))
    confirmation_status = models.CharField(_('Confirmación'), max_length=10,
                                           choices=Confirmation.choices, default=Confirmation.PENDING)
    attendance_type     = models.CharField(_('Asistencia'), max_length=15,
                                           choices=AttendanceType.choices, blank=True)
    stays_for_social    = models.BooleanField(_('Se queda al tercer tiempo'), default=False)
    forgot_jerseys      = models.BooleanField(_('Olvidó las camisetas'), default=False)
    washed_jerseys      = models.BooleanField(_('Lavó las camisetas'), default=False)
    points_impact       = models.SmallIntegerField(_('Ajuste manual de puntos'), null=True, blank=True)
    is_pardoned         = models.BooleanField(_('Indultado'), default=False)
    pardon_reason       = models.CharField(_('Motivo del indulto'), max_length=255, blank=True)
    created_at          = models.DateTimeField(_('Creado'), auto_now_add=True)

    class Meta:
        verbose_name        = _('Asistencia')
        verbose_name_plural = _('Asistencias')
        unique_together     = ('match', 'player')

    def __str__(self):
        return f'{self.player} — {self.match}: {self.get_confirmation_status_display()}'
