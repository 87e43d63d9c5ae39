from django.conf import settings
from django.db import models

# ============================================================================
# Shared choices
# ============================================================================

# Fixed system tags. A Grid is scoped to exactly one of them.
CONTENT_TAGS = [
    ('entretenimento', 'Entretenimento'),
    ('atividade', 'Atividade física'),
    ('educativo', 'Educativo'),
]

# Content types a grid row item can reference.
CONTENT_TYPES = [
    ('video', 'Vídeo'),
    ('series', 'Série'),
    ('game', 'Jogo'),
    ('activity', 'Atividade'),
]

CONTENT_TAG_VALUES = [value for value, _ in CONTENT_TAGS]
CONTENT_TYPE_VALUES = [value for value, _ in CONTENT_TYPES]

MIN_AGE_CHOICES = [(age, f'{age} anos') for age in range(2, 10)]

LOG_LEVELS = [
    ('info', 'Info'),
    ('warning', 'Aviso'),
    ('error', 'Erro'),
]

# ============================================================================
# HOME GRID
# ============================================================================


class Grid(models.Model):
    """
    Grade da home: conjunto nomeado de linhas para uma tag.
    Por tag, no máximo uma grade pode estar ativa.
    """
    name = models.CharField(max_length=200, verbose_name='Nome')
    description = models.TextField(blank=True, default='', verbose_name='Descrição')
    tag = models.CharField(max_length=20, choices=CONTENT_TAGS, verbose_name='Tag',
                           help_text='Categoria fixa da grade')
    is_active = models.BooleanField(default=False, verbose_name='Ativa')
    created_at = models.DateTimeField(auto_now_add=True, verbose_name='Criada em')
    updated_at = models.DateTimeField(auto_now=True, verbose_name='Atualizada em')

    class Meta:
        verbose_name = 'Grade'
        verbose_name_plural = 'Grades'
        ordering = ['-created_at', '-id']

    def __str__(self):
        status = 'ativa' if self.is_active else 'inativa'
        return f"{self.name} ({self.tag}, {status})"


class GridRow(models.Model):
    """
    Linha de uma grade. Os itens ficam embutidos no documento da linha
    (lista JSON de referências a conteúdo), ordenados pelo campo ``order``.
    """
    grid = models.ForeignKey(Grid, related_name='rows', on_delete=models.CASCADE, verbose_name='Grade')
    title = models.CharField(max_length=200, verbose_name='Título')
    description = models.TextField(blank=True, default='', verbose_name='Descrição')
    content_type = models.CharField(max_length=20, choices=CONTENT_TYPES, blank=True, null=True,
                                    verbose_name='Tipo de conteúdo',
                                    help_text='Vazio = conteúdo misto')
    items = models.JSONField(default=list, blank=True, verbose_name='Itens')
    is_active = models.BooleanField(default=True, verbose_name='Ativa')
    order = models.PositiveIntegerField(default=0, verbose_name='Ordem')
    max_items = models.PositiveIntegerField(default=10, verbose_name='Máximo de itens')
    created_at = models.DateTimeField(auto_now_add=True, verbose_name='Criada em')
    updated_at = models.DateTimeField(auto_now=True, verbose_name='Atualizada em')

    class Meta:
        verbose_name = 'Linha da grade'
        verbose_name_plural = 'Linhas da grade'
        ordering = ['order', 'id']

    def __str__(self):
        return f"{self.title} [{len(self.items or [])}/{self.max_items}]"

    @property
    def is_mixed(self):
        return not self.content_type

    @property
    def is_full(self):
        return len(self.items or []) >= self.max_items

# ============================================================================
# CONTENT
# ============================================================================


class ContentBase(models.Model):
    """Fields shared by every piece of playable content."""

    # Explicit discriminant used by grid items; set per subclass.
    CONTENT_TYPE = None

    title = models.CharField(max_length=255, verbose_name='Título')
    description = models.TextField(blank=True, default='', verbose_name='Descrição')
    thumbnail = models.CharField(max_length=500, blank=True, default='', verbose_name='Thumbnail')
    category = models.CharField(max_length=100, blank=True, default='', verbose_name='Categoria')
    min_age = models.PositiveSmallIntegerField(choices=MIN_AGE_CHOICES, default=2, verbose_name='Idade mínima')
    tag = models.CharField(max_length=20, choices=CONTENT_TAGS, default='entretenimento', verbose_name='Tag')
    is_active = models.BooleanField(default=True, verbose_name='Ativo')
    created_at = models.DateTimeField(auto_now_add=True, verbose_name='Criado em')
    updated_at = models.DateTimeField(auto_now=True, verbose_name='Atualizado em')

    class Meta:
        abstract = True
        ordering = ['-created_at', '-id']

    def __str__(self):
        return self.title


class Video(ContentBase):
    CONTENT_TYPE = 'video'

    url = models.URLField(max_length=500, verbose_name='URL')
    duration = models.PositiveIntegerField(default=0, verbose_name='Duração (s)')
    views = models.PositiveIntegerField(default=0, verbose_name='Visualizações')
    series_id = models.CharField(max_length=100, blank=True, null=True, db_index=True, verbose_name='Série (ID)',
                                 help_text='Vazio para vídeos avulsos')
    series_title = models.CharField(max_length=255, blank=True, null=True, verbose_name='Título da série')
    season_number = models.PositiveSmallIntegerField(default=1, verbose_name='Temporada')
    episode_number = models.PositiveSmallIntegerField(blank=True, null=True, verbose_name='Episódio')

    class Meta(ContentBase.Meta):
        verbose_name = 'Vídeo'
        verbose_name_plural = 'Vídeos'

    @property
    def is_standalone(self):
        return not self.series_id


class Game(ContentBase):
    CONTENT_TYPE = 'game'

    GAME_TYPES = [
        ('html5', 'HTML5'),
        ('embed', 'Embed'),
    ]

    url = models.URLField(max_length=500, verbose_name='URL')
    plays = models.PositiveIntegerField(default=0, verbose_name='Partidas')
    game_type = models.CharField(max_length=10, choices=GAME_TYPES, default='html5', verbose_name='Tipo')

    class Meta(ContentBase.Meta):
        verbose_name = 'Jogo'
        verbose_name_plural = 'Jogos'


class Activity(ContentBase):
    CONTENT_TYPE = 'activity'

    DIFFICULTIES = [
        ('easy', 'Fácil'),
        ('medium', 'Médio'),
        ('hard', 'Difícil'),
    ]

    age = models.CharField(max_length=20, blank=True, default='', verbose_name='Idade / faixa')
    difficulty = models.CharField(max_length=10, choices=DIFFICULTIES, default='easy', verbose_name='Dificuldade')
    instruction_video = models.URLField(max_length=500, blank=True, default='', verbose_name='Vídeo explicativo')
    objectives = models.JSONField(default=list, blank=True, verbose_name='Objetivos')
    materials = models.JSONField(default=list, blank=True, verbose_name='Materiais')
    completions = models.PositiveIntegerField(default=0, verbose_name='Conclusões')

    class Meta(ContentBase.Meta):
        verbose_name = 'Atividade'
        verbose_name_plural = 'Atividades'

# ============================================================================
# PLATFORM USERS, AVATARS, ACHIEVEMENTS, TIME LIMITS
# ============================================================================


class PlatformUser(models.Model):
    """Conta do aplicativo (família/criança), não confundir com o admin do Django."""
    ROLES = [
        ('admin', 'Administrador'),
        ('user', 'Usuário'),
    ]

    email = models.EmailField(unique=True, verbose_name='E-mail')
    name = models.CharField(max_length=200, verbose_name='Nome')
    role = models.CharField(max_length=10, choices=ROLES, default='user', verbose_name='Papel')
    last_login = models.DateTimeField(blank=True, null=True, verbose_name='Último acesso')
    created_at = models.DateTimeField(auto_now_add=True, verbose_name='Criado em')
    updated_at = models.DateTimeField(auto_now=True, verbose_name='Atualizado em')

    class Meta:
        verbose_name = 'Usuário do app'
        verbose_name_plural = 'Usuários do app'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.name} <{self.email}>"


class Avatar(models.Model):
    CATEGORIES = [
        ('masculino', 'Masculino'),
        ('feminino', 'Feminino'),
        ('neutro', 'Neutro'),
        ('outros', 'Outros'),
    ]

    name = models.CharField(max_length=100, verbose_name='Nome')
    svg_url = models.CharField(max_length=500, verbose_name='URL do SVG')
    file_name = models.CharField(max_length=255, blank=True, default='', verbose_name='Arquivo')
    size = models.PositiveIntegerField(default=0, verbose_name='Tamanho (bytes)')
    category = models.CharField(max_length=20, choices=CATEGORIES, blank=True, null=True, verbose_name='Categoria')
    tags = models.JSONField(default=list, blank=True, verbose_name='Tags')
    is_active = models.BooleanField(default=True, verbose_name='Ativo')
    created_at = models.DateTimeField(auto_now_add=True, verbose_name='Criado em')
    updated_at = models.DateTimeField(auto_now=True, verbose_name='Atualizado em')

    class Meta:
        verbose_name = 'Avatar'
        verbose_name_plural = 'Avatares'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return self.name


class Achievement(models.Model):
    TYPES = [
        ('time_spent', 'Tempo de uso'),
        ('activities_completed', 'Atividades concluídas'),
        ('streak_days', 'Dias seguidos'),
        ('category_master', 'Mestre da categoria'),
        ('daily_goal', 'Meta diária'),
        ('speed_learner', 'Aprendiz relâmpago'),
        ('explorer', 'Explorador'),
        ('perfectionist', 'Perfeccionista'),
    ]

    RARITIES = [
        ('bronze', 'Bronze'),
        ('silver', 'Prata'),
        ('gold', 'Ouro'),
        ('diamond', 'Diamante'),
        ('legendary', 'Lendária'),
    ]

    type = models.CharField(max_length=30, choices=TYPES, verbose_name='Tipo')
    name = models.CharField(max_length=200, verbose_name='Nome')
    description = models.TextField(blank=True, default='', verbose_name='Descrição')
    svg_icon = models.TextField(blank=True, default='', verbose_name='Ícone (SVG ou URL)')
    audio_file = models.CharField(max_length=500, blank=True, null=True, verbose_name='Áudio de comemoração')
    target_value = models.PositiveIntegerField(default=1, verbose_name='Meta')
    category = models.CharField(max_length=20, choices=CONTENT_TAGS, blank=True, null=True, verbose_name='Categoria')
    rarity = models.CharField(max_length=20, choices=RARITIES, default='bronze', verbose_name='Raridade')
    points = models.PositiveIntegerField(default=0, verbose_name='Pontos')
    is_active = models.BooleanField(default=True, verbose_name='Ativa')
    created_at = models.DateTimeField(auto_now_add=True, verbose_name='Criada em')
    updated_at = models.DateTimeField(auto_now=True, verbose_name='Atualizada em')

    class Meta:
        verbose_name = 'Conquista'
        verbose_name_plural = 'Conquistas'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.name} ({self.rarity})"


class DailyTimeLimit(models.Model):
    AGE_GROUPS = [
        ('2-6', '2 a 6 anos'),
        ('7-9', '7 a 9 anos'),
    ]

    REWARD_TYPES = [
        ('medalha', 'Medalha'),
        ('tempo_extra', 'Tempo extra'),
        ('novo_avatar', 'Novo avatar'),
        ('badge_especial', 'Badge especial'),
    ]

    age_group = models.CharField(max_length=5, choices=AGE_GROUPS, verbose_name='Faixa etária')
    entretenimento_limit = models.PositiveIntegerField(default=30, verbose_name='Entretenimento (min/dia)')
    atividade_limit = models.PositiveIntegerField(default=20, verbose_name='Atividade (min/dia)')
    educativo_limit = models.PositiveIntegerField(default=15, verbose_name='Educativo (min/dia)')
    reward_type = models.CharField(max_length=20, choices=REWARD_TYPES, default='medalha', verbose_name='Prêmio')
    reward_title = models.CharField(max_length=200, default='Explorador do Dia', verbose_name='Nome do prêmio')
    is_active = models.BooleanField(default=True, verbose_name='Ativo')
    created_at = models.DateTimeField(auto_now_add=True, verbose_name='Criado em')
    updated_at = models.DateTimeField(auto_now=True, verbose_name='Atualizado em')

    class Meta:
        verbose_name = 'Limite de tempo diário'
        verbose_name_plural = 'Limites de tempo diário'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Limite {self.age_group}"

# ============================================================================
# SYSTEM LOGS
# ============================================================================


class ActionLogBase(models.Model):
    action = models.CharField(max_length=100, verbose_name='Ação')
    details = models.TextField(blank=True, default='', verbose_name='Detalhes')
    level = models.CharField(max_length=10, choices=LOG_LEVELS, default='info', verbose_name='Nível')
    metadata = models.JSONField(default=dict, blank=True, verbose_name='Metadados')
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Data')

    class Meta:
        abstract = True
        ordering = ['-timestamp', '-id']


class AdminActionLog(ActionLogBase):
    admin = models.CharField(max_length=255, verbose_name='Administrador')

    class Meta(ActionLogBase.Meta):
        verbose_name = 'Log de administrador'
        verbose_name_plural = 'Logs de administrador'

    def __str__(self):
        return f"[{self.level}] {self.admin}: {self.action}"


class AppActionLog(ActionLogBase):
    user = models.CharField(max_length=255, verbose_name='Usuário')
    user_id = models.CharField(max_length=100, blank=True, null=True, verbose_name='ID do usuário')
    session_id = models.CharField(max_length=100, blank=True, null=True, verbose_name='Sessão')
    device_info = models.CharField(max_length=255, blank=True, null=True, verbose_name='Dispositivo')

    class Meta(ActionLogBase.Meta):
        verbose_name = 'Log do aplicativo'
        verbose_name_plural = 'Logs do aplicativo'

    def __str__(self):
        return f"[{self.level}] {self.user}: {self.action}"

# ============================================================================
# GOOGLE DRIVE CONFIGURATION
# ============================================================================


class DriveConfig(models.Model):
    """
    Configuração do Google Drive (cliente OAuth + tokens).
    Registro único; carregado com ``DriveConfig.load()`` e persistido com ``save()``.
    """
    client_id = models.CharField(max_length=255, blank=True, default='')
    client_secret = models.CharField(max_length=255, blank=True, default='')
    redirect_uri = models.URLField(max_length=500, blank=True, default='')
    access_token = models.TextField(blank=True, default='')
    refresh_token = models.TextField(blank=True, default='')
    folder_id = models.CharField(max_length=255, blank=True, default='')
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Configuração do Google Drive'
        verbose_name_plural = 'Configuração do Google Drive'

    def __str__(self):
        return 'Google Drive (configurado)' if self.is_configured else 'Google Drive (pendente)'

    def save(self, *args, **kwargs):
        self.pk = 1
        super().save(*args, **kwargs)

    @classmethod
    def load(cls):
        """Return the singleton, seeding it from settings on first use."""
        config, _ = cls.objects.get_or_create(pk=1, defaults={
            'client_id': settings.GOOGLE_DRIVE_CLIENT_ID or '',
            'client_secret': settings.GOOGLE_DRIVE_CLIENT_SECRET or '',
            'redirect_uri': settings.GOOGLE_DRIVE_REDIRECT_URI or '',
        })
        return config

    @property
    def is_configured(self):
        return bool(self.client_id and self.client_secret and self.redirect_uri)

    @property
    def is_authenticated(self):
        return bool(self.access_token or self.refresh_token)
