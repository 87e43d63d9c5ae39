import django.db.models.deletion
from django.db import migrations, models

CONTENT_TAGS = [('entretenimento', 'Entretenimento'), ('atividade', 'Atividade física'), ('educativo', 'Educativo')]
MIN_AGE_CHOICES = [(2, '2 anos'), (3, '3 anos'), (4, '4 anos'), (5, '5 anos'), (6, '6 anos'), (7, '7 anos'),
                   (8, '8 anos'), (9, '9 anos')]
LOG_LEVELS = [('info', 'Info'), ('warning', 'Aviso'), ('error', 'Erro')]


def content_fields():
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('title', models.CharField(max_length=255, verbose_name='Título')),
        ('description', models.TextField(blank=True, default='', verbose_name='Descrição')),
        ('thumbnail', models.CharField(blank=True, default='', max_length=500, verbose_name='Thumbnail')),
        ('category', models.CharField(blank=True, default='', max_length=100, verbose_name='Categoria')),
        ('min_age', models.PositiveSmallIntegerField(choices=MIN_AGE_CHOICES, default=2, verbose_name='Idade mínima')),
        ('tag', models.CharField(choices=CONTENT_TAGS, default='entretenimento', max_length=20, verbose_name='Tag')),
        ('is_active', models.BooleanField(default=True, verbose_name='Ativo')),
        ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Criado em')),
        ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Atualizado em')),
    ]


def log_fields():
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('action', models.CharField(max_length=100, verbose_name='Ação')),
        ('details', models.TextField(blank=True, default='', verbose_name='Detalhes')),
        ('level', models.CharField(choices=LOG_LEVELS, default='info', max_length=10, verbose_name='Nível')),
        ('metadata', models.JSONField(blank=True, default=dict, verbose_name='Metadados')),
        ('timestamp', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Data')),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Grid',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='Nome')),
                ('description', models.TextField(blank=True, default='', verbose_name='Descrição')),
                ('tag', models.CharField(choices=CONTENT_TAGS, help_text='Categoria fixa da grade', max_length=20,
                                         verbose_name='Tag')),
                ('is_active', models.BooleanField(default=False, verbose_name='Ativa')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Criada em')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Atualizada em')),
            ],
            options={
                'verbose_name': 'Grade',
                'verbose_name_plural': 'Grades',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='GridRow',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200, verbose_name='Título')),
                ('description', models.TextField(blank=True, default='', verbose_name='Descrição')),
                ('content_type', models.CharField(
                    blank=True, null=True, max_length=20, verbose_name='Tipo de conteúdo',
                    help_text='Vazio = conteúdo misto',
                    choices=[('video', 'Vídeo'), ('series', 'Série'), ('game', 'Jogo'), ('activity', 'Atividade')],
                )),
                ('items', models.JSONField(blank=True, default=list, verbose_name='Itens')),
                ('is_active', models.BooleanField(default=True, verbose_name='Ativa')),
                ('order', models.PositiveIntegerField(default=0, verbose_name='Ordem')),
                ('max_items', models.PositiveIntegerField(default=10, verbose_name='Máximo de itens')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Criada em')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Atualizada em')),
                ('grid', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='rows',
                                           to='api.grid', verbose_name='Grade')),
            ],
            options={
                'verbose_name': 'Linha da grade',
                'verbose_name_plural': 'Linhas da grade',
                'ordering': ['order', 'id'],
            },
        ),
        migrations.CreateModel(
            name='Video',
            fields=content_fields() + [
                ('url', models.URLField(max_length=500, verbose_name='URL')),
                ('duration', models.PositiveIntegerField(default=0, verbose_name='Duração (s)')),
                ('views', models.PositiveIntegerField(default=0, verbose_name='Visualizações')),
                ('series_id', models.CharField(blank=True, db_index=True, help_text='Vazio para vídeos avulsos',
                                               max_length=100, null=True, verbose_name='Série (ID)')),
                ('series_title', models.CharField(blank=True, max_length=255, null=True,
                                                  verbose_name='Título da série')),
                ('season_number', models.PositiveSmallIntegerField(default=1, verbose_name='Temporada')),
                ('episode_number', models.PositiveSmallIntegerField(blank=True, null=True, verbose_name='Episódio')),
            ],
            options={
                'verbose_name': 'Vídeo',
                'verbose_name_plural': 'Vídeos',
                'ordering': ['-created_at', '-id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Game',
            fields=content_fields() + [
                ('url', models.URLField(max_length=500, verbose_name='URL')),
                ('plays', models.PositiveIntegerField(default=0, verbose_name='Partidas')),
                ('game_type', models.CharField(choices=[('html5', 'HTML5'), ('embed', 'Embed')], default='html5',
                                               max_length=10, verbose_name='Tipo')),
            ],
            options={
                'verbose_name': 'Jogo',
                'verbose_name_plural': 'Jogos',
                'ordering': ['-created_at', '-id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Activity',
            fields=content_fields() + [
                ('age', models.CharField(blank=True, default='', max_length=20, verbose_name='Idade / faixa')),
                ('difficulty', models.CharField(choices=[('easy', 'Fácil'), ('medium', 'Médio'), ('hard', 'Difícil')],
                                                default='easy', max_length=10, verbose_name='Dificuldade')),
                ('instruction_video', models.URLField(blank=True, default='', max_length=500,
                                                      verbose_name='Vídeo explicativo')),
                ('objectives', models.JSONField(blank=True, default=list, verbose_name='Objetivos')),
                ('materials', models.JSONField(blank=True, default=list, verbose_name='Materiais')),
                ('completions', models.PositiveIntegerField(default=0, verbose_name='Conclusões')),
            ],
            options={
                'verbose_name': 'Atividade',
                'verbose_name_plural': 'Atividades',
                'ordering': ['-created_at', '-id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='PlatformUser',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('email', models.EmailField(max_length=254, unique=True, verbose_name='E-mail')),
                ('name', models.CharField(max_length=200, verbose_name='Nome')),
                ('role', models.CharField(choices=[('admin', 'Administrador'), ('user', 'Usuário')], default='user',
                                          max_length=10, verbose_name='Papel')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='Último acesso')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Criado em')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Atualizado em')),
            ],
            options={
                'verbose_name': 'Usuário do app',
                'verbose_name_plural': 'Usuários do app',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='Avatar',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, verbose_name='Nome')),
                ('svg_url', models.CharField(max_length=500, verbose_name='URL do SVG')),
                ('file_name', models.CharField(blank=True, default='', max_length=255, verbose_name='Arquivo')),
                ('size', models.PositiveIntegerField(default=0, verbose_name='Tamanho (bytes)')),
                ('category', models.CharField(
                    blank=True, null=True, max_length=20, verbose_name='Categoria',
                    choices=[('masculino', 'Masculino'), ('feminino', 'Feminino'), ('neutro', 'Neutro'),
                             ('outros', 'Outros')],
                )),
                ('tags', models.JSONField(blank=True, default=list, verbose_name='Tags')),
                ('is_active', models.BooleanField(default=True, verbose_name='Ativo')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Criado em')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Atualizado em')),
            ],
            options={
                'verbose_name': 'Avatar',
                'verbose_name_plural': 'Avatares',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='Achievement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(
                    max_length=30, verbose_name='Tipo',
                    choices=[('time_spent', 'Tempo de uso'), ('activities_completed', 'Atividades concluídas'),
                             ('streak_days', 'Dias seguidos'), ('category_master', 'Mestre da categoria'),
                             ('daily_goal', 'Meta diária'), ('speed_learner', 'Aprendiz relâmpago'),
                             ('explorer', 'Explorador'), ('perfectionist', 'Perfeccionista')],
                )),
                ('name', models.CharField(max_length=200, verbose_name='Nome')),
                ('description', models.TextField(blank=True, default='', verbose_name='Descrição')),
                ('svg_icon', models.TextField(blank=True, default='', verbose_name='Ícone (SVG ou URL)')),
                ('audio_file', models.CharField(blank=True, max_length=500, null=True,
                                                verbose_name='Áudio de comemoração')),
                ('target_value', models.PositiveIntegerField(default=1, verbose_name='Meta')),
                ('category', models.CharField(blank=True, choices=CONTENT_TAGS, max_length=20, null=True,
                                              verbose_name='Categoria')),
                ('rarity', models.CharField(
                    default='bronze', max_length=20, verbose_name='Raridade',
                    choices=[('bronze', 'Bronze'), ('silver', 'Prata'), ('gold', 'Ouro'), ('diamond', 'Diamante'),
                             ('legendary', 'Lendária')],
                )),
                ('points', models.PositiveIntegerField(default=0, verbose_name='Pontos')),
                ('is_active', models.BooleanField(default=True, verbose_name='Ativa')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Criada em')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Atualizada em')),
            ],
            options={
                'verbose_name': 'Conquista',
                'verbose_name_plural': 'Conquistas',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='DailyTimeLimit',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('age_group', models.CharField(choices=[('2-6', '2 a 6 anos'), ('7-9', '7 a 9 anos')], max_length=5,
                                               verbose_name='Faixa etária')),
                ('entretenimento_limit', models.PositiveIntegerField(default=30,
                                                                     verbose_name='Entretenimento (min/dia)')),
                ('atividade_limit', models.PositiveIntegerField(default=20, verbose_name='Atividade (min/dia)')),
                ('educativo_limit', models.PositiveIntegerField(default=15, verbose_name='Educativo (min/dia)')),
                ('reward_type', models.CharField(
                    default='medalha', max_length=20, verbose_name='Prêmio',
                    choices=[('medalha', 'Medalha'), ('tempo_extra', 'Tempo extra'), ('novo_avatar', 'Novo avatar'),
                             ('badge_especial', 'Badge especial')],
                )),
                ('reward_title', models.CharField(default='Explorador do Dia', max_length=200,
                                                  verbose_name='Nome do prêmio')),
                ('is_active', models.BooleanField(default=True, verbose_name='Ativo')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Criado em')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Atualizado em')),
            ],
            options={
                'verbose_name': 'Limite de tempo diário',
                'verbose_name_plural': 'Limites de tempo diário',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='AdminActionLog',
            fields=log_fields() + [
                ('admin', models.CharField(max_length=255, verbose_name='Administrador')),
            ],
            options={
                'verbose_name': 'Log de administrador',
                'verbose_name_plural': 'Logs de administrador',
                'ordering': ['-timestamp', '-id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='AppActionLog',
            fields=log_fields() + [
                ('user', models.CharField(max_length=255, verbose_name='Usuário')),
                ('user_id', models.CharField(blank=True, max_length=100, null=True, verbose_name='ID do usuário')),
                ('session_id', models.CharField(blank=True, max_length=100, null=True, verbose_name='Sessão')),
                ('device_info', models.CharField(blank=True, max_length=255, null=True, verbose_name='Dispositivo')),
            ],
            options={
                'verbose_name': 'Log do aplicativo',
                'verbose_name_plural': 'Logs do aplicativo',
                'ordering': ['-timestamp', '-id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='DriveConfig',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('client_id', models.CharField(blank=True, default='', max_length=255)),
                ('client_secret', models.CharField(blank=True, default='', max_length=255)),
                ('redirect_uri', models.URLField(blank=True, default='', max_length=500)),
                ('access_token', models.TextField(blank=True, default='')),
                ('refresh_token', models.TextField(blank=True, default='')),
                ('folder_id', models.CharField(blank=True, default='', max_length=255)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Configuração do Google Drive',
                'verbose_name_plural': 'Configuração do Google Drive',
            },
        ),
    ]
