# Generated manually for initial setup
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ('players', '0001_initial'),
    ]

    operations = [
        # Create Category first (no dependencies)
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('slug', models.SlugField(max_length=100, unique=True)),
                ('name', models.CharField(max_length=100)),
            ],
            options={
                'db_table': 'categories',
                'ordering': ['name'],
                'verbose_name_plural': 'Categories',
            },
        ),
        migrations.CreateModel(
            name='Match',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('guild_id', models.CharField(db_index=True, max_length=32)),
                ('mode', models.CharField(choices=[('ranked', 'Ranked'), ('casual', 'Casual')], max_length=10)),
                ('started_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('ended_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('aborted_reason', models.CharField(blank=True, max_length=100, null=True)),
                ('any_placement', models.BooleanField(default=False)),
                ('idempotency_key', models.CharField(max_length=128, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'matches',
                'ordering': ['-started_at'],
                'verbose_name_plural': 'Matches',
                'indexes': [
                    models.Index(fields=['mode', '-started_at'], name='matches_mode_started_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='MatchRound',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('round_no', models.PositiveIntegerField()),
                ('word', models.CharField(blank=True, max_length=100, null=True)),
                ('winner', models.CharField(choices=[('imposter', 'Imposter'), ('crew', 'Crew')], max_length=10)),
                ('win_method', models.CharField(choices=[('guessed_word', 'Guessed Word'), ('voted_out_innocent', 'Voted Out Innocent'), ('voted_out_imposter', 'Voted Out Imposter'), ('wrong_guess', 'Wrong Guess'), ('timeout', 'Timeout'), ('other', 'Other')], default='other', max_length=20)),
                ('points_imposter', models.PositiveIntegerField(default=2)),
                ('points_crew', models.PositiveIntegerField(default=1)),
                ('aborted', models.BooleanField(default=False)),
                ('aborted_reason', models.CharField(blank=True, max_length=100, null=True)),
                ('category', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='rounds', to='matches.category')),
                ('imposter', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='imposter_rounds', to='players.player')),
                ('match', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='rounds', to='matches.match')),
            ],
            options={
                'db_table': 'match_rounds',
                'ordering': ['match', 'round_no'],
                'indexes': [
                    models.Index(fields=['match', 'round_no'], name='match_rounds_match_no_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='RoundPlayerPoints',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('points', models.PositiveIntegerField(default=0)),
                ('player', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='round_points', to='players.player')),
                ('round', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='player_points', to='matches.matchround')),
            ],
            options={
                'db_table': 'round_player_points',
                'unique_together': {('round', 'player')},
            },
        ),
        migrations.CreateModel(
            name='MatchResult',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('total_points', models.PositiveIntegerField(default=0)),
                ('placement', models.FloatField(blank=True, null=True)),
                ('elo_before', models.IntegerField(blank=True, null=True)),
                ('elo_after', models.IntegerField(blank=True, null=True)),
                ('elo_delta', models.IntegerField(default=0)),
                ('placement_phase', models.BooleanField(default=False)),
                ('match', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='results', to='matches.match')),
                ('player', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='results', to='players.player')),
            ],
            options={
                'db_table': 'match_results',
                'ordering': ['match', 'placement'],
                'unique_together': {('match', 'player')},
                'indexes': [
                    models.Index(fields=['player', 'match'], name='match_results_player_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PlayerViolation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('guild_id', models.CharField(max_length=32)),
                ('violation_type', models.CharField(choices=[('afk', 'AFK'), ('unangemessen', 'Inappropriate'), ('left_voice', 'Left Voice')], max_length=20)),
                ('source', models.CharField(default='discord', max_length=20)),
                ('suspended_until', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('match', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='violations', to='matches.match')),
                ('player', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='violations', to='players.player')),
            ],
            options={
                'db_table': 'player_violations',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['guild_id', 'player'], name='violations_guild_player_idx'),
                ],
            },
        ),
    ]
