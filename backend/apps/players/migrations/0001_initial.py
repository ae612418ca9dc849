# Generated manually for initial setup
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Player',
            fields=[
                ('discord_id', models.CharField(max_length=32, primary_key=True, serialize=False)),
                ('display_name', models.CharField(blank=True, max_length=100, null=True)),
                ('elo_ranked', models.IntegerField(default=1000)),
                ('games_ranked', models.PositiveIntegerField(default=0)),
                ('games_casual', models.PositiveIntegerField(default=0)),
                ('wins_imposter_ranked', models.PositiveIntegerField(default=0)),
                ('wins_imposter_casual', models.PositiveIntegerField(default=0)),
                ('wins_crew_ranked', models.PositiveIntegerField(default=0)),
                ('wins_crew_casual', models.PositiveIntegerField(default=0)),
                ('duo_coins', models.IntegerField(default=0)),
                ('duo_games', models.PositiveIntegerField(default=0)),
                ('violations_count', models.PositiveIntegerField(default=0)),
                ('banned_until', models.DateTimeField(blank=True, null=True)),
                ('last_violation_at', models.DateTimeField(blank=True, null=True)),
                ('last_match_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('version', models.PositiveIntegerField(default=0)),
            ],
            options={
                'db_table': 'players',
                'ordering': ['-elo_ranked'],
                'indexes': [
                    models.Index(fields=['games_ranked', 'elo_ranked'], name='players_games_elo_idx'),
                ],
            },
        ),
    ]
