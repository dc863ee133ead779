from django.db import migrations, models
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Job',
            fields=[
                ('id', models.BigAutoField(
                    auto_created=True,
                    primary_key=True,
                    serialize=False,
                    verbose_name='ID',
                )),
                ('queue_name', models.CharField(
                    db_index=True,
                    help_text='Queue the job was enqueued on',
                    max_length=100,
                )),
                ('payload', models.JSONField(
                    default=dict,
                    help_text='Handler input',
                )),
                ('status', models.CharField(
                    choices=[
                        ('queued', 'Queued'),
                        ('running', 'Running'),
                        ('completed', 'Completed'),
                        ('failed', 'Failed'),
                    ],
                    db_index=True,
                    default='queued',
                    max_length=20,
                )),
                ('attempts', models.PositiveIntegerField(default=0)),
                ('max_attempts', models.PositiveIntegerField(default=3)),
                ('error_message', models.TextField(blank=True, default='')),
                ('available_at', models.DateTimeField(
                    default=django.utils.timezone.now,
                    help_text='Earliest time the job may run',
                )),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('started_at', models.DateTimeField(blank=True, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
            ],
            options={
                'verbose_name': 'Job',
                'verbose_name_plural': 'Jobs',
                'ordering': ['created_at', 'id'],
                'indexes': [
                    models.Index(
                        fields=['status', 'queue_name', 'available_at'],
                        name='jobs_poll_idx',
                    ),
                ],
            },
        ),
    ]
