from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='File',
            fields=[
                ('id', models.BigAutoField(
                    auto_created=True,
                    primary_key=True,
                    serialize=False,
                    verbose_name='ID',
                )),
                ('name', models.CharField(
                    help_text='Display name',
                    max_length=255,
                )),
                ('kind', models.CharField(
                    choices=[
                        ('folder', 'Folder'),
                        ('file', 'File'),
                        ('image', 'Image'),
                    ],
                    help_text='folder, file or image; immutable',
                    max_length=16,
                )),
                ('is_public', models.BooleanField(
                    default=False,
                    help_text='Readable by anyone when set',
                )),
                ('blob_path', models.CharField(
                    blank=True,
                    default='',
                    help_text='Opaque blob storage name; empty for folders',
                    max_length=255,
                )),
                ('uploaded_at', models.DateTimeField(auto_now_add=True)),
                ('modified_at', models.DateTimeField(auto_now=True)),
                ('parent', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='children',
                    to='files.file',
                )),
                ('user', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='files',
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                'verbose_name': 'File',
                'verbose_name_plural': 'Files',
                'ordering': ['id'],
                'indexes': [
                    models.Index(
                        fields=['user', 'parent'],
                        name='files_user_parent_idx',
                    ),
                ],
            },
        ),
    ]
