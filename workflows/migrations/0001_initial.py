import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
        ('members', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='EmailWorkflow',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True, null=True)),
                ('trigger_event', models.CharField(choices=[('signup', 'New Signup'), ('renewal', 'Membership Renewal'), ('both', 'Both Signup and Renewal')], default='signup', max_length=20)),
                ('conditions', models.JSONField(blank=True, default=dict, help_text='Reserved for rule predicates, see workflows.conditions')),
                ('recipient_type', models.CharField(choices=[('email', 'Specific Email Address'), ('position', 'Committee Position Holder'), ('all_members', 'All Active Members')], default='email', max_length=20)),
                ('recipient_email', models.EmailField(blank=True, max_length=254, null=True)),
                ('recipient_name', models.CharField(blank=True, max_length=200, null=True)),
                ('email_subject', models.CharField(help_text='Supports {{first_name}}, {{last_name}}, {{email}}, {{membership_type}}', max_length=255)),
                ('email_template', models.TextField(help_text='Supports the same variables as the subject. HTML is allowed.')),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='email_workflows', to='core.organization')),
                ('recipient_position', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='email_workflows', to='members.committeeposition')),
            ],
            options={
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['organization', 'is_active', 'trigger_event'], name='workflow_trigger_idx')],
            },
        ),
    ]
