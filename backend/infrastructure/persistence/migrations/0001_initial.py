import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import simple_history.models
from django.conf import settings
from django.db import migrations, models

import infrastructure.persistence.models.attachments


def _base_fields():
    return [
        ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
        ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False, verbose_name='ID')),
    ]


def _audit_fields(prefix):
    return [
        ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name=f'{prefix}_created', to=settings.AUTH_USER_MODEL, verbose_name='Created by')),
        ('updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name=f'{prefix}_updated', to=settings.AUTH_USER_MODEL, verbose_name='Updated by')),
    ]


def _historical_base_fields():
    return [
        ('created_at', models.DateTimeField(blank=True, db_index=True, editable=False, verbose_name='Created at')),
        ('updated_at', models.DateTimeField(blank=True, editable=False, verbose_name='Updated at')),
        ('id', models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, verbose_name='ID')),
        ('history_id', models.AutoField(primary_key=True, serialize=False)),
        ('history_date', models.DateTimeField(db_index=True)),
        ('history_change_reason', models.CharField(max_length=100, null=True)),
        ('history_type', models.CharField(choices=[('+', 'Created'), ('~', 'Changed'), ('-', 'Deleted')], max_length=1)),
        ('created_by', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Created by')),
        ('updated_by', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Updated by')),
        ('history_user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
    ]


def _historical_options(name, plural):
    return {
        'verbose_name': f'historical {name}',
        'verbose_name_plural': f'historical {plural}',
        'ordering': ('-history_date', '-history_id'),
        'get_latest_by': ('history_date', 'history_id'),
    }


def _boq_item_fields():
    return [
        ('code', models.CharField(db_index=True, max_length=100, verbose_name='Code')),
        ('description', models.TextField(verbose_name='Description')),
        ('description_ar', models.TextField(blank=True, verbose_name='Description (Arabic)')),
        ('quantity', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=18, validators=[django.core.validators.MinValueValidator(Decimal('0'))], verbose_name='Quantity')),
        ('unit', models.CharField(blank=True, max_length=50, verbose_name='Unit')),
        ('unit_ar', models.CharField(blank=True, max_length=50, verbose_name='Unit (Arabic)')),
        ('unit_rate', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=18, validators=[django.core.validators.MinValueValidator(Decimal('0'))], verbose_name='Unit rate')),
        ('total_amount', models.DecimalField(blank=True, decimal_places=4, max_digits=20, null=True, verbose_name='Total amount')),
        ('level', models.PositiveSmallIntegerField(default=0, verbose_name='Level')),
    ]


def _breakdown_item_fields():
    return [
        ('keyword', models.CharField(max_length=200, verbose_name='Keyword')),
        ('keyword_ar', models.CharField(blank=True, max_length=200, verbose_name='Keyword (Arabic)')),
        ('description', models.TextField(blank=True, verbose_name='Description')),
        ('description_ar', models.TextField(blank=True, verbose_name='Description (Arabic)')),
        ('percentage', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=7, validators=[django.core.validators.MinValueValidator(Decimal('0')), django.core.validators.MaxValueValidator(Decimal('1'))], verbose_name='Percentage')),
        ('value', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=18, verbose_name='Value')),
        ('unit_rate', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=18, verbose_name='Unit rate (copy of BOQ item)')),
        ('quantity', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=18, verbose_name='Quantity')),
        ('is_leaf', models.BooleanField(default=False, verbose_name='Leaf sub-item')),
    ]


WIR_STATUS_CHOICES = [('submitted', 'Submitted'), ('completed', 'Completed')]
WIR_RESULT_CHOICES = [('A', 'A - Approved'), ('B', 'B - Approved with conditions'), ('C', 'C - Rejected')]


def _wir_fields():
    return [
        ('description', models.TextField(blank=True, verbose_name='Description')),
        ('description_ar', models.TextField(blank=True, verbose_name='Description (Arabic)')),
        ('submittal_date', models.DateField(verbose_name='Submittal date')),
        ('received_date', models.DateField(blank=True, null=True, verbose_name='Received date')),
        ('start_on_site_date', models.DateField(blank=True, null=True, verbose_name='Start on site')),
        ('status', models.CharField(choices=WIR_STATUS_CHOICES, db_index=True, default='submitted', max_length=20, verbose_name='Status')),
        ('result', models.CharField(blank=True, choices=WIR_RESULT_CHOICES, db_index=True, max_length=1, null=True, verbose_name='Result')),
        ('status_conditions', models.TextField(blank=True, verbose_name='Conditions')),
        ('region', models.CharField(blank=True, max_length=100, verbose_name='Region')),
        ('zone', models.CharField(blank=True, max_length=100, verbose_name='Zone')),
        ('road', models.CharField(blank=True, max_length=200, verbose_name='Road')),
        ('line', models.CharField(blank=True, max_length=100, verbose_name='Line')),
        ('manhole_from', models.CharField(blank=True, max_length=50, verbose_name='Manhole from')),
        ('manhole_to', models.CharField(blank=True, max_length=50, verbose_name='Manhole to')),
        ('length_of_line', models.DecimalField(blank=True, decimal_places=3, max_digits=14, null=True, verbose_name='Length of line')),
        ('diameter_of_line', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='Diameter of line')),
        ('line_no', models.CharField(blank=True, max_length=50, verbose_name='Line no.')),
        ('value', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=18, verbose_name='Value')),
        ('linked_boq_items', models.JSONField(blank=True, default=list, verbose_name='Linked BOQ items')),
        ('selected_breakdown_items', models.JSONField(blank=True, default=list, verbose_name='Selected breakdown items')),
        ('calculated_amount', models.DecimalField(blank=True, decimal_places=4, max_digits=20, null=True, verbose_name='Calculated amount')),
        ('calculation_equation', models.TextField(blank=True, verbose_name='Calculation equation')),
        ('revision_number', models.PositiveIntegerField(default=0, verbose_name='Revision number')),
    ]


def _historical_fk(to, verbose_name):
    return models.ForeignKey(
        blank=True,
        db_constraint=False,
        null=True,
        on_delete=django.db.models.deletion.DO_NOTHING,
        related_name='+',
        to=to,
        verbose_name=verbose_name,
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('contenttypes', '0002_remove_content_type_name'),
    ]

    operations = [
        # Rosters
        migrations.CreateModel(
            name='Contractor',
            fields=_base_fields() + [
                ('name', models.CharField(db_index=True, max_length=255, verbose_name='Name')),
                ('company', models.CharField(blank=True, max_length=255, verbose_name='Company')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='Email')),
                ('phone', models.CharField(blank=True, max_length=50, verbose_name='Phone')),
            ] + _audit_fields('contractor'),
            options={
                'db_table': 'contractors',
                'verbose_name': 'Contractor',
                'verbose_name_plural': 'Contractors',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Engineer',
            fields=_base_fields() + [
                ('name', models.CharField(db_index=True, max_length=255, verbose_name='Name')),
                ('department', models.CharField(blank=True, max_length=255, verbose_name='Department')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='Email')),
                ('phone', models.CharField(blank=True, max_length=50, verbose_name='Phone')),
                ('specialization', models.CharField(blank=True, max_length=255, verbose_name='Specialization')),
            ] + _audit_fields('engineer'),
            options={
                'db_table': 'engineers',
                'verbose_name': 'Engineer',
                'verbose_name_plural': 'Engineers',
                'ordering': ['name'],
            },
        ),

        # Files
        migrations.CreateModel(
            name='Attachment',
            fields=_base_fields() + [
                ('file', models.FileField(max_length=500, upload_to=infrastructure.persistence.models.attachments.attachment_upload_to, verbose_name='File')),
                ('file_name', models.CharField(blank=True, max_length=255, verbose_name='File name')),
                ('file_size', models.PositiveBigIntegerField(default=0, verbose_name='Size (bytes)')),
                ('file_type', models.CharField(blank=True, max_length=100, verbose_name='Content type')),
                ('description', models.TextField(blank=True, verbose_name='Description')),
                ('tags', models.JSONField(blank=True, default=list, verbose_name='Tags')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
                ('uploaded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='attachments', to=settings.AUTH_USER_MODEL, verbose_name='Uploaded by')),
            ] + _audit_fields('attachment'),
            options={
                'db_table': 'attachments',
                'verbose_name': 'Attachment',
                'verbose_name_plural': 'Attachments',
                'ordering': ['-created_at'],
            },
        ),

        # BOQ
        migrations.CreateModel(
            name='BOQItem',
            fields=_base_fields() + _boq_item_fields() + [
                ('parent', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='children', to='persistence.boqitem', verbose_name='Parent item')),
            ] + _audit_fields('boqitem'),
            options={
                'db_table': 'boq_items',
                'verbose_name': 'BOQ item',
                'verbose_name_plural': 'BOQ items',
                'ordering': ['created_at'],
                'indexes': [models.Index(fields=['parent', 'created_at'], name='boq_items_parent__7c1f0e_idx')],
            },
        ),
        migrations.CreateModel(
            name='BreakdownItem',
            fields=_base_fields() + _breakdown_item_fields() + [
                ('boq_item', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='breakdown_items', to='persistence.boqitem', verbose_name='BOQ item')),
                ('parent_breakdown', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='sub_items', to='persistence.breakdownitem', verbose_name='Parent breakdown item')),
            ] + _audit_fields('breakdownitem'),
            options={
                'db_table': 'breakdown_items',
                'verbose_name': 'Breakdown item',
                'verbose_name_plural': 'Breakdown items',
                'ordering': ['created_at'],
                'indexes': [models.Index(fields=['boq_item', 'is_leaf'], name='breakdown_i_boq_ite_3e9a2d_idx')],
            },
        ),

        # WIR
        migrations.CreateModel(
            name='WIR',
            fields=_base_fields() + [
                ('wir_number', models.CharField(max_length=50, unique=True, verbose_name='WIR number')),
            ] + _wir_fields() + [
                ('contractor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='wirs', to='persistence.contractor', verbose_name='Contractor')),
                ('engineer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='wirs', to='persistence.engineer', verbose_name='Engineer')),
                ('attachments', models.ManyToManyField(blank=True, related_name='wirs', to='persistence.attachment', verbose_name='Attachments')),
                ('parent_wir', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='revisions', to='persistence.wir', verbose_name='Parent WIR')),
                ('original_wir', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='chain_revisions', to='persistence.wir', verbose_name='Original WIR')),
            ] + _audit_fields('wir'),
            options={
                'db_table': 'wirs',
                'verbose_name': 'WIR',
                'verbose_name_plural': 'WIRs',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'result'], name='wirs_status_0b6f52_idx'),
                    models.Index(fields=['received_date'], name='wirs_receive_5d8a41_idx'),
                ],
            },
        ),

        # Audit
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('timestamp', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Timestamp')),
                ('username', models.CharField(blank=True, max_length=150, verbose_name='Username')),
                ('user_ip', models.GenericIPAddressField(blank=True, null=True, verbose_name='IP address')),
                ('user_agent', models.CharField(blank=True, max_length=500, verbose_name='User Agent')),
                ('action', models.CharField(choices=[('create', 'Create'), ('update', 'Update'), ('delete', 'Delete'), ('submit_result', 'Submit result'), ('request_revision', 'Request revision'), ('sync_rates', 'Sync rates'), ('login', 'Login'), ('logout', 'Logout'), ('export', 'Export'), ('import', 'Import')], db_index=True, max_length=20, verbose_name='Action')),
                ('object_id', models.CharField(blank=True, db_index=True, max_length=100, verbose_name='Object ID')),
                ('resource_type', models.CharField(blank=True, db_index=True, max_length=50, verbose_name='Resource type')),
                ('object_repr', models.CharField(blank=True, max_length=500, verbose_name='Object')),
                ('changes', models.JSONField(blank=True, default=dict, verbose_name='Changes')),
                ('extra_data', models.JSONField(blank=True, default=dict, verbose_name='Extra data')),
                ('content_type', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to='contenttypes.contenttype', verbose_name='Object type')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_logs', to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'db_table': 'audit_log',
                'verbose_name': 'Audit log entry',
                'verbose_name_plural': 'Audit log',
                'ordering': ['-timestamp'],
                'indexes': [
                    models.Index(fields=['content_type', 'object_id'], name='audit_log_content_4e1b9c_idx'),
                    models.Index(fields=['user', 'timestamp'], name='audit_log_user_id_8a2f13_idx'),
                    models.Index(fields=['action', 'timestamp'], name='audit_log_action_6c0d7e_idx'),
                ],
            },
        ),

        # Row history (django-simple-history)
        migrations.CreateModel(
            name='HistoricalBOQItem',
            fields=_historical_base_fields() + _boq_item_fields() + [
                ('parent', _historical_fk('persistence.boqitem', 'Parent item')),
            ],
            options=_historical_options('BOQ item', 'BOQ items'),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name='HistoricalBreakdownItem',
            fields=_historical_base_fields() + _breakdown_item_fields() + [
                ('boq_item', _historical_fk('persistence.boqitem', 'BOQ item')),
                ('parent_breakdown', _historical_fk('persistence.breakdownitem', 'Parent breakdown item')),
            ],
            options=_historical_options('Breakdown item', 'Breakdown items'),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name='HistoricalWIR',
            fields=_historical_base_fields() + [
                ('wir_number', models.CharField(db_index=True, max_length=50, verbose_name='WIR number')),
            ] + _wir_fields() + [
                ('contractor', _historical_fk('persistence.contractor', 'Contractor')),
                ('engineer', _historical_fk('persistence.engineer', 'Engineer')),
                ('parent_wir', _historical_fk('persistence.wir', 'Parent WIR')),
                ('original_wir', _historical_fk('persistence.wir', 'Original WIR')),
            ],
            options=_historical_options('WIR', 'WIRs'),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
