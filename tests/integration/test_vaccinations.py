"""
Vaccination Scheduling Integration Tests

Tests the vaccination schedule of a batch:
- Derived status (completed > overdue > pending)
- Scheduling from templates and by hand
- Completion and the derived Vaccines expense
- Template library maintenance and delete protection
- Excel / PDF schedule exports

SCENARIO:
=========
A batch started 10 days ago gets Marek's (day 1), Newcastle (day 7) and
Gumboro (day 14) from the farmer's templates. Marek's is done, Newcastle
is overdue and Gumboro is still pending.
"""

import io
from datetime import timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest

from core.exceptions import ConflictError, NotFound, ValidationError

pytestmark = pytest.mark.django_db


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def scheduler(farmer):
    from vaccinations.services import VaccinationScheduler
    return VaccinationScheduler(farmer)


@pytest.fixture
def batch(make_batch):
    return make_batch()


@pytest.fixture
def templates(make_template):
    return [
        make_template("Marek's", 1),
        make_template('Newcastle', 7),
        make_template('Gumboro', 14),
    ]


@pytest.fixture
def schedule(scheduler, batch, templates):
    return {v.vaccine_name: v for v in scheduler.schedule_from_templates(batch, [t.id for t in templates])}


# =============================================================================
# STATUS
# =============================================================================

class TestVaccinationStatus:

    def test_completed_wins(self, today):
        from vaccinations.models import vaccination_status

        assert vaccination_status(today - timedelta(days=5), today, today) == 'completed'

    def test_past_uncompleted_is_overdue(self, today):
        from vaccinations.models import vaccination_status

        assert vaccination_status(today - timedelta(days=1), None, today) == 'overdue'

    def test_today_and_future_are_pending(self, today):
        from vaccinations.models import vaccination_status

        assert vaccination_status(today, None, today) == 'pending'
        assert vaccination_status(today + timedelta(days=3), None, today) == 'pending'


# =============================================================================
# SCHEDULING
# =============================================================================

class TestScheduleFromTemplates:

    def test_dates_follow_batch_start(self, schedule, batch):
        assert schedule["Marek's"].scheduled_date == batch.start_date + timedelta(days=1)
        assert schedule['Newcastle'].scheduled_date == batch.start_date + timedelta(days=7)
        assert schedule['Gumboro'].scheduled_date == batch.start_date + timedelta(days=14)

    def test_statuses_in_scenario(self, scheduler, schedule, today):
        scheduler.complete(schedule["Marek's"].id, completed_date=today - timedelta(days=9))

        statuses = {v.vaccine_name: v.get_status(today) for v in scheduler.list_vaccinations()}
        assert statuses == {"Marek's": 'completed', 'Newcastle': 'overdue', 'Gumboro': 'pending'}

    def test_template_edits_do_not_touch_existing_doses(self, farmer, schedule, templates):
        from vaccinations.services import VaccineTemplateService

        VaccineTemplateService(farmer).update_template(templates[1].id, name='ND Lasota', age_in_days=21)

        dose = schedule['Newcastle']
        dose.refresh_from_db()
        assert dose.vaccine_name == 'Newcastle'
        assert dose.age_in_days == 7

    def test_inactive_templates_skipped(self, scheduler, batch, make_template):
        inactive = make_template('Fowl Pox', 30, is_active=False)
        assert scheduler.schedule_from_templates(batch, [inactive.id]) == []

    def test_other_owners_templates_skipped(self, scheduler, batch, make_template, other_farmer):
        foreign = make_template('Coryza', 40, owner=other_farmer)
        assert scheduler.schedule_from_templates(batch, [foreign.id]) == []

    def test_empty_and_malformed_ids(self, scheduler, batch):
        assert scheduler.schedule_from_templates(batch, []) == []
        assert scheduler.schedule_from_templates(batch, ['not-a-uuid', '']) == []

    def test_add_templates_requires_selection(self, scheduler, batch):
        with pytest.raises(ValidationError):
            scheduler.add_templates_to_batch(batch.id, [])

    def test_add_templates_api(self, farmer_client, batch, templates):
        response = farmer_client.post(
            f'/api/batches/{batch.id}/vaccines/',
            {'template_ids': [str(templates[0].id), str(templates[2].id)]},
            format='json',
        )
        assert response.status_code == 201
        assert response.data['created'] == 2
        assert {v['vaccine_name'] for v in response.data['vaccinations']} == {"Marek's", 'Gumboro'}


class TestManualScheduling:

    def test_manual_dose(self, scheduler, batch):
        vaccination = scheduler.schedule_manual(batch.id, 'Infectious Bronchitis', 21, notes='Eye drop')

        assert vaccination.template is None
        assert vaccination.scheduled_date == batch.start_date + timedelta(days=21)
        assert vaccination.notes == 'Eye drop'

    def test_name_required(self, scheduler, batch):
        with pytest.raises(ValidationError):
            scheduler.schedule_manual(batch.id, '  ', 21)

    def test_negative_age_rejected(self, scheduler, batch):
        with pytest.raises(ValidationError):
            scheduler.schedule_manual(batch.id, 'IB', -1)

    @pytest.mark.parametrize('age', ['three weeks', None, '7.5'])
    def test_non_numeric_age_rejected(self, scheduler, batch, age):
        from vaccinations.models import Vaccination

        with pytest.raises(ValidationError) as excinfo:
            scheduler.schedule_manual(batch.id, 'IB', age)

        assert 'age_in_days' in excinfo.value.detail
        assert not Vaccination.objects.filter(vaccine_name='IB').exists()

    def test_other_owners_batch(self, other_farmer, batch):
        from vaccinations.services import VaccinationScheduler

        with pytest.raises(NotFound):
            VaccinationScheduler(other_farmer).schedule_manual(batch.id, 'IB', 21)


# =============================================================================
# COMPLETION
# =============================================================================

class TestCompletion:

    def test_complete_with_cost_books_expense_once(self, scheduler, schedule, today):
        from finances.models import Transaction

        dose = schedule['Newcastle']
        scheduler.complete(dose.id, actual_cost=Decimal('35.00'))
        scheduler.complete(dose.id, notes='Second visit')

        entries = Transaction.objects.filter(vaccination=dose)
        assert entries.count() == 1
        entry = entries.get()
        assert entry.category == 'Vaccines'
        assert entry.transaction_type == 'expense'
        assert entry.amount == Decimal('35.00')
        assert entry.transaction_date == today
        assert entry.description == 'Vaccination: Newcastle for batch Layers A'

    def test_zero_cost_books_nothing(self, scheduler, schedule):
        from finances.models import Transaction

        scheduler.complete(schedule['Gumboro'].id, actual_cost=Decimal('0'))
        assert not Transaction.objects.filter(category='Vaccines').exists()

    def test_cost_added_on_later_completion_is_booked(self, scheduler, schedule):
        from finances.models import Transaction

        dose = schedule['Gumboro']
        scheduler.complete(dose.id, actual_cost=Decimal('0'))
        scheduler.complete(dose.id, actual_cost=Decimal('40.00'))
        scheduler.complete(dose.id, actual_cost=Decimal('55.00'))

        entry = Transaction.objects.get(vaccination=dose)
        assert entry.amount == Decimal('40.00')
        assert entry.auto_generated is True

    def test_expense_dated_at_completion(self, scheduler, schedule, today):
        from finances.models import Transaction

        completed_on = today - timedelta(days=3)
        scheduler.complete(schedule["Marek's"].id, completed_date=completed_on, actual_cost=Decimal('12.50'))

        assert Transaction.objects.get(category='Vaccines').transaction_date == completed_on

    def test_complete_via_api(self, farmer_client, schedule):
        dose = schedule['Newcastle']
        response = farmer_client.patch(
            f'/api/vaccinations/{dose.id}/', {'actual_cost': '40.00'}, format='json'
        )
        assert response.status_code == 200
        assert response.data['status'] == 'completed'
        assert response.data['actual_cost'] == '40.00'


class TestListing:

    def test_status_filters(self, scheduler, schedule, today):
        scheduler.complete(schedule["Marek's"].id)

        def names(status):
            return {v.vaccine_name for v in scheduler.list_vaccinations(status=status, today=today)}

        assert names('completed') == {"Marek's"}
        assert names('overdue') == {'Newcastle'}
        assert names('pending') == {'Gumboro'}
        assert len(names(None)) == 3

    def test_list_api_filters_by_batch(self, farmer_client, schedule, make_batch, scheduler):
        other_batch = make_batch(name='Broilers')
        scheduler.schedule_manual(other_batch.id, 'IB', 21)

        response = farmer_client.get('/api/vaccinations/', {'batch': str(other_batch.id)})
        assert response.status_code == 200
        assert response.data['count'] == 1
        assert response.data['results'][0]['batch_name'] == 'Broilers'

    def test_delete_vaccination(self, farmer_client, schedule):
        dose = schedule['Gumboro']
        response = farmer_client.delete(f'/api/vaccinations/{dose.id}/')
        assert response.status_code == 204

        response = farmer_client.get(f'/api/vaccinations/{dose.id}/')
        assert response.status_code == 404


# =============================================================================
# TEMPLATES
# =============================================================================

class TestTemplates:

    def test_list_hides_inactive_by_default(self, farmer_client, make_template):
        make_template('Newcastle', 7)
        make_template('Fowl Pox', 30, is_active=False)

        response = farmer_client.get('/api/vaccine-templates/')
        assert [t['name'] for t in response.data] == ['Newcastle']

        response = farmer_client.get('/api/vaccine-templates/', {'include_inactive': 'true'})
        assert [t['name'] for t in response.data] == ['Newcastle', 'Fowl Pox']

    def test_create_template_api(self, farmer_client):
        response = farmer_client.post('/api/vaccine-templates/', {
            'name': 'Gumboro', 'age_in_days': 14, 'default_cost': '25.00'
        }, format='json')
        assert response.status_code == 201
        assert response.data['is_active'] is True

    def test_referenced_template_cannot_be_deleted(self, farmer, schedule, templates):
        from vaccinations.services import VaccineTemplateService

        with pytest.raises(ConflictError) as exc_info:
            VaccineTemplateService(farmer).delete_template(templates[0].id)

        assert str(exc_info.value.detail) == (
            'Cannot delete template: 1 vaccination(s) reference this template. Consider deactivating instead.'
        )

    def test_referenced_template_delete_api_is_409(self, farmer_client, schedule, templates):
        response = farmer_client.delete(f'/api/vaccine-templates/{templates[1].id}/')
        assert response.status_code == 409
        assert response.data['code'] == 'conflict'

    def test_unreferenced_template_deleted(self, farmer_client, make_template):
        template = make_template('Coccidiosis', 20)
        response = farmer_client.delete(f'/api/vaccine-templates/{template.id}/')
        assert response.status_code == 204

    def test_deactivate_instead(self, farmer_client, schedule, templates):
        response = farmer_client.patch(
            f'/api/vaccine-templates/{templates[0].id}/', {'is_active': False}, format='json'
        )
        assert response.status_code == 200
        assert response.data['is_active'] is False


# =============================================================================
# EXPORTS
# =============================================================================

class TestExportHelpers:

    def test_format_export_date(self):
        from datetime import date
        from vaccinations.exports import format_export_date

        assert format_export_date(date(2025, 3, 7)) == 'Mar 07, 2025'
        assert format_export_date(None) == '-'

    def test_categorize_orders_groups(self, today):
        from vaccinations.exports import categorize_vaccines

        doses = [
            SimpleNamespace(name='a', completed_date=today - timedelta(days=5), scheduled_date=today),
            SimpleNamespace(name='b', completed_date=None, scheduled_date=today + timedelta(days=9)),
            SimpleNamespace(name='c', completed_date=today - timedelta(days=1), scheduled_date=today),
            SimpleNamespace(name='d', completed_date=None, scheduled_date=today - timedelta(days=2)),
        ]

        groups = categorize_vaccines(doses)
        assert [d.name for d in groups['completed']] == ['c', 'a']
        assert [d.name for d in groups['upcoming']] == ['d', 'b']

    def test_summary_counts_overdue(self, schedule, today):
        from vaccinations.exports import vaccination_summary

        summary = vaccination_summary(list(schedule.values()), today)
        assert summary == {'total': 3, 'completed': 0, 'upcoming': 3, 'overdue': 2}


class TestExportAPI:

    def test_xlsx_export(self, farmer_client, batch, schedule, today):
        from openpyxl import load_workbook

        response = farmer_client.get(f'/api/batches/{batch.id}/vaccinations/export/', {'format': 'xlsx'})

        assert response.status_code == 200
        assert response['Content-Type'].startswith('application/vnd.openxmlformats')
        assert response['Content-Disposition'] == (
            f'attachment; filename="vaccinations_{batch.batch_code}_{today:%Y%m%d}.xlsx"'
        )
        workbook = load_workbook(io.BytesIO(response.content))
        assert workbook.sheetnames == ['Overview', 'Completed Vaccinations', 'Upcoming Vaccinations']
        assert workbook['Upcoming Vaccinations'].max_row == 4

    def test_pdf_export(self, farmer_client, batch, schedule):
        response = farmer_client.get(f'/api/batches/{batch.id}/vaccinations/export/', {'format': 'pdf'})

        assert response.status_code == 200
        assert response['Content-Type'] == 'application/pdf'
        assert response.content.startswith(b'%PDF')

    def test_unknown_format_is_400(self, farmer_client, batch):
        response = farmer_client.get(f'/api/batches/{batch.id}/vaccinations/export/', {'format': 'csv'})
        assert response.status_code == 400
        assert response.data['code'] == 'validation_error'

    def test_other_owners_batch_is_404(self, api_client, other_farmer, batch):
        api_client.force_authenticate(user=other_farmer)
        response = api_client.get(f'/api/batches/{batch.id}/vaccinations/export/')
        assert response.status_code == 404
