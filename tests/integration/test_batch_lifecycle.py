"""
Batch Lifecycle Integration Tests

Tests batch registration, size changes, restricted edits and removal:
- Batch code generation and collision handling
- Purchase expense derived from the batch cost
- Mortality (floored decrement) and hatching (increment)
- Egg logs and egg statistics
- Gender-count validation on edit
- Ordered cascade delete that keeps the ledger

SCENARIO:
=========
A farmer registers 100 Isa Brown chicks bought for GHS 500 (GHS 5 per bird).
10 birds die, 5 chicks hatch from the incubator: the batch ends at 95 birds.
"""

import re
from datetime import timedelta
from decimal import Decimal

import pytest

from core.exceptions import ConflictError, NotFound, ValidationError

pytestmark = pytest.mark.django_db


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def service(farmer):
    from batches.services import BatchService
    return BatchService(farmer)


@pytest.fixture
def batch(make_batch):
    return make_batch(total_cost=Decimal('500.00'))


# =============================================================================
# PURE FUNCTIONS
# =============================================================================

class TestBatchCode:

    def test_code_format(self):
        from batches.services import generate_batch_code

        code = generate_batch_code()
        assert re.fullmatch(r'B[0-9A-Z]{4,}', code)
        assert code == code.upper()

    def test_code_encodes_epoch_millis(self):
        from batches.services import generate_batch_code, to_base36

        code = generate_batch_code(now=1700000000.0)
        assert code.startswith('B' + to_base36(1700000000000))
        assert len(code) == 1 + len(to_base36(1700000000000)) + 3

    def test_base36(self):
        from batches.services import to_base36

        assert to_base36(0) == '0'
        assert to_base36(35) == 'Z'
        assert to_base36(36) == '10'


class TestAgeStatus:

    @pytest.mark.parametrize('age, expected', [
        (0, 'chick'),
        (89, 'chick'),
        (90, 'growing'),
        (134, 'growing'),
        (135, 'layer'),
        (400, 'layer'),
    ])
    def test_age_thresholds(self, today, age, expected):
        from batches.models import age_status

        assert age_status(today - timedelta(days=age), False, today) == expected

    def test_archived_overrides_age(self, today):
        from batches.models import age_status

        assert age_status(today - timedelta(days=200), True, today) == 'archived'


# =============================================================================
# CREATION
# =============================================================================

class TestBatchCreation:

    def test_create_sets_current_size_and_cost_per_bird(self, batch):
        assert batch.current_size == 100
        assert batch.cost_per_bird == Decimal('5.00')
        assert batch.batch_code.startswith('B')

    def test_cost_per_bird_without_cost(self, make_batch):
        batch = make_batch()
        assert batch.cost_per_bird is None

    def test_create_records_stock_purchase(self, batch):
        from finances.models import Transaction

        entry = Transaction.objects.get(batch=batch)
        assert entry.transaction_type == 'expense'
        assert entry.category == 'Stock Purchase'
        assert entry.amount == Decimal('500.00')
        assert entry.transaction_date == batch.start_date
        assert entry.description == 'Purchase of 100 chick birds for batch Layers A (Isa Brown)'
        assert entry.source == ('batch', batch.id)

    def test_zero_cost_records_nothing(self, make_batch):
        from finances.models import Transaction

        batch = make_batch(total_cost=Decimal('0'))
        assert not Transaction.objects.filter(batch=batch).exists()

    def test_supplied_code_is_upper_cased(self, make_batch):
        batch = make_batch(batch_code='layers-01')
        assert batch.batch_code == 'LAYERS-01'

    def test_duplicate_supplied_code_conflicts(self, make_batch):
        make_batch(batch_code='DUP-1')
        with pytest.raises(ConflictError):
            make_batch(batch_code='dup-1')

    def test_create_schedules_templates(self, make_batch, make_template):
        from vaccinations.models import Vaccination

        template = make_template('Gumboro', 14)
        batch = make_batch(vaccine_template_ids=[str(template.id)])

        vaccination = Vaccination.objects.get(batch=batch)
        assert vaccination.vaccine_name == 'Gumboro'
        assert vaccination.scheduled_date == batch.start_date + timedelta(days=14)

    def test_invalid_batch_rolls_back(self, make_batch):
        from batches.models import Batch
        from django.core.exceptions import ValidationError as DjangoValidationError

        with pytest.raises(DjangoValidationError):
            make_batch(initial_size=10, male_count=8, female_count=8)
        assert not Batch.objects.exists()


class TestBatchCodeCollisions:

    def test_retries_until_code_is_free(self, make_batch, monkeypatch):
        make_batch(batch_code='BTAKEN')
        codes = iter(['BTAKEN', 'BTAKEN', 'BFREE'])
        monkeypatch.setattr('batches.services.generate_batch_code', lambda: next(codes))

        batch = make_batch()
        assert batch.batch_code == 'BFREE'

    def test_strict_mode_conflicts_after_max_attempts(self, make_batch, monkeypatch, settings):
        settings.BATCH_CODE_STRICT = True
        make_batch(batch_code='BSAME')
        calls = []

        def same_code():
            calls.append(1)
            return 'BSAME'

        monkeypatch.setattr('batches.services.generate_batch_code', same_code)

        with pytest.raises(ConflictError):
            make_batch()
        assert len(calls) == settings.BATCH_CODE_MAX_ATTEMPTS

    def test_lenient_mode_uses_last_code_and_insert_conflicts(self, make_batch, monkeypatch, settings, caplog):
        settings.BATCH_CODE_STRICT = False
        make_batch(batch_code='BSAME')
        monkeypatch.setattr('batches.services.generate_batch_code', lambda: 'BSAME')

        with pytest.raises(ConflictError):
            make_batch()
        assert 'still collides' in caplog.text


# =============================================================================
# SIZE CHANGES
# =============================================================================

class TestMortality:

    def test_mortality_decrements_size(self, service, batch):
        record = service.record_mortality(batch.id, count=10, notes='Heat stress')

        batch.refresh_from_db()
        assert batch.current_size == 90
        assert record.age_group == 'chick'
        assert record.count == 10

    def test_mortality_floors_at_zero(self, service, batch):
        service.record_mortality(batch.id, count=250)

        batch.refresh_from_db()
        assert batch.current_size == 0

    def test_count_must_be_positive(self, service, batch):
        with pytest.raises(ValidationError):
            service.record_mortality(batch.id, count=0)

    def test_other_owner_batch_not_found(self, other_farmer, batch):
        from batches.services import BatchService

        with pytest.raises(NotFound):
            BatchService(other_farmer).record_mortality(batch.id, count=1)

        batch.refresh_from_db()
        assert batch.current_size == 100

    def test_age_group_snapshots_category(self, service, batch):
        service.update_batch(batch.id, category='adult')
        record = service.record_mortality(batch.id, count=1)
        service.update_batch(batch.id, category='chick')

        record.refresh_from_db()
        assert record.age_group == 'adult'

    def test_deleting_mortality_keeps_size(self, service, batch):
        record = service.record_mortality(batch.id, count=5)
        service.delete_mortality(record.id)

        batch.refresh_from_db()
        assert batch.current_size == 95

    @pytest.fixture
    def batch_update(self, monkeypatch):
        """Replace Batch queryset updates with ``behaviour``; other models are untouched."""
        from django.db.models.query import QuerySet
        from batches.models import Batch

        original = QuerySet.update

        def install(behaviour):
            def update(queryset, **kwargs):
                if queryset.model is Batch:
                    return behaviour()
                return original(queryset, **kwargs)
            monkeypatch.setattr(QuerySet, 'update', update)

        return install

    def test_record_discarded_when_size_not_updated(self, service, batch, batch_update):
        from batches.models import MortalityRecord

        batch_update(lambda: 0)

        with pytest.raises(NotFound):
            service.record_mortality(batch.id, count=3)

        assert MortalityRecord.objects.count() == 0

    def test_record_discarded_when_size_update_fails(self, service, batch, batch_update):
        from django.db import OperationalError
        from batches.models import MortalityRecord

        service.record_mortality(batch.id, count=2)

        def fail():
            raise OperationalError('database is locked')

        batch_update(fail)

        with pytest.raises(OperationalError):
            service.record_mortality(batch.id, count=3)

        assert MortalityRecord.objects.count() == 1
        batch.refresh_from_db()
        assert batch.current_size == 98


class TestHatching:

    def test_hatch_increments_size(self, service, batch):
        record = service.record_hatch(batch.id, inserted=10, hatched=5, not_hatched=4, spoiled=1)

        batch.refresh_from_db()
        assert batch.current_size == 105
        assert record.hatch_rate == Decimal('50.00')

    def test_nothing_hatched_still_logged(self, service, batch):
        from batches.models import IncubatorRecord

        service.record_hatch(batch.id, inserted=10, not_hatched=10)

        batch.refresh_from_db()
        assert batch.current_size == 100
        assert IncubatorRecord.objects.filter(batch=batch).count() == 1

    def test_negative_counts_rejected(self, service, batch):
        with pytest.raises(ValidationError):
            service.record_hatch(batch.id, hatched=-1)

    def test_scenario_100_minus_10_plus_5(self, service, batch):
        service.record_mortality(batch.id, count=10)
        service.record_hatch(batch.id, inserted=5, hatched=5)

        batch.refresh_from_db()
        assert batch.current_size == 95
        assert batch.cost_per_bird == Decimal('5.00')


class TestEggs:

    def test_egg_sale_records_income(self, service, batch, today):
        from finances.models import Transaction

        record = service.record_eggs(batch.id, collected=30, sold=20, spoiled=2, price_per_egg=Decimal('1.50'))

        entry = Transaction.objects.get(egg_record=record)
        assert entry.transaction_type == 'income'
        assert entry.category == 'Egg Sales'
        assert entry.amount == Decimal('30.00')
        assert entry.transaction_date == today
        assert record.total_revenue == Decimal('30.00')

    def test_sub_cent_price_rounds_only_the_amount(self, service, batch):
        from finances.models import Transaction

        record = service.record_eggs(batch.id, collected=30, sold=30, price_per_egg=Decimal('0.125'))

        record.refresh_from_db()
        assert record.price_per_egg == Decimal('0.125')
        entry = Transaction.objects.get(egg_record=record)
        assert entry.amount == Decimal('3.75')
        assert entry.description == 'Sale of 30 eggs at 0.125 each from batch Layers A'

    def test_no_price_no_income(self, service, batch):
        from finances.models import Transaction

        service.record_eggs(batch.id, collected=30, sold=20)
        assert not Transaction.objects.filter(category='Egg Sales').exists()

    def test_egg_statistics(self, farmer, service, batch, today):
        from batches.services import egg_statistics

        service.record_eggs(batch.id, collected=30, sold=20, spoiled=2)
        service.record_eggs(batch.id, collected=10, sold=5)

        stats = egg_statistics(farmer, months=3, today=today)
        assert len(stats['monthly']) == 3
        assert stats['monthly'][-1]['month'] == today.strftime('%Y-%m')
        assert stats['monthly'][-1]['collected'] == 40
        assert stats['totals'] == {'collected': 40, 'sold': 25, 'spoiled': 2}


# =============================================================================
# EDIT
# =============================================================================

class TestBatchEdit:

    def test_mutable_fields_update(self, service, batch):
        updated = service.update_batch(batch.id, name='Layers B', archived=True)
        assert updated.name == 'Layers B'
        assert updated.get_age_status() == 'archived'

    @pytest.mark.parametrize('field, value', [
        ('batch_code', 'NEW'),
        ('initial_size', 50),
        ('current_size', 50),
    ])
    def test_immutable_fields_rejected(self, service, batch, field, value):
        with pytest.raises(ValidationError):
            service.update_batch(batch.id, **{field: value})

    def test_gender_counts_cannot_exceed_size(self, service, batch):
        with pytest.raises(ConflictError) as exc_info:
            service.update_batch(batch.id, male_count=60, female_count=50)

        assert str(exc_info.value.detail) == (
            'Gender counts (60 males + 50 females = 110) cannot exceed batch size (100)'
        )

    def test_gender_check_uses_stored_counterpart(self, service, batch):
        service.update_batch(batch.id, male_count=60)

        with pytest.raises(ConflictError):
            service.update_batch(batch.id, female_count=50)

        service.update_batch(batch.id, female_count=40)
        batch.refresh_from_db()
        assert (batch.male_count, batch.female_count) == (60, 40)

    def test_gender_check_uses_current_size(self, service, batch):
        service.record_mortality(batch.id, count=20)

        with pytest.raises(ConflictError) as exc_info:
            service.update_batch(batch.id, male_count=50, female_count=40)
        assert 'cannot exceed batch size (80)' in str(exc_info.value.detail)


# =============================================================================
# DELETE
# =============================================================================

class TestBatchDelete:

    def test_delete_removes_dependents_and_keeps_ledger(self, farmer, service, batch, make_template):
        from batches.models import Batch, EggRecord, IncubatorRecord, MortalityRecord
        from feed.services import FeedService
        from finances.models import Transaction
        from vaccinations.models import Vaccination
        from vaccinations.services import VaccinationScheduler

        service.record_mortality(batch.id, count=2)
        service.record_hatch(batch.id, inserted=3, hatched=3)
        service.record_eggs(batch.id, collected=10, sold=10, price_per_egg=Decimal('2.00'))
        FeedService(farmer).record_purchase('Layer Mash', Decimal('120.00'), 2, Decimal('25'), batch_id=batch.id)
        VaccinationScheduler(farmer).schedule_from_templates(batch, [make_template().id])
        ledger_count = Transaction.objects.filter(owner=farmer).count()

        removed = service.delete_batch(batch.id)

        assert removed == {'eggs': 1, 'vaccinations': 1, 'mortality': 1, 'incubator': 1, 'feed': 1}
        assert not Batch.objects.filter(id=batch.id).exists()
        assert not EggRecord.objects.exists()
        assert not MortalityRecord.objects.exists()
        assert not IncubatorRecord.objects.exists()
        assert not Vaccination.objects.exists()
        assert Transaction.objects.filter(owner=farmer).count() == ledger_count
        assert not Transaction.objects.filter(batch__isnull=False).exists()

    def test_batch_with_children_is_protected(self, service, batch):
        from django.db.models import ProtectedError

        service.record_mortality(batch.id, count=1)
        with pytest.raises(ProtectedError):
            batch.delete()

    def test_delete_other_owner_not_found(self, other_farmer, batch):
        from batches.services import BatchService

        with pytest.raises(NotFound):
            BatchService(other_farmer).delete_batch(batch.id)


# =============================================================================
# API
# =============================================================================

class TestBatchAPI:

    def test_scenario_through_api(self, farmer_client, today):
        response = farmer_client.post('/api/batches/', {
            'name': 'Layers A',
            'breed': 'Isa Brown',
            'initial_size': 100,
            'start_date': str(today - timedelta(days=3)),
            'total_cost': '500.00',
        }, format='json')
        assert response.status_code == 201
        batch_id = response.data['id']
        assert response.data['cost_per_bird'] == '5.00'
        assert response.data['age_status'] == 'chick'

        response = farmer_client.post('/api/mortality/', {'batch': batch_id, 'count': 10}, format='json')
        assert response.status_code == 201

        response = farmer_client.post('/api/incubator/', {'batch': batch_id, 'inserted': 8, 'hatched': 5}, format='json')
        assert response.status_code == 201

        response = farmer_client.get(f'/api/batches/{batch_id}/')
        assert response.data['current_size'] == 95

        response = farmer_client.get('/api/transactions/', {'category': 'Stock Purchase'})
        assert response.data['count'] == 1
        assert response.data['results'][0]['amount'] == '500.00'

    def test_list_filters_archived(self, farmer_client, make_batch, service):
        make_batch(name='Active')
        old = make_batch(name='Old')
        service.update_batch(old.id, archived=True)

        response = farmer_client.get('/api/batches/?archived=false')
        assert response.status_code == 200
        assert [item['name'] for item in response.data['results']] == ['Active']

    def test_first_active_batch(self, farmer_client, make_batch, today):
        make_batch(name='Newer', start_date=today - timedelta(days=5))
        make_batch(name='Older', start_date=today - timedelta(days=50))

        response = farmer_client.get('/api/batches/active/first/')
        assert response.data['batch']['name'] == 'Older'

    def test_first_active_batch_none(self, farmer_client):
        response = farmer_client.get('/api/batches/active/first/')
        assert response.status_code == 200
        assert response.data['batch'] is None

    def test_patch_immutable_field_is_400(self, farmer_client, batch):
        response = farmer_client.patch(f'/api/batches/{batch.id}/', {'initial_size': 5}, format='json')
        assert response.status_code == 400
        assert response.data['code'] == 'validation_error'
        assert 'initial_size' in response.data['details']

    def test_patch_gender_overflow_is_409(self, farmer_client, batch):
        response = farmer_client.patch(
            f'/api/batches/{batch.id}/', {'male_count': 70, 'female_count': 40}, format='json'
        )
        assert response.status_code == 409
        assert response.data['code'] == 'conflict'
        assert response.data['error'].startswith('Gender counts (70 males + 40 females = 110)')

    def test_other_owner_batch_is_404(self, api_client, other_farmer, batch):
        api_client.force_authenticate(user=other_farmer)
        response = api_client.get(f'/api/batches/{batch.id}/')
        assert response.status_code == 404
        assert response.data == {'error': 'Batch not found', 'code': 'not_found'}

    def test_delete_via_api(self, farmer_client, batch):
        response = farmer_client.delete(f'/api/batches/{batch.id}/')
        assert response.status_code == 200
        assert response.data['success'] is True

    def test_egg_endpoints(self, farmer_client, batch):
        response = farmer_client.post('/api/eggs/', {
            'batch': str(batch.id), 'collected': 30, 'sold': 10, 'price_per_egg': '2.00'
        }, format='json')
        assert response.status_code == 201
        assert response.data['total_revenue'] == '20.00'

        response = farmer_client.get(f'/api/eggs/?batch={batch.id}')
        assert response.data['count'] == 1

        response = farmer_client.get('/api/eggs/stats/?months=2')
        assert response.data['totals']['collected'] == 30
        assert len(response.data['monthly']) == 2

    def test_egg_price_accepts_fractions_of_a_cent(self, farmer_client, batch):
        response = farmer_client.post('/api/eggs/', {
            'batch': str(batch.id), 'collected': 12, 'sold': 12, 'price_per_egg': '0.125'
        }, format='json')

        assert response.status_code == 201
        assert response.data['price_per_egg'] == '0.1250'
        assert response.data['total_revenue'] == '1.50'
