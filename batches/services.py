"""
Batch Lifecycle Services

Business logic for batch registration, size changes and removal:
- Batch code generation
- Creation (with purchase expense and vaccination scheduling)
- Mortality (atomic, floored size decrement)
- Hatching (atomic size increment)
- Egg collection logs
- Restricted edits with gender-count validation
- Ordered cascade delete
"""

import logging
import secrets
import string
import time
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

from dateutil.relativedelta import relativedelta
from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import F, Sum
from django.db.models.functions import Greatest, TruncMonth
from django.utils import timezone

from core.dates import local_today, month_key, month_start
from core.exceptions import ConflictError, NotFound, ValidationError
from .models import Batch, EggRecord, IncubatorRecord, MortalityRecord

logger = logging.getLogger(__name__)

BASE36_DIGITS = string.digits + string.ascii_uppercase


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("base36 encoding needs a non-negative integer")
    if value == 0:
        return '0'
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_DIGITS[remainder])
    return ''.join(reversed(digits))


def generate_batch_code(now: Optional[float] = None) -> str:
    """
    "B" + base36 epoch milliseconds + 3 random base36 characters.

    Unique in practice, not guaranteed; see BatchService.allocate_batch_code.
    """
    millis = int((now if now is not None else time.time()) * 1000)
    suffix = ''.join(secrets.choice(BASE36_DIGITS) for _ in range(3))
    return f"B{to_base36(millis)}{suffix}"


def _require_count(field: str, value, minimum: int = 0) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError({field: ['A whole number is required']})
    if number != value and not isinstance(value, str):
        raise ValidationError({field: ['A whole number is required']})
    if number < minimum:
        message = 'Must be at least 1' if minimum == 1 else f'Cannot be less than {minimum}'
        raise ValidationError({field: [message]})
    return number


class BatchService:
    """
    Batch lifecycle operations for one owner.

    Every lookup is scoped to ``owner``; a batch owned by someone else is
    reported as not found.

    Example Usage:
        service = BatchService(request.user)
        batch = service.create_batch(name='Layers A', breed='Isa Brown',
                                     initial_size=100, start_date=date(2025, 1, 1),
                                     total_cost=Decimal('500'))
        service.record_mortality(batch.id, count=10)
    """

    MUTABLE_FIELDS = ('name', 'breed', 'category', 'archived', 'male_count', 'female_count')
    IMMUTABLE_FIELDS = ('batch_code', 'start_date', 'initial_size', 'current_size')

    def __init__(self, owner):
        self.owner = owner

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    def get_batch(self, batch_id, for_update: bool = False) -> Batch:
        queryset = Batch.objects.select_for_update() if for_update else Batch.objects
        try:
            return queryset.get(id=batch_id, owner=self.owner)
        except (Batch.DoesNotExist, DjangoValidationError):
            raise NotFound('Batch not found')

    def list_batches(self, archived: Optional[bool] = None, category: Optional[str] = None):
        queryset = Batch.objects.filter(owner=self.owner)
        if archived is not None:
            queryset = queryset.filter(archived=archived)
        if category:
            queryset = queryset.filter(category=category)
        return queryset

    def first_active_batch(self) -> Optional[Batch]:
        """Oldest batch that is not archived"""
        return (
            Batch.objects.filter(owner=self.owner, archived=False)
            .order_by('start_date', 'created_at')
            .first()
        )

    # =========================================================================
    # CREATION
    # =========================================================================

    def allocate_batch_code(self) -> str:
        """
        Generate a code, retrying while it collides with an existing batch.

        After the last attempt the final code is returned even if it is
        taken, unless BATCH_CODE_STRICT is on, in which case creation fails.
        """
        max_attempts = getattr(settings, 'BATCH_CODE_MAX_ATTEMPTS', 5)
        code = generate_batch_code()
        attempts = 1
        while Batch.objects.filter(batch_code=code).exists() and attempts < max_attempts:
            code = generate_batch_code()
            attempts += 1

        if attempts >= max_attempts and Batch.objects.filter(batch_code=code).exists():
            if getattr(settings, 'BATCH_CODE_STRICT', False):
                raise ConflictError(f"Could not generate a unique batch code after {max_attempts} attempts")
            logger.warning(f"Batch code {code} still collides after {max_attempts} attempts, using it anyway")

        return code

    def create_batch(self, name: str, breed: str, initial_size: int, start_date: date,
                     category: str = Batch.Category.CHICK, total_cost: Optional[Decimal] = None,
                     batch_code: Optional[str] = None,
                     vaccine_template_ids: Optional[Iterable] = None,
                     male_count: Optional[int] = None, female_count: Optional[int] = None) -> Batch:
        """
        Register a new batch.

        ``current_size`` starts at ``initial_size``. A positive ``total_cost``
        records a Stock Purchase expense dated at ``start_date`` and each
        resolvable template id schedules one vaccination. All of it commits
        together or not at all.
        """
        if batch_code:
            batch_code = batch_code.strip().upper()
            if Batch.objects.filter(batch_code=batch_code).exists():
                raise ConflictError(f"Batch code {batch_code} already exists")
        else:
            batch_code = self.allocate_batch_code()

        batch = Batch(
            owner=self.owner,
            batch_code=batch_code,
            name=name,
            breed=breed,
            category=category,
            initial_size=initial_size,
            start_date=start_date,
            total_cost=total_cost,
            male_count=male_count,
            female_count=female_count,
        )
        batch.full_clean(validate_unique=False)

        try:
            with transaction.atomic():
                # Purchase expense is derived by finances.signals on save
                batch.save()

                if vaccine_template_ids:
                    from vaccinations.services import VaccinationScheduler
                    VaccinationScheduler(self.owner).schedule_from_templates(batch, vaccine_template_ids)
        except IntegrityError:
            logger.error(f"Batch code {batch_code} collided on insert", exc_info=True)
            raise ConflictError(f"Batch code {batch_code} already exists")

        logger.info(f"Created batch {batch.batch_code} ({batch.initial_size} birds) for {self.owner}")
        return batch

    # =========================================================================
    # SIZE CHANGES
    # =========================================================================

    def record_mortality(self, batch_id, count: int, notes: str = '',
                         occurred_at=None) -> MortalityRecord:
        """
        Record deaths and shrink the batch by ``count`` (never below zero).

        The record and the size change commit together. The decrement is a
        single conditional UPDATE so concurrent events cannot lose writes.
        """
        count = _require_count('count', count, minimum=1)

        with transaction.atomic():
            batch = self.get_batch(batch_id)
            record = MortalityRecord.objects.create(
                owner=self.owner,
                batch=batch,
                count=count,
                age_group=batch.category,
                notes=notes or '',
                date=occurred_at or timezone.now(),
            )

            updated = Batch.objects.filter(pk=batch.pk, owner=self.owner).update(
                current_size=Greatest(F('current_size') - count, 0),
                updated_at=timezone.now(),
            )
            if updated != 1:
                raise NotFound('Batch not found')

            batch.refresh_from_db(fields=['current_size', 'updated_at'])

        logger.info(f"Mortality of {count} recorded for batch {batch.batch_code}, now {batch.current_size} birds")
        return record

    def record_hatch(self, batch_id, inserted: int = 0, spoiled: int = 0, hatched: int = 0,
                     not_hatched: int = 0, log_date=None, notes: str = '') -> IncubatorRecord:
        """
        Log an incubator run. Hatched chicks join the batch.

        The log is stored even when nothing hatched.
        """
        counts = {
            'inserted': _require_count('inserted', inserted),
            'spoiled': _require_count('spoiled', spoiled),
            'hatched': _require_count('hatched', hatched),
            'not_hatched': _require_count('not_hatched', not_hatched),
        }

        with transaction.atomic():
            batch = self.get_batch(batch_id)
            record = IncubatorRecord.objects.create(
                owner=self.owner,
                batch=batch,
                date=log_date or local_today(),
                notes=notes or '',
                **counts,
            )

            if counts['hatched'] > 0:
                Batch.objects.filter(pk=batch.pk).update(
                    current_size=F('current_size') + counts['hatched'],
                    updated_at=timezone.now(),
                )
                batch.refresh_from_db(fields=['current_size', 'updated_at'])
                logger.info(f"{counts['hatched']} chicks hatched into batch {batch.batch_code}")

        return record

    def record_eggs(self, batch_id, collected: int = 0, sold: int = 0, spoiled: int = 0,
                    price_per_egg: Optional[Decimal] = None, log_date=None, notes: str = '') -> EggRecord:
        """Log a day's egg collection; eggs sold at a price become Egg Sales income."""
        record = EggRecord(
            owner=self.owner,
            collected=_require_count('collected', collected),
            sold=_require_count('sold', sold),
            spoiled=_require_count('spoiled', spoiled),
            price_per_egg=price_per_egg,
            date=log_date or local_today(),
            notes=notes or '',
        )

        with transaction.atomic():
            record.batch = self.get_batch(batch_id)
            record.full_clean()
            # Egg Sales income is derived by finances.signals on save
            record.save()

        return record

    # =========================================================================
    # EDIT / DELETE
    # =========================================================================

    def update_batch(self, batch_id, **changes) -> Batch:
        """
        Apply a partial edit.

        Only name, breed, category, archived and the gender counts can change.
        Gender counts are checked against the current size using the values
        after the edit, falling back to stored counts for omitted fields.
        """
        locked = sorted(set(changes) & set(self.IMMUTABLE_FIELDS))
        if locked:
            raise ValidationError({field: ['This field cannot be changed after creation'] for field in locked})

        unknown = sorted(set(changes) - set(self.MUTABLE_FIELDS))
        if unknown:
            raise ValidationError({field: ['Unknown field'] for field in unknown})

        with transaction.atomic():
            batch = self.get_batch(batch_id, for_update=True)

            males = changes['male_count'] if 'male_count' in changes else batch.male_count
            females = changes['female_count'] if 'female_count' in changes else batch.female_count
            if males is not None or females is not None:
                total = (males or 0) + (females or 0)
                if total > batch.current_size:
                    raise ConflictError(
                        f"Gender counts ({males or 0} males + {females or 0} females = {total}) "
                        f"cannot exceed batch size ({batch.current_size})"
                    )

            for field, value in changes.items():
                setattr(batch, field, value)

            batch.full_clean(validate_unique=False)
            batch.save(update_fields=[*changes.keys(), 'updated_at'])

        return batch

    def delete_batch(self, batch_id) -> Dict[str, int]:
        """
        Delete a batch together with its egg, vaccination, mortality,
        incubator and feed records. The batch row goes last.

        Ledger entries linked to the batch are kept with the link cleared.
        Returns the number of child records removed per kind.
        """
        from feed.models import FeedRecord
        from vaccinations.models import Vaccination

        with transaction.atomic():
            batch = self.get_batch(batch_id, for_update=True)
            scope = {'batch': batch, 'owner': self.owner}

            removed = {
                'eggs': EggRecord.objects.filter(**scope).delete()[0],
                'vaccinations': Vaccination.objects.filter(**scope).delete()[0],
                'mortality': MortalityRecord.objects.filter(**scope).delete()[0],
                'incubator': IncubatorRecord.objects.filter(**scope).delete()[0],
                'feed': FeedRecord.objects.filter(**scope).delete()[0],
            }
            code = batch.batch_code
            batch.delete()

        logger.info(f"Deleted batch {code} with dependents {removed}")
        return removed

    # =========================================================================
    # EVENT LOGS
    # =========================================================================

    def _log_queryset(self, model, batch_id=None):
        queryset = model.objects.filter(owner=self.owner).select_related('batch')
        if batch_id:
            queryset = queryset.filter(batch_id=batch_id)
        return queryset

    def _get_log(self, model, record_id, label: str):
        try:
            return model.objects.select_related('batch').get(id=record_id, owner=self.owner)
        except (model.DoesNotExist, DjangoValidationError):
            raise NotFound(f'{label} not found')

    def list_mortality(self, batch_id=None):
        return self._log_queryset(MortalityRecord, batch_id).order_by('-date')

    def get_mortality(self, record_id) -> MortalityRecord:
        return self._get_log(MortalityRecord, record_id, 'Mortality record')

    def delete_mortality(self, record_id) -> None:
        # Batch size is left as is
        self.get_mortality(record_id).delete()

    def list_hatches(self, batch_id=None):
        return self._log_queryset(IncubatorRecord, batch_id).order_by('-date', '-created_at')

    def get_hatch(self, record_id) -> IncubatorRecord:
        return self._get_log(IncubatorRecord, record_id, 'Incubator record')

    def delete_hatch(self, record_id) -> None:
        self.get_hatch(record_id).delete()

    def list_eggs(self, batch_id=None):
        return self._log_queryset(EggRecord, batch_id).order_by('-date', '-created_at')

    def get_eggs(self, record_id) -> EggRecord:
        return self._get_log(EggRecord, record_id, 'Egg record')

    def delete_eggs(self, record_id) -> None:
        """Remove an egg log; its derived income stays in the ledger unlinked."""
        self.get_eggs(record_id).delete()


def egg_statistics(owner, batch_id=None, months: int = 6, today: Optional[date] = None) -> Dict[str, Any]:
    """
    Collected / sold / spoiled per month for the last ``months`` months,
    current month included. Months without logs are reported as zeros.
    """
    today = today or local_today()
    first_month = month_start(today) - relativedelta(months=months - 1)

    queryset = EggRecord.objects.filter(owner=owner, date__gte=first_month, date__lte=today)
    if batch_id:
        queryset = queryset.filter(batch_id=batch_id)

    rows = (
        queryset.annotate(month=TruncMonth('date'))
        .values('month')
        .annotate(collected=Sum('collected'), sold=Sum('sold'), spoiled=Sum('spoiled'))
    )
    by_month = {month_key(row['month']): row for row in rows}

    monthly = []
    for offset in range(months):
        first_day = first_month + relativedelta(months=offset)
        key = month_key(first_day)
        row = by_month.get(key, {})
        monthly.append({
            'month': key,
            'label': first_day.strftime('%b %Y'),
            'collected': row.get('collected') or 0,
            'sold': row.get('sold') or 0,
            'spoiled': row.get('spoiled') or 0,
        })

    return {
        'monthly': monthly,
        'totals': {
            'collected': sum(item['collected'] for item in monthly),
            'sold': sum(item['sold'] for item in monthly),
            'spoiled': sum(item['spoiled'] for item in monthly),
        },
    }
