"""
Finance Services

Maintains the transaction ledger:
- Derivation: ledger entries created as a byproduct of operational events
- Analytics: period summaries, category breakdown and monthly trends
- Manual ledger maintenance (create / update / delete)
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from dateutil.relativedelta import relativedelta
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import Count, DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce, TruncMonth

from core.dates import iter_month_starts, local_today, month_key
from core.exceptions import ConflictError, NotFound, ValidationError
from .models import ExpenseCategory, IncomeCategory, Transaction, TransactionType

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')
CENT = Decimal('0.01')


def _money(value) -> Decimal:
    if value is None:
        return ZERO
    return Decimal(value).quantize(CENT)


def _is_positive(value) -> bool:
    return value is not None and Decimal(value) > 0


def _price_text(value: Decimal) -> str:
    """Unit price with at least two decimals and no trailing zeros beyond them."""
    if value == value.quantize(CENT):
        return str(value.quantize(CENT))
    return str(value.normalize())


# =============================================================================
# DERIVATION
# =============================================================================

class TransactionDerivationService:
    """
    Appends ledger entries for the four derivation triggers.

        Trigger                              Type     Category        Date
        Batch created with total cost        expense  Stock Purchase  batch start date
        Egg log with sold and price per egg  income   Egg Sales       egg log date
        Feed log with a price                expense  Feed            feed log date
        Vaccination completed with a cost    expense  Vaccines        completion date

    A zero or missing amount never creates an entry. Each method returns the
    created Transaction or None. Callers run these inside the originating
    write's database transaction so a failure here fails the whole event.
    """

    @staticmethod
    def record_batch_purchase(batch) -> Optional[Transaction]:
        if not _is_positive(batch.total_cost):
            return None

        entry = Transaction.objects.create(
            owner=batch.owner,
            transaction_type=TransactionType.EXPENSE,
            category=ExpenseCategory.STOCK_PURCHASE,
            amount=_money(batch.total_cost),
            description=(
                f"Purchase of {batch.initial_size} {batch.get_category_display().lower()} birds "
                f"for batch {batch.name} ({batch.breed})"
            ),
            transaction_date=batch.start_date,
            batch=batch,
            auto_generated=True,
        )
        logger.info(f"Recorded stock purchase {entry.amount} for batch {batch.batch_code}")
        return entry

    @staticmethod
    def record_egg_sale(egg_record) -> Optional[Transaction]:
        if not egg_record.sold or not _is_positive(egg_record.price_per_egg):
            return None

        price = Decimal(egg_record.price_per_egg)
        entry = Transaction.objects.create(
            owner=egg_record.owner,
            transaction_type=TransactionType.INCOME,
            category=IncomeCategory.EGG_SALES,
            amount=_money(egg_record.sold * price),
            description=f"Sale of {egg_record.sold} eggs at {_price_text(price)} each from batch {egg_record.batch.name}",
            transaction_date=egg_record.date,
            batch=egg_record.batch,
            egg_record=egg_record,
            auto_generated=True,
        )
        logger.info(f"Recorded egg sale {entry.amount} for batch {egg_record.batch.batch_code}")
        return entry

    @staticmethod
    def record_feed_purchase(feed_record) -> Optional[Transaction]:
        if not _is_positive(feed_record.price):
            return None

        entry = Transaction.objects.create(
            owner=feed_record.owner,
            transaction_type=TransactionType.EXPENSE,
            category=ExpenseCategory.FEED,
            amount=_money(feed_record.price),
            description=(
                f"Feed purchase: {feed_record.bags} x {feed_record.kg_per_bag}kg {feed_record.feed_type}"
            ),
            transaction_date=feed_record.date,
            batch=feed_record.batch,
            feed_record=feed_record,
            auto_generated=True,
        )
        logger.info(f"Recorded feed purchase {entry.amount} ({feed_record.feed_type})")
        return entry

    @staticmethod
    def record_vaccination_cost(vaccination) -> Optional[Transaction]:
        if vaccination.completed_date is None or not _is_positive(vaccination.actual_cost):
            return None

        entry = Transaction.objects.create(
            owner=vaccination.owner,
            transaction_type=TransactionType.EXPENSE,
            category=ExpenseCategory.VACCINES,
            amount=_money(vaccination.actual_cost),
            description=f"Vaccination: {vaccination.vaccine_name} for batch {vaccination.batch.name}",
            transaction_date=vaccination.completed_date,
            batch=vaccination.batch,
            vaccination=vaccination,
            auto_generated=True,
        )
        logger.info(
            f"Recorded vaccination cost {entry.amount} for {vaccination.vaccine_name} "
            f"({vaccination.batch.batch_code})"
        )
        return entry


# =============================================================================
# ANALYTICS
# =============================================================================

PERIODS = ('30days', '1month', '3months', '6months', '1year')
DEFAULT_PERIOD = '6months'


def resolve_period(period: Optional[str], today: Optional[date] = None) -> Tuple[date, date]:
    """
    Translate a period name into an inclusive (start, end) date range.

    '30days' goes one month back, '1month' starts at the first of the current
    month. Unknown names fall back to six months.
    """
    today = today or local_today()

    if period == '30days':
        start = today - relativedelta(months=1)
    elif period == '1month':
        start = today.replace(day=1)
    elif period == '3months':
        start = today - relativedelta(months=3)
    elif period == '1year':
        start = today - relativedelta(years=1)
    else:
        start = today - relativedelta(months=6)

    return start, today


class FinancialAnalyticsService:
    """
    Aggregates one owner's ledger over a date range.

    Example Usage:
        service = FinancialAnalyticsService(request.user)
        start, end = resolve_period('3months')
        summary = service.summarize(start, end)
        trend = service.monthly_trend(start, end)
    """

    def __init__(self, owner):
        self.owner = owner

    def _transactions(self, start: date, end: date, batch_id=None):
        queryset = Transaction.objects.filter(
            owner=self.owner,
            transaction_date__gte=start,
            transaction_date__lte=end,
        )
        if batch_id:
            queryset = queryset.filter(batch_id=batch_id)
        return queryset

    def summarize(self, start: date, end: date, batch_id=None) -> Dict[str, Any]:
        """
        Income, expenses, net profit and margin for the range.

        Margin is net profit as a percentage of income, 0 when there is no
        income.
        """
        money_field = DecimalField(max_digits=14, decimal_places=2)
        totals = self._transactions(start, end, batch_id).aggregate(
            income=Coalesce(
                Sum('amount', filter=Q(transaction_type=TransactionType.INCOME)),
                Value(ZERO),
                output_field=money_field,
            ),
            expenses=Coalesce(
                Sum('amount', filter=Q(transaction_type=TransactionType.EXPENSE)),
                Value(ZERO),
                output_field=money_field,
            ),
            count=Count('id'),
        )

        income = _money(totals['income'])
        expenses = _money(totals['expenses'])
        net_profit = income - expenses
        if income > 0:
            margin = (net_profit / income * 100).quantize(CENT)
        else:
            margin = ZERO

        return {
            'total_income': income,
            'total_expenses': expenses,
            'net_profit': net_profit,
            'profit_margin': margin,
            'transaction_count': totals['count'],
        }

    def category_breakdown(self, start: date, end: date, batch_id=None) -> List[Dict[str, Any]]:
        """Totals per (type, category), largest first"""
        rows = (
            self._transactions(start, end, batch_id)
            .values('transaction_type', 'category')
            .annotate(total=Sum('amount'), count=Count('id'))
            .order_by('-total', 'category')
        )
        return [
            {
                'type': row['transaction_type'],
                'category': row['category'],
                'total': _money(row['total']),
                'count': row['count'],
            }
            for row in rows
        ]

    def monthly_trend(self, start: date, end: date, batch_id=None, zero_fill: bool = True) -> List[Dict[str, Any]]:
        """
        Income, expenses and profit per calendar month (``YYYY-MM``).

        With ``zero_fill`` every month in the range is present, otherwise
        months without transactions are left out.
        """
        rows = (
            self._transactions(start, end, batch_id)
            .annotate(month=TruncMonth('transaction_date'))
            .values('month', 'transaction_type')
            .annotate(total=Sum('amount'))
            .order_by('month')
        )

        buckets: Dict[str, Dict[str, Any]] = {}

        def bucket_for(key):
            return buckets.setdefault(key, {'month': key, 'income': ZERO, 'expenses': ZERO})

        for row in rows:
            bucket = bucket_for(month_key(row['month']))
            if row['transaction_type'] == TransactionType.INCOME:
                bucket['income'] += _money(row['total'])
            else:
                bucket['expenses'] += _money(row['total'])

        if zero_fill:
            for first_day in iter_month_starts(start, end):
                bucket_for(month_key(first_day))

        trend = sorted(buckets.values(), key=lambda bucket: bucket['month'])
        for bucket in trend:
            bucket['profit'] = bucket['income'] - bucket['expenses']
        return trend

    def recent_transactions(self, start: date, end: date, batch_id=None, limit: int = 10):
        return list(
            self._transactions(start, end, batch_id).order_by('-transaction_date', '-created_at')[:limit]
        )

    def analytics(self, period: Optional[str] = None, batch_id=None, today: Optional[date] = None,
                  zero_fill: bool = True) -> Dict[str, Any]:
        """Everything the finances dashboard shows for one period."""
        period = period if period in PERIODS else DEFAULT_PERIOD
        start, end = resolve_period(period, today)

        return {
            'period': period,
            'start_date': start,
            'end_date': end,
            'summary': self.summarize(start, end, batch_id),
            'category_breakdown': self.category_breakdown(start, end, batch_id),
            'monthly_trends': self.monthly_trend(start, end, batch_id, zero_fill=zero_fill),
            'recent_transactions': self.recent_transactions(start, end, batch_id),
        }


# =============================================================================
# MANUAL LEDGER
# =============================================================================

class TransactionService:
    """Ledger entries typed in by the farmer."""

    LINK_MODELS = {
        'batch': ('batches', 'Batch'),
        'feed_record': ('feed', 'FeedRecord'),
        'egg_record': ('batches', 'EggRecord'),
    }
    UPDATABLE_FIELDS = ('transaction_type', 'category', 'amount', 'description', 'transaction_date', 'batch_id')

    def __init__(self, owner):
        self.owner = owner

    def get_transaction(self, transaction_id) -> Transaction:
        try:
            return Transaction.objects.get(id=transaction_id, owner=self.owner)
        except (Transaction.DoesNotExist, DjangoValidationError):
            raise NotFound('Transaction not found')

    def list_transactions(self, transaction_type=None, category=None, batch_id=None,
                          start_date=None, end_date=None):
        queryset = Transaction.objects.filter(owner=self.owner).select_related('batch')
        if transaction_type:
            queryset = queryset.filter(transaction_type=transaction_type)
        if category:
            queryset = queryset.filter(category=category)
        if batch_id:
            queryset = queryset.filter(batch_id=batch_id)
        if start_date:
            queryset = queryset.filter(transaction_date__gte=start_date)
        if end_date:
            queryset = queryset.filter(transaction_date__lte=end_date)
        return queryset.order_by('-transaction_date', '-created_at')

    def _resolve_link(self, field: str, record_id):
        """Load a linked record, which must belong to the same owner."""
        if not record_id:
            return None
        from django.apps import apps

        model = apps.get_model(*self.LINK_MODELS[field])
        try:
            return model.objects.get(id=record_id, owner=self.owner)
        except (model.DoesNotExist, DjangoValidationError):
            raise NotFound(f"{model._meta.verbose_name.capitalize()} not found")

    def create_transaction(self, transaction_type: str, category: str, amount, description: str,
                           transaction_date: Optional[date] = None, batch_id=None,
                           feed_record_id=None, egg_record_id=None) -> Transaction:
        if transaction_type not in TransactionType.values:
            raise ValidationError({'transaction_type': ['Type must be income or expense']})

        entry = Transaction(
            owner=self.owner,
            transaction_type=transaction_type,
            category=category,
            amount=amount,
            description=description,
            transaction_date=transaction_date or local_today(),
            batch=self._resolve_link('batch', batch_id),
            feed_record=self._resolve_link('feed_record', feed_record_id),
            egg_record=self._resolve_link('egg_record', egg_record_id),
        )
        entry.full_clean()
        entry.save()
        logger.info(f"Manual {entry.transaction_type} {entry.amount} ({entry.category}) recorded")
        return entry

    def update_transaction(self, transaction_id, **changes) -> Transaction:
        """Edit a manual entry. Entries derived from farm events are read-only."""
        entry = self.get_transaction(transaction_id)
        if entry.auto_generated:
            raise ConflictError("Automatically recorded transactions cannot be edited")

        unknown = set(changes) - set(self.UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError({field: ['This field cannot be updated'] for field in sorted(unknown)})

        if 'batch_id' in changes:
            entry.batch = self._resolve_link('batch', changes.pop('batch_id'))
        for field, value in changes.items():
            setattr(entry, field, value)

        entry.full_clean()
        entry.save()
        return entry

    def delete_transaction(self, transaction_id) -> None:
        entry = self.get_transaction(transaction_id)
        entry.delete()
        logger.info(f"Deleted transaction {transaction_id}")
