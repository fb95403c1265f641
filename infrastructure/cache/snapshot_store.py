import logging
from collections.abc import Callable, Mapping
from datetime import date, datetime
from decimal import Decimal
from types import MappingProxyType

from domain.exceptions.exchange_rate import DataUnavailableError
from domain.models.exchange_rate import Dataset, Snapshot

logger = logging.getLogger(__name__)


def freeze_dataset(dataset: Mapping[str, Mapping[date, Decimal]]) -> Dataset:
	"""Copy ``dataset`` into read-only mappings so nobody can mutate a published snapshot."""
	return MappingProxyType(
		{currency: MappingProxyType(dict(table)) for currency, table in dataset.items()}
	)


class SnapshotStore:
	"""In-memory holder of the currently published exchange rate dataset.

	Readers always get the last published snapshot. ``publish`` swaps the
	reference in a single assignment, so a reader sees either the old or the
	new dataset and never a mix of both.
	"""

	def __init__(self, clock: Callable[[], datetime] = datetime.now):
		self._clock = clock
		self._snapshot: Snapshot | None = None
		self._stale = False

	@property
	def has_snapshot(self) -> bool:
		return self._snapshot is not None

	@property
	def is_stale(self) -> bool:
		return self._stale

	def get(self) -> Snapshot:
		snapshot = self._snapshot
		if snapshot is None:
			raise DataUnavailableError('Exchange rate data has not been loaded yet')
		return snapshot

	def publish(self, dataset: Mapping[str, Mapping[date, Decimal]], copy: bool = True) -> Snapshot:
		"""Swap in a new snapshot.

		With ``copy=False`` the caller hands over an already frozen dataset
		(see ``freeze_dataset``) and it is published as is.
		"""
		version = self._snapshot.version + 1 if self._snapshot else 1
		snapshot = Snapshot(
			dataset=freeze_dataset(dataset) if copy else dataset,
			published_at=self._clock(),
			version=version,
		)
		self._snapshot = snapshot
		self._stale = False
		logger.info(f'Published exchange rate snapshot v{version} ({len(snapshot.dataset)} currencies)')
		return snapshot

	def evict(self) -> None:
		self._stale = True
		logger.info('Exchange rate snapshot marked stale')
