import logging
from datetime import timedelta

from application.services import AuthService, DatasetBuilder, ExchangeRateService
from application.workers.refresh_scheduler import RefreshScheduler
from config.settings import get_settings, load_supported_currencies
from infrastructure.cache.snapshot_store import SnapshotStore
from infrastructure.providers import BundesbankDataSource, ExchangeRateDataSource

logger = logging.getLogger(__name__)


class AppDependencies:
	"""Container for application-wide singleton dependencies."""

	source: ExchangeRateDataSource | None = None
	store: SnapshotStore | None = None
	exchange_rate_service: ExchangeRateService | None = None
	auth_service: AuthService | None = None
	scheduler: RefreshScheduler | None = None


deps = AppDependencies()


def init_dependencies() -> None:
	"""Initialize all singleton dependencies. Called at app startup."""
	logger.info('Initializing dependencies...')
	settings = get_settings()
	currencies = load_supported_currencies(settings)

	deps.source = BundesbankDataSource(
		url_template=settings.EXCHANGE_RATE_DATA_URL,
		timeout=settings.REQUEST_TIMEOUT,
		retry_attempts=settings.FETCH_RETRY_ATTEMPTS,
		retry_backoff=settings.FETCH_RETRY_BACKOFF,
	)
	deps.store = SnapshotStore()
	builder = DatasetBuilder(
		source=deps.source,
		currencies=currencies,
		max_concurrency=settings.MAX_CONCURRENT_FETCHES,
	)
	deps.exchange_rate_service = ExchangeRateService(
		store=deps.store, builder=builder, currencies=currencies
	)
	deps.auth_service = AuthService(
		username=settings.AUTH_USERNAME,
		password=settings.AUTH_PASSWORD,
		secret=settings.JWT_SECRET,
		algorithm=settings.JWT_ALGORITHM,
		expiry=timedelta(hours=settings.TOKEN_EXPIRY_HOURS),
	)
	deps.scheduler = RefreshScheduler(
		service=deps.exchange_rate_service, refresh_time=settings.REFRESH_TIME
	)
	logger.info(f'Dependencies initialized ({len(currencies)} supported currencies)')


async def bootstrap() -> None:
	"""Load the initial dataset. Called after init_dependencies() at startup; failure is fatal."""
	logger.info('Bootstrapping application...')

	if deps.exchange_rate_service is None:
		raise RuntimeError('Dependencies not initialized. Call init_dependencies() first.')

	await deps.exchange_rate_service.refresh_now()

	logger.info('Bootstrap complete')


async def cleanup_dependencies() -> None:
	logger.info('Cleaning up dependencies...')

	if deps.scheduler:
		await deps.scheduler.stop()
	if deps.source:
		await deps.source.close()

	logger.info('Cleanup complete')


def get_exchange_rate_service() -> ExchangeRateService:
	if deps.exchange_rate_service is None:
		raise RuntimeError('Exchange rate service not initialized')
	return deps.exchange_rate_service


def get_auth_service() -> AuthService:
	if deps.auth_service is None:
		raise RuntimeError('Auth service not initialized')
	return deps.auth_service


def get_scheduler() -> RefreshScheduler:
	if deps.scheduler is None:
		raise RuntimeError('Refresh scheduler not initialized')
	return deps.scheduler
