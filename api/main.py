import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.dependencies import bootstrap, cleanup_dependencies, deps, init_dependencies
from api.error_handlers import register_exception_handlers
from api.routes import auth, exchange_rates, health
from api.security import AuthGateMiddleware, public_paths_for
from config.logging_config import setup_logging
from config.settings import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
	setup_logging(settings.LOG_LEVEL, settings.LOG_JSON)
	logger.info('Starting Exchange Rate API...')

	init_dependencies()

	try:
		await bootstrap()
	except Exception as e:
		logger.critical(f'Initial exchange rate load failed, refusing to start: {e}')
		await cleanup_dependencies()
		raise

	if settings.REFRESH_ENABLED and deps.scheduler is not None:
		deps.scheduler.start()

	logger.info('Application ready')

	yield

	logger.info('Shutting down...')
	await cleanup_dependencies()


app = FastAPI(
	title=settings.APP_NAME,
	description='Daily EUR exchange rates and conversion, backed by Bundesbank time series',
	version='1.0.0',
	lifespan=lifespan,
)

app.add_middleware(AuthGateMiddleware, public_paths=public_paths_for(settings.API_PREFIX))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
	logger.error(f'Unhandled exception: {exc}', exc_info=True)
	return JSONResponse(status_code=500, content={'detail': 'Internal server error'})


app.include_router(auth.router, prefix=settings.API_PREFIX)
app.include_router(exchange_rates.router, prefix=settings.API_PREFIX)
app.include_router(health.router)
register_exception_handlers(app)


if __name__ == '__main__':
	import uvicorn

	logger.info(f'Starting server on {settings.HOST}:{settings.PORT}')

	uvicorn.run(
		'api.main:app',
		host=settings.HOST,
		port=settings.PORT,
		reload=settings.DEBUG,
		log_level=settings.LOG_LEVEL.lower(),
	)
