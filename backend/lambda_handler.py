"""
AWS Lambda handler for the Shoe Store API
Adapts the FastAPI application to AWS Lambda + API Gateway
"""
import os
import logging

# Lambda deployments default to production unless told otherwise
os.environ['ENVIRONMENT'] = os.environ.get('ENVIRONMENT', 'production')

from mangum import Mangum
from shoestore.main import app

logger = logging.getLogger(__name__)

logger.info("Initializing Shoe Store Lambda handler...")
logger.info(f"Environment: {os.environ.get('ENVIRONMENT')}")
logger.info(f"AWS Region: {os.environ.get('AWS_REGION')}")

# lifespan="off": the app registers no startup or shutdown hooks
handler = Mangum(app, lifespan="off")
