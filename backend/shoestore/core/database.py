"""
Centralized DynamoDB Connection Manager for the Shoe Store API

Connection management with:
- boto3 resource and client sharing one botocore Config (retries, timeouts, pooling)
- boto3's default credential chain left untouched
- Lambda-compatible: works with IAM roles via environment variable credentials
- Singleton so the connection is reused across warm Lambda invocations

Usage:
    from shoestore.core.database import db_manager

    table = db_manager.get_table(settings.SHOE_PRODUCTS_TABLE)
    table.get_item(Key={"shoeProductID": "..."})
"""

import logging
from typing import Optional, Any, Dict

import boto3
from botocore.config import Config as BotoConfig

from shoestore.core.config import settings

logger = logging.getLogger(__name__)


def _create_boto_config(
    max_pool_connections: int = 25,
    connect_timeout: int = 5,
    read_timeout: int = 30,
    max_attempts: int = 3,
    retry_mode: str = 'standard'
) -> BotoConfig:
    """
    Create a boto3 Config object.

    No credential or region options are set here; region is passed to the
    resource separately and credentials come from the default provider chain.

    Args:
        max_pool_connections: Maximum connections in the pool (default: 25)
        connect_timeout: Connection timeout in seconds (default: 5)
        read_timeout: Read timeout in seconds (default: 30)
        max_attempts: Maximum attempts including the initial one (default: 3)
        retry_mode: 'legacy', 'standard', or 'adaptive' (default: 'standard')
    """
    return BotoConfig(
        max_pool_connections=max_pool_connections,
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
        retries={
            'max_attempts': max_attempts,
            'mode': retry_mode
        }
    )


class DatabaseManager:
    """
    Process-wide DynamoDB connection manager.

    Thread Safety:
    - DynamoDB clients are thread-safe
    - DynamoDB resources are NOT thread-safe; under Lambda only one request
      is in flight per container, so the shared resource sees one worker
      thread at a time
    """

    _instance: Optional['DatabaseManager'] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._initialized = True
        self._dynamodb_resource: Optional[Any] = None
        self._dynamodb_client: Optional[Any] = None
        self._tables: Dict[str, Any] = {}

        self._aws_region = settings.AWS_REGION
        self._dynamodb_endpoint = settings.DYNAMODB_ENDPOINT

        self._boto_config = _create_boto_config(
            max_pool_connections=settings.BOTO_MAX_POOL_CONNECTIONS,
            connect_timeout=settings.BOTO_CONNECT_TIMEOUT,
            read_timeout=settings.BOTO_READ_TIMEOUT,
            max_attempts=settings.BOTO_MAX_RETRY_ATTEMPTS,
            retry_mode=settings.BOTO_RETRY_MODE
        )

        logger.info(
            f"DatabaseManager initialized: region={self._aws_region}, "
            f"pool_size={settings.BOTO_MAX_POOL_CONNECTIONS}, retry_mode={settings.BOTO_RETRY_MODE}"
        )

    def _connection_kwargs(self) -> Dict[str, Any]:
        kwargs = {
            'region_name': self._aws_region,
            'config': self._boto_config
        }
        # DynamoDB Local for development
        if self._dynamodb_endpoint:
            kwargs['endpoint_url'] = self._dynamodb_endpoint
        return kwargs

    def get_dynamodb(self):
        """Get the shared DynamoDB resource, creating it on first use"""
        if self._dynamodb_resource is None:
            self._dynamodb_resource = boto3.resource('dynamodb', **self._connection_kwargs())
            logger.info(
                f"DynamoDB resource created: region={self._aws_region}, "
                f"endpoint={'local' if self._dynamodb_endpoint else 'aws'}"
            )
        return self._dynamodb_resource

    def get_dynamodb_client(self):
        """Get the shared low-level DynamoDB client"""
        if self._dynamodb_client is None:
            self._dynamodb_client = boto3.client('dynamodb', **self._connection_kwargs())
        return self._dynamodb_client

    def get_table(self, table_name: str):
        """Get a cached Table handle"""
        if table_name not in self._tables:
            self._tables[table_name] = self.get_dynamodb().Table(table_name)
        return self._tables[table_name]


db_manager = DatabaseManager()
