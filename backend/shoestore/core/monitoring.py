import time
import logging
from functools import wraps
from typing import Callable

logger = logging.getLogger(__name__)

# Calls slower than this are logged as warnings
SLOW_CALL_THRESHOLD_MS = 1000


def monitor_performance(func: Callable) -> Callable:
    """Decorator to log the latency of an async call"""
    @wraps(func)
    async def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            duration = (time.perf_counter() - start_time) * 1000
            logger.warning(f"{func.__qualname__} raised {type(e).__name__} after {duration:.2f}ms: {e}")
            raise

        duration = (time.perf_counter() - start_time) * 1000
        PerformanceMonitor.log_metric(f"{func.__module__}.{func.__qualname__}", duration, "ms")

        if duration > SLOW_CALL_THRESHOLD_MS:
            logger.warning(f"Slow call: {func.__qualname__} took {duration:.2f}ms")

        return result
    return wrapper


class PerformanceMonitor:
    @staticmethod
    def log_metric(metric_name: str, value: float, unit: str = "ms"):
        """Log performance metrics"""
        logger.info(f"METRIC: {metric_name}={value:.2f}{unit}")

    @staticmethod
    def log_api_call(endpoint: str, method: str, duration: float, status_code: int = 200):
        """Log API call details"""
        logger.info(f"API: {method} {endpoint} - {duration:.2f}ms - {status_code}")
