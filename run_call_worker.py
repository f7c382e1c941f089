"""
Outbound Call Worker Runner
Run this as a separate process: python run_call_worker.py
(equivalent to: arq callbook.worker.WorkerSettings)
"""

import logging
import sys

from arq import run_worker

from callbook.config import LOG_LEVEL
from callbook.worker import WorkerSettings

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    logger.info("🚀 Starting outbound call worker...")
    try:
        run_worker(WorkerSettings)
    except KeyboardInterrupt:
        logger.info("👋 Call worker stopped by user")
    except Exception as e:
        logger.error(f"❌ Call worker crashed: {e}")
        sys.exit(1)
