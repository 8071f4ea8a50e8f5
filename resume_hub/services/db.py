import motor.motor_asyncio
from pymongo import ASCENDING, DESCENDING

from resume_hub.utils.config import MONGO_DETAILS, DB_NAME
from resume_hub.utils.logging_config import get_logger

logger = get_logger(__name__)

logger.info(f"Initializing MongoDB connection to database: {DB_NAME}")

# Initialize client
try:
    client = motor.motor_asyncio.AsyncIOMotorClient(MONGO_DETAILS)
    db = client[DB_NAME]
    logger.info("MongoDB client initialized successfully")
except Exception as e:
    logger.error(f"Failed to initialize MongoDB client: {e}")
    raise

# Collections
resumes_coll = db["resumes"]
jobs_coll = db["jobs"]


async def _ensure_index(coll, keys, **kwargs):
    name = ", ".join(k for k, _ in keys)
    try:
        await coll.create_index(keys, **kwargs)
        logger.debug(f"Created index on {coll.name}.({name})")
    except Exception as e:
        if "already exists" in str(e).lower():
            logger.debug(f"Index on {coll.name}.({name}) already exists")
        else:
            logger.warning(f"Could not create index on {coll.name}.({name}): {e}")


async def init_indexes():
    """Index initialization for collections."""
    logger.info("Starting database index initialization")

    await _ensure_index(resumes_coll, [("resume_id", ASCENDING)], unique=True)
    await _ensure_index(resumes_coll, [("user_id", ASCENDING)])
    await _ensure_index(resumes_coll, [("uploaded_at", DESCENDING)])

    await _ensure_index(jobs_coll, [("job_id", ASCENDING)], unique=True)
    await _ensure_index(jobs_coll, [("created_at", DESCENDING)])

    logger.info("Database index initialization completed")
