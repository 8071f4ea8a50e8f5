import os
from dotenv import load_dotenv

load_dotenv()

MONGO_DETAILS = os.getenv("MONGO_DETAILS", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "resume_hub")

MATCH_DEFAULT_TOP_N = int(os.getenv("MATCH_DEFAULT_TOP_N", "10"))
MATCH_MAX_TOP_N = int(os.getenv("MATCH_MAX_TOP_N", "50"))
ASK_DEFAULT_K = int(os.getenv("ASK_DEFAULT_K", "5"))

# number of stored resumes used as the TF-IDF corpus on upload
CORPUS_LIMIT = int(os.getenv("CORPUS_LIMIT", "100"))
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
# total uncompressed size of the documents pulled out of one ZIP upload
MAX_ZIP_EXPANDED_BYTES = int(os.getenv("MAX_ZIP_EXPANDED_BYTES", str(50 * 1024 * 1024)))

SLOW_REQUEST_THRESHOLD = float(os.getenv("SLOW_REQUEST_THRESHOLD", "2.0"))

PRIVILEGED_ROLES = ("recruiter", "admin")


def clamp(value: int, default: int, maximum: int) -> int:
    """Clamp a caller-supplied count into [1, maximum]; None means default."""
    if value is None:
        value = default
    return max(1, min(int(value), maximum))
