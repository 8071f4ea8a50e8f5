import os

# keep test runs off the log files
os.environ.setdefault("ENVIRONMENT", "testing")
