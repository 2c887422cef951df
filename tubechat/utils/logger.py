import sys
import logging

from tubechat.config import config

log_format = "[%(asctime)s] {%(pathname)s:%(lineno)d} %(levelname)s - %(message)s"
log_dir = config.LOGS_DIR
log_dir.mkdir(parents=True, exist_ok=True)
log_path = log_dir / "tubechat.log"

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format=log_format,
    handlers=[
        logging.FileHandler(log_path),
        logging.StreamHandler(sys.stdout)
    ]
)

# Quieten per-request chatter from the HTTP clients
for noisy in ("httpx", "urllib3"):
    logging.getLogger(noisy).setLevel(logging.WARNING)

logging = logging.getLogger('tubechat')
