from server_logs.chooseLogType import get_logger
import os

env = os.getenv("ENV", "dev")
log_dir = os.getenv("LOG_DIR", "logs")

server_logger = get_logger(mode=env, log_type="server", base_path=log_dir)
deck_logger = get_logger(mode=env, log_type="decks", base_path=log_dir)
reference_logger = get_logger(mode=env, log_type="reference", base_path=log_dir)
