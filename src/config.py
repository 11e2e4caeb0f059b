import os

from dotenv import load_dotenv

# load environment variables
load_dotenv()

TOKEN = os.getenv("TOKEN")

RPC_URL = os.getenv("RPC_URL", "https://rpc.soniclabs.com")

CONFIG_FILE = os.getenv("CONFIG_FILE", "config.json")

RUN_ONCE = os.getenv("RUN_ONCE", "false").lower() == "true"

# Unexpected errors are forwarded here when set
DEVELOPER_CHAT_ID = os.getenv("DEVELOPER_CHAT_ID")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
