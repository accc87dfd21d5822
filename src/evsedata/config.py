import os

from dotenv import load_dotenv

load_dotenv()

BASE_URL = os.getenv(
    "EVSE_BASE_URL", "https://data.geo.admin.ch/ch.bfe.ladestellen-elektromobilitaet/"
)
DATA_ENDPOINT = "data/oicp/ch.bfe.ladestellen-elektromobilitaet.json"
STATUS_ENDPOINT = "status/oicp/ch.bfe.ladestellen-elektromobilitaet.json"
HTTP_TIMEOUT = float(os.getenv("EVSE_HTTP_TIMEOUT", "60"))
DB_PATH = os.getenv("EVSE_DB_PATH", "evsedata.db")
LOG_LEVEL = os.getenv("EVSE_LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("EVSE_LOG_FILE", "evsedata.log")
FLUENTD_ENDPOINT = os.getenv("EVSE_FLUENTD_ENDPOINT")
USER_AGENT = "evsedata/0.1.0"
