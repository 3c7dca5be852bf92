"""Constants, API endpoints, and default configuration."""

import os

# ── Credentials ───────────────────────────────────────────────────
REFRESH_TOKEN = os.environ.get("ALIDRIVE_REFRESH_TOKEN", "")

# ── Endpoints ─────────────────────────────────────────────────────
AUTH_BASE = "https://websv.aliyundrive.com"
API_BASE = "https://api.aliyundrive.com"

REFRESH_TOKEN_URL = f"{AUTH_BASE}/token/refresh"
FILE_LIST_URL = f"{API_BASE}/v2/file/list"
FILE_GET_URL = f"{API_BASE}/v2/file/get"
CREATE_WITH_PROOF_URL = f"{API_BASE}/v2/file/create_with_proof"
COMPLETE_UPLOAD_URL = f"{API_BASE}/v2/file/complete"
GET_DOWNLOAD_URL_URL = f"{API_BASE}/v2/file/get_download_url"
CREATE_FOLDER_URL = f"{API_BASE}/adrive/v2/file/createWithFolders"
TRASH_URL = f"{API_BASE}/v2/recyclebin/trash"
DELETE_URL = f"{API_BASE}/v3/file/delete"
BATCH_URL = f"{API_BASE}/v2/batch"

# sub-request paths used inside a batch call
BATCH_TRASH_PATH = "/recyclebin/trash"
BATCH_DELETE_PATH = "/file/delete"

# ── Request headers ───────────────────────────────────────────────
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.77 Safari/537.36"
)
COMMON_HEADERS = {
    "origin": "https://www.aliyundrive.com",
    "referer": "https://www.aliyundrive.com/",
    "pragma": "no-cache",
    "dnt": "1",
    "cache-control": "no-cache",
    "user-agent": USER_AGENT,
    "accept-language": "zh-CN,zh;q=0.9,en;q=0.8,en-US;q=0.7,zh-TW;q=0.6",
}
JSON_HEADERS = {
    "content-type": "application/json;charset=UTF-8",
    "accept": "application/json, text/plain, */*",
}

# ── Transport ─────────────────────────────────────────────────────
CONNECT_TIMEOUT = 3       # seconds
READ_TIMEOUT = 60         # seconds between bytes, not total
POOL_CONNECTIONS = 16
POOL_MAXSIZE = 100

# ── Upload / Download ─────────────────────────────────────────────
MAX_PART_SIZE = 1024 * 1024 * 1024        # 1 GiB per part
UPLOAD_READ_SIZE = 1024 * 1024            # 1 MB body chunks within a part
DOWNLOAD_CHUNK_SIZE = 4 * 1024 * 1024     # 4 MB read buffer
PRE_HASH_SIZE = 1024                      # bytes hashed for pre_hash
CHECK_NAME_MODE = "auto_rename"

# ── Listing ───────────────────────────────────────────────────────
ROOT_FILE_ID = "root"

ORDER_BY_NAME = "name"
ORDER_BY_CREATED_AT = "created_at"
ORDER_BY_UPDATED_AT = "updated_at"
ORDER_BY_SIZE = "size"
ORDER_BY_CHOICES = (ORDER_BY_NAME, ORDER_BY_CREATED_AT, ORDER_BY_UPDATED_AT, ORDER_BY_SIZE)

ORDER_DESC = "DESC"
ORDER_ASC = "ASC"
ORDER_DIRECTION_CHOICES = (ORDER_DESC, ORDER_ASC)

LIST_LIMIT_UNLIMITED = 0
LIST_LIMIT_ALL = 9999999999               # page size sent when listing everything

IMAGE_THUMBNAIL_PROCESS = "image/resize,w_400/format,jpeg"
IMAGE_URL_PROCESS = "image/resize,w_1920/format,jpeg"
VIDEO_THUMBNAIL_PROCESS = "video/snapshot,t_0,f_jpg,ar_auto,w_300"
URL_EXPIRE_SEC = 1600
