# constants.py - Define constants used throughout the application

# --- Service Endpoints ---
SNAPSHOT_BASE_URL = "https://web.archive.org/web/"
PROXY_API_URL = "https://app.scrapingbee.com/api/v1/"

# --- File/Directory Names ---
DEFAULT_LOG_FILE = "collection.log"
DEFAULT_REPORTS_DIR = "data/audit/collection"
UNKNOWN_CRITIC_SLUG = "unknown"
ARCHIVE_EXTENSION = ".html"
REPORT_FILENAME_PREFIX = "collection-report-"

# --- Limits ---
FILENAME_MAX_LENGTH = 100 # Max length for a slug (excluding extension)
FILENAME_COLLISION_LIMIT = 100 # Max attempts for finding unique filename with counter
MAX_ATTEMPTS = 3 # Ledger attempts after which a record is no longer selected

# --- Text Thresholds ---
DEFAULT_MIN_WORD_COUNT = 300
MIN_CONTAINER_PARAGRAPH_CHARS = 30
MIN_FALLBACK_PARAGRAPH_CHARS = 50
FALLBACK_TRIGGER_CHARS = 1000
FULL_TEXT_MIN_CHARS = 1500
PARTIAL_TEXT_MIN_CHARS = 500
MIN_TITLE_WORD_LENGTH = 3 # Show-title words must be longer than this to count

# --- Run Defaults ---
DEFAULT_BATCH_SIZE = 0 # 0 = no limit
DEFAULT_MAX_REVIEWS = 0 # 0 = no limit
DEFAULT_CHECKPOINT_INTERVAL = 10
DEFAULT_MIN_DELAY_MS = 2000
DEFAULT_MAX_DELAY_MS = 5000
DEFAULT_SNAPSHOT_YEAR = 2024

# --- Request Defaults ---
DEFAULT_REQUEST_TIMEOUT_MS = 30000
DEFAULT_SETTLE_MS = 2000
DEFAULT_MAX_RETRIES = 0 # Retries inside one method attempt; 0 keeps every method to a single request
DEFAULT_RETRY_DELAY = 1.0

# --- Client Identity ---
USER_AGENTS = [
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.2 Safari/605.1.15',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0',
]
BROWSER_HEADERS = {
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8',
    'Accept-Language': 'en-US,en;q=0.9',
    'Upgrade-Insecure-Requests': '1',
    'Sec-Fetch-Dest': 'document',
    'Sec-Fetch-Mode': 'navigate',
    'Sec-Fetch-Site': 'none',
    'Sec-Fetch-User': '?1',
    'Cache-Control': 'max-age=0',
}
BROWSER_LAUNCH_ARGS = [
    '--disable-blink-features=AutomationControlled',
    '--disable-dev-shm-usage',
    '--no-sandbox',
]
VIEWPORT = {'width': 1920, 'height': 1080}

# --- Extraction ---
ARTICLE_SELECTORS = [
    'article .entry-content',
    'article .post-content',
    'article .article-body',
    '[data-testid="article-body"]',
    '.article-body',
    '.story-body',
    '.entry-content',
    '.post-content',
    '.review-content',
    '.article__body',
    '.article-content',
    '.rich-text',
    '[class*="ArticleBody"]',
    '[class*="article-body"]',
    'main article',
    'article',
    'main',
]
BOILERPLATE_MARKERS = ['cookie', 'subscribe', 'sign up']
BLOCK_PAGE_MARKERS = ['captcha', 'DataDome', 'Access Denied']
NON_VISIBLE_TAGS = ['script', 'style', 'noscript', 'template']

# --- Method Names ---
METHOD_DIRECT = "playwright"
METHOD_PROXY = "scrapingbee"
METHOD_SNAPSHOT = "archive.org"
SOURCE_METHOD_MAP = {
    'playwright': 'playwright',
    'scrapingbee': 'scrapingbee',
    'archive.org': 'archive',
}

# --- Record Status / Quality ---
STATUS_COMPLETE = "complete"
STATUS_PENDING = "pending"
QUALITY_FULL = "full"
QUALITY_PARTIAL = "partial"
QUALITY_EXCERPT = "excerpt"
QUALITY_MISSING = "missing"

# --- Environment Overrides ---
ENV_OVERRIDES = {
    'BATCH_SIZE': ('batch_size', int),
    'MAX_REVIEWS': ('max_reviews', int),
    'SHOW_FILTER': ('show_filter', str),
    'SCRAPINGBEE_API_KEY': ('proxy_api_key', str),
}
