"""
Application constants for the ingestion core.

Contains source type names, locator templates, and the extraction policy
caps used by the resume extractor. Caps and thresholds are policy values,
tests assert them exactly.
"""

# =============================================================================
# Source Types
# =============================================================================

SOURCE_GITHUB = "github"
SOURCE_LEETCODE = "leetcode"
SOURCE_RESUME = "resume"
SOURCE_LINKEDIN = "linkedin"

SOURCE_TYPES = (SOURCE_GITHUB, SOURCE_LEETCODE, SOURCE_RESUME, SOURCE_LINKEDIN)

# =============================================================================
# Source Locators
# =============================================================================

GITHUB_WEB_BASE = "https://github.com/"
LEETCODE_PROFILE_URL = "https://leetcode.com/u/{username}"
RESUME_SOURCE_URL = "resume://{user_id}/{file_hash}"

# =============================================================================
# GitHub
# =============================================================================

PINNED_REPO_LIMIT = 6
REPO_TOPIC_LIMIT = 10
UNKNOWN_LANGUAGE = "Unknown"
GITHUB_USER_AGENT = "ProfileSignalIngestion/1.0"

# =============================================================================
# LeetCode
# =============================================================================

LEETCODE_REFERER = "https://leetcode.com"
RECENT_SUBMISSIONS_LIMIT = 20
CONTENT_TOP_LANGUAGES = 5
CONTENT_RECENT_SUBMISSIONS = 10

# =============================================================================
# LinkedIn
# =============================================================================

LINKEDIN_JOB_ID_LENGTH = 10
LINKEDIN_CONTENT_SELECTOR = ".show-more-less-html__markup--clamp-after-5"
LINKEDIN_USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36"

# =============================================================================
# Resume Extraction Policy
# =============================================================================

PDF_CONTENT_TYPE = "application/pdf"
PDF_SUFFIX = ".pdf"

DEFAULT_WORD_CAP = 3000
FILE_HASH_LENGTH = 16

MAX_SKILLS = 30
MAX_SKILL_LENGTH = 50  # exclusive

MAX_EXPERIENCES = 10
MAX_EXPERIENCE_CHARS = 500
MIN_EXPERIENCE_CHARS = 20  # exclusive

MAX_EDUCATION = 5
MAX_EDUCATION_CHARS = 300
MIN_EDUCATION_CHARS = 10  # exclusive

SUMMARY_MIN_CHARS = 50
SUMMARY_MAX_CHARS = 500
PARAGRAPH_MIN_CHARS = 100  # inclusive
PARAGRAPH_MAX_CHARS = 500  # exclusive

TRUNCATION_SUFFIX = "..."

SKILL_DELIMITERS = ",;|•·"
