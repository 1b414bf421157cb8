# Comments and replies
MAX_COMMENT_LENGTH = 5000

# AI assistant
SUMMARY_CONTENT_CHARS = 800
TITLE_CONTENT_CHARS = 500
SUMMARY_MAX_TOKENS = 80
DEFAULT_MAX_TOKENS = 200
