"""
Centralized configuration
"""
import os
import logging
from pathlib import Path
from dotenv import load_dotenv

# Setup debug logger for configuration
_config_logger = logging.getLogger('config')

# Check for DEBUG_MODE early (before .env is loaded, check environment)
_debug_mode = os.getenv('DEBUG_MODE', 'false').lower() == 'true'
if _debug_mode:
    logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    _config_logger.setLevel(logging.DEBUG)
    _config_logger.debug("DEBUG_MODE enabled - verbose logging active")

# .env is optional: provider keys normally come from the user's settings
_env_file = Path.cwd() / '.env'
_dotenv_result = load_dotenv(_env_file)
if _debug_mode:
    _config_logger.debug(f"Loaded .env from {_env_file.absolute()}: {_dotenv_result}")

DEBUG_MODE = os.getenv('DEBUG_MODE', 'false').lower() == 'true'

# Network
REQUEST_TIMEOUT = int(os.getenv('REQUEST_TIMEOUT', '300'))

# Fallback key used when the selected provider has no key in the user's settings
API_KEY = os.getenv('API_KEY', '')

# Sampling parameters
TRANSLATION_TEMPERATURE = float(os.getenv('TRANSLATION_TEMPERATURE', '0.3'))
TRANSLATION_TOP_P = float(os.getenv('TRANSLATION_TOP_P', '0.95'))
ASSISTANT_TEMPERATURE = float(os.getenv('ASSISTANT_TEMPERATURE', '0.3'))
ASSISTANT_MAX_OUTPUT_TOKENS = int(os.getenv('ASSISTANT_MAX_OUTPUT_TOKENS', '2000'))

# Assistant conversation
CHAT_HISTORY_WINDOW = int(os.getenv('CHAT_HISTORY_WINDOW', '8'))
EDITOR_CONTEXT_PREVIEW_CHARS = int(os.getenv('EDITOR_CONTEXT_PREVIEW_CHARS', '1500'))
ASSISTANT_NAME = os.getenv('ASSISTANT_NAME', 'Danggo')
ASSISTANT_GREETING = (
    f"Hello, author! {ASSISTANT_NAME} here, ready to keep you company while you write. "
    "What shall we work on today?"
)
RESET_KEYWORDS = ('reset', 'bersihkan', 'clear')
READ_COMMAND_PREFIX = '/read '

# Saved translations store
DATABASE_PATH = os.getenv('DATABASE_PATH', 'data/novtl.db')

# LLM providers
PROVIDER_GEMINI = 'Gemini'
PROVIDER_OPENAI = 'OpenAI (GPT)'
PROVIDER_DEEPSEEK = 'DeepSeek'
PROVIDER_GROK = 'Grok (xAI)'

LLM_PROVIDERS = [PROVIDER_GEMINI, PROVIDER_OPENAI, PROVIDER_DEEPSEEK, PROVIDER_GROK]
DEFAULT_PROVIDER = os.getenv('LLM_PROVIDER', PROVIDER_GEMINI)

DEFAULT_MODELS = {
    PROVIDER_GEMINI: 'gemini-flash-lite-latest',
    PROVIDER_OPENAI: 'gpt-4o-mini',
    PROVIDER_DEEPSEEK: 'deepseek-chat',
    PROVIDER_GROK: 'grok-2-latest',
}

OPENAI_API_ENDPOINT = 'https://api.openai.com/v1/chat/completions'
PROVIDER_ENDPOINTS = {
    PROVIDER_OPENAI: OPENAI_API_ENDPOINT,
    PROVIDER_DEEPSEEK: 'https://api.deepseek.com/chat/completions',
    PROVIDER_GROK: 'https://api.x.ai/v1/chat/completions',
}

# Languages
AUTO_DETECT_LANGUAGE = 'Auto-detect'
LANGUAGES = [
    AUTO_DETECT_LANGUAGE,
    'Indonesian', 'English', 'Korean', 'Japanese', 'Chinese',
    'French', 'German', 'Spanish', 'Arabic', 'Russian',
]
DEFAULT_TARGET_LANGUAGE = os.getenv('DEFAULT_TARGET_LANGUAGE', 'Indonesian')
DEFAULT_TRANSLATION_INSTRUCTION = (
    "Translate with high fidelity to nuance. Capture idioms and cultural context, "
    "and make the text flow naturally like a best-selling novel."
)
FALLBACK_TRANSLATION_INSTRUCTION = "Translate in a flowing novel style."

# Default project
DEFAULT_PROJECT_ID = 'default-project-001'
DEFAULT_PROJECT_NAME = 'My First Novel'
