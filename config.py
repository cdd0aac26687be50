import os
from dotenv import load_dotenv

# Load environment variables from a .env file
load_dotenv()

# Define base directory for the project
BASE_DIR = os.path.abspath(os.path.dirname(__file__))
DB_DIR = os.path.join(BASE_DIR, 'database')

# Ensure the database directory exists before the app uses it
if not os.path.exists(DB_DIR):
    os.makedirs(DB_DIR)

class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY', 'a_default_secret_key_for_development')
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY', SECRET_KEY)
    JWT_TOKEN_LOCATION = ["headers", "cookies"]
    JWT_COOKIE_CSRF_PROTECT = False

    # Password for the admin analytics area
    AUTH_PASSWORD = os.environ.get('AUTH_PASSWORD')

    # Database configuration using an absolute path
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', f'sqlite:///{os.path.join(DB_DIR, "brand_quiz.db")}')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # OpenRouter LLM Configuration
    OPENROUTER_API_KEY = os.environ.get("OPENROUTER_API_KEY")
    OPENROUTER_BASE_URL = os.environ.get("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
    OPENROUTER_MAX_RETRIES = int(os.environ.get("OPENROUTER_MAX_RETRIES", 2))
    GENERATION_MODEL = os.environ.get("GENERATION_MODEL", "openai/gpt-4o")
    # Seconds; unset leaves the HTTP client's default in place
    GENERATION_TIMEOUT = float(os.environ["GENERATION_TIMEOUT"]) if os.environ.get("GENERATION_TIMEOUT") else None

    # Per-phase sampling parameters
    STEP1_TEMPERATURE = float(os.environ.get("STEP1_TEMPERATURE", 0.7))
    STEP1_MAX_TOKENS = int(os.environ.get("STEP1_MAX_TOKENS", 3000))
    STEP2_TEMPERATURE = float(os.environ.get("STEP2_TEMPERATURE", 0.7))
    STEP2_MAX_TOKENS = int(os.environ.get("STEP2_MAX_TOKENS", 3500))
    FINAL_TEMPERATURE = float(os.environ.get("FINAL_TEMPERATURE", 0.6))
    FINAL_MAX_TOKENS = int(os.environ.get("FINAL_MAX_TOKENS", 4000))


class TestingConfig(Config):
    """Configuration used by the test suite."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SECRET_KEY = 'testing-secret-key-with-enough-length-for-hs256'
    JWT_SECRET_KEY = SECRET_KEY
    AUTH_PASSWORD = 'admin-password'
    OPENROUTER_API_KEY = None
    LOG_LEVEL = 'DEBUG'
