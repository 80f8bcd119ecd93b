import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or (
        'dev-secret-key-change-in-production'
    )
    # Hosted Postgres connection string, e.g.
    # postgresql://postgres:<password>@db.<project>.supabase.co:5432/postgres
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or (
        'sqlite:///marketplace.db'
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Auth provider (token -> identity).
    SUPABASE_URL = os.environ.get('SUPABASE_URL', '')
    SUPABASE_SERVICE_KEY = os.environ.get('SUPABASE_SERVICE_KEY', '')
    AUTH_PROVIDER_TIMEOUT = float(
        os.environ.get('AUTH_PROVIDER_TIMEOUT', '5')
    )

    # Pagination configuration
    DEFAULT_PAGE_SIZE = 10
    MAX_PAGE_SIZE = 100

    # Admin dashboard
    RECENT_ACTIVITY_LIMIT = 100
